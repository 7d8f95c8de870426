"""Homework 6: elevated copy-number segments from read-start counts."""

from __future__ import annotations

from pathlib import Path

from coursework.core.exercise import ExerciseContext
from coursework.hw.segments import (
    BUCKETS,
    DEFAULT_SCORES,
    SegmentScan,
    bucket_label,
    parse_scores,
    read_counts,
    scan_segments,
)

D_SCORE = -20.0
S_SCORE = -D_SCORE
TOP_SEGMENTS = 3


def histogram_lines(title: str, histogram) -> list[str]:
    lines = ["", title]
    lines.extend(f"{bucket_label(b)}={histogram[b]}" for b in BUCKETS)
    return lines


def report_lines(scan: SegmentScan, threshold: float = S_SCORE) -> list[str]:
    elevated = len(scan.segments)
    lines = [
        "Segment Histogram:",
        f"Non-Elevated CN Segments={elevated + 1}",
        f"Elevated CN Segments={elevated}",
        "",
        "Segment List:",
    ]
    lines.extend(
        f"{s.start} {s.end} {s.score:.2f}" for s in scan.segments if s.score >= threshold
    )

    lines.extend(["", "Annotations:"])
    top = sorted(scan.segments, key=lambda s: s.score, reverse=True)[:TOP_SEGMENTS]
    for segment in top:
        lines.extend(["", f"Start: {segment.start}", f"End: {segment.end}"])

    lines.extend(histogram_lines(
        "Read start histogram for non-elevated copy-number segments:", scan.non_elevated
    ))
    lines.extend(histogram_lines(
        "Read start histogram for elevated copy-number segments:", scan.elevated
    ))
    return lines


def run(inputs: list[Path], context: ExerciseContext) -> list[str]:
    scores = context.setting("scores", DEFAULT_SCORES, parse_scores)
    drop_off = context.setting("drop_off", D_SCORE, float)
    scan = scan_segments(read_counts(inputs[0]), scores, drop_off)
    return report_lines(scan, threshold=-drop_off)
