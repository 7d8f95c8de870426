"""Homework 7: a data-derived scoring scheme and segment score statistics.

Segments found with the default read-count scores (drop-off -20) define
target frequencies; the whole data set, minus positions that cannot be
mapped, defines background frequencies. Their log-odds ratio becomes a new
scoring scheme, used to rescan the real data and a simulated background
data set with drop-off -5. The number of segments reaching each score
threshold is reported for both.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import structlog

from coursework.core.exercise import ExerciseContext, ExerciseError
from coursework.hw.segments import (
    BUCKETS,
    DEFAULT_SCORES,
    SegmentScan,
    bucket_label,
    read_counts,
    scan_segments,
)

logger = structlog.get_logger(__name__)

D_SCORE_1 = -20.0
D_SCORE_2 = -5.0
# Zero-count positions of the course data set that lie in unmappable sequence
BACKGROUND_N = 8_422_401
ZERO_FREQ_SCORE = -99.0
THRESHOLDS = range(5, 31)
SIMULATION_CHUNK = 100_000


@dataclass
class ReadModel:
    background: dict[int, float]
    target: dict[int, float]
    scheme: dict[int, float]
    total_background: int


def build_model(scan: SegmentScan, background_n: int = BACKGROUND_N) -> ReadModel:
    """Background/target frequencies and the log-odds scheme from a first scan."""
    background_counts = {b: scan.totals[b] for b in BUCKETS}
    background_counts[0] -= background_n
    total = sum(background_counts.values())
    if total <= 0 or background_counts[0] < 0:
        raise ExerciseError(
            f"Background correction of {background_n} positions exceeds the "
            f"{scan.totals[0]} zero-count positions in the data"
        )
    background = {b: background_counts[b] / total for b in BUCKETS}

    elevated_total = sum(scan.elevated[b] for b in BUCKETS)
    if elevated_total == 0:
        raise ExerciseError("No elevated segments found; cannot estimate target frequencies")
    target = {b: scan.elevated[b] / elevated_total for b in BUCKETS}

    scheme = {}
    for b in BUCKETS:
        if target[b] == 0:
            scheme[b] = ZERO_FREQ_SCORE
        elif background[b] == 0:
            raise ExerciseError(f"Read count {bucket_label(b)} has no background frequency")
        else:
            scheme[b] = math.log2(target[b]) - math.log2(background[b])

    return ReadModel(background=background, target=target, scheme=scheme, total_background=total)


def simulated_counts(
    model: ReadModel, rng: random.Random, chunk_size: int = SIMULATION_CHUNK
) -> Iterator[tuple[int, int]]:
    """Yield (position, count) pairs drawn from the background frequencies.

    Draws are made `chunk_size` at a time; the sequence is the same as a
    single `rng.choices` call over all positions.
    """
    weights = [model.background[b] for b in BUCKETS]
    position = 1
    remaining = model.total_background
    while remaining > 0:
        k = min(chunk_size, remaining)
        for count in rng.choices(BUCKETS, weights=weights, k=k):
            yield position, count
            position += 1
        remaining -= k


def simulate(model: ReadModel, rng: random.Random, drop_off: float = D_SCORE_2) -> SegmentScan:
    """Scan simulated background data of the same size as the real data."""
    logger.debug("simulated_background", positions=model.total_background)
    return scan_segments(simulated_counts(model, rng), model.scheme, drop_off)


def frequency_lines(title: str, values: dict[int, float]) -> list[str]:
    lines = ["", title]
    lines.extend(f"{bucket_label(b)}={values[b]:.4f}" for b in BUCKETS)
    return lines


def histogram_lines(scan: SegmentScan) -> list[str]:
    return [f"{i} {scan.count_at_least(i)}" for i in THRESHOLDS]


def ratio_lines(scan: SegmentScan) -> list[str]:
    lines = []
    previous = None
    for i in THRESHOLDS:
        count = scan.count_at_least(i)
        if previous is not None:
            ratio = previous / count if count > 0 else -1.0
            lines.append(f"N_seg({i - 1})/N_seg({i}) {ratio:.2f}")
        previous = count
    return lines


def run(inputs: list[Path], context: ExerciseContext) -> list[str]:
    path = inputs[0]
    background_n = context.setting("background_n", BACKGROUND_N, int)

    first_scan = scan_segments(read_counts(path), DEFAULT_SCORES, D_SCORE_1)
    model = build_model(first_scan, background_n)

    lines = frequency_lines("Background frequencies:", model.background)
    lines.extend(frequency_lines("Target frequencies:", model.target))
    lines.extend(frequency_lines("Scoring scheme:", model.scheme))

    real = scan_segments(read_counts(path), model.scheme, D_SCORE_2)
    lines.extend(["", "Real data:"])
    lines.extend(histogram_lines(real))

    simulated = simulate(model, context.rng, D_SCORE_2)
    lines.extend(["", "Simulated data:"])
    lines.extend(histogram_lines(simulated))
    lines.extend(["", "Ratios of simulated data:"])
    lines.extend(ratio_lines(simulated))
    return lines[1:]
