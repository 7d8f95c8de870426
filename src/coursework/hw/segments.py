"""Maximal-segment scanning over per-position read-start counts.

Shared by homeworks 6 and 7. Input lines look like `chrom pos count`.
Counts of 3 or more share one bucket.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator

from coursework.core.exercise import InputFormatError, SettingError
from coursework.utils.read import iter_lines

MAX_BUCKET = 3
BUCKETS = tuple(range(MAX_BUCKET + 1))

DEFAULT_SCORES = {0: -0.1077, 1: 0.4772, 2: 1.0622, 3: 1.6748}


def bucket(count: int) -> int:
    return min(count, MAX_BUCKET)


def bucket_label(count: int) -> str:
    return f">={count}" if count == MAX_BUCKET else str(count)


def parse_scores(raw: Any) -> dict[int, float]:
    """Per-bucket scores from a settings mapping such as {0: -0.1, 1: 0.5, ...}.

    Raises:
        SettingError: If the mapping is malformed or leaves a bucket unscored
    """
    if not isinstance(raw, dict):
        raise SettingError("scores", raw, "expected a mapping of read count to score")
    try:
        scores = {int(k): float(v) for k, v in raw.items()}
    except (TypeError, ValueError):
        raise SettingError("scores", raw, "read counts and scores must be numbers") from None
    missing = [bucket_label(b) for b in BUCKETS if b not in scores]
    if missing:
        raise SettingError("scores", raw, "no score for read count " + ", ".join(missing))
    return scores


@dataclass
class Segment:
    start: int
    end: int
    score: float


@dataclass
class SegmentScan:
    """Segments found in one pass plus read-start histograms."""

    segments: list[Segment] = field(default_factory=list)
    elevated: Counter = field(default_factory=Counter)
    totals: Counter = field(default_factory=Counter)

    @property
    def non_elevated(self) -> Counter:
        return Counter({b: self.totals[b] - self.elevated[b] for b in BUCKETS})

    def count_at_least(self, threshold: float) -> int:
        return sum(1 for s in self.segments if s.score >= threshold)


def read_counts(path: Path) -> Iterator[tuple[int, int]]:
    """Yield (position, read-start count) pairs."""
    for line_number, line in enumerate(iter_lines(path), start=1):
        parts = line.split()
        if not parts:
            continue
        if len(parts) < 3:
            raise InputFormatError(path, "expected 'chrom pos count'", line_number)
        try:
            yield int(parts[1]), int(parts[2])
        except ValueError:
            raise InputFormatError(path, f"invalid position or count in '{line}'", line_number)


def scan_segments(
    counts: Iterable[tuple[int, int]],
    scores: dict[int, float],
    drop_off: float,
    start_position: int = 1,
) -> SegmentScan:
    """Find maximal-scoring segments.

    A candidate segment closes when the cumulative score falls to 0 or
    below, drops `drop_off` below its maximum, or the input ends. It is
    kept when its maximum reaches `-drop_off`. Read counts up to the
    maximum of a kept segment count as elevated.

    `counts` is consumed lazily with one item of lookahead, so whole
    chromosomes can be streamed from disk.
    """
    result = SegmentScan()
    cumulative = 0.0
    best = 0.0
    start = start_position
    end = start_position
    current: Counter = Counter()
    at_best: Counter = Counter()

    pending = iter(counts)
    following = next(pending, None)
    while following is not None:
        position, count = following
        following = next(pending, None)
        b = bucket(count)
        current[b] += 1
        result.totals[b] += 1

        cumulative += scores[b]
        if cumulative >= best:
            best = cumulative
            end = position
            at_best = current.copy()

        if cumulative <= 0 or cumulative <= best + drop_off or following is None:
            if best >= -drop_off:
                result.segments.append(Segment(start, end, best))
                result.elevated.update(at_best)
            current = Counter()
            at_best = Counter()
            best = 0.0
            cumulative = 0.0
            start = position + 1
            end = position + 1

    return result
