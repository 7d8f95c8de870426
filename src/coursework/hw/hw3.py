"""Homework 3: position weight matrix for CDS start sites.

The 21-base window around every annotated CDS start (10 bases upstream,
the first base of the start codon at position 0, 10 bases downstream,
read on the CDS strand and following joins) is collected from a GenBank
file. Counts, frequencies and log-odds weights against the two-strand
background are reported, then every window of the genome is scored on
both strands.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from Bio import SeqIO
from Bio.SeqFeature import SeqFeature

from coursework.core.exercise import ExerciseContext, ExerciseError, InputFormatError
from coursework.utils.read import COMPLEMENT, reverse_complement

logger = structlog.get_logger(__name__)

BASE_OFFSET = 10
WINDOW_SIZE = BASE_OFFSET * 2 + 1
POSITIONS = range(-BASE_OFFSET, BASE_OFFSET + 1)
BASES = "ACGT"
BASE_KEYS = "ACGTN"
ZERO_FREQ_WEIGHT = -99.0
SCORE_BIN_LIMIT = 51
OUTLIER_SCORE = 10.0


def to_base(c: str) -> str:
    c = c.upper()
    return c if c in BASES else "N"


@dataclass
class BackgroundDistribution:
    """Base counts over both strands (and the forward strand alone)."""

    base_counts: Counter = field(default_factory=Counter)
    forward_counts: Counter = field(default_factory=Counter)

    @property
    def known_count(self) -> int:
        return sum(self.base_counts[b] for b in BASES)

    def add_sequence(self, sequence: str) -> None:
        forward = Counter(to_base(c) for c in sequence)
        self.forward_counts.update(forward)
        self.base_counts.update(forward)
        # The reverse strand swaps A<->T and C<->G counts
        self.base_counts.update({COMPLEMENT[b]: n for b, n in forward.items()})

    def base_freq(self, base: str) -> float:
        known = self.known_count
        return self.base_counts[base] / known if known else 0.0


@dataclass
class StartWindow:
    """Genomic coordinates (0-based) of one start-site window, in reading order."""

    record: str
    coords: list[int]
    strand: int

    @property
    def bounds(self) -> tuple[int, int]:
        return min(self.coords), max(self.coords)

    def extract(self, sequence: str) -> str:
        bases = [sequence[c] for c in self.coords]
        if self.strand == -1:
            return "".join(COMPLEMENT.get(to_base(b), "N") for b in bases)
        return "".join(to_base(b) for b in bases)


@dataclass
class PositionalDistribution:
    """Per-position counts, frequencies and weights of start windows."""

    counts: dict[int, Counter]
    background: BackgroundDistribution
    windows: list[StartWindow] = field(default_factory=list)
    freqs: dict[int, dict[str, float]] = field(default_factory=dict)
    weights: dict[int, dict[str, float]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for p, counter in self.counts.items():
            known = sum(counter[b] for b in BASES)
            self.freqs[p] = {b: (counter[b] / known if known else 0.0) for b in BASES}
            self.weights[p] = {
                b: self._weight(self.freqs[p][b], self.background.base_freq(b)) for b in BASES
            }
            self.weights[p]["N"] = 0.0

    @staticmethod
    def _weight(site_freq: float, background_freq: float) -> float:
        if site_freq == 0.0 or background_freq == 0.0:
            return ZERO_FREQ_WEIGHT
        return math.log2(site_freq) - math.log2(background_freq)

    @property
    def max_score(self) -> float:
        return sum(max(self.weights[p][b] for b in BASES) for p in sorted(self.weights))

    def score(self, window: str) -> float:
        return sum(self.weights[p][base] for p, base in zip(POSITIONS, window))

    def covers(self, record: str, coord: int) -> bool:
        """True if `coord` falls inside an annotated start window."""
        for w in self.windows:
            if w.record != record:
                continue
            lo, hi = w.bounds
            if lo <= coord <= hi:
                return True
        return False


@dataclass
class AnnotatedSequence:
    """One GenBank record: its upper-cased sequence and CDS features."""

    name: str
    sequence: str
    cds: list[SeqFeature] = field(default_factory=list)


def start_window(record: AnnotatedSequence, feature: SeqFeature) -> StartWindow | None:
    """Window around the start codon of a CDS.

    Location parts come in transcription order, so the first part holds
    the start codon. Returns None when the window runs off the record or
    the location points into another record.
    """
    if feature.location is None:
        return None
    parts = feature.location.parts
    if any(part.ref for part in parts):
        return None

    first = parts[0]
    strand = -1 if first.strand == -1 else 1
    if strand == 1:
        coords = list(range(int(first.start) - BASE_OFFSET, int(first.start)))
    else:
        coords = list(range(int(first.end) + BASE_OFFSET - 1, int(first.end) - 1, -1))

    needed = BASE_OFFSET + 1
    for part in parts:
        start, end = int(part.start), int(part.end)
        if part.strand == -1:
            part_coords = range(end - 1, start - 1, -1)
        else:
            part_coords = range(start, end)
        for c in part_coords:
            if needed == 0:
                break
            coords.append(c)
            needed -= 1

    if len(coords) != WINDOW_SIZE or min(coords) < 0 or max(coords) >= len(record.sequence):
        return None
    return StartWindow(record=record.name, coords=coords, strand=strand)


def count_positions(records: list[AnnotatedSequence]) -> PositionalDistribution:
    background = BackgroundDistribution()
    counts: dict[int, Counter] = {p: Counter() for p in POSITIONS}
    windows: list[StartWindow] = []
    skipped = 0

    for record in records:
        background.add_sequence(record.sequence)
        for feature in record.cds:
            window = start_window(record, feature)
            if window is None:
                skipped += 1
                continue
            for p, base in zip(POSITIONS, window.extract(record.sequence)):
                counts[p][base] += 1
            windows.append(window)

    if skipped:
        logger.warning("start_windows_skipped", count=skipped)
    if not windows:
        raise ExerciseError("No CDS start windows found in the GenBank file")

    return PositionalDistribution(counts=counts, background=background, windows=windows)


def bin_score(score: float) -> int:
    return min(max(-SCORE_BIN_LIMIT, math.floor(score)), SCORE_BIN_LIMIT)


@dataclass
class ScoreSummary:
    cds_histogram: Counter = field(default_factory=Counter)
    all_histogram: Counter = field(default_factory=Counter)
    # (1-based position, strand flag 0=forward 1=reverse, score)
    outliers: list[tuple[int, int, float]] = field(default_factory=list)


def score_positions(records: list[AnnotatedSequence], dist: PositionalDistribution) -> ScoreSummary:
    summary = ScoreSummary()

    for window in dist.windows:
        record = next(r for r in records if r.name == window.record)
        summary.cds_histogram[bin_score(dist.score(window.extract(record.sequence)))] += 1

    for record in records:
        length = len(record.sequence)
        strands = (
            (0, "".join(to_base(c) for c in record.sequence)),
            (1, reverse_complement(record.sequence)),
        )
        for strand_flag, sequence in strands:
            for i in range(length - WINDOW_SIZE + 1):
                score = dist.score(sequence[i:i + WINDOW_SIZE])
                summary.all_histogram[bin_score(score)] += 1
                if score < OUTLIER_SCORE:
                    continue
                centre = i + BASE_OFFSET
                if strand_flag == 1:
                    centre = length - 1 - centre
                if not dist.covers(record.name, centre):
                    summary.outliers.append((centre + 1, strand_flag, score))

    summary.outliers.sort(key=lambda o: (o[0], o[1]))
    return summary


def load_records(path: Path) -> list[AnnotatedSequence]:
    """Read every record of a GenBank file with its CDS features."""
    try:
        records = [
            AnnotatedSequence(
                name=record.name,
                sequence=str(record.seq).upper(),
                cds=[f for f in record.features if f.type == "CDS"],
            )
            for record in SeqIO.parse(path, "genbank")
        ]
    except ValueError as e:
        raise InputFormatError(path, str(e)) from e
    if not records:
        raise InputFormatError(path, "no GenBank records found")
    return records


def run(inputs: list[Path], context: ExerciseContext) -> list[str]:
    records = load_records(inputs[0])

    dist = count_positions(records)
    background = dist.background
    lines = ["Nucleotide Histogram:"]
    lines.extend(f"{b}={background.forward_counts[b]}" for b in BASE_KEYS)

    lines.extend(["", "Background Frequency:"])
    lines.extend(f"{b}={background.base_freq(b):.4f}" for b in BASES)

    lines.extend(["", "Count Matrix:"])
    for p in POSITIONS:
        lines.append(f"{p} " + " ".join(str(dist.counts[p][b]) for b in BASES))

    lines.extend(["", "Frequency Matrix:"])
    for p in POSITIONS:
        lines.append(f"{p} " + " ".join(f"{dist.freqs[p][b]:.4f}" for b in BASES))

    lines.extend(["", "Weight Matrix:"])
    for p in POSITIONS:
        lines.append(f"{p} " + " ".join(f"{dist.weights[p][b]:.4f}" for b in BASES))

    lines.extend(["", f"Maximum Score: {dist.max_score:.10f}"])

    summary = score_positions(records, dist)
    lines.extend(["", "Score Histogram CDS:"])
    lines.extend(f"{s} {n}" for s, n in sorted(summary.cds_histogram.items()))

    lines.extend(["", "Score Histogram All:"])
    lines.extend(f"{s} {n}" for s, n in sorted(summary.all_histogram.items()))

    lines.extend(["", "Position List:"])
    lines.extend(f"{pos} {strand} {score:.4f}" for pos, strand, score in summary.outliers)
    return lines
