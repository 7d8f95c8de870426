"""Homework 2: nucleotide and dinucleotide statistics, Markov simulation.

The input genome is summarised (base counts, frequencies, dinucleotide
count/frequency matrices and conditional frequencies). Three sequences of
the same length are then simulated and summarised the same way:

- equal base frequencies
- a Markov-0 model trained on the input
- a Markov-1 model trained on the input
"""

from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from coursework.core.exercise import ExerciseContext, ExerciseError
from coursework.utils.read import ALL_KEY, HEADER_PREFIX, NO_HEADER, iter_lines

logger = structlog.get_logger(__name__)

BASES = "ACGT"
BASE_KEYS = "ACGTN"

SIMULATIONS = (
    ("simulated_equal_freq.fa", "equal", False),
    ("simulated_markov_0.fa", "markov_0", False),
    ("simulated_markov_1.fa", "markov_1", True),
)


@dataclass
class FrequencyDistribution:
    """Base and dinucleotide counts with derived frequencies."""

    base_counts: Counter = field(default_factory=Counter)
    pair_counts: Counter = field(default_factory=Counter)

    @property
    def base_count(self) -> int:
        return sum(self.base_counts.values())

    @property
    def pair_count(self) -> int:
        return sum(self.pair_counts.values())

    def base_freq(self, base: str) -> float:
        total = self.base_count
        return self.base_counts[base] / total if total else 0.0

    def pair_freq(self, prev_base: str, base: str) -> float:
        total = self.pair_count
        return self.pair_counts[(prev_base, base)] / total if total else 0.0

    def conditional_freq(self, prev_base: str, base: str) -> float:
        """P(base | prev_base) over A, C, G, T."""
        prev_total = sum(self.pair_freq(prev_base, b) for b in BASES)
        if prev_total == 0:
            return 0.0
        return self.pair_freq(prev_base, base) / prev_total

    def next_base(self, rng: random.Random, prev_base: str | None = None) -> str:
        """Draw a base, conditioned on `prev_base` when given."""
        weights = None
        if prev_base is not None:
            weights = [self.conditional_freq(prev_base, b) for b in BASES]
            if not any(weights):
                # prev_base was never followed by a base; use base frequencies
                weights = None
        if weights is None:
            weights = [self.base_freq(b) for b in BASES]
        if not any(weights):
            raise ExerciseError("Cannot simulate from a distribution without A/C/G/T counts")
        return rng.choices(BASES, weights=weights)[0]

    def report_lines(self) -> list[str]:
        lines = [f"{ALL_KEY}={self.base_count}"]
        lines.extend(f"{b}={self.base_counts[b]}" for b in BASE_KEYS)

        lines.extend(["", "Nucleotide Frequencies:"])
        lines.extend(f"{b}={self.base_freq(b):.4f}" for b in BASES)

        lines.extend(["", "Dinucleotide Count Matrix:"])
        for b1 in BASES:
            lines.append(f"{b1}=" + " ".join(str(self.pair_counts[(b1, b2)]) for b2 in BASES))

        lines.extend(["", "Dinucleotide Frequency Matrix:"])
        for b1 in BASES:
            lines.append(f"{b1}=" + " ".join(f"{self.pair_freq(b1, b2):.4f}" for b2 in BASES))

        lines.extend(["", "Conditional Frequency Matrix:"])
        for b1 in BASES:
            lines.append(
                f"{b1}=" + " ".join(f"{self.conditional_freq(b1, b2):.4f}" for b2 in BASES)
            )
        return lines


def equal_distribution() -> FrequencyDistribution:
    return FrequencyDistribution(base_counts=Counter({b: 1 for b in BASES}))


def count_bases(path: Path) -> tuple[FrequencyDistribution, str, int]:
    """Count bases and dinucleotides; pairs continue across line breaks.

    Returns:
        (distribution, last header line, non-alphabetic character count)
    """
    dist = FrequencyDistribution()
    header = NO_HEADER
    non_alpha_count = 0
    prev_base = None

    for line in iter_lines(path):
        if line.startswith(HEADER_PREFIX):
            header = line
            continue
        for c in line.upper():
            if c in BASE_KEYS:
                dist.base_counts[c] += 1
                if prev_base is not None:
                    dist.pair_counts[(prev_base, c)] += 1
                prev_base = c
            elif c != " ":
                non_alpha_count += 1

    return dist, header, non_alpha_count


def summarize(path: Path) -> tuple[FrequencyDistribution, list[str]]:
    dist, header, non_alpha_count = count_bases(path)
    lines = [f"Non-alphabetic characters: {non_alpha_count}", header]
    lines.extend(dist.report_lines())
    return dist, lines


def generate_sequence(
    dist: FrequencyDistribution,
    length: int,
    rng: random.Random,
    use_previous: bool,
) -> str:
    bases = []
    prev_base = None
    for _ in range(length):
        base = dist.next_base(rng, prev_base)
        bases.append(base)
        if use_previous:
            prev_base = base
    return "".join(bases)


def write_fasta(path: Path, name: str, sequence: str, width: int = 80) -> None:
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(f">{name}\n")
        for i in range(0, len(sequence), width):
            handle.write(sequence[i:i + width] + "\n")


def run(inputs: list[Path], context: ExerciseContext) -> list[str]:
    source = inputs[0]
    lines = [f"Fasta 1: {source.name}"]
    file_dist, summary = summarize(source)
    lines.extend(summary)

    length = file_dist.base_count
    models = {"equal": equal_distribution(), "markov_0": file_dist, "markov_1": file_dist}

    for number, (file_name, model, use_previous) in enumerate(SIMULATIONS, start=2):
        out_path = context.output_path(file_name, source.parent)
        sequence = generate_sequence(models[model], length, context.rng, use_previous)
        write_fasta(out_path, out_path.stem, sequence)
        logger.debug("simulated_sequence_written", path=str(out_path), length=length)

        lines.extend(["", f"Fasta {number}: {out_path.name}"])
        _, summary = summarize(out_path)
        lines.extend(summary)

    return lines
