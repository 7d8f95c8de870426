"""Homework 0: count the nucleotides of a FASTA file."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

from coursework.core.exercise import ExerciseContext
from coursework.utils.read import ALL_KEY, HEADER_PREFIX, NUCLEOTIDES, iter_lines


def count_bases(path: Path) -> Counter:
    """Count every character of the sequence lines, upper-cased.

    The total is stored under '*'.
    """
    counts: Counter = Counter()
    for line in iter_lines(path):
        if line.startswith(HEADER_PREFIX):
            continue
        counts.update(line.upper())
    counts[ALL_KEY] = sum(counts.values())
    return counts


def run(inputs: list[Path], context: ExerciseContext) -> list[str]:
    counts = count_bases(inputs[0])
    return [f"{key}={counts.get(key, 0)}" for key in ALL_KEY + NUCLEOTIDES]
