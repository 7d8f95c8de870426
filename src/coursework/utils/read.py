"""File reading helpers shared by the exercises.

Functions:
- iter_lines(path) -> Iterator[str]: Lines without trailing newline
- file_name(path) -> str: Final path component, used in reports
- load_fasta(path, alphabet) -> FastaSequence: Sequence plus base statistics
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

HEADER_PREFIX = ">"
NO_HEADER = "NO HEADER"
ALL_KEY = "*"
NUCLEOTIDES = "ACGTN"
COMPLEMENT = {"A": "T", "T": "A", "C": "G", "G": "C", "N": "N"}


def iter_lines(path: Path | str) -> Iterator[str]:
    """Yield the lines of a text file without line terminators."""
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            yield line.rstrip("\r\n")


def file_name(path: Path | str) -> str:
    """Return the file name of a path."""
    return Path(path).name


@dataclass
class FastaSequence:
    """A FASTA sequence with the statistics printed by most homeworks."""

    file_name: str
    header: str = NO_HEADER
    sequence: str = ""
    counts: Counter = field(default_factory=Counter)
    non_alpha_count: int = 0

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def stats_lines(self, symbols: str = NUCLEOTIDES) -> list[str]:
        """Non-alphabetic count, header and per-symbol counts."""
        lines = [
            f"Non-alphabetic characters: {self.non_alpha_count}",
            self.header,
            f"{ALL_KEY}={self.total}",
        ]
        lines.extend(f"{s}={self.counts.get(s, 0)}" for s in symbols)
        return lines


def load_fasta(path: Path | str, alphabet: str | None = NUCLEOTIDES) -> FastaSequence:
    """Load a single-sequence FASTA file.

    Header lines start with '>'; the last one seen is kept. Sequence lines
    are upper-cased. Characters outside `alphabet` are dropped and, unless
    they are spaces, counted as non-alphabetic. With `alphabet=None` every
    character is kept.

    Args:
        path: FASTA file
        alphabet: Symbols to keep, or None to keep everything

    Returns:
        FastaSequence with sequence, header and counts
    """
    result = FastaSequence(file_name=file_name(path))
    chunks: list[str] = []

    for line in iter_lines(path):
        if line.startswith(HEADER_PREFIX):
            result.header = line
            continue
        for c in line.upper():
            if alphabet is None or c in alphabet:
                chunks.append(c)
            elif c != " ":
                result.non_alpha_count += 1

    result.sequence = "".join(chunks)
    result.counts = Counter(result.sequence)
    return result


def reverse_complement(sequence: str) -> str:
    """Reverse complement of a nucleotide sequence; unknown bases become N."""
    return "".join(COMPLEMENT.get(c, "N") for c in reversed(sequence))

