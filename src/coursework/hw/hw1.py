"""Homework 1: longest substring shared by two genomes.

Genome 1, genome 2 and the reverse complement of genome 2 are joined with
unique separators and indexed in a single suffix array. For every genome-1
suffix the nearest suffixes from the other genome (above and below in sorted
order) give its longest match; the report lists the distribution of those
match lengths and where the longest ones occur.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path

from coursework.core.exercise import ExerciseContext
from coursework.utils.read import load_fasta, reverse_complement

# Sort below every base and occur once, so no common prefix crosses them
SEPARATORS = ("\x00", "\x01", "\x02")


class Source(IntEnum):
    FIRST = 0
    SECOND = 1
    SECOND_REVERSE = 2


@dataclass
class MatchResult:
    """Longest-match statistics for genome 1 against genome 2."""

    histogram: Counter = field(default_factory=Counter)
    longest_length: int = 0
    match_string: str = ""
    # (source, 0-based offset within that source sequence)
    positions: list[tuple[Source, int]] = field(default_factory=list)
    unique_matches: int = 0


def build_suffix_array(text: str) -> list[int]:
    """Suffix array by prefix doubling."""
    n = len(text)
    if n == 0:
        return []

    rank = [ord(c) for c in text]
    suffixes = list(range(n))
    k = 1
    while True:
        def sort_key(i: int, k: int = k, rank: list[int] = rank) -> tuple[int, int]:
            return (rank[i], rank[i + k] if i + k < n else -1)

        suffixes.sort(key=sort_key)
        new_rank = [0] * n
        for prev, curr in zip(suffixes, suffixes[1:]):
            new_rank[curr] = new_rank[prev] + (sort_key(prev) != sort_key(curr))
        rank = new_rank
        if rank[suffixes[-1]] == n - 1 or k >= n:
            break
        k *= 2
    return suffixes


def common_prefix_length(text: str, i: int, j: int) -> int:
    length = 0
    n = len(text)
    while i + length < n and j + length < n and text[i + length] == text[j + length]:
        length += 1
    return length


def find_shared_substrings(seq1: str, seq2: str) -> MatchResult:
    """Find the longest substrings of seq1 that occur in seq2 on either strand."""
    seq2_rev = reverse_complement(seq2)
    parts = (seq1, seq2, seq2_rev)
    offsets = []
    pieces = []
    position = 0
    for part, separator in zip(parts, SEPARATORS):
        offsets.append(position)
        pieces.append(part + separator)
        position += len(part) + 1
    text = "".join(pieces)

    def locate(pos: int) -> tuple[Source, int]:
        for source in reversed(Source):
            if pos >= offsets[source]:
                return source, pos - offsets[source]
        raise ValueError(pos)

    suffixes = [p for p in build_suffix_array(text) if text[p] not in SEPARATORS]
    owners = [locate(p)[0] for p in suffixes]

    # Nearest other-genome suffix before and after each rank
    prev_other: list[int | None] = [None] * len(suffixes)
    last = None
    for rank, owner in enumerate(owners):
        prev_other[rank] = last
        if owner is not Source.FIRST:
            last = rank
    next_other: list[int | None] = [None] * len(suffixes)
    last = None
    for rank in range(len(suffixes) - 1, -1, -1):
        next_other[rank] = last
        if owners[rank] is not Source.FIRST:
            last = rank

    result = MatchResult()
    matches: set[int] = set()
    for rank, pos in enumerate(suffixes):
        if owners[rank] is not Source.FIRST:
            continue

        best_length = 0
        partner = None
        for other in (prev_other[rank], next_other[rank]):
            if other is None:
                continue
            length = common_prefix_length(text, pos, suffixes[other])
            if partner is None or length > best_length:
                best_length = length
                partner = suffixes[other]

        result.histogram[best_length] += 1
        if partner is None or best_length == 0:
            continue
        if best_length > result.longest_length:
            result.longest_length = best_length
            result.match_string = text[pos:pos + best_length]
            matches = {pos, partner}
        elif best_length == result.longest_length:
            matches.update((pos, partner))

    result.positions = [locate(p) for p in sorted(matches)]
    result.unique_matches = len({text[p:p + result.longest_length] for p in matches})
    return result


def run(inputs: list[Path], context: ExerciseContext) -> list[str]:
    path1, path2 = inputs[0], inputs[1]

    lines = [f"Fasta 1: {path1.name}"]
    fasta1 = load_fasta(path1)
    lines.extend(fasta1.stats_lines())

    lines.extend(["", f"Fasta 2: {path2.name}"])
    fasta2 = load_fasta(path2)
    lines.extend(fasta2.stats_lines())

    result = find_shared_substrings(fasta1.sequence, fasta2.sequence)

    lines.extend(["", "Match Length Histogram:"])
    lines.extend(f"{length} {count}" for length, count in sorted(result.histogram.items()))

    lines.extend([
        "",
        f"The longest match length: {result.longest_length}",
        f"Number of match strings: {result.unique_matches}",
        "",
        f"Match string: {result.match_string}",
    ])

    for source, offset in result.positions:
        name = path1.name if source is Source.FIRST else path2.name
        strand = "reverse" if source is Source.SECOND_REVERSE else "forward"
        lines.extend(["", f"Fasta: {name}", f"Position: {offset + 1}", f"Strand: {strand}"])

    return lines
