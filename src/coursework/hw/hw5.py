"""Homework 5: local alignment of three protein sequences.

Each alignment column is an edge of a 3-D grid graph; its weight is the
sum-of-pairs BLOSUM62 score with a gap penalty of -6 (gap against gap
scores 0). Local alignment floors every node score at 0.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from functools import lru_cache
from itertools import product
from pathlib import Path

from Bio.Align import substitution_matrices

from coursework.core.exercise import ExerciseContext, ExerciseError
from coursework.utils.read import load_fasta

GAP_PENALTY = -6
GAP_CHAR = "-"
AMINO_ACIDS = "ARNDCQEGHILKMFPSTWYVBZX"
UNKNOWN_RESIDUE = "X"
MOVES = [move for move in product((1, 0), repeat=3) if any(move)]


@lru_cache(maxsize=1)
def blosum62() -> substitution_matrices.Array:
    return substitution_matrices.load("BLOSUM62")


def substitution_score(a: str, b: str) -> int:
    """BLOSUM62 score of two residues; unknown residues score as X."""
    a = a if a in AMINO_ACIDS else UNKNOWN_RESIDUE
    b = b if b in AMINO_ACIDS else UNKNOWN_RESIDUE
    return int(blosum62()[a, b])


def score_pair(a: str, b: str) -> int:
    if a == GAP_CHAR and b == GAP_CHAR:
        return 0
    if a == GAP_CHAR or b == GAP_CHAR:
        return GAP_PENALTY
    return substitution_score(a, b)


@lru_cache(maxsize=None)
def score_column(column: str) -> int:
    """Sum-of-pairs score of a three-residue alignment column."""
    a, b, c = column
    return score_pair(a, b) + score_pair(a, c) + score_pair(b, c)


@dataclass
class AlignmentResult:
    score: int = 0
    begin: tuple[int, int, int] = (0, 0, 0)
    end: tuple[int, int, int] = (0, 0, 0)
    columns: list[str] = field(default_factory=list)
    edge_counts: Counter = field(default_factory=Counter)

    @property
    def edge_weights(self) -> dict[str, int]:
        return {name: score_column(name) for name in self.edge_counts}

    def rows(self) -> list[str]:
        """The aligned sequences, one string per input."""
        return ["".join(column[i] for column in self.columns) for i in range(3)]


def align(seq1: str, seq2: str, seq3: str) -> AlignmentResult:
    """Best-scoring local alignment of three sequences."""
    seqs = (seq1, seq2, seq3)
    n1, n2, n3 = (len(s) for s in seqs)
    scores = [[[0] * (n3 + 1) for _ in range(n2 + 1)] for _ in range(n1 + 1)]
    moves: list[list[list[tuple[int, int, int] | None]]] = [
        [[None] * (n3 + 1) for _ in range(n2 + 1)] for _ in range(n1 + 1)
    ]
    result = AlignmentResult()

    for i, j, k in product(range(n1 + 1), range(n2 + 1), range(n3 + 1)):
        best = 0
        best_move = None
        for move in MOVES:
            pi, pj, pk = i - move[0], j - move[1], k - move[2]
            if pi < 0 or pj < 0 or pk < 0:
                continue
            column = (
                (seq1[pi] if move[0] else GAP_CHAR)
                + (seq2[pj] if move[1] else GAP_CHAR)
                + (seq3[pk] if move[2] else GAP_CHAR)
            )
            result.edge_counts[column] += 1
            candidate = scores[pi][pj][pk] + score_column(column)
            if candidate > best:
                best = candidate
                best_move = move
        scores[i][j][k] = best
        moves[i][j][k] = best_move
        if best > result.score:
            result.score = best
            result.end = (i, j, k)

    i, j, k = result.end
    columns = []
    while moves[i][j][k] is not None:
        di, dj, dk = moves[i][j][k]
        i, j, k = i - di, j - dj, k - dk
        columns.append(
            (seq1[i] if di else GAP_CHAR)
            + (seq2[j] if dj else GAP_CHAR)
            + (seq3[k] if dk else GAP_CHAR)
        )
    columns.reverse()
    result.begin = (i, j, k)
    result.columns = columns
    return result


def run(inputs: list[Path], context: ExerciseContext) -> list[str]:
    sequences = [load_fasta(path, alphabet=AMINO_ACIDS).sequence for path in inputs[:3]]
    for path, sequence in zip(inputs, sequences):
        if not sequence:
            raise ExerciseError(f"No protein sequence found in '{path.name}'")

    result = align(*sequences)

    lines = [f"Score: {result.score}", "", "Edge Weights:"]
    lines.extend(f"{name} = {weight}" for name, weight in sorted(result.edge_weights.items()))
    lines.extend(["", "Edge Counts:"])
    lines.extend(f"{name} = {count}" for name, count in sorted(result.edge_counts.items()))
    lines.extend(["", "Local Alignment:"])
    lines.extend(result.columns)
    lines.extend(["", "Aligned Sequences:"])
    lines.extend(result.rows())
    return lines
