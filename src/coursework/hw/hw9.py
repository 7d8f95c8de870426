"""Homework 9: Viterbi decoding of conserved regions in a 3-species alignment.

State 1 is neutral, state 2 conserved. Emissions are alignment columns
(one base per species) with probabilities estimated from count files.
All arithmetic is done in natural-log space.

Alignment file format:

    # chrX:152767491-152767698
    hg18<TAB>ATAAAA...
    panTro2<TAB>ATAAAA...
    mm9<TAB>ATGAAA...
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from pathlib import Path

from coursework.core.exercise import ExerciseContext, ExerciseError, InputFormatError
from coursework.utils.read import iter_lines

BLOCK_PREFIX = "#"
RANGE_PATTERN = re.compile(r":(\d+)-(\d+)")
SPECIES = 3
TOP_SEGMENTS = 10

START_PROBS = (0.95, 0.05)
TRANSITION_PROBS = ((0.95, 0.05), (0.10, 0.90))


def safe_log(p: float) -> float:
    return math.log(p) if p > 0 else float("-inf")


@dataclass
class EmissionModel:
    """Log emission probabilities of one state."""

    log_probs: dict[str, float]

    @classmethod
    def from_counts(cls, counts: dict[str, int]) -> "EmissionModel":
        total = sum(counts.values())
        if total == 0:
            raise ExerciseError("Emission counts are all zero")
        return cls({column: safe_log(c / total) for column, c in counts.items()})

    def log_prob(self, column: str) -> float:
        try:
            return self.log_probs[column]
        except KeyError:
            raise ExerciseError(f"No emission probability for alignment column '{column}'")

    def probabilities(self) -> list[tuple[str, float]]:
        return [(column, math.exp(p)) for column, p in sorted(self.log_probs.items())]


def load_emission_counts(path: Path) -> dict[str, int]:
    counts: dict[str, int] = {}
    for line_number, line in enumerate(iter_lines(path), start=1):
        if not line.strip():
            continue
        parts = line.split("\t")
        if len(parts) < 2:
            raise InputFormatError(path, "expected 'column<TAB>count'", line_number)
        try:
            counts[parts[0].strip().upper()] = int(parts[1])
        except ValueError:
            raise InputFormatError(path, f"invalid count '{parts[1]}'", line_number)
    return counts


@dataclass
class Alignment:
    columns: list[str]
    positions: list[int]


def load_alignment(path: Path) -> Alignment:
    """Read alignment blocks into columns and their chromosome positions."""
    alignment = Alignment(columns=[], positions=[])
    lines = list(iter_lines(path))
    i = 0
    while i < len(lines):
        line = lines[i]
        if not line.startswith(BLOCK_PREFIX):
            i += 1
            continue
        match = RANGE_PATTERN.search(line)
        if match is None:
            raise InputFormatError(path, f"invalid block range '{line}'", i + 1)
        start = int(match.group(1))

        rows = []
        for offset in range(1, SPECIES + 1):
            if i + offset >= len(lines):
                raise InputFormatError(path, "alignment block is truncated", i + offset + 1)
            parts = lines[i + offset].split("\t")
            if len(parts) < 2:
                raise InputFormatError(path, "expected 'species<TAB>sequence'", i + offset + 1)
            rows.append(parts[1].strip().upper())
        if len({len(row) for row in rows}) != 1:
            raise InputFormatError(path, "aligned rows differ in length", i + 1)

        for k, column in enumerate(zip(*rows)):
            alignment.columns.append("".join(column))
            alignment.positions.append(start + k)
        i += SPECIES + 1

    if not alignment.columns:
        raise InputFormatError(path, "no alignment blocks found")
    return alignment


def viterbi(columns: list[str], states: list[EmissionModel]) -> list[int]:
    """Most probable state path, as 0-based state indices."""
    n_states = range(len(states))
    log_start = [safe_log(p) for p in START_PROBS]
    log_trans = [[safe_log(p) for p in row] for row in TRANSITION_PROBS]

    scores = [log_start[s] + states[s].log_prob(columns[0]) for s in n_states]
    pointers: list[list[int]] = []
    for column in columns[1:]:
        step_scores = []
        step_pointers = []
        for s in n_states:
            candidates = [scores[p] + log_trans[p][s] for p in n_states]
            # ties go to the later state
            best = max(n_states, key=lambda p: (candidates[p], p))
            step_scores.append(candidates[best] + states[s].log_prob(column))
            step_pointers.append(best)
        scores = step_scores
        pointers.append(step_pointers)

    state = max(n_states, key=lambda s: (scores[s], s))
    path = [state]
    for step in reversed(pointers):
        state = step[state]
        path.append(state)
    path.reverse()
    return path


def segments(path: list[int], positions: list[int]) -> dict[int, list[tuple[int, int]]]:
    """Runs of the same state as inclusive (start, end) positions."""
    result: dict[int, list[tuple[int, int]]] = {s: [] for s in range(len(START_PROBS))}
    run_start = 0
    for i in range(1, len(path) + 1):
        if i == len(path) or path[i] != path[run_start]:
            result[path[run_start]].append((positions[run_start], positions[i - 1]))
            run_start = i
    return result


def segment_length(segment: tuple[int, int]) -> int:
    return segment[1] - segment[0] + 1


def run(inputs: list[Path], context: ExerciseContext) -> list[str]:
    alignment = load_alignment(inputs[0])
    states = [EmissionModel.from_counts(load_emission_counts(p)) for p in inputs[1:3]]

    path = viterbi(alignment.columns, states)
    found = segments(path, alignment.positions)

    lines = ["State Histogram:"]
    lines.extend(
        f"{s + 1}={sum(segment_length(seg) for seg in found[s])}" for s in found
    )
    lines.extend(["", "Segment Histogram:"])
    lines.extend(f"{s + 1}={len(found[s])}" for s in found)

    lines.extend(["", "Initial State Probabilities:"])
    lines.extend(f"{i + 1}={p:.5f}" for i, p in enumerate(START_PROBS))
    lines.extend(["", "Transition Probabilities:"])
    for i, row in enumerate(TRANSITION_PROBS):
        lines.extend(f"{i + 1},{j + 1}={p:.5f}" for j, p in enumerate(row))
    lines.extend(["", "Emission Probabilities:"])
    for i, state in enumerate(states):
        lines.extend(f"{i + 1},{column}={p:.5f}" for column, p in state.probabilities())

    lines.extend(["", "Longest Segment List:"])
    longest = sorted(found[1], key=segment_length, reverse=True)[:TOP_SEGMENTS]
    lines.extend(f"{start} {end}" for start, end in longest)
    return lines
