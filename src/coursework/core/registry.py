"""Exercise registry and selector validation.

Every runnable exercise is listed in EXERCISES. The command line picks
one with exactly one of `--hw=<N>` or `--aoc=<N>`.

Functions:
- select_exercise(hw, aoc) -> Exercise: Validate the selector pair
- get_exercise(kind, index) -> Exercise: Flat lookup
- list_exercises(kind) -> list[Exercise]: Registered exercises in order
"""

from __future__ import annotations

from coursework.aoc import day2, day5, day7, day8
from coursework.core.exercise import Exercise, ExerciseKind
from coursework.hw import hw0, hw1, hw2, hw3, hw4, hw5, hw6, hw7, hw8, hw9
from coursework.hw.segments import DEFAULT_SCORES

HW = ExerciseKind.HOMEWORK
AOC = ExerciseKind.ADVENT


class SelectorError(Exception):
    """Raised when the exercise selector is invalid."""

    pass


class MissingSelectorError(SelectorError):
    """Raised when neither selector is given."""

    def __init__(self):
        super().__init__("A selector is required: pass --hw=<N> or --aoc=<N>")


class ConflictingSelectorError(SelectorError):
    """Raised when both selectors are given."""

    def __init__(self, hw: int, aoc: int):
        self.hw = hw
        self.aoc = aoc
        super().__init__(f"--hw and --aoc are mutually exclusive (got --hw={hw} --aoc={aoc})")


class UnknownExerciseError(SelectorError):
    """Raised when no exercise is registered for a selector."""

    def __init__(self, kind: ExerciseKind, index: int):
        self.kind = kind
        self.index = index
        super().__init__(f"no {kind.label} registered for index {index}")


def _hw(index: int, title: str, module, *inputs: str, **settings) -> Exercise:
    return Exercise(HW, index, title, module.run, tuple(f"hw/hw{index}/{name}" for name in inputs), settings)


def _aoc(index: int, title: str, module) -> Exercise:
    return Exercise(AOC, index, title, module.run, (f"aoc/day{index}/input.txt",))


EXERCISES: dict[tuple[ExerciseKind, int], Exercise] = {
    (e.kind, e.index): e
    for e in [
        _hw(0, "Nucleotide counts", hw0, "test.fna"),
        _hw(1, "Longest shared substring", hw1, "genome1.fna", "genome2.fna"),
        _hw(2, "Markov sequence simulation", hw2, "genome.fna"),
        _hw(3, "Start-site weight matrix", hw3, "genome.gbff"),
        _hw(4, "Weighted DAG paths", hw4, "graph.txt", "genome.fna"),
        _hw(5, "Three-way local alignment", hw5, "seq1.fa", "seq2.fa", "seq3.fa"),
        _hw(
            6, "Copy-number segmentation", hw6, "read_starts.txt",
            scores=dict(DEFAULT_SCORES), drop_off=hw6.D_SCORE,
        ),
        _hw(7, "Segment score statistics", hw7, "read_starts.txt", background_n=hw7.BACKGROUND_N),
        _hw(
            8, "HMM Baum-Welch training", hw8, "genome.fna",
            tolerance=hw8.TOLERANCE, max_iterations=hw8.MAX_ITERATIONS,
        ),
        _hw(
            9, "HMM Viterbi conservation", hw9,
            "alignment.txt", "STATE1_anc_rep_counts.txt", "STATE2_codon1_2_counts.txt",
        ),
        _aoc(2, "Rock Paper Scissors", day2),
        _aoc(5, "Supply Stacks", day5),
        _aoc(7, "No Space Left On Device", day7),
        _aoc(8, "Treetop Tree House", day8),
    ]
}


def get_exercise(kind: ExerciseKind, index: int) -> Exercise:
    """Look up a registered exercise.

    Raises:
        UnknownExerciseError: If nothing is registered for (kind, index)
    """
    try:
        return EXERCISES[(kind, index)]
    except KeyError:
        raise UnknownExerciseError(kind, index) from None


def select_exercise(hw: int | None, aoc: int | None) -> Exercise:
    """Resolve the command-line selector pair to an exercise.

    Args:
        hw: Homework index, or None
        aoc: Advent of Code day, or None

    Returns:
        The selected Exercise

    Raises:
        MissingSelectorError: If neither selector is given
        ConflictingSelectorError: If both are given
        UnknownExerciseError: If the index has no registered exercise
    """
    if hw is None and aoc is None:
        raise MissingSelectorError()
    if hw is not None and aoc is not None:
        raise ConflictingSelectorError(hw, aoc)
    if hw is not None:
        return get_exercise(HW, hw)
    return get_exercise(AOC, aoc)


def list_exercises(kind: ExerciseKind | None = None) -> list[Exercise]:
    """Registered exercises sorted by kind (homework first) then index."""
    order = list(ExerciseKind)
    exercises = [e for e in EXERCISES.values() if kind is None or e.kind is kind]
    return sorted(exercises, key=lambda e: (order.index(e.kind), e.index))
