"""Tests for selector validation and the exercise registry."""

import pytest

from coursework.core.exercise import ExerciseKind
from coursework.core.registry import (
    EXERCISES,
    ConflictingSelectorError,
    MissingSelectorError,
    SelectorError,
    UnknownExerciseError,
    get_exercise,
    list_exercises,
    select_exercise,
)


class TestSelectExercise:
    """Tests for select_exercise."""

    def test_homework_selector(self):
        """--hw selects a homework exercise."""
        exercise = select_exercise(3, None)
        assert exercise.kind is ExerciseKind.HOMEWORK
        assert exercise.index == 3
        assert exercise.title == "Start-site weight matrix"

    def test_advent_selector(self):
        """--aoc selects an Advent of Code day."""
        exercise = select_exercise(None, 7)
        assert exercise.kind is ExerciseKind.ADVENT
        assert exercise.title == "No Space Left On Device"

    def test_index_zero_is_a_selector(self):
        """Index 0 counts as given."""
        assert select_exercise(0, None).key == "hw0"

    def test_neither_selector(self):
        with pytest.raises(MissingSelectorError):
            select_exercise(None, None)

    def test_both_selectors(self):
        with pytest.raises(ConflictingSelectorError) as exc_info:
            select_exercise(0, 2)
        assert exc_info.value.hw == 0
        assert exc_info.value.aoc == 2

    def test_both_selectors_checked_before_lookup(self):
        """Conflicting selectors are reported even when neither index exists."""
        with pytest.raises(ConflictingSelectorError):
            select_exercise(99, 99)

    def test_unknown_homework_message(self):
        with pytest.raises(UnknownExerciseError, match="no homework exercise registered for index 99"):
            select_exercise(99, None)

    def test_unknown_day_message(self):
        with pytest.raises(UnknownExerciseError, match="no advent of code day registered for index 3"):
            select_exercise(None, 3)

    def test_errors_share_base_class(self):
        """All selector errors derive from SelectorError."""
        for error in (MissingSelectorError, ConflictingSelectorError, UnknownExerciseError):
            assert issubclass(error, SelectorError)


class TestRegistry:
    """Tests for get_exercise and list_exercises."""

    def test_registered_indices(self):
        """Homeworks 0-9 and days 2, 5, 7, 8 are registered."""
        homework = [e.index for e in list_exercises(ExerciseKind.HOMEWORK)]
        days = [e.index for e in list_exercises(ExerciseKind.ADVENT)]
        assert homework == list(range(10))
        assert days == [2, 5, 7, 8]

    def test_list_orders_homework_first(self):
        keys = [e.key for e in list_exercises()]
        assert keys[0] == "hw0"
        assert keys[-1] == "aoc8"
        assert len(keys) == len(EXERCISES)

    def test_get_exercise_unknown(self):
        with pytest.raises(UnknownExerciseError) as exc_info:
            get_exercise(ExerciseKind.ADVENT, 25)
        assert exc_info.value.kind is ExerciseKind.ADVENT
        assert exc_info.value.index == 25

    def test_default_inputs_are_relative(self):
        """Default inputs live under the data directory."""
        hw9 = get_exercise(ExerciseKind.HOMEWORK, 9)
        assert hw9.inputs == (
            "hw/hw9/alignment.txt",
            "hw/hw9/STATE1_anc_rep_counts.txt",
            "hw/hw9/STATE2_codon1_2_counts.txt",
        )
        assert get_exercise(ExerciseKind.ADVENT, 2).inputs == ("aoc/day2/input.txt",)

    def test_graph_and_alignment_homeworks(self):
        """Homework 4 is the DAG exercise and homework 5 the alignment."""
        hw4 = get_exercise(ExerciseKind.HOMEWORK, 4)
        hw5 = get_exercise(ExerciseKind.HOMEWORK, 5)
        assert hw4.title == "Weighted DAG paths"
        assert hw4.inputs == ("hw/hw4/graph.txt", "hw/hw4/genome.fna")
        assert hw5.title == "Three-way local alignment"
        assert hw5.inputs == ("hw/hw5/seq1.fa", "hw/hw5/seq2.fa", "hw/hw5/seq3.fa")

    def test_exercise_defaults(self):
        """Exercises with tunable constants expose them as settings."""
        assert get_exercise(ExerciseKind.HOMEWORK, 7).settings["background_n"] == 8_422_401
        assert get_exercise(ExerciseKind.HOMEWORK, 6).settings["drop_off"] == -20.0
