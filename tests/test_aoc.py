"""Tests for the Advent of Code days, using the puzzle examples."""

import pytest

from coursework.aoc import day2, day5, day7, day8
from coursework.core.exercise import ExerciseContext, ExerciseError, InputFormatError


class TestDay2:
    """Rock Paper Scissors."""

    def test_example_scores(self, data_dir):
        rounds = day2.parse_rounds(data_dir / "aoc/day2/input.txt")
        assert day2.total_scores(rounds) == (15, 12)

    def test_move_relations(self):
        assert day2.Move.ROCK.beats() is day2.Move.SCISSORS
        assert day2.Move.SCISSORS.beats() is day2.Move.PAPER
        assert day2.Move.ROCK.loses_to() is day2.Move.PAPER

    def test_illegal_move(self, write_file):
        path = write_file("rps.txt", "A Y\nD X\n")
        with pytest.raises(InputFormatError, match="rps.txt:2"):
            day2.parse_rounds(path)

    def test_run(self, data_dir):
        lines = day2.run([data_dir / "aoc/day2/input.txt"], ExerciseContext())
        assert lines == [
            "Got a score of '15'",
            "Got a score of '12' following the desired outcomes",
        ]


class TestDay5:
    """Supply Stacks."""

    def test_parse(self, data_dir):
        stacks, actions = day5.parse_input(data_dir / "aoc/day5/input.txt")
        assert stacks == [["Z", "N"], ["M", "C", "D"], ["P"]]
        assert len(actions) == 4
        assert (actions[0].count, actions[0].source, actions[0].target) == (1, 1, 0)

    def test_crate_movers(self, data_dir):
        stacks, actions = day5.parse_input(data_dir / "aoc/day5/input.txt")
        assert day5.top_crates(day5.move_crates(stacks, actions, keep_order=False)) == "CMZ"
        assert day5.top_crates(day5.move_crates(stacks, actions, keep_order=True)) == "MCD"
        # the parsed stacks are not modified
        assert stacks[0] == ["Z", "N"]

    def test_moving_too_many(self):
        with pytest.raises(ExerciseError, match="Cannot move 2"):
            day5.move_crates([["A"], []], [day5.Action(2, 0, 1)], keep_order=False)

    def test_unknown_stack(self, write_file):
        path = write_file("crates.txt", "[A]\n 1 \n\nmove 1 from 1 to 4\n")
        with pytest.raises(InputFormatError, match="no stack 4"):
            day5.parse_input(path)


class TestDay7:
    """No Space Left On Device."""

    @pytest.fixture
    def root(self, data_dir):
        return day7.parse_session(data_dir / "aoc/day7/input.txt")

    def test_sizes(self, root):
        assert root.size == 48381165
        assert root.children["a"].children["e"].size == 584
        assert root.children["d"].size == 24933642

    def test_small_directories(self, root):
        assert day7.small_directories_size(root) == 95437

    def test_directory_to_delete(self, root):
        directory, needed = day7.directory_to_delete(root)
        assert directory.name == "d"
        assert directory.size == 24933642
        assert needed == 8381165

    def test_listing_twice_does_not_double_count(self, write_file):
        path = write_file("twice.txt", "$ cd /\n$ ls\n10 a\n$ ls\n10 a\n")
        assert day7.parse_session(path).size == 10

    def test_enough_space(self, write_file):
        path = write_file("small.txt", "$ cd /\n$ ls\n10 a\n")
        directory, needed = day7.directory_to_delete(day7.parse_session(path))
        assert directory is None
        assert needed < 0

    def test_run(self, data_dir):
        lines = day7.run([data_dir / "aoc/day7/input.txt"], ExerciseContext())
        assert lines[0] == "- / (size=48381165, files=23352670)"
        assert "        - e (size=584, files=584)" not in lines
        assert "    - e (size=584, files=584)" in lines
        assert "There are '95437' bytes in small directories" in lines
        assert lines[-1].startswith("Deleting directory 'd' will free up '24933642' bytes")


class TestDay8:
    """Treetop Tree House."""

    @pytest.fixture
    def grid(self, data_dir):
        return day8.parse_grid(data_dir / "aoc/day8/input.txt")

    def test_visible(self, grid):
        cells = [(r, c) for r in range(5) for c in range(5)]
        assert sum(day8.is_visible(grid, r, c) for r, c in cells) == 21

    def test_scenic_score(self, grid):
        assert day8.scenic_score(grid, 1, 2) == 4
        assert day8.scenic_score(grid, 3, 2) == 8

    def test_ragged_grid(self, write_file):
        path = write_file("trees.txt", "123\n12\n")
        with pytest.raises(InputFormatError, match="rows differ"):
            day8.parse_grid(path)

    def test_run(self, data_dir):
        lines = day8.run([data_dir / "aoc/day8/input.txt"], ExerciseContext())
        assert lines[0] == "11111"
        assert lines[-2:] == ["There are '21' visible trees!", "The highest scenic score is '8'"]
