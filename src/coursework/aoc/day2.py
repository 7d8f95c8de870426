"""Day 2: Rock Paper Scissors.

Each line holds the opponent's shape (A/B/C) and a second column. Part 1
reads the second column as our shape (X/Y/Z), part 2 as the outcome we
need (X lose, Y draw, Z win). A round scores the shape value (1/2/3) plus
0, 3 or 6 for a loss, draw or win.

https://adventofcode.com/2022/day/2
"""

from __future__ import annotations

from enum import IntEnum
from pathlib import Path

from coursework.core.exercise import ExerciseContext, InputFormatError
from coursework.utils.read import iter_lines


class Move(IntEnum):
    ROCK = 1
    PAPER = 2
    SCISSORS = 3

    def beats(self) -> "Move":
        """The shape this one defeats."""
        return Move((self - 2) % 3 + 1)

    def loses_to(self) -> "Move":
        return Move(self % 3 + 1)


OPPONENT_MOVES = {"A": Move.ROCK, "B": Move.PAPER, "C": Move.SCISSORS}
SELF_MOVES = {"X": Move.ROCK, "Y": Move.PAPER, "Z": Move.SCISSORS}

LOSE, DRAW, WIN = 0, 3, 6
OUTCOMES = {"X": LOSE, "Y": DRAW, "Z": WIN}


def outcome_score(opponent: Move, own: Move) -> int:
    if opponent == own:
        return DRAW
    if own.beats() == opponent:
        return WIN
    return LOSE


def round_score(opponent: Move, own: Move) -> int:
    return int(own) + outcome_score(opponent, own)


def move_for_outcome(opponent: Move, outcome: int) -> Move:
    if outcome == DRAW:
        return opponent
    if outcome == WIN:
        return opponent.loses_to()
    return opponent.beats()


def parse_rounds(path: Path) -> list[tuple[str, str]]:
    rounds = []
    for line_number, line in enumerate(iter_lines(path), start=1):
        parts = line.split()
        if not parts:
            continue
        if len(parts) != 2 or parts[0] not in OPPONENT_MOVES or parts[1] not in SELF_MOVES:
            raise InputFormatError(path, f"'{line}' is not a legal round", line_number)
        rounds.append((parts[0], parts[1]))
    return rounds


def total_scores(rounds: list[tuple[str, str]]) -> tuple[int, int]:
    """Total score reading the second column as a move, then as an outcome."""
    as_move = 0
    as_outcome = 0
    for first, second in rounds:
        opponent = OPPONENT_MOVES[first]
        as_move += round_score(opponent, SELF_MOVES[second])
        as_outcome += round_score(opponent, move_for_outcome(opponent, OUTCOMES[second]))
    return as_move, as_outcome


def run(inputs: list[Path], context: ExerciseContext) -> list[str]:
    part1, part2 = total_scores(parse_rounds(inputs[0]))
    return [
        f"Got a score of '{part1}'",
        f"Got a score of '{part2}' following the desired outcomes",
    ]
