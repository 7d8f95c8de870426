"""Day 5: Supply Stacks.

The drawing of the starting stacks is followed by a blank line and the
rearrangement procedure. The CrateMover 9000 moves one crate at a time;
the CrateMover 9001 moves several at once, keeping their order.

https://adventofcode.com/2022/day/5
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from pathlib import Path

from coursework.core.exercise import ExerciseContext, ExerciseError, InputFormatError
from coursework.utils.read import iter_lines

CRATE_PATTERN = re.compile(r"\[([A-Z])\]")
ACTION_PATTERN = re.compile(r"move (\d+) from (\d+) to (\d+)")
CRATE_WIDTH = 4


@dataclass
class Action:
    count: int
    source: int
    target: int


def parse_stack_line(line: str, stacks: list[list[str]]) -> None:
    """Add the crates of one drawing row; stacks are filled top-down."""
    for match in CRATE_PATTERN.finditer(line):
        index = match.start() // CRATE_WIDTH
        while len(stacks) <= index:
            stacks.append([])
        stacks[index].append(match.group(1))


def parse_input(path: Path) -> tuple[list[list[str]], list[Action]]:
    stacks: list[list[str]] = []
    actions: list[Action] = []
    loading = True

    for line_number, line in enumerate(iter_lines(path), start=1):
        if loading:
            if not line.strip():
                continue
            if line.split() and all(token.isdigit() for token in line.split()):
                # Stack numbers end the drawing; bottom crates go first
                for stack in stacks:
                    stack.reverse()
                while len(stacks) < len(line.split()):
                    stacks.append([])
                loading = False
            else:
                parse_stack_line(line, stacks)
            continue
        if not line.strip():
            continue
        match = ACTION_PATTERN.fullmatch(line.strip())
        if match is None:
            raise InputFormatError(path, f"'{line}' is not a move", line_number)
        count, source, target = (int(g) for g in match.groups())
        for stack_number in (source, target):
            if not 1 <= stack_number <= len(stacks):
                raise InputFormatError(path, f"no stack {stack_number}", line_number)
        actions.append(Action(count, source - 1, target - 1))

    if loading:
        raise InputFormatError(path, "stack numbers row not found")
    return stacks, actions


def move_crates(stacks: list[list[str]], actions: list[Action], keep_order: bool) -> list[list[str]]:
    """Apply the procedure to a copy of `stacks`."""
    stacks = copy.deepcopy(stacks)
    for action in actions:
        source = stacks[action.source]
        if action.count > len(source):
            raise ExerciseError(
                f"Cannot move {action.count} crates from stack {action.source + 1} "
                f"holding {len(source)}"
            )
        moved = source[len(source) - action.count:]
        del source[len(source) - action.count:]
        if not keep_order:
            moved.reverse()
        stacks[action.target].extend(moved)
    return stacks


def top_crates(stacks: list[list[str]]) -> str:
    return "".join(stack[-1] if stack else " " for stack in stacks)


def run(inputs: list[Path], context: ExerciseContext) -> list[str]:
    stacks, actions = parse_input(inputs[0])
    return [
        f"Top crates (CrateMover 9000): {top_crates(move_crates(stacks, actions, keep_order=False))}",
        f"Top crates (CrateMover 9001): {top_crates(move_crates(stacks, actions, keep_order=True))}",
    ]
