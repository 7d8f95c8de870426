"""Day 8: Treetop Tree House.

https://adventofcode.com/2022/day/8
"""

from __future__ import annotations

from pathlib import Path

from coursework.core.exercise import ExerciseContext, InputFormatError
from coursework.utils.read import iter_lines

DIRECTIONS = ((-1, 0), (1, 0), (0, -1), (0, 1))


def parse_grid(path: Path) -> list[list[int]]:
    grid = []
    for line_number, line in enumerate(iter_lines(path), start=1):
        line = line.strip()
        if not line:
            continue
        if not line.isdigit():
            raise InputFormatError(path, "tree heights must be digits", line_number)
        if grid and len(line) != len(grid[0]):
            raise InputFormatError(path, "rows differ in length", line_number)
        grid.append([int(c) for c in line])
    return grid


def sight_line(grid: list[list[int]], row: int, col: int, step: tuple[int, int]) -> list[int]:
    """Heights seen from a tree looking in one direction, nearest first."""
    heights = []
    r, c = row + step[0], col + step[1]
    while 0 <= r < len(grid) and 0 <= c < len(grid[r]):
        heights.append(grid[r][c])
        r, c = r + step[0], c + step[1]
    return heights


def is_visible(grid: list[list[int]], row: int, col: int) -> bool:
    height = grid[row][col]
    return any(
        all(h < height for h in sight_line(grid, row, col, step)) for step in DIRECTIONS
    )


def scenic_score(grid: list[list[int]], row: int, col: int) -> int:
    height = grid[row][col]
    score = 1
    for step in DIRECTIONS:
        distance = 0
        for h in sight_line(grid, row, col, step):
            distance += 1
            if h >= height:
                break
        score *= distance
    return score


def visibility_map(grid: list[list[int]]) -> list[str]:
    return [
        "".join("1" if is_visible(grid, r, c) else "0" for c in range(len(grid[r])))
        for r in range(len(grid))
    ]


def run(inputs: list[Path], context: ExerciseContext) -> list[str]:
    grid = parse_grid(inputs[0])
    cells = [(r, c) for r in range(len(grid)) for c in range(len(grid[r]))]
    visible = sum(1 for r, c in cells if is_visible(grid, r, c))
    best = max((scenic_score(grid, r, c) for r, c in cells), default=0)

    lines = visibility_map(grid)
    lines.append(f"There are '{visible}' visible trees!")
    lines.append(f"The highest scenic score is '{best}'")
    return lines
