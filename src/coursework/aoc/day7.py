"""Day 7: No Space Left On Device.

Rebuilds the directory tree from a terminal session of `cd` and `ls`
commands, then finds the total size of small directories and the
smallest directory whose deletion frees enough space for the update.

https://adventofcode.com/2022/day/7
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

from coursework.core.exercise import ExerciseContext, InputFormatError
from coursework.utils.read import iter_lines

CD_PATTERN = re.compile(r"\$ cd (.+)")
FILE_PATTERN = re.compile(r"(\d+) (.+)")
DIR_PREFIX = "dir "
COMMAND_PREFIX = "$"
ROOT_DIR = "/"
UP_DIR = ".."

SMALL_DIR_LIMIT = 100_000
DISK_SIZE = 70_000_000
UPDATE_SIZE = 30_000_000


@dataclass
class Directory:
    name: str
    parent: Optional["Directory"] = field(default=None, repr=False)
    files: dict[str, int] = field(default_factory=dict)
    children: dict[str, "Directory"] = field(default_factory=dict)

    @property
    def file_size(self) -> int:
        return sum(self.files.values())

    @property
    def size(self) -> int:
        return self.file_size + sum(child.size for child in self.children.values())

    def child(self, name: str) -> "Directory":
        if name not in self.children:
            self.children[name] = Directory(name, parent=self)
        return self.children[name]

    def walk(self) -> Iterator["Directory"]:
        yield self
        for child in self.children.values():
            yield from child.walk()

    def tree_lines(self, depth: int = 0) -> list[str]:
        lines = [f"{'  ' * depth}- {self.name} (size={self.size}, files={self.file_size})"]
        for child in self.children.values():
            lines.extend(child.tree_lines(depth + 1))
        return lines


def parse_session(path: Path) -> Directory:
    root = Directory(ROOT_DIR)
    cwd = root
    for line_number, line in enumerate(iter_lines(path), start=1):
        if not line.strip():
            continue
        if line.startswith(COMMAND_PREFIX):
            match = CD_PATTERN.fullmatch(line)
            if match is None:
                # ls; its listing follows
                continue
            target = match.group(1)
            if target == ROOT_DIR:
                cwd = root
            elif target == UP_DIR:
                cwd = cwd.parent or root
            else:
                cwd = cwd.child(target)
        elif line.startswith(DIR_PREFIX):
            cwd.child(line[len(DIR_PREFIX):])
        else:
            match = FILE_PATTERN.fullmatch(line)
            if match is None:
                raise InputFormatError(path, f"unexpected listing entry '{line}'", line_number)
            cwd.files[match.group(2)] = int(match.group(1))
    return root


def small_directories_size(root: Directory, limit: int = SMALL_DIR_LIMIT) -> int:
    """Sum of the sizes of directories no larger than `limit`."""
    return sum(d.size for d in root.walk() if d.size <= limit)


def directory_to_delete(root: Directory) -> tuple[Directory | None, int]:
    """Smallest directory freeing enough space, and the space needed."""
    needed = root.size - (DISK_SIZE - UPDATE_SIZE)
    if needed <= 0:
        return None, needed
    candidates = [d for d in root.walk() if d.size >= needed]
    return min(candidates, key=lambda d: d.size), needed


def run(inputs: list[Path], context: ExerciseContext) -> list[str]:
    root = parse_session(inputs[0])
    lines = root.tree_lines()
    lines.append(f"There are '{small_directories_size(root)}' bytes in small directories")

    directory, needed = directory_to_delete(root)
    if directory is None:
        lines.append("There is already enough free space for the update")
    else:
        lines.append(
            f"Deleting directory '{directory.name}' will free up '{directory.size}' bytes, "
            f"which is more than the space needed to free '{needed}'"
        )
    return lines
