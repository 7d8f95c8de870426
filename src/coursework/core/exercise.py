"""Exercise value types and the errors exercises raise.

Every homework and Advent of Code day is described by an `Exercise`:
its selector (kind + index), a title, the routine to call and the input
files it reads by default. Routines receive their input paths and an
`ExerciseContext` and return the lines they want printed.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable


class ExerciseKind(str, Enum):
    """Selector kinds accepted on the command line."""

    HOMEWORK = "hw"
    ADVENT = "aoc"

    @property
    def label(self) -> str:
        """Human readable name used in messages."""
        if self is ExerciseKind.HOMEWORK:
            return "homework exercise"
        return "advent of code day"

    @property
    def short_label(self) -> str:
        if self is ExerciseKind.HOMEWORK:
            return "Homework"
        return "Day"


@dataclass
class ExerciseContext:
    """Everything a routine gets besides its input paths."""

    data_dir: Path = Path("data")
    output_dir: Path | None = None
    rng: random.Random = field(default_factory=random.Random)
    settings: dict[str, Any] = field(default_factory=dict)

    def output_path(self, name: str, default_dir: Path) -> Path:
        """Where a generated file called `name` should be written."""
        target_dir = self.output_dir if self.output_dir is not None else default_dir
        target_dir.mkdir(parents=True, exist_ok=True)
        return target_dir / name

    def setting(self, name: str, default: Any, convert: Callable[[Any], Any]) -> Any:
        """A setting passed through `convert`, or `default` when unset.

        Raises:
            SettingError: If the value cannot be converted
        """
        value = self.settings.get(name, default)
        try:
            return convert(value)
        except (TypeError, ValueError):
            raise SettingError(name, value) from None


Routine = Callable[[list[Path], ExerciseContext], list[str]]


@dataclass(frozen=True)
class Exercise:
    """A registered exercise."""

    kind: ExerciseKind
    index: int
    title: str
    routine: Routine = field(compare=False, repr=False)
    inputs: tuple[str, ...] = ()
    settings: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def key(self) -> str:
        """Config key, e.g. 'hw7' or 'aoc2'."""
        return f"{self.kind.value}{self.index}"


class ExerciseError(Exception):
    """Base exception for failures inside an exercise."""

    pass


class ExerciseInputError(ExerciseError):
    """Raised when an exercise is given the wrong input files."""

    pass


class SettingError(ExerciseError):
    """Raised when an exercise setting has an unusable value."""

    def __init__(self, name: str, value: Any, detail: str | None = None):
        self.name = name
        self.value = value
        message = f"Invalid value for setting '{name}': {value!r}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class InputFormatError(ExerciseError):
    """Raised when an input file does not have the expected format."""

    def __init__(self, path: Path | str, detail: str, line_number: int | None = None):
        self.path = Path(path)
        self.detail = detail
        self.line_number = line_number
        where = self.path.name
        if line_number is not None:
            where += f":{line_number}"
        super().__init__(f"Malformed input '{where}': {detail}")
