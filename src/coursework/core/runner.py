"""Run a selected exercise.

Input files come from, in order of preference: explicit paths given on
the command line, paths configured for the exercise, or the exercise's
default inputs under the data directory.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from coursework.config.app_config import AppConfig, load_app_config
from coursework.core.exercise import Exercise, ExerciseContext, ExerciseInputError

logger = structlog.get_logger(__name__)


@dataclass
class ExerciseReport:
    """Lines produced by an exercise and how long it took."""

    exercise: Exercise
    lines: list[str] = field(default_factory=list)
    elapsed: float = 0.0


def resolve_inputs(
    exercise: Exercise,
    explicit: list[Path] | None = None,
    data_dir: Path = Path("data"),
    config: AppConfig | None = None,
) -> list[Path]:
    """Input paths for an exercise, checked for count and existence.

    Raises:
        ExerciseInputError: If the wrong number of files is given or one is missing
    """
    if explicit:
        paths = [Path(p) for p in explicit]
    else:
        configured = config.inputs_for(exercise.kind.value, exercise.index) if config else None
        names = configured if configured else list(exercise.inputs)
        paths = [data_dir / name for name in names]

    expected = len(exercise.inputs)
    if len(paths) != expected:
        raise ExerciseInputError(
            f"{exercise.kind.short_label} '{exercise.index}' expects {expected} "
            f"input file(s), got {len(paths)}"
        )

    missing = [p for p in paths if not p.is_file()]
    if missing:
        raise ExerciseInputError(
            "Input file(s) not found: " + ", ".join(str(p) for p in missing)
        )
    return paths


def build_context(
    exercise: Exercise,
    data_dir: Path,
    output_dir: Path | None = None,
    seed: int | None = None,
    config: AppConfig | None = None,
) -> ExerciseContext:
    """Context with settings merged over the exercise defaults."""
    settings: dict[str, Any] = dict(exercise.settings)
    if config is not None:
        settings.update(config.settings.get(exercise.key, {}))
        if seed is None:
            seed = config.seed
        if output_dir is None and config.output_dir:
            output_dir = Path(config.output_dir)
    return ExerciseContext(
        data_dir=data_dir,
        output_dir=output_dir,
        rng=random.Random(seed),
        settings=settings,
    )


def run_exercise(
    exercise: Exercise,
    inputs: list[Path] | None = None,
    context: ExerciseContext | None = None,
    config: AppConfig | None = None,
) -> ExerciseReport:
    """Run an exercise and collect its output.

    Args:
        exercise: Exercise to run
        inputs: Explicit input paths; resolved from config/defaults if omitted
        context: Routine context; built from the app config if omitted
        config: App config for configured inputs; loaded if omitted

    Returns:
        ExerciseReport with the produced lines and elapsed seconds
    """
    if config is None:
        config = load_app_config()
    if context is None:
        context = build_context(exercise, Path(config.data_dir), config=config)
    paths = resolve_inputs(exercise, inputs, context.data_dir, config)

    logger.info(
        "exercise_started",
        exercise=exercise.key,
        inputs=[str(p) for p in paths],
    )
    started = time.perf_counter()
    lines = exercise.routine(paths, context)
    elapsed = time.perf_counter() - started
    logger.info("exercise_finished", exercise=exercise.key, lines=len(lines), elapsed=round(elapsed, 3))

    return ExerciseReport(exercise=exercise, lines=lines, elapsed=elapsed)
