"""CLI entry point for the coursework exercises.

Usage:
    coursework --hw=3
    coursework --aoc=7 --input puzzle.txt
    coursework --list

Exactly one of --hw or --aoc selects the exercise to run.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from coursework.config.app_config import ConfigError, load_app_config
from coursework.core.exercise import ExerciseError
from coursework.core.registry import SelectorError, list_exercises, select_exercise
from coursework.core.runner import build_context, run_exercise
from coursework.utils.logging import bind_context, clear_context, setup_logging

app = typer.Typer(
    name="coursework",
    help="Genome 540 homework and Advent of Code 2022 exercises.",
    add_completion=False,
)

console = Console()


def _print_exercises() -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Selector", style="cyan", width=10)
    table.add_column("Title", width=28)
    table.add_column("Inputs", style="dim")
    for exercise in list_exercises():
        table.add_row(
            f"--{exercise.kind.value}={exercise.index}",
            exercise.title,
            ", ".join(exercise.inputs),
        )
    console.print(table)


@app.command()
def main(
    hw: int | None = typer.Option(None, "--hw", help="Homework exercise to run"),
    aoc: int | None = typer.Option(None, "--aoc", help="Advent of Code day to run"),
    inputs: list[Path] | None = typer.Option(
        None, "--input", "-i", help="Input file (repeat for exercises with several)"
    ),
    data_dir: Path | None = typer.Option(
        None,
        "--data-dir",
        envvar="COURSEWORK_DATA_DIR",
        help="Directory default inputs are resolved against",
    ),
    output_dir: Path | None = typer.Option(
        None, "--output-dir", help="Directory for generated files"
    ),
    seed: int | None = typer.Option(None, "--seed", help="Seed for simulations"),
    list_only: bool = typer.Option(
        False, "--list", help="List registered exercises instead of running one"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
) -> None:
    """Run one homework exercise or Advent of Code day."""
    try:
        config = load_app_config()
    except ConfigError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    setup_logging("DEBUG" if verbose else config.log_level)

    if list_only:
        if hw is not None or aoc is not None:
            console.print("[red]✗ --list cannot be combined with --hw or --aoc[/red]")
            raise typer.Exit(code=1)
        _print_exercises()
        return

    try:
        exercise = select_exercise(hw, aoc)
    except SelectorError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    bind_context(exercise=exercise.key)
    context = build_context(
        exercise,
        data_dir=data_dir or Path(config.data_dir),
        output_dir=output_dir,
        seed=seed,
        config=config,
    )

    console.print(
        f"[blue]Running {exercise.kind.label} '{exercise.index}': {exercise.title}[/blue]"
    )
    try:
        report = run_exercise(exercise, inputs, context, config)
    except ExerciseError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)
    except OSError as e:
        console.print(f"[red]✗ Could not read input: {e}[/red]")
        raise typer.Exit(code=1)
    finally:
        clear_context()

    for line in report.lines:
        console.print(line, markup=False, highlight=False, soft_wrap=True)
    console.print(
        f"[green]✓ {exercise.kind.short_label} '{exercise.index}' "
        f"completed in {report.elapsed:.3f}s[/green]"
    )


if __name__ == "__main__":
    app()
