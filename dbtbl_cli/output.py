"""Output formatting utilities for CLI."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax

from dbtbl.models import GenerationResult

console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Route log records through Rich on stderr.

    Args:
        verbose: Show debug records instead of warnings only
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def print_yaml(text: str) -> None:
    """Pretty print YAML to the terminal with syntax highlighting"""
    console.print(Syntax(text, "yaml", theme="monokai", line_numbers=False))


def error_message(message: str, hint: str | None = None) -> None:
    """Print error message.

    Args:
        message: Error message
        hint: Optional hint for user
    """
    typer.secho(f"✗ Error: {message}", fg=typer.colors.RED, err=True)
    if hint:
        typer.secho(f"  Hint: {hint}", fg=typer.colors.YELLOW, err=True)


def success_message(message: str) -> None:
    """Print success message.

    Args:
        message: Success message
    """
    typer.secho(f"✓ {message}", fg=typer.colors.GREEN)


def warning_message(message: str) -> None:
    typer.secho(f"⚠ {message}", fg=typer.colors.YELLOW)


def info_message(message: str) -> None:
    typer.secho(f"ℹ {message}", fg=typer.colors.CYAN)


def print_summary(result: GenerationResult) -> None:
    """Print what a generation run wrote.

    Args:
        result: Outcome of the run
    """
    if len(result.files) == 1:
        success_message(f"Generated: {result.files[0]}")
    else:
        directory = result.files[0].parent if result.files else Path(".")
        success_message(f"Generated {len(result.files)} files in {directory}")

    typer.echo(f"  > Tables: {result.tables}")
    typer.echo(f"  > Foreign Keys: {result.foreign_keys}")
    typer.echo(f"  > Database: {result.database}")
    typer.echo(f"  > Schema hash: md5:{result.schema_hash}")


def print_instructions(lines: list[str]) -> None:
    """Print post-generation guidance"""
    if not lines:
        return
    typer.echo()
    info_message(lines[0])
    for line in lines[1:-1]:
        typer.echo(line)
    if len(lines) > 1:
        typer.secho(lines[-1], fg=typer.colors.MAGENTA)


def print_existing_files(files: list[Path]) -> None:
    """List files that a PSR-4 run may overwrite"""
    warning_message("The output directory already contains PHP files:")
    for file in files:
        typer.secho(f"  - {file.name}", fg=typer.colors.YELLOW)
    typer.echo()
    warning_message("Generating in this directory may overwrite existing classes.")
