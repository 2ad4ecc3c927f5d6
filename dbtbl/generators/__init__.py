"""Generators turning a live schema into constant class files.

This package provides the single-file and PSR-4 output layouts.
"""

from collections.abc import Callable
from datetime import datetime

from dbtbl.config import OUTPUT_MODES, Config
from dbtbl.errors import ConfigError
from dbtbl.generators.base import ConfirmOverwrite, Generator
from dbtbl.generators.file import FileTblGenerator
from dbtbl.generators.psr4 import Psr4TblGenerator
from dbtbl.schema import SchemaReader


def resolve_output_mode(config: Config, mode: str | None = None) -> str:
    """Validate the output mode before any database or file I/O.

    Args:
        config: Loaded configuration
        mode: Mode override (defaults to output.mode)

    Returns:
        "file" or "psr4"

    Raises:
        ConfigError: If the mode is unknown, or psr4 is requested without a namespace
    """
    mode = mode or config.output_mode
    if mode not in OUTPUT_MODES:
        raise ConfigError(f"Invalid output mode '{mode}'. Allowed values: {', '.join(OUTPUT_MODES)}")
    if mode == "psr4" and not config.output_namespace:
        raise ConfigError("PSR-4 output requires 'output.namespace' to be set")
    return mode


def create_generator(
    schema: SchemaReader,
    config: Config,
    mode: str | None = None,
    check_mode: bool = False,
    confirm_overwrite: ConfirmOverwrite | None = None,
    clock: Callable[[], datetime] | None = None,
) -> Generator:
    """Create the generator for an output mode.

    Args:
        schema: Schema reader for the target database
        config: Loaded configuration
        mode: "file" or "psr4" (defaults to output.mode)
        check_mode: Only compare schema hashes, never write
        confirm_overwrite: Asked before overwriting existing PSR-4 files
        clock: Source of the generation timestamp

    Returns:
        Generator for the mode

    Raises:
        ConfigError: If the mode is unknown or its requirements are not met
    """
    if resolve_output_mode(config, mode) == "psr4":
        return Psr4TblGenerator(schema, config, check_mode, confirm_overwrite, clock)
    return FileTblGenerator(schema, config, check_mode, confirm_overwrite, clock)


__all__ = [
    "ConfirmOverwrite",
    "FileTblGenerator",
    "Generator",
    "Psr4TblGenerator",
    "create_generator",
    "resolve_output_mode",
]
