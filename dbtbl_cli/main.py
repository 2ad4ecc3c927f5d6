"""Main entry point for db-tbl CLI tool."""

from pathlib import Path
from typing import NoReturn

import typer

from dbtbl.config import dump_config, init_config, load_config
from dbtbl.connection import create_database_engine, open_connection
from dbtbl.errors import (
    ConfigError,
    ConnectionFailedError,
    DatabaseNotFoundError,
    DbTblError,
    DriftError,
    NamingCollisionError,
    NoTablesError,
    SchemaError,
    TableNotFoundError,
    UnsupportedDriverError,
    WriteError,
)
from dbtbl.generators import create_generator, resolve_output_mode
from dbtbl.models import GenerationResult
from dbtbl.schema import create_schema_reader
from dbtbl_cli import __version__
from dbtbl_cli.output import (
    configure_logging,
    error_message,
    info_message,
    print_existing_files,
    print_instructions,
    print_summary,
    print_yaml,
    success_message,
    warning_message,
)

# Exit code for "schema changed" so CI can tell drift from failures
DRIFT_EXIT_CODE = 2

# Create main app
app = typer.Typer(
    name="db-tbl",
    help="Generate schema-based table constant classes",
    no_args_is_help=True,
    add_completion=False,
)

CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="Config file (default: $DBTBL_CONFIG or ./dbtbl.yaml)", dir_okay=False
)


def version_callback(show_version: bool) -> None:
    """Show version and exit.

    Args:
        show_version: Whether to show version
    """
    if show_version:
        typer.echo(f"db-tbl version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logs"),
) -> None:
    """Generate constant classes for table names, columns, enums and foreign keys.

    Examples:

        # Create a config template
        db-tbl init

        # Generate all classes into one file
        db-tbl generate

        # Generate one class per table (PSR-4)
        db-tbl generate --psr4

        # Fail in CI when the schema changed since the last generation
        db-tbl check
    """
    configure_logging(verbose)


# -------------------------------------------------
# Commands
# -------------------------------------------------


@app.command("generate")
def generate(
    config_path: Path | None = CONFIG_OPTION,
    psr4: bool = typer.Option(False, "--psr4", help="Generate one class per table (PSR-4)"),
    file: bool = typer.Option(False, "--file", help="Generate all classes into one file"),
    check: bool = typer.Option(False, "--check", help="Only compare the schema hash, write nothing"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Overwrite existing PSR-4 files without asking"),
) -> None:
    """Generate constant classes from the live database schema.

    Example:
        db-tbl generate --psr4 --config config/dbtbl.yaml
    """
    mode = "psr4" if psr4 else "file" if file else None
    run_generator(config_path, mode=mode, check=check, assume_yes=yes)


@app.command("check")
def check(
    config_path: Path | None = CONFIG_OPTION,
    psr4: bool = typer.Option(False, "--psr4", help="Check the PSR-4 registry file"),
    file: bool = typer.Option(False, "--file", help="Check the single output file"),
) -> None:
    """Compare the schema hash with the last generated output.

    Exits with code 2 when the schema changed.

    Example:
        db-tbl check
    """
    mode = "psr4" if psr4 else "file" if file else None
    run_generator(config_path, mode=mode, check=True, assume_yes=True)


@app.command("init")
def init(
    config_path: Path | None = CONFIG_OPTION,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
) -> None:
    """Create a commented config template.

    Example:
        db-tbl init --config config/dbtbl.yaml
    """
    try:
        path = init_config(config_path, force=force)
    except FileExistsError as e:
        error_message(str(e), hint="Use --force to overwrite it")
        raise typer.Exit(1) from e
    except OSError as e:
        error_message(f"Cannot create config file: {e}")
        raise typer.Exit(1) from e

    success_message(f"Config created: {path}")
    warning_message("Edit it and run 'db-tbl generate'.")


@app.command("show-config")
def show_config(config_path: Path | None = CONFIG_OPTION) -> None:
    """Print the effective configuration, with environment variables resolved.

    Example:
        db-tbl show-config
    """
    try:
        config = load_config(config_path)
    except DbTblError as e:
        handle_error(e)
    print_yaml(dump_config(config))


# -------------------------------------------------
# Execution
# -------------------------------------------------


def confirm_overwrite(files: list[Path]) -> bool:
    """Ask before a PSR-4 run overwrites existing files"""
    print_existing_files(files)
    return typer.confirm("Continue?", default=False)


def run_generator(config_path: Path | None, mode: str | None, check: bool, assume_yes: bool) -> None:
    """Load the config, connect, run the generator and report the outcome.

    The database connection is opened once and closed before reporting.
    """
    try:
        config = load_config(config_path)
        mode = resolve_output_mode(config, mode)

        engine = create_database_engine(config.database)
        try:
            with open_connection(engine) as connection:
                driver = engine.dialect.name
                database = config.database.name
                if not database and driver != "sqlite":
                    database = engine.url.database or ""

                schema = create_schema_reader(driver, connection, database, schema=config.database.db_schema)
                success_message(f"Database connected ({schema.driver})")

                generator = create_generator(
                    schema,
                    config,
                    mode=mode,
                    check_mode=check,
                    confirm_overwrite=None if assume_yes else confirm_overwrite,
                )
                if check:
                    info_message("Checking schema changes...")
                result = generator.run()
        finally:
            engine.dispose()
    except DbTblError as e:
        handle_error(e)

    report(result, generator.instructions())


def report(result: GenerationResult, instructions: list[str]) -> None:
    """Print the outcome of a run"""
    match result.status:
        case "unchanged":
            success_message("Schema unchanged")
        case "initial_required":
            warning_message("Initial generation required")
        case "aborted":
            info_message("Operation aborted by user.")
        case _:
            print_summary(result)
            print_instructions(instructions)


# -------------------------------------------------
# Errors
# -------------------------------------------------


def handle_error(e: DbTblError) -> NoReturn:
    """Print a targeted message for each error kind and exit"""
    match e:
        case DriftError():
            error_message("Schema changed", hint="Run 'db-tbl generate' to regenerate the classes")
            raise typer.Exit(DRIFT_EXIT_CODE) from e
        case NamingCollisionError():
            error_message(str(e), hint="Rename one of the tables or set output.naming.strategy to 'full'")
        case ConfigError():
            error_message(str(e), hint="Check your dbtbl.yaml (run 'db-tbl show-config' to inspect it)")
        case UnsupportedDriverError():
            error_message(str(e), hint="Set database.driver to mysql, pgsql or sqlite")
        case DatabaseNotFoundError():
            error_message(
                str(e),
                hint="Check 'database.name' ('database.path' for SQLite, 'database.schema' for PostgreSQL) in dbtbl.yaml",
            )
        case ConnectionFailedError():
            error_message(str(e), hint="Check your database host, port and credentials")
        case TableNotFoundError():
            error_message(str(e), hint="The table disappeared during introspection; run again")
        case SchemaError():
            error_message(str(e), hint="Check that the database user can read the schema catalog")
        case NoTablesError():
            error_message(str(e), hint="Check that database.name points at the right database")
        case WriteError():
            error_message(str(e), hint="Check permissions of output.path")
        case _:
            error_message(str(e))
    raise typer.Exit(1) from e


if __name__ == "__main__":
    app()
