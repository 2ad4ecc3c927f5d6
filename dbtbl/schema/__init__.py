"""Schema introspection for MySQL, PostgreSQL and SQLite.

This package provides one SchemaReader implementation per database engine,
all exposing the same interface.
"""

from sqlalchemy.engine import Connection

from dbtbl.errors import UnsupportedDriverError
from dbtbl.schema.base import SchemaReader, parse_check_constraint, parse_quoted_values
from dbtbl.schema.mysql import MySqlSchemaReader
from dbtbl.schema.postgres import PostgresSchemaReader
from dbtbl.schema.sqlite import SqliteSchemaReader

DRIVER_ALIASES: dict[str, str] = {
    "mysql": "mysql",
    "mariadb": "mysql",
    "pgsql": "pgsql",
    "postgres": "pgsql",
    "postgresql": "pgsql",
    "sqlite": "sqlite",
}


def normalize_driver(driver: str) -> str:
    """Map a configured driver name to mysql, pgsql or sqlite.

    Raises:
        UnsupportedDriverError: If the driver is unknown
    """
    normalized = DRIVER_ALIASES.get(driver.strip().lower())
    if normalized is None:
        raise UnsupportedDriverError(f"Unsupported database driver '{driver}'. Must be 'mysql', 'pgsql' or 'sqlite'")
    return normalized


def create_schema_reader(
    driver: str,
    connection: Connection,
    database: str = "",
    schema: str | None = None,
) -> SchemaReader:
    """Create the schema reader for a driver.

    Args:
        driver: Driver name (mysql, pgsql, sqlite and their aliases)
        connection: Open SQLAlchemy connection owned by the caller
        database: Database name (optional, read from the connection when empty)
        schema: PostgreSQL schema (optional, defaults to 'public')

    Returns:
        SchemaReader for the driver

    Raises:
        UnsupportedDriverError: If the driver is unknown
    """
    match normalize_driver(driver):
        case "mysql":
            return MySqlSchemaReader(connection, database)
        case "pgsql":
            return PostgresSchemaReader(connection, database, schema=schema)
        case _:
            return SqliteSchemaReader(connection, database)


__all__ = [
    "SchemaReader",
    "MySqlSchemaReader",
    "PostgresSchemaReader",
    "SqliteSchemaReader",
    "create_schema_reader",
    "normalize_driver",
    "parse_check_constraint",
    "parse_quoted_values",
]
