"""Database connection and engine management."""

import importlib
import logging
import re
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection, Engine, make_url
from sqlalchemy.exc import ArgumentError, DBAPIError, NoSuchModuleError

from dbtbl.config import DatabaseConfig
from dbtbl.errors import ConfigError, ConnectionFailedError, DatabaseNotFoundError
from dbtbl.schema import normalize_driver

logger = logging.getLogger(__name__)

# SQLAlchemy dialect+DBAPI used for each normalized driver
DRIVER_URL_SCHEMES: dict[str, str] = {
    "mysql": "mysql+pymysql",
    "pgsql": "postgresql+psycopg2",
    "sqlite": "sqlite",
}

DEFAULT_PORTS: dict[str, int] = {
    "mysql": 3306,
    "pgsql": 5432,
}


def sanitize_url(url: str | URL) -> str:
    """Sanitize a database URL by removing the password for logging.

    Args:
        url: The database URL

    Returns:
        URL string with the password replaced by ***
    """
    if isinstance(url, URL):
        return url.render_as_string(hide_password=True)

    try:
        parsed = urlparse(url)
        if parsed.password:
            return url.replace(f":{parsed.password}@", ":***@")
    except ValueError:
        # Malformed port or netloc, fall through to the regex
        pass

    return re.sub(r"://([^:/@]+):([^@/]+)@", r"://\1:***@", url)


def build_database_url(db: DatabaseConfig) -> URL:
    """Build the SQLAlchemy URL for the configured database.

    Args:
        db: Database configuration

    Returns:
        SQLAlchemy URL

    Raises:
        ConfigError: If the explicit URL is malformed
        UnsupportedDriverError: If the driver is unknown
    """
    if db.url:
        try:
            return make_url(db.url)
        except ArgumentError as e:
            raise ConfigError(f"Invalid database.url: {e}") from e

    driver = normalize_driver(db.driver)
    if driver == "sqlite":
        return URL.create("sqlite", database=db.path)

    return URL.create(
        DRIVER_URL_SCHEMES[driver],
        username=db.user or None,
        password=db.password or None,
        host=db.host,
        port=db.port or DEFAULT_PORTS[driver],
        database=db.name or None,
    )


def check_sqlite_file(url: URL) -> None:
    """Refuse to let SQLite create an empty database file for a mistyped path.

    Raises:
        DatabaseNotFoundError: If the database file does not exist
    """
    database = url.database
    # In-memory databases and file: URIs are left to SQLite
    if not database or database == ":memory:" or database.startswith("file:"):
        return
    if not Path(database).is_file():
        raise DatabaseNotFoundError(f"SQLite database file not found: {database}")


def load_connection_factory(reference: str) -> Any:
    """Import the callable named by a 'package.module:callable' reference.

    Raises:
        ConfigError: If the reference is malformed or cannot be imported
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise ConfigError(f"Invalid database.connection '{reference}'. Expected 'package.module:callable'")

    try:
        module = importlib.import_module(module_name)
        factory = getattr(module, attribute)
    except (ImportError, AttributeError) as e:
        raise ConfigError(f"Cannot load database.connection '{reference}': {e}") from e

    if not callable(factory):
        raise ConfigError(f"database.connection '{reference}' is not callable")
    return factory


def create_database_engine(db: DatabaseConfig) -> Engine:
    """Create a SQLAlchemy engine for the configured database.

    A configured connection factory takes precedence over the URL settings.

    Args:
        db: Database configuration

    Returns:
        SQLAlchemy Engine instance

    Raises:
        ConfigError: If the connection factory is invalid or returns something else than an Engine
        ConnectionFailedError: If the DBAPI driver is not installed
        DatabaseNotFoundError: If a SQLite database file does not exist
    """
    if db.connection:
        engine = load_connection_factory(db.connection)()
        if not isinstance(engine, Engine):
            raise ConfigError(f"database.connection '{db.connection}' must return a SQLAlchemy Engine")
        return engine

    url = build_database_url(db)
    logger.debug(f"Creating engine for {sanitize_url(url)}")

    # Add driver-specific connection arguments if needed
    connect_args: dict[str, Any] = {}
    if url.get_backend_name() == "sqlite":
        check_sqlite_file(url)
        connect_args = {"check_same_thread": False}

    try:
        return create_engine(url, connect_args=connect_args, echo=False)
    except (NoSuchModuleError, ImportError) as e:
        raise ConnectionFailedError(f"Database driver for '{url.drivername}' is not installed: {e}") from e


def open_connection(engine: Engine) -> Connection:
    """Open the single connection used for one run.

    Args:
        engine: SQLAlchemy engine

    Returns:
        Open connection, to be closed by the caller

    Raises:
        DatabaseNotFoundError: If the server reports that the database does not exist
        ConnectionFailedError: For any other connection failure (host, credentials, driver)
    """
    try:
        return engine.connect()
    except DBAPIError as e:
        message = str(e.orig) if e.orig is not None else str(e)
        lowered = message.lower()
        if "unknown database" in lowered or ("database" in lowered and "does not exist" in lowered):
            raise DatabaseNotFoundError(f"Database not found: {message}") from e
        raise ConnectionFailedError(f"Database connection failed ({sanitize_url(engine.url)}): {message}") from e
