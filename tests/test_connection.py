"""Tests for database URL building and connection handling."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from sqlalchemy.engine import make_url
from sqlalchemy.exc import OperationalError

from dbtbl.config import DatabaseConfig
from dbtbl.connection import (
    build_database_url,
    create_database_engine,
    load_connection_factory,
    open_connection,
    sanitize_url,
)
from dbtbl.errors import ConfigError, ConnectionFailedError, DatabaseNotFoundError, UnsupportedDriverError


def test_mysql_url() -> None:
    url = build_database_url(DatabaseConfig(driver="mysql", name="shop", user="app", password="pw"))

    assert url.drivername == "mysql+pymysql"
    assert url.host == "localhost"
    assert url.port == 3306
    assert url.database == "shop"
    assert url.username == "app"
    assert url.password == "pw"


def test_postgres_url_with_alias_and_port() -> None:
    url = build_database_url(DatabaseConfig(driver="postgres", host="db", port=5433, name="shop"))

    assert url.drivername == "postgresql+psycopg2"
    assert url.host == "db"
    assert url.port == 5433


def test_postgres_default_port() -> None:
    assert build_database_url(DatabaseConfig(driver="pgsql", name="shop")).port == 5432


def test_sqlite_url() -> None:
    url = build_database_url(DatabaseConfig(driver="sqlite", path="var/app.sqlite"))

    assert url.drivername == "sqlite"
    assert url.database == "var/app.sqlite"


def test_explicit_url_wins() -> None:
    url = build_database_url(DatabaseConfig(driver="mysql", url="postgresql://app:pw@db:5432/shop"))

    assert url.get_backend_name() == "postgresql"
    assert url.database == "shop"


def test_invalid_url() -> None:
    with pytest.raises(ConfigError, match="Invalid database.url"):
        build_database_url(DatabaseConfig(url="not a url"))


def test_unsupported_driver() -> None:
    with pytest.raises(UnsupportedDriverError):
        build_database_url(DatabaseConfig(driver="oracle"))


def test_sanitize_url() -> None:
    assert sanitize_url("postgresql://app:s3cret@db/shop") == "postgresql://app:***@db/shop"
    assert sanitize_url("sqlite:///app.sqlite") == "sqlite:///app.sqlite"
    assert "s3cret" not in sanitize_url(make_url("mysql+pymysql://app:s3cret@db/shop"))


def test_create_sqlite_engine(sqlite_db: Path) -> None:
    engine = create_database_engine(DatabaseConfig(driver="sqlite", path=str(sqlite_db)))

    assert engine.dialect.name == "sqlite"
    with open_connection(engine) as connection:
        assert not connection.closed
    engine.dispose()


def test_missing_sqlite_file_not_created(tmp_path: Path) -> None:
    missing = tmp_path / "typo.sqlite"

    with pytest.raises(DatabaseNotFoundError, match="SQLite database file not found"):
        create_database_engine(DatabaseConfig(driver="sqlite", path=str(missing)))

    assert not missing.exists()


def test_missing_sqlite_file_from_url(tmp_path: Path) -> None:
    with pytest.raises(DatabaseNotFoundError):
        create_database_engine(DatabaseConfig(url=f"sqlite:///{tmp_path / 'typo.sqlite'}"))


def test_in_memory_sqlite_allowed() -> None:
    engine = create_database_engine(DatabaseConfig(driver="sqlite", path=":memory:"))

    with open_connection(engine) as connection:
        assert not connection.closed
    engine.dispose()


# ============================================================================
# Connection factory
# ============================================================================


def test_connection_factory_malformed() -> None:
    with pytest.raises(ConfigError, match="Expected 'package.module:callable'"):
        load_connection_factory("myapp.db")


def test_connection_factory_missing_module() -> None:
    with pytest.raises(ConfigError, match="Cannot load"):
        load_connection_factory("no_such_module_for_dbtbl:get_engine")


def test_connection_factory_not_callable() -> None:
    with pytest.raises(ConfigError, match="is not callable"):
        load_connection_factory("os:sep")


def test_connection_factory_must_return_engine() -> None:
    with pytest.raises(ConfigError, match="must return a SQLAlchemy Engine"):
        create_database_engine(DatabaseConfig(connection="os:getcwd"))


# ============================================================================
# Connection errors
# ============================================================================


def failing_engine(message: str) -> MagicMock:
    engine = MagicMock()
    engine.url = make_url("mysql+pymysql://app:s3cret@db/shop")
    engine.connect.side_effect = OperationalError("connect", {}, Exception(message))
    return engine


def test_unknown_database() -> None:
    with pytest.raises(DatabaseNotFoundError, match="Unknown database 'shop'"):
        open_connection(failing_engine("(1049, \"Unknown database 'shop'\")"))


def test_postgres_database_does_not_exist() -> None:
    with pytest.raises(DatabaseNotFoundError):
        open_connection(failing_engine('FATAL:  database "shop" does not exist'))


def test_connection_refused() -> None:
    with pytest.raises(ConnectionFailedError) as exc_info:
        open_connection(failing_engine("Can't connect to MySQL server on 'db'"))

    assert "s3cret" not in str(exc_info.value)
    assert "app:***@db" in str(exc_info.value)
