"""Pytest configuration and shared fixtures"""

import sqlite3
from collections.abc import Callable, Iterator
from datetime import datetime
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection

from dbtbl.config import Config, DatabaseConfig, OutputConfig
from dbtbl.schema import SqliteSchemaReader

SHOP_SCHEMA = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY,
    email TEXT NOT NULL,
    name TEXT
);

CREATE TABLE orders (
    id INTEGER PRIMARY KEY,
    user_id INTEGER NOT NULL REFERENCES users(id),
    status TEXT NOT NULL CHECK (status IN ('pending', 'paid', 'shipped')),
    created_at TEXT
);

CREATE TABLE order_items (
    id INTEGER PRIMARY KEY,
    order_id INTEGER NOT NULL REFERENCES orders(id),
    product TEXT NOT NULL,
    quantity INTEGER NOT NULL
);
"""

GENERATED_AT = datetime(2024, 1, 15, 10, 30, 0)


def create_sqlite_db(path: Path, schema: str = SHOP_SCHEMA) -> Path:
    """Create a SQLite database file from a DDL script"""
    conn = sqlite3.connect(path)
    conn.executescript(schema)
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def make_sqlite_db(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a factory creating a named SQLite database from a DDL script"""

    def factory(name: str, schema: str) -> Path:
        return create_sqlite_db(tmp_path / name, schema)

    return factory


@pytest.fixture
def sqlite_db(tmp_path: Path) -> Path:
    """Return a SQLite database with users, orders and order_items tables"""
    return create_sqlite_db(tmp_path / "shop.sqlite")


@pytest.fixture
def sqlite_connection(sqlite_db: Path) -> Iterator[Connection]:
    """Return an open SQLAlchemy connection to the sample database"""
    engine = create_engine(f"sqlite:///{sqlite_db}")
    with engine.connect() as connection:
        yield connection
    engine.dispose()


@pytest.fixture
def sqlite_reader(sqlite_connection: Connection) -> SqliteSchemaReader:
    """Return a schema reader for the sample database"""
    return SqliteSchemaReader(sqlite_connection)


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Return the directory generated files are written to"""
    return tmp_path / "out"


@pytest.fixture
def file_config(sqlite_db: Path, output_dir: Path) -> Config:
    """Return a single-file output configuration"""
    return Config(
        database=DatabaseConfig(driver="sqlite", path=str(sqlite_db)),
        output=OutputConfig(mode="file", path=str(output_dir)),
    )


@pytest.fixture
def psr4_config(sqlite_db: Path, output_dir: Path) -> Config:
    """Return a PSR-4 output configuration"""
    return Config(
        database=DatabaseConfig(driver="sqlite", path=str(sqlite_db)),
        output=OutputConfig(mode="psr4", path=str(output_dir), namespace="App\\Schema"),
    )


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Return a clock that always reports the same generation timestamp"""
    return lambda: GENERATED_AT
