"""Schema reader interface shared by all database engines."""

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from sqlalchemy import Enum, inspect, text
from sqlalchemy.engine import Connection, Inspector, RowMapping
from sqlalchemy.exc import NoSuchTableError, SQLAlchemyError

from dbtbl.errors import SchemaError, TableNotFoundError
from dbtbl.models import ForeignKeyDescriptor, TableDescriptor

logger = logging.getLogger(__name__)

# A single-quoted SQL literal, with '' as the escaped quote
_QUOTED_VALUE = re.compile(r"'((?:[^']|'')*)'")

# col IN ('a', 'b'), with the column optionally quoted (SQLite, MySQL)
_CHECK_IN = re.compile(
    r"""["`\[]?(\w+)["`\]]?\s+IN\s*\(((?:[^()']|'(?:[^']|'')*')+)\)""",
    re.IGNORECASE,
)

# PostgreSQL stores IN lists as (col)::text = ANY (ARRAY['a'::text, 'b'::text])
_CHECK_ANY = re.compile(
    r""""?(\w+)"?\)?(?:::[\w ]+)?\s*=\s*ANY\s*\(+\s*ARRAY\[((?:[^\]']|'(?:[^']|'')*')+)\]""",
    re.IGNORECASE,
)


def parse_quoted_values(definition: str) -> list[str]:
    """Extract the literals of a quoted value list.

    Examples:
        "enum('draft','it''s done')" -> ["draft", "it's done"]
    """
    return [value.replace("''", "'") for value in _QUOTED_VALUE.findall(definition)]


def parse_check_constraint(sqltext: str) -> list[tuple[str, list[str]]]:
    """Find "column in a list of string literals" conditions in a CHECK constraint.

    Args:
        sqltext: Constraint body as reflected by SQLAlchemy

    Returns:
        (column, values) pairs; conditions without string literals are skipped

    Examples:
        "status IN ('a', 'b')" -> [("status", ["a", "b"])]
        "((status)::text = ANY ((ARRAY['a'::character varying])::text[]))" -> [("status", ["a"])]
    """
    found = []
    for pattern in (_CHECK_IN, _CHECK_ANY):
        for match in pattern.finditer(sqltext):
            values = parse_quoted_values(match.group(2))
            if values:
                found.append((match.group(1), values))
    return found


class SchemaReader(ABC):
    """Reads normalized schema information from a live database.

    Generators and renderers only depend on this interface. Tables, columns,
    enum columns and foreign keys are reflected with the SQLAlchemy Inspector
    on the connection owned by the caller; engines only differ in how the
    database name and reflected schema are resolved.
    """

    driver: str = ""

    def __init__(self, connection: Connection, database: str = "") -> None:
        self.connection = connection
        self._database = database

    @abstractmethod
    def database_name(self) -> str:
        """Return the name of the introspected database"""

    # ------------------------------------------------------------------
    # Catalog operations
    # ------------------------------------------------------------------

    def list_tables(self) -> list[str]:
        """Return base table names in lexical order"""
        return self._table_names(inspect(self.connection))

    def list_columns(self, table: str) -> list[str]:
        """Return column names in catalog declaration order.

        Raises:
            TableNotFoundError: If the table does not exist
        """
        return [column["name"] for column in self._columns(inspect(self.connection), table)]

    def list_enum_columns(self, table: str) -> dict[str, list[str]]:
        """Return enum-like columns of a table mapped to their allowed values.

        Native enum types (MySQL ENUM, PostgreSQL enum types) are read from the
        reflected column type. Any other column restricted by a
        CHECK (col IN (...)) constraint counts as an enum too. Columns keep
        their declaration order.
        """
        inspector = inspect(self.connection)
        columns = self._columns(inspector, table)

        found: dict[str, list[str]] = {}
        for column in columns:
            if isinstance(column["type"], Enum) and column["type"].enums:
                found[column["name"]] = list(column["type"].enums)

        names = {column["name"].lower(): column["name"] for column in columns}
        for constraint in self._check_constraints(inspector, table):
            for name, values in parse_check_constraint(constraint["sqltext"]):
                column_name = names.get(name.lower())
                if column_name is not None and column_name not in found:
                    found[column_name] = values

        return {column["name"]: found[column["name"]] for column in columns if column["name"] in found}

    def list_foreign_keys(self) -> list[ForeignKeyDescriptor]:
        """Return every foreign key of the database, one descriptor per column pair"""
        inspector = inspect(self.connection)
        schema = self._schema(inspector)

        foreign_keys: list[ForeignKeyDescriptor] = []
        for table in self._table_names(inspector):
            for constraint in self._reflect(inspector, "get_foreign_keys", table, schema=schema):
                referred = constraint["referred_columns"] or self._primary_key(
                    inspector, constraint["referred_table"], constraint.get("referred_schema") or schema
                )
                for from_column, to_column in zip(constraint["constrained_columns"], referred):
                    foreign_keys.append(
                        ForeignKeyDescriptor(
                            from_table=table,
                            from_column=from_column,
                            to_table=constraint["referred_table"],
                            to_column=to_column,
                        )
                    )
        return sorted(foreign_keys, key=lambda fk: fk.sort_key())

    # ------------------------------------------------------------------
    # Derived operations
    # ------------------------------------------------------------------

    def list_enums(self, table: str) -> dict[str, str]:
        """Return synthetic enum keys (<column>_<value>) mapped to their literal value"""
        return {
            f"{column}_{value}": value for column, values in self.list_enum_columns(table).items() for value in values
        }

    def describe_table(self, table: str, foreign_keys: Sequence[ForeignKeyDescriptor] = ()) -> TableDescriptor:
        """Assemble everything the renderer needs for one table.

        Args:
            table: Table name
            foreign_keys: Foreign keys of the whole database; only those leaving this table are kept

        Returns:
            TableDescriptor for the table
        """
        enum_columns = self.list_enum_columns(table)
        return TableDescriptor(
            name=table,
            columns=tuple(self.list_columns(table)),
            enums={f"{column}_{value}": value for column, values in enum_columns.items() for value in values},
            enum_columns={column: tuple(values) for column, values in enum_columns.items()},
            foreign_keys=tuple(fk for fk in foreign_keys if fk.from_table == table),
        )

    # ------------------------------------------------------------------
    # Reflection helpers
    # ------------------------------------------------------------------

    def _schema(self, inspector: Inspector) -> str | None:
        """Schema passed to reflection calls, None for the connection default"""
        return None

    def _reflect(self, inspector: Inspector, method: str, *args: Any, **kwargs: Any) -> Any:
        """Run one Inspector call.

        Raises:
            NoSuchTableError: Passed through for the caller to decide
            SchemaError: If reflection fails for any other reason
        """
        logger.debug(f"[{self.driver}] {method} {', '.join(map(str, args))} {kwargs}")
        try:
            return getattr(inspector, method)(*args, **kwargs)
        except NoSuchTableError:
            raise
        except SQLAlchemyError as e:
            raise SchemaError(f"Catalog query failed on {self.driver}: {e}") from e

    def _table_names(self, inspector: Inspector) -> list[str]:
        return sorted(self._reflect(inspector, "get_table_names", schema=self._schema(inspector)))

    def _columns(self, inspector: Inspector, table: str) -> list[dict[str, Any]]:
        schema = self._schema(inspector)
        try:
            return list(self._reflect(inspector, "get_columns", table, schema=schema))
        except NoSuchTableError:
            # PostgreSQL allows tables without columns, which some dialects report as missing
            if self._reflect(inspector, "has_table", table, schema=schema):
                return []
            where = f"schema '{schema}'" if schema else f"database '{self.database_name()}'"
            raise TableNotFoundError(f"Table '{table}' not found in {where}") from None

    def _check_constraints(self, inspector: Inspector, table: str) -> list[dict[str, Any]]:
        try:
            return list(self._reflect(inspector, "get_check_constraints", table, schema=self._schema(inspector)))
        except NotImplementedError:
            logger.debug(f"CHECK constraint reflection not supported on {self.driver}")
            return []

    def _primary_key(self, inspector: Inspector, table: str, schema: str | None) -> list[str]:
        """Primary key columns referenced by "REFERENCES table" without a column list"""
        columns = self._reflect(inspector, "get_pk_constraint", table, schema=schema).get("constrained_columns")
        if not columns:
            logger.debug(f"No primary key on '{table}', assuming rowid")
            return ["rowid"]
        return list(columns)

    # ------------------------------------------------------------------
    # Raw catalog queries, for what the Inspector does not expose
    # ------------------------------------------------------------------

    def _fetch(self, sql: str, **params: Any) -> Sequence[RowMapping]:
        """Run a catalog query and return its rows as mappings.

        Raises:
            SchemaError: If the query fails
        """
        logger.debug(f"[{self.driver}] {' '.join(sql.split())} {params}")
        try:
            return self.connection.execute(text(sql), params).mappings().all()
        except SQLAlchemyError as e:
            raise SchemaError(f"Catalog query failed on {self.driver}: {e}") from e

    def _scalar(self, sql: str, **params: Any) -> Any:
        """Run a catalog query and return the first column of the first row"""
        rows = self._fetch(sql, **params)
        if not rows:
            return None
        return next(iter(rows[0].values()))
