"""PostgreSQL schema reader."""

from sqlalchemy.engine import Connection, Inspector

from dbtbl.errors import DatabaseNotFoundError
from dbtbl.schema.base import SchemaReader

DEFAULT_SCHEMA = "public"


class PostgresSchemaReader(SchemaReader):
    """Reads tables, columns, enum columns and foreign keys of one PostgreSQL schema.

    Enum values of native enum types come back in their declared sort order.
    """

    driver = "pgsql"

    def __init__(self, connection: Connection, database: str = "", schema: str | None = None) -> None:
        super().__init__(connection, database)
        self.schema = schema or DEFAULT_SCHEMA
        self._verified = False

    def database_name(self) -> str:
        if not self._database:
            self._database = self._scalar("SELECT current_database()") or ""
        return self._database

    def _schema(self, inspector: Inspector) -> str:
        """Return the schema name after checking once that it exists"""
        if not self._verified:
            if not self._reflect(inspector, "has_schema", self.schema):
                raise DatabaseNotFoundError(
                    f"Schema '{self.schema}' does not exist in database '{self.database_name()}'"
                )
            self._verified = True
        return self.schema
