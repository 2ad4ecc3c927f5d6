"""MySQL / MariaDB schema reader."""

from sqlalchemy.engine import Connection, Inspector

from dbtbl.errors import DatabaseNotFoundError
from dbtbl.schema.base import SchemaReader


class MySqlSchemaReader(SchemaReader):
    """Reads tables, columns, enum columns and foreign keys of one MySQL database.

    MySQL calls a database a schema, so the database name is what gets
    reflected.
    """

    driver = "mysql"

    def __init__(self, connection: Connection, database: str = "") -> None:
        super().__init__(connection, database)
        self._verified = False

    def database_name(self) -> str:
        if not self._database:
            self._database = self._scalar("SELECT DATABASE()") or ""
        if not self._database:
            raise DatabaseNotFoundError("No database selected; set database.name in the configuration")
        return self._database

    def _schema(self, inspector: Inspector) -> str:
        """Return the database name after checking once that it exists"""
        database = self.database_name()
        if not self._verified:
            if not self._reflect(inspector, "has_schema", database):
                raise DatabaseNotFoundError(f"Database '{database}' does not exist")
            self._verified = True
        return database
