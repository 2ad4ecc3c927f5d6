"""SQLite schema reader."""

from pathlib import Path

from dbtbl.schema.base import SchemaReader


class SqliteSchemaReader(SchemaReader):
    """Reads tables, columns, enum columns and foreign keys of a SQLite database.

    SQLite has no enum type; enum columns come from CHECK (col IN (...))
    constraints in the table definition.
    """

    driver = "sqlite"

    def database_name(self) -> str:
        if not self._database:
            # The Inspector has no notion of the attached file
            file = self._scalar("SELECT file FROM pragma_database_list WHERE name = 'main'")
            self._database = Path(file).stem if file else "main"
        return self._database
