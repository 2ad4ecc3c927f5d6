"""Error taxonomy for schema constant generation.

Every failure condition maps to exactly one of these classes so the CLI can
give targeted guidance. Nothing in the core catches them.
"""

from pathlib import Path


class DbTblError(Exception):
    """Base class for all db-tbl errors"""


class ConfigError(DbTblError):
    """Invalid or incomplete configuration"""


class NamingCollisionError(ConfigError):
    """Two distinct tables resolve to the same generated identifier"""

    def __init__(self, identifier: str, tables: list[str]) -> None:
        self.identifier = identifier
        self.tables = tables
        super().__init__(f"Tables {', '.join(repr(t) for t in tables)} all resolve to identifier '{identifier}'")


class SchemaError(DbTblError):
    """Catalog query failed or the schema could not be read"""


class ConnectionFailedError(SchemaError):
    """Could not open a connection to the database"""


class DatabaseNotFoundError(SchemaError):
    """The configured database or schema does not exist"""


class TableNotFoundError(SchemaError):
    """A requested table does not exist"""


class UnsupportedDriverError(SchemaError):
    """The configured driver has no schema reader"""


class NoTablesError(DbTblError):
    """The database schema contains no tables"""

    def __init__(self, message: str = "No tables found in database schema") -> None:
        super().__init__(message)


class DriftError(DbTblError):
    """The live schema no longer matches the hash embedded in the generated output"""

    def __init__(self, saved_hash: str, current_hash: str) -> None:
        self.saved_hash = saved_hash
        self.current_hash = current_hash
        super().__init__(f"Schema changed (saved md5:{saved_hash}, current md5:{current_hash})")


class WriteError(DbTblError):
    """Output directory or file could not be written, or a previous artifact could not be read"""

    def __init__(self, message: str, path: Path) -> None:
        self.path = path
        super().__init__(f"{message}: {path}")
