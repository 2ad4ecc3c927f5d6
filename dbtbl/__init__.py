"""db-tbl: schema constant class generator.

Introspects a MySQL, PostgreSQL or SQLite schema and generates constant
classes for table names, column names, enum values and foreign keys.
"""

from dbtbl.config import Config, load_config
from dbtbl.generators import FileTblGenerator, Generator, Psr4TblGenerator, create_generator
from dbtbl.hashing import extract_schema_hash, hash_schema
from dbtbl.naming import NamingResolver
from dbtbl.schema import SchemaReader, create_schema_reader

__version__ = "0.1.0"

__all__ = [
    "Config",
    "FileTblGenerator",
    "Generator",
    "NamingResolver",
    "Psr4TblGenerator",
    "SchemaReader",
    "create_generator",
    "create_schema_reader",
    "extract_schema_hash",
    "hash_schema",
    "load_config",
]
