"""Pydantic models for schema snapshots and generated artifacts"""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ============================================================================
# Schema Models
# ============================================================================


class ForeignKeyDescriptor(BaseModel):
    """A single-column foreign key from one table to another"""

    model_config = ConfigDict(frozen=True)

    from_table: str = Field(description="Table holding the foreign key column")
    from_column: str = Field(description="Foreign key column")
    to_table: str = Field(description="Referenced table")
    to_column: str = Field(description="Referenced column")

    def sort_key(self) -> tuple[str, str, str, str]:
        """Natural tuple order used for deterministic sorting"""
        return (self.from_table, self.from_column, self.to_table, self.to_column)


class TableDescriptor(BaseModel):
    """Everything the renderer needs to know about one table"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Table name")
    columns: tuple[str, ...] = Field(default=(), description="Column names in declaration order")
    enums: dict[str, str] = Field(default_factory=dict, description="Synthetic enum key to literal value")
    enum_columns: dict[str, tuple[str, ...]] = Field(
        default_factory=dict, description="Enum column to its allowed values"
    )
    foreign_keys: tuple[ForeignKeyDescriptor, ...] = Field(
        default=(), description="Foreign keys whose from_table is this table"
    )


class SchemaSnapshot(BaseModel):
    """Normalized, sorted view of a schema used as hash input"""

    model_config = ConfigDict(frozen=True)

    database: str = Field(description="Database name")
    tables: dict[str, tuple[str, ...]] = Field(default_factory=dict, description="Table name to column list")
    foreign_keys: tuple[ForeignKeyDescriptor, ...] = Field(default=(), description="Sorted foreign keys")

    @classmethod
    def build(
        cls,
        database: str,
        tables: dict[str, list[str]],
        foreign_keys: list[ForeignKeyDescriptor],
    ) -> "SchemaSnapshot":
        """Build a snapshot independent of the driver's iteration order.

        Tables are keyed in name order and tables without columns are dropped;
        foreign keys are sorted by their natural tuple order.
        """
        sorted_tables = {name: tuple(tables[name]) for name in sorted(tables) if tables[name]}
        sorted_fks = tuple(sorted(foreign_keys, key=lambda fk: fk.sort_key()))
        return cls(database=database, tables=sorted_tables, foreign_keys=sorted_fks)

    def hash_payload(self) -> dict[str, Any]:
        """Return the JSON-ready structure that gets hashed"""
        return {
            "database": self.database,
            "tables": {name: list(columns) for name, columns in self.tables.items()},
            "foreignKeys": [fk.model_dump() for fk in self.foreign_keys],
        }


# ============================================================================
# Naming Models
# ============================================================================


class AbbreviationConfig(BaseModel):
    """Settings for the short naming strategy"""

    model_config = ConfigDict(frozen=True)

    max_length: int = Field(default=15, ge=1, description="Maximum length of generated names")
    dictionary_lang: Literal["en", "pt", "es", "all"] = Field(default="en", description="Built-in dictionary")
    dictionary_path: str | None = Field(default=None, description="Custom YAML/JSON dictionary file")

    @field_validator("dictionary_lang", mode="before")
    @classmethod
    def _lowercase_lang(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value


class NamingConfig(BaseModel):
    """Naming rules for generated identifiers"""

    model_config = ConfigDict(frozen=True)

    strategy: Literal["full", "short"] = Field(default="full", description="full or short")
    abbreviation: AbbreviationConfig = Field(default_factory=AbbreviationConfig)


# ============================================================================
# Output Models
# ============================================================================


class GeneratedArtifact(BaseModel):
    """Rendered output, keyed by file name relative to the output directory"""

    model_config = ConfigDict(frozen=True)

    files: dict[str, str] = Field(description="File name to file content, in write order")
    schema_hash: str = Field(description="md5 hex digest embedded in the output")


GenerationStatus = Literal["generated", "unchanged", "initial_required", "aborted"]


class GenerationResult(BaseModel):
    """Outcome of one generator run"""

    status: GenerationStatus = Field(description="What the run did")
    database: str = Field(description="Introspected database name")
    schema_hash: str = Field(description="Hash of the current schema")
    tables: int = Field(default=0, ge=0, description="Number of tables found")
    foreign_keys: int = Field(default=0, ge=0, description="Number of foreign keys found")
    files: list[Path] = Field(default_factory=list, description="Files written")
