"""Generator base class: introspect, hash, check or render, write."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from dbtbl.config import Config
from dbtbl.errors import DriftError, NoTablesError, WriteError
from dbtbl.hashing import extract_schema_hash, format_hash_marker, hash_schema
from dbtbl.models import ForeignKeyDescriptor, GeneratedArtifact, GenerationResult, SchemaSnapshot, TableDescriptor
from dbtbl.naming import NamingResolver
from dbtbl.rendering import PhpDialect, TableClassRenderer
from dbtbl.schema import SchemaReader

logger = logging.getLogger(__name__)

TOOL_NAME = "db-tbl"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Receives the existing files that would be overwritten, returns whether to proceed
ConfirmOverwrite = Callable[[list[Path]], bool]


class Generator(ABC):
    """Orchestrates one generation run.

    run() moves through Start -> TablesFetched -> HashComputed, then either
    stops after the check-mode comparison or renders, writes and reports.
    Subclasses only decide the output layout.
    """

    def __init__(
        self,
        schema: SchemaReader,
        config: Config,
        check_mode: bool = False,
        confirm_overwrite: ConfirmOverwrite | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.schema = schema
        self.config = config
        self.check_mode = check_mode
        self.confirm_overwrite = confirm_overwrite
        self.clock = clock or datetime.now
        self.dialect = PhpDialect()
        self.naming = NamingResolver(config.naming, reserved_words=self.dialect.reserved_words)
        self.renderer = TableClassRenderer(self.naming, self.dialect)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self) -> GenerationResult:
        """Run the generator.

        Returns:
            GenerationResult describing what happened

        Raises:
            NoTablesError: If the schema has no tables
            DriftError: In check mode, if the schema changed since the last generation
            WriteError: If the output cannot be written
            SchemaError: If introspection fails
            NamingCollisionError: If two tables resolve to the same identifier
        """
        tables = self.schema.list_tables()
        if not tables:
            raise NoTablesError()

        foreign_keys = self.schema.list_foreign_keys()
        snapshot = self.build_snapshot(tables, foreign_keys)
        current_hash = hash_schema(snapshot)
        logger.debug(f"Schema hash for '{snapshot.database}': {current_hash}")

        result = GenerationResult(
            status="generated",
            database=snapshot.database,
            schema_hash=current_hash,
            tables=len(tables),
            foreign_keys=len(foreign_keys),
        )

        if self.check_mode:
            return result.model_copy(update={"status": self.check_schema(current_hash)})

        self.naming.check_collisions(tables)
        artifact = self.render(tables, foreign_keys, current_hash)

        if not self.confirm(artifact):
            logger.info("Generation aborted, existing files kept")
            return result.model_copy(update={"status": "aborted"})

        written = self.write(artifact)
        return result.model_copy(update={"files": written})

    def build_snapshot(self, tables: list[str], foreign_keys: list[ForeignKeyDescriptor]) -> SchemaSnapshot:
        """Build the hash input from the live schema"""
        columns = {table: self.schema.list_columns(table) for table in tables}
        return SchemaSnapshot.build(self.schema.database_name(), columns, foreign_keys)

    def check_schema(self, current_hash: str) -> str:
        """Compare the current hash with the one embedded in the existing output.

        Returns:
            "initial_required" when there is no previous output, "unchanged" when the hashes match

        Raises:
            DriftError: If the hashes differ
        """
        saved_hash = extract_schema_hash(self.check_file)

        if saved_hash is None:
            logger.info(f"No schema hash found in {self.check_file}, initial generation required")
            return "initial_required"

        if saved_hash == current_hash:
            logger.info("Schema unchanged")
            return "unchanged"

        raise DriftError(saved_hash, current_hash)

    # ------------------------------------------------------------------
    # Layout hooks
    # ------------------------------------------------------------------

    @property
    @abstractmethod
    def check_file(self) -> Path:
        """Artifact holding the schema hash marker"""

    @abstractmethod
    def render(
        self, tables: list[str], foreign_keys: list[ForeignKeyDescriptor], schema_hash: str
    ) -> GeneratedArtifact:
        """Render every output file without touching the filesystem"""

    def confirm(self, artifact: GeneratedArtifact) -> bool:
        """Decide whether the artifact may be written"""
        return True

    def instructions(self) -> list[str]:
        """Post-generation guidance shown to the user"""
        return []

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def describe_tables(self, tables: list[str], foreign_keys: list[ForeignKeyDescriptor]) -> list[TableDescriptor]:
        return [self.schema.describe_table(table, foreign_keys) for table in tables]

    def header_lines(self, schema_hash: str, title: str) -> list[str]:
        """Doc block lines carrying the hash marker and the generation timestamp"""
        return [
            title,
            "",
            format_hash_marker(schema_hash),
            f"@generated   {self.clock().strftime(TIMESTAMP_FORMAT)}",
            f"@tool        {TOOL_NAME}",
            "",
            "AUTO-GENERATED FILE - DO NOT EDIT",
            "Any manual changes will be lost on regeneration.",
        ]

    def ensure_directory(self) -> Path:
        """Create the output directory if missing.

        Raises:
            WriteError: If the directory cannot be created
        """
        directory = self.config.output_path
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WriteError("Cannot create output directory", directory) from e
        return directory

    def write(self, artifact: GeneratedArtifact) -> list[Path]:
        """Write every file of the artifact in order.

        Files are written one by one; a failure leaves the files written so
        far in place.

        Raises:
            WriteError: If the directory or a file cannot be written
        """
        directory = self.ensure_directory()

        written: list[Path] = []
        for name, content in artifact.files.items():
            path = directory / name
            try:
                path.write_text(content, encoding="utf-8", newline="\n")
            except OSError as e:
                raise WriteError("Failed to write output file", path) from e
            logger.debug(f"Wrote {path}")
            written.append(path)

        return written
