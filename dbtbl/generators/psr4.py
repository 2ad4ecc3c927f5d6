"""PSR-4 output: one class file per table plus the registry file."""

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from dbtbl.config import Config
from dbtbl.errors import ConfigError
from dbtbl.generators.base import ConfirmOverwrite, Generator
from dbtbl.models import ForeignKeyDescriptor, GeneratedArtifact
from dbtbl.naming import REGISTRY_CLASS_NAME
from dbtbl.schema import SchemaReader

logger = logging.getLogger(__name__)


class Psr4TblGenerator(Generator):
    """Generates one PHP class per table, following PSR-4 directory and namespace conventions.

    Requirements:
     - output.namespace must be defined

    Only the registry file (Tbl.php) carries the schema hash header. Files are
    written one at a time with no rollback, so a failure mid-run leaves a mix
    of old and new classes in the output directory.
    """

    def __init__(
        self,
        schema: SchemaReader,
        config: Config,
        check_mode: bool = False,
        confirm_overwrite: ConfirmOverwrite | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not config.output_namespace:
            raise ConfigError("PSR-4 output requires 'output.namespace' to be set")
        super().__init__(schema, config, check_mode, confirm_overwrite, clock)

    @property
    def check_file(self) -> Path:
        return self.config.output_path / self.dialect.file_name(REGISTRY_CLASS_NAME)

    def render(
        self, tables: list[str], foreign_keys: list[ForeignKeyDescriptor], schema_hash: str
    ) -> GeneratedArtifact:
        d = self.dialect
        preamble = d.open_tag() + d.namespace(self.config.output_namespace)

        files: dict[str, str] = {}
        for table in self.describe_tables(tables, foreign_keys):
            class_name = self.naming.table_class_name(table.name)
            files[d.file_name(class_name)] = preamble + self.renderer.render(table)

        # Registry last, so a partial write never carries the new hash
        title = f'Database schema mapping for "{self.schema.database_name()}"'
        files[d.file_name(REGISTRY_CLASS_NAME)] = (
            preamble + d.doc_block(self.header_lines(schema_hash, title)) + self.renderer.render_registry(tables)
        )

        return GeneratedArtifact(files=files, schema_hash=schema_hash)

    def existing_files(self) -> list[Path]:
        """Generated-language files already present in the output directory"""
        directory = self.config.output_path
        if not directory.is_dir():
            return []
        return sorted(directory.glob(f"*{self.dialect.file_extension}"))

    def confirm(self, artifact: GeneratedArtifact) -> bool:
        existing = self.existing_files()
        if not existing or self.confirm_overwrite is None:
            return True

        logger.debug(f"{len(existing)} existing files in {self.config.output_path}")
        return self.confirm_overwrite(existing)
