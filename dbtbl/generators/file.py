"""Single-file output: the registry and every table class in one file."""

import os
from pathlib import Path

from dbtbl.generators.base import Generator
from dbtbl.models import ForeignKeyDescriptor, GeneratedArtifact


class FileTblGenerator(Generator):
    """Generates all schema classes into a single PHP file.

    Output:
     - Tbl (table registry)
     - Tbl<Table> (one class per table)
    """

    @property
    def check_file(self) -> Path:
        return self.config.output_file

    def render(
        self, tables: list[str], foreign_keys: list[ForeignKeyDescriptor], schema_hash: str
    ) -> GeneratedArtifact:
        d = self.dialect

        code = d.open_tag()
        code += d.doc_block(self.header_lines(schema_hash, "Database table constants"))
        code += d.namespace(self.config.output_namespace)
        code += self.renderer.render_registry(tables)

        for table in self.describe_tables(tables, foreign_keys):
            code += "\n" + self.renderer.render(table)

        code += "\n" + d.end_of_file()

        return GeneratedArtifact(files={self.config.output.file: code}, schema_hash=schema_hash)

    def instructions(self) -> list[str]:
        """Composer autoload snippet for the generated file"""
        output_file = self.config.output_file
        try:
            relative = output_file.resolve().relative_to(Path.cwd().resolve())
        except ValueError:
            relative = output_file
        relative_path = str(relative).replace(os.sep, "/")

        return [
            "To use generated classes globally, add to composer.json:",
            '  "autoload": {',
            '    "files": [',
            f'      "{relative_path}"',
            "    ]",
            "  }",
            "",
            "Then run: composer dump-autoload",
        ]
