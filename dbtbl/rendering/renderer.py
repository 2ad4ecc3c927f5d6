"""Rendering of per-table constant classes and the table registry."""

import logging
from collections.abc import Iterable

from dbtbl.models import TableDescriptor
from dbtbl.naming.resolver import REGISTRY_CLASS_NAME, NamingResolver
from dbtbl.rendering.dialect import PhpDialect

logger = logging.getLogger(__name__)

TABLE_CONSTANT = "__table"
ALIAS_CONSTANT = "__alias"
ENUM_PREFIX = "enum_"
ALIAS_PREFIX = "as_"


class _ConstantNames:
    """Tracks constant names already declared in one class.

    A duplicate name gets the first free alternative, then a numeric suffix.
    """

    def __init__(self, class_name: str) -> None:
        self.class_name = class_name
        self._used: set[str] = set()

    def claim(self, name: str, alternatives: Iterable[str] = ()) -> str:
        if name not in self._used:
            self._used.add(name)
            return name

        candidates = [*alternatives, *(f"{name}_{n}" for n in range(2, len(self._used) + 3))]
        for candidate in candidates:
            if candidate not in self._used:
                logger.warning(f"Constant '{name}' already declared in {self.class_name}, using '{candidate}'")
                self._used.add(candidate)
                return candidate

        # Unreachable: there are more numeric candidates than used names
        raise AssertionError(f"No free constant name for '{name}' in {self.class_name}")


class TableClassRenderer:
    """Renders declaration blocks from table descriptors.

    Rendering is pure: it depends only on the descriptors and the naming
    resolver and performs no I/O.
    """

    def __init__(self, naming: NamingResolver, dialect: PhpDialect | None = None) -> None:
        self.naming = naming
        self.dialect = dialect or PhpDialect()

    def render(self, table: TableDescriptor) -> str:
        """Render the constant class of one table.

        Args:
            table: Table descriptor with columns, enums and outgoing foreign keys

        Returns:
            Class declaration text
        """
        d = self.dialect
        class_name = self.naming.table_class_name(table.name)
        alias = self.naming.table_alias(table.name)
        names = _ConstantNames(class_name)

        code = d.class_open(class_name, doc=f"`table: {table.name}` (alias: `{alias}`)")
        code += d.constant(names.claim(TABLE_CONSTANT), table.name)
        code += d.constant(names.claim(ALIAS_CONSTANT), f"{table.name} {alias}")

        # Columns
        if table.columns:
            code += "\n"
        for column in table.columns:
            code += d.constant(names.claim(self.naming.constant_name(column)), column)

        # Enums, grouped by originating column
        if table.enum_columns:
            for column, values in table.enum_columns.items():
                code += "\n" + d.comment(f"{column} values")
                for value in values:
                    const = self.naming.constant_name(f"{ENUM_PREFIX}{column}_{value}")
                    code += d.constant(names.claim(const), value)
        elif table.enums:
            code += "\n"
            for key, value in table.enums.items():
                code += d.constant(names.claim(self.naming.constant_name(f"{ENUM_PREFIX}{key}")), value)

        # Foreign keys
        outgoing = [fk for fk in table.foreign_keys if fk.from_table == table.name]
        if outgoing:
            code += "\n"
        for fk in outgoing:
            const = names.claim(
                self.naming.foreign_key_const_name(fk.to_table, pluralize=False),
                alternatives=[self.naming.constant_name(f"fk_{fk.from_column}")],
            )
            code += d.constant(const, fk.from_column, doc=f"references `{fk.to_table}` → `{fk.to_column}`")

        return code + d.class_close()

    def render_registry(self, tables: Iterable[str]) -> str:
        """Render the registry class holding one constant per table plus aliases.

        Args:
            tables: Table names in output order

        Returns:
            Class declaration text
        """
        d = self.dialect
        tables = list(tables)

        names = _ConstantNames(REGISTRY_CLASS_NAME)

        code = d.class_open(REGISTRY_CLASS_NAME)
        for table in tables:
            code += d.constant(names.claim(self.naming.table_const_name(table, "full")), table)

        code += "\n" + d.comment("Table aliases")
        for table in tables:
            const = self.naming.table_const_name(table, "full")
            alias = self.naming.table_alias(table)
            code += d.constant(names.claim(f"{ALIAS_PREFIX}{const}"), f"{table} {alias}")

        return code + d.class_close()
