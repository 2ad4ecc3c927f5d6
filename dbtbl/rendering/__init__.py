"""Constant class rendering."""

from dbtbl.rendering.dialect import PhpDialect
from dbtbl.rendering.renderer import TableClassRenderer

__all__ = ["PhpDialect", "TableClassRenderer"]
