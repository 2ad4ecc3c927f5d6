"""Identifier naming, abbreviation and alias resolution."""

import logging
import re
import unicodedata
from collections import defaultdict
from collections.abc import Iterable
from functools import cached_property

from dbtbl.errors import NamingCollisionError
from dbtbl.models import NamingConfig
from dbtbl.naming.dictionaries import load_dictionary
from dbtbl.naming.inflection import pluralize_last, singularize_last

logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_INVALID_CHARS = re.compile(r"[^0-9A-Za-z_]+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SEGMENT_SEPARATOR = re.compile(r"[^0-9A-Za-z]+")

# Shortest length a segment is truncated to by the short strategy
MIN_SEGMENT_LENGTH = 3

REGISTRY_CLASS_NAME = "Tbl"

# Aliases that would break "table alias" when pasted into SQL
SQL_KEYWORDS: frozenset[str] = frozenset(
    {
        "add", "all", "alter", "and", "any", "as", "asc", "between", "by", "case", "check", "column",
        "create", "cross", "default", "delete", "desc", "distinct", "do", "drop", "else", "end", "exists",
        "for", "from", "full", "group", "having", "if", "in", "index", "inner", "insert", "into", "is",
        "join", "key", "left", "like", "limit", "not", "null", "of", "on", "or", "order", "outer",
        "primary", "right", "select", "set", "table", "then", "to", "union", "unique", "update",
        "using", "values", "when", "where", "with",
    }
)


def _ascii(value: str) -> str:
    """Strip accents so identifiers stay within ASCII (configuração -> configuracao)"""
    normalized = unicodedata.normalize("NFKD", value)
    return normalized.encode("ascii", "ignore").decode("ascii")


def is_valid_identifier(name: str) -> bool:
    """Check whether a name is a valid identifier in the generated code"""
    return bool(IDENTIFIER_PATTERN.match(name))


class NamingResolver:
    """Turns raw table and column names into code-safe identifiers.

    Outputs depend only on the naming config and the input name, so the same
    schema always produces the same identifiers.
    """

    def __init__(self, config: NamingConfig, reserved_words: Iterable[str] = ()) -> None:
        self.config = config
        self._reserved = frozenset(word.lower() for word in reserved_words)

    @cached_property
    def dictionary(self) -> dict[str, str]:
        """Abbreviation dictionary, loaded on first use of the short strategy"""
        abbreviation = self.config.abbreviation
        return load_dictionary(abbreviation.dictionary_lang, abbreviation.dictionary_path)

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    def constant_name(self, raw: str) -> str:
        """Sanitize any raw name into a valid constant identifier.

        Runs of invalid characters become a single underscore, a leading digit
        gets an underscore prefix and reserved words get an underscore suffix.

        Args:
            raw: Raw table, column or enum key name

        Returns:
            Valid identifier
        """
        name = _INVALID_CHARS.sub("_", _ascii(raw))
        if not name:
            name = "_"
        if name[0].isdigit():
            name = f"_{name}"
        if name.lower() in self._reserved:
            name = f"{name}_"
        return name

    def table_const_name(self, table: str, strategy: str | None = None) -> str:
        """Resolve the constant name of a table.

        Args:
            table: Raw table name
            strategy: "full" or "short" (defaults to the configured strategy)

        Returns:
            Valid identifier, abbreviated under the short strategy
        """
        name = self.constant_name(table)
        if (strategy or self.config.strategy) == "short":
            name = self.constant_name(self._abbreviate(name))
        return name

    def table_class_name(self, table: str) -> str:
        """Resolve the class name of a table (order_items -> TblOrderItems)"""
        segments = [segment for segment in self.table_const_name(table).split("_") if segment]
        pascal = "".join(segment[:1].upper() + segment[1:] for segment in segments)
        return f"{REGISTRY_CLASS_NAME}{pascal or '_'}"

    def table_alias(self, table: str) -> str:
        """Resolve a short SQL alias for a table.

        Multi-segment names use their initials (order_items -> oi); single
        segment names keep the first letter and the next two consonants
        (users -> usr).
        """
        words = _CAMEL_BOUNDARY.sub("_", _ascii(table))
        segments = [segment.lower() for segment in _SEGMENT_SEPARATOR.split(words) if segment]
        if not segments:
            return "t"

        if len(segments) == 1:
            word = segments[0]
            consonants = "".join(char for char in word[1:] if char not in "aeiou")
            alias = word[0] + consonants[:2]
        else:
            alias = "".join(segment[0] for segment in segments)

        if alias[0].isdigit():
            alias = f"t{alias}"
        if alias in SQL_KEYWORDS:
            alias = f"{alias}_"
        return alias

    def foreign_key_const_name(self, referenced_table: str, pluralize: bool = False) -> str:
        """Resolve the constant name of a foreign key to a table.

        Args:
            referenced_table: Table the foreign key points to
            pluralize: Use the plural form of the table name instead of the singular

        Returns:
            Identifier such as fk_user for a key referencing users
        """
        base = self.constant_name(referenced_table).lower()
        base = pluralize_last(base) if pluralize else singularize_last(base)
        return f"fk_{base}"

    # ------------------------------------------------------------------
    # Collisions
    # ------------------------------------------------------------------

    def check_collisions(self, tables: Iterable[str]) -> None:
        """Fail when two tables resolve to the same registry constant or class.

        Class names are compared case-insensitively because generated class
        names double as file names in PSR-4 output.

        Raises:
            NamingCollisionError: On the first collision, in table name order
        """
        const_names: dict[str, list[str]] = defaultdict(list)
        class_names: dict[str, list[str]] = defaultdict(list)
        for table in sorted(tables):
            const_names[self.table_const_name(table, "full")].append(table)
            class_names[self.table_class_name(table).lower()].append(table)

        for identifier, owners in const_names.items():
            if len(owners) > 1:
                raise NamingCollisionError(identifier, owners)

        for identifier, owners in class_names.items():
            if len(owners) > 1:
                raise NamingCollisionError(self.table_class_name(owners[0]), owners)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _abbreviate(self, name: str) -> str:
        max_length = self.config.abbreviation.max_length
        if len(name) <= max_length:
            return name

        segments = name.split("_")
        words = [segment for segment in segments if segment]
        if not words:
            return name

        abbreviated = [self.dictionary.get(segment.lower(), segment) if segment else segment for segment in segments]
        if len("_".join(abbreviated)) <= max_length:
            return "_".join(abbreviated)

        # Fall back to truncating the segments the dictionary does not know
        budget = max(MIN_SEGMENT_LENGTH, (max_length - (len(words) - 1)) // len(words))
        truncated = [
            short if segment.lower() in self.dictionary else short[:budget]
            for segment, short in zip(segments, abbreviated, strict=True)
        ]
        result = "_".join(truncated)
        logger.debug(f"Abbreviated '{name}' to '{result}'")
        return result
