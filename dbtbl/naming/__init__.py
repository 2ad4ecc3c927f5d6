"""Identifier naming and abbreviation.

This package turns raw table and column names into identifiers that are valid
in the generated code.
"""

from dbtbl.naming.dictionaries import BUILTIN_DICTIONARIES, load_dictionary
from dbtbl.naming.inflection import to_plural, to_singular
from dbtbl.naming.resolver import REGISTRY_CLASS_NAME, NamingResolver, is_valid_identifier

__all__ = [
    "BUILTIN_DICTIONARIES",
    "REGISTRY_CLASS_NAME",
    "NamingResolver",
    "is_valid_identifier",
    "load_dictionary",
    "to_plural",
    "to_singular",
]
