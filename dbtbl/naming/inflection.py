"""Minimal English singular/plural rules for foreign key constant names."""

_IRREGULAR_PLURALS: dict[str, str] = {
    "child": "children",
    "person": "people",
    "man": "men",
    "woman": "women",
    "mouse": "mice",
    "goose": "geese",
    "tooth": "teeth",
    "foot": "feet",
}

_IRREGULAR_SINGULARS: dict[str, str] = {plural: singular for singular, plural in _IRREGULAR_PLURALS.items()}

# Words that are the same in singular and plural form
_UNCOUNTABLE: frozenset[str] = frozenset(
    {"data", "equipment", "information", "media", "metadata", "news", "series", "species", "status"}
)

_VOWELS = "aeiou"


def to_singular(word: str) -> str:
    """Return the singular form of a lowercase English noun.

    Examples:
        users -> user, categories -> category, addresses -> address
    """
    if not word or word in _UNCOUNTABLE:
        return word
    if word in _IRREGULAR_SINGULARS:
        return _IRREGULAR_SINGULARS[word]
    if word.endswith("ies") and len(word) > 3:
        return word[:-3] + "y"
    if word.endswith(("sses", "shes", "ches", "xes", "zes", "uses")):
        return word[:-2]
    if word.endswith("ss") or word.endswith("us") or word.endswith("is"):
        return word
    if word.endswith("s"):
        return word[:-1]
    return word


def to_plural(word: str) -> str:
    """Return the plural form of a lowercase English noun.

    Examples:
        user -> users, category -> categories, address -> addresses
    """
    if not word or word in _UNCOUNTABLE:
        return word
    if word in _IRREGULAR_PLURALS:
        return _IRREGULAR_PLURALS[word]
    if word in _IRREGULAR_SINGULARS:
        return word
    if word.endswith("y") and len(word) > 1 and word[-2] not in _VOWELS:
        return word[:-1] + "ies"
    if word.endswith(("s", "sh", "ch", "x", "z")):
        # Already plural ("users") or a sibilant ending ("address")
        if word.endswith("s") and not word.endswith(("ss", "us", "is")):
            return word
        return word + "es"
    return word + "s"


def singularize_last(name: str) -> str:
    """Singularize only the last underscore-separated segment (order_items -> order_item)"""
    head, _, last = name.rpartition("_")
    return f"{head}_{to_singular(last)}" if head else to_singular(last)


def pluralize_last(name: str) -> str:
    """Pluralize only the last underscore-separated segment (order_item -> order_items)"""
    head, _, last = name.rpartition("_")
    return f"{head}_{to_plural(last)}" if head else to_plural(last)
