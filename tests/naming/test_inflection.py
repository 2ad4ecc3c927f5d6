import pytest

from dbtbl.naming import to_plural, to_singular
from dbtbl.naming.inflection import pluralize_last, singularize_last


@pytest.mark.parametrize(
    "plural, singular",
    [
        ("users", "user"),
        ("categories", "category"),
        ("addresses", "address"),
        ("boxes", "box"),
        ("branches", "branch"),
        ("statuses", "status"),
        ("people", "person"),
        ("children", "child"),
        ("status", "status"),
        ("class", "class"),
        ("analysis", "analysis"),
        ("user", "user"),
        ("", ""),
    ],
)
def test_to_singular(plural: str, singular: str) -> None:
    assert to_singular(plural) == singular


@pytest.mark.parametrize(
    "singular, plural",
    [
        ("user", "users"),
        ("category", "categories"),
        ("day", "days"),
        ("address", "addresses"),
        ("box", "boxes"),
        ("branch", "branches"),
        ("person", "people"),
        ("users", "users"),
        ("news", "news"),
    ],
)
def test_to_plural(singular: str, plural: str) -> None:
    assert to_plural(singular) == plural


def test_last_segment_only() -> None:
    assert singularize_last("order_items") == "order_item"
    assert singularize_last("news_categories") == "news_category"
    assert pluralize_last("order_item") == "order_items"
