"""Tests for abbreviation dictionaries."""

import json
from pathlib import Path

import pytest

from dbtbl.errors import ConfigError
from dbtbl.naming import BUILTIN_DICTIONARIES, load_dictionary


def test_builtin_languages() -> None:
    assert set(BUILTIN_DICTIONARIES) == {"en", "pt", "es"}


def test_load_english() -> None:
    dictionary = load_dictionary("en")
    assert dictionary["configuration"] == "cfg"
    assert dictionary["users"] == "usrs"
    assert "usuario" not in dictionary


def test_language_is_case_insensitive() -> None:
    assert load_dictionary("PT")["usuario"] == "usr"


def test_load_all_merges_in_priority_order() -> None:
    dictionary = load_dictionary("all")
    assert dictionary["configuration"] == "cfg"
    assert dictionary["configuracion"] == "cfg"
    # Present in pt and es with different abbreviations, pt wins
    assert dictionary["empresa"] == "emp"


def test_unknown_language() -> None:
    with pytest.raises(ConfigError, match="Allowed values: en, pt, es, all"):
        load_dictionary("de")


def test_custom_yaml_dictionary_overrides_builtin(tmp_path: Path) -> None:
    path = tmp_path / "abbr.yaml"
    path.write_text("users: u\nShipments: shp\n")

    dictionary = load_dictionary("en", path)
    assert dictionary["users"] == "u"
    assert dictionary["shipments"] == "shp"
    assert dictionary["configuration"] == "cfg"


def test_custom_json_dictionary(tmp_path: Path) -> None:
    path = tmp_path / "abbr.json"
    path.write_text(json.dumps({"shipments": "shp"}))

    assert load_dictionary("en", str(path))["shipments"] == "shp"


def test_custom_dictionary_missing(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_dictionary("en", tmp_path / "missing.yaml")


def test_custom_dictionary_not_a_mapping(tmp_path: Path) -> None:
    path = tmp_path / "abbr.yaml"
    path.write_text("- users\n- orders\n")

    with pytest.raises(ConfigError, match="must be a mapping"):
        load_dictionary("en", path)


def test_custom_dictionary_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "abbr.json"
    path.write_text("{not json")

    with pytest.raises(ConfigError, match="Invalid abbreviation dictionary"):
        load_dictionary("en", path)
