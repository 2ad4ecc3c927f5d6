"""Tests for CLI commands."""

import sqlite3
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from dbtbl.hashing import extract_schema_hash
from dbtbl_cli.main import app

runner = CliRunner()


def write_config(path: Path, database: dict, output: dict) -> Path:
    path.write_text(yaml.safe_dump({"database": database, "output": output}))
    return path


@pytest.fixture
def config_file(tmp_path: Path, sqlite_db: Path, output_dir: Path) -> Path:
    """Return a config file for the sample SQLite database"""
    return write_config(
        tmp_path / "dbtbl.yaml",
        {"driver": "sqlite", "path": str(sqlite_db)},
        {"mode": "file", "path": str(output_dir)},
    )


@pytest.fixture
def psr4_config_file(tmp_path: Path, sqlite_db: Path, output_dir: Path) -> Path:
    """Return a PSR-4 config file for the sample SQLite database"""
    return write_config(
        tmp_path / "dbtbl-psr4.yaml",
        {"driver": "sqlite", "path": str(sqlite_db)},
        {"mode": "psr4", "path": str(output_dir), "namespace": "App\\Schema"},
    )


def test_cli_help() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "constant classes" in result.stdout


def test_cli_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "db-tbl version 0.1.0" in result.stdout


# ============================================================================
# generate
# ============================================================================


def test_generate_file(config_file: Path, output_dir: Path) -> None:
    result = runner.invoke(app, ["generate", "--config", str(config_file)])

    assert result.exit_code == 0, result.output
    assert "Database connected (sqlite)" in result.output
    assert f"Generated: {output_dir / 'Tbl.php'}" in result.output
    assert "> Tables: 3" in result.output
    assert "> Foreign Keys: 2" in result.output
    assert "> Database: shop" in result.output
    assert "composer dump-autoload" in result.output
    assert extract_schema_hash(output_dir / "Tbl.php") is not None


def test_generate_psr4_flag_requires_namespace(config_file: Path, output_dir: Path) -> None:
    result = runner.invoke(app, ["generate", "--psr4", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "output.namespace" in result.output
    assert not output_dir.exists()


def test_generate_psr4(psr4_config_file: Path, output_dir: Path) -> None:
    result = runner.invoke(app, ["generate", "-c", str(psr4_config_file)])

    assert result.exit_code == 0, result.output
    assert f"Generated 4 files in {output_dir}" in result.output
    assert (output_dir / "TblOrders.php").exists()


def test_generate_psr4_declined(psr4_config_file: Path, output_dir: Path) -> None:
    output_dir.mkdir()
    (output_dir / "Legacy.php").write_text("<?php\n")

    result = runner.invoke(app, ["generate", "-c", str(psr4_config_file)], input="n\n")

    assert result.exit_code == 0, result.output
    assert "Legacy.php" in result.output
    assert "Operation aborted by user." in result.output
    assert not (output_dir / "Tbl.php").exists()


def test_generate_psr4_yes_skips_prompt(psr4_config_file: Path, output_dir: Path) -> None:
    output_dir.mkdir()
    (output_dir / "Legacy.php").write_text("<?php\n")

    result = runner.invoke(app, ["generate", "-c", str(psr4_config_file), "--yes"])

    assert result.exit_code == 0, result.output
    assert "Continue?" not in result.output
    assert (output_dir / "Tbl.php").exists()


def test_generate_missing_config(tmp_path: Path) -> None:
    result = runner.invoke(app, ["generate", "--config", str(tmp_path / "missing.yaml")])

    assert result.exit_code == 1
    assert "Config file not found" in result.output
    assert "db-tbl init" in result.output


def test_generate_unsupported_driver(tmp_path: Path, output_dir: Path) -> None:
    config_file = write_config(tmp_path / "dbtbl.yaml", {"driver": "oracle"}, {"path": str(output_dir)})

    result = runner.invoke(app, ["generate", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "Unsupported database driver 'oracle'" in result.output


def test_generate_empty_database(tmp_path: Path, output_dir: Path) -> None:
    db = tmp_path / "empty.sqlite"
    sqlite3.connect(db).close()
    config_file = write_config(tmp_path / "dbtbl.yaml", {"driver": "sqlite", "path": str(db)}, {"path": str(output_dir)})

    result = runner.invoke(app, ["generate", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "No tables found" in result.output


def test_generate_missing_sqlite_file(tmp_path: Path, output_dir: Path) -> None:
    db = tmp_path / "typo.sqlite"
    config_file = write_config(tmp_path / "dbtbl.yaml", {"driver": "sqlite", "path": str(db)}, {"path": str(output_dir)})

    result = runner.invoke(app, ["generate", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "SQLite database file not found" in result.output
    assert "database.path" in result.output
    assert not db.exists()


def test_generate_bad_dictionary_reported_before_connecting(tmp_path: Path, output_dir: Path) -> None:
    config_file = write_config(
        tmp_path / "dbtbl.yaml",
        {"driver": "sqlite", "path": str(tmp_path / "typo.sqlite")},
        {"path": str(output_dir), "naming": {"strategy": "short", "abbreviation": {"dictionary_lang": "xx"}}},
    )

    result = runner.invoke(app, ["generate", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "dictionary_lang" in result.output
    assert "SQLite database file not found" not in result.output


# ============================================================================
# check
# ============================================================================


def test_check_initial(config_file: Path, output_dir: Path) -> None:
    result = runner.invoke(app, ["check", "--config", str(config_file)])

    assert result.exit_code == 0, result.output
    assert "Initial generation required" in result.output
    assert not output_dir.exists()


def test_check_unchanged(config_file: Path) -> None:
    runner.invoke(app, ["generate", "--config", str(config_file)])

    result = runner.invoke(app, ["check", "--config", str(config_file)])

    assert result.exit_code == 0, result.output
    assert "Schema unchanged" in result.output


def test_check_drift_exit_code(config_file: Path, sqlite_db: Path, output_dir: Path) -> None:
    runner.invoke(app, ["generate", "--config", str(config_file)])
    content = (output_dir / "Tbl.php").read_text()

    conn = sqlite3.connect(sqlite_db)
    conn.execute("ALTER TABLE orders ADD COLUMN shipped_at TEXT")
    conn.commit()
    conn.close()

    result = runner.invoke(app, ["check", "--config", str(config_file)])
    assert result.exit_code == 2
    assert "Schema changed" in result.output

    result = runner.invoke(app, ["generate", "--check", "--config", str(config_file)])
    assert result.exit_code == 2
    assert (output_dir / "Tbl.php").read_text() == content


# ============================================================================
# init / show-config
# ============================================================================


def test_init_creates_template(tmp_path: Path) -> None:
    config_path = tmp_path / "config" / "dbtbl.yaml"

    result = runner.invoke(app, ["init", "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    assert "Config created" in result.output
    assert "database:" in config_path.read_text()


def test_init_refuses_to_overwrite(tmp_path: Path) -> None:
    config_path = tmp_path / "dbtbl.yaml"
    config_path.write_text("custom: true\n")

    result = runner.invoke(app, ["init", "--config", str(config_path)])
    assert result.exit_code == 1
    assert "already exists" in result.output
    assert config_path.read_text() == "custom: true\n"

    result = runner.invoke(app, ["init", "--config", str(config_path), "--force"])
    assert result.exit_code == 0
    assert "database:" in config_path.read_text()


def test_show_config_masks_password(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHOP_DB_PASS", "s3cret")
    config_file = write_config(
        tmp_path / "dbtbl.yaml",
        {"driver": "mysql", "name": "shop", "password": "env(SHOP_DB_PASS)"},
        {"mode": "file"},
    )

    result = runner.invoke(app, ["show-config", "--config", str(config_file)])

    assert result.exit_code == 0, result.output
    assert "shop" in result.output
    assert "***" in result.output
    assert "s3cret" not in result.output


def test_show_config_invalid(tmp_path: Path) -> None:
    config_file = write_config(tmp_path / "dbtbl.yaml", {"driver": "sqlite"}, {"mode": "psr4"})

    result = runner.invoke(app, ["show-config", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "namespace" in result.output
