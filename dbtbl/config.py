"""Configuration loading for db-tbl.

The configuration lives in a YAML file (./dbtbl.yaml by default) and is
validated into immutable pydantic models. String values can reference
environment variables as env(NAME), ${NAME} or a bare UPPER_CASE token.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from dbtbl.errors import ConfigError
from dbtbl.models import NamingConfig
from dbtbl.naming.dictionaries import load_dictionary

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DBTBL_CONFIG"
DEFAULT_CONFIG_FILE = "dbtbl.yaml"
DEFAULT_OUTPUT_FILE = "Tbl.php"

OUTPUT_MODES = ("file", "psr4")

_ENV_CALL = re.compile(r"^env\(([^)]+)\)$")
_ENV_BRACES = re.compile(r"^\$\{([^}]+)\}$")
_ENV_BARE = re.compile(r"^[A-Z_][A-Z0-9_]*$")

CONFIG_TEMPLATE = """\
# ------------------------------------------------------------
# db-tbl configuration file
#
# Generated by "db-tbl init".
# Delete this file and run "db-tbl init" to regenerate a clean template.
# ------------------------------------------------------------

# ------------------------------------------------------------
# Database configuration
# ------------------------------------------------------------
database:

  # Optional custom connection factory returning a SQLAlchemy Engine
  # Example: "myapp.db:get_engine"
  # connection: null

  # Optional full SQLAlchemy URL, overrides the fields below
  # url: env(DATABASE_URL)

  driver: mysql            # mysql | pgsql | sqlite

  # For MySQL / PostgreSQL
  host: env(DB_HOST)       # default: localhost
  port: env(DB_PORT)       # default: 3306 (mysql) / 5432 (pgsql)
  name: env(DB_NAME)       # required
  user: env(DB_USER)       # default: root
  password: env(DB_PASS)   # default: empty

  # PostgreSQL only
  # schema: public

  # SQLite only
  # path: env(DB_PATH)     # e.g. database.sqlite

# ------------------------------------------------------------
# Output configuration
# ------------------------------------------------------------
output:

  # Output mode:
  # - file  -> generate all classes into one file
  # - psr4  -> generate one class per table (PSR-4)
  mode: file

  # Base output directory (always a directory)
  path: "./"

  # File name used in file mode
  file: Tbl.php

  # REQUIRED for psr4 mode
  namespace: ""

  # Naming rules
  naming:
    strategy: full          # full | short

    abbreviation:
      max_length: 15        # maximum length of generated names
      dictionary_lang: en   # en | pt | es | all
      dictionary_path: null # custom dictionary file (optional)
"""

# ============================================================================
# Config Models
# ============================================================================


class DatabaseConfig(BaseModel):
    """Database connection settings"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    driver: str = Field(default="mysql", description="mysql, pgsql or sqlite")
    url: str | None = Field(default=None, description="Full SQLAlchemy URL, overrides the other fields")
    connection: str | None = Field(default=None, description="'module:callable' returning a SQLAlchemy Engine")
    host: str = Field(default="localhost")
    port: int | None = Field(default=None, description="Defaults to the driver's standard port")
    name: str = Field(default="", description="Database name")
    user: str = Field(default="root")
    password: str = Field(default="")
    db_schema: str | None = Field(default=None, alias="schema", description="PostgreSQL schema")
    path: str = Field(default="database.sqlite", description="SQLite database file")


class OutputConfig(BaseModel):
    """Generated output settings"""

    model_config = ConfigDict(frozen=True)

    mode: Literal["file", "psr4"] = Field(default="file", description="file or psr4")
    path: str = Field(default="./", description="Base output directory")
    file: str = Field(default=DEFAULT_OUTPUT_FILE, description="Output file name in file mode")
    namespace: str = Field(default="", description="Namespace of generated classes, required for psr4")
    naming: NamingConfig = Field(default_factory=NamingConfig)

    @model_validator(mode="after")
    def _require_namespace_for_psr4(self) -> "OutputConfig":
        if self.mode == "psr4" and not self.namespace.strip():
            raise ValueError("output.namespace is required when output.mode is 'psr4'")
        return self


class Config(BaseModel):
    """Complete db-tbl configuration"""

    model_config = ConfigDict(frozen=True)

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    source: Path | None = Field(default=None, description="File the configuration was loaded from")

    @property
    def output_mode(self) -> str:
        return self.output.mode

    @property
    def output_path(self) -> Path:
        return Path(self.output.path)

    @property
    def output_namespace(self) -> str:
        return self.output.namespace.strip().strip("\\")

    @property
    def output_file(self) -> Path:
        return self.output_path / self.output.file

    @property
    def naming(self) -> NamingConfig:
        return self.output.naming


# ============================================================================
# Environment Variables
# ============================================================================

_UNSET = object()


def resolve_env_value(value: Any) -> Any:
    """Replace an environment variable reference with its value.

    env(NAME) and ${NAME} resolve to the variable, or to an unset marker when
    the variable is missing so the default applies. A bare UPPER_CASE token
    resolves only when such a variable exists, and is kept as-is otherwise.
    """
    if not isinstance(value, str):
        return value

    match = _ENV_CALL.match(value) or _ENV_BRACES.match(value)
    if match:
        return os.environ.get(match.group(1).strip(), _UNSET)

    if _ENV_BARE.match(value):
        return os.environ.get(value, value)

    return value


def resolve_env_vars(data: Any) -> Any:
    """Resolve environment variable references recursively, dropping unset keys"""
    if isinstance(data, dict):
        resolved = {key: resolve_env_vars(value) for key, value in data.items()}
        return {key: value for key, value in resolved.items() if value is not _UNSET}
    if isinstance(data, list):
        return [item for item in (resolve_env_vars(value) for value in data) if item is not _UNSET]
    return resolve_env_value(data)


# ============================================================================
# Loading
# ============================================================================


def get_config_path(path: str | Path | None = None) -> Path:
    """Resolve the configuration file path.

    Args:
        path: Explicit path (optional)

    Returns:
        The explicit path, the DBTBL_CONFIG environment variable, or ./dbtbl.yaml
    """
    if path:
        return Path(path)
    if env_path := os.environ.get(CONFIG_ENV_VAR):
        return Path(env_path)
    return Path.cwd() / DEFAULT_CONFIG_FILE


def parse_config(data: dict[str, Any], source: Path | None = None) -> Config:
    """Validate raw configuration data into a Config.

    Raises:
        ConfigError: If validation fails or the abbreviation dictionary cannot be loaded
    """
    try:
        config = Config.model_validate({**resolve_env_vars(data), "source": source})
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(loc) for loc in error['loc']) or 'config'}: {error['msg']}" for error in e.errors()
        )
        raise ConfigError(f"Invalid configuration{f' in {source}' if source else ''}: {details}") from e

    if config.naming.strategy == "short":
        # Dictionary problems surface before any database work
        abbreviation = config.naming.abbreviation
        load_dictionary(abbreviation.dictionary_lang, abbreviation.dictionary_path)
    return config


def load_config(path: str | Path | None = None) -> Config:
    """Load and validate the configuration file.

    Args:
        path: Configuration file (optional, see get_config_path)

    Returns:
        Validated Config

    Raises:
        ConfigError: If the file is missing, is not valid YAML or fails validation
    """
    config_path = get_config_path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}. Run 'db-tbl init' to create one")

    try:
        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    logger.debug(f"Loaded configuration from {config_path}")
    return parse_config(data, source=config_path)


def init_config(path: str | Path | None = None, force: bool = False) -> Path:
    """Write the commented configuration template.

    Args:
        path: Configuration file (optional, see get_config_path)
        force: Overwrite an existing file

    Returns:
        Path of the written file

    Raises:
        FileExistsError: If the file exists and force is False
    """
    config_path = get_config_path(path)
    if config_path.exists() and not force:
        raise FileExistsError(f"Config file already exists: {config_path}")

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    return config_path


def dump_config(config: Config) -> str:
    """Render the effective configuration as YAML, with the password masked"""
    data = config.model_dump(mode="json", by_alias=True, exclude={"source"})
    if data["database"].get("password"):
        data["database"]["password"] = "***"
    return yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
