"""Configuration from a YAML file, environment variables and CLI options."""

import logging
import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ValidationError

log = logging.getLogger(__name__)

APP_NAME = "koldpress"
ENV_PREFIX = "KOLDPRESS_"
CONFIG_FILE = "config.yaml"

# Where Kobo Desktop keeps its copy of the device database
KOBO_DESKTOP_DIRS = [
    Path("~/Library/Application Support/Kobo/Kobo Desktop Edition"),
    Path("~/AppData/Local/Kobo/Kobo Desktop Edition"),
]
KOBO_DB_NAMES = ["Kobo.sqlite", "KoboReader.sqlite"]


class ConfigError(Exception):
    """Invalid or incomplete configuration."""


class Config(BaseModel):
    """Settings for a koldpress run."""

    db_path: Path | None = None
    output_format: Literal["json", "markdown"] = "json"
    template_path: Path | None = None

    def validate_db_path(self) -> Path:
        """Return the database path, discovering Kobo Desktop's if unset."""
        if self.db_path is None:
            self.db_path = find_kobo_desktop_db()
        if self.db_path is None:
            raise ConfigError(
                "No database path provided. Pass --db-path, set "
                f"{ENV_PREFIX}DB_PATH or add db_path to {default_config_path()}"
            )
        return self.db_path


def default_config_path() -> Path:
    """Returns the path of the user config file."""
    base = os.getenv("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / APP_NAME / CONFIG_FILE


def find_kobo_desktop_db() -> Path | None:
    """Returns the Kobo Desktop database path, if one exists."""
    for directory in KOBO_DESKTOP_DIRS:
        for name in KOBO_DB_NAMES:
            path = directory.expanduser() / name
            if path.exists():
                log.info("Using Kobo Desktop database at %s", path)
                return path
    return None


def _read_config_file(path: Path) -> dict:
    if not path.exists():
        log.debug("No config file at %s", path)
        return {}

    log.info("Reading config from %s", path)
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config file {path}: expected a mapping")
    return data


def _read_environment() -> dict:
    values = {}
    for field_name in Config.model_fields:
        value = os.getenv(ENV_PREFIX + field_name.upper())
        if value:
            values[field_name] = value
    return values


def load_config(config_path: Path | None = None, **overrides) -> Config:
    """Load settings; CLI overrides beat environment, which beats the file.

    Overrides that are None are ignored.
    """
    values = _read_config_file(config_path or default_config_path())
    values.update(_read_environment())
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        config = Config.model_validate(values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    if config.db_path is not None:
        config.db_path = config.db_path.expanduser()
    if config.template_path is not None:
        config.template_path = config.template_path.expanduser()
    return config
