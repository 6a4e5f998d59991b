"""Runtime configuration for the notes manager.

Settings come from three layers, later ones winning:

1. an optional YAML file, either flat or wrapped in a ``notes:`` table::

       notes:
         storage_dir: ~/notes
         log_level: DEBUG

2. environment variables
3. keyword overrides passed to :func:`load_config`

Environment variables (all optional):
    NOTES_CONFIG       – path to the YAML file when none is passed explicitly
    NOTES_DIR          – storage directory (default: ``notes``)
    NOTES_INDEX_FILE   – index file name inside the storage directory
    NOTES_LOG_FILE     – log file name inside the storage directory
    NOTES_LOG_LEVEL    – logging level name (default: ``INFO``)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

_ENV_VARS = {
    "storage_dir": "NOTES_DIR",
    "index_file": "NOTES_INDEX_FILE",
    "log_file": "NOTES_LOG_FILE",
    "log_level": "NOTES_LOG_LEVEL",
}


class ConfigError(ValueError):
    """Raised for an unreadable or invalid configuration file."""


@dataclass
class NotesConfig:
    storage_dir: Path = Path("notes")
    index_file: str = "notes_index.txt"
    log_file: str = "app.log"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.storage_dir = Path(self.storage_dir).expanduser()
        self.log_level = str(self.log_level).upper()

    @property
    def index_path(self) -> Path:
        return self.storage_dir / self.index_file

    @property
    def log_path(self) -> Path:
        return self.storage_dir / self.log_file

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NotesConfig":
        section = data.get("notes", data)
        if not isinstance(section, dict):
            raise ConfigError("Config 'notes' section must be a mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(section) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**section)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config(path: Path | str | None = None, **overrides: Any) -> NotesConfig:
    """Build a :class:`NotesConfig` from file, environment and *overrides*."""
    config_path = path or os.getenv("NOTES_CONFIG")
    data: dict[str, Any] = {}
    if config_path:
        raw = _read_yaml(Path(config_path))
        section = raw.get("notes", raw)
        if not isinstance(section, dict):
            raise ConfigError("Config 'notes' section must be a mapping")
        data = dict(section)

    for key, env_var in _ENV_VARS.items():
        value = os.getenv(env_var)
        if value:
            data[key] = value

    data.update({k: v for k, v in overrides.items() if v is not None})
    return NotesConfig.from_dict(data)
