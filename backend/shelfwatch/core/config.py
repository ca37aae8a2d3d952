"""Runtime settings.

Values are layered: model defaults, then the YAML file, then ``SHW_*``
environment variables. The YAML file groups keys by concern::

    source:
      kind: files            # or "memory"
      snapshot_root: ~/.shelfwatch/snapshots
    projection:
      debounce_ms: 100
      low_threshold: 2
    logging:
      level: INFO
      json: true
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, Mapping

import yaml
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "SHW_"
DEFAULT_CONFIG_PATH = Path("~/.config/shelfwatch/config.yaml")

# section -> {yaml key: settings field}
_SECTIONS: Mapping[str, Mapping[str, str]] = {
    "source": {"kind": "source", "snapshot_root": "snapshot_root"},
    "projection": {"debounce_ms": "debounce_ms", "low_threshold": "low_threshold"},
    "logging": {"level": "log_level", "json": "log_json"},
}


class ConfigError(ValueError):
    """Raised when the settings file cannot be used."""


class Settings(BaseModel):
    """Where snapshots come from and how stores project them."""

    source: Literal["files", "memory"] = "files"
    snapshot_root: Path = Field(default=Path.home() / ".shelfwatch" / "snapshots")
    debounce_ms: int = Field(default=100, ge=0)
    low_threshold: int = Field(default=2, ge=0)
    log_level: str = "INFO"
    log_json: bool = True

    model_config = {
        "validate_assignment": True,
        "extra": "ignore",
    }

    @field_validator("snapshot_root", mode="before")
    @classmethod
    def _expand_root(cls, value: Any) -> Path:
        if isinstance(value, (str, Path)):
            return Path(value).expanduser()
        raise TypeError("snapshot_root must be a path or string")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> str:
        return str(value).upper()

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> "Settings":
        """Build settings from the YAML file (if any) with env vars on top."""
        values: dict[str, Any] = {}
        config_path = _config_path(path)
        if config_path is not None and config_path.exists():
            values.update(_read_sections(config_path))
        values.update(_env_values())
        return cls(**values)


def _config_path(path: Path | None) -> Path | None:
    if path is not None:
        return path.expanduser()
    from_env = os.environ.get(f"{ENV_PREFIX}CONFIG")
    if from_env:
        return Path(from_env).expanduser()
    default = DEFAULT_CONFIG_PATH.expanduser()
    return default if default.exists() else None


def _read_sections(path: Path) -> dict[str, Any]:
    """Pick known keys out of the sectioned YAML document."""
    with path.open("r", encoding="utf-8") as fh:
        document = yaml.safe_load(fh) or {}
    if not isinstance(document, Mapping):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    values: dict[str, Any] = {}
    for section, keys in _SECTIONS.items():
        block = document.get(section)
        if block is None:
            continue
        if not isinstance(block, Mapping):
            raise ConfigError(f"{path}: section '{section}' must be a mapping")
        for key, field_name in keys.items():
            if key in block:
                values[field_name] = block[key]
    return values


def _env_values() -> dict[str, Any]:
    """``SHW_<FIELD>`` variables, e.g. ``SHW_DEBOUNCE_MS=50``."""
    values: dict[str, Any] = {}
    for field_name in Settings.model_fields:
        raw = os.environ.get(f"{ENV_PREFIX}{field_name.upper()}")
        if raw is not None:
            values[field_name] = raw
    return values


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor for dependency injection."""
    return Settings.from_yaml()


__all__ = ["ConfigError", "Settings", "get_settings"]
