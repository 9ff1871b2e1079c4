"""Fileshare application configuration.

Loads settings from a single optional YAML file:
  * fileshare.settings.yaml  — server, storage and logging settings

When the file is missing every section falls back to its defaults. There is
no environment-variable layer; the file is the only override.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SETTINGS_FILE = Path("fileshare.settings.yaml")
PACKAGE_DIR   = Path(__file__).resolve().parent
PUBLIC_DIR    = PACKAGE_DIR / "public"

DEFAULT_PORT              = 3000
DEFAULT_PREVIEW_MAX_BYTES = 1024 * 1024


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}
    with path.open(encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def _resolve_path(value: str, base_dir: Path) -> str:
    """Resolve a relative path against the settings file's directory."""
    path = Path(value).expanduser()
    if path.is_absolute():
        return str(path)
    return str(base_dir / path)


# ---------------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------------


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT


class StorageSettings(BaseModel):
    """Where uploads live and how much of a text file a preview may read."""
    upload_dir:        str = "uploads"
    public_dir:        str = str(PUBLIC_DIR)
    preview_max_bytes: int = DEFAULT_PREVIEW_MAX_BYTES

    @field_validator("preview_max_bytes")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("preview_max_bytes must be positive")
        return value


class LoggingSettings(BaseModel):
    level: str = "info"


class AppConfig(BaseModel):
    server:  ServerSettings  = Field(default_factory=ServerSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_config(settings_path: Optional[Path] = None) -> AppConfig:
    """Load *AppConfig* from YAML, resolving relative storage paths.

    Args:
        settings_path: Explicit settings file. Defaults to
            ``fileshare.settings.yaml`` in the working directory.

    Returns:
        The validated configuration.
    """
    path = Path(settings_path) if settings_path else SETTINGS_FILE
    data = _load_yaml(path)

    config = AppConfig(**data)

    base_dir = path.resolve().parent
    config.storage.upload_dir = _resolve_path(config.storage.upload_dir, base_dir)
    config.storage.public_dir = _resolve_path(config.storage.public_dir, base_dir)

    logger.info(
        "Settings loaded (server=%s:%s, upload_dir=%s)",
        config.server.host,
        config.server.port,
        config.storage.upload_dir,
    )
    return config


_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
