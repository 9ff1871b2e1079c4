"""Tests for config loading and path resolution behavior."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from fileshare.config import DEFAULT_PORT, PUBLIC_DIR, load_config


def test_defaults_when_settings_file_missing(tmp_path):
    """A missing settings file falls back to defaults."""
    cfg = load_config(settings_path=tmp_path / "absent.yaml")

    assert cfg.server.port == DEFAULT_PORT == 3000
    assert cfg.logging.level == "info"
    assert Path(cfg.storage.upload_dir) == tmp_path / "uploads"
    assert Path(cfg.storage.public_dir) == PUBLIC_DIR


def test_upload_dir_relative_to_settings_dir(tmp_path):
    """Relative upload_dir resolves from the settings file directory."""
    settings_file = tmp_path / "fileshare.settings.yaml"
    settings_file.write_text(
        "storage:\n"
        "  upload_dir: data/uploads\n",
        encoding="utf-8",
    )

    cfg = load_config(settings_path=settings_file)
    assert Path(cfg.storage.upload_dir) == tmp_path / "data" / "uploads"


def test_absolute_upload_dir_remains_unchanged(tmp_path):
    """Absolute upload_dir is preserved exactly as configured."""
    absolute_path = tmp_path / "absolute" / "uploads"
    settings_file = tmp_path / "fileshare.settings.yaml"
    settings_file.write_text(
        "storage:\n"
        f"  upload_dir: {absolute_path}\n",
        encoding="utf-8",
    )

    cfg = load_config(settings_path=settings_file)
    assert Path(cfg.storage.upload_dir) == absolute_path


def test_server_and_preview_overrides(tmp_path):
    settings_file = tmp_path / "fileshare.settings.yaml"
    settings_file.write_text(
        "server:\n"
        "  port: 8080\n"
        "storage:\n"
        "  preview_max_bytes: 2048\n"
        "logging:\n"
        "  level: debug\n",
        encoding="utf-8",
    )

    cfg = load_config(settings_path=settings_file)
    assert cfg.server.port == 8080
    assert cfg.storage.preview_max_bytes == 2048
    assert cfg.logging.level == "debug"


def test_empty_settings_file_uses_defaults(tmp_path):
    settings_file = tmp_path / "fileshare.settings.yaml"
    settings_file.write_text("", encoding="utf-8")

    cfg = load_config(settings_path=settings_file)
    assert cfg.server.port == DEFAULT_PORT


def test_non_positive_preview_limit_rejected(tmp_path):
    settings_file = tmp_path / "fileshare.settings.yaml"
    settings_file.write_text(
        "storage:\n"
        "  preview_max_bytes: 0\n",
        encoding="utf-8",
    )

    with pytest.raises(ValidationError):
        load_config(settings_path=settings_file)
