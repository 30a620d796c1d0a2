"""Tests for settings loading and logging setup."""

import logging

import pytest
from unittest.mock import patch

from pipechain.settings import (
    DEFAULT_LOG_FORMAT,
    LoggingSettings,
    Settings,
    configure_logging,
    load_settings,
)


@pytest.fixture
def settings_file(tmp_path):
    path = tmp_path / "pipechain.yaml"
    path.write_text(
        "logging:\n"
        "  level: debug\n"
        "  format: '%(levelname)s %(message)s'\n"
    )
    return path


@pytest.mark.unit
class TestLoadSettings:

    def test_reads_yaml_file(self, settings_file, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        settings = load_settings(str(settings_file))

        assert settings.logging.level == "DEBUG"
        assert settings.logging.format == "%(levelname)s %(message)s"

    def test_env_level_overrides_file(self, settings_file, mock_env_vars):
        settings = load_settings(str(settings_file))

        assert settings.logging.level == "ERROR"

    def test_path_from_environment(self, settings_file, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("PIPECHAIN_CONFIG", str(settings_file))

        assert load_settings().logging.level == "DEBUG"

    def test_empty_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_settings(str(path)) == Settings()

    def test_invalid_level_raises(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        path = tmp_path / "empty.yaml"
        path.write_text("")

        with pytest.raises(ValueError, match="Invalid log level"):
            load_settings(str(path))

    def test_scalar_logging_section_raises(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        path = tmp_path / "scalar.yaml"
        path.write_text("logging: DEBUG\n")

        with pytest.raises(ValueError, match="Invalid logging settings"):
            load_settings(str(path))

    def test_non_mapping_file_raises(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- logging\n")

        with pytest.raises(ValueError, match="expected a mapping"):
            load_settings(str(path))

    def test_missing_explicit_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(str(tmp_path / "missing.yaml"))

    def test_settings_are_frozen(self):
        settings = Settings()
        with pytest.raises(AttributeError):
            settings.logging = LoggingSettings(level="DEBUG")


@pytest.mark.unit
class TestConfigureLogging:

    def test_applies_level_and_format(self):
        settings = Settings(logging=LoggingSettings(level="INFO"))

        with patch("pipechain.settings.logging.basicConfig") as basic_config:
            configure_logging(settings)

        basic_config.assert_called_once_with(
            level="INFO", format=DEFAULT_LOG_FORMAT, force=True
        )
