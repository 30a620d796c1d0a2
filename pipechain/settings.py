"""Settings for applications and the CLI built on pipechain.

Values come from a YAML file, then environment variables (a ``.env`` file
is loaded first). The pipe engine itself never reads settings; it only logs
through ``logging.getLogger(__name__)`` and leaves handler setup to callers.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

load_dotenv()

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "WARNING"
    format: str = DEFAULT_LOG_FORMAT


@dataclass(frozen=True)
class Settings:
    logging: LoggingSettings = field(default_factory=LoggingSettings)


def _default_config_path() -> str:
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(project_root, "config", "pipechain.yaml")


def _load_yaml(path: str) -> Dict[str, Any]:
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _parse_level(value: Any) -> str:
    level = str(value).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Invalid log level: {value!r}")
    return level


def _parse_logging(data: Any) -> LoggingSettings:
    if not isinstance(data, dict):
        raise ValueError(f"Invalid logging settings: expected a mapping, got {data!r}")

    level = os.getenv("LOG_LEVEL") or data.get("level", LoggingSettings.level)
    return LoggingSettings(
        level=_parse_level(level),
        format=data.get("format", DEFAULT_LOG_FORMAT),
    )


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load settings.

    Args:
        path: YAML file to read. Defaults to ``$PIPECHAIN_CONFIG``, then
              ``config/pipechain.yaml`` in the project root when it exists.

    Returns:
        Settings with ``LOG_LEVEL`` from the environment taking precedence

    Raises:
        FileNotFoundError: If an explicitly given file does not exist
        ValueError: If the file is not a mapping, the logging section is not
                    a mapping, or the log level is not a known level name
    """
    path = path or os.getenv("PIPECHAIN_CONFIG")
    if path is None and os.path.exists(_default_config_path()):
        path = _default_config_path()

    data = _load_yaml(path) if path else {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid settings file {path}: expected a mapping")

    logging_data = data.get("logging")
    return Settings(logging=_parse_logging({} if logging_data is None else logging_data))


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.logging.level,
        format=settings.logging.format,
        force=True,
    )
