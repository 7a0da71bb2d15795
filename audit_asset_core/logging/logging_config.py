"""Logging setup for audit_asset_core.

@public

Package loggers come from ``prefect.logging.get_logger`` and therefore live
under ``prefect.audit_asset_core``. A YAML file in ``logging.config.dictConfig``
format replaces the built-in configuration when one is found.

Environment variables:
    AUDIT_ASSETS_LOGGING_CONFIG: Path to a logging YAML file
    PREFECT_LOGGING_SETTINGS_PATH: Fallback path to a logging YAML file
    AUDIT_ASSETS_LOG_LEVEL: Level of the package logger in the built-in configuration
"""

import logging.config
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from prefect.logging import get_logger

PACKAGE_LOGGER = "audit_asset_core"


class LoggingConfig:
    """Locates, loads and applies the package's logging configuration.

    @public

    The file is taken from ``config_path`` when given, otherwise from
    AUDIT_ASSETS_LOGGING_CONFIG, then PREFECT_LOGGING_SETTINGS_PATH. A missing
    file falls back to the built-in configuration.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or self._config_path_from_env()
        self._config: Optional[Dict[str, Any]] = None

    @staticmethod
    def _config_path_from_env() -> Optional[Path]:
        for variable in ("AUDIT_ASSETS_LOGGING_CONFIG", "PREFECT_LOGGING_SETTINGS_PATH"):
            if value := os.environ.get(variable):
                return Path(value)
        return None

    def load_config(self) -> Dict[str, Any]:
        """Return the dictConfig mapping, reading the file on first call only."""
        if self._config is None:
            if self.config_path and self.config_path.exists():
                with open(self.config_path, "r") as f:
                    self._config = yaml.safe_load(f)
            else:
                self._config = self._get_default_config()
        assert self._config is not None
        return self._config

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        """Package logger to stderr as ``HH:MM:SS.mmm | LEVEL | name - message``."""
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(name)s - %(message)s",
                    "datefmt": "%H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                f"prefect.{PACKAGE_LOGGER}": {
                    "level": os.environ.get("AUDIT_ASSETS_LOG_LEVEL", "INFO"),
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
            "root": {
                "level": "WARNING",
                "handlers": ["console"],
            },
        }

    def apply(self):
        logging.config.dictConfig(self.load_config())


_logging_config: Optional[LoggingConfig] = None


def setup_logging(config_path: Optional[Path] = None, level: Optional[str] = None):
    """Configure package logging.

    @public

    Args:
        config_path: YAML file to load instead of the environment lookup.
        level: Level for the package logger; module loggers inherit it.

    Example:
        >>> setup_logging(level="DEBUG")
    """
    global _logging_config

    _logging_config = LoggingConfig(config_path)
    _logging_config.apply()

    if level:
        get_logger(PACKAGE_LOGGER).setLevel(level)


def get_pipeline_logger(name: str):
    """Return the logger for ``name``, configuring logging on first use.

    @public
    """
    if _logging_config is None:
        setup_logging()

    return get_logger(name)
