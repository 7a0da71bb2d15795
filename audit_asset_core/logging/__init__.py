"""Logging infrastructure for Audit Asset Core.

@public

Prefect-integrated logging with YAML or built-in configuration.

Key components:
    get_pipeline_logger: Factory function for creating package loggers
    setup_logging: Initialize logging configuration from YAML
    LoggingConfig: Configuration class for logging settings

Example:
    >>> from audit_asset_core.logging import get_pipeline_logger
    >>>
    >>> logger = get_pipeline_logger(__name__)
    >>> logger.info("Saving assets")
"""

from .logging_config import LoggingConfig, get_pipeline_logger, setup_logging

__all__ = [
    "LoggingConfig",
    "setup_logging",
    "get_pipeline_logger",
]
