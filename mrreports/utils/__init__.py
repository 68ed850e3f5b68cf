"""Shared utilities: configuration, logging and retry."""

from .config import AppConfig, ReportSettings, Settings, get_config, get_settings
from .logger import get_logger, log_operation, setup_logging
from .retry import RetryStrategy

__all__ = [
    "AppConfig",
    "ReportSettings",
    "RetryStrategy",
    "Settings",
    "get_config",
    "get_logger",
    "get_settings",
    "log_operation",
    "setup_logging",
]
