"""
Logging setup for Mediumroast Reports.

Console output is plain text and the rotating file log is JSON. A logger
may be bound to a context, such as the store being synchronized, which is
attached to every record it emits.
"""

import json
import logging
import logging.config
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .config import get_project_root, get_settings

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with bound context and operation fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        context = getattr(record, "context", None)
        if context:
            log_data["context"] = dict(context)

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ContextAdapter(logging.LoggerAdapter):
    """
    Logger bound to a context dict.

    The context is attached to each record as ``record.context``; records
    logged with their own ``extra`` keep it.
    """

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        extra = dict(kwargs.get("extra") or {})
        extra["context"] = {**self.extra, **extra.get("context", {})}
        kwargs["extra"] = extra
        return msg, kwargs


Logger = Union[logging.Logger, ContextAdapter]


def _load_config_file(config_path: Path, project_root: Path) -> dict:
    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}

    # Handler file names are relative to the project root
    for handler_config in config.get("handlers", {}).values():
        filename = handler_config.get("filename")
        if filename and not Path(filename).is_absolute():
            handler_config["filename"] = str(project_root / filename)
            Path(handler_config["filename"]).parent.mkdir(parents=True, exist_ok=True)
    return config


def _setup_basic_logging(level: str, logs_dir: Path) -> None:
    """Console plus rotating file handler, used when no config file exists."""
    settings = get_settings().logging

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    file_handler = logging.handlers.RotatingFileHandler(
        logs_dir / "mediumroast.log",
        maxBytes=10 * 1024 * 1024,
        backupCount=settings.max_log_files,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    if settings.log_format == "json":
        file_handler.setFormatter(JsonFormatter())
    else:
        file_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)


def setup_logging(
    config_path: Optional[str] = None,
    log_level: Optional[str] = None,
) -> None:
    """
    Configure logging from config/logging.yaml, or a basic setup without it.

    Args:
        config_path: Logging config YAML, relative to the project root.
        log_level: Override for the root level (DEBUG, INFO, WARNING, ...).
    """
    project_root = get_project_root()
    path = Path(config_path) if config_path else Path("config") / "logging.yaml"
    if not path.is_absolute():
        path = project_root / path

    if path.exists():
        logging.config.dictConfig(_load_config_file(path, project_root))
    else:
        logs_dir = project_root / get_settings().logging.log_path
        logs_dir.mkdir(parents=True, exist_ok=True)
        _setup_basic_logging(log_level or get_settings().logging.level, logs_dir)

    if log_level:
        logging.getLogger().setLevel(getattr(logging, log_level.upper()))


def get_logger(name: str, context: Optional[dict[str, Any]] = None) -> Logger:
    """
    Get a logger, bound to context when one is given.

    Args:
        name: Dotted logger name under ``mrreports``.
        context: Fields attached to every record, e.g. ``{"store": "owner/repo@main"}``.
    """
    logger = logging.getLogger(name)
    if context:
        return ContextAdapter(logger, context)
    return logger


def log_operation(
    logger: Logger,
    operation: str,
    success: bool,
    duration_ms: Optional[float] = None,
    **fields: Any,
) -> None:
    """
    Log the outcome of an operation as one structured record.

    Args:
        logger: Logger or bound adapter.
        operation: Operation name, e.g. ``reconcile_reports``.
        success: INFO when true, ERROR otherwise.
        duration_ms: Elapsed time in milliseconds.
        **fields: Counters and other operation fields.
    """
    extra_fields = {"operation": operation, "success": success}
    if duration_ms is not None:
        extra_fields["duration_ms"] = duration_ms
    extra_fields.update(fields)

    level = logging.INFO if success else logging.ERROR
    message = f"Operation '{operation}' {'succeeded' if success else 'failed'}"
    logger.log(level, message, extra={"extra_fields": extra_fields})
