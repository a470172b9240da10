"""
Logging setup helpers.

The package itself only creates module loggers; applications embedding the
converter call ``setup_logging`` once to attach console and/or file handlers.

Usage:
    from ecore_dl.core.logging_setup import setup_logging

    setup_logging("DEBUG", log_file="logs/ecore_dl.log", json_format=True)
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging import Handler
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List, Literal, Optional

from ecore_dl.constants import LoggingConfig

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Translation context attached to records through ``extra=``
CONTEXT_FIELDS = ("stage", "class_name", "constraint", "element")


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    Only the translation context listed in ``CONTEXT_FIELDS`` is copied from
    the record, under a nested ``context`` object:

        {"time": "2024-05-01T10:00:00.123+00:00", "level": "WARNING",
         "logger": "ecore_dl.converters.axiom_compiler",
         "message": "Skipping constraint Order::tooMany: ...",
         "context": {"class_name": "Order", "constraint": "tooMany"}}
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = {name: getattr(record, name) for name in CONTEXT_FIELDS if hasattr(record, name)}
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


_MANAGED_HANDLERS: List[Handler] = []


def _clear_managed_handlers() -> None:
    """Remove handlers that were added by this module."""
    root_logger = logging.getLogger()
    for handler in _MANAGED_HANDLERS:
        root_logger.removeHandler(handler)
        handler.close()
    _MANAGED_HANDLERS.clear()


def setup_logging(
    level: LogLevel = LoggingConfig.DEFAULT_LOG_LEVEL,
    log_file: Optional[str] = None,
    *,
    json_format: bool = False,
    include_console: bool = True,
) -> Optional[str]:
    """
    Configure the root logger.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        level: Log level name.
        log_file: Optional path of a rotating log file.
        json_format: Emit one JSON object per record instead of plain text.
        include_console: If False, skip the stderr handler.

    Returns:
        The log file path used, or None when logging to the console only.
    """
    log_level = getattr(logging, str(level).upper(), logging.INFO)

    formatter: logging.Formatter
    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(fmt=LoggingConfig.LOG_FORMAT, datefmt=LoggingConfig.DATE_FORMAT)

    handlers: List[Handler] = []
    if include_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=LoggingConfig.MAX_LOG_FILE_MB * 1024 * 1024,
            backupCount=LoggingConfig.LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    _clear_managed_handlers()
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in handlers:
        root_logger.addHandler(handler)
        _MANAGED_HANDLERS.append(handler)

    if log_file:
        logging.getLogger(__name__).info(f"Logging to: {log_file}")
    return log_file
