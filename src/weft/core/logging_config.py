"""Logging setup for weft.

Library code only ever calls ``get_logger(__name__)``; nothing is printed
unless the application (or the ``weft`` CLI) calls ``configure_logging``.

Usage:
    from weft.core.logging_config import configure_logging, get_logger

    configure_logging(level="DEBUG")
    logger = get_logger(__name__)

Environment Variables (via weft.core.config):
    WEFT_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    WEFT_LOG_FORMAT: Output format ("text" or "json")
    WEFT_LOG_FILE: Optional log file path
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from typing import Any, Literal

TEXT_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord has; anything else came in through ``extra=``
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys() | {"message", "taskName"}
)

_configured = False


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging.

    Outputs one object per line:
    {
        "timestamp": "2026-10-18T14:30:00.123456",
        "level": "DEBUG",
        "logger": "weft.core.scheduling.concurrent",
        "message": "[task_ab12] task_complete: level=1 (0.0s)",
        "extra": {...}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


def configure_logging(
    level: str | None = None,
    format: Literal["text", "json"] | None = None,
    file_path: str | None = None,
    force: bool = False,
) -> None:
    """Configure the ``weft`` logger hierarchy.

    Called once at startup; later calls are ignored unless ``force=True``.
    Unset arguments fall back to the loaded WeftConfig (which reads the
    WEFT_LOG_* environment variables).

    Args:
        level: Log level name.
        format: "text" or "json".
        file_path: Optional file to log to in addition to stderr.
        force: Reconfigure even if already configured.

    Raises:
        ConfigError: If the level name is not a logging level.
    """
    global _configured
    if _configured and not force:
        return

    from weft.core.config import get_config
    from weft.core.errors import ConfigError

    config = get_config()
    level = (level or config.log_level).upper()
    format = format or config.log_format
    file_path = file_path or config.log_file

    numeric_level = logging.getLevelName(level)
    if not isinstance(numeric_level, int):
        raise ConfigError(f"Unknown log level: {level}")

    logger = logging.getLogger("weft")
    logger.setLevel(numeric_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name (typically ``__name__``)."""
    return logging.getLogger(name)
