"""Run-scoped logging helpers for scheduler execution.

Log Format:
    [<identifier>] action: key=value, key=value (duration)

Examples:
    [task_ab12cd34ef56ab78] run_start: run_id=20261018_143022_x7k2qa, tasks=4
    [task_0f1e2d3c4b5a6978] task_start: level=0
    [task_0f1e2d3c4b5a6978] task_complete: level=0 (0.2s)
    [task_ab12cd34ef56ab78] run_complete: run_id=20261018_143022_x7k2qa, failed=0 (0.5s)
"""

from __future__ import annotations

import logging
import random
import string
import time
from typing import Any


def generate_run_id() -> str:
    """Generate a unique run ID.

    Format: YYYYMMDD_HHMMSS_xxxxxx
    - Timestamp at second precision
    - 6-char random suffix so parallel runs started in the same second differ

    Returns:
        Run ID string like "20261018_143022_x7k2qa"
    """
    timestamp = time.strftime("%Y%m%d_%H%M%S")
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f"{timestamp}_{suffix}"


def truncate(value: Any, max_length: int = 100) -> str:
    """Truncate a value for logging.

    Args:
        value: Value to truncate.
        max_length: Maximum length before truncation.

    Returns:
        Truncated string with length indicator if truncated.
    """
    s = str(value)
    if len(s) <= max_length:
        return s
    return f"{s[:max_length]}... ({len(s)} chars)"


def _format(identifier: str, action: str, kwargs: dict[str, Any]) -> str:
    kv_pairs = ", ".join(f"{k}={truncate(v)}" for k, v in kwargs.items())
    return f"[{identifier}] {action}: {kv_pairs}" if kv_pairs else f"[{identifier}] {action}"


def log_start(logger: logging.Logger | None, identifier: str, action: str, **kwargs: Any) -> None:
    """Log a start event at DEBUG. No-op without a logger."""
    if logger is None:
        return
    logger.debug(_format(identifier, action, kwargs))


def log_complete(
    logger: logging.Logger | None,
    identifier: str,
    action: str,
    duration_s: float,
    **kwargs: Any,
) -> None:
    """Log a completion event with its duration at DEBUG.

    Args:
        logger: Logger to use. If None, this is a no-op.
        identifier: Primary identifier (task id).
        action: Action name (e.g., "run_complete", "task_complete").
        duration_s: Duration in seconds.
        **kwargs: Additional key=value pairs to log.
    """
    if logger is None:
        return
    msg = _format(identifier, action, kwargs)
    if kwargs:
        logger.debug(f"{msg} ({duration_s:.1f}s)")
    else:
        logger.debug(f"{msg}: ({duration_s:.1f}s)")


def log_error(
    logger: logging.Logger | None,
    identifier: str,
    action: str,
    error: str | BaseException,
    **kwargs: Any,
) -> None:
    """Log an error event at ERROR, with the message truncated to 200 chars."""
    if logger is None:
        return
    kwargs["error"] = truncate(str(error), max_length=200)
    logger.error(_format(identifier, action, kwargs))


def log_warning(logger: logging.Logger | None, identifier: str, action: str, **kwargs: Any) -> None:
    """Log a warning event. No-op without a logger."""
    if logger is None:
        return
    logger.warning(_format(identifier, action, kwargs))
