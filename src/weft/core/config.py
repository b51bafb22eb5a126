"""Runtime configuration from WEFT_* environment variables.

A ``.env`` file is read first when one is found, so local overrides can
live next to a project. Only its WEFT_* keys are used, values already in
the environment win, and ``os.environ`` itself is never modified.

Environment Variables:
    WEFT_DEFAULT_SCHEDULER: "concurrent" (default) or "sequential"
    WEFT_MAX_CONCURRENCY: Max resolvers running at once in a concurrent run
        (unset or 0 = unbounded)
    WEFT_LOG_LEVEL: Log level (default "WARNING")
    WEFT_LOG_FORMAT: "text" (default) or "json"
    WEFT_LOG_FILE: Optional log file path
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from dotenv import dotenv_values, find_dotenv

from weft.core.errors import ConfigError
from weft.core.types import SchedulerKind

ENV_PREFIX = "WEFT_"


def read_dotenv(env_file: str | Path | None = None) -> dict[str, str]:
    """WEFT_* values from a .env file, without exporting anything.

    Args:
        env_file: Explicit path. When None, the nearest .env found from the
            working directory is used if any.

    Returns:
        Dict of the file's WEFT_* keys that have a value.
    """
    dotenv_path = str(env_file) if env_file else find_dotenv(usecwd=True)
    if not dotenv_path:
        return {}
    return {
        key: value
        for key, value in dotenv_values(dotenv_path).items()
        if key.startswith(ENV_PREFIX) and value is not None
    }


@dataclass(frozen=True)
class WeftConfig:
    """Resolved weft settings.

    Attributes:
        default_scheduler: Scheduler used by builders that don't pick one.
        max_concurrency: Bound on concurrent resolvers, None for unbounded.
        log_level: Level name for ``configure_logging``.
        log_format: "text" or "json".
        log_file: Optional log file path.
    """

    default_scheduler: SchedulerKind = SchedulerKind.CONCURRENT
    max_concurrency: int | None = None
    log_level: str = "WARNING"
    log_format: Literal["text", "json"] = "text"
    log_file: str | None = None


def load_config(
    env_file: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> WeftConfig:
    """Build a WeftConfig from the environment.

    Args:
        env_file: Explicit .env path. When None, the nearest .env found
            from the working directory is used if any.
        environ: Mapping to read instead of ``os.environ`` (skips .env
            loading entirely).

    Returns:
        The resolved config.

    Raises:
        ConfigError: If a variable holds an invalid value.
    """
    if environ is None:
        environ = {**read_dotenv(env_file), **os.environ}

    def env(name: str) -> str | None:
        value = environ.get(f"{ENV_PREFIX}{name}")
        return value.strip() if value and value.strip() else None

    scheduler_raw = env("DEFAULT_SCHEDULER") or SchedulerKind.CONCURRENT.value
    try:
        scheduler = SchedulerKind(scheduler_raw.lower())
    except ValueError:
        raise ConfigError(
            f"WEFT_DEFAULT_SCHEDULER must be 'concurrent' or 'sequential', got {scheduler_raw!r}"
        ) from None

    max_concurrency: int | None = None
    concurrency_raw = env("MAX_CONCURRENCY")
    if concurrency_raw is not None:
        try:
            max_concurrency = int(concurrency_raw)
        except ValueError:
            raise ConfigError(
                f"WEFT_MAX_CONCURRENCY must be an integer, got {concurrency_raw!r}"
            ) from None
        if max_concurrency < 0:
            raise ConfigError("WEFT_MAX_CONCURRENCY cannot be negative")
        max_concurrency = max_concurrency or None

    log_format = (env("LOG_FORMAT") or "text").lower()
    if log_format not in ("text", "json"):
        raise ConfigError(f"WEFT_LOG_FORMAT must be 'text' or 'json', got {log_format!r}")

    return WeftConfig(
        default_scheduler=scheduler,
        max_concurrency=max_concurrency,
        log_level=(env("LOG_LEVEL") or "WARNING").upper(),
        log_format=log_format,  # type: ignore[arg-type]
        log_file=env("LOG_FILE"),
    )


_config: WeftConfig | None = None


def get_config() -> WeftConfig:
    """Return the process-wide config, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next ``get_config()`` reloads it."""
    global _config
    _config = None
