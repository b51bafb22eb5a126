"""Pytest configuration and fixtures."""

from __future__ import annotations

import pytest

from weft.core.config import reset_config

WEFT_VARS = (
    "WEFT_DEFAULT_SCHEDULER",
    "WEFT_MAX_CONCURRENCY",
    "WEFT_LOG_LEVEL",
    "WEFT_LOG_FORMAT",
    "WEFT_LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_weft_env(monkeypatch, tmp_path):
    """Isolate every test from WEFT_* variables and stray .env files."""
    for var in WEFT_VARS:
        # setenv first so monkeypatch restores the original state even when
        # a test loads a .env file that writes the variable
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()
