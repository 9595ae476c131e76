"""Pytest configuration and fixtures for lazyvec tests."""

import logging

import pytest

from lazyvec.runtime.config import get_config
from lazyvec.runtime.manager import get_manager


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Drop cached settings so each test sees its own LAZYVEC_* environment."""
    for name in ("LAZYVEC_DEBUG_CHECKS", "LAZYVEC_VECTOR__MAX_SIZE",
                 "LAZYVEC_VECTOR__DEFAULT_CAPACITY"):
        monkeypatch.delenv(name, raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture(autouse=True)
def restore_library_logger():
    """Undo any handler that setup_logging() attached during a test."""
    logger = logging.getLogger("lazyvec")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def configure(monkeypatch):
    """Set LAZYVEC_* variables for the current test."""
    def apply(**env):
        for key, value in env.items():
            monkeypatch.setenv(f"LAZYVEC_{key.upper()}", str(value))
        get_config.cache_clear()
    return apply


@pytest.fixture(autouse=True)
def fresh_profiler_state():
    """Start each test with no active recorders and zeroed buffer counters."""
    get_manager().reset()
    yield
    get_manager().reset()
