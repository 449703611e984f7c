"""Unit tests for src/core/logging_config.py"""

import logging
from typing import Generator

import pytest

from src.core.logging_config import (
    LOG_LEVEL_ENV,
    LOGGER_NAME,
    resolve_log_level,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_logger() -> Generator[None, None, None]:
    """setup_logging changes the package logger: put it back after each test"""
    logger = logging.getLogger(LOGGER_NAME)
    level, handlers = logger.level, list(logger.handlers)
    try:
        yield
    finally:
        logger.setLevel(level)
        logger.handlers[:] = handlers


def test_default_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    assert resolve_log_level() == logging.WARNING


@pytest.mark.parametrize(
    "name, level",
    [("debug", logging.DEBUG), ("INFO", logging.INFO), ("Error", logging.ERROR)],
)
def test_level_from_environment(monkeypatch: pytest.MonkeyPatch, name: str, level: int) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, name)
    assert resolve_log_level() == level


def test_unknown_level_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")
    assert resolve_log_level() == logging.WARNING


def test_setup_logging_is_idempotent(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, "DEBUG")
    setup_logging()
    logger = setup_logging()

    assert logger.name == LOGGER_NAME
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_module_loggers_are_children(monkeypatch: pytest.MonkeyPatch) -> None:
    """Loggers of the modules (logging.getLogger(__name__)) inherit the package level"""
    monkeypatch.setenv(LOG_LEVEL_ENV, "INFO")
    setup_logging()
    child = logging.getLogger("src.services.connect4_service")
    assert child.getEffectiveLevel() == logging.INFO
