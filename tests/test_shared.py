"""Tests for KITS settings, logging and errors."""

from __future__ import annotations

import importlib
import logging

import pytest

import kits
from kits.shared import settings
from kits.shared.errors import (
    CardinalityError,
    ConfigurationError,
    EvaluationTimeoutError,
    InvalidIPAddressError,
    KitsError,
)
from kits.shared import logging as kits_logging
from kits.shared.logging import (
    LOG_FORMAT,
    PROGRESS_LOGGER,
    RETRY_LOGGER,
    TIMEOUT_LOGGER,
    UTILS_LOGGER,
    configure_file_logging,
    get_logger,
)


@pytest.fixture
def reload_settings(monkeypatch):
    yield
    monkeypatch.undo()
    importlib.reload(settings)


def test_settings_defaults() -> None:
    assert settings.PROJECT_NAME == "KITS"
    assert settings.VERSION == kits.__version__
    assert settings.RETRY_MAX_ATTEMPTS >= 1
    assert settings.TIMEOUT_MIN_WAIT_MS >= 1


def test_settings_read_environment(reload_settings, monkeypatch) -> None:
    monkeypatch.setenv("KITS_RETRY_MAX_ATTEMPTS", "7")
    monkeypatch.setenv("KITS_PRINT_PROGRESS", "FALSE")
    importlib.reload(settings)

    assert settings.RETRY_MAX_ATTEMPTS == 7
    assert settings.PRINT_PROGRESS is False


def test_invalid_numeric_setting(reload_settings, monkeypatch) -> None:
    monkeypatch.setenv("KITS_TIMEOUT_MIN_WAIT_MS", "soon")
    with pytest.raises(ConfigurationError, match="KITS_TIMEOUT_MIN_WAIT_MS"):
        importlib.reload(settings)


@pytest.mark.parametrize(
    "name, value",
    [
        ("KITS_RETRY_MAX_ATTEMPTS", "0"),
        ("KITS_RETRY_MAX_ATTEMPTS", "-1"),
        ("KITS_RETRY_DELAY_SECONDS", "-0.5"),
        ("KITS_RETRY_BACKOFF", "0.5"),
        ("KITS_PROGRESS_NUM_COLUMNS", "0"),
    ],
)
def test_out_of_range_setting(reload_settings, monkeypatch, name, value) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError, match=f"{name} must be >="):
        importlib.reload(settings)


@pytest.mark.parametrize(
    "module_name, logger_name",
    [
        ("kits.execution.timeout", TIMEOUT_LOGGER),
        ("kits.execution.retry", RETRY_LOGGER),
        ("kits.progress.reporter", PROGRESS_LOGGER),
        ("kits.shared.utils", UTILS_LOGGER),
    ],
)
def test_module_loggers_use_declared_names(module_name, logger_name) -> None:
    module = importlib.import_module(module_name)
    assert module.logger.name == logger_name


def test_every_declared_logger_name_is_used() -> None:
    declared = {v for k, v in vars(kits_logging).items() if k.endswith("_LOGGER")}
    assert declared == {TIMEOUT_LOGGER, RETRY_LOGGER, PROGRESS_LOGGER, UTILS_LOGGER}


def test_get_logger_adds_one_handler() -> None:
    logger = get_logger("kits.test.single", level="debug")
    again = get_logger("kits.test.single")

    assert logger is again
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert logger.handlers[0].formatter._fmt == LOG_FORMAT


def test_configure_file_logging(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path / "logs"))
    logger = get_logger("kits.test.file")
    handler = configure_file_logging(logger, "kits.log")
    try:
        logger.warning("written to file")
        handler.flush()
        assert "written to file" in (tmp_path / "logs" / "kits.log").read_text()
    finally:
        logger.removeHandler(handler)
        handler.close()


def test_error_hierarchy() -> None:
    timeout = EvaluationTimeoutError(250)
    assert isinstance(timeout, KitsError)
    assert isinstance(timeout, TimeoutError)
    assert timeout.timeout_ms == 250
    assert str(timeout) == "Evaluation timeout after 250ms"

    assert isinstance(InvalidIPAddressError("x"), ValueError)
    assert str(CardinalityError("0")) == "should have precisely one item, but had 0"
