from __future__ import annotations

import logging

import pytest

from intake_engine.config import (
    ConfigurationError,
    LoggingConfig,
    configure_logging,
    get_logging_config,
)


def test_logging_config_defaults_to_info(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("INTAKE_LOG_LEVEL", raising=False)

    assert get_logging_config().level == logging.INFO


def test_logging_config_reads_level_names(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INTAKE_LOG_LEVEL", " debug ")

    assert get_logging_config().level == logging.DEBUG


def test_unknown_level_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INTAKE_LOG_LEVEL", "chatty")

    with pytest.raises(ConfigurationError, match="INTAKE_LOG_LEVEL"):
        get_logging_config()


def test_configure_logging_sets_root_level() -> None:
    root = logging.getLogger()
    previous_level = root.level
    previous_handlers = list(root.handlers)
    try:
        configure_logging(LoggingConfig(level=logging.WARNING), force=True)
        assert root.level == logging.WARNING
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in previous_handlers:
            root.addHandler(handler)
        root.setLevel(previous_level)
