from __future__ import annotations

import logging

import pytest

from rbx_products.config import ConfigurationError, configure_logging, optional_env_var


def test_optional_env_var_treats_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BLANK_VAR", " ")
    monkeypatch.setenv("SET_VAR", " value ")
    monkeypatch.delenv("MISSING_VAR", raising=False)

    assert optional_env_var("BLANK_VAR") is None
    assert optional_env_var("SET_VAR") == "value"
    assert optional_env_var("MISSING_VAR") is None


def test_configure_logging_reads_level_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RBX_PRODUCTS_LOG_LEVEL", "warning")
    root = logging.getLogger()
    original_level = root.level
    original_handlers = list(root.handlers)

    try:
        configure_logging(force=True)
        assert root.level == logging.WARNING
        configure_logging(level=logging.DEBUG, force=True)
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = original_handlers
        root.setLevel(original_level)


def test_configure_logging_rejects_unknown_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RBX_PRODUCTS_LOG_LEVEL", "chatty")
    root = logging.getLogger()
    original_handlers = list(root.handlers)

    with pytest.raises(ConfigurationError, match="chatty"):
        configure_logging(force=True)

    assert root.handlers == original_handlers


def test_explicit_level_ignores_bad_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RBX_PRODUCTS_LOG_LEVEL", "chatty")
    root = logging.getLogger()
    original_level = root.level
    original_handlers = list(root.handlers)

    try:
        configure_logging(level=logging.ERROR, force=True)
        assert root.level == logging.ERROR
    finally:
        root.handlers[:] = original_handlers
        root.setLevel(original_level)
