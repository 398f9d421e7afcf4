"""Tests for structured logging setup."""

import logging

import structlog

from cryptoboard.logging import setup_logging


def test_root_level_and_quiet_client_loggers() -> None:
    setup_logging("DEBUG")

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("aiohttp").level == logging.WARNING
    assert logging.getLogger("ccxt").level == logging.WARNING


def test_bound_context_reaches_event(capsys) -> None:
    setup_logging("INFO")
    structlog.contextvars.bind_contextvars(history_request=7)
    try:
        structlog.get_logger("cryptoboard.test").info("history_displayed", asset_id="bitcoin")
    finally:
        structlog.contextvars.clear_contextvars()

    err = capsys.readouterr().err
    assert "history_displayed" in err
    assert "history_request" in err
