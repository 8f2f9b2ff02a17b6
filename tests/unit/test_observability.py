"""Unit tests for structured logging utilities in ``observability``."""

from __future__ import annotations

import logging

import pytest

from lib_scoped_config import bind_trace_id, get_logger
from lib_scoped_config.observability import TRACE_ID, log_info, log_warning, make_event


def test_null_handler_present() -> None:
    """Package logger should always include a NullHandler to avoid surprises."""

    logger = get_logger()
    assert any(isinstance(handler, logging.NullHandler) for handler in logger.handlers)


def test_trace_id_in_log(caplog: pytest.LogCaptureFixture) -> None:
    """Structured logs should include the bound trace identifier and contextual fields."""

    caplog.set_level(logging.INFO, logger="lib_scoped_config")
    bind_trace_id("trace-123")
    try:
        log_info("configuration_opened", scope="all", path=None)
    finally:
        bind_trace_id(None)
    record = caplog.records[-1]
    assert getattr(record, "context") == {"trace_id": "trace-123", "scope": "all", "path": None}


def test_log_warning_level(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="lib_scoped_config")
    log_warning("signature_fallback", key="user.name")
    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert getattr(record, "context")["key"] == "user.name"


def test_bind_trace_id_clears_context() -> None:
    bind_trace_id("trace-temp")
    bind_trace_id(None)
    assert TRACE_ID.get() is None


def test_make_event_merges_optional_payload() -> None:
    event = make_event("global", "/home/ada/.gitconfig", {"entries": 3})
    assert event == {"scope": "global", "path": "/home/ada/.gitconfig", "entries": 3}
