"""Tests for logging helpers."""

import logging

import pytest

from context_cache.core.logging import ErrorIds, logError, logEvent, logForDebugging


def test_log_error_includes_id_and_extra(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="context_cache"):
        logError(ErrorIds.CONTEXT_COPY_FAILED, "Could not copy file", extra={"path": "/tmp/x"})

    assert "[ERR_CONTEXT_COPY] Could not copy file | path=/tmp/x" in caplog.text


def test_log_event(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="context_cache"):
        logEvent("context_copied", {"target": "session-1"})

    assert "[EVENT] context_copied | target=session-1" in caplog.text


def test_log_for_debugging_level(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="context_cache"):
        logForDebugging("Navigating", level="info")

    assert caplog.records[-1].levelno == logging.INFO
