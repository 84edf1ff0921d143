"""Logging infrastructure for context cache.

This module provides structured logging for errors, debugging, and run events.
All logging functions use the standard library logging module for flexibility.
"""

import logging
import sys
from typing import Any


class ErrorIds:
    """Constants for error IDs used in logging and error tracking."""

    # Context store errors
    DIRECTORY_CREATE_FAILED = "ERR_DIR_CREATE"
    CONTEXT_COPY_FAILED = "ERR_CONTEXT_COPY"
    BASE_CONTEXT_MISSING = "ERR_BASE_MISSING"

    # Browser lifecycle errors
    CONTEXT_LAUNCH_FAILED = "ERR_CONTEXT_LAUNCH"
    NAVIGATION_FAILED = "ERR_NAVIGATE"
    CONTEXT_CLOSE_FAILED = "ERR_CONTEXT_CLOSE"
    LIFECYCLE_MISUSE = "ERR_LIFECYCLE"

    # Best-effort page interaction errors
    PAGE_TITLE_FAILED = "ERR_PAGE_TITLE"
    PAGE_EVALUATE_FAILED = "ERR_PAGE_EVALUATE"
    SCREENSHOT_CAPTURE_FAILED = "ERR_SCREENSHOT"

    # General errors
    UNEXPECTED_ERROR = "ERR_UNEXPECTED"
    KEYBOARD_INTERRUPT = "KEYBOARD_INTERRUPT"


_logger: logging.Logger | None = None


def _get_logger() -> logging.Logger:
    """Get or create the logger instance."""
    global _logger
    if _logger is None:
        _logger = logging.getLogger("context_cache")
        _logger.setLevel(logging.DEBUG)

        # Console handler for user-facing logs
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        console_handler.setFormatter(console_formatter)
        _logger.addHandler(console_handler)

    return _logger


def _format_extra(message: str, extra: dict[str, Any] | None) -> str:
    if extra:
        extra_str = ", ".join(f"{k}={v}" for k, v in extra.items())
        return f"{message} | {extra_str}"
    return message


def logError(
    error_id: str,
    message: str,
    exc_info: bool = False,
    extra: dict[str, Any] | None = None,
) -> None:
    """Log an error with its error ID.

    Args:
        error_id: The error ID constant from ErrorIds.
        message: Human-readable error message.
        exc_info: If True, include exception info in the log.
        extra: Optional additional context as key-value pairs.
    """
    logger = _get_logger()
    logger.error(_format_extra(f"[{error_id}] {message}", extra), exc_info=exc_info)


def logForDebugging(
    message: str,
    level: str = "debug",
    extra: dict[str, Any] | None = None,
) -> None:
    """Log a diagnostic message.

    Args:
        message: The message to log.
        level: Log level - "debug", "info", "warning", or "error".
        extra: Optional additional context as key-value pairs.
    """
    logger = _get_logger()
    log_level = getattr(logging, level.upper(), logging.DEBUG)
    logger.log(log_level, _format_extra(message, extra))


def logEvent(
    event_name: str,
    properties: dict[str, Any] | None = None,
) -> None:
    """Log a run event.

    Args:
        event_name: The name of the event (e.g., "context_copied", "base_warmed").
        properties: Optional event properties as key-value pairs.
    """
    logger = _get_logger()
    logger.info(_format_extra(f"[EVENT] {event_name}", properties))


def set_log_level(level: str | int) -> None:
    """Set the logging level for the console handler.

    Args:
        level: Log level as string ("debug", "info", "warning", "error")
               or int (logging.DEBUG, logging.INFO, etc.).
    """
    logger = _get_logger()
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.handlers[0].setLevel(level)


def enable_file_logging(filepath: str) -> None:
    """Enable file logging to a specific file.

    Args:
        filepath: Path to the log file.
    """
    logger = _get_logger()
    file_handler = logging.FileHandler(filepath)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)
