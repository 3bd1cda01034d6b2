"""Error types and standardized error handling for animoji.

Every failure in a run is fatal: errors are logged once with their context,
transformed into an :class:`AnimojiError` subclass and re-raised so the CLI
can report them and exit.
"""

from __future__ import annotations

import logging
import traceback
from contextlib import contextmanager
from enum import Enum
from typing import Any


class ErrorLevel(Enum):
    """Error severity levels for consistent logging."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AnimojiError(Exception):
    """Base exception class for all animoji errors."""

    def __init__(
        self, message: str, cause: Exception | None = None, context: dict | None = None
    ):
        super().__init__(message)
        self.cause = cause
        self.context = context or {}

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.cause:
            return f"{base_msg} (caused by: {self.cause})"
        return base_msg


class ValidationError(AnimojiError):
    """Raised when run parameters are invalid (frames, rate, resize, effect names)."""

    pass


class DecodeError(AnimojiError):
    """Raised when the source bytes are not a supported image."""

    pass


class ShapeError(AnimojiError):
    """Raised when an image has dimensions an operation cannot handle."""

    pass


class EncodeError(AnimojiError):
    """Raised when writing the animation fails."""

    pass


class ProcessingError(AnimojiError):
    """Raised when frame generation fails for any other reason."""

    pass


def handle_error(
    error: Exception,
    operation: str,
    error_type: type[AnimojiError] = ProcessingError,
    level: ErrorLevel = ErrorLevel.ERROR,
    context: dict | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """Log an error with context and transform it into an AnimojiError.

    Args:
        error: Original exception that occurred
        operation: Description of operation that failed
        error_type: Type of AnimojiError to raise
        level: Logging level for the error
        context: Additional context information
        logger: Logger to use (defaults to module logger)

    Raises:
        AnimojiError: Always; the transformed error chained to ``error``
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    message = f"Failed to {operation}: {error}"

    error_context = dict(context or {})
    error_context.update(
        {
            "operation": operation,
            "original_error_type": type(error).__name__,
        }
    )

    transformed_error = error_type(message, cause=error, context=error_context)

    log_message = f"{operation.capitalize()} failed: {error}"
    context_str = ", ".join(f"{k}={v}" for k, v in error_context.items())
    if context_str:
        log_message += f" (context: {context_str})"

    log_func = getattr(logger, level.value)
    log_func(log_message)

    if level in [ErrorLevel.ERROR, ErrorLevel.CRITICAL]:
        logger.debug(f"Traceback for {operation}: {traceback.format_exc()}")

    raise transformed_error from error


@contextmanager
def error_context(
    operation: str,
    error_type: type[AnimojiError] = ProcessingError,
    level: ErrorLevel = ErrorLevel.ERROR,
    context: dict | None = None,
    logger: logging.Logger | None = None,
) -> Any:
    """Context manager for standardized error handling.

    Usage:
        with error_context("apply effect", context={"effect": "hue", "frame": 3}):
            risky_operation()

    AnimojiError subclasses pass through unchanged; any other exception is
    wrapped in ``error_type``.
    """
    try:
        yield
    except AnimojiError:
        raise
    except Exception as e:
        handle_error(e, operation, error_type, level, context, logger)


def log_info_with_context(
    message: str, context: dict | None = None, logger: logging.Logger | None = None
) -> None:
    """Log an info message with standardized context formatting."""
    if logger is None:
        logger = logging.getLogger(__name__)

    info_msg = message
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        info_msg += f" (context: {context_str})"

    logger.info(info_msg)
