"""
Exception types and error handling helpers.

This module provides the exception hierarchy used across the package and a
small helper for logging errors consistently, optionally re-raising them.
"""

import logging
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class HeapPressureError(Exception):
    """Base class for errors raised by the heappressure package."""


class ValidationError(HeapPressureError, ValueError):
    """
    Exception raised when validation fails.

    This is the main exception type used for configuration and argument checks.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class PoolUsageError(HeapPressureError):
    """
    Raised by a memory pool when its usage snapshot cannot be read.

    Callers treat this as "no usage data this query" rather than a failure.
    """

    def __init__(self, pool_name: str, reason: str = ""):
        message = f"Usage of memory pool '{pool_name}' is unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.pool_name = pool_name


class ListenerNotFoundError(HeapPressureError):
    """Raised when unsubscribing a handle that is not registered with a source."""

    def __init__(self, source_name: str, handle: Any):
        super().__init__(f"Listener {handle!r} is not registered with '{source_name}'")
        self.source_name = source_name
        self.handle = handle


class NotificationsUnsupportedError(HeapPressureError):
    """Raised when subscribing to a collector that does not emit notifications."""

    def __init__(self, source_name: str):
        super().__init__(f"Collector '{source_name}' does not emit notifications")
        self.source_name = source_name


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    # Handle both enum and string severity values
    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)
