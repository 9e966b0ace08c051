"""
Validation and error handling for the heappressure package.

This module provides input validation and error handling with consistent
error reporting across the package.
"""

# Core exception classes and error handling
from .exceptions import (
    ErrorSeverity,
    HeapPressureError,
    ListenerNotFoundError,
    NotificationsUnsupportedError,
    PoolUsageError,
    ValidationError,
    handle_config_error,
    handle_error,
)

# Validation functions
from .validators import (
    validate_duration_seconds,
    validate_positive_float,
    validate_string_list,
)

__all__ = [
    # Core functionality
    "ErrorSeverity",
    "HeapPressureError",
    "ListenerNotFoundError",
    "NotificationsUnsupportedError",
    "PoolUsageError",
    "ValidationError",
    "handle_config_error",
    "handle_error",
    # Validators
    "validate_duration_seconds",
    "validate_positive_float",
    "validate_string_list",
]
