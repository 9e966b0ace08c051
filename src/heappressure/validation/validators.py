"""
Validation functions for configuration values and constructor arguments.
"""

from datetime import timedelta
from typing import Any, List, Optional, Union

from .exceptions import ValidationError


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate that a value is a float within the given bounds.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated float value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        float_value = float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    if float_value != float_value:
        raise ValidationError(
            f"{field_name} must not be NaN",
            field_name=field_name,
            value=value
        )
    if float_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and float_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    return float_value


def validate_duration_seconds(
    value: Union[float, int, timedelta],
    field_name: str = "duration"
) -> float:
    """
    Normalize a duration to seconds and check that it is strictly positive.

    Accepts plain numbers (seconds) or ``datetime.timedelta`` instances.

    Raises:
        ValidationError: If the value is not a positive duration
    """
    if isinstance(value, timedelta):
        value = value.total_seconds()
    seconds = validate_positive_float(value, min_value=0.0, field_name=field_name)
    if seconds <= 0.0:
        raise ValidationError(
            f"{field_name} must be > 0, got {seconds}",
            field_name=field_name,
            value=value
        )
    return seconds


def validate_string_list(
    value: Any,
    field_name: str = "value",
    allow_empty: bool = False
) -> List[str]:
    """
    Validate that a value is a list of non-empty strings.

    Args:
        value: Value to validate
        field_name: Name of the field being validated
        allow_empty: Whether an empty list is acceptable

    Returns:
        The validated list (a copy)

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ValidationError(
            f"{field_name} must be a list of strings, got {type(value).__name__}",
            field_name=field_name,
            value=value
        )
    if not value and not allow_empty:
        raise ValidationError(
            f"{field_name} must not be empty",
            field_name=field_name,
            value=value
        )
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ValidationError(
                f"{field_name} entries must be non-empty strings, got {item!r}",
                field_name=field_name,
                value=value
            )
    return list(value)
