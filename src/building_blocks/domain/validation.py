"""Field validators shared by domain entities and value objects.

Each validator returns the normalized value or raises ValidationError.
"""
from __future__ import annotations

import math
from typing import Any

from building_blocks.domain.exceptions import ValidationError


def require_positive(field: str, value: Any) -> float:
    """Return value as float if it is a positive, finite real number.

    Args:
        field: Field name used in the error
        value: Candidate value

    Returns:
        The value as float

    Raises:
        ValidationError: If value is missing, not numeric, infinite, NaN or not > 0
    """
    # bool is an int subclass; True must not pass as 1.0
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(field=field, message="Must be a number", value=value)
    if not math.isfinite(value):
        raise ValidationError(field=field, message="Must be finite", value=value)
    if not value > 0:
        raise ValidationError(field=field, message="Must be greater than 0", value=value)
    return float(value)


def require_text(field: str, value: Any, max_length: int) -> str:
    """Return value if it is a non-blank string within max_length."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field=field, message="Cannot be empty", value=value)
    if len(value) > max_length:
        raise ValidationError(
            field=field,
            message=f"Cannot exceed {max_length} characters",
            value=value,
        )
    return value


def require_bool(field: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(field=field, message="Must be a boolean", value=value)
    return value
