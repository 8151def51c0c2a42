"""Input validation helpers for repository operations.

Each helper returns the validated value or raises ValidationError, so
callers can validate and assign in one line before opening a transaction.
"""

from __future__ import annotations

import json
from typing import Any

from .errors import ValidationError


def validate_string(
    value: Any,
    name: str,
    *,
    max_length: int | None = None,
    allow_empty: bool = False,
) -> str:
    """Validate a string parameter.

    Args:
        value: The value to validate
        name: Parameter name for error messages
        max_length: Maximum length, or None for no limit
        allow_empty: Whether the empty string is allowed

    Returns:
        The validated string

    Raises:
        ValidationError: If validation fails
    """
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string", field=name, constraint="type")

    if not value and not allow_empty:
        raise ValidationError(f"{name} cannot be empty", field=name, constraint="non_empty")

    if max_length is not None and len(value) > max_length:
        raise ValidationError(
            f"{name} must be at most {max_length} characters",
            field=name,
            constraint="max_length",
        )

    return value


def validate_optional_string(value: Any, name: str, *, max_length: int | None = None) -> str | None:
    """Validate a nullable string; empty strings are kept as-is."""
    if value is None:
        return None
    return validate_string(value, name, max_length=max_length, allow_empty=True)


def validate_int(
    value: Any,
    name: str,
    *,
    min_value: int | None = None,
) -> int:
    """Validate an integer parameter. Booleans are rejected."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer", field=name, value=value, constraint="type")

    if min_value is not None and value < min_value:
        raise ValidationError(
            f"{name} must be at least {min_value}",
            field=name,
            value=value,
            constraint="min_value",
        )

    return value


def validate_id(value: Any, name: str) -> int:
    """Validate an entity identifier."""
    return validate_int(value, name)


def validate_id_list(value: Any, name: str) -> list[int]:
    """Validate a list of entity identifiers."""
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{name} must be a list", field=name, constraint="type")
    return [validate_id(item, f"{name}[{i}]") for i, item in enumerate(value)]


def validate_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{name} must be a boolean", field=name, value=value, constraint="type")
    return value


def validate_mapping(value: Any, name: str) -> dict[str, Any]:
    """Validate a string-keyed mapping that can be stored as JSON (block content, settings)."""
    if not isinstance(value, dict):
        raise ValidationError(f"{name} must be an object", field=name, constraint="type")
    for key in value:
        if not isinstance(key, str):
            raise ValidationError(f"{name} keys must be strings", field=name, constraint="key_type")
    try:
        json.dumps(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"{name} must be JSON-serializable: {e}",
            field=name,
            constraint="json",
        ) from e
    return value
