"""Identifier parsing and required-field checks run before any mutation."""

import uuid
from typing import Any, Mapping

from catalog.core.exceptions import ValidationError


def parse_id(value: Any, label: str = "id") -> uuid.UUID:
    """Parse an entity identifier; raise ValidationError if malformed."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label}: {value!r}")


def require_non_empty(fields: Mapping[str, Any], name: str) -> None:
    value = fields.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{name} is required")
