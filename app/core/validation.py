"""Field format rules shared by request schemas and the client store."""

import re
from collections.abc import Iterable, Mapping
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[\d\s\-+()]+$")
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

REASON_MIN_LENGTH = 10
NOTES_MAX_LENGTH = 500


def is_valid_email(value: str) -> bool:
    """Check a `local@domain.tld` shaped address."""
    return bool(EMAIL_PATTERN.match(value))


def is_valid_phone(value: str) -> bool:
    """Digits, spaces, hyphens, plus signs and parentheses only."""
    return bool(PHONE_PATTERN.match(value))


def is_valid_time(value: str) -> bool:
    """Strict 24-hour `HH:MM`."""
    return bool(TIME_PATTERN.match(value))


def is_blank(value: Any) -> bool:
    """Treat None, empty and whitespace-only strings as absent."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def find_missing_fields(payload: Mapping[str, Any], required: Iterable[str]) -> list[str]:
    """
    Collect every required field that is absent or empty.

    Args:
        payload: Raw request body
        required: Field names in the order they should be reported

    Returns:
        Missing field names, in declared order
    """
    return [field for field in required if is_blank(payload.get(field))]


def parse_id(value: str) -> UUID | None:
    """Parse a record identifier, returning None when it is malformed."""
    try:
        return UUID(value)
    except (TypeError, ValueError, AttributeError):
        return None


def collect_errors(exc: ValidationError) -> list[str]:
    """
    Flatten pydantic errors into per-field messages.

    Custom rule failures already carry a readable message; built-in type
    errors are prefixed with the offending field.
    """
    messages: list[str] = []
    for error in exc.errors():
        if error["type"].startswith("field_"):
            message = error["msg"]
        else:
            location = ".".join(str(part) for part in error["loc"])
            message = f"{location}: {error['msg']}" if location else error["msg"]
        if message not in messages:
            messages.append(message)
    return messages


def submitted_fields(model: type[BaseModel], payload: Mapping[str, Any]) -> dict[str, Any]:
    """
    Pick the fields of a model present in a request body.

    Accepts either wire (camelCase) or field names; unknown keys are ignored.

    Returns:
        Submitted values keyed by field name
    """
    submitted: dict[str, Any] = {}
    for name, field in model.model_fields.items():
        if field.alias and field.alias in payload:
            submitted[name] = payload[field.alias]
        elif name in payload:
            submitted[name] = payload[name]
    return submitted
