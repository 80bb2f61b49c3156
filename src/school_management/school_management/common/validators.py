from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_text(value, field_name: str) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return value


def require_non_empty(value: Optional[str], field_name: str) -> str:
    value = optional_text(require_text(value, field_name))
    if not value:
        raise ValidationError(f"{field_name} is required")
    return value


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(require_text(value, field_name)) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    if value is not None and len(require_text(value, field_name)) > max_len:
        raise ValidationError(f"{field_name} too long (max {max_len} characters)")
    return value


def optional_text(value: Optional[str]) -> Optional[str]:
    """Trim and collapse empty strings to None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def parse_optional_int(value, field_name: str) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be a whole number")


def require_in_range(value: Optional[int], field_name: str, low: int, high: int) -> Optional[int]:
    if value is not None and (value < low or value > high):
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return value
