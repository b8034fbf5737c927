from __future__ import annotations

from ..core.exceptions import ValidationError
from .datetime_utils import is_hhmm


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_hhmm(value: str, field_name: str) -> str:
    value = (value or "").strip()
    if not is_hhmm(value):
        raise ValidationError(f"{field_name} must be HH:MM")
    return value


def require_positive_id(value: object, field_name: str) -> int:
    try:
        ident = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid") from None
    if ident <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return ident
