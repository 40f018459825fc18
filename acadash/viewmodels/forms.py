"""Coercion and validation helpers for form values.

Form widgets hand back strings, numbers, bools or ``None``. These helpers
normalise them before a draft is built; empty optional values become ``None``
so the use case omits them from the payload.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, List, Optional

from acadash.domain.ports import ValidationError


def text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def optional_text(value: Any) -> Optional[str]:
    normalized = text(value)
    return normalized or None


def require(message: str, *values: Any, field: Optional[str] = None) -> None:
    """Raise ``ValidationError(message)`` when any value is blank."""
    if any(not text(value) for value in values):
        raise ValidationError(message, field=field)


def parse_number(value: Any, *, message: str, field: Optional[str] = None) -> Optional[float]:
    """Return a finite float, ``None`` for blank input, or raise."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ValidationError(message, field=field)
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(message, field=field) from exc
    if not math.isfinite(number):
        raise ValidationError(message, field=field)
    return number


def parse_int(value: Any, *, message: str, minimum: Optional[int] = None, field: Optional[str] = None) -> Optional[int]:
    number = parse_number(value, message=message, field=field)
    if number is None:
        return None
    if number != int(number):
        raise ValidationError(message, field=field)
    coerced = int(number)
    if minimum is not None and coerced < minimum:
        raise ValidationError(message, field=field)
    return coerced


def clean_rows(rows: Iterable[Any]) -> List[str]:
    """Strip list rows and drop blank ones."""
    return [row for row in (text(item) for item in rows) if row]


__all__ = ["clean_rows", "optional_text", "parse_int", "parse_number", "require", "text"]
