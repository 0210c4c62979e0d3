"""Calendar-date helpers.

Every date crossing the storage or CLI boundary goes through ``to_date``
once; engine code only ever sees ``datetime.date`` values.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from benefitsengine.core.errors import ValidationError


def to_date(value: date | str | None) -> date | None:
    """Convert a stored or user-supplied value to a calendar date.

    Accepts ``date`` objects and ``YYYY-MM-DD`` strings. A trailing time
    component (``2024-01-01T00:00:00+00:00``) is dropped without any
    timezone conversion so the calendar day never shifts.

    Raises:
        ValidationError: If the string is not an ISO calendar date.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError as e:
        raise ValidationError(f"Invalid date: {value!r}", context={"value": value}) from e


def require_date(value: date | str | None, field: str) -> date:
    """Like ``to_date`` but a missing value is a validation failure."""
    result = to_date(value)
    if result is None:
        raise ValidationError(f"{field} is required", context={"field": field})
    return result


def format_date(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def day_before(value: date) -> date:
    return value - timedelta(days=1)


def age_on(dob: date, on: date) -> int:
    """Whole years between ``dob`` and ``on`` (birthday not yet reached counts down)."""
    age = on.year - dob.year
    if (on.month, on.day) < (dob.month, dob.day):
        age -= 1
    return max(age, 0)
