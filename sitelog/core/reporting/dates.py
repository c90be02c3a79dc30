"""Calendar-day helpers.

Reports are keyed by local calendar day, never by UTC instant, so that a
report entered at 23:30 doesn't drift onto the next (or previous) day when a
timestamp crosses a timezone boundary.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta


def to_calendar_day(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone().date()
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty date string")
        if len(text) == 10:
            return date.fromisoformat(text)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return to_calendar_day(datetime.fromisoformat(text))
    raise ValueError(f"Cannot resolve {value!r} to a calendar day")


def day_key(value: date | datetime | str) -> str:
    """``YYYY-MM-DD`` for the value's local calendar day."""
    return to_calendar_day(value).isoformat()


def next_day(value: date | datetime | str) -> date:
    return to_calendar_day(value) + timedelta(days=1)
