"""Calendar helpers used while walking a date range.

All values are naive ``datetime`` objects interpreted as local wall-clock
time. Conversion to and from ISO-8601 strings happens at the edges via
:func:`parse_timestamp` and :func:`format_timestamp`.
"""

from __future__ import annotations

from datetime import datetime, timedelta

# Monday is 0
_SATURDAY = 5
_SUNDAY = 6


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def add_days(moment: datetime, days: int) -> datetime:
    """Return ``moment`` shifted by ``days`` calendar days."""

    return moment + timedelta(days=days)


def is_weekend(moment: datetime) -> bool:
    return moment.weekday() in (_SATURDAY, _SUNDAY)


def clone_date(moment: datetime) -> datetime:
    """Return an independent copy of ``moment``."""

    return moment.replace()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 date or date-time into a naive local ``datetime``.

    A trailing ``Z`` is accepted as UTC. Values carrying an offset are
    converted to local time before the offset is dropped.

    Raises
    ------
    ValueError
        If ``value`` is not a string or does not describe a valid instant.
    """

    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO-8601 string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as a full ISO-8601 instant with its local UTC offset."""

    return moment.astimezone().isoformat(timespec="seconds")
