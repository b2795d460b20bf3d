"""Input checks for history generation requests."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from .dates import parse_timestamp, start_of_day
from .errors import RequestValidationFailure


@dataclass(slots=True, frozen=True)
class DateRange:
    """Inclusive range of calendar days, both ends normalized to midnight."""

    start: datetime
    end: datetime

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


@dataclass(slots=True, frozen=True)
class HistoryRequest:
    """A validated generation request."""

    period: DateRange
    intensity: float
    raw_start: str
    raw_end: str


def is_valid_date(value: Any) -> bool:
    try:
        parse_timestamp(value)
    except (TypeError, ValueError, OverflowError):
        return False
    return True


def parse_intensity(value: Any) -> float:
    """Convert ``value`` to a float, raising ``ValueError`` when impossible."""

    if isinstance(value, bool):
        raise ValueError("Intensity must be numeric, not boolean")
    number = float(value)
    if math.isnan(number):
        raise ValueError("Intensity is not a number")
    return number


def is_valid_intensity(value: Any) -> bool:
    try:
        number = parse_intensity(value)
    except (TypeError, ValueError):
        return False
    return 0.0 <= number <= 1.0


def validate_history_request(
    payload: Mapping[str, Any], default_intensity: float = 0.5
) -> HistoryRequest:
    """Validate a ``{startDate, endDate, intensity?}`` payload.

    Parameters
    ----------
    payload:
        Decoded request body.
    default_intensity:
        Intensity applied when the payload omits one.

    Returns
    -------
    A :class:`HistoryRequest` with both range ends truncated to midnight.

    Raises
    ------
    RequestValidationFailure
        With a caller-facing message for each rejected condition.
    """

    start_raw = payload.get("startDate")
    end_raw = payload.get("endDate")

    if not start_raw or not end_raw:
        raise RequestValidationFailure("startDate and endDate are required.")

    if not is_valid_date(start_raw) or not is_valid_date(end_raw):
        raise RequestValidationFailure(
            "Invalid date format. Please use valid ISO date strings."
        )

    raw_intensity = payload.get("intensity", default_intensity)
    if not is_valid_intensity(raw_intensity):
        raise RequestValidationFailure("Intensity must be a number between 0 and 1.")

    start = parse_timestamp(start_raw)
    end = parse_timestamp(end_raw)
    if start > end:
        raise RequestValidationFailure("startDate must be before or equal to endDate.")

    return HistoryRequest(
        period=DateRange(start=start_of_day(start), end=start_of_day(end)),
        intensity=parse_intensity(raw_intensity),
        raw_start=start_raw,
        raw_end=end_raw,
    )
