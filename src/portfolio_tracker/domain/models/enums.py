"""Enumerations for domain models."""

from enum import Enum
from typing import Optional


class PositionEventType(str, Enum):
    """Lifecycle events recorded in the position history log."""

    NEW_POSITION = "NEW_POSITION"
    INCREASE_POSITION = "INCREASE_POSITION"
    PARTIAL_CLOSE = "PARTIAL_CLOSE"
    CLOSE_POSITION = "CLOSE_POSITION"

    @classmethod
    def parse(cls, value: object) -> Optional["PositionEventType"]:
        """Return the matching member, or None for an unrecognized value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def closes(self) -> bool:
        """Return True if this event removes shares."""
        return self in (PositionEventType.PARTIAL_CLOSE, PositionEventType.CLOSE_POSITION)

    @property
    def label(self) -> str:
        """Human-readable action name shown in position history tables."""
        return _EVENT_LABELS[self]


_EVENT_LABELS = {
    PositionEventType.NEW_POSITION: "Opened Position",
    PositionEventType.INCREASE_POSITION: "Increased Position",
    PositionEventType.PARTIAL_CLOSE: "Partial Close",
    PositionEventType.CLOSE_POSITION: "Closed Position",
}


class TimeRange(str, Enum):
    """Named lookback windows for the performance chart."""

    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    YEAR_TO_DATE = "YTD"
    ONE_YEAR = "1Y"
    ALL = "ALL"

    @property
    def is_intraday(self) -> bool:
        """Return True if the window is stepped hourly rather than daily."""
        return self is TimeRange.ONE_DAY


class AnomalyReason(str, Enum):
    """Why a history entry was flagged during normalization or replay."""

    UNKNOWN_TYPE = "UNKNOWN_TYPE"
    NON_POSITIVE_SHARES = "NON_POSITIVE_SHARES"
    NON_POSITIVE_PRICE = "NON_POSITIVE_PRICE"
    MISSING_SYMBOL = "MISSING_SYMBOL"
    MISSING_DATE = "MISSING_DATE"
    NO_OPEN_POSITION = "NO_OPEN_POSITION"
    OVER_CLOSE = "OVER_CLOSE"
