"""Domain models package."""

from portfolio_tracker.domain.models.enums import PositionEventType, TimeRange, AnomalyReason
from portfolio_tracker.domain.models.position import Position, PositionHistoryEntry

__all__ = [
    "PositionEventType",
    "TimeRange",
    "AnomalyReason",
    "Position",
    "PositionHistoryEntry",
]
