"""Domain layer - pure business models with no external dependencies."""

from portfolio_tracker.domain.models import (
    Position,
    PositionHistoryEntry,
    PositionEventType,
    TimeRange,
    AnomalyReason,
)

__all__ = [
    "Position",
    "PositionHistoryEntry",
    "PositionEventType",
    "TimeRange",
    "AnomalyReason",
]
