"""View models for service outputs."""

from portfolio_tracker.domain.views.performance import (
    EventAnomaly,
    NormalizedHistory,
    LedgerSnapshot,
    ReconciliationMismatch,
    PerformanceDataPoint,
    PerformanceMetrics,
    PositionPerformance,
    PerformanceReport,
)

__all__ = [
    "EventAnomaly",
    "NormalizedHistory",
    "LedgerSnapshot",
    "ReconciliationMismatch",
    "PerformanceDataPoint",
    "PerformanceMetrics",
    "PositionPerformance",
    "PerformanceReport",
]
