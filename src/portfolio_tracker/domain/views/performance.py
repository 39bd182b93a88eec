"""View models for ledger replay and performance outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from portfolio_tracker.domain.models import (
    AnomalyReason,
    PositionHistoryEntry,
    TimeRange,
)


@dataclass
class EventAnomaly:
    """A history entry that was skipped instead of replayed."""

    index: int  # position in the caller's original log
    entry: PositionHistoryEntry
    reason: AnomalyReason


@dataclass
class NormalizedHistory:
    """Replayable events in chronological order, plus what was rejected."""

    events: list[PositionHistoryEntry] = field(default_factory=list)
    anomalies: list[EventAnomaly] = field(default_factory=list)
    # Original log index of each entry in `events`
    source_indexes: list[int] = field(default_factory=list)


@dataclass
class LedgerSnapshot:
    """Aggregate ledger state after all events at one date_of_action."""

    date: datetime
    portfolio_value: Decimal
    portfolio_cost: Decimal
    performance: Decimal
    realized_gain_loss: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass
class ReconciliationMismatch:
    """Replayed share count that disagrees with the held-positions snapshot."""

    symbol: str
    ledger_shares: Decimal
    snapshot_shares: Decimal


@dataclass
class PerformanceDataPoint:
    """One chart point; percentage_change is indexed to 100 at window start."""

    timestamp: datetime
    percentage_change: Decimal


@dataclass
class PerformanceMetrics:
    """Closing index value of each standard window's series."""

    week: Decimal = field(default_factory=lambda: Decimal("0"))
    month: Decimal = field(default_factory=lambda: Decimal("0"))
    ytd: Decimal = field(default_factory=lambda: Decimal("0"))
    year: Decimal = field(default_factory=lambda: Decimal("0"))
    total: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass
class PositionPerformance:
    """Unrealized result of one held position at its live price."""

    symbol: str
    shares: Decimal
    cost_basis: Decimal
    market_value: Decimal
    profit_loss: Decimal
    percentage_change: Optional[Decimal] = None


@dataclass
class PerformanceReport:
    """Everything one computation pass produces for the charting collaborator."""

    time_range: TimeRange
    as_of: datetime
    window_start: Optional[datetime] = None
    series: list[PerformanceDataPoint] = field(default_factory=list)
    metrics: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    ledger: list[LedgerSnapshot] = field(default_factory=list)
    anomalies: list[EventAnomaly] = field(default_factory=list)
    mismatches: list[ReconciliationMismatch] = field(default_factory=list)

    @property
    def anomaly_count(self) -> int:
        return len(self.anomalies)
