"""Pydantic schemas for performance endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from portfolio_tracker.core.timezone import parse_datetime_eastern, to_eastern
from portfolio_tracker.domain.models import (
    AnomalyReason,
    Position,
    PositionHistoryEntry,
    TimeRange,
)


def _coerce_eastern(value: Any) -> Any:
    """Parse strings and localize datetimes to US/Eastern (naive = Eastern)."""
    if isinstance(value, str) and value:
        return parse_datetime_eastern(value)
    if isinstance(value, datetime):
        return to_eastern(value)
    return value


class PositionRequest(BaseModel):
    """Request schema for one held position."""

    symbol: str = Field(..., min_length=1, max_length=20)
    shares: Decimal = Field(..., gt=0, description="Shares currently held")
    price: Decimal = Field(..., ge=0, description="Live price per share")
    purchase_date: datetime = Field(..., description="Original opening time (US/Eastern)")
    purchase_price: Decimal = Field(..., ge=0, description="Weighted average cost per share")

    @field_validator("symbol")
    @classmethod
    def uppercase_symbol(cls, v: str) -> str:
        return v.upper()

    @field_validator("purchase_date", mode="before")
    @classmethod
    def localize_purchase_date(cls, v: Any) -> Any:
        return _coerce_eastern(v)

    def to_domain(self) -> Position:
        return Position(
            symbol=self.symbol,
            shares=self.shares,
            price=self.price,
            purchase_date=self.purchase_date,
            purchase_price=self.purchase_price,
        )


class HistoryEntryRequest(BaseModel):
    """
    Request schema for one position history entry.

    Type, symbol, shares and price may be missing or out of range: such
    entries are reported as anomalies by the engine instead of failing the
    request. Values that cannot be parsed at all still fail validation.
    """

    type: Optional[str] = Field(
        default=None,
        description="NEW_POSITION, INCREASE_POSITION, PARTIAL_CLOSE or CLOSE_POSITION",
    )
    symbol: Optional[str] = None
    shares: Optional[Decimal] = None
    price: Optional[Decimal] = None
    timestamp: Optional[datetime] = Field(default=None, description="When the entry was logged")
    date_of_action: Optional[datetime] = Field(
        default=None,
        description="When the trade happened; defaults to timestamp",
    )

    @field_validator("timestamp", "date_of_action", mode="before")
    @classmethod
    def localize_dates(cls, v: Any) -> Any:
        return _coerce_eastern(v)

    def to_domain(self) -> PositionHistoryEntry:
        return PositionHistoryEntry(
            type=self.type or "",
            symbol=self.symbol or "",
            shares=self.shares,
            price=self.price,
            timestamp=self.timestamp,
            date_of_action=self.date_of_action,
        )


class PerformanceRequest(BaseModel):
    """Request schema for a performance computation."""

    positions: list[PositionRequest] = Field(default_factory=list)
    position_history: list[HistoryEntryRequest] = Field(default_factory=list)
    time_range: Optional[TimeRange] = Field(default=None, description="Defaults to the configured range")
    now: Optional[datetime] = Field(default=None, description="Evaluation time; defaults to current time")

    @field_validator("now", mode="before")
    @classmethod
    def localize_now(cls, v: Any) -> Any:
        return _coerce_eastern(v)


class PositionsRequest(BaseModel):
    """Request schema carrying only the positions snapshot."""

    positions: list[PositionRequest] = Field(default_factory=list)


class HistoryRequest(BaseModel):
    """Request schema carrying the history log and optional live prices."""

    position_history: list[HistoryEntryRequest] = Field(default_factory=list)
    prices: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Live price per symbol, used to derive the held positions",
    )

    @field_validator("prices")
    @classmethod
    def uppercase_price_symbols(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        return {symbol.strip().upper(): price for symbol, price in v.items()}


class DataPointResponse(BaseModel):
    """Response schema for one chart point."""

    timestamp: datetime
    percentage_change: Decimal


class MetricsResponse(BaseModel):
    """Response schema for the five-window metrics summary."""

    week: Decimal
    month: Decimal
    ytd: Decimal
    year: Decimal
    total: Decimal


class AnomalyResponse(BaseModel):
    """Response schema for a skipped history entry."""

    index: int
    type: str
    label: Optional[str] = Field(default=None, description="History table action name")
    symbol: str
    reason: AnomalyReason


class MismatchResponse(BaseModel):
    """Response schema for a ledger/snapshot disagreement."""

    symbol: str
    ledger_shares: Decimal
    snapshot_shares: Decimal


class PerformanceResponse(BaseModel):
    """Response schema for a performance computation."""

    time_range: TimeRange
    as_of: datetime
    window_start: Optional[datetime] = None
    series: list[DataPointResponse]
    metrics: MetricsResponse
    anomaly_count: int
    anomalies: list[AnomalyResponse]
    reconciliation_mismatches: list[MismatchResponse]


class LedgerSnapshotResponse(BaseModel):
    """Response schema for one ledger timeline entry."""

    date: datetime
    portfolio_value: Decimal
    portfolio_cost: Decimal
    performance: Decimal
    realized_gain_loss: Decimal


class HoldingResponse(BaseModel):
    """Response schema for a symbol still open after replay."""

    symbol: str
    shares: Decimal
    cost_basis: Decimal
    average_price: Decimal
    opened_at: datetime


class PositionResponse(BaseModel):
    """Response schema for a position derived from the replayed log."""

    symbol: str
    shares: Decimal
    price: Decimal
    purchase_date: datetime
    purchase_price: Decimal


class LedgerResponse(BaseModel):
    """Response schema for a history replay."""

    snapshots: list[LedgerSnapshotResponse]
    holdings: list[HoldingResponse]
    positions: list[PositionResponse]
    realized_by_symbol: dict[str, Decimal]
    portfolio_value: Decimal
    portfolio_cost: Decimal
    performance: Decimal
    anomaly_count: int
    anomalies: list[AnomalyResponse]


class PositionPerformanceResponse(BaseModel):
    """Response schema for one position's unrealized result."""

    symbol: str
    shares: Decimal
    cost_basis: Decimal
    market_value: Decimal
    profit_loss: Decimal
    percentage_change: Optional[Decimal] = None
