"""Pydantic schemas for API request/response."""

from portfolio_tracker.api.schemas.performance import (
    PositionRequest,
    HistoryEntryRequest,
    PerformanceRequest,
    PositionsRequest,
    HistoryRequest,
    DataPointResponse,
    MetricsResponse,
    AnomalyResponse,
    MismatchResponse,
    PerformanceResponse,
    LedgerSnapshotResponse,
    HoldingResponse,
    PositionResponse,
    LedgerResponse,
    PositionPerformanceResponse,
)

__all__ = [
    "PositionRequest",
    "HistoryEntryRequest",
    "PerformanceRequest",
    "PositionsRequest",
    "HistoryRequest",
    "DataPointResponse",
    "MetricsResponse",
    "AnomalyResponse",
    "MismatchResponse",
    "PerformanceResponse",
    "LedgerSnapshotResponse",
    "HoldingResponse",
    "PositionResponse",
    "LedgerResponse",
    "PositionPerformanceResponse",
]
