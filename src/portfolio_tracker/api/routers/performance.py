"""Portfolio performance endpoints."""

from fastapi import APIRouter, Depends

from portfolio_tracker.api.deps import get_performance_service
from portfolio_tracker.api.schemas import (
    AnomalyResponse,
    DataPointResponse,
    HistoryRequest,
    HoldingResponse,
    LedgerResponse,
    LedgerSnapshotResponse,
    MetricsResponse,
    MismatchResponse,
    PerformanceRequest,
    PerformanceResponse,
    PositionPerformanceResponse,
    PositionResponse,
    PositionsRequest,
)
from portfolio_tracker.core.timezone import now_eastern
from portfolio_tracker.domain.views import EventAnomaly, PerformanceMetrics
from portfolio_tracker.services import PerformanceService, eligible_positions

router = APIRouter(prefix="/performance", tags=["performance"])


def _anomaly_response(anomaly: EventAnomaly) -> AnomalyResponse:
    entry_type = anomaly.entry.type
    event_type = anomaly.entry.event_type
    return AnomalyResponse(
        index=anomaly.index,
        type=getattr(entry_type, "value", str(entry_type)),
        label=event_type.label if event_type else None,
        symbol=anomaly.entry.symbol,
        reason=anomaly.reason,
    )


def _metrics_response(metrics: PerformanceMetrics) -> MetricsResponse:
    return MetricsResponse(
        week=metrics.week,
        month=metrics.month,
        ytd=metrics.ytd,
        year=metrics.year,
        total=metrics.total,
    )


@router.post("", response_model=PerformanceResponse)
def compute_performance(
    request: PerformanceRequest,
    service: PerformanceService = Depends(get_performance_service),
) -> PerformanceResponse:
    """Compute the performance series for a window plus the standard metrics."""
    report = service.compute(
        positions=[p.to_domain() for p in request.positions],
        position_history=[e.to_domain() for e in request.position_history],
        time_range=request.time_range,
        now=request.now,
    )

    return PerformanceResponse(
        time_range=report.time_range,
        as_of=report.as_of,
        window_start=report.window_start,
        series=[
            DataPointResponse(
                timestamp=point.timestamp,
                percentage_change=point.percentage_change,
            )
            for point in report.series
        ],
        metrics=_metrics_response(report.metrics),
        anomaly_count=report.anomaly_count,
        anomalies=[_anomaly_response(a) for a in report.anomalies],
        reconciliation_mismatches=[
            MismatchResponse(
                symbol=m.symbol,
                ledger_shares=m.ledger_shares,
                snapshot_shares=m.snapshot_shares,
            )
            for m in report.mismatches
        ],
    )


@router.post("/metrics", response_model=MetricsResponse)
def compute_metrics(
    request: PerformanceRequest,
    service: PerformanceService = Depends(get_performance_service),
) -> MetricsResponse:
    """Closing value of the 1W, 1M, YTD, 1Y and ALL windows."""
    now = request.now or now_eastern()
    positions = eligible_positions([p.to_domain() for p in request.positions], now)
    return _metrics_response(service.metrics(positions, now))


@router.post("/ledger", response_model=LedgerResponse)
def replay_ledger(
    request: HistoryRequest,
    service: PerformanceService = Depends(get_performance_service),
) -> LedgerResponse:
    """
    Replay the history log and return the cost-basis ledger timeline.

    Open holdings are also returned as positions for every symbol priced in
    `prices`.
    """
    replay = service.replay_history([e.to_domain() for e in request.position_history])
    derived = replay.derive_positions(request.prices)

    return LedgerResponse(
        snapshots=[
            LedgerSnapshotResponse(
                date=s.date,
                portfolio_value=s.portfolio_value,
                portfolio_cost=s.portfolio_cost,
                performance=s.performance,
                realized_gain_loss=s.realized_gain_loss,
            )
            for s in replay.snapshots
        ],
        holdings=[
            HoldingResponse(
                symbol=book.symbol,
                shares=book.shares,
                cost_basis=book.cost_basis,
                average_price=book.average_price,
                opened_at=book.opened_at,
            )
            for _, book in sorted(replay.open_positions.items())
        ],
        positions=[
            PositionResponse(
                symbol=p.symbol,
                shares=p.shares,
                price=p.price,
                purchase_date=p.purchase_date,
                purchase_price=p.purchase_price,
            )
            for p in derived
        ],
        realized_by_symbol=replay.realized_by_symbol,
        portfolio_value=replay.portfolio_value,
        portfolio_cost=replay.portfolio_cost,
        performance=replay.performance,
        anomaly_count=len(replay.anomalies),
        anomalies=[_anomaly_response(a) for a in replay.anomalies],
    )


@router.post("/positions", response_model=list[PositionPerformanceResponse])
def position_breakdown(
    request: PositionsRequest,
    service: PerformanceService = Depends(get_performance_service),
) -> list[PositionPerformanceResponse]:
    """Unrealized P/L of each held position."""
    breakdown = service.position_breakdown([p.to_domain() for p in request.positions])

    return [
        PositionPerformanceResponse(
            symbol=item.symbol,
            shares=item.shares,
            cost_basis=item.cost_basis,
            market_value=item.market_value,
            profit_loss=item.profit_loss,
            percentage_change=item.percentage_change,
        )
        for item in breakdown
    ]
