"""Performance service: builds the chartable performance series and metrics."""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from portfolio_tracker.config.settings import Settings, get_settings
from portfolio_tracker.core.timezone import normalize_offset, now_eastern
from portfolio_tracker.domain.models import Position, PositionHistoryEntry, TimeRange
from portfolio_tracker.domain.views import (
    PerformanceDataPoint,
    PerformanceMetrics,
    PerformanceReport,
    PositionPerformance,
)
from portfolio_tracker.services.cost_basis_ledger import CostBasisLedger, LedgerReplay, reconcile
from portfolio_tracker.services.event_normalizer import normalize_history
from portfolio_tracker.services.valuation import position_value_at
from portfolio_tracker.services.window_selector import eligible_positions, window_start

logger = logging.getLogger(__name__)

BASELINE = Decimal("100")

# Metric field -> window whose closing value it reports
METRIC_WINDOWS = {
    "week": TimeRange.ONE_WEEK,
    "month": TimeRange.ONE_MONTH,
    "ytd": TimeRange.YEAR_TO_DATE,
    "year": TimeRange.ONE_YEAR,
    "total": TimeRange.ALL,
}


class PerformanceService:
    """
    Service for portfolio performance reconstruction.

    Every method is a pure function of its arguments: nothing is cached
    between calls, and `now` is passed in explicitly so one computation
    never samples the clock twice.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        ledger: Optional[CostBasisLedger] = None,
    ):
        self._settings = settings or get_settings()
        self._ledger = ledger or CostBasisLedger()

    @property
    def _quantum(self) -> Decimal:
        return Decimal(1).scaleb(-self._settings.percent_places)

    def step_for(self, time_range: TimeRange) -> timedelta:
        """Sampling interval of a window's series."""
        if TimeRange(time_range).is_intraday:
            return timedelta(minutes=self._settings.intraday_step_minutes)
        return timedelta(days=self._settings.daily_step_days)

    def build_series(
        self,
        positions: Sequence[Position],
        time_range: TimeRange,
        now: datetime,
    ) -> list[PerformanceDataPoint]:
        """
        Build the performance series for one window.

        The baseline is the cost of positions opened at or before the window
        start; each point is 100 + (value - baseline) / baseline × 100 with
        positions valued by time interpolation. Points are evenly stepped
        from the start and the series always ends exactly at `now`.
        Returns an empty list when the baseline is zero.
        """
        eligible = eligible_positions(positions, now)
        start = window_start(time_range, eligible, now)
        if start is None:
            return []

        initial_investment = sum(
            (p.cost_basis for p in eligible if p.purchase_date <= start),
            Decimal("0"),
        )
        if initial_investment == Decimal("0"):
            logger.debug("No capital committed by %s; empty %s series", start, time_range)
            return []

        step = self.step_for(time_range)
        series: list[PerformanceDataPoint] = []
        moment = normalize_offset(start)
        while moment <= now:
            series.append(self._point(eligible, initial_investment, moment, now))
            moment = normalize_offset(moment + step)

        if not series or series[-1].timestamp != now:
            series.append(self._point(eligible, initial_investment, now, now))

        logger.debug(
            "Built %s series: %d points from %s, baseline %s",
            TimeRange(time_range).value, len(series), start, initial_investment,
        )
        return series

    def _point(
        self,
        positions: list[Position],
        initial_investment: Decimal,
        moment: datetime,
        now: datetime,
    ) -> PerformanceDataPoint:
        current_value = sum(
            (position_value_at(p, moment, now) for p in positions),
            Decimal("0"),
        )
        change = (current_value - initial_investment) / initial_investment * 100
        return PerformanceDataPoint(
            timestamp=moment,
            percentage_change=(BASELINE + change).quantize(self._quantum),
        )

    def metrics(self, positions: Sequence[Position], now: datetime) -> PerformanceMetrics:
        """
        Closing value of each standard window, each from its own full series.

        A window with an empty series reports 0.
        """
        values = {}
        for name, time_range in METRIC_WINDOWS.items():
            series = self.build_series(positions, time_range, now)
            values[name] = series[-1].percentage_change if series else Decimal("0")
        return PerformanceMetrics(**values)

    def replay_history(self, history: Sequence[PositionHistoryEntry]) -> LedgerReplay:
        """Normalize the raw history log and replay it through a fresh ledger."""
        return self._ledger.replay(normalize_history(history))

    def position_breakdown(self, positions: Sequence[Position]) -> list[PositionPerformance]:
        """Unrealized P/L of each held position at its live price."""
        result: list[PositionPerformance] = []
        for position in positions:
            cost = position.cost_basis
            market_value = position.market_value
            percent: Optional[Decimal] = None
            if cost != Decimal("0"):
                percent = ((market_value - cost) / cost * 100).quantize(self._quantum)
            result.append(
                PositionPerformance(
                    symbol=position.symbol,
                    shares=position.shares,
                    cost_basis=cost.quantize(Decimal("0.01")),
                    market_value=market_value.quantize(Decimal("0.01")),
                    profit_loss=(market_value - cost).quantize(Decimal("0.01")),
                    percentage_change=percent,
                )
            )
        return result

    def compute(
        self,
        positions: Sequence[Position],
        position_history: Sequence[PositionHistoryEntry],
        time_range: Optional[TimeRange] = None,
        now: Optional[datetime] = None,
    ) -> PerformanceReport:
        """
        Run one full computation pass.

        Replays the history for the ledger timeline and anomalies, reconciles
        it against the positions snapshot, then builds the selected series
        and the five-window metrics. `now` is sampled once if not given.
        """
        now = now or now_eastern()
        time_range = TimeRange(time_range or self._settings.default_time_range)

        replay = self.replay_history(position_history)
        eligible = eligible_positions(positions, now)

        mismatches = reconcile(replay, list(positions)) if replay.snapshots else []
        for mismatch in mismatches:
            logger.warning(
                "Ledger holds %s shares of %s but snapshot holds %s",
                mismatch.ledger_shares, mismatch.symbol, mismatch.snapshot_shares,
            )

        report = PerformanceReport(
            time_range=time_range,
            as_of=now,
            ledger=replay.snapshots,
            anomalies=replay.anomalies,
            mismatches=mismatches,
        )
        # No holdings or no history at all is a normal empty state
        if not eligible or not position_history:
            return report

        report.window_start = window_start(time_range, eligible, now)
        report.series = self.build_series(eligible, time_range, now)
        report.metrics = self.metrics(eligible, now)
        return report
