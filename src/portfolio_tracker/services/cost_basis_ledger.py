"""Cost-basis ledger: replays the position history into portfolio cost and value."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Mapping, Optional

from portfolio_tracker.domain.models import (
    AnomalyReason,
    Position,
    PositionEventType,
    PositionHistoryEntry,
)
from portfolio_tracker.domain.views import (
    EventAnomaly,
    LedgerSnapshot,
    NormalizedHistory,
    ReconciliationMismatch,
)

logger = logging.getLogger(__name__)

BASELINE = Decimal("100")
CENTS = Decimal("0.01")


def performance_to_date(portfolio_value: Decimal, portfolio_cost: Decimal) -> Decimal:
    """
    100-based performance index of the ledger at one point in the replay.

    Formula: 100 + (value - cost) / cost × 100, or 100 when cost is zero.
    """
    if portfolio_cost == Decimal("0"):
        return BASELINE
    return BASELINE + (portfolio_value - portfolio_cost) / portfolio_cost * 100


@dataclass
class SymbolLedger:
    """Running state for one open symbol."""

    symbol: str
    shares: Decimal
    cost_basis: Decimal
    opened_at: datetime

    @property
    def average_price(self) -> Decimal:
        """Weighted average cost per share, rounded to cents."""
        return (self.cost_basis / self.shares).quantize(CENTS)


@dataclass
class LedgerReplay:
    """
    Result of replaying a normalized history.

    Only symbols with shares still held appear in `open_positions`;
    `realized_by_symbol` keeps closed symbols too.
    """

    snapshots: list[LedgerSnapshot] = field(default_factory=list)
    anomalies: list[EventAnomaly] = field(default_factory=list)
    open_positions: dict[str, SymbolLedger] = field(default_factory=dict)
    realized_by_symbol: dict[str, Decimal] = field(default_factory=dict)
    portfolio_value: Decimal = field(default_factory=lambda: Decimal("0"))
    portfolio_cost: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def performance(self) -> Decimal:
        """Performance-to-date after the last replayed event."""
        return performance_to_date(self.portfolio_value, self.portfolio_cost)

    @property
    def realized_gain_loss(self) -> Decimal:
        """Total realized gain/loss across all symbols."""
        return sum(self.realized_by_symbol.values(), Decimal("0"))

    def shares_by_symbol(self) -> dict[str, Decimal]:
        """Share count of every symbol still held."""
        return {symbol: book.shares for symbol, book in self.open_positions.items()}

    def derive_positions(self, prices: Mapping[str, Decimal]) -> list[Position]:
        """
        Build a held-positions snapshot from the replayed log.

        Symbols missing from `prices` are omitted, since a Position needs a
        live price.
        """
        positions: list[Position] = []
        for symbol, book in sorted(self.open_positions.items()):
            price = prices.get(symbol)
            if price is None:
                logger.debug("No price for %s; omitted from derived snapshot", symbol)
                continue
            positions.append(
                Position(
                    symbol=symbol,
                    shares=book.shares,
                    price=price,
                    purchase_date=book.opened_at,
                    purchase_price=book.average_price,
                )
            )
        return positions


class CostBasisLedger:
    """
    Replays position lifecycle events in chronological order.

    Opening events add shares and cost at the execution price. Closing events
    remove cost pro-rata to the shares closed and book the difference to the
    sale proceeds as realized gain/loss, which is added to portfolio value.
    Portfolio value therefore keeps realized gains while portfolio cost only
    reflects shares still open.

    The ledger holds no state between replays.
    """

    def replay(self, history: NormalizedHistory) -> LedgerReplay:
        """Replay normalized events and return the resulting ledger."""
        result = LedgerReplay(anomalies=list(history.anomalies))
        indexes = history.source_indexes or list(range(len(history.events)))

        for index, event in zip(indexes, history.events):
            event_type = PositionEventType.parse(event.type)
            if event_type.closes:
                reason = self._apply_close(result, event)
            else:
                reason = self._apply_open(result, event, event_type)

            if reason is not None:
                logger.warning(
                    "%s for %s %s at %s",
                    reason.value, event_type.value, event.symbol, event.date_of_action,
                )
                result.anomalies.append(EventAnomaly(index=index, entry=event, reason=reason))
                # An over-close is still applied as a full close
                if reason is AnomalyReason.NO_OPEN_POSITION:
                    continue

            self._record_snapshot(result, event.date_of_action)

        logger.debug(
            "Replayed %d events: value=%s cost=%s open=%d",
            len(history.events),
            result.portfolio_value,
            result.portfolio_cost,
            len(result.open_positions),
        )
        return result

    def _apply_open(
        self,
        ledger: LedgerReplay,
        event: PositionHistoryEntry,
        event_type: PositionEventType,
    ) -> Optional[AnomalyReason]:
        """Apply an open/increase; an increase with nothing open is not applied."""
        amount = event.amount
        book = ledger.open_positions.get(event.symbol)
        if book is None:
            if event_type is not PositionEventType.NEW_POSITION:
                return AnomalyReason.NO_OPEN_POSITION
            book = SymbolLedger(
                symbol=event.symbol,
                shares=Decimal("0"),
                cost_basis=Decimal("0"),
                opened_at=event.date_of_action,
            )
            ledger.open_positions[event.symbol] = book
        elif event_type is PositionEventType.NEW_POSITION:
            logger.debug("%s opened while already held; applied as an increase", event.symbol)

        book.shares += event.shares
        book.cost_basis += amount
        ledger.portfolio_cost += amount
        ledger.portfolio_value += amount
        return None

    def _apply_close(
        self,
        ledger: LedgerReplay,
        event: PositionHistoryEntry,
    ) -> Optional[AnomalyReason]:
        """
        Apply a partial or full close.

        A close of a symbol with nothing open is not applied. Closing more
        shares than held closes the whole position and is still flagged.
        """
        book = ledger.open_positions.get(event.symbol)
        if book is None or book.shares <= Decimal("0"):
            return AnomalyReason.NO_OPEN_POSITION

        reason = None
        if event.shares >= book.shares:
            if event.shares > book.shares:
                reason = AnomalyReason.OVER_CLOSE
            closed_shares = book.shares
            cost_removed = book.cost_basis
        else:
            closed_shares = event.shares
            cost_removed = book.cost_basis * closed_shares / book.shares

        realized = closed_shares * event.price - cost_removed
        ledger.portfolio_value += realized
        ledger.portfolio_cost -= cost_removed
        ledger.realized_by_symbol[event.symbol] = (
            ledger.realized_by_symbol.get(event.symbol, Decimal("0")) + realized
        )

        book.cost_basis -= cost_removed
        book.shares -= closed_shares
        if book.shares <= Decimal("0"):
            del ledger.open_positions[event.symbol]
        return reason

    def _record_snapshot(self, ledger: LedgerReplay, date: datetime) -> None:
        snapshot = LedgerSnapshot(
            date=date,
            portfolio_value=ledger.portfolio_value,
            portfolio_cost=ledger.portfolio_cost,
            performance=ledger.performance,
            realized_gain_loss=ledger.realized_gain_loss,
        )
        # One snapshot per distinct date_of_action: the latest event wins
        if ledger.snapshots and ledger.snapshots[-1].date == date:
            ledger.snapshots[-1] = snapshot
        else:
            ledger.snapshots.append(snapshot)


def reconcile(
    replay: LedgerReplay,
    positions: list[Position],
) -> list[ReconciliationMismatch]:
    """
    Compare replayed share counts with the held-positions snapshot.

    Returns one mismatch per symbol held on only one side or held in a
    different quantity, sorted by symbol. Snapshot lots sharing a symbol are
    summed.
    """
    ledger_shares = replay.shares_by_symbol()
    snapshot_shares: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    for position in positions:
        snapshot_shares[position.symbol.upper()] += position.shares

    mismatches: list[ReconciliationMismatch] = []
    for symbol in sorted(set(ledger_shares) | set(snapshot_shares)):
        held = ledger_shares.get(symbol, Decimal("0"))
        expected = snapshot_shares.get(symbol, Decimal("0"))
        if held != expected:
            mismatches.append(
                ReconciliationMismatch(
                    symbol=symbol,
                    ledger_shares=held,
                    snapshot_shares=expected,
                )
            )
    return mismatches
