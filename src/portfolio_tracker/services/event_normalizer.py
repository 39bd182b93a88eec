"""Validation and chronological ordering of the position history log."""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Optional, Sequence

from portfolio_tracker.core.exceptions import ValidationError
from portfolio_tracker.domain.models import AnomalyReason, PositionHistoryEntry
from portfolio_tracker.domain.views import EventAnomaly, NormalizedHistory

logger = logging.getLogger(__name__)


def _check_entry(entry: PositionHistoryEntry) -> Optional[AnomalyReason]:
    """Return why an entry cannot be replayed, or None if it is usable."""
    if entry.event_type is None:
        return AnomalyReason.UNKNOWN_TYPE
    if not entry.symbol or not entry.symbol.strip():
        return AnomalyReason.MISSING_SYMBOL
    if entry.shares is None or entry.shares <= Decimal("0"):
        return AnomalyReason.NON_POSITIVE_SHARES
    if entry.price is None or entry.price <= Decimal("0"):
        return AnomalyReason.NON_POSITIVE_PRICE
    if entry.effective_date is None:
        return AnomalyReason.MISSING_DATE
    return None


def normalize_history(history: Sequence[PositionHistoryEntry]) -> NormalizedHistory:
    """
    Order the raw log ascending by date_of_action and drop malformed entries.

    The sort is stable, so events sharing an instant replay in log order.
    Returned events are copies with the parsed event type and an upper-cased
    symbol; the caller's entries are never modified.

    Raises:
        ValidationError: if history is None (a contract violation, not bad data)
    """
    if history is None:
        raise ValidationError("position history must be a sequence, got None")

    result = NormalizedHistory()
    accepted: list[tuple[int, PositionHistoryEntry]] = []

    for index, entry in enumerate(history):
        reason = _check_entry(entry)
        if reason is not None:
            logger.warning(
                "Skipping history entry %d (%s %s): %s",
                index, entry.type, entry.symbol, reason.value,
            )
            result.anomalies.append(EventAnomaly(index=index, entry=entry, reason=reason))
            continue

        accepted.append(
            (
                index,
                replace(
                    entry,
                    type=entry.event_type,
                    symbol=entry.symbol.strip().upper(),
                    date_of_action=entry.effective_date,
                ),
            )
        )

    accepted.sort(key=lambda item: item[1].date_of_action)
    result.source_indexes = [index for index, _ in accepted]
    result.events = [entry for _, entry in accepted]

    logger.debug(
        "Normalized %d history entries: %d replayable, %d anomalies",
        len(result.events) + len(result.anomalies),
        len(result.events),
        len(result.anomalies),
    )
    return result
