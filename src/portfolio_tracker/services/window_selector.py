"""Maps a named time range to the instant its performance window starts."""

import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

from dateutil.relativedelta import relativedelta

from portfolio_tracker.core.exceptions import ValidationError
from portfolio_tracker.core.timezone import start_of_year
from portfolio_tracker.domain.models import Position, TimeRange

logger = logging.getLogger(__name__)


def eligible_positions(positions: Sequence[Position], now: datetime) -> list[Position]:
    """
    Positions that can take part in a computation at `now`.

    Positions dated in the future (clock skew or bad data) are dropped
    entirely rather than clamped.
    """
    if positions is None:
        raise ValidationError("positions must be a sequence, got None")

    eligible = []
    for position in positions:
        if position.purchase_date > now:
            logger.debug(
                "Excluding %s: purchase date %s is after %s",
                position.symbol, position.purchase_date, now,
            )
            continue
        eligible.append(position)
    return eligible


def earliest_purchase_date(positions: Sequence[Position]) -> Optional[datetime]:
    """Earliest purchase date among positions, or None if there are none."""
    if not positions:
        return None
    return min(p.purchase_date for p in positions)


def nominal_start(time_range: TimeRange, now: datetime) -> Optional[datetime]:
    """
    Unclamped start of a window; None for ALL, which depends on the positions.

    1M and 1Y are calendar offsets, so a month back from March 31 is
    February 28/29.
    """
    if time_range is TimeRange.ONE_DAY:
        return now - timedelta(days=1)
    if time_range is TimeRange.ONE_WEEK:
        return now - timedelta(days=7)
    if time_range is TimeRange.ONE_MONTH:
        return now - relativedelta(months=1)
    if time_range is TimeRange.YEAR_TO_DATE:
        return start_of_year(now)
    if time_range is TimeRange.ONE_YEAR:
        return now - relativedelta(years=1)
    return None


def window_start(
    time_range: TimeRange,
    positions: Sequence[Position],
    now: datetime,
) -> Optional[datetime]:
    """
    Start instant of the window for `time_range`.

    The start never precedes the earliest eligible purchase date, since no
    capital was committed before then. Returns None when no position is
    eligible.
    """
    earliest = earliest_purchase_date(eligible_positions(positions, now))
    if earliest is None:
        return None

    start = nominal_start(TimeRange(time_range), now)
    if start is None or start < earliest:
        return earliest
    return start
