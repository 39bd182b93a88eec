"""Historical valuation of held positions without a historical price series."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from portfolio_tracker.domain.models import Position


def progress_ratio(purchase_date: datetime, query: datetime, now: datetime) -> Decimal:
    """
    Fraction of the holding period elapsed at `query`, clamped to [0, 1].

    A position opened at `now` counts as fully elapsed.
    """
    if query >= now or now <= purchase_date:
        return Decimal("1")
    if query <= purchase_date:
        return Decimal("0")
    elapsed = Decimal(str((query - purchase_date).total_seconds()))
    span = Decimal(str((now - purchase_date).total_seconds()))
    return elapsed / span


def interpolate_price(
    purchase_price: Decimal,
    current_price: Decimal,
    purchase_date: datetime,
    query: datetime,
    now: datetime,
) -> Optional[Decimal]:
    """
    Estimate the share price at `query` by straight-line interpolation.

    The price moves linearly in time from purchase_price at purchase_date to
    current_price at now. Returns None before the position was opened and
    current_price at or after now (no extrapolation).
    """
    if query < purchase_date:
        return None
    ratio = progress_ratio(purchase_date, query, now)
    return purchase_price + (current_price - purchase_price) * ratio


def position_value_at(position: Position, query: datetime, now: datetime) -> Decimal:
    """Estimated market value of a position at `query`; zero before it was opened."""
    price = interpolate_price(
        purchase_price=position.purchase_price,
        current_price=position.price,
        purchase_date=position.purchase_date,
        query=query,
        now=now,
    )
    if price is None:
        return Decimal("0")
    return position.shares * price
