"""Position and PositionHistoryEntry domain models."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from portfolio_tracker.domain.models.enums import PositionEventType


@dataclass
class Position:
    """
    Currently held position (snapshot owned by the storage collaborator).

    - shares is always positive; fully closed symbols are never present
    - price is the live quote, refreshed out-of-band
    - purchase_date is the ORIGINAL opening instant, even after increases
    - purchase_price is the weighted average cost per share
    """

    symbol: str
    shares: Decimal
    price: Decimal
    purchase_date: datetime
    purchase_price: Decimal

    @property
    def cost_basis(self) -> Decimal:
        """Dollars committed to the shares currently held."""
        return self.shares * self.purchase_price

    @property
    def market_value(self) -> Decimal:
        """Value of the held shares at the live price."""
        return self.shares * self.price


@dataclass
class PositionHistoryEntry:
    """
    Append-only log entry describing one position lifecycle event.

    `type` is kept as supplied so unrecognized values survive until
    normalization can report them; use `event_type` for the parsed value.
    `date_of_action` is when the trade economically happened and may precede
    `timestamp` (when it was logged).
    """

    type: Union[PositionEventType, str]
    symbol: str
    shares: Decimal
    price: Decimal
    timestamp: Optional[datetime] = None
    date_of_action: Optional[datetime] = None

    @property
    def event_type(self) -> Optional[PositionEventType]:
        """Parsed event type, or None if `type` is not recognized."""
        return PositionEventType.parse(self.type)

    @property
    def effective_date(self) -> Optional[datetime]:
        """Instant used for replay: date_of_action, falling back to timestamp."""
        return self.date_of_action or self.timestamp

    @property
    def amount(self) -> Decimal:
        """Dollar amount of the event (shares x execution price)."""
        return self.shares * self.price
