"""
Pytest configuration and fixtures for portfolio performance tests.

This module provides:
- Time helpers for Eastern timezone
- Factory helpers for positions and history entries
- Service fixtures with deterministic settings
- FastAPI test client
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

import pytest
from fastapi.testclient import TestClient

from portfolio_tracker.main import app
from portfolio_tracker.api.deps import get_app_settings
from portfolio_tracker.config.settings import Settings, reset_settings
from portfolio_tracker.core.timezone import EASTERN_TZ
from portfolio_tracker.domain.models import (
    Position,
    PositionEventType,
    PositionHistoryEntry,
)
from portfolio_tracker.services import CostBasisLedger, PerformanceService


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def eastern_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in US/Eastern timezone."""
    return EASTERN_TZ.localize(datetime(year, month, day, hour, minute, second))


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return eastern_datetime(2024, 6, 15, 14, 30, 0)


# =============================================================================
# SETTINGS & SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings with defaults, independent of the environment."""
    reset_settings()
    return Settings(_env_file=None)


@pytest.fixture
def cost_basis_ledger() -> CostBasisLedger:
    """Provide a fresh CostBasisLedger."""
    return CostBasisLedger()


@pytest.fixture
def performance_service(test_settings, cost_basis_ledger) -> PerformanceService:
    """Provide test PerformanceService."""
    return PerformanceService(settings=test_settings, ledger=cost_basis_ledger)


# =============================================================================
# PRESET DATA FIXTURES
# =============================================================================


@pytest.fixture
def aapl_position() -> Position:
    """10 AAPL bought at $100 on 2024-01-01, now trading at $150."""
    return make_position(
        symbol="AAPL",
        shares="10",
        price="150",
        purchase_date=eastern_datetime(2024, 1, 1),
        purchase_price="100",
    )


@pytest.fixture
def aapl_history() -> list[PositionHistoryEntry]:
    """Opening event matching the aapl_position fixture."""
    return [
        make_entry(
            PositionEventType.NEW_POSITION,
            "AAPL",
            shares="10",
            price="100",
            date_of_action=eastern_datetime(2024, 1, 1),
        )
    ]


@pytest.fixture
def mixed_history() -> list[PositionHistoryEntry]:
    """
    Out-of-order log for two symbols.

    MSFT: open 5 @ $300 (Feb 1), increase 5 @ $340 (Mar 1), partial close 4 @ $350 (Apr 1)
    TSLA: open 2 @ $200 (Jan 15), full close 2 @ $180 (May 1)
    """
    return [
        make_entry(PositionEventType.PARTIAL_CLOSE, "MSFT", "4", "350",
                   date_of_action=eastern_datetime(2024, 4, 1)),
        make_entry(PositionEventType.NEW_POSITION, "MSFT", "5", "300",
                   date_of_action=eastern_datetime(2024, 2, 1)),
        make_entry(PositionEventType.CLOSE_POSITION, "TSLA", "2", "180",
                   date_of_action=eastern_datetime(2024, 5, 1)),
        make_entry(PositionEventType.INCREASE_POSITION, "MSFT", "5", "340",
                   date_of_action=eastern_datetime(2024, 3, 1)),
        make_entry(PositionEventType.NEW_POSITION, "TSLA", "2", "200",
                   date_of_action=eastern_datetime(2024, 1, 15)),
    ]


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(test_settings) -> TestClient:
    """Provide FastAPI test client with test settings."""
    app.dependency_overrides[get_app_settings] = lambda: test_settings
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.01"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"


def make_position(
    symbol: str,
    shares: Union[str, Decimal],
    price: Union[str, Decimal],
    purchase_date: datetime,
    purchase_price: Union[str, Decimal],
) -> Position:
    """Helper to create a held Position."""
    return Position(
        symbol=symbol,
        shares=Decimal(shares),
        price=Decimal(price),
        purchase_date=purchase_date,
        purchase_price=Decimal(purchase_price),
    )


def make_entry(
    event_type: Union[PositionEventType, str],
    symbol: str,
    shares: Union[str, Decimal],
    price: Union[str, Decimal],
    date_of_action: Optional[datetime] = None,
    timestamp: Optional[datetime] = None,
) -> PositionHistoryEntry:
    """Helper to create a PositionHistoryEntry; timestamp defaults to date_of_action."""
    return PositionHistoryEntry(
        type=event_type,
        symbol=symbol,
        shares=Decimal(shares),
        price=Decimal(price),
        timestamp=timestamp or date_of_action,
        date_of_action=date_of_action,
    )


def position_payload(position: Position) -> dict:
    """Serialize a Position the way API clients send it."""
    return {
        "symbol": position.symbol,
        "shares": str(position.shares),
        "price": str(position.price),
        "purchase_date": position.purchase_date.isoformat(),
        "purchase_price": str(position.purchase_price),
    }


def entry_payload(entry: PositionHistoryEntry) -> dict:
    """Serialize a PositionHistoryEntry the way API clients send it."""
    entry_type = entry.type.value if isinstance(entry.type, PositionEventType) else entry.type
    return {
        "type": entry_type,
        "symbol": entry.symbol,
        "shares": str(entry.shares),
        "price": str(entry.price),
        "timestamp": entry.timestamp.isoformat() if entry.timestamp else None,
        "date_of_action": entry.date_of_action.isoformat() if entry.date_of_action else None,
    }
