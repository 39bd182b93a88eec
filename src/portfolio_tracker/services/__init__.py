"""Service layer - performance reconstruction logic."""

from portfolio_tracker.services.event_normalizer import normalize_history
from portfolio_tracker.services.cost_basis_ledger import (
    CostBasisLedger,
    LedgerReplay,
    SymbolLedger,
    performance_to_date,
    reconcile,
)
from portfolio_tracker.services.valuation import interpolate_price, position_value_at
from portfolio_tracker.services.window_selector import eligible_positions, window_start
from portfolio_tracker.services.performance_service import PerformanceService

__all__ = [
    "normalize_history",
    "CostBasisLedger",
    "LedgerReplay",
    "SymbolLedger",
    "performance_to_date",
    "reconcile",
    "interpolate_price",
    "position_value_at",
    "eligible_positions",
    "window_start",
    "PerformanceService",
]
