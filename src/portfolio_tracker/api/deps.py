"""Dependency injection for FastAPI."""

from fastapi import Depends

from portfolio_tracker.config.settings import Settings, get_settings
from portfolio_tracker.services import CostBasisLedger, PerformanceService


def get_app_settings() -> Settings:
    """Provide the current Settings instance."""
    return get_settings()


def get_cost_basis_ledger() -> CostBasisLedger:
    """Provide a fresh CostBasisLedger (no state survives a request)."""
    return CostBasisLedger()


def get_performance_service(
    settings: Settings = Depends(get_app_settings),
    ledger: CostBasisLedger = Depends(get_cost_basis_ledger),
) -> PerformanceService:
    """Provide PerformanceService instance."""
    return PerformanceService(settings=settings, ledger=ledger)
