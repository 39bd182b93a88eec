"""API routers package."""

from portfolio_tracker.api.routers.performance import router as performance_router

__all__ = [
    "performance_router",
]
