"""Core utilities and shared functionality."""

from portfolio_tracker.core.timezone import (
    now_eastern,
    to_eastern,
    parse_datetime_eastern,
    start_of_year,
    normalize_offset,
    EASTERN_TZ,
)
from portfolio_tracker.core.exceptions import (
    AppError,
    ValidationError,
)

__all__ = [
    "now_eastern",
    "to_eastern",
    "parse_datetime_eastern",
    "start_of_year",
    "normalize_offset",
    "EASTERN_TZ",
    "AppError",
    "ValidationError",
]
