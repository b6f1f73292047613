"""
Utility modules for the TPA decision engine.

Provides:
- Date arithmetic helpers
- Structured logging configuration
"""

from tpa_engine.utils.time_conversion import (
    days_between,
    add_days,
    add_years,
    in_date_range,
)
from tpa_engine.utils.logging import configure_logging, get_logger, DecisionLogger

__all__ = [
    # Time conversion
    "days_between",
    "add_days",
    "add_years",
    "in_date_range",
    # Logging
    "configure_logging",
    "get_logger",
    "DecisionLogger",
]
