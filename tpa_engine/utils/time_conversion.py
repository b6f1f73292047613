"""
Date utilities for the TPA decision engine.

Provides the date arithmetic shared by eligibility rules and coverage
validation.
"""

from datetime import date, timedelta
from dateutil.relativedelta import relativedelta


def days_between(start: date, end: date) -> int:
    """
    Calculate the number of days between two dates.

    Args:
        start: Start date
        end: End date

    Returns:
        Number of days (positive if end > start)
    """
    return (end - start).days


def add_days(d: date, days: int) -> date:
    """
    Add days to a date.

    Args:
        d: Base date
        days: Number of days to add (can be negative)

    Returns:
        New date
    """
    return d + timedelta(days=days)


def add_years(d: date, years: int) -> date:
    """
    Add years to a date.

    Handles leap days (e.g., Feb 29 + 1 year = Feb 28).

    Args:
        d: Base date
        years: Number of years to add (can be negative)

    Returns:
        New date
    """
    return d + relativedelta(years=years)


def in_date_range(d: date, start: date, end: date) -> bool:
    """Check whether d falls within [start, end] inclusive."""
    return start <= d <= end
