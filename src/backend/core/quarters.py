"""
Quarter calculations for vote quotas.

Quotas reset every calendar quarter. A quarter is a 3-month bucket labelled
"{year}-Q{n}" (Jan-Mar is Q1, Oct-Dec is Q4). All functions are pure and
keep the timezone of the timestamp they are given.
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from core.config import settings

QUARTER_MONTHS = 3


def quarter_number(now: datetime) -> int:
    """Return the 1-based quarter (1..4) containing ``now``."""
    return (now.month - 1) // QUARTER_MONTHS + 1


def current_quarter(now: datetime) -> str:
    """Return the quarter identifier for ``now``, e.g. ``"2024-Q2"``."""
    return f"{now.year}-Q{quarter_number(now)}"


def quarter_start(now: datetime) -> datetime:
    """Return the first instant of the quarter containing ``now``."""
    first_month = (quarter_number(now) - 1) * QUARTER_MONTHS + 1
    return now.replace(
        month=first_month,
        day=1,
        hour=0,
        minute=0,
        second=0,
        microsecond=0,
    )


def next_quarter_start(now: datetime) -> datetime:
    """
    Return the first instant of the quarter after the one containing ``now``.

    From Q4 this rolls over to January 1 of the following year.
    """
    start = quarter_start(now)
    next_month = start.month + QUARTER_MONTHS
    if next_month > 12:
        return start.replace(year=start.year + 1, month=1)
    return start.replace(month=next_month)


def quarter_window(now: datetime) -> tuple[datetime, datetime]:
    """Get the current quarter window (start inclusive, end exclusive)."""
    return quarter_start(now), next_quarter_start(now)


def quota_now() -> datetime:
    """Current time in the timezone quota boundaries are evaluated in."""
    now = datetime.now(timezone.utc)
    if settings.QUOTA_TIMEZONE.upper() == "UTC":
        return now
    return now.astimezone(ZoneInfo(settings.QUOTA_TIMEZONE))
