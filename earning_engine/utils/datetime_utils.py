"""
Datetime utilities.

Provides timezone-aware datetime functions.
"""

import math
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo


SECONDS_PER_DAY = 86400


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def ensure_utc(value: datetime | None) -> datetime | None:
    """
    Make a datetime timezone-aware.

    Naive values are stored as UTC (SQLite drops the offset).

    Args:
        value: Datetime or None

    Returns:
        Aware datetime in UTC or None
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def business_date(now: datetime, timezone: str) -> date:
    """
    Get the business-local calendar date of a moment.

    Args:
        now: Aware datetime
        timezone: IANA timezone name defining the business day

    Returns:
        Calendar date in that timezone
    """
    return ensure_utc(now).astimezone(ZoneInfo(timezone)).date()


def days_until(end: datetime, now: datetime) -> int:
    """
    Whole days left until ``end``, rounded up and never negative.
    """
    remaining = (ensure_utc(end) - ensure_utc(now)).total_seconds()
    return max(0, math.ceil(remaining / SECONDS_PER_DAY))


def active_days_since(start: datetime, now: datetime) -> int:
    """
    Day number of ``now`` counted from ``start`` (first day is 1).
    """
    elapsed = ensure_utc(now) - ensure_utc(start)
    return max(0, elapsed // timedelta(days=1)) + 1
