"""Unit tests for money and datetime helpers."""

from datetime import UTC, date, datetime, timedelta
from decimal import Decimal

import pytest

from earning_engine.utils.datetime_utils import (
    active_days_since,
    business_date,
    days_until,
    ensure_utc,
)
from earning_engine.utils.money import floor_points, round_pkr


class TestMoney:
    """Whole-rupee rounding."""

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (Decimal("0.5"), 1),
            (Decimal("1.49"), 1),
            (Decimal("1.5"), 2),
            (Decimal("2.5"), 3),
            (10, 10),
        ],
    )
    def test_round_half_up(self, amount, expected):
        assert round_pkr(amount) == expected

    def test_points_are_floored(self):
        assert floor_points(Decimal("49.99")) == 49
        assert floor_points(50) == 50


class TestDatetimeUtils:
    """Timezone handling."""

    def test_naive_is_treated_as_utc(self):
        naive = datetime(2026, 3, 1, 12, 0)
        assert ensure_utc(naive) == datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
        assert ensure_utc(None) is None

    def test_business_date_follows_timezone(self):
        """20:00 UTC is already the next day in Karachi (UTC+5)."""
        late = datetime(2026, 3, 1, 20, 0, tzinfo=UTC)

        assert business_date(late, "Asia/Karachi") == date(2026, 3, 2)
        assert business_date(late, "UTC") == date(2026, 3, 1)

    def test_days_until_never_negative(self):
        now = datetime(2026, 3, 1, tzinfo=UTC)

        assert days_until(now - timedelta(days=3), now) == 0
        assert days_until(now + timedelta(hours=1), now) == 1
        assert days_until(now + timedelta(days=2), now) == 2

    def test_active_days_counts_first_day(self):
        start = datetime(2026, 3, 1, 10, 0, tzinfo=UTC)

        assert active_days_since(start, start) == 1
        assert active_days_since(start, start + timedelta(hours=23)) == 1
        assert active_days_since(start, start + timedelta(days=2)) == 3
