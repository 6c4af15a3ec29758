"""Tests for calendar date utilities."""

from datetime import date, datetime, timezone

import pytest

from finplan_app.errors import MalformedDateError
from finplan_app.utils.dates import (
    format_date,
    get_today,
    months_between,
    parse_date,
)


class TestMonthsBetween:
    """Test whole calendar month counting."""

    @pytest.mark.parametrize("start,end,expected", [
        (date(2026, 1, 15), date(2026, 7, 15), 6),
        (date(2026, 1, 15), date(2026, 7, 14), 5),
        (date(2026, 1, 20), date(2026, 2, 19), 0),
        (date(2026, 1, 31), date(2026, 2, 28), 1),
        (date(2025, 11, 30), date(2026, 2, 28), 3),
        (date(2024, 2, 29), date(2025, 2, 28), 12),
        (date(2026, 1, 15), date(2026, 1, 15), 0),
        (date(2026, 1, 15), date(2026, 1, 31), 0),
        (date(2026, 1, 31), date(2026, 3, 30), 1),
        (date(2025, 6, 15), date(2027, 6, 15), 24),
    ])
    def test_forward(self, start, end, expected):
        assert months_between(start, end) == expected

    def test_backward_is_negative(self):
        assert months_between(date(2026, 7, 15), date(2026, 1, 15)) == -6
        assert months_between(date(2026, 7, 14), date(2026, 1, 15)) == -5


class TestParseDate:
    """Test ISO date parsing."""

    @pytest.mark.parametrize("value,expected", [
        ("2026-03-01", date(2026, 3, 1)),
        ("2026-03-01T10:00:00Z", date(2026, 3, 1)),
        ("2026-03-01T10:00:00.000Z", date(2026, 3, 1)),
        ("2026-03-01 10:00:00", date(2026, 3, 1)),
        (datetime(2026, 3, 1, 23, 0, tzinfo=timezone.utc), date(2026, 3, 1)),
        (date(2026, 3, 1), date(2026, 3, 1)),
        (None, None),
        ("", None),
    ])
    def test_valid_values(self, value, expected):
        assert parse_date(value) == expected

    @pytest.mark.parametrize("value", ["not-a-date", "2026-13-01", 20260301])
    def test_invalid_values(self, value):
        with pytest.raises(MalformedDateError) as exc_info:
            parse_date(value)

        assert exc_info.value.expected_format == "ISO 8601"

    def test_format_date(self):
        assert format_date(date(2026, 3, 1)) == "2026-03-01"
        assert format_date(None) is None


class TestGetToday:

    def test_pinned_date(self):
        assert get_today(date(2020, 5, 5)) == date(2020, 5, 5)

    def test_defaults_to_today(self):
        assert get_today() == date.today()
