# ============================================================================
# Tests for date utilities
# ============================================================================
"""Unit tests for calendar helpers."""

from datetime import date, datetime

import pytest

from app.core.shared.date_utils import add_months, as_date


class TestAddMonths:
    """Tests for add_months."""

    @pytest.mark.parametrize(
        "start, months, expected",
        [
            (date(2026, 3, 10), 3, date(2026, 6, 10)),
            (date(2026, 11, 15), 3, date(2027, 2, 15)),
            (date(2026, 11, 30), 3, date(2027, 2, 28)),
            (date(2027, 11, 30), 3, date(2028, 2, 29)),
            (date(2026, 3, 31), -1, date(2026, 2, 28)),
        ],
    )
    def test_shift(self, start: date, months: int, expected: date) -> None:
        """Should shift by whole months and clamp to the month end."""
        assert add_months(start, months) == expected


class TestAsDate:
    """Tests for as_date."""

    def test_datetime(self) -> None:
        """Should drop the time part."""
        assert as_date(datetime(2026, 3, 10, 23, 59)) == date(2026, 3, 10)

    def test_date(self) -> None:
        """Should pass dates through."""
        assert as_date(date(2026, 3, 10)) == date(2026, 3, 10)
