"""
Tests for quarter calculations.
"""

from datetime import datetime, timedelta, timezone

import pytest

from core.quarters import (
    current_quarter,
    next_quarter_start,
    quarter_number,
    quarter_start,
    quarter_window,
)


@pytest.mark.unit
class TestQuarterIdentifiers:
    """Test quarter labelling."""

    @pytest.mark.parametrize(
        ("month", "expected"),
        [(1, 1), (3, 1), (4, 2), (6, 2), (7, 3), (9, 3), (10, 4), (12, 4)],
    )
    def test_quarter_number(self, month: int, expected: int) -> None:
        assert quarter_number(datetime(2024, month, 10, tzinfo=timezone.utc)) == expected

    def test_april_is_q2(self) -> None:
        assert current_quarter(datetime(2024, 4, 1, tzinfo=timezone.utc)) == "2024-Q2"

    def test_december_is_q4(self) -> None:
        assert current_quarter(datetime(2023, 12, 31, 23, 59, tzinfo=timezone.utc)) == "2023-Q4"


@pytest.mark.unit
class TestQuarterBoundaries:
    """Test quarter start and end calculations."""

    def test_quarter_start_truncates_to_first_instant(self) -> None:
        now = datetime(2024, 5, 17, 13, 45, 12, 999, tzinfo=timezone.utc)
        assert quarter_start(now) == datetime(2024, 4, 1, tzinfo=timezone.utc)

    def test_next_quarter_start_within_year(self) -> None:
        now = datetime(2024, 8, 2, tzinfo=timezone.utc)
        assert next_quarter_start(now) == datetime(2024, 10, 1, tzinfo=timezone.utc)

    def test_next_quarter_start_rolls_over_year(self) -> None:
        now = datetime(2023, 11, 20, 8, 0, tzinfo=timezone.utc)
        assert next_quarter_start(now) == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_window_is_half_open(self) -> None:
        start, end = quarter_window(datetime(2024, 2, 29, tzinfo=timezone.utc))
        assert current_quarter(start) == "2024-Q1"
        assert current_quarter(end - timedelta(microseconds=1)) == "2024-Q1"
        assert current_quarter(end) == "2024-Q2"

    def test_timezone_is_preserved(self) -> None:
        tz = timezone(timedelta(hours=-5))
        now = datetime(2024, 3, 31, 22, 0, tzinfo=tz)
        assert current_quarter(now) == "2024-Q1"
        assert next_quarter_start(now).tzinfo is tz
