"""Tests for date range and time grid helpers."""

from datetime import date

import pytest

from time_registration_audit.synthetic.calendar import (
    build_date_range,
    is_weekend,
    next_saturday,
    parse_iso_date,
    preceding_friday,
    time_grid,
)


class TestBuildDateRange:
    def test_inclusive_interval(self):
        days = build_date_range(date(2024, 1, 1), date(2024, 1, 7))

        assert len(days) == 7
        assert days[0] == date(2024, 1, 1)
        assert days[-1] == date(2024, 1, 7)

    def test_skip_weekends_drops_saturday_and_sunday(self):
        days = build_date_range(date(2024, 1, 1), date(2024, 1, 7), skip_weekends=True)

        assert days == [date(2024, 1, d) for d in range(1, 6)]
        assert not any(is_weekend(d) for d in days)

    def test_single_day(self):
        assert build_date_range(date(2024, 2, 29), date(2024, 2, 29)) == [
            date(2024, 2, 29)
        ]

    def test_weekend_only_interval_with_skip_is_empty(self):
        assert build_date_range(date(2024, 1, 6), date(2024, 1, 7), skip_weekends=True) == []

    def test_inverted_interval_returns_empty(self):
        """End before start yields no days instead of raising."""
        assert build_date_range(date(2024, 1, 7), date(2024, 1, 1)) == []

    def test_ordered_and_unique(self):
        days = build_date_range(date(2023, 12, 25), date(2024, 1, 10))

        assert days == sorted(set(days))


class TestWeekendShifts:
    def test_next_saturday_from_weekday(self):
        # Wednesday 2024-01-03
        assert next_saturday(date(2024, 1, 3)) == date(2024, 1, 6)
        # Monday and Friday
        assert next_saturday(date(2024, 1, 1)) == date(2024, 1, 6)
        assert next_saturday(date(2024, 1, 5)) == date(2024, 1, 6)

    def test_next_saturday_of_saturday_is_itself(self):
        assert next_saturday(date(2024, 1, 6)) == date(2024, 1, 6)

    def test_preceding_friday_from_weekend(self):
        assert preceding_friday(date(2024, 1, 6)) == date(2024, 1, 5)
        assert preceding_friday(date(2024, 1, 7)) == date(2024, 1, 5)

    def test_preceding_friday_from_friday_is_previous_week(self):
        assert preceding_friday(date(2024, 1, 12)) == date(2024, 1, 5)


class TestTimeGrid:
    def test_half_hour_grid(self):
        assert time_grid(7, 9) == [7.0, 7.5, 8.0, 8.5, 9.0]

    def test_break_grid(self):
        assert time_grid(0.5, 2) == [0.5, 1.0, 1.5, 2.0]

    def test_degenerate_range(self):
        assert time_grid(8, 8) == [8.0]

    def test_inverted_bounds_are_normalised(self):
        assert time_grid(9, 7) == time_grid(7, 9)

    def test_grid_never_exceeds_upper_bound(self):
        assert time_grid(7, 8.3) == [7.0, 7.5, 8.0]

    def test_non_positive_step_rejected(self):
        with pytest.raises(ValueError):
            time_grid(7, 9, step=0)


def test_parse_iso_date_accepts_strings_and_dates():
    assert parse_iso_date("2024-01-01") == date(2024, 1, 1)
    assert parse_iso_date(date(2024, 1, 1)) == date(2024, 1, 1)
