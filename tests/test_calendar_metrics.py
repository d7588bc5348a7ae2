"""
Tests for the Gregorian calendar metrics.
"""

import pytest
from datetime import date

from dateutil.relativedelta import SU, TH

from recurpipe import instant
from recurpipe.calendars import get_calendar_metrics, weekday_index
from recurpipe.calendars.gregorian import GregorianCalendarMetrics


@pytest.fixture
def metrics():
    return GregorianCalendarMetrics()


class TestWeekdayIndex:
    """Tests for weekday normalization."""

    @pytest.mark.parametrize("value,expected", [
        (0, 0), (6, 6), ("MO", 0), ("su", 6), (SU, 6), (TH(-1), 3),
    ])
    def test_valid(self, value, expected):
        """Test normalizing ints, names and dateutil weekdays."""
        assert weekday_index(value) == expected

    def test_invalid_name(self):
        """Test rejecting an unknown weekday name."""
        with pytest.raises(ValueError):
            weekday_index("XX")

    def test_out_of_range(self):
        """Test rejecting a weekday number above 6."""
        with pytest.raises(ValueError):
            weekday_index(7)

    def test_invalid_type(self):
        """Test rejecting a float weekday."""
        with pytest.raises(TypeError):
            weekday_index(1.5)


class TestPrimitives:
    """Tests for month and year lengths and weekdays."""

    def test_days_per_month(self, metrics):
        """Test month lengths including February of a leap year."""
        assert metrics.days_per_month(2024, 2) == 29
        assert metrics.days_per_month(2023, 2) == 28
        assert metrics.days_per_month(2024, 4) == 30

    def test_days_per_year(self, metrics):
        """Test year lengths around century leap rules."""
        assert metrics.days_per_year(2000) == 366
        assert metrics.days_per_year(1900) == 365

    def test_day_of_week(self, metrics):
        """Test weekdays of known dates."""
        assert metrics.day_of_week(2024, 1, 1) == 0
        assert metrics.day_of_week(2024, 2, 29) == 3

    def test_day_numbers_round_trip(self, metrics):
        """Test stepping over a leap day with day numbers."""
        number = metrics.to_day_number(2024, 2, 29)
        assert metrics.from_day_number(number + 1) == (2024, 3, 1)

    def test_day_of_year(self, metrics):
        """Test conversions between dates and days of the year."""
        assert metrics.day_of_year(2024, 12, 31) == 366
        assert metrics.month_and_day(2024, 60) == (2, 29)
        assert metrics.month_and_day(2023, 60) == (3, 1)

    def test_is_valid(self, metrics):
        """Test detecting dates that do not exist."""
        assert metrics.is_valid(instant.make_date(2024, 2, 29))
        assert not metrics.is_valid(instant.make_date(2023, 2, 29))
        assert not metrics.is_valid(instant.make_date(2024, 4, 31))


class TestWeeks:
    """Tests for week navigation."""

    def test_start_of_week_monday(self, metrics):
        """Test the start of a Monday week keeps the time."""
        # Wednesday, January 31st 2024
        value = instant.make(2024, 1, 31, 9, 30, 0)
        assert metrics.start_of_week(value) == instant.make(2024, 1, 29, 9, 30, 0)

    def test_start_of_week_is_idempotent(self, metrics):
        """Test that a week start is its own week start."""
        value = instant.make_date(2024, 1, 29)
        assert metrics.start_of_week(value) == value

    def test_start_of_week_sunday(self):
        """Test the start of a Sunday week."""
        metrics = GregorianCalendarMetrics(week_start="SU")
        value = instant.make_date(2024, 1, 31)
        assert metrics.start_of_week(value) == instant.make_date(2024, 1, 28)

    def test_start_of_week_crosses_year(self, metrics):
        """Test a week start in the previous year."""
        value = instant.make_date(2021, 1, 1)
        assert metrics.start_of_week(value) == instant.make_date(2020, 12, 28)

    def test_next_and_prev_day(self, metrics):
        """Test stepping days across month and year ends."""
        value = instant.make(2024, 2, 28, 23, 0, 0)
        assert metrics.next_day(value) == instant.make(2024, 2, 29, 23, 0, 0)
        assert metrics.next_day(value, 2) == instant.make(2024, 3, 1, 23, 0, 0)
        assert metrics.prev_day(instant.make_date(2024, 1, 1)) == instant.make_date(2023, 12, 31)

    @pytest.mark.parametrize("year", [2015, 2020, 2021, 2024, 2026])
    def test_iso_weeks_match_isocalendar(self, metrics, year):
        """Test week one and week counts against ISO calendar dates."""
        week_one = metrics.week_one_start(year)
        assert date.fromordinal(week_one).isocalendar()[:2] == (year, 1)
        last_day_of_iso_year = date.fromordinal(metrics.week_one_start(year + 1) - 1)
        assert last_day_of_iso_year.isocalendar()[1] == metrics.weeks_per_year(year)

    def test_weeks_per_year_with_sunday_start(self):
        """Test week numbering with weeks starting on Sunday."""
        metrics = GregorianCalendarMetrics(week_start=6)
        # 2023 starts on a Sunday, 2023-01-01 opens week 1
        assert metrics.week_one_start(2023) == date(2023, 1, 1).toordinal()
        assert metrics.weeks_per_year(2023) == 52


class TestCalendarLookup:
    """Tests for resolving calendars by name."""

    def test_gregorian(self):
        """Test resolving the Gregorian calendar with a week start."""
        metrics = get_calendar_metrics("gregorian", "TU")
        assert isinstance(metrics, GregorianCalendarMetrics)
        assert metrics.week_start == 1

    def test_unknown(self):
        """Test rejecting an unknown calendar name."""
        with pytest.raises(ValueError):
            get_calendar_metrics("julian")
