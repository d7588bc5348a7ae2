"""
Tests for the week-aware BYMONTH filter and its day-level counterpart.
"""

import pytest

from recurpipe import instant
from recurpipe.calendars.gregorian import GregorianCalendarMetrics
from recurpipe.parts import ByMonthFilter, MonthFilter
from recurpipe.rule import RecurrenceRule


def weekly_rule(months):
    return RecurrenceRule("WEEKLY", bymonth=months, byday=["MO"])


@pytest.fixture
def metrics():
    return GregorianCalendarMetrics()


def all_days(year):
    metrics = GregorianCalendarMetrics()
    return [instant.make_date(year, m, d)
            for m in range(1, 13) for d in range(1, metrics.days_per_month(year, m) + 1)]


class TestByMonthFilter:
    """A week passes if any of its days can lie in an allowed month."""

    @pytest.mark.parametrize("week_start", ["MO", "WE", "SU"])
    def test_own_month_always_passes(self, week_start):
        """Test that days of an allowed month pass whatever the week start."""
        metrics = GregorianCalendarMetrics(week_start)
        by_filter = ByMonthFilter(weekly_rule([3]), metrics)
        for d in range(1, 32):
            assert not by_filter.filter(instant.make_date(2024, 3, d))

    def test_week_ending_in_allowed_month(self, metrics):
        """Test that a week reaching into an allowed month passes."""
        by_filter = ByMonthFilter(weekly_rule([2]), metrics)
        # Wednesday, the week runs from January 29th to February 4th
        assert not by_filter.filter(instant.make_date(2024, 1, 31))

    def test_week_starting_in_allowed_month(self, metrics):
        """Test that a week starting in an allowed month passes."""
        by_filter = ByMonthFilter(weekly_rule([1]), metrics)
        assert not by_filter.filter(instant.make(2024, 2, 2, 10, 0, 0))

    def test_week_inside_other_month(self, metrics):
        """Test that a week entirely inside another month is removed."""
        by_filter = ByMonthFilter(weekly_rule([6]), metrics)
        # March 11th to 17th
        assert by_filter.filter(instant.make_date(2024, 3, 13))

    def test_week_before_the_boundary(self, metrics):
        """Test that the week just before an allowed month is removed."""
        by_filter = ByMonthFilter(weekly_rule([2]), metrics)
        # January 22nd to 28th does not reach February
        assert by_filter.filter(instant.make_date(2024, 1, 24))

    def test_week_start_matters(self):
        """Test that the week start decides which weeks overlap a month."""
        rule = weekly_rule([2])
        value = instant.make_date(2024, 1, 28)
        # Monday weeks: January 22nd to 28th, Sunday weeks: January 28th to February 3rd
        assert ByMonthFilter(rule, GregorianCalendarMetrics("MO")).filter(value)
        assert not ByMonthFilter(rule, GregorianCalendarMetrics("SU")).filter(value)

    def test_identical_construction_behaves_identically(self, metrics):
        """Test that equally built filters agree on every day of a year."""
        first = ByMonthFilter(weekly_rule([2, 9]), metrics)
        second = ByMonthFilter(weekly_rule([2, 9]), GregorianCalendarMetrics())
        days = all_days(2024)
        assert [first.filter(d) for d in days] == [second.filter(d) for d in days]

    def test_does_not_modify_instants(self, metrics):
        """Test that filtering leaves the instant untouched."""
        by_filter = ByMonthFilter(weekly_rule([2]), metrics)
        value = instant.make(2024, 1, 31, 8, 0, 0)
        original = value
        by_filter.filter(value)
        assert value == original


class TestMonthFilter:
    """The day-level BYMONTH filter only looks at the instant's own month."""

    def test_filter(self, metrics):
        """Test filtering by the instant's own month."""
        by_filter = MonthFilter(weekly_rule([2]), metrics)
        assert by_filter.filter(instant.make_date(2024, 1, 31))
        assert not by_filter.filter(instant.make_date(2024, 2, 1))
