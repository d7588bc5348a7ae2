"""
Calendar metrics

A calendar metrics object answers the calendar arithmetic questions the
recurrence pipeline asks: how long months and years are, which weekday a date
falls on, where a week starts and how to step from day to day. The pipeline
never does date arithmetic itself, so another calendar system only needs
another ``CalendarMetrics`` subclass.

Weekdays are numbered 0 (Monday) to 6 (Sunday), months 1 to 12.
"""

from abc import ABC, abstractmethod
from typing import Tuple

from dateutil.relativedelta import weekday

from recurpipe import instant
from recurpipe.conf import WEEKDAY_NAMES


def weekday_index(value) -> int:
    """
    Normalize a weekday given as an int (0=Monday), a two letter name ("MO")
    or a dateutil weekday (``MO``, ``FR(-1)``) to an int.
    """
    if isinstance(value, weekday):
        return value.weekday
    if isinstance(value, str):
        name = value.strip().upper()
        if name not in WEEKDAY_NAMES:
            raise ValueError("Unknown weekday: %r" % value)
        return WEEKDAY_NAMES.index(name)
    if isinstance(value, int) and not isinstance(value, bool):
        if not 0 <= value <= 6:
            raise ValueError("Weekday must be between 0 and 6 (%r given)" % value)
        return value
    raise TypeError("Invalid weekday type: %r" % type(value))


class CalendarMetrics(ABC):
    """Base class for calendar systems used by the recurrence pipeline."""

    name = None

    def __init__(self, week_start=0):
        self.week_start = weekday_index(week_start)

    # -------------------------------------------------------------------------
    # Calendar primitives
    # -------------------------------------------------------------------------

    @abstractmethod
    def days_per_month(self, year: int, month: int) -> int:
        pass

    @abstractmethod
    def days_per_year(self, year: int) -> int:
        pass

    @abstractmethod
    def day_of_week(self, year: int, month: int, day: int) -> int:
        """Return the weekday of a date, 0 (Monday) to 6 (Sunday)."""
        pass

    @abstractmethod
    def to_day_number(self, year: int, month: int, day: int) -> int:
        """Return a running day count for a date. Consecutive days differ by one."""
        pass

    @abstractmethod
    def from_day_number(self, number: int) -> Tuple[int, int, int]:
        """Inverse of :meth:`to_day_number`, returns (year, month, day)."""
        pass

    # -------------------------------------------------------------------------
    # Derived helpers
    # -------------------------------------------------------------------------

    def day_of_year(self, year: int, month: int, day: int) -> int:
        return self.to_day_number(year, month, day) - self.to_day_number(year, 1, 1) + 1

    def month_and_day(self, year: int, year_day: int) -> Tuple[int, int]:
        """Return (month, day) of the given 1-based day of the year."""
        _, month, day = self.from_day_number(self.to_day_number(year, 1, 1) + year_day - 1)
        return month, day

    def is_valid(self, value: int) -> bool:
        """Check that an instant denotes an existing date."""
        month = instant.month(value)
        if not 1 <= month <= 12:
            return False
        day = instant.day_of_month(value)
        return 1 <= day <= self.days_per_month(instant.year(value), month)

    def start_of_week(self, value: int) -> int:
        """Return the first day of the week containing an instant, keeping its time."""
        dow = self.day_of_week(instant.year(value), instant.month(value), instant.day_of_month(value))
        return self.prev_day(value, (dow - self.week_start) % 7)

    def next_day(self, value: int, days: int = 1) -> int:
        """Move an instant by a number of days, keeping its time."""
        number = self.to_day_number(instant.year(value), instant.month(value), instant.day_of_month(value))
        year, month, day = self.from_day_number(number + days)
        return instant.with_date(value, year, month, day)

    def prev_day(self, value: int, days: int = 1) -> int:
        return self.next_day(value, -days)

    def week_one_start(self, year: int) -> int:
        """
        Return the day number of the first day of week 1 of a year.

        Week 1 is the first week with at least four days in the year, which is
        always the week containing January 4th, whatever the week start.
        """
        jan4 = self.to_day_number(year, 1, 4)
        return jan4 - (self.day_of_week(year, 1, 4) - self.week_start) % 7

    def weeks_per_year(self, year: int) -> int:
        """Return the number of weeks (52 or 53) in a year's week numbering."""
        jan1_weekday = self.day_of_week(year, 1, 1)
        # days from January 1st to the first week start inside the year
        first_week_offset = (7 - jan1_weekday + self.week_start) % 7
        if first_week_offset >= 4:
            # January 1st belongs to week 1
            length = self.days_per_year(year) + (jan1_weekday - self.week_start) % 7
        else:
            length = self.days_per_year(year) - first_week_offset
        weeks, rest = divmod(length, 7)
        return weeks + rest // 4

    def __repr__(self):
        return f"{self.__class__.__name__}(week_start={WEEKDAY_NAMES[self.week_start]})"


def get_calendar_metrics(name: str = "gregorian", week_start=0) -> CalendarMetrics:
    """Return calendar metrics for a calendar name."""
    if name == "gregorian":
        from recurpipe.calendars.gregorian import GregorianCalendarMetrics
        return GregorianCalendarMetrics(week_start)
    raise ValueError("Unknown calendar: %r" % name)
