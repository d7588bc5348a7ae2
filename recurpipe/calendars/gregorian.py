import calendar
from datetime import date

from dateutil.relativedelta import relativedelta, weekdays

from recurpipe import instant
from recurpipe.calendars import CalendarMetrics


class GregorianCalendarMetrics(CalendarMetrics):
    """Calendar metrics of the proleptic Gregorian calendar, years 1 to 9999."""

    name = "gregorian"

    def __init__(self, week_start=0):
        super().__init__(week_start)
        self._week_start_day = weekdays[self.week_start]

    def days_per_month(self, year, month):
        return calendar.monthrange(year, month)[1]

    def days_per_year(self, year):
        return 366 if calendar.isleap(year) else 365

    def day_of_week(self, year, month, day):
        return date(year, month, day).weekday()

    def to_day_number(self, year, month, day):
        return date(year, month, day).toordinal()

    def from_day_number(self, number):
        d = date.fromordinal(number)
        return d.year, d.month, d.day

    def start_of_week(self, value):
        d = date(instant.year(value), instant.month(value), instant.day_of_month(value))
        d += relativedelta(weekday=self._week_start_day(-1))
        return instant.with_date(value, d.year, d.month, d.day)

    def next_day(self, value, days=1):
        d = date(instant.year(value), instant.month(value), instant.day_of_month(value))
        d += relativedelta(days=days)
        return instant.with_date(value, d.year, d.month, d.day)
