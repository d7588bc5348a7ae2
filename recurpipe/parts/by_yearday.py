from recurpipe import instant
from recurpipe.expander import ByExpander, ByFilter
from recurpipe.rule import Part, Scope


class ByYearDayFilter(ByFilter):
    """Removes instants whose day of the year is not one of the BYYEARDAY days."""

    def __init__(self, rule, metrics):
        self._yeardays = frozenset(rule.get_by_part(Part.BYYEARDAY))
        self._metrics = metrics

    def filter(self, value):
        metrics = self._metrics
        year = instant.year(value)
        yearday = metrics.day_of_year(year, instant.month(value), instant.day_of_month(value))
        if yearday in self._yeardays:
            return False
        return yearday - metrics.days_per_year(year) - 1 not in self._yeardays


class ByYearDayExpander(ByExpander):
    """
    Expands a seed into the BYYEARDAY days of its year. In monthly scope (a
    preceding BYMONTH expansion) only the days of the seed's month are kept.
    """

    def __init__(self, previous, rule, metrics, start, scope=Scope.YEARLY):
        super().__init__(previous, metrics, start)
        self._yeardays = sorted(set(rule.get_by_part(Part.BYYEARDAY)))
        self._scope = scope
        self.set_needs_sorting(len(self._yeardays) > 1 and self._yeardays[0] < 0)

    def expand(self, value, start):
        metrics = self.metrics
        year = instant.year(value)
        days_in_year = metrics.days_per_year(year)
        seed_month = instant.month(value)

        seen = set()
        for yearday in self._yeardays:
            day_number = yearday if yearday > 0 else days_in_year + yearday + 1
            if not 0 < day_number <= days_in_year or day_number in seen:
                continue
            seen.add(day_number)
            month, day = metrics.month_and_day(year, day_number)
            if self._scope == Scope.MONTHLY and month != seed_month:
                continue
            self.add_instance(instant.with_date(value, year, month, day))
