from recurpipe import instant
from recurpipe.expander import ByExpander, ByFilter
from recurpipe.rule import Part, Scope


class ByMonthDayFilter(ByFilter):
    """Removes instants whose day is not one of the BYMONTHDAY days."""

    def __init__(self, rule, metrics):
        self._monthdays = frozenset(rule.get_by_part(Part.BYMONTHDAY))
        self._metrics = metrics

    def filter(self, value):
        day = instant.day_of_month(value)
        if day in self._monthdays:
            return False
        days_in_month = self._metrics.days_per_month(instant.year(value), instant.month(value))
        return day - days_in_month - 1 not in self._monthdays


class ByMonthDayExpander(ByExpander):
    """
    Expands a seed into the BYMONTHDAY days of its month (monthly scope) or of
    every month of its year (yearly scope). Negative days count from the end
    of the month; days a month does not have are skipped.
    """

    def __init__(self, previous, rule, metrics, start, scope=Scope.MONTHLY):
        super().__init__(previous, metrics, start)
        self._monthdays = sorted(set(rule.get_by_part(Part.BYMONTHDAY)))
        self._scope = scope
        # negative days resolve to different positions in every month
        self.set_needs_sorting(len(self._monthdays) > 1 and self._monthdays[0] < 0)

    def expand(self, value, start):
        year = instant.year(value)
        if self._scope == Scope.YEARLY:
            months = range(1, 13)
        else:
            months = (instant.month(value),)

        for month in months:
            days_in_month = self.metrics.days_per_month(year, month)
            seen = set()
            for monthday in self._monthdays:
                day = monthday if monthday > 0 else days_in_month + monthday + 1
                if 0 < day <= days_in_month and day not in seen:
                    seen.add(day)
                    self.add_instance(instant.with_date(value, year, month, day))
