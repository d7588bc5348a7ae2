from recurpipe import instant
from recurpipe.expander import ByExpander, ByFilter
from recurpipe.rule import Part


class ByMonthFilter(ByFilter):
    """
    A BYMONTH filter for rules with a weekly scope (FREQ=WEEKLY with BYDAY).

    Weeks that overlap one of the months pass as a whole, so the BYDAY
    expander that follows can still expand the days of such a week that lie
    in the month. Days outside the months are removed later by a
    ``MonthFilter`` on the day level.
    """

    def __init__(self, rule, metrics):
        self._months = frozenset(rule.get_by_part(Part.BYMONTH))
        self._metrics = metrics

    def filter(self, value):
        months = self._months
        if instant.month(value) in months:
            return False

        start_of_week = self._metrics.start_of_week(value)
        if instant.month(start_of_week) in months:
            return False

        end_of_week = self._metrics.next_day(start_of_week, 6)
        return instant.month(end_of_week) not in months

    def __repr__(self):
        return f"ByMonthFilter(months={sorted(self._months)})"


class MonthFilter(ByFilter):
    """Removes instants not in one of the BYMONTH months."""

    def __init__(self, rule, metrics=None):
        self._months = frozenset(rule.get_by_part(Part.BYMONTH))

    def filter(self, value):
        return instant.month(value) not in self._months

    def __repr__(self):
        return f"MonthFilter(months={sorted(self._months)})"


class ByMonthExpander(ByExpander):
    """Expands a yearly seed into the BYMONTH months, keeping day and time."""

    def __init__(self, previous, rule, metrics, start):
        super().__init__(previous, metrics, start)
        self._months = sorted(set(rule.get_by_part(Part.BYMONTH)))

    def expand(self, value, start):
        first_month = 1
        if start is not None and instant.year(value) == instant.year(start):
            # months before the start month can't yield an instance
            first_month = instant.month(start)

        for month in self._months:
            if month >= first_month:
                self.add_instance(instant.with_month(value, month))
