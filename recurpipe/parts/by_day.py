from recurpipe import instant
from recurpipe.expander import ByExpander, ByFilter
from recurpipe.rule import Part, Scope, position_of, weekday_of


class ByDayFilter(ByFilter):
    """
    Removes instants not falling on one of the BYDAY weekdays.

    Used where BYDAY limits the rule (daily and finer rules, or next to
    BYMONTHDAY/BYYEARDAY/BYWEEKNO) when no selector has a position.
    """

    def __init__(self, rule, metrics):
        self._weekdays = frozenset(weekday_of(s) for s in rule.get_by_part(Part.BYDAY))
        self._metrics = metrics

    def filter(self, value):
        dow = self._metrics.day_of_week(instant.year(value), instant.month(value), instant.day_of_month(value))
        return dow not in self._weekdays


class ByDayPrefixFilter(ByFilter):
    """
    Removes instants not matching one of the BYDAY selectors, positions
    included.

    Used where BYDAY limits a MONTHLY or YEARLY rule (next to BYMONTHDAY or
    BYYEARDAY) and at least one selector has a position. ``2FR`` keeps only
    the second Friday of the month (monthly scope) or of the year (yearly
    scope), ``-1FR`` only the last one.
    """

    def __init__(self, rule, metrics, scope=Scope.MONTHLY):
        self._metrics = metrics
        self._scope = scope
        self._positions = {}
        for selector in rule.get_by_part(Part.BYDAY):
            self._positions.setdefault(weekday_of(selector), set()).add(position_of(selector))

    def filter(self, value):
        metrics = self._metrics
        year, month, day = instant.year(value), instant.month(value), instant.day_of_month(value)
        positions = self._positions.get(metrics.day_of_week(year, month, day))
        if positions is None:
            return True
        if 0 in positions:
            return False

        if self._scope == Scope.MONTHLY:
            index, length = day, metrics.days_per_month(year, month)
        else:
            index, length = metrics.day_of_year(year, month, day), metrics.days_per_year(year)
        nth = (index - 1) // 7 + 1
        nth_last = -((length - index) // 7 + 1)
        return nth not in positions and nth_last not in positions

    def __repr__(self):
        return f"ByDayPrefixFilter(scope={self._scope.name})"


class ByDayExpander(ByExpander):
    """
    Expands a seed into the BYDAY days of its week, month or year.

    In weekly scopes every selected weekday of the seed's week is returned and
    positions are ignored. In monthly and yearly scope a selector with a
    position returns only that occurrence (``2MO`` is the second Monday,
    ``-1FR`` the last Friday of the period), one without returns every
    occurrence.
    """

    def __init__(self, previous, rule, metrics, start, scope=Scope.WEEKLY):
        super().__init__(previous, metrics, start)
        self._scope = scope
        selectors = rule.get_by_part(Part.BYDAY)
        self._weekdays = frozenset(weekday_of(s) for s in selectors)
        self._selectors = [(weekday_of(s), position_of(s)) for s in selectors]
        if scope in (Scope.MONTHLY, Scope.YEARLY) and len(self._selectors) > 1:
            # every selector yields its own run of days
            self.set_needs_sorting()

    def expand(self, value, start):
        if self._scope in (Scope.WEEKLY, Scope.WEEKLY_AND_MONTHLY):
            self._expand_week(value)
            return

        year = instant.year(value)
        if self._scope == Scope.MONTHLY:
            month = instant.month(value)
            length = self.metrics.days_per_month(year, month)
        else:
            month = 1
            length = self.metrics.days_per_year(year)
        self._expand_period(instant.with_date(value, year, month, 1), length)

    def _expand_week(self, value):
        metrics = self.metrics
        week_start = metrics.start_of_week(value)
        for offset in range(7):
            if (metrics.week_start + offset) % 7 in self._weekdays:
                self.add_instance(metrics.next_day(week_start, offset) if offset else week_start)

    def _expand_period(self, first_day, length):
        metrics = self.metrics
        first_weekday = metrics.day_of_week(instant.year(first_day), instant.month(first_day), 1)

        seen = set()
        for weekday, position in self._selectors:
            # offset of the first such weekday within the period
            first = (weekday - first_weekday) % 7
            if position == 0:
                offsets = range(first, length, 7)
            elif position > 0:
                offsets = (first + 7 * (position - 1),)
            else:
                last = first + 7 * ((length - 1 - first) // 7)
                offsets = (last + 7 * (position + 1),)

            for offset in offsets:
                if 0 <= offset < length and offset not in seen:
                    seen.add(offset)
                    self.add_instance(metrics.next_day(first_day, offset) if offset else first_day)
