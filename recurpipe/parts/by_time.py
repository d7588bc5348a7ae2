"""Expanders and filters for BYHOUR, BYMINUTE and BYSECOND."""

from recurpipe import instant
from recurpipe.expander import ByExpander, ByFilter
from recurpipe.rule import Part


class _TimeFieldExpander(ByExpander):
    """Replaces one time field of every seed with each selected value."""

    part = None
    replace = None

    def __init__(self, previous, rule, metrics, start):
        super().__init__(previous, metrics, start)
        self._values = sorted(set(rule.get_by_part(self.part)))

    def expand(self, value, start):
        replace = self.replace
        for field in self._values:
            self.add_instance(replace(value, field))


class _TimeFieldFilter(ByFilter):
    """Removes instants whose time field is not one of the selected values."""

    part = None
    field = None

    def __init__(self, rule, metrics=None):
        self._values = frozenset(rule.get_by_part(self.part))

    def filter(self, value):
        return self.field(value) not in self._values


class ByHourExpander(_TimeFieldExpander):
    part = Part.BYHOUR
    replace = staticmethod(instant.with_hour)


class ByHourFilter(_TimeFieldFilter):
    part = Part.BYHOUR
    field = staticmethod(instant.hour)


class ByMinuteExpander(_TimeFieldExpander):
    part = Part.BYMINUTE
    replace = staticmethod(instant.with_minute)


class ByMinuteFilter(_TimeFieldFilter):
    part = Part.BYMINUTE
    field = staticmethod(instant.minute)


class BySecondExpander(_TimeFieldExpander):
    part = Part.BYSECOND
    replace = staticmethod(instant.with_second)


class BySecondFilter(_TimeFieldFilter):
    part = Part.BYSECOND
    field = staticmethod(instant.second)
