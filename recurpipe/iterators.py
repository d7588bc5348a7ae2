"""
Iterator protocol of the recurrence pipeline and its base generator.

Stages form a linear chain. Each stage owns exactly one predecessor and pulls
sets of instants from it; the outermost stage is a ``FreqIterator`` that seeds
one instant per frequency period.
"""

from abc import ABC, abstractmethod
from typing import Optional

from recurpipe import instant
from recurpipe.calendars import CalendarMetrics
from recurpipe.errors import CalendarOverflowError
from recurpipe.instant_set import InstantSet
from recurpipe.rule import Freq, RecurrenceRule

# Seeds stop one year short of the datetime limit so that week calculations
# may still look into the following year.
MAX_YEAR = 9998

SECONDS_PER_DAY = 86400

_SECONDS_PER_PERIOD = {
    Freq.HOURLY: 3600,
    Freq.MINUTELY: 60,
    Freq.SECONDLY: 1,
}


class RuleIterator(ABC):
    """
    A stage of the recurrence pipeline.

    Args:
        previous: The preceding stage, ``None`` for the first stage of a chain.
    """

    def __init__(self, previous: Optional["RuleIterator"]):
        self.previous = previous
        self._working_set: Optional[InstantSet] = None

    def next_instant(self) -> int:
        """Return the next instant, pulling a new set when the current one is used up."""
        working_set = self._working_set
        if working_set is None or not working_set.has_next():
            working_set = self._working_set = self.next_set()
        return working_set.take()

    @abstractmethod
    def next_set(self) -> InstantSet:
        """
        Return the next non-empty set of instants.

        All instants of a set belong to the same period of the rule's
        frequency. The returned set is owned by the stage and reused by the
        next call.
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class FreqIterator(RuleIterator):
    """
    The first stage of every chain.

    Returns one seed per frequency period, starting with ``start`` and moving
    ``interval`` periods at a time. YEARLY and MONTHLY seeds keep the start's
    day of month even where that day does not exist; later stages replace or
    drop such seeds.
    """

    def __init__(self, rule: RecurrenceRule, metrics: CalendarMetrics, start: int):
        super().__init__(None)
        self._freq = rule.freq
        self._interval = rule.interval
        self._metrics = metrics
        self._start_day = instant.day_of_month(start)
        self._next = start
        self._result_set = InstantSet()

    def next_set(self) -> InstantSet:
        seed = self._next
        if instant.year(seed) > MAX_YEAR:
            raise CalendarOverflowError(f"no recurrence periods after year {MAX_YEAR}")

        result_set = self._result_set
        result_set.clear()
        result_set.add(seed)
        self._next = self._advance(seed)
        return result_set

    def _advance(self, seed: int) -> int:
        freq = self._freq
        interval = self._interval

        if freq == Freq.YEARLY:
            return instant.with_date(seed, instant.year(seed) + interval, instant.month(seed), self._start_day)

        if freq == Freq.MONTHLY:
            months = instant.year(seed) * 12 + instant.month(seed) - 1 + interval
            return instant.with_date(seed, months // 12, months % 12 + 1, self._start_day)

        if freq in (Freq.WEEKLY, Freq.DAILY):
            days = 7 * interval if freq == Freq.WEEKLY else interval
            return self._step_days(seed, days)

        seconds = (instant.hour(seed) * 3600 + instant.minute(seed) * 60 + instant.second(seed)
                   + interval * _SECONDS_PER_PERIOD[freq])
        days, seconds = divmod(seconds, SECONDS_PER_DAY)
        seed = instant.with_time(seed, seconds // 3600, seconds // 60 % 60, seconds % 60)
        return self._step_days(seed, days) if days else seed

    def _step_days(self, seed: int, days: int) -> int:
        try:
            return self._metrics.next_day(seed, days)
        except (OverflowError, ValueError):
            # beyond the last date the calendar can represent
            return instant.with_date(seed, MAX_YEAR + 1, 1, 1)

    def __repr__(self) -> str:
        return f"FreqIterator(freq={self._freq.name}, interval={self._interval})"
