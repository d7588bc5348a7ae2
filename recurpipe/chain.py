"""
Chain construction and iteration

``build_chain`` turns a ``RecurrenceRule`` into a linear chain of stages::

    FreqIterator -> [expanders, one per expanding part] -> [BySetPosFilter]

Parts that limit instead of expand become filters. A limiting filter is
attached to the next expander built after it, so it sees candidates that
already have their final date; the last expander also carries the validity
filter. If no expander exists to carry them a ``FilterExpander`` is added.

``RecurrenceRuleIterator`` consumes a chain, drops instances before the start
and applies COUNT and UNTIL.
"""

import logging
from datetime import datetime
from typing import List, Optional

from recurpipe import instant
from recurpipe.calendars import CalendarMetrics
from recurpipe.errors import CalendarOverflowError
from recurpipe.expander import ByExpander, ByFilter, FilterExpander
from recurpipe.iterators import FreqIterator, RuleIterator
from recurpipe.parts import (
    ByDayExpander, ByDayFilter, ByDayPrefixFilter,
    ByHourExpander, ByHourFilter,
    ByMinuteExpander, ByMinuteFilter,
    ByMonthDayExpander, ByMonthDayFilter,
    ByMonthExpander, ByMonthFilter, MonthFilter,
    BySecondExpander, BySecondFilter,
    BySetPosFilter,
    ByWeekNoExpander,
    ByYearDayExpander, ByYearDayFilter,
    ValidInstantFilter,
)
from recurpipe.rule import Freq, Part, RecurrenceRule, Scope, position_of

logger = logging.getLogger(__name__)


# =============================================================================
# Chain construction
# =============================================================================

class _ChainBuilder:
    """Appends stages to a chain, keeping track of filters waiting for an expander."""

    def __init__(self, rule: RecurrenceRule, start: int, metrics: CalendarMetrics):
        self.rule = rule
        self.metrics = metrics
        # positions of BYSETPOS count instances before the start too
        self.hint = None if rule.has_part(Part.BYSETPOS) else start
        self.head: RuleIterator = FreqIterator(rule, metrics, start)
        self.stages: List[RuleIterator] = [self.head]
        self.expander: Optional[ByExpander] = None
        self._pending: List[ByFilter] = []

    def expand(self, expander_class, *args) -> ByExpander:
        expander = expander_class(self.head, self.rule, self.metrics, self.hint, *args)
        for by_filter in self._pending:
            expander.add_filter(by_filter)
        self._pending = []
        self._append(expander)
        return expander

    def limit(self, by_filter: ByFilter) -> None:
        self._pending.append(by_filter)

    def limit_here(self, by_filter: ByFilter) -> None:
        """Filter the current head's instants right away."""
        stage = FilterExpander(self.head, self.metrics, self.hint)
        stage.add_filter(by_filter)
        self._append(stage)

    def finish(self) -> RuleIterator:
        self.limit(ValidInstantFilter(self.metrics))
        if self.expander is None:
            self._append(FilterExpander(self.head, self.metrics, self.hint))
        for by_filter in self._pending:
            self.expander.add_filter(by_filter)
        self._pending = []

        if self.rule.has_part(Part.BYSETPOS):
            self.head = BySetPosFilter(self.head, self.rule)
            self.stages.append(self.head)

        logger.debug(f"Built recurrence chain for {self.rule!r}: {' -> '.join(repr(s) for s in self.stages)}")
        return self.head

    def _append(self, expander: ByExpander) -> None:
        self.head = self.expander = expander
        self.stages.append(expander)


def build_chain(rule: RecurrenceRule, start: int, metrics: CalendarMetrics) -> RuleIterator:
    """
    Build the stages producing the instances of a rule.

    Args:
        rule: The rule to expand.
        start: The first instance, a packed instant.
        metrics: Calendar metrics matching the rule's week start.

    Returns:
        The last stage of the chain. Its sets are sorted, valid and may still
        contain instants before ``start``.
    """
    builder = _ChainBuilder(rule, start, metrics)
    freq = rule.freq
    has = rule.has_part

    if has(Part.BYMONTH):
        if freq == Freq.YEARLY and not has(Part.BYWEEKNO):
            builder.expand(ByMonthExpander)
        elif freq == Freq.WEEKLY and has(Part.BYDAY):
            builder.limit_here(ByMonthFilter(rule, metrics))
        else:
            builder.limit(MonthFilter(rule, metrics))

    if has(Part.BYWEEKNO):
        builder.expand(ByWeekNoExpander)

    if has(Part.BYYEARDAY):
        if freq == Freq.YEARLY:
            builder.expand(ByYearDayExpander, Scope.MONTHLY if has(Part.BYMONTH) else Scope.YEARLY)
        else:
            builder.limit(ByYearDayFilter(rule, metrics))

    if has(Part.BYMONTHDAY):
        if freq == Freq.YEARLY and not has(Part.BYYEARDAY):
            builder.expand(ByMonthDayExpander, Scope.MONTHLY if has(Part.BYMONTH) else Scope.YEARLY)
        elif freq == Freq.MONTHLY:
            builder.expand(ByMonthDayExpander, Scope.MONTHLY)
        else:
            builder.limit(ByMonthDayFilter(rule, metrics))

    if has(Part.BYDAY):
        day_level_parts = has(Part.BYYEARDAY) or has(Part.BYMONTHDAY) or has(Part.BYWEEKNO)
        if freq == Freq.WEEKLY:
            if has(Part.BYMONTH):
                expander = builder.expand(ByDayExpander, Scope.WEEKLY_AND_MONTHLY)
                expander.add_filter(MonthFilter(rule, metrics))
            else:
                builder.expand(ByDayExpander, Scope.WEEKLY)
        elif freq == Freq.MONTHLY and not day_level_parts:
            builder.expand(ByDayExpander, Scope.MONTHLY)
        elif freq == Freq.YEARLY and not day_level_parts:
            builder.expand(ByDayExpander, Scope.MONTHLY if has(Part.BYMONTH) else Scope.YEARLY)
        elif any(position_of(s) for s in rule.get_by_part(Part.BYDAY)):
            # only MONTHLY and YEARLY rules get here with positions
            scope = Scope.MONTHLY if freq == Freq.MONTHLY or has(Part.BYMONTH) else Scope.YEARLY
            builder.limit(ByDayPrefixFilter(rule, metrics, scope))
        else:
            builder.limit(ByDayFilter(rule, metrics))

    for part, finest_expanding, expander_class, filter_class in (
        (Part.BYHOUR, Freq.DAILY, ByHourExpander, ByHourFilter),
        (Part.BYMINUTE, Freq.HOURLY, ByMinuteExpander, ByMinuteFilter),
        (Part.BYSECOND, Freq.MINUTELY, BySecondExpander, BySecondFilter),
    ):
        if has(part):
            if freq.value >= finest_expanding.value:
                builder.expand(expander_class)
            else:
                builder.limit(filter_class(rule, metrics))

    return builder.finish()


# =============================================================================
# Iteration
# =============================================================================

def _until_instant(until, start: int) -> int:
    if instant.is_all_day(start):
        return instant.from_datetime(until, all_day=True)
    if isinstance(until, datetime):
        return instant.from_datetime(until)
    # a plain date bounds a timed rule at the end of that day
    return instant.make(until.year, until.month, until.day, 23, 59, 59)


class RecurrenceRuleIterator:
    """
    Iterates the instances of a rule in ascending order.

    Instances before ``start`` are skipped. With the ``INCLUDE_START``
    setting the start is returned first even if it does not match the rule.
    Iteration ends after ``count`` instances, after the last instance not
    later than ``until``, or when the calendar's year range is exhausted.
    Rules without count or until may be iterated without end.

    Raises:
        ``UnproducibleRuleError`` from :meth:`__next__` when the rule can not
        produce any further instance.
    """

    def __init__(self, rule: RecurrenceRule, start: int, metrics: CalendarMetrics):
        if instant.is_all_day(start):
            if rule.freq.value < Freq.DAILY.value:
                raise ValueError(f"{rule.freq.name} rules need a start with a time of day")
            if rule.has_part(Part.BYHOUR) or rule.has_part(Part.BYMINUTE) or rule.has_part(Part.BYSECOND):
                raise ValueError("byhour, byminute and bysecond need a start with a time of day")

        self.rule = rule
        self.start = start
        self._chain = build_chain(rule, start, metrics)
        self._count = rule.count
        self._until = _until_instant(rule.until, start) if rule.until is not None else None
        self._include_start = rule.settings.INCLUDE_START
        self._emitted = 0
        self._next: Optional[int] = None
        self._exhausted = False

    def _pull(self) -> Optional[int]:
        if self._count is not None and self._emitted >= self._count:
            logger.debug(f"Recurrence ended after {self._count} instances")
            return None

        start = self.start
        if self._include_start and self._emitted == 0:
            candidate = start
        else:
            try:
                candidate = self._chain.next_instant()
                while candidate < start or (self._include_start and candidate == start):
                    candidate = self._chain.next_instant()
            except CalendarOverflowError as e:
                logger.debug(f"Recurrence ended at the calendar limit: {e}")
                return None

        if self._until is not None and candidate > self._until:
            logger.debug(f"Recurrence ended at {instant.to_string(self._until)}")
            return None
        return candidate

    def has_next(self) -> bool:
        if self._next is None and not self._exhausted:
            self._next = self._pull()
            self._exhausted = self._next is None
        return self._next is not None

    def peek(self) -> int:
        """Return the next instant without consuming it."""
        if not self.has_next():
            raise StopIteration
        return self._next

    def next_instant(self) -> int:
        if not self.has_next():
            raise StopIteration
        value = self._next
        self._next = None
        self._emitted += 1
        return value

    def next_datetime(self):
        return instant.to_datetime(self.next_instant())

    def fast_forward(self, until: int) -> None:
        """Skip all instances before ``until``. Skipped instances count toward COUNT."""
        while self.has_next() and self._next < until:
            self.next_instant()

    def __iter__(self):
        return self

    def __next__(self) -> int:
        return self.next_instant()
