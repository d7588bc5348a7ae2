"""
Expanders and filters

A ``ByExpander`` is the working stage of a recurrence chain. It pulls sets of
seed instants from its predecessor, lets :meth:`ByExpander.expand` derive
candidates from every seed according to one rule part, drops every candidate
rejected by one of its attached ``ByFilter`` objects and returns what is left.

Rules whose parts contradict each other (e.g. BYMONTH=2;BYMONTHDAY=30) never
produce anything. An expander gives up after ``MAX_EMPTY_SETS`` consecutive
empty cycles instead of looping forever.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from recurpipe.calendars import CalendarMetrics
from recurpipe.errors import UnproducibleRuleError
from recurpipe.instant_set import InstantSet
from recurpipe.iterators import RuleIterator

MAX_EMPTY_SETS = 1000

# One filter per rule part at most
MAX_FILTERS = 8


class ByFilter(ABC):
    """A predicate over single instants, configured from one rule part."""

    @abstractmethod
    def filter(self, instant: int) -> bool:
        """
        Check an instant against the rule part.

        Args:
            instant: The instant to test. Never modified.

        Returns:
            ``True`` to remove the instant, ``False`` to keep it.
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class ByExpander(RuleIterator):
    """
    Base class of all expanding stages.

    Args:
        previous: The preceding stage.
        metrics: The calendar metrics of the rule.
        start: The first instance of the rule, or ``None``. Subclasses may use
            it to skip candidates that precede it; the chain stays correct
            without that.
    """

    def __init__(self, previous: RuleIterator, metrics: CalendarMetrics, start: Optional[int]):
        super().__init__(previous)
        self.metrics = metrics
        self._start = start
        self._result_set = InstantSet()
        self._filters: List[Optional[ByFilter]] = [None] * MAX_FILTERS
        self._filter_count = 0
        self._needs_sorting = False

    def set_needs_sorting(self, needs_sorting: bool = True) -> None:
        """Declare that :meth:`expand` may add instants out of order."""
        self._needs_sorting = needs_sorting

    @property
    def filters(self) -> List[ByFilter]:
        return self._filters[:self._filter_count]

    def add_filter(self, by_filter: ByFilter) -> None:
        """Attach a filter. Candidates are tested in the order filters were added."""
        if self._filter_count == MAX_FILTERS:
            raise IndexError(f"{self.__class__.__name__} can not hold more than {MAX_FILTERS} filters")
        self._filters[self._filter_count] = by_filter
        self._filter_count += 1

    def next_set(self) -> InstantSet:
        result_set = self._result_set
        result_set.clear()

        previous = self.previous
        start = self._start
        counter = 0
        while True:
            if counter == MAX_EMPTY_SETS:
                raise UnproducibleRuleError(f"too many empty recurrence sets in {self!r}")
            counter += 1

            prev_set = previous.next_set()
            while prev_set.has_next():
                self.expand(prev_set.take(), start)

            if result_set.has_next():
                break

        if self._needs_sorting:
            result_set.sort()
        return result_set

    def add_instance(self, instant: int) -> None:
        """Add a candidate to the result set unless a filter removes it."""
        if self._filter_count == 0 or not self.filter(instant):
            self._result_set.add(instant)

    def filter(self, instant: int) -> bool:
        """Return ``True`` if any attached filter removes the instant."""
        filters = self._filters
        for i in range(self._filter_count):
            if filters[i].filter(instant):
                return True
        return False

    @abstractmethod
    def expand(self, instant: int, start: Optional[int]) -> None:
        """
        Expand one seed, calling :meth:`add_instance` for every candidate.

        Args:
            instant: The seed instant taken from the predecessor's set.
            start: The first instance of the rule, or ``None``. Candidates
                strictly before it may be skipped.
        """
        pass

    def __repr__(self) -> str:
        filters = ", ".join(repr(f) for f in self.filters)
        return f"{self.__class__.__name__}(filters=[{filters}])"


class FilterExpander(ByExpander):
    """An expander passing every seed on unchanged, used to host filters."""

    def expand(self, instant, start):
        self.add_instance(instant)
