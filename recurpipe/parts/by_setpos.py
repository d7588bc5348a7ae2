from recurpipe.errors import UnproducibleRuleError
from recurpipe.expander import MAX_EMPTY_SETS
from recurpipe.instant_set import InstantSet
from recurpipe.iterators import RuleIterator
from recurpipe.rule import Part


class BySetPosFilter(RuleIterator):
    """
    Keeps the BYSETPOS positions of every set returned by its predecessor.

    Positions are 1-based, negative positions count from the end of the set.
    The predecessor must return sorted sets of valid instants.
    """

    def __init__(self, previous, rule):
        super().__init__(previous)
        self._positions = sorted(set(rule.get_by_part(Part.BYSETPOS)))
        self._result_set = InstantSet()

    def next_set(self):
        result_set = self._result_set
        result_set.clear()

        counter = 0
        while not result_set.has_next():
            if counter == MAX_EMPTY_SETS:
                raise UnproducibleRuleError(f"too many empty recurrence sets in {self!r}")
            counter += 1

            candidates = self.previous.next_set().to_list()
            size = len(candidates)
            indexes = set()
            for position in self._positions:
                index = position - 1 if position > 0 else size + position
                if 0 <= index < size:
                    indexes.add(index)
            for index in sorted(indexes):
                result_set.add(candidates[index])

        return result_set

    def __repr__(self):
        return f"BySetPosFilter(positions={self._positions})"
