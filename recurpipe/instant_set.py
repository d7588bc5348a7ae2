from typing import Iterable, Iterator, List, Optional

from . import instant


class InstantSet:
    """
    An ordered, reusable batch of instants.

    Instants are appended with :meth:`add` and consumed front to back with
    :meth:`take`. Pipeline stages own exactly one set each and refill it on
    every cycle, so :meth:`clear` resets the set in place instead of
    allocating a new one.
    """

    __slots__ = ("_items", "_cursor")

    def __init__(self, instants: Optional[Iterable[int]] = None):
        self._items: List[int] = list(instants) if instants is not None else []
        self._cursor = 0

    def has_next(self) -> bool:
        return self._cursor < len(self._items)

    def take(self) -> int:
        """Consume and return the next instant."""
        if self._cursor >= len(self._items):
            raise IndexError("InstantSet is exhausted")
        value = self._items[self._cursor]
        self._cursor += 1
        return value

    def add(self, value: int) -> None:
        self._items.append(value)

    def clear(self) -> None:
        self._items.clear()
        self._cursor = 0

    def sort(self) -> None:
        """Sort all instants ascending, in place."""
        self._items.sort()

    def to_list(self) -> List[int]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[int]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"InstantSet([{', '.join(instant.to_string(i) for i in self._items)}])"
