"""A bounded list kept in ascending order."""

from __future__ import annotations

import bisect
from collections.abc import Iterator
from typing import Generic, TypeVar

__all__ = ["CapacityError", "SortedArray"]

T = TypeVar("T")


class CapacityError(OverflowError):
    """Raised when adding to a full :class:`SortedArray`."""


class SortedArray(Generic[T]):
    """Holds at most ``capacity`` items, smallest first.

    Items only need ``<``. An item equal to ones already held goes after them.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self._items: list[T] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def is_full(self) -> bool:
        return len(self._items) >= self.capacity

    def is_empty(self) -> bool:
        return not self._items

    def clear(self) -> None:
        self._items.clear()

    def add(self, item: T) -> None:
        """Insert ``item`` in order; raise :class:`CapacityError` if full."""
        if self.is_full():
            raise CapacityError(f"sorted array is full ({self.capacity} items)")
        bisect.insort_right(self._items, item)

    def remove(self, index: int) -> T:
        """Remove and return the item at ``index``."""
        return self._items.pop(index)