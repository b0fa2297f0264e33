"""A bounded double-ended queue that refuses to grow past its capacity."""

from __future__ import annotations

from collections import deque
from typing import Generic, TypeVar

__all__ = ["BufferOverflowError", "BufferUnderflowError", "RingBuffer"]

T = TypeVar("T")


class BufferOverflowError(OverflowError):
    """Raised when pushing onto a full :class:`RingBuffer`."""


class BufferUnderflowError(IndexError):
    """Raised when popping from an empty :class:`RingBuffer`."""


class RingBuffer(Generic[T]):
    """A queue/stack holding at most ``capacity`` items."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self._items: deque[T] = deque()

    def __len__(self) -> int:
        return len(self._items)

    def is_full(self) -> bool:
        return len(self._items) >= self.capacity

    def is_empty(self) -> bool:
        return not self._items

    def clear(self) -> None:
        self._items.clear()

    def push(self, item: T) -> None:
        """Append ``item`` at the back."""
        if self.is_full():
            raise BufferOverflowError("buffer overflow")
        self._items.append(item)

    def pop_first(self) -> T:
        """Remove and return the oldest item."""
        if not self._items:
            raise BufferUnderflowError("buffer underflow")
        return self._items.popleft()

    def pop_last(self) -> T:
        """Remove and return the most recently pushed item."""
        if not self._items:
            raise BufferUnderflowError("buffer underflow")
        return self._items.pop()