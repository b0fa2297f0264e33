"""Allocation-bounded JSON generation into fixed-size text sinks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol

__all__ = [
    "Sink",
    "StringBuilder",
    "format_double",
    "EscapedString",
    "JsonValue",
    "JsonPrintable",
    "JsonArray",
    "JsonObject",
]

DEFAULT_DIGITS = 2

_SPECIAL_CHARS = {
    '"': '"',
    "\\": "\\",
    "\b": "b",
    "\f": "f",
    "\n": "n",
    "\r": "r",
    "\t": "t",
}


class Sink(Protocol):
    """Anything that accepts characters and reports how many were taken."""

    def write(self, char: str) -> int: ...

    def print(self, text: str) -> int: ...


class StringBuilder:
    """A bounded text buffer; characters beyond its capacity are dropped."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("size must be at least 1")
        # One slot is kept for the terminator, as with a C string buffer.
        self._capacity = size - 1
        self._chars: list[str] = []

    def write(self, char: str) -> int:
        """Append one character; return 1 if it fit, 0 otherwise."""
        if len(self._chars) >= self._capacity:
            return 0
        self._chars.append(char)
        return 1

    def print(self, text: str) -> int:
        """Append a string; return the number of characters stored."""
        return sum(self.write(char) for char in text)

    def __str__(self) -> str:
        return "".join(self._chars)


def format_double(value: float, digits: int = DEFAULT_DIGITS) -> str:
    """Format a float with ``digits + 1`` significant digits, like ``%.*g``."""
    return f"{value:.{digits + 1}g}"


class EscapedString:
    """A string value printed as a quoted, escaped JSON string."""

    def __init__(self, value: str | None) -> None:
        self.value = value

    def print_to(self, sink: Sink) -> int:
        if self.value is None:
            return sink.print("null")
        written = sink.write('"')
        for char in self.value:
            special = _SPECIAL_CHARS.get(char)
            if special is None:
                written += sink.write(char)
            else:
                written += sink.write("\\") + sink.write(special)
        return written + sink.write('"')


class JsonPrintable(ABC):
    """A JSON container that can print itself to a sink."""

    @abstractmethod
    def print_to(self, sink: Sink) -> int:
        """Print to the sink and return the number of characters written."""

    def render(self, size: int) -> str:
        """Render into a buffer of ``size`` slots and return the text."""
        builder = StringBuilder(size)
        self.print_to(builder)
        return str(builder)


class JsonValue:
    """A single JSON value: bool, integer, float, string, null or container."""

    def __init__(self, value: object, digits: int = DEFAULT_DIGITS) -> None:
        if value is None or isinstance(value, str):
            self._printer = EscapedString(value).print_to
        elif isinstance(value, bool):
            text = "true" if value else "false"
            self._printer = lambda sink: sink.print(text)
        elif isinstance(value, int):
            text = str(value)
            self._printer = lambda sink: sink.print(text)
        elif isinstance(value, float):
            text = format_double(value, digits)
            self._printer = lambda sink: sink.print(text)
        elif isinstance(value, JsonPrintable):
            self._printer = value.print_to
        else:
            raise TypeError(f"unsupported JSON value type: {type(value).__name__}")
        self.value = value

    def print_to(self, sink: Sink) -> int:
        return self._printer(sink)


class JsonArray(JsonPrintable):
    """A JSON array holding at most ``capacity`` values."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._items: list[JsonValue] = []

    def add(self, value: object, digits: int = DEFAULT_DIGITS) -> bool:
        """Append a value; return False and drop it if the array is full."""
        if len(self._items) >= self.capacity:
            return False
        self._items.append(JsonValue(value, digits))
        return True

    def __len__(self) -> int:
        return len(self._items)

    def print_to(self, sink: Sink) -> int:
        written = sink.write("[")
        for position, item in enumerate(self._items):
            if position:
                written += sink.write(",")
            written += item.print_to(sink)
        return written + sink.write("]")


class JsonObject(JsonPrintable):
    """A JSON object holding at most ``capacity`` key/value pairs."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._items: list[tuple[EscapedString, JsonValue]] = []

    def add(self, key: str, value: object, digits: int = DEFAULT_DIGITS) -> bool:
        """Append a pair; return False and drop it if the object is full."""
        if len(self._items) >= self.capacity:
            return False
        self._items.append((EscapedString(key), JsonValue(value, digits)))
        return True

    def __len__(self) -> int:
        return len(self._items)

    def print_to(self, sink: Sink) -> int:
        written = sink.write("{")
        for position, (key, value) in enumerate(self._items):
            if position:
                written += sink.write(",")
            written += key.print_to(sink)
            written += sink.write(":")
            written += value.print_to(sink)
        return written + sink.write("}")