"""Read-only views over a scanned JSON document.

A :class:`JsonParser` scans text into a flat list of tokens and hands back
a :class:`JsonValue` for the root. Values, arrays and objects are views
onto that token list; looking up a missing key or index gives an invalid
value rather than raising, and every conversion of an invalid value gives
a neutral result (``False``, ``0``, ``0.0`` or ``None``).
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence

from hypha.jsmn import JsmnError, Token, TokenType, parse_tokens

__all__ = [
    "JsonToken",
    "JsonValue",
    "JsonArray",
    "JsonObject",
    "JsonPair",
    "JsonParser",
]

_STRTOL = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")
_STRTOD = re.compile(
    r"\s*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def _strtol(text: str) -> int:
    """Parse the longest leading integer, with C base-0 prefixes; 0 if none."""
    match = _STRTOL.match(text)
    if match is None:
        return 0
    sign, digits = match.groups()
    if digits[:2] in ("0x", "0X"):
        value = int(digits[2:], 16)
    elif digits.startswith("0"):
        value = int(digits, 8)
    else:
        value = int(digits)
    return -value if sign == "-" else value


def _strtod(text: str) -> float:
    """Parse the longest leading floating-point number; 0.0 if none."""
    match = _STRTOD.match(text)
    return float(match.group().strip()) if match else 0.0


class JsonToken:
    """A position in a token list, or a null position when ``index`` is None."""

    def __init__(
        self,
        json: str = "",
        tokens: Sequence[Token] = (),
        index: int | None = None,
    ) -> None:
        self._json = json
        self._tokens = tokens
        self._index = index

    def _at(self, index: int) -> JsonToken:
        return type(self)(self._json, self._tokens, index)

    @property
    def _token(self) -> Token | None:
        if self._index is None or not 0 <= self._index < len(self._tokens):
            return None
        return self._tokens[self._index]

    def text(self) -> str:
        """The raw text of the token (string contents without quotes)."""
        token = self._token
        if token is None:
            raise ValueError("null token has no text")
        return self._json[token.start:token.end]

    def children_count(self) -> int:
        """Number of direct children; keys and values both count in objects."""
        token = self._token
        return token.size if token is not None else 0

    def first_child(self) -> JsonToken:
        """The token right after this one."""
        if self._index is None:
            return self._at_null()
        return self._at(self._index + 1)

    def next_sibling(self) -> JsonToken:
        """The token after this one and all of its descendants."""
        if self._index is None:
            return self._at_null()
        position = self._index
        yet_to_visit = 1
        while yet_to_visit and position < len(self._tokens):
            yet_to_visit += self._tokens[position].size - 1
            position += 1
        return self._at(position)

    def _at_null(self) -> JsonToken:
        return type(self)(self._json, self._tokens, None)

    def is_valid(self) -> bool:
        return self._index is not None

    def _is(self, kind: TokenType) -> bool:
        token = self._token
        return token is not None and token.type == kind

    def is_object(self) -> bool:
        return self._is(TokenType.OBJECT)

    def is_array(self) -> bool:
        return self._is(TokenType.ARRAY)

    def is_primitive(self) -> bool:
        return self._is(TokenType.PRIMITIVE)

    def is_string(self) -> bool:
        return self._is(TokenType.STRING)


class JsonValue(JsonToken):
    """A JSON value convertible to bool, number, string, or indexed further."""

    def success(self) -> bool:
        """Whether this value refers to an existing token."""
        return self.is_valid()

    def as_bool(self) -> bool:
        """``true`` and non-zero numbers are True; anything else is False."""
        if not self.is_primitive():
            return False
        text = self.text()
        if text.startswith("t"):
            return True
        if text.startswith(("f", "n")):
            return False
        return _strtol(text) != 0

    def as_float(self) -> float:
        return _strtod(self.text()) if self.is_primitive() else 0.0

    def as_int(self) -> int:
        return _strtol(self.text()) if self.is_primitive() else 0

    def as_str(self) -> str | None:
        """The raw text of a string or primitive; None for anything else."""
        if self.is_string() or self.is_primitive():
            return self.text()
        return None

    def __getitem__(self, key: int | str) -> JsonValue:
        """Array element by index or object member by key; invalid if absent."""
        if isinstance(key, str):
            return self._member(key)
        return self._element(key)

    def _element(self, index: int) -> JsonValue:
        if index < 0 or not self.is_array() or index >= self.children_count():
            return JsonValue(self._json, self._tokens, None)
        running = self.first_child()
        for _ in range(index):
            running = running.next_sibling()
        return running

    def _member(self, key: str) -> JsonValue:
        if not self.is_object():
            return JsonValue(self._json, self._tokens, None)
        running = self.first_child()
        for _ in range(self.children_count() // 2):
            name = running.text()
            running = running.next_sibling()
            if name == key:
                return running
            running = running.next_sibling()
        return JsonValue(self._json, self._tokens, None)

    def _children(self) -> Iterator[JsonValue]:
        running = self.first_child()
        for _ in range(self.children_count()):
            yield running
            running = running.next_sibling()


class JsonArray:
    """A view of a value as a JSON array; empty if the value is not one."""

    def __init__(self, value: JsonValue | None = None) -> None:
        self._value = value if value is not None else JsonValue()

    def success(self) -> bool:
        return self._value.is_array()

    def __len__(self) -> int:
        return self._value.children_count() if self._value.is_array() else 0

    def __getitem__(self, index: int) -> JsonValue:
        return self._value[index]

    def __iter__(self) -> Iterator[JsonValue]:
        if self._value.is_array():
            yield from self._value._children()


class JsonPair:
    """A key and its value inside a JSON object."""

    def __init__(self, token: JsonToken) -> None:
        self._token = token

    def key(self) -> str:
        return self._token.text()

    def value(self) -> JsonValue:
        sibling = self._token.next_sibling()
        return JsonValue(sibling._json, sibling._tokens, sibling._index)


class JsonObject:
    """A view of a value as a JSON object; empty if the value is not one."""

    def __init__(self, value: JsonValue | None = None) -> None:
        self._value = value if value is not None else JsonValue()

    def success(self) -> bool:
        return self._value.is_object()

    def __getitem__(self, key: str) -> JsonValue:
        return self._value[key]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._value[key].success()

    def __iter__(self) -> Iterator[JsonPair]:
        if not self._value.is_object():
            return
        children = self._value._children()
        for key_token in children:
            next(children, None)
            yield JsonPair(key_token)


class JsonParser:
    """Parses JSON text using at most ``max_tokens`` tokens."""

    def __init__(self, max_tokens: int) -> None:
        self.max_tokens = max_tokens

    def parse(self, json: str) -> JsonValue:
        """Return the root value, or an invalid value if the text can't be parsed."""
        try:
            tokens = parse_tokens(json, self.max_tokens)
        except JsmnError:
            return JsonValue()
        if not tokens:
            return JsonValue()
        return JsonValue(json, tokens, 0)