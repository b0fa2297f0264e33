"""Minimal tokenizing JSON scanner that records token boundaries only."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

__all__ = [
    "TokenType",
    "Token",
    "JsmnError",
    "TokenLimitError",
    "InvalidJsonError",
    "PartialJsonError",
    "parse_tokens",
]

_PRIMITIVE_DELIMITERS = frozenset(":\t\r\n ,]}")
_ALLOWED_ESCAPES = frozenset('"/\\bfrnt')
_SKIPPED = frozenset("\t\r\n:, ")


class TokenType(IntEnum):
    """Kind of JSON token."""

    PRIMITIVE = 0
    OBJECT = 1
    ARRAY = 2
    STRING = 3


@dataclass
class Token:
    """A token's kind, its span in the text and its number of direct children.

    ``start`` and ``end`` are -1 while unknown; ``end`` is exclusive.
    """

    type: TokenType = TokenType.PRIMITIVE
    start: int = -1
    end: int = -1
    size: int = 0

    @property
    def is_open(self) -> bool:
        """True for a container whose closing bracket has not been seen."""
        return self.start != -1 and self.end == -1


class JsmnError(ValueError):
    """Base class for scanning errors."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} at position {position}")
        self.position = position


class TokenLimitError(JsmnError):
    """More tokens are needed than the scanner was allowed to allocate."""


class InvalidJsonError(JsmnError):
    """The text holds a character or bracket that is not allowed there."""


class PartialJsonError(JsmnError):
    """The text ends before the JSON document is complete."""


class _Scanner:
    def __init__(self, text: str, max_tokens: int) -> None:
        self.text = text
        self.max_tokens = max_tokens
        self.tokens: list[Token] = []
        self.toksuper = -1

    def char_at(self, pos: int) -> str:
        return self.text[pos] if pos < len(self.text) else "\0"

    def alloc(self, pos: int) -> Token:
        if len(self.tokens) >= self.max_tokens:
            raise TokenLimitError("not enough tokens", pos)
        token = Token()
        self.tokens.append(token)
        return token

    def add_child(self) -> None:
        if self.toksuper != -1:
            self.tokens[self.toksuper].size += 1

    def last_open_index(self, below: int) -> int:
        return next(
            (i for i in reversed(range(below)) if self.tokens[i].is_open), -1
        )

    def open_container(self, pos: int, char: str) -> None:
        token = self.alloc(pos)
        self.add_child()
        token.type = TokenType.OBJECT if char == "{" else TokenType.ARRAY
        token.start = pos
        self.toksuper = len(self.tokens) - 1

    def close_container(self, pos: int, char: str) -> None:
        kind = TokenType.OBJECT if char == "}" else TokenType.ARRAY
        index = self.last_open_index(len(self.tokens))
        if index == -1:
            raise InvalidJsonError("unmatched closing bracket", pos)
        token = self.tokens[index]
        if token.type != kind:
            raise InvalidJsonError("mismatched closing bracket", pos)
        token.end = pos + 1
        self.toksuper = self.last_open_index(index)

    def parse_string(self, start: int) -> int:
        pos = start + 1
        while pos < len(self.text):
            char = self.text[pos]
            if char == '"':
                token = self.alloc(start)
                token.type = TokenType.STRING
                token.start = start + 1
                token.end = pos
                return pos
            if char == "\\":
                pos += 1
                escaped = self.char_at(pos)
                # \uXXXX is accepted without checking the hex digits.
                if escaped != "u" and escaped not in _ALLOWED_ESCAPES:
                    raise InvalidJsonError("invalid escape sequence", start)
            pos += 1
        raise PartialJsonError("unterminated string", start)

    def parse_primitive(self, start: int) -> int:
        pos = start
        while pos < len(self.text):
            char = self.text[pos]
            if char in _PRIMITIVE_DELIMITERS:
                break
            if ord(char) < 32 or ord(char) >= 127:
                raise InvalidJsonError("invalid character in primitive", start)
            pos += 1
        token = self.alloc(start)
        token.type = TokenType.PRIMITIVE
        token.start = start
        token.end = pos
        return pos - 1

    def run(self) -> list[Token]:
        pos = 0
        while pos < len(self.text):
            char = self.text[pos]
            if char in "{[":
                self.open_container(pos, char)
            elif char in "}]":
                self.close_container(pos, char)
            elif char == '"':
                pos = self.parse_string(pos)
                self.add_child()
            elif char in _SKIPPED:
                pass
            else:
                pos = self.parse_primitive(pos)
                self.add_child()
            pos += 1

        for token in reversed(self.tokens):
            if token.is_open:
                raise PartialJsonError("unclosed object or array", token.start)
        return self.tokens


def parse_tokens(js: str, max_tokens: int) -> list[Token]:
    """Scan ``js`` into at most ``max_tokens`` tokens, in document order.

    Unquoted values of any kind are accepted as primitives. Scanning stops
    at the first NUL character. Raises a :class:`JsmnError` subclass when
    the text cannot be scanned.
    """
    text = js.split("\0", 1)[0]
    return _Scanner(text, max_tokens).run()