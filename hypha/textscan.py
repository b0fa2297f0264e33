"""Whitespace-skipping tokenizer for loose, JSON-like command text."""

from __future__ import annotations

__all__ = ["IGNORED_CHARS", "is_ignored_char", "eat_white_space", "tokenize"]

IGNORED_CHARS = frozenset(" \n\r\t:,{}")


def _at_end(text: str, pos: int) -> bool:
    return pos >= len(text) or text[pos] == "\0"


def is_ignored_char(char: str) -> bool:
    """Whether ``char`` counts as white space between tokens."""
    return char in IGNORED_CHARS


def eat_white_space(text: str, pos: int = 0) -> int:
    """Return the position of the next non-white-space character at or after ``pos``.

    Returns the position of the end of the text (or of a NUL) if there is none.
    """
    while not _at_end(text, pos) and is_ignored_char(text[pos]):
        pos += 1
    return pos


def tokenize(text: str, pos: int = 0) -> tuple[int, int]:
    """Return ``(start, end)`` of the next token after skipping white space."""
    start = eat_white_space(text, pos)
    end = start
    while not _at_end(text, end) and not is_ignored_char(text[end]):
        end += 1
    return start, end