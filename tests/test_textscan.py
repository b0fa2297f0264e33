import pytest

from hypha.textscan import eat_white_space, is_ignored_char, tokenize


@pytest.mark.parametrize("char", list(" \n\r\t:,{}"))
def test_ignored_chars(char):
    assert is_ignored_char(char) is True


@pytest.mark.parametrize("char", ["a", "[", '"', "0", "\0"])
def test_not_ignored_chars(char):
    assert is_ignored_char(char) is False


def test_eat_white_space_skips_to_token():
    text = " {\t: ,abc"
    pos = eat_white_space(text)
    assert text[pos:] == "abc"


def test_eat_white_space_all_ignored_reaches_end():
    text = " \n{}:,"
    assert eat_white_space(text) == len(text)


def test_eat_white_space_stops_at_nul():
    text = "  \0abc"
    assert eat_white_space(text) == text.index("\0")


def test_eat_white_space_from_offset():
    text = "ab  cd"
    assert text[eat_white_space(text, 2):] == "cd"


def test_tokenize_first_token():
    text = "{ setEntry: { index:0 }}"
    start, end = tokenize(text)
    assert text[start:end] == "setEntry"


def test_tokenize_successive_tokens():
    text = "{ setEntry: { index:0, label:'ceiling' }}"
    words = []
    pos = 0
    while True:
        start, end = tokenize(text, pos)
        if start == end:
            break
        words.append(text[start:end])
        pos = end
    assert words == ["setEntry", "index", "0", "label", "'ceiling'"]


def test_tokenize_empty_text():
    assert tokenize("") == (0, 0)


def test_tokenize_stops_at_nul():
    text = "abc\0def"
    start, end = tokenize(text)
    assert text[start:end] == "abc"
    assert tokenize(text, end) == (end, end)