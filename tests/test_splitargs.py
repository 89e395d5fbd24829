import pytest

from sdskit.splitargs import SplitArgsError, hex_digit_to_int, split_args
from sdskit.textops import cat_repr


def _as_bytes(tokens):
    return [bytes(t) for t in tokens]


def test_documented_example():
    line = rb'foo bar "newline are supported\n" and "\xff\x00otherstuff"'
    assert _as_bytes(split_args(line)) == [
        b"foo",
        b"bar",
        b"newline are supported\n",
        b"and",
        b"\xff\x00otherstuff",
    ]


def test_accepts_str_input():
    assert _as_bytes(split_args("set key value")) == [b"set", b"key", b"value"]


@pytest.mark.parametrize("line", [b"", b"   ", b"\t\n\r \v\f"])
def test_empty_or_blank_gives_empty_list(line):
    assert split_args(line) == []


def test_leading_and_trailing_space_ignored():
    assert _as_bytes(split_args(b"  a   b  ")) == [b"a", b"b"]


def test_tab_separates_tokens():
    assert _as_bytes(split_args(b"a\tb")) == [b"a", b"b"]


def test_vertical_tab_inside_token_is_kept():
    assert _as_bytes(split_args(b"a\vb")) == [b"a\vb"]


def test_line_ends_at_zero_byte():
    assert _as_bytes(split_args(b"a b\0c d")) == [b"a", b"b"]


def test_single_quotes_keep_backslashes():
    assert _as_bytes(split_args(rb"'a\nb'")) == [b"a\\nb"]


def test_single_quote_escape():
    assert _as_bytes(split_args(rb"'it\'s'")) == [b"it's"]


def test_double_quote_escapes():
    assert _as_bytes(split_args(rb'"\t\r\a\b\"\\"')) == [b"\t\r\a\b\"\\"]


def test_incomplete_hex_escape_falls_back():
    assert _as_bytes(split_args(rb'"\xg1"')) == [b"xg1"]


def test_quote_inside_token_joins():
    assert _as_bytes(split_args(b'foo"bar"')) == [b"foobar"]


def test_empty_quoted_argument():
    assert _as_bytes(split_args(b'"" x')) == [b"", b"x"]


@pytest.mark.parametrize(
    "line",
    [b'"foo"bar', b"'foo'bar", b'"foo', b"'foo", b'"foo\\', b'a "b'],
)
def test_errors(line):
    with pytest.raises(SplitArgsError):
        split_args(line)


def test_error_is_value_error():
    with pytest.raises(ValueError):
        split_args(b'"unbalanced')


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"plain",
        b"with space",
        b"\a\n\0foo\r",
        bytes(range(256)),
        b'quote " and back \\ slash',
    ],
)
def test_round_trip_with_cat_repr(data):
    quoted = bytes(cat_repr(data))
    assert _as_bytes(split_args(quoted)) == [data]


def test_round_trip_several_tokens():
    items = [b"a b", b"\xff\x00", b"'"]
    line = b" ".join(bytes(cat_repr(item)) for item in items)
    assert _as_bytes(split_args(line)) == items


@pytest.mark.parametrize(
    "char, value",
    [("0", 0), ("9", 9), ("a", 10), ("A", 10), ("f", 15), ("F", 15), ("g", 0), (" ", 0)],
)
def test_hex_digit_to_int(char, value):
    assert hex_digit_to_int(char) == value


def test_hex_digit_to_int_accepts_bytes_and_ints():
    assert hex_digit_to_int(b"c") == hex_digit_to_int("C")
    assert hex_digit_to_int(ord("d")) == hex_digit_to_int("d")


def test_hex_digit_to_int_rejects_long_string():
    with pytest.raises(ValueError):
        hex_digit_to_int("ab")