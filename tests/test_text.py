"""Tests for cell-width helpers and word wrapping."""

from mdr.text import (
    cell_width, clip_to_width, pad_to_width, sanitize, wrap_ranges, wrap_text,
)


def test_cell_width_counts_wide_characters_twice():
    assert cell_width("abc") == 3
    assert cell_width("日本") == 4
    assert cell_width("é") == 1  # combining accent takes no column


def test_sanitize_replaces_control_characters():
    assert sanitize("plain") == "plain"
    assert sanitize("a\x07b") == "a�b"


def test_clip_and_pad():
    assert clip_to_width("日本語", 5) == "日本"
    assert pad_to_width("ab", 4) == "ab  "
    assert pad_to_width("abcdef", 4) == "abcdef"


def test_wrap_breaks_at_spaces():
    assert wrap_text("alpha beta gamma", 11) == ["alpha beta", "gamma"]


def test_wrap_hard_breaks_long_words():
    assert wrap_text("abcdefghij", 4) == ["abcd", "efgh", "ij"]


def test_wrap_consumes_whitespace_at_breaks():
    rows = wrap_text("one   two", 3)
    assert rows == ["one", "two"]


def test_wrap_empty_input_gives_one_empty_row():
    assert wrap_ranges("", 10) == [(0, 0)]
    assert wrap_ranges("   ", 10) == [(0, 0)]


def test_wrap_with_narrower_first_row():
    rows = wrap_ranges("aa bb cc", 2, 5)
    text = "aa bb cc"
    assert [text[s:e] for s, e in rows] == ["aa", "bb cc"]


def test_non_breaking_space_does_not_break():
    assert wrap_text("a\xa0b c", 3) == ["a\xa0b", "c"]
