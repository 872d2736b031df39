"""Terminal cell-width helpers and the shared word-wrap routine."""

import unicodedata
from typing import Sequence

from wcwidth import wcwidth

from .constants import ViewerConstants


def sanitize(text: str) -> str:
    """Replace control characters so every character has a cell width."""
    if text.isprintable():
        return text
    return "".join(
        ViewerConstants.REPLACEMENT_CHAR if unicodedata.category(ch) == "Cc" else ch
        for ch in text
    )


def char_width(ch: str) -> int:
    """Columns occupied by a single character (0 for combining marks)."""
    return max(wcwidth(ch), 0)


def cell_width(text: str) -> int:
    return sum(char_width(ch) for ch in text)


def clip_to_width(text: str, width: int) -> str:
    """Return the longest prefix of text that fits in width columns."""
    used = 0
    for i, ch in enumerate(text):
        w = char_width(ch)
        if used + w > width:
            return text[:i]
        used += w
    return text


def pad_to_width(text: str, width: int) -> str:
    return text + " " * max(0, width - cell_width(text))


def is_break_char(ch: str) -> bool:
    """Whitespace that allows a line break (non-breaking space does not)."""
    return ch.isspace() and ch != "\xa0"


def _tokens(chars: Sequence[str]) -> list[tuple[int, int]]:
    """Split into alternating runs of breakable whitespace and other text."""
    tokens: list[tuple[int, int]] = []
    if not chars:
        return tokens
    start = 0
    in_ws = is_break_char(chars[0])
    for i, ch in enumerate(chars):
        ws = is_break_char(ch)
        if ws != in_ws:
            tokens.append((start, i))
            start = i
            in_ws = ws
    tokens.append((start, len(chars)))
    return tokens


def wrap_ranges(chars: Sequence[str], first_width: int, rest_width: int | None = None) -> list[tuple[int, int]]:
    """Word-wrap a character sequence into rows.

    Breaks at whitespace; a word wider than the row is hard-broken at the
    width boundary. Whitespace at a break is consumed and never starts or
    ends a row.

    Args:
        chars: Characters (or single-character strings) to wrap.
        first_width: Columns available on the first row.
        rest_width: Columns available on following rows (defaults to first_width).

    Returns:
        List of (start, end) index ranges into chars, one per row. An empty
        or all-whitespace input yields a single empty row.
    """
    if rest_width is None:
        rest_width = first_width
    widths = [char_width(ch) for ch in chars]
    rows: list[tuple[int, int]] = []

    def available() -> int:
        return first_width if not rows else rest_width

    start: int | None = None
    end = 0
    used = 0
    pending = 0  # Width of whitespace seen since the last word on the row

    for tok_start, tok_end in _tokens(chars):
        if is_break_char(chars[tok_start]):
            if start is not None:
                pending += sum(widths[tok_start:tok_end])
            continue

        word_width = sum(widths[tok_start:tok_end])
        if start is not None and used + pending + word_width <= available():
            used += pending + word_width
            end = tok_end
            pending = 0
            continue

        if start is not None:
            rows.append((start, end))
            start = None
            used = 0
            pending = 0

        # Word starts a fresh row; hard-break it while it is too wide
        pos = tok_start
        while pos < tok_end:
            limit = available()
            taken = 0
            cut = pos
            while cut < tok_end and taken + widths[cut] <= limit:
                taken += widths[cut]
                cut += 1
            if cut == pos:
                # A single character wider than the row; it still has to go somewhere
                taken = widths[pos]
                cut = pos + 1
            if cut < tok_end:
                rows.append((pos, cut))
            else:
                start = pos
                end = tok_end
                used = taken
            pos = cut

    if start is not None:
        rows.append((start, end))
    if not rows:
        rows.append((0, 0))
    return rows


def wrap_text(text: str, width: int) -> list[str]:
    """Word-wrap a plain string to the given width."""
    return [text[start:end] for start, end in wrap_ranges(text, width)]
