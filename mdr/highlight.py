"""Syntax colouring for fenced code blocks using Pygments."""

from functools import lru_cache
from typing import Optional

from pygments import lex
from pygments.lexers import get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .model import RGB

STYLE_NAME = "monokai"


@lru_cache(maxsize=32)
def _lexer_for(language: str):
    try:
        return get_lexer_by_name(language, stripnl=False, ensurenl=False)
    except ClassNotFound:
        return None


@lru_cache(maxsize=1)
def _style():
    return get_style_by_name(STYLE_NAME)


def _parse_hex(value: str) -> Optional[RGB]:
    if not value or len(value) != 6:
        return None
    try:
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))
    except ValueError:
        return None


@lru_cache(maxsize=256)
def _token_color(token_type) -> Optional[RGB]:
    return _parse_hex(_style().style_for_token(token_type).get("color") or "")


def highlight_code(code: str, language: Optional[str]) -> list[list[tuple[str, Optional[RGB]]]]:
    """Split a code block into rows of (text, colour) pieces.

    The block is lexed as a whole so multi-line constructs colour correctly,
    then cut at newlines. Unknown or missing languages give uncoloured rows.
    """
    source_lines = code.split("\n")
    lexer = _lexer_for(language.lower()) if language else None
    if lexer is None:
        return [[(line, None)] if line else [] for line in source_lines]

    rows: list[list[tuple[str, Optional[RGB]]]] = [[]]
    for token_type, value in lex(code, lexer):
        color = _token_color(token_type)
        parts = value.split("\n")
        for i, part in enumerate(parts):
            if i > 0:
                rows.append([])
            if not part:
                continue
            row = rows[-1]
            if row and row[-1][1] == color:
                row[-1] = (row[-1][0] + part, color)
            else:
                row.append((part, color))
    # Lexers may add or drop a trailing newline; keep one row per source line
    del rows[len(source_lines):]
    while len(rows) < len(source_lines):
        rows.append([])
    return rows
