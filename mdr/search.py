"""Search engine: case-insensitive matching over wrapped line text."""

from dataclasses import dataclass
from typing import Optional

from .model import WrappedLine
from .text import char_width


@dataclass(frozen=True, order=True)
class SearchMatch:
    """A match on one wrapped line, in columns [column_start, column_end)."""
    line_index: int
    column_start: int
    column_end: int


def _fold(text: str) -> str:
    """Lowercase character by character so indices stay aligned with text."""
    out = []
    for ch in text:
        low = ch.lower()
        out.append(low if len(low) == 1 else ch)
    return "".join(out)


def _columns(text: str) -> list[int]:
    """Column at which each character index starts (plus one past the end)."""
    cols = [0]
    for ch in text:
        cols.append(cols[-1] + char_width(ch))
    return cols


def find_in_line(text: str, query: str) -> list[tuple[int, int]]:
    """Non-overlapping case-insensitive matches of query as column ranges."""
    if not query or not text:
        return []
    hay = _fold(text)
    needle = _fold(query)
    cols = None
    ranges = []
    pos = hay.find(needle)
    while pos != -1:
        if cols is None:
            cols = _columns(text)
        ranges.append((cols[pos], cols[pos + len(needle)]))
        pos = hay.find(needle, pos + len(needle))
    return ranges


def search(lines: list[WrappedLine], query: str) -> list[SearchMatch]:
    """Find every occurrence of query, ordered by (line, column)."""
    if not query:
        return []
    matches = []
    for index, line in enumerate(lines):
        for start, end in find_in_line(line.text, query):
            matches.append(SearchMatch(index, start, end))
    return matches


class SearchState:
    """Committed query, its matches and the current-match cursor."""

    def __init__(self):
        self.query: str = ""
        self.matches: list[SearchMatch] = []
        self.cursor: Optional[int] = None
        self._by_line: dict[int, list[SearchMatch]] = {}

    @property
    def active(self) -> bool:
        return bool(self.query)

    @property
    def current(self) -> Optional[SearchMatch]:
        if self.cursor is None or not self.matches:
            return None
        return self.matches[self.cursor]

    def _index(self):
        self._by_line = {}
        for match in self.matches:
            self._by_line.setdefault(match.line_index, []).append(match)

    def set_query(self, query: str, lines: list[WrappedLine]) -> Optional[SearchMatch]:
        """Run a query; the cursor starts on the first match."""
        self.query = query
        self.matches = search(lines, query)
        self.cursor = 0 if self.matches else None
        self._index()
        return self.current

    def preview(self, query: str, lines: list[WrappedLine]) -> None:
        """Show matches for a query still being typed, with no cursor."""
        self.query = query
        self.matches = search(lines, query)
        self.cursor = None
        self._index()

    def refresh(self, lines: list[WrappedLine]) -> None:
        """Recompute matches after a re-layout, keeping the cursor ordinal."""
        cursor = self.cursor
        self.matches = search(lines, self.query)
        self._index()
        if cursor is None or not self.matches:
            self.cursor = None
        else:
            self.cursor = min(cursor, len(self.matches) - 1)

    def next(self) -> Optional[SearchMatch]:
        """Advance the cursor, wrapping from the last match to the first."""
        if not self.matches:
            return None
        self.cursor = 0 if self.cursor is None else (self.cursor + 1) % len(self.matches)
        return self.current

    def prev(self) -> Optional[SearchMatch]:
        """Step the cursor back, wrapping from the first match to the last."""
        if not self.matches:
            return None
        if self.cursor is None:
            self.cursor = len(self.matches) - 1
        else:
            self.cursor = (self.cursor - 1) % len(self.matches)
        return self.current

    def clear(self) -> None:
        self.query = ""
        self.matches = []
        self.cursor = None
        self._by_line = {}

    def highlights(self, line_index: int) -> list[tuple[int, int, bool]]:
        """(column_start, column_end, is_current) for matches on one line."""
        current = self.current
        return [
            (m.column_start, m.column_end, m == current)
            for m in self._by_line.get(line_index, ())
        ]
