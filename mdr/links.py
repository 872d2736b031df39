"""Interaction index: exact link hit-testing over wrapped lines."""

from typing import Optional

from .model import LinkOccurrence, WrappedLine


class LinkIndex:
    """Maps (document row, column) to link ids and link ids to urls.

    Rows are wrapped-line indices in the laid out document, not screen rows;
    callers translate screen coordinates through the viewport first.
    """

    def __init__(self, lines: list[WrappedLine], urls: list[str]):
        self._urls = list(urls)
        self._rows: dict[int, tuple[LinkOccurrence, ...]] = {
            row: line.links for row, line in enumerate(lines) if line.links
        }

    def __bool__(self) -> bool:
        return bool(self._rows)

    def link_at(self, row: int, col: int) -> Optional[int]:
        """Return the id of the link drawn at (row, col), or None.

        Only an occurrence whose column span contains col counts; there is
        no nearest-match fallback.
        """
        for occurrence in self._rows.get(row, ()):
            if occurrence.contains(col):
                return occurrence.link_id
        return None

    def resolve_link(self, link_id: Optional[int]) -> Optional[str]:
        if link_id is None or not 0 <= link_id < len(self._urls):
            return None
        return self._urls[link_id]

    def nearest_link(self, first_row: int, height: int) -> Optional[int]:
        """Pick the visible link closest to the vertical centre of the window.

        Considers occurrences on rows [first_row, first_row + height). Ties on
        distance go to the smaller column start, then the earlier row.
        """
        if height <= 0:
            return None
        center = first_row + (height - 1) / 2
        best = None
        for row in range(first_row, first_row + height):
            for occ in self._rows.get(row, ()):
                key = (abs(row - center), occ.column_start, row)
                if best is None or key < best[0]:
                    best = (key, occ.link_id)
        return best[1] if best else None
