"""Viewport and scroll controller."""

from dataclasses import dataclass
from typing import Optional

from .constants import ViewerConstants


@dataclass(frozen=True)
class ScrollbarGeometry:
    thumb_start: int
    thumb_size: int


class Viewport:
    """Scroll offset over a fixed number of laid out rows.

    Invariant: 0 <= scroll_offset <= max(0, total_lines - height).
    """

    def __init__(self, width: int = 80, height: int = 24, total_lines: int = 0):
        self.width = width
        self.height = height
        self.total_lines = total_lines
        self.scroll_offset = 0

    @property
    def max_offset(self) -> int:
        return max(0, self.total_lines - self.height)

    def _set(self, offset: int) -> int:
        self.scroll_offset = max(0, min(offset, self.max_offset))
        return self.scroll_offset

    def clamp(self) -> int:
        return self._set(self.scroll_offset)

    def set_content(self, total_lines: int) -> None:
        self.total_lines = total_lines
        self.clamp()

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.clamp()

    def scroll(self, delta_lines: int) -> int:
        return self._set(self.scroll_offset + delta_lines)

    def page(self, direction: int) -> int:
        """Move a page, keeping one line of context across the boundary."""
        step = max(1, self.height - 1)
        return self._set(self.scroll_offset + (step if direction > 0 else -step))

    def home(self) -> int:
        return self._set(0)

    def end(self) -> int:
        return self._set(self.max_offset)

    def wheel(self, notches: int) -> int:
        return self.scroll(notches * ViewerConstants.WHEEL_STEP)

    def jump_to(self, offset: int) -> int:
        return self._set(offset)

    def ensure_visible(self, row: int) -> int:
        """Scroll the least distance that brings row into view."""
        if row < self.scroll_offset:
            return self._set(row)
        if row >= self.scroll_offset + self.height:
            return self._set(row - self.height + 1)
        return self.scroll_offset

    def visible_rows(self) -> range:
        return range(self.scroll_offset, min(self.total_lines, self.scroll_offset + self.height))

    def is_visible(self, row: int) -> bool:
        return self.scroll_offset <= row < self.scroll_offset + self.height

    def scrollbar_geometry(self) -> Optional[ScrollbarGeometry]:
        """Thumb geometry, or None when everything fits on screen."""
        if self.total_lines <= self.height or self.height <= 0:
            return None
        thumb_size = max(1, self.height * self.height // self.total_lines)
        thumb_start = self.scroll_offset * (self.height - thumb_size) // max(1, self.total_lines - self.height)
        return ScrollbarGeometry(thumb_start=thumb_start, thumb_size=thumb_size)

    def percent(self) -> int:
        if self.max_offset == 0:
            return 100
        return min(100, self.scroll_offset * 100 // self.max_offset)
