"""Terminal interface using Blessed for display and Curtsies for input."""

import logging
import sys
from typing import Optional

import blessed

from .model import StyleFlags

logger = logging.getLogger(__name__)

# xterm mouse reporting: button events, any-motion events, SGR encoding
MOUSE_ON = "\x1b[?1000h\x1b[?1003h\x1b[?1006h"
MOUSE_OFF = "\x1b[?1006l\x1b[?1003l\x1b[?1000l"


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None
        self._curtsies_active: bool = False
        # Last painted rows for minimal updates
        self._last_rows: Optional[list[str]] = None
        self._last_size: Optional[tuple[int, int]] = None

    def setup(self, mouse: bool = True):
        """Enter fullscreen mode, enable mouse reporting and raw input."""
        print(self.term.enter_fullscreen, end='')
        print(self.term.hide_cursor, end='')
        print(self.term.clear, end='')
        if mouse:
            print(MOUSE_ON, end='')
        sys.stdout.flush()
        self.is_fullscreen = True
        if self._curtsies_input is None:
            from curtsies import Input
            self._curtsies_input = Input(keynames='curtsies', sigint_event=False)
            self._curtsies_input.__enter__()
            self._curtsies_active = True

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            print(MOUSE_OFF, end='')
            print(self.term.normal + self.term.exit_fullscreen, end='')
            print(self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False
        if self._curtsies_input is not None:
            try:
                if self._curtsies_active:
                    self._curtsies_input.__exit__(None, None, None)
            except Exception as e:
                # Teardown should never crash the app
                logger.warning(f"Could not restore terminal input mode: {e}")
            finally:
                self._curtsies_input = None
                self._curtsies_active = False

    def invalidate_frame(self) -> None:
        """Forget the painted frame so the next update repaints everything."""
        self._last_rows = None
        self._last_size = None

    def _style(self, style) -> str:
        """Escape sequence selecting a CellStyle (after a reset)."""
        out = [self.term.normal]
        if style.flags & StyleFlags.BOLD:
            out.append(self.term.bold)
        if style.flags & StyleFlags.DIM:
            out.append(self.term.dim)
        if style.flags & StyleFlags.ITALIC:
            out.append(self.term.italic)
        if style.flags & StyleFlags.UNDERLINE:
            out.append(self.term.underline)
        if style.fg is not None:
            out.append(self.term.color_rgb(*style.fg))
        if style.bg is not None:
            out.append(self.term.on_color_rgb(*style.bg))
        return ''.join(out)

    def compose_row(self, segments) -> str:
        """Render one row of render.Segment objects to a terminal string."""
        out = []
        for segment in segments:
            out.append(self._style(segment.style))
            out.append(segment.text)
        out.append(self.term.normal)
        return ''.join(out)

    def update_frame(self, rows) -> None:
        """Diff rows against the last frame and write only changed lines.

        Falls back to a full clear on first paint or when the size changes.
        """
        size = (self.width, self.height)
        if self._last_rows is None or self._last_size != size or len(self._last_rows) != len(rows):
            print(self.term.home + self.term.normal + self.term.clear, end='')
            self._last_rows = ["" for _ in rows]
            self._last_size = size

        for y, segments in enumerate(rows):
            line = self.compose_row(segments)
            if line != self._last_rows[y]:
                print(self.term.move(y, 0) + line, end='')
                self._last_rows[y] = line
        sys.stdout.flush()

    def draw_error_message(self, message1: str, message2: str = ""):
        """Draw an error message in the center of the screen."""
        print(self.term.home + self.term.normal + self.term.clear, end='')
        self.invalidate_frame()

        width = self.width
        center_y = self.height // 2
        box_width = min(width, max(len(message1), len(message2)) + 4)
        inner = max(0, box_width - 4)
        left_margin = max(0, (width - box_width) // 2)

        def clip(text):
            return text[:inner].center(inner)

        rows = [(center_y - 2, "╔" + "═" * (box_width - 2) + "╗"),
                (center_y - 1, "║ " + clip(message1) + " ║")]
        if message2:
            rows.append((center_y, "║ " + clip(message2) + " ║"))
        rows.append((center_y + (1 if message2 else 0), "╚" + "═" * (box_width - 2) + "╝"))
        for y, text in rows:
            if 0 <= y < self.height:
                print(self.term.move(y, left_margin) + text[:width], end='')

        help_text = "q to quit | Resize terminal to continue"
        if self.height > 0:
            help_pos = max(0, (width - len(help_text)) // 2)
            print(self.term.move(self.height - 1, help_pos) + help_text[:width], end='')
        sys.stdout.flush()

    def get_key(self, timeout=None):
        """Get a single input token.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The curtsies token as a string, or None.
        """
        if self._curtsies_input is None:
            return None
        if timeout is None:
            return str(next(self._curtsies_input))
        # send() drains bytes curtsies already buffered before polling stdin
        evt = self._curtsies_input.send(float(timeout))
        return str(evt) if evt is not None else None

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Terminal height in rows (title and status lines included)."""
        return self.term.height
