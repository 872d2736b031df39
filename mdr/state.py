"""Application state: one owned object tying layout, search, viewport and modes together.

Every transition here is synchronous and side-effect free apart from
mutating the state itself; anything touching the outside world (loading
files, opening a browser) is returned to the event loop as an Action.
"""

import logging
import os
from typing import Optional
from urllib.parse import unquote, urlparse

from .commands import CONTINUE, Action, ActionKind, CommandRegistry
from .constants import ViewerConstants
from .discovery import is_markdown
from .keyboard import KeyEvent, KeyType, MouseEvent, MouseKind
from .layout import layout, plain_layout
from .links import LinkIndex
from .model import WrappedLine, block_source_line
from .modes import InteractionMode, ModeState
from .parser import Document
from .picker import PickerState
from .search import SearchState
from .viewport import Viewport

logger = logging.getLogger(__name__)


def content_size(width: int, height: int) -> tuple[int, int]:
    """Columns and rows available to the document inside the terminal."""
    return (
        width - ViewerConstants.SCROLLBAR_COLUMNS,
        height - ViewerConstants.TITLE_ROWS - ViewerConstants.STATUS_ROWS,
    )


class AppState:
    """State of the viewer for the active document."""

    def __init__(self, document: Document, width: int = 80, height: int = 24,
                 beeline: bool = True, plain_mode: bool = False):
        self.document = document
        self.width = width
        self.height = height
        self.beeline_enabled = beeline
        self.plain_mode = plain_mode
        self.title = document.path or ""
        self.status_message: Optional[str] = None

        self.lines: list[WrappedLine] = []
        self.link_index = LinkIndex([], [])
        self.search = SearchState()
        self.modes = ModeState()
        self.commands = CommandRegistry()
        self.hover_link: Optional[int] = None
        self.last_mouse: Optional[tuple[int, int]] = None

        self.picker: Optional[PickerState] = None
        self.queue_paths: list[str] = [document.path] if document.path else []
        self.queue_index = 0
        self.goto_selected = 0
        # Top-row anchor kept while the terminal is too small to lay out
        self._held_anchor: tuple[int, float] = (0, 0.0)

        content_width, content_height = content_size(width, height)
        self.viewport = Viewport(content_width, max(0, content_height))
        self.relayout()

    # --- geometry ---

    @property
    def content_top(self) -> int:
        return ViewerConstants.TITLE_ROWS

    @property
    def content_left(self) -> int:
        return 0

    @property
    def too_small(self) -> bool:
        content_width, content_height = content_size(self.width, self.height)
        return content_width < ViewerConstants.MIN_LAYOUT_WIDTH or content_height < 1

    @property
    def mode(self) -> InteractionMode:
        return self.modes.mode

    # --- layout ---

    def relayout(self) -> None:
        """Recompute wrapped lines and everything derived from them."""
        if self.too_small:
            self.lines = []
            self.link_index = LinkIndex([], [])
            self.viewport.set_content(0)
            self.hover_link = None
            return
        if self.plain_mode:
            self.lines = plain_layout(self.document.source, self.viewport.width)
        else:
            self.lines = layout(self.document.blocks, self.viewport.width)
        urls = [] if self.plain_mode else self.document.urls
        self.link_index = LinkIndex(self.lines, urls)
        self.viewport.set_content(len(self.lines))
        if self.modes.mode == InteractionMode.SEARCHING and self.modes.query_buffer:
            self.search.preview(self.modes.query_buffer, self.lines)
        else:
            self.search.refresh(self.lines)
        self.refresh_hover()

    def _first_row_of(self, anchor: int) -> Optional[int]:
        """First row whose block_index is >= anchor."""
        for row, line in enumerate(self.lines):
            if line.block_index >= anchor:
                return row
        return None

    def top_anchor(self) -> tuple[int, float]:
        """(block_index, fraction of that block scrolled past) at the top row."""
        if not self.lines:
            return self._held_anchor
        top = min(self.viewport.scroll_offset, len(self.lines) - 1)
        block = self.lines[top].block_index
        first = top
        while first > 0 and self.lines[first - 1].block_index == block:
            first -= 1
        last = top
        while last + 1 < len(self.lines) and self.lines[last + 1].block_index == block:
            last += 1
        return (block, (top - first) / (last - first + 1))

    def restore_anchor(self, block_index: int, fraction: float = 0.0) -> None:
        """Scroll so block_index (fraction of the way in) is the top row."""
        first = self._first_row_of(block_index)
        if first is None:
            self.viewport.clamp()
            return
        block = self.lines[first].block_index
        rows = 0
        while first + rows < len(self.lines) and self.lines[first + rows].block_index == block:
            rows += 1
        offset = first
        if block == block_index:
            offset += min(rows - 1, int(fraction * rows))
        self.viewport.jump_to(offset)

    def on_resize(self, width: int, height: int) -> None:
        """Re-layout for a new terminal size, keeping the top block in place.

        Overlays stay open across a resize.
        """
        anchor = self.top_anchor()
        self._held_anchor = anchor
        self.width = width
        self.height = height
        content_width, content_height = content_size(width, height)
        self.viewport.resize(content_width, max(0, content_height))
        self.relayout()
        self.restore_anchor(*anchor)
        self.refresh_hover()

    @property
    def top_block(self) -> int:
        """Index of the document block at the top of the window."""
        block, _ = self.top_anchor()
        if self.plain_mode:
            return self._block_for_source_line(block)
        return block

    def _block_for_source_line(self, source_line: int) -> int:
        best = 0
        for index, block in enumerate(self.document.blocks):
            if block_source_line(block) <= source_line:
                best = index
            else:
                break
        return best

    # --- documents ---

    def set_document(self, document: Document, top_block: Optional[int] = None) -> None:
        """Replace the active document.

        Search, hover and overlays are reset and the view starts at the top,
        unless top_block names a block to resume at.
        """
        self.document = document
        self.title = document.path or ""
        self.search.clear()
        self.modes.back_to_normal()
        self.picker = None
        self.hover_link = None
        self.status_message = None
        self.viewport.scroll_offset = 0
        self._held_anchor = (0, 0.0)
        self.relayout()
        if top_block:
            if self.plain_mode:
                blocks = self.document.blocks
                anchor = block_source_line(blocks[top_block]) if 0 <= top_block < len(blocks) else 0
            else:
                anchor = top_block
            if not self.lines:
                self._held_anchor = (anchor, 0.0)
            self.restore_anchor(anchor)
            self.refresh_hover()

    def set_queue(self, paths: list[str], index: int, title: str) -> None:
        self.queue_paths = list(paths)
        self.queue_index = index
        self.title = title

    # --- toggles ---

    def toggle_beeline(self) -> None:
        self.beeline_enabled = not self.beeline_enabled

    def toggle_plain_mode(self) -> None:
        """Switch between rendered and raw source, keeping the same source line on top."""
        block, _ = self.top_anchor()
        if self.plain_mode:
            source_line = block
        else:
            blocks = self.document.blocks
            source_line = block_source_line(blocks[block]) if 0 <= block < len(blocks) else 0
        self.plain_mode = not self.plain_mode
        self.hover_link = None
        self.relayout()
        if self.plain_mode:
            self.restore_anchor(source_line)
        else:
            self.restore_anchor(self._block_for_source_line(source_line))
        self.refresh_hover()

    # --- search ---

    def start_search(self) -> None:
        self.hover_link = None
        self.modes.enter(InteractionMode.SEARCHING)

    def _scroll_to_current_match(self) -> None:
        match = self.search.current
        if match is not None:
            self.viewport.ensure_visible(match.line_index)
            self.refresh_hover()

    def step_match(self, forward: bool = True) -> None:
        if forward:
            self.search.next()
        else:
            self.search.prev()
        self._scroll_to_current_match()

    def commit_search(self) -> None:
        query = self.modes.query_buffer
        self.modes.back_to_normal()
        if not query:
            self.search.clear()
            return
        self.search.set_query(query, self.lines)
        self._scroll_to_current_match()
        self.refresh_hover()

    def _handle_search_key(self, event: KeyEvent) -> Action:
        if (event.key_type == KeyType.SPECIAL and event.value == 'escape') or \
           (event.key_type == KeyType.CTRL and event.value == 'g'):
            self.search.clear()
            self.modes.back_to_normal()
            self.refresh_hover()
        elif event.key_type == KeyType.SPECIAL and event.value == 'enter':
            self.commit_search()
        elif event.key_type == KeyType.SPECIAL and event.value == 'backspace':
            self.modes.backspace()
            self._preview_search()
        elif event.key_type == KeyType.REGULAR and event.value.isprintable():
            self.modes.type_char(event.value)
            self._preview_search()
        return CONTINUE

    def _preview_search(self) -> None:
        if self.modes.query_buffer:
            self.search.preview(self.modes.query_buffer, self.lines)
        else:
            self.search.clear()

    # --- links ---

    def link_at_screen(self, x: int, y: int) -> Optional[int]:
        """Link under a screen cell, or None outside the content area."""
        row = y - self.content_top
        col = x - self.content_left
        if not 0 <= row < self.viewport.height or not 0 <= col < self.viewport.width:
            return None
        doc_row = self.viewport.scroll_offset + row
        if doc_row >= len(self.lines):
            return None
        return self.link_index.link_at(doc_row, col)

    def refresh_hover(self) -> None:
        if self.last_mouse is None or self.modes.mode != InteractionMode.NORMAL:
            self.hover_link = None
            return
        self.hover_link = self.link_at_screen(*self.last_mouse)

    @property
    def hover_url(self) -> Optional[str]:
        return self.link_index.resolve_link(self.hover_link)

    def link_action(self, url: Optional[str]) -> Action:
        """Decide how to follow url: open a local markdown file or hand it to the browser."""
        if not url:
            return CONTINUE
        if url.startswith('#'):
            self.status_message = f"No target for {url}"
            return CONTINUE
        parsed = urlparse(url)
        if parsed.scheme in ('', 'file'):
            target = unquote(parsed.path)
            if target:
                base = os.path.dirname(self.document.path) if self.document.path else os.getcwd()
                path = os.path.normpath(os.path.join(base, os.path.expanduser(target)))
                if os.path.isfile(path) and is_markdown(path):
                    return Action(ActionKind.OPEN_PATH, path)
        return Action(ActionKind.OPEN_URL, url)

    def open_nearest_link(self) -> Action:
        link_id = self.link_index.nearest_link(self.viewport.scroll_offset, self.viewport.height)
        if link_id is None:
            return CONTINUE
        return self.link_action(self.link_index.resolve_link(link_id))

    # --- overlays ---

    def show_help(self) -> None:
        self.hover_link = None
        self.modes.enter(InteractionMode.HELP)

    def show_goto(self) -> None:
        self.hover_link = None
        self.goto_selected = self.queue_index
        self.modes.enter(InteractionMode.GOTO)

    def show_picker(self) -> None:
        self.hover_link = None
        directory = os.path.dirname(self.document.path) if self.document.path else os.getcwd()
        self.picker = PickerState(directory)
        self.modes.enter(InteractionMode.PICKER)

    def close_overlay(self) -> None:
        self.modes.back_to_normal()
        self.picker = None
        self.refresh_hover()

    def _handle_goto_key(self, event: KeyEvent) -> Action:
        count = len(self.queue_paths)
        if event.key_type == KeyType.SPECIAL and event.value == 'escape':
            self.close_overlay()
        elif event.key_type == KeyType.SPECIAL and event.value == 'enter':
            self.close_overlay()
            if count:
                return Action(ActionKind.GO_TO_INDEX, self.goto_selected)
        elif count and event.value in ('up', 'k'):
            self.goto_selected = max(0, self.goto_selected - 1)
        elif count and event.value in ('down', 'j', '\t'):
            self.goto_selected = min(count - 1, self.goto_selected + 1)
        elif event.value == 'home':
            self.goto_selected = 0
        elif count and event.value == 'end':
            self.goto_selected = count - 1
        return CONTINUE

    def _handle_picker_key(self, event: KeyEvent) -> Action:
        picker = self.picker
        if picker is None:
            self.close_overlay()
            return CONTINUE
        if event.key_type == KeyType.SPECIAL and event.value == 'escape':
            self.close_overlay()
        elif event.key_type == KeyType.SPECIAL and event.value == 'enter':
            path = picker.activate()
            if path is not None:
                self.close_overlay()
                return Action(ActionKind.OPEN_PATH, path)
        elif event.key_type == KeyType.SPECIAL and event.value == 'backspace':
            picker.backspace()
        elif event.key_type == KeyType.SPECIAL and event.value == 'up':
            picker.move(-1)
        elif event.key_type == KeyType.SHIFT_SPECIAL and event.value == 'tab':
            picker.move(-1)
        elif event.key_type == KeyType.SPECIAL and event.value == 'down':
            picker.move(1)
        elif event.key_type == KeyType.REGULAR and event.value == '\t':
            picker.move(1)
        elif event.key_type == KeyType.SPECIAL and event.value == 'home':
            picker.home()
        elif event.key_type == KeyType.SPECIAL and event.value == 'end':
            picker.end()
        elif event.key_type == KeyType.REGULAR and event.value.isprintable():
            picker.type_char(event.value)
        return CONTINUE

    # --- input ---

    def handle_key(self, event: KeyEvent) -> Action:
        """Apply one key event and say what the event loop should do next."""
        mode = self.modes.mode
        if mode == InteractionMode.HELP:
            self.close_overlay()
            return CONTINUE
        if mode == InteractionMode.SEARCHING:
            return self._handle_search_key(event)
        if mode == InteractionMode.PICKER:
            return self._handle_picker_key(event)
        if mode == InteractionMode.GOTO:
            return self._handle_goto_key(event)

        self.status_message = None
        return self.commands.execute(self, event)

    def handle_mouse(self, event: MouseEvent) -> Action:
        """Apply one mouse event.

        The wheel scrolls in Normal and Searching; hover and clicks only
        count in Normal; overlays ignore the mouse.
        """
        self.last_mouse = (event.x, event.y)
        mode = self.modes.mode
        if mode not in (InteractionMode.NORMAL, InteractionMode.SEARCHING):
            return CONTINUE

        if event.kind in (MouseKind.WHEEL_UP, MouseKind.WHEEL_DOWN):
            self.viewport.wheel(-1 if event.kind == MouseKind.WHEEL_UP else 1)
            self.refresh_hover()
            return CONTINUE

        if mode != InteractionMode.NORMAL:
            return CONTINUE

        self.hover_link = self.link_at_screen(event.x, event.y)
        if event.kind == MouseKind.PRESS and event.button == 0 and self.hover_link is not None:
            return self.link_action(self.link_index.resolve_link(self.hover_link))
        return CONTINUE

    # --- status ---

    def status_left(self) -> str:
        if self.modes.mode == InteractionMode.SEARCHING:
            return f"/{self.modes.query_buffer}"
        if self.status_message:
            return self.status_message
        url = self.hover_url
        if url:
            return f"link: {url}"
        return ViewerConstants.STATUS_HINT

    def status_right(self) -> str:
        total = len(self.lines)
        row = min(self.viewport.scroll_offset + 1, total)
        parts = [f"{row}/{total}"]
        if self.search.active:
            count = len(self.search.matches)
            if not count:
                parts.append(ViewerConstants.NO_MATCHES_MESSAGE)
            elif self.search.cursor is None:
                parts.append(f"-/{count}")
            else:
                parts.append(f"{self.search.cursor + 1}/{count}")
        parts.append(f"{self.viewport.percent()}%")
        return "  ".join(parts)
