"""Main viewer controller: event loop, document switching and persistence."""

import logging
import os
import select
import signal
import webbrowser
from typing import Callable, Optional

from .commands import Action, ActionKind
from .constants import ViewerConstants
from .keyboard import KeyboardHandler, KeyType, MouseEvent
from .parser import Document, load_document
from .queue import DocumentQueue
from .render import compose_frame
from .settings import SettingsPersistence, get_persistence
from .state import AppState, content_size
from .terminal import TerminalInterface

logger = logging.getLogger(__name__)


class Viewer:
    """Markdown viewer application controller."""

    def __init__(self, paths: list[str], beeline: bool = True,
                 terminal: Optional[TerminalInterface] = None,
                 persistence: Optional[SettingsPersistence] = None,
                 open_url: Callable[[str], bool] = webbrowser.open):
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.queue = DocumentQueue(paths)
        self.persistence = persistence or get_persistence()
        self.open_url = open_url
        self.default_beeline = beeline
        self.running = False
        self._resize_pipe_r: Optional[int] = None
        self._resize_pipe_w: Optional[int] = None

        document = load_document(self.queue.current)
        self.state = AppState(document, self.terminal.width, self.terminal.height,
                              beeline=beeline)
        self._apply_document(document)

    # --- documents ---

    def _apply_document(self, document: Document) -> None:
        """Show document, resuming the reading position stored for it."""
        settings = self.persistence.load_settings(document.path)
        if self.default_beeline and settings.get('beeline') is not None:
            self.state.beeline_enabled = settings['beeline']
        if settings.get('plain_mode') is not None:
            self.state.plain_mode = settings['plain_mode']
        self.state.set_document(document, top_block=settings.get('top_block'))
        self.state.set_queue(self.queue.paths, self.queue.current_index, self.queue.title())

    def save_position(self) -> None:
        self.persistence.save_settings(self.state.document.path, {
            'top_block': self.state.top_block,
            'beeline': self.state.beeline_enabled,
            'plain_mode': self.state.plain_mode,
        })

    def _switch(self, move: Callable[[], object]) -> None:
        """Save the current position, move the queue, and load its new current document."""
        self.save_position()
        previous = self.queue.current_index
        move()
        path = self.queue.current
        try:
            document = load_document(path)
        except OSError as e:
            logger.warning(f"Could not open {path}: {e}")
            self.queue.focus_index(previous)
            self.state.status_message = f"Cannot open {path}: {e.strerror or e}"
            return
        self._apply_document(document)

    def _open_path(self, path: str) -> None:
        path = os.path.realpath(os.path.abspath(path))
        if self.queue.index_of(path) is not None:
            self._switch(lambda: self.queue.open(path))
            return
        try:
            document = load_document(path)
        except OSError as e:
            logger.warning(f"Could not open {path}: {e}")
            self.state.status_message = f"Cannot open {path}: {e.strerror or e}"
            return
        self.save_position()
        self.queue.open(path)
        self._apply_document(document)

    def _open_url(self, url: str) -> None:
        try:
            opened = self.open_url(url)
        except webbrowser.Error as e:
            logger.warning(f"Could not open {url}: {e}")
            opened = False
        self.state.status_message = f"Opened {url}" if opened else f"Could not open {url}"

    def dispatch(self, action: Action) -> None:
        """Carry out what a state transition asked for."""
        kind = action.kind
        if kind == ActionKind.QUIT:
            self.running = False
        elif kind == ActionKind.NEXT_DOCUMENT:
            self._switch(self.queue.next)
        elif kind == ActionKind.PREVIOUS_DOCUMENT:
            self._switch(self.queue.prev)
        elif kind == ActionKind.GO_TO_INDEX:
            index = int(action.payload)
            if index != self.queue.current_index:
                self._switch(lambda: self.queue.focus_index(index))
        elif kind == ActionKind.OPEN_PATH:
            self._open_path(str(action.payload))
        elif kind == ActionKind.OPEN_URL:
            self._open_url(str(action.payload))

    def handle_event(self, event) -> None:
        if isinstance(event, MouseEvent):
            action = self.state.handle_mouse(event)
        elif self.state.too_small:
            # Only quitting makes sense while the error box is up
            if (event.key_type == KeyType.REGULAR and event.value == 'q') or \
               (event.key_type == KeyType.CTRL and event.value == 'c'):
                self.running = False
            return
        else:
            action = self.state.handle_key(event)
        self.dispatch(action)

    # --- loop ---

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        os.write(self._resize_pipe_w, ViewerConstants.RESIZE_PIPE_MARKER)

    def _handle_sigint(self, signum, frame):
        del signum, frame  # Unused
        self.running = False
        os.write(self._resize_pipe_w, b'C')

    def draw(self) -> None:
        if self.state.too_small:
            content_width, content_height = content_size(self.state.width, self.state.height)
            min_width = ViewerConstants.MIN_LAYOUT_WIDTH + (self.state.width - content_width)
            min_height = 1 + (self.state.height - content_height)
            self.terminal.draw_error_message(
                ViewerConstants.TERMINAL_TOO_SMALL_MESSAGE.format(min_width, min_height),
                ViewerConstants.CURRENT_SIZE_MESSAGE.format(self.state.width, self.state.height),
            )
            return
        self.terminal.update_frame(compose_frame(self.state))

    def run(self):
        """Run the main viewer loop."""
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()
        self.terminal.setup()
        self.running = True

        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)
        original_int_handler = signal.signal(signal.SIGINT, self._handle_sigint)

        try:
            need_draw = True
            while self.running:
                if need_draw:
                    self.draw()
                    need_draw = False

                ready, _, _ = select.select([0, self._resize_pipe_r], [], [])

                if self._resize_pipe_r in ready:
                    os.read(self._resize_pipe_r, 1024)
                    if self.running:
                        self.state.on_resize(self.terminal.width, self.terminal.height)
                        self.terminal.invalidate_frame()
                        need_draw = True
                if 0 in ready:
                    for event in self.keyboard.read_events(timeout=0):
                        self.handle_event(event)
                        need_draw = True
                        if not self.running:
                            break
        finally:
            signal.signal(signal.SIGWINCH, original_winch_handler)
            signal.signal(signal.SIGINT, original_int_handler)
            os.close(self._resize_pipe_r)
            os.close(self._resize_pipe_w)
            self.terminal.cleanup()
            self.save_position()
