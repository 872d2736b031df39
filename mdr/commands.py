"""Command pattern implementation for Normal-mode key bindings."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional, Tuple, Union

from .keyboard import KeyType

if TYPE_CHECKING:
    from .keyboard import KeyEvent
    from .state import AppState


class ActionKind(Enum):
    """What the event loop has to do after a state transition."""
    CONTINUE = "continue"
    QUIT = "quit"
    NEXT_DOCUMENT = "next_document"
    PREVIOUS_DOCUMENT = "previous_document"
    GO_TO_INDEX = "go_to_index"
    OPEN_PATH = "open_path"
    OPEN_URL = "open_url"


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    payload: Optional[Union[str, int]] = None


CONTINUE = Action(ActionKind.CONTINUE)


class ViewerCommand(ABC):
    """Base class for viewer commands."""

    @abstractmethod
    def execute(self, state: 'AppState', key_event: 'KeyEvent') -> Optional[Action]:
        """Execute the command.

        Returns:
            An Action for the event loop, or None to just redraw.
        """


class ScrollCommand(ViewerCommand):
    """Base class for viewport movement; never changes mode or search."""

    def execute(self, state, key_event):
        self._scroll(state.viewport)
        state.refresh_hover()
        return None

    @abstractmethod
    def _scroll(self, viewport):
        pass


class LineDownCommand(ScrollCommand):
    def _scroll(self, viewport):
        viewport.scroll(1)


class LineUpCommand(ScrollCommand):
    def _scroll(self, viewport):
        viewport.scroll(-1)


class PageDownCommand(ScrollCommand):
    def _scroll(self, viewport):
        viewport.page(1)


class PageUpCommand(ScrollCommand):
    def _scroll(self, viewport):
        viewport.page(-1)


class HomeCommand(ScrollCommand):
    def _scroll(self, viewport):
        viewport.home()


class EndCommand(ScrollCommand):
    def _scroll(self, viewport):
        viewport.end()


class StartSearchCommand(ViewerCommand):
    def execute(self, state, key_event):
        state.start_search()
        return None


class NextMatchCommand(ViewerCommand):
    def execute(self, state, key_event):
        state.step_match(forward=True)
        return None


class PreviousMatchCommand(ViewerCommand):
    def execute(self, state, key_event):
        state.step_match(forward=False)
        return None


class ClearSearchCommand(ViewerCommand):
    def execute(self, state, key_event):
        state.search.clear()
        return None


class OpenNearestLinkCommand(ViewerCommand):
    def execute(self, state, key_event):
        return state.open_nearest_link()


class HelpCommand(ViewerCommand):
    def execute(self, state, key_event):
        state.show_help()
        return None


class ToggleBeelineCommand(ViewerCommand):
    def execute(self, state, key_event):
        state.toggle_beeline()
        return None


class TogglePlainModeCommand(ViewerCommand):
    def execute(self, state, key_event):
        state.toggle_plain_mode()
        return None


class NextDocumentCommand(ViewerCommand):
    def execute(self, state, key_event):
        return Action(ActionKind.NEXT_DOCUMENT)


class PreviousDocumentCommand(ViewerCommand):
    def execute(self, state, key_event):
        return Action(ActionKind.PREVIOUS_DOCUMENT)


class GoToDialogCommand(ViewerCommand):
    def execute(self, state, key_event):
        state.show_goto()
        return None


class PickerCommand(ViewerCommand):
    def execute(self, state, key_event):
        state.show_picker()
        return None


class QuitCommand(ViewerCommand):
    def execute(self, state, key_event):
        return Action(ActionKind.QUIT)


class CommandRegistry:
    """Registry for mapping key combinations to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], ViewerCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Line movement
        self.register((KeyType.SPECIAL, 'down'), LineDownCommand())
        self.register((KeyType.REGULAR, 'j'), LineDownCommand())
        self.register((KeyType.SPECIAL, 'up'), LineUpCommand())
        self.register((KeyType.REGULAR, 'k'), LineUpCommand())

        # Paging
        self.register((KeyType.SPECIAL, 'page_down'), PageDownCommand())
        self.register((KeyType.REGULAR, ' '), PageDownCommand())
        self.register((KeyType.REGULAR, '\t'), PageDownCommand())
        self.register((KeyType.SPECIAL, 'page_up'), PageUpCommand())
        self.register((KeyType.SHIFT_SPECIAL, 'tab'), PageUpCommand())
        self.register((KeyType.SPECIAL, 'home'), HomeCommand())
        self.register((KeyType.SPECIAL, 'end'), EndCommand())

        # Search
        self.register((KeyType.REGULAR, '/'), StartSearchCommand())
        self.register((KeyType.REGULAR, 'n'), NextMatchCommand())
        self.register((KeyType.REGULAR, 'N'), PreviousMatchCommand())
        self.register((KeyType.SPECIAL, 'escape'), ClearSearchCommand())

        # Links
        self.register((KeyType.SPECIAL, 'enter'), OpenNearestLinkCommand())

        # Display
        self.register((KeyType.REGULAR, 'h'), HelpCommand())
        self.register((KeyType.REGULAR, '?'), HelpCommand())
        self.register((KeyType.SPECIAL, 'f1'), HelpCommand())
        self.register((KeyType.REGULAR, 'b'), ToggleBeelineCommand())
        self.register((KeyType.REGULAR, 'm'), TogglePlainModeCommand())

        # Documents
        self.register((KeyType.REGULAR, ']'), NextDocumentCommand())
        self.register((KeyType.REGULAR, '['), PreviousDocumentCommand())
        self.register((KeyType.REGULAR, 'g'), GoToDialogCommand())
        self.register((KeyType.REGULAR, 'o'), PickerCommand())

        # System
        self.register((KeyType.REGULAR, 'q'), QuitCommand())
        self.register((KeyType.CTRL, 'c'), QuitCommand())

    def register(self, key: Tuple[KeyType, str], command: ViewerCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[ViewerCommand]:
        return self._commands.get((key_type, value))

    def execute(self, state: 'AppState', key_event: 'KeyEvent') -> Action:
        """Execute the command bound to key_event; unbound keys are ignored."""
        if key_event.is_alt:
            command = self.get_command(KeyType.ALT, key_event.value)
        else:
            command = self.get_command(key_event.key_type, key_event.value)

        if command is None:
            return CONTINUE
        return command.execute(state, key_event) or CONTINUE
