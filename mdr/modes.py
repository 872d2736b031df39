"""Interaction mode state machine."""

from enum import Enum


class InteractionMode(Enum):
    """Which layer currently receives input."""
    NORMAL = "normal"
    SEARCHING = "searching"
    HELP = "help"
    PICKER = "picker"
    GOTO = "goto"


class ModeState:
    """The active mode plus the search prompt's query buffer.

    Exactly one mode is active. Every overlay returns to NORMAL when it
    closes; none of them touches scroll position.
    """

    def __init__(self):
        self.mode = InteractionMode.NORMAL
        self.query_buffer = ""

    @property
    def is_normal(self) -> bool:
        return self.mode == InteractionMode.NORMAL

    @property
    def is_overlay(self) -> bool:
        return self.mode in (InteractionMode.HELP, InteractionMode.PICKER, InteractionMode.GOTO)

    def enter(self, mode: InteractionMode) -> None:
        self.mode = mode
        if mode == InteractionMode.SEARCHING:
            self.query_buffer = ""

    def back_to_normal(self) -> None:
        self.mode = InteractionMode.NORMAL
        self.query_buffer = ""

    def type_char(self, ch: str) -> None:
        self.query_buffer += ch

    def backspace(self) -> None:
        self.query_buffer = self.query_buffer[:-1]
