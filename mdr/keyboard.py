"""Keyboard and mouse input handling using curtsies-style tokens."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    ALT = "alt"
    CTRL = "ctrl"
    SPECIAL = "special"
    SHIFT_SPECIAL = "shift_special"  # Shift + arrow keys, Shift-Tab, etc.


@dataclass
class KeyEvent:
    """Represents a parsed keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'backspace')
    raw: str  # The raw key token
    is_alt: bool = False
    is_ctrl: bool = False
    is_shift: bool = False
    is_sequence: bool = False


class MouseKind(Enum):
    PRESS = "press"
    RELEASE = "release"
    MOVE = "move"
    WHEEL_UP = "wheel_up"
    WHEEL_DOWN = "wheel_down"


@dataclass
class MouseEvent:
    """A decoded SGR mouse report; x and y are 0-based screen cells."""
    kind: MouseKind
    x: int
    y: int
    button: int = 0


InputEvent = Union[KeyEvent, MouseEvent]

_SGR_MOUSE = re.compile(r"\x1b\[<(\d+);(\d+);(\d+)([Mm])")
_SGR_PREFIX = re.compile(r"\x1b\[(<[\d;]*)?")


def parse_mouse(seq: str) -> Optional[MouseEvent]:
    """Decode an SGR (1006) mouse report such as ``\\x1b[<0;10;5M``."""
    m = _SGR_MOUSE.fullmatch(seq)
    if not m:
        return None
    code, x, y = int(m.group(1)), int(m.group(2)) - 1, int(m.group(3)) - 1
    released = m.group(4) == "m"
    if code & 64:
        kind = MouseKind.WHEEL_DOWN if code & 1 else MouseKind.WHEEL_UP
        return MouseEvent(kind, x, y)
    button = code & 3
    if code & 32:
        return MouseEvent(MouseKind.MOVE, x, y, button)
    return MouseEvent(MouseKind.RELEASE if released else MouseKind.PRESS, x, y, button)


def _token_text(token: str) -> str:
    """Raw characters behind a token, for reassembling escape sequences."""
    if token.lower() in ("<esc+[>", "<meta-[>", "<alt-[>"):
        return "\x1b["
    if token.lower() in ("<esc>", "<escape>"):
        return "\x1b"
    return token


class KeyboardHandler:
    """Turns terminal tokens into key and mouse events.

    curtsies may deliver a mouse report as one token or split it into an
    ``<Esc+[>`` token followed by single characters, so a partial report is
    buffered until it completes.
    """

    def __init__(self, terminal_interface):
        self.terminal = terminal_interface
        self._pending: Optional[str] = None

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[InputEvent]:
        """Get next input event, or None if nothing complete arrived."""
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        return self.feed(str(key))

    def read_events(self, timeout: float = 0) -> list[InputEvent]:
        """Drain every token that is already available."""
        events: list[InputEvent] = []
        while True:
            key = self.terminal.get_key(timeout)
            if not key:
                return events
            event = self.feed(str(key))
            if event is not None:
                events.append(event)
            timeout = 0

    def feed(self, token: str) -> Optional[InputEvent]:
        """Consume one token; returns an event once one is complete."""
        if self._pending is not None:
            candidate = self._pending + _token_text(token)
            mouse = parse_mouse(candidate)
            if mouse is not None:
                self._pending = None
                return mouse
            if _SGR_PREFIX.fullmatch(candidate):
                self._pending = candidate
                return None
            # Not a mouse report after all; deliver the key that broke it
            self._pending = None
            return self.parse_key(token)

        text = _token_text(token)
        if text.startswith("\x1b["):
            mouse = parse_mouse(text)
            if mouse is not None:
                return mouse
            if _SGR_PREFIX.fullmatch(text):
                self._pending = text
                return None
        return self.parse_key(token)

    def parse_key(self, key) -> KeyEvent:
        """Parse a key token into a KeyEvent.

        Args:
            key: curtsies key name (e.g. '<UP>', '<Ctrl-g>') or a character

        Returns:
            Parsed KeyEvent
        """
        key_str = str(key)

        # Curtsies-style key names like '<LEFT>', '<Ctrl-x>', '<Shift-TAB>'
        if len(key_str) > 2 and key_str.startswith('<') and key_str.endswith('>'):
            name = key_str[1:-1]
            lower = name.lower().replace('+', '-')
            parts = lower.split('-') if '-' in lower else [lower]
            mods = set()
            base = parts[-1]
            if len(parts) > 1:
                mods = set(parts[:-1])
            if 'meta' in mods or 'esc' in mods:
                mods.add('alt')
            if base in ('pageup', 'page_up', 'ppage'):
                base = 'page_up'
            elif base in ('pagedown', 'page_down', 'npage'):
                base = 'page_down'
            elif base in ('btab', 'key_btab'):
                base = 'tab'
                mods.add('shift')

            specials = {
                'left', 'right', 'up', 'down', 'home', 'end', 'enter', 'backspace', 'delete',
                'page_up', 'page_down', 'insert'
            }
            if base in ('space', 'spacebar', 'spc') and not mods:
                return KeyEvent(key_type=KeyType.REGULAR, value=' ', raw=' ')
            if base == 'tab':
                if 'shift' in mods:
                    return KeyEvent(key_type=KeyType.SHIFT_SPECIAL, value='tab', raw=key_str, is_shift=True, is_sequence=True)
                if not mods:
                    return KeyEvent(key_type=KeyType.REGULAR, value='\t', raw='\t')
            if 'ctrl' in mods and len(base) == 1:
                # Ctrl-J / Ctrl-M are Enter
                if base in ('j', 'm'):
                    return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str, is_sequence=True)
                if base == 'h':
                    return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str, is_sequence=True)
                return KeyEvent(key_type=KeyType.CTRL, value=base, raw=key_str, is_ctrl=True)
            if 'alt' in mods:
                if base in specials or len(base) == 1:
                    return KeyEvent(key_type=KeyType.ALT, value=base, raw=key_str, is_alt=True)
            if 'shift' in mods and base in specials:
                return KeyEvent(key_type=KeyType.SHIFT_SPECIAL, value=base, raw=key_str, is_shift=True, is_sequence=True)
            if base in specials:
                return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str, is_sequence=True)
            if base in ('esc', 'escape'):
                return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw='\x1b')
            # Unknown token (F1 and friends) stays special
            return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str, is_sequence=True)

        if len(key_str) == 1:
            o = ord(key_str)
            if o in (8, 127):
                return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str)
            if o == 9:
                return KeyEvent(key_type=KeyType.REGULAR, value='\t', raw=key_str)
            if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z (exclude ESC=27)
                ch = chr(ord('a') + o - 1)
                if ch in ('j', 'm'):
                    return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str)
                return KeyEvent(key_type=KeyType.CTRL, value=ch, raw=key_str, is_ctrl=True)

        if key_str == '\x1b':
            return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw='\x1b')

        return KeyEvent(
            key_type=KeyType.REGULAR,
            value=key_str,
            raw=key_str,
            is_sequence=False
        )
