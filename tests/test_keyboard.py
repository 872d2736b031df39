"""Test keyboard and mouse input handling."""

import pytest
from unittest.mock import Mock

from mdr.keyboard import KeyboardHandler, KeyType, MouseEvent, MouseKind, parse_mouse


class MockTerminal:
    """Mock terminal interface for testing."""

    def __init__(self):
        self._key_queue = []

    def get_key(self, timeout=None):
        """Mock get_key that returns from queue."""
        if self._key_queue:
            return self._key_queue.pop(0)
        return None

    def add_key(self, key_str):
        """Add a key to the queue."""
        key = Mock()
        key.__str__ = lambda self: key_str
        self._key_queue.append(key)

    def add_keys(self, *key_strs):
        for key_str in key_strs:
            self.add_key(key_str)


@pytest.fixture
def terminal():
    return MockTerminal()


@pytest.fixture
def handler(terminal):
    return KeyboardHandler(terminal)


@pytest.mark.parametrize("token, key_type, value", [
    ('<UP>', KeyType.SPECIAL, 'up'),
    ('<DOWN>', KeyType.SPECIAL, 'down'),
    ('<PAGEUP>', KeyType.SPECIAL, 'page_up'),
    ('<PAGEDOWN>', KeyType.SPECIAL, 'page_down'),
    ('<HOME>', KeyType.SPECIAL, 'home'),
    ('<END>', KeyType.SPECIAL, 'end'),
    ('<F1>', KeyType.SPECIAL, 'f1'),
    ('<ESC>', KeyType.SPECIAL, 'escape'),
    ('\x1b', KeyType.SPECIAL, 'escape'),
    ('<SPACE>', KeyType.REGULAR, ' '),
    ('<TAB>', KeyType.REGULAR, '\t'),
    ('\t', KeyType.REGULAR, '\t'),
    ('<Shift-TAB>', KeyType.SHIFT_SPECIAL, 'tab'),
    ('<Ctrl-j>', KeyType.SPECIAL, 'enter'),
    ('\r', KeyType.SPECIAL, 'enter'),
    ('<BACKSPACE>', KeyType.SPECIAL, 'backspace'),
    ('<Ctrl-h>', KeyType.SPECIAL, 'backspace'),
    ('\x7f', KeyType.SPECIAL, 'backspace'),
    ('<Ctrl-c>', KeyType.CTRL, 'c'),
    ('\x07', KeyType.CTRL, 'g'),
    ('<Esc+b>', KeyType.ALT, 'b'),
    ('q', KeyType.REGULAR, 'q'),
    ('/', KeyType.REGULAR, '/'),
    ('<', KeyType.REGULAR, '<'),
    ('<>', KeyType.REGULAR, '<>'),
])
def test_parse_key(handler, token, key_type, value):
    event = handler.parse_key(token)
    assert event.key_type == key_type
    assert event.value == value


def test_get_key_event_reads_from_terminal(terminal, handler):
    terminal.add_key('<DOWN>')
    event = handler.get_key_event()
    assert event.key_type == KeyType.SPECIAL
    assert event.value == 'down'
    assert handler.get_key_event() is None


@pytest.mark.parametrize("seq, expected", [
    ('\x1b[<0;10;5M', MouseEvent(MouseKind.PRESS, 9, 4, 0)),
    ('\x1b[<0;10;5m', MouseEvent(MouseKind.RELEASE, 9, 4, 0)),
    ('\x1b[<2;1;1M', MouseEvent(MouseKind.PRESS, 0, 0, 2)),
    ('\x1b[<35;3;4M', MouseEvent(MouseKind.MOVE, 2, 3, 3)),
    ('\x1b[<32;3;4M', MouseEvent(MouseKind.MOVE, 2, 3, 0)),
    ('\x1b[<64;3;4M', MouseEvent(MouseKind.WHEEL_UP, 2, 3)),
    ('\x1b[<65;3;4M', MouseEvent(MouseKind.WHEEL_DOWN, 2, 3)),
])
def test_parse_mouse(seq, expected):
    assert parse_mouse(seq) == expected


def test_parse_mouse_rejects_other_sequences():
    assert parse_mouse('\x1b[A') is None
    assert parse_mouse('x') is None


def test_mouse_report_as_one_token(terminal, handler):
    terminal.add_key('\x1b[<0;10;5M')
    assert handler.get_key_event() == MouseEvent(MouseKind.PRESS, 9, 4, 0)


def test_mouse_report_split_into_tokens(terminal, handler):
    terminal.add_keys('<Esc+[>', '<', '6', '5', ';', '1', '2', ';', '7', 'M')
    assert handler.read_events() == [MouseEvent(MouseKind.WHEEL_DOWN, 11, 6)]


def test_key_after_mouse_report_is_delivered(terminal, handler):
    terminal.add_keys('\x1b[<0;1;1M', 'q')
    events = handler.read_events()
    assert events[0] == MouseEvent(MouseKind.PRESS, 0, 0, 0)
    assert events[1].key_type == KeyType.REGULAR
    assert events[1].value == 'q'


def test_broken_sequence_delivers_the_interrupting_key(terminal, handler):
    terminal.add_keys('<Esc+[>', '<', '1', 'q')
    events = handler.read_events()
    assert len(events) == 1
    assert events[0].key_type == KeyType.REGULAR
    assert events[0].value == 'q'


def test_read_events_with_nothing_pending(handler):
    assert handler.read_events() == []
