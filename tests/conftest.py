"""Shared fixtures: an in-memory screen and an editor wired to it."""

import pytest

from slessing.editor import Editor
from slessing.keyboard import KeyboardHandler
from slessing.settings_persistence import StylePersistence
from slessing.terminal import Screen


class FakeScreen(Screen):
    """Screen that records cells in memory and replays queued key tokens."""

    def __init__(self, cols=80, rows=24):
        self.cols = cols
        self.rows = rows
        self.cells = {}
        self.cursor = None
        self.flushes = 0
        self._keys = []
        self._keyboard = KeyboardHandler(self)

    def size(self):
        return (self.cols, self.rows)

    def clear(self):
        self.cells = {}

    def set_cell(self, col, row, ch, style=None):
        if 0 <= col < self.cols and 0 <= row < self.rows:
            self.cells[(col, row)] = (ch, style)

    def flush(self):
        self.flushes += 1

    def show_cursor(self, col, row):
        self.cursor = (col, row)

    def hide_cursor(self):
        self.cursor = None

    def get_key(self, timeout=None):
        return self._keys.pop(0) if self._keys else None

    def poll_event(self, timeout=None):
        return self._keyboard.get_key_event(timeout)

    def add_keys(self, *tokens):
        self._keys.extend(tokens)

    def row_text(self, row):
        return "".join(self.cells.get((col, row), (" ", None))[0] for col in range(self.cols)).rstrip()

    def style_at(self, col, row):
        return self.cells.get((col, row), (" ", None))[1]


def press(editor, *tokens):
    """Feed curtsies-style key tokens to an editor, one event each."""
    handler = KeyboardHandler(editor.screen)
    for token in tokens:
        editor._handle_key_event(handler.parse_key(token))


def type_command(editor, line):
    """Type a command line in command mode and press Enter."""
    press(editor, *line, '<Ctrl-j>')


@pytest.fixture
def screen():
    return FakeScreen()


@pytest.fixture
def persistence(tmp_path):
    return StylePersistence(config_dir=tmp_path / "config")


@pytest.fixture
def editor(screen, persistence):
    return Editor(screen=screen, persistence=persistence)
