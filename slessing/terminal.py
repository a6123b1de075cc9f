"""Terminal interface using Blessed for display and Curtsies for input."""

import select
import sys
from abc import ABC, abstractmethod
from typing import Optional

import blessed

from .keyboard import KeyboardHandler, KeyEvent
from .styles import Style

Cell = tuple[str, Optional[Style]]


class Screen(ABC):
    """Cell-grid drawing surface plus the input event source.

    The editor core draws only through these calls.
    """

    @abstractmethod
    def size(self) -> tuple[int, int]:
        """Return (cols, rows)."""

    @abstractmethod
    def clear(self) -> None:
        """Blank the pending frame."""

    @abstractmethod
    def set_cell(self, col: int, row: int, ch: str, style: Optional[Style] = None) -> None:
        """Set one cell of the pending frame; cells off-screen are ignored."""

    @abstractmethod
    def flush(self) -> None:
        """Make the pending frame visible."""

    @abstractmethod
    def poll_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        """Wait for the next key event."""

    @abstractmethod
    def show_cursor(self, col: int, row: int) -> None:
        """Show the hardware cursor at a cell on the next flush."""

    @abstractmethod
    def hide_cursor(self) -> None:
        """Hide the hardware cursor on the next flush."""

    def put_text(self, col: int, row: int, text: str, style: Optional[Style] = None) -> int:
        """Write a string one cell per character; return the column after it."""
        for ch in text:
            self.set_cell(col, row, ch, style)
            col += 1
        return col


class TerminalInterface(Screen):
    """Screen backed by a real terminal."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.keyboard = KeyboardHandler(self)
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None
        self._curtsies_active: bool = False
        # Pending frame and the last one written, for minimal updates
        self._cells: list[list[Cell]] = []
        self._last_rows: Optional[list[str]] = None
        self._cursor: Optional[tuple[int, int]] = None

    def setup(self):
        """Enter fullscreen mode and prepare terminal."""
        print(self.term.enter_fullscreen, end='')
        print(self.term.hide_cursor, end='')
        print(self.term.clear, end='', flush=True)
        self.is_fullscreen = True
        self._last_rows = None
        if self._curtsies_input is None:
            try:
                from curtsies import Input
                self._curtsies_input = Input(keynames='curtsies')
                self._curtsies_input.__enter__()
                self._curtsies_active = True
            except Exception:
                # curtsies cannot put a non-tty stdin into raw mode; run without input
                self._curtsies_input = None
                self._curtsies_active = False

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            print(self.term.normal + self.term.exit_fullscreen, end='')
            print(self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False
        if self._curtsies_input is not None:
            try:
                if self._curtsies_active:
                    self._curtsies_input.__exit__(None, None, None)
            finally:
                self._curtsies_input = None
                self._curtsies_active = False

    def invalidate_frame(self) -> None:
        """Forget the last frame so the next flush repaints everything."""
        self._last_rows = None

    # --- Screen ---

    def size(self) -> tuple[int, int]:
        return (self.term.width, self.term.height)

    def clear(self) -> None:
        cols, rows = self.size()
        self._cells = [[(' ', None)] * cols for _ in range(rows)]

    def set_cell(self, col, row, ch, style=None):
        if 0 <= row < len(self._cells) and 0 <= col < len(self._cells[row]):
            self._cells[row][col] = (ch, style)

    def show_cursor(self, col, row):
        self._cursor = (col, row)

    def hide_cursor(self):
        self._cursor = None

    def flush(self) -> None:
        """Diff against last frame and write only the rows that changed.

        Falls back to a full clear on first paint or when the size changes.
        """
        rows = [self._compose_row(cells) for cells in self._cells]
        if self._last_rows is None or len(self._last_rows) != len(rows):
            print(self.term.home + self.term.normal + self.term.clear, end='')
            self._last_rows = [None] * len(rows)

        for y, text in enumerate(rows):
            if text != self._last_rows[y]:
                print(self.term.move_yx(y, 0) + text, end='')
                self._last_rows[y] = text

        if self._cursor is None:
            print(self.term.hide_cursor, end='', flush=True)
        else:
            col, row = self._cursor
            print(self.term.move_yx(row, col) + self.term.normal_cursor, end='', flush=True)

    def poll_event(self, timeout=None):
        return self.keyboard.get_key_event(timeout)

    def _compose_row(self, cells: list[Cell]) -> str:
        out = []
        current: object = object()
        for ch, style in cells:
            if style != current:
                out.append(self.term.normal + self._formatter(style))
                current = style
            out.append(ch)
        out.append(self.term.normal)
        return ''.join(out)

    def _formatter(self, style: Optional[Style]) -> str:
        if style is None:
            return ''
        # blessed resolves compound names such as 'bright_blue_on_white'
        return str(getattr(self.term, f"{style.fg}_on_{style.bg}"))

    def get_key(self, timeout=None):
        """Get a single keypress token from curtsies.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The curtsies key name, or None when nothing is available.
        """
        if self._curtsies_input is None:
            return None
        if timeout is not None:
            r, _, _ = select.select([sys.stdin], [], [], float(timeout))
            if not r:
                return None
        return str(next(self._curtsies_input))
