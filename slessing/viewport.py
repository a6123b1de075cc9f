from dataclasses import dataclass, replace
from typing import Iterable, Optional

from .document import Document
from .errors import OutOfBoundsError


@dataclass
class CursorPosition:
    line: int = 0
    column: int = 0


class ViewportController:
    """Maps document coordinates onto a window of screen cells.

    Owns the cursor and the scroll offsets. Every operation leaves the
    cursor inside the document (``column`` may equal the line length) and
    the on-screen cursor, ``cursor - offset``, inside ``[0, rows) x [0, cols)``.
    When a move would push the cursor off the window the offsets change
    instead.
    """

    def __init__(self, document: Optional[Document] = None, rows: int = 24, cols: int = 80):
        self.document = document if document is not None else Document()
        self._cursor = CursorPosition()
        self.row_offset = 0
        self.col_offset = 0
        self.rows = max(1, rows)
        self.cols = max(1, cols)

    @property
    def cursor(self) -> CursorPosition:
        return replace(self._cursor)

    @property
    def screen_cursor(self) -> tuple[int, int]:
        """Cursor position relative to the window as (row, col)."""
        return (self._cursor.line - self.row_offset, self._cursor.column - self.col_offset)

    def set_cursor(self, line: int, column: int) -> None:
        """Place the cursor at a document position, scrolling to show it."""
        if not 0 <= line < self.document.line_count():
            raise OutOfBoundsError(f"line {line} outside document")
        if not 0 <= column <= self.document.line_length(line):
            raise OutOfBoundsError(f"column {column} outside line {line}")
        self._cursor = CursorPosition(line, column)
        self._scroll_to_cursor()

    def resize(self, rows: int, cols: int) -> None:
        self.rows = max(1, rows)
        self.cols = max(1, cols)
        self._scroll_to_cursor()

    def reset(self, lines: Iterable[str]) -> None:
        """Replace the whole document and return to the origin."""
        self.document.replace_all(lines)
        self._cursor = CursorPosition()
        self.row_offset = 0
        self.col_offset = 0

    def visible_lines(self) -> list[tuple[int, str]]:
        """Return (line index, visible text) for each document line in the window."""
        end = min(self.row_offset + self.rows, self.document.line_count())
        return [
            (i, self.document.line(i)[self.col_offset:self.col_offset + self.cols])
            for i in range(self.row_offset, end)
        ]

    # --- navigation ---

    def move_up(self):
        if self._cursor.line > 0:
            self._cursor.line -= 1
            self._clamp_column()
        self._scroll_to_cursor()

    def move_down(self):
        if self._cursor.line + 1 < self.document.line_count():
            self._cursor.line += 1
            self._clamp_column()
        self._scroll_to_cursor()

    def move_left(self):
        # No wrap onto the previous line
        if self._cursor.column > 0:
            self._cursor.column -= 1
        self._scroll_to_cursor()

    def move_right(self):
        if self._cursor.column < self._current_length():
            self._cursor.column += 1
        self._scroll_to_cursor()

    def word_left(self):
        """Step left until a space or the start of the line."""
        line = self.document.line(self._cursor.line)
        col = self._cursor.column
        if col > 0:
            while True:
                col -= 1
                if col == 0 or line[col] == " ":
                    break
        self._cursor.column = col
        self._scroll_to_cursor()

    def word_right(self):
        """Step right until a space or the end of the line."""
        line = self.document.line(self._cursor.line)
        col = self._cursor.column
        if col < len(line):
            while True:
                col += 1
                if col >= len(line) or line[col] == " ":
                    break
        self._cursor.column = col
        self._scroll_to_cursor()

    def move_line_start(self):
        self._cursor.column = 0
        self._scroll_to_cursor()

    def move_line_end(self):
        self._cursor.column = self._current_length()
        self._scroll_to_cursor()

    def page_down(self):
        last = self.document.line_count() - 1
        self.row_offset = min(self.row_offset + self.rows, max(0, last - self.rows + 1))
        self._cursor.line = min(self._cursor.line + self.rows, last)
        self._clamp_column()
        self._scroll_to_cursor()

    def page_up(self):
        self.row_offset = max(0, self.row_offset - self.rows)
        self._cursor.line = max(0, self._cursor.line - self.rows)
        self._clamp_column()
        self._scroll_to_cursor()

    def goto_line(self, line: int):
        """Jump to a line index, clamped to the document."""
        self._cursor.line = min(max(0, line), self.document.line_count() - 1)
        self._clamp_column()
        self._scroll_to_cursor()

    # --- editing ---

    def insert_character(self, ch: str):
        self._check_cursor()
        self.document.insert_char(self._cursor.line, self._cursor.column, ch)
        self._cursor.column += 1
        self._scroll_to_cursor()

    def split_line(self):
        self._check_cursor()
        self.document.split_line(self._cursor.line, self._cursor.column)
        self._cursor.line += 1
        self._cursor.column = 0
        self._scroll_to_cursor()

    def join_with_previous(self) -> bool:
        """Append the cursor line to the previous one.

        Returns:
            False on the first line, where there is nothing to join.
        """
        self._check_cursor()
        if self._cursor.line == 0:
            return False
        join_point = self.document.join_with_previous(self._cursor.line)
        self._cursor.line -= 1
        self._cursor.column = join_point
        self._scroll_to_cursor()
        return True

    def delete_character_before(self) -> bool:
        self._check_cursor()
        if self._cursor.column == 0:
            return False
        self.document.delete_char(self._cursor.line, self._cursor.column - 1)
        self._cursor.column -= 1
        self._scroll_to_cursor()
        return True

    def backspace(self) -> bool:
        """Delete before the cursor, joining lines at column 0."""
        if self._cursor.column == 0:
            return self.join_with_previous()
        return self.delete_character_before()

    # --- internals ---

    def _current_length(self) -> int:
        return self.document.line_length(self._cursor.line)

    def _clamp_column(self):
        self._cursor.column = min(self._cursor.column, self._current_length())

    def _check_cursor(self):
        line, col = self._cursor.line, self._cursor.column
        if not 0 <= line < self.document.line_count() or not 0 <= col <= self.document.line_length(line):
            raise OutOfBoundsError(f"cursor ({line}, {col}) outside document")

    def _scroll_to_cursor(self):
        line, col = self._cursor.line, self._cursor.column
        if line < self.row_offset:
            self.row_offset = line
        elif line >= self.row_offset + self.rows:
            self.row_offset = line - self.rows + 1
        if col < self.col_offset:
            self.col_offset = col
        elif col >= self.col_offset + self.cols:
            self.col_offset = col - self.cols + 1
