from typing import Iterable

from .errors import OutOfBoundsError


class Document:
    """Line-oriented text storage.

    A document always holds at least one line; an empty document is a
    single empty line. Cursor handling lives in ``ViewportController``,
    which is the only caller of the structural edit primitives.
    """

    def __init__(self, lines: Iterable[str] = ("",)):
        self._lines: list[str] = list(lines) or [""]

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def line_count(self) -> int:
        return len(self._lines)

    def line(self, index: int) -> str:
        self._check_line(index)
        return self._lines[index]

    def line_length(self, index: int) -> int:
        return len(self.line(index))

    def char_at(self, line_index: int, column: int) -> str:
        line = self.line(line_index)
        if not 0 <= column < len(line):
            raise OutOfBoundsError(f"column {column} outside line {line_index} (length {len(line)})")
        return line[column]

    def replace_all(self, lines: Iterable[str]) -> None:
        self._lines = list(lines) or [""]

    def text(self) -> str:
        return "\n".join(self._lines)

    # --- structural edits ---

    def insert_char(self, line_index: int, column: int, ch: str) -> None:
        line = self.line(line_index)
        self._check_column(line_index, column)
        self._lines[line_index] = line[:column] + ch + line[column:]

    def delete_char(self, line_index: int, column: int) -> None:
        """Remove the character at ``column``."""
        line = self.line(line_index)
        if not 0 <= column < len(line):
            raise OutOfBoundsError(f"no character at ({line_index}, {column})")
        self._lines[line_index] = line[:column] + line[column + 1:]

    def split_line(self, line_index: int, column: int) -> None:
        """Split a line in two; the text from ``column`` on becomes the next line."""
        line = self.line(line_index)
        self._check_column(line_index, column)
        self._lines[line_index] = line[:column]
        self._lines.insert(line_index + 1, line[column:])

    def join_with_previous(self, line_index: int) -> int:
        """Append line ``line_index`` to the one before it.

        Returns:
            Length of the previous line before the join, i.e. the join point.
        """
        self._check_line(line_index)
        if line_index == 0:
            raise OutOfBoundsError("first line has no previous line")
        prev = self._lines[line_index - 1]
        self._lines[line_index - 1] = prev + self._lines[line_index]
        del self._lines[line_index]
        return len(prev)

    def _check_line(self, index: int) -> None:
        if not 0 <= index < len(self._lines):
            raise OutOfBoundsError(f"line {index} outside document of {len(self._lines)} lines")

    def _check_column(self, line_index: int, column: int) -> None:
        if not 0 <= column <= len(self._lines[line_index]):
            raise OutOfBoundsError(
                f"column {column} outside line {line_index} (length {len(self._lines[line_index])})")

    def __len__(self) -> int:
        return len(self._lines)

    def __repr__(self) -> str:
        return f"Document({self._lines!r})"
