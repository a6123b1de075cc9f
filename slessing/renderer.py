"""Paints editor state onto a screen."""

from typing import Optional, TYPE_CHECKING

from .constants import EditorConstants
from .modes import Mode
from .styles import STYLE_SLOTS, Role, Style, StyleSet
from .terminal import Screen

if TYPE_CHECKING:
    from .editor import Editor


def gutter_width(line_count: int) -> int:
    """Columns reserved for line numbers, including one separating space."""
    return max(EditorConstants.MIN_GUTTER_WIDTH, len(str(line_count)) + 1)


PREVIEW_TEXT = "This is a piece of text! Some characters for testing: ! # % & / [] {}"


class Renderer:
    """Draws one full frame per call to ``render``."""

    def __init__(self, screen: Screen):
        self.screen = screen

    def render(self, editor: 'Editor'):
        screen = self.screen
        cols, rows = screen.size()
        screen.clear()

        if cols < EditorConstants.MIN_TERMINAL_WIDTH or rows < EditorConstants.MIN_TERMINAL_HEIGHT:
            self._draw_too_small(cols, rows)
        elif editor.help_visible:
            self._draw_help(editor, cols, rows)
        elif editor.modes.mode == Mode.SETTINGS:
            self._draw_settings(editor, cols, rows)
        else:
            self._draw_document(editor, cols, rows)
            self._draw_status(editor, cols, rows)

        screen.flush()

    def layout(self, editor: 'Editor', cols: int, rows: int) -> tuple[int, int, int]:
        """Return (gutter, text rows, text cols) and size the viewport to match."""
        gutter = gutter_width(editor.document.line_count())
        text_rows = max(1, rows - EditorConstants.STATUS_ROWS)
        text_cols = max(1, cols - gutter)
        editor.viewport.resize(text_rows, text_cols)
        return gutter, text_rows, text_cols

    # --- document view ---

    def _draw_document(self, editor: 'Editor', cols: int, rows: int):
        screen = self.screen
        styles = editor.styles
        viewport = editor.viewport
        gutter, text_rows, _ = self.layout(editor, cols, rows)

        visible = viewport.visible_lines()
        for row in range(text_rows):
            self._fill(row, 0, cols, styles[Role.MAIN])
            if row < len(visible):
                index, text = visible[row]
                label = str(index + 1)
            else:
                text = ""
                label = EditorConstants.EMPTY_LINE_MARKER
            screen.put_text(0, row, label.rjust(gutter - 1) + " ", styles[Role.LINECOUNT])
            screen.put_text(gutter, row, text, styles[Role.MAIN])

        if editor.modes.active_prompt is None:
            cursor_row, cursor_col = viewport.screen_cursor
            screen.show_cursor(gutter + cursor_col, cursor_row)
        else:
            screen.hide_cursor()

    def _draw_status(self, editor: 'Editor', cols: int, rows: int):
        screen = self.screen
        styles = editor.styles
        row = rows - 1
        prompt = editor.modes.active_prompt

        if prompt is not None:
            text = f" {prompt.label} {prompt.text}"
            self._fill(row, 0, cols, styles[Role.MESSAGE])
            end = screen.put_text(0, row, text, styles[Role.MESSAGE])
            screen.show_cursor(min(end, cols - 1), row)
            return
        if editor.error_message:
            self._fill(row, 0, cols, styles[Role.ERROR])
            screen.put_text(0, row, f" {editor.error_message}", styles[Role.ERROR])
            return
        if editor.status_message:
            self._fill(row, 0, cols, styles[Role.MESSAGE])
            screen.put_text(0, row, f" {editor.status_message}", styles[Role.MESSAGE])
            return

        style = styles[Role.STATUS]
        self._fill(row, 0, cols, style)
        name = editor.filename or "[No Name]"
        flag = " [+]" if editor.modified else ""
        left = f" {editor.modes.mode.value} {name}{flag} {EditorConstants.PROMPT_GLYPH} {editor.modes.input_text}"
        cursor = editor.viewport.cursor
        right = f"row {cursor.line + 1} col {cursor.column + 1} "
        screen.put_text(0, row, left[:cols], style)
        if len(left) + len(right) < cols:
            screen.put_text(cols - len(right), row, right, style)
        if editor.modes.mode == Mode.COMMAND and editor.modes.input_text:
            screen.show_cursor(min(len(left), cols - 1), row)

    # --- full-screen views ---

    def _draw_help(self, editor: 'Editor', cols: int, rows: int):
        screen = self.screen
        style = editor.styles[Role.MAIN]
        for row in range(rows):
            self._fill(row, 0, cols, style)

        title = EditorConstants.HELP_TITLE
        screen.put_text(max(0, (cols - len(title)) // 2), 1, title, style)

        lines = ["COMMANDS", ""]
        for command in editor.commands.commands():
            aliases = ", ".join(command.aliases)
            names = f"{command.name} ({aliases})" if aliases else command.name
            lines.append(f"  {names:<18} {command.description}")
        lines += [
            "",
            "KEYS",
            "  Arrows             Move cursor",
            "  Ctrl/Alt-←/→       Word left/right",
            "  Home/End           Beginning/end of line",
            "  PgUp/PgDn          Scroll one screen",
            "  Esc                Leave write mode",
        ]

        top = max(3, (rows - len(lines)) // 2)
        left = max(0, (cols - max(len(line) for line in lines)) // 2)
        for i, line in enumerate(lines):
            if top + i >= rows - 1:
                break
            screen.put_text(left, top + i, line, style)

        self._fill(rows - 1, 0, cols, editor.styles[Role.STATUS])
        screen.put_text(0, rows - 1, EditorConstants.HELP_FOOTER, editor.styles[Role.STATUS])
        screen.hide_cursor()

    def _draw_settings(self, editor: 'Editor', cols: int, rows: int):
        screen = self.screen
        styles = editor.styles
        session = editor.modes.settings
        selected = session.selected if session is not None else 0
        background = Style(fg="white", bg="black")
        for row in range(rows):
            self._fill(row, 0, cols, background)

        label_width = max(len(slot.label) for slot in STYLE_SLOTS)
        for row, slot in enumerate(STYLE_SLOTS):
            if row >= rows - 1:
                break
            marker = ">" if row == selected else " "
            screen.put_text(0, row, marker, background)
            screen.put_text(1, row, f"{slot.label:<{label_width}}  {styles.get_color(slot)}", styles[Role.MESSAGE])

        self._draw_preview(styles, len(STYLE_SLOTS) + 1, cols, rows)

        self._fill(rows - 1, 0, cols, styles[Role.STATUS])
        screen.put_text(0, rows - 1, " settings  ↑/↓ select  ←/→ change  Enter save  Esc cancel",
                        styles[Role.STATUS])
        screen.hide_cursor()

    def _draw_preview(self, styles: StyleSet, top: int, cols: int, rows: int):
        """Sample of every role in its current colors."""
        screen = self.screen
        width = min(cols, len(PREVIEW_TEXT) + 3)
        for i in range(5):
            row = top + i
            if row >= rows - 1:
                return
            screen.put_text(0, row, f"{i + 1:>2} ", styles[Role.LINECOUNT])
            self._fill(row, 3, width, styles[Role.MAIN])
            if i == 0:
                screen.put_text(3, row, PREVIEW_TEXT[:width - 3], styles[Role.MAIN])
            elif i == 2:
                screen.put_text(3, row, " Open file: file.txt", styles[Role.MESSAGE])
            elif i == 3:
                screen.put_text(3, row, " not a line number: x", styles[Role.ERROR])
        row = top + 5
        if row < rows - 1:
            self._fill(row, 0, width, styles[Role.STATUS])
            screen.put_text(0, row, " write notes.txt ❯", styles[Role.STATUS])

    def _draw_too_small(self, cols: int, rows: int):
        message = EditorConstants.TERMINAL_TOO_SMALL_MESSAGE.format(
            EditorConstants.MIN_TERMINAL_WIDTH, EditorConstants.MIN_TERMINAL_HEIGHT)
        self.screen.put_text(0, 0, message[:cols])
        self.screen.hide_cursor()

    def _fill(self, row: int, start: int, end: int, style: Optional[Style]):
        for col in range(start, end):
            self.screen.set_cell(col, row, " ", style)
