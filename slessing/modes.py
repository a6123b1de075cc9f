"""Top-level input state machine.

The editor is always in exactly one mode:

- COMMAND: typed characters build a command line, Enter runs it through
  the command registry, navigation keys move the cursor.
- INSERT: keys edit the document; Escape returns to COMMAND.
- SETTINGS: pick a color slot and cycle its color with live preview;
  Enter keeps the change and persists it, Escape restores the old colors.

A prompt (save as, open, quit confirmation) can overlay any mode and
takes every key until it is submitted or cancelled.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, TYPE_CHECKING

from .errors import CommandNotFound, EditorError, OutOfBoundsError
from .keyboard import KeyEvent, KeyType
from .keymap import create_insert_keymap, create_navigation_keymap
from .styles import STYLE_SLOTS, StyleSet, StyleSlot, cycle_color

if TYPE_CHECKING:
    from .editor import Editor

logger = logging.getLogger(__name__)


class Mode(Enum):
    COMMAND = "command"
    INSERT = "insert"
    SETTINGS = "settings"


@dataclass
class Prompt:
    label: str
    on_submit: Callable[[str], None]
    single_key: bool = False
    text: str = ""


class SettingsSession:
    """Settings-mode state: the selected slot and the styles to restore on cancel."""

    def __init__(self, original: StyleSet):
        self.original = original
        self.selected = 0

    @property
    def slot(self) -> StyleSlot:
        return STYLE_SLOTS[self.selected]

    def select(self, step: int):
        self.selected = min(max(0, self.selected + step), len(STYLE_SLOTS) - 1)


class ModeController:
    """Routes key events according to the active mode."""

    def __init__(self, editor: 'Editor'):
        self.editor = editor
        self.mode = Mode.COMMAND
        self.input_buffer: List[str] = []
        self.settings: Optional[SettingsSession] = None
        self.active_prompt: Optional[Prompt] = None
        self._navigation = create_navigation_keymap()
        self._insert = create_insert_keymap()

    @property
    def input_text(self) -> str:
        return "".join(self.input_buffer)

    def enter(self, mode: Mode):
        """Switch modes, discarding the state of the mode being left."""
        if mode == self.mode:
            return
        if self.mode == Mode.COMMAND:
            self.input_buffer.clear()
        elif self.mode == Mode.SETTINGS:
            self.settings = None
        logger.debug(f"Mode {self.mode.value} -> {mode.value}")
        self.mode = mode
        if mode == Mode.SETTINGS:
            self.settings = SettingsSession(self.editor.styles.copy())

    def prompt(self, label: str, on_submit: Callable[[str], None], single_key: bool = False):
        """Ask for a line of input (or a single key) on the status line."""
        self.active_prompt = Prompt(label, on_submit, single_key)

    def handle_key(self, key_event: KeyEvent):
        if self.active_prompt is not None:
            self._handle_prompt(key_event)
        elif self.mode == Mode.COMMAND:
            self._handle_command_mode(key_event)
        elif self.mode == Mode.INSERT:
            self._handle_insert_mode(key_event)
        elif self.mode == Mode.SETTINGS:
            self._handle_settings_mode(key_event)

    # --- command mode ---

    def _handle_command_mode(self, key_event: KeyEvent):
        if key_event.is_special('enter'):
            self._run_command_line()
        elif key_event.is_special('backspace'):
            if self.input_buffer:
                self.input_buffer.pop()
        elif key_event.is_special('escape'):
            return
        elif key_event.is_printable:
            self.input_buffer.append(key_event.value)
        elif self._navigation.handles(key_event):
            self._guarded("navigation", lambda: self._navigation.execute(self.editor.viewport, key_event))

    def _run_command_line(self):
        tokens = self.input_text.split()
        self.input_buffer.clear()
        if not tokens:
            return
        name, args = tokens[0].lower(), tokens[1:]
        self._guarded(name, lambda: self.editor.commands.execute(self.editor, name, args))

    # --- insert mode ---

    def _handle_insert_mode(self, key_event: KeyEvent):
        if key_event.is_special('escape'):
            self.enter(Mode.COMMAND)
            return
        if self._guarded("edit", lambda: self._insert.execute(self.editor.viewport, key_event)):
            self.editor.modified = True

    # --- settings mode ---

    def _handle_settings_mode(self, key_event: KeyEvent):
        session = self.settings
        assert session is not None
        editor = self.editor
        if key_event.is_special('up'):
            session.select(-1)
        elif key_event.is_special('down'):
            session.select(1)
        elif key_event.is_special('left') or key_event.is_special('right'):
            step = -1 if key_event.value == 'left' else 1
            color = cycle_color(editor.styles.get_color(session.slot), step)
            editor.styles = editor.styles.with_color(session.slot, color)
        elif key_event.is_special('enter'):
            if editor.persistence.save(editor.styles):
                editor.show_message("Settings saved")
            else:
                editor.show_error("Could not save settings")
            self.enter(Mode.COMMAND)
        elif key_event.is_special('escape'):
            editor.styles = session.original
            self.enter(Mode.COMMAND)

    # --- prompts ---

    def _handle_prompt(self, key_event: KeyEvent):
        prompt = self.active_prompt
        assert prompt is not None
        if key_event.is_special('escape') or (key_event.key_type == KeyType.CTRL and key_event.value == 'g'):
            self.active_prompt = None
        elif key_event.is_special('enter') and not prompt.single_key:
            self._submit(prompt, prompt.text)
        elif key_event.is_special('backspace'):
            prompt.text = prompt.text[:-1]
        elif key_event.is_printable:
            if prompt.single_key:
                self._submit(prompt, key_event.value)
            else:
                prompt.text += key_event.value

    def _submit(self, prompt: Prompt, text: str):
        # Cleared first: the callback may open a follow-up prompt
        self.active_prompt = None
        self._guarded(prompt.label, lambda: prompt.on_submit(text))

    def _guarded(self, label: str, action: Callable[[], object]):
        """Run an action, turning failures into an on-screen error message."""
        try:
            return action()
        except CommandNotFound as e:
            self.editor.show_error(str(e))
        except OutOfBoundsError as e:
            logger.exception(f"Cursor invariant violated during {label}")
            self.editor.show_error(f"internal error: {e}")
        except EditorError as e:
            logger.warning(f"{label} failed: {e}")
            self.editor.show_error(str(e))
        except Exception as e:
            # Command handlers include third-party plugin code
            logger.exception(f"Unexpected error in {label}")
            self.editor.show_error(f"{label}: {e}")
        return None
