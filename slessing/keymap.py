"""Key bindings that drive the viewport controller."""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from .keyboard import KeyEvent, KeyType
from .viewport import ViewportController


class KeyAction(ABC):
    """Base class for actions bound to a key."""

    @abstractmethod
    def execute(self, viewport: ViewportController, key_event: KeyEvent) -> bool:
        """Execute the action.

        Returns:
            True if the document was modified
        """
        pass


class MovementAction(KeyAction):
    """Base class for cursor movement; never modifies the document."""

    def execute(self, viewport, key_event):
        self._move(viewport)
        return False

    @abstractmethod
    def _move(self, viewport: ViewportController):
        pass


class LeftCharAction(MovementAction):
    def _move(self, viewport):
        viewport.move_left()


class RightCharAction(MovementAction):
    def _move(self, viewport):
        viewport.move_right()


class UpLineAction(MovementAction):
    def _move(self, viewport):
        viewport.move_up()


class DownLineAction(MovementAction):
    def _move(self, viewport):
        viewport.move_down()


class LeftWordAction(MovementAction):
    def _move(self, viewport):
        viewport.word_left()


class RightWordAction(MovementAction):
    def _move(self, viewport):
        viewport.word_right()


class BeginningOfLineAction(MovementAction):
    def _move(self, viewport):
        viewport.move_line_start()


class EndOfLineAction(MovementAction):
    def _move(self, viewport):
        viewport.move_line_end()


class PageDownAction(MovementAction):
    def _move(self, viewport):
        viewport.page_down()


class PageUpAction(MovementAction):
    def _move(self, viewport):
        viewport.page_up()


class BackspaceAction(KeyAction):
    def execute(self, viewport, key_event):
        return viewport.backspace()


class SplitLineAction(KeyAction):
    def execute(self, viewport, key_event):
        viewport.split_line()
        return True


class InsertCharAction(KeyAction):
    def execute(self, viewport, key_event):
        if not key_event.is_printable:
            return False
        viewport.insert_character(key_event.value)
        return True


class KeyMap:
    """Maps (key type, key value) pairs to actions."""

    def __init__(self, insert_text: bool = False):
        self._actions: Dict[Tuple[KeyType, str], KeyAction] = {}
        self._insert_text = InsertCharAction() if insert_text else None

    def register(self, key: Tuple[KeyType, str], action: KeyAction):
        """Register an action for a key combination."""
        self._actions[key] = action

    def get_action(self, key_event: KeyEvent) -> Optional[KeyAction]:
        action = self._actions.get((key_event.key_type, key_event.value))
        if action is None and self._insert_text is not None and key_event.is_printable:
            return self._insert_text
        return action

    def handles(self, key_event: KeyEvent) -> bool:
        return self.get_action(key_event) is not None

    def execute(self, viewport: ViewportController, key_event: KeyEvent) -> bool:
        """Run the action bound to the event.

        Returns:
            True if the document was modified
        """
        action = self.get_action(key_event)
        if action is None:
            return False
        return action.execute(viewport, key_event)


def _register_navigation(keymap: KeyMap):
    keymap.register((KeyType.SPECIAL, 'left'), LeftCharAction())
    keymap.register((KeyType.SPECIAL, 'right'), RightCharAction())
    keymap.register((KeyType.SPECIAL, 'up'), UpLineAction())
    keymap.register((KeyType.SPECIAL, 'down'), DownLineAction())

    # Ctrl/Alt + arrow for word movement
    keymap.register((KeyType.CTRL, 'left'), LeftWordAction())
    keymap.register((KeyType.CTRL, 'right'), RightWordAction())
    keymap.register((KeyType.ALT, 'left'), LeftWordAction())
    keymap.register((KeyType.ALT, 'right'), RightWordAction())

    keymap.register((KeyType.SPECIAL, 'home'), BeginningOfLineAction())
    keymap.register((KeyType.SPECIAL, 'end'), EndOfLineAction())
    keymap.register((KeyType.SPECIAL, 'page_down'), PageDownAction())
    keymap.register((KeyType.SPECIAL, 'page_up'), PageUpAction())


def create_navigation_keymap() -> KeyMap:
    """Keys that move the cursor in command mode."""
    keymap = KeyMap()
    _register_navigation(keymap)
    return keymap


def create_insert_keymap() -> KeyMap:
    """Keys for write mode: navigation, editing and text insertion."""
    keymap = KeyMap(insert_text=True)
    _register_navigation(keymap)
    keymap.register((KeyType.CTRL, 'a'), BeginningOfLineAction())
    keymap.register((KeyType.CTRL, 'e'), EndOfLineAction())
    keymap.register((KeyType.SPECIAL, 'backspace'), BackspaceAction())
    keymap.register((KeyType.SPECIAL, 'enter'), SplitLineAction())
    return keymap
