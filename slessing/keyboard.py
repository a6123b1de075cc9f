"""Keyboard input handling using curtsies-style tokens."""

from typing import Optional
from dataclasses import dataclass
from enum import Enum


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    ALT = "alt"
    CTRL = "ctrl"
    SPECIAL = "special"


SPECIAL_KEYS = frozenset({
    'left', 'right', 'up', 'down', 'home', 'end', 'enter', 'backspace', 'delete',
    'page_up', 'page_down', 'insert', 'escape', 'tab',
    'f1', 'f2', 'f3', 'f4', 'f5', 'f6', 'f7', 'f8', 'f9', 'f10', 'f11', 'f12',
})


@dataclass
class KeyEvent:
    """A parsed keyboard event: modifiers, key name and character."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'backspace')
    raw: str  # The raw token from curtsies
    is_alt: bool = False
    is_ctrl: bool = False
    is_shift: bool = False

    @property
    def is_printable(self) -> bool:
        """True for a single printable character with no modifiers."""
        return (self.key_type == KeyType.REGULAR and len(self.value) == 1
                and self.value.isprintable())

    def is_special(self, name: str) -> bool:
        return self.key_type == KeyType.SPECIAL and self.value == name


class KeyboardHandler:
    """Turns curtsies key names into KeyEvents."""

    def __init__(self, terminal_interface):
        """Initialize with a terminal interface."""
        self.terminal = terminal_interface

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        """Get next key event, or None if nothing arrived before the timeout."""
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        return self.parse_key(key)

    def parse_key(self, key) -> KeyEvent:
        """Parse a curtsies token (or a bare character) into a KeyEvent."""
        key_str = str(key)

        # Curtsies-style names like '<LEFT>', '<Ctrl-x>', '<Esc+f>', '<Ctrl-LEFT>'
        if key_str.startswith('<') and key_str.endswith('>') and len(key_str) > 2:
            return self._parse_token(key_str)

        # Single-byte ASCII control chars (Ctrl-<letter>)
        if len(key_str) == 1:
            o = ord(key_str)
            if o in (8, 127):
                return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str)
            if o == 9:
                return KeyEvent(key_type=KeyType.SPECIAL, value='tab', raw=key_str)
            if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z (exclude ESC=27)
                ch = chr(ord('a') + o - 1)
                # Ctrl-J / Ctrl-M are what terminals send for Enter
                if ch in ('j', 'm'):
                    return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str)
                return KeyEvent(key_type=KeyType.CTRL, value=ch, raw=key_str, is_ctrl=True)

        if key_str == '\x1b':
            return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw=key_str)

        return KeyEvent(key_type=KeyType.REGULAR, value=key_str, raw=key_str)

    def _parse_token(self, key_str: str) -> KeyEvent:
        name = key_str[1:-1]
        # Support both '-' and '+' as modifier separators (e.g., '<Esc+u>')
        lower = name.lower().replace('+', '-')
        # '<->' or '<Ctrl-->' style names end with a literal dash
        if lower.endswith('--'):
            parts = lower[:-2].split('-') + ['-']
        elif lower == '-':
            parts = ['-']
        else:
            parts = lower.split('-')
        base = parts[-1]
        mods = set(parts[:-1])
        if 'meta' in mods or 'esc' in mods:
            mods.add('alt')

        if base in ('pageup', 'page_up'):
            base = 'page_up'
        elif base in ('pagedown', 'page_down'):
            base = 'page_down'
        elif base in ('esc', 'escape'):
            base = 'escape'
        elif base in ('space', 'spacebar', 'spc'):
            base = ' '

        is_shift = 'shift' in mods
        if 'ctrl' in mods:
            if base in ('j', 'm'):
                return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str)
            if base == 'h':
                return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str)
            return KeyEvent(key_type=KeyType.CTRL, value=base, raw=key_str,
                            is_ctrl=True, is_shift=is_shift)
        if 'alt' in mods and (base in SPECIAL_KEYS or len(base) == 1):
            return KeyEvent(key_type=KeyType.ALT, value=base, raw=key_str,
                            is_alt=True, is_shift=is_shift)
        if base == ' ':
            return KeyEvent(key_type=KeyType.REGULAR, value=' ', raw=' ')
        if base in SPECIAL_KEYS:
            return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str, is_shift=is_shift)
        if len(base) == 1:
            return KeyEvent(key_type=KeyType.REGULAR, value=name[-1], raw=key_str)
        # Unknown token: keep it special so it never gets typed into the document
        return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str, is_shift=is_shift)
