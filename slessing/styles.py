"""Display roles, colors and the style configuration value.

The editor session owns a ``StyleSet`` and hands it to the renderer; there
is no process-wide color table.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterator


# Fixed palette the settings screen cycles through, as blessed names them.
PALETTE: tuple[str, ...] = (
    "black", "red", "green", "yellow", "blue", "magenta", "cyan", "white",
    "bright_black", "bright_red", "bright_green", "bright_yellow",
    "bright_blue", "bright_magenta", "bright_cyan", "bright_white",
)


class Role(Enum):
    """Display roles that carry their own colors."""
    MAIN = "main"
    STATUS = "status"
    MESSAGE = "message"
    LINECOUNT = "linecount"
    ERROR = "error"

    @property
    def title(self) -> str:
        return _ROLE_TITLES[self]


_ROLE_TITLES = {
    Role.MAIN: "Main",
    Role.STATUS: "Status",
    Role.MESSAGE: "Message",
    Role.LINECOUNT: "Linecount",
    Role.ERROR: "Error",
}


@dataclass(frozen=True)
class Style:
    fg: str
    bg: str


@dataclass(frozen=True)
class StyleSlot:
    """One editable color: a role plus which half of its pair."""
    role: Role
    attribute: str  # 'fg' or 'bg'

    @property
    def label(self) -> str:
        half = "Foreground" if self.attribute == "fg" else "Background"
        return f"{self.role.title} {half}"


# Settings screen order: foreground then background for each role.
STYLE_SLOTS: tuple[StyleSlot, ...] = tuple(
    StyleSlot(role, attribute) for role in Role for attribute in ("fg", "bg")
)


def _default_styles() -> Dict[Role, Style]:
    return {
        Role.MAIN: Style(fg="white", bg="black"),
        Role.STATUS: Style(fg="black", bg="white"),
        Role.MESSAGE: Style(fg="black", bg="white"),
        Role.LINECOUNT: Style(fg="bright_blue", bg="white"),
        Role.ERROR: Style(fg="red", bg="black"),
    }


@dataclass
class StyleSet:
    """Colors for every display role."""
    styles: Dict[Role, Style] = field(default_factory=_default_styles)

    def __getitem__(self, role: Role) -> Style:
        return self.styles[role]

    def __iter__(self) -> Iterator[Role]:
        return iter(Role)

    def get_color(self, slot: StyleSlot) -> str:
        return getattr(self.styles[slot.role], slot.attribute)

    def with_color(self, slot: StyleSlot, color: str) -> "StyleSet":
        """Return a copy with one slot changed."""
        if color not in PALETTE:
            raise ValueError(f"unknown color: {color}")
        styles = dict(self.styles)
        styles[slot.role] = replace(styles[slot.role], **{slot.attribute: color})
        return StyleSet(styles)

    def copy(self) -> "StyleSet":
        return StyleSet(dict(self.styles))


def cycle_color(color: str, step: int) -> str:
    """Move ``step`` places through the palette, wrapping at either end."""
    try:
        index = PALETTE.index(color)
    except ValueError:
        index = 0
    return PALETTE[(index + step) % len(PALETTE)]
