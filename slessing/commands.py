"""Named commands and the registry that dispatches them."""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, TYPE_CHECKING

from .constants import EditorConstants
from .errors import CommandNotFound
from .modes import Mode

if TYPE_CHECKING:
    from .editor import Editor

logger = logging.getLogger(__name__)

CommandHandler = Callable[['Editor', List[str]], None]


@dataclass(frozen=True)
class Command:
    """A command-line operation.

    The handler receives the editor session and the remaining
    whitespace-separated tokens of the command line. It reports failure by
    raising; the mode controller turns that into an on-screen message.
    """
    name: str
    handler: CommandHandler
    aliases: Sequence[str] = ()
    description: str = ""

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name, *self.aliases)


class CommandRegistry:
    """Maps command names and aliases to commands.

    Registering a name or alias that is already taken replaces the old
    binding; the last registration wins and no error is raised. Built-ins
    and plugins share one namespace.
    """

    def __init__(self):
        self._commands: Dict[str, Command] = {}

    def register(self, command: Command):
        """Register a command under its name and every alias."""
        for name in command.names:
            previous = self._commands.get(name)
            if previous is not None and previous is not command:
                logger.debug(f"Command name '{name}' rebound from '{previous.name}' to '{command.name}'")
            self._commands[name] = command

    def get(self, name: str) -> Optional[Command]:
        return self._commands.get(name)

    def lookup(self, name: str) -> Command:
        command = self._commands.get(name)
        if command is None:
            raise CommandNotFound(name)
        return command

    def execute(self, editor: 'Editor', name: str, args: Sequence[str] = ()):
        """Run the command bound to ``name``.

        Raises:
            CommandNotFound: nothing is registered under ``name``.
            Anything the handler raises is propagated unchanged.
        """
        command = self.lookup(name)
        logger.debug(f"Executing '{command.name}' args={list(args)}")
        return command.handler(editor, list(args))

    def list_names(self) -> List[str]:
        """Canonical names of every registered command, aliases collapsed."""
        return list(dict.fromkeys(command.name for command in self._commands.values()))

    def commands(self) -> List[Command]:
        """Distinct commands currently reachable by some name."""
        seen: Dict[str, Command] = {}
        for command in self._commands.values():
            seen.setdefault(command.name, command)
        return list(seen.values())

    def __contains__(self, name: str) -> bool:
        return name in self._commands


# --- built-in commands ---

def cmd_quit(editor: 'Editor', args: List[str]):
    if editor.modified:
        editor.modes.prompt(EditorConstants.QUIT_CONFIRM_PROMPT,
                            lambda answer: _quit_confirmed(editor, answer),
                            single_key=True)
    else:
        editor.running = False


def _quit_confirmed(editor: 'Editor', answer: str):
    answer = answer.lower()
    if answer == 'y':
        if editor.filename:
            editor.save_file(editor.filename)
            editor.running = False
        else:
            editor.modes.prompt(EditorConstants.SAVE_PROMPT,
                                lambda name: _save_as(editor, name, quit_after=True))
    elif answer == 'n':
        editor.running = False
    else:
        editor.show_message("Quit cancelled")


def cmd_write(editor: 'Editor', args: List[str]):
    editor.modes.enter(Mode.INSERT)


def cmd_save(editor: 'Editor', args: List[str]):
    filename = " ".join(args) or editor.filename
    if filename:
        _save_as(editor, filename)
    else:
        editor.modes.prompt(EditorConstants.SAVE_PROMPT, lambda name: _save_as(editor, name))


def _save_as(editor: 'Editor', filename: str, quit_after: bool = False):
    if not filename:
        editor.show_message("Save cancelled")
        return
    editor.save_file(filename)
    editor.show_message(f"Saved to {filename}")
    if quit_after:
        editor.running = False


def cmd_open(editor: 'Editor', args: List[str]):
    filename = " ".join(args)
    if filename:
        _open(editor, filename)
    else:
        editor.modes.prompt(EditorConstants.OPEN_PROMPT, lambda name: _open(editor, name))


def _open(editor: 'Editor', filename: str):
    if not filename:
        return
    editor.open_file(filename)
    editor.show_message(f"Opened {filename}")


def cmd_help(editor: 'Editor', args: List[str]):
    if args:
        command = editor.commands.lookup(args[0].lower())
        aliases = ", ".join(command.aliases)
        suffix = f" ({aliases})" if aliases else ""
        editor.show_message(f"{command.name}{suffix}: {command.description}")
    else:
        editor.show_help()


def cmd_settings(editor: 'Editor', args: List[str]):
    editor.modes.enter(Mode.SETTINGS)


BUILTIN_COMMANDS = (
    Command("quit", cmd_quit, aliases=("q",), description="Exit the editor"),
    Command("write", cmd_write, aliases=("w",), description="Enter write mode"),
    Command("save", cmd_save, aliases=("s",), description="Save current file"),
    Command("open", cmd_open, aliases=("o",), description="Open a file"),
    Command("help", cmd_help, aliases=("h", "?"), description="Show available commands"),
    Command("settings", cmd_settings, aliases=("set",), description="Edit display colors"),
)


def register_builtin_commands(registry: CommandRegistry):
    """Register the commands every editor session starts with."""
    for command in BUILTIN_COMMANDS:
        registry.register(command)
