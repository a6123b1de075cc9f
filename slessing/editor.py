"""Editor session: owns the document, modes, commands and plugins."""

import errno
import logging
import os
import select
import signal
import sys
import tempfile
import termios
from pathlib import Path
from typing import Optional

import platformdirs

from .commands import CommandRegistry, register_builtin_commands
from .constants import EditorConstants
from .document import Document
from .errors import DocumentIOError
from .keyboard import KeyEvent
from .modes import ModeController
from .plugins import PluginHost, load_entry_point_plugins, load_plugins_from_directory
from .renderer import Renderer
from .settings_persistence import StylePersistence
from .terminal import Screen, TerminalInterface
from .viewport import ViewportController

logger = logging.getLogger(__name__)


def default_plugin_dir() -> Path:
    return Path(platformdirs.user_data_dir(EditorConstants.APP_NAME)) / EditorConstants.PLUGIN_DIRNAME


class Editor:
    """Main editor application controller."""

    def __init__(self, screen: Optional[Screen] = None, persistence: Optional[StylePersistence] = None):
        """Initialize the editor components.

        Args:
            screen: Drawing surface and key source. Defaults to the real terminal.
            persistence: Style configuration store. Defaults to the user config dir.
        """
        self.screen = screen if screen is not None else TerminalInterface()
        self.renderer = Renderer(self.screen)
        self.persistence = persistence if persistence is not None else StylePersistence()
        self.styles = self.persistence.load()

        self.document = Document()
        cols, rows = self.screen.size()
        self.viewport = ViewportController(self.document, rows=rows - EditorConstants.STATUS_ROWS, cols=cols)
        self.commands = CommandRegistry()
        register_builtin_commands(self.commands)
        self.plugin_host = PluginHost(self.commands, self)
        self.modes = ModeController(self)

        self.running = False
        # File handling
        self.filename: Optional[str] = None
        self.modified = False
        self.status_message: Optional[str] = None
        self.error_message: Optional[str] = None
        self.help_visible = False
        self._resize_pipe_r: Optional[int] = None
        self._resize_pipe_w: Optional[int] = None

    # --- messages and help ---

    def show_message(self, message: str):
        self.status_message = message
        self.error_message = None

    def show_error(self, message: str):
        self.error_message = message
        self.status_message = None

    def clear_messages(self):
        self.status_message = None
        self.error_message = None

    def show_help(self):
        """Show the help screen."""
        self.help_visible = True

    def hide_help(self):
        """Hide the help screen and return to editor."""
        self.help_visible = False

    # --- plugins ---

    def load_plugins(self, plugin_dir=None, entry_points: bool = True) -> int:
        """Load plugins from a directory and, optionally, installed entry points.

        Returns:
            Number of plugins that became active.
        """
        plugins = load_plugins_from_directory(plugin_dir or default_plugin_dir())
        if entry_points:
            plugins += load_entry_point_plugins()
        loaded = self.plugin_host.load(plugins)
        logger.info(f"Loaded {loaded} of {len(plugins)} plugins")
        return loaded

    # --- files ---

    def load_file(self, filename: str):
        """Load a file named on the command line.

        A missing file starts an empty document bound to that name.

        Raises:
            DocumentIOError: the file exists but cannot be read.
        """
        try:
            self.open_file(filename)
        except DocumentIOError as e:
            if not isinstance(e.__cause__, FileNotFoundError):
                raise
            logger.info(f"{filename} does not exist yet; starting empty")
            self.viewport.reset([""])
            self.filename = filename
            self.modified = False

    def open_file(self, filename: str):
        """Replace the document with the contents of a file.

        Raises:
            DocumentIOError: the file cannot be read; the document is unchanged.
        """
        try:
            with open(filename, 'r', encoding='utf-8') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentIOError(filename, _describe_error(e, "Cannot open")) from e
        self.viewport.reset(content.split('\n') if content else [""])
        self.filename = filename
        self.modified = False
        logger.debug(f"Opened {filename} ({self.document.line_count()} lines)")

    def save_file(self, filename: str):
        """Save the current document to a file atomically.

        Raises:
            DocumentIOError: the file could not be written; any temp file is removed.
        """
        content = self.document.text()
        dir_name = os.path.dirname(filename) or '.'
        suffix = os.path.splitext(filename)[1]
        temp_filename = None
        try:
            # Temp file in the target directory so the rename stays on one filesystem
            with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8',
                                             dir=dir_name, suffix=suffix,
                                             delete=False) as temp_file:
                temp_filename = temp_file.name
                temp_file.write(content)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.replace(temp_filename, filename)
        except OSError as e:
            if temp_filename is not None and os.path.exists(temp_filename):
                try:
                    os.remove(temp_filename)
                except OSError:
                    logger.warning(f"Could not remove temp file {temp_filename}")
            raise DocumentIOError(filename, _describe_error(e, "Cannot save")) from e

        self.filename = filename
        self.modified = False
        logger.debug(f"Saved {filename}")

    # --- event loop ---

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        # Write to pipe to wake up select()
        os.write(self._resize_pipe_w, EditorConstants.RESIZE_PIPE_MARKER)

    def _handle_key_event(self, key_event: KeyEvent):
        """Handle a keyboard event.

        Args:
            key_event: KeyEvent object with parsed key information
        """
        # If help is visible, any key dismisses it
        if self.help_visible:
            self.hide_help()
            return
        self.clear_messages()
        self.modes.handle_key(key_event)

    def draw(self):
        self.renderer.render(self)

    def run(self):
        """Run the main editor loop until a quit command stops it."""
        terminal = self.screen
        terminal.setup()
        self.running = True
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()
        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)

        try:
            with terminal.term.cbreak():
                old_settings = _disable_flow_control()
                try:
                    self._loop()
                finally:
                    if old_settings:
                        try:
                            termios.tcsetattr(sys.stdin, termios.TCSANOW, old_settings)
                        except (termios.error, OSError):
                            pass
        except KeyboardInterrupt:
            pass
        finally:
            signal.signal(signal.SIGWINCH, original_winch_handler)
            os.close(self._resize_pipe_r)
            os.close(self._resize_pipe_w)
            self._resize_pipe_r = self._resize_pipe_w = None
            terminal.cleanup()
            self.plugin_host.shutdown()

    def _loop(self):
        need_draw = True
        while self.running:
            if need_draw:
                self.draw()
                need_draw = False

            # Wait for input on stdin or resize pipe
            ready, _, _ = select.select([0, self._resize_pipe_r], [], [])
            if self._resize_pipe_r in ready:
                os.read(self._resize_pipe_r, 1024)
                if isinstance(self.screen, TerminalInterface):
                    self.screen.invalidate_frame()
                need_draw = True
            elif 0 in ready:
                key_event = self.screen.poll_event(timeout=0)
                if key_event:
                    self._handle_key_event(key_event)
                    need_draw = True


def _describe_error(error: Exception, fallback: str) -> str:
    if isinstance(error, FileNotFoundError):
        return "No such file"
    if isinstance(error, PermissionError):
        return "Permission denied"
    if isinstance(error, IsADirectoryError):
        return "Is a directory"
    if isinstance(error, UnicodeDecodeError):
        return "Not a UTF-8 text file"
    if isinstance(error, OSError) and error.errno == errno.ENOSPC:
        return "No space left on device"
    return fallback


def _disable_flow_control():
    """Let Ctrl-S and Ctrl-Q reach the editor; return the settings to restore."""
    try:
        old_settings = termios.tcgetattr(sys.stdin)
        new_settings = list(old_settings)
        new_settings[0] &= ~(termios.IXON | termios.IXOFF)
        termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
        return old_settings
    except (termios.error, AttributeError, OSError):
        return None
