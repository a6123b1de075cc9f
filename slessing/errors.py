"""Exception types raised by the editor core.

Plugin and file errors are recovered at the mode controller and shown as
a transient message. ``OutOfBoundsError`` means the cursor bookkeeping is
wrong, which is a bug rather than bad user input.
"""


class EditorError(Exception):
    """Base class for all editor errors."""


class CommandNotFound(EditorError, KeyError):
    """Raised when no command is registered under a name or alias."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unknown command: {self.name}"


class PluginInitError(EditorError):
    """Raised by a plugin whose initialize() cannot complete."""


class PluginCleanupError(EditorError):
    """Raised by a plugin whose cleanup() cannot complete."""


class DocumentIOError(EditorError):
    """Raised when a document cannot be read from or written to disk."""

    def __init__(self, filename: str, message: str):
        super().__init__(f"{message}: {filename}")
        self.filename = filename


class OutOfBoundsError(EditorError, IndexError):
    """Raised when a line or column index falls outside the document."""
