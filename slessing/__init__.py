"""slessing - a modal terminal text editor with plugin commands."""

from .commands import Command, CommandRegistry
from .document import Document
from .errors import (
    CommandNotFound,
    DocumentIOError,
    EditorError,
    OutOfBoundsError,
    PluginCleanupError,
    PluginInitError,
)
from .plugins import Plugin, PluginHost
from .viewport import CursorPosition, ViewportController

__all__ = [
    'Command',
    'CommandRegistry',
    'CommandNotFound',
    'CursorPosition',
    'Document',
    'DocumentIOError',
    'EditorError',
    'OutOfBoundsError',
    'Plugin',
    'PluginCleanupError',
    'PluginHost',
    'PluginInitError',
    'ViewportController',
]
