"""Plugin contract, lifecycle host and loaders.

A plugin contributes named commands. The host initializes each plugin,
merges its commands into the shared command registry and cleans it up at
shutdown. One failing plugin never stops the others from loading or
shutting down.

Plugins reach the host either as ready-made instances, from ``*.py`` files
in a plugin directory, or from installed packages advertising an entry
point. Files and entry points must provide a ``create_plugin()`` factory.
"""

from __future__ import annotations

import importlib.metadata
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence

from .commands import Command, CommandRegistry
from .constants import EditorConstants
from .errors import PluginCleanupError, PluginInitError

logger = logging.getLogger(__name__)


class Plugin(ABC):
    """Capability set every plugin implements."""

    @abstractmethod
    def identify(self) -> str:
        """Return the plugin's unique name."""

    @abstractmethod
    def commands(self) -> Sequence[Command]:
        """Return the commands this plugin contributes, in order."""

    @abstractmethod
    def initialize(self, host_context: Any) -> None:
        """Prepare the plugin; raise PluginInitError on failure.

        ``host_context`` is the editor session.
        """

    @abstractmethod
    def cleanup(self) -> None:
        """Release resources; raise PluginCleanupError on failure."""


class PluginState(Enum):
    DISCOVERED = "discovered"
    INITIALIZED = "initialized"
    ACTIVE = "active"
    CLEANED_UP = "cleaned_up"


@dataclass
class PluginRecord:
    plugin: Plugin
    name: str
    state: PluginState = PluginState.DISCOVERED


class PluginHost:
    """Owns initialized plugins and merges their commands into the registry."""

    def __init__(self, registry: CommandRegistry, host_context: Any):
        self.registry = registry
        self.host_context = host_context
        self._plugins: Dict[str, PluginRecord] = {}
        self._loaded: List[PluginRecord] = []  # Every successful load, for cleanup

    @property
    def plugins(self) -> Dict[str, Plugin]:
        return {name: record.plugin for name, record in self._plugins.items()}

    def state(self, name: str) -> PluginState:
        return self._plugins[name].state

    def register_plugin(self, plugin: Plugin) -> bool:
        """Initialize a plugin and merge its commands.

        Returns:
            True if the plugin is now active; False if it was dropped.
        """
        try:
            name = plugin.identify()
        except Exception as e:
            logger.warning(f"Skipping plugin {plugin!r}: identify() failed: {e}")
            return False

        record = PluginRecord(plugin, name)
        try:
            plugin.initialize(self.host_context)
        except PluginInitError as e:
            logger.warning(f"Plugin '{name}' failed to initialize: {e}")
            return False
        except Exception as e:
            logger.warning(f"Plugin '{name}' failed to initialize: {PluginInitError(e)}")
            return False
        record.state = PluginState.INITIALIZED

        try:
            commands = list(plugin.commands())
        except Exception as e:
            logger.warning(f"Plugin '{name}' could not list its commands: {e}")
            self._cleanup(record)
            return False

        if name in self._plugins:
            logger.info(f"Plugin '{name}' replaces an earlier plugin of the same name")
        self._plugins[name] = record
        self._loaded.append(record)

        for command in commands:
            self.registry.register(command)
            logger.debug(f"Registered command: {command.name} (plugin: {name})")
        record.state = PluginState.ACTIVE
        logger.info(f"Successfully loaded plugin: {name}")
        return True

    def load(self, plugins: Iterable[Plugin]) -> int:
        """Register each plugin in turn.

        Returns:
            Number of plugins that loaded.
        """
        return sum(1 for plugin in plugins if self.register_plugin(plugin))

    def shutdown(self) -> List[PluginCleanupError]:
        """Clean up every loaded plugin, most recent first.

        Returns:
            The cleanup failures, already logged.
        """
        failures = []
        for record in reversed(self._loaded):
            error = self._cleanup(record)
            if error is not None:
                failures.append(error)
        self._loaded.clear()
        return failures

    def _cleanup(self, record: PluginRecord):
        try:
            record.plugin.cleanup()
            error = None
        except PluginCleanupError as e:
            error = e
        except Exception as e:
            error = PluginCleanupError(f"{record.name}: {e}")
        record.state = PluginState.CLEANED_UP
        if error is not None:
            logger.warning(f"Plugin '{record.name}' failed to clean up: {error}")
        return error


def _instantiate(factory: Any, origin: str):
    if not callable(factory):
        raise TypeError(f"{origin} must define {EditorConstants.PLUGIN_FACTORY}()")
    plugin = factory()
    if not isinstance(plugin, Plugin):
        raise TypeError(f"{origin}: {EditorConstants.PLUGIN_FACTORY}() returned {type(plugin).__name__}, not a Plugin")
    return plugin


def load_plugin_file(path: Path) -> Plugin:
    """Import a plugin module from a file and build its plugin."""
    path = Path(path).expanduser().resolve()
    spec = spec_from_file_location(f"slessing_plugin_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot load plugin from {path}")
    module = module_from_spec(spec)
    spec.loader.exec_module(module)
    return _instantiate(getattr(module, EditorConstants.PLUGIN_FACTORY, None), str(path))


def load_plugins_from_directory(directory) -> List[Plugin]:
    """Build a plugin from every ``*.py`` file in a directory.

    Files that fail to import or do not provide a plugin are logged and
    skipped. A missing directory yields no plugins.
    """
    directory = Path(directory).expanduser()
    if not directory.is_dir():
        logger.debug(f"No plugin directory at {directory}")
        return []

    paths = sorted(p for p in directory.glob("*.py") if not p.name.startswith("_"))
    logger.info(f"Found {len(paths)} plugins in {directory}")
    plugins = []
    for path in paths:
        try:
            plugins.append(load_plugin_file(path))
        except Exception as e:
            logger.warning(f"Failed to load plugin {path}: {e}")
    return plugins


def load_entry_point_plugins(group: str = EditorConstants.PLUGIN_ENTRY_POINT_GROUP) -> List[Plugin]:
    """Build plugins advertised by installed packages under an entry point group."""
    plugins = []
    for entry_point in importlib.metadata.entry_points(group=group):
        try:
            plugins.append(_instantiate(entry_point.load(), f"entry point {entry_point.name}"))
        except Exception as e:
            logger.warning(f"Failed to load plugin entry point {entry_point.name}: {e}")
    return plugins
