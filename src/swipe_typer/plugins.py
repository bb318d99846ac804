"""Plugins that react to letters and words typed on a SwipeEngine.

A plugin file is any `.py` module in a plugin directory that defines a
`SwipePlugin` subclass or a module-level `plugin` instance:

    class Announcer(SwipePlugin):
        name = "announcer"

        def on_word(self, event):
            print(event.name)

Letter events can also be routed per label:

    plugin = SwipePlugin(name="vowels")

    @plugin.handler("A")
    def on_a(event):
        ...
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from swipe_typer.engine import LetterEvent, SwipeEngine, SwipeEvent

logger = logging.getLogger("swipe_typer.plugins")

WILDCARD = "*"


@dataclass
class PluginEvent:
    """A letter or word event in plugin-friendly form."""
    type: str  # "letter" or "word"
    name: str  # tile label or composed word
    data: dict = field(default_factory=dict)
    timestamp: float = 0.0

    @classmethod
    def from_letter(cls, event: LetterEvent) -> PluginEvent:
        return cls(
            type="letter",
            name=event.label,
            data={"index": event.index, "trigger": event.trigger.value, "position": event.position},
            timestamp=event.timestamp,
        )

    @classmethod
    def from_word(cls, event: SwipeEvent) -> PluginEvent:
        return cls(
            type="word",
            name=event.word,
            data={"path": list(event.path), "duration": event.duration},
            timestamp=event.timestamp,
        )


def _guarded(owner: str, what: str, fn: Callable, *args):
    try:
        fn(*args)
    except Exception as e:
        logger.error("Plugin %s %s failed: %s", owner, what, e)


class SwipePlugin:
    """Base plugin. Override the hooks you need."""

    name: str = "unnamed"
    version: str = "1.0.0"
    description: str = ""

    def __init__(self, name: Optional[str] = None):
        if name:
            self.name = name
        self._label_handlers: defaultdict[str, list[Callable]] = defaultdict(list)

    def handler(self, label: str = WILDCARD):
        """Route letter events for `label` ("*" for all) to the decorated function."""
        def register(fn: Callable) -> Callable:
            self._label_handlers[label].append(fn)
            return fn
        return register

    def on_letter(self, event: PluginEvent):
        for fn in self._label_handlers.get(event.name, []) + self._label_handlers.get(WILDCARD, []):
            _guarded(self.name, f"handler for {event.name!r}", fn, event)

    def on_word(self, event: PluginEvent):
        pass

    def on_startup(self, context: dict):
        pass

    def on_shutdown(self):
        pass


def _is_plugin_class(obj) -> bool:
    return inspect.isclass(obj) and issubclass(obj, SwipePlugin) and obj is not SwipePlugin


class PluginManager:
    """Holds plugins by name and fans engine events out to them.

    Each plugin call is isolated: an exception is logged and the remaining
    plugins still run.
    """

    def __init__(self):
        self._plugins: dict[str, SwipePlugin] = {}

    def register(self, plugin: SwipePlugin):
        if plugin.name in self._plugins:
            logger.warning("Replacing plugin %r", plugin.name)
        self._plugins[plugin.name] = plugin
        logger.info("Registered plugin %s v%s", plugin.name, plugin.version)

    def unregister(self, name: str):
        plugin = self._plugins.pop(name, None)
        if plugin is not None:
            _guarded(name, "on_shutdown", plugin.on_shutdown)

    def load_directory(self, path: str | Path) -> int:
        """Import every public `.py` file in `path`. Returns how many plugins registered."""
        directory = Path(path)
        if not directory.is_dir():
            logger.debug("No plugin directory at %s", directory)
            return 0

        count = 0
        for source in sorted(directory.glob("*.py")):
            if source.name.startswith("_"):
                continue
            try:
                plugin = self._import_plugin(source)
            except Exception as e:
                logger.error("Could not load plugin file %s: %s", source.name, e)
                continue
            if plugin is None:
                logger.warning("%s defines no SwipePlugin", source.name)
                continue
            self.register(plugin)
            count += 1
        return count

    def _import_plugin(self, source: Path) -> Optional[SwipePlugin]:
        module_name = f"swipe_plugin_{source.stem}"
        spec = importlib.util.spec_from_file_location(module_name, source)
        if spec is None or spec.loader is None:
            return None
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)

        instance = getattr(module, "plugin", None)
        if isinstance(instance, SwipePlugin):
            return instance
        classes = inspect.getmembers(module, _is_plugin_class)
        return classes[0][1]() if classes else None

    def attach(self, engine: SwipeEngine):
        """Subscribe to an engine's letter and word events."""
        engine.on_letter(lambda event: self.dispatch("letter", PluginEvent.from_letter(event)))
        engine.on_word(lambda event: self.dispatch("word", PluginEvent.from_word(event)))

    def startup(self, context: dict):
        for plugin in self._plugins.values():
            _guarded(plugin.name, "on_startup", plugin.on_startup, context)

    def shutdown(self):
        for plugin in self._plugins.values():
            _guarded(plugin.name, "on_shutdown", plugin.on_shutdown)

    def dispatch(self, event_type: str, event: PluginEvent):
        """Call `on_<event_type>` on every plugin that has it."""
        hook = f"on_{event_type}"
        for plugin in self._plugins.values():
            method = getattr(plugin, hook, None)
            if method is not None:
                _guarded(plugin.name, hook, method, event)

    @property
    def plugins(self) -> dict[str, SwipePlugin]:
        return dict(self._plugins)

    @property
    def plugin_names(self) -> list[str]:
        return list(self._plugins)
