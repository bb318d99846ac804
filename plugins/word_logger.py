"""Example SwipeTyper plugin: completed-word logger.

Appends every completed word to a JSON-lines file and keeps running
counts of letters per selection trigger. Load it with
`PluginManager.load_directory("plugins/")`.

Demonstrates:
- Subclassing SwipePlugin
- Handling letter and word events
- Using on_startup/on_shutdown lifecycle
- Registering label-specific handlers via decorator
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path

from swipe_typer.plugins import SwipePlugin, PluginEvent

logger = logging.getLogger("swipe_typer.plugins.word_logger")


class WordLoggerPlugin(SwipePlugin):
    """Logs completed words to a file with per-trigger letter counts."""

    name = "word_logger"
    version = "1.0.0"
    description = "Logs completed words to a JSON-lines file"

    def __init__(self):
        super().__init__()
        self._trigger_counts: Counter = Counter()
        self._words: list[str] = []
        self._log_path: Path = Path("swipe_words.jsonl")
        self._log_file = None

        @self.handler("*")
        def count_trigger(event: PluginEvent):
            self._trigger_counts[event.data.get("trigger", "unknown")] += 1

    def on_startup(self, context: dict):
        """Open the log file. `context["log_path"]` overrides the default location."""
        self._log_path = Path(context.get("log_path", self._log_path))
        try:
            self._log_file = open(self._log_path, "a")
            logger.info("WordLogger: writing to %s", self._log_path)
        except OSError as e:
            logger.warning("WordLogger: could not open log file: %s", e)

    def on_shutdown(self):
        if self._log_file:
            self._log_file.close()
            self._log_file = None
        if self._words:
            logger.info("WordLogger summary: %d words, triggers %s", len(self._words), dict(self._trigger_counts))

    def on_word(self, event: PluginEvent):
        if not event.name:
            return
        self._words.append(event.name)
        if self._log_file:
            record = {
                "word": event.name,
                "path": event.data.get("path", []),
                "duration": event.data.get("duration", 0.0),
                "timestamp": event.timestamp,
            }
            self._log_file.write(json.dumps(record) + "\n")
            self._log_file.flush()

    @property
    def words(self) -> list[str]:
        return list(self._words)

    @property
    def trigger_counts(self) -> dict[str, int]:
        return dict(self._trigger_counts)
