"""Per-tile dwell timers.

Timers come from an asyncio-style loop (`call_later` returning a handle
with `cancel()`). By default that is the running asyncio event loop, so
the host calls into the engine from loop callbacks and timers fire between
those calls. Tests and replays pass a `SimulatedLoop` instead.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Optional

logger = logging.getLogger("swipe_typer.dwell")


class DwellScheduler:
    """Keyed table of pending dwell timers, at most one per tile.

    `arm` and `cancel` are the only mutators. A firing timer removes its own
    entry before calling back, so the callback sees the tile as unarmed and
    the orchestrator decides whether the fire is still valid.
    """

    def __init__(self, duration: float = 0.42, loop: Optional[Any] = None):
        self.duration = duration
        self._loop = loop
        self._timers: dict[int, Any] = {}

    @property
    def loop(self) -> Optional[Any]:
        """The timer source, or None if there is no usable loop."""
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def now(self) -> float:
        loop = self.loop
        return loop.time() if loop is not None else time.monotonic()

    def arm(self, index: int, on_fire: Callable[[int], None]) -> bool:
        """Start (or restart) the timer for a tile. Returns False if no loop."""
        self.cancel(index)
        loop = self.loop
        if loop is None:
            logger.warning("No running event loop; dwell selection disabled")
            return False
        self._timers[index] = loop.call_later(self.duration, self._fire, index, on_fire)
        return True

    def _fire(self, index: int, on_fire: Callable[[int], None]):
        self._timers.pop(index, None)
        on_fire(index)

    def cancel(self, index: int):
        handle = self._timers.pop(index, None)
        if handle is not None:
            handle.cancel()

    def cancel_all(self):
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()

    def is_armed(self, index: int) -> bool:
        return index in self._timers

    @property
    def pending(self) -> int:
        return len(self._timers)
