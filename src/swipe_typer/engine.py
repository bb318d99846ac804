"""Swipe gesture state machine: pointer samples in, letter and word events out.

The engine combines two selection heuristics over the same pointer trail:

- Dwell: the pointer stays inside an unlocked tile for `dwell_duration`.
- Sharp turn: the trail bends within the configured angle band and the
  turn lands inside a tile.

A selected tile is locked until the pointer leaves its bounds, which stops
a tile from firing twice per visit but still allows repeated letters on a
later visit in the same gesture.

Usage:
    engine = SwipeEngine(["H", "E", "L", "L", "O"])
    engine.on_word(lambda event: print(event.word))
    # After each layout pass:
    engine.register_tile_bounds(0, Rect(0, 0, 100, 100))
    # From the host's pointer handlers (inside the asyncio loop):
    engine.press((50, 50))
    engine.move((160, 50))
    engine.release((490, 50))
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from swipe_typer.config import EngineConfig
from swipe_typer.dwell import DwellScheduler
from swipe_typer.geometry import Point, Rect
from swipe_typer.locks import LockState
from swipe_typer.metrics import MetricsCollector
from swipe_typer.profiler import EngineProfiler
from swipe_typer.tiles import TileBoundsRegistry
from swipe_typer.trail import PointerTrail
from swipe_typer.turns import TurnDetector

logger = logging.getLogger("swipe_typer.engine")


class GesturePhase(Enum):
    IDLE = "idle"
    PRESSED = "pressed"
    COMPLETED = "completed"  # transient, reset to IDLE before any caller sees it


class SelectionTrigger(Enum):
    """What caused a tile to be selected."""
    PRESS = "press"
    DWELL = "dwell"
    TURN = "turn"
    ENTER = "enter"  # smart detection disabled
    RELEASE = "release"
    TAP = "tap"


@dataclass
class LetterEvent:
    """Fired once per entry appended to the selection path."""
    index: int
    label: str
    trigger: SelectionTrigger
    position: int  # position of this entry in the path
    timestamp: float


@dataclass
class SwipeEvent:
    """Fired once per gesture when it completes."""
    word: str
    path: tuple[int, ...]
    duration: float
    timestamp: float


def _profiled(operation: str):
    """Time the wrapped engine method on `self.profiler`, if one is set."""
    def decorator(method):
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            if self.profiler is None:
                return method(self, *args, **kwargs)
            with self.profiler.measure(operation):
                return method(self, *args, **kwargs)
        return wrapper
    return decorator


class SwipeEngine:
    """Interprets pointer gestures over labeled tiles.

    All public operations are safe no-ops when they do not apply (engine
    disposed, no gesture active, tile has no bounds yet) and report that
    through their return value instead of raising.
    """

    def __init__(
        self,
        tiles: Optional[Iterable[str]] = None,
        config: Optional[EngineConfig] = None,
        *,
        loop: Optional[Any] = None,
        metrics: Optional[MetricsCollector] = None,
        profiler: Optional[EngineProfiler] = None,
        on_letter_selected: Optional[Callable[[str], None]] = None,
        on_swipe_completed: Optional[Callable[[str], None]] = None,
    ):
        self.config = (config or EngineConfig()).validate()
        labels = list(tiles) if tiles is not None else list(self.config.tiles)
        self.metrics = metrics
        self.profiler = profiler

        self._registry = TileBoundsRegistry(labels)
        self._trail = PointerTrail(
            max_points=self.config.max_trail_points,
            min_distance=self.config.min_sample_distance,
        )
        self._turns = TurnDetector(
            min_segment_length=self.config.min_turn_segment_length,
            angle_band=self.config.turn_angle_band,
            deflate_factor=self.config.tile_deflate_factor,
        )
        self._dwell = DwellScheduler(duration=self.config.dwell_duration, loop=loop)
        self._locks = LockState()

        self._path: list[int] = []
        self._phase = GesturePhase.IDLE
        self._hovered: Optional[int] = None
        self._cleanup_handle: Optional[Any] = None
        self._pressed_at = 0.0
        self._disposed = False

        self._letter_callbacks: list[Callable[[LetterEvent], None]] = []
        self._word_callbacks: list[Callable[[SwipeEvent], None]] = []
        self._trail_callbacks: list[Callable[[tuple[Point, ...]], None]] = []

        if on_letter_selected is not None:
            self.on_letter(lambda event: on_letter_selected(event.label))
        if on_swipe_completed is not None:
            self.on_word(lambda event: on_swipe_completed(event.word))

    # --- Listeners ---

    def on_letter(self, callback: Callable[[LetterEvent], None]):
        """Register a callback for letter selections."""
        self._letter_callbacks.append(callback)

    def on_word(self, callback: Callable[[SwipeEvent], None]):
        """Register a callback for completed gestures."""
        self._word_callbacks.append(callback)

    def on_trail(self, callback: Callable[[tuple[Point, ...]], None]):
        """Register a callback receiving the trail after every pointer sample."""
        self._trail_callbacks.append(callback)

    # --- Layout ---

    def register_tile_bounds(self, index: int, rect: Rect | tuple) -> bool:
        """Record a tile's bounds after a layout pass."""
        if self._disposed:
            return False
        return self._registry.register(index, Rect.of(rect))

    def set_tiles(self, labels: Iterable[str]):
        """Replace the tile set. Any active gesture is dropped without an event."""
        if self._disposed:
            return
        self._reset()
        self._phase = GesturePhase.IDLE
        self._registry.replace(labels)
        logger.debug("Tile set replaced (%d tiles)", len(self._registry))

    # --- Pointer lifecycle ---

    @_profiled("press")
    def press(self, point: Point | tuple) -> Optional[int]:
        """Start a gesture. Returns the tile selected under the press, if any."""
        if self._disposed:
            return None
        if self._cleanup_handle is not None:
            self._finish_tap()
        if self._phase is GesturePhase.PRESSED:
            # Only one gesture at a time; drop pending timers, keep the path.
            self._dwell.cancel_all()
            self._hovered = None
            if self.metrics:
                self.metrics.record_rejected_press()
            logger.debug("Press rejected: gesture already active")
            return None

        point = Point.of(point)
        self._reset()
        self._phase = GesturePhase.PRESSED
        self._pressed_at = self._dwell.now()
        self._add_sample(point)

        index = self._registry.hit_test(point, exclude=self._locks.locked)
        if index is None:
            return None
        self._select(index, SelectionTrigger.PRESS)
        return index

    @_profiled("move")
    def move(self, point: Point | tuple) -> Optional[int]:
        """Feed a drag sample. Returns the tile selected by this sample, if any."""
        if self._disposed or self._phase is not GesturePhase.PRESSED or self.config.tap_mode:
            return None

        point = Point.of(point)
        self._add_sample(point)

        margin = self.config.unlock_margin
        for locked in self._locks.locked:
            rect = self._registry.get(locked)
            if rect is None or not rect.inflate(margin).contains(point):
                self._locks.unlock(locked)
                logger.debug("Unlocked tile %d", locked)

        index = self._registry.hit_test(
            point,
            deflate_factor=self.config.tile_deflate_factor,
            exclude=self._locks.locked,
        )
        if index is None:
            self._clear_hover()
            return None

        self._hover(index)

        if not self.config.smart_detection:
            trigger = SelectionTrigger.ENTER
        elif self._turns.check(self._trail.snapshot(), self._registry.get(index)):
            trigger = SelectionTrigger.TURN
        else:
            return None

        self._clear_hover()
        self._select(index, trigger)
        return index

    @_profiled("release")
    def release(self, point: Point | tuple) -> str:
        """Finish the gesture and return the composed word ("" if nothing was active)."""
        if self._disposed or self._phase is not GesturePhase.PRESSED:
            return ""

        point = Point.of(point)
        self._add_sample(point)

        index = self._registry.hit_test(
            point,
            deflate_factor=self.config.tile_deflate_factor,
            exclude=self._locks.locked,
        )
        if index is not None:
            self._select(index, SelectionTrigger.RELEASE)

        return self._complete()

    # --- Discrete taps ---

    @_profiled("tap")
    def tap_tile(self, index: int) -> bool:
        """Select a tile directly, bypassing drag tracking.

        Returns False for unknown tiles and tiles without bounds yet.
        """
        if self._disposed or self._registry.get(index) is None:
            return False
        if self._cleanup_handle is not None:
            self._finish_tap()

        if self._phase is not GesturePhase.PRESSED:
            self._reset()
            self._phase = GesturePhase.PRESSED
            self._pressed_at = self._dwell.now()

        if self._locks.is_locked(index):
            self._locks.unlock(index)
        self._select(index, SelectionTrigger.TAP)

        if self.config.tap_commit == "auto":
            loop = self._dwell.loop
            if loop is None:
                self._finish_tap()
            else:
                self._cleanup_handle = loop.call_later(self.config.cleanup_delay, self._finish_tap)
        return True

    @_profiled("tap")
    def tap_up(self) -> str:
        """Commit a tap gesture without a final hit test."""
        if self._disposed or self._phase is not GesturePhase.PRESSED:
            return ""
        return self._complete()

    # --- Per-tile hover hooks ---

    def tile_enter(self, index: int):
        """Pointer entered a tile, as reported by the host's hover tracking."""
        if (
            self._disposed
            or self._phase is not GesturePhase.PRESSED
            or self.config.tap_mode
            or self._registry.get(index) is None
            or self._locks.is_locked(index)
        ):
            return
        self._hover(index)
        if not self.config.smart_detection:
            self._clear_hover()
            self._select(index, SelectionTrigger.ENTER)

    def tile_exit(self, index: int):
        """Pointer left a tile: stop its dwell timer and release its lock."""
        if self._disposed:
            return
        if self._hovered == index:
            self._clear_hover()
        if self._locks.active_tile == index:
            self._locks.unlock(index)

    # --- Queries ---

    def current_word(self) -> str:
        """Labels along the selection path so far."""
        return "".join(self._registry.label(i) for i in self._path)

    @property
    def selection_path(self) -> tuple[int, ...]:
        return tuple(self._path)

    @property
    def trail(self) -> tuple[Point, ...]:
        return self._trail.snapshot()

    @property
    def selected_indexes(self) -> frozenset[int]:
        """Tiles currently locked, for highlighting."""
        return self._locks.locked

    @property
    def active_tile(self) -> Optional[int]:
        return self._locks.active_tile

    @property
    def hovered_tile(self) -> Optional[int]:
        return self._hovered

    @property
    def phase(self) -> GesturePhase:
        return self._phase

    @property
    def is_pressed(self) -> bool:
        return self._phase is GesturePhase.PRESSED

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def tiles(self) -> list[str]:
        return self._registry.labels

    @property
    def registry(self) -> TileBoundsRegistry:
        return self._registry

    @property
    def pending_timers(self) -> int:
        return self._dwell.pending + (1 if self._cleanup_handle is not None else 0)

    # --- Teardown ---

    def dispose(self):
        """Cancel all timers and drop all state. Safe to call repeatedly."""
        if self._disposed:
            return
        self._reset()
        self._phase = GesturePhase.IDLE
        self._registry.clear()
        self._letter_callbacks.clear()
        self._word_callbacks.clear()
        self._trail_callbacks.clear()
        self._disposed = True
        logger.info("Swipe engine disposed")

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.dispose()

    # --- Internals ---

    def _hover(self, index: int):
        if index == self._hovered:
            return
        self._clear_hover()
        self._hovered = index
        self._dwell.arm(index, self._on_dwell_fire)

    def _clear_hover(self):
        if self._hovered is not None:
            self._dwell.cancel(self._hovered)
            self._hovered = None

    def _on_dwell_fire(self, index: int):
        if (
            self._disposed
            or self._phase is not GesturePhase.PRESSED
            or self._hovered != index
            or self._locks.is_locked(index)
        ):
            logger.debug("Discarding stale dwell fire for tile %d", index)
            if self.metrics:
                self.metrics.record_stale_fire()
            return
        self._hovered = None
        self._select(index, SelectionTrigger.DWELL)

    def _finish_tap(self):
        handle, self._cleanup_handle = self._cleanup_handle, None
        if handle is not None:
            handle.cancel()
        if self._disposed or self._phase is not GesturePhase.PRESSED:
            return
        self._complete()

    def _select(self, index: int, trigger: SelectionTrigger):
        self._path.append(index)
        self._locks.lock(index)
        label = self._registry.label(index)
        logger.debug("Selected tile %d (%s) by %s", index, label, trigger.value)

        if self.metrics:
            self.metrics.record_letter(label, trigger.value)

        event = LetterEvent(
            index=index,
            label=label,
            trigger=trigger,
            position=len(self._path) - 1,
            timestamp=self._dwell.now(),
        )
        self._emit(self._letter_callbacks, event)

    def _complete(self) -> str:
        word = self.current_word()
        path = tuple(self._path)
        now = self._dwell.now()

        self._phase = GesturePhase.COMPLETED
        self._reset()
        self._phase = GesturePhase.IDLE

        event = SwipeEvent(word=word, path=path, duration=now - self._pressed_at, timestamp=now)
        logger.debug("Gesture completed: %r", word)
        if self.metrics:
            self.metrics.record_word(word, event.duration)

        self._emit(self._trail_callbacks, ())
        self._emit(self._word_callbacks, event)
        return word

    def _add_sample(self, point: Point):
        self._trail.append(point)
        if self._trail_callbacks:
            self._emit(self._trail_callbacks, self._trail.snapshot())

    def _reset(self):
        self._dwell.cancel_all()
        if self._cleanup_handle is not None:
            self._cleanup_handle.cancel()
            self._cleanup_handle = None
        self._trail.clear()
        self._path.clear()
        self._locks.clear()
        self._hovered = None

    def _emit(self, callbacks: list[Callable], payload):
        for cb in list(callbacks):
            try:
                cb(payload)
            except Exception as e:
                logger.error("Listener %s failed: %s", getattr(cb, "__name__", cb), e)
