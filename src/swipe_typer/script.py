"""Scripted gesture replay on virtual time.

A script describes a tile layout and a timed list of pointer actions, so a
gesture can be reproduced without a UI:
- Reproducible tests that exercise dwell timers without sleeping
- CLI replays of recorded or hand-written gestures
- Benchmarks on synthetic input

Script format (YAML or JSON):
    tiles: [H, E, L, L, O]
    grid: {columns: 5, tile_size: 100, gap: 10}
    config: {dwell_duration: 0.42}
    steps:
      - {at: 0.0, action: press, x: 50, y: 50}
      - {at: 0.1, action: move, x: 160, y: 50}
      - {at: 1.0, action: release, x: 490, y: 50}

Usage:
    script = GestureScript.load("hello.yml")
    loop = SimulatedLoop()
    engine = script.build_engine(loop)
    words = script.run(engine, loop)
"""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

import yaml

from swipe_typer.config import EngineConfig
from swipe_typer.engine import SwipeEngine
from swipe_typer.geometry import Point, Rect
from swipe_typer.metrics import MetricsCollector
from swipe_typer.profiler import EngineProfiler

logger = logging.getLogger("swipe_typer.script")

ACTIONS = ("press", "move", "release", "tap", "tap_up", "enter", "exit")


class SimulatedTimer:
    """Handle returned by `SimulatedLoop.call_later`."""

    def __init__(self, when: float, callback: Callable, args: tuple):
        self._when = when
        self._callback = callback
        self._args = args
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled

    def when(self) -> float:
        return self._when

    def _run(self):
        self._callback(*self._args)


class SimulatedLoop:
    """Deterministic stand-in for an asyncio loop's timer API.

    Time only moves when `advance` or `run_until` is called. Due timers run
    in deadline order (ties in scheduling order) with the clock set to
    their deadline.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list[tuple[float, int, SimulatedTimer]] = []
        self._seq = itertools.count()

    def time(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable, *args) -> SimulatedTimer:
        timer = SimulatedTimer(self._now + max(0.0, delay), callback, args)
        heapq.heappush(self._queue, (timer.when(), next(self._seq), timer))
        return timer

    def run_until(self, target: float):
        while self._queue and self._queue[0][0] <= target:
            when, _, timer = heapq.heappop(self._queue)
            if timer.cancelled():
                continue
            self._now = max(self._now, when)
            timer._run()
        self._now = max(self._now, target)

    def advance(self, seconds: float):
        self.run_until(self._now + seconds)

    @property
    def pending(self) -> int:
        return sum(1 for _, _, t in self._queue if not t.cancelled())


def grid_bounds(
    count: int,
    columns: int,
    tile_size: float | tuple[float, float] = 100.0,
    gap: float = 10.0,
    origin: tuple[float, float] = (0.0, 0.0),
) -> list[Rect]:
    """Row-major tile rectangles for a simple grid."""
    if isinstance(tile_size, (int, float)):
        width = height = float(tile_size)
    else:
        width, height = (float(v) for v in tile_size)
    ox, oy = origin
    rects = []
    for i in range(count):
        row, col = divmod(i, columns)
        rects.append(Rect(ox + col * (width + gap), oy + row * (height + gap), width, height))
    return rects


@dataclass
class ScriptStep:
    """One timed action in a script."""
    at: float  # seconds from script start
    action: str
    x: float = 0.0
    y: float = 0.0
    index: Optional[int] = None  # tile index for tap/enter/exit

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)

    @classmethod
    def from_dict(cls, data: dict) -> ScriptStep:
        action = data["action"]
        if action not in ACTIONS:
            raise ValueError(f"Unknown script action {action!r}; expected one of {ACTIONS}")
        return cls(
            at=float(data.get("at", 0.0)),
            action=action,
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            index=data.get("index"),
        )

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"at": self.at, "action": self.action}
        if self.index is not None:
            data["index"] = self.index
        else:
            data["x"] = self.x
            data["y"] = self.y
        return data


@dataclass
class GestureScript:
    """Tile layout plus timed pointer actions."""
    tiles: list[str]
    bounds: list[Rect]
    steps: list[ScriptStep] = field(default_factory=list)
    config: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> GestureScript:
        tiles = [str(t) for t in data.get("tiles", [])]
        if "bounds" in data:
            bounds = [Rect.of(b) for b in data["bounds"]]
        else:
            grid = data.get("grid", {})
            bounds = grid_bounds(
                len(tiles),
                columns=grid.get("columns", max(len(tiles), 1)),
                tile_size=grid.get("tile_size", 100.0),
                gap=grid.get("gap", 10.0),
                origin=tuple(grid.get("origin", (0.0, 0.0))),
            )
        steps = [ScriptStep.from_dict(s) for s in data.get("steps", [])]
        steps.sort(key=lambda s: s.at)
        return cls(tiles=tiles, bounds=bounds, steps=steps, config=data.get("config", {}))

    @classmethod
    def load(cls, path: str | Path) -> GestureScript:
        """Load a script from YAML or JSON (JSON is valid YAML)."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    def save(self, path: str | Path):
        data = {
            "tiles": self.tiles,
            "bounds": [r.to_list() for r in self.bounds],
            "config": self.config,
            "steps": [s.to_dict() for s in self.steps],
        }
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=None, sort_keys=False)

    @property
    def duration(self) -> float:
        return self.steps[-1].at if self.steps else 0.0

    def build_engine(
        self,
        loop: SimulatedLoop,
        config: Optional[EngineConfig] = None,
        metrics: Optional[MetricsCollector] = None,
        profiler: Optional[EngineProfiler] = None,
    ) -> SwipeEngine:
        """Create an engine for this script's tiles with bounds registered.

        Values under the script's `config:` key override `config`.
        """
        base = config.to_dict() if config else {}
        merged = EngineConfig.from_dict({**base, **self.config, "tiles": self.tiles})
        engine = SwipeEngine(config=merged, loop=loop, metrics=metrics, profiler=profiler)
        for i, rect in enumerate(self.bounds):
            engine.register_tile_bounds(i, rect)
        return engine

    def run(self, engine: SwipeEngine, loop: SimulatedLoop) -> list[str]:
        """Play every step on virtual time. Returns the words completed."""
        words: list[str] = []
        engine.on_word(lambda event: words.append(event.word))

        start = loop.time()
        for step in self.steps:
            loop.run_until(start + step.at)
            self._apply(engine, step)

        # Let trailing timers (auto tap commit, dwell) run out.
        loop.advance(max(engine.config.dwell_duration, engine.config.cleanup_delay))
        return words

    def _apply(self, engine: SwipeEngine, step: ScriptStep):
        if step.action == "press":
            engine.press(step.point)
        elif step.action == "move":
            engine.move(step.point)
        elif step.action == "release":
            engine.release(step.point)
        elif step.action == "tap":
            engine.tap_tile(step.index if step.index is not None else -1)
        elif step.action == "tap_up":
            engine.tap_up()
        elif step.action == "enter":
            engine.tile_enter(step.index if step.index is not None else -1)
        elif step.action == "exit":
            engine.tile_exit(step.index if step.index is not None else -1)
