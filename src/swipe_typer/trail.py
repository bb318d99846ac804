"""Bounded, de-jittered history of pointer samples for the active gesture."""

from __future__ import annotations

from collections import deque
from typing import Optional

import numpy as np

from swipe_typer.geometry import Point


class PointerTrail:
    """Ordered pointer samples with a distance filter and a length cap.

    A sample is stored only if it is farther than `min_distance` from the
    last stored sample. Once `max_points` are held the oldest is evicted.
    The same samples feed both trail rendering and turn detection.
    """

    def __init__(self, max_points: int = 69, min_distance: float = 2.0):
        self.max_points = max_points
        self.min_distance = min_distance
        self._points: deque[Point] = deque(maxlen=max_points)

    def append(self, point: Point) -> bool:
        """Store a sample. Returns False if it was filtered as jitter."""
        if self._points and self._points[-1].distance_to(point) <= self.min_distance:
            return False
        self._points.append(point)
        return True

    def clear(self):
        self._points.clear()

    def snapshot(self) -> tuple[Point, ...]:
        return tuple(self._points)

    def last(self, n: int) -> tuple[Point, ...]:
        """The newest `n` samples, oldest first (fewer if not available)."""
        if n <= 0:
            return ()
        return tuple(self._points)[-n:]

    @property
    def latest(self) -> Optional[Point]:
        return self._points[-1] if self._points else None

    def as_array(self) -> np.ndarray:
        """Samples as an (N, 2) float array."""
        if not self._points:
            return np.zeros((0, 2), dtype=np.float64)
        return np.array([(p.x, p.y) for p in self._points], dtype=np.float64)

    def __len__(self) -> int:
        return len(self._points)
