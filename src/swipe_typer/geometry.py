"""Plain numeric geometry for tile bounds and pointer samples.

Coordinates share whatever space the host uses for layout (usually logical
pixels). Nothing here depends on a UI toolkit.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Point:
    """A 2D pointer position."""
    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=np.float64)

    @classmethod
    def of(cls, value) -> Point:
        """Coerce a Point or an (x, y) pair."""
        if isinstance(value, Point):
            return value
        x, y = value
        return cls(float(x), float(y))


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle: top-left corner plus size."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    @property
    def min_side(self) -> float:
        return min(self.width, self.height)

    def contains(self, point: Point) -> bool:
        """Half-open containment: left/top edges inside, right/bottom outside."""
        return self.x <= point.x < self.right and self.y <= point.y < self.bottom

    def deflate(self, margin: float) -> Rect:
        """Shrink inward by `margin` on every side."""
        return Rect(
            self.x + margin,
            self.y + margin,
            self.width - 2 * margin,
            self.height - 2 * margin,
        )

    def inflate(self, margin: float) -> Rect:
        return self.deflate(-margin)

    def deflated_by_factor(self, factor: float) -> Rect:
        """Deflate by a fraction of the smaller side."""
        return self.deflate(self.min_side * factor)

    @classmethod
    def of(cls, value) -> Rect:
        """Coerce a Rect or an (x, y, width, height) sequence."""
        if isinstance(value, Rect):
            return value
        x, y, w, h = value
        return cls(float(x), float(y), float(w), float(h))

    def to_list(self) -> list[float]:
        return [self.x, self.y, self.width, self.height]


def angle_between(v1: np.ndarray, v2: np.ndarray) -> float:
    """Angle between two vectors in degrees, 0 for zero-length input."""
    n1 = float(np.linalg.norm(v1))
    n2 = float(np.linalg.norm(v2))
    if n1 == 0.0 or n2 == 0.0:
        return 0.0
    cos_angle = float(np.dot(v1, v2)) / (n1 * n2)
    return math.degrees(math.acos(np.clip(cos_angle, -1.0, 1.0)))
