"""Sharp-turn detection over the pointer trail.

A turn selects a tile without waiting for dwell: the last two trail
segments must both be long enough to rule out jitter, bend within the
configured angle band, and the turn point must sit solidly inside the tile.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from swipe_typer.geometry import Point, Rect, angle_between


def is_sharp_turn(
    points: Sequence[Point],
    rect: Optional[Rect],
    *,
    min_segment_length: float = 10.0,
    angle_band: tuple[float, float] = (20.0, 110.0),
    deflate_factor: float = 0.1,
) -> bool:
    """Check whether the trail's last three points turn sharply inside `rect`.

    Args:
        points: Trail samples, oldest first. Only the last three are used.
        rect: Candidate tile bounds, or None if the tile has no layout yet.
        min_segment_length: Both segments must be at least this long.
        angle_band: Exclusive (low, high) bounds on the turn angle in degrees.
        deflate_factor: Inward margin as a fraction of the tile's smaller side.
    """
    if rect is None or len(points) < 3:
        return False

    a, b, c = (p.as_array() for p in points[-3:])
    ab = b - a
    bc = c - b

    if np.linalg.norm(ab) < min_segment_length or np.linalg.norm(bc) < min_segment_length:
        return False

    low, high = angle_band
    angle = angle_between(ab, bc)
    if not low < angle < high:
        return False

    return rect.deflated_by_factor(deflate_factor).contains(points[-1])


class TurnDetector:
    """`is_sharp_turn` with its tunables bound once."""

    def __init__(
        self,
        min_segment_length: float = 10.0,
        angle_band: tuple[float, float] = (20.0, 110.0),
        deflate_factor: float = 0.1,
    ):
        self.min_segment_length = min_segment_length
        self.angle_band = tuple(angle_band)
        self.deflate_factor = deflate_factor

    def check(self, points: Sequence[Point], rect: Optional[Rect]) -> bool:
        return is_sharp_turn(
            points,
            rect,
            min_segment_length=self.min_segment_length,
            angle_band=self.angle_band,
            deflate_factor=self.deflate_factor,
        )
