"""Tile labels and their on-screen bounds."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from swipe_typer.geometry import Point, Rect

logger = logging.getLogger("swipe_typer.tiles")


@dataclass(frozen=True)
class Tile:
    """A labeled tile. Bounds are None until the first layout pass."""
    index: int
    label: str
    bounds: Optional[Rect] = None


class TileBoundsRegistry:
    """Maps tile index to bounds for one tile set.

    The host writes bounds after every layout pass; the engine only reads.
    Iteration order is the order in which indices were first registered,
    which is also the hit-test priority.
    """

    def __init__(self, labels: Iterable[str] = ()):
        self._labels: list[str] = list(labels)
        self._bounds: dict[int, Rect] = {}

    def register(self, index: int, rect: Rect) -> bool:
        """Set or overwrite the bounds for a tile. Returns False for unknown indices."""
        if not 0 <= index < len(self._labels):
            logger.debug("Ignoring bounds for unknown tile %d", index)
            return False
        self._bounds[index] = Rect.of(rect)
        return True

    def get(self, index: int) -> Optional[Rect]:
        return self._bounds.get(index)

    def label(self, index: int) -> str:
        return self._labels[index]

    def tile(self, index: int) -> Tile:
        return Tile(index=index, label=self._labels[index], bounds=self._bounds.get(index))

    def replace(self, labels: Iterable[str]):
        """Swap in a new tile set. All bounds are dropped."""
        self._labels = list(labels)
        self._bounds.clear()

    def clear(self):
        """Forget all bounds (labels are kept)."""
        self._bounds.clear()

    def hit_test(
        self,
        point: Point,
        deflate_factor: float = 0.0,
        exclude: Iterable[int] = (),
    ) -> Optional[int]:
        """Return the first tile whose (deflated) bounds contain `point`.

        Tiles in `exclude` and tiles without bounds are skipped.
        """
        excluded = set(exclude)
        for index, rect in self._bounds.items():
            if index in excluded:
                continue
            if deflate_factor:
                rect = rect.deflated_by_factor(deflate_factor)
            if rect.contains(point):
                return index
        return None

    @property
    def labels(self) -> list[str]:
        return list(self._labels)

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[tuple[int, Rect]]:
        return iter(list(self._bounds.items()))
