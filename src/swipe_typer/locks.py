"""Which tiles are consumed by the current contact."""

from __future__ import annotations

from typing import Optional


class LockState:
    """Locked tile set plus the single active (most recently locked) tile."""

    def __init__(self):
        self._locked: set[int] = set()
        self._active: Optional[int] = None

    def lock(self, index: int):
        """Lock a tile and make it the active one."""
        self._locked.add(index)
        self._active = index

    def unlock(self, index: int):
        self._locked.discard(index)
        if self._active == index:
            self._active = None

    def is_locked(self, index: int) -> bool:
        return index in self._locked

    @property
    def active_tile(self) -> Optional[int]:
        return self._active

    @property
    def locked(self) -> frozenset[int]:
        return frozenset(self._locked)

    def clear(self):
        self._locked.clear()
        self._active = None

    def __len__(self) -> int:
        return len(self._locked)
