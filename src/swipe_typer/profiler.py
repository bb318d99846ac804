"""Latency of SwipeEngine operations.

Pass a profiler to the engine and every public pointer operation is timed
under its name:

    profiler = EngineProfiler()
    engine = SwipeEngine(tiles, profiler=profiler)
    ...
    profiler.summary()["move"]["p95_ms"]

Taps (`tap_tile` and `tap_up`) are both recorded as "tap".
"""

from __future__ import annotations

import time
from collections import Counter, defaultdict, deque
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from typing import Iterator, Optional

import numpy as np

OPERATIONS = ("press", "move", "release", "tap")


@dataclass
class OperationStats:
    operation: str
    calls: int
    avg_ms: float
    min_ms: float
    max_ms: float
    p95_ms: float


class EngineProfiler:
    """Rolling window of durations per engine operation.

    Only the newest `window_size` samples feed the statistics; `calls`
    counts every measurement since the last reset.
    """

    def __init__(self, window_size: int = 1000):
        self.window_size = window_size
        self.enabled = True
        self._samples: defaultdict[str, deque[float]] = defaultdict(
            lambda: deque(maxlen=self.window_size)
        )
        self._calls: Counter = Counter()

    @contextmanager
    def measure(self, operation: str) -> Iterator[None]:
        if not self.enabled:
            yield
            return
        start = time.perf_counter()
        try:
            yield
        finally:
            self.record(operation, time.perf_counter() - start)

    def record(self, operation: str, seconds: float):
        self._samples[operation].append(seconds * 1000.0)
        self._calls[operation] += 1

    def stats(self, operation: str) -> Optional[OperationStats]:
        samples = self._samples.get(operation)
        if not samples:
            return None
        ms = np.fromiter(samples, dtype=np.float64)
        return OperationStats(
            operation=operation,
            calls=self._calls[operation],
            avg_ms=float(ms.mean()),
            min_ms=float(ms.min()),
            max_ms=float(ms.max()),
            p95_ms=float(np.percentile(ms, 95)),
        )

    def summary(self) -> dict[str, dict]:
        """Stats per measured operation, known operations first."""
        names = [op for op in OPERATIONS if op in self._samples]
        names += sorted(op for op in self._samples if op not in OPERATIONS)
        result = {}
        for name in names:
            stats = self.stats(name)
            if stats is None:
                continue
            row = asdict(stats)
            del row["operation"]
            result[name] = {k: (round(v, 4) if isinstance(v, float) else v) for k, v in row.items()}
        return result

    def reset(self):
        self._samples.clear()
        self._calls.clear()
