"""Tests for engine operation timing."""

import time

import pytest

from swipe_typer.engine import SwipeEngine
from swipe_typer.profiler import EngineProfiler
from swipe_typer.script import SimulatedLoop, grid_bounds


def profiled_engine(profiler, tiles="AB"):
    loop = SimulatedLoop()
    engine = SwipeEngine(list(tiles), loop=loop, profiler=profiler)
    for i, rect in enumerate(grid_bounds(len(tiles), columns=len(tiles))):
        engine.register_tile_bounds(i, rect)
    return engine, loop


class TestEngineProfiler:
    def test_measure(self):
        profiler = EngineProfiler()
        with profiler.measure("move"):
            time.sleep(0.001)

        stats = profiler.stats("move")
        assert stats.calls == 1
        assert stats.avg_ms >= 0.5  # at least ~1ms

    def test_measure_records_on_exception(self):
        profiler = EngineProfiler()
        try:
            with profiler.measure("press"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert profiler.stats("press").calls == 1

    def test_percentiles_ordered(self):
        profiler = EngineProfiler()
        for ms in range(1, 101):
            profiler.record("move", ms / 1000.0)
        stats = profiler.stats("move")
        assert stats.min_ms == pytest.approx(1.0)
        assert stats.max_ms == pytest.approx(100.0)
        assert stats.min_ms <= stats.p95_ms <= stats.max_ms
        assert stats.avg_ms == pytest.approx(50.5)

    def test_window_keeps_newest(self):
        profiler = EngineProfiler(window_size=5)
        for ms in range(20):
            profiler.record("tap", ms / 1000.0)
        stats = profiler.stats("tap")
        assert stats.calls == 20
        assert stats.min_ms == pytest.approx(15.0)

    def test_summary_order(self):
        profiler = EngineProfiler()
        for name in ("custom", "release", "press"):
            profiler.record(name, 0.001)
        assert list(profiler.summary()) == ["press", "release", "custom"]
        assert profiler.stats("move") is None

    def test_disabled(self):
        profiler = EngineProfiler()
        profiler.enabled = False
        with profiler.measure("move"):
            pass
        assert profiler.stats("move") is None

    def test_reset(self):
        profiler = EngineProfiler()
        profiler.record("release", 0.001)
        profiler.reset()
        assert profiler.summary() == {}


class TestEngineHook:
    def test_engine_times_its_operations(self):
        profiler = EngineProfiler()
        engine, loop = profiled_engine(profiler)
        engine.press((50, 50))
        for x in range(60, 200, 20):
            engine.move((x, 50))
        loop.advance(0.5)
        engine.release((170, 50))
        engine.tap_tile(0)
        engine.tap_up()

        summary = profiler.summary()
        assert summary["press"]["calls"] == 1
        assert summary["move"]["calls"] == 7
        assert summary["release"]["calls"] == 1
        assert summary["tap"]["calls"] == 2

    def test_rejected_calls_still_timed(self):
        profiler = EngineProfiler()
        engine, _ = profiled_engine(profiler)
        engine.move((50, 50))  # idle, no-op
        assert profiler.stats("move").calls == 1

    def test_no_profiler(self):
        engine, _ = profiled_engine(None)
        assert engine.press((50, 50)) == 0
