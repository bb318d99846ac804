"""Tests for per-tile dwell timers."""

import asyncio

from swipe_typer.dwell import DwellScheduler
from swipe_typer.script import SimulatedLoop


class TestDwellScheduler:
    def test_fires_after_duration(self):
        loop = SimulatedLoop()
        sched = DwellScheduler(duration=0.42, loop=loop)
        fired = []
        sched.arm(1, fired.append)

        loop.advance(0.4)
        assert fired == []
        loop.advance(0.05)
        assert fired == [1]
        assert not sched.is_armed(1)

    def test_fires_once_per_arm(self):
        loop = SimulatedLoop()
        sched = DwellScheduler(duration=0.1, loop=loop)
        fired = []
        sched.arm(1, fired.append)
        loop.advance(1.0)
        loop.advance(1.0)
        assert fired == [1]

    def test_rearm_supersedes(self):
        loop = SimulatedLoop()
        sched = DwellScheduler(duration=0.42, loop=loop)
        fired = []
        sched.arm(1, fired.append)
        loop.advance(0.3)
        sched.arm(1, fired.append)
        loop.advance(0.3)
        assert fired == []
        assert sched.pending == 1
        loop.advance(0.2)
        assert fired == [1]

    def test_cancel(self):
        loop = SimulatedLoop()
        sched = DwellScheduler(duration=0.1, loop=loop)
        fired = []
        sched.arm(1, fired.append)
        sched.cancel(1)
        loop.advance(1.0)
        assert fired == []

    def test_cancel_unknown_is_noop(self):
        sched = DwellScheduler(loop=SimulatedLoop())
        sched.cancel(5)
        assert sched.pending == 0

    def test_independent_tiles(self):
        loop = SimulatedLoop()
        sched = DwellScheduler(duration=0.1, loop=loop)
        fired = []
        sched.arm(1, fired.append)
        sched.arm(2, fired.append)
        sched.cancel(1)
        loop.advance(0.2)
        assert fired == [2]

    def test_cancel_all(self):
        loop = SimulatedLoop()
        sched = DwellScheduler(duration=0.1, loop=loop)
        fired = []
        for i in range(4):
            sched.arm(i, fired.append)
        sched.cancel_all()
        loop.advance(1.0)
        assert fired == []
        assert sched.pending == 0

    def test_now_follows_loop(self):
        loop = SimulatedLoop(start=5.0)
        sched = DwellScheduler(loop=loop)
        loop.advance(1.5)
        assert sched.now() == 6.5

    def test_no_loop_disables_arming(self):
        sched = DwellScheduler()
        assert sched.loop is None
        assert not sched.arm(1, lambda i: None)
        assert sched.pending == 0

    def test_running_asyncio_loop(self):
        async def scenario():
            sched = DwellScheduler(duration=0.01)
            fired = []
            assert sched.arm(3, fired.append)
            await asyncio.sleep(0.05)
            return fired

        loop = asyncio.new_event_loop()
        result = loop.run_until_complete(scenario())
        loop.close()
        assert result == [3]
