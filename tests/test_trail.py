"""Tests for the pointer trail."""

from swipe_typer.geometry import Point
from swipe_typer.trail import PointerTrail


class TestPointerTrail:
    def test_first_point_always_stored(self):
        trail = PointerTrail()
        assert trail.append(Point(0, 0))
        assert len(trail) == 1

    def test_close_points_deduplicated(self):
        trail = PointerTrail(min_distance=2.0)
        trail.append(Point(0, 0))
        assert not trail.append(Point(1, 1))
        assert trail.snapshot() == (Point(0, 0),)

    def test_threshold_is_strict(self):
        trail = PointerTrail(min_distance=2.0)
        trail.append(Point(0, 0))
        assert not trail.append(Point(2, 0))
        assert trail.append(Point(2.5, 0))
        assert len(trail) == 2

    def test_dedup_compares_to_last_stored(self):
        """Slow drift is stored once it adds up past the threshold."""
        trail = PointerTrail(min_distance=2.0)
        for x in (0.0, 1.0, 2.0, 3.0):
            trail.append(Point(x, 0))
        assert trail.snapshot() == (Point(0, 0), Point(3, 0))

    def test_cap_evicts_oldest(self):
        trail = PointerTrail(max_points=69, min_distance=2.0)
        for i in range(100):
            trail.append(Point(i * 5.0, 0))
        assert len(trail) == 69
        assert trail.snapshot()[0] == Point(31 * 5.0, 0)
        assert trail.latest == Point(99 * 5.0, 0)

    def test_last(self):
        trail = PointerTrail()
        for i in range(5):
            trail.append(Point(i * 10.0, 0))
        assert trail.last(3) == (Point(20, 0), Point(30, 0), Point(40, 0))
        assert trail.last(10) == trail.snapshot()
        assert trail.last(0) == ()

    def test_as_array(self):
        trail = PointerTrail()
        assert trail.as_array().shape == (0, 2)
        trail.append(Point(1, 2))
        trail.append(Point(10, 20))
        arr = trail.as_array()
        assert arr.shape == (2, 2)
        assert arr[1].tolist() == [10.0, 20.0]

    def test_clear(self):
        trail = PointerTrail()
        trail.append(Point(0, 0))
        trail.clear()
        assert len(trail) == 0
        assert trail.latest is None
