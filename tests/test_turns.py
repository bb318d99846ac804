"""Tests for sharp-turn detection."""

import math

from swipe_typer.geometry import Point, Rect
from swipe_typer.turns import TurnDetector, is_sharp_turn

TILE = Rect(0, 0, 100, 100)


def turn_into(angle_deg, c=Point(50, 50), length=100.0):
    """Three points whose second segment turns `angle_deg` from the first and ends at `c`."""
    rad = math.radians(angle_deg)
    bc = (length * math.cos(rad), length * math.sin(rad))
    b = Point(c.x - bc[0], c.y - bc[1])
    a = Point(b.x - length, b.y)
    return [a, b, c]


class TestIsSharpTurn:
    def test_right_angle_inside_tile(self):
        assert is_sharp_turn(turn_into(90), TILE)

    def test_forty_five_degrees(self):
        assert is_sharp_turn(turn_into(45), TILE)

    def test_straight_line_is_not_a_turn(self):
        assert not is_sharp_turn(turn_into(0), TILE)

    def test_shallow_bend_rejected(self):
        assert not is_sharp_turn(turn_into(10), TILE)

    def test_obtuse_turn_outside_band(self):
        assert not is_sharp_turn(turn_into(150), TILE)

    def test_reversal_rejected(self):
        points = [Point(-100, 50), Point(150, 50), Point(50, 50)]
        assert not is_sharp_turn(points, TILE)

    def test_wider_band_accepts_obtuse(self):
        assert is_sharp_turn(turn_into(150), TILE, angle_band=(60.0, 180.0))

    def test_needs_three_points(self):
        assert not is_sharp_turn([Point(0, 0), Point(50, 50)], TILE)
        assert not is_sharp_turn([], TILE)

    def test_short_segment_is_jitter(self):
        points = [Point(40, 50), Point(48, 50), Point(48, 70)]
        assert not is_sharp_turn(points, TILE, min_segment_length=10.0)
        assert is_sharp_turn(points, TILE, min_segment_length=5.0)

    def test_turn_must_land_inside_deflated_bounds(self):
        # 90 degree turn ending 5 units inside the edge, within the 10% margin
        points = turn_into(90, c=Point(5, 50))
        assert not is_sharp_turn(points, TILE)
        assert is_sharp_turn(points, TILE, deflate_factor=0.0)

    def test_turn_outside_tile(self):
        assert not is_sharp_turn(turn_into(90, c=Point(300, 300)), TILE)

    def test_missing_bounds(self):
        assert not is_sharp_turn(turn_into(90), None)

    def test_uses_only_last_three_points(self):
        points = [Point(500, 500), Point(-300, 20)] + turn_into(90)
        assert is_sharp_turn(points, TILE)


class TestTurnDetector:
    def test_bound_tunables(self):
        detector = TurnDetector(min_segment_length=10.0, angle_band=(60.0, 180.0), deflate_factor=0.1)
        assert detector.check(turn_into(150), TILE)
        assert not detector.check(turn_into(45), TILE)
