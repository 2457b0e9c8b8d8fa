"""Tests for the ring layout helpers."""
from __future__ import annotations

import math

import pytest

from randomgrouper.errors import InvalidGroupCountError
from randomgrouper.layout import positions_for, visible_names


def _screen_angle(point, center) -> float:
    return math.degrees(math.atan2(point[1] - center[1], point[0] - center[0])) % 360


def test_four_groups_are_ninety_degrees_apart_counter_clockwise() -> None:
    center = (500.0, 500.0)
    points = positions_for(4, center, 100)

    angles = [_screen_angle(p, center) for p in points]
    # screen space: -150 (10 o'clock), then counter-clockwise means decreasing angle
    assert angles == pytest.approx([210.0, 120.0, 30.0, 300.0])


def test_first_group_sits_at_ten_oclock() -> None:
    x, y = positions_for(3, (0.0, 0.0), 10)[0]

    assert x < 0 and y < 0
    assert abs(x) > abs(y)
    assert x == pytest.approx(-10 * math.sqrt(3) / 2)
    assert y == pytest.approx(-5.0)


def test_second_group_is_below_first_on_the_left_side() -> None:
    # counter-clockwise from 10 o'clock heads toward 9 o'clock
    points = positions_for(12, (0.0, 0.0), 100)

    assert points[1][0] < points[0][0]
    assert points[1][1] > points[0][1]


def test_points_lie_on_the_circle() -> None:
    center = (250.0, 125.0)
    for count in (1, 2, 7, 18):
        points = positions_for(count, center, 42)
        assert len(points) == count
        for x, y in points:
            assert math.hypot(x - center[0], y - center[1]) == pytest.approx(42)


@pytest.mark.parametrize("count", [0, -1])
def test_layout_rejects_counts_below_one(count: int) -> None:
    with pytest.raises(InvalidGroupCountError):
        positions_for(count, (0.0, 0.0), 10)


def test_visible_names_keeps_most_recent_and_counts_hidden() -> None:
    names = [f"N{i}" for i in range(12)]

    shown, hidden = visible_names(names, 9)

    assert shown == names[3:]
    assert hidden == 3
    assert visible_names(names[:2], 9) == (names[:2], 0)
