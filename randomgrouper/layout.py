"""
Ring geometry for the group circles.

Coordinates are screen coordinates: x grows to the right, y grows downward,
so a positive angle turns clockwise on screen and counter-clockwise is negative.
"""
import math
from typing import Sequence

from .config import RING_START_ANGLE_DEG
from .errors import InvalidGroupCountError


def positions_for(
    group_count: int,
    center: tuple[float, float],
    radius: float,
    start_angle_deg: float = RING_START_ANGLE_DEG,
) -> list[tuple[float, float]]:
    """
    Evenly spaced points on a circle, one per group.

    Group 0 sits at the reference angle (10 o'clock by default) and the
    following groups proceed counter-clockwise around the ring.
    """
    if group_count < 1:
        raise InvalidGroupCountError(group_count, low=1)

    cx, cy = center
    start = math.radians(start_angle_deg)
    step = 2 * math.pi / group_count

    points = []
    for i in range(group_count):
        ang = start - i * step
        points.append((cx + radius * math.cos(ang), cy + radius * math.sin(ang)))
    return points


def visible_names(names: Sequence[str], max_lines: int) -> tuple[list[str], int]:
    """Most recent names that fit in a circle (newest last) and how many are hidden."""
    if max_lines <= 0:
        return [], len(names)
    shown = list(names[-max_lines:])
    return shown, len(names) - len(shown)
