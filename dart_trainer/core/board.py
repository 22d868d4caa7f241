from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .models import Point, RingType, Target, TargetType

# Radii in mm for a standard 13.2" steel-tip board.
R_INNER_BULL = 6.35
R_OUTER_BULL = 16.0
R_TRIPLE_INNER = 99.0
R_TRIPLE_OUTER = 107.0
R_DOUBLE_INNER = 162.0
R_DOUBLE_OUTER = 170.0
R_BOARD_EDGE = 225.0

# Clockwise from 12 o'clock.
SEGMENTS: Tuple[int, ...] = (20, 1, 18, 4, 13, 6, 10, 15, 2, 17, 3, 19, 7, 16, 8, 11, 14, 9, 12, 5)
SEGMENT_ANGLE = 2 * math.pi / len(SEGMENTS)

# Aim radii at the middle of each area.
AIM_RADIUS_TRIPLE = (R_TRIPLE_INNER + R_TRIPLE_OUTER) / 2
AIM_RADIUS_DOUBLE = (R_DOUBLE_INNER + R_DOUBLE_OUTER) / 2
AIM_RADIUS_INNER_SINGLE = (R_OUTER_BULL + R_TRIPLE_INNER) / 2
AIM_RADIUS_OUTER_SINGLE = (R_TRIPLE_OUTER + R_DOUBLE_INNER) / 2
AIM_RADIUS_OUTER_BULL = (R_INNER_BULL + R_OUTER_BULL) / 2

_MULTIPLIERS = {
    RingType.INNER_SINGLE: 1,
    RingType.OUTER_SINGLE: 1,
    RingType.TRIPLE: 3,
    RingType.DOUBLE: 2,
}


@dataclass(frozen=True)
class Resolution:
    """Where a landing point scored."""

    ring: RingType
    segment_number: Optional[int]
    score: int


def ring_at(distance: float) -> RingType:
    """Classify a distance from the bull into a ring; outer edges are exclusive."""
    if distance < 0:
        raise ValueError("Distance cannot be negative.")
    if distance < R_INNER_BULL:
        return RingType.INNER_BULL
    if distance < R_OUTER_BULL:
        return RingType.OUTER_BULL
    if distance < R_TRIPLE_INNER:
        return RingType.INNER_SINGLE
    if distance < R_TRIPLE_OUTER:
        return RingType.TRIPLE
    if distance < R_DOUBLE_INNER:
        return RingType.OUTER_SINGLE
    if distance < R_DOUBLE_OUTER:
        return RingType.DOUBLE
    return RingType.OUT


def board_angle(point: Point) -> float:
    """Angle in radians, 0 at 12 o'clock and increasing clockwise."""
    return math.atan2(point.x, -point.y)


def segment_at(angle: float) -> int:
    """Segment number for a board angle. Segments span half a segment either side of their centre."""
    shifted = (angle + SEGMENT_ANGLE / 2) % (2 * math.pi)
    index = int(shifted // SEGMENT_ANGLE) % len(SEGMENTS)
    return SEGMENTS[index]


def segment_angle(number: int) -> float:
    """Centre angle of a segment."""
    if isinstance(number, bool) or not isinstance(number, int) or not 1 <= number <= 20:
        raise ValueError("Segment number must be an integer between 1 and 20.")
    return SEGMENTS.index(number) * SEGMENT_ANGLE


def score_for(ring: RingType, segment_number: Optional[int]) -> int:
    if ring == RingType.INNER_BULL:
        return 50
    if ring == RingType.OUTER_BULL:
        return 25
    if ring == RingType.OUT:
        return 0
    if segment_number is None or not 1 <= segment_number <= 20:
        raise ValueError("Segment number must be between 1 and 20.")
    return segment_number * _MULTIPLIERS[ring]


def resolve(point: Point) -> Resolution:
    """Resolve a landing point into ring, segment and score."""
    distance = math.hypot(point.x, point.y)
    ring = ring_at(distance)
    if ring in (RingType.INNER_BULL, RingType.OUTER_BULL, RingType.OUT):
        return Resolution(ring=ring, segment_number=None, score=score_for(ring, None))
    segment = segment_at(board_angle(point))
    return Resolution(ring=ring, segment_number=segment, score=score_for(ring, segment))


def polar_point(radius: float, angle: float) -> Point:
    return Point(x=radius * math.sin(angle), y=-radius * math.cos(angle))


def target_point(target: Target) -> Point:
    """Nominal aim coordinate for a target: the middle of its area."""
    if target.type == TargetType.BULL:
        if target.ring == RingType.OUTER_BULL:
            return Point(0.0, -AIM_RADIUS_OUTER_BULL)
        return Point(0.0, 0.0)

    if target.type == TargetType.TRIPLE:
        radius = AIM_RADIUS_TRIPLE
    elif target.type == TargetType.DOUBLE:
        radius = AIM_RADIUS_DOUBLE
    elif target.ring == RingType.OUTER_SINGLE:
        radius = AIM_RADIUS_OUTER_SINGLE
    else:
        radius = AIM_RADIUS_INNER_SINGLE
    return polar_point(radius, segment_angle(target.number))


def score_label(ring: RingType, segment_number: Optional[int]) -> str:
    if ring == RingType.INNER_BULL:
        return "BULL"
    if ring == RingType.OUTER_BULL:
        return "25"
    if ring == RingType.OUT:
        return "OUT"
    if segment_number is None or not 1 <= segment_number <= 20:
        raise ValueError("Segment number must be between 1 and 20.")
    if ring == RingType.TRIPLE:
        return f"T{segment_number}"
    if ring == RingType.DOUBLE:
        return f"D{segment_number}"
    return str(segment_number)


def is_double_ring(ring: Optional[RingType]) -> bool:
    """Double ring and inner bull both satisfy double-out."""
    return ring in (RingType.DOUBLE, RingType.INNER_BULL)
