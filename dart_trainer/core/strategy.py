from __future__ import annotations

import math
import random
from typing import Dict, Optional

from .board import resolve
from .models import DEFAULT_TARGET, Point, RingType, Target, TargetType
from .simulator import sample_offset

CHECKOUT_MIN = 2
CHECKOUT_MAX = 170
MAX_ONE_DART_DOUBLE = 40
BULL_FINISH = 50
HIT_SAMPLES = 10000

_BULL_AREAS = frozenset({RingType.INNER_BULL, RingType.OUTER_BULL})
_SINGLE_AREAS = frozenset({RingType.INNER_SINGLE, RingType.OUTER_SINGLE})

# Set-up singles for scores below 60 that no single dart finishes, leaving a preferred double.
_SETUP_SINGLES: Dict[int, int] = {
    3: 1, 5: 1, 7: 3, 9: 1, 11: 3, 13: 5, 15: 7, 17: 9, 19: 3,
    21: 5, 23: 7, 25: 9, 27: 11, 29: 13, 31: 15, 33: 1, 35: 3, 37: 5, 39: 7,
    41: 9, 42: 10, 43: 11, 44: 12, 45: 13, 46: 6, 47: 15, 48: 16, 49: 17,
    51: 11, 52: 12, 53: 13, 54: 14, 55: 15, 56: 16, 57: 17, 58: 18, 59: 19,
}

# First-dart trebles for 60-120; everything above goes for T20.
_SETUP_TREBLES: Dict[int, int] = {
    60: 20, 61: 11, 62: 10, 63: 13, 64: 14, 65: 11, 66: 10, 67: 13, 68: 18, 69: 19,
    70: 18, 71: 13, 72: 16, 73: 19, 74: 14, 75: 17, 76: 20, 77: 19, 78: 18, 79: 13,
    80: 20, 81: 19, 82: 14, 83: 17, 84: 20, 85: 15, 86: 18, 87: 17, 88: 20, 89: 19,
    90: 18, 91: 17, 92: 20, 93: 19, 94: 18, 95: 19, 96: 20, 97: 19, 98: 20, 99: 19,
    100: 20, 101: 17, 102: 20, 103: 17, 104: 18, 105: 19, 106: 20, 107: 19, 108: 20,
    109: 19, 110: 20, 111: 19, 112: 20, 113: 19, 114: 20, 115: 19, 116: 20, 117: 19,
    118: 20, 119: 19, 120: 20,
}


def _build_checkout_table() -> Dict[int, Target]:
    table: Dict[int, Target] = {}
    for score in range(CHECKOUT_MIN, MAX_ONE_DART_DOUBLE + 1, 2):
        table[score] = Target(TargetType.DOUBLE, score // 2)
    table[BULL_FINISH] = Target(TargetType.BULL, None, "BULL")
    for score, number in _SETUP_SINGLES.items():
        table.setdefault(score, Target(TargetType.SINGLE, number))
    for score, number in _SETUP_TREBLES.items():
        table[score] = Target(TargetType.TRIPLE, number)
    for score in range(max(_SETUP_TREBLES) + 1, CHECKOUT_MAX + 1):
        table[score] = DEFAULT_TARGET
    return table


CHECKOUT_TABLE: Dict[int, Target] = _build_checkout_table()

ONE_DART_FINISHES = frozenset(list(range(CHECKOUT_MIN, MAX_ONE_DART_DOUBLE + 1, 2)) + [BULL_FINISH])


def get_optimal_target(remaining_score: int, throws_remaining: int) -> Optional[Target]:
    """
    Pick the target a sensible player would aim at with ``throws_remaining`` darts left.

    Returns None when no finish is on (one dart left and no one-dart double) or the
    score cannot be finished at all; callers fall back to their own default aim.
    """
    if isinstance(remaining_score, bool) or not isinstance(remaining_score, int):
        raise ValueError("remaining_score must be an integer.")
    if isinstance(throws_remaining, bool) or not isinstance(throws_remaining, int):
        raise ValueError("throws_remaining must be an integer.")

    if throws_remaining <= 0:
        return None
    if remaining_score <= 1:
        return None

    if throws_remaining == 1:
        if remaining_score in ONE_DART_FINISHES:
            return CHECKOUT_TABLE[remaining_score]
        return None

    return CHECKOUT_TABLE.get(remaining_score, DEFAULT_TARGET)


def calculate_hit_probability(
    aim: Point,
    std_dev_mm: float,
    area: RingType,
    segment: Optional[int] = None,
    rng: Optional[random.Random] = None,
    samples: int = HIT_SAMPLES,
) -> float:
    """
    Monte Carlo estimate of how often a dart aimed at ``aim`` lands in ``area``.

    Either single ring counts as a hit for a single area. Bull areas take no
    segment; every other area needs one between 1 and 20.
    """
    if not (math.isfinite(aim.x) and math.isfinite(aim.y)):
        raise ValueError("Aim coordinates must be finite.")
    if isinstance(std_dev_mm, bool) or not isinstance(std_dev_mm, (int, float)):
        raise ValueError("std_dev_mm must be a number.")
    if not math.isfinite(std_dev_mm) or std_dev_mm <= 0:
        raise ValueError("std_dev_mm must be a positive finite number.")
    if isinstance(samples, bool) or not isinstance(samples, int) or samples <= 0:
        raise ValueError("samples must be a positive integer.")
    if area == RingType.OUT:
        raise ValueError("Cannot aim for the area off the board.")
    if area in _BULL_AREAS:
        if segment is not None:
            raise ValueError("Bull areas have no segment.")
    elif isinstance(segment, bool) or not isinstance(segment, int) or not 1 <= segment <= 20:
        raise ValueError("segment must be between 1 and 20.")

    rng = rng or random.Random()
    hits = 0
    for _ in range(samples):
        dx, dy = sample_offset(std_dev_mm, rng)
        landed = resolve(Point(aim.x + dx, aim.y + dy))
        if area in _SINGLE_AREAS:
            in_area = landed.ring in _SINGLE_AREAS
        else:
            in_area = landed.ring == area
        if in_area and (area in _BULL_AREAS or landed.segment_number == segment):
            hits += 1
    return hits / samples
