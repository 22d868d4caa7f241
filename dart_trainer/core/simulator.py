from __future__ import annotations

import math
import random
from typing import Optional, Tuple

from .board import resolve, target_point
from .models import Point, Target, ThrowResult


def _require_finite(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number.")


def sample_offset(std_dev_mm: float, rng: random.Random) -> Tuple[float, float]:
    """Draw an (dx, dy) offset from independent normal distributions on each axis."""
    _require_finite("std_dev_mm", std_dev_mm)
    if std_dev_mm < 0:
        raise ValueError("std_dev_mm must be non-negative.")
    if std_dev_mm == 0:
        return 0.0, 0.0
    return rng.gauss(0.0, std_dev_mm), rng.gauss(0.0, std_dev_mm)


def simulate_throw(aim: Point, std_dev_mm: float, rng: random.Random) -> Point:
    """Scatter a dart around the aim point."""
    _require_finite("aim.x", aim.x)
    _require_finite("aim.y", aim.y)
    dx, dy = sample_offset(std_dev_mm, rng)
    return Point(aim.x + dx, aim.y + dy)


def execute_throw(target: Target, std_dev_mm: float, rng: Optional[random.Random] = None) -> ThrowResult:
    """Throw one dart at ``target`` and score where it lands."""
    rng = rng or random.Random()
    landing = simulate_throw(target_point(target), std_dev_mm, rng)
    resolution = resolve(landing)
    return ThrowResult(
        target=target,
        landing_point=landing,
        score=resolution.score,
        ring=resolution.ring,
        segment_number=resolution.segment_number,
    )
