from __future__ import annotations

import logging
import random
from typing import List, Optional, Tuple

from .models import RingType, Target, TargetType

LOGGER = logging.getLogger(__name__)

BASIC_TARGET_COUNT = 62


def _segment_targets(target_type: TargetType, ring: Optional[RingType] = None) -> List[Target]:
    return [Target(target_type, number, ring=ring) for number in range(1, 21)]


def basic_practice_targets() -> List[Target]:
    """The 62 basic drill targets: outer singles, doubles, trebles and both bulls."""
    targets: List[Target] = []
    targets.extend(_segment_targets(TargetType.SINGLE, RingType.OUTER_SINGLE))
    targets.extend(_segment_targets(TargetType.DOUBLE))
    targets.extend(_segment_targets(TargetType.TRIPLE))
    targets.append(Target(TargetType.BULL, None, "BULL", RingType.INNER_BULL))
    targets.append(Target(TargetType.BULL, None, "25", RingType.OUTER_BULL))
    return targets


def all_targets() -> List[Target]:
    """Every aim point on the board: the basic set plus the inner singles."""
    return _segment_targets(TargetType.SINGLE, RingType.INNER_SINGLE) + basic_practice_targets()


def new_bag(rng: random.Random, use_basic_targets: bool = True) -> List[Target]:
    pool = basic_practice_targets() if use_basic_targets else all_targets()
    rng.shuffle(pool)
    return pool


def advance_bag(bag: List[Target], index: int, rng: random.Random) -> Tuple[List[Target], int]:
    """Move the cursor on; a spent bag is reshuffled and starts again at 0."""
    index += 1
    if index >= len(bag):
        rng.shuffle(bag)
        LOGGER.debug("Target bag exhausted after %s targets, reshuffled.", len(bag))
        index = 0
    return bag, index
