from __future__ import annotations

import logging
import re
from typing import Optional

from .models import RingType, Target, TargetType

LOGGER = logging.getLogger(__name__)

_LABEL_PATTERN = re.compile(r"^(OS|IS|S|D|T)?(\d{1,2})$")

_PREFIXES = {
    None: (TargetType.SINGLE, None),
    "S": (TargetType.SINGLE, None),
    "IS": (TargetType.SINGLE, RingType.INNER_SINGLE),
    "OS": (TargetType.SINGLE, RingType.OUTER_SINGLE),
    "D": (TargetType.DOUBLE, None),
    "T": (TargetType.TRIPLE, None),
}


def parse_target(label: str) -> Optional[Target]:
    """
    Parse a target label such as ``T20``, ``D16``, ``S5``, ``OS5``, ``BULL`` or ``25``.

    Returns None if the label does not name a target on the board.
    """
    text = label.strip().upper()
    if text in ("BULL", "DB", "D25", "50"):
        return Target(TargetType.BULL, None, "BULL")
    if text in ("25", "SB", "OB"):
        return Target(TargetType.BULL, None, "25", RingType.OUTER_BULL)

    match = _LABEL_PATTERN.match(text)
    if match is None:
        LOGGER.debug("Skipping target label %r: unrecognised format", label)
        return None

    prefix, number_str = match.groups()
    number = int(number_str)
    if not 1 <= number <= 20:
        LOGGER.debug("Skipping target label %r: segment %s out of range", label, number)
        return None

    target_type, ring = _PREFIXES[prefix]
    return Target(target_type, number, ring=ring)


def format_target(target: Target) -> str:
    return target.label
