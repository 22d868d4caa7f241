from __future__ import annotations

import math
from itertools import combinations_with_replacement
from typing import FrozenSet, Iterable, Tuple

from .board import is_double_ring
from .models import NO_BUST, BustInfo, BustReason, ThrowResult

MAX_THROW_SCORE = 60
IMPOSSIBLE_FINISH = 1


def is_integer_value(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value) and value.is_integer()


def check_bust(remaining_score: int, throw_score: int, is_double: bool) -> BustInfo:
    """
    Judge one dart against the remaining score under double-out rules.

    Checks run in a fixed order and the first match wins: overshoot, leaving 1,
    then finishing on something other than a double.
    """
    if not is_integer_value(remaining_score):
        raise ValueError("remaining_score must be an integer.")
    if remaining_score <= 0:
        raise ValueError("remaining_score must be a positive integer.")
    if not is_integer_value(throw_score):
        raise ValueError("throw_score must be an integer.")
    if not 0 <= throw_score <= MAX_THROW_SCORE:
        raise ValueError(f"throw_score must be between 0 and {MAX_THROW_SCORE}.")

    left = remaining_score - throw_score
    if throw_score > remaining_score:
        return BustInfo(is_bust=True, reason=BustReason.OVER)
    if left == IMPOSSIBLE_FINISH:
        return BustInfo(is_bust=True, reason=BustReason.FINISH_IMPOSSIBLE)
    if left == 0 and not is_double:
        return BustInfo(is_bust=True, reason=BustReason.DOUBLE_OUT_REQUIRED)
    return NO_BUST


def settle_round(remaining_score: int, throws: Iterable[ThrowResult]) -> Tuple[BustInfo, int]:
    """
    Play a round dart by dart and return the bust verdict with the score left afterwards.

    The first bust ends the round and restores ``remaining_score``. A checkout also ends
    it; darts after the finish do not count.
    """
    current = remaining_score
    for throw in throws:
        info = check_bust(current, throw.score, is_double_ring(throw.ring))
        if info.is_bust:
            return info, remaining_score
        current -= throw.score
        if current == 0:
            break
    return NO_BUST, current


def check_round_bust(remaining_score: int, throws: Iterable[ThrowResult]) -> BustInfo:
    info, _ = settle_round(remaining_score, throws)
    return info


def can_finish_with_double(remaining_score: int) -> bool:
    """True when a single dart at a double or the bull can finish."""
    if not is_integer_value(remaining_score):
        raise ValueError("remaining_score must be an integer.")
    if remaining_score <= 0 or remaining_score % 2 != 0:
        return False
    return remaining_score == 50 or 2 <= remaining_score <= 40


def is_game_finished(remaining_score: int) -> bool:
    if not is_integer_value(remaining_score):
        raise ValueError("remaining_score must be an integer.")
    if remaining_score < 0:
        raise ValueError("remaining_score must be zero or positive.")
    return remaining_score == 0


def _single_dart_scores() -> FrozenSet[int]:
    scores = {0, 25, 50}
    for number in range(1, 21):
        scores.update((number, number * 2, number * 3))
    return frozenset(scores)


VALID_SINGLE_SCORES: FrozenSet[int] = _single_dart_scores()
VALID_ROUND_SCORES: FrozenSet[int] = frozenset(
    sum(darts) for darts in combinations_with_replacement(sorted(VALID_SINGLE_SCORES), 3)
)


def is_valid_single_throw_score(score: object) -> bool:
    return is_integer_value(score) and int(score) in VALID_SINGLE_SCORES


def is_valid_round_score(score: object) -> bool:
    return is_integer_value(score) and int(score) in VALID_ROUND_SCORES


def is_valid_remaining_score(remaining: object, current: object) -> bool:
    """Whether subtracting ``current`` from ``remaining`` leaves a playable score."""
    if not (is_integer_value(remaining) and is_integer_value(current)):
        return False
    if remaining < 0 or current < 0:
        return False
    left = remaining - current
    return left >= 0 and left != IMPOSSIBLE_FINISH
