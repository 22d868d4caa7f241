import math

import pytest

from dart_trainer.core.models import DEFAULT_TARGET, BustReason, Point, RingType, ThrowResult
from dart_trainer.core.rules import (
    can_finish_with_double,
    check_bust,
    check_round_bust,
    is_game_finished,
    is_integer_value,
    is_valid_remaining_score,
    is_valid_round_score,
    is_valid_single_throw_score,
    settle_round,
)


def _throw(score, ring=RingType.OUTER_SINGLE):
    return ThrowResult(target=DEFAULT_TARGET, landing_point=Point(0.0, 0.0), score=score, ring=ring)


@pytest.mark.parametrize(
    "remaining, score, is_double, reason",
    [
        (20, 30, False, BustReason.OVER),
        (20, 30, True, BustReason.OVER),
        (21, 20, False, BustReason.FINISH_IMPOSSIBLE),
        (3, 2, True, BustReason.FINISH_IMPOSSIBLE),
        (20, 20, False, BustReason.DOUBLE_OUT_REQUIRED),
        (60, 60, False, BustReason.DOUBLE_OUT_REQUIRED),
    ],
)
def test_check_bust_reasons(remaining, score, is_double, reason):
    info = check_bust(remaining, score, is_double)
    assert info.is_bust
    assert info.reason == reason


@pytest.mark.parametrize(
    "remaining, score, is_double",
    [
        (40, 40, True),
        (50, 50, True),
        (100, 60, False),
        (32, 30, False),
        (10, 0, False),
    ],
)
def test_check_bust_allows_legal_throws(remaining, score, is_double):
    info = check_bust(remaining, score, is_double)
    assert not info.is_bust
    assert info.reason is None


@pytest.mark.parametrize(
    "remaining, score",
    [
        (0, 10),
        (-5, 10),
        (20.5, 10),
        (20, 61),
        (20, -1),
        (20, 2.5),
        (True, 1),
    ],
)
def test_check_bust_rejects_bad_input(remaining, score):
    with pytest.raises(ValueError):
        check_bust(remaining, score, False)


def test_settle_round_subtracts_each_dart():
    info, left = settle_round(180, [_throw(60, RingType.TRIPLE), _throw(20), _throw(1)])
    assert not info.is_bust
    assert left == 99


def test_settle_round_bust_restores_the_starting_score():
    info, left = settle_round(40, [_throw(20), _throw(19)])
    assert info.is_bust
    assert info.reason == BustReason.FINISH_IMPOSSIBLE
    assert left == 40


def test_settle_round_stops_at_a_double_checkout():
    info, left = settle_round(40, [_throw(20), _throw(20, RingType.DOUBLE), _throw(60, RingType.TRIPLE)])
    assert not info.is_bust
    assert left == 0


def test_settle_round_checks_out_on_the_bull():
    info, left = settle_round(50, [_throw(50, RingType.INNER_BULL)])
    assert not info.is_bust
    assert left == 0


def test_check_round_bust_reports_a_single_dart_finish_on_a_single():
    info = check_round_bust(20, [_throw(20)])
    assert info.is_bust
    assert info.reason == BustReason.DOUBLE_OUT_REQUIRED


@pytest.mark.parametrize("score, expected", [(2, True), (40, True), (50, True), (42, False), (3, False), (0, False), (-2, False)])
def test_can_finish_with_double(score, expected):
    assert can_finish_with_double(score) is expected


def test_is_game_finished():
    assert is_game_finished(0)
    assert not is_game_finished(2)
    with pytest.raises(ValueError):
        is_game_finished(-1)
    with pytest.raises(ValueError):
        is_game_finished(1.5)


@pytest.mark.parametrize("value, expected", [(3, True), (3.0, True), (3.5, False), (math.inf, False), (True, False), ("3", False)])
def test_is_integer_value(value, expected):
    assert is_integer_value(value) is expected


@pytest.mark.parametrize("score, expected", [(0, True), (25, True), (50, True), (57, True), (60, True), (23, False), (61, False), (-1, False)])
def test_single_throw_scores(score, expected):
    assert is_valid_single_throw_score(score) is expected


@pytest.mark.parametrize("score, expected", [(180, True), (171, True), (0, True), (179, False), (163, False), (181, False)])
def test_round_scores(score, expected):
    assert is_valid_round_score(score) is expected


@pytest.mark.parametrize(
    "remaining, current, expected",
    [(100, 60, True), (100, 100, True), (100, 99, False), (100, 101, False), (-1, 0, False), (10, 1.5, False)],
)
def test_is_valid_remaining_score(remaining, current, expected):
    assert is_valid_remaining_score(remaining, current) is expected
