import math
import random

import pytest

from dart_trainer.core.board import target_point
from dart_trainer.core.models import DEFAULT_TARGET, Point, RingType, Target, TargetType
from dart_trainer.core.strategy import (
    CHECKOUT_MAX,
    CHECKOUT_MIN,
    CHECKOUT_TABLE,
    ONE_DART_FINISHES,
    calculate_hit_probability,
    get_optimal_target,
)


@pytest.mark.parametrize(
    "remaining, throws, label",
    [
        (40, 1, "D20"),
        (32, 1, "D16"),
        (2, 1, "D1"),
        (50, 1, "BULL"),
        (40, 3, "D20"),
        (33, 2, "S1"),
        (42, 3, "S10"),
        (60, 3, "T20"),
        (61, 2, "T11"),
        (100, 3, "T20"),
        (170, 3, "T20"),
    ],
)
def test_optimal_target(remaining, throws, label):
    target = get_optimal_target(remaining, throws)
    assert target is not None
    assert target.label == label


@pytest.mark.parametrize("remaining", [41, 3, 60, 100, 170])
def test_last_dart_without_a_one_dart_finish_gives_none(remaining):
    assert get_optimal_target(remaining, 1) is None


@pytest.mark.parametrize("remaining", [1, 0, -5])
def test_unfinishable_scores_give_none(remaining):
    assert get_optimal_target(remaining, 3) is None


def test_no_darts_left_gives_none():
    assert get_optimal_target(40, 0) is None


def test_scores_above_the_table_aim_at_t20():
    assert get_optimal_target(501, 3) == DEFAULT_TARGET


@pytest.mark.parametrize("args", [(40.0, 1), ("40", 1), (True, 1), (40, 1.0)])
def test_non_integer_arguments_are_rejected(args):
    with pytest.raises(ValueError):
        get_optimal_target(*args)


def test_table_covers_every_finishable_score():
    assert set(CHECKOUT_TABLE) == set(range(CHECKOUT_MIN, CHECKOUT_MAX + 1))


def test_one_dart_finishes_are_doubles_or_bull():
    for score in ONE_DART_FINISHES:
        target = CHECKOUT_TABLE[score]
        assert target.type in (TargetType.DOUBLE, TargetType.BULL)
        assert target.nominal_score == score


def test_setup_singles_leave_a_one_dart_finish():
    for score, target in CHECKOUT_TABLE.items():
        if target.type == TargetType.SINGLE:
            assert score - target.nominal_score in ONE_DART_FINISHES


def test_steady_hand_always_hits_the_treble():
    aim = target_point(DEFAULT_TARGET)
    assert calculate_hit_probability(aim, 1e-9, RingType.TRIPLE, 20, random.Random(1), samples=200) == 1.0


def test_steady_hand_hits_the_bull_and_either_single():
    bull = calculate_hit_probability(Point(0.0, 0.0), 1e-9, RingType.INNER_BULL, rng=random.Random(1), samples=200)
    assert bull == 1.0
    aim = target_point(Target(TargetType.SINGLE, 5, ring=RingType.OUTER_SINGLE))
    single = calculate_hit_probability(aim, 1e-9, RingType.INNER_SINGLE, 5, random.Random(1), samples=200)
    assert single == 1.0


def test_wider_scatter_hits_less_often():
    aim = target_point(DEFAULT_TARGET)
    chances = [
        calculate_hit_probability(aim, std, RingType.TRIPLE, 20, random.Random(7), samples=4000)
        for std in (8.0, 30.0, 50.0)
    ]
    assert chances[0] > chances[1] > chances[2]
    assert all(0.0 <= chance <= 1.0 for chance in chances)


def test_missing_the_segment_is_not_a_hit():
    aim = target_point(DEFAULT_TARGET)
    assert calculate_hit_probability(aim, 1e-9, RingType.TRIPLE, 1, random.Random(1), samples=50) == 0.0


@pytest.mark.parametrize(
    "aim, std, area, segment, samples",
    [
        (Point(math.nan, 0.0), 10.0, RingType.TRIPLE, 20, 100),
        (Point(0.0, 0.0), 0.0, RingType.TRIPLE, 20, 100),
        (Point(0.0, 0.0), -1.0, RingType.TRIPLE, 20, 100),
        (Point(0.0, 0.0), "wide", RingType.TRIPLE, 20, 100),
        (Point(0.0, 0.0), 10.0, RingType.INNER_BULL, 20, 100),
        (Point(0.0, 0.0), 10.0, RingType.DOUBLE, None, 100),
        (Point(0.0, 0.0), 10.0, RingType.DOUBLE, 21, 100),
        (Point(0.0, 0.0), 10.0, RingType.OUT, None, 100),
        (Point(0.0, 0.0), 10.0, RingType.TRIPLE, 20, 0),
    ],
)
def test_hit_probability_rejects_bad_input(aim, std, area, segment, samples):
    with pytest.raises(ValueError):
        calculate_hit_probability(aim, std, area, segment, samples=samples)
