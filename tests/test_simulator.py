import math
import random
import statistics

import pytest

from dart_trainer.core import board
from dart_trainer.core.models import DEFAULT_TARGET, Point, RingType, Target, TargetType
from dart_trainer.core.simulator import execute_throw, sample_offset, simulate_throw


def test_zero_spread_lands_on_the_aim_point():
    aim = Point(12.5, -40.0)
    assert simulate_throw(aim, 0.0, random.Random(1)) == aim


@pytest.mark.parametrize("std_dev", [0.0, 1e-9])
def test_tiny_spread_at_t20_scores_sixty(std_dev):
    result = execute_throw(DEFAULT_TARGET, std_dev, random.Random(7))
    assert result.ring == RingType.TRIPLE
    assert result.segment_number == 20
    assert result.score == 60
    assert result.target == DEFAULT_TARGET


def test_bull_aim_with_tiny_spread_scores_fifty():
    result = execute_throw(Target(TargetType.BULL, None, "BULL"), 1e-9, random.Random(3))
    assert result.ring == RingType.INNER_BULL
    assert result.segment_number is None
    assert result.score == 50


def test_same_seed_gives_the_same_throw():
    first = execute_throw(DEFAULT_TARGET, 30.0, random.Random(99))
    second = execute_throw(DEFAULT_TARGET, 30.0, random.Random(99))
    assert first == second


def test_result_matches_resolving_the_landing_point():
    rng = random.Random(5)
    for _ in range(50):
        result = execute_throw(DEFAULT_TARGET, 50.0, rng)
        resolution = board.resolve(result.landing_point)
        assert result.score == resolution.score
        assert result.ring == resolution.ring
        assert result.segment_number == resolution.segment_number


def test_offsets_follow_the_requested_spread():
    rng = random.Random(42)
    samples = [sample_offset(10.0, rng) for _ in range(4000)]
    xs = [dx for dx, _ in samples]
    ys = [dy for _, dy in samples]
    assert abs(statistics.mean(xs)) < 1.0
    assert abs(statistics.mean(ys)) < 1.0
    assert 9.0 < statistics.pstdev(xs) < 11.0
    assert 9.0 < statistics.pstdev(ys) < 11.0


@pytest.mark.parametrize("std_dev", [-1.0, math.nan, math.inf, True, "15"])
def test_invalid_spread_is_rejected(std_dev):
    with pytest.raises(ValueError):
        sample_offset(std_dev, random.Random(0))


def test_non_finite_aim_is_rejected():
    with pytest.raises(ValueError):
        simulate_throw(Point(math.nan, 0.0), 10.0, random.Random(0))


def test_execute_throw_works_without_an_explicit_rng():
    result = execute_throw(DEFAULT_TARGET, 15.0)
    assert 0 <= result.score <= 60
