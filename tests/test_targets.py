import random

from dart_trainer.core.models import RingType, TargetType
from dart_trainer.core.targets import (
    BASIC_TARGET_COUNT,
    advance_bag,
    all_targets,
    basic_practice_targets,
    new_bag,
)


def test_basic_targets_are_the_sixty_two_drill_targets():
    targets = basic_practice_targets()
    assert len(targets) == BASIC_TARGET_COUNT == 62
    assert len({t.label for t in targets}) == 62

    singles = [t for t in targets if t.type == TargetType.SINGLE]
    assert len(singles) == 20
    assert all(t.ring == RingType.OUTER_SINGLE for t in singles)
    assert sum(t.type == TargetType.DOUBLE for t in targets) == 20
    assert sum(t.type == TargetType.TRIPLE for t in targets) == 20
    assert {t.label for t in targets if t.type == TargetType.BULL} == {"BULL", "25"}


def test_all_targets_add_the_inner_singles():
    targets = all_targets()
    assert len(targets) == 82
    assert sum(t.ring == RingType.INNER_SINGLE for t in targets) == 20


def test_new_bag_is_a_seeded_permutation():
    first = new_bag(random.Random(11))
    second = new_bag(random.Random(11))
    assert first == second
    assert sorted(t.label for t in first) == sorted(t.label for t in basic_practice_targets())


def test_new_bag_can_draw_from_every_target():
    assert len(new_bag(random.Random(0), use_basic_targets=False)) == 82


def test_advance_bag_moves_the_cursor():
    bag = new_bag(random.Random(1))
    same, index = advance_bag(bag, 0, random.Random(2))
    assert same is bag
    assert index == 1


def test_exhausted_bag_reshuffles_and_restarts():
    rng = random.Random(3)
    bag = new_bag(rng)
    labels = sorted(t.label for t in bag)
    bag, index = advance_bag(bag, len(bag) - 1, rng)
    assert index == 0
    assert sorted(t.label for t in bag) == labels


def test_each_target_is_drawn_once_per_pass():
    rng = random.Random(4)
    bag = new_bag(rng)
    index = 0
    drawn = []
    for _ in range(BASIC_TARGET_COUNT):
        drawn.append(bag[index].label)
        bag, index = advance_bag(bag, index, rng)
    assert len(set(drawn)) == BASIC_TARGET_COUNT
    assert index == 0
