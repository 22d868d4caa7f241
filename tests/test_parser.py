import pytest

from dart_trainer.core.models import RingType, TargetType
from dart_trainer.core.parser import format_target, parse_target


@pytest.mark.parametrize(
    "label, target_type, number, ring, text",
    [
        ("T20", TargetType.TRIPLE, 20, None, "T20"),
        ("d16", TargetType.DOUBLE, 16, None, "D16"),
        (" S5 ", TargetType.SINGLE, 5, None, "S5"),
        ("5", TargetType.SINGLE, 5, None, "S5"),
        ("OS5", TargetType.SINGLE, 5, RingType.OUTER_SINGLE, "OS5"),
        ("IS7", TargetType.SINGLE, 7, RingType.INNER_SINGLE, "S7"),
        ("BULL", TargetType.BULL, None, None, "BULL"),
        ("50", TargetType.BULL, None, None, "BULL"),
        ("25", TargetType.BULL, None, RingType.OUTER_BULL, "25"),
        ("sb", TargetType.BULL, None, RingType.OUTER_BULL, "25"),
    ],
)
def test_parse_target(label, target_type, number, ring, text):
    target = parse_target(label)
    assert target is not None
    assert target.type == target_type
    assert target.number == number
    assert target.ring == ring
    assert format_target(target) == text


@pytest.mark.parametrize("label", ["", "T21", "D0", "Q5", "T", "treble twenty", "100"])
def test_unrecognised_labels_give_none(label):
    assert parse_target(label) is None
