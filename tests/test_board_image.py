import random

import pytest

from dart_trainer.board_image import DART_COLOR, TARGET_COLOR, render_board
from dart_trainer.core.models import DEFAULT_TARGET, Target, TargetType
from dart_trainer.core.simulator import execute_throw


def test_render_empty_board():
    img = render_board(size=200)
    assert img.size == (200, 200)
    assert img.mode == "RGB"


def test_render_marks_darts_and_target():
    throws = [execute_throw(DEFAULT_TARGET, 15.0, random.Random(seed)) for seed in range(3)]
    img = render_board(throws, target=Target(TargetType.DOUBLE, 3), size=300)
    colors = {color for _, color in img.getcolors(maxcolors=300 * 300)}
    assert DART_COLOR in colors
    assert TARGET_COLOR in colors


def test_render_rejects_bad_size():
    with pytest.raises(ValueError):
        render_board(size=0)
