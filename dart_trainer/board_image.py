from __future__ import annotations

import math
from typing import Iterable, Optional

from PIL import Image, ImageDraw

from dart_trainer.core import board
from dart_trainer.core.models import Target, ThrowResult

BOARD_COLOR = (20, 20, 20)
SINGLE_COLORS = ((30, 30, 30), (235, 225, 200))
RING_COLORS = ((200, 30, 40), (20, 140, 60))
WIRE_COLOR = (170, 170, 170)
DART_COLOR = (30, 144, 255)
TARGET_COLOR = (255, 215, 0)
DART_RADIUS_PX = 5


def _to_pixels(x_mm: float, y_mm: float, size: int) -> tuple[float, float]:
    scale = size / (2 * board.R_BOARD_EDGE)
    return size / 2 + x_mm * scale, size / 2 + y_mm * scale


def _wedge(draw: ImageDraw.ImageDraw, size: int, radius_mm: float, index: int, fill) -> None:
    scale = size / (2 * board.R_BOARD_EDGE)
    r = radius_mm * scale
    centre = size / 2
    # PIL measures angles clockwise from 3 o'clock; segment 20 sits at 12 o'clock.
    mid = math.degrees(index * board.SEGMENT_ANGLE) - 90
    half = math.degrees(board.SEGMENT_ANGLE) / 2
    draw.pieslice((centre - r, centre - r, centre + r, centre + r), mid - half, mid + half, fill=fill)


def _circle(draw: ImageDraw.ImageDraw, size: int, radius_mm: float, fill=None, outline=None) -> None:
    cx, cy = _to_pixels(0.0, 0.0, size)
    r = radius_mm * size / (2 * board.R_BOARD_EDGE)
    draw.ellipse((cx - r, cy - r, cx + r, cy + r), fill=fill, outline=outline)


def render_board(
    throws: Iterable[ThrowResult] = (),
    target: Optional[Target] = None,
    size: int = 480,
) -> Image.Image:
    """Draw the board with dart markers for ``throws`` and a marker on the aim point."""
    if size <= 0:
        raise ValueError("size must be positive.")

    img = Image.new("RGB", (size, size), BOARD_COLOR)
    draw = ImageDraw.Draw(img)

    # Paint from the outside in so each smaller wedge covers the last.
    layers = (
        (board.R_DOUBLE_OUTER, RING_COLORS),
        (board.R_DOUBLE_INNER, SINGLE_COLORS),
        (board.R_TRIPLE_OUTER, RING_COLORS),
        (board.R_TRIPLE_INNER, SINGLE_COLORS),
    )
    for radius, colors in layers:
        for index in range(len(board.SEGMENTS)):
            _wedge(draw, size, radius, index, colors[index % 2])

    _circle(draw, size, board.R_OUTER_BULL, fill=RING_COLORS[1])
    _circle(draw, size, board.R_INNER_BULL, fill=RING_COLORS[0])
    for radius in (board.R_DOUBLE_OUTER, board.R_DOUBLE_INNER, board.R_TRIPLE_OUTER, board.R_TRIPLE_INNER):
        _circle(draw, size, radius, outline=WIRE_COLOR)

    if target is not None:
        aim = board.target_point(target)
        tx, ty = _to_pixels(aim.x, aim.y, size)
        draw.line((tx - 8, ty, tx + 8, ty), fill=TARGET_COLOR, width=2)
        draw.line((tx, ty - 8, tx, ty + 8), fill=TARGET_COLOR, width=2)

    for throw in throws:
        px, py = _to_pixels(throw.landing_point.x, throw.landing_point.y, size)
        draw.ellipse(
            (px - DART_RADIUS_PX, py - DART_RADIUS_PX, px + DART_RADIUS_PX, py + DART_RADIUS_PX),
            fill=DART_COLOR,
            outline=(255, 255, 255),
        )

    return img
