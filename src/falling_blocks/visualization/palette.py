from __future__ import annotations

from typing import Tuple

from falling_blocks.game import TetrominoType


PALETTE = {
    0: (20, 20, 26),
    TetrominoType.I: (59, 130, 246),   # blue
    TetrominoType.J: (249, 115, 22),   # orange
    TetrominoType.L: (234, 179, 8),    # yellow
    TetrominoType.O: (34, 197, 94),    # green
    TetrominoType.S: (239, 68, 68),    # red
    TetrominoType.T: (168, 85, 247),   # purple
    TetrominoType.Z: (236, 72, 153),   # pink
}


def color_for_value(v: int) -> Tuple[int, int, int]:
    # Falling-piece overlays are negative tags
    return PALETTE.get(abs(v), (200, 200, 200))
