from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    J = 2
    L = 3
    O = 4
    S = 5
    T = 6
    Z = 7


Shape = np.ndarray


def _frozen(rows) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


def rotate(shape: Shape) -> Shape:
    """Rotate an occupancy matrix by 90 degrees: transpose, then reverse row order."""
    return np.array(shape.T[::-1], dtype=np.int8)


@dataclass(frozen=True)
class ShapeDef:
    kind: TetrominoType
    matrix: Shape

    @property
    def tag(self) -> int:
        # Tag doubles as the cell value written to the board and the palette key
        return int(self.kind)

    def live_copy(self) -> Shape:
        return np.array(self.matrix, dtype=np.int8, copy=True)


SHAPES: Dict[TetrominoType, ShapeDef] = {
    TetrominoType.I: ShapeDef(TetrominoType.I, _frozen([[1, 1, 1, 1]])),
    TetrominoType.J: ShapeDef(TetrominoType.J, _frozen([[1, 0, 0], [1, 1, 1]])),
    TetrominoType.L: ShapeDef(TetrominoType.L, _frozen([[0, 0, 1], [1, 1, 1]])),
    TetrominoType.O: ShapeDef(TetrominoType.O, _frozen([[1, 1], [1, 1]])),
    TetrominoType.S: ShapeDef(TetrominoType.S, _frozen([[0, 1, 1], [1, 1, 0]])),
    TetrominoType.T: ShapeDef(TetrominoType.T, _frozen([[0, 1, 0], [1, 1, 1]])),
    TetrominoType.Z: ShapeDef(TetrominoType.Z, _frozen([[1, 1, 0], [0, 1, 1]])),
}

CATALOG: Tuple[ShapeDef, ...] = tuple(SHAPES[kind] for kind in TetrominoType)
