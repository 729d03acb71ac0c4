from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .shapes import CATALOG, Shape, ShapeDef, rotate


@dataclass(frozen=True, eq=False)
class Piece:
    """Falling piece: a live occupancy matrix anchored on the board.

    ``x``/``y`` is the top-left of the matrix's bounding box in board
    coordinates; ``y`` may be negative while the piece pokes above the board.
    Pieces are values: ``rotated`` and ``translated`` return new pieces.
    """

    shape: Shape
    tag: int
    x: int = 0
    y: int = 0

    def __post_init__(self) -> None:
        s = np.asarray(self.shape)
        if s.ndim != 2 or s.size == 0:
            raise ValueError(f"Piece shape must be a non-empty 2D matrix, got shape {s.shape}")
        if not np.isin(s, (0, 1)).all():
            raise ValueError("Piece shape must only contain 0 and 1")
        # Each piece owns its buffer
        object.__setattr__(self, "shape", np.array(s, dtype=np.int8))

    @classmethod
    def from_def(cls, shape_def: ShapeDef, x: int = 0, y: int = 0) -> "Piece":
        return cls(shape_def.live_copy(), shape_def.tag, x, y)

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    def rotated(self) -> "Piece":
        return Piece(rotate(self.shape), self.tag, self.x, self.y)

    def translated(self, dx: int, dy: int) -> "Piece":
        return Piece(self.shape, self.tag, self.x + dx, self.y + dy)

    def cells(self) -> List[Tuple[int, int]]:
        cells: List[Tuple[int, int]] = []
        for dy in range(self.height):
            for dx in range(self.width):
                if self.shape[dy, dx]:
                    cells.append((self.x + dx, self.y + dy))
        return cells


def spawn_anchor(board_width: int) -> Tuple[int, int]:
    return board_width // 2 - 1, 0


def random_piece(rng: random.Random, board_width: int) -> Piece:
    """Pick one of the 7 catalog shapes uniformly and anchor it top-center."""
    shape_def = rng.choice(CATALOG)
    x, y = spawn_anchor(board_width)
    return Piece.from_def(shape_def, x, y)
