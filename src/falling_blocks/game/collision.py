from __future__ import annotations

from .grid import EMPTY, GameGrid
from .pieces import Piece


def collides(piece: Piece, grid: GameGrid) -> bool:
    """Return True if the piece cannot occupy its anchor on the grid.

    Cells below the floor, outside the side walls or on an occupied cell
    collide. Cells above the top row never collide on their own, so freshly
    spawned or rotated pieces may stick out over the board.
    """
    for x, y in piece.cells():
        if y >= grid.height:
            return True
        if x < 0 or x >= grid.width:
            return True
        if y < 0:
            continue
        if grid.cell_at(x, y) != EMPTY:
            return True
    return False
