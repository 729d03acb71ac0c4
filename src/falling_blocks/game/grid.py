from __future__ import annotations

import numpy as np

from .pieces import Piece


EMPTY = 0


class GameGrid:
    """Fixed-size board of locked cells.

    The grid uses 0 for empty cells and the piece tag (a positive integer)
    for occupied ones. Row 0 is the top of the board.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def is_within_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_at(self, x: int, y: int) -> int:
        if not self.is_within_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) is outside the {self.width}x{self.height} board")
        return int(self.grid[y, x])

    def set_cell(self, x: int, y: int, tag: int) -> None:
        if not self.is_within_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) is outside the {self.width}x{self.height} board")
        self.grid[y, x] = tag

    def place(self, piece: Piece) -> None:
        """Write the piece's tag into every cell it covers.

        The placement is assumed legal; cells above the top row are dropped.
        """
        for x, y in piece.cells():
            if self.is_within_bounds(x, y):
                self.grid[y, x] = piece.tag

    def is_row_full(self, y: int) -> bool:
        return bool(np.all(self.grid[y] != EMPTY))

    def clear_full_rows(self) -> int:
        full_rows = np.where(np.all(self.grid != EMPTY, axis=1))[0]
        if full_rows.size == 0:
            return 0
        num = int(full_rows.size)
        # Remove full rows and add empty rows at the top
        remaining = np.delete(self.grid, full_rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, remaining))
        return num

    def occupied_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
