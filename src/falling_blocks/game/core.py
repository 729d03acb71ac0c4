from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Tuple

import numpy as np

from .collision import collides
from .grid import GameGrid
from .pieces import Piece, random_piece, spawn_anchor
from .rules import ScoringRules
from .shapes import CATALOG


logger = logging.getLogger(__name__)


class Command(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    RESET = 4
    NONE = 5


class GameStatus(Enum):
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    tick_interval_ms: int = 1000
    points_per_line: int = 10
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Board dimensions must be positive, got {self.width}x{self.height}")
        spawn_x, _ = spawn_anchor(self.width)
        widest = max(d.matrix.shape[1] for d in CATALOG)
        tallest = max(d.matrix.shape[0] for d in CATALOG)
        if spawn_x < 0 or spawn_x + widest > self.width or self.height < tallest:
            raise ValueError(f"Board {self.width}x{self.height} is too small to spawn every piece")
        if self.tick_interval_ms <= 0:
            raise ValueError(f"tick_interval_ms must be positive, got {self.tick_interval_ms}")
        if self.points_per_line < 0:
            raise ValueError(f"points_per_line must not be negative, got {self.points_per_line}")


@dataclass(frozen=True, eq=False)
class Snapshot:
    """Read model handed to renderers; never aliases engine state."""

    board: np.ndarray
    active_cells: Tuple[Tuple[int, int], ...]
    active_tag: int
    score: int
    lines_cleared_total: int
    game_over: bool
    tick_interval_ms: int

    @property
    def occupied(self) -> np.ndarray:
        return self.board != 0


class FallingBlocksGame:
    """Owns the board, the active piece, the score and the game-over flag.

    The engine is driven from outside: ``on_command`` for player input and
    ``on_tick`` for gravity. It never keeps time itself; ``tick_interval_ms``
    tells the timer how often to call ``on_tick``. Ticks and commands other
    than RESET are ignored once the game is over.

    Scoring comes from ``rules`` when given; otherwise it is built from
    ``config.points_per_line``.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules(points_per_line=self.config.points_per_line)
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.width, self.config.height)
        self.score = 0
        self.lines_cleared_total = 0
        self.status = GameStatus.PLAYING
        self.tick_interval_ms = self.config.tick_interval_ms
        self.current_piece: Optional[Piece] = None
        self.reset()

    @property
    def game_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.grid = GameGrid(self.config.width, self.config.height)
        self.score = 0
        self.lines_cleared_total = 0
        self.tick_interval_ms = self.config.tick_interval_ms
        self.status = GameStatus.PLAYING
        self._spawn_piece()
        logger.debug("Game reset")

    def _spawn_piece(self) -> None:
        # Not checked against the board: a blocked spawn ends the game on the next failed descent
        self.current_piece = random_piece(self.rng, self.grid.width)
        logger.debug("Spawned piece tag=%d at (%d, %d)", self.current_piece.tag, self.current_piece.x, self.current_piece.y)

    def _try_commit(self, candidate: Piece) -> bool:
        if collides(candidate, self.grid):
            return False
        self.current_piece = candidate
        return True

    def _move(self, dx: int) -> bool:
        if self.current_piece is None:
            return False
        return self._try_commit(self.current_piece.translated(dx, 0))

    def _rotate(self) -> bool:
        if self.current_piece is None:
            return False
        return self._try_commit(self.current_piece.rotated())

    def _lock_piece(self) -> int:
        assert self.current_piece is not None
        self.grid.place(self.current_piece)
        lines = self.grid.clear_full_rows()
        self.lines_cleared_total += lines
        self.score += self.rules.score_for_lines(lines)
        logger.debug("Locked piece tag=%d, cleared %d line(s), score=%d", self.current_piece.tag, lines, self.score)
        return lines

    def _drop(self) -> bool:
        if self.current_piece is None:
            return False
        if self._try_commit(self.current_piece.translated(0, 1)):
            return True
        if self.current_piece.y < 1:
            self.status = GameStatus.GAME_OVER
            logger.info("Game over with score %d", self.score)
            return True
        self._lock_piece()
        self._spawn_piece()
        return True

    def on_tick(self) -> bool:
        if self.game_over:
            return False
        return self._drop()

    def on_command(self, command: Command | int) -> bool:
        try:
            command = Command(command)
        except ValueError:
            logger.warning("Ignoring unrecognised command %r", command)
            return False

        if command == Command.RESET:
            self.reset()
            return True
        if self.game_over:
            return False

        if command == Command.MOVE_LEFT:
            return self._move(-1)
        elif command == Command.MOVE_RIGHT:
            return self._move(1)
        elif command == Command.ROTATE:
            return self._rotate()
        elif command == Command.SOFT_DROP:
            return self._drop()
        return False

    def get_snapshot(self) -> Snapshot:
        board = self.grid.clone_state()
        board.setflags(write=False)
        cells: Tuple[Tuple[int, int], ...] = ()
        tag = 0
        if self.current_piece is not None:
            tag = self.current_piece.tag
            cells = tuple(
                (x, y) for x, y in self.current_piece.cells() if self.grid.is_within_bounds(x, y)
            )
        return Snapshot(
            board=board,
            active_cells=cells,
            active_tag=tag,
            score=self.score,
            lines_cleared_total=self.lines_cleared_total,
            game_over=self.game_over,
            tick_interval_ms=self.tick_interval_ms,
        )

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.grid.clone_state()
        if self.current_piece is not None and not self.game_over:
            for x, y in self.current_piece.cells():
                if self.grid.is_within_bounds(x, y):
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -self.current_piece.tag
        return state
