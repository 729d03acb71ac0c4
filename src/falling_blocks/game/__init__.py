"""Game module for Falling Blocks.

Exports the core game engine and supporting classes:
- TetrominoType / ShapeDef / CATALOG: the 7 piece shapes and their tags
- GameGrid: Board cells, placement and line clearing
- Piece: Falling piece with rotation and translation
- collides: Collision check for a candidate placement
- ScoringRules: Flat per-line scoring
- FallingBlocksGame: Spawn, fall, lock, clear and game-over state machine
"""

from .shapes import CATALOG, ShapeDef, TetrominoType, rotate
from .grid import EMPTY, GameGrid
from .pieces import Piece, random_piece
from .collision import collides
from .rules import ScoringRules
from .core import Command, FallingBlocksGame, GameConfig, GameStatus, Snapshot

__all__ = [
    "CATALOG",
    "ShapeDef",
    "TetrominoType",
    "rotate",
    "EMPTY",
    "GameGrid",
    "Piece",
    "random_piece",
    "collides",
    "ScoringRules",
    "Command",
    "FallingBlocksGame",
    "GameConfig",
    "GameStatus",
    "Snapshot",
]
