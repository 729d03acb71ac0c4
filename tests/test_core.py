"""Tests for the game engine state machine."""

import logging
import random

import numpy as np
import pytest

from falling_blocks.game import (
    Command,
    FallingBlocksGame,
    GameConfig,
    GameStatus,
    Piece,
    ScoringRules,
    TetrominoType,
)
from falling_blocks.game.shapes import SHAPES


def make_game(seed: int = 7, **kwargs) -> FallingBlocksGame:
    return FallingBlocksGame(GameConfig(random_seed=seed, **kwargs))


def put(game: FallingBlocksGame, kind: TetrominoType, x: int, y: int) -> Piece:
    piece = Piece.from_def(SHAPES[kind], x, y)
    game.current_piece = piece
    return piece


def test_initial_state():
    """Test a new game is playing with an empty board and a spawned piece."""
    game = make_game()
    assert game.status is GameStatus.PLAYING
    assert not game.game_over
    assert game.score == 0
    assert game.grid.occupied_count() == 0
    assert game.current_piece is not None
    assert (game.current_piece.x, game.current_piece.y) == (4, 0)
    assert game.tick_interval_ms == 1000


def test_same_seed_same_pieces():
    """Test that a seed makes the spawn sequence reproducible."""
    a = make_game(seed=42)
    b = make_game(seed=42)
    for _ in range(30):
        assert a.current_piece.tag == b.current_piece.tag
        a.on_tick()
        b.on_tick()


def test_move_commits_when_free():
    """Test left and right moves on an empty board."""
    game = make_game()
    put(game, TetrominoType.O, 4, 5)
    assert game.on_command(Command.MOVE_RIGHT)
    assert game.current_piece.x == 5
    assert game.on_command(Command.MOVE_LEFT)
    assert game.current_piece.x == 4


def test_move_against_wall_is_noop():
    """Test that a piece flush with an edge does not move."""
    game = make_game()
    put(game, TetrominoType.O, 0, 5)
    assert not game.on_command(Command.MOVE_LEFT)
    assert (game.current_piece.x, game.current_piece.y) == (0, 5)

    put(game, TetrominoType.O, 8, 5)
    assert not game.on_command(Command.MOVE_RIGHT)
    assert (game.current_piece.x, game.current_piece.y) == (8, 5)


def test_move_into_locked_cells_is_noop():
    """Test that moves are blocked by locked cells."""
    game = make_game()
    put(game, TetrominoType.O, 4, 5)
    game.grid.set_cell(6, 6, 1)
    assert not game.on_command(Command.MOVE_RIGHT)
    assert game.current_piece.x == 4


def test_rotate_commits_when_free():
    """Test rotation in open space."""
    game = make_game()
    put(game, TetrominoType.I, 3, 5)
    assert game.on_command(Command.ROTATE)
    assert game.current_piece.shape.shape == (4, 1)
    assert (game.current_piece.x, game.current_piece.y) == (3, 5)


def test_blocked_rotation_keeps_orientation():
    """Test that a rotation through the floor is rejected without a kick."""
    game = make_game()
    piece = put(game, TetrominoType.I, 0, 19)
    assert not game.on_command(Command.ROTATE)
    assert game.current_piece is piece
    assert game.current_piece.shape.shape == (1, 4)


def test_rotation_blocked_by_locked_cell():
    """Test that a locked cell in the rotated footprint rejects the rotation."""
    game = make_game()
    piece = put(game, TetrominoType.I, 3, 5)
    # Vertical I at (3, 5) would cover column 3, rows 5..8
    game.grid.set_cell(3, 7, 1)

    assert not game.on_command(Command.ROTATE)

    assert game.current_piece is piece
    assert game.current_piece.shape.shape == (1, 4)
    assert (game.current_piece.x, game.current_piece.y) == (3, 5)


def test_gravity_moves_piece_down():
    """Test a tick on a free piece."""
    game = make_game()
    put(game, TetrominoType.T, 4, 0)
    assert game.on_tick()
    assert game.current_piece.y == 1
    assert game.score == 0
    assert game.grid.occupied_count() == 0


def test_repeated_ticks_lock_at_bottom():
    """Test that a falling piece ends up locked on the floor."""
    game = make_game()
    piece = put(game, TetrominoType.T, 4, 0)
    for _ in range(game.grid.height - piece.height):
        game.on_tick()
    assert game.current_piece.y == game.grid.height - piece.height

    game.on_tick()

    tag = int(TetrominoType.T)
    assert game.grid.cell_at(5, 18) == tag
    assert [game.grid.cell_at(x, 19) for x in (4, 5, 6)] == [tag, tag, tag]
    assert game.grid.occupied_count() == 4
    assert game.current_piece is not piece, "A new piece should be spawned"
    assert (game.current_piece.x, game.current_piece.y) == (4, 0)
    assert not game.game_over


def test_soft_drop_behaves_like_tick():
    """Test that the soft drop command moves the piece down."""
    game = make_game()
    put(game, TetrominoType.S, 4, 3)
    assert game.on_command(Command.SOFT_DROP)
    assert game.current_piece.y == 4


def test_single_line_clear_scores_ten():
    """Test locking into a full bottom row."""
    game = make_game()
    for x in range(10):
        if x not in (6, 7):
            game.grid.set_cell(x, 19, 1)
    put(game, TetrominoType.O, 6, 18)

    game.on_tick()

    assert game.score == 10
    assert game.lines_cleared_total == 1
    assert game.grid.grid.shape == (20, 10)
    tag = int(TetrominoType.O)
    assert [game.grid.cell_at(x, 19) for x in range(10)] == [0, 0, 0, 0, 0, 0, tag, tag, 0, 0]
    assert game.grid.occupied_count() == 2
    assert np.all(game.grid.grid[0] == 0)


def test_four_line_clear_is_flat_rate():
    """Test that four rows at once score 4 x 10."""
    game = make_game()
    for y in range(16, 20):
        for x in range(1, 10):
            game.grid.set_cell(x, y, 2)
    game.current_piece = Piece.from_def(SHAPES[TetrominoType.I], 0, 16).rotated()

    game.on_tick()

    assert game.score == 40
    assert game.lines_cleared_total == 4
    assert game.grid.occupied_count() == 0


def test_custom_scoring_rules():
    """Test a different per-line increment."""
    game = FallingBlocksGame(GameConfig(random_seed=1), ScoringRules(points_per_line=25))
    for x in range(8):
        game.grid.set_cell(x, 19, 1)
    put(game, TetrominoType.O, 8, 18)
    game.on_tick()
    assert game.score == 25


def test_explicit_rules_win_over_config():
    """Test that passed scoring rules take precedence over points_per_line."""
    game = FallingBlocksGame(GameConfig(random_seed=1, points_per_line=99), ScoringRules(points_per_line=5))
    assert game.rules.points_per_line == 5

    game = FallingBlocksGame(GameConfig(random_seed=1, points_per_line=99))
    assert game.rules.points_per_line == 99


def test_game_over_when_piece_cannot_leave_top():
    """Test the loss condition."""
    game = make_game()
    put(game, TetrominoType.O, 4, 0)
    game.grid.set_cell(4, 2, 1)

    assert game.on_tick()

    assert game.game_over
    assert game.status is GameStatus.GAME_OVER
    assert game.grid.occupied_count() == 1, "The blocked piece should not be locked"


def test_blocked_spawn_is_detected_one_tick_later():
    """Test that the spawn after a lock is not validated until the next tick."""
    game = make_game()
    for x in range(3, 8):
        game.grid.set_cell(x, 1, 1)
        game.grid.set_cell(x, 2, 1)
    put(game, TetrominoType.O, 0, 18)

    game.on_tick()
    assert not game.game_over, "Spawn after lock is not checked"
    assert game.current_piece.y == 0

    game.on_tick()
    assert game.game_over


def test_commands_ignored_after_game_over():
    """Test that only reset is accepted once the game is over."""
    game = make_game()
    put(game, TetrominoType.O, 4, 0)
    game.grid.set_cell(4, 2, 1)
    game.on_tick()
    assert game.game_over

    piece = game.current_piece
    for command in (Command.MOVE_LEFT, Command.MOVE_RIGHT, Command.ROTATE, Command.SOFT_DROP):
        assert not game.on_command(command)
    assert not game.on_tick()
    assert game.current_piece is piece
    assert game.game_over


def test_reset_after_game_over():
    """Test that reset restores a fresh game."""
    game = make_game(tick_interval_ms=300)
    game.score = 50
    game.tick_interval_ms = 10
    put(game, TetrominoType.O, 4, 0)
    game.grid.set_cell(4, 2, 1)
    game.on_tick()
    assert game.game_over

    assert game.on_command(Command.RESET)

    assert not game.game_over
    assert game.score == 0
    assert game.lines_cleared_total == 0
    assert game.grid.occupied_count() == 0
    assert game.tick_interval_ms == 300
    assert (game.current_piece.x, game.current_piece.y) == (4, 0)


def test_reset_while_playing():
    """Test that reset is available during play too."""
    game = make_game()
    game.grid.set_cell(0, 19, 1)
    old_grid = game.grid
    game.on_command(Command.RESET)
    assert game.grid is not old_grid, "Reset should allocate a fresh board"
    assert game.grid.occupied_count() == 0


def test_unknown_command_is_logged_and_ignored(caplog):
    """Test that garbage input does not raise."""
    game = make_game()
    piece = game.current_piece
    with caplog.at_level(logging.WARNING, logger="falling_blocks.game.core"):
        assert not game.on_command(99)
    assert "unrecognised command" in caplog.text
    assert game.current_piece is piece


def test_none_command_changes_nothing():
    """Test the no-op command."""
    game = make_game()
    piece = game.current_piece
    assert not game.on_command(Command.NONE)
    assert game.current_piece is piece


def test_score_only_grows_in_steps_of_ten():
    """Test score monotonicity over a random session."""
    game = make_game(seed=3)
    rng = random.Random(3)
    commands = [Command.MOVE_LEFT, Command.MOVE_RIGHT, Command.ROTATE, Command.SOFT_DROP]
    previous = 0
    for _ in range(3000):
        if game.game_over:
            break
        game.on_command(rng.choice(commands))
        game.on_tick()
        assert game.score >= previous
        assert game.score == 10 * game.lines_cleared_total
        assert game.grid.grid.shape == (20, 10)
        previous = game.score


def test_snapshot_is_read_only_copy():
    """Test the renderer read model."""
    game = make_game()
    put(game, TetrominoType.O, 4, 0)
    game.grid.set_cell(0, 19, 3)

    snapshot = game.get_snapshot()

    assert snapshot.board.shape == (20, 10)
    assert snapshot.board[19, 0] == 3
    assert snapshot.occupied[19, 0]
    assert not snapshot.occupied[0, 0]
    assert sorted(snapshot.active_cells) == [(4, 0), (4, 1), (5, 0), (5, 1)]
    assert snapshot.active_tag == int(TetrominoType.O)
    assert snapshot.score == 0
    assert not snapshot.game_over
    assert snapshot.tick_interval_ms == 1000
    with pytest.raises(ValueError):
        snapshot.board[0, 0] = 1

    game.grid.set_cell(1, 19, 3)
    assert snapshot.board[19, 1] == 0, "Snapshot should not alias the live board"


def test_snapshot_omits_cells_above_board():
    """Test that only on-board active cells are reported."""
    game = make_game()
    game.current_piece = Piece.from_def(SHAPES[TetrominoType.I], 0, -2).rotated()
    snapshot = game.get_snapshot()
    assert sorted(snapshot.active_cells) == [(0, 0), (0, 1)]


def test_state_overlays_falling_piece():
    """Test the observation array."""
    game = make_game()
    put(game, TetrominoType.O, 4, 0)
    state = game.get_state()
    assert state[0, 4] == -int(TetrominoType.O)
    assert game.grid.cell_at(4, 0) == 0, "Overlay should not touch the board"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"width": 0},
        {"height": -1},
        {"width": 4},
        {"height": 1},
        {"tick_interval_ms": 0},
        {"points_per_line": -1},
    ],
)
def test_config_validation(kwargs):
    """Test that unusable configurations are rejected."""
    with pytest.raises(ValueError):
        GameConfig(**kwargs)
