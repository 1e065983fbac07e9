"""Unit tests for the try_move collision query and its pickup side channel.

Grid used (item_grid), world position of a cell is (4x, 4z):

    1 1 1 1 1 1
    1 S . K W 1
    1 . 1 1 A 1
    1 . . . E 1
    1 1 1 1 1 1
"""

import pytest

from conftest import FixedRandom
from game.collision import CollisionHandler
from game.game_state import GameState


@pytest.fixture
def handler(session, config):
    return CollisionHandler(session, config)


class TestTryMove:
    """Blocking answers."""

    def test_floor_is_open(self, handler, item_grid):
        assert handler.try_move(item_grid, 8.0, 4.0) is False
        assert handler.last_cell == (2, 1)

    def test_wall_blocks(self, handler, item_grid):
        assert handler.try_move(item_grid, 8.0, 8.0) is True

    def test_off_grid_blocks(self, handler, item_grid):
        assert handler.try_move(item_grid, -10.0, 4.0) is True
        assert handler.try_move(item_grid, 4.0, 100.0) is True

    def test_position_rounds_to_nearest_cell(self, handler, item_grid):
        """1.9 units from a cell center is still that cell."""
        assert handler.try_move(item_grid, 4.0 + 1.9, 4.0) is False
        assert handler.last_cell == (1, 1)


class TestPickups:
    """Items are collected by asking about their cell."""

    def test_key_collected_once(self, handler, session, item_grid):
        assert handler.try_move(item_grid, 12.0, 4.0) is False
        assert handler.try_move(item_grid, 12.5, 4.0) is False

        assert session.state.keys_collected == 1
        assert (3, 1) in session.state.collected_coords

    def test_weapon(self, handler, session, item_grid):
        assert handler.try_move(item_grid, 16.0, 4.0) is False
        assert session.state.has_weapon is True
        assert session.state.ammo == 1

    def test_ammo(self, handler, session, item_grid):
        handler.try_move(item_grid, 16.0, 8.0)
        handler.try_move(item_grid, 16.0, 8.0)
        assert session.state.ammo == 1

    def test_pure_check_has_no_side_effects(self, handler, session, item_grid):
        assert handler.is_blocked(item_grid, 12.0, 4.0) is False
        assert handler.is_blocked(item_grid, 0.0, 0.0) is True
        assert session.state.keys_collected == 0


class TestExitCell:
    """The exit blocks movement and may end the level."""

    def test_locked_exit_blocks(self, handler, session, item_grid):
        assert handler.try_move(item_grid, 16.0, 12.0) is True
        assert session.state.phase == GameState.PLAYING

    def test_locked_exit_hint(self, handler, session, item_grid):
        session.rng = FixedRandom(0.99)
        handler.try_move(item_grid, 16.0, 12.0)
        assert session.state.logs[0].message == "Locked! You need 1 more keys"

    def test_open_exit_clears_level(self, handler, session, item_grid):
        handler.try_move(item_grid, 12.0, 4.0)

        assert handler.try_move(item_grid, 16.0, 12.0) is True
        assert session.state.phase == GameState.WIN_LEVEL
        assert session.state.level == 2
