"""
Shared pytest fixtures for the maze game tests.

This module provides:
- rng: seeded random.Random so generation and AI timing are repeatable
- open_grid / snake_grid / item_grid: small hand-built grids
- session: a GameSession already in PLAYING
- Custom markers for test categorization
"""

import random
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from config import GameConfig  # noqa: E402
from game.game_state import GameSession  # noqa: E402
from maze.maze_core import as_grid  # noqa: E402


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# =============================================================================
# Helpers
# =============================================================================


class FixedRandom:
    """Stand-in rng whose random() always returns the same value."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value

    def choice(self, seq):
        return seq[0]


def room(size):
    """Square grid with a wall border and an open interior."""
    rows = []
    for z in range(size):
        row = []
        for x in range(size):
            border = x in (0, size - 1) or z in (0, size - 1)
            row.append(1 if border else 0)
        rows.append(row)
    return as_grid(rows)


# =============================================================================
# Grid Fixtures
# =============================================================================


@pytest.fixture
def open_grid():
    """9x9 room: walls around a 7x7 open floor."""
    return room(9)


@pytest.fixture
def snake_grid():
    """Single winding corridor from (1,1) to (5,5), 16 steps long."""
    return as_grid([
        [1, 1, 1, 1, 1, 1, 1],
        [1, 0, 0, 0, 0, 0, 1],
        [1, 1, 1, 1, 1, 0, 1],
        [1, 0, 0, 0, 0, 0, 1],
        [1, 0, 1, 1, 1, 1, 1],
        [1, 0, 0, 0, 0, 0, 1],
        [1, 1, 1, 1, 1, 1, 1],
    ])


@pytest.fixture
def item_grid():
    """Small level with every item code and a reachable exit."""
    return as_grid([
        [1, 1, 1, 1, 1, 1],
        [1, 2, 0, 4, 5, 1],
        [1, 0, 1, 1, 6, 1],
        [1, 0, 0, 0, 3, 1],
        [1, 1, 1, 1, 1, 1],
    ])


# =============================================================================
# Session Fixtures
# =============================================================================


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def config():
    """Default tunables."""
    return GameConfig()


@pytest.fixture
def session(config):
    """A session that has started a run as Abdullah."""
    game = GameSession(config, random.Random(7))
    game.select_character("Abdullah")
    return game
