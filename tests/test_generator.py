"""Unit tests for maze generation.

Tests cover:
- Grid size, border and the single START / EXIT
- Full connectivity, checked with a flood fill independent of the generator
- Item counts and the start-quadrant restriction
- Read-only output, argument validation, seeded repeatability
- Spawn pickers
"""

import random
from collections import deque

import numpy as np
import pytest

from config import GameConfig
from maze.generator import (
    generate_maze, place_items, ammo_count, pick_pursuer_spawn, pick_npc_spawn,
    carve_backtracker
)
from maze.distance_map import distance_map
from utils.constants import EMPTY, WALL, START, EXIT, KEY, WEAPON, AMMO, START_CELL


def flood_fill(grid, start):
    """Plain BFS over non-wall cells."""
    height, width = grid.shape
    seen = {start}
    queue = deque([start])
    while queue:
        x, z = queue.popleft()
        for dx, dz in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nx, nz = x + dx, z + dz
            if 0 <= nx < width and 0 <= nz < height and grid[nz, nx] != WALL and (nx, nz) not in seen:
                seen.add((nx, nz))
                queue.append((nx, nz))
    return seen


def open_cells(grid):
    zs, xs = np.nonzero(grid != WALL)
    return {(int(x), int(z)) for z, x in zip(zs, xs)}


def cells_of(grid, code):
    zs, xs = np.nonzero(grid == code)
    return [(int(x), int(z)) for z, x in zip(zs, xs)]


class TestGenerateMaze:
    """Structural properties of a generated level."""

    def test_size_grows_with_level(self, rng):
        for level in (1, 2, 5):
            grid, size = generate_maze(level, rng)
            assert size == 10 + 2 * level
            assert grid.shape == (size, size)

    def test_border_is_wall(self, rng):
        grid, _ = generate_maze(3, rng)
        assert np.all(grid[0, :] == WALL)
        assert np.all(grid[-1, :] == WALL)
        assert np.all(grid[:, 0] == WALL)
        assert np.all(grid[:, -1] == WALL)

    def test_single_start_and_exit(self, rng):
        grid, size = generate_maze(2, rng)
        assert cells_of(grid, START) == [START_CELL]
        assert cells_of(grid, EXIT) == [(size - 2, size - 2)]

    def test_exit_approach_is_open(self, rng):
        grid, size = generate_maze(1, rng)
        e = size - 2
        assert grid[e, e - 1] != WALL
        assert grid[e - 1, e] != WALL

    def test_everything_reachable(self, rng):
        for level in range(1, 6):
            grid, _ = generate_maze(level, rng)
            assert flood_fill(grid, START_CELL) == open_cells(grid)

    @pytest.mark.slow
    def test_everything_reachable_sweep(self):
        for seed in range(25):
            local = random.Random(seed)
            for level in range(1, 11):
                grid, _ = generate_maze(level, local)
                assert flood_fill(grid, START_CELL) == open_cells(grid), (seed, level)

    def test_item_counts(self, rng):
        for level in (1, 3, 6):
            grid, _ = generate_maze(level, rng)
            assert len(cells_of(grid, KEY)) <= level
            assert len(cells_of(grid, WEAPON)) <= 1
            assert len(cells_of(grid, AMMO)) <= 2

    def test_keys_placed_on_normal_levels(self, rng):
        """A level has plenty of floor, so all keys fit."""
        grid, _ = generate_maze(4, rng)
        assert len(cells_of(grid, KEY)) == 4

    def test_items_avoid_start_quadrant(self, rng):
        grid, _ = generate_maze(5, rng)
        for code in (KEY, WEAPON, AMMO):
            for x, z in cells_of(grid, code):
                assert x > 3 or z > 3

    def test_grid_is_read_only(self, rng):
        grid, _ = generate_maze(1, rng)
        with pytest.raises(ValueError):
            grid[1, 1] = EMPTY

    def test_level_must_be_positive(self, rng):
        with pytest.raises(ValueError):
            generate_maze(0, rng)

    def test_seeded_generation_repeats(self):
        first, _ = generate_maze(3, random.Random(99))
        second, _ = generate_maze(3, random.Random(99))
        assert np.array_equal(first, second)

    def test_config_changes_size(self, rng):
        grid, size = generate_maze(1, rng, GameConfig(base_size=6))
        assert size == 8
        assert flood_fill(grid, START_CELL) == open_cells(grid)


class TestCarving:
    """The backtracker alone gives a perfect maze."""

    def test_perfect_maze_is_a_tree(self, rng):
        size = 11
        grid = np.full((size, size), WALL, dtype=np.int8)
        carve_backtracker(grid, size, rng)

        cells = open_cells(grid)
        edges = 0
        for x, z in cells:
            if (x + 1, z) in cells:
                edges += 1
            if (x, z + 1) in cells:
                edges += 1
        assert edges == len(cells) - 1
        assert flood_fill(grid, START_CELL) == cells


class TestPlaceItems:
    """Rejection sampling of item cells."""

    def test_starved_placement_places_fewer(self, rng):
        """No empty cells outside the start quadrant: nothing is placed, no error."""
        grid = np.full((8, 8), WALL, dtype=np.int8)
        grid[1:4, 1:4] = EMPTY
        placed = place_items(grid, 8, KEY, 3, rng, attempts=200)
        assert placed == []
        assert not np.any(grid == KEY)

    def test_only_empty_cells_are_used(self, rng):
        grid = np.full((10, 10), EMPTY, dtype=np.int8)
        grid[0, :] = grid[-1, :] = grid[:, 0] = grid[:, -1] = WALL
        grid[8, 8] = EXIT
        placed = place_items(grid, 10, KEY, 20, rng)
        assert len(placed) == 20
        assert grid[8, 8] == EXIT
        for x, z in placed:
            assert grid[z, x] == KEY

    def test_ammo_count_range(self):
        counts = {ammo_count(random.Random(seed)) for seed in range(50)}
        assert counts == {1, 2}


class TestSpawns:
    """Pursuer and NPC spawn selection."""

    def test_pursuer_spawn_far_and_reachable(self, rng, config):
        grid, size = generate_maze(3, rng)
        x, z = pick_pursuer_spawn(grid, size, rng, config)

        assert grid[z, x] != WALL
        assert abs(x - 1) + abs(z - 1) > config.spawn_min_distance
        assert distance_map(grid, START_CELL)[z, x] >= 0

    def test_pursuer_spawn_fallback(self, rng):
        """A room too small to be far enough falls back beside the exit."""
        grid = np.full((8, 8), EMPTY, dtype=np.int8)
        grid[0, :] = grid[-1, :] = grid[:, 0] = grid[:, -1] = WALL
        assert pick_pursuer_spawn(grid, 8, rng) == (6, 6)

    def test_npc_spawn_on_empty(self, rng, open_grid):
        x, z = pick_npc_spawn(open_grid, rng)
        assert open_grid[z, x] == EMPTY
