"""
Maze generation - recursive backtracker carve, loop punching and item placement
"""

import logging
import random

import numpy as np

from config import DEFAULT_CONFIG
from utils.constants import (
    EMPTY, WALL, START, EXIT, KEY, WEAPON, AMMO,
    CARVE_DIRS, NEIGHBOR_OFFSETS, START_CELL, CELL_NAMES
)
from maze.distance_map import distance_map

logger = logging.getLogger(__name__)


def _interior(size, x, z):
    """Inside the outer wall ring"""
    return 0 < x < size - 1 and 0 < z < size - 1


def random_interior_cell(size, rng):
    """Random (x, z) strictly inside the border"""
    return rng.randrange(1, size - 1), rng.randrange(1, size - 1)


# ========== CARVING ==========

def carve_backtracker(grid, size, rng, start=START_CELL):
    """
    Depth-first backtracker, two cells per step.

    Each visited cell shuffles the four directions once and tries them in
    that order; an explicit stack replaces recursion so large levels do not
    hit the interpreter's recursion limit.
    """
    sx, sz = start
    grid[sz, sx] = EMPTY
    stack = [(sx, sz, _shuffled_dirs(rng))]

    while stack:
        cx, cz, dirs = stack[-1]
        if not dirs:
            stack.pop()
            continue

        dx, dz = dirs.pop()
        nx, nz = cx + dx * 2, cz + dz * 2
        if _interior(size, nx, nz) and grid[nz, nx] == WALL:
            grid[cz + dz, cx + dx] = EMPTY
            grid[nz, nx] = EMPTY
            stack.append((nx, nz, _shuffled_dirs(rng)))


def _shuffled_dirs(rng):
    dirs = list(CARVE_DIRS)
    rng.shuffle(dirs)
    # popped from the end, so reverse to try them in shuffled order
    dirs.reverse()
    return dirs


def punch_openings(grid, size, count, rng):
    """
    Force random interior cells open to add loops and shortcuts.

    A punched cell with no open neighbor (a wall pillar between passages)
    also opens one interior neighbor so it joins the maze instead of
    becoming an unreachable pocket.
    """
    for _ in range(count):
        rx, rz = random_interior_cell(size, rng)
        grid[rz, rx] = EMPTY

        open_neighbors = [
            (rx + dx, rz + dz) for dx, dz in NEIGHBOR_OFFSETS
            if grid[rz + dz, rx + dx] != WALL
        ]
        if open_neighbors:
            continue

        candidates = [
            (rx + dx, rz + dz) for dx, dz in NEIGHBOR_OFFSETS
            if _interior(size, rx + dx, rz + dz)
        ]
        bx, bz = rng.choice(candidates)
        grid[bz, bx] = EMPTY


def carve_exit(grid, size):
    """Open a 2-wide approach to the far corner and mark it EXIT"""
    ex, ez = size - 2, size - 2
    grid[ez, ex] = EMPTY
    grid[ez, ex - 1] = EMPTY
    grid[ez - 1, ex] = EMPTY
    grid[ez, ex] = EXIT
    return ex, ez


# ========== ITEMS ==========

def place_items(grid, size, code, count, rng, attempts=1000, quadrant=3):
    """
    Rejection-sample empty interior cells for an item.

    Cells inside the start quadrant (x <= quadrant and z <= quadrant) are
    skipped. Gives up after `attempts` draws, so fewer items than requested
    may be placed.

    Returns:
        List of (x, z) where the item was placed
    """
    placed = []
    tries = 0
    while len(placed) < count and tries < attempts:
        kx, kz = random_interior_cell(size, rng)
        if grid[kz, kx] == EMPTY and (kx > quadrant or kz > quadrant):
            grid[kz, kx] = code
            placed.append((kx, kz))
        tries += 1

    if len(placed) < count:
        logger.debug("Placed %d/%d %s after %d attempts", len(placed), count, CELL_NAMES[code], tries)
    return placed


def ammo_count(rng, roll=3):
    """1 or 2 ammo packs per level"""
    return max(1, int(rng.random() * roll))


# ========== LEVEL ==========

def generate_maze(level, rng=None, config=None):
    """
    Generate the grid for a level

    Args:
        level: Level number (>= 1)
        rng: random.Random instance, module random when None
        config: GameConfig, DEFAULT_CONFIG when None

    Returns:
        (grid, size): read-only int8 array indexed [z, x] and its side length
    """
    if level < 1:
        raise ValueError(f"level must be >= 1, got {level}")
    rng = rng or random
    config = config or DEFAULT_CONFIG

    size = config.grid_size(level)
    grid = np.full((size, size), WALL, dtype=np.int8)

    carve_backtracker(grid, size, rng)
    punch_openings(grid, size, config.extra_openings_factor * size, rng)

    sx, sz = START_CELL
    grid[sz, sx] = START
    carve_exit(grid, size)

    attempts = config.placement_attempts
    quadrant = config.start_quadrant
    keys = place_items(grid, size, KEY, level, rng, attempts, quadrant)
    weapons = place_items(grid, size, WEAPON, config.weapon_count, rng, attempts, quadrant)
    ammo = place_items(grid, size, AMMO, ammo_count(rng, config.ammo_roll), rng, attempts, quadrant)

    grid.flags.writeable = False
    logger.debug("Level %d maze %dx%d: %d keys, %d weapons, %d ammo",
                 level, size, size, len(keys), len(weapons), len(ammo))
    return grid, size


# ========== SPAWNS ==========

def pick_pursuer_spawn(grid, size, rng=None, config=None):
    """
    Random walkable cell far from the start, reachable from it.

    Falls back to the EXIT cell itself, (size-2, size-2), when sampling fails.
    """
    rng = rng or random
    config = config or DEFAULT_CONFIG
    sx, sz = START_CELL
    dist = distance_map(grid, START_CELL)

    for _ in range(config.spawn_attempts):
        x, z = random_interior_cell(size, rng)
        far = abs(x - sx) + abs(z - sz) > config.spawn_min_distance
        if grid[z, x] != WALL and far and dist[z, x] >= 0:
            return x, z
    return size - 2, size - 2


def pick_npc_spawn(grid, rng=None, attempts=50):
    """Random EMPTY cell; the last sample is kept even if it missed"""
    rng = rng or random
    height, width = grid.shape
    x = z = 1
    for _ in range(attempts):
        x = rng.randrange(width)
        z = rng.randrange(height)
        if grid[z, x] == EMPTY:
            break
    return x, z
