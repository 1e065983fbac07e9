"""
Core grid functions - cell queries and A* pathfinding
Grids are indexed grid[z][x]; z is the row, x the column.
"""

import numpy as np
from utils.constants import WALL, NEIGHBOR_OFFSETS


def as_grid(rows):
    """Build an int8 grid array from nested lists of cell codes"""
    grid = np.array(rows, dtype=np.int8)
    if grid.ndim != 2:
        raise ValueError(f"grid must be 2D, got shape {grid.shape}")
    return grid


def grid_shape(grid):
    """(width, height) of a grid"""
    return len(grid[0]), len(grid)


def in_bounds(grid, x, z):
    """Check if coordinates are within grid bounds"""
    width, height = grid_shape(grid)
    return 0 <= x < width and 0 <= z < height


def is_walkable(grid, x, z):
    """In bounds and not a wall"""
    return in_bounds(grid, x, z) and bool(grid[z][x] != WALL)


def neighbors_walkable(grid, x, z):
    """Get list of walkable 4-connected neighbor cells"""
    res = []
    for dx, dz in NEIGHBOR_OFFSETS:
        nx, nz = x + dx, z + dz
        if is_walkable(grid, nx, nz):
            res.append((nx, nz))
    return res


def find_cells(grid, code):
    """All (x, z) coordinates holding a cell code, row by row"""
    zs, xs = np.nonzero(np.asarray(grid) == code)
    return [(int(x), int(z)) for z, x in zip(zs, xs)]


def manhattan(a, b):
    """Manhattan distance heuristic"""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


# ========== PATHFINDING ==========

class PathNode:
    """Search node; lives for one find_path call"""
    __slots__ = ('x', 'z', 'g', 'h', 'f', 'parent')

    def __init__(self, x, z, g, h, parent=None):
        self.x = x
        self.z = z
        self.g = g
        self.h = h
        self.f = g + h
        self.parent = parent

    @property
    def coord(self):
        return (self.x, self.z)

    def __repr__(self):
        return f"PathNode(({self.x},{self.z}), g={self.g}, f={self.f})"


def reconstruct_path(node):
    """Follow parent links back to the start, return start->goal coordinates"""
    path = []
    cur = node
    while cur is not None:
        path.append(cur.coord)
        cur = cur.parent
    path.reverse()
    return path


def find_path(grid, start, goal):
    """
    A* shortest path over 4-connected walkable cells

    The open list is scanned linearly for the lowest f; the first minimum
    found wins ties. Popped cells are closed for good, and an open neighbor
    is only re-parented when the new g is strictly lower.

    Args:
        grid: 2D cell grid
        start, goal: (x, z) cells

    Returns:
        List of (x, z) from start to goal inclusive, or [] when the goal is
        unreachable, either end is off the grid or on a wall, or start == goal
    """
    sx, sz = start
    gx, gz = goal
    if not is_walkable(grid, sx, sz) or not is_walkable(grid, gx, gz):
        return []
    if (sx, sz) == (gx, gz):
        return []

    width, height = grid_shape(grid)
    closed = np.zeros((height, width), dtype=bool)
    open_list = [PathNode(sx, sz, 0, manhattan(start, goal))]
    open_index = {(sx, sz): open_list[0]}

    while open_list:
        lowest = 0
        for i in range(1, len(open_list)):
            if open_list[i].f < open_list[lowest].f:
                lowest = i
        current = open_list.pop(lowest)
        del open_index[current.coord]

        if current.x == gx and current.z == gz:
            return reconstruct_path(current)

        closed[current.z, current.x] = True

        for nx, nz in neighbors_walkable(grid, current.x, current.z):
            if closed[nz, nx]:
                continue
            g_score = current.g + 1
            neighbor = open_index.get((nx, nz))
            if neighbor is None:
                neighbor = PathNode(nx, nz, g_score, manhattan((nx, nz), goal), current)
                open_list.append(neighbor)
                open_index[(nx, nz)] = neighbor
            elif g_score < neighbor.g:
                neighbor.g = g_score
                neighbor.f = g_score + neighbor.h
                neighbor.parent = current
    return []


def path_length(path):
    """Number of steps in a coordinate path"""
    return max(0, len(path) - 1)
