"""
Distance map - BFS step counts over the walkable grid
Compiled with numba; used for spawn selection and connectivity checks.
"""

import numpy as np
from numba import njit, int32

from utils.constants import WALL


@njit(cache=True)
def distance_field(grid, sx, sz):
    """
    Breadth-first step distance from (sx, sz) to every cell.

    Args:
        grid: 2D int8 array of cell codes, indexed [z, x]
        sx, sz: source cell

    Returns:
        distances: 2D int32 array, -1 for walls and unreachable cells
    """
    height, width = grid.shape
    dist = np.full((height, width), -1, dtype=np.int32)
    if sx < 0 or sz < 0 or sx >= width or sz >= height:
        return dist
    if grid[sz, sx] == WALL:
        return dist

    dxs = (0, 0, 1, -1)
    dzs = (1, -1, 0, 0)

    queue_x = np.empty(height * width, dtype=np.int32)
    queue_z = np.empty(height * width, dtype=np.int32)
    head = 0
    tail = 1
    queue_x[0] = sx
    queue_z[0] = sz
    dist[sz, sx] = 0

    while head < tail:
        x = queue_x[head]
        z = queue_z[head]
        head += 1
        for k in range(4):
            nx = x + dxs[k]
            nz = z + dzs[k]
            if nx < 0 or nz < 0 or nx >= width or nz >= height:
                continue
            if grid[nz, nx] == WALL or dist[nz, nx] >= 0:
                continue
            dist[nz, nx] = dist[z, x] + int32(1)
            queue_x[tail] = nx
            queue_z[tail] = nz
            tail += 1

    return dist


def distance_map(grid, start):
    """Distance field from a (x, z) start over any grid-like input"""
    cells = np.ascontiguousarray(grid, dtype=np.int8)
    return distance_field(cells, int(start[0]), int(start[1]))


def reachable_mask(grid, start):
    """Boolean mask of cells reachable from start"""
    return distance_map(grid, start) >= 0


def unreachable_open_cells(grid, start):
    """(x, z) of every non-wall cell that cannot be reached from start"""
    cells = np.asarray(grid)
    stranded = (cells != WALL) & ~reachable_mask(cells, start)
    zs, xs = np.nonzero(stranded)
    return [(int(x), int(z)) for z, x in zip(zs, xs)]
