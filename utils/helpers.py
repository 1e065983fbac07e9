"""
Helper utility functions for Falah's Maze
"""

import math


def clamp(value, min_value, max_value):
    """Clamp a value between min and max"""
    return max(min_value, min(value, max_value))


def distance(x1, z1, x2, z2):
    """Euclidean distance on the floor plane"""
    return math.hypot(x2 - x1, z2 - z1)


def normalize(dx, dz):
    """Unit vector in the direction (dx, dz); zero vector stays zero"""
    length = math.hypot(dx, dz)
    if length == 0:
        return 0.0, 0.0
    return dx / length, dz / length


def world_to_cell(x, z, cell_size):
    """Grid cell containing a world position (cells are centered on multiples of cell_size)"""
    return (int(math.floor((x + cell_size / 2) / cell_size)),
            int(math.floor((z + cell_size / 2) / cell_size)))


def cell_to_world(cx, cz, cell_size):
    """World position of a cell center"""
    return cx * cell_size, cz * cell_size


def coord_key(x, z):
    """Hashable key for a collected-coordinates set"""
    return (int(x), int(z))


def format_time(seconds):
    """Format seconds to MM:SS string"""
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"


def pulse(time, frequency=1.0):
    """Generate a pulsing value (0-1) over time"""
    return (math.sin(time * frequency * math.pi * 2) + 1) / 2
