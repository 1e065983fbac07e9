"""
Global constants for Falah's Maze
"""

# Screen settings (pygame front end)
CELL_PIXELS = 24
FPS = 60
PANEL_H = 110

# Grid cell codes
EMPTY = 0
WALL = 1
START = 2
EXIT = 3
KEY = 4
WEAPON = 5
AMMO = 6

CELL_NAMES = {
    EMPTY: "EMPTY",
    WALL: "WALL",
    START: "START",
    EXIT: "EXIT",
    KEY: "KEY",
    WEAPON: "WEAPON",
    AMMO: "AMMO",
}

# 4-connected neighbor offsets (dx, dz), in the order the pathfinder expands them
NEIGHBOR_OFFSETS = [
    (0, 1),
    (0, -1),
    (1, 0),
    (-1, 0),
]

# Carving steps for the backtracker (two cells at a time)
CARVE_DIRS = [
    (0, 1),
    (1, 0),
    (0, -1),
    (-1, 0),
]

# Player always starts here
START_CELL = (1, 1)

# Narration lines
FALAH_SHOUT = "Nobody skips class!!"
SAIF_SHOUT = "I am your nightmare!!"
CAPTURE_LINE = "No absence without an excuse"
