"""
Color palette for Falah's Maze
"""

# Background colors
COLOR_BG = (10, 10, 12)           # Main background
COLOR_MAZE_BG = (22, 20, 18)      # Floor
COLOR_PANEL_BG = (12, 14, 18)     # HUD panel

# Terrain
COLOR_WALL = (70, 64, 58)
COLOR_START = (40, 70, 120)
COLOR_GOAL = (60, 200, 120)       # Exit

# Items
COLOR_KEY = (255, 220, 80)
COLOR_WEAPON = (180, 180, 200)
COLOR_AMMO = (200, 140, 60)

# Actors
COLOR_PLAYER = (70, 140, 255)
COLOR_FALAH = (200, 30, 30)
COLOR_SAIF = (120, 40, 160)
COLOR_STUNNED = (230, 220, 60)
COLOR_NPC = (150, 150, 150)
COLOR_NPC_DEAD = (110, 20, 20)

# Text
COLOR_TEXT = (210, 210, 210)
COLOR_TEXT_HIGHLIGHT = (255, 230, 160)
COLOR_DANGER = (255, 60, 60)
