"""
Collision detection and handling

try_move answers "is this position blocked?" and, as a side channel,
collects items and checks the exit for the cell being entered.
"""

from config import DEFAULT_CONFIG
from maze.maze_core import in_bounds
from utils.constants import WALL, EXIT, KEY, WEAPON, AMMO
from utils.helpers import world_to_cell


class CollisionHandler:
    """
    Resolves player movement against the grid and the session
    """
    def __init__(self, session, config=None):
        """
        Args:
            session: GameSession that receives pickup and exit actions
            config: GameConfig for the world scale
        """
        self.session = session
        self.config = config or DEFAULT_CONFIG
        self.last_cell = None
        self.last_result = None

    def try_move(self, grid, next_x, next_z):
        """
        Check a world position the player wants to step into

        Args:
            grid: Current level grid
            next_x, next_z: Candidate world position

        Returns:
            True if the move is blocked
        """
        cx, cz = world_to_cell(next_x, next_z, self.config.cell_size)
        self.last_cell = (cx, cz)
        self.last_result = self._resolve(grid, cx, cz)
        return self.last_result

    def _resolve(self, grid, cx, cz):
        if not in_bounds(grid, cx, cz):
            return True

        cell = grid[cz][cx]
        if cell == WALL:
            return True

        session = self.session
        if cell == KEY:
            session.collect_key(cx, cz)
        elif cell == WEAPON:
            session.collect_weapon()
        elif cell == AMMO:
            session.collect_ammo(cx, cz)
        elif cell == EXIT:
            if not session.reach_exit():
                session.locked_exit_hint()
            # the exit is solid either way; clearing it ends the level
            return True

        return False

    def is_blocked(self, grid, x, z):
        """Pure wall/bounds test with no pickups"""
        cx, cz = world_to_cell(x, z, self.config.cell_size)
        return not in_bounds(grid, cx, cz) or bool(grid[cz][cx] == WALL)
