"""
Pursuer - the chasing antagonist (Falah, later Mr. Saif)

Per-frame behavior machine layered over the session's boss identity:
transforming -> collapse, stunned -> sway, otherwise chase along an A*
path refreshed on a fixed cadence, falling back to a straight line.
"""

import logging
import math
import random

from config import DEFAULT_CONFIG
from game.game_state import BossType, GameState
from maze.maze_core import find_path, is_walkable
from utils.constants import FALAH_SHOUT, SAIF_SHOUT, CAPTURE_LINE
from utils.helpers import distance, normalize, world_to_cell, cell_to_world

logger = logging.getLogger(__name__)


def base_speed(boss, config=None):
    """Speed before level and rage scaling"""
    config = config or DEFAULT_CONFIG
    if boss == BossType.SAIF:
        return config.saif_base_speed
    return config.falah_base_speed


def pursuer_speed(boss, level, rage_multiplier, config=None):
    """World units per second"""
    config = config or DEFAULT_CONFIG
    return base_speed(boss, config) * (1 + config.level_speed_factor * level) * rage_multiplier


class Pursuer:
    """
    Chasing enemy driven by the session's boss identity
    """
    def __init__(self, cell_x, cell_z, config=None, rng=None, narrator=None):
        """
        Args:
            cell_x, cell_z: Spawn cell
            config: GameConfig
            rng: random.Random for narration timing
            narrator: Optional callable(text, boss) for spoken lines
        """
        self.config = config or DEFAULT_CONFIG
        self.rng = rng or random
        self.narrator = narrator

        self.start_cell = (cell_x, cell_z)
        self.x, self.z = cell_to_world(cell_x, cell_z, self.config.cell_size)

        # Pathing
        self.path = []
        self.target_index = 0
        self.path_timer = self.config.path_refresh_interval  # path on the first frame
        self.is_moving = False

        # Narration
        self.shout_timer = self.config.shout_initial

        # Pose for the renderer
        self.elapsed = 0.0
        self.heading = 0.0
        self.tilt = 0.0
        self.sway = 0.0
        self.height = 1.0

    @property
    def cell(self):
        return world_to_cell(self.x, self.z, self.config.cell_size)

    def distance_to(self, x, z):
        return distance(self.x, self.z, x, z)

    def speed(self, session):
        state = session.state
        return pursuer_speed(state.active_boss, state.level, state.rage_multiplier, self.config)

    def update(self, dt, grid, player_pos, session):
        """
        Update pursuer behavior for one frame

        Args:
            dt: Delta time in seconds
            grid: Level grid
            player_pos: Player world position (x, z)
            session: GameSession

        Returns:
            dict with events: {'captured': bool, 'shout': str or None, 'repathed': bool}
        """
        events = {'captured': False, 'shout': None, 'repathed': False}
        self.elapsed += dt
        self.is_moving = False
        state = session.state

        if state.active_boss == BossType.TRANSFORMING:
            self._collapse(dt)
            return events

        if session.is_pursuer_stunned():
            self.sway = math.sin(self.elapsed * 10) * 0.2
            return events

        # Caught players are held, not chased
        if state.phase != GameState.PLAYING:
            return events

        self._stand_up()
        px, pz = player_pos
        dist = self.distance_to(px, pz)

        if dist < self.config.shout_distance:
            events['shout'] = self._tick_shout(dt, state.active_boss)

        if dist < self.config.capture_distance:
            if session.catch_player():
                events['captured'] = True
                self._say(CAPTURE_LINE, state.active_boss)
            return events

        self.path_timer += dt
        if self.path_timer > self.config.path_refresh_interval:
            self.path_timer = 0.0
            events['repathed'] = self._refresh_path(grid, px, pz)

        step = self.speed(session) * dt
        if len(self.path) > self.target_index:
            self._follow_path(step)
        else:
            self._move_direct(grid, px, pz, step)

        return events

    # ========== MOVEMENT ==========

    def _refresh_path(self, grid, px, pz):
        """Re-plan to the player's cell; an empty result keeps the old path"""
        cell_size = self.config.cell_size
        start = self.cell
        goal = world_to_cell(px, pz, cell_size)
        cells = find_path(grid, start, goal)
        if not cells:
            return False
        self.path = [cell_to_world(cx, cz, cell_size) for cx, cz in cells]
        self.target_index = 1
        return True

    def _follow_path(self, step):
        tx, tz = self.path[self.target_index]
        dx, dz = tx - self.x, tz - self.z
        remaining = math.hypot(dx, dz)

        if remaining <= self.config.waypoint_tolerance:
            self.target_index += 1
            return

        ux, uz = dx / remaining, dz / remaining
        move = min(step, remaining)
        self.x += ux * move
        self.z += uz * move
        self.heading = math.atan2(ux, uz)
        self.is_moving = True

    def _move_direct(self, grid, px, pz, step):
        """Straight at the player unless the next position is inside a wall"""
        ux, uz = normalize(px - self.x, pz - self.z)
        nx = self.x + ux * step
        nz = self.z + uz * step
        cx, cz = world_to_cell(nx, nz, self.config.cell_size)
        if not is_walkable(grid, cx, cz):
            return
        self.x, self.z = nx, nz
        if ux or uz:
            self.heading = math.atan2(ux, uz)
            self.is_moving = True

    # ========== ANIMATION ==========

    def _collapse(self, dt):
        target = -math.pi / 2
        if self.tilt > target:
            self.tilt = max(target, self.tilt - 3 * dt)
        self.height = max(0.5, self.height - 2 * dt)
        self.sway = math.sin(self.elapsed * 50) * 0.1

    def _stand_up(self):
        self.tilt = 0.0
        self.sway = 0.0
        self.height = 1.0

    # ========== NARRATION ==========

    def _tick_shout(self, dt, boss):
        self.shout_timer -= dt
        if self.shout_timer > 0:
            return None
        self.shout_timer = self.rng.random() * self.config.shout_spread + self.config.shout_min
        line = SAIF_SHOUT if boss == BossType.SAIF else FALAH_SHOUT
        self._say(line, boss)
        return line

    def _say(self, text, boss):
        logger.debug("%s: %s", boss.name, text)
        if self.narrator is not None:
            self.narrator(text, boss)

    # ========== STATE ==========

    def reset(self):
        """Back to the spawn cell with no plan"""
        self.x, self.z = cell_to_world(self.start_cell[0], self.start_cell[1], self.config.cell_size)
        self.path = []
        self.target_index = 0
        self.path_timer = self.config.path_refresh_interval
        self.shout_timer = self.config.shout_initial
        self.is_moving = False
        self._stand_up()

    def snapshot(self):
        return {
            'x': self.x,
            'z': self.z,
            'cell': self.cell,
            'heading': self.heading,
            'tilt': self.tilt,
            'sway': self.sway,
            'height': self.height,
            'moving': self.is_moving,
        }

    def __repr__(self):
        return f"Pursuer(pos=({self.x:.1f},{self.z:.1f}), path={len(self.path)})"
