"""
Player controller - movement intent, flashlight battery and firing
"""

import math

from config import DEFAULT_CONFIG
from game.characters import get_traits
from game.game_state import GameState
from utils.constants import START_CELL
from utils.helpers import cell_to_world, normalize


def aim_hits(origin, facing, target, max_range=20.0, cone=0.3):
    """
    Check whether a shot from origin along facing would hit target

    Args:
        origin, target: World positions (x, z)
        facing: Direction vector (x, z), need not be normalized
        max_range: Farthest hit distance
        cone: Max angle in radians between facing and the target

    Returns:
        True if target is in range and inside the cone
    """
    tx, tz = target[0] - origin[0], target[1] - origin[1]
    dist = math.hypot(tx, tz)
    fx, fz = normalize(*facing)
    if dist == 0:
        return True
    if dist >= max_range or (fx == 0 and fz == 0):
        return False
    cos_angle = (tx * fx + tz * fz) / dist
    angle = math.acos(max(-1.0, min(1.0, cos_angle)))
    return angle < cone


class PlayerController:
    """
    Moves the player through the grid via the collision side channel
    """
    def __init__(self, session, collision_handler, character=None, config=None):
        """
        Args:
            session: GameSession
            collision_handler: CollisionHandler for try_move
            character: Selected character name (traits lookup)
            config: GameConfig
        """
        self.session = session
        self.collision = collision_handler
        self.config = config or DEFAULT_CONFIG
        self.traits = get_traits(character or session.state.selected_character)

        self.x, self.z = cell_to_world(START_CELL[0], START_CELL[1], self.config.cell_size)
        self.facing = (0.0, -1.0)
        self.battery_accum = 0.0

    @property
    def position(self):
        return self.x, self.z

    def reset_position(self, cell=START_CELL):
        self.x, self.z = cell_to_world(cell[0], cell[1], self.config.cell_size)
        self.facing = (0.0, -1.0)
        self.battery_accum = 0.0

    def move(self, grid, dx, dz, dt, sprint=False):
        """
        Apply a movement intent, one axis at a time so walls can be slid along

        Args:
            grid: Level grid
            dx, dz: Intent direction (any length, zero means stand still)
            dt: Delta time in seconds
            sprint: Use sprint speed

        Returns:
            True if the player moved on either axis
        """
        if self.session.state.phase != GameState.PLAYING:
            return False
        ux, uz = normalize(dx, dz)
        if ux == 0 and uz == 0:
            return False
        self.facing = (ux, uz)

        speed = self.config.sprint_speed if sprint else self.config.walk_speed
        step = speed * self.traits.speed * dt
        moved = False

        if ux:
            next_x = self.x + ux * step
            if not self.collision.try_move(grid, next_x, self.z):
                self.x = next_x
                moved = True

        # clearing the exit on the first axis leaves PLAYING
        if not uz or self.session.state.phase != GameState.PLAYING:
            return moved

        next_z = self.z + uz * step
        if not self.collision.try_move(grid, self.x, next_z):
            self.z = next_z
            moved = True
        return moved

    def update(self, dt):
        """Drain the flashlight battery once per elapsed whole second"""
        state = self.session.state
        if not state.flashlight_on:
            return
        self.battery_accum += dt
        if self.battery_accum >= 1.0:
            self.battery_accum = 0.0
            self.session.drain_battery(self.config.battery_drain_per_second * self.traits.battery)

    def fire(self, pursuer_pos):
        """
        Shoot along the facing direction

        Returns:
            True if the shot connected with the pursuer
        """
        if self.session.state.phase != GameState.PLAYING:
            return False
        if not self.session.fire_weapon():
            return False
        if aim_hits(self.position, self.facing, pursuer_pos,
                    self.config.aim_range, self.config.aim_cone):
            return self.session.apply_hit(self.session.state.active_boss)
        return False

    def __repr__(self):
        return f"PlayerController(pos=({self.x:.1f},{self.z:.1f}), speed={self.traits.speed})"
