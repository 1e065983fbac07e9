"""
Level Manager - builds each level's maze and actors and drives the frame loop
"""

import logging
import random

from config import DEFAULT_CONFIG
from entities.npc import NPCManager
from entities.player import PlayerController
from entities.pursuer import Pursuer
from game.collision import CollisionHandler
from game.game_state import GameSession, GameState
from maze.generator import generate_maze, pick_pursuer_spawn
from maze.maze_core import find_cells
from utils.constants import START_CELL, EXIT

logger = logging.getLogger(__name__)


class Level:
    """
    One generated maze with its pursuer and bystanders
    """
    def __init__(self, number, session, config=None, rng=None, narrator=None):
        """
        Args:
            number: Level number
            session: GameSession
            config: GameConfig
            rng: random.Random shared by generation and actors
            narrator: Optional callable(text, boss) for the pursuer's lines
        """
        self.number = number
        self.config = config or DEFAULT_CONFIG
        self.rng = rng or random

        self.grid, self.size = generate_maze(number, self.rng, self.config)
        self.start_pos = START_CELL
        exits = find_cells(self.grid, EXIT)
        self.goal_pos = exits[0] if exits else (self.size - 2, self.size - 2)

        spawn = pick_pursuer_spawn(self.grid, self.size, self.rng, self.config)
        self.pursuer = Pursuer(spawn[0], spawn[1], self.config, self.rng, narrator)

        self.npc_manager = NPCManager(self.config, self.rng)
        self.npc_manager.populate(self.grid, session.state.selected_character,
                                  session.state.dead_characters)

    def update(self, dt, player_pos, session):
        """
        Update the level's actors

        Returns:
            dict with events: {'captured', 'shout', 'repathed', 'deaths'}
        """
        events = self.pursuer.update(dt, self.grid, player_pos, session)
        pursuer_pos = (self.pursuer.x, self.pursuer.z)
        events['deaths'] = self.npc_manager.update(dt, pursuer_pos, player_pos, session)
        return events

    def __repr__(self):
        return f"Level(number={self.number}, size={self.size}x{self.size})"


class LevelManager:
    """
    Owns the session, the current level and the player controller

    This is the in-process boundary the renderer and input layer talk to.
    """
    def __init__(self, session=None, config=None, rng=None, narrator=None):
        self.config = config or DEFAULT_CONFIG
        self.rng = rng or random
        self.session = session or GameSession(self.config, self.rng)
        self.narrator = narrator

        self.collision = CollisionHandler(self.session, self.config)
        self.current_level = None
        self.player = None
        self._built_epoch = None

    # ========== LEVELS ==========

    def ensure_level(self):
        """Build a fresh level whenever the session moved to a new level or run"""
        if self.current_level is not None and self._built_epoch == self.session.epoch:
            return self.current_level

        number = self.session.state.level
        self.current_level = Level(number, self.session, self.config, self.rng, self.narrator)
        self.player = PlayerController(self.session, self.collision, config=self.config)
        self._built_epoch = self.session.epoch
        logger.info("Built %r", self.current_level)
        return self.current_level

    def get_current_level(self):
        return self.current_level

    # ========== FRAME LOOP ==========

    def update(self, dt, move=(0.0, 0.0), sprint=False):
        """
        Advance one frame

        Args:
            dt: Delta time in seconds
            move: Movement intent (dx, dz) in world axes
            sprint: Sprint modifier held

        Returns:
            dict with this frame's events, empty outside active play
        """
        session = self.session
        session.update(dt)
        phase = session.state.phase

        if phase == GameState.MENU:
            self.current_level = None
            return {}
        if phase not in (GameState.PLAYING, GameState.STRUGGLE):
            return {}

        level = self.ensure_level()
        if phase == GameState.PLAYING:
            self.player.move(level.grid, move[0], move[1], dt, sprint)
            self.player.update(dt)

        # the exit may have been cleared by this frame's move
        if session.state.phase not in (GameState.PLAYING, GameState.STRUGGLE):
            return {}
        return level.update(dt, self.player.position, session)

    # ========== COMMANDS ==========

    def select_character(self, name):
        return self.session.select_character(name)

    def try_move(self, next_x, next_z):
        """Collision query with pickup/exit side effects; True means blocked"""
        if self.session.state.phase != GameState.PLAYING:
            return True
        level = self.ensure_level()
        return self.collision.try_move(level.grid, next_x, next_z)

    def fire_weapon(self):
        """Fire at the pursuer; True if the shot hit"""
        if self.current_level is None or self.player is None:
            return False
        pursuer = self.current_level.pursuer
        return self.player.fire((pursuer.x, pursuer.z))

    def increment_struggle(self):
        return self.session.increment_struggle()

    def toggle_flashlight(self):
        return self.session.toggle_flashlight()

    def proceed(self):
        return self.session.proceed()

    def reinitialize(self):
        return self.session.reinitialize()

    def snapshot(self):
        """Session fields plus the world positions the renderer needs"""
        snap = self.session.snapshot()
        if self.current_level is not None:
            snap['pursuer'] = self.current_level.pursuer.snapshot()
            snap['grid_size'] = self.current_level.size
        if self.player is not None:
            snap['player'] = self.player.position
        return snap

    def __repr__(self):
        return f"LevelManager(level={self.current_level}, session={self.session})"
