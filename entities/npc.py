"""
Bystander NPCs - the characters the player did not pick

They wander aimlessly, sometimes call out to a nearby player, and die if
the pursuer gets too close.
"""

import math
import random

from config import DEFAULT_CONFIG
from game.characters import other_characters
from maze.generator import pick_npc_spawn
from utils.helpers import distance, cell_to_world

HINT_LINES = ("The way out is over there!", "He's right behind me!! Run!!")


class NPC:
    """
    One wandering bystander
    """
    def __init__(self, name, x, z, config=None, rng=None):
        self.name = name
        self.x = x
        self.z = z
        self.config = config or DEFAULT_CONFIG
        self.rng = rng or random

        self.target = None
        self.alive = True
        self.message = ''
        self.message_timer = 0.0

    def update(self, dt, pursuer_pos, player_pos, session):
        """
        Args:
            dt: Delta time in seconds
            pursuer_pos, player_pos: World positions (x, z)
            session: GameSession, told about deaths

        Returns:
            True if the NPC died this frame
        """
        if not self.alive:
            return False

        if self.message_timer > 0:
            self.message_timer -= dt
            if self.message_timer <= 0:
                self.message = ''

        if distance(self.x, self.z, *pursuer_pos) < self.config.npc_kill_distance:
            self.alive = False
            self.message = "Aaaah!!!"
            session.kill_character(self.name)
            return True

        self._wander(dt)

        if distance(self.x, self.z, *player_pos) < self.config.npc_talk_distance and not self.message:
            self.message = self.rng.choice(HINT_LINES)
            self.message_timer = self.config.npc_message_seconds

        return False

    def _wander(self, dt):
        if self.target is None:
            angle = self.rng.random() * math.pi * 2
            reach = self.rng.random() * self.config.npc_wander_radius
            self.target = (self.x + math.cos(angle) * reach, self.z + math.sin(angle) * reach)
            return

        tx, tz = self.target
        dx, dz = tx - self.x, tz - self.z
        remaining = math.hypot(dx, dz)
        if remaining < self.config.npc_arrive_distance:
            self.target = None
            return

        step = min(self.config.npc_speed * dt, remaining)
        self.x += dx / remaining * step
        self.z += dz / remaining * step

    def __repr__(self):
        return f"NPC({self.name}, pos=({self.x:.1f},{self.z:.1f}), alive={self.alive})"


class NPCManager:
    """
    Manages the level's bystanders
    """
    def __init__(self, config=None, rng=None):
        self.config = config or DEFAULT_CONFIG
        self.rng = rng or random
        self.npcs = []

    def populate(self, grid, selected_character, dead_characters=()):
        """Spawn everyone but the player's character; the already dead stay dead"""
        self.npcs = []
        for name in other_characters(selected_character):
            cx, cz = pick_npc_spawn(grid, self.rng, self.config.npc_spawn_attempts)
            x, z = cell_to_world(cx, cz, self.config.cell_size)
            npc = NPC(name, x, z, self.config, self.rng)
            npc.alive = name not in dead_characters
            self.npcs.append(npc)
        return self.npcs

    def update(self, dt, pursuer_pos, player_pos, session):
        """Returns names of NPCs that died this frame"""
        deaths = []
        for npc in self.npcs:
            if npc.update(dt, pursuer_pos, player_pos, session):
                deaths.append(npc.name)
        return deaths

    def alive(self):
        return [npc for npc in self.npcs if npc.alive]

    def __repr__(self):
        return f"NPCManager(npcs={len(self.npcs)}, alive={len(self.alive())})"
