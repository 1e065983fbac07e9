"""
Game State Machine - the session's phases, economy and struggle mini-game

GameSession is the single owner of SessionState. Everything else reads the
state or calls one of the session's actions; nothing writes fields directly.
"""

import itertools
import logging
import random
from collections import deque, namedtuple
from enum import Enum, auto

from config import DEFAULT_CONFIG
from game.characters import CHARACTER_TRAITS
from game.events import EventKind, EventQueue
from utils.helpers import clamp, coord_key

logger = logging.getLogger(__name__)


class GameState(Enum):
    """Game phases"""
    MENU = auto()
    PLAYING = auto()
    STRUGGLE = auto()
    JUMPSCARE = auto()
    GAME_OVER = auto()
    WIN_LEVEL = auto()


class BossType(Enum):
    """Pursuer identity, independent of the game phase"""
    FALAH = auto()
    TRANSFORMING = auto()
    SAIF = auto()


LogMessage = namedtuple('LogMessage', ['id', 'message', 'timestamp'])


class GameStats:
    """Run statistics shown on the game over screen"""
    def __init__(self):
        self.level = 1
        self.time_survived = 0
        self.escapes = 0

    def __repr__(self):
        return f"GameStats(level={self.level}, time={self.time_survived}, escapes={self.escapes})"


class SessionState:
    """
    Plain container for every field of the session
    """
    def __init__(self, config=None):
        self.config = config or DEFAULT_CONFIG
        self.phase = GameState.MENU
        self.selected_character = None
        self.stats = GameStats()
        self.logs = deque(maxlen=self.config.log_capacity)
        self.reset_level_state()

    def reset_level_state(self):
        """Economy, keys and pursuer fields back to a fresh run"""
        config = self.config
        self.flashlight_on = True
        self.battery = float(config.max_battery)
        self.health = config.max_health
        self.dead_characters = []
        self.logs.clear()

        self.keys_needed = self.stats.level
        self.keys_collected = 0
        self.collected_coords = set()

        self.has_weapon = False
        self.ammo = 0
        self.active_boss = BossType.FALAH

        self.struggle_progress = 0
        self.stunned_until = 0.0
        self.rage_multiplier = 1.0

    @property
    def level(self):
        return self.stats.level

    def __repr__(self):
        return (f"SessionState(phase={self.phase.name}, level={self.level}, hp={self.health}, "
                f"battery={self.battery:.0f}, boss={self.active_boss.name})")


class GameSession:
    """
    Owns the session state, its clock and the scheduled-event queue

    Time is simulated: update(dt) advances the clock in milliseconds and
    fires any due events, each re-validated against the current state.
    """
    def __init__(self, config=None, rng=None):
        self.config = config or DEFAULT_CONFIG
        self.rng = rng or random
        self.state = SessionState(self.config)
        self.events = EventQueue()
        self.previous_phase = None

        self.now = 0.0  # ms
        self.version = 0  # bumped on every phase transition
        self.epoch = 0  # bumped on level advance and run reset
        self._second_accum = 0.0
        self._log_ids = itertools.count(1)
        self._clock_base = None  # fire time of the event being applied

    # ========== PHASES ==========

    def transition_to(self, new_phase):
        """
        Switch phase and run its entry hook

        Args:
            new_phase: GameState enum value
        """
        self.previous_phase = self.state.phase
        self.state.phase = new_phase
        self.version += 1
        logger.info("Phase %s -> %s", self.previous_phase.name, new_phase.name)
        self._on_state_enter(new_phase)

    def _on_state_enter(self, phase):
        """Called when entering a new phase"""
        if phase == GameState.STRUGGLE:
            self._enter_struggle()
        elif phase == GameState.JUMPSCARE:
            self._enter_jumpscare()

    def _enter_struggle(self):
        timeout = self.config.struggle_timeout_ms(self.state.level)
        self._schedule(timeout, EventKind.STRUGGLE_TIMEOUT)

    def _enter_jumpscare(self):
        self.events.cancel(EventKind.STRUGGLE_TIMEOUT)
        self._schedule(self.config.jumpscare_ms, EventKind.JUMPSCARE_END)

    # ========== COMMANDS ==========

    def select_character(self, name):
        """
        Start a fresh run from the menu

        Returns:
            True if the run started
        """
        if name not in CHARACTER_TRAITS:
            raise ValueError(f"unknown character: {name!r}")
        if self.state.phase != GameState.MENU:
            return False

        self._reset_run()
        self.state.selected_character = name
        self.transition_to(GameState.PLAYING)
        return True

    def proceed(self):
        """Leave the level-cleared screen"""
        if self.state.phase != GameState.WIN_LEVEL:
            return False
        self.transition_to(GameState.PLAYING)
        return True

    def reinitialize(self):
        """Back to the menu after game over, wiping the run"""
        if self.state.phase != GameState.GAME_OVER:
            return False
        self._reset_run()
        self.transition_to(GameState.MENU)
        return True

    def _reset_run(self):
        state = self.state
        state.stats = GameStats()
        state.reset_level_state()
        state.selected_character = None
        self.events.clear()
        self.epoch += 1
        self._second_accum = 0.0

    # ========== LEVEL PROGRESSION ==========

    def reach_exit(self):
        """
        Player touched the exit

        Returns:
            True if the level was cleared
        """
        state = self.state
        if state.phase != GameState.PLAYING:
            return False
        if state.keys_collected < state.keys_needed:
            return False

        self._advance_level()
        self.transition_to(GameState.WIN_LEVEL)
        return True

    def _advance_level(self):
        state = self.state
        config = self.config

        state.stats.level += 1
        state.stats.escapes += 1
        state.keys_needed = state.stats.level
        state.keys_collected = 0
        state.collected_coords = set()

        state.battery = min(config.max_battery, state.battery + config.level_battery_bonus)
        state.health = min(config.max_health, state.health + config.level_health_bonus)
        state.dead_characters = []
        state.logs.clear()

        state.stunned_until = 0.0
        state.active_boss = BossType.FALAH
        state.ammo = max(0, state.ammo - 1)

        self.events.clear()
        self.epoch += 1
        logger.info("Advanced to level %d", state.stats.level)

    def locked_exit_hint(self):
        """Occasionally remind the player how many keys are missing"""
        state = self.state
        missing = state.keys_needed - state.keys_collected
        if missing > 0 and self.rng.random() > 0.95:
            self.add_log(f"Locked! You need {missing} more keys")

    # ========== INVENTORY ==========

    def collect_key(self, x, z):
        """Pick up the key at (x, z); repeat calls for the same cell do nothing"""
        state = self.state
        key = coord_key(x, z)
        if key in state.collected_coords:
            return False

        state.collected_coords.add(key)
        state.keys_collected = min(state.keys_needed, state.keys_collected + 1)

        if state.keys_collected >= state.keys_needed:
            self.add_log("The door is open! Find the exit!")
        else:
            self.add_log(f"Key collected! ({state.keys_collected}/{state.keys_needed})")
        return True

    def collect_weapon(self):
        """The pistol comes with one bullet; a second pistol is ignored"""
        state = self.state
        if state.has_weapon:
            return False
        state.has_weapon = True
        state.ammo += 1
        self.add_log("You found a pistol! (one bullet)")
        return True

    def collect_ammo(self, x, z):
        state = self.state
        key = coord_key(x, z)
        if key in state.collected_coords:
            return False
        state.collected_coords.add(key)
        state.ammo += 1
        self.add_log("You found a bullet!")
        return True

    def fire_weapon(self):
        """
        Spend one bullet

        Returns:
            True if a shot was fired
        """
        state = self.state
        if state.has_weapon and state.ammo > 0:
            state.ammo -= 1
            self.add_log("Bang!")
            return True
        if state.has_weapon:
            self.add_log("Out of ammo!")
        return False

    # ========== BOSS ==========

    def apply_hit(self, identity=None):
        """
        A shot connected with the pursuer

        Falah falls and turns into Saif after a delay; Saif can only be
        stunned. A hit reported for an identity the pursuer no longer has
        is ignored.

        Args:
            identity: BossType the shooter saw, or None for the current one

        Returns:
            True if the hit had an effect
        """
        state = self.state
        if state.phase != GameState.PLAYING:
            return False
        boss = state.active_boss
        if identity is not None and identity != boss:
            return False

        if boss == BossType.FALAH:
            state.active_boss = BossType.TRANSFORMING
            self.add_log("Falah went down...")
            self._schedule(self.config.transform_delay_ms, EventKind.TRANSFORM_COMPLETE,
                           rage_before=state.rage_multiplier)
            logger.info("Falah hit, transformation in %dms", self.config.transform_delay_ms)
            return True

        if boss == BossType.SAIF:
            state.stunned_until = self.now + self.config.saif_stun_ms
            self.add_log("Mr. Saif cannot die! But he stopped for a moment")
            return True

        return False

    def is_pursuer_stunned(self):
        return self.now < self.state.stunned_until

    def pursuer_can_act(self):
        """Pursuer is neither stunned nor mid-transformation"""
        return (not self.is_pursuer_stunned()
                and self.state.active_boss != BossType.TRANSFORMING)

    # ========== STRUGGLE ==========

    def catch_player(self):
        """
        The pursuer reached the player

        Returns:
            True if the struggle started
        """
        state = self.state
        if state.phase != GameState.PLAYING or not self.pursuer_can_act():
            return False

        if state.active_boss == BossType.SAIF:
            state.struggle_progress = self.config.struggle_start_saif
        else:
            state.struggle_progress = self.config.struggle_start_falah
        self.transition_to(GameState.STRUGGLE)
        return True

    def struggle_increment(self):
        """Progress gained per input; shrinks with level and against Saif"""
        penalty = self.state.level
        if self.state.active_boss == BossType.SAIF:
            penalty += self.config.struggle_saif_penalty
        return max(self.config.struggle_min_increment,
                   self.config.struggle_base_increment - penalty)

    def increment_struggle(self):
        """
        One key press or click while caught

        Returns:
            The phase after the input
        """
        state = self.state
        config = self.config
        if state.phase != GameState.STRUGGLE:
            return state.phase

        progress = state.struggle_progress + self.struggle_increment()
        if progress < config.struggle_threshold:
            state.struggle_progress = progress
            return state.phase

        if state.active_boss == BossType.SAIF:
            damage = config.struggle_damage_saif
        else:
            damage = config.struggle_damage_falah
        health = state.health - damage

        if health <= 0:
            state.health = 0
            state.struggle_progress = config.struggle_threshold
            self.transition_to(GameState.JUMPSCARE)
            return state.phase

        state.health = health
        state.struggle_progress = 0
        state.rage_multiplier += config.rage_escape_bonus
        state.stunned_until = self.now + config.escape_grace_ms
        self.add_log("You broke free!")
        self.events.cancel(EventKind.STRUGGLE_TIMEOUT)
        self.transition_to(GameState.PLAYING)
        return state.phase

    def fail_struggle(self):
        """Ran out of time while caught"""
        if self.state.phase != GameState.STRUGGLE:
            return False
        self.state.health = 0
        self.transition_to(GameState.JUMPSCARE)
        return True

    # ========== FLASHLIGHT ==========

    def toggle_flashlight(self):
        state = self.state
        state.flashlight_on = (not state.flashlight_on) and state.battery > 0
        return state.flashlight_on

    def drain_battery(self, amount):
        """Drain battery; an empty battery switches the flashlight off"""
        state = self.state
        state.battery = clamp(state.battery - amount, 0.0, float(self.config.max_battery))
        if state.battery <= 0:
            state.flashlight_on = False
        return state.battery

    # ========== BYSTANDERS & LOG ==========

    def kill_character(self, name):
        state = self.state
        if name in state.dead_characters:
            return False
        state.dead_characters.append(name)
        self.add_log(f"{name} has been taken out")
        return True

    def add_log(self, message):
        """Newest first; the oldest entry falls off past capacity"""
        entry = LogMessage(next(self._log_ids), message, self.now)
        self.state.logs.appendleft(entry)
        return entry

    def tick_time(self):
        self.state.stats.time_survived += 1

    # ========== CLOCK & EVENTS ==========

    def _schedule(self, delay_ms, kind, **payload):
        """Delays chained from a firing event count from its fire time, not the frame time"""
        base = self.now if self._clock_base is None else self._clock_base
        return self.events.schedule(base + delay_ms, kind, self.state.phase,
                                    self.version, self.epoch, **payload)

    def update(self, dt):
        """
        Advance the session clock

        Args:
            dt: Delta time in seconds
        """
        self.now += dt * 1000.0

        try:
            for event in self.events.pop_due(self.now):
                self._clock_base = event.fire_at
                self._fire(event)
        finally:
            self._clock_base = None

        if self.state.phase in (GameState.PLAYING, GameState.STRUGGLE):
            self._second_accum += dt
            while self._second_accum >= 1.0:
                self._second_accum -= 1.0
                self.tick_time()

    def _fire(self, event):
        """Apply a due event if the state it was issued under still holds"""
        state = self.state

        if event.kind == EventKind.TRANSFORM_COMPLETE:
            if state.active_boss != BossType.TRANSFORMING or event.epoch != self.epoch:
                logger.debug("Dropped stale %r", event)
                return
            state.active_boss = BossType.SAIF
            state.rage_multiplier = event.payload["rage_before"] * self.config.saif_rage_factor
            self.add_log("Mr. Saif rose from the body!! RUN!!")
            logger.info("Saif has risen, rage x%.2f", state.rage_multiplier)

        elif event.kind == EventKind.STRUGGLE_TIMEOUT:
            if state.phase != GameState.STRUGGLE or event.version != self.version:
                logger.debug("Dropped stale %r", event)
                return
            self.fail_struggle()

        elif event.kind == EventKind.JUMPSCARE_END:
            if state.phase != GameState.JUMPSCARE or event.version != self.version:
                logger.debug("Dropped stale %r", event)
                return
            self.transition_to(GameState.GAME_OVER)

    # ========== SNAPSHOT ==========

    def snapshot(self):
        """Read-only view of the renderer-facing fields"""
        state = self.state
        return {
            'phase': state.phase,
            'level': state.level,
            'health': state.health,
            'battery': state.battery,
            'flashlight_on': state.flashlight_on,
            'keys_needed': state.keys_needed,
            'keys_collected': state.keys_collected,
            'has_weapon': state.has_weapon,
            'ammo': state.ammo,
            'active_boss': state.active_boss,
            'struggle_progress': state.struggle_progress,
            'stunned': self.is_pursuer_stunned(),
            'stunned_until': state.stunned_until,
            'rage_multiplier': state.rage_multiplier,
            'time_survived': state.stats.time_survived,
            'escapes': state.stats.escapes,
            'selected_character': state.selected_character,
            'dead_characters': tuple(state.dead_characters),
            'logs': tuple(entry.message for entry in state.logs),
            'now': self.now,
        }

    def __repr__(self):
        return f"GameSession(phase={self.state.phase.name}, level={self.state.level}, t={self.now:.0f}ms)"
