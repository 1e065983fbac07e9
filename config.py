"""
Game configuration - every tunable number lives here
"""

GAME_TITLE = "Falah's Maze"
GAME_VERSION = "1.0.0"


class GameConfig:
    """Named tunables for maze generation, pursuer AI and session economy"""
    def __init__(self, **kwargs):
        # World scale (world units per grid cell)
        self.cell_size = kwargs.get('cell_size', 4.0)

        # Maze generation
        self.base_size = kwargs.get('base_size', 10)
        self.size_per_level = kwargs.get('size_per_level', 2)
        self.extra_openings_factor = kwargs.get('extra_openings_factor', 2)
        self.placement_attempts = kwargs.get('placement_attempts', 1000)
        self.start_quadrant = kwargs.get('start_quadrant', 3)  # items avoid x<=3 and z<=3
        self.weapon_count = kwargs.get('weapon_count', 1)
        self.ammo_roll = kwargs.get('ammo_roll', 3)  # max(1, floor(random * ammo_roll))

        # Pursuer
        self.falah_base_speed = kwargs.get('falah_base_speed', 4.2)
        self.saif_base_speed = kwargs.get('saif_base_speed', 5.5)
        self.level_speed_factor = kwargs.get('level_speed_factor', 0.7)
        self.path_refresh_interval = kwargs.get('path_refresh_interval', 0.5)  # seconds
        self.capture_distance = kwargs.get('capture_distance', 1.5)
        self.waypoint_tolerance = kwargs.get('waypoint_tolerance', 0.1)
        self.shout_distance = kwargs.get('shout_distance', 15.0)
        self.shout_initial = kwargs.get('shout_initial', 5.0)
        self.shout_min = kwargs.get('shout_min', 5.0)
        self.shout_spread = kwargs.get('shout_spread', 8.0)
        self.spawn_min_distance = kwargs.get('spawn_min_distance', 10)
        self.spawn_attempts = kwargs.get('spawn_attempts', 100)

        # Session economy
        self.max_health = kwargs.get('max_health', 100)
        self.max_battery = kwargs.get('max_battery', 100)
        self.log_capacity = kwargs.get('log_capacity', 5)
        self.level_battery_bonus = kwargs.get('level_battery_bonus', 30)
        self.level_health_bonus = kwargs.get('level_health_bonus', 20)
        self.battery_drain_per_second = kwargs.get('battery_drain_per_second', 2.0)

        # Boss phases (milliseconds)
        self.transform_delay_ms = kwargs.get('transform_delay_ms', 3000)
        self.saif_stun_ms = kwargs.get('saif_stun_ms', 5000)
        self.saif_rage_factor = kwargs.get('saif_rage_factor', 1.5)

        # Struggle mini-game
        self.struggle_start_falah = kwargs.get('struggle_start_falah', 10)
        self.struggle_start_saif = kwargs.get('struggle_start_saif', 5)
        self.struggle_base_increment = kwargs.get('struggle_base_increment', 10)
        self.struggle_min_increment = kwargs.get('struggle_min_increment', 2)
        self.struggle_saif_penalty = kwargs.get('struggle_saif_penalty', 3)
        self.struggle_threshold = kwargs.get('struggle_threshold', 100)
        self.struggle_damage_falah = kwargs.get('struggle_damage_falah', 25)
        self.struggle_damage_saif = kwargs.get('struggle_damage_saif', 40)
        self.struggle_timeout_base_ms = kwargs.get('struggle_timeout_base_ms', 3000)
        self.struggle_timeout_per_level_ms = kwargs.get('struggle_timeout_per_level_ms', 200)
        self.struggle_timeout_min_ms = kwargs.get('struggle_timeout_min_ms', 1500)
        self.escape_grace_ms = kwargs.get('escape_grace_ms', 4000)
        self.rage_escape_bonus = kwargs.get('rage_escape_bonus', 0.1)
        self.jumpscare_ms = kwargs.get('jumpscare_ms', 1500)

        # Player
        self.walk_speed = kwargs.get('walk_speed', 3.5)
        self.sprint_speed = kwargs.get('sprint_speed', 6.0)
        self.aim_range = kwargs.get('aim_range', 20.0)
        self.aim_cone = kwargs.get('aim_cone', 0.3)  # radians

        # Bystander NPCs
        self.npc_speed = kwargs.get('npc_speed', 1.5)
        self.npc_wander_radius = kwargs.get('npc_wander_radius', 5.0)
        self.npc_arrive_distance = kwargs.get('npc_arrive_distance', 0.2)
        self.npc_kill_distance = kwargs.get('npc_kill_distance', 1.5)
        self.npc_talk_distance = kwargs.get('npc_talk_distance', 1.5)
        self.npc_message_seconds = kwargs.get('npc_message_seconds', 3.0)
        self.npc_spawn_attempts = kwargs.get('npc_spawn_attempts', 50)

    def grid_size(self, level):
        """Side length of the square grid for a level"""
        return self.base_size + self.size_per_level * level

    def struggle_timeout_ms(self, level):
        """Time allowed to break free before the pursuer wins"""
        return max(self.struggle_timeout_min_ms,
                   self.struggle_timeout_base_ms - level * self.struggle_timeout_per_level_ms)

    def __repr__(self):
        return f"GameConfig(cell_size={self.cell_size}, base_size={self.base_size})"


DEFAULT_CONFIG = GameConfig()
