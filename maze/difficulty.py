"""
Variant configurations for Maze Chase
Defines 5 progressively elaborated variants of the same game
"""

from utils.constants import (
    MAZE_SIZE, START_POS, PLAYER_MOVE_DELAY_MS, TRAIL_LENGTH,
    MONSTER_BASE_COOLDOWN, MONSTER_TICK_EVERY, DETECTION_RADIUS,
    VARIANT_CLASSIC, VARIANT_HAZARDS, VARIANT_MECHANISMS,
    VARIANT_HUNTER, VARIANT_NIGHTMARE, VARIANT_NAMES
)


class DifficultyConfig:
    """Configuration for a single game variant"""
    def __init__(self, **kwargs):
        self.name = kwargs.get('name', 'custom')

        # Maze dimensions
        self.size = kwargs.get('size', MAZE_SIZE)
        self.widen_attempts = kwargs.get('widen_attempts', 30)

        # Player
        self.move_delay = kwargs.get('move_delay', PLAYER_MOVE_DELAY_MS)
        self.trail_length = kwargs.get('trail_length', TRAIL_LENGTH)
        self.respawn = kwargs.get('respawn', True)

        # Monster
        self.monster_enabled = kwargs.get('monster_enabled', True)
        self.monster_cooldown = kwargs.get('monster_cooldown', MONSTER_BASE_COOLDOWN)
        self.monster_tick_every = kwargs.get('monster_tick_every', MONSTER_TICK_EVERY)
        self.detection_radius = kwargs.get('detection_radius', DETECTION_RADIUS)
        self.speed_ramp = kwargs.get('speed_ramp', False)
        self.heatmap_enabled = kwargs.get('heatmap_enabled', False)

        # Features, as inclusive (min, max) ranges
        self.key_count = kwargs.get('key_count', 3)
        self.safe_zones = kwargs.get('safe_zones', (1, 4))
        self.doors = kwargs.get('doors', (0, 0))
        self.spikes = kwargs.get('spikes', (0, 0))
        self.rotating_blocks = kwargs.get('rotating_blocks', (0, 0))
        self.switch_count = kwargs.get('switch_count', 0)
        self.bombs = kwargs.get('bombs', (0, 0))
        self.powerups = kwargs.get('powerups', (0, 0))

    def with_overrides(self, **kwargs):
        """Copy this config with some fields replaced"""
        values = dict(vars(self))
        values.update(kwargs)
        return DifficultyConfig(**values)

    @property
    def start_pos(self):
        return START_POS

    @property
    def exit_pos(self):
        return (self.size - 2, self.size - 2)

    @property
    def monster_spawn(self):
        return (self.size - 2, 1)

    def __repr__(self):
        return f"DifficultyConfig(name={self.name}, size={self.size})"


# ========== VARIANT DEFINITIONS ==========

LEVEL_CLASSIC = DifficultyConfig(
    name=VARIANT_CLASSIC,
    respawn=True,
    key_count=3,
    safe_zones=(1, 3),
)

LEVEL_HAZARDS = DifficultyConfig(
    name=VARIANT_HAZARDS,
    respawn=True,
    key_count=3,
    safe_zones=(1, 4),
    doors=(0, 4),
    spikes=(4, 6),
    switch_count=4,
)

LEVEL_MECHANISMS = DifficultyConfig(
    name=VARIANT_MECHANISMS,
    respawn=True,
    key_count=3,
    safe_zones=(1, 4),
    doors=(0, 4),
    spikes=(4, 6),
    rotating_blocks=(2, 3),
    switch_count=4,
    bombs=(1, 2),
)

LEVEL_HUNTER = DifficultyConfig(
    name=VARIANT_HUNTER,
    respawn=False,  # Game over on first death
    key_count=3,
    safe_zones=(1, 4),
    doors=(0, 4),
    spikes=(4, 6),
    rotating_blocks=(2, 3),
    switch_count=4,
    bombs=(0, 2),
    powerups=(1, 2),
    speed_ramp=True,
)

LEVEL_NIGHTMARE = DifficultyConfig(
    name=VARIANT_NIGHTMARE,
    respawn=True,
    trail_length=30,
    key_count=3,
    safe_zones=(1, 4),
    doors=(0, 4),
    spikes=(4, 6),
    rotating_blocks=(2, 3),
    switch_count=4,
    bombs=(0, 2),
    powerups=(0, 2),
    speed_ramp=True,
    heatmap_enabled=True,
)

# Variant mapping
DIFFICULTY_CONFIGS = {
    VARIANT_CLASSIC: LEVEL_CLASSIC,
    VARIANT_HAZARDS: LEVEL_HAZARDS,
    VARIANT_MECHANISMS: LEVEL_MECHANISMS,
    VARIANT_HUNTER: LEVEL_HUNTER,
    VARIANT_NIGHTMARE: LEVEL_NIGHTMARE,
}


def get_difficulty_config(variant):
    """
    Get configuration for a variant

    Args:
        variant: Variant name, or index (0-4) into VARIANT_NAMES

    Returns:
        DifficultyConfig object

    Raises:
        KeyError: If the variant is unknown
    """
    if isinstance(variant, int):
        if not 0 <= variant < len(VARIANT_NAMES):
            raise KeyError(variant)
        variant = VARIANT_NAMES[variant]
    return DIFFICULTY_CONFIGS[variant]


def get_difficulty_description(variant):
    """Get a short description of a variant"""
    config = get_difficulty_config(variant)

    desc = f"{config.name.upper()}\n"
    desc += f"Maze: {config.size}x{config.size}\n"
    desc += f"Keys: {config.key_count}\n"
    if config.spikes[1]:
        desc += f"Spikes: {config.spikes[0]}-{config.spikes[1]}\n"
    if config.switch_count:
        desc += f"Switches: up to {config.switch_count}\n"
    if config.bombs[1]:
        desc += "Bombs: Yes\n"
    desc += "Respawn: Yes\n" if config.respawn else "Respawn: No\n"
    return desc
