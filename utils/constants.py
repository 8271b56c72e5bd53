"""
Global constants for Maze Chase
"""

# Screen settings
CELL_SIZE = 30
FPS = 60

# HUD panel height
PANEL_H = 70

# Maze settings
MAZE_SIZE = 21  # Must be odd
START_POS = (1, 1)

# Direction vectors, in BFS visitation order
DIR_UP = (0, -1)
DIR_RIGHT = (1, 0)
DIR_DOWN = (0, 1)
DIR_LEFT = (-1, 0)
DIRS = [DIR_UP, DIR_RIGHT, DIR_DOWN, DIR_LEFT]

# 2-step carving directions (lattice)
CARVE_DIRS = [(0, -2), (2, 0), (0, 2), (-2, 0)]

# Center + 8 neighbours (bomb blast geometry)
BLAST_OFFSETS = [
    (-1, -1), (0, -1), (1, -1),
    (-1, 0), (0, 0), (1, 0),
    (-1, 1), (0, 1), (1, 1),
]

# Agents
AGENT_PLAYER = 'player'
AGENT_MONSTER = 'monster'

# Corridor widening
WIDEN_ATTEMPTS = 30

# Placement
PLACEMENT_ATTEMPTS = 200
KEY_MIN_SEPARATION = 5
KEY_EXCLUSION_RADIUS = 4
SAFE_EXCLUSION_RADIUS = 4
DOOR_EXCLUSION_RADIUS = 3
SPIKE_EXCLUSION_RADIUS = 3
SPIKE_GROUP_RADIUS = 2

# Player settings
PLAYER_MOVE_DELAY_MS = 150
TRAIL_LENGTH = 50
RESPAWN_INVULN_FRAMES = 30
SAFE_INVULN_FRAMES = 90
SHIELD_INVULN_FRAMES = 180

# Power-ups
POWERUP_TYPES = ['speed', 'shield']
SPEED_POWERUP_DURATION_MS = 6000
SPEED_POWERUP_FACTOR = 0.6

# Monster settings
MONSTER_BASE_COOLDOWN = 8
MONSTER_TICK_EVERY = 2
DETECTION_RADIUS = 6
ALERT_RISE = 5.0
ALERT_DECAY = 2.0
ALERT_THRESHOLD = 30.0
TRAIL_MIN_HISTORY = 5
MAX_LEARNING_LEVEL = 10
LEARNING_COOLDOWN_STEP = 3
HEAT_WEIGHT = 0.5
SPEED_RAMP_INTERVAL_MS = 15000
SPEED_RAMP_STEP = 0.1
SPEED_MULTIPLIER_CAP = 2.0

# Safe zones
MAGNET_MAX = 100.0
MAGNET_THRESHOLD = 30.0
MAGNET_DECAY = 0.5  # per frame
SAFE_ZONE_DURATION_MS = 8000

# Spikes
SPIKE_TOGGLE_MIN_MS = 1500
SPIKE_TOGGLE_MAX_MS = 3500

# Switch kinds (round-robin order)
SWITCH_ROTATE = 'rotate'
SWITCH_DOOR = 'door'
SWITCH_TOGGLE_SPIKES = 'toggle_spikes'
SWITCH_REROUTE = 'reroute'
SWITCH_KINDS = [SWITCH_ROTATE, SWITCH_DOOR, SWITCH_TOGGLE_SPIKES, SWITCH_REROUTE]
REROUTE_LENGTH = 2

# Bomb chain (milliseconds)
BOMB_FUSE_MS = 2000
EXPLOSION_DELAY_MS = 300
BREAK_LINGER_MS = 500

# Variant names
VARIANT_CLASSIC = 'classic'
VARIANT_HAZARDS = 'hazards'
VARIANT_MECHANISMS = 'mechanisms'
VARIANT_HUNTER = 'hunter'
VARIANT_NIGHTMARE = 'nightmare'

VARIANT_NAMES = [
    VARIANT_CLASSIC,
    VARIANT_HAZARDS,
    VARIANT_MECHANISMS,
    VARIANT_HUNTER,
    VARIANT_NIGHTMARE,
]
