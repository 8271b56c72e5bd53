"""
Color palette for Maze Chase
"""

# Background colors
COLOR_BG = (20, 22, 28)           # Main background
COLOR_PANEL_BG = (12, 14, 18)     # Panel background

# Tiles
COLOR_FLOOR = (34, 36, 46)
COLOR_WALL = (90, 94, 110)
COLOR_SAFE = (60, 160, 200)
COLOR_SAFE_USED = (40, 90, 120)
COLOR_SPIKE_ACTIVE = (200, 50, 50)
COLOR_SPIKE_IDLE = (110, 60, 60)
COLOR_DOOR = (160, 110, 50)
COLOR_SWITCH = (220, 200, 60)
COLOR_SWITCH_ACTIVE = (120, 110, 40)
COLOR_ROTATING = (70, 60, 110)

# UI colors
COLOR_TEXT = (210, 210, 210)      # Normal text
COLOR_TEXT_HIGHLIGHT = (255, 230, 160)  # Highlighted text

# Entity colors
COLOR_PLAYER = (70, 140, 255)     # Player
COLOR_PLAYER_TRAIL = (50, 80, 130)  # Player trail
COLOR_MONSTER = (255, 50, 50)     # Monster
COLOR_EXIT_LOCKED = (255, 68, 68)
COLOR_EXIT_OPEN = (0, 255, 0)
COLOR_KEY = (255, 220, 80)
COLOR_BOMB = (240, 240, 240)
COLOR_EXPLOSION = (255, 150, 40)
COLOR_BREAKING = (180, 140, 100)

# Power-up colors
POWERUP_COLORS = {
    'speed': (100, 255, 100),
    'shield': (255, 215, 0),
}
