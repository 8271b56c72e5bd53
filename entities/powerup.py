"""
Power-up entities
Players can collect power-ups for temporary boosts
"""

from utils.constants import SPEED_POWERUP_DURATION_MS, SHIELD_INVULN_FRAMES


class PowerUp:
    """
    Power-up pickup
    """
    def __init__(self, x, y, powerup_type):
        """
        Args:
            x, y: Grid position
            powerup_type: 'speed' or 'shield'
        """
        self.x = x
        self.y = y
        self.type = powerup_type
        self.collected = False

    @property
    def pos(self):
        return (self.x, self.y)

    def collect(self, player, now):
        """Apply power-up to player"""
        self.collected = True

        if self.type == 'speed':
            player.add_effect('speed', now, SPEED_POWERUP_DURATION_MS)
        elif self.type == 'shield':
            player.grant_invulnerability(SHIELD_INVULN_FRAMES)
        else:
            raise ValueError(f"Unknown power-up type: {self.type}")

    def is_at_position(self, x, y):
        return self.x == x and self.y == y and not self.collected

    def __repr__(self):
        return f"PowerUp(pos=({self.x},{self.y}), type={self.type}, collected={self.collected})"


class PowerUpManager:
    """
    Manages all power-ups in the level
    """
    def __init__(self, powerups=None):
        self.powerups = list(powerups or [])

    def collect_powerup(self, x, y, player, now):
        """
        Collect power-up at position and apply to player

        Returns:
            PowerUp object if collected, None otherwise
        """
        for powerup in self.powerups:
            if powerup.is_at_position(x, y):
                powerup.collect(player, now)
                return powerup
        return None

    def get_uncollected_powerups(self):
        return [p for p in self.powerups if not p.collected]

    def __repr__(self):
        return f"PowerUpManager(powerups={len(self.powerups)}, uncollected={len(self.get_uncollected_powerups())})"
