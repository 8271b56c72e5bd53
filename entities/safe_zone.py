"""
Safe zones
The monster cannot enter an unused safe zone. Using one draws the monster
toward it for a while, then the zone crumbles back into floor.
"""

import logging
from maze.maze_core import Tile
from utils.constants import MAGNET_MAX, MAGNET_DECAY, SAFE_ZONE_DURATION_MS

logger = logging.getLogger(__name__)


class SafeZone:
    """
    Single safe cell
    """
    def __init__(self, x, y):
        self.x = x
        self.y = y
        self.used = False
        self.used_at = None
        self.magnet = 0.0

    @property
    def pos(self):
        return (self.x, self.y)

    def use(self, now):
        """
        Mark zone as used

        Returns:
            True if it was unused before
        """
        if self.used:
            return False
        self.used = True
        self.used_at = now
        self.magnet = MAGNET_MAX
        return True

    def is_expired(self, now):
        return self.used and now - self.used_at >= SAFE_ZONE_DURATION_MS

    def decay(self):
        """Linear magnet decay, once per frame"""
        if self.magnet > 0:
            self.magnet = max(0.0, self.magnet - MAGNET_DECAY)

    def __repr__(self):
        return f"SafeZone(pos=({self.x},{self.y}), used={self.used}, magnet={self.magnet:.1f})"


class SafeZoneManager:
    """
    Manages active safe zones
    """
    def __init__(self, zones=None):
        self.zones = list(zones or [])

    def get_zone_at(self, x, y):
        for zone in self.zones:
            if zone.x == x and zone.y == y:
                return zone
        return None

    def used_positions(self):
        """Positions the monster may cross"""
        return {zone.pos for zone in self.zones if zone.used}

    def positions(self):
        return {zone.pos for zone in self.zones}

    def strongest_magnet(self, threshold):
        """
        Get the used zone with the strongest magnet above threshold

        Returns:
            SafeZone or None
        """
        best = None
        for zone in self.zones:
            if zone.used and zone.magnet > threshold:
                if best is None or zone.magnet > best.magnet:
                    best = zone
        return best

    def update(self, now, grid):
        """
        Decay magnets and expire used zones

        Returns:
            List of expired zones
        """
        expired = []
        for zone in self.zones[:]:
            zone.decay()
            if zone.is_expired(now):
                grid.set(zone.x, zone.y, Tile.FLOOR)
                self.zones.remove(zone)
                expired.append(zone)
                logger.debug("safe zone at %s expired", zone.pos)
        return expired

    def __repr__(self):
        return f"SafeZoneManager(zones={len(self.zones)})"
