"""
Collision detection and tile-entry handling
"""

import logging
from entities.door import get_key_at
from entities.switch import get_switch_at
from utils.constants import SAFE_INVULN_FRAMES

logger = logging.getLogger(__name__)


def agents_collide(prev_player, player, prev_monster, monster):
    """
    Check if player and monster met this frame

    They meet when they share a cell, or when they swapped cells
    between the previous frame and this one.
    """
    if player == monster:
        return True
    return player == prev_monster and monster == prev_player


class CollisionHandler:
    """
    Handles tile-entry effects and player/monster collisions
    """
    def handle_tile_enter(self, level, now):
        """
        Apply everything the player's new cell does to them

        Args:
            level: Level context
            now: Timestamp (ms)

        Returns:
            Dictionary with results:
            {
                'key': Key or None,
                'bomb': BombPickup or None,
                'powerup': PowerUp or None,
                'switch': Switch or None,
                'safe_zone': SafeZone or None,
                'player_died': bool
            }
        """
        player = level.player
        px, py = player.x, player.y
        result = {
            'key': None,
            'bomb': None,
            'powerup': None,
            'switch': None,
            'safe_zone': None,
            'player_died': False,
        }

        key = get_key_at(level.keys, px, py)
        if key:
            key.collect()
            player.keys_collected += 1
            result['key'] = key
            logger.info("key collected (%s/%s)", player.keys_collected, len(level.keys))

        result['bomb'] = level.bomb_manager.collect(px, py, player)
        result['powerup'] = level.powerup_manager.collect_powerup(px, py, player, now)

        switch = get_switch_at(level.switches, px, py)
        if switch and switch.activate(level):
            result['switch'] = switch

        zone = level.safe_zone_manager.get_zone_at(px, py)
        if zone and zone.use(now):
            player.grant_invulnerability(SAFE_INVULN_FRAMES)
            result['safe_zone'] = zone

        if not player.is_invulnerable() and level.spike_manager.is_deadly(px, py):
            result['player_died'] = True

        return result

    def check_monster(self, level, prev_player, prev_monster):
        """
        Resolve the player/monster collision after both have moved

        Invulnerability suppresses the check and ticks down one frame.

        Returns:
            True if the player was caught
        """
        player = level.player
        if player.is_invulnerable():
            player.tick_invulnerability()
            return False

        monster = level.monster
        if monster is None:
            return False
        return agents_collide(prev_player, player.pos, prev_monster, monster.pos)
