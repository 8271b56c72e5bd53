"""
Bombs
Pickups give the player one bomb. A placed bomb runs the fuse chain:
placement -> explosion -> wall break -> cleanup.
"""

import logging
from maze.maze_core import Tile
from utils.constants import (
    BLAST_OFFSETS, BOMB_FUSE_MS, EXPLOSION_DELAY_MS, BREAK_LINGER_MS
)

logger = logging.getLogger(__name__)

EVENT_EXPLODE = 'explode'
EVENT_BREAK_WALLS = 'break_walls'
EVENT_CLEAR_EXPLOSION = 'clear_explosion'
EVENT_CLEAR_BREAKING = 'clear_breaking'


class BombPickup:
    def __init__(self, x, y):
        self.x = x
        self.y = y
        self.collected = False

    @property
    def pos(self):
        return (self.x, self.y)

    def __repr__(self):
        return f"BombPickup(pos=({self.x},{self.y}), collected={self.collected})"


class PlacedBomb:
    def __init__(self, x, y, placed_at):
        self.x = x
        self.y = y
        self.placed_at = placed_at

    @property
    def pos(self):
        return (self.x, self.y)


class Explosion:
    """Transient blast over the center and its 8 neighbours"""
    def __init__(self, x, y, started_at):
        self.x = x
        self.y = y
        self.started_at = started_at
        self.cells = [(x + dx, y + dy) for dx, dy in BLAST_OFFSETS]


class BreakingWalls:
    """Transient record of walls a blast just knocked down"""
    def __init__(self, cells, started_at):
        self.cells = list(cells)
        self.started_at = started_at


class BombManager:
    """
    Owns pickups and the bomb chain records for one level
    """
    def __init__(self, pickups=None):
        self.pickups = list(pickups or [])
        self.bomb = None
        self.explosion = None
        self.breaking = None

    def collect(self, x, y, player):
        """
        Pick up a bomb if the player has a free hand

        Returns:
            BombPickup or None
        """
        if player.has_bomb:
            return None
        for pickup in self.pickups:
            if not pickup.collected and pickup.pos == (x, y):
                pickup.collected = True
                player.has_bomb = True
                return pickup
        return None

    def place(self, level, now):
        """
        Drop the held bomb on the player's cell

        Rejected without any change when the player has no bomb, another bomb
        is already ticking, or the cell is protected.

        Returns:
            PlacedBomb or None
        """
        player = level.player
        if not player.has_bomb or self.bomb is not None:
            return None
        if level.is_bomb_protected(player.x, player.y):
            return None

        player.has_bomb = False
        self.bomb = PlacedBomb(player.x, player.y, now)
        level.timers.schedule(now + BOMB_FUSE_MS, level.generation, EVENT_EXPLODE, self.bomb.pos)
        logger.debug("bomb placed at %s", self.bomb.pos)
        return self.bomb

    def handle(self, action, payload, level, now):
        """Run one fuse chain event"""
        if action == EVENT_EXPLODE:
            self._explode(payload, level, now)
        elif action == EVENT_BREAK_WALLS:
            self._break_walls(payload, level, now)
        elif action == EVENT_CLEAR_EXPLOSION:
            self.explosion = None
        elif action == EVENT_CLEAR_BREAKING:
            self.breaking = None
        else:
            raise ValueError(f"Unknown bomb event: {action}")

    def _explode(self, pos, level, now):
        self.bomb = None
        self.explosion = Explosion(pos[0], pos[1], now)
        level.timers.schedule(now + EXPLOSION_DELAY_MS, level.generation, EVENT_BREAK_WALLS, pos)
        level.timers.schedule(
            now + EXPLOSION_DELAY_MS + BREAK_LINGER_MS, level.generation, EVENT_CLEAR_EXPLOSION
        )

    def _break_walls(self, pos, level, now):
        grid = level.grid
        broken = []
        for dx, dy in BLAST_OFFSETS:
            if dx == 0 and dy == 0:
                continue
            x, y = pos[0] + dx, pos[1] + dy
            if not grid.in_bounds(x, y) or grid.get(x, y) != Tile.WALL:
                continue
            if level.is_blast_protected(x, y):
                continue
            grid.set(x, y, Tile.FLOOR)
            broken.append((x, y))

        self.breaking = BreakingWalls(broken, now)
        level.timers.schedule(now + BREAK_LINGER_MS, level.generation, EVENT_CLEAR_BREAKING)
        logger.debug("blast at %s broke %s walls", pos, len(broken))

    def __repr__(self):
        return f"BombManager(pickups={len(self.pickups)}, armed={self.bomb is not None})"
