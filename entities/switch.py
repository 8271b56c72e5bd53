"""
Switches and their effects
Each switch is bound to exactly one effect when the level is built
"""

import logging
from maze.maze_core import Tile
from utils.constants import (
    DIRS, REROUTE_LENGTH,
    SWITCH_ROTATE, SWITCH_DOOR, SWITCH_TOGGLE_SPIKES, SWITCH_REROUTE
)

logger = logging.getLogger(__name__)


# ========== EFFECTS ==========

class RotateBlock:
    """Rotate a bound block clockwise"""
    kind = SWITCH_ROTATE
    rearms = True

    def __init__(self, block):
        self.block = block

    def __repr__(self):
        return f"RotateBlock({self.block.pos})"


class OpenDoor:
    """Open a bound door for good"""
    kind = SWITCH_DOOR
    rearms = False

    def __init__(self, door):
        self.door = door

    def __repr__(self):
        return f"OpenDoor({self.door.pos})"


class ToggleSpikes:
    """Flip the global spikes-armed flag"""
    kind = SWITCH_TOGGLE_SPIKES
    rearms = True

    def __repr__(self):
        return "ToggleSpikes()"


class Reroute:
    """Carve a short shortcut out of the switch cell"""
    kind = SWITCH_REROUTE
    rearms = False

    def __repr__(self):
        return "Reroute()"


def carve_reroute(grid, x, y, protected=(), length=REROUTE_LENGTH):
    """
    Carve up to `length` cells outward from (x, y) through the first
    adjacent wall, checked Up, Right, Down, Left. The border and protected
    cells are never carved.

    Returns:
        List of carved cells
    """
    for dx, dy in DIRS:
        nx, ny = x + dx, y + dy
        if not grid.is_interior(nx, ny) or grid.get(nx, ny) != Tile.WALL:
            continue
        if (nx, ny) in protected:
            continue

        carved = []
        for step in range(1, length + 1):
            cx, cy = x + dx * step, y + dy * step
            if not grid.is_interior(cx, cy) or (cx, cy) in protected:
                break
            if grid.get(cx, cy) != Tile.WALL:
                break
            grid.set(cx, cy, Tile.FLOOR)
            carved.append((cx, cy))
        return carved
    return []


def apply_effect(effect, switch, level):
    """
    Apply a switch effect to the level

    Args:
        effect: One of RotateBlock, OpenDoor, ToggleSpikes, Reroute
        switch: Switch that fired
        level: Level context

    Raises:
        TypeError: For anything that is not a known effect
    """
    if isinstance(effect, RotateBlock):
        if not effect.block.rotate(level.grid, level.agent_cells()):
            logger.debug("block at %s held still, an agent is in the way", effect.block.pos)
    elif isinstance(effect, OpenDoor):
        effect.door.open(level.grid)
    elif isinstance(effect, ToggleSpikes):
        level.spike_manager.toggle_armed()
    elif isinstance(effect, Reroute):
        carved = carve_reroute(level.grid, switch.x, switch.y, level.block_cells())
        logger.debug("reroute from %s carved %s", switch.pos, carved)
    else:
        raise TypeError(f"Unknown switch effect: {effect!r}")


# ========== SWITCH ==========

class Switch:
    """
    Floor switch bound to one effect
    """
    def __init__(self, x, y, effect):
        self.x = x
        self.y = y
        self.effect = effect
        self.active = False

    @property
    def pos(self):
        return (self.x, self.y)

    @property
    def kind(self):
        return self.effect.kind

    def activate(self, level):
        """
        Activate the switch and apply its effect

        Returns:
            True if the effect was applied, False if already active
        """
        if self.active:
            return False
        self.active = True
        apply_effect(self.effect, self, level)
        logger.debug("switch %s at %s activated", self.kind, self.pos)
        return True

    def release(self):
        """Re-arm a reversible switch once the player steps off"""
        if self.active and self.effect.rearms:
            self.active = False

    def __repr__(self):
        return f"Switch(pos=({self.x},{self.y}), kind={self.kind}, active={self.active})"


def get_switch_at(switches, x, y):
    for switch in switches:
        if switch.x == x and switch.y == y:
            return switch
    return None
