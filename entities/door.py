"""
Key and Door entities
Keys are collected toward the win condition, doors are opened by switches
"""

from maze.maze_core import Tile


class Key:
    """
    Collectible key
    """
    def __init__(self, x, y):
        self.x = x
        self.y = y
        self.collected = False

    @property
    def pos(self):
        return (self.x, self.y)

    def collect(self):
        """Mark key as collected"""
        self.collected = True

    def is_at_position(self, x, y):
        """Check if an uncollected key is at given position"""
        return self.x == x and self.y == y and not self.collected

    def __repr__(self):
        return f"Key(pos=({self.x},{self.y}), collected={self.collected})"


class Door:
    """
    Door tile that blocks both agents until opened
    """
    def __init__(self, x, y):
        self.x = x
        self.y = y
        self.locked = True

    @property
    def pos(self):
        return (self.x, self.y)

    def open(self, grid):
        """
        Open the door permanently, turning its tile into Floor

        Returns:
            True if the door was closed before
        """
        if not self.locked:
            return False
        self.locked = False
        grid.set(self.x, self.y, Tile.FLOOR)
        return True

    def __repr__(self):
        return f"Door(pos=({self.x},{self.y}), locked={self.locked})"


def get_key_at(keys, x, y):
    """Get uncollected key at position"""
    for key in keys:
        if key.is_at_position(x, y):
            return key
    return None
