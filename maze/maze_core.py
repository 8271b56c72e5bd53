"""
Core maze functions - tile grid and pathfinding
"""

from collections import deque
from enum import IntEnum
from utils.constants import DIRS, AGENT_MONSTER


class Tile(IntEnum):
    """Tile kinds stored in the grid"""
    FLOOR = 0
    WALL = 1
    SAFE = 2
    SPIKE = 3
    DOOR = 4
    SWITCH = 5
    ROTATING_BLOCK = 6


class Grid:
    """
    Square tile grid, stored as a flat list
    """
    def __init__(self, size, fill=Tile.WALL):
        self.size = size
        self.cells = [fill] * (size * size)

    @classmethod
    def from_rows(cls, rows):
        """
        Build a grid from a list of strings

        '#' is Wall, '.' is Floor, 'S' Safe, '^' Spike, 'D' Door,
        '*' Switch, 'R' rotating block floor.
        """
        legend = {
            '#': Tile.WALL,
            '.': Tile.FLOOR,
            'S': Tile.SAFE,
            '^': Tile.SPIKE,
            'D': Tile.DOOR,
            '*': Tile.SWITCH,
            'R': Tile.ROTATING_BLOCK,
        }
        size = len(rows)
        grid = cls(size)
        for y, row in enumerate(rows):
            if len(row) != size:
                raise ValueError(f"Row {y} has length {len(row)}, expected {size}")
            for x, ch in enumerate(row):
                grid.set(x, y, legend[ch])
        return grid

    def idx(self, x, y):
        """Convert 2D coordinates to 1D index"""
        return y * self.size + x

    def in_bounds(self, x, y):
        """Check if coordinates are within grid bounds"""
        return 0 <= x < self.size and 0 <= y < self.size

    def is_interior(self, x, y):
        """Check if coordinates are strictly inside the border"""
        return 0 < x < self.size - 1 and 0 < y < self.size - 1

    def is_border(self, x, y):
        return self.in_bounds(x, y) and not self.is_interior(x, y)

    def get(self, x, y):
        return self.cells[self.idx(x, y)]

    def set(self, x, y, tile):
        self.cells[self.idx(x, y)] = tile

    def floor_cells(self):
        """Get all interior Floor cells, row by row"""
        return [
            (x, y)
            for y in range(1, self.size - 1)
            for x in range(1, self.size - 1)
            if self.get(x, y) == Tile.FLOOR
        ]

    def count_neighbors(self, x, y, tile):
        """Count orthogonal neighbours of the given kind"""
        count = 0
        for dx, dy in DIRS:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny) and self.get(nx, ny) == tile:
                count += 1
        return count

    def rows(self):
        """Get tiles as a list of rows of ints (for rendering)"""
        return [
            [int(t) for t in self.cells[y * self.size:(y + 1) * self.size]]
            for y in range(self.size)
        ]

    def copy(self):
        grid = Grid(self.size)
        grid.cells = list(self.cells)
        return grid

    def __repr__(self):
        return f"Grid(size={self.size})"


# ========== WALKABILITY ==========

def is_walkable(grid, x, y, agent, used_safe=()):
    """
    Check if an agent may stand on a cell

    Args:
        grid: Grid object
        x, y: Cell coordinates
        agent: AGENT_PLAYER or AGENT_MONSTER
        used_safe: Positions of safe zones that have already been used

    Returns:
        bool
    """
    if not grid.in_bounds(x, y):
        return False
    tile = grid.get(x, y)
    if tile == Tile.WALL or tile == Tile.DOOR:
        return False
    if agent == AGENT_MONSTER and tile == Tile.SAFE:
        return (x, y) in used_safe
    return True


def walkable_for(grid, agent, used_safe=()):
    """Build a passable(x, y) predicate for an agent"""
    used_safe = frozenset(used_safe)

    def passable(x, y):
        return is_walkable(grid, x, y, agent, used_safe)

    return passable


# ========== PATHFINDING ==========

def _bfs_parents(start, goal, passable):
    """
    Run BFS from start until goal is found

    Returns:
        Parent map, or None if goal was not reached. With goal=None the
        whole component is explored and its parent map returned.
    """
    parents = {start: None}
    queue = deque([start])

    while queue:
        cur = queue.popleft()
        if cur == goal:
            return parents

        cx, cy = cur
        for dx, dy in DIRS:
            nxt = (cx + dx, cy + dy)
            if nxt in parents:
                continue
            if not passable(nxt[0], nxt[1]):
                continue
            parents[nxt] = cur
            queue.append(nxt)
    return parents if goal is None else None


def bfs_first_step(start, goal, passable):
    """
    First step of a shortest path from start to goal

    Neighbours are visited Up, Right, Down, Left, so ties between
    equal-length paths always resolve the same way.

    Returns:
        (x, y) of the first step, start if already at goal, None if unreachable
    """
    if start == goal:
        return start

    parents = _bfs_parents(start, goal, passable)
    if parents is None:
        return None

    step = goal
    while parents[step] != start:
        step = parents[step]
    return step


def bfs_shortest_path(start, goal, passable):
    """
    BFS shortest path

    Returns:
        List of cells from start to goal inclusive, or [] if unreachable
    """
    if start == goal:
        return [start]

    parents = _bfs_parents(start, goal, passable)
    if parents is None:
        return []

    path = []
    cur = goal
    while cur is not None:
        path.append(cur)
        cur = parents[cur]
    path.reverse()
    return path


def is_reachable(start, goal, passable):
    """Check if goal can be reached from start"""
    return bool(bfs_shortest_path(start, goal, passable))


def reachable_cells(start, passable):
    """Every cell connected to start"""
    return set(_bfs_parents(start, None, passable))
