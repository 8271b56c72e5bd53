"""
Maze generation - randomized DFS backtracker on a 2-cell lattice
"""

import logging
import random
from utils.constants import CARVE_DIRS, WIDEN_ATTEMPTS
from maze.maze_core import Grid, Tile

logger = logging.getLogger(__name__)


def _check_size(size):
    if size < 5 or size % 2 == 0:
        raise ValueError(f"Maze size must be odd and at least 5, got {size}")


# ========== GENERATOR: DFS BACKTRACKER ==========

def gen_dfs_backtracker(size, rng=None):
    """
    Depth-First Search with backtracking - animated generator

    Carving starts at (1, 1) and only ever anchors on odd coordinates, so
    corridors are one tile wide with a wall between parallel corridors.
    The walk keeps its own stack instead of recursing.

    Yields:
        State dicts {"grid", "current", "carved", "done"}
    """
    _check_size(size)
    rng = rng or random.Random()

    grid = Grid(size)
    grid.set(1, 1, Tile.FLOOR)

    dirs = list(CARVE_DIRS)
    rng.shuffle(dirs)
    # Each frame is (x, y, shuffled directions, next direction index)
    stack = [[1, 1, dirs, 0]]

    yield {"grid": grid, "current": (1, 1), "carved": None, "done": False}

    while stack:
        frame = stack[-1]
        cx, cy, dirs, i = frame

        if i >= len(dirs):
            stack.pop()
            continue
        frame[3] = i + 1

        dx, dy = dirs[i]
        nx, ny = cx + dx, cy + dy
        if not grid.is_interior(nx, ny) or grid.get(nx, ny) != Tile.WALL:
            continue

        mx, my = cx + dx // 2, cy + dy // 2
        grid.set(mx, my, Tile.FLOOR)
        grid.set(nx, ny, Tile.FLOOR)

        next_dirs = list(CARVE_DIRS)
        rng.shuffle(next_dirs)
        stack.append([nx, ny, next_dirs, 0])

        yield {"grid": grid, "current": (nx, ny), "carved": ((cx, cy), (nx, ny)), "done": False}

    yield {"grid": grid, "current": (1, 1), "carved": None, "done": True}


# ========== CORRIDOR WIDENING ==========

def widen_corridors(grid, rng, attempts=WIDEN_ATTEMPTS):
    """
    Open random interior walls that touch at least two floor cells

    Only ever adds floor, so existing connections are kept.

    Returns:
        Number of walls opened
    """
    opened = 0
    for _ in range(attempts):
        x = rng.randrange(1, grid.size - 1)
        y = rng.randrange(1, grid.size - 1)
        if grid.get(x, y) != Tile.WALL:
            continue
        if grid.count_neighbors(x, y, Tile.FLOOR) >= 2:
            grid.set(x, y, Tile.FLOOR)
            opened += 1
    return opened


def generate_maze(size, rng=None, exit_pos=None, widen_attempts=WIDEN_ATTEMPTS):
    """
    Generate a complete maze instantly

    Args:
        size: Odd grid size
        rng: random.Random instance
        exit_pos: Cell forced to Floor after carving (default: (size-2, size-2))
        widen_attempts: Corridor widening attempts

    Returns:
        Grid object
    """
    rng = rng or random.Random()
    last_state = None
    for state in gen_dfs_backtracker(size, rng):
        last_state = state

    grid = last_state["grid"]

    if exit_pos is None:
        exit_pos = (size - 2, size - 2)
    grid.set(exit_pos[0], exit_pos[1], Tile.FLOOR)

    opened = widen_corridors(grid, rng, widen_attempts)
    logger.debug("maze %sx%s generated, %s walls widened", size, size, opened)
    return grid
