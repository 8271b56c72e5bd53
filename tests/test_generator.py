import random

import pytest

from maze.generator import gen_dfs_backtracker, generate_maze, widen_corridors
from maze.maze_core import Grid, Tile, walkable_for, is_reachable
from utils.constants import AGENT_PLAYER


def border_cells(size):
    for i in range(size):
        yield (i, 0)
        yield (i, size - 1)
        yield (0, i)
        yield (size - 1, i)


@pytest.mark.parametrize("seed", range(10))
@pytest.mark.parametrize("size", [5, 11, 21, 31])
def test_border_is_wall_and_exit_reachable(seed, size):
    grid = generate_maze(size, random.Random(seed))

    assert all(grid.get(x, y) == Tile.WALL for x, y in border_cells(size))
    passable = walkable_for(grid, AGENT_PLAYER)
    assert is_reachable((1, 1), (size - 2, size - 2), passable)


def test_every_lattice_anchor_is_carved():
    grid = generate_maze(21, random.Random(3), widen_attempts=0)
    for y in range(1, 20, 2):
        for x in range(1, 20, 2):
            assert grid.get(x, y) == Tile.FLOOR


def test_walls_between_anchors_only():
    # Without widening, cells at even/even offsets are never carved
    grid = generate_maze(21, random.Random(5), widen_attempts=0)
    for y in range(2, 20, 2):
        for x in range(2, 20, 2):
            assert grid.get(x, y) == Tile.WALL


def test_carving_is_iterative_on_large_grids():
    grid = generate_maze(401, random.Random(1), widen_attempts=0)
    assert grid.get(399, 399) == Tile.FLOOR


def test_same_seed_same_maze():
    a = generate_maze(21, random.Random(42))
    b = generate_maze(21, random.Random(42))
    assert a.cells == b.cells


def test_generator_yields_until_done():
    states = list(gen_dfs_backtracker(11, random.Random(0)))
    assert states[-1]["done"] is True
    assert all(not s["done"] for s in states[:-1])
    # One carve step per lattice cell except the first
    carves = [s for s in states if s["carved"] is not None]
    assert len(carves) == 5 * 5 - 1


def test_exit_is_forced_open():
    grid = generate_maze(11, random.Random(0), exit_pos=(8, 8), widen_attempts=0)
    assert grid.get(8, 8) == Tile.FLOOR


@pytest.mark.parametrize("size", [4, 3, 20])
def test_bad_sizes_rejected(size):
    with pytest.raises(ValueError):
        generate_maze(size, random.Random(0))


def test_widening_only_adds_floor():
    grid = generate_maze(21, random.Random(9), widen_attempts=0)
    before = grid.copy()
    opened = widen_corridors(grid, random.Random(9), attempts=200)

    assert opened > 0
    for i, tile in enumerate(before.cells):
        if tile == Tile.FLOOR:
            assert grid.cells[i] == Tile.FLOOR
    assert all(grid.get(x, y) == Tile.WALL for x, y in border_cells(21))


def test_widening_needs_two_floor_neighbours():
    grid = Grid.from_rows([
        "#####",
        "#.###",
        "#####",
        "#####",
        "#####",
    ])
    widen_corridors(grid, random.Random(0), attempts=500)
    assert grid.cells == Grid.from_rows([
        "#####",
        "#.###",
        "#####",
        "#####",
        "#####",
    ]).cells
