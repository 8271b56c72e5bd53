import itertools

import pytest

from maze.maze_core import (
    Grid, Tile, is_walkable, walkable_for, bfs_first_step, bfs_shortest_path, is_reachable
)
from utils.constants import AGENT_PLAYER, AGENT_MONSTER

FIXTURE = [
    "#########",
    "#...#...#",
    "#.#.#.#.#",
    "#.#...#.#",
    "#.#####.#",
    "#.......#",
    "#.##.##.#",
    "#...#...#",
    "#########",
]


def brute_force_distances(grid, passable):
    """All-pairs shortest distances by repeated relaxation"""
    cells = [(x, y) for y in range(grid.size) for x in range(grid.size) if passable(x, y)]
    inf = float('inf')
    dist = {(a, b): (0 if a == b else inf) for a in cells for b in cells}
    for a in cells:
        for b in cells:
            if abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1:
                dist[(a, b)] = 1
    for k in cells:
        for a in cells:
            for b in cells:
                if dist[(a, k)] + dist[(k, b)] < dist[(a, b)]:
                    dist[(a, b)] = dist[(a, k)] + dist[(k, b)]
    return cells, dist


def test_from_rows_reads_legend():
    grid = Grid.from_rows(["#####", "#.S^#", "#D*R#", "#...#", "#####"])
    assert grid.get(0, 0) == Tile.WALL
    assert grid.get(2, 1) == Tile.SAFE
    assert grid.get(3, 1) == Tile.SPIKE
    assert grid.get(1, 2) == Tile.DOOR
    assert grid.get(2, 2) == Tile.SWITCH
    assert grid.get(3, 2) == Tile.ROTATING_BLOCK


def test_from_rows_rejects_ragged_rows():
    with pytest.raises(ValueError):
        Grid.from_rows(["###", "#.", "###"])


def test_bfs_matches_brute_force_distances():
    grid = Grid.from_rows(FIXTURE)
    passable = walkable_for(grid, AGENT_PLAYER)
    cells, dist = brute_force_distances(grid, passable)

    for a, b in itertools.product(cells, cells):
        path = bfs_shortest_path(a, b, passable)
        if dist[(a, b)] == float('inf'):
            assert path == []
            continue
        assert path[0] == a and path[-1] == b
        assert len(path) - 1 == dist[(a, b)]
        for p, q in zip(path, path[1:]):
            assert abs(p[0] - q[0]) + abs(p[1] - q[1]) == 1


def test_first_step_is_on_a_shortest_path():
    grid = Grid.from_rows(FIXTURE)
    passable = walkable_for(grid, AGENT_PLAYER)
    cells, dist = brute_force_distances(grid, passable)

    for a, b in itertools.product(cells, cells):
        step = bfs_first_step(a, b, passable)
        if a == b:
            assert step == a
        elif dist[(a, b)] == float('inf'):
            assert step is None
        else:
            assert dist[(step, b)] == dist[(a, b)] - 1


def test_tie_break_prefers_up_then_right():
    grid = Grid.from_rows(["#####", "#...#", "#...#", "#...#", "#####"])
    passable = walkable_for(grid, AGENT_PLAYER)
    # (1, 3) -> (3, 1): Up and Right both start shortest paths, Up wins
    assert bfs_first_step((1, 3), (3, 1), passable) == (1, 2)
    # (1, 1) -> (3, 3): Right and Down tie, Right wins
    assert bfs_first_step((1, 1), (3, 3), passable) == (2, 1)


def test_unreachable_target():
    grid = Grid.from_rows(["#####", "#.#.#", "#.#.#", "#.#.#", "#####"])
    passable = walkable_for(grid, AGENT_PLAYER)
    assert bfs_first_step((1, 1), (3, 1), passable) is None
    assert bfs_shortest_path((1, 1), (3, 1), passable) == []
    assert not is_reachable((1, 1), (3, 1), passable)


def test_walkability_rules_per_agent():
    grid = Grid.from_rows(["#####", "#.S^#", "#D*R#", "#...#", "#####"])

    assert not is_walkable(grid, -1, 1, AGENT_PLAYER)
    assert not is_walkable(grid, 0, 0, AGENT_MONSTER)

    # Doors block everyone
    assert not is_walkable(grid, 1, 2, AGENT_PLAYER)
    assert not is_walkable(grid, 1, 2, AGENT_MONSTER)

    # Safe zones block only the monster, until used
    assert is_walkable(grid, 2, 1, AGENT_PLAYER)
    assert not is_walkable(grid, 2, 1, AGENT_MONSTER)
    assert is_walkable(grid, 2, 1, AGENT_MONSTER, used_safe={(2, 1)})

    # Spikes, switches and rotating floor are plain ground
    for x, y in [(3, 1), (2, 2), (3, 2)]:
        assert is_walkable(grid, x, y, AGENT_PLAYER)
        assert is_walkable(grid, x, y, AGENT_MONSTER)


def test_walkable_for_reads_live_grid():
    grid = Grid.from_rows(["#####", "#.#.#", "#...#", "#...#", "#####"])
    passable = walkable_for(grid, AGENT_PLAYER)
    assert not passable(2, 1)
    grid.set(2, 1, Tile.FLOOR)
    assert passable(2, 1)
