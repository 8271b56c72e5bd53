import random

import pytest

from game.level_manager import Level
from maze.difficulty import DifficultyConfig
from maze.maze_core import Grid
from maze.placement import Features


def make_config(**overrides):
    values = {'name': 'test', 'monster_enabled': False, 'respawn': True, 'monster_tick_every': 1}
    values.update(overrides)
    return DifficultyConfig(**values)


def make_level(rows, features=None, config=None, **kwargs):
    grid = Grid.from_rows(rows)
    return Level(
        config or make_config(),
        grid,
        features or Features(),
        rng=random.Random(0),
        **kwargs
    )


OPEN_7 = [
    "#######",
    "#.....#",
    "#.....#",
    "#.....#",
    "#.....#",
    "#.....#",
    "#######",
]


@pytest.fixture
def open_level():
    return make_level(OPEN_7, start=(1, 1), exit_pos=(5, 5))
