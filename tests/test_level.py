import pytest

from entities.bomb import BombPickup
from entities.door import Key
from entities.switch import Switch, ToggleSpikes
from entities.trap import Spike
from game.collision import agents_collide
from game.controls import FrameInput
from game.game_state import GameState
from game.level_manager import LevelManager
from maze.difficulty import (
    get_difficulty_config, get_difficulty_description, LEVEL_CLASSIC, VARIANT_NAMES
)
from maze.maze_core import Tile
from maze.placement import Features
from utils.constants import RESPAWN_INVULN_FRAMES

from conftest import OPEN_7, make_config, make_level

RIGHT = FrameInput(right=True)
LEFT = FrameInput(left=True)
IDLE = FrameInput()

CORRIDOR_5 = [
    "#####",
    "#####",
    "#...#",
    "#####",
    "#####",
]

CORRIDOR_7 = [
    "#######",
    "#######",
    "#######",
    "#.....#",
    "#######",
    "#######",
    "#######",
]

WALLED_CENTER = [
    "#######",
    "#.....#",
    "#.###.#",
    "#.#.#.#",
    "#.###.#",
    "#.....#",
    "#######",
]


# ========== MOVEMENT AND WIN ==========

def test_walking_to_exit_wins():
    level = make_level(CORRIDOR_5, start=(1, 2), exit_pos=(3, 2))
    assert level.state == GameState.PLAYING

    level.update(0, RIGHT)
    assert level.player.pos == (2, 2)

    # Still inside the move delay
    level.update(100, RIGHT)
    assert level.player.pos == (2, 2)

    assert level.update(200, RIGHT) == GameState.WON
    assert level.won
    assert level.update(400, RIGHT) == GameState.WON
    assert level.player.pos == (3, 2)


def test_exit_needs_every_key():
    key = Key(3, 3)
    features = Features()
    features.keys = [key]
    level = make_level(OPEN_7, features, start=(1, 1), exit_pos=(5, 5))

    level.player.x, level.player.y = 5, 5
    assert level.check_win() is False
    assert level.is_playing()

    key.collect()
    level.player.keys_collected = 1
    assert level.check_win() is True


def test_blocked_move_still_restarts_debounce(open_level):
    # Up from (1, 1) is the border
    open_level.update(0, FrameInput(up=True))
    assert open_level.player.pos == (1, 1)

    open_level.update(100, RIGHT)
    assert open_level.player.pos == (1, 1)

    open_level.update(150, RIGHT)
    assert open_level.player.pos == (2, 1)


def test_first_held_direction_uses_the_frame(open_level):
    open_level.update(0, FrameInput(down=True, right=True))
    assert open_level.player.pos == (1, 2)

    # A blocked Left still spends the move window
    open_level.update(150, FrameInput(left=True, right=True))
    assert open_level.player.pos == (1, 2)


def test_heat_map_counts_visits(open_level):
    grid = open_level.grid
    assert open_level.heatmap[grid.idx(1, 1)] == 1

    open_level.update(0, RIGHT)
    open_level.update(150, FrameInput(left=True))
    assert open_level.heatmap[grid.idx(2, 1)] == 1
    assert open_level.heatmap[grid.idx(1, 1)] == 2


def test_doors_block_the_player(open_level):
    open_level.grid.set(2, 1, Tile.DOOR)
    open_level.update(0, RIGHT)
    assert open_level.player.pos == (1, 1)


# ========== MONSTER CONTACT ==========

def test_crossing_counts_as_contact():
    assert agents_collide((5, 5), (6, 5), (6, 5), (5, 5))
    assert agents_collide((5, 5), (6, 5), (7, 5), (6, 5))
    assert not agents_collide((5, 5), (6, 5), (7, 5), (7, 5))


def chase_level(**config):
    values = {'monster_enabled': True}
    values.update(config)
    return make_level(
        CORRIDOR_7, config=make_config(**values),
        start=(2, 3), exit_pos=(5, 3), monster_pos=(3, 3),
    )


def test_swap_kills_player(monkeypatch):
    level = chase_level()
    monkeypatch.setattr(level.monster, 'choose_target', lambda lvl: (2, 3))

    level.update(0, RIGHT)

    assert level.monster.pos == (2, 3)
    assert level.deaths == 1
    assert level.monster.learning_level == 2
    assert level.player.pos == (2, 3)
    assert level.player.invuln_frames == RESPAWN_INVULN_FRAMES
    assert level.is_playing()


def test_invulnerability_suppresses_contact(monkeypatch):
    level = chase_level()
    monkeypatch.setattr(level.monster, 'choose_target', lambda lvl: (2, 3))
    level.update(0, RIGHT)

    for frame in range(1, 11):
        level.update(frame * 16, IDLE)

    assert level.deaths == 1
    assert level.player.invuln_frames == RESPAWN_INVULN_FRAMES - 10


def test_death_without_respawn_is_game_over():
    level = chase_level(respawn=False)
    level.update(0, RIGHT)

    assert level.state == GameState.GAME_OVER
    assert level.game_over
    assert level.deaths == 1
    assert level.update(1000, FrameInput(left=True)) == GameState.GAME_OVER
    assert level.player.pos == (3, 3)


# ========== SPIKES AND SWITCHES ==========

def test_spike_kills_only_when_armed_and_raised():
    never = 10 ** 9
    features = Features()
    features.spikes = [
        Spike(2, 3, active=False, next_toggle=never),
        Spike(4, 3, active=True, next_toggle=never),
    ]
    features.switches = [Switch(3, 3, ToggleSpikes())]
    level = make_level(
        ["#######", "#######", "#######", "#.^*^.#", "#######", "#######", "#######"],
        features, start=(1, 3), exit_pos=(5, 3),
    )
    # Start disarmed so the switch press arms the spikes
    level.spike_manager.armed = False

    # Lowered spike: safe
    level.update(0, RIGHT)
    assert level.player.pos == (2, 3)
    assert level.deaths == 0

    # Switch arms every spike
    level.update(150, RIGHT)
    assert level.spike_manager.armed is True

    # Raised and armed: death, respawn at start
    level.update(300, RIGHT)
    assert level.deaths == 1
    assert level.player.pos == (1, 3)

    for t in range(450, 1200, 150):
        level.update(t, IDLE)
    assert level.deaths == 1


def test_fresh_level_spikes_start_armed():
    features = Features()
    features.spikes = [Spike(2, 3, active=True, next_toggle=10 ** 9)]
    level = make_level(
        ["#######", "#######", "#######", "#.^...#", "#######", "#######", "#######"],
        features, start=(1, 3), exit_pos=(5, 3),
    )
    assert level.spike_manager.armed is True

    level.update(0, RIGHT)
    assert level.deaths == 1
    assert level.player.pos == (1, 3)


def test_toggle_switch_from_default_state():
    features = Features()
    features.spikes = [Spike(3, 3, active=True, next_toggle=10 ** 9)]
    features.switches = [Switch(2, 3, ToggleSpikes())]
    level = make_level(
        ["#######", "#######", "#######", "#.*^..#", "#######", "#######", "#######"],
        features, start=(1, 3), exit_pos=(5, 3),
    )

    # First press disarms
    level.update(0, RIGHT)
    assert level.spike_manager.armed is False
    level.update(150, RIGHT)
    assert level.player.pos == (3, 3)
    assert level.deaths == 0

    # Back onto the released switch re-arms
    level.update(300, LEFT)
    assert level.spike_manager.armed is True
    level.update(450, RIGHT)
    assert level.deaths == 1
    assert level.player.pos == (1, 3)


def test_switch_rearms_after_stepping_off():
    features = Features()
    switch = Switch(2, 1, ToggleSpikes())
    features.switches = [switch]
    level = make_level(OPEN_7, features, start=(1, 1), exit_pos=(5, 5))

    level.update(0, RIGHT)
    assert switch.active
    assert level.spike_manager.armed is False

    level.update(150, RIGHT)
    assert not switch.active
    assert level.spike_manager.armed is False


# ========== BOMBS ==========

def test_bomb_pickup_needs_free_hand(open_level):
    open_level.bomb_manager.pickups = [BombPickup(2, 1), BombPickup(3, 1)]

    open_level.update(0, RIGHT)
    assert open_level.player.has_bomb
    open_level.update(150, RIGHT)
    assert not open_level.bomb_manager.pickups[1].collected


def test_bomb_on_exit_is_rejected(open_level):
    player = open_level.player
    player.has_bomb = True
    player.x, player.y = 5, 5

    assert open_level.place_bomb(0) is None
    assert player.has_bomb
    assert len(open_level.timers) == 0


def test_bomb_chain_breaks_surrounding_walls():
    level = make_level(WALLED_CENTER, start=(3, 3), exit_pos=(5, 5))
    level.player.has_bomb = True

    level.update(0, FrameInput(bomb=True))
    assert level.bomb_manager.bomb is not None
    assert not level.player.has_bomb

    level.update(1999, FrameInput(bomb=True))
    assert level.bomb_manager.explosion is None

    level.update(2000, IDLE)
    assert level.bomb_manager.bomb is None
    assert len(level.bomb_manager.explosion.cells) == 9
    assert level.grid.get(3, 2) == Tile.WALL

    level.update(2300, IDLE)
    broken = level.bomb_manager.breaking.cells
    assert len(broken) == 8
    for x, y in broken:
        assert level.grid.get(x, y) == Tile.FLOOR
    assert level.snapshot(2300)['breaking_walls']['elapsed'] == 0

    level.update(2800, IDLE)
    assert level.bomb_manager.explosion is None
    assert level.bomb_manager.breaking is None


def test_blast_spares_protected_walls():
    level = make_level(WALLED_CENTER, start=(3, 3), exit_pos=(5, 5))
    level.spike_manager.spikes.append(Spike(2, 2, active=False))
    level.bomb_manager.handle('break_walls', (3, 3), level, 0)

    assert level.grid.get(2, 2) == Tile.WALL
    assert len(level.bomb_manager.breaking.cells) == 7


def test_border_survives_blast():
    level = make_level(OPEN_7, start=(1, 1), exit_pos=(5, 5))
    level.bomb_manager.handle('break_walls', (1, 1), level, 0)
    assert level.grid.get(0, 0) == Tile.WALL
    assert level.bomb_manager.breaking.cells == []


def test_only_one_bomb_at_a_time(open_level):
    open_level.player.has_bomb = True
    assert open_level.place_bomb(0) is not None
    open_level.player.has_bomb = True
    assert open_level.place_bomb(10) is None
    assert open_level.player.has_bomb


# ========== SESSION ==========

def test_stale_timer_ignored_after_restart():
    manager = LevelManager(LEVEL_CLASSIC.with_overrides(size=11), seed=3)
    old = manager.create_level(0)
    old.player.has_bomb = True
    assert old.place_bomb(0) is not None

    new = manager.restart(100)
    assert new is not old
    assert new.generation == old.generation + 1
    cells = list(new.grid.cells)

    new.advance_timers(5000)
    assert new.grid.cells == cells
    assert new.bomb_manager.explosion is None
    assert len(manager.timers) == 0


def test_restart_is_edge_triggered():
    manager = LevelManager(LEVEL_CLASSIC.with_overrides(size=11), seed=1)
    manager.update(0, IDLE)
    assert manager.generation == 1

    manager.update(16, FrameInput(restart=True))
    manager.update(32, FrameInput(restart=True))
    assert manager.generation == 2
    assert manager.get_current_level().state == GameState.PLAYING


def test_restart_from_game_over():
    manager = LevelManager(LEVEL_CLASSIC.with_overrides(size=11, respawn=False), seed=2)
    level = manager.create_level(0)
    level.kill_player()
    assert manager.state_manager.is_state(GameState.GAME_OVER)

    manager.update(16, FrameInput(restart=True))
    assert manager.get_current_level().is_playing()


def test_same_seed_same_session():
    a = LevelManager(LEVEL_CLASSIC, seed=11).create_level(0)
    b = LevelManager(LEVEL_CLASSIC, seed=11).create_level(0)
    assert a.grid.cells == b.grid.cells
    assert [k.pos for k in a.keys] == [k.pos for k in b.keys]


# ========== SNAPSHOT ==========

def test_snapshot_fields(open_level):
    open_level.update(0, RIGHT)
    snap = open_level.snapshot(500)

    assert snap['state'] == 'PLAYING'
    assert snap['size'] == 7
    assert len(snap['tiles']) == 7
    assert snap['exit'] == (5, 5)
    assert snap['player']['pos'] == (2, 1)
    assert snap['player']['trail'] == [(2, 1)]
    assert snap['monster'] is None
    assert snap['elapsed'] == 0.5
    assert snap['deaths'] == 0
    assert snap['bomb'] is None
    for field in ('keys', 'keys_required', 'switches', 'spikes', 'spikes_armed',
                  'safe_zones', 'powerups', 'bomb_pickups', 'effects',
                  'explosion', 'breaking_walls', 'won', 'game_over'):
        assert field in snap


# ========== VARIANTS ==========

def test_variant_lookup():
    assert get_difficulty_config(0) is LEVEL_CLASSIC
    assert get_difficulty_config('classic') is LEVEL_CLASSIC
    assert len(VARIANT_NAMES) == 5
    with pytest.raises(KeyError):
        get_difficulty_config('impossible')
    with pytest.raises(KeyError):
        get_difficulty_config(9)


def test_hunter_variant_has_no_respawn():
    hunter = get_difficulty_config('hunter')
    assert hunter.respawn is False
    assert 'Respawn: No' in get_difficulty_description('hunter')


def test_with_overrides_leaves_preset_alone():
    small = LEVEL_CLASSIC.with_overrides(size=11)
    assert small.size == 11
    assert small.exit_pos == (9, 9)
    assert LEVEL_CLASSIC.size == 21
