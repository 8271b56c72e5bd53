"""
Feature placement - scatters keys, hazards, and pickups over a generated maze

Every item is placed with a bounded rejection-sampling loop. When the
attempt budget runs out the best candidate seen is used, or the item is
skipped, so placement always terminates.
"""

import itertools
import logging
from maze.maze_core import (
    Tile, walkable_for, bfs_shortest_path, is_reachable, reachable_cells
)
from entities.door import Key, Door
from entities.trap import Spike
from entities.safe_zone import SafeZone
from entities.rotating_block import RotatingBlock, BLOCK_PATTERN, rotate_pattern
from entities.switch import Switch, RotateBlock, OpenDoor, ToggleSpikes, Reroute
from entities.bomb import BombPickup
from entities.powerup import PowerUp
from utils.constants import (
    AGENT_PLAYER, PLACEMENT_ATTEMPTS, POWERUP_TYPES,
    KEY_MIN_SEPARATION, KEY_EXCLUSION_RADIUS, SAFE_EXCLUSION_RADIUS,
    DOOR_EXCLUSION_RADIUS, SPIKE_EXCLUSION_RADIUS, SPIKE_GROUP_RADIUS,
    SWITCH_KINDS, SWITCH_ROTATE, SWITCH_DOOR, SWITCH_TOGGLE_SPIKES
)
from utils.helpers import manhattan_distance, chebyshev_distance

logger = logging.getLogger(__name__)


class Features:
    """
    Everything placed on a level besides the two agents
    """
    def __init__(self):
        self.keys = []
        self.safe_zones = []
        self.doors = []
        self.spikes = []
        self.blocks = []
        self.switches = []
        self.bombs = []
        self.powerups = []
        self.forced_doors = []

    def __repr__(self):
        return (f"Features(keys={len(self.keys)}, safe={len(self.safe_zones)}, "
                f"doors={len(self.doors)}, spikes={len(self.spikes)}, "
                f"blocks={len(self.blocks)}, switches={len(self.switches)}, "
                f"bombs={len(self.bombs)}, powerups={len(self.powerups)})")


def sample_cell(candidates, rng, accept, score=None, attempts=PLACEMENT_ATTEMPTS, label='item'):
    """
    Bounded rejection sampling

    Args:
        candidates: List of cells to draw from
        rng: random.Random instance
        accept: accept(cell) -> bool
        score: Optional score(cell) -> number or None, used as fallback
        attempts: Attempt budget
        label: Name used in log messages

    Returns:
        Accepted cell, best fallback cell, or None if the item is skipped
    """
    if not candidates:
        logger.warning("no free cells left for %s, skipping", label)
        return None

    best = None
    best_score = None
    for _ in range(attempts):
        cell = rng.choice(candidates)
        if accept(cell):
            return cell
        if score is not None:
            s = score(cell)
            if s is not None and (best_score is None or s > best_score):
                best = cell
                best_score = s

    if best is not None:
        logger.warning("placement budget exhausted for %s, using best candidate %s", label, best)
    else:
        logger.warning("placement budget exhausted for %s, skipping", label)
    return best


class _Placer:
    """Shared state while placing one level's features"""
    def __init__(self, grid, config, rng, start, exit_pos, monster_pos, now):
        self.grid = grid
        self.config = config
        self.rng = rng
        self.start = start
        self.exit_pos = exit_pos
        self.monster_pos = monster_pos
        self.now = now
        self.taken = {start, exit_pos, monster_pos}
        self.features = Features()

    def free_floor(self):
        return [c for c in self.grid.floor_cells() if c not in self.taken]

    def count(self, value_range):
        low, high = value_range
        if high <= 0:
            return 0
        return self.rng.randint(low, high)

    def far_from_start(self, cell, radius):
        return manhattan_distance(cell, self.start) > radius

    # ========== KEYS ==========

    def place_keys(self):
        size = self.grid.size
        for i in range(self.config.key_count):
            keys = self.features.keys

            def separation(cell):
                if not keys:
                    return size * 2
                return min(manhattan_distance(cell, k.pos) for k in keys)

            def accept(cell):
                return (self.far_from_start(cell, KEY_EXCLUSION_RADIUS)
                        and manhattan_distance(cell, self.exit_pos) > KEY_EXCLUSION_RADIUS
                        and separation(cell) >= KEY_MIN_SEPARATION)

            def score(cell):
                penalty = 0
                if not self.far_from_start(cell, KEY_EXCLUSION_RADIUS):
                    penalty += size
                if manhattan_distance(cell, self.exit_pos) <= KEY_EXCLUSION_RADIUS:
                    penalty += size
                return separation(cell) - penalty

            cell = sample_cell(self.free_floor(), self.rng, accept, score, label=f"key {i}")
            if cell is None:
                continue
            keys.append(Key(*cell))
            self.taken.add(cell)

    # ========== SAFE ZONES ==========

    def place_safe_zones(self):
        for i in range(self.count(self.config.safe_zones)):
            anchor = sample_cell(
                self.free_floor(), self.rng,
                lambda cell: self.far_from_start(cell, SAFE_EXCLUSION_RADIUS),
                label=f"safe zone {i}",
            )
            if anchor is None:
                continue

            offsets = [(0, 0), (1, 0), (0, 1), (1, 1)]
            if self.rng.random() < 0.5:
                # L shape: drop one corner other than the anchor
                offsets.pop(self.rng.randint(1, 3))

            for dx, dy in offsets:
                cell = (anchor[0] + dx, anchor[1] + dy)
                if not self.grid.is_interior(*cell) or cell in self.taken:
                    continue
                if self.grid.get(*cell) != Tile.FLOOR:
                    continue
                self.grid.set(cell[0], cell[1], Tile.SAFE)
                self.features.safe_zones.append(SafeZone(*cell))
                self.taken.add(cell)

    # ========== DOORS ==========

    def _is_corridor(self, cell):
        x, y = cell
        g = self.grid
        horizontal = (g.get(x - 1, y) == Tile.FLOOR and g.get(x + 1, y) == Tile.FLOOR
                      and g.get(x, y - 1) == Tile.WALL and g.get(x, y + 1) == Tile.WALL)
        vertical = (g.get(x, y - 1) == Tile.FLOOR and g.get(x, y + 1) == Tile.FLOOR
                    and g.get(x - 1, y) == Tile.WALL and g.get(x + 1, y) == Tile.WALL)
        return horizontal or vertical

    def place_doors(self):
        for i in range(self.count(self.config.doors)):
            cell = sample_cell(
                self.free_floor(), self.rng,
                lambda c: (self._is_corridor(c)
                           and self.far_from_start(c, DOOR_EXCLUSION_RADIUS)
                           and manhattan_distance(c, self.exit_pos) > DOOR_EXCLUSION_RADIUS),
                label=f"door {i}",
            )
            if cell is None:
                continue
            self.grid.set(cell[0], cell[1], Tile.DOOR)
            self.features.doors.append(Door(*cell))
            self.taken.add(cell)

    # ========== ROTATING BLOCKS ==========

    def _block_fits(self, anchor):
        x, y = anchor
        cells = [(x, y), (x + 1, y), (x, y + 1), (x + 1, y + 1)]
        for cell in cells:
            if not self.grid.is_interior(*cell) or cell in self.taken:
                return False
            if self.grid.get(*cell) not in (Tile.FLOOR, Tile.WALL):
                return False

        # Every rotation state of every block must keep the exit and keys
        # reachable. Doors count as passable here, the backstop opens them.
        targets = [self.exit_pos] + [k.pos for k in self.features.keys]
        blocks = self.features.blocks + [RotatingBlock(x, y, BLOCK_PATTERN)]
        for trial in rotation_states(self.grid, blocks):
            reachable = reachable_cells(self.start, _door_passable(trial))
            if any(target not in reachable for target in targets):
                return False
        return True

    def place_rotating_blocks(self):
        anchors = [
            (x, y)
            for y in range(1, self.grid.size - 2)
            for x in range(1, self.grid.size - 2)
        ]
        for i in range(self.count(self.config.rotating_blocks)):
            anchor = sample_cell(anchors, self.rng, self._block_fits, label=f"rotating block {i}")
            if anchor is None:
                continue
            block = RotatingBlock(anchor[0], anchor[1], BLOCK_PATTERN)
            block.write(self.grid)
            self.features.blocks.append(block)
            self.taken.update(block.cells())

    # ========== SPIKES ==========

    def place_spikes(self):
        total = self.count(self.config.spikes)
        if total == 0:
            return

        anchors = []
        for i in range(self.rng.randint(1, 2)):
            anchor = sample_cell(
                self.free_floor(), self.rng,
                lambda c: self.far_from_start(c, SPIKE_EXCLUSION_RADIUS + SPIKE_GROUP_RADIUS),
                label=f"spike anchor {i}",
            )
            if anchor is not None:
                anchors.append(anchor)
        if not anchors:
            return

        for i in range(total):
            anchor = anchors[i % len(anchors)]
            cell = sample_cell(
                self.free_floor(), self.rng,
                lambda c: (chebyshev_distance(c, anchor) <= SPIKE_GROUP_RADIUS
                           and self.far_from_start(c, SPIKE_EXCLUSION_RADIUS)),
                score=lambda c: -chebyshev_distance(c, anchor),
                label=f"spike {i}",
            )
            if cell is None:
                continue
            spike = Spike(cell[0], cell[1], active=self.rng.random() < 0.5)
            spike.schedule(self.now, self.rng)
            self.grid.set(cell[0], cell[1], Tile.SPIKE)
            self.features.spikes.append(spike)
            self.taken.add(cell)

    # ========== SWITCHES ==========

    def _make_effect(self, kind, state):
        features = self.features
        if kind == SWITCH_ROTATE:
            if not features.blocks:
                return None
            block = features.blocks[state['rotate'] % len(features.blocks)]
            state['rotate'] += 1
            return RotateBlock(block)
        if kind == SWITCH_DOOR:
            for door in features.doors:
                if door not in state['bound_doors']:
                    state['bound_doors'].add(door)
                    return OpenDoor(door)
            return None
        if kind == SWITCH_TOGGLE_SPIKES:
            return ToggleSpikes() if features.spikes else None
        return Reroute()

    def place_switches(self):
        state = {'rotate': 0, 'bound_doors': set()}
        kind_index = 0
        for i in range(self.config.switch_count):
            effect = None
            for offset in range(len(SWITCH_KINDS)):
                kind = SWITCH_KINDS[(kind_index + offset) % len(SWITCH_KINDS)]
                effect = self._make_effect(kind, state)
                if effect is not None:
                    kind_index = (kind_index + offset + 1) % len(SWITCH_KINDS)
                    break

            cell = sample_cell(
                self.free_floor(), self.rng,
                lambda c: self.far_from_start(c, 2),
                label=f"switch {i}",
            )
            if cell is None:
                continue
            self.grid.set(cell[0], cell[1], Tile.SWITCH)
            self.features.switches.append(Switch(cell[0], cell[1], effect))
            self.taken.add(cell)

    # ========== PICKUPS ==========

    def place_pickups(self):
        for i in range(self.count(self.config.bombs)):
            cell = sample_cell(self.free_floor(), self.rng, lambda c: self.far_from_start(c, 2),
                               label=f"bomb {i}")
            if cell is not None:
                self.features.bombs.append(BombPickup(*cell))
                self.taken.add(cell)

        for i in range(self.count(self.config.powerups)):
            cell = sample_cell(self.free_floor(), self.rng, lambda c: self.far_from_start(c, 2),
                               label=f"power-up {i}")
            if cell is not None:
                self.features.powerups.append(PowerUp(cell[0], cell[1], self.rng.choice(POWERUP_TYPES)))
                self.taken.add(cell)


def _door_passable(grid):
    """Player predicate that treats closed doors as open"""
    player_passable = walkable_for(grid, AGENT_PLAYER)

    def passable(x, y):
        if player_passable(x, y):
            return True
        return grid.in_bounds(x, y) and grid.get(x, y) == Tile.DOOR

    return passable


def rotation_states(grid, blocks):
    """
    Yield a copy of grid for every combination of block rotations

    The copy is taken lazily, so changes made to grid between steps show up
    in the states that follow.
    """
    for turns in itertools.product(range(4), repeat=len(blocks)):
        trial = grid.copy()
        for block, n in zip(blocks, turns):
            pattern = block.pattern
            for _ in range(n):
                pattern = rotate_pattern(pattern)
            RotatingBlock(block.x, block.y, pattern).write(trial)
        yield trial


def _open_blocking_doors(grid, doors, start, targets):
    passable = walkable_for(grid, AGENT_PLAYER)
    forced = []
    for target in targets:
        if is_reachable(start, target, passable):
            continue

        path = bfs_shortest_path(start, target, _door_passable(grid))
        if not path:
            logger.warning("target %s unreachable even through doors", target)
            continue

        for cell in path:
            for door in doors:
                if door.pos == cell and door.open(grid):
                    forced.append(door)
                    logger.warning("forced door at %s open to reach %s", cell, target)
    return forced


def ensure_solvable(grid, doors, start, targets, blocks=()):
    """
    Open the doors standing between start and any unreachable target

    For each target the shortest route that may pass closed doors is found,
    and exactly the doors on it are opened. With rotating blocks this is
    repeated for every rotation state, so no switch can strand a target
    behind a door nothing opens.

    Returns:
        List of doors that were forced open
    """
    forced = []
    for trial in rotation_states(grid, list(blocks)):
        for door in _open_blocking_doors(trial, doors, start, targets):
            grid.set(door.x, door.y, Tile.FLOOR)
            forced.append(door)
    return forced


def place_features(grid, config, rng, start, exit_pos, monster_pos, now=0):
    """
    Place every feature the config asks for, then make sure the level is solvable

    Args:
        grid: Generated Grid, mutated in place
        config: DifficultyConfig
        rng: random.Random instance
        start, exit_pos, monster_pos: Reserved cells
        now: Level start timestamp (ms), used for spike schedules

    Returns:
        Features object
    """
    placer = _Placer(grid, config, rng, start, exit_pos, monster_pos, now)
    placer.place_keys()
    placer.place_safe_zones()
    placer.place_doors()
    placer.place_rotating_blocks()
    placer.place_spikes()
    placer.place_switches()
    placer.place_pickups()

    features = placer.features
    targets = [exit_pos] + [k.pos for k in features.keys]
    features.forced_doors = ensure_solvable(grid, features.doors, start, targets, features.blocks)

    logger.debug("placed %r", features)
    return features
