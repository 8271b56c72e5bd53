"""
Monster AI
A single pursuer that hunts the player with BFS, follows their scent when
alerted, and gets faster and smarter the longer the level runs
"""

import logging
from maze.maze_core import bfs_first_step, walkable_for
from utils.constants import (
    AGENT_MONSTER, MONSTER_BASE_COOLDOWN, DETECTION_RADIUS,
    ALERT_RISE, ALERT_DECAY, ALERT_THRESHOLD, TRAIL_MIN_HISTORY,
    MAGNET_THRESHOLD, MAX_LEARNING_LEVEL, LEARNING_COOLDOWN_STEP,
    HEAT_WEIGHT, SPEED_RAMP_INTERVAL_MS, SPEED_RAMP_STEP, SPEED_MULTIPLIER_CAP
)
from utils.helpers import clamp, manhattan_distance

logger = logging.getLogger(__name__)


def greedy_step(pos, target, passable):
    """
    Single-axis step toward target

    Tries the axis with the larger offset first, then the other one.

    Returns:
        New cell or None if both are blocked
    """
    dx = target[0] - pos[0]
    dy = target[1] - pos[1]
    step_x = ((dx > 0) - (dx < 0), 0)
    step_y = (0, (dy > 0) - (dy < 0))

    if abs(dx) >= abs(dy):
        order = [step_x, step_y]
    else:
        order = [step_y, step_x]

    for sx, sy in order:
        if sx == 0 and sy == 0:
            continue
        nx, ny = pos[0] + sx, pos[1] + sy
        if passable(nx, ny):
            return (nx, ny)
    return None


class Monster:
    """
    Adversary with two effective states: cooling down or ready to step
    """
    def __init__(self, x, y, base_cooldown=MONSTER_BASE_COOLDOWN,
                 detection_radius=DETECTION_RADIUS, heatmap_enabled=False):
        """
        Args:
            x, y: Spawn position
            base_cooldown: Ticks between steps at speed 1.0
            detection_radius: Manhattan radius that raises alert
            heatmap_enabled: Use the visit heat map when hunting
        """
        self.x = x
        self.y = y

        self.base_cooldown = base_cooldown
        self.cooldown = 0
        self.speed_multiplier = 1.0
        self.last_speed_up = None

        self.detection_radius = detection_radius
        self.alert = 0.0
        self.learning_level = 1
        self.heatmap_enabled = heatmap_enabled

        self.target = None

    @property
    def pos(self):
        return (self.x, self.y)

    def can_sense(self, player_pos):
        return manhattan_distance(self.pos, player_pos) <= self.detection_radius

    def update_alert(self, player_pos):
        """Raise alert near the player, let it fade otherwise"""
        if self.can_sense(player_pos):
            self.alert += ALERT_RISE
        else:
            self.alert -= ALERT_DECAY
        self.alert = clamp(self.alert, 0.0, 100.0)

    def effective_cooldown(self):
        """Ticks to wait after a step, shortened by speed and learning"""
        cooldown = int(self.base_cooldown / self.speed_multiplier)
        cooldown -= (self.learning_level - 1) // LEARNING_COOLDOWN_STEP
        return max(1, cooldown)

    def learn(self):
        """Called on every player death"""
        self.learning_level = min(MAX_LEARNING_LEVEL, self.learning_level + 1)
        logger.info("monster learning level now %s", self.learning_level)

    def ramp_speed(self, now):
        """Speed up on a fixed wall-clock interval"""
        if self.last_speed_up is None:
            self.last_speed_up = now
            return
        if now - self.last_speed_up >= SPEED_RAMP_INTERVAL_MS:
            self.last_speed_up = now
            self.speed_multiplier = min(SPEED_MULTIPLIER_CAP, self.speed_multiplier + SPEED_RAMP_STEP)

    def _hottest_cell(self, heatmap, size):
        """Best heat-weighted cell, or None if nothing scores above zero"""
        weight = self.learning_level * HEAT_WEIGHT
        best = None
        best_score = 0.0
        for i, heat in enumerate(heatmap):
            if heat <= 0:
                continue
            cell = (i % size, i // size)
            score = heat * weight - manhattan_distance(self.pos, cell)
            if score > best_score:
                best = cell
                best_score = score
        return best

    def choose_target(self, level):
        """
        Pick the cell to hunt, in priority order:
        1. a used safe zone whose magnet is still strong
        2. the oldest trail cell, when alerted and the trail is long enough
        3. the heat map hot spot, when the player is out of range (heat map variants)
        4. the player
        """
        player = level.player

        zone = level.safe_zone_manager.strongest_magnet(MAGNET_THRESHOLD)
        if zone is not None:
            return zone.pos

        if self.alert > ALERT_THRESHOLD and len(player.trail) > TRAIL_MIN_HISTORY:
            return player.trail[-1]

        if self.heatmap_enabled and not self.can_sense(player.pos):
            hot = self._hottest_cell(level.heatmap, level.grid.size)
            if hot is not None:
                return hot

        return player.pos

    def step_toward(self, target, level):
        """
        Move one cell toward target, BFS first, greedy if unreachable

        Returns:
            True if the monster moved
        """
        passable = walkable_for(level.grid, AGENT_MONSTER, level.safe_zone_manager.used_positions())

        step = bfs_first_step(self.pos, target, passable)
        if step is None:
            step = greedy_step(self.pos, target, passable)
        if step is None or step == self.pos:
            return False

        self.x, self.y = step
        return True

    def update(self, level):
        """
        Run one monster tick

        Returns:
            True if the monster moved
        """
        self.update_alert(level.player.pos)

        if self.cooldown > 0:
            self.cooldown -= 1
            return False

        self.target = self.choose_target(level)
        moved = self.step_toward(self.target, level)
        self.cooldown = self.effective_cooldown()
        return moved

    def __repr__(self):
        return f"Monster(pos=({self.x},{self.y}), alert={self.alert:.0f}, level={self.learning_level})"
