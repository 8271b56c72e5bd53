"""
Level Manager - owns the per-level game context and the frame pipeline
"""

import logging
import random
from maze.generator import generate_maze
from maze.maze_core import is_walkable
from maze.placement import Features, place_features
from entities.player import Player
from entities.monster import Monster
from entities.trap import SpikeManager
from entities.safe_zone import SafeZoneManager
from entities.bomb import BombManager
from entities.powerup import PowerUpManager
from entities.switch import get_switch_at
from game.collision import CollisionHandler
from game.controls import IntentEdge
from game.game_state import GameState, GameStateManager
from game.timers import TimerQueue
from utils.constants import AGENT_PLAYER, RESPAWN_INVULN_FRAMES

logger = logging.getLogger(__name__)


class Level:
    """
    All mutable state of one level, passed explicitly to every component
    """
    def __init__(self, config, grid, features=None, rng=None, start=None, exit_pos=None,
                 monster_pos=None, timers=None, generation=0, now=0, state_manager=None):
        """
        Args:
            config: DifficultyConfig
            grid: Grid object (already generated)
            features: Features from placement, or None for a bare grid
            rng: random.Random instance
            start: Player start / respawn cell (default (1, 1))
            exit_pos: Exit cell (default bottom-right interior corner)
            monster_pos: Monster spawn (default top-right interior corner)
            timers: TimerQueue shared by the session
            generation: Token that tags this level's deferred events
            now: Level start timestamp (ms)
            state_manager: GameStateManager shared by the session
        """
        self.config = config
        self.grid = grid
        self.rng = rng or random.Random()
        self.generation = generation
        self.timers = timers if timers is not None else TimerQueue()

        size = grid.size
        self.start_pos = start or (1, 1)
        self.respawn_pos = self.start_pos
        self.exit_pos = exit_pos or (size - 2, size - 2)

        features = features or Features()
        self.keys = features.keys
        self.doors = features.doors
        self.switches = features.switches
        self.blocks = features.blocks
        self.spike_manager = SpikeManager(features.spikes)
        self.safe_zone_manager = SafeZoneManager(features.safe_zones)
        self.bomb_manager = BombManager(features.bombs)
        self.powerup_manager = PowerUpManager(features.powerups)

        self.player = Player(
            self.start_pos[0], self.start_pos[1],
            move_delay=config.move_delay, trail_length=config.trail_length,
        )
        self.monster = None
        if config.monster_enabled:
            mx, my = monster_pos or (size - 2, 1)
            self.monster = Monster(
                mx, my,
                base_cooldown=config.monster_cooldown,
                detection_radius=config.detection_radius,
                heatmap_enabled=config.heatmap_enabled,
            )

        # Visit counts per cell
        self.heatmap = [0] * (size * size)
        self.heatmap[grid.idx(*self.start_pos)] += 1

        self.collision = CollisionHandler()
        self._bomb_edge = IntentEdge()

        self.started_at = now
        self.frame_count = 0
        self.deaths = 0

        self.state_manager = state_manager or GameStateManager()
        if not self.state_manager.is_state(GameState.GENERATING):
            self.state_manager.transition_to(GameState.GENERATING)
        self.state_manager.transition_to(GameState.PLAYING)

    # ========== STATE ==========

    @property
    def state(self):
        return self.state_manager.current_state

    @property
    def won(self):
        return self.state_manager.is_state(GameState.WON)

    @property
    def game_over(self):
        return self.state_manager.is_state(GameState.GAME_OVER)

    def is_playing(self):
        return self.state_manager.is_state(GameState.PLAYING)

    def elapsed(self, now):
        """Seconds since the level started"""
        return (now - self.started_at) / 1000.0

    # ========== PROTECTION ==========

    def block_cells(self):
        cells = set()
        for block in self.blocks:
            cells.update(block.cells())
        return cells

    def agent_cells(self):
        cells = {self.player.pos}
        if self.monster is not None:
            cells.add(self.monster.pos)
        return cells

    def is_bomb_protected(self, x, y):
        """Cells a bomb can never be placed on"""
        pos = (x, y)
        return (pos == self.exit_pos
                or pos in self.safe_zone_manager.positions()
                or pos in self.spike_manager.positions())

    def is_blast_protected(self, x, y):
        """Walls a blast must leave standing"""
        if self.is_bomb_protected(x, y) or self.grid.is_border(x, y):
            return True
        if self.monster is not None and self.monster.pos == (x, y):
            return True
        return (x, y) in self.block_cells()

    # ========== ACTIONS ==========

    def try_move(self, directions, now):
        """
        Attempt one debounced player step

        The debounce clock restarts on every attempt, blocked or not.

        Returns:
            Tile-entry result dict, or None if the player did not move
        """
        player = self.player
        for dx, dy in directions:
            if not player.can_move(now):
                break
            player.last_move_time = now

            nx, ny = player.x + dx, player.y + dy
            if not is_walkable(self.grid, nx, ny, AGENT_PLAYER):
                continue

            old_switch = get_switch_at(self.switches, player.x, player.y)
            player.move_to(nx, ny)
            self.heatmap[self.grid.idx(nx, ny)] += 1
            if old_switch is not None:
                old_switch.release()

            result = self.collision.handle_tile_enter(self, now)
            if result['player_died']:
                logger.info("player hit spikes at %s", player.pos)
                self.kill_player()
            return result
        return None

    def place_bomb(self, now):
        """Drop the player's bomb, returns the PlacedBomb or None"""
        return self.bomb_manager.place(self, now)

    def kill_player(self):
        """Count a death, then respawn or end the game"""
        self.deaths += 1
        if self.monster is not None:
            self.monster.learn()

        if self.config.respawn:
            self.player.respawn(self.respawn_pos[0], self.respawn_pos[1], RESPAWN_INVULN_FRAMES)
            logger.info("player died (%s deaths), respawned at %s", self.deaths, self.respawn_pos)
        else:
            self.state_manager.transition_to(GameState.GAME_OVER)
            logger.info("player died, game over")

    # ========== TIMING ==========

    def advance_timers(self, now):
        """Run every time-driven system once"""
        self.player.update(now)
        self.spike_manager.update(now, self.rng)
        self.safe_zone_manager.update(now, self.grid)

        for action, payload in self.timers.poll(now, self.generation):
            self.bomb_manager.handle(action, payload, self, now)

        if self.monster is not None and self.config.speed_ramp:
            self.monster.ramp_speed(now)

    def check_win(self):
        player = self.player
        if player.pos == self.exit_pos and player.keys_collected >= len(self.keys):
            self.state_manager.transition_to(GameState.WON)
            logger.info("level won in %s frames with %s deaths", self.frame_count, self.deaths)
            return True
        return False

    # ========== FRAME ==========

    def update(self, now, frame_input):
        """
        Run one frame

        Args:
            now: Timestamp (ms)
            frame_input: FrameInput for this frame

        Returns:
            Current GameState
        """
        if not self.is_playing():
            return self.state

        self.frame_count += 1
        prev_player = self.player.pos
        prev_monster = self.monster.pos if self.monster is not None else None

        self.try_move(frame_input.directions(), now)
        if not self.is_playing():
            return self.state

        if self._bomb_edge.pressed(frame_input.bomb):
            self.place_bomb(now)

        self.advance_timers(now)

        if self.monster is not None and self.frame_count % self.config.monster_tick_every == 0:
            self.monster.update(self)

        if self.collision.check_monster(self, prev_player, prev_monster):
            self.kill_player()
            if not self.is_playing():
                return self.state

        self.check_win()
        return self.state

    # ========== OUTPUT ==========

    def snapshot(self, now):
        """
        Everything a renderer or HUD needs for this frame

        Returns:
            Dictionary of plain values
        """
        player = self.player
        monster = self.monster
        bombs = self.bomb_manager

        snap = {
            'state': self.state.name,
            'won': self.won,
            'game_over': self.game_over,
            'size': self.grid.size,
            'tiles': self.grid.rows(),
            'exit': self.exit_pos,
            'player': {
                'pos': player.pos,
                'invulnerable': player.is_invulnerable(),
                'flashing': player.is_invulnerable() and self.frame_count % 4 < 2,
                'has_bomb': player.has_bomb,
                'keys': player.keys_collected,
                'trail': list(player.trail),
            },
            'monster': None,
            'keys': [k.pos for k in self.keys if not k.collected],
            'keys_required': len(self.keys),
            'bomb_pickups': [b.pos for b in bombs.pickups if not b.collected],
            'powerups': [(p.pos, p.type) for p in self.powerup_manager.get_uncollected_powerups()],
            'switches': [(s.pos, s.kind, s.active) for s in self.switches],
            'spikes': [(s.pos, s.active) for s in self.spike_manager.spikes],
            'spikes_armed': self.spike_manager.armed,
            'safe_zones': [(z.pos, z.used, z.magnet) for z in self.safe_zone_manager.zones],
            'deaths': self.deaths,
            'elapsed': self.elapsed(now),
            'effects': player.active_effects(now),
            'bomb': None,
            'explosion': None,
            'breaking_walls': None,
        }

        if monster is not None:
            snap['monster'] = {
                'pos': monster.pos,
                'alert': monster.alert,
                'speed_multiplier': monster.speed_multiplier,
                'learning_level': monster.learning_level,
            }
        if bombs.bomb is not None:
            snap['bomb'] = {'pos': bombs.bomb.pos, 'elapsed': now - bombs.bomb.placed_at}
        if bombs.explosion is not None:
            snap['explosion'] = {
                'cells': list(bombs.explosion.cells),
                'elapsed': now - bombs.explosion.started_at,
            }
        if bombs.breaking is not None:
            snap['breaking_walls'] = {
                'cells': list(bombs.breaking.cells),
                'elapsed': now - bombs.breaking.started_at,
            }
        return snap

    def __repr__(self):
        return f"Level(size={self.grid.size}, state={self.state.name}, generation={self.generation})"


class LevelManager:
    """
    Session controller: builds levels and restarts them
    """
    def __init__(self, config, seed=None):
        """
        Args:
            config: DifficultyConfig
            seed: Optional seed, makes the whole session reproducible
        """
        self.config = config
        self.rng = random.Random(seed)
        self.timers = TimerQueue()
        self.state_manager = GameStateManager()
        self.generation = 0
        self.current_level = None
        self._restart_edge = IntentEdge()

    def create_level(self, now=0):
        """
        Generate a fresh maze, place features, and start playing

        Returns:
            Level object
        """
        if not self.state_manager.is_state(GameState.GENERATING):
            self.state_manager.transition_to(GameState.GENERATING)
        self.generation += 1

        config = self.config
        grid = generate_maze(config.size, self.rng, config.exit_pos, config.widen_attempts)
        features = place_features(
            grid, config, self.rng,
            config.start_pos, config.exit_pos, config.monster_spawn, now,
        )

        self.current_level = Level(
            config, grid, features,
            rng=self.rng,
            start=config.start_pos,
            exit_pos=config.exit_pos,
            monster_pos=config.monster_spawn,
            timers=self.timers,
            generation=self.generation,
            now=now,
            state_manager=self.state_manager,
        )
        logger.info("level %s ready (%s, %r)", self.generation, config.name, features)
        return self.current_level

    def restart(self, now):
        """Throw the current level away and build a new one"""
        logger.info("restarting level %s", self.generation)
        return self.create_level(now)

    def get_current_level(self):
        return self.current_level

    def update(self, now, frame_input):
        """
        Run one frame of the session

        Returns:
            Current GameState
        """
        if self._restart_edge.pressed(frame_input.restart) or self.current_level is None:
            self.restart(now)
            return self.current_level.state
        return self.current_level.update(now, frame_input)

    def __repr__(self):
        return f"LevelManager(generation={self.generation}, current_level={self.current_level})"
