"""
Maze Chase - pygame front-end
Draws the level snapshot and feeds keyboard intents to the core
"""

import argparse
import logging

import pygame

from game.controls import FrameInput
from game.level_manager import LevelManager
from maze.difficulty import get_difficulty_config, get_difficulty_description
from maze.maze_core import Tile
from utils.constants import CELL_SIZE, FPS, PANEL_H, VARIANT_NAMES, VARIANT_CLASSIC
from utils.helpers import format_time
from utils.colors import (
    COLOR_BG, COLOR_PANEL_BG, COLOR_FLOOR, COLOR_WALL, COLOR_SAFE, COLOR_SAFE_USED,
    COLOR_SPIKE_ACTIVE, COLOR_SPIKE_IDLE, COLOR_DOOR, COLOR_SWITCH, COLOR_SWITCH_ACTIVE,
    COLOR_ROTATING, COLOR_TEXT, COLOR_TEXT_HIGHLIGHT, COLOR_PLAYER, COLOR_PLAYER_TRAIL,
    COLOR_MONSTER, COLOR_EXIT_LOCKED, COLOR_EXIT_OPEN, COLOR_KEY, COLOR_BOMB,
    COLOR_EXPLOSION, COLOR_BREAKING, POWERUP_COLORS
)

logger = logging.getLogger(__name__)

TILE_COLORS = {
    Tile.FLOOR: COLOR_FLOOR,
    Tile.WALL: COLOR_WALL,
    Tile.SAFE: COLOR_SAFE,
    Tile.DOOR: COLOR_DOOR,
    Tile.ROTATING_BLOCK: COLOR_ROTATING,
}


class MazeChaseGame:
    """
    Main game window
    """
    def __init__(self, config, seed=None):
        pygame.init()
        self.config = config
        self.level_manager = LevelManager(config, seed)

        width = config.size * CELL_SIZE
        height = config.size * CELL_SIZE + PANEL_H
        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption(f"Maze Chase - {config.name}")

        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("consolas", 16)
        self.big_font = pygame.font.SysFont("consolas", 32, bold=True)
        self.running = True

        self.level_manager.create_level(pygame.time.get_ticks())

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.running = False

    def read_input(self):
        """Sample the keyboard into a FrameInput"""
        keys = pygame.key.get_pressed()
        return FrameInput(
            up=keys[pygame.K_UP] or keys[pygame.K_w],
            down=keys[pygame.K_DOWN] or keys[pygame.K_s],
            left=keys[pygame.K_LEFT] or keys[pygame.K_a],
            right=keys[pygame.K_RIGHT] or keys[pygame.K_d],
            bomb=keys[pygame.K_SPACE],
            restart=keys[pygame.K_r],
        )

    def _draw_cell(self, pos, color, pad=0):
        x, y = pos
        rect = (x * CELL_SIZE + pad, y * CELL_SIZE + pad, CELL_SIZE - pad * 2, CELL_SIZE - pad * 2)
        pygame.draw.rect(self.screen, color, rect, border_radius=4 if pad else 0)

    def _draw_tiles(self, snap):
        spikes = dict(snap['spikes'])
        switches = {pos: active for pos, _, active in snap['switches']}
        used_safe = {pos for pos, used, _ in snap['safe_zones'] if used}

        for y, row in enumerate(snap['tiles']):
            for x, tile in enumerate(row):
                pos = (x, y)
                if tile == Tile.SPIKE:
                    deadly = spikes.get(pos) and snap['spikes_armed']
                    color = COLOR_SPIKE_ACTIVE if deadly else COLOR_SPIKE_IDLE
                elif tile == Tile.SWITCH:
                    color = COLOR_SWITCH_ACTIVE if switches.get(pos) else COLOR_SWITCH
                elif tile == Tile.SAFE and pos in used_safe:
                    color = COLOR_SAFE_USED
                else:
                    color = TILE_COLORS.get(tile, COLOR_FLOOR)
                self._draw_cell(pos, color)

    def render(self, snap):
        self.screen.fill(COLOR_BG)
        self._draw_tiles(snap)

        for pos in snap['player']['trail']:
            self._draw_cell(pos, COLOR_PLAYER_TRAIL, pad=12)

        exit_color = COLOR_EXIT_OPEN if not snap['keys'] else COLOR_EXIT_LOCKED
        self._draw_cell(snap['exit'], exit_color, pad=3)

        for pos in snap['keys']:
            self._draw_cell(pos, COLOR_KEY, pad=9)
        for pos in snap['bomb_pickups']:
            self._draw_cell(pos, COLOR_BOMB, pad=10)
        for pos, powerup_type in snap['powerups']:
            self._draw_cell(pos, POWERUP_COLORS[powerup_type], pad=9)

        if snap['bomb']:
            self._draw_cell(snap['bomb']['pos'], COLOR_BOMB, pad=6)
        if snap['breaking_walls']:
            for pos in snap['breaking_walls']['cells']:
                self._draw_cell(pos, COLOR_BREAKING, pad=4)
        if snap['explosion']:
            for pos in snap['explosion']['cells']:
                self._draw_cell(pos, COLOR_EXPLOSION, pad=2)

        if not snap['player']['flashing']:
            self._draw_cell(snap['player']['pos'], COLOR_PLAYER, pad=5)
        if snap['monster']:
            self._draw_cell(snap['monster']['pos'], COLOR_MONSTER, pad=6)

        self._render_panel(snap)

        if snap['won'] or snap['game_over']:
            text = "YOU ESCAPED!" if snap['won'] else "CAUGHT!"
            surface = self.big_font.render(text + "  (R to restart)", True, COLOR_TEXT_HIGHLIGHT)
            w, h = self.screen.get_size()
            self.screen.blit(surface, (w // 2 - surface.get_width() // 2, (h - PANEL_H) // 2))

        pygame.display.flip()

    def _render_panel(self, snap):
        w, h = self.screen.get_size()
        panel_y = h - PANEL_H
        pygame.draw.rect(self.screen, COLOR_PANEL_BG, (0, panel_y, w, PANEL_H))

        monster = snap['monster'] or {'alert': 0, 'speed_multiplier': 1.0, 'learning_level': 1}
        effects = ", ".join(f"{e['type']} {e['remaining'] / 1000:.1f}s" for e in snap['effects'])
        lines = [
            f"Keys: {snap['player']['keys']}/{snap['keys_required']}  Deaths: {snap['deaths']}  "
            f"Time: {format_time(snap['elapsed'])}  Bomb: {'yes' if snap['player']['has_bomb'] else 'no'}",
            f"Alert: {monster['alert']:.0f}  Speed: x{monster['speed_multiplier']:.1f}  "
            f"Learning: {monster['learning_level']}  Effects: {effects or '-'}",
            "Arrows/WASD: Move | Space: Bomb | R: Restart | ESC: Quit",
        ]
        for i, line in enumerate(lines):
            self.screen.blit(self.font.render(line, True, COLOR_TEXT), (10, panel_y + 6 + i * 20))

    def run(self):
        while self.running:
            self.clock.tick(FPS)
            now = pygame.time.get_ticks()

            self.handle_events()
            self.level_manager.update(now, self.read_input())
            self.render(self.level_manager.get_current_level().snapshot(now))

        pygame.quit()
        logger.info("game closed")


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Top-down maze chase")
    p.add_argument("--variant", choices=VARIANT_NAMES, default=VARIANT_CLASSIC,
                   help="Game variant (default: classic)")
    p.add_argument("--seed", type=int, default=None, help="Seed for a reproducible session")
    p.add_argument("--size", type=int, default=None, help="Odd maze size override")
    p.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    config = get_difficulty_config(args.variant)
    if args.size is not None:
        config = config.with_overrides(size=args.size)
    logger.info("starting %s", get_difficulty_description(args.variant).strip().replace("\n", " | "))

    MazeChaseGame(config, args.seed).run()


if __name__ == "__main__":
    main()
