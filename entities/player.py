"""
Player entity with trail, keys, bomb slot, and timed effects
"""

from collections import deque
from utils.constants import (
    PLAYER_MOVE_DELAY_MS, TRAIL_LENGTH, SPEED_POWERUP_FACTOR
)


class Player:
    """
    Player entity
    """
    def __init__(self, x, y, move_delay=PLAYER_MOVE_DELAY_MS, trail_length=TRAIL_LENGTH):
        self.x = x
        self.y = y

        # Recent cells, newest first
        self.trail = deque(maxlen=trail_length)

        self.keys_collected = 0
        self.invuln_frames = 0
        self.has_bomb = False

        # Movement debounce
        self.base_move_delay = move_delay
        self.move_delay = move_delay
        self.last_move_time = None

        # Timed effects: [{type, started_at, expires_at}]
        self.effects = []

    @property
    def pos(self):
        return (self.x, self.y)

    def can_move(self, now):
        """Check the debounce window"""
        return self.last_move_time is None or now - self.last_move_time >= self.move_delay

    def move_to(self, x, y):
        """Commit a move and record it in the trail"""
        self.x = x
        self.y = y
        self.trail.appendleft((x, y))

    def is_invulnerable(self):
        return self.invuln_frames > 0

    def grant_invulnerability(self, frames):
        self.invuln_frames = max(self.invuln_frames, frames)

    def tick_invulnerability(self):
        """Spend one frame of invulnerability"""
        if self.invuln_frames > 0:
            self.invuln_frames -= 1

    def add_effect(self, effect_type, now, duration):
        """
        Add a timed effect, refreshing it if already active
        effect_type: 'speed'
        """
        for effect in self.effects:
            if effect['type'] == effect_type:
                effect['expires_at'] = now + duration
                return

        self.effects.append({
            'type': effect_type,
            'started_at': now,
            'expires_at': now + duration,
        })

        if effect_type == 'speed':
            self.move_delay = int(self.base_move_delay * SPEED_POWERUP_FACTOR)

    def update(self, now):
        """Expire timed effects"""
        for effect in self.effects[:]:
            if now >= effect['expires_at']:
                self._remove_effect(effect)
                self.effects.remove(effect)

    def _remove_effect(self, effect):
        """Revert an effect's changes"""
        if effect['type'] == 'speed':
            self.move_delay = self.base_move_delay

    def active_effects(self, now):
        """Effect types with remaining milliseconds"""
        return [
            {'type': e['type'], 'remaining': max(0, e['expires_at'] - now)}
            for e in self.effects
        ]

    def respawn(self, x, y, invuln_frames):
        """Put the player back at a respawn point"""
        self.x = x
        self.y = y
        self.trail.clear()
        self.last_move_time = None
        self.grant_invulnerability(invuln_frames)

    def __repr__(self):
        return f"Player(pos=({self.x},{self.y}), keys={self.keys_collected}, invuln={self.invuln_frames})"
