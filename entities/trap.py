"""
Spike traps
Spikes kill the player on entry while both armed and active
"""

from utils.constants import SPIKE_TOGGLE_MIN_MS, SPIKE_TOGGLE_MAX_MS


class Spike:
    """
    Spike tile with its own toggle schedule
    """
    def __init__(self, x, y, active=True, next_toggle=None):
        """
        Args:
            x, y: Grid position
            active: Whether the spikes are raised
            next_toggle: Timestamp (ms) of the next self-toggle, None to stay put
        """
        self.x = x
        self.y = y
        self.active = active
        self.next_toggle = next_toggle

    @property
    def pos(self):
        return (self.x, self.y)

    def schedule(self, now, rng):
        """Pick the next toggle time"""
        self.next_toggle = now + rng.randint(SPIKE_TOGGLE_MIN_MS, SPIKE_TOGGLE_MAX_MS)

    def update(self, now, rng):
        """
        Toggle if the schedule says so

        Returns:
            True if the spike flipped
        """
        if self.next_toggle is None or now < self.next_toggle:
            return False
        self.active = not self.active
        self.schedule(now, rng)
        return True

    def is_at_position(self, x, y):
        return self.x == x and self.y == y

    def __repr__(self):
        return f"Spike(pos=({self.x},{self.y}), active={self.active})"


class SpikeManager:
    """
    Manages all spikes and the global armed flag
    """
    def __init__(self, spikes=None):
        self.spikes = list(spikes or [])
        self.armed = True

    def get_spike_at(self, x, y):
        """Get spike at position"""
        for spike in self.spikes:
            if spike.is_at_position(x, y):
                return spike
        return None

    def is_deadly(self, x, y):
        """Check if entering this cell kills the player"""
        spike = self.get_spike_at(x, y)
        return spike is not None and self.armed and spike.active

    def toggle_armed(self):
        """Flip the global armed flag for every spike at once"""
        self.armed = not self.armed
        return self.armed

    def update(self, now, rng):
        """Advance every spike's own schedule"""
        for spike in self.spikes:
            spike.update(now, rng)

    def positions(self):
        return {spike.pos for spike in self.spikes}

    def __repr__(self):
        return f"SpikeManager(spikes={len(self.spikes)}, armed={self.armed})"
