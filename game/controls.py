"""
Per-frame input intents
"""

from utils.constants import DIR_UP, DIR_DOWN, DIR_LEFT, DIR_RIGHT


class FrameInput:
    """
    Directional intents plus bomb and restart, as sampled for one frame
    """
    def __init__(self, up=False, down=False, left=False, right=False, bomb=False, restart=False):
        self.up = up
        self.down = down
        self.left = left
        self.right = right
        self.bomb = bomb
        self.restart = restart

    def directions(self):
        """Held directions, in the order moves are attempted"""
        dirs = []
        if self.up:
            dirs.append(DIR_UP)
        if self.down:
            dirs.append(DIR_DOWN)
        if self.left:
            dirs.append(DIR_LEFT)
        if self.right:
            dirs.append(DIR_RIGHT)
        return dirs

    def __repr__(self):
        held = [name for name in ('up', 'down', 'left', 'right', 'bomb', 'restart') if getattr(self, name)]
        return f"FrameInput({', '.join(held)})"


class IntentEdge:
    """
    Turns a held button into a once-per-press trigger
    """
    def __init__(self):
        self.held = False

    def pressed(self, is_down):
        """True only on the frame the button goes down"""
        fired = is_down and not self.held
        self.held = is_down
        return fired
