"""
Rotating Blocks - 2x2 sections of the maze that turn when a switch is hit
"""

from maze.maze_core import Tile

# One wall orbiting three floor cells, so every rotation changes the layout
BLOCK_PATTERN = [
    [Tile.WALL, Tile.ROTATING_BLOCK],
    [Tile.ROTATING_BLOCK, Tile.ROTATING_BLOCK],
]


def rotate_pattern(pattern):
    """
    Rotate a 2x2 pattern 90 degrees clockwise

    [[tl, tr], [bl, br]] -> [[bl, tl], [br, tr]]
    """
    (tl, tr), (bl, br) = pattern
    return [[bl, tl], [br, tr]]


class RotatingBlock:
    """
    2x2 block anchored at its top-left cell
    """
    def __init__(self, x, y, pattern=None):
        """
        Args:
            x, y: Anchor (top-left) grid position
            pattern: 2x2 list of Tile values, defaults to BLOCK_PATTERN
        """
        self.x = x
        self.y = y
        self.pattern = [list(row) for row in (pattern or BLOCK_PATTERN)]
        self.rotations = 0

    @property
    def pos(self):
        return (self.x, self.y)

    def cells(self):
        """The four grid cells covered by the block"""
        return [
            (self.x, self.y), (self.x + 1, self.y),
            (self.x, self.y + 1), (self.x + 1, self.y + 1),
        ]

    def write(self, grid):
        """Write the current pattern into the grid"""
        for dy in range(2):
            for dx in range(2):
                grid.set(self.x + dx, self.y + dy, self.pattern[dy][dx])

    def rotate(self, grid, occupied=()):
        """
        Rotate clockwise and rewrite the four cells

        Args:
            grid: Grid to write into
            occupied: Cells holding an agent; the turn is skipped if any of
                them would become Wall

        Returns:
            True if the block turned
        """
        pattern = rotate_pattern(self.pattern)
        for dy in range(2):
            for dx in range(2):
                if pattern[dy][dx] == Tile.WALL and (self.x + dx, self.y + dy) in occupied:
                    return False
        self.pattern = pattern
        self.rotations = (self.rotations + 1) % 4
        self.write(grid)
        return True

    def __repr__(self):
        return f"RotatingBlock(pos=({self.x},{self.y}), rotations={self.rotations})"
