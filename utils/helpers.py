"""
Helper utility functions for Maze Chase
"""


def clamp(value, min_value, max_value):
    """Clamp a value between min and max"""
    return max(min_value, min(value, max_value))


def manhattan_distance(a, b):
    """Calculate Manhattan distance between two cells"""
    return abs(b[0] - a[0]) + abs(b[1] - a[1])


def chebyshev_distance(a, b):
    return max(abs(b[0] - a[0]), abs(b[1] - a[1]))


def format_time(seconds):
    """Format seconds to MM:SS string"""
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"
