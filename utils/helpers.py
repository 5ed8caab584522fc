"""
Helper utility functions for Maze Race
"""

import math


def clamp(value, min_value, max_value):
    """Clamp a value between min and max"""
    return max(min_value, min(value, max_value))


def distance(x1, y1, x2, y2):
    """Calculate Euclidean distance between two points"""
    return math.sqrt((x2 - x1) ** 2 + (y2 - y1) ** 2)


def normalize_angle(angle):
    """Normalize an angle in radians to the (-pi, pi] range"""
    while angle <= -math.pi:
        angle += 2 * math.pi
    while angle > math.pi:
        angle -= 2 * math.pi
    return angle


def angle_difference(current, target):
    """Signed shortest rotation from current to target, in [-pi, pi]"""
    diff = target - current
    while diff < -math.pi:
        diff += 2 * math.pi
    while diff > math.pi:
        diff -= 2 * math.pi
    return diff


def cell_center(cell, cell_size):
    """World coordinates of a cell's center"""
    x, y = cell
    return x * cell_size + cell_size / 2, y * cell_size + cell_size / 2


def world_to_cell(x, y, cell_size):
    """Grid cell containing a world position"""
    return int(math.floor(x / cell_size)), int(math.floor(y / cell_size))


def format_time(seconds):
    """Format seconds to MM:SS string"""
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"
