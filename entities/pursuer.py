"""
Pursuer AI - the ghost that races the player to the exit, then hunts them
"""

import math

from maze.difficulty import pursuer_speed
from utils.constants import (
    CELL_SIZE, PURSUER_ID, PURSUER_COLOR, PURSUER_CATCH_DISTANCE
)
from utils.helpers import cell_center, distance


def cardinal_heading(dx, dy):
    """
    Snap a direction vector to the dominant cardinal axis

    Returns:
        0 (north), pi/2 (east), pi (south) or -pi/2 (west)
    """
    if abs(dx) > abs(dy):
        return math.pi / 2 if dx > 0 else -math.pi / 2
    return math.pi if dy > 0 else 0.0


class Pursuer:
    """
    AI opponent moving in a straight line toward its target
    """
    def __init__(self, x, y, angle=0.0):
        self.id = PURSUER_ID
        self.x = x
        self.y = y
        self.angle = angle
        self.color = PURSUER_COLOR

    @classmethod
    def spawn(cls, maze, phase, cell_size=CELL_SIZE):
        """Start at the maze start, or at the exit once it hunts the player"""
        cell = maze.end if phase == 3 else maze.start
        x, y = cell_center(cell, cell_size)
        return cls(x, y)

    @staticmethod
    def target_for(maze, phase, player, cell_size=CELL_SIZE):
        """The exit in phases 1-2, the live player in phase 3"""
        if phase == 3:
            return player.x, player.y
        return cell_center(maze.end, cell_size)

    def update(self, maze, phase, difficulty, player, wipe_timer=None, cell_size=CELL_SIZE):
        """
        Advance one AI tick

        Args:
            maze: Maze object
            phase: Current phase (1-3)
            difficulty: Current difficulty
            player: Local Player (target in phase 3)
            wipe_timer: Seconds until the next phase-3 wipe

        Returns:
            True if the pursuer reached its target
        """
        tx, ty = self.target_for(maze, phase, player, cell_size)
        dx = tx - self.x
        dy = ty - self.y

        if distance(self.x, self.y, tx, ty) < PURSUER_CATCH_DISTANCE:
            return True

        speed = pursuer_speed(phase, difficulty, wipe_timer)
        heading = math.atan2(dy, dx)
        self.x += math.cos(heading) * speed
        self.y += math.sin(heading) * speed
        self.angle = cardinal_heading(dx, dy)
        return False

    def to_dict(self):
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "angle": self.angle,
            "color": self.color,
        }

    def __repr__(self):
        return f"Pursuer(pos=({self.x:.1f},{self.y:.1f}), angle={self.angle:.2f})"
