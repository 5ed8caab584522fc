"""
Movement engine - per-tick heading interpolation, wall sliding and win detection
"""

import math

from game.collision import CollisionResolver
from maze.difficulty import player_speed
from utils.constants import CELL_SIZE, HEADING_LERP, HEADING_SNAP_EPSILON
from utils.helpers import angle_difference, normalize_angle


class MovementEngine:
    """
    Advances a player one motion tick at a time
    """
    def __init__(self, collision=None, cell_size=CELL_SIZE):
        self.collision = collision or CollisionResolver(cell_size=cell_size)
        self.cell_size = cell_size

    @staticmethod
    def interpolate_heading(angle, target):
        """Move angle a fixed fraction toward target along the shortest arc"""
        diff = angle_difference(angle, target)
        if abs(diff) >= HEADING_SNAP_EPSILON:
            return normalize_angle(angle + diff * HEADING_LERP)
        return target

    def step(self, player, maze, moving, difficulty, freeze_active=False):
        """
        Advance a player by one motion tick

        Args:
            player: Player object (mutated in place)
            maze: Maze object
            moving: True while any direction key is held
            difficulty: Current difficulty (scales speed)
            freeze_active: True inside a phase-2 freeze window

        Returns:
            Dictionary with step results:
            {
                'moved': bool,
                'won': bool,
                'hazard': bool,   # movement attempted during a freeze
                'cell': (x, y)
            }
        """
        result = {'moved': False, 'won': False, 'hazard': False, 'cell': player.cell(self.cell_size)}

        player.angle = self.interpolate_heading(player.angle, player.target_angle)

        if not moving:
            return result

        if freeze_active:
            result['hazard'] = True
            return result

        speed = player_speed(difficulty)
        # Movement follows the target heading, not the interpolated one
        dx = math.sin(player.target_angle) * speed
        dy = -math.cos(player.target_angle) * speed

        new_x, new_y = self.collision.resolve_move(player.x, player.y, dx, dy, maze)
        result['moved'] = (new_x, new_y) != (player.x, player.y)
        player.x, player.y = new_x, new_y

        cell = player.cell(self.cell_size)
        result['cell'] = cell
        result['won'] = cell == maze.end
        return result
