"""
Collision detection against the maze occupancy grid
Axis-aligned footprint vs. wall cells, compiled with numba for the motion tick
"""

import math
from numba import njit

from utils.constants import CELL_SIZE, COLLISION_MARGIN


@njit(cache=True)
def footprint_blocked(grid, x, y, cell_size, margin):
    """
    Test the four corners of a square footprint against the grid.

    Args:
        grid: 2D int8 array (rows, cols), 1 = wall
        x, y: footprint center in world units
        cell_size: world units per cell
        margin: footprint half-size

    Returns:
        True if any corner is in a wall cell or outside the grid
    """
    rows = grid.shape[0]
    cols = grid.shape[1]
    for i in range(4):
        if i % 2 == 0:
            px = x - margin
        else:
            px = x + margin
        if i < 2:
            py = y - margin
        else:
            py = y + margin

        gx = int(math.floor(px / cell_size))
        gy = int(math.floor(py / cell_size))
        if gx < 0 or gy < 0 or gx >= cols or gy >= rows:
            return True
        if grid[gy, gx] == 1:
            return True
    return False


class CollisionResolver:
    """
    Wall collision checks for players and other moving entities
    """
    def __init__(self, cell_size=CELL_SIZE, margin=COLLISION_MARGIN):
        self.cell_size = float(cell_size)
        self.margin = float(margin)

    def blocked(self, x, y, maze):
        """True if an entity centered at (x, y) would overlap a wall or the boundary"""
        return bool(footprint_blocked(maze.grid, float(x), float(y), self.cell_size, self.margin))

    def check_wall_collision(self, x, y, new_x, new_y, maze):
        """
        Test each axis of a move on its own so entities can slide along walls

        Returns:
            (can_move_x, can_move_y)
        """
        can_x = not self.blocked(new_x, y, maze)
        can_y = not self.blocked(x, new_y, maze)
        return can_x, can_y

    def resolve_move(self, x, y, dx, dy, maze):
        """
        Apply a move, dropping any axis that would collide

        Returns:
            (x, y) after the move
        """
        new_x, new_y = x + dx, y + dy
        can_x, can_y = self.check_wall_collision(x, y, new_x, new_y, maze)
        return (new_x if can_x else x), (new_y if can_y else y)
