"""
Maze generation
Randomized depth-first carve on a step-2 grid, then end, trap and safe-zone placement
"""

import random

from entities.trap import TrapManager
from maze.difficulty import trap_count_for, safe_zone_count_for
from maze.maze_core import Maze, empty_grid, bfs_shortest_path
from utils.constants import (
    FLOOR, WALL, CARVE_DIRS, MIN_CARVE_CELLS,
    TRAP_PLACEMENT_ATTEMPTS, SAFE_ZONE_ATTEMPTS
)

START_CELL = (0, 0)


def carve_grid_size(width, height):
    """Number of carve cells along each axis"""
    return (width + 1) // 2, (height + 1) // 2


def validate_dimensions(width, height):
    """Raise ValueError if the carve grid is smaller than 2x2"""
    cols, rows = carve_grid_size(width, height)
    if cols < MIN_CARVE_CELLS or rows < MIN_CARVE_CELLS:
        raise ValueError(
            f"Maze {width}x{height} is too small: need at least "
            f"{MIN_CARVE_CELLS}x{MIN_CARVE_CELLS} carve cells (width and height >= 3)"
        )


# ========== CARVE ==========

def carve_dfs(grid, rng, origin=START_CELL):
    """
    Depth-first carve from origin

    Each visited cell shuffles the four 2-step directions and carves into
    every neighbour that is still a wall, clearing the cell in between.
    Uses an explicit stack so large grids do not hit the recursion limit.
    """
    height, width = grid.shape
    ox, oy = origin
    grid[oy, ox] = FLOOR

    dirs = list(CARVE_DIRS)
    rng.shuffle(dirs)
    stack = [(ox, oy, dirs, 0)]

    while stack:
        cx, cy, dirs, i = stack[-1]
        if i >= len(dirs):
            stack.pop()
            continue
        stack[-1] = (cx, cy, dirs, i + 1)

        dx, dy = dirs[i]
        nx, ny = cx + dx, cy + dy
        if 0 <= nx < width and 0 <= ny < height and grid[ny, nx] == WALL:
            grid[cy + dy // 2, cx + dx // 2] = FLOOR
            grid[ny, nx] = FLOOR
            next_dirs = list(CARVE_DIRS)
            rng.shuffle(next_dirs)
            stack.append((nx, ny, next_dirs, 0))

    return grid


# ========== PLACEMENT ==========

def find_end_cell(grid, start=START_CELL):
    """
    First floor cell found scanning outward in rings from the bottom-right corner
    """
    height, width = grid.shape
    for d in range(max(width, height)):
        for ty in range(height - 1, max(0, height - 1 - d) - 1, -1):
            for tx in range(width - 1, max(0, width - 1 - d) - 1, -1):
                if grid[ty, tx] == FLOOR and (tx, ty) != start:
                    return (tx, ty)
    return None


def place_traps(grid, count, start, end, rng, attempts=TRAP_PLACEMENT_ATTEMPTS):
    """
    Rejection-sample trap cells

    Returns fewer than count traps if the attempt budget runs out.
    """
    height, width = grid.shape
    traps = TrapManager()
    tries = 0
    while len(traps) < count and tries < attempts:
        tx = rng.randrange(width)
        ty = rng.randrange(height)
        cell = (tx, ty)
        if grid[ty, tx] == FLOOR and cell != start and cell != end and traps.get_trap_at(tx, ty) is None:
            traps.add_trap(tx, ty)
        tries += 1
    return traps


def pick_safe_zones(path, count):
    """
    Evenly spaced interior waypoints along a start->end path
    """
    if not path:
        return []
    start, end = path[0], path[-1]
    step = len(path) // (count + 1)
    zones = []
    for i in range(1, count + 1):
        cell = path[min(i * step, len(path) - 1)]
        if cell in (start, end) or cell in zones:
            continue
        zones.append(cell)
    return zones


def random_safe_zones(grid, count, start, end, rng, attempts=SAFE_ZONE_ATTEMPTS):
    """Fallback: random distinct floor cells"""
    height, width = grid.shape
    zones = []
    tries = 0
    while len(zones) < count and tries < attempts:
        sx = rng.randrange(width)
        sy = rng.randrange(height)
        cell = (sx, sy)
        if grid[sy, sx] == FLOOR and cell not in (start, end) and cell not in zones:
            zones.append(cell)
        tries += 1
    return zones


# ========== GENERATOR ==========

def generate_maze(width, height, difficulty=1, seed=None, rng=None):
    """
    Generate a fully connected maze with traps and safe zones

    Args:
        width, height: Grid size in cells (>= 3 each)
        difficulty: Scales trap count and shrinks safe-zone count
        seed: Seed for a private random source
        rng: random.Random instance (overrides seed)

    Returns:
        Maze object
    """
    validate_dimensions(width, height)
    if rng is None:
        rng = random.Random(seed)

    grid = empty_grid(width, height)
    carve_dfs(grid, rng, START_CELL)

    start = START_CELL
    end = find_end_cell(grid, start)
    if end is None:
        raise ValueError(f"Maze {width}x{height} has no floor cell for the end")

    traps = place_traps(grid, trap_count_for(width, height, difficulty), start, end, rng)

    zone_count = safe_zone_count_for(difficulty)
    path = bfs_shortest_path(grid, start, end)
    safe_zones = pick_safe_zones(path, zone_count)
    if not path:
        safe_zones = random_safe_zones(grid, zone_count, start, end, rng)

    return Maze(grid, start, end, traps, safe_zones)

