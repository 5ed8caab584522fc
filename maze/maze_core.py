"""
Core maze structures - occupancy grid, pathfinding and wire payload
"""

from collections import deque

import numpy as np

from entities.trap import Trap, TrapManager
from utils.constants import FLOOR, WALL, DIRS4


class Maze:
    """
    Occupancy-grid maze
    grid[y, x] is FLOOR (0) or WALL (1)
    """
    def __init__(self, grid, start, end, traps=None, safe_zones=None):
        self.grid = np.asarray(grid, dtype=np.int8)
        self.height, self.width = self.grid.shape
        self.start = tuple(start)
        self.end = tuple(end)
        self.traps = traps if isinstance(traps, TrapManager) else TrapManager(traps)
        self.safe_zones = [tuple(c) for c in (safe_zones or [])]

    @property
    def rows(self):
        return self.height

    @property
    def cols(self):
        return self.width

    def in_bounds(self, x, y):
        """Check if coordinates are within grid bounds"""
        return 0 <= x < self.width and 0 <= y < self.height

    def is_floor(self, x, y):
        return self.in_bounds(x, y) and self.grid[y, x] == FLOOR

    def floor_cells(self):
        """All carved cells as (x, y) tuples"""
        ys, xs = np.nonzero(self.grid == FLOOR)
        return [(int(x), int(y)) for x, y in zip(xs, ys)]

    def is_safe_zone(self, x, y):
        return (x, y) in self.safe_zones

    def to_dict(self):
        """Serialize to the JSON wire payload"""
        return {
            "grid": self.grid.tolist(),
            "width": self.width,
            "height": self.height,
            "start": {"x": self.start[0], "y": self.start[1]},
            "end": {"x": self.end[0], "y": self.end[1]},
            "traps": [t.to_dict() for t in self.traps],
            "safeZones": [{"x": x, "y": y} for x, y in self.safe_zones],
        }

    @classmethod
    def from_dict(cls, data):
        """Rebuild a maze from its wire payload"""
        grid = np.array(data["grid"], dtype=np.int8)
        start = (int(data["start"]["x"]), int(data["start"]["y"]))
        end = (int(data["end"]["x"]), int(data["end"]["y"]))
        traps = [Trap.from_dict(t) for t in data.get("traps", [])]
        safe_zones = [(int(p["x"]), int(p["y"])) for p in data.get("safeZones", [])]
        return cls(grid, start, end, traps, safe_zones)

    def __repr__(self):
        return f"Maze(size={self.width}x{self.height}, start={self.start}, end={self.end}, traps={len(self.traps)})"


def empty_grid(width, height):
    """All-wall grid"""
    return np.full((height, width), WALL, dtype=np.int8)


def neighbors_open(grid, x, y):
    """Get list of 4-directional floor neighbours"""
    height, width = grid.shape
    res = []
    for dx, dy in DIRS4:
        nx, ny = x + dx, y + dy
        if 0 <= nx < width and 0 <= ny < height and grid[ny, nx] == FLOOR:
            res.append((nx, ny))
    return res


# ========== PATHFINDING ==========

def reconstruct_path(prev, goal):
    """Reconstruct path from prev dictionary"""
    path = []
    cur = goal
    while cur is not None:
        path.append(cur)
        cur = prev[cur]
    path.reverse()
    return path


def bfs_shortest_path(grid, start, goal):
    """BFS shortest path finder over floor cells"""
    if start == goal:
        return [start]

    q = deque([start])
    prev = {start: None}

    while q:
        x, y = q.popleft()
        for n in neighbors_open(grid, x, y):
            if n not in prev:
                prev[n] = (x, y)
                if n == goal:
                    return reconstruct_path(prev, goal)
                q.append(n)
    return []
