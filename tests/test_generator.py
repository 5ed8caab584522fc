"""Maze generation tests"""

import math
from collections import deque

import pytest

from maze.difficulty import safe_zone_count_for, trap_count_for
from maze.generator import (
    generate_maze, find_end_cell, pick_safe_zones, START_CELL
)
from maze.maze_core import bfs_shortest_path, neighbors_open
from utils.constants import FLOOR

SIZES = [(12, 12), (13, 9), (3, 3), (21, 15)]


def bfs_distances(grid, start):
    dist = {start: 0}
    q = deque([start])
    while q:
        x, y = q.popleft()
        for n in neighbors_open(grid, x, y):
            if n not in dist:
                dist[n] = dist[(x, y)] + 1
                q.append(n)
    return dist


def flood_fill(grid, start):
    return set(bfs_distances(grid, start))


def test_same_seed_gives_same_maze():
    a = generate_maze(12, 12, difficulty=2, seed=7)
    b = generate_maze(12, 12, difficulty=2, seed=7)
    assert (a.grid == b.grid).all()
    assert a.end == b.end
    assert a.traps.cells() == b.traps.cells()
    assert a.safe_zones == b.safe_zones


@pytest.mark.parametrize("width,height", SIZES)
@pytest.mark.parametrize("seed", [1, 2, 3])
def test_every_floor_cell_is_reachable(width, height, seed):
    maze = generate_maze(width, height, seed=seed)
    assert flood_fill(maze.grid, maze.start) == set(maze.floor_cells())


@pytest.mark.parametrize("seed", range(5))
def test_start_and_end_are_free_cells(seed):
    maze = generate_maze(12, 12, difficulty=3, seed=seed)
    assert maze.start == START_CELL
    assert maze.start != maze.end
    assert maze.is_floor(*maze.end)
    for cell in (maze.start, maze.end):
        assert cell not in maze.traps.cells()
        assert cell not in maze.safe_zones


@pytest.mark.parametrize("seed", range(5))
def test_safe_zones_lie_on_a_shortest_path(seed):
    maze = generate_maze(15, 15, difficulty=1, seed=seed)
    path = bfs_shortest_path(maze.grid, maze.start, maze.end)
    from_start = bfs_distances(maze.grid, maze.start)
    from_end = bfs_distances(maze.grid, maze.end)

    assert maze.safe_zones
    assert len(set(maze.safe_zones)) == len(maze.safe_zones)
    for zone in maze.safe_zones:
        assert from_start[zone] + from_end[zone] == len(path) - 1


def test_safe_zone_count_shrinks_with_difficulty():
    assert safe_zone_count_for(1) == 4
    assert safe_zone_count_for(3) == 3
    assert safe_zone_count_for(9) == 1
    assert safe_zone_count_for(10) == 1
    assert len(generate_maze(12, 12, difficulty=1, seed=4).safe_zones) == 4


@pytest.mark.parametrize("difficulty", [1, 2.5, 5, 10])
def test_trap_count_is_bounded(difficulty):
    maze = generate_maze(14, 14, difficulty=difficulty, seed=11)
    requested = int(math.floor(14 * 14 * 0.05 * difficulty))
    assert trap_count_for(14, 14, difficulty) == requested
    assert 0 <= len(maze.traps) <= requested

    cells = maze.traps.cells()
    assert len(set(cells)) == len(cells)
    for x, y in cells:
        assert maze.grid[y, x] == FLOOR


@pytest.mark.parametrize("width,height", [(2, 12), (12, 2), (1, 1), (0, 5)])
def test_degenerate_dimensions_raise(width, height):
    with pytest.raises(ValueError):
        generate_maze(width, height, seed=1)


def test_large_maze_does_not_recurse():
    maze = generate_maze(151, 151, seed=3)
    assert maze.end is not None
    assert len(flood_fill(maze.grid, maze.start)) == len(maze.floor_cells())


def test_end_is_found_near_bottom_right():
    maze = generate_maze(12, 12, seed=5)
    # Odd row and column 11 are never carved on a 12-wide grid
    assert maze.end == (10, 10)
    assert find_end_cell(maze.grid) == (10, 10)


def test_pick_safe_zones_skips_endpoints_and_duplicates():
    path = [(0, 0), (1, 0), (2, 0)]
    assert pick_safe_zones(path, 4) == []
    assert pick_safe_zones([], 3) == []

    long_path = [(i, 0) for i in range(10)]
    assert pick_safe_zones(long_path, 2) == [(3, 0), (6, 0)]


def test_wire_payload_round_trip():
    maze = generate_maze(12, 12, difficulty=2, seed=9)
    payload = maze.to_dict()
    assert payload["start"] == {"x": 0, "y": 0}
    assert "safeZones" in payload

    rebuilt = type(maze).from_dict(payload)
    assert (rebuilt.grid == maze.grid).all()
    assert rebuilt.end == maze.end
    assert rebuilt.traps.cells() == maze.traps.cells()
    assert rebuilt.safe_zones == maze.safe_zones
