"""Shared fixtures for the Maze Race tests"""

import asyncio
import json

import numpy as np
import pytest

from entities.trap import Trap
from maze.maze_core import Maze

# S = (0, 0), E = (4, 4); one winding corridor
CORRIDOR = [
    [0, 0, 0, 0, 0],
    [1, 1, 1, 1, 0],
    [0, 0, 0, 0, 0],
    [0, 1, 1, 1, 1],
    [0, 0, 0, 0, 0],
]


class FakeClock:
    """Manually advanced wall clock"""
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeConnection:
    """Stands in for a websockets connection"""
    def __init__(self, name):
        self.name = name
        self.sent = []

    async def send(self, payload):
        self.sent.append(json.loads(payload))

    def of_type(self, message_type):
        return [m for m in self.sent if m['type'] == message_type]

    def __repr__(self):
        return f"FakeConnection({self.name})"


class StalledConnection(FakeConnection):
    """A client that never finishes a send"""
    async def send(self, payload):
        await asyncio.sleep(5)


@pytest.fixture
def corridor_maze():
    return Maze(np.array(CORRIDOR, dtype=np.int8), (0, 0), (4, 4),
                traps=[Trap(2, 0)], safe_zones=[(4, 2)])


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def make_conn():
    return FakeConnection


@pytest.fixture
def make_stalled_conn():
    return StalledConnection
