"""Pursuer AI tests"""

import math

import pytest

from entities.player import Player
from entities.pursuer import Pursuer, cardinal_heading
from maze.difficulty import pursuer_speed


def test_spawn_depends_on_phase(corridor_maze):
    early = Pursuer.spawn(corridor_maze, 1)
    hunter = Pursuer.spawn(corridor_maze, 3)
    assert (early.x, early.y) == (20, 20)
    assert (hunter.x, hunter.y) == (180, 180)


def test_speed_formula():
    assert pursuer_speed(1, 1) == pytest.approx(1.3)
    assert pursuer_speed(3, 1) == pytest.approx(1.9)
    assert pursuer_speed(3, 1, wipe_timer=4.0) == pytest.approx(0.38)
    assert pursuer_speed(3, 1, wipe_timer=6.0) == pytest.approx(1.9)
    # The wipe only slows the phase-3 hunter
    assert pursuer_speed(2, 1, wipe_timer=1.0) == pytest.approx(1.6)


def test_cardinal_heading_snaps_to_dominant_axis():
    assert cardinal_heading(5, 1) == pytest.approx(math.pi / 2)
    assert cardinal_heading(-5, 1) == pytest.approx(-math.pi / 2)
    assert cardinal_heading(0, -3) == 0.0
    assert cardinal_heading(1, 3) == pytest.approx(math.pi)


def test_moves_straight_toward_the_exit(corridor_maze):
    pursuer = Pursuer.spawn(corridor_maze, 1)
    player = Player("p1", 20, 20)
    caught = pursuer.update(corridor_maze, 1, 1, player)
    assert not caught
    step = 1.3 / math.sqrt(2)
    assert pursuer.x == pytest.approx(20 + step)
    assert pursuer.y == pytest.approx(20 + step)


def test_reaching_the_exit_reports_a_catch(corridor_maze):
    pursuer = Pursuer(175, 178)
    player = Player("p1", 20, 20)
    assert pursuer.update(corridor_maze, 2, 1, player)


def test_phase_three_hunts_the_player(corridor_maze):
    player = Player("p1", 20, 20)
    pursuer = Pursuer(25, 25)
    assert pursuer.update(corridor_maze, 3, 1, player)

    pursuer = Pursuer(100, 20)
    assert not pursuer.update(corridor_maze, 3, 1, player)
    assert pursuer.x < 100
    assert pursuer.angle == pytest.approx(-math.pi / 2)
