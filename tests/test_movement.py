"""Player heading and movement tests"""

import math

import pytest

from entities.player import Player
from game.movement import MovementEngine
from maze.difficulty import player_speed
from utils.constants import TURN_FORWARD, TURN_BACK, TURN_LEFT, TURN_RIGHT


def test_turns_are_relative_to_the_target_heading():
    player = Player("p1", 20, 20)
    assert player.turn(TURN_RIGHT) == pytest.approx(math.pi / 2)
    assert player.turn(TURN_RIGHT) == pytest.approx(math.pi)
    assert player.turn(TURN_RIGHT) == pytest.approx(-math.pi / 2)
    assert player.turn(TURN_BACK) == pytest.approx(math.pi / 2)
    assert player.turn(TURN_FORWARD) == pytest.approx(math.pi / 2)
    assert player.turn(TURN_LEFT) == pytest.approx(0.0)


def test_heading_eases_toward_target():
    angle = MovementEngine.interpolate_heading(0.0, math.pi / 2)
    assert angle == pytest.approx(0.15 * math.pi / 2)


def test_heading_takes_the_short_way_round():
    angle = MovementEngine.interpolate_heading(math.pi - 0.1, -math.pi + 0.1)
    # Crosses the pi boundary instead of sweeping through zero
    assert abs(angle) > math.pi - 0.1


def test_heading_snaps_when_close():
    assert MovementEngine.interpolate_heading(1.0, 1.005) == 1.005


def test_player_speed_scales_with_difficulty():
    assert player_speed(1) == pytest.approx(4.0)
    assert player_speed(3) == pytest.approx(4.4)


def test_idle_step_only_turns(corridor_maze):
    engine = MovementEngine()
    player = Player("p1", 20, 20)
    player.target_angle = math.pi / 2
    result = engine.step(player, corridor_maze, moving=False, difficulty=1)
    assert not result['moved']
    assert (player.x, player.y) == (20, 20)
    assert player.angle > 0


def test_moving_follows_target_heading(corridor_maze):
    engine = MovementEngine()
    player = Player("p1", 20, 20)
    player.target_angle = math.pi / 2
    result = engine.step(player, corridor_maze, moving=True, difficulty=1)
    assert result['moved']
    assert player.x == pytest.approx(24.0)
    assert player.y == pytest.approx(20.0)
    assert not result['won']


def test_wall_stops_movement(corridor_maze):
    engine = MovementEngine()
    player = Player("p1", 20, 20)
    player.target_angle = math.pi
    first = engine.step(player, corridor_maze, moving=True, difficulty=1)
    second = engine.step(player, corridor_maze, moving=True, difficulty=1)
    # The footprint would reach wall row 1 at y = 28
    assert first['moved']
    assert not second['moved']
    assert player.y == pytest.approx(24.0)


def test_reaching_end_cell_is_a_win(corridor_maze):
    engine = MovementEngine()
    player = Player("p1", 158, 180)
    player.target_angle = math.pi / 2
    result = engine.step(player, corridor_maze, moving=True, difficulty=1)
    assert result['won']
    assert result['cell'] == (4, 4)


def test_moving_during_freeze_is_a_hazard(corridor_maze):
    engine = MovementEngine()
    player = Player("p1", 20, 20)
    player.target_angle = math.pi / 2
    result = engine.step(player, corridor_maze, moving=True, difficulty=1, freeze_active=True)
    assert result['hazard']
    assert not result['moved']
    assert (player.x, player.y) == (20, 20)


def test_reset_position_faces_north():
    player = Player("p1", 100, 100, angle=1.0)
    player.target_angle = 2.0
    player.reset_position((0, 0))
    assert (player.x, player.y) == (20, 20)
    assert player.angle == 0.0
    assert player.target_angle == 0.0
