"""Keyboard mapping tests"""

import pygame

from game.controls import HeldKeys, turn_for_key
from game.game_state import GameState
from utils.constants import TURN_FORWARD, TURN_BACK, TURN_LEFT, TURN_RIGHT


def test_arrow_and_wasd_keys_map_to_turns():
    assert turn_for_key(pygame.K_UP) == TURN_FORWARD
    assert turn_for_key(pygame.K_w) == TURN_FORWARD
    assert turn_for_key(pygame.K_DOWN) == TURN_BACK
    assert turn_for_key(pygame.K_s) == TURN_BACK
    assert turn_for_key(pygame.K_LEFT) == TURN_LEFT
    assert turn_for_key(pygame.K_a) == TURN_LEFT
    assert turn_for_key(pygame.K_RIGHT) == TURN_RIGHT
    assert turn_for_key(pygame.K_d) == TURN_RIGHT
    assert turn_for_key(pygame.K_SPACE) is None


def test_movement_continues_while_any_key_is_held():
    keys = HeldKeys()
    assert not keys.moving
    assert keys.press(pygame.K_UP) == TURN_FORWARD
    keys.press(pygame.K_d)
    keys.release(pygame.K_UP)
    assert keys.moving
    keys.release(pygame.K_d)
    assert not keys.moving

    assert keys.press(pygame.K_q) is None
    assert not keys.moving


def test_held_keys_survive_a_respawn_but_not_the_end_of_a_run():
    keys = HeldKeys()
    keys.press(pygame.K_UP)

    keys.follow_state(GameState.PLAYING)
    keys.follow_state(GameState.RESPAWNING)
    keys.follow_state(GameState.PLAYING)
    assert keys.moving

    for state in (GameState.WON, GameState.LOST, GameState.SHOP, GameState.GAMEOVER):
        keys.press(pygame.K_UP)
        keys.follow_state(state)
        assert not keys.moving
