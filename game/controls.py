"""
Keyboard mapping for relative-turn movement
"""

import pygame

from game.game_state import GameState
from utils.constants import TURN_FORWARD, TURN_BACK, TURN_LEFT, TURN_RIGHT

KEY_TURNS = {
    pygame.K_UP: TURN_FORWARD,
    pygame.K_w: TURN_FORWARD,
    pygame.K_DOWN: TURN_BACK,
    pygame.K_s: TURN_BACK,
    pygame.K_LEFT: TURN_LEFT,
    pygame.K_a: TURN_LEFT,
    pygame.K_RIGHT: TURN_RIGHT,
    pygame.K_d: TURN_RIGHT,
}

# States during which held direction keys stay down
KEEP_HELD_STATES = (GameState.PLAYING, GameState.PRACTICE, GameState.RESPAWNING)


def turn_for_key(key):
    """Turn direction for a key, or None"""
    return KEY_TURNS.get(key)


class HeldKeys:
    """
    Tracks which direction keys are held down

    Movement continues while at least one direction key is held.
    """
    def __init__(self):
        self.held = set()

    def press(self, key):
        """
        Returns:
            Turn direction if key is a direction key, else None
        """
        direction = turn_for_key(key)
        if direction is not None:
            self.held.add(key)
        return direction

    def release(self, key):
        self.held.discard(key)

    def clear(self):
        self.held.clear()

    def follow_state(self, state):
        """Drop held keys once the run is interrupted; a respawn keeps them"""
        if state not in KEEP_HELD_STATES:
            self.clear()

    @property
    def moving(self):
        return bool(self.held)
