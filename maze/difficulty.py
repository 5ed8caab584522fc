"""
Difficulty scaling and rule tuning for Maze Race
All design constants live on RulesConfig so experiments can override them
"""

import math

from utils.constants import (
    PHASE_DURATION, SHOP_DURATION, DISTRACTOR_DURATION, PRACTICE_DURATION,
    TRAP_CYCLE_TIME, WIPE_CYCLE_TIME, RESPAWN_DELAY, SHOP_CONFIRM_DELAY,
    SAFE_ZONE_REVEAL_TIME, HEARTBEAT_INTERVAL,
    FREEZE_YELLOW, FREEZE_RED,
    TRAP_DENSITY, MAZE_BASE_SIZE, MAZE_SIZE_SCALING,
    PLAYER_BASE_SPEED, PLAYER_SPEED_SCALING,
    PURSUER_BASE_SPEED, PURSUER_PHASE_SPEED, PURSUER_DIFFICULTY_SPEED,
    PURSUER_WIPE_SLOWDOWN, PURSUER_WIPE_WARNING,
    COIN_REWARD_NUMERATOR, COIN_REWARD_MIN, COIN_REWARD_MAX,
    FAST_WIN_THRESHOLD, FAST_WIN_BONUS, SLOW_WIN_BONUS, DIFFICULTY_MAX
)
from utils.helpers import clamp


class RulesConfig:
    """Tunable rules for one match"""
    def __init__(self, **kwargs):
        # State clocks (seconds)
        self.phase_duration = kwargs.get('phase_duration', PHASE_DURATION)
        self.shop_duration = kwargs.get('shop_duration', SHOP_DURATION)
        self.distractor_duration = kwargs.get('distractor_duration', DISTRACTOR_DURATION)
        self.practice_duration = kwargs.get('practice_duration', PRACTICE_DURATION)

        # Hazard cycles (base seconds, difficulty adds floor(d/2))
        self.trap_cycle_base = kwargs.get('trap_cycle_base', TRAP_CYCLE_TIME)
        self.wipe_cycle_base = kwargs.get('wipe_cycle_base', WIPE_CYCLE_TIME)

        # Phase-1 trap windows
        self.trap_warning_time = kwargs.get('trap_warning_time', 2.5)
        self.trap_collapse_time = kwargs.get('trap_collapse_time', 0.5)

        # Phase-2 freeze windows per flavor
        self.freeze_windows = kwargs.get('freeze_windows', {FREEZE_YELLOW: 3.0, FREEZE_RED: 1.0})

        # One-shot delays
        self.respawn_delay = kwargs.get('respawn_delay', RESPAWN_DELAY)
        self.shop_confirm_delay = kwargs.get('shop_confirm_delay', SHOP_CONFIRM_DELAY)
        self.safe_zone_reveal_time = kwargs.get('safe_zone_reveal_time', SAFE_ZONE_REVEAL_TIME)

        # Shop
        self.shop_fixed_cost = kwargs.get('shop_fixed_cost', 2)
        self.shop_gamble_min_coins = kwargs.get('shop_gamble_min_coins', 5)
        self.gamble_win_chance = kwargs.get('gamble_win_chance', 0.5)
        self.shop_gated_phases = kwargs.get('shop_gated_phases', (1,))

        # Host bridge
        self.heartbeat_interval = kwargs.get('heartbeat_interval', HEARTBEAT_INTERVAL)

    def trap_cycle_duration(self, difficulty):
        return self.trap_cycle_base + int(math.floor(difficulty / 2))

    def wipe_cycle_duration(self, difficulty):
        return self.wipe_cycle_base + int(math.floor(difficulty / 2))

    def freeze_window(self, flavor):
        return self.freeze_windows.get(flavor, 0.0)

    def __repr__(self):
        return f"RulesConfig(phase={self.phase_duration}s, shop={self.shop_duration}s, trap_cycle={self.trap_cycle_base}s)"


DEFAULT_RULES = RulesConfig()


# ========== MAZE SCALING ==========

def maze_size_for(difficulty):
    """Square maze size used for a difficulty level"""
    return MAZE_BASE_SIZE + int(math.floor(difficulty * MAZE_SIZE_SCALING))


def trap_count_for(width, height, difficulty):
    """Requested trap count for a maze"""
    return max(0, int(math.floor(width * height * TRAP_DENSITY * difficulty)))


def safe_zone_count_for(difficulty):
    """Safe zones shrink as difficulty rises, never below one"""
    return max(1, 4 - int(math.floor(difficulty / 3)))


# ========== SPEEDS ==========

def player_speed(difficulty):
    """World units per motion tick"""
    return PLAYER_BASE_SPEED * (1 + (difficulty - 1) * PLAYER_SPEED_SCALING)


def pursuer_speed(phase, difficulty, wipe_timer=None):
    """
    World units per AI tick

    Slowed sharply in phase 3 when a wipe is about to hit.
    """
    speed = PURSUER_BASE_SPEED + phase * PURSUER_PHASE_SPEED + difficulty * PURSUER_DIFFICULTY_SPEED
    if phase == 3 and wipe_timer is not None and wipe_timer < PURSUER_WIPE_WARNING:
        speed *= PURSUER_WIPE_SLOWDOWN
    return speed


# ========== REWARDS ==========

def coin_reward(elapsed):
    """Coins for finishing a maze; faster runs pay more"""
    earned = int(math.floor(COIN_REWARD_NUMERATOR / (elapsed + 1)))
    return clamp(earned, COIN_REWARD_MIN, COIN_REWARD_MAX)


def difficulty_after_win(difficulty, elapsed):
    """Raise difficulty after a win, more for fast runs"""
    bonus = FAST_WIN_BONUS if elapsed < FAST_WIN_THRESHOLD else SLOW_WIN_BONUS
    return min(difficulty + bonus, DIFFICULTY_MAX)
