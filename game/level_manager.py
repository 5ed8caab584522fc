"""
Level Manager - maze instantiation and per-maze entity state
"""

import random

from entities.player import Player
from entities.pursuer import Pursuer
from maze.difficulty import maze_size_for
from maze.generator import generate_maze
from maze.maze_core import Maze
from utils.constants import CELL_SIZE, PLAYER_COLOR


class Level:
    """
    A single maze instance with the local player, the pursuer and remote players
    """
    def __init__(self, maze, difficulty, phase, player_id, color=PLAYER_COLOR, cell_size=CELL_SIZE):
        """
        Args:
            maze: Maze object
            difficulty: Difficulty the maze was generated at
            phase: Phase the maze belongs to (decides pursuer spawn)
            player_id: Local player identity
            color: Local player color tag
        """
        self.maze = maze
        self.difficulty = difficulty
        self.phase = phase
        self.cell_size = cell_size

        self.player = Player.at_cell(player_id, maze.start, color, cell_size)
        self.pursuer = Pursuer.spawn(maze, phase, cell_size)
        self.remote_players = {}

    def player_cell(self):
        return self.player.cell(self.cell_size)

    def reset_player(self):
        """Put the player back on the start cell"""
        self.player.reset_position(self.maze.start, self.cell_size)

    def reset(self):
        """Reset level to initial state"""
        self.reset_player()
        self.pursuer = Pursuer.spawn(self.maze, self.phase, self.cell_size)
        self.maze.traps.reset()

    def player_on_trap(self):
        x, y = self.player_cell()
        return self.maze.traps.get_trap_at(x, y)

    def player_in_safe_zone(self):
        x, y = self.player_cell()
        return self.maze.is_safe_zone(x, y)

    # ========== REMOTE PLAYERS ==========

    def set_remote_players(self, players):
        """Replace the roster from a PLAYER_JOINED message"""
        self.remote_players = {}
        self.merge_remote_players(players)

    def merge_remote_players(self, players):
        """Merge a partial roster from a STATE_UPDATE message"""
        for pid, data in players.items():
            if pid == self.player.id:
                continue
            if pid in self.remote_players:
                self.remote_players[pid].apply_update(data)
            else:
                entry = dict(data)
                entry.setdefault("id", pid)
                self.remote_players[pid] = Player.from_dict(entry)

    def remove_remote_player(self, player_id):
        self.remote_players.pop(player_id, None)

    def __repr__(self):
        return f"Level(difficulty={self.difficulty}, phase={self.phase}, maze={self.maze})"


class LevelManager:
    """
    Creates levels for the current difficulty and phase
    """
    def __init__(self, player_id, color=PLAYER_COLOR, rng=None, cell_size=CELL_SIZE):
        self.player_id = player_id
        self.color = color
        self.rng = rng or random.Random()
        self.cell_size = cell_size
        self.current_level = None
        self.levels_created = 0

    def create_level(self, difficulty, phase):
        """
        Generate a fresh maze and wrap it in a Level

        Returns:
            Level object
        """
        size = maze_size_for(difficulty)
        maze = generate_maze(size, size, difficulty, rng=self.rng)
        return self._install(maze, difficulty, phase)

    def adopt_maze(self, payload, difficulty, phase):
        """Use a maze received from the room instead of generating one"""
        maze = Maze.from_dict(payload)
        return self._install(maze, difficulty, phase)

    def _install(self, maze, difficulty, phase):
        previous = self.current_level
        level = Level(maze, difficulty, phase, self.player_id, self.color, self.cell_size)
        if previous is not None:
            level.remote_players = previous.remote_players
        self.current_level = level
        self.levels_created += 1
        return level

    def __repr__(self):
        return f"LevelManager(player={self.player_id}, current_level={self.current_level})"
