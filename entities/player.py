"""
Player entity - continuous position with a relative-turn heading
"""

from utils.constants import CELL_SIZE, PLAYER_COLOR, TURN_OFFSETS
from utils.helpers import normalize_angle, world_to_cell, cell_center


class Player:
    """
    Player driven by relative-turn input

    angle is the displayed heading, target_angle the heading movement follows.
    Both are radians in (-pi, pi], 0 = north.
    """
    def __init__(self, player_id, x, y, angle=0.0, color=PLAYER_COLOR):
        self.id = player_id
        self.x = x
        self.y = y
        self.angle = angle
        self.target_angle = angle
        self.color = color

    @classmethod
    def at_cell(cls, player_id, cell, color=PLAYER_COLOR, cell_size=CELL_SIZE):
        """Create a player centered on a grid cell"""
        x, y = cell_center(cell, cell_size)
        return cls(player_id, x, y, 0.0, color)

    def turn(self, direction):
        """
        Set the target heading relative to the current one

        Args:
            direction: 'forward', 'back', 'left' or 'right'

        Returns:
            New target angle
        """
        offset = TURN_OFFSETS[direction]
        self.target_angle = normalize_angle(self.target_angle + offset)
        return self.target_angle

    def cell(self, cell_size=CELL_SIZE):
        """Grid cell under the player's center"""
        return world_to_cell(self.x, self.y, cell_size)

    def reset_position(self, cell, cell_size=CELL_SIZE):
        """Reset player to a cell center facing north"""
        self.x, self.y = cell_center(cell, cell_size)
        self.angle = 0.0
        self.target_angle = 0.0

    def apply_update(self, data):
        """Apply a relayed position update"""
        self.x = data.get("x", self.x)
        self.y = data.get("y", self.y)
        self.angle = data.get("angle", self.angle)
        self.target_angle = self.angle
        self.color = data.get("color", self.color)

    def to_dict(self):
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "angle": self.angle,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(data["id"], data.get("x", 0.0), data.get("y", 0.0),
                   data.get("angle", 0.0), data.get("color", PLAYER_COLOR))

    def __repr__(self):
        return f"Player(id={self.id}, pos=({self.x:.1f},{self.y:.1f}), angle={self.angle:.2f})"
