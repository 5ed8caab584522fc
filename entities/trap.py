"""
Trap entities
Traps cycle safe -> warning -> collapsed with the phase-1 trap timer
"""

from utils.constants import TRAP_SAFE, TRAP_WARNING, TRAP_COLLAPSED


class Trap:
    """
    Single collapsible floor cell
    """
    def __init__(self, x, y, state=TRAP_SAFE):
        """
        Args:
            x, y: Grid position
            state: 'safe', 'warning' or 'collapsed'
        """
        self.x = x
        self.y = y
        self.id = f"{x}-{y}"
        self.state = state

    @property
    def cell(self):
        return (self.x, self.y)

    def is_at_position(self, x, y):
        """Check if trap is at given position"""
        return self.x == x and self.y == y

    def is_collapsed(self):
        return self.state == TRAP_COLLAPSED

    def update(self, trap_timer, warning_time, collapse_time):
        """
        Update trap state from the trap cycle countdown

        Args:
            trap_timer: Seconds left in the current trap cycle
            warning_time: Below this the trap shows a warning
            collapse_time: Below this the trap is collapsed
        """
        if trap_timer < collapse_time:
            self.state = TRAP_COLLAPSED
        elif trap_timer < warning_time:
            self.state = TRAP_WARNING
        else:
            self.state = TRAP_SAFE

    def reset(self):
        """Reset trap to initial state"""
        self.state = TRAP_SAFE

    def to_dict(self):
        return {"id": self.id, "x": self.x, "y": self.y, "state": self.state}

    @classmethod
    def from_dict(cls, data):
        return cls(int(data["x"]), int(data["y"]), data.get("state", TRAP_SAFE))

    def __repr__(self):
        return f"Trap(pos=({self.x},{self.y}), state={self.state})"


class TrapManager:
    """
    Manages all traps in a maze
    """
    def __init__(self, traps=None):
        self.traps = list(traps or [])

    def add_trap(self, x, y):
        """
        Add a trap to the maze

        Returns:
            Trap object
        """
        trap = Trap(x, y)
        self.traps.append(trap)
        return trap

    def get_trap_at(self, x, y):
        """Get trap at position"""
        for trap in self.traps:
            if trap.is_at_position(x, y):
                return trap
        return None

    def cells(self):
        return [trap.cell for trap in self.traps]

    def update(self, trap_timer, warning_time, collapse_time):
        """Update all traps from the trap cycle countdown"""
        for trap in self.traps:
            trap.update(trap_timer, warning_time, collapse_time)

    def get_collapsed_traps(self):
        return [t for t in self.traps if t.is_collapsed()]

    def reset(self):
        """Reset all traps"""
        for trap in self.traps:
            trap.reset()

    def __len__(self):
        return len(self.traps)

    def __iter__(self):
        return iter(self.traps)

    def __repr__(self):
        return f"TrapManager(traps={len(self.traps)}, collapsed={len(self.get_collapsed_traps())})"
