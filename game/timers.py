"""
Countdown timers and one-shot deferred actions driven by the game tick
"""


class Countdown:
    """
    Countdown clock that clamps at zero and fires once per run
    """
    def __init__(self, name, duration=0.0):
        self.name = name
        self.duration = duration
        self.remaining = duration
        self.running = False

    def start(self, duration=None):
        """(Re)arm the countdown"""
        if duration is not None:
            self.duration = duration
        self.remaining = self.duration
        self.running = True

    def stop(self):
        self.running = False

    def skip(self):
        """Expire on the next tick. No-op if not running."""
        if not self.running:
            return False
        self.remaining = 0.0
        return True

    def tick(self, dt):
        """
        Advance by dt seconds

        Returns:
            True exactly once, on the tick the countdown reaches zero
        """
        if not self.running:
            return False
        self.remaining -= dt
        if self.remaining <= 1e-9:
            self.remaining = 0.0
            self.running = False
            return True
        return False

    def __repr__(self):
        return f"Countdown({self.name}, remaining={self.remaining:.1f}, running={self.running})"


class ScheduledAction:
    """Handle for a deferred action"""
    def __init__(self, name, delay, action):
        self.name = name
        self.remaining = delay
        self.action = action
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True

    @property
    def pending(self):
        return not (self.cancelled or self.fired)

    def __repr__(self):
        return f"ScheduledAction({self.name}, remaining={self.remaining:.2f}, pending={self.pending})"


class Scheduler:
    """
    One-shot deferred actions (respawn, shop confirmation, reveal timeouts)
    """
    def __init__(self):
        self.actions = []

    def schedule(self, delay, action, name="action"):
        """
        Run action after delay seconds of game time

        Returns:
            ScheduledAction handle
        """
        handle = ScheduledAction(name, delay, action)
        self.actions.append(handle)
        return handle

    def advance(self, dt):
        """Advance game time and run every action that became due"""
        due = []
        for handle in self.actions:
            if not handle.pending:
                continue
            handle.remaining -= dt
            if handle.remaining <= 1e-9:
                due.append(handle)

        for handle in due:
            if handle.pending:
                handle.fired = True
                handle.action()

        self.actions = [h for h in self.actions if h.pending]

    def cancel(self, name):
        """Cancel every pending action with this name"""
        for handle in self.actions:
            if handle.name == name:
                handle.cancel()

    def cancel_all(self):
        for handle in self.actions:
            handle.cancel()
        self.actions = []

    def has_pending(self, name=None):
        return any(h.pending and (name is None or h.name == name) for h in self.actions)

    def __len__(self):
        return len([h for h in self.actions if h.pending])
