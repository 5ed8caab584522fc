"""Countdown and scheduler tests"""

from game.timers import Countdown, Scheduler


def test_countdown_fires_once_and_clamps():
    clock = Countdown("shop", 0.3)
    clock.start()
    fired = [clock.tick(0.1) for _ in range(6)]
    assert fired == [False, False, True, False, False, False]
    assert clock.remaining == 0.0
    assert not clock.running


def test_countdown_ignores_ticks_when_stopped():
    clock = Countdown("phase", 5)
    assert not clock.tick(10)
    assert clock.remaining == 5


def test_skip_expires_on_next_tick():
    clock = Countdown("distractor", 120)
    assert not clock.skip()
    clock.start()
    assert clock.skip()
    assert clock.tick(0.1)


def test_scheduler_runs_due_actions():
    scheduler = Scheduler()
    calls = []
    scheduler.schedule(0.25, lambda: calls.append("a"), name="a")
    scheduler.schedule(1.0, lambda: calls.append("b"), name="b")

    scheduler.advance(0.1)
    assert calls == []
    scheduler.advance(0.2)
    assert calls == ["a"]
    assert scheduler.has_pending("b")
    assert len(scheduler) == 1


def test_scheduler_cancel():
    scheduler = Scheduler()
    calls = []
    handle = scheduler.schedule(0.1, lambda: calls.append("x"), name="respawn")
    scheduler.schedule(0.1, lambda: calls.append("y"), name="other")
    scheduler.cancel("respawn")
    assert not handle.pending

    scheduler.advance(0.5)
    assert calls == ["y"]

    scheduler.schedule(0.1, lambda: calls.append("z"))
    scheduler.cancel_all()
    scheduler.advance(1.0)
    assert calls == ["y"]
    assert not scheduler.has_pending()
