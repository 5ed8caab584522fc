"""
Game State Machine - phases, countdowns and transitions for one race session

Every countdown belongs to exactly one state. Expiry of a countdown is handed
to _on_timer_expired, which picks the transition. Side effects the outside
world cares about (cues, host messages, network notices) are queued as event
dictionaries and drained by the session.
"""

import math
import random
import time
from datetime import datetime, timezone
from enum import Enum

from game.timers import Countdown, Scheduler
from maze.difficulty import DEFAULT_RULES, coin_reward, difficulty_after_win
from utils.constants import (
    STATE_LOBBY, STATE_TUTORIAL, STATE_PRACTICE, STATE_PLAYING, STATE_SHOP,
    STATE_DISTRACTOR, STATE_WON, STATE_LOST, STATE_RESPAWNING, STATE_GAMEOVER,
    TUTORIAL_INTRO, TUTORIAL_EXAMPLE, TUTORIAL_PHASE2, TUTORIAL_PHASE3,
    FREEZE_YELLOW, FREEZE_RED, GAME_TICK, MAX_PHASE, DIFFICULTY_START,
    PURSUER_ID, AMBIENCE_LAYERS, PHASE_MAZE_THRESHOLDS
)


class GameState(Enum):
    """Game states"""
    LOBBY = STATE_LOBBY
    TUTORIAL = STATE_TUTORIAL
    PRACTICE = STATE_PRACTICE
    PLAYING = STATE_PLAYING
    SHOP = STATE_SHOP
    DISTRACTOR = STATE_DISTRACTOR
    WON = STATE_WON
    LOST = STATE_LOST
    RESPAWNING = STATE_RESPAWNING
    GAMEOVER = STATE_GAMEOVER


# States in which the player moves and hazards run
RACE_STATES = (GameState.PLAYING, GameState.PRACTICE)

# The single countdown each state owns
STATE_CLOCKS = {
    GameState.PLAYING: 'phase_clock',
    GameState.SHOP: 'shop_clock',
    GameState.PRACTICE: 'practice_clock',
    GameState.DISTRACTOR: 'distractor_clock',
}

TUTORIAL_FOR_PHASE = {
    2: TUTORIAL_PHASE2,
    3: TUTORIAL_PHASE3,
}


class PhaseStateMachine:
    """
    Owns every game clock and all state transitions of a session
    """
    def __init__(self, level_manager, rules=None, rng=None, clock=None, difficulty=DIFFICULTY_START):
        """
        Args:
            level_manager: LevelManager used to (re)generate mazes
            rules: RulesConfig (defaults to DEFAULT_RULES)
            rng: random.Random for freeze flavors, gambles and genre picks
            clock: Wall clock in seconds, used for shop decision latency
            difficulty: Starting difficulty
        """
        self.level_manager = level_manager
        self.rules = rules or DEFAULT_RULES
        self.rng = rng or random.Random()
        self.clock = clock or time.monotonic
        self.scheduler = Scheduler()
        self.events = []
        self.start_difficulty = difficulty
        self._reset_state()

    def _reset_state(self):
        self.current_state = GameState.LOBBY
        self.previous_state = None
        self.respawn_resume = None
        self.phase = 1
        self.tutorial_step = None
        self.difficulty = self.start_difficulty

        self.coins = 0
        self.race_time = 0.0
        self.total_time = 0.0
        self.mazes_completed = 0
        self.phase_mazes = 0
        self.winner = None

        self.subject_id = ''
        self.survey = None
        self.genre = None

        self.shop_latencies = []
        self.shop_choice = None
        self.shop_entered_at = None

        self.freeze_flavor = FREEZE_YELLOW
        self.safe_zones_visible = False
        self.phase3_revealed = False
        self.heartbeat_elapsed = 0.0

        rules = self.rules
        self.phase_clock = Countdown('phase', rules.phase_duration)
        self.shop_clock = Countdown('shop', rules.shop_duration)
        self.practice_clock = Countdown('practice', rules.practice_duration)
        self.distractor_clock = Countdown('distractor', rules.distractor_duration)
        self.trap_clock = Countdown('trap', rules.trap_cycle_duration(self.difficulty))
        self.wipe_clock = Countdown('wipe', rules.wipe_cycle_duration(self.difficulty))

    # ========== STATE HELPERS ==========

    @property
    def level(self):
        return self.level_manager.current_level

    def in_race(self):
        return self.current_state in RACE_STATES

    def get_state_name(self):
        """Get current state name"""
        return self.current_state.value

    def active_clock(self):
        """The countdown owned by the current state, if any"""
        attr = STATE_CLOCKS.get(self.current_state)
        return getattr(self, attr) if attr else None

    def transition_to(self, new_state, **kwargs):
        """
        Transition to a new state

        Args:
            new_state: GameState enum value
            **kwargs: Extra data attached to the state_changed event
        """
        self.previous_state = self.current_state
        self.current_state = new_state
        self._emit('state_changed', state=new_state.value,
                   previous=self.previous_state.value, phase=self.phase, **kwargs)

    def _emit(self, name, /, **data):
        event = {'event': name}
        event.update(data)
        self.events.append(event)

    def _cue(self, name):
        self._emit('cue', name=name)

    def drain_events(self):
        """Hand queued events to the caller"""
        events = self.events
        self.events = []
        return events

    # ========== SLOW TICK ==========

    def tick(self, dt=GAME_TICK):
        """
        Advance the game clock domain by dt seconds

        Deferred actions always advance. Hazard timers run only while racing,
        and only the countdown owned by the current state decrements.
        """
        if self.current_state == GameState.GAMEOVER:
            return

        self.scheduler.advance(dt)
        self._tick_heartbeat(dt)

        if self.in_race():
            self._tick_hazards(dt)

        if self.current_state == GameState.PLAYING:
            self.race_time += dt
            self.total_time += dt

        if self.current_state == GameState.DISTRACTOR and self.phase == 2:
            half = self.rules.distractor_duration / 2
            if self.distractor_clock.remaining > half >= self.distractor_clock.remaining - dt:
                self._cue('calm')

        clock = self.active_clock()
        if clock is not None and clock.tick(dt):
            self._on_timer_expired(clock.name)

    def _tick_hazards(self, dt):
        if self.phase == 3 and self.wipe_clock.tick(dt):
            self._on_timer_expired('wipe')
            if not self.in_race():
                return

        before = self.trap_clock.remaining
        if self.trap_clock.tick(dt):
            self._on_timer_expired('trap')
        elif self.phase == 2:
            window = self.rules.freeze_window(self.freeze_flavor)
            if before > window >= self.trap_clock.remaining:
                self._cue('trap')

        if self.phase == 1 and self.level is not None:
            self.level.maze.traps.update(self.trap_clock.remaining,
                                         self.rules.trap_warning_time,
                                         self.rules.trap_collapse_time)
            self.check_trap_hazard()

    def _tick_heartbeat(self, dt):
        self.heartbeat_elapsed += dt
        if self.heartbeat_elapsed + 1e-9 >= self.rules.heartbeat_interval:
            self.heartbeat_elapsed = 0.0
            self._emit('heartbeat', metrics=self.metrics())

    def _on_timer_expired(self, name):
        handlers = {
            'phase': self._on_phase_clock_expired,
            'shop': self._enter_distractor,
            'practice': self._on_practice_expired,
            'distractor': self._on_distractor_expired,
            'trap': self._on_trap_cycle,
            'wipe': self._on_wipe,
        }
        handlers[name]()

    # ========== TIMER TRANSITIONS ==========

    def _on_phase_clock_expired(self):
        if self.phase < MAX_PHASE:
            self._enter_shop()
        else:
            self._enter_gameover()

    def _on_practice_expired(self):
        # Same maze and difficulty; only the run restarts
        self.level.reset()
        self.race_time = 0.0
        self._enter_playing()

    def _on_distractor_expired(self):
        self._advance_phase()

    def _on_trap_cycle(self):
        self.trap_clock.start(self.rules.trap_cycle_duration(self.difficulty))
        if self.phase == 2:
            self.freeze_flavor = self.rng.choice([FREEZE_YELLOW, FREEZE_RED])
            self._emit('freeze_flavor', flavor=self.freeze_flavor)
            self._cue('move')

    def _on_wipe(self):
        self.wipe_clock.start(self.rules.wipe_cycle_duration(self.difficulty))
        safe = self.level.player_in_safe_zone()
        self._emit('wipe', safe=safe)
        if not safe:
            self._cue('trap')
            self.respawn('wipe')

    # ========== STATE ENTRY ==========

    def start(self, subject_id):
        """Leave the lobby once a subject identity is known"""
        if self.current_state != GameState.LOBBY:
            return False
        subject_id = (subject_id or '').strip()
        if not subject_id:
            return False
        self.subject_id = subject_id
        self._enter_tutorial(TUTORIAL_INTRO)
        return True

    def submit_survey(self, survey):
        """Store the survey token used for ambience genre picks"""
        self.survey = survey

    def acknowledge_tutorial(self):
        """Advance the tutorial; the last step enters practice"""
        if self.current_state != GameState.TUTORIAL:
            return False
        if self.tutorial_step == TUTORIAL_INTRO:
            self.tutorial_step = TUTORIAL_EXAMPLE
            self._emit('tutorial_step', step=self.tutorial_step)
            return True
        self._enter_practice()
        return True

    def _enter_tutorial(self, step):
        self.tutorial_step = step
        self.transition_to(GameState.TUTORIAL, step=step)
        self._emit('ambience', genre=None, tutorial=True)

    def _enter_practice(self):
        self._new_maze()
        self.practice_clock.start(self.rules.practice_duration)
        self._arm_hazards()
        self.transition_to(GameState.PRACTICE)
        self._emit('ambience', genre=None, tutorial=True)

    def _enter_playing(self):
        if not self.phase_clock.running:
            self.phase_clock.start(self.rules.phase_duration)
        self._arm_hazards()
        self.transition_to(GameState.PLAYING)

        if self.phase_mazes == 0:
            self._pick_genre()

        if self.phase == 3 and not self.phase3_revealed:
            self.phase3_revealed = True
            self.safe_zones_visible = True
            self._emit('safe_zones', visible=True)
            self.scheduler.schedule(self.rules.safe_zone_reveal_time,
                                    self._hide_safe_zones, name='safe_zone_hide')

    def _enter_shop(self):
        self.shop_clock.start(self.rules.shop_duration)
        self.shop_entered_at = self.clock()
        self.shop_choice = None
        self.transition_to(GameState.SHOP)

    def _enter_distractor(self):
        if self.current_state != GameState.SHOP:
            return
        self.scheduler.cancel('shop_confirm')
        self.shop_clock.stop()
        self.distractor_clock.start(self.rules.distractor_duration)
        self.transition_to(GameState.DISTRACTOR)
        if self.phase == 2:
            self._cue('calm')

    def _enter_gameover(self):
        for clock in (self.phase_clock, self.shop_clock, self.practice_clock,
                      self.distractor_clock, self.trap_clock, self.wipe_clock):
            clock.stop()
        self.scheduler.cancel_all()
        self.transition_to(GameState.GAMEOVER)
        self._emit('complete', summary=self.summary())

    def _advance_phase(self):
        if self.phase >= MAX_PHASE:
            return
        self.phase += 1
        self.phase_mazes = 0
        self._emit('phase_advanced', phase=self.phase)

        step = TUTORIAL_FOR_PHASE.get(self.phase)
        if step is not None:
            self._enter_tutorial(step)
        else:
            self._new_maze()
            self._enter_playing()

    def _new_maze(self):
        level = self.level_manager.create_level(self.difficulty, self.phase)
        self.race_time = 0.0
        self.winner = None
        self._emit('maze_created', maze=level.maze)
        return level

    def adopt_room_maze(self, payload):
        """
        Switch to the maze the room is racing on

        Only done while a race is running; the run restarts on the new maze.

        Returns:
            True if the maze was adopted
        """
        if not self.in_race():
            return False
        level = self.level_manager.adopt_maze(payload, self.difficulty, self.phase)
        self.race_time = 0.0
        self._arm_hazards()
        self._emit('maze_adopted', maze=level.maze)
        return True

    def _arm_hazards(self):
        self.trap_clock.start(self.rules.trap_cycle_duration(self.difficulty))
        self.wipe_clock.start(self.rules.wipe_cycle_duration(self.difficulty))
        if self.level is not None:
            self.level.maze.traps.reset()

    def _pick_genre(self):
        if self.survey is None:
            return
        self.genre = self.rng.choice(self.survey.choices())
        self._emit('ambience', genre=self.genre, tutorial=False)

    def _hide_safe_zones(self):
        self.safe_zones_visible = False
        self._emit('safe_zones', visible=False)

    # ========== RESPAWN ==========

    def respawn(self, reason='hazard'):
        """
        Send the player back to the start after a short delay

        Returns:
            True if a respawn was scheduled
        """
        if not self.in_race():
            return False
        resume = self.current_state
        self.respawn_resume = resume
        self.transition_to(GameState.RESPAWNING, reason=reason)
        self.scheduler.schedule(self.rules.respawn_delay,
                                lambda: self._finish_respawn(resume), name='respawn')
        return True

    def _finish_respawn(self, resume):
        if self.current_state != GameState.RESPAWNING:
            return
        self.level.reset_player()
        self.transition_to(resume)

    # ========== MOTION / AI OUTCOMES ==========

    def freeze_active(self):
        """True inside the phase-2 freeze window"""
        if self.phase != 2 or not self.in_race() or not self.trap_clock.running:
            return False
        return self.trap_clock.remaining <= self.rules.freeze_window(self.freeze_flavor)

    def check_trap_hazard(self):
        """Respawn if the player stands on a collapsed phase-1 trap"""
        if self.phase != 1 or not self.in_race() or not self.trap_clock.running:
            return False
        if self.trap_clock.remaining >= self.rules.trap_collapse_time:
            return False
        if self.level.player_on_trap() is None:
            return False
        self._cue('trap')
        return self.respawn('trap')

    def on_motion(self, result):
        """
        Consume a MovementEngine step result

        Args:
            result: dict with 'moved', 'won', 'hazard', 'cell'
        """
        if not self.in_race():
            return
        if result['hazard']:
            self._cue('trap')
            self.respawn('freeze')
            return
        if result['won']:
            self.handle_win()
            return
        if result['moved']:
            self.check_trap_hazard()

    def handle_win(self):
        """Player reached the end cell"""
        if self.current_state == GameState.PRACTICE:
            self._cue('win')
            self.respawn('practice_win')
            return False
        if self.current_state != GameState.PLAYING:
            return False

        elapsed = self.race_time
        earned = coin_reward(elapsed)
        self.coins += earned
        self.mazes_completed += 1
        self.phase_mazes += 1
        self._update_layers()

        self.winner = {'id': self.level.player.id, 'time': elapsed}
        self.difficulty = difficulty_after_win(self.difficulty, elapsed)
        self._cue('win')
        self.transition_to(GameState.WON)
        self._emit('won', time=elapsed, phase=self.phase, coins=self.coins, earned=earned)
        return True

    def handle_caught(self):
        """Pursuer reached its target"""
        if self.current_state == GameState.PRACTICE:
            return self.respawn('caught')
        if self.current_state != GameState.PLAYING:
            return False
        self.winner = {'id': PURSUER_ID, 'time': self.race_time}
        self.transition_to(GameState.LOST)
        self._emit('lost', phase=self.phase, time=self.race_time, winner=PURSUER_ID)
        return True

    def receive_game_over(self, winner_id, elapsed, my_id):
        """
        A room peer announced a winner

        Our own win was already handled locally, so its echo is ignored.
        A player respawning mid-race loses too.
        """
        if winner_id == my_id:
            return False
        if self.current_state == GameState.RESPAWNING and self.respawn_resume == GameState.PLAYING:
            self.scheduler.cancel('respawn')
        elif self.current_state != GameState.PLAYING:
            return False
        self.winner = {'id': winner_id, 'time': elapsed}
        self.transition_to(GameState.LOST)
        self._emit('lost', phase=self.phase, time=self.race_time, winner=winner_id)
        return True

    def next_iteration(self):
        """Start a fresh maze after a win or loss"""
        if self.current_state not in (GameState.WON, GameState.LOST):
            return False
        self._new_maze()
        self._enter_playing()
        return True

    def _update_layers(self):
        threshold = PHASE_MAZE_THRESHOLDS.get(self.phase, 1)
        active = min(AMBIENCE_LAYERS, int(math.floor(self.phase_mazes * AMBIENCE_LAYERS / threshold)))
        self._emit('layers', active=active, flow=self.phase_mazes >= threshold)

    # ========== SHOP ==========

    def _shop_open(self):
        return self.current_state == GameState.SHOP and self.shop_choice is None

    def _shop_gated(self):
        return self.phase in self.rules.shop_gated_phases

    def can_buy(self):
        if not self._shop_open():
            return False
        return not self._shop_gated() or self.coins >= self.rules.shop_fixed_cost

    def can_gamble(self):
        if not self._shop_open():
            return False
        return not self._shop_gated() or self.coins >= self.rules.shop_gamble_min_coins

    def shop_buy(self):
        """Fixed-cost option"""
        if not self.can_buy():
            return False
        self.coins = max(0, self.coins - self.rules.shop_fixed_cost)
        self._record_shop_choice('fixed')
        return True

    def shop_gamble(self):
        """Double-or-nothing option"""
        if not self.can_gamble():
            return False
        won = self.rng.random() < self.rules.gamble_win_chance
        self.coins = self.coins * 2 if won else 0
        self._record_shop_choice('gamble', won=won)
        return True

    def _record_shop_choice(self, choice, **extra):
        latency_ms = int(round((self.clock() - self.shop_entered_at) * 1000))
        self.shop_latencies.append(latency_ms)
        self.shop_choice = choice
        self._emit('shop_choice', choice=choice, latency_ms=latency_ms, coins=self.coins, **extra)
        self.scheduler.schedule(self.rules.shop_confirm_delay, self._enter_distractor, name='shop_confirm')

    # ========== HOST COMMANDS ==========

    def skip_timer(self):
        """Expire the active state's countdown on the next tick"""
        clock = self.active_clock()
        if clock is None:
            return False
        return clock.skip()

    def metrics(self):
        """Live snapshot for the host page"""
        return {
            'subjectId': self.subject_id,
            'gameState': self.current_state.value,
            'phase': self.phase,
            'coins': self.coins,
            'difficulty': self.difficulty,
            'time': round(self.race_time, 1),
            'totalTime': round(self.total_time, 1),
            'mazesCompleted': self.mazes_completed,
            'phaseMazes': self.phase_mazes,
            'shopLatencies': list(self.shop_latencies),
        }

    def summary(self):
        """Completion summary sent when the match ends"""
        return {
            'subjectId': self.subject_id,
            'finalPhase': self.phase,
            'finalCoins': self.coins,
            'finalDifficulty': self.difficulty,
            'totalTime': round(self.total_time, 1),
            'shopLatencies': list(self.shop_latencies),
            'timestamp': datetime.now(timezone.utc).isoformat(),
        }

    def reset(self):
        """Global reset: cancel deferred actions and return to the lobby"""
        self.scheduler.cancel_all()
        self.events = []
        self.level_manager.current_level = None
        self._reset_state()

    def __repr__(self):
        return f"PhaseStateMachine(state={self.current_state.value}, phase={self.phase}, coins={self.coins})"
