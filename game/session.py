"""
Game Session - connects the state machine to movement, the pursuer,
the room relay and the host/audio collaborators
"""

import random
import uuid

from game.audio import SilentAudio
from game.game_state import PhaseStateMachine
from game.host_bridge import RecordingHost, parse_command, SKIP_PHASE, GET_METRICS
from game.level_manager import LevelManager
from game.movement import MovementEngine
from utils.constants import GAME_TICK, DEFAULT_ROOM_ID, PLAYER_COLOR


class GameSession:
    """
    One subject's race session

    The three tick domains (game, motion, AI) are driven by the caller.
    Nothing here blocks or sleeps.
    """
    def __init__(self, player_id=None, rules=None, rng=None, clock=None, audio=None,
                 host=None, relay=None, save_manager=None, room_id=DEFAULT_ROOM_ID,
                 color=PLAYER_COLOR):
        """
        Args:
            player_id: Identity used in the room (random if omitted)
            rules: RulesConfig
            rng: random.Random shared by generation and game rules
            clock: Wall clock for shop latency
            audio: AudioCues collaborator
            host: HostBridge collaborator
            relay: Object with send(message), e.g. RelayClient (optional)
            save_manager: SaveManager for the results export (optional)
            room_id: Room to join on every new maze
        """
        self.player_id = player_id or f"player_{uuid.uuid4().hex[:8]}"
        self.color = color
        self.room_id = room_id
        self.rng = rng or random.Random()

        self.level_manager = LevelManager(self.player_id, color, rng=self.rng)
        self.machine = PhaseStateMachine(self.level_manager, rules, rng=self.rng, clock=clock)
        self.movement = MovementEngine()

        self.audio = audio or SilentAudio()
        self.host = host or RecordingHost()
        self.relay = relay
        self.save_manager = save_manager

        # Set by each JOIN_ROOM until the room answers with its maze
        self.awaiting_room_maze = False

    @property
    def level(self):
        return self.level_manager.current_level

    @property
    def state(self):
        return self.machine.current_state

    # ========== PLAYER COMMANDS ==========

    def start(self, subject_id, survey=None):
        if survey is not None:
            self.machine.submit_survey(survey)
        ok = self.machine.start(subject_id)
        self.dispatch_events()
        return ok

    def acknowledge_tutorial(self):
        ok = self.machine.acknowledge_tutorial()
        self.dispatch_events()
        return ok

    def press(self, direction):
        """
        Relative turn from a direction key press

        Returns:
            True if the turn was applied
        """
        if not self.machine.in_race() or self.level is None:
            return False
        self.level.player.turn(direction)
        self.audio.play_cue('move')
        return True

    def shop_buy(self):
        ok = self.machine.shop_buy()
        self.dispatch_events()
        return ok

    def shop_gamble(self):
        ok = self.machine.shop_gamble()
        self.dispatch_events()
        return ok

    def next_iteration(self):
        ok = self.machine.next_iteration()
        self.dispatch_events()
        return ok

    # ========== TICKS ==========

    def game_tick(self, dt=GAME_TICK):
        """Timers, hazards and deferred actions"""
        self.machine.tick(dt)
        return self.dispatch_events()

    def motion_tick(self, moving):
        """
        Advance the local player one motion step

        Returns:
            Step result dict, or None outside a race
        """
        if not self.machine.in_race() or self.level is None:
            return None

        level = self.level
        result = self.movement.step(level.player, level.maze, moving,
                                    self.machine.difficulty, self.machine.freeze_active())
        if result['moved']:
            self._send({
                'type': 'UPDATE_POSITION',
                'x': level.player.x,
                'y': level.player.y,
                'angle': level.player.target_angle,
            })

        self.machine.on_motion(result)
        self.dispatch_events()
        return result

    def ai_tick(self):
        """
        Advance the pursuer

        Returns:
            True if the pursuer reached its target
        """
        if not self.machine.in_race() or self.level is None:
            return False

        machine = self.machine
        wipe_timer = machine.wipe_clock.remaining if machine.phase == 3 else None
        level = self.level
        caught = level.pursuer.update(level.maze, machine.phase, machine.difficulty,
                                      level.player, wipe_timer)
        if caught:
            machine.handle_caught()
            self.dispatch_events()
        return caught

    # ========== EVENTS ==========

    def dispatch_events(self):
        """Route queued state machine events to the collaborators"""
        events = self.machine.drain_events()
        for event in events:
            self.audio.handle_event(event)
            kind = event['event']

            if kind == 'maze_created':
                self._join_room(event['maze'])
            elif kind == 'won':
                self.host.maze_win(event['time'], event['phase'], event['coins'])
                self._send({'type': 'WIN', 'time': event['time']})
            elif kind == 'lost':
                self.host.maze_loss(event['phase'], event['time'])
            elif kind == 'heartbeat':
                self.host.heartbeat(event['metrics'])
            elif kind == 'complete':
                self.host.maze_complete(event['summary'])
                if self.save_manager is not None:
                    self.save_manager.export_results(event['summary'])
        return events

    def _send(self, message):
        if self.relay is not None:
            self.relay.send(message)

    def _join_room(self, maze):
        player = self.level.player
        self.awaiting_room_maze = True
        self._send({
            'type': 'JOIN_ROOM',
            'roomId': self.room_id,
            'playerId': self.player_id,
            'maze': maze.to_dict(),
            'x': player.x,
            'y': player.y,
            'color': self.color,
        })

    # ========== INBOUND ==========

    def apply_relay_message(self, message):
        """
        Apply one message received from the room

        Returns:
            True if the message was understood
        """
        if not isinstance(message, dict):
            return False
        kind = message.get('type')

        if kind == 'GAME_OVER':
            self.machine.receive_game_over(message.get('winnerId'), message.get('time'), self.player_id)
            self.dispatch_events()
            return True

        if kind == 'PLAYER_JOINED':
            self._adopt_room_maze(message.get('maze'), message.get('players') or {})

        level = self.level
        if level is None:
            return kind in ('PLAYER_JOINED', 'STATE_UPDATE', 'PLAYER_LEFT')

        if kind == 'PLAYER_JOINED':
            level.set_remote_players(message.get('players') or {})
        elif kind == 'STATE_UPDATE':
            level.merge_remote_players(message.get('players') or {})
        elif kind == 'PLAYER_LEFT':
            level.remove_remote_player(message.get('playerId'))
        else:
            return False
        return True

    def _adopt_room_maze(self, payload, players):
        """Race on the room's maze; the first joiner's maze is canonical"""
        if self.level is None:
            if payload:
                self.level_manager.adopt_maze(payload, self.machine.difficulty, self.machine.phase)
            return
        # Only the answer to our own join decides the maze
        if not self.awaiting_room_maze or self.player_id not in players:
            return
        self.awaiting_room_maze = False
        if payload and not self._is_current_maze(payload):
            self.machine.adopt_room_maze(payload)
            self.dispatch_events()

    def _is_current_maze(self, payload):
        current = self.level.maze.to_dict()
        return all(payload.get(key) == current[key] for key in ('grid', 'start', 'end'))

    def handle_host_command(self, raw):
        """
        Apply a host page command

        Returns:
            True if the command acted on something
        """
        command = parse_command(raw)
        if command == SKIP_PHASE:
            return self.machine.skip_timer()
        if command == GET_METRICS:
            self.host.maze_metrics(self.machine.metrics())
            return True
        return False

    def metrics(self):
        return self.machine.metrics()

    def reset(self):
        self.machine.reset()
        self.dispatch_events()

    def __repr__(self):
        return f"GameSession(player={self.player_id}, {self.machine})"
