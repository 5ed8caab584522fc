"""
Host bridge - fire-and-forget messages to the page that embeds the game
"""

import json

MAZE_COMPLETE = 'MAZE_COMPLETE'
MAZE_METRICS = 'MAZE_METRICS'
MAZE_HEARTBEAT = 'MAZE_HEARTBEAT'
MAZE_WIN = 'MAZE_WIN'
MAZE_LOSS = 'MAZE_LOSS'

SKIP_PHASE = 'SKIP_PHASE'
GET_METRICS = 'GET_METRICS'
HOST_COMMANDS = (SKIP_PHASE, GET_METRICS)

# Envelopes the embedding pages wrap commands in
COMMAND_ENVELOPES = ('RENPY_COMMAND', 'QUALTRICS_COMMAND')


def parse_command(raw):
    """
    Extract a host command type from a raw message

    Accepts {'type': 'SKIP_PHASE'} as well as the page envelope
    {'type': 'RENPY_COMMAND', 'payload': 'SKIP_PHASE'}.

    Args:
        raw: dict or JSON text

    Returns:
        Command type string, or None if the message is not a known command
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except (ValueError, RecursionError):
            return None
    if not isinstance(raw, dict):
        return None
    command = raw.get('type')
    if command in COMMAND_ENVELOPES:
        command = raw.get('payload')
    return command if command in HOST_COMMANDS else None


class HostBridge:
    """
    Base host bridge. post() delivers one message; delivery is never awaited.
    """
    def post(self, message_type, payload):
        raise NotImplementedError

    def maze_complete(self, summary):
        self.post(MAZE_COMPLETE, summary)

    def maze_metrics(self, metrics):
        self.post(MAZE_METRICS, metrics)

    def heartbeat(self, metrics):
        self.post(MAZE_HEARTBEAT, metrics)

    def maze_win(self, time, phase, coins):
        self.post(MAZE_WIN, {'time': time, 'phase': phase, 'coins': coins})

    def maze_loss(self, phase, time):
        self.post(MAZE_LOSS, {'phase': phase, 'time': time})


class RecordingHost(HostBridge):
    """Keeps every posted message in memory"""
    def __init__(self):
        self.messages = []

    def post(self, message_type, payload):
        self.messages.append({'type': message_type, 'payload': payload})

    def of_type(self, message_type):
        return [m['payload'] for m in self.messages if m['type'] == message_type]


class PrintHost(HostBridge):
    """Writes messages to stdout as JSON lines"""
    def __init__(self, quiet_types=(MAZE_HEARTBEAT,)):
        self.quiet_types = set(quiet_types)

    def post(self, message_type, payload):
        if message_type in self.quiet_types:
            return
        print(json.dumps({'type': message_type, 'payload': payload}, default=str))
