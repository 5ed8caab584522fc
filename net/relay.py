"""
Room Relay - room-scoped fan-out of joins, positions and wins

The relay never simulates anything. It keeps a roster per room and forwards
messages between the connections that joined that room.
"""

import asyncio
import json

from websockets.exceptions import ConnectionClosed

from config import SEND_TIMEOUT

JOIN_ROOM = 'JOIN_ROOM'
UPDATE_POSITION = 'UPDATE_POSITION'
WIN = 'WIN'

PLAYER_JOINED = 'PLAYER_JOINED'
STATE_UPDATE = 'STATE_UPDATE'
PLAYER_LEFT = 'PLAYER_LEFT'
GAME_OVER = 'GAME_OVER'


def _number(value, default=0.0):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value


class Room:
    """
    A named group of players sharing one maze
    """
    def __init__(self, room_id, maze=None):
        self.id = room_id
        self.maze = maze
        self.players = {}
        self.connections = {}
        self.lock = asyncio.Lock()

    def is_empty(self):
        return not self.players

    def members(self, exclude=None):
        return [conn for conn in self.connections if conn is not exclude]

    def __repr__(self):
        return f"Room(id={self.id}, players={list(self.players)})"


class RoomRelay:
    """
    Tracks connection -> (room, player) and broadcasts inside rooms only
    """
    def __init__(self, send_timeout=SEND_TIMEOUT):
        self.rooms = {}
        self.memberships = {}
        self.send_timeout = send_timeout

    async def handle_message(self, conn, raw):
        """
        Apply one raw text frame from a connection

        Returns:
            True if the message was applied, False if it was ignored
        """
        try:
            data = json.loads(raw)
        except (ValueError, TypeError, RecursionError):
            return False
        if not isinstance(data, dict):
            return False

        kind = data.get('type')
        if kind == JOIN_ROOM:
            room_id = data.get('roomId')
            player_id = data.get('playerId')
            if not isinstance(room_id, str) or not isinstance(player_id, str):
                return False
            await self.join(conn, room_id, player_id,
                            _number(data.get('x')), _number(data.get('y')),
                            data.get('color'), data.get('maze'))
            return True
        if kind == UPDATE_POSITION:
            return await self.update_position(conn, data.get('x'), data.get('y'), data.get('angle'))
        if kind == WIN:
            return await self.win(conn, _number(data.get('time')))
        return False

    async def join(self, conn, room_id, player_id, x, y, color=None, maze=None):
        """Add a player to a room, creating it on first join"""
        if conn in self.memberships:
            await self.disconnect(conn)

        while True:
            room = self.rooms.get(room_id)
            if room is None:
                room = Room(room_id)
                self.rooms[room_id] = room

            async with room.lock:
                # Room was destroyed while waiting for the lock
                if self.rooms.get(room_id) is not room:
                    continue

                for other, pid in list(room.connections.items()):
                    if pid == player_id:
                        del room.connections[other]
                        self.memberships.pop(other, None)

                room.players[player_id] = {
                    'id': player_id,
                    'x': x,
                    'y': y,
                    'angle': 0,
                    'color': color,
                }
                room.connections[conn] = player_id
                self.memberships[conn] = (room_id, player_id)
                if room.maze is None and maze is not None:
                    room.maze = maze

                message = {
                    'type': PLAYER_JOINED,
                    'players': {pid: dict(entry) for pid, entry in room.players.items()},
                    'maze': room.maze,
                }
                targets = room.members()
                break

        print(f"Player {player_id} joined room {room_id} ({len(targets)} in room)")
        await self._broadcast(targets, message)
        return room

    async def update_position(self, conn, x, y, angle):
        """Update the sender's entry and forward it to the rest of the room"""
        room, player_id = self._membership(conn)
        if room is None:
            return False

        async with room.lock:
            entry = room.players.get(player_id)
            if entry is None:
                return False
            entry['x'] = _number(x, entry['x'])
            entry['y'] = _number(y, entry['y'])
            entry['angle'] = _number(angle, entry['angle'])

            message = {'type': STATE_UPDATE, 'players': {player_id: dict(entry)}}
            targets = room.members(exclude=conn)

        await self._broadcast(targets, message)
        return True

    async def win(self, conn, time):
        """Announce the sender as winner to the whole room"""
        room, player_id = self._membership(conn)
        if room is None:
            return False

        async with room.lock:
            # The race on this maze is over; the next joiner's maze replaces it
            room.maze = None
            targets = room.members()

        await self._broadcast(targets, {'type': GAME_OVER, 'winnerId': player_id, 'time': time})
        return True

    async def disconnect(self, conn):
        """
        Remove a connection from its room

        Returns:
            True if the connection was in a room
        """
        membership = self.memberships.pop(conn, None)
        if membership is None:
            return False
        room_id, player_id = membership

        room = self.rooms.get(room_id)
        if room is None:
            return True

        async with room.lock:
            room.connections.pop(conn, None)
            room.players.pop(player_id, None)
            if room.is_empty():
                if self.rooms.get(room_id) is room:
                    del self.rooms[room_id]
                targets = []
            else:
                targets = room.members()

        print(f"Player {player_id} left room {room_id}")
        if targets:
            await self._broadcast(targets, {'type': PLAYER_LEFT, 'playerId': player_id})
        return True

    def _membership(self, conn):
        membership = self.memberships.get(conn)
        if membership is None:
            return None, None
        room_id, player_id = membership
        return self.rooms.get(room_id), player_id

    async def _broadcast(self, targets, message):
        payload = json.dumps(message)
        dropped = []

        for conn in targets:
            try:
                await asyncio.wait_for(conn.send(payload), timeout=self.send_timeout)
            except asyncio.TimeoutError:
                print(f"Send timeout for {self._describe(conn)} in room {self.room_of(conn)} - dropping connection")
                dropped.append(conn)
            except ConnectionClosed:
                dropped.append(conn)

        for conn in dropped:
            await self.disconnect(conn)

    def _describe(self, conn):
        membership = self.memberships.get(conn)
        return membership[1] if membership else "unknown"

    def room_of(self, conn):
        """Room id a connection belongs to, or None"""
        membership = self.memberships.get(conn)
        return membership[0] if membership else None

    def __repr__(self):
        return f"RoomRelay(rooms={list(self.rooms)}, connections={len(self.memberships)})"
