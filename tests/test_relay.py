"""Room relay tests with in-memory connections"""

import asyncio
import json

from maze.generator import generate_maze
from net.relay import RoomRelay
from utils.constants import CELL_SIZE
from utils.helpers import cell_center


def join_message(room_id, player_id, x=20.0, y=20.0, maze=None):
    return json.dumps({
        'type': 'JOIN_ROOM',
        'roomId': room_id,
        'playerId': player_id,
        'maze': maze,
        'x': x,
        'y': y,
        'color': '#10b981',
    })


def test_first_join_creates_room_with_maze(make_conn):
    async def scenario():
        relay = RoomRelay()
        conn = make_conn("p1")
        maze = generate_maze(12, 12, difficulty=1, seed=1)
        x, y = cell_center(maze.start, CELL_SIZE)

        assert await relay.handle_message(conn, join_message("r1", "p1", x, y, maze.to_dict()))
        return relay, conn

    relay, conn = asyncio.run(scenario())
    joined = conn.of_type('PLAYER_JOINED')
    assert len(joined) == 1
    assert joined[0]['maze']['grid']
    assert list(joined[0]['players']) == ['p1']
    assert joined[0]['players']['p1']['x'] == 20.0
    assert relay.room_of(conn) == 'r1'


def test_position_update_reaches_peers_but_not_sender(make_conn):
    async def scenario():
        relay = RoomRelay()
        p1, p2 = make_conn("p1"), make_conn("p2")
        await relay.handle_message(p1, join_message("r1", "p1", maze={'grid': [[0]]}))
        await relay.handle_message(p2, join_message("r1", "p2"))
        await relay.handle_message(p1, json.dumps({'type': 'UPDATE_POSITION', 'x': 64.0, 'y': 20.0, 'angle': 1.5}))
        return p1, p2

    p1, p2 = asyncio.run(scenario())
    updates = p2.of_type('STATE_UPDATE')
    assert len(updates) == 1
    assert updates[0]['players'] == {
        'p1': {'id': 'p1', 'x': 64.0, 'y': 20.0, 'angle': 1.5, 'color': '#10b981'}
    }
    assert p1.of_type('STATE_UPDATE') == []

    # The second joiner sees the first joiner's maze and both players
    joined = p2.of_type('PLAYER_JOINED')[-1]
    assert joined['maze'] == {'grid': [[0]]}
    assert set(joined['players']) == {'p1', 'p2'}


def test_rooms_are_isolated(make_conn):
    async def scenario():
        relay = RoomRelay()
        a, b, other = make_conn("a"), make_conn("b"), make_conn("other")
        await relay.handle_message(other, join_message("r2", "other"))
        await relay.handle_message(a, join_message("r1", "a"))
        await relay.handle_message(b, join_message("r1", "b"))
        await relay.handle_message(a, json.dumps({'type': 'UPDATE_POSITION', 'x': 1, 'y': 2, 'angle': 0}))
        await relay.handle_message(a, json.dumps({'type': 'WIN', 'time': 12.5}))
        await relay.disconnect(b)
        return a, b, other

    a, b, other = asyncio.run(scenario())
    assert [m['type'] for m in other.sent] == ['PLAYER_JOINED']
    assert list(other.sent[0]['players']) == ['other']
    assert a.of_type('GAME_OVER') == [{'type': 'GAME_OVER', 'winnerId': 'a', 'time': 12.5}]
    assert b.of_type('GAME_OVER') == [{'type': 'GAME_OVER', 'winnerId': 'a', 'time': 12.5}]
    assert a.of_type('PLAYER_LEFT') == [{'type': 'PLAYER_LEFT', 'playerId': 'b'}]


def test_last_leave_destroys_room(make_conn):
    async def scenario():
        relay = RoomRelay()
        p1, p2 = make_conn("p1"), make_conn("p2")
        await relay.handle_message(p1, join_message("r1", "p1"))
        await relay.handle_message(p2, join_message("r1", "p2"))
        assert await relay.disconnect(p1)
        assert 'r1' in relay.rooms
        assert await relay.disconnect(p2)
        assert not await relay.disconnect(p2)
        return relay, p1, p2

    relay, p1, p2 = asyncio.run(scenario())
    assert relay.rooms == {}
    assert relay.memberships == {}
    assert p2.of_type('PLAYER_LEFT') == [{'type': 'PLAYER_LEFT', 'playerId': 'p1'}]


def test_malformed_and_out_of_room_messages_are_ignored(make_conn):
    async def scenario():
        relay = RoomRelay()
        conn = make_conn("p1")
        results = [
            await relay.handle_message(conn, "not json"),
            await relay.handle_message(conn, "[1, 2, 3]"),
            await relay.handle_message(conn, json.dumps({'type': 'DANCE'})),
            await relay.handle_message(conn, json.dumps({'type': 'JOIN_ROOM', 'roomId': 5})),
            await relay.handle_message(conn, json.dumps({'type': 'UPDATE_POSITION', 'x': 1, 'y': 1})),
            await relay.handle_message(conn, json.dumps({'type': 'WIN', 'time': 3})),
            await relay.handle_message(conn, b'\x80\x81not-utf8'),
            await relay.handle_message(conn, '[' * 100000 + ']' * 100000),
        ]
        return relay, conn, results

    relay, conn, results = asyncio.run(scenario())
    assert results == [False] * 8
    assert conn.sent == []
    assert relay.rooms == {}


def test_rejoin_moves_connection_to_new_room(make_conn):
    async def scenario():
        relay = RoomRelay()
        p1, p2 = make_conn("p1"), make_conn("p2")
        await relay.handle_message(p1, join_message("r1", "p1"))
        await relay.handle_message(p2, join_message("r1", "p2"))
        await relay.handle_message(p1, join_message("r2", "p1", maze={'grid': [[1]]}))
        return relay, p1, p2

    relay, p1, p2 = asyncio.run(scenario())
    assert relay.room_of(p1) == 'r2'
    assert list(relay.rooms['r1'].players) == ['p2']
    assert relay.rooms['r2'].maze == {'grid': [[1]]}
    assert p2.of_type('PLAYER_LEFT') == [{'type': 'PLAYER_LEFT', 'playerId': 'p1'}]


def test_stalled_connection_is_dropped(make_conn, make_stalled_conn):
    async def scenario():
        relay = RoomRelay(send_timeout=0.05)
        p1, slow = make_conn("p1"), make_stalled_conn("slow")
        await relay.handle_message(p1, join_message("r1", "p1"))
        await relay.handle_message(slow, join_message("r1", "slow"))
        return relay, p1, slow

    relay, p1, slow = asyncio.run(scenario())
    assert relay.room_of(slow) is None
    assert list(relay.rooms['r1'].players) == ['p1']
    assert p1.of_type('PLAYER_LEFT') == [{'type': 'PLAYER_LEFT', 'playerId': 'slow'}]


def test_room_keeps_first_maze_until_a_win(make_conn):
    async def scenario():
        relay = RoomRelay()
        p1, p2 = make_conn("p1"), make_conn("p2")
        await relay.handle_message(p1, join_message("r1", "p1", maze={'grid': [[0]]}))
        await relay.handle_message(p2, join_message("r1", "p2", maze={'grid': [[1]]}))
        first = p2.of_type('PLAYER_JOINED')[-1]['maze']

        await relay.handle_message(p1, json.dumps({'type': 'WIN', 'time': 9.0}))
        await relay.handle_message(p1, join_message("r1", "p1", maze={'grid': [[0, 0]]}))
        return relay, first, p2

    relay, first, p2 = asyncio.run(scenario())
    assert first == {'grid': [[0]]}
    assert relay.rooms['r1'].maze == {'grid': [[0, 0]]}
    assert p2.of_type('PLAYER_JOINED')[-1]['maze'] == {'grid': [[0, 0]]}
