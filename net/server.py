"""
Maze Race - WebSocket relay server
Runs the room relay; every connection is a client session.
"""

import asyncio
import functools
import socket

import websockets
from websockets.exceptions import ConnectionClosed

from config import GAME_TITLE, GAME_VERSION, SERVER_HOST, SERVER_PORT
from net.relay import RoomRelay


async def handle_client(websocket, relay):
    """Handle a single client connection."""
    try:
        async for message in websocket:
            await relay.handle_message(websocket, message)
    except ConnectionClosed:
        pass
    finally:
        await relay.disconnect(websocket)


def get_local_ip():
    """Get the local IP address for LAN play."""
    try:
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        s.connect(("8.8.8.8", 80))
        ip = s.getsockname()[0]
        s.close()
        return ip
    except OSError:
        return "unknown"


async def main(host=SERVER_HOST, port=SERVER_PORT):
    """Start the relay server."""
    relay = RoomRelay()
    local_ip = get_local_ip()

    print("=" * 50)
    print(f"  {GAME_TITLE.upper()} - Relay Server v{GAME_VERSION}")
    print("=" * 50)
    print(f"  Local:  ws://localhost:{port}")
    print(f"  LAN:    ws://{local_ip}:{port}")
    print("=" * 50)
    print("\n  Press Ctrl+C to stop the server\n")

    handler = functools.partial(handle_client, relay=relay)
    async with websockets.serve(handler, host, port):
        await asyncio.Future()  # Run forever


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nServer stopped.")


if __name__ == "__main__":
    run()
