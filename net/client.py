"""
Relay Client - websockets connection running on a background thread

The game loop never awaits anything. send() hands a message to the network
thread and poll() drains whatever arrived since the last frame.
"""

import asyncio
import json
import queue
import threading

import websockets
from websockets.exceptions import WebSocketException

from config import SERVER_URL, RECONNECT_DELAY


class RelayClient:
    """
    Fire-and-forget relay connection with automatic reconnect
    """
    def __init__(self, url=SERVER_URL, reconnect_delay=RECONNECT_DELAY):
        self.url = url
        self.reconnect_delay = reconnect_delay

        self.inbox = queue.Queue()
        self.outgoing = None
        self.loop = None
        self.thread = None
        self.running = False
        self.connected = threading.Event()
        self.last_join = None

    def start(self):
        """Start the network thread"""
        if self.running:
            return
        self.running = True
        self.thread = threading.Thread(target=self._run, name="relay-client", daemon=True)
        self.thread.start()

    def stop(self, timeout=1.0):
        self.running = False
        loop = self.loop
        if loop is not None and self.outgoing is not None:
            try:
                loop.call_soon_threadsafe(self.outgoing.put_nowait, None)
            except RuntimeError:
                # Network thread already closed its loop
                pass
        if self.thread is not None:
            self.thread.join(timeout)

    def send(self, message):
        """
        Queue a message for the server

        Returns:
            True if the message was handed to the network thread
        """
        if message.get('type') == 'JOIN_ROOM':
            self.last_join = message

        loop = self.loop
        if not self.running or loop is None or self.outgoing is None:
            return False
        try:
            loop.call_soon_threadsafe(self.outgoing.put_nowait, message)
        except RuntimeError:
            return False
        return True

    def poll(self):
        """Drain received messages without blocking"""
        messages = []
        while True:
            try:
                messages.append(self.inbox.get_nowait())
            except queue.Empty:
                return messages

    # ========== NETWORK THREAD ==========

    def _run(self):
        asyncio.run(self._main())

    async def _main(self):
        self.loop = asyncio.get_running_loop()
        self.outgoing = asyncio.Queue()

        while self.running:
            try:
                async with websockets.connect(self.url) as ws:
                    self.connected.set()
                    print(f"Connected to relay {self.url}")
                    if self.last_join is not None:
                        await ws.send(json.dumps(self.last_join))
                    await self._pump(ws)
            except (OSError, asyncio.TimeoutError, WebSocketException) as e:
                print(f"Relay connection lost: {e!r}")
            finally:
                self.connected.clear()

            if self.running:
                await asyncio.sleep(self.reconnect_delay)

    async def _pump(self, ws):
        sender = asyncio.create_task(self._send_loop(ws))
        receiver = asyncio.create_task(self._receive_loop(ws))
        done, pending = await asyncio.wait({sender, receiver}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        for task in done:
            task.result()

    async def _send_loop(self, ws):
        while True:
            message = await self.outgoing.get()
            if message is None:
                return
            await ws.send(json.dumps(message))

    async def _receive_loop(self, ws):
        async for raw in ws:
            try:
                data = json.loads(raw)
            except (ValueError, RecursionError):
                continue
            if isinstance(data, dict):
                self.inbox.put(data)
