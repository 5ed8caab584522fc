"""
Runtime configuration for the client and the relay server
Values can be overridden through environment variables.
"""

import os

from utils.constants import DEFAULT_ROOM_ID, RESULTS_DIR as DEFAULT_RESULTS_DIR

GAME_TITLE = "Maze Race"
GAME_VERSION = "1.0.0"

SERVER_HOST = os.environ.get("MAZE_RACE_HOST", "0.0.0.0")
SERVER_PORT = int(os.environ.get("MAZE_RACE_PORT", "8765"))
SERVER_URL = os.environ.get("MAZE_RACE_URL", f"ws://localhost:{SERVER_PORT}")

ROOM_ID = os.environ.get("MAZE_RACE_ROOM", DEFAULT_ROOM_ID)
RESULTS_DIR = os.environ.get("MAZE_RACE_RESULTS", DEFAULT_RESULTS_DIR)

# Seconds before a slow client is dropped
SEND_TIMEOUT = 0.5
RECONNECT_DELAY = 2.0

WINDOW_WIDTH = 480
WINDOW_HEIGHT = 120
