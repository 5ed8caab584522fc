"""
Global constants for Maze Race
"""

import math

# World settings
CELL_SIZE = 40
PLAYER_RADIUS = 10
COLLISION_MARGIN = PLAYER_RADIUS + 2  # Footprint half-size used by collision checks
FPS = 60

# Grid occupancy
FLOOR = 0
WALL = 1

# Carve directions (two cells per step, intermediate cell cleared)
CARVE_DIRS = [
    (0, -2),
    (0, 2),
    (-2, 0),
    (2, 0),
]

# 4-directional neighbours for path search
DIRS4 = [
    (0, 1),
    (1, 0),
    (0, -1),
    (-1, 0),
]

MIN_CARVE_CELLS = 2  # Carve grid must be at least 2x2
TRAP_DENSITY = 0.05
TRAP_PLACEMENT_ATTEMPTS = 100
SAFE_ZONE_ATTEMPTS = 1000

# Tick domains (seconds)
GAME_TICK = 0.1
MOTION_TICK = 0.016
AI_TICK = 0.05

# Phase / state clocks (seconds)
PHASE_DURATION = 300
SHOP_DURATION = 30
DISTRACTOR_DURATION = 120  # 2 minutes
PRACTICE_DURATION = 30
TRAP_CYCLE_TIME = 8
WIPE_CYCLE_TIME = 10
RESPAWN_DELAY = 1.0
SHOP_CONFIRM_DELAY = 0.5
SAFE_ZONE_REVEAL_TIME = 10.0
HEARTBEAT_INTERVAL = 1.0

MAX_PHASE = 3

# Game states
STATE_LOBBY = 'lobby'
STATE_TUTORIAL = 'tutorial'
STATE_PRACTICE = 'practice'
STATE_PLAYING = 'playing'
STATE_SHOP = 'shop'
STATE_DISTRACTOR = 'distractor'
STATE_WON = 'won'
STATE_LOST = 'lost'
STATE_RESPAWNING = 'respawning'
STATE_GAMEOVER = 'gameover'

# Tutorial steps
TUTORIAL_INTRO = 'intro'
TUTORIAL_EXAMPLE = 'example'
TUTORIAL_PHASE2 = 'phase2'
TUTORIAL_PHASE3 = 'phase3'

# Trap states
TRAP_SAFE = 'safe'
TRAP_WARNING = 'warning'
TRAP_COLLAPSED = 'collapsed'

# Phase-2 freeze flavors
FREEZE_YELLOW = 'yellow'
FREEZE_RED = 'red'

# Relative turns
TURN_FORWARD = 'forward'
TURN_BACK = 'back'
TURN_LEFT = 'left'
TURN_RIGHT = 'right'

TURN_OFFSETS = {
    TURN_FORWARD: 0.0,
    TURN_BACK: math.pi,
    TURN_LEFT: -math.pi / 2,
    TURN_RIGHT: math.pi / 2,
}

# Movement
PLAYER_BASE_SPEED = 4  # World units per motion tick
PLAYER_SPEED_SCALING = 0.05
HEADING_LERP = 0.15
HEADING_SNAP_EPSILON = 0.01

# Pursuer
PURSUER_ID = 'AI-GHOST'
PURSUER_COLOR = '#ef4444'
PURSUER_BASE_SPEED = 0.8
PURSUER_PHASE_SPEED = 0.3
PURSUER_DIFFICULTY_SPEED = 0.2
PURSUER_CATCH_DISTANCE = 10
PURSUER_WIPE_SLOWDOWN = 0.2
PURSUER_WIPE_WARNING = 5

# Player defaults
PLAYER_COLOR = '#10b981'
DEFAULT_ROOM_ID = 'global-race'

# Difficulty
DIFFICULTY_START = 1
DIFFICULTY_MAX = 10
MAZE_BASE_SIZE = 12
MAZE_SIZE_SCALING = 1.5

# Scoring
COIN_REWARD_NUMERATOR = 30
COIN_REWARD_MIN = 1
COIN_REWARD_MAX = 5
FAST_WIN_THRESHOLD = 20
FAST_WIN_BONUS = 1.0
SLOW_WIN_BONUS = 0.5

# Ambience layers
AMBIENCE_LAYERS = 4
PHASE_MAZE_THRESHOLDS = {1: 4, 2: 2, 3: 1}

# Results export
RESULTS_DIR = "results"
RESULTS_HEADERS = [
    'SubjectID', 'FinalPhase', 'FinalCoins', 'FinalDifficulty',
    'TotalTime', 'Shop1Latency', 'Shop2Latency', 'Timestamp'
]
