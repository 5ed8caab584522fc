"""
Maze Race - client runner
Drives a GameSession from a pygame loop with fixed-step tick domains
"""

import argparse
import json
import sys

import pygame

from game.audio import PygameAudio, SurveyToken, GENRES
from game.controls import HeldKeys
from game.game_state import GameState
from game.host_bridge import PrintHost, SKIP_PHASE
from game.save_manager import SaveManager
from game.session import GameSession
from net.client import RelayClient
from utils.constants import FPS, GAME_TICK, MOTION_TICK, AI_TICK
from utils.colors import (
    COLOR_BG, COLOR_TEXT, COLOR_TEXT_DIM, COLOR_TEXT_ALERT, COLOR_TEXT_WIN, hex_to_rgb
)
from utils.helpers import format_time
from config import (
    GAME_TITLE, GAME_VERSION, SERVER_URL, ROOM_ID, RESULTS_DIR,
    WINDOW_WIDTH, WINDOW_HEIGHT
)

# Longest frame fed to the accumulators
MAX_FRAME_TIME = 0.25

class MazeRace:
    """
    Main client class
    """
    def __init__(self, subject_id, relay=None, survey=None):
        pygame.init()

        self.subject_id = subject_id
        self.survey = survey
        self.relay = relay
        self.session = GameSession(
            audio=PygameAudio(),
            host=PrintHost(),
            relay=relay,
            save_manager=SaveManager(RESULTS_DIR),
            room_id=ROOM_ID,
        )

        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        self.font = pygame.font.Font(None, 24)
        self.clock = pygame.time.Clock()
        self.running = True

        self.keys = HeldKeys()
        self.game_accum = 0.0
        self.motion_accum = 0.0
        self.ai_accum = 0.0

    # ========== INPUT ==========

    def handle_events(self):
        """Handle input events"""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
                return

            if event.type == pygame.KEYDOWN:
                self._handle_keydown(event.key)
            elif event.type == pygame.KEYUP:
                self.keys.release(event.key)

    def _handle_keydown(self, key):
        """Handle key press based on current state"""
        session = self.session
        state = session.state

        if key == pygame.K_ESCAPE:
            self.running = False
            return

        mods = pygame.key.get_mods()
        if key == pygame.K_s and mods & pygame.KMOD_CTRL and mods & pygame.KMOD_SHIFT:
            print("DEBUG: Skipping current timer...")
            session.handle_host_command({'type': SKIP_PHASE})
            return

        if state == GameState.LOBBY:
            if key == pygame.K_RETURN:
                session.start(self.subject_id, self.survey)

        elif state == GameState.TUTORIAL:
            if key in (pygame.K_RETURN, pygame.K_SPACE):
                session.acknowledge_tutorial()

        elif state in (GameState.PLAYING, GameState.PRACTICE):
            direction = self.keys.press(key)
            if direction is not None:
                session.press(direction)

        elif state == GameState.RESPAWNING:
            # Held through the respawn, turned on the next press
            self.keys.press(key)

        elif state == GameState.SHOP:
            if key == pygame.K_1:
                session.shop_buy()
            elif key == pygame.K_2:
                session.shop_gamble()

        elif state in (GameState.WON, GameState.LOST):
            if key == pygame.K_RETURN:
                session.next_iteration()

    # ========== UPDATE ==========

    def update(self, dt):
        """Advance every tick domain by the elapsed frame time"""
        dt = min(dt, MAX_FRAME_TIME)

        if self.relay is not None:
            for message in self.relay.poll():
                self.session.apply_relay_message(message)

        self.keys.follow_state(self.session.state)

        self.motion_accum += dt
        while self.motion_accum >= MOTION_TICK:
            self.motion_accum -= MOTION_TICK
            self.session.motion_tick(self.keys.moving)

        self.ai_accum += dt
        while self.ai_accum >= AI_TICK:
            self.ai_accum -= AI_TICK
            self.session.ai_tick()

        self.game_accum += dt
        while self.game_accum >= GAME_TICK:
            self.game_accum -= GAME_TICK
            self.session.game_tick(GAME_TICK)

    # ========== RENDER ==========

    def status_lines(self):
        machine = self.session.machine
        clock = machine.active_clock()
        remaining = format_time(clock.remaining) if clock is not None else "--:--"
        lines = [
            f"{machine.get_state_name().upper()}  phase {machine.phase}  timer {remaining}",
            f"coins {machine.coins}  difficulty {machine.difficulty:g}  race {machine.race_time:.1f}s",
        ]
        level = self.session.level
        if level is not None and level.remote_players:
            lines[1] += f"  rivals {len(level.remote_players)}"
        if machine.current_state == GameState.SHOP:
            lines.append("1: buy (2 coins)   2: double or nothing")
        elif machine.current_state == GameState.TUTORIAL:
            lines.append(f"tutorial: {machine.tutorial_step} - press ENTER")
        elif machine.current_state in (GameState.WON, GameState.LOST):
            lines.append("press ENTER for the next maze")
        return lines

    def headline_color(self):
        state = self.session.state
        if state in (GameState.LOST, GameState.RESPAWNING):
            return COLOR_TEXT_ALERT
        if state == GameState.WON:
            return COLOR_TEXT_WIN
        return COLOR_TEXT

    def render(self):
        self.screen.fill(COLOR_BG)
        for i, line in enumerate(self.status_lines()):
            color = self.headline_color() if i == 0 else COLOR_TEXT_DIM
            self.screen.blit(self.font.render(line, True, color), (12, 12 + i * 28))
        pygame.draw.circle(self.screen, hex_to_rgb(self.session.color), (WINDOW_WIDTH - 20, 20), 8)
        pygame.display.set_caption(f"{GAME_TITLE} v{GAME_VERSION} - {self.session.machine.get_state_name()}")
        pygame.display.flip()

    def run(self):
        """Main game loop"""
        while self.running:
            dt_ms = self.clock.tick(FPS)
            dt = dt_ms / 1000.0

            self.handle_events()
            self.update(dt)
            self.render()

        if self.relay is not None:
            self.relay.stop()
        pygame.quit()
        sys.exit()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=f"{GAME_TITLE} client")
    parser.add_argument("--subject", default="anonymous", help="Subject identity recorded in the results")
    parser.add_argument("--server", default=SERVER_URL, help="Relay server URL")
    parser.add_argument("--offline", action="store_true", help="Play without the relay server")
    parser.add_argument("--best", choices=GENRES, help="Best-ranked genre from the survey")
    parser.add_argument("--worst", choices=GENRES, help="Worst-ranked genre from the survey")
    parser.add_argument("--neutral", choices=GENRES, help="Neutral genre from the survey")
    parser.add_argument("--survey", metavar="FILE", help="Survey answers as JSON with 'rankings' and 'ratings'")
    return parser.parse_args(argv)


def load_survey(path):
    """
    Build the survey token from a saved survey

    Returns:
        SurveyToken or None if the file could not be used
    """
    try:
        with open(path, 'r') as f:
            answers = json.load(f)
        return SurveyToken.from_survey(answers['rankings'], answers['ratings'])
    except (OSError, ValueError, KeyError, TypeError) as e:
        print(f"Survey ignored: {e}")
        return None


def main():
    """Entry point"""
    args = parse_args()

    survey = None
    if args.survey:
        survey = load_survey(args.survey)
    elif args.best and args.worst and args.neutral:
        survey = SurveyToken(args.best, args.worst, args.neutral)

    relay = None
    if not args.offline:
        relay = RelayClient(args.server)
        relay.start()

    game = MazeRace(args.subject, relay=relay, survey=survey)
    game.run()


if __name__ == "__main__":
    main()
