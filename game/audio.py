"""
Audio collaborators - cue, ambience and layer requests issued by the session
"""

import os

import pygame

GENRES = ['Rap', 'Country', 'Rock', 'Classical', 'Pop', 'EDM']

CUES = ('move', 'trap', 'win', 'calm')

SURVEY_MEDIAN_RATING = 3


class SurveyToken:
    """
    Best, worst and neutral genre derived from a music survey
    """
    def __init__(self, best, worst, neutral):
        for genre in (best, worst, neutral):
            if genre not in GENRES:
                raise ValueError(f"Unknown genre: {genre}")
        self.best = best
        self.worst = worst
        self.neutral = neutral

    @classmethod
    def from_survey(cls, rankings, ratings):
        """
        Build a token from survey answers

        Args:
            rankings: genre -> rank (1 is best)
            ratings: genre -> 1..5 rating

        Returns:
            SurveyToken
        """
        ordered = sorted(GENRES, key=lambda g: rankings[g])
        neutral = GENRES[0]
        for genre in GENRES[1:]:
            if abs(ratings[genre] - SURVEY_MEDIAN_RATING) < abs(ratings[neutral] - SURVEY_MEDIAN_RATING):
                neutral = genre
        return cls(ordered[0], ordered[-1], neutral)

    def choices(self):
        return [self.best, self.worst, self.neutral]

    def to_dict(self):
        return {"best": self.best, "worst": self.worst, "neutral": self.neutral}

    def __repr__(self):
        return f"SurveyToken(best={self.best}, worst={self.worst}, neutral={self.neutral})"


class AudioCues:
    """
    Base audio collaborator. Subclasses route the requests to a real mixer.
    """
    def play_cue(self, name):
        raise NotImplementedError

    def set_ambience(self, genre, tutorial=False):
        raise NotImplementedError

    def set_layers(self, active, flow=False):
        raise NotImplementedError

    def handle_event(self, event):
        """Dispatch a state machine event to the matching request"""
        kind = event['event']
        if kind == 'cue':
            self.play_cue(event['name'])
        elif kind == 'ambience':
            self.set_ambience(event['genre'], event['tutorial'])
        elif kind == 'layers':
            self.set_layers(event['active'], event['flow'])


class SilentAudio(AudioCues):
    """Audio collaborator that only remembers what it was asked to play"""
    def __init__(self):
        self.cues = []
        self.genre = None
        self.tutorial = True
        self.layers = 0
        self.flow = False

    def play_cue(self, name):
        self.cues.append(name)

    def set_ambience(self, genre, tutorial=False):
        self.genre = genre
        self.tutorial = tutorial
        self.layers = 0
        self.flow = False

    def set_layers(self, active, flow=False):
        self.layers = active
        self.flow = self.flow or flow


class PygameAudio(AudioCues):
    """
    Plays cues and ambience loops through pygame.mixer

    Missing sound files are skipped so the game runs without assets.
    """
    def __init__(self, sound_dir="sounds"):
        self.sound_dir = sound_dir
        self.sounds = {}
        self.enabled = True
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
        except pygame.error as e:
            print(f"Audio disabled: {e}")
            self.enabled = False

    def _path(self, name, ext):
        return os.path.join(self.sound_dir, f"{name.lower()}.{ext}")

    def _load(self, name):
        if name not in self.sounds:
            path = self._path(name, "wav")
            self.sounds[name] = pygame.mixer.Sound(path) if os.path.exists(path) else None
        return self.sounds[name]

    def play_cue(self, name):
        if not self.enabled:
            return
        sound = self._load(name)
        if sound is not None:
            sound.play()

    def set_ambience(self, genre, tutorial=False):
        if not self.enabled:
            return
        pygame.mixer.music.stop()
        if tutorial or genre is None:
            return
        path = self._path(genre, "ogg")
        if os.path.exists(path):
            pygame.mixer.music.load(path)
            pygame.mixer.music.set_volume(0.25)
            pygame.mixer.music.play(-1)

    def set_layers(self, active, flow=False):
        if not self.enabled:
            return
        # Each active layer raises the loop volume one step
        volume = 1.0 if flow else min(1.0, 0.25 * (active + 1))
        pygame.mixer.music.set_volume(volume)
