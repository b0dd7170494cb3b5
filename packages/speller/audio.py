"""
Audio boundary.

The game only announces what should be heard; a sink decides how. Game
code talks to a ``SafeAudio`` wrapper, so a failing sink (no speech engine,
no sound device) is logged and never interrupts play.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


class Sfx(Enum):
    ATTACK = "attack"
    BLOCK = "block"
    BUFF = "buff"
    CLICK = "click"
    ERROR = "error"
    SUCCESS = "success"
    PURCHASE = "purchase"
    DRAW = "draw"
    GOLD = "gold"
    VICTORY = "victory"


class Bgm(Enum):
    MENU = "MENU"
    MAP = "MAP"
    BATTLE = "BATTLE"
    ELITE = "ELITE"
    BOSS = "BOSS"
    SHOP = "SHOP"
    MEDITATION = "MEDITATION"
    GAME_OVER = "GAME_OVER"


class AudioSink:
    """Base sink: every call is a no-op."""

    def speak_word(self, word: str) -> None:
        pass

    def play_sfx(self, kind: Sfx) -> None:
        pass

    def play_bgm(self, track: Bgm) -> None:
        pass

    def stop_bgm(self) -> None:
        pass


class NullAudio(AudioSink):
    """Silent sink for headless runs."""


class RecordingAudio(AudioSink):
    """Collects calls as ``(method, argument)`` tuples."""

    def __init__(self):
        self.calls: List[Tuple[str, Optional[str]]] = []

    def speak_word(self, word: str) -> None:
        self.calls.append(("speak_word", word))

    def play_sfx(self, kind: Sfx) -> None:
        self.calls.append(("play_sfx", kind.value))

    def play_bgm(self, track: Bgm) -> None:
        self.calls.append(("play_bgm", track.value))

    def stop_bgm(self) -> None:
        self.calls.append(("stop_bgm", None))

    def sfx(self) -> List[str]:
        return [arg for name, arg in self.calls if name == "play_sfx"]


class SafeAudio(AudioSink):
    """Forwards to another sink and logs instead of raising."""

    def __init__(self, sink: Optional[AudioSink] = None):
        self.sink = sink or NullAudio()

    def _call(self, method: str, *args) -> None:
        try:
            getattr(self.sink, method)(*args)
        except Exception:
            logger.warning("Audio sink failed in %s", method, exc_info=True)

    def speak_word(self, word: str) -> None:
        self._call("speak_word", word)

    def play_sfx(self, kind: Sfx) -> None:
        self._call("play_sfx", kind)

    def play_bgm(self, track: Bgm) -> None:
        self._call("play_bgm", track)

    def stop_bgm(self) -> None:
        self._call("stop_bgm")
