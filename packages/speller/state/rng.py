"""
Seeded linear congruential generator used for map generation.

The map of every act must be rebuilt identically from the stored seed when a
run is loaded, so map generation never touches the platform RNG. The stream
is the classic "9301/49297/233280" LCG:

    seed = (seed * 9301 + 49297) % 233280
    value = seed / 233280

Each generator is an explicit object; there is no module-level seed.
Everything else in the game (loot, enemy picks, reshuffles) uses ordinary
``random.Random`` instances and is not replayable from the map seed.
"""

from __future__ import annotations

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


class SeededRandom:
    """
    Deterministic float stream in [0, 1).

    The internal state is a plain Python int, so huge seeds (millisecond
    timestamps) are handled exactly.
    """

    def __init__(self, seed: int):
        self.initial_seed = int(seed)
        self.state = int(seed)
        self.counter = 0

    def next(self) -> float:
        """Advance the stream and return the next value in [0, 1)."""
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        self.counter += 1
        return self.state / LCG_MODULUS

    def randint_below(self, bound: int) -> int:
        """Integer in [0, bound), i.e. ``floor(next() * bound)``."""
        return int(self.next() * bound)

    def copy(self) -> "SeededRandom":
        """Clone with identical state and counter."""
        clone = SeededRandom(self.initial_seed)
        clone.state = self.state
        clone.counter = self.counter
        return clone

    def __repr__(self) -> str:
        return f"SeededRandom(seed={self.initial_seed}, counter={self.counter})"
