"""
State module - map RNG, combat state and run state.
"""

from .rng import SeededRandom
from .combat import (
    EntityStatus, Player, Enemy, CombatStats, CombatState,
    PendingAction, PendingActionType, STARTING_MAX_HP, STARTING_MAX_ENERGY,
)
from .run import RunState, GamePhase
