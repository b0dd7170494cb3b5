"""
Damage Calculator - pure functions for attack, block and heal numbers.

Outgoing card damage (player -> enemy):
1. Base value scaled by the cast multiplier (hint 0.5x, review 2x), floored
2. Flat add: attacker Strength
3. Attacker Weak: x0.75, floored
4. Defender Vulnerable: x1.5, floored

Incoming intent damage (enemy -> player) uses the same order with the
enemy's Strength and Weak and the player's Vulnerable. Memory Shield and
block are applied afterwards by ``apply_block`` / the combat engine.
"""

from __future__ import annotations

import math
from typing import Tuple

__all__ = [
    "scale_value",
    "calculate_damage",
    "apply_block",
    "lifesteal_heal",
    "percent_of",
    "WEAK_MULT",
    "VULN_MULT",
    "HINT_MULT",
    "REVIEW_MULT",
    "LIFESTEAL_RATIO",
]


# =============================================================================
# CONSTANTS
# =============================================================================

# Weak - reduces damage dealt by 25%
WEAK_MULT = 0.75

# Vulnerable - increases damage received by 50%
VULN_MULT = 1.50

# Cast multipliers
HINT_MULT = 0.5
REVIEW_MULT = 2.0

LIFESTEAL_RATIO = 0.5


def scale_value(value: int, multiplier: float) -> int:
    """Card value after the cast multiplier, floored."""
    return math.floor(value * multiplier)


def calculate_damage(base: int, strength: int = 0, weak: bool = False, vuln: bool = False) -> int:
    """
    Final damage of one hit before block.

    Each multiplier floors on its own, so Weak and Vulnerable together are
    not the same as a single x1.125.
    """
    damage = base + strength
    if weak:
        damage = math.floor(damage * WEAK_MULT)
    if vuln:
        damage = math.floor(damage * VULN_MULT)
    return max(0, damage)


def apply_block(damage: int, block: int) -> Tuple[int, int]:
    """
    Subtract block from a hit.

    Returns (hp_damage, remaining_block).
    """
    absorbed = min(damage, block)
    return max(0, damage - block), block - absorbed


def lifesteal_heal(dealt: int) -> int:
    """Lifesteal bonus heal, rounded up."""
    return math.ceil(dealt * LIFESTEAL_RATIO)


def percent_of(total: int, ratio: float) -> int:
    """``floor(total * ratio)`` for HP percentages."""
    return math.floor(total * ratio)
