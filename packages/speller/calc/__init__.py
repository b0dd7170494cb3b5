"""
Calculation utilities - pure damage, block and heal formulas.
"""

from .damage import (
    scale_value,
    calculate_damage,
    apply_block,
    lifesteal_heal,
    percent_of,
    # Constants
    WEAK_MULT,
    VULN_MULT,
    HINT_MULT,
    REVIEW_MULT,
)
