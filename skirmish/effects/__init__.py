"""
Effects system module for the combat core.

Timed status effects (bleeding, stunned, poisoned, burning, buffed, debuffed,
defending and content-defined kinds), their application policy and their round tick.
"""

from .base_effect import StatusEffect, normalize_kind
from .damage_over_time_effect import calculate_tick_damage
from .effect_manager import (
    StatusTick,
    apply_status_effect,
    clear_turn_scoped_effects,
    damage_bonus_percent,
    damage_reduction_percent,
    debuff_penalty_percent,
    get_status,
    has_status,
    is_stunned,
    scale_by_percent,
    tick_status_effects,
)

__all__ = [
    "StatusEffect",
    "StatusTick",
    "normalize_kind",
    "calculate_tick_damage",
    "apply_status_effect",
    "clear_turn_scoped_effects",
    "damage_bonus_percent",
    "damage_reduction_percent",
    "debuff_penalty_percent",
    "get_status",
    "has_status",
    "is_stunned",
    "scale_by_percent",
    "tick_status_effects",
]
