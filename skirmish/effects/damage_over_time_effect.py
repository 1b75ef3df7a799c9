"""
Damage over time module for the combat core.

Computes how much a bleeding, poisoned or burning effect hurts its owner on
each round tick.
"""

from skirmish.core.constants import MINIMUM_DAMAGE, StatusKind

from .base_effect import StatusEffect


def calculate_tick_damage(effect: StatusEffect, max_health: int) -> int:
    """
    Calculates the damage a status effect deals on one tick.

    Poison deals its magnitude flat, burning deals one and a half times its
    magnitude, bleeding deals a percentage of maximum health (at least 1).
    Kinds that do not hurt return 0.

    Args:
        effect (StatusEffect):
            The ticking effect.
        max_health (int):
            The owner's maximum health.

    Returns:
        int:
            The damage to apply, ignoring armor and defensive stance.

    """
    if effect.is_kind(StatusKind.POISONED):
        return effect.magnitude
    if effect.is_kind(StatusKind.BURNING):
        return effect.magnitude * 3 // 2
    if effect.is_kind(StatusKind.BLEEDING):
        return max(MINIMUM_DAMAGE, max_health * effect.magnitude // 100)
    return 0
