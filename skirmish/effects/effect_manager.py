"""
Status effect engine for the combat core.

Owns the semantics of timed effects independently of who applies them:
application policy, the once-per-round tick, expiry, and the queries other
components use (stun gating, buff bonus, debuff penalty, defend reduction).
"""

from typing import Any

from pydantic import BaseModel, Field

from skirmish.core.constants import StatusKind
from skirmish.core.logging import log_debug

from .base_effect import StatusEffect, normalize_kind
from .damage_over_time_effect import calculate_tick_damage


class StatusTick(BaseModel):
    """Damage dealt by one damage-over-time effect on one round tick."""

    owner_id: str
    effect: StatusEffect = Field(description="The effect as it was before the tick.")
    damage: int = Field(ge=0)
    health_remaining: int = Field(ge=0)
    killed: bool = False
    message: str = ""


def get_status(effects: list[StatusEffect], kind: StatusKind | str) -> StatusEffect | None:
    """Returns the first effect of the given kind, if any."""
    tag = normalize_kind(kind)
    for effect in effects:
        if effect.kind == tag:
            return effect
    return None


def has_status(effects: list[StatusEffect], kind: StatusKind | str) -> bool:
    """Returns True if an effect of the given kind is present."""
    return get_status(effects, kind) is not None


def is_stunned(effects: list[StatusEffect]) -> bool:
    """Returns True if a stun with turns remaining is present."""
    return any(
        effect.is_kind(StatusKind.STUNNED) and effect.turns_remaining > 0
        for effect in effects
    )


def apply_status_effect(effects: list[StatusEffect], new_effect: StatusEffect) -> bool:
    """
    Applies an effect following the replace-if-longer policy.

    An effect of a kind not yet present is appended. When the kind is already
    present, the new effect replaces it in place only if its duration is
    strictly longer; the newer magnitude comes with it.

    Args:
        effects (list[StatusEffect]):
            The owner's effect list, mutated in place.
        new_effect (StatusEffect):
            The effect to apply.

    Returns:
        bool:
            True if the effect landed, False if an equal or longer effect of
            the same kind was already present.

    """
    for index, existing in enumerate(effects):
        if existing.kind != new_effect.kind:
            continue
        if new_effect.turns_remaining > existing.turns_remaining:
            effects[index] = new_effect.model_copy()
            log_debug(
                f"Replaced {existing} with {new_effect}",
                {"kind": new_effect.kind},
            )
            return True
        log_debug(
            f"Kept {existing}, {new_effect} is not longer",
            {"kind": new_effect.kind},
        )
        return False
    effects.append(new_effect.model_copy())
    return True


def clear_turn_scoped_effects(effects: list[StatusEffect]) -> list[StatusEffect]:
    """
    Removes effects that only last until the owner's next turn.

    Returns:
        list[StatusEffect]: The removed effects.

    """
    removed = [effect for effect in effects if effect.is_turn_scoped()]
    effects[:] = [effect for effect in effects if not effect.is_turn_scoped()]
    return removed


def damage_bonus_percent(effects: list[StatusEffect]) -> int:
    """Returns the outgoing damage bonus granted by buffs."""
    return sum(e.magnitude for e in effects if e.is_kind(StatusKind.BUFFED))


def damage_reduction_percent(effects: list[StatusEffect]) -> int:
    """Returns the incoming damage reduction granted by a defensive stance."""
    reductions = [e.magnitude for e in effects if e.is_kind(StatusKind.DEFENDING)]
    return min(100, max(reductions)) if reductions else 0


def debuff_penalty_percent(effects: list[StatusEffect]) -> int:
    """Returns the accuracy and outgoing damage penalty imposed by debuffs."""
    return min(100, sum(e.magnitude for e in effects if e.is_kind(StatusKind.DEBUFFED)))


def scale_by_percent(value: int, percent: int) -> int:
    """
    Scales a stat by a signed percentage, rounding down.

    Args:
        value (int): The stat to scale.
        percent (int): Positive to raise it, negative to lower it.

    Returns:
        int: The scaled stat.

    """
    if percent == 0:
        return value
    return value * (100 + percent) // 100


def tick_status_effects(owner: Any) -> list[StatusTick]:
    """
    Runs the once-per-round tick over an owner's effects.

    Effects are processed in list order. A damage-over-time effect reports
    its damage before its duration is decremented. Effects reaching zero
    turns are removed without a report. Turn-scoped effects are left alone.
    Once the owner dies, later effects deal no further damage.

    Args:
        owner (Combatant):
            The combatant whose effects tick. Must expose id, display_name,
            max_health, health, is_dead, status_effects and apply_damage().

    Returns:
        list[StatusTick]:
            One entry per damage-dealing tick.

    """
    ticks: list[StatusTick] = []
    remaining: list[StatusEffect] = []
    for effect in owner.status_effects:
        if effect.is_turn_scoped():
            remaining.append(effect)
            continue
        if effect.deals_damage() and not owner.is_dead:
            damage = calculate_tick_damage(effect, owner.max_health)
            taken = owner.apply_damage(damage)
            message = f"{owner.display_name} takes {taken} damage from {effect.kind}!"
            if owner.is_dead:
                message += f" {owner.display_name} is defeated!"
            ticks.append(
                StatusTick(
                    owner_id=owner.id,
                    effect=effect,
                    damage=taken,
                    health_remaining=owner.health,
                    killed=owner.is_dead,
                    message=message,
                )
            )
        if effect.turns_remaining > 1:
            remaining.append(
                effect.model_copy(update={"turns_remaining": effect.turns_remaining - 1})
            )
        else:
            log_debug(
                f"{effect.display_name} expired on {owner.display_name}",
                {"owner": owner.id},
            )
    owner.status_effects = remaining
    return ticks
