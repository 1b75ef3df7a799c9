"""
Action resolver module.

Pure hit, critical, damage and flee formulas, plus the ActionResolver which
binds them to an injected random source and a set of CombatRules. Nothing
here touches session state: the resolver computes outcomes and the session
applies them.
"""

from pydantic import BaseModel, Field

from skirmish.core.config import DEFAULT_RULES, CombatRules
from skirmish.core.dice_parser import RandomSource, roll_and_describe
from skirmish.core.logging import log_debug

from .action import ActionPayload


# ============================================================================
# PURE FORMULAS
# ============================================================================


def resolve_hit_chance(
    attacker_accuracy: int,
    defender_evasion: int,
    range_to_target: int,
    is_precision_variant: bool,
    rules: CombatRules = DEFAULT_RULES,
) -> int:
    """
    Computes the percent chance that an attack lands.

    Args:
        attacker_accuracy (int):
            The attacker's accuracy.
        defender_evasion (int):
            The defender's evasion.
        range_to_target (int):
            Hex distance between the two.
        is_precision_variant (bool):
            True for the aimed variant of the attack.
        rules (CombatRules):
            The tunable formula constants.

    Returns:
        int:
            The hit chance, clamped to the rules' bounds (5..95 by default).

    """
    chance = attacker_accuracy
    if is_precision_variant:
        chance += rules.aimed_shot_bonus
    chance -= rules.range_penalty_per_tile * max(0, range_to_target - rules.optimal_range)
    chance -= defender_evasion
    return max(rules.hit_chance_min, min(rules.hit_chance_max, chance))


def resolve_damage(
    base_damage: int,
    attacker_level: int,
    defender_armor: int,
    is_critical: bool,
    rules: CombatRules = DEFAULT_RULES,
) -> int:
    """
    Computes the damage of a landed hit.

    Level adds half its value, a critical multiplies the total, armor is
    subtracted afterwards and the result never drops below 1.

    Returns:
        int: The damage dealt, at least 1.

    """
    damage = base_damage + attacker_level // rules.level_damage_divisor
    if is_critical:
        damage *= rules.critical_multiplier
    return max(1, damage - defender_armor)


def roll_critical(rng: RandomSource, chance: int = DEFAULT_RULES.crit_chance) -> bool:
    """Rolls whether a landed hit is critical."""
    return rng.random() * 100 < chance


def roll_hit(hit_chance: int, rng: RandomSource) -> bool:
    """Rolls whether an attack with the given chance lands."""
    return rng.random() * 100 < hit_chance


def resolve_flee_chance(
    actor_speed: int,
    enemy_speeds: list[int],
    rules: CombatRules = DEFAULT_RULES,
) -> int:
    """
    Computes the percent chance of escaping combat.

    Faster actors escape more easily: every point of speed above the mean
    speed of the living enemies adds to the base chance.
    """
    chance = rules.base_flee_chance
    if enemy_speeds:
        mean_speed = sum(enemy_speeds) / len(enemy_speeds)
        chance += int(rules.flee_speed_bonus * (actor_speed - mean_speed))
    return max(rules.flee_chance_min, min(rules.flee_chance_max, chance))


def apply_defense_reduction(damage: int, reduction_percent: int) -> int:
    """Reduces damage taken while defending. Never goes below 1."""
    if reduction_percent <= 0:
        return damage
    return max(1, damage * (100 - reduction_percent) // 100)


def apply_damage_bonus(base: int, bonus_percent: int) -> int:
    """Raises outgoing damage by a percentage."""
    if bonus_percent <= 0:
        return base
    return base * (100 + bonus_percent) // 100


def apply_damage_penalty(base: int, penalty_percent: int) -> int:
    """Lowers outgoing damage by a percentage. Never goes below 0."""
    if penalty_percent <= 0:
        return base
    return max(0, base * (100 - penalty_percent) // 100)


# ============================================================================
# BOUND RESOLVER
# ============================================================================


class AttackOutcome(BaseModel):
    """What an attack roll produced, before the session applies it."""

    hit_chance: int | None = Field(
        default=None,
        description="Percent chance the attack was rolled against. None if it never rolls.",
    )
    hit: bool
    is_critical: bool = False
    damage: int = Field(default=0, ge=0)
    roll_description: str = Field(
        default="",
        description="Breakdown of the payload's damage dice, if any.",
    )


class FleeOutcome(BaseModel):
    """What a flee attempt produced."""

    chance: int
    success: bool


class ActionResolver:
    """
    Binds the formulas to a random source and a set of rules.

    The random source is the only state: draws happen in a fixed order (hit,
    then critical, then damage dice) so identical seeds reproduce identical
    battles.
    """

    def __init__(self, rng: RandomSource, rules: CombatRules = DEFAULT_RULES) -> None:
        self.rng = rng
        self.rules = rules

    def hit_chance(
        self,
        attacker_accuracy: int,
        defender_evasion: int,
        range_to_target: int,
        aimed: bool,
    ) -> int:
        return resolve_hit_chance(
            attacker_accuracy, defender_evasion, range_to_target, aimed, self.rules
        )

    def _payload_damage(
        self, base: int, payload: ActionPayload | None
    ) -> tuple[int, str]:
        """Applies a payload's base damage override and rolls its dice."""
        if payload is None:
            return base, ""
        if payload.base_damage is not None:
            base = payload.base_damage
        if not payload.damage_roll:
            return base, ""
        breakdown = roll_and_describe(payload.damage_roll, self.rng)
        return base + breakdown.value, breakdown.description

    def resolve_attack(
        self,
        attacker_accuracy: int,
        attacker_level: int,
        attacker_damage: int,
        damage_bonus_percent: int,
        defender_evasion: int,
        defender_armor: int,
        defender_reduction_percent: int,
        distance: int,
        aimed: bool,
        payload: ActionPayload | None = None,
        damage_penalty_percent: int = 0,
    ) -> AttackOutcome:
        """
        Rolls one attack.

        Args:
            attacker_accuracy (int):
                The attacker's accuracy, debuffs already applied.
            attacker_level (int):
                The attacker's level.
            attacker_damage (int):
                The attacker's base damage, replaced by the payload's if set.
            damage_bonus_percent (int):
                Outgoing bonus from buffs.
            defender_evasion (int):
                The defender's evasion.
            defender_armor (int):
                The defender's flat damage reduction, buffs already applied.
            defender_reduction_percent (int):
                Incoming reduction from a defensive stance.
            distance (int):
                Hex distance between the two.
            aimed (bool):
                True for the aimed variant.
            payload (ActionPayload | None):
                The weapon or ability used, if any.
            damage_penalty_percent (int):
                Outgoing penalty from debuffs.

        Returns:
            AttackOutcome:
                The rolled hit, critical and final damage.

        """
        chance = self.hit_chance(attacker_accuracy, defender_evasion, distance, aimed)
        if not roll_hit(chance, self.rng):
            log_debug(f"Attack missed ({chance}%)")
            return AttackOutcome(hit_chance=chance, hit=False)
        critical = roll_critical(self.rng, self.rules.crit_chance)
        base, description = self._payload_damage(attacker_damage, payload)
        base = apply_damage_bonus(base, damage_bonus_percent)
        base = apply_damage_penalty(base, damage_penalty_percent)
        damage = resolve_damage(
            base, attacker_level, defender_armor, critical, self.rules
        )
        damage = apply_defense_reduction(damage, defender_reduction_percent)
        log_debug(
            f"Attack hit ({chance}%) for {damage}",
            {"critical": critical, "roll": description or None},
        )
        return AttackOutcome(
            hit_chance=chance,
            hit=True,
            is_critical=critical,
            damage=damage,
            roll_description=description,
        )

    def resolve_item_damage(
        self,
        payload: ActionPayload,
        attacker_level: int,
        damage_bonus_percent: int,
        damage_penalty_percent: int,
        defender_armor: int,
        defender_reduction_percent: int,
    ) -> AttackOutcome:
        """
        Rolls the damage of a used item such as a thrown explosive.

        Items never miss and never crit, so only the payload dice draw from
        the random source. Buffs, debuffs, level, armor and a defensive
        stance apply as they do for attacks.
        """
        base, description = self._payload_damage(0, payload)
        base = apply_damage_bonus(base, damage_bonus_percent)
        base = apply_damage_penalty(base, damage_penalty_percent)
        damage = resolve_damage(base, attacker_level, defender_armor, False, self.rules)
        damage = apply_defense_reduction(damage, defender_reduction_percent)
        log_debug(
            f"{payload.display_name} deals {damage}",
            {"roll": description or None},
        )
        return AttackOutcome(hit=True, damage=damage, roll_description=description)

    def resolve_flee(self, actor_speed: int, enemy_speeds: list[int]) -> FleeOutcome:
        """Rolls one flee attempt."""
        chance = resolve_flee_chance(actor_speed, enemy_speeds, self.rules)
        return FleeOutcome(chance=chance, success=self.rng.random() * 100 < chance)
