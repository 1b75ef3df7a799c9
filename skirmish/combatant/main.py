"""
Combatant module for the combat core.

Defines the per-session combat state of one participant, player or enemy:
vitals, action points, combat stats, hex position, magazine, status effects
and turn flags. The session owns combatants exclusively and mutates them only
through the operations below.
"""

from typing import Any

from pydantic import BaseModel, Field

from skirmish.combat.combat_result import CombatResult
from skirmish.core.constants import ResultSource, StatusKind
from skirmish.core.error_handling import InsufficientActionPoints
from skirmish.core.hex_grid import HexCoord
from skirmish.core.logging import log_debug
from skirmish.effects.base_effect import StatusEffect
from skirmish.effects.effect_manager import (
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


class Combatant(BaseModel):
    """
    One participant of a combat session.

    Attributes:
        id (str):
            Unique id within the session.
        definition_id (str):
            The enemy definition or player profile it was built from.
        display_name (str):
            Name shown in the log.
        is_player_controlled (bool):
            Whether actions come from the player rather than the enemy AI.
        health (int):
            Current health, between 0 and max_health.
        action_points (int):
            Points left this turn, between 0 and max_action_points.
        status_effects (list[StatusEffect]):
            Active effects in application order.
    """

    id: str = Field(description="Unique id within the session.")
    definition_id: str = Field(description="Source definition or profile id.")
    display_name: str = Field(description="Name shown in the log.")
    is_player_controlled: bool = Field(default=False)
    behavior: str | None = Field(
        default=None,
        description="Opaque AI hint. The core never interprets it.",
    )
    level: int = Field(default=1, ge=1)

    # === Vitals ===
    health: int = Field(ge=0)
    max_health: int = Field(gt=0)

    # === Action economy ===
    action_points: int = Field(ge=0)
    max_action_points: int = Field(gt=0)

    # === Combat stats ===
    base_damage: int = Field(default=0, ge=0)
    armor: int = Field(default=0, ge=0)
    accuracy: int = Field(default=70)
    evasion: int = Field(default=0)
    speed: int = Field(default=0, description="Initiative key, higher acts first.")
    attack_range: int = Field(default=1, ge=1)

    # === Position and weapon ===
    position: HexCoord = Field(default_factory=HexCoord)
    weapon_id: str | None = Field(default=None)
    magazine_capacity: int = Field(default=0, ge=0, description="0 means no ammo needed.")
    ammo_in_magazine: int = Field(default=0, ge=0)

    # === Effects and flags ===
    status_effects: list[StatusEffect] = Field(default_factory=list)
    has_acted_this_turn: bool = Field(default=False)

    def model_post_init(self, _: Any) -> None:
        if self.health > self.max_health:
            raise ValueError(
                f"{self.id}: health {self.health} exceeds max_health {self.max_health}"
            )
        if self.action_points > self.max_action_points:
            raise ValueError(
                f"{self.id}: action_points {self.action_points} exceed "
                f"max_action_points {self.max_action_points}"
            )
        if self.ammo_in_magazine > self.magazine_capacity:
            raise ValueError(
                f"{self.id}: ammo {self.ammo_in_magazine} exceeds "
                f"capacity {self.magazine_capacity}"
            )

    # ============================================================================
    # VITALS
    # ============================================================================

    @property
    def colored_name(self) -> str:
        """Returns the name colored by side."""
        color = "bold blue" if self.is_player_controlled else "bold red"
        return f"[{color}]{self.display_name}[/]"

    @property
    def is_dead(self) -> bool:
        """True whenever health is 0, however it got there."""
        return self.health == 0

    def is_alive(self) -> bool:
        """Returns True while the combatant has not been defeated."""
        return not self.is_dead

    def apply_damage(self, amount: int) -> int:
        """
        Removes health, clamping at 0 and marking the combatant dead there.

        Damaging a dead combatant or dealing 0 damage changes nothing.

        Args:
            amount (int):
                The damage after every reduction has been applied.

        Returns:
            int:
                The health actually lost.

        Raises:
            ValueError: If the amount is negative.

        """
        if amount < 0:
            raise ValueError(f"Damage must be >= 0, got {amount}")
        if self.is_dead or amount == 0:
            return 0
        taken = min(amount, self.health)
        self.health -= taken
        log_debug(
            f"{self.display_name} takes {taken} damage (remaining HP: {self.health})",
            {"combatant": self.id},
        )
        return taken

    def heal(self, amount: int) -> int:
        """
        Restores health up to the maximum. The dead cannot be healed.

        Returns:
            int: The health actually restored.

        """
        if amount < 0:
            raise ValueError(f"Healing must be >= 0, got {amount}")
        if self.is_dead:
            return 0
        restored = min(amount, self.max_health - self.health)
        self.health += restored
        return restored

    def revive(self, health: int | None = None) -> None:
        """
        Brings a defeated combatant back. Only external systems call this.

        Args:
            health (int | None):
                The health to come back with. Defaults to full health.

        """
        health = self.max_health if health is None else health
        if not 0 < health <= self.max_health:
            raise ValueError(f"Revive health must be in 1..{self.max_health}")
        self.health = health

    # ============================================================================
    # ACTION ECONOMY
    # ============================================================================

    def spend_action_points(self, cost: int) -> None:
        """
        Spends action points.

        Raises:
            InsufficientActionPoints: If the cost exceeds the points left.

        """
        if cost < 0:
            raise ValueError(f"Action point cost must be >= 0, got {cost}")
        if cost > self.action_points:
            raise InsufficientActionPoints(
                f"{self.display_name} needs {cost} AP but has {self.action_points}",
                {"combatant": self.id, "cost": cost, "available": self.action_points},
            )
        self.action_points -= cost

    def reset_for_new_turn(self) -> None:
        """Refills action points and drops effects that last until this turn."""
        self.action_points = self.max_action_points
        self.has_acted_this_turn = False
        for effect in clear_turn_scoped_effects(self.status_effects):
            log_debug(
                f"{effect.display_name} ends for {self.display_name}",
                {"combatant": self.id},
            )

    # ============================================================================
    # STATUS EFFECTS
    # ============================================================================

    def add_status_effect(self, effect: StatusEffect) -> bool:
        """Applies an effect with the replace-if-longer policy."""
        return apply_status_effect(self.status_effects, effect)

    def tick_status_effects(self, round_number: int = 0) -> list[CombatResult]:
        """
        Runs the round tick and turns each damage tick into a log entry.

        Args:
            round_number (int):
                The round that just ended, recorded on the entries.

        Returns:
            list[CombatResult]:
                One status_effect entry per damage tick.

        """
        return [
            CombatResult(
                round=round_number,
                source=ResultSource.STATUS_EFFECT,
                actor_id=tick.effect.source_id,
                target_id=self.id,
                damage=tick.damage,
                status_effect=tick.effect,
                target_health_remaining=tick.health_remaining,
                target_killed=tick.killed,
                message=tick.message,
            )
            for tick in tick_status_effects(self)
        ]

    def is_stunned(self) -> bool:
        return is_stunned(self.status_effects)

    def is_defending(self) -> bool:
        return has_status(self.status_effects, StatusKind.DEFENDING)

    def has_status(self, kind: StatusKind | str) -> bool:
        return has_status(self.status_effects, kind)

    def get_status(self, kind: StatusKind | str) -> StatusEffect | None:
        return get_status(self.status_effects, kind)

    @property
    def damage_bonus_percent(self) -> int:
        """Outgoing damage bonus granted by buffs."""
        return damage_bonus_percent(self.status_effects)

    @property
    def damage_reduction_percent(self) -> int:
        """Incoming damage reduction granted by a defensive stance."""
        return damage_reduction_percent(self.status_effects)

    @property
    def debuff_penalty_percent(self) -> int:
        """Accuracy and outgoing damage penalty imposed by debuffs."""
        return debuff_penalty_percent(self.status_effects)

    @property
    def effective_accuracy(self) -> int:
        """Accuracy after debuffs."""
        return scale_by_percent(self.accuracy, -self.debuff_penalty_percent)

    @property
    def effective_armor(self) -> int:
        """Armor after buffs."""
        return scale_by_percent(self.armor, self.damage_bonus_percent)

    # ============================================================================
    # WEAPON AND POSITION
    # ============================================================================

    def uses_ammo(self) -> bool:
        """Returns True if the combatant fights with a magazine-fed weapon."""
        return self.magazine_capacity > 0

    def has_ammo(self, rounds: int = 1) -> bool:
        """Returns True if the magazine can pay for an attack."""
        return not self.uses_ammo() or self.ammo_in_magazine >= rounds

    def consume_ammo(self, rounds: int = 1) -> None:
        if self.uses_ammo():
            self.ammo_in_magazine = max(0, self.ammo_in_magazine - rounds)

    def reload(self) -> int:
        """
        Refills the magazine.

        Returns:
            int: The number of rounds loaded.

        """
        loaded = self.magazine_capacity - self.ammo_in_magazine
        self.ammo_in_magazine = self.magazine_capacity
        return loaded

    def distance_to(self, other: "Combatant | HexCoord") -> int:
        """Returns the hex distance to another combatant or coordinate."""
        position = other if isinstance(other, HexCoord) else other.position
        return self.position.distance_to(position)

    def __str__(self) -> str:
        return self.display_name

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(id='{self.id}', hp={self.health}/"
            f"{self.max_health}, ap={self.action_points}/{self.max_action_points})"
        )
