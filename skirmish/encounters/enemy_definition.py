"""
Enemy definition module.

Immutable enemy stat blocks supplied by the content library. The combat core
reads them once per instantiated enemy and never mutates them.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from skirmish.core.constants import (
    DEFAULT_MELEE_RANGE,
    DEFAULT_WEAPON_RANGE,
    EnemyBehavior,
)


class EnemyDefinition(BaseModel):
    """Stat block of one enemy type."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        description="Unique identifier of the enemy type.",
    )
    name: str = Field(
        description="Display name.",
    )
    max_health: int = Field(
        ge=1,
        description="Base health points.",
    )
    action_points: int = Field(
        default=4,
        ge=1,
        le=10,
        description="Action points per turn. Also used as the initiative speed.",
    )
    base_damage: int = Field(
        default=5,
        ge=0,
        description="Damage of a basic attack before level scaling and armor.",
    )
    armor: int = Field(
        default=0,
        ge=0,
        description="Flat damage reduction.",
    )
    accuracy_mod: int = Field(
        default=0,
        ge=-50,
        le=50,
        description="Modifier added to the base enemy accuracy.",
    )
    evasion: int = Field(
        default=10,
        ge=0,
        le=100,
        description="Hit chance removed from attacks against this enemy.",
    )
    weapon_id: str | None = Field(
        default=None,
        description="Primary weapon from the item library, if armed.",
    )
    attack_range: int | None = Field(
        default=None,
        ge=1,
        description="Maximum attack distance. Defaults to melee or weapon range.",
    )
    xp_reward: int = Field(default=10, ge=0)
    gold_reward: int = Field(default=0, ge=0)
    behavior: EnemyBehavior = Field(
        default=EnemyBehavior.AGGRESSIVE,
        description="AI hint consumed by the external decision process.",
    )
    description: str = Field(default="")
    tags: list[str] = Field(default_factory=list)

    def model_post_init(self, _: Any) -> None:
        if not self.id.strip():
            raise ValueError("Enemy id must be a non-empty string.")

    @property
    def effective_range(self) -> int:
        """The attack range, falling back to melee or the default weapon range."""
        if self.attack_range is not None:
            return self.attack_range
        return DEFAULT_WEAPON_RANGE if self.weapon_id else DEFAULT_MELEE_RANGE
