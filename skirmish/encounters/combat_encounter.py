"""
Combat encounter module.

A scripted battle: which enemies appear, whether the player may flee, and
the reward table forwarded to the loot system on victory.
"""

from pydantic import BaseModel, ConfigDict, Field


class EncounterEnemy(BaseModel):
    """One line of an encounter's enemy list."""

    model_config = ConfigDict(frozen=True)

    enemy_id: str = Field(description="EnemyDefinition id.")
    count: int = Field(default=1, ge=1, description="How many copies spawn.")
    level: int | None = Field(
        default=None,
        ge=1,
        description="Level of the spawned enemies. None means level 1.",
    )


class RewardItem(BaseModel):
    """An item drop declared by the encounter. Chance is rolled elsewhere."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    quantity: int = Field(default=1, ge=1)
    chance: float = Field(default=1.0, ge=0.0, le=1.0)


class RewardTable(BaseModel):
    """Experience, gold and item table granted on victory."""

    model_config = ConfigDict(frozen=True)

    xp: int = Field(default=0, ge=0)
    gold: int = Field(default=0, ge=0)
    items: list[RewardItem] = Field(default_factory=list)


class CombatEncounter(BaseModel):
    """A pre-configured battle."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique identifier.")
    name: str = Field(default="", description="Display name.")
    description: str = Field(default="")
    enemies: list[EncounterEnemy] = Field(
        description="Enemies in this encounter.",
    )
    min_level: int = Field(default=1, ge=1, description="Required player level.")
    is_boss: bool = Field(default=False)
    can_flee: bool = Field(default=True, description="Whether the player may flee.")
    rewards: RewardTable = Field(default_factory=RewardTable)
    tags: list[str] = Field(default_factory=list)

    @property
    def enemy_count(self) -> int:
        """Total number of enemies the encounter spawns."""
        return sum(entry.count for entry in self.enemies)
