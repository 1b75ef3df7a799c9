"""
Rewards module.

The request forwarded to the loot system when a session ends in victory.
Drop chances are carried as declared; rolling them is the loot system's job.
"""

from pydantic import BaseModel, ConfigDict, Field

from skirmish.encounters.combat_encounter import CombatEncounter, RewardItem


class RewardsRequest(BaseModel):
    """Experience, gold and item drops earned by winning an encounter."""

    model_config = ConfigDict(frozen=True)

    encounter_id: str
    xp: int = Field(default=0, ge=0)
    gold: int = Field(default=0, ge=0)
    items: list[RewardItem] = Field(default_factory=list)

    @classmethod
    def from_encounter(cls, encounter: CombatEncounter) -> "RewardsRequest":
        """Copies the encounter's reward table verbatim."""
        return cls(
            encounter_id=encounter.id,
            xp=encounter.rewards.xp,
            gold=encounter.rewards.gold,
            items=list(encounter.rewards.items),
        )
