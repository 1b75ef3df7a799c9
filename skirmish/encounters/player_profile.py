"""
Player profile module.

Externally owned stats of a player-controlled fighter, handed to the session
at creation in the same shape as an enemy-derived combatant.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from skirmish.core.constants import DEFAULT_MELEE_RANGE
from skirmish.core.hex_grid import HexCoord
from skirmish.effects.base_effect import StatusEffect


class PlayerProfile(BaseModel):
    """Stats of one player-controlled combatant."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default="player", description="Combatant id in the session.")
    name: str = Field(description="Display name.")
    level: int = Field(default=1, ge=1)
    max_health: int = Field(ge=1)
    health: int | None = Field(
        default=None,
        ge=0,
        description="Current health carried over from exploration. None means full.",
    )
    action_points: int = Field(default=6, ge=1, le=10)
    base_damage: int = Field(default=8, ge=0)
    armor: int = Field(default=0, ge=0)
    accuracy: int = Field(default=75)
    evasion: int = Field(default=10, ge=0, le=100)
    speed: int = Field(default=5, description="Initiative key.")
    weapon_id: str | None = Field(default=None)
    magazine_capacity: int = Field(default=0, ge=0)
    ammo_in_magazine: int | None = Field(
        default=None,
        ge=0,
        description="Loaded rounds. None means a full magazine.",
    )
    attack_range: int = Field(default=DEFAULT_MELEE_RANGE, ge=1)
    position: HexCoord | None = Field(default=None)
    status_effects: list[StatusEffect] = Field(default_factory=list)

    def model_post_init(self, _: Any) -> None:
        if self.health is not None and self.health > self.max_health:
            raise ValueError("health must not exceed max_health")
        if (
            self.ammo_in_magazine is not None
            and self.ammo_in_magazine > self.magazine_capacity
        ):
            raise ValueError("ammo_in_magazine must not exceed magazine_capacity")
