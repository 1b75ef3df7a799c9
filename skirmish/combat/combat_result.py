"""
Combat result module.

One immutable entry of the combat log. Entries carry no wall-clock data so
that two sessions seeded alike and fed the same actions serialize to the same
log byte for byte.
"""

from pydantic import BaseModel, ConfigDict, Field

from skirmish.core.constants import ActionType, ResultSource
from skirmish.core.hex_grid import HexCoord
from skirmish.effects.base_effect import StatusEffect


class CombatResult(BaseModel):
    """The outcome of one action, status tick or skipped turn."""

    model_config = ConfigDict(frozen=True)

    sequence: int = Field(
        default=0,
        ge=0,
        description="Position in the session log, stamped when appended.",
    )
    round: int = Field(
        default=0,
        ge=0,
        description="Round in which the entry was produced.",
    )
    source: ResultSource = Field(
        default=ResultSource.ACTION,
        description="Whether an action, a status tick or a skipped turn produced it.",
    )
    actor_id: str | None = Field(default=None)
    action_type: ActionType | None = Field(default=None)
    target_id: str | None = Field(default=None)
    success: bool = Field(
        default=True,
        description="Whether the action achieved its effect (hit, fled, moved...).",
    )
    damage: int = Field(default=0, ge=0)
    healing: int = Field(default=0, ge=0)
    is_critical: bool = Field(default=False)
    was_dodged: bool = Field(default=False)
    hit_chance: int | None = Field(
        default=None,
        description="Percent chance rolled against, for attacks and flee attempts.",
    )
    status_effect: StatusEffect | None = Field(
        default=None,
        description="Effect applied by the action, or the effect that ticked.",
    )
    destination: HexCoord | None = Field(default=None)
    target_health_remaining: int | None = Field(default=None)
    ap_spent: int = Field(default=0, ge=0)
    target_killed: bool = Field(default=False)
    message: str = Field(default="")

    def is_action(self) -> bool:
        """Returns True if the entry was produced by a submitted action."""
        return self.source == ResultSource.ACTION

    def __str__(self) -> str:
        return f"[{self.round}:{self.sequence}] {self.message}"
