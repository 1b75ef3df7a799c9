"""
Base effect module for the combat core.

Defines the timed status effect record attached to combatants. The kind is a
plain lower-case tag so content can introduce kinds beyond the built-in ones.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from skirmish.core.constants import (
    DAMAGE_OVER_TIME_KINDS,
    TURN_SCOPED_KINDS,
    StatusKind,
)


def normalize_kind(kind: Any) -> str:
    """
    Turns a StatusKind or free-form tag into the canonical lower-case tag.

    Args:
        kind (Any): A StatusKind member or a string.

    Returns:
        str: The canonical tag.

    """
    if isinstance(kind, Enum):
        kind = kind.value
    if not isinstance(kind, str) or not kind.strip():
        raise ValueError(f"Status kind must be a non-empty string, got: {kind!r}")
    return kind.strip().lower()


class StatusEffect(BaseModel):
    """
    A timed modifier attached to a combatant.

    Damage-over-time kinds hurt their owner once per round, stunned skips
    turns, buffed raises outgoing damage and defending lowers incoming damage
    until the owner's next turn.
    """

    kind: str = Field(
        description="Status tag, e.g. 'poisoned' or a content-defined kind.",
    )
    turns_remaining: int = Field(
        ge=1,
        description="Rounds left before the effect expires.",
    )
    magnitude: int = Field(
        default=0,
        ge=0,
        description="Damage per tick, percent bonus or percent reduction by kind.",
    )
    source_id: str | None = Field(
        default=None,
        description="Combatant or payload that applied the effect.",
    )

    @field_validator("kind", mode="before")
    @classmethod
    def _normalize_kind(cls, value: Any) -> str:
        return normalize_kind(value)

    @property
    def status_kind(self) -> StatusKind | None:
        """The built-in kind, or None for content-defined kinds."""
        try:
            return StatusKind(self.kind)
        except ValueError:
            return None

    @property
    def display_name(self) -> str:
        return self.kind.replace("_", " ").capitalize()

    @property
    def emoji(self) -> str:
        kind = self.status_kind
        return kind.emoji if kind else "❔"

    @property
    def color(self) -> str:
        kind = self.status_kind
        return kind.color if kind else "dim white"

    @property
    def colored_name(self) -> str:
        """Returns the effect name with color formatting applied."""
        return f"[{self.color}]{self.display_name}[/]"

    def is_kind(self, kind: StatusKind | str) -> bool:
        """Returns True if the effect has the given kind."""
        return self.kind == normalize_kind(kind)

    def deals_damage(self) -> bool:
        """Returns True for damage-over-time kinds."""
        return self.kind in DAMAGE_OVER_TIME_KINDS

    def is_turn_scoped(self) -> bool:
        """Returns True for kinds cleared at the owner's next turn instead of ticking."""
        return self.kind in TURN_SCOPED_KINDS

    def __str__(self) -> str:
        return f"{self.display_name}({self.turns_remaining}t, {self.magnitude})"
