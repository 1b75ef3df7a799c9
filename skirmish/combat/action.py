"""
Combat action module.

Defines what a combatant submits on its turn and the opaque payload records
(items, abilities) the item library hands in. Also resolves how many action
points an action costs.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from skirmish.core.config import DEFAULT_RULES, CombatRules
from skirmish.core.constants import ActionType
from skirmish.core.dice_parser import is_valid_expression
from skirmish.core.hex_grid import HexCoord
from skirmish.effects.base_effect import StatusEffect


class ActionPayload(BaseModel):
    """
    Content describing what an item or ability does when used.

    The combat core reads the fields it understands and ignores the rest of
    the item library's data.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Item or ability id.")
    name: str = Field(default="", description="Display name.")
    ap_cost: int | None = Field(
        default=None,
        ge=0,
        description="Overrides the type-level cost when set.",
    )
    base_damage: int | None = Field(
        default=None,
        ge=0,
        description="Replaces the attacker's base damage when set.",
    )
    damage_roll: str | None = Field(
        default=None,
        description="Dice expression added to the damage, e.g. '1d6+1'.",
    )
    ammo_cost: int = Field(default=1, ge=0, description="Rounds used per attack.")
    range: int | None = Field(
        default=None,
        ge=1,
        description="Replaces the attacker's range when set.",
    )
    status_effect: StatusEffect | None = Field(
        default=None,
        description="Effect applied to the target on a hit or on use.",
    )
    heal_amount: int = Field(default=0, ge=0)
    targets_self: bool = Field(
        default=False,
        description="Whether use_item affects the user instead of a target.",
    )

    @field_validator("damage_roll")
    @classmethod
    def _check_damage_roll(cls, value: str | None) -> str | None:
        if value is not None and not is_valid_expression(value):
            raise ValueError(f"Invalid damage roll expression: '{value}'")
        return value

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @property
    def deals_damage(self) -> bool:
        """Whether using this payload as an item hurts its target."""
        return self.base_damage is not None or bool(self.damage_roll)


class CombatAction(BaseModel):
    """An action submitted by the active combatant."""

    model_config = ConfigDict(frozen=True)

    actor_id: str = Field(description="The combatant performing the action.")
    type: ActionType = Field(description="What the combatant does.")
    target_id: str | None = Field(
        default=None,
        description="Target combatant of attacks and targeted items.",
    )
    target_position: HexCoord | None = Field(
        default=None,
        description="Destination of a move.",
    )
    payload_id: str | None = Field(
        default=None,
        description="Item or ability from the payload catalogue.",
    )
    payload: ActionPayload | None = Field(
        default=None,
        description="Inline payload, taking precedence over payload_id.",
    )

    def __str__(self) -> str:
        parts = [f"{self.actor_id} {self.type.value}"]
        if self.target_id:
            parts.append(f"-> {self.target_id}")
        if self.target_position:
            parts.append(f"-> {self.target_position}")
        if self.payload_id or self.payload:
            parts.append(f"[{self.payload.id if self.payload else self.payload_id}]")
        return " ".join(parts)


def resolve_ap_cost(
    action_type: ActionType,
    payload: ActionPayload | None = None,
    distance: int = 0,
    rules: CombatRules = DEFAULT_RULES,
) -> int:
    """
    Resolves the action point cost of an action.

    A cost declared by the payload wins. Otherwise the type-level table
    applies, and a move pays its table cost once per hex travelled.

    Args:
        action_type (ActionType):
            The action type.
        payload (ActionPayload | None):
            The payload, if the action carries one.
        distance (int):
            Hexes travelled, for moves.
        rules (CombatRules):
            Holds the type-level cost table.

    Returns:
        int:
            The cost in action points.

    """
    if payload is not None and payload.ap_cost is not None:
        return payload.ap_cost
    cost = rules.ap_cost(action_type)
    if action_type == ActionType.MOVE:
        return cost * max(0, distance)
    return cost


def payload_from_dict(data: dict[str, Any]) -> ActionPayload:
    """Builds a payload from a catalogue entry."""
    return ActionPayload(**data)
