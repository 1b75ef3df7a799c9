"""
Balancing configuration for the combat core.

CombatRules gathers every tunable number used by the resolver and the
session. Defaults mirror the constants module; a rules file lets designers
rebalance without touching code.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    AIMED_SHOT_BONUS,
    AP_COSTS,
    BASE_CRIT_CHANCE,
    BASE_ENEMY_ACCURACY,
    BASE_FLEE_CHANCE,
    CRITICAL_MULTIPLIER,
    DEFAULT_MAGAZINE_SIZE,
    DEFEND_DAMAGE_REDUCTION,
    DEFEND_DURATION,
    FLEE_CHANCE_MAX,
    FLEE_CHANCE_MIN,
    FLEE_SPEED_BONUS,
    HIT_CHANCE_MAX,
    HIT_CHANCE_MIN,
    LEVEL_DAMAGE_DIVISOR,
    OPTIMAL_RANGE,
    RANGE_PENALTY_PER_TILE,
    ActionType,
)


class CombatRules(BaseModel):
    """Tunable numbers for hit, damage, flee and action point accounting."""

    model_config = ConfigDict(frozen=True)

    hit_chance_min: int = Field(
        default=HIT_CHANCE_MIN,
        ge=0,
        le=100,
        description="Lowest hit chance any attack can have.",
    )
    hit_chance_max: int = Field(
        default=HIT_CHANCE_MAX,
        ge=0,
        le=100,
        description="Highest hit chance any attack can have.",
    )
    aimed_shot_bonus: int = Field(
        default=AIMED_SHOT_BONUS,
        description="Flat hit chance bonus of the aimed variant.",
    )
    optimal_range: int = Field(
        default=OPTIMAL_RANGE,
        ge=0,
        description="Distance in hexes before range penalties start.",
    )
    range_penalty_per_tile: int = Field(
        default=RANGE_PENALTY_PER_TILE,
        ge=0,
        description="Hit chance lost per hex beyond the optimal range.",
    )
    level_damage_divisor: int = Field(
        default=LEVEL_DAMAGE_DIVISOR,
        ge=1,
        description="Attacker level is divided by this and added to damage.",
    )
    critical_multiplier: int = Field(
        default=CRITICAL_MULTIPLIER,
        ge=1,
        description="Damage multiplier of a critical hit.",
    )
    crit_chance: int = Field(
        default=BASE_CRIT_CHANCE,
        ge=0,
        le=100,
        description="Percent chance that a landed hit is critical.",
    )
    defend_damage_reduction: int = Field(
        default=DEFEND_DAMAGE_REDUCTION,
        ge=0,
        le=100,
        description="Percent of incoming damage removed by a defensive stance.",
    )
    defend_duration: int = Field(
        default=DEFEND_DURATION,
        ge=1,
        description="Turns a defensive stance lasts.",
    )
    base_flee_chance: int = Field(
        default=BASE_FLEE_CHANCE,
        description="Flee chance before the speed comparison.",
    )
    flee_speed_bonus: int = Field(
        default=FLEE_SPEED_BONUS,
        description="Flee chance gained per point of speed over the enemy mean.",
    )
    flee_chance_min: int = Field(default=FLEE_CHANCE_MIN, ge=0, le=100)
    flee_chance_max: int = Field(default=FLEE_CHANCE_MAX, ge=0, le=100)
    base_enemy_accuracy: int = Field(
        default=BASE_ENEMY_ACCURACY,
        description="Accuracy of an enemy before its accuracy modifier.",
    )
    default_magazine_size: int = Field(
        default=DEFAULT_MAGAZINE_SIZE,
        ge=0,
        description="Magazine capacity given to armed enemies.",
    )
    ap_costs: dict[ActionType, int] = Field(
        default_factory=lambda: dict(AP_COSTS),
        description="Type-level action point costs. Move is per hex.",
    )

    @field_validator("ap_costs", mode="before")
    @classmethod
    def _merge_ap_costs(cls, value: Any) -> dict[ActionType, int]:
        """Fills the costs a rules file leaves out with the defaults."""
        merged = dict(AP_COSTS)
        for key, cost in (value or {}).items():
            action_type = key if isinstance(key, ActionType) else ActionType(key)
            if cost < 0:
                raise ValueError(f"AP cost for {action_type.value} must be >= 0")
            merged[action_type] = cost
        if merged[ActionType.END_TURN] != 0:
            raise ValueError("end_turn must not cost action points")
        return merged

    def model_post_init(self, _: Any) -> None:
        if self.hit_chance_min > self.hit_chance_max:
            raise ValueError("hit_chance_min must not exceed hit_chance_max")
        if self.flee_chance_min > self.flee_chance_max:
            raise ValueError("flee_chance_min must not exceed flee_chance_max")

    def ap_cost(self, action_type: ActionType) -> int:
        """Returns the type-level cost of an action."""
        return self.ap_costs[action_type]


DEFAULT_RULES = CombatRules()


def load_rules(filepath: Path) -> CombatRules:
    """
    Loads combat rules from a JSON object file.

    Args:
        filepath (Path): The rules file.

    Returns:
        CombatRules: The parsed rules, defaults filling missing keys.

    Raises:
        ValueError: If the file is missing or malformed.

    """
    try:
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected object in {filepath}, got {type(data).__name__}")
        return CombatRules(**data)
    except (json.JSONDecodeError, FileNotFoundError, ValueError) as e:
        raise ValueError(f"File {filepath} raised an error: {e}")
