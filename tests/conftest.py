"""
Shared fixtures for the combat core tests.
"""

import pytest
from skirmish.combatant.main import Combatant
from skirmish.core.hex_grid import HexCoord
from skirmish.encounters.combat_encounter import (
    CombatEncounter,
    EncounterEnemy,
    RewardItem,
    RewardTable,
)
from skirmish.encounters.enemy_definition import EnemyDefinition
from skirmish.encounters.player_profile import PlayerProfile


class ScriptedRandom:
    """A random source that returns pre-recorded values in order."""

    def __init__(self, *values: float) -> None:
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        if not self.values:
            raise AssertionError("ScriptedRandom ran out of values")
        self.calls += 1
        return self.values.pop(0)


@pytest.fixture
def scripted_rng():
    """Factory for scripted random sources."""
    return ScriptedRandom


@pytest.fixture
def make_combatant():
    """Factory for combatants with sensible defaults."""

    def _make(**overrides) -> Combatant:
        data = {
            "id": "fighter",
            "definition_id": "fighter",
            "display_name": "Fighter",
            "health": 30,
            "max_health": 30,
            "action_points": 6,
            "max_action_points": 6,
            "base_damage": 5,
            "accuracy": 70,
            "evasion": 0,
            "speed": 5,
        }
        data.update(overrides)
        return Combatant(**data)

    return _make


@pytest.fixture
def bandit():
    return EnemyDefinition(
        id="bandit",
        name="Bandit",
        max_health=20,
        action_points=4,
        base_damage=5,
        accuracy_mod=-5,
        evasion=10,
        weapon_id="revolver",
        xp_reward=15,
    )


@pytest.fixture
def coyote():
    return EnemyDefinition(
        id="coyote",
        name="Coyote",
        max_health=12,
        action_points=5,
        base_damage=4,
        evasion=20,
    )


@pytest.fixture
def enemy_lookup(bandit, coyote):
    return {bandit.id: bandit, coyote.id: coyote}


@pytest.fixture
def encounter():
    return CombatEncounter(
        id="ambush",
        name="Ambush",
        enemies=[
            EncounterEnemy(enemy_id="bandit", count=2),
            EncounterEnemy(enemy_id="coyote", count=1),
        ],
        rewards=RewardTable(
            xp=40,
            gold=16,
            items=[RewardItem(item_id="bandage", quantity=2, chance=0.5)],
        ),
    )


@pytest.fixture
def player_profile():
    return PlayerProfile(
        id="player",
        name="Marshal",
        level=3,
        max_health=40,
        action_points=6,
        base_damage=8,
        accuracy=75,
        evasion=10,
        speed=6,
        weapon_id="revolver",
        magazine_capacity=6,
        attack_range=6,
        position=HexCoord(q=0, r=0),
    )
