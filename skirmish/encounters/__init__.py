"""
Encounter content module.

Immutable records handed to the combat core by the content library: enemy
stat blocks, scripted encounters with their reward tables, and the player
profiles that make up the roster.
"""

from .combat_encounter import CombatEncounter, EncounterEnemy, RewardItem, RewardTable
from .enemy_definition import EnemyDefinition
from .player_profile import PlayerProfile

__all__ = [
    "CombatEncounter",
    "EncounterEnemy",
    "EnemyDefinition",
    "PlayerProfile",
    "RewardItem",
    "RewardTable",
]
