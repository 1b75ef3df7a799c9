"""
Combatant module for the combat core.

This module handles the per-session state of every battle participant and
its creation from enemy definitions and player profiles.
"""

from .factory import (
    create_encounter_enemies,
    create_enemy_combatants,
    create_player_combatant,
)
from .main import Combatant

__all__ = [
    # Import from main.py
    "Combatant",
    # Import from factory.py
    "create_encounter_enemies",
    "create_enemy_combatants",
    "create_player_combatant",
]
