"""
Combatant factory module.

Builds session combatants from immutable content: enemy definitions listed by
an encounter and the player profiles of the roster.
"""

from collections import Counter
from string import ascii_uppercase
from typing import Mapping

from skirmish.core.config import DEFAULT_RULES, CombatRules
from skirmish.core.error_handling import InvalidEncounter
from skirmish.core.hex_grid import HexCoord
from skirmish.encounters.combat_encounter import CombatEncounter, EncounterEnemy
from skirmish.encounters.enemy_definition import EnemyDefinition
from skirmish.encounters.player_profile import PlayerProfile

from .main import Combatant


def _letter_suffix(ordinal: int) -> str:
    """Returns 'A', 'B', ... 'Z', 'AA', 'AB' for ordinals 0, 1, ..."""
    suffix = ""
    ordinal += 1
    while ordinal > 0:
        ordinal, remainder = divmod(ordinal - 1, len(ascii_uppercase))
        suffix = ascii_uppercase[remainder] + suffix
    return suffix


def create_enemy_combatants(
    entry: EncounterEnemy,
    definition: EnemyDefinition,
    start_index: int,
    rules: CombatRules = DEFAULT_RULES,
    letter_offset: int = 0,
    duplicated: bool | None = None,
) -> list[Combatant]:
    """
    Instantiates the enemies of one encounter line.

    Args:
        entry (EncounterEnemy):
            The encounter line (enemy id, count, level).
        definition (EnemyDefinition):
            The stat block of the enemy.
        start_index (int):
            Index of the first spawned enemy among all enemies of the
            encounter. Drives the id and the starting position.
        rules (CombatRules):
            Supplies the base enemy accuracy and the default magazine size.
        letter_offset (int):
            How many enemies of the same definition were spawned before.
        duplicated (bool | None):
            Whether names get letter suffixes. Defaults to count > 1.

    Returns:
        list[Combatant]:
            The spawned combatants, ids '<enemy_id>_<n>'.

    """
    if duplicated is None:
        duplicated = entry.count > 1
    magazine = rules.default_magazine_size if definition.weapon_id else 0
    combatants: list[Combatant] = []
    for offset in range(entry.count):
        index = start_index + offset
        name = definition.name
        if duplicated:
            name = f"{definition.name} {_letter_suffix(letter_offset + offset)}"
        combatants.append(
            Combatant(
                id=f"{definition.id}_{index}",
                definition_id=definition.id,
                display_name=name,
                is_player_controlled=False,
                behavior=definition.behavior.value,
                level=entry.level or 1,
                health=definition.max_health,
                max_health=definition.max_health,
                action_points=definition.action_points,
                max_action_points=definition.action_points,
                base_damage=definition.base_damage,
                armor=definition.armor,
                accuracy=rules.base_enemy_accuracy + definition.accuracy_mod,
                evasion=definition.evasion,
                speed=definition.action_points,
                attack_range=definition.effective_range,
                position=HexCoord(q=1 + index, r=0),
                weapon_id=definition.weapon_id,
                magazine_capacity=magazine,
                ammo_in_magazine=magazine,
            )
        )
    return combatants


def create_encounter_enemies(
    encounter: CombatEncounter,
    enemy_lookup: Mapping[str, EnemyDefinition],
    rules: CombatRules = DEFAULT_RULES,
) -> list[Combatant]:
    """
    Instantiates every enemy of an encounter in declaration order.

    Definitions spawned more than once across the whole encounter get letter
    suffixes ('Bandit A', 'Bandit B').

    Raises:
        InvalidEncounter: If the encounter lists no enemies or an unknown id.

    """
    if not encounter.enemies or encounter.enemy_count == 0:
        raise InvalidEncounter(
            f"Encounter '{encounter.id}' has no enemies",
            {"encounter": encounter.id},
        )
    unknown = [e.enemy_id for e in encounter.enemies if e.enemy_id not in enemy_lookup]
    if unknown:
        raise InvalidEncounter(
            f"Encounter '{encounter.id}' references unknown enemies: {', '.join(unknown)}",
            {"encounter": encounter.id},
        )
    totals = Counter()
    for entry in encounter.enemies:
        totals[entry.enemy_id] += entry.count
    spawned = Counter()
    combatants: list[Combatant] = []
    for entry in encounter.enemies:
        combatants.extend(
            create_enemy_combatants(
                entry,
                enemy_lookup[entry.enemy_id],
                start_index=len(combatants),
                rules=rules,
                letter_offset=spawned[entry.enemy_id],
                duplicated=totals[entry.enemy_id] > 1,
            )
        )
        spawned[entry.enemy_id] += entry.count
    return combatants


def create_player_combatant(profile: PlayerProfile, index: int = 0) -> Combatant:
    """
    Builds the combatant of one roster member.

    Args:
        profile (PlayerProfile):
            The externally owned player stats.
        index (int):
            Position in the roster, used for the default position (0, index).

    Returns:
        Combatant:
            The player-controlled combatant.

    """
    health = profile.max_health if profile.health is None else profile.health
    ammo = profile.ammo_in_magazine
    if ammo is None:
        ammo = profile.magazine_capacity
    return Combatant(
        id=profile.id,
        definition_id=profile.id,
        display_name=profile.name,
        is_player_controlled=True,
        level=profile.level,
        health=health,
        max_health=profile.max_health,
        action_points=profile.action_points,
        max_action_points=profile.action_points,
        base_damage=profile.base_damage,
        armor=profile.armor,
        accuracy=profile.accuracy,
        evasion=profile.evasion,
        speed=profile.speed,
        attack_range=profile.attack_range,
        position=profile.position or HexCoord(q=0, r=index),
        weapon_id=profile.weapon_id,
        magazine_capacity=profile.magazine_capacity,
        ammo_in_magazine=ammo,
        status_effects=[effect.model_copy() for effect in profile.status_effects],
    )
