"""
Tests for the terminal rendering of results and snapshots.
"""

from rich.table import Table
from skirmish.combat.combat_result import CombatResult
from skirmish.combat.combat_session import CombatSession
from skirmish.core.constants import ActionType, ResultSource
from skirmish.core.utils import ccapture
from skirmish.effects.base_effect import StatusEffect
from skirmish.main import main
from skirmish.ui.log_printer import build_roster_table, format_result, format_status_line


def test_status_line(make_combatant):
    gunner = make_combatant(
        display_name="Gunner",
        magazine_capacity=6,
        ammo_in_magazine=2,
        status_effects=[StatusEffect(kind="poisoned", turns_remaining=2, magnitude=1)],
    )
    line = format_status_line(gunner, show_bars=False)
    assert "HP: 30/30" in line
    assert "Ammo:2/6" in line
    assert "(2)" in line


def test_status_line_of_the_dead(make_combatant):
    assert "defeated" in format_status_line(make_combatant(health=0))


def test_format_critical_result():
    result = CombatResult(
        actor_id="player",
        action_type=ActionType.ATTACK,
        is_critical=True,
        hit_chance=65,
        ap_spent=2,
        message="Marshal attacks Bandit A for 18 damage! Critical hit!",
    )
    line = format_result(result)
    assert line.startswith("[bold yellow]")
    assert "(65%)" in line
    assert "-2 AP" in line


def test_format_turn_skip():
    result = CombatResult(source=ResultSource.TURN_SKIP, success=False, message="skip")
    assert "💫" in format_result(result)


def test_roster_table(encounter, enemy_lookup, player_profile, scripted_rng):
    session = CombatSession(encounter, enemy_lookup, [player_profile], scripted_rng())
    table = build_roster_table(session.snapshot())
    assert isinstance(table, Table)
    assert table.row_count == 4
    rendered = ccapture(table)
    assert "Bandit A" in rendered
    assert "Player turn" in rendered


def test_main_rejects_unknown_encounter():
    assert main(["--encounter", "nope"]) == 1


def test_main_runs_a_seeded_battle():
    assert main(["--seed", "3", "--json"]) == 0
