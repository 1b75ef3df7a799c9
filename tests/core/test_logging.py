"""
Tests for log record formatting and the combat log events a session emits.
"""

import logging

import pytest
from skirmish.combat.action import CombatAction
from skirmish.combat.combat_session import CombatSession
from skirmish.core.constants import ActionType
from skirmish.core.error_handling import InvalidTarget
from skirmish.core.logging import format_context, log_combat_event


@pytest.fixture
def debug_records(caplog):
    caplog.set_level(logging.DEBUG, logger="skirmish")
    return caplog


def test_format_context():
    assert format_context("Hit") == "Hit"
    assert format_context("Hit", {}) == "Hit"
    assert format_context("Hit", {"damage": 9, "critical": False}) == (
        "Hit [damage=9 critical=False]"
    )
    assert format_context("Hit", {"roll": None, "damage": 9}) == "Hit [damage=9]"
    assert format_context("Hit", {"roll": None}) == "Hit"


def test_combat_error_uses_the_same_format():
    error = InvalidTarget("Out of range", {"actor": "player", "target": "bandit_0"})
    assert str(error) == "Out of range [actor=player target=bandit_0]"
    assert str(InvalidTarget("Out of range")) == "Out of range"


def test_log_combat_event(debug_records):
    log_combat_event(2, 7, "Coyote ends the turn.", {"ap_left": 0})
    assert debug_records.records[-1].levelno == logging.DEBUG
    assert debug_records.messages[-1] == "[2:7] Coyote ends the turn. [ap_left=0]"


def test_session_logs_every_entry(
    debug_records, encounter, enemy_lookup, player_profile, scripted_rng
):
    session = CombatSession(
        encounter, enemy_lookup, [player_profile], scripted_rng(0.0, 0.5)
    )
    session.submit_action(
        CombatAction(actor_id="player", type=ActionType.ATTACK, target_id="bandit_0")
    )
    session.submit_action(CombatAction(actor_id="player", type=ActionType.END_TURN))
    events = [m for m in debug_records.messages if m.startswith("[1:")]
    assert events == [
        "[1:0] Marshal attacks Bandit A for 9 damage! [ap_left=4]",
        "[1:1] Marshal ends the turn. [ap_left=4]",
    ]
