"""
Tests for the combat session: turn flow, validation, action application,
status ticks and termination.
"""

import random

import pytest
from skirmish.combat.action import ActionPayload, CombatAction
from skirmish.combat.combat_session import CombatSession
from skirmish.core.constants import ActionType, CombatPhase, ResultSource, StatusKind
from skirmish.core.error_handling import (
    CombatOver,
    IllegalFlee,
    InsufficientActionPoints,
    InvalidAction,
    InvalidEncounter,
    InvalidTarget,
    NoAmmo,
    NotActiveCombatant,
)
from skirmish.core.hex_grid import HexCoord
from skirmish.effects.base_effect import StatusEffect
from skirmish.encounters.player_profile import PlayerProfile
from skirmish.main import run_battle

BANDAGE = ActionPayload(id="bandage", name="Bandage", heal_amount=15, targets_self=True)
FLASH_POWDER = ActionPayload(
    id="flash_powder",
    name="Flash Powder",
    ap_cost=3,
    range=3,
    status_effect=StatusEffect(kind="stunned", turns_remaining=1),
)
SERRATED_SHOT = ActionPayload(
    id="serrated_shot",
    name="Serrated Shot",
    ap_cost=3,
    damage_roll="1d6+1",
    status_effect=StatusEffect(kind="bleeding", turns_remaining=2, magnitude=10),
)
DYNAMITE = ActionPayload(
    id="dynamite", name="Dynamite", ap_cost=4, range=4, base_damage=10, damage_roll="1d6"
)


@pytest.fixture
def make_session(encounter, enemy_lookup, player_profile, scripted_rng):
    """Factory for sessions over the ambush encounter."""

    def _make(*values, players=None, rng=None, payloads=None, **encounter_updates):
        return CombatSession(
            encounter.model_copy(update=encounter_updates),
            enemy_lookup,
            players or [player_profile],
            rng or scripted_rng(*values),
            payloads=payloads,
            clock=lambda: 1000.0,
        )

    return _make


def profile(player_profile, **updates) -> PlayerProfile:
    return player_profile.model_copy(update=updates)


def act(session, action_type, actor_id="player", **kwargs):
    return session.submit_action(
        CombatAction(actor_id=actor_id, type=action_type, **kwargs)
    )


def end_turns(session, *actor_ids):
    for actor_id in actor_ids:
        act(session, ActionType.END_TURN, actor_id)


# ============================================================================
# SETUP
# ============================================================================


def test_initial_state(make_session):
    session = make_session()
    assert session.turn_order == ["player", "coyote_2", "bandit_0", "bandit_1"]
    assert session.active_combatant.id == "player"
    assert session.phase == CombatPhase.PLAYER_TURN
    assert session.phase_history == [CombatPhase.STARTING, CombatPhase.PLAYER_TURN]
    assert session.round == 1
    assert session.current_turn_index == 0
    assert session.started_at == 1000.0
    assert session.log == []


def test_enemies_are_placed_in_a_row(make_session):
    session = make_session()
    assert session.get_combatant("bandit_0").position == HexCoord(q=1, r=0)
    assert session.get_combatant("coyote_2").position == HexCoord(q=3, r=0)
    assert [e.display_name for e in session.enemies] == ["Bandit A", "Bandit B", "Coyote"]


def test_accepts_prebuilt_combatants(make_session, make_combatant):
    session = make_session(players=[make_combatant(id="hero", speed=1)])
    hero = session.get_combatant("hero")
    assert hero.is_player_controlled
    assert session.turn_order[-1] == "hero"
    assert session.active_combatant.id == "coyote_2"
    assert session.phase == CombatPhase.ENEMY_TURN


def test_rejects_duplicate_ids(make_session, player_profile):
    with pytest.raises(InvalidEncounter):
        make_session(players=[player_profile, player_profile])


def test_rejects_empty_roster(encounter, enemy_lookup, scripted_rng):
    with pytest.raises(InvalidEncounter):
        CombatSession(encounter, enemy_lookup, [], scripted_rng())


# ============================================================================
# ATTACKS
# ============================================================================


def test_attack_hits(make_session):
    session = make_session(0.0, 0.5)
    result = act(session, ActionType.ATTACK, target_id="bandit_0")
    assert result.success
    assert result.hit_chance == 65
    assert result.damage == 9
    assert result.target_health_remaining == 11
    assert result.sequence == 0
    assert result.round == 1
    assert result.ap_spent == 2
    assert result.actor_id == "player"
    assert result.action_type == ActionType.ATTACK
    player = session.get_combatant("player")
    assert player.ammo_in_magazine == 5
    assert player.action_points == 4
    assert player.has_acted_this_turn
    assert session.active_combatant is player


def test_miss_still_uses_ammo(make_session, scripted_rng):
    rng = scripted_rng(0.99)
    session = make_session(rng=rng)
    result = act(session, ActionType.ATTACK, target_id="bandit_0")
    assert not result.success
    assert result.was_dodged
    assert result.damage == 0
    assert "misses" in result.message
    assert session.get_combatant("player").ammo_in_magazine == 5
    assert rng.calls == 1


def test_aimed_shot_bonus(make_session):
    session = make_session(0.0, 0.5)
    result = act(session, ActionType.AIMED_SHOT, target_id="bandit_1")
    assert result.hit_chance == 90
    assert result.ap_spent == 4
    assert "takes aim at" in result.message


def test_critical_hit(make_session):
    session = make_session(0.0, 0.0)
    result = act(session, ActionType.ATTACK, target_id="bandit_0")
    assert result.is_critical
    assert result.damage == 18
    assert "Critical hit!" in result.message


def test_killing_blow(make_session):
    session = make_session(0.0, 0.5)
    session.get_combatant("bandit_0").health = 1
    result = act(session, ActionType.ATTACK, target_id="bandit_0")
    assert result.damage == 1
    assert result.target_killed
    assert result.message.endswith("is defeated!")
    assert session.get_combatant("bandit_0").is_dead
    assert session.phase == CombatPhase.PLAYER_TURN


def test_payload_attack_applies_effect(make_session):
    session = make_session(0.0, 0.5, 0.5, payloads=[SERRATED_SHOT])
    result = act(
        session, ActionType.ATTACK, target_id="bandit_0", payload_id="serrated_shot"
    )
    assert result.ap_spent == 3
    assert result.damage == 14
    assert result.status_effect.kind == StatusKind.BLEEDING.value
    assert result.status_effect.source_id == "player"
    assert "for 14 damage (1D6+1 → 4+1)!" in result.message
    assert "Bandit A is bleeding." in result.message
    assert session.get_combatant("bandit_0").has_status(StatusKind.BLEEDING)


def test_debuffed_attacker_is_less_accurate_and_weaker(make_session):
    session = make_session(0.0, 0.5)
    session.get_combatant("player").add_status_effect(
        StatusEffect(kind=StatusKind.DEBUFFED, turns_remaining=2, magnitude=20)
    )
    result = act(session, ActionType.ATTACK, target_id="bandit_0")
    assert result.hit_chance == 50
    assert result.damage == 7
    assert result.message == "Marshal attacks Bandit A for 7 damage!"


def test_buffed_defender_has_more_armor(make_session):
    session = make_session(0.0, 0.5)
    bandit = session.get_combatant("bandit_0")
    bandit.armor = 4
    bandit.add_status_effect(StatusEffect(kind="buffed", turns_remaining=2, magnitude=50))
    result = act(session, ActionType.ATTACK, target_id="bandit_0")
    assert result.damage == 3
    assert bandit.health == 17


def test_running_out_of_points_passes_the_turn(make_session, player_profile):
    session = make_session(0.99, 0.99, players=[profile(player_profile, action_points=4)])
    act(session, ActionType.ATTACK, target_id="bandit_0")
    act(session, ActionType.ATTACK, target_id="bandit_0")
    assert session.active_combatant.id == "coyote_2"
    assert session.phase == CombatPhase.ENEMY_TURN


# ============================================================================
# REJECTIONS
# ============================================================================


@pytest.mark.parametrize("points", [1, 3])
def test_insufficient_action_points(make_session, player_profile, points):
    session = make_session(players=[profile(player_profile, action_points=points)])
    with pytest.raises(InsufficientActionPoints):
        act(session, ActionType.AIMED_SHOT, target_id="bandit_0")
    player = session.get_combatant("player")
    assert player.action_points == points
    assert player.ammo_in_magazine == 6
    assert session.log == []


def test_not_active_combatant(make_session):
    session = make_session()
    with pytest.raises(NotActiveCombatant):
        act(session, ActionType.END_TURN, "bandit_0")
    with pytest.raises(NotActiveCombatant):
        act(session, ActionType.END_TURN, "nobody")


@pytest.mark.parametrize("target_id", [None, "ghost", "player"])
def test_invalid_attack_targets(make_session, target_id):
    session = make_session()
    with pytest.raises(InvalidTarget):
        act(session, ActionType.ATTACK, target_id=target_id)


def test_cannot_attack_an_ally(make_session, player_profile):
    doc = PlayerProfile(id="doc", name="Doc", max_health=30)
    session = make_session(players=[player_profile, doc])
    with pytest.raises(InvalidTarget):
        act(session, ActionType.ATTACK, target_id="doc")


def test_cannot_attack_the_dead(make_session):
    session = make_session()
    session.get_combatant("bandit_0").apply_damage(100)
    with pytest.raises(InvalidTarget):
        act(session, ActionType.ATTACK, target_id="bandit_0")


def test_out_of_range(make_session, player_profile):
    session = make_session(players=[profile(player_profile, attack_range=1)])
    with pytest.raises(InvalidTarget):
        act(session, ActionType.ATTACK, target_id="bandit_1")


def test_no_ammo(make_session, player_profile):
    session = make_session(players=[profile(player_profile, ammo_in_magazine=0)])
    with pytest.raises(NoAmmo):
        act(session, ActionType.ATTACK, target_id="bandit_0")


def test_unknown_payload(make_session):
    session = make_session()
    with pytest.raises(InvalidAction):
        act(session, ActionType.USE_ITEM, payload_id="moonshine")
    with pytest.raises(InvalidAction):
        act(session, ActionType.USE_ITEM)


def test_validate_action_does_not_mutate(make_session):
    session = make_session()
    action = CombatAction(
        actor_id="player", type=ActionType.AIMED_SHOT, target_id="bandit_0"
    )
    assert session.validate_action(action) == 4
    assert session.can_perform(action)
    assert session.get_combatant("player").action_points == 6
    assert session.log == []


# ============================================================================
# OTHER ACTIONS
# ============================================================================


def test_reload(make_session, player_profile):
    session = make_session(players=[profile(player_profile, ammo_in_magazine=0)])
    result = act(session, ActionType.RELOAD)
    assert result.message == "Marshal reloads 6 rounds."
    assert result.ap_spent == 2
    assert session.get_combatant("player").ammo_in_magazine == 6
    with pytest.raises(InvalidAction):
        act(session, ActionType.RELOAD)


def test_reload_without_magazine(make_session, player_profile):
    session = make_session(players=[profile(player_profile, magazine_capacity=0)])
    with pytest.raises(InvalidAction):
        act(session, ActionType.RELOAD)


def test_move(make_session):
    session = make_session()
    result = act(session, ActionType.MOVE, target_position=HexCoord(q=0, r=3))
    assert result.destination == HexCoord(q=0, r=3)
    assert result.ap_spent == 3
    player = session.get_combatant("player")
    assert player.position == HexCoord(q=0, r=3)
    assert player.action_points == 3


@pytest.mark.parametrize(
    "destination",
    [None, HexCoord(q=0, r=0), HexCoord(q=1, r=0)],
    ids=["missing", "same_hex", "occupied"],
)
def test_invalid_moves(make_session, destination):
    session = make_session()
    with pytest.raises(InvalidTarget):
        act(session, ActionType.MOVE, target_position=destination)


def test_move_too_far(make_session):
    session = make_session()
    with pytest.raises(InsufficientActionPoints):
        act(session, ActionType.MOVE, target_position=HexCoord(q=0, r=7))


def test_use_item_heals(make_session, player_profile):
    session = make_session(players=[profile(player_profile, health=20)], payloads=[BANDAGE])
    result = act(session, ActionType.USE_ITEM, payload_id="bandage")
    assert result.healing == 15
    assert result.target_id == "player"
    assert result.target_health_remaining == 35
    assert result.ap_spent == 2


def test_use_item_deals_damage(make_session, scripted_rng):
    rng = scripted_rng(0.5)
    session = make_session(rng=rng, payloads=[DYNAMITE])
    result = act(
        session, ActionType.USE_ITEM, target_id="bandit_0", payload_id="dynamite"
    )
    assert result.damage == 15
    assert result.target_id == "bandit_0"
    assert result.target_health_remaining == 5
    assert result.ap_spent == 4
    assert not result.target_killed
    assert result.message == "Marshal uses Dynamite on Bandit A for 15 damage (1D6 → 4)."
    assert rng.calls == 1


def test_use_item_can_kill(make_session):
    session = make_session(0.5, payloads=[DYNAMITE])
    session.get_combatant("coyote_2").health = 3
    result = act(
        session, ActionType.USE_ITEM, target_id="coyote_2", payload_id="dynamite"
    )
    assert result.target_killed
    assert result.message.endswith("Coyote is defeated!")


@pytest.mark.parametrize("target_id", [None, "player"])
def test_damaging_item_needs_an_opponent(make_session, scripted_rng, target_id):
    rng = scripted_rng()
    session = make_session(rng=rng, payloads=[DYNAMITE])
    with pytest.raises(InvalidTarget):
        act(session, ActionType.USE_ITEM, target_id=target_id, payload_id="dynamite")
    assert session.get_combatant("player").action_points == 6
    assert session.log == []
    assert rng.calls == 0


def test_defend_halves_damage_until_next_turn(make_session):
    session = make_session(0.0, 0.5)
    act(session, ActionType.DEFEND)
    player = session.get_combatant("player")
    assert player.is_defending()
    end_turns(session, "player", "coyote_2")
    result = act(session, ActionType.ATTACK, "bandit_0", target_id="player")
    assert result.hit_chance == 55
    assert result.damage == 2
    assert player.health == 38
    end_turns(session, "bandit_0", "bandit_1")
    assert session.round == 2
    assert session.active_combatant is player
    assert not player.is_defending()


# ============================================================================
# FLEEING
# ============================================================================


def test_successful_flee(make_session):
    session = make_session(0.0)
    result = act(session, ActionType.FLEE)
    assert result.success
    assert result.hit_chance == 43
    assert session.phase == CombatPhase.FLED
    assert session.is_over()
    assert session.active_combatant is None
    assert session.rewards_request() is None
    with pytest.raises(CombatOver):
        act(session, ActionType.END_TURN)


def test_failed_flee(make_session):
    session = make_session(0.99)
    result = act(session, ActionType.FLEE)
    assert not result.success
    assert session.phase == CombatPhase.PLAYER_TURN
    assert session.get_combatant("player").action_points == 3


def test_flee_forbidden(make_session):
    session = make_session(can_flee=False)
    with pytest.raises(IllegalFlee):
        act(session, ActionType.FLEE)


def test_enemies_cannot_flee(make_session):
    session = make_session()
    end_turns(session, "player")
    with pytest.raises(InvalidAction):
        act(session, ActionType.FLEE, "coyote_2")


# ============================================================================
# TERMINATION
# ============================================================================


def test_victory_after_external_kills(make_session):
    session = make_session()
    for enemy in session.enemies:
        enemy.apply_damage(100)
    act(session, ActionType.END_TURN)
    assert session.phase == CombatPhase.VICTORY
    assert session.phase_history[-1] == CombatPhase.VICTORY
    rewards = session.rewards_request()
    assert rewards.encounter_id == "ambush"
    assert rewards.xp == 40
    assert rewards.gold == 16
    assert rewards.items[0].item_id == "bandage"


def test_victory_after_health_is_set_to_zero(make_session):
    session = make_session()
    for enemy in session.enemies:
        enemy.health = 0
    act(session, ActionType.END_TURN)
    assert session.phase == CombatPhase.VICTORY
    assert session.active_combatant is None
    assert session.valid_targets("player", in_range=False) == []


def test_victory_on_last_kill(make_session):
    session = make_session(0.0, 0.5)
    session.get_combatant("bandit_0").apply_damage(100)
    session.get_combatant("bandit_1").apply_damage(100)
    session.get_combatant("coyote_2").health = 1
    result = act(session, ActionType.ATTACK, target_id="coyote_2")
    assert result.target_killed
    assert session.phase == CombatPhase.VICTORY
    assert session.active_combatant is None


def test_defeat_by_poison(make_session, player_profile):
    poisoned = StatusEffect(kind="poisoned", turns_remaining=2, magnitude=3)
    session = make_session(
        players=[profile(player_profile, health=1, status_effects=[poisoned])]
    )
    end_turns(session, "player", "coyote_2", "bandit_0", "bandit_1")
    assert session.phase == CombatPhase.DEFEAT
    tick = session.log[-1]
    assert tick.source == ResultSource.STATUS_EFFECT
    assert tick.round == 1
    assert tick.target_id == "player"
    assert tick.target_killed


# ============================================================================
# ROUNDS, TICKS AND STUNS
# ============================================================================


def test_round_boundary_ticks_effects(make_session):
    session = make_session(0.0, 0.5, 0.5, payloads=[SERRATED_SHOT])
    act(session, ActionType.ATTACK, target_id="bandit_0", payload_id="serrated_shot")
    end_turns(session, "player", "coyote_2", "bandit_0", "bandit_1")
    assert session.round == 2
    tick = session.log[-1]
    assert tick.source == ResultSource.STATUS_EFFECT
    assert tick.round == 1
    assert tick.actor_id == "player"
    assert tick.target_id == "bandit_0"
    assert tick.damage == 2
    assert session.get_combatant("bandit_0").health == 4
    assert [r.sequence for r in session.log] == list(range(len(session.log)))


def test_stunned_player_loses_first_turn(make_session, player_profile):
    stunned = StatusEffect(kind="stunned", turns_remaining=1)
    session = make_session(players=[profile(player_profile, status_effects=[stunned])])
    skip = session.log[0]
    assert skip.source == ResultSource.TURN_SKIP
    assert skip.actor_id == "player"
    assert skip.round == 1
    assert skip.ap_spent == 0
    assert session.active_combatant.id == "coyote_2"
    end_turns(session, "coyote_2", "bandit_0", "bandit_1")
    assert session.round == 2
    assert session.active_combatant.id == "player"
    assert not session.get_combatant("player").is_stunned()


def test_flash_powder_skips_the_coyote(make_session):
    session = make_session(payloads=[FLASH_POWDER])
    result = act(
        session, ActionType.USE_ITEM, target_id="coyote_2", payload_id="flash_powder"
    )
    assert result.status_effect.kind == StatusKind.STUNNED.value
    assert result.ap_spent == 3
    end_turns(session, "player")
    assert session.log[-1].source == ResultSource.TURN_SKIP
    assert session.log[-1].actor_id == "coyote_2"
    assert session.active_combatant.id == "bandit_0"


def test_dead_combatants_are_skipped(make_session):
    session = make_session()
    session.get_combatant("bandit_0").apply_damage(100)
    end_turns(session, "player", "coyote_2")
    assert session.active_combatant.id == "bandit_1"
    end_turns(session, "bandit_1")
    assert session.turn_order == ["player", "coyote_2", "bandit_1"]


# ============================================================================
# QUERIES
# ============================================================================


def test_available_actions(make_session):
    session = make_session()
    assert session.available_actions("player") == [
        ActionType.ATTACK,
        ActionType.AIMED_SHOT,
        ActionType.MOVE,
        ActionType.DEFEND,
        ActionType.FLEE,
        ActionType.END_TURN,
    ]
    assert session.available_actions("bandit_0") == []


def test_valid_targets(make_session, player_profile):
    session = make_session(players=[profile(player_profile, attack_range=2)])
    assert [t.id for t in session.valid_targets("player")] == ["bandit_0", "bandit_1"]
    assert len(session.valid_targets("player", in_range=False)) == 3
    assert session.valid_targets("ghost") == []


def test_snapshot_is_a_copy(make_session):
    session = make_session()
    snapshot = session.snapshot()
    assert snapshot.active_id == "player"
    assert snapshot.phase == CombatPhase.PLAYER_TURN
    assert snapshot.turn_order == session.turn_order
    snapshot.combatants[0].health = 1
    assert session.get_combatant("player").health == 40


def test_same_seed_same_log(encounter, enemy_lookup, player_profile):
    def play():
        session = CombatSession(encounter, enemy_lookup, [player_profile], random.Random(7))
        run_battle(session, verbose=False)
        return [result.model_dump_json() for result in session.log]

    first = play()
    assert first
    assert first == play()
