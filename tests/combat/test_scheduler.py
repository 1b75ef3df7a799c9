"""
Tests for initiative ordering and turn advancement.
"""

import pytest
from skirmish.combat.scheduler import TurnScheduler, compute_order


@pytest.fixture
def roster(make_combatant):
    return {
        c.id: c
        for c in [
            make_combatant(id="a", speed=5),
            make_combatant(id="b", speed=7),
            make_combatant(id="c", speed=5),
            make_combatant(id="d", speed=9, health=0),
        ]
    }


def test_order_by_speed_then_id(roster):
    assert compute_order(roster.values()) == ["b", "a", "c"]


def test_compute_order_rewinds(roster):
    scheduler = TurnScheduler()
    scheduler.current_index = 2
    scheduler.compute_order(roster.values())
    assert scheduler.order == ["b", "a", "c"]
    assert scheduler.current_index == 0
    assert scheduler.current_id == "b"
    assert scheduler.round == 1


def test_advance_within_round(roster):
    scheduler = TurnScheduler()
    scheduler.compute_order(roster.values())
    assert not scheduler.advance(roster)
    assert scheduler.current_id == "a"


def test_advance_skips_the_dead(roster):
    scheduler = TurnScheduler()
    scheduler.compute_order(roster.values())
    roster["a"].apply_damage(100)
    assert not scheduler.advance(roster)
    assert scheduler.current_id == "c"


def test_advance_skips_health_set_to_zero(roster):
    scheduler = TurnScheduler()
    scheduler.compute_order(roster.values())
    roster["a"].health = 0
    assert not scheduler.advance(roster)
    assert scheduler.current_id == "c"
    assert compute_order(roster.values()) == ["b", "c"]


def test_advance_wraps_into_new_round(roster):
    scheduler = TurnScheduler()
    scheduler.compute_order(roster.values())
    scheduler.advance(roster)
    scheduler.advance(roster)
    assert scheduler.advance(roster)
    assert scheduler.round == 2
    assert scheduler.current_index == 0


def test_empty_scheduler_has_no_current():
    assert TurnScheduler().current_id is None
