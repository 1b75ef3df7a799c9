"""
Tests for dice expression parsing and rolling.
"""

import pytest
from skirmish.core.dice_parser import (
    is_valid_expression,
    roll_and_describe,
    roll_die,
    roll_expression,
    split_terms,
)


def test_roll_die_maps_unit_interval(scripted_rng):
    rng = scripted_rng(0.0, 0.5, 0.999)
    assert roll_die(6, rng) == 1
    assert roll_die(6, rng) == 4
    assert roll_die(6, rng) == 6


def test_split_terms_keeps_signs():
    assert split_terms("2d6 + 3 - 1") == ["2D6", "+3", "-1"]
    assert split_terms("") == []


@pytest.mark.parametrize("expr", ["1d6", "2d6+1", "d8", "3", "1d4-1"])
def test_valid_expressions(expr):
    assert is_valid_expression(expr)


@pytest.mark.parametrize("expr", ["", "abc", "0d6", "1d0", "1d1001", "2x6"])
def test_invalid_expressions(expr):
    assert not is_valid_expression(expr)


def test_roll_and_describe(scripted_rng):
    breakdown = roll_and_describe("2d6+1", scripted_rng(0.5, 0.1))
    assert breakdown.value == 6
    assert breakdown.rolls == [4, 1]
    assert breakdown.description == "2D6+1 → 4+1+1"


def test_roll_never_negative(scripted_rng):
    assert roll_expression("1d4-10", scripted_rng(0.0)) == 0


def test_constant_expression_draws_nothing(scripted_rng):
    rng = scripted_rng()
    assert roll_expression("7", rng) == 7
    assert rng.calls == 0


def test_empty_expression_rolls_zero(scripted_rng):
    breakdown = roll_and_describe("", scripted_rng())
    assert breakdown.value == 0
    assert breakdown.description == ""
