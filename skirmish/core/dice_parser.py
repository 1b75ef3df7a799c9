"""
Dice parser module for the combat core.

Rolls damage expressions such as "2d6+1" declared by item and ability
payloads. The random source is always injected so rolls are reproducible.
"""

import re
from typing import Protocol

from catchery import log_warning
from pydantic import BaseModel, Field

DICE_PATTERN = re.compile(r"^(\d*)[dD](\d+)$")
TERM_PATTERN = re.compile(r"[+-]?[^+-]+")

MAX_DICE = 100
MAX_SIDES = 1000


class RandomSource(Protocol):
    """Anything exposing random() in [0, 1), such as random.Random."""

    def random(self) -> float: ...


class RollBreakdown(BaseModel):
    """Class to hold roll breakdown information."""

    value: int = Field(
        description="Total roll result",
    )
    description: str = Field(
        description="Description of the roll",
    )
    rolls: list[int] = Field(
        description="List of individual dice rolls",
        default_factory=list,
    )


def roll_die(sides: int, rng: RandomSource) -> int:
    """Rolls a single die with the given number of sides."""
    return int(rng.random() * sides) + 1


def split_terms(expr: str) -> list[str]:
    """
    Splits an expression into signed terms.

    Args:
        expr (str): The expression, e.g. '2d6+3-1'.

    Returns:
        list[str]: The signed terms, e.g. ['2D6', '+3', '-1'].

    """
    expr = expr.upper().replace(" ", "")
    if not expr:
        return []
    return TERM_PATTERN.findall(expr)


def is_valid_expression(expr: str) -> bool:
    """Returns True if every term is a constant or a well-formed dice term."""
    terms = split_terms(expr)
    if not terms:
        return False
    for term in terms:
        body = term.lstrip("+-")
        if body.isdigit():
            continue
        match = DICE_PATTERN.match(body)
        if not match:
            return False
        num = int(match.group(1)) if match.group(1) else 1
        sides = int(match.group(2))
        if not (0 < num <= MAX_DICE and 0 < sides <= MAX_SIDES):
            return False
    return True


def _roll_term(term: str, rng: RandomSource) -> tuple[int, list[int]]:
    sign = -1 if term.startswith("-") else 1
    body = term.lstrip("+-")
    if body.isdigit():
        return sign * int(body), []
    match = DICE_PATTERN.match(body)
    if not match:
        log_warning(
            f"Invalid dice string format: '{term}'",
            {"term": term},
        )
        return 0, []
    num = int(match.group(1)) if match.group(1) else 1
    sides = int(match.group(2))
    if not (0 < num <= MAX_DICE and 0 < sides <= MAX_SIDES):
        log_warning(
            f"Dice term out of bounds: '{term}'",
            {"term": term, "num": num, "sides": sides},
        )
        return 0, []
    rolls = [roll_die(sides, rng) for _ in range(num)]
    return sign * sum(rolls), rolls


def roll_and_describe(expr: str, rng: RandomSource) -> RollBreakdown:
    """
    Rolls a dice expression and provides a breakdown.

    Args:
        expr (str):
            The dice expression to roll.
        rng (RandomSource):
            The injected random source.

    Returns:
        RollBreakdown:
            The total (never negative), a description such as
            '2D6+1 → 4+2+1' and the individual dice results.

    """
    terms = split_terms(expr or "")
    if not terms:
        return RollBreakdown(value=0, description="", rolls=[])
    total = 0
    parts: list[str] = []
    all_rolls: list[int] = []
    for term in terms:
        value, rolls = _roll_term(term, rng)
        total += value
        all_rolls.extend(rolls)
        shown = "+".join(str(r) for r in rolls) if rolls else str(abs(value))
        sign = "-" if term.startswith("-") else "+"
        parts.append(shown if not parts and sign == "+" else f"{sign}{shown}")
    return RollBreakdown(
        value=max(0, total),
        description=f"{''.join(split_terms(expr))} → {''.join(parts)}",
        rolls=all_rolls,
    )


def roll_expression(expr: str, rng: RandomSource) -> int:
    """Rolls a dice expression and returns only the total."""
    return roll_and_describe(expr, rng).value
