"""
Core system module for the combat core.

This module contains the fundamental components shared by every other module:
constants, balancing rules, the error taxonomy, logging, hex arithmetic, dice
rolling and console helpers. The content repository lives in core.content and
is imported from there, since it depends on the content models.
"""

from .config import DEFAULT_RULES, CombatRules, load_rules
from .constants import (
    AP_COSTS,
    ActionType,
    CombatPhase,
    EnemyBehavior,
    ResultSource,
    StatusKind,
)
from .dice_parser import (
    RandomSource,
    RollBreakdown,
    is_valid_expression,
    roll_and_describe,
    roll_expression,
)
from .error_handling import (
    CombatError,
    CombatOver,
    IllegalFlee,
    InsufficientActionPoints,
    InvalidAction,
    InvalidEncounter,
    InvalidTarget,
    NoAmmo,
    NotActiveCombatant,
)
from .hex_grid import HexCoord, hex_distance
from .utils import Singleton, ccapture, cprint, crule, make_bar

__all__ = [
    # Import from config.py
    "DEFAULT_RULES",
    "CombatRules",
    "load_rules",
    # Import from constants.py
    "AP_COSTS",
    "ActionType",
    "CombatPhase",
    "EnemyBehavior",
    "ResultSource",
    "StatusKind",
    # Import from dice_parser.py
    "RandomSource",
    "RollBreakdown",
    "is_valid_expression",
    "roll_and_describe",
    "roll_expression",
    # Import from error_handling.py
    "CombatError",
    "CombatOver",
    "IllegalFlee",
    "InsufficientActionPoints",
    "InvalidAction",
    "InvalidEncounter",
    "InvalidTarget",
    "NoAmmo",
    "NotActiveCombatant",
    # Import from hex_grid.py
    "HexCoord",
    "hex_distance",
    # Import from utils.py
    "Singleton",
    "ccapture",
    "cprint",
    "crule",
    "make_bar",
]
