"""
Constants and enumerations for the combat core.

Defines the action types, combat phases, status effect kinds and the default
balancing numbers (action point costs, hit and damage formula constants)
shared by the resolver, the scheduler and the session.
"""

from enum import Enum


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.lower().replace("_", " ").capitalize()


class ActionType(NiceEnum):
    """Defines the kind of action a combatant can submit on its turn."""

    ATTACK = "attack"
    AIMED_SHOT = "aimed_shot"
    MOVE = "move"
    RELOAD = "reload"
    USE_ITEM = "use_item"
    DEFEND = "defend"
    FLEE = "flee"
    END_TURN = "end_turn"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this action type."""
        return {
            ActionType.ATTACK: "⚔️",
            ActionType.AIMED_SHOT: "🎯",
            ActionType.MOVE: "👣",
            ActionType.RELOAD: "🔄",
            ActionType.USE_ITEM: "🧪",
            ActionType.DEFEND: "🛡️",
            ActionType.FLEE: "🏃",
            ActionType.END_TURN: "⏭️",
        }.get(self, "❔")


class CombatPhase(NiceEnum):
    """Defines the phases of a combat session."""

    STARTING = "starting"
    PLAYER_TURN = "player_turn"
    ENEMY_TURN = "enemy_turn"
    VICTORY = "victory"
    DEFEAT = "defeat"
    FLED = "fled"

    def is_terminal(self) -> bool:
        """Returns True if the phase ends the session."""
        return self in (CombatPhase.VICTORY, CombatPhase.DEFEAT, CombatPhase.FLED)

    @property
    def color(self) -> str:
        """Returns the color string associated with this phase."""
        return {
            CombatPhase.PLAYER_TURN: "bold blue",
            CombatPhase.ENEMY_TURN: "bold red",
            CombatPhase.VICTORY: "bold green",
            CombatPhase.DEFEAT: "bold red",
            CombatPhase.FLED: "bold yellow",
        }.get(self, "dim white")

    def colorize(self, message: str) -> str:
        """Applies phase color formatting to a message."""
        return f"[{self.color}]{message}[/]"


class StatusKind(NiceEnum):
    """Built-in status effect kinds. Content may define further kinds by name."""

    BLEEDING = "bleeding"
    STUNNED = "stunned"
    POISONED = "poisoned"
    BURNING = "burning"
    BUFFED = "buffed"
    DEBUFFED = "debuffed"
    DEFENDING = "defending"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this status kind."""
        return {
            StatusKind.BLEEDING: "🩸",
            StatusKind.STUNNED: "💫",
            StatusKind.POISONED: "🤢",
            StatusKind.BURNING: "🔥",
            StatusKind.BUFFED: "💪",
            StatusKind.DEBUFFED: "🥀",
            StatusKind.DEFENDING: "🛡️",
        }.get(self, "❔")

    @property
    def color(self) -> str:
        """Returns the color string associated with this status kind."""
        return {
            StatusKind.BLEEDING: "red",
            StatusKind.STUNNED: "bold yellow",
            StatusKind.POISONED: "green",
            StatusKind.BURNING: "bold orange3",
            StatusKind.BUFFED: "bold cyan",
            StatusKind.DEBUFFED: "magenta",
            StatusKind.DEFENDING: "bold blue",
        }.get(self, "dim white")


class ResultSource(NiceEnum):
    """Defines what produced a combat log entry."""

    ACTION = "action"
    STATUS_EFFECT = "status_effect"
    TURN_SKIP = "turn_skip"


class EnemyBehavior(NiceEnum):
    """AI hint tags carried by enemy content. The core never interprets them."""

    AGGRESSIVE = "aggressive"
    DEFENSIVE = "defensive"
    RANGED = "ranged"
    SUPPORT = "support"


# Status kinds that deal damage when ticked.
DAMAGE_OVER_TIME_KINDS = frozenset(
    {StatusKind.BLEEDING.value, StatusKind.POISONED.value, StatusKind.BURNING.value}
)

# Status kinds that live until the owner's next turn instead of being ticked
# once per round.
TURN_SCOPED_KINDS = frozenset({StatusKind.DEFENDING.value})

# Action point costs per action type. Move is charged per hex travelled.
AP_COSTS: dict[ActionType, int] = {
    ActionType.ATTACK: 2,
    ActionType.AIMED_SHOT: 4,
    ActionType.MOVE: 1,
    ActionType.RELOAD: 2,
    ActionType.USE_ITEM: 2,
    ActionType.DEFEND: 2,
    ActionType.FLEE: 3,
    ActionType.END_TURN: 0,
}

# Hit chance formula.
HIT_CHANCE_MIN = 5
HIT_CHANCE_MAX = 95
AIMED_SHOT_BONUS = 25
OPTIMAL_RANGE = 3
RANGE_PENALTY_PER_TILE = 5

# Damage formula.
LEVEL_DAMAGE_DIVISOR = 2
CRITICAL_MULTIPLIER = 2
BASE_CRIT_CHANCE = 10
MINIMUM_DAMAGE = 1

# Defensive stance.
DEFEND_DAMAGE_REDUCTION = 50
DEFEND_DURATION = 1

# Flee formula.
BASE_FLEE_CHANCE = 40
FLEE_SPEED_BONUS = 2
FLEE_CHANCE_MIN = 10
FLEE_CHANCE_MAX = 90

# Combatant defaults.
BASE_ENEMY_ACCURACY = 70
DEFAULT_MAGAZINE_SIZE = 6
DEFAULT_MELEE_RANGE = 1
DEFAULT_WEAPON_RANGE = 6
