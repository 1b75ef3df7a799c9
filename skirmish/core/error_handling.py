"""
Error taxonomy for the combat core.

Every rejection raised by the session derives from CombatError. Rejections
are synchronous and recoverable: the caller fixes the action and retries.
"""

from typing import Any, Optional

from skirmish.core.logging import format_context


class CombatError(Exception):
    """Base class for every error raised by the combat core."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}

    def __str__(self) -> str:
        return format_context(self.message, self.context)


class NotActiveCombatant(CombatError):
    """The action was submitted for a combatant whose turn it is not."""


class InsufficientActionPoints(CombatError):
    """The action costs more action points than the actor has left."""


class InvalidTarget(CombatError):
    """The target does not exist, is dead, or is out of range for the action."""


class NoAmmo(CombatError):
    """The attack needs ammunition the actor's magazine lacks."""


class IllegalFlee(CombatError):
    """Fleeing was attempted in an encounter that forbids it."""


class InvalidAction(CombatError):
    """The action is malformed or cannot be performed in the current state."""


class CombatOver(CombatError):
    """The session already reached a terminal phase."""


class InvalidEncounter(CombatError):
    """The encounter or roster cannot seed a combat session."""
