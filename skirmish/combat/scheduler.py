"""
Turn scheduler module.

Keeps the initiative order of a session and the pointer to the active
combatant. Rounds wrap here; what happens at a round boundary (status ticks,
termination checks) is up to the session.
"""

from typing import Iterable, Mapping

from skirmish.combatant.main import Combatant
from skirmish.core.logging import log_debug


def compute_order(combatants: Iterable[Combatant]) -> list[str]:
    """
    Sorts the living combatants by initiative.

    Higher speed acts first; equal speeds are ordered by id so the order is
    reproducible.

    Returns:
        list[str]: Combatant ids in acting order.

    """
    living = [c for c in combatants if c.is_alive()]
    return [c.id for c in sorted(living, key=lambda c: (-c.speed, c.id))]


class TurnScheduler:
    """
    Tracks whose turn it is.

    Attributes:
        order (list[str]):
            Combatant ids of the current round in acting order.
        current_index (int):
            Index of the active combatant in the order.
        round (int):
            The current round, starting at 1.

    """

    def __init__(self) -> None:
        self.order: list[str] = []
        self.current_index: int = 0
        self.round: int = 1

    @property
    def current_id(self) -> str | None:
        """The id of the active combatant, or None with an empty order."""
        if 0 <= self.current_index < len(self.order):
            return self.order[self.current_index]
        return None

    def compute_order(self, combatants: Iterable[Combatant]) -> list[str]:
        """Rebuilds the order from the living combatants and rewinds to its start."""
        self.order = compute_order(combatants)
        self.current_index = 0
        log_debug(
            f"Turn order for round {self.round}: {', '.join(self.order)}",
            {"round": self.round},
        )
        return self.order

    def advance(self, combatants: Mapping[str, Combatant]) -> bool:
        """
        Moves to the next living combatant of the round.

        Combatants that died since the order was computed are skipped
        silently. When the end of the order is passed, the round counter is
        incremented and the pointer wraps to 0; the caller must then run the
        round boundary and recompute the order.

        Args:
            combatants (Mapping[str, Combatant]):
                The session's combatants by id.

        Returns:
            bool:
                True if a new round started.

        """
        self.current_index += 1
        while self.current_index < len(self.order):
            combatant = combatants.get(self.order[self.current_index])
            if combatant is not None and combatant.is_alive():
                return False
            self.current_index += 1
        self.current_index = 0
        self.round += 1
        return True
