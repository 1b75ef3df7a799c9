"""
Main entry point for the skirmish demo.

Loads the sample content, builds a combat session from an encounter and runs
it to the end with a naive autopilot steering every combatant, printing the
combat log as it grows.

The demo supports:
- Choosing the encounter, the random seed and the data directory
- Reproducing a battle exactly by reusing its seed
- Dumping the full log as JSON lines
"""

import argparse
import logging
import random
from pathlib import Path

from skirmish.combat.action import CombatAction
from skirmish.combat.combat_session import CombatSession
from skirmish.combatant.main import Combatant
from skirmish.core.constants import ActionType
from skirmish.core.content import ContentRepository
from skirmish.core.logging import log_error, setup_logging
from skirmish.core.utils import cprint, crule
from skirmish.ui.log_printer import format_status_line, print_results, print_snapshot

# Get the path to the data folder.
DATA_DIR = Path(__file__).resolve().parent.parent / "data"

# Hit chance under which the autopilot prefers the aimed variant.
AIM_THRESHOLD = 60

# Rounds after which a stalled demo battle is abandoned.
MAX_ROUNDS = 50


def choose_target(session: CombatSession, actor: Combatant) -> Combatant | None:
    """Picks the weakest opponent within range, if any."""
    targets = session.valid_targets(actor.id)
    if not targets:
        return None
    return min(targets, key=lambda t: (t.health, t.id))


def choose_action(session: CombatSession, actor: Combatant) -> CombatAction:
    """
    Chooses an action for the active combatant.

    Reload when empty, shoot the weakest target in range (aiming when the
    odds are poor), otherwise step toward the nearest opponent, otherwise end
    the turn.

    Args:
        session (CombatSession): The running session.
        actor (Combatant): The active combatant.

    Returns:
        CombatAction: An action the session accepts.

    """
    candidates: list[CombatAction] = []
    if actor.uses_ammo() and not actor.has_ammo():
        candidates.append(CombatAction(actor_id=actor.id, type=ActionType.RELOAD))

    target = choose_target(session, actor)
    if target is not None:
        chance = session.resolver.hit_chance(
            actor.effective_accuracy,
            target.evasion,
            actor.distance_to(target),
            aimed=False,
        )
        attack = CombatAction(
            actor_id=actor.id, type=ActionType.ATTACK, target_id=target.id
        )
        aimed = attack.model_copy(update={"type": ActionType.AIMED_SHOT})
        candidates.extend([aimed, attack] if chance < AIM_THRESHOLD else [attack])
    else:
        opponents = session.opponents_of(actor)
        if opponents:
            nearest = min(opponents, key=lambda o: (actor.distance_to(o), o.id))
            candidates.append(
                CombatAction(
                    actor_id=actor.id,
                    type=ActionType.MOVE,
                    target_position=actor.position.step_toward(nearest.position),
                )
            )

    for candidate in candidates:
        if session.can_perform(candidate):
            return candidate
    return CombatAction(actor_id=actor.id, type=ActionType.END_TURN)


def run_battle(
    session: CombatSession, verbose: bool = True, max_rounds: int = MAX_ROUNDS
) -> None:
    """Drives a session with the autopilot until it ends or stalls."""
    printed = 0
    current_round = 0
    while not session.is_over() and session.round <= max_rounds:
        if verbose and session.round != current_round:
            current_round = session.round
            print_snapshot(session.snapshot())
        actor = session.active_combatant
        session.submit_action(choose_action(session, actor))
        if verbose:
            print_results(session.log[printed:])
        printed = len(session.log)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run a seeded demo battle.")
    parser.add_argument("--encounter", default="bandit_ambush", help="Encounter id.")
    parser.add_argument("--seed", type=int, default=42, help="Random seed.")
    parser.add_argument("--data-dir", type=Path, default=DATA_DIR)
    parser.add_argument("--json", action="store_true", help="Print the log as JSON lines.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.debug else logging.WARNING)

    crule("Skirmish", style="bold green")
    try:
        repo = ContentRepository(args.data_dir)
    except ValueError as e:
        log_error(str(e), {"data_dir": str(args.data_dir)})
        return 2
    encounter = repo.get_encounter(args.encounter)
    if encounter is None:
        cprint(f"Unknown encounter '{args.encounter}'", style="bold red")
        return 1

    session = CombatSession(
        encounter,
        repo.enemies,
        list(repo.players.values()),
        random.Random(args.seed),
        rules=repo.rules,
        payloads=repo.payloads,
    )
    crule(f":crossed_swords:  {encounter.name or encounter.id}", style="bold green")
    try:
        run_battle(session, verbose=not args.json)
    except KeyboardInterrupt:
        cprint("")
        crule(":crossed_swords:  Combat Interrupted", style="bold red")
        return 130

    if args.json:
        for result in session.log:
            print(result.model_dump_json())
        return 0

    crule(f"Result: {session.phase.display_name}", style=session.phase.color)
    actions = sum(1 for result in session.log if result.is_action())
    cprint(f"{actions} actions over {session.round} rounds", style="dim")
    for combatant in session.combatants.values():
        cprint(format_status_line(combatant))
    rewards = session.rewards_request()
    if rewards is not None:
        cprint(f"🏆 {rewards.xp} XP, {rewards.gold} gold", style="bold yellow")
        for item in rewards.items:
            cprint(f"   {item.item_id} x{item.quantity} ({item.chance:.0%})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
