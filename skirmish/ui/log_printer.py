"""
Log printer module.

Presentation adapter that turns combat results and session snapshots into
rich markup. It only reads data handed out by the session.
"""

from rich.table import Table

from skirmish.combat.combat_result import CombatResult
from skirmish.combat.combat_session import CombatSnapshot
from skirmish.combatant.main import Combatant
from skirmish.core.constants import ResultSource
from skirmish.core.utils import cprint, crule, make_bar


def format_status_line(combatant: Combatant, show_bars: bool = True) -> str:
    """
    Get a formatted status line for a combatant.

    Args:
        combatant (Combatant): The combatant to describe.
        show_bars (bool): Whether to add a health bar. Defaults to True.

    Returns:
        str: Rich markup with name, HP, AP, ammo and effects.

    """
    icon = "🧑" if combatant.is_player_controlled else "👹"
    status = f"{icon} {combatant.colored_name} "
    if combatant.is_dead:
        return status + "| [dim]defeated[/]"
    status += f"| [green]HP:{combatant.health:>3}/{combatant.max_health}[/]"
    if show_bars:
        status += make_bar(combatant.health, combatant.max_health, length=8)
    status += f" | [cyan]AP:{combatant.action_points}/{combatant.max_action_points}[/]"
    if combatant.uses_ammo():
        status += (
            f" | [yellow]Ammo:{combatant.ammo_in_magazine}/"
            f"{combatant.magazine_capacity}[/]"
        )
    status += f" | {combatant.position}"
    if combatant.status_effects:
        effects = ", ".join(
            f"{e.emoji} {e.colored_name}({e.turns_remaining})"
            for e in combatant.status_effects
        )
        status += f" | {effects}"
    return status


def format_result(result: CombatResult) -> str:
    """Formats one log entry as rich markup."""
    if result.source == ResultSource.STATUS_EFFECT:
        emoji = result.status_effect.emoji if result.status_effect else "❔"
        return f"  {emoji} [magenta]{result.message}[/]"
    if result.source == ResultSource.TURN_SKIP:
        return f"  💫 [dim]{result.message}[/]"
    emoji = result.action_type.emoji if result.action_type else "❔"
    line = f"  {emoji} {result.message}"
    if result.hit_chance is not None:
        line += f" [dim]({result.hit_chance}%)[/]"
    if result.ap_spent:
        line += f" [dim cyan]-{result.ap_spent} AP[/]"
    if result.is_critical:
        line = f"[bold yellow]{line}[/]"
    elif not result.success:
        line = f"[dim]{line}[/]"
    return line


def build_roster_table(snapshot: CombatSnapshot) -> Table:
    """Builds a rich table of the roster in initiative order."""
    table = Table(
        title=snapshot.phase.colorize(
            f"Round {snapshot.round} - {snapshot.phase.display_name}"
        )
    )
    table.add_column("", width=2)
    table.add_column("Combatant")
    table.add_column("HP", justify="right")
    table.add_column("AP", justify="right")
    table.add_column("Speed", justify="right")
    table.add_column("Effects")
    by_id = {c.id: c for c in snapshot.combatants}
    ordered = [by_id[i] for i in snapshot.turn_order if i in by_id]
    ordered += [c for c in snapshot.combatants if c.id not in snapshot.turn_order]
    for combatant in ordered:
        marker = "▶" if combatant.id == snapshot.active_id else ""
        table.add_row(
            marker,
            combatant.colored_name,
            "—" if combatant.is_dead else f"{combatant.health}/{combatant.max_health}",
            f"{combatant.action_points}/{combatant.max_action_points}",
            str(combatant.speed),
            ", ".join(e.colored_name for e in combatant.status_effects),
        )
    return table


def print_result(result: CombatResult) -> None:
    cprint(format_result(result))


def print_results(results: list[CombatResult]) -> None:
    for result in results:
        print_result(result)


def print_snapshot(snapshot: CombatSnapshot) -> None:
    """Prints a round header followed by the roster table."""
    crule(
        f"⏱ Round {snapshot.round}",
        style=snapshot.phase.color,
    )
    cprint(build_roster_table(snapshot))
