"""
Combat session module.

CombatSession is the aggregate root of one battle. It owns the combatants,
the scheduler and the result log, accepts one action at a time from the
active combatant, and moves the battle through its phases until victory,
defeat or a successful flee.
"""

import time
from typing import Callable, Iterable, Mapping

from catchery import log_debug, log_warning
from pydantic import BaseModel, ConfigDict, Field

from skirmish.combatant.factory import create_encounter_enemies, create_player_combatant
from skirmish.combatant.main import Combatant
from skirmish.core.config import DEFAULT_RULES, CombatRules
from skirmish.core.constants import ActionType, CombatPhase, ResultSource, StatusKind
from skirmish.core.dice_parser import RandomSource
from skirmish.core.error_handling import (
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
from skirmish.core.logging import log_combat_event, log_info
from skirmish.effects.base_effect import StatusEffect
from skirmish.encounters.combat_encounter import CombatEncounter
from skirmish.encounters.enemy_definition import EnemyDefinition
from skirmish.encounters.player_profile import PlayerProfile

from .action import ActionPayload, CombatAction, resolve_ap_cost
from .combat_result import CombatResult
from .resolver import ActionResolver
from .rewards import RewardsRequest
from .scheduler import TurnScheduler


def _damage_text(amount: int, roll_description: str) -> str:
    """Formats an amount of damage, with its dice breakdown when there is one."""
    if not roll_description:
        return f"{amount} damage"
    return f"{amount} damage ({roll_description})"


class CombatSnapshot(BaseModel):
    """A read-only copy of the public session state."""

    model_config = ConfigDict(frozen=True)

    encounter_id: str
    phase: CombatPhase
    round: int
    turn_order: list[str]
    current_turn_index: int
    active_id: str | None
    combatants: list[Combatant] = Field(description="Deep copies, in roster order.")
    log_length: int


class CombatSession:
    """
    Runs one battle from its first turn to a terminal phase.

    All randomness comes from the injected generator, so two sessions built
    from the same content and seed, fed the same actions, produce the same
    log. Rejected actions raise a CombatError and leave the session exactly
    as it was, random generator included.
    """

    def __init__(
        self,
        encounter: CombatEncounter,
        enemy_lookup: Mapping[str, EnemyDefinition],
        players: Iterable[PlayerProfile | Combatant],
        rng: RandomSource,
        rules: CombatRules | None = None,
        payloads: Mapping[str, ActionPayload] | Iterable[ActionPayload] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Builds the roster and starts the first round.

        Args:
            encounter (CombatEncounter):
                The scripted battle.
            enemy_lookup (Mapping[str, EnemyDefinition]):
                Enemy definitions by id.
            players (Iterable[PlayerProfile | Combatant]):
                The player-controlled roster.
            rng (RandomSource):
                The only source of randomness of the session.
            rules (CombatRules | None):
                Balancing numbers. Defaults to the standard rules.
            payloads (Mapping[str, ActionPayload] | Iterable[ActionPayload] | None):
                Catalogue resolving the payload_id of submitted actions.
            clock (Callable[[], float]):
                Supplies started_at.

        Raises:
            InvalidEncounter:
                If there are no players, no enemies, an unknown enemy id or
                duplicate combatant ids.

        """
        self.rules: CombatRules = rules or DEFAULT_RULES
        self.encounter: CombatEncounter = encounter
        self.encounter_id: str = encounter.id
        self.resolver = ActionResolver(rng, self.rules)

        if isinstance(payloads, Mapping):
            self.payloads: dict[str, ActionPayload] = dict(payloads)
        else:
            self.payloads = {payload.id: payload for payload in payloads or []}

        roster: list[Combatant] = []
        for index, player in enumerate(players):
            if isinstance(player, PlayerProfile):
                roster.append(create_player_combatant(player, index))
            else:
                roster.append(
                    player.model_copy(update={"is_player_controlled": True}, deep=True)
                )
        if not roster:
            raise InvalidEncounter(
                "A combat session needs at least one player-controlled combatant",
                {"encounter": encounter.id},
            )
        roster.extend(create_encounter_enemies(encounter, enemy_lookup, self.rules))

        self.combatants: dict[str, Combatant] = {}
        for combatant in roster:
            if combatant.id in self.combatants:
                raise InvalidEncounter(
                    f"Duplicate combatant id '{combatant.id}'",
                    {"encounter": encounter.id},
                )
            self.combatants[combatant.id] = combatant

        self.scheduler = TurnScheduler()
        self.log: list[CombatResult] = []
        self.phase: CombatPhase = CombatPhase.STARTING
        self.phase_history: list[CombatPhase] = [CombatPhase.STARTING]
        self.started_at: float = clock()

        log_info(
            f"Combat '{encounter.id}' started",
            {"combatants": len(self.combatants), "started_at": self.started_at},
        )
        self.scheduler.compute_order(self.combatants.values())
        if not self.evaluate_termination() and not self._begin_turn():
            self._advance_turn()

    # ============================================================================
    # PUBLIC STATE
    # ============================================================================

    @property
    def round(self) -> int:
        return self.scheduler.round

    @property
    def turn_order(self) -> list[str]:
        return list(self.scheduler.order)

    @property
    def current_turn_index(self) -> int:
        return self.scheduler.current_index

    @property
    def active_combatant(self) -> Combatant | None:
        """The combatant whose turn it is, or None once the battle is over."""
        if self.phase.is_terminal():
            return None
        current_id = self.scheduler.current_id
        return self.combatants.get(current_id) if current_id else None

    @property
    def players(self) -> list[Combatant]:
        return [c for c in self.combatants.values() if c.is_player_controlled]

    @property
    def enemies(self) -> list[Combatant]:
        return [c for c in self.combatants.values() if not c.is_player_controlled]

    def get_combatant(self, combatant_id: str) -> Combatant | None:
        return self.combatants.get(combatant_id)

    def is_over(self) -> bool:
        return self.phase.is_terminal()

    def snapshot(self) -> CombatSnapshot:
        """Returns a deep copy of the public state for presentation layers."""
        active = self.active_combatant
        return CombatSnapshot(
            encounter_id=self.encounter_id,
            phase=self.phase,
            round=self.round,
            turn_order=self.turn_order,
            current_turn_index=self.current_turn_index,
            active_id=active.id if active else None,
            combatants=[c.model_copy(deep=True) for c in self.combatants.values()],
            log_length=len(self.log),
        )

    def rewards_request(self) -> RewardsRequest | None:
        """Returns the encounter's rewards after a victory, None otherwise."""
        if self.phase != CombatPhase.VICTORY:
            return None
        return RewardsRequest.from_encounter(self.encounter)

    # ============================================================================
    # PREDICATES
    # ============================================================================

    def opponents_of(self, actor: Combatant) -> list[Combatant]:
        """Returns the living combatants on the other side."""
        return [
            c
            for c in self.combatants.values()
            if c.is_alive() and c.is_player_controlled != actor.is_player_controlled
        ]

    def valid_targets(self, actor_id: str, in_range: bool = True) -> list[Combatant]:
        """
        Returns the combatants the actor may attack.

        Args:
            actor_id (str):
                The attacker.
            in_range (bool):
                Restrict to targets within the actor's attack range.

        Returns:
            list[Combatant]:
                Living opponents, in roster order.

        """
        actor = self.combatants.get(actor_id)
        if actor is None:
            return []
        targets = self.opponents_of(actor)
        if in_range:
            targets = [t for t in targets if actor.distance_to(t) <= actor.attack_range]
        return targets

    def validate_action(self, action: CombatAction) -> int:
        """
        Checks an action exactly as submit_action would, without changing
        anything.

        Returns:
            int: The action point cost the action would spend.

        Raises:
            CombatError: The rejection submit_action would raise.

        """
        return self._check(action)

    def can_perform(self, action: CombatAction) -> bool:
        """Returns True if submit_action would accept the action."""
        try:
            self._check(action)
        except CombatError:
            return False
        return True

    def available_actions(self, actor_id: str) -> list[ActionType]:
        """
        Lists the action types the actor could submit right now.

        Only the active combatant has available actions. A type is listed when
        at least one concrete action of that type would be accepted.
        """
        actor = self.active_combatant
        if actor is None or actor.id != actor_id:
            return []
        candidates: list[CombatAction] = []
        for target in self.valid_targets(actor_id):
            for action_type in (ActionType.ATTACK, ActionType.AIMED_SHOT):
                candidates.append(
                    CombatAction(actor_id=actor_id, type=action_type, target_id=target.id)
                )
        for destination in actor.position.neighbors():
            candidates.append(
                CombatAction(
                    actor_id=actor_id, type=ActionType.MOVE, target_position=destination
                )
            )
        for payload_id in self.payloads:
            candidates.append(
                CombatAction(
                    actor_id=actor_id, type=ActionType.USE_ITEM, payload_id=payload_id
                )
            )
        for action_type in (
            ActionType.RELOAD,
            ActionType.DEFEND,
            ActionType.FLEE,
            ActionType.END_TURN,
        ):
            candidates.append(CombatAction(actor_id=actor_id, type=action_type))
        available: list[ActionType] = []
        for candidate in candidates:
            if candidate.type not in available and self.can_perform(candidate):
                available.append(candidate.type)
        return available

    # ============================================================================
    # SUBMISSION
    # ============================================================================

    def submit_action(self, action: CombatAction) -> CombatResult:
        """
        Validates and applies one action of the active combatant.

        Args:
            action (CombatAction):
                The action to perform.

        Returns:
            CombatResult:
                The log entry describing the outcome.

        Raises:
            CombatOver: The battle already ended.
            NotActiveCombatant: It is not the actor's turn.
            InsufficientActionPoints: The action costs more than the actor has.
            InvalidTarget: The target or destination is not acceptable.
            NoAmmo: The magazine cannot pay for the attack.
            IllegalFlee: The encounter forbids fleeing.
            InvalidAction: The action is malformed for the current state.

        """
        try:
            cost = self._check(action)
        except CombatError as error:
            log_warning(
                f"Rejected {action}: {error.message}",
                {**error.context, "context": "submit_action"},
            )
            raise

        actor = self.combatants[action.actor_id]
        result = self._apply(actor, action, cost)
        actor.spend_action_points(cost)
        actor.has_acted_this_turn = True
        result = self._append(result, {"ap_left": actor.action_points})

        if self.phase.is_terminal() or self.evaluate_termination():
            return result
        if action.type == ActionType.END_TURN or actor.action_points == 0:
            self._advance_turn()
        return result

    def evaluate_termination(self) -> bool:
        """
        Enters defeat when every player-controlled combatant is dead, or
        victory when every enemy is.

        Returns:
            bool: True if the session is in a terminal phase.

        """
        if self.phase.is_terminal():
            return True
        if not any(c.is_alive() for c in self.players):
            self._set_phase(CombatPhase.DEFEAT)
        elif not any(c.is_alive() for c in self.enemies):
            self._set_phase(CombatPhase.VICTORY)
        return self.phase.is_terminal()

    # ============================================================================
    # VALIDATION
    # ============================================================================

    def _resolve_payload(self, action: CombatAction) -> ActionPayload | None:
        if action.payload is not None:
            return action.payload
        if action.payload_id is not None:
            return self.payloads.get(action.payload_id)
        return None

    def _action_cost(self, actor: Combatant, action: CombatAction) -> int:
        distance = 0
        if action.type == ActionType.MOVE and action.target_position is not None:
            distance = actor.distance_to(action.target_position)
        payload = self._resolve_payload(action)
        return resolve_ap_cost(action.type, payload, distance, self.rules)

    def _check(self, action: CombatAction) -> int:
        if self.phase.is_terminal():
            raise CombatOver(
                f"Combat already ended in {self.phase.value}",
                {"phase": self.phase.value},
            )
        actor = self.active_combatant
        if actor is None or actor.id != action.actor_id:
            raise NotActiveCombatant(
                f"It is not {action.actor_id}'s turn",
                {"actor": action.actor_id, "active": actor.id if actor else None},
            )
        cost = self._action_cost(actor, action)
        if cost > actor.action_points:
            raise InsufficientActionPoints(
                f"{actor.display_name} needs {cost} AP for {action.type.value} "
                f"but has {actor.action_points}",
                {"actor": actor.id, "cost": cost, "available": actor.action_points},
            )
        validator = {
            ActionType.ATTACK: self._check_attack,
            ActionType.AIMED_SHOT: self._check_attack,
            ActionType.MOVE: self._check_move,
            ActionType.RELOAD: self._check_reload,
            ActionType.USE_ITEM: self._check_use_item,
            ActionType.FLEE: self._check_flee,
        }.get(action.type)
        if validator is not None:
            validator(actor, action)
        return cost

    def _require_target(self, actor: Combatant, action: CombatAction) -> Combatant:
        if action.target_id is None:
            raise InvalidTarget(
                f"{action.type.value} needs a target",
                {"actor": actor.id},
            )
        target = self.combatants.get(action.target_id)
        if target is None:
            raise InvalidTarget(
                f"Unknown target '{action.target_id}'",
                {"actor": actor.id, "target": action.target_id},
            )
        if target.is_dead:
            raise InvalidTarget(
                f"{target.display_name} is already defeated",
                {"actor": actor.id, "target": target.id},
            )
        return target

    def _check_attack(self, actor: Combatant, action: CombatAction) -> None:
        target = self._require_target(actor, action)
        if target.id == actor.id:
            raise InvalidTarget(
                f"{actor.display_name} cannot attack itself",
                {"actor": actor.id},
            )
        if target.is_player_controlled == actor.is_player_controlled:
            raise InvalidTarget(
                f"{target.display_name} is on {actor.display_name}'s side",
                {"actor": actor.id, "target": target.id},
            )
        payload = self._resolve_payload(action)
        if action.payload_id is not None and payload is None:
            raise InvalidAction(
                f"Unknown payload '{action.payload_id}'",
                {"actor": actor.id, "payload": action.payload_id},
            )
        attack_range = payload.range if payload and payload.range else actor.attack_range
        distance = actor.distance_to(target)
        if distance > attack_range:
            raise InvalidTarget(
                f"{target.display_name} is out of range ({distance} > {attack_range})",
                {"actor": actor.id, "target": target.id, "distance": distance},
            )
        ammo_cost = payload.ammo_cost if payload else 1
        if not actor.has_ammo(ammo_cost):
            raise NoAmmo(
                f"{actor.display_name} has {actor.ammo_in_magazine} rounds, "
                f"needs {ammo_cost}",
                {"actor": actor.id, "ammo": actor.ammo_in_magazine},
            )

    def _check_move(self, actor: Combatant, action: CombatAction) -> None:
        destination = action.target_position
        if destination is None:
            raise InvalidTarget("move needs a target_position", {"actor": actor.id})
        if actor.distance_to(destination) == 0:
            raise InvalidTarget(
                f"{actor.display_name} is already at {destination}",
                {"actor": actor.id},
            )
        for other in self.combatants.values():
            if other.is_alive() and other.id != actor.id and other.position == destination:
                raise InvalidTarget(
                    f"{destination} is occupied by {other.display_name}",
                    {"actor": actor.id, "occupant": other.id},
                )

    def _check_reload(self, actor: Combatant, action: CombatAction) -> None:
        if not actor.uses_ammo():
            raise InvalidAction(
                f"{actor.display_name} has nothing to reload",
                {"actor": actor.id},
            )
        if actor.ammo_in_magazine >= actor.magazine_capacity:
            raise InvalidAction(
                f"{actor.display_name}'s magazine is already full",
                {"actor": actor.id, "ammo": actor.ammo_in_magazine},
            )

    def _check_use_item(self, actor: Combatant, action: CombatAction) -> None:
        if action.payload is None and action.payload_id is None:
            raise InvalidAction("use_item needs a payload", {"actor": actor.id})
        payload = self._resolve_payload(action)
        if payload is None:
            raise InvalidAction(
                f"Unknown payload '{action.payload_id}'",
                {"actor": actor.id, "payload": action.payload_id},
            )
        if payload.deals_damage and (payload.targets_self or action.target_id is None):
            raise InvalidTarget(
                f"{payload.display_name} must be used on an opponent",
                {"actor": actor.id, "payload": payload.id},
            )
        if payload.targets_self or action.target_id is None:
            return
        target = self._require_target(actor, action)
        same_side = target.is_player_controlled == actor.is_player_controlled
        if payload.deals_damage and same_side:
            raise InvalidTarget(
                f"{payload.display_name} cannot be used on {target.display_name}",
                {"actor": actor.id, "target": target.id, "payload": payload.id},
            )
        if payload.range is not None and actor.distance_to(target) > payload.range:
            raise InvalidTarget(
                f"{target.display_name} is out of range for {payload.display_name}",
                {"actor": actor.id, "target": target.id},
            )

    def _check_flee(self, actor: Combatant, action: CombatAction) -> None:
        if not actor.is_player_controlled:
            raise InvalidAction(
                f"{actor.display_name} is not player-controlled and cannot flee",
                {"actor": actor.id},
            )
        if not self.encounter.can_flee:
            raise IllegalFlee(
                f"Cannot flee from '{self.encounter.id}'",
                {"actor": actor.id, "encounter": self.encounter.id},
            )

    # ============================================================================
    # APPLICATION
    # ============================================================================

    def _apply(self, actor: Combatant, action: CombatAction, cost: int) -> CombatResult:
        handler = {
            ActionType.ATTACK: self._apply_attack,
            ActionType.AIMED_SHOT: self._apply_attack,
            ActionType.MOVE: self._apply_move,
            ActionType.RELOAD: self._apply_reload,
            ActionType.USE_ITEM: self._apply_use_item,
            ActionType.DEFEND: self._apply_defend,
            ActionType.FLEE: self._apply_flee,
            ActionType.END_TURN: self._apply_end_turn,
        }[action.type]
        result = handler(actor, action)
        return result.model_copy(
            update={
                "actor_id": actor.id,
                "action_type": action.type,
                "ap_spent": cost,
            }
        )

    def _apply_attack(self, actor: Combatant, action: CombatAction) -> CombatResult:
        target = self.combatants[action.target_id]
        payload = self._resolve_payload(action)
        actor.consume_ammo(payload.ammo_cost if payload else 1)
        outcome = self.resolver.resolve_attack(
            attacker_accuracy=actor.effective_accuracy,
            attacker_level=actor.level,
            attacker_damage=actor.base_damage,
            damage_bonus_percent=actor.damage_bonus_percent,
            defender_evasion=target.evasion,
            defender_armor=target.effective_armor,
            defender_reduction_percent=target.damage_reduction_percent,
            distance=actor.distance_to(target),
            aimed=action.type == ActionType.AIMED_SHOT,
            payload=payload,
            damage_penalty_percent=actor.debuff_penalty_percent,
        )
        verb = "takes aim at" if action.type == ActionType.AIMED_SHOT else "attacks"
        if not outcome.hit:
            return CombatResult(
                target_id=target.id,
                success=False,
                was_dodged=True,
                hit_chance=outcome.hit_chance,
                target_health_remaining=target.health,
                message=f"{actor.display_name} {verb} {target.display_name} but misses!",
            )
        taken = target.apply_damage(outcome.damage)
        message = f"{actor.display_name} {verb} {target.display_name} for "
        message += _damage_text(taken, outcome.roll_description)
        message += "! Critical hit!" if outcome.is_critical else "!"
        applied: StatusEffect | None = None
        if payload is not None and payload.status_effect is not None and target.is_alive():
            effect = payload.status_effect.model_copy(update={"source_id": actor.id})
            if target.add_status_effect(effect):
                applied = effect
                message += f" {target.display_name} is {effect.kind}."
        if target.is_dead:
            message += f" {target.display_name} is defeated!"
        return CombatResult(
            target_id=target.id,
            damage=taken,
            is_critical=outcome.is_critical,
            hit_chance=outcome.hit_chance,
            status_effect=applied,
            target_health_remaining=target.health,
            target_killed=target.is_dead,
            message=message,
        )

    def _apply_move(self, actor: Combatant, action: CombatAction) -> CombatResult:
        origin = actor.position
        actor.position = action.target_position
        return CombatResult(
            destination=actor.position,
            message=f"{actor.display_name} moves from {origin} to {actor.position}.",
        )

    def _apply_reload(self, actor: Combatant, action: CombatAction) -> CombatResult:
        loaded = actor.reload()
        return CombatResult(
            message=f"{actor.display_name} reloads {loaded} rounds.",
        )

    def _apply_use_item(self, actor: Combatant, action: CombatAction) -> CombatResult:
        payload = self._resolve_payload(action)
        target = actor
        if not payload.targets_self and action.target_id is not None:
            target = self.combatants[action.target_id]
        message = f"{actor.display_name} uses {payload.display_name}"
        if target is not actor:
            message += f" on {target.display_name}"
        taken = 0
        if payload.deals_damage:
            outcome = self.resolver.resolve_item_damage(
                payload,
                attacker_level=actor.level,
                damage_bonus_percent=actor.damage_bonus_percent,
                damage_penalty_percent=actor.debuff_penalty_percent,
                defender_armor=target.effective_armor,
                defender_reduction_percent=target.damage_reduction_percent,
            )
            taken = target.apply_damage(outcome.damage)
            message += " for " + _damage_text(taken, outcome.roll_description)
        message += "."
        healed = target.heal(payload.heal_amount) if payload.heal_amount else 0
        if healed:
            message += f" {target.display_name} recovers {healed} HP."
        applied: StatusEffect | None = None
        if payload.status_effect is not None and target.is_alive():
            effect = payload.status_effect.model_copy(update={"source_id": actor.id})
            if target.add_status_effect(effect):
                applied = effect
                message += f" {target.display_name} is {effect.kind}."
        if target.is_dead:
            message += f" {target.display_name} is defeated!"
        return CombatResult(
            target_id=target.id,
            damage=taken,
            healing=healed,
            status_effect=applied,
            target_health_remaining=target.health,
            target_killed=target.is_dead,
            message=message,
        )

    def _apply_defend(self, actor: Combatant, action: CombatAction) -> CombatResult:
        effect = StatusEffect(
            kind=StatusKind.DEFENDING,
            turns_remaining=self.rules.defend_duration,
            magnitude=self.rules.defend_damage_reduction,
            source_id=actor.id,
        )
        actor.add_status_effect(effect)
        return CombatResult(
            target_id=actor.id,
            status_effect=effect,
            message=f"{actor.display_name} takes a defensive stance.",
        )

    def _apply_flee(self, actor: Combatant, action: CombatAction) -> CombatResult:
        outcome = self.resolver.resolve_flee(
            actor.speed, [enemy.speed for enemy in self.opponents_of(actor)]
        )
        if outcome.success:
            self._set_phase(CombatPhase.FLED)
            message = f"{actor.display_name} escapes from combat!"
        else:
            message = f"{actor.display_name} tries to flee but fails!"
        return CombatResult(
            success=outcome.success,
            hit_chance=outcome.chance,
            message=message,
        )

    def _apply_end_turn(self, actor: Combatant, action: CombatAction) -> CombatResult:
        return CombatResult(message=f"{actor.display_name} ends the turn.")

    # ============================================================================
    # TURN FLOW
    # ============================================================================

    def _append(
        self, result: CombatResult, context: dict | None = None
    ) -> CombatResult:
        stamped = result.model_copy(
            update={"sequence": len(self.log), "round": result.round or self.round}
        )
        self.log.append(stamped)
        log_combat_event(stamped.round, stamped.sequence, stamped.message, context)
        return stamped

    def _set_phase(self, phase: CombatPhase) -> None:
        if phase == self.phase:
            return
        log_info(
            f"Combat '{self.encounter_id}': {self.phase.value} -> {phase.value}",
            {"round": self.round},
        )
        self.phase = phase
        self.phase_history.append(phase)

    def _begin_turn(self) -> bool:
        """
        Prepares the combatant the scheduler points at.

        Returns:
            bool: False if the combatant is stunned and its turn was skipped.

        """
        current = self.combatants[self.scheduler.current_id]
        current.reset_for_new_turn()
        if current.is_player_controlled:
            self._set_phase(CombatPhase.PLAYER_TURN)
        else:
            self._set_phase(CombatPhase.ENEMY_TURN)
        if current.is_stunned():
            self._append(
                CombatResult(
                    source=ResultSource.TURN_SKIP,
                    actor_id=current.id,
                    action_type=ActionType.END_TURN,
                    success=False,
                    status_effect=current.get_status(StatusKind.STUNNED),
                    message=f"{current.display_name} is stunned and loses the turn.",
                )
            )
            return False
        log_debug(
            f"{current.display_name}'s turn",
            {"round": self.round, "ap": current.action_points},
        )
        return True

    def _advance_turn(self) -> None:
        while True:
            if self.scheduler.advance(self.combatants):
                self._run_round_boundary()
                if self.phase.is_terminal():
                    return
            if self._begin_turn():
                return

    def _run_round_boundary(self) -> None:
        """Ticks every living combatant, checks for an end, then reorders."""
        ended_round = self.round - 1
        for combatant in self.combatants.values():
            if combatant.is_alive():
                for result in combatant.tick_status_effects(ended_round):
                    self._append(result)
        if self.evaluate_termination():
            return
        self.scheduler.compute_order(self.combatants.values())

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(encounter='{self.encounter_id}', "
            f"phase={self.phase.value}, round={self.round})"
        )
