"""Action resolver - resolves one round of a match for both combatants."""

from typing import TYPE_CHECKING

from ..db.models.enums import EffectKind, MatchOutcome
from .catalog import EffectCatalog
from .logging import CombatLogger
from .policy import OpponentPolicy
from .types import CombatantState, EffectResult, EffectTimerState, RoundResult

if TYPE_CHECKING:
    from .match import MatchSession


class ActionResolver:
    """Resolves rounds: validate, tick, choose, apply, settle, check winner."""

    def __init__(self, policy: OpponentPolicy, logger: CombatLogger | None = None) -> None:
        """Initialize the resolver.

        Args:
            policy: Picks the opponent's effect each round
            logger: Optional combat logger for event tracking
        """
        self.policy = policy
        self.logger = logger

    def resolve_round(self, session: "MatchSession", chosen: EffectKind) -> RoundResult:
        """Resolve a complete round.

        Round flow:
        1. Validate the controlled side's choice (nothing is mutated on rejection)
        2. Tick every timer of both combatants once
        3. Ask the opponent policy for the opposing effect
        4. Apply the controlled side's effect, then the opponent's
        5. Apply continuous effects (regeneration, burning)
        6. Check win condition (opponent first)

        Choosing NONE still ticks timers and settles continuous effects, but
        the opponent does not act.

        Args:
            session: The match to advance
            chosen: Effect chosen by the controlled side

        Returns:
            RoundResult with post-round snapshots and the outcome
        """
        player, opponent = session.player, session.opponent

        reason = self.validate(session, chosen)
        if reason is not None:
            if self.logger:
                self.logger.log_round_rejected(session.round_number + 1, player.display_name, chosen, reason)
            result = self._build_result(session, accepted=False, message=reason)
            result.player_effect = EffectKind.NONE
            result.opponent_effect = EffectKind.NONE
            return result

        session.round_number += 1
        round_number = session.round_number
        effects: list[EffectResult] = []

        if self.logger:
            self.logger.log_round_start(round_number, [player, opponent])

        player.last_effect = EffectKind.NONE
        opponent.last_effect = EffectKind.NONE

        self._tick(session)

        outcome = MatchOutcome.NONE
        if chosen != EffectKind.NONE:
            opponent_kind = self.policy.choose(opponent, session.availability)
            if self.logger:
                self.logger.log_opponent_chose(round_number, opponent_kind, self.policy.last_candidates)

            effects.append(self._apply_logged(chosen, player, opponent, session.catalog, round_number))

            # A defeated opponent does not get to act
            outcome = self._check_winner(player, opponent)
            if outcome == MatchOutcome.NONE:
                effects.append(
                    self._apply_logged(opponent_kind, opponent, player, session.catalog, round_number)
                )
                outcome = self._check_winner(player, opponent)

        if outcome == MatchOutcome.NONE:
            for state in (player, opponent):
                effects.extend(self._settle_continuous(state, round_number))
            outcome = self._check_winner(player, opponent)

        session.outcome = outcome
        if outcome != MatchOutcome.NONE and self.logger:
            self.logger.log_winner(round_number, outcome)
        if self.logger:
            self.logger.log_round_end(round_number, [player, opponent])

        result = self._build_result(session, accepted=True, message=self._describe(outcome))
        result.effects_applied = effects
        return result

    def validate(self, session: "MatchSession", chosen: EffectKind) -> str | None:
        """Check whether the controlled side may use `chosen` now.

        Returns:
            None if the round may proceed, otherwise the reason it is rejected
        """
        if session.outcome != MatchOutcome.NONE:
            return "Match is over"

        if chosen == EffectKind.NONE:
            return None

        timer = self._trigger_timer(chosen, session.player, session.opponent)
        if timer is not None and not timer.available:
            return f"{chosen.value} is not ready ({timer.restore} ticks left)"

        # Cleanup only makes sense while burning
        if chosen == EffectKind.CLEANUP and not session.player.is_active(EffectKind.FIREBALL):
            return "Nothing to clean up"

        return None

    def apply_effect(
        self,
        kind: EffectKind,
        actor: CombatantState,
        target: CombatantState,
        catalog: EffectCatalog,
    ) -> EffectResult:
        """Apply one chosen effect from `actor` against `target`.

        Args:
            kind: Effect being used
            actor: Combatant using the effect
            target: The other combatant
            catalog: Effect configuration

        Returns:
            EffectResult describing what happened
        """
        actor.last_effect = kind

        match kind:
            case EffectKind.ATTACK:
                actual = target.decrease_health(catalog[kind].power)
                return self._result(kind, actor, target, actual, f"Attack dealt {actual} damage")

            case EffectKind.SHIELD | EffectKind.REGENERATION:
                started = actor.timers[kind].trigger(catalog[kind])
                description = f"{kind.value.capitalize()} started" if started else f"{kind.value} not ready"
                return self._result(kind, actor, actor, 0, description)

            case EffectKind.FIREBALL:
                # The burning timer lives on the combatant being burned
                if not target.timers[kind].trigger(catalog[kind]):
                    return self._result(kind, actor, target, 0, "Fireball not ready")
                actual = target.decrease_health(catalog[kind].power)
                return self._result(kind, actor, target, actual, f"Fireball dealt {actual} damage")

            case EffectKind.CLEANUP:
                if not actor.timers[kind].trigger(catalog[kind]):
                    return self._result(kind, actor, actor, 0, "Cleanup not ready")
                fireball = actor.timers[EffectKind.FIREBALL]
                if not fireball.active:
                    return self._result(kind, actor, actor, 0, "Nothing to clean up")
                fireball.clear()
                actual = actor.increase_health(catalog[EffectKind.FIREBALL].rate)
                return self._result(kind, actor, actor, actual, f"Fire extinguished, healed {actual} HP")

            case _:
                return self._result(kind, actor, actor, 0, "No action")

    def _apply_logged(
        self,
        kind: EffectKind,
        actor: CombatantState,
        target: CombatantState,
        catalog: EffectCatalog,
        round_number: int,
    ) -> EffectResult:
        affected = target if kind in (EffectKind.ATTACK, EffectKind.FIREBALL) else actor
        before = CombatLogger.snapshot_state(affected)

        result = self.apply_effect(kind, actor, target, catalog)

        if self.logger:
            self.logger.log_effect_applied(
                round_number=round_number,
                actor=actor.display_name,
                target=affected.display_name,
                effect=kind,
                value=result.value,
                description=result.description,
                state_before=before,
                state_after=affected,
            )
        return result

    def _tick(self, session: "MatchSession") -> None:
        """Tick every timer of both combatants exactly once."""
        for state in (session.player, session.opponent):
            for kind, timer in state.timers.items():
                timer.tick(session.catalog[kind])

        session.availability.observe(session.opponent, session.player)

        if self.logger:
            self.logger.log_timers_ticked(session.round_number, [session.player, session.opponent])

    def _settle_continuous(self, state: CombatantState, round_number: int) -> list[EffectResult]:
        """Apply per-tick consequences of every active effect on `state`."""
        results: list[EffectResult] = []

        for kind, timer in state.timers.items():
            if not timer.active:
                continue

            before = CombatLogger.snapshot_state(state)
            match kind:
                case EffectKind.REGENERATION:
                    actual = state.increase_health(timer.current_rate)
                    description = f"Regenerated {actual} HP"
                case EffectKind.FIREBALL:
                    actual = state.decrease_health(timer.current_rate)
                    description = f"Burned for {actual} damage"
                case _:
                    continue

            results.append(self._result(kind, state, state, actual, description))
            if self.logger:
                self.logger.log_continuous_applied(
                    round_number=round_number,
                    target=state.display_name,
                    effect=kind,
                    value=actual,
                    description=description,
                    state_before=before,
                    state_after=state,
                )

        return results

    @staticmethod
    def _trigger_timer(kind: EffectKind, actor: CombatantState, target: CombatantState) -> EffectTimerState | None:
        """Timer that using `kind` would trigger (None for untimed kinds)."""
        if kind == EffectKind.FIREBALL:
            return target.timer(kind)
        return actor.timer(kind)

    @staticmethod
    def _check_winner(player: CombatantState, opponent: CombatantState) -> MatchOutcome:
        """Check if the match is decided.

        The opponent is checked first: the controlled side acts first within a
        round, so if both fall in the same round the controlled side wins.
        """
        if not opponent.is_alive():
            return MatchOutcome.CONTROLLED_WON
        if not player.is_alive():
            return MatchOutcome.CONTROLLED_LOST
        return MatchOutcome.NONE

    @staticmethod
    def _describe(outcome: MatchOutcome) -> str:
        match outcome:
            case MatchOutcome.CONTROLLED_WON:
                return "Round resolved, opponent defeated"
            case MatchOutcome.CONTROLLED_LOST:
                return "Round resolved, player defeated"
            case _:
                return "Round resolved"

    @staticmethod
    def _result(
        kind: EffectKind, actor: CombatantState, target: CombatantState, value: int, description: str
    ) -> EffectResult:
        return EffectResult(
            effect=kind,
            actor=actor.display_name,
            target=target.display_name,
            value=value,
            description=description,
        )

    @staticmethod
    def _build_result(session: "MatchSession", accepted: bool, message: str) -> RoundResult:
        return RoundResult(
            accepted=accepted,
            message=message,
            round_number=session.round_number,
            player=CombatLogger.snapshot_state(session.player),
            opponent=CombatLogger.snapshot_state(session.opponent),
            player_effect=session.player.last_effect,
            opponent_effect=session.opponent.last_effect,
            outcome=session.outcome,
        )
