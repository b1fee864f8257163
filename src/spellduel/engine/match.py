"""Match engine - owns match sessions and the asynchronous round boundary."""

import asyncio
import itertools
import logging
from dataclasses import dataclass, field

from ..db.models.enums import EffectKind, MatchOutcome, MatchStatus
from .catalog import CatalogError, CatalogIssue, EffectCatalog
from .logging import CombatLogger
from .policy import OpponentAvailability, OpponentPolicy, RandomOpponentPolicy
from .resolver import ActionResolver
from .types import CombatantState, RoundResult

logger = logging.getLogger(__name__)

PLAYER_NAME = "player"
OPPONENT_NAME = "opponent"

_match_ids = itertools.count(1)


def init_match(max_health: int, catalog: EffectCatalog) -> tuple[CombatantState, CombatantState]:
    """Create both combatants at full health with every timer available.

    Raises:
        CatalogError: If max_health is not positive
    """
    if max_health <= 0:
        raise CatalogError([CatalogIssue("max_health", "Max health must be positive", str(max_health))])
    player = CombatantState.create(max_health, catalog, display_name=PLAYER_NAME)
    opponent = CombatantState.create(max_health, catalog, display_name=OPPONENT_NAME)
    return player, opponent


@dataclass
class MatchSession:
    """Per-match state, owned by the caller and passed back on every round."""

    match_id: int
    catalog: EffectCatalog
    player: CombatantState
    opponent: CombatantState
    availability: OpponentAvailability = field(default_factory=OpponentAvailability)
    status: MatchStatus = MatchStatus.IDLE
    outcome: MatchOutcome = MatchOutcome.NONE
    round_number: int = 0
    combat_logger: CombatLogger | None = None

    @property
    def is_over(self) -> bool:
        return self.outcome != MatchOutcome.NONE


class MatchEngine:
    """Main match engine - creates matches and resolves rounds for them."""

    def __init__(
        self,
        policy: OpponentPolicy | None = None,
        round_delay: float = 0.0,
        enable_combat_log: bool = True,
    ) -> None:
        """Initialize the engine.

        Args:
            policy: Opponent policy shared by matches of this engine
            round_delay: Simulated latency in seconds before a round resolves
            enable_combat_log: Attach a CombatLogger to every new match
        """
        self.policy = policy or RandomOpponentPolicy()
        self.round_delay = round_delay
        self.enable_combat_log = enable_combat_log

    def create_match(
        self,
        max_health: int,
        catalog: EffectCatalog,
        match_id: int | None = None,
    ) -> MatchSession:
        """Create a new match.

        Args:
            max_health: Starting (and maximum) health of both combatants
            catalog: Effect configuration, fixed for the match
            match_id: Identifier for the match, generated when omitted

        Returns:
            The new MatchSession
        """
        player, opponent = init_match(max_health, catalog)
        match_id = match_id if match_id is not None else next(_match_ids)
        session = MatchSession(
            match_id=match_id,
            catalog=catalog,
            player=player,
            opponent=opponent,
            combat_logger=CombatLogger(match_id) if self.enable_combat_log else None,
        )
        logger.info("Match %s created (max_health=%s)", match_id, max_health)
        return session

    def reset_match(self, session: MatchSession) -> None:
        """Start the match over on the same handle."""
        if session.status == MatchStatus.RESOLVING:
            raise RuntimeError(f"Match {session.match_id} is resolving a round")
        session.player.reset(session.catalog)
        session.opponent.reset(session.catalog)
        session.availability = OpponentAvailability()
        session.outcome = MatchOutcome.NONE
        session.round_number = 0
        if session.combat_logger:
            session.combat_logger.clear()
        logger.info("Match %s reset", session.match_id)

    def resolve_round(self, session: MatchSession, effect: EffectKind) -> RoundResult:
        """Resolve a round synchronously, without the simulated delay."""
        resolver = ActionResolver(self.policy, logger=session.combat_logger)
        result = resolver.resolve_round(session, effect)
        if result.accepted:
            logger.debug(
                "Match %s round %s: %s vs %s -> %s",
                session.match_id,
                result.round_number,
                result.player_effect.value,
                result.opponent_effect.value,
                result.outcome.value,
            )
        else:
            logger.debug("Match %s rejected %s: %s", session.match_id, effect.value, result.message)
        return result

    async def submit_action(self, session: MatchSession, effect: EffectKind) -> RoundResult:
        """Submit the controlled side's effect for the next round.

        A second request for the same match while one is in flight is
        rejected without touching the match.

        Args:
            session: The match handle
            effect: Effect chosen by the controlled side

        Returns:
            RoundResult for the round (accepted or rejected)
        """
        if session.status == MatchStatus.RESOLVING:
            logger.debug("Match %s: round already in progress, ignoring %s", session.match_id, effect.value)
            return RoundResult(
                accepted=False,
                message="Round already in progress",
                round_number=session.round_number,
                player=CombatLogger.snapshot_state(session.player),
                opponent=CombatLogger.snapshot_state(session.opponent),
                outcome=session.outcome,
            )

        session.status = MatchStatus.RESOLVING
        try:
            if self.round_delay > 0:
                await asyncio.sleep(self.round_delay)
            return self.resolve_round(session, effect)
        finally:
            session.status = MatchStatus.IDLE
