"""Match service - keeps live matches and routes round requests to them."""

import logging
import random
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..db.models.enums import EffectKind, MatchStatus
from ..engine.catalog import EffectCatalog
from ..engine.logging import CombatLogger
from ..engine.match import MatchEngine, MatchSession
from ..engine.policy import RandomOpponentPolicy
from ..engine.types import RoundResult
from .catalogs import CatalogService

logger = logging.getLogger(__name__)


class MatchService:
    """Service for match operations."""

    def __init__(
        self,
        session: AsyncSession,
        engine: MatchEngine | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self.engine = engine or MatchEngine(
            policy=RandomOpponentPolicy(random.Random(self.settings.rng_seed)),
            round_delay=self.settings.round_delay,
        )
        self._matches: dict[int, MatchSession] = {}

    async def load_catalog(self) -> EffectCatalog:
        """Load the effect catalog from the configured JSON file or the database."""
        if self.settings.catalog_path:
            return EffectCatalog.from_json_file(self.settings.catalog_path)
        return await CatalogService(self.session).load_catalog()

    async def start_match(self, max_health: int | None = None) -> MatchSession:
        """Start a new match.

        Args:
            max_health: Starting health of both sides, defaults to the configured value

        Returns:
            The new MatchSession

        Raises:
            CatalogError: If the catalog or max health is invalid
        """
        if max_health is None:
            max_health = self.settings.max_health
        catalog = await self.load_catalog()
        session = self.engine.create_match(max_health, catalog)
        self._matches[session.match_id] = session
        return session

    async def submit_action(self, match_id: int, effect: EffectKind) -> RoundResult:
        """Submit the controlled side's effect for a match.

        Args:
            match_id: ID of the match
            effect: Effect chosen by the controlled side

        Returns:
            RoundResult, rejected if the match does not exist
        """
        session = self._matches.get(match_id)
        if session is None:
            return RoundResult(accepted=False, message="Match not found")

        result = await self.engine.submit_action(session, effect)
        if result.is_match_over and result.accepted:
            logger.info("Match %s finished: %s", match_id, result.outcome.value)
        return result

    def get_match(self, match_id: int) -> MatchSession | None:
        """Get a live match by ID."""
        return self._matches.get(match_id)

    def get_match_state(self, match_id: int) -> dict[str, Any] | None:
        """Get the current state of a match for display.

        Args:
            match_id: ID of the match

        Returns:
            Dict with match state, or None if not found
        """
        session = self._matches.get(match_id)
        if session is None:
            return None

        return {
            "match_id": session.match_id,
            "status": session.status.value,
            "outcome": session.outcome.value,
            "round_number": session.round_number,
            "player": CombatLogger.snapshot_state(session.player).to_dict(),
            "opponent": CombatLogger.snapshot_state(session.opponent).to_dict(),
        }

    def restart_match(self, match_id: int) -> bool:
        """Start a match over. Returns False if it is unknown or mid-round."""
        session = self._matches.get(match_id)
        if session is None or session.status == MatchStatus.RESOLVING:
            return False
        self.engine.reset_match(session)
        return True

    def end_match(self, match_id: int) -> bool:
        """Drop a match. Returns False if it is unknown or mid-round."""
        session = self._matches.get(match_id)
        if session is None or session.status == MatchStatus.RESOLVING:
            return False
        del self._matches[match_id]
        logger.info("Match %s ended", match_id)
        return True
