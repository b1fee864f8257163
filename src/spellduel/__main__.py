"""Entry point for playing an automated spellduel match in the console."""

import asyncio
import logging
import random
import sys

from spellduel.config import get_settings
from spellduel.db.engine import async_session_factory, engine
from spellduel.db.models import Base, EffectKind
from spellduel.engine import ActionResolver, CatalogError, MatchSession
from spellduel.services import CatalogService, MatchService

MAX_ROUNDS = 200


def pick_player_effect(session: MatchSession, resolver: ActionResolver, rng: random.Random) -> EffectKind:
    """Pick a random effect the player is currently allowed to use."""
    choices = [
        kind
        for kind in EffectKind
        if kind != EffectKind.NONE and resolver.validate(session, kind) is None
    ]
    return rng.choice(choices) if choices else EffectKind.NONE


async def main() -> int:
    """Play one match between two random sides and print the combat log."""
    settings = get_settings()

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        async with async_session_factory() as db_session:
            await CatalogService(db_session).seed_defaults()
            await db_session.commit()

            service = MatchService(db_session)
            try:
                session = await service.start_match()
            except CatalogError as exc:
                logging.error("Cannot start match: %s", exc)
                return 1

            rng = random.Random(settings.rng_seed)
            resolver = ActionResolver(service.engine.policy)
            logging.info("Starting match %s...", session.match_id)

            while not session.is_over and session.round_number < MAX_ROUNDS:
                effect = pick_player_effect(session, resolver, rng)
                await service.submit_action(session.match_id, effect)

            if session.combat_logger:
                print(session.combat_logger.get_log().format_readable())
            print(f"\nResult: {session.outcome.value} after {session.round_number} rounds")
    finally:
        await engine.dispose()

    return 0


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    run()
