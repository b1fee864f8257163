"""Shared fixtures for engine and service tests."""

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from spellduel.db.models import Base, EffectKind
from spellduel.engine.catalog import EffectCatalog
from spellduel.engine.match import MatchEngine, MatchSession
from spellduel.engine.policy import ScriptedOpponentPolicy

# Values used by the round scenarios in the tests
TEST_EFFECT_RECORDS = [
    {"kind": "attack", "power": 20},
    {"kind": "shield", "rate": 15, "duration": 3, "cooldown": 2},
    {"kind": "regeneration", "rate": 5, "duration": 3, "cooldown": 2},
    {"kind": "fireball", "power": 10, "rate": 5, "duration": 3, "cooldown": 3},
    {"kind": "cleanup", "duration": 1, "cooldown": 3},
]


@pytest.fixture
def effect_records() -> list[dict]:
    """Fresh copy of the scenario records."""
    return [dict(record) for record in TEST_EFFECT_RECORDS]


@pytest.fixture
def catalog() -> EffectCatalog:
    """Catalog with the scenario values."""
    return EffectCatalog.from_records(TEST_EFFECT_RECORDS)


@pytest.fixture
def make_match(catalog: EffectCatalog):
    """Factory for a match against a scripted opponent.

    Usage:
        engine, session = make_match([EffectKind.ATTACK, EffectKind.SHIELD])
    """

    def _make(
        script: list[EffectKind] | None = None,
        max_health: int = 100,
        default: EffectKind = EffectKind.ATTACK,
    ) -> tuple[MatchEngine, MatchSession]:
        engine = MatchEngine(policy=ScriptedOpponentPolicy(script or [], default=default))
        session = engine.create_match(max_health, catalog, match_id=1)
        return engine, session

    return _make


@pytest.fixture
async def async_engine():
    """Create async SQLite in-memory engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )

    # Enable foreign keys for SQLite
    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine):
    """Create async session for testing with automatic rollback."""
    async_session_factory = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_factory() as session:
        yield session
        await session.rollback()
