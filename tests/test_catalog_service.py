"""Tests for CatalogService."""

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from spellduel.db.models import EffectDefinition, EffectKind
from spellduel.engine.catalog import CatalogError, EffectCatalog
from spellduel.services.catalogs import CatalogService


class TestCatalogService:
    """Tests for loading and editing the stored catalog."""

    async def test_seed_defaults(self, db_session):
        """Test seeding stores one definition per configurable kind."""
        service = CatalogService(db_session)

        created = await service.seed_defaults()

        assert created == 5
        definitions = await service.get_definitions()
        assert {d.kind for d in definitions} == {
            EffectKind.ATTACK,
            EffectKind.SHIELD,
            EffectKind.REGENERATION,
            EffectKind.FIREBALL,
            EffectKind.CLEANUP,
        }

    async def test_seed_defaults_is_idempotent(self, db_session):
        """Test seeding twice creates nothing the second time."""
        service = CatalogService(db_session)
        await service.seed_defaults()

        assert await service.seed_defaults() == 0
        assert len(await service.get_definitions()) == 5

    async def test_seed_keeps_existing_values(self, db_session):
        """Test seeding does not overwrite stored definitions."""
        service = CatalogService(db_session)
        await service.upsert_effect(EffectKind.ATTACK, power=33)

        assert await service.seed_defaults() == 4
        definition = await service.get_definition(EffectKind.ATTACK)
        assert definition.power == 33

    async def test_load_catalog(self, db_session):
        """Test the stored definitions build a catalog equal to the defaults."""
        service = CatalogService(db_session)
        await service.seed_defaults()

        catalog = await service.load_catalog()

        assert catalog == EffectCatalog.default()

    async def test_load_incomplete_catalog(self, db_session):
        """Test a catalog with missing kinds cannot be loaded."""
        service = CatalogService(db_session)
        await service.upsert_effect(EffectKind.ATTACK, power=10)

        with pytest.raises(CatalogError) as exc_info:
            await service.load_catalog()
        assert {issue.value for issue in exc_info.value.issues} == {
            "shield",
            "regeneration",
            "fireball",
            "cleanup",
        }

    async def test_upsert_updates_in_place(self, db_session):
        """Test upserting an existing kind updates the same row."""
        service = CatalogService(db_session)
        first = await service.upsert_effect(EffectKind.SHIELD, rate=10, duration=2, cooldown=1)
        second = await service.upsert_effect(
            EffectKind.SHIELD, rate=20, duration=4, cooldown=1, description="Heavy shield"
        )

        assert first.id == second.id
        definition = await service.get_definition(EffectKind.SHIELD)
        assert definition.rate == 20
        assert definition.duration == 4
        assert definition.description == "Heavy shield"

    async def test_upsert_rejects_negative_values(self, db_session):
        """Test negative values never reach the database."""
        service = CatalogService(db_session)

        with pytest.raises(ValidationError):
            await service.upsert_effect(EffectKind.FIREBALL, power=-5)
        assert await service.get_definition(EffectKind.FIREBALL) is None

    async def test_kind_is_unique(self, db_session):
        """Test the table holds at most one row per kind."""
        db_session.add(EffectDefinition(kind=EffectKind.ATTACK, power=1))
        db_session.add(EffectDefinition(kind=EffectKind.ATTACK, power=2))

        with pytest.raises(IntegrityError):
            await db_session.flush()
