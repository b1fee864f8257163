"""Catalog service - loads and maintains effect configuration in the database."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.models.effects import EffectDefinition
from ..db.models.enums import EffectKind
from ..engine.catalog import DEFAULT_EFFECT_RECORDS, EffectCatalog, EffectRecord

logger = logging.getLogger(__name__)


class CatalogService:
    """Service for effect catalog operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def load_catalog(self) -> EffectCatalog:
        """Build a validated catalog from the stored effect definitions.

        Returns:
            EffectCatalog for a new match

        Raises:
            CatalogError: If stored definitions are incomplete or invalid
        """
        definitions = await self.get_definitions()
        return EffectCatalog.from_records(
            {
                "kind": d.kind,
                "power": d.power,
                "rate": d.rate,
                "duration": d.duration,
                "cooldown": d.cooldown,
            }
            for d in definitions
        )

    async def get_definitions(self) -> list[EffectDefinition]:
        """Get all stored effect definitions."""
        stmt = select(EffectDefinition).order_by(EffectDefinition.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_definition(self, kind: EffectKind) -> EffectDefinition | None:
        """Get the definition for one effect kind."""
        stmt = select(EffectDefinition).where(EffectDefinition.kind == kind)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert_effect(
        self,
        kind: EffectKind,
        power: int = 0,
        rate: int = 0,
        duration: int = 0,
        cooldown: int = 0,
        description: str | None = None,
    ) -> EffectDefinition:
        """Create or update the definition for an effect kind.

        Values are validated the same way catalog records are, so a negative
        value raises pydantic's ValidationError before anything is written.
        """
        record = EffectRecord(kind=kind, power=power, rate=rate, duration=duration, cooldown=cooldown)

        definition = await self.get_definition(kind)
        if definition is None:
            definition = EffectDefinition(kind=kind)
            self.session.add(definition)

        definition.power = record.power
        definition.rate = record.rate
        definition.duration = record.duration
        definition.cooldown = record.cooldown
        if description is not None:
            definition.description = description

        await self.session.flush()
        return definition

    async def seed_defaults(self) -> int:
        """Insert the built-in definitions for any kind not stored yet.

        Returns:
            Number of definitions created
        """
        existing = {d.kind for d in await self.get_definitions()}
        created = 0

        for raw in DEFAULT_EFFECT_RECORDS:
            record = EffectRecord.model_validate(raw)
            if record.kind in existing:
                continue
            self.session.add(
                EffectDefinition(
                    kind=record.kind,
                    power=record.power,
                    rate=record.rate,
                    duration=record.duration,
                    cooldown=record.cooldown,
                )
            )
            created += 1

        if created:
            await self.session.flush()
            logger.info("Seeded %s effect definitions", created)
        return created
