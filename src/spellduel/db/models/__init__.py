"""Database models."""

from .base import Base, TimestampMixin
from .effects import EffectDefinition
from .enums import CATALOG_KINDS, TIMED_KINDS, EffectKind, MatchOutcome, MatchStatus

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Enums
    "EffectKind",
    "MatchOutcome",
    "MatchStatus",
    "CATALOG_KINDS",
    "TIMED_KINDS",
    # Effects
    "EffectDefinition",
]
