"""Effect catalog model - static per-effect configuration."""

from sqlalchemy import Enum as SQLEnum
from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin
from .enums import EffectKind


class EffectDefinition(Base, TimestampMixin):
    """Configuration of one effect kind.

    One row per kind. ATTACK only uses power; the timed kinds use
    rate, duration and cooldown as well.

    Examples:
    - attack: power=20
    - shield: rate=15, duration=3, cooldown=2
    - fireball: power=10, rate=5, duration=3, cooldown=3
    """

    __tablename__ = "effect_definitions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    kind: Mapped[EffectKind] = mapped_column(
        SQLEnum(EffectKind, name="effect_kind"), nullable=False, unique=True, index=True
    )
    description: Mapped[str] = mapped_column(Text, nullable=True)

    power: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # One-shot amount
    rate: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # Per-tick amount
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # Active ticks
    cooldown: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # Ticks after duration

    def __repr__(self) -> str:
        return f"<EffectDefinition(kind={self.kind}, power={self.power}, rate={self.rate})>"
