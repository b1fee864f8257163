"""Enums for game models."""

from enum import Enum


class EffectKind(str, Enum):
    """Effects a combatant can choose in a round."""

    NONE = "none"  # No action taken this round
    ATTACK = "attack"  # One-shot hit, always available
    SHIELD = "shield"  # Absorbs incoming damage while active
    REGENERATION = "regeneration"  # Heals every tick while active
    FIREBALL = "fireball"  # Initial burst on the enemy, then burns every tick
    CLEANUP = "cleanup"  # Extinguishes a fireball burning the caster


# Kinds that carry a duration/cooldown timer on each combatant
TIMED_KINDS = (
    EffectKind.SHIELD,
    EffectKind.REGENERATION,
    EffectKind.FIREBALL,
    EffectKind.CLEANUP,
)

# Kinds that must be present in every effect catalog
CATALOG_KINDS = (EffectKind.ATTACK, *TIMED_KINDS)


class MatchStatus(str, Enum):
    """Whether a match is currently resolving a round."""

    IDLE = "idle"  # Ready to accept a new round request
    RESOLVING = "resolving"  # A round is in flight


class MatchOutcome(str, Enum):
    """Terminal state of a match from the controlled side's point of view."""

    NONE = "none"  # Nobody has been defeated yet
    CONTROLLED_WON = "controlled_won"  # Opponent health reached 0
    CONTROLLED_LOST = "controlled_lost"  # Controlled side health reached 0
