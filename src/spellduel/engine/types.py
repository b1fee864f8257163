"""Type definitions for the duel engine."""

from dataclasses import dataclass, field
from typing import Any

from ..db.models.enums import TIMED_KINDS, EffectKind, MatchOutcome
from .catalog import EffectCatalog, EffectConfig
from .logging import StateSnapshot


@dataclass
class EffectTimerState:
    """Duration/cooldown bookkeeping for one effect on one combatant."""

    kind: EffectKind
    remaining_duration: int = 0
    remaining_cooldown: int = 0
    current_rate: int = 0

    @property
    def available(self) -> bool:
        """Whether the effect can be triggered now."""
        return self.remaining_duration == 0 and self.remaining_cooldown == 0

    @property
    def active(self) -> bool:
        """Whether the effect is producing its per-tick consequence."""
        return self.remaining_duration > 0

    @property
    def restore(self) -> int:
        """Ticks left until the effect becomes available again."""
        return self.remaining_duration + self.remaining_cooldown

    @property
    def complete(self) -> bool:
        return self.restore == 0

    def tick(self, config: EffectConfig) -> None:
        """Advance the timer by one tick.

        Cooldown only starts counting down on the tick after the duration
        has reached 0. The rate is re-read from the config while the effect
        stays active, which also recharges a partially consumed shield.
        """
        if self.remaining_duration == 0 and self.remaining_cooldown > 0:
            self.remaining_cooldown -= 1
        elif self.remaining_duration > 0:
            self.remaining_duration -= 1

        if self.remaining_duration > 0:
            self.current_rate = config.rate

    def trigger(self, config: EffectConfig) -> bool:
        """Start the effect. Returns False (and does nothing) if unavailable."""
        if not self.available:
            return False
        self.remaining_duration = config.duration
        self.remaining_cooldown = config.cooldown
        self.current_rate = config.rate
        return True

    def clear(self) -> None:
        """End the active part of the effect; any cooldown keeps running."""
        self.remaining_duration = 0


@dataclass
class CombatantState:
    """In-memory state of one side of a match.

    This is a mutable object owned by a single match and modified only by
    the ActionResolver during round resolution.
    """

    max_health: int
    health: int
    timers: dict[EffectKind, EffectTimerState] = field(default_factory=dict)
    last_effect: EffectKind = EffectKind.NONE
    display_name: str = ""

    @classmethod
    def create(cls, max_health: int, catalog: EffectCatalog, display_name: str = "") -> "CombatantState":
        """Create a combatant at full health with every timer available."""
        state = cls(max_health=max_health, health=max_health, display_name=display_name)
        state.reset(catalog)
        return state

    def reset(self, catalog: EffectCatalog) -> None:
        """Return to full health with fresh timers."""
        self.health = self.max_health
        self.last_effect = EffectKind.NONE
        self.timers = {kind: EffectTimerState(kind=kind, current_rate=catalog[kind].rate) for kind in TIMED_KINDS}

    def is_alive(self) -> bool:
        """Check if the combatant is still standing."""
        return self.health > 0

    def timer(self, kind: EffectKind) -> EffectTimerState | None:
        """Get the timer for an effect kind (None for ATTACK/NONE)."""
        return self.timers.get(kind)

    def is_active(self, kind: EffectKind) -> bool:
        timer = self.timers.get(kind)
        return timer is not None and timer.active

    def increase_health(self, amount: int) -> int:
        """Heal, capped at max health. Returns actual health restored."""
        before = self.health
        self._set_health(self.health + amount)
        return self.health - before

    def decrease_health(self, amount: int) -> int:
        """Apply damage after shield absorption. Returns actual damage dealt."""
        damage = amount
        shield = self.timers.get(EffectKind.SHIELD)
        if shield is not None and shield.active:
            remainder = amount - shield.current_rate
            if remainder >= 0:
                shield.current_rate = 0
                damage = remainder
            else:
                shield.current_rate = -remainder
                damage = 0

        before = self.health
        self._set_health(self.health - damage)
        return before - self.health

    def _set_health(self, value: int) -> None:
        self.health = max(0, min(value, self.max_health))


@dataclass
class EffectResult:
    """Result of applying a single effect."""

    effect: EffectKind
    actor: str
    target: str
    value: int
    description: str


@dataclass
class RoundResult:
    """Result of a round request."""

    accepted: bool
    message: str
    round_number: int = 0
    player: StateSnapshot | None = None
    opponent: StateSnapshot | None = None
    player_effect: EffectKind = EffectKind.NONE
    opponent_effect: EffectKind = EffectKind.NONE
    outcome: MatchOutcome = MatchOutcome.NONE
    effects_applied: list[EffectResult] = field(default_factory=list)

    @property
    def is_match_over(self) -> bool:
        return self.outcome != MatchOutcome.NONE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "accepted": self.accepted,
            "message": self.message,
            "round_number": self.round_number,
            "player": self.player.to_dict() if self.player else None,
            "opponent": self.opponent.to_dict() if self.opponent else None,
            "player_effect": self.player_effect.value,
            "opponent_effect": self.opponent_effect.value,
            "outcome": self.outcome.value,
            "effects_applied": [
                {
                    "effect": e.effect.value,
                    "actor": e.actor,
                    "target": e.target,
                    "value": e.value,
                    "description": e.description,
                }
                for e in self.effects_applied
            ],
        }
