"""Opponent policies - decide which effect the non-player side uses."""

import random
from collections.abc import Iterable
from typing import Protocol

from ..db.models.enums import EffectKind
from .types import CombatantState


class OpponentAvailability:
    """Effects the opponent policy currently considers choosable.

    Seeded with every kind except NONE. ATTACK is never removed. A kind
    taken out after being chosen comes back once the opponent's timer for
    it reports available again (see `observe`).
    """

    def __init__(self, kinds: Iterable[EffectKind] | None = None) -> None:
        if kinds is None:
            kinds = [kind for kind in EffectKind if kind != EffectKind.NONE]
        self._kinds: set[EffectKind] = set(kinds)
        self._kinds.add(EffectKind.ATTACK)

    def __contains__(self, kind: object) -> bool:
        return kind in self._kinds

    def __len__(self) -> int:
        return len(self._kinds)

    def candidates(self) -> list[EffectKind]:
        """Choosable kinds in declaration order."""
        return [kind for kind in EffectKind if kind in self._kinds]

    def remove(self, kind: EffectKind) -> None:
        if kind != EffectKind.ATTACK:
            self._kinds.discard(kind)

    def observe(self, state: CombatantState, target: CombatantState) -> list[EffectKind]:
        """Re-add kinds whose timers are available again. Returns the re-added kinds.

        Args:
            state: The opponent's own combat state
            target: The combatant the opponent acts against

        FIREBALL is read from `target`, since the burning timer lives on
        the combatant being burned.
        """
        restored: list[EffectKind] = []
        for kind in state.timers:
            timer = target.timers[kind] if kind == EffectKind.FIREBALL else state.timers[kind]
            if kind not in self._kinds and timer.available:
                self._kinds.add(kind)
                restored.append(kind)
        return restored


class OpponentPolicy(Protocol):
    """Anything that can pick the opponent's effect for a round."""

    last_candidates: list[EffectKind]  # Options considered by the latest choice

    def choose(self, state: CombatantState, availability: OpponentAvailability) -> EffectKind: ...


class RandomOpponentPolicy:
    """Uniform random choice among the available effects."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()
        self.last_candidates: list[EffectKind] = []

    def choose(self, state: CombatantState, availability: OpponentAvailability) -> EffectKind:
        """Pick an effect for the opponent.

        Args:
            state: The opponent's own combat state
            availability: The match's availability set, updated in place

        Returns:
            The chosen effect kind
        """
        candidates = availability.candidates()

        # Cleanup is pointless unless the opponent is burning
        if not state.is_active(EffectKind.FIREBALL) and EffectKind.CLEANUP in candidates:
            candidates.remove(EffectKind.CLEANUP)

        self.last_candidates = candidates
        if not candidates:
            return EffectKind.ATTACK

        kind = self.rng.choice(candidates)
        availability.remove(kind)
        return kind


class ScriptedOpponentPolicy:
    """Plays a fixed sequence of effects, then falls back to a default."""

    def __init__(self, kinds: Iterable[EffectKind], default: EffectKind = EffectKind.ATTACK) -> None:
        self._script = list(kinds)
        self.default = default
        self.last_candidates: list[EffectKind] = []

    def choose(self, state: CombatantState, availability: OpponentAvailability) -> EffectKind:
        kind = self._script.pop(0) if self._script else self.default
        self.last_candidates = [kind]
        availability.remove(kind)
        return kind
