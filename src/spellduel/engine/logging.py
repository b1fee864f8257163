"""Combat logging system for tracking and verifying round resolution.

Provides structured logging of all combat events including:
- Round lifecycle and rejections
- Timer ticks and opponent choices
- Effect applications with before/after state
- Continuous (per-tick) effects and the winner
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..db.models.enums import EffectKind, MatchOutcome


class LogEventType(str, Enum):
    """Types of log events."""

    # Round lifecycle
    ROUND_START = "round_start"
    ROUND_END = "round_end"
    ROUND_REJECTED = "round_rejected"

    # Bookkeeping
    TIMERS_TICKED = "timers_ticked"
    OPPONENT_CHOSE = "opponent_chose"

    # Health changes
    EFFECT_APPLIED = "effect_applied"
    CONTINUOUS_APPLIED = "continuous_applied"

    # Win condition
    WINNER_DETERMINED = "winner_determined"


@dataclass(frozen=True)
class TimerSnapshot:
    """Snapshot of one effect timer."""

    remaining_duration: int
    remaining_cooldown: int
    current_rate: int

    def to_dict(self) -> dict[str, int]:
        return {
            "remaining_duration": self.remaining_duration,
            "remaining_cooldown": self.remaining_cooldown,
            "current_rate": self.current_rate,
        }


@dataclass(frozen=True)
class StateSnapshot:
    """Snapshot of a combatant's state at a point in time."""

    name: str
    health: int
    max_health: int
    last_effect: EffectKind
    timers: dict[EffectKind, TimerSnapshot]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "health": self.health,
            "max_health": self.max_health,
            "last_effect": self.last_effect.value,
            "effects": {kind.value: timer.to_dict() for kind, timer in self.timers.items()},
        }


@dataclass
class LogEntry:
    """A single log entry representing a combat event."""

    event_type: LogEventType
    round_number: int
    timestamp_order: int = 0  # Order within the match for deterministic sorting

    # Event-specific data
    actor: str | None = None
    target: str | None = None
    effect: EffectKind | None = None
    reason: str | None = None

    # State before/after for health-changing events
    state_before: StateSnapshot | None = None
    state_after: StateSnapshot | None = None

    # Result
    value: int | None = None
    description: str | None = None

    # For round boundaries and ticks - all combatants
    all_states: dict[str, StateSnapshot] | None = None

    # Opponent decision
    candidates: list[EffectKind] | None = None

    # Winner info
    outcome: MatchOutcome | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {
            "event_type": self.event_type.value,
            "round_number": self.round_number,
            "timestamp_order": self.timestamp_order,
        }

        if self.actor is not None:
            result["actor"] = self.actor
        if self.target is not None:
            result["target"] = self.target
        if self.effect is not None:
            result["effect"] = self.effect.value
        if self.reason is not None:
            result["reason"] = self.reason
        if self.state_before is not None:
            result["state_before"] = self.state_before.to_dict()
        if self.state_after is not None:
            result["state_after"] = self.state_after.to_dict()
        if self.value is not None:
            result["value"] = self.value
        if self.description is not None:
            result["description"] = self.description
        if self.all_states is not None:
            result["all_states"] = {name: state.to_dict() for name, state in self.all_states.items()}
        if self.candidates is not None:
            result["candidates"] = [kind.value for kind in self.candidates]
        if self.outcome is not None:
            result["outcome"] = self.outcome.value

        return result


@dataclass
class CombatLog:
    """Complete log of a match."""

    match_id: int
    entries: list[LogEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "match_id": self.match_id,
            "entries": [entry.to_dict() for entry in self.entries],
        }

    def get_entries_by_type(self, event_type: LogEventType) -> list[LogEntry]:
        """Get all entries of a specific type."""
        return [e for e in self.entries if e.event_type == event_type]

    def get_entries_for_round(self, round_number: int) -> list[LogEntry]:
        """Get all entries for a specific round."""
        return [e for e in self.entries if e.round_number == round_number]

    def format_readable(self) -> str:
        """Format the log in a human-readable format."""
        lines: list[str] = []
        lines.append(f"=== Combat Log (Match #{self.match_id}) ===\n")

        current_round = -1

        for entry in self.entries:
            if entry.round_number != current_round:
                current_round = entry.round_number
                lines.append(f"\n--- Round {current_round} ---\n")

            lines.append(self._format_entry(entry))

        return "\n".join(lines)

    def _format_entry(self, entry: LogEntry) -> str:
        """Format a single log entry."""
        match entry.event_type:
            case LogEventType.ROUND_START:
                return f"  Round {entry.round_number} begins"

            case LogEventType.ROUND_END:
                states = entry.all_states or {}
                health = ", ".join(f"{name} HP={s.health}/{s.max_health}" for name, s in states.items())
                return f"  Round {entry.round_number} ends ({health})"

            case LogEventType.ROUND_REJECTED:
                effect = entry.effect.value if entry.effect else "?"
                return f"  ✗ {entry.actor} cannot use {effect}: {entry.reason}"

            case LogEventType.TIMERS_TICKED:
                if not entry.all_states:
                    return "    Timers ticked"
                parts = []
                for name, state in entry.all_states.items():
                    running = ", ".join(
                        f"{kind.value}:{t.remaining_duration}/{t.remaining_cooldown}"
                        for kind, t in state.timers.items()
                        if t.remaining_duration or t.remaining_cooldown
                    )
                    parts.append(f"{name}[{running or 'idle'}]")
                return "    Timers ticked: " + " ".join(parts)

            case LogEventType.OPPONENT_CHOSE:
                effect = entry.effect.value if entry.effect else "?"
                options = ", ".join(kind.value for kind in entry.candidates or [])
                return f"    Opponent chose {effect} (from: {options})"

            case LogEventType.EFFECT_APPLIED | LogEventType.CONTINUOUS_APPLIED:
                hp_change = ""
                if entry.state_before and entry.state_after:
                    if entry.state_before.health != entry.state_after.health:
                        hp_change = f" [HP: {entry.state_before.health} → {entry.state_after.health}]"
                effect = entry.effect.value if entry.effect else "?"
                arrow = "→" if entry.event_type == LogEventType.EFFECT_APPLIED else "~"
                return f"    {arrow} {entry.actor}: {effect} on {entry.target}{hp_change} ({entry.description})"

            case LogEventType.WINNER_DETERMINED:
                outcome = entry.outcome.value if entry.outcome else "?"
                return f"  *** RESULT: {outcome} ***"

            case _:
                return f"    {entry.event_type.value}: {entry.description or ''}"


class CombatLogger:
    """Logger for tracking combat events of one match.

    Usage:
        logger = CombatLogger(match_id=1)
        logger.log_round_start(round_number=1, states=...)
        # ... log events ...
        logger.log_round_end(round_number=1, states=...)

        log = logger.get_log()
        print(log.format_readable())
    """

    def __init__(self, match_id: int) -> None:
        """Initialize the logger for a match."""
        self.match_id = match_id
        self._log = CombatLog(match_id=match_id)
        self._order_counter = 0

    def _next_order(self) -> int:
        """Get the next timestamp order value."""
        self._order_counter += 1
        return self._order_counter

    def _append(self, entry: LogEntry) -> None:
        entry.timestamp_order = self._next_order()
        self._log.entries.append(entry)

    def get_log(self) -> CombatLog:
        """Get the complete combat log."""
        return self._log

    def clear(self) -> None:
        """Clear all log entries."""
        self._log.entries.clear()
        self._order_counter = 0

    @staticmethod
    def snapshot_state(state: Any) -> StateSnapshot:
        """Create a snapshot from a CombatantState object."""
        return StateSnapshot(
            name=state.display_name,
            health=state.health,
            max_health=state.max_health,
            last_effect=state.last_effect,
            timers={
                kind: TimerSnapshot(
                    remaining_duration=timer.remaining_duration,
                    remaining_cooldown=timer.remaining_cooldown,
                    current_rate=timer.current_rate,
                )
                for kind, timer in state.timers.items()
            },
        )

    def _snapshot_all(self, states: list[Any]) -> dict[str, StateSnapshot]:
        return {state.display_name: self.snapshot_state(state) for state in states}

    def log_round_start(self, round_number: int, states: list[Any]) -> None:
        """Log the start of a round with initial state snapshot."""
        self._append(
            LogEntry(
                event_type=LogEventType.ROUND_START,
                round_number=round_number,
                all_states=self._snapshot_all(states),
            )
        )

    def log_round_end(self, round_number: int, states: list[Any]) -> None:
        """Log the end of a round with final state snapshot."""
        self._append(
            LogEntry(
                event_type=LogEventType.ROUND_END,
                round_number=round_number,
                all_states=self._snapshot_all(states),
            )
        )

    def log_round_rejected(self, round_number: int, actor: str, effect: EffectKind, reason: str) -> None:
        """Log a round request that was not accepted."""
        self._append(
            LogEntry(
                event_type=LogEventType.ROUND_REJECTED,
                round_number=round_number,
                actor=actor,
                effect=effect,
                reason=reason,
            )
        )

    def log_timers_ticked(self, round_number: int, states: list[Any]) -> None:
        """Log timer state right after the tick."""
        self._append(
            LogEntry(
                event_type=LogEventType.TIMERS_TICKED,
                round_number=round_number,
                all_states=self._snapshot_all(states),
            )
        )

    def log_opponent_chose(self, round_number: int, effect: EffectKind, candidates: list[EffectKind]) -> None:
        """Log the opponent policy decision."""
        self._append(
            LogEntry(
                event_type=LogEventType.OPPONENT_CHOSE,
                round_number=round_number,
                actor="opponent",
                effect=effect,
                candidates=list(candidates),
            )
        )

    def log_effect_applied(
        self,
        round_number: int,
        actor: str,
        target: str,
        effect: EffectKind,
        value: int,
        description: str,
        state_before: StateSnapshot,
        state_after: Any,
    ) -> None:
        """Log a chosen effect being applied, with the target's before/after state."""
        self._append(
            LogEntry(
                event_type=LogEventType.EFFECT_APPLIED,
                round_number=round_number,
                actor=actor,
                target=target,
                effect=effect,
                value=value,
                description=description,
                state_before=state_before,
                state_after=self.snapshot_state(state_after),
            )
        )

    def log_continuous_applied(
        self,
        round_number: int,
        target: str,
        effect: EffectKind,
        value: int,
        description: str,
        state_before: StateSnapshot,
        state_after: Any,
    ) -> None:
        """Log a per-tick effect (regeneration or burning)."""
        self._append(
            LogEntry(
                event_type=LogEventType.CONTINUOUS_APPLIED,
                round_number=round_number,
                actor=target,
                target=target,
                effect=effect,
                value=value,
                description=description,
                state_before=state_before,
                state_after=self.snapshot_state(state_after),
            )
        )

    def log_winner(self, round_number: int, outcome: MatchOutcome) -> None:
        """Log the winner determination."""
        self._append(
            LogEntry(
                event_type=LogEventType.WINNER_DETERMINED,
                round_number=round_number,
                outcome=outcome,
            )
        )
