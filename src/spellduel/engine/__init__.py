"""Duel engine module - handles timers, action resolution, and damage calculation."""

from .catalog import CatalogError, CatalogIssue, EffectCatalog, EffectConfig, EffectRecord
from .logging import CombatLog, CombatLogger, LogEntry, LogEventType, StateSnapshot, TimerSnapshot
from .match import MatchEngine, MatchSession, init_match
from .policy import OpponentAvailability, OpponentPolicy, RandomOpponentPolicy, ScriptedOpponentPolicy
from .resolver import ActionResolver
from .types import CombatantState, EffectResult, EffectTimerState, RoundResult

__all__ = [
    "EffectCatalog",
    "EffectConfig",
    "EffectRecord",
    "CatalogError",
    "CatalogIssue",
    "EffectTimerState",
    "CombatantState",
    "EffectResult",
    "RoundResult",
    "OpponentAvailability",
    "OpponentPolicy",
    "RandomOpponentPolicy",
    "ScriptedOpponentPolicy",
    "ActionResolver",
    "MatchEngine",
    "MatchSession",
    "init_match",
    "CombatLogger",
    "CombatLog",
    "LogEntry",
    "LogEventType",
    "StateSnapshot",
    "TimerSnapshot",
]
