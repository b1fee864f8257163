"""Tests for combat logging system."""

from spellduel.db.models.enums import EffectKind, MatchOutcome
from spellduel.engine.logging import CombatLog, CombatLogger, LogEntry, LogEventType, StateSnapshot, TimerSnapshot
from spellduel.engine.types import CombatantState


class TestStateSnapshot:
    """Tests for StateSnapshot."""

    def test_snapshot_is_detached(self, catalog):
        """Test later changes to the state do not leak into the snapshot."""
        state = CombatantState.create(100, catalog, display_name="player")
        snapshot = CombatLogger.snapshot_state(state)

        state.health = 10
        state.timers[EffectKind.SHIELD].remaining_duration = 3

        assert snapshot.health == 100
        assert snapshot.timers[EffectKind.SHIELD].remaining_duration == 0

    def test_to_dict(self):
        """Test snapshot serialization uses enum values."""
        snapshot = StateSnapshot(
            name="player",
            health=80,
            max_health=100,
            last_effect=EffectKind.SHIELD,
            timers={EffectKind.SHIELD: TimerSnapshot(remaining_duration=2, remaining_cooldown=2, current_rate=15)},
        )

        result = snapshot.to_dict()

        assert result["name"] == "player"
        assert result["last_effect"] == "shield"
        assert result["effects"]["shield"] == {
            "remaining_duration": 2,
            "remaining_cooldown": 2,
            "current_rate": 15,
        }


class TestLogEntry:
    """Tests for LogEntry."""

    def test_to_dict_skips_empty_fields(self):
        """Test only populated fields are serialized."""
        entry = LogEntry(
            event_type=LogEventType.WINNER_DETERMINED,
            round_number=4,
            timestamp_order=9,
            outcome=MatchOutcome.CONTROLLED_WON,
        )

        assert entry.to_dict() == {
            "event_type": "winner_determined",
            "round_number": 4,
            "timestamp_order": 9,
            "outcome": "controlled_won",
        }


class TestCombatLogger:
    """Tests for CombatLogger."""

    def test_entries_are_ordered(self, catalog):
        """Test every entry gets an increasing order value."""
        logger = CombatLogger(match_id=1)
        states = [CombatantState.create(100, catalog, display_name=n) for n in ("player", "opponent")]

        logger.log_round_start(1, states)
        logger.log_opponent_chose(1, EffectKind.ATTACK, [EffectKind.ATTACK])
        logger.log_round_end(1, states)

        entries = logger.get_log().entries
        assert [e.timestamp_order for e in entries] == [1, 2, 3]
        assert set(entries[0].all_states) == {"player", "opponent"}

    def test_clear(self, catalog):
        """Test clear empties the log and restarts ordering."""
        logger = CombatLogger(match_id=1)
        logger.log_winner(3, MatchOutcome.CONTROLLED_LOST)
        logger.clear()

        assert logger.get_log().entries == []
        logger.log_winner(1, MatchOutcome.CONTROLLED_LOST)
        assert logger.get_log().entries[0].timestamp_order == 1


class TestCombatLogIntegration:
    """Tests for the log produced while resolving rounds."""

    def test_round_event_sequence(self, make_match):
        """Test an accepted round logs its phases in order."""
        engine, session = make_match([EffectKind.ATTACK])

        engine.resolve_round(session, EffectKind.FIREBALL)

        log = session.combat_logger.get_log()
        types = [e.event_type for e in log.get_entries_for_round(1)]
        assert types == [
            LogEventType.ROUND_START,
            LogEventType.TIMERS_TICKED,
            LogEventType.OPPONENT_CHOSE,
            LogEventType.EFFECT_APPLIED,
            LogEventType.EFFECT_APPLIED,
            LogEventType.CONTINUOUS_APPLIED,
            LogEventType.ROUND_END,
        ]

    def test_opponent_choice_lists_policy_candidates(self, make_match):
        """Test the opponent decision records the options the policy considered."""
        engine, session = make_match([EffectKind.SHIELD])

        engine.resolve_round(session, EffectKind.ATTACK)

        chose = session.combat_logger.get_log().get_entries_by_type(LogEventType.OPPONENT_CHOSE)
        assert len(chose) == 1
        assert chose[0].effect == EffectKind.SHIELD
        assert chose[0].candidates == engine.policy.last_candidates == [EffectKind.SHIELD]

    def test_effect_entries_record_health_change(self, make_match):
        """Test effect entries carry the target's before/after health."""
        engine, session = make_match([EffectKind.ATTACK])

        engine.resolve_round(session, EffectKind.ATTACK)

        applied = session.combat_logger.get_log().get_entries_by_type(LogEventType.EFFECT_APPLIED)
        assert [(e.actor, e.target) for e in applied] == [("player", "opponent"), ("opponent", "player")]
        assert applied[0].state_before.health == 100
        assert applied[0].state_after.health == 80
        assert applied[0].value == 20

    def test_rejection_logged(self, make_match):
        """Test rejected requests are logged without a round."""
        engine, session = make_match()

        engine.resolve_round(session, EffectKind.CLEANUP)

        entries = session.combat_logger.get_log().entries
        assert len(entries) == 1
        assert entries[0].event_type == LogEventType.ROUND_REJECTED
        assert entries[0].reason == "Nothing to clean up"

    def test_winner_logged(self, make_match):
        """Test the deciding round logs the outcome."""
        engine, session = make_match()
        session.opponent.health = 10

        engine.resolve_round(session, EffectKind.ATTACK)

        winners = session.combat_logger.get_log().get_entries_by_type(LogEventType.WINNER_DETERMINED)
        assert len(winners) == 1
        assert winners[0].outcome == MatchOutcome.CONTROLLED_WON

    def test_format_readable(self, make_match):
        """Test the readable log lists rounds, damage and the result."""
        engine, session = make_match()
        session.opponent.health = 30

        engine.resolve_round(session, EffectKind.ATTACK)
        engine.resolve_round(session, EffectKind.SHIELD)
        engine.resolve_round(session, EffectKind.SHIELD)
        engine.resolve_round(session, EffectKind.ATTACK)

        text = session.combat_logger.get_log().format_readable()

        assert "=== Combat Log (Match #1) ===" in text
        assert "--- Round 1 ---" in text
        assert "[HP: 30 → 10]" in text
        assert "✗ player cannot use shield" in text
        assert "*** RESULT: controlled_won ***" in text

    def test_log_to_dict(self):
        """Test the whole log serializes."""
        log = CombatLog(match_id=5)
        assert log.to_dict() == {"match_id": 5, "entries": []}
