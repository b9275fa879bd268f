# Area: Core Tests
"""Tests for the Session State Machine."""

import pytest
from impostor_session._core.state_machine import (
    SessionStateMachine,
    TRANSITIONS,
    can_transition,
)
from impostor_session._core.enums import SessionStatus, SessionEvent
from impostor_session.errors import StaleTransitionError


class TestSessionStateMachineBase:
    """Tests for basic state machine functionality."""

    def test_initial_state(self):
        """Test that the machine starts in the given status."""
        sm = SessionStateMachine("S1", SessionStatus.WAITING)
        assert sm.current_state == SessionStatus.WAITING

    def test_can_transition_returns_true_for_valid(self):
        sm = SessionStateMachine("S1", SessionStatus.WAITING)
        assert sm.can_transition(SessionEvent.ROUND_START) is True

    def test_can_transition_returns_false_for_invalid(self):
        sm = SessionStateMachine("S1", SessionStatus.WAITING)
        assert sm.can_transition(SessionEvent.GAME_OVER) is False

    def test_transition_raises_stale_on_invalid(self):
        """Test that an invalid transition raises StaleTransitionError."""
        sm = SessionStateMachine("S1", SessionStatus.PLAYING)
        with pytest.raises(StaleTransitionError) as exc:
            sm.transition(SessionEvent.ROUND_START)
        assert exc.value.context["actual"] == "playing"
        assert sm.current_state == SessionStatus.PLAYING

    def test_finished_is_terminal(self):
        """Test that no event leaves FINISHED."""
        for event in SessionEvent:
            assert can_transition(SessionStatus.FINISHED, event) is False
        assert TRANSITIONS[SessionStatus.FINISHED] == {}


class TestSessionStateMachineTransitions:
    """Tests for specific transitions."""

    def test_full_game_path(self):
        """Test waiting → playing → voting → playing → voting → finished."""
        sm = SessionStateMachine("S1", SessionStatus.WAITING)

        sm.transition(SessionEvent.ROUND_START)
        assert sm.current_state == SessionStatus.PLAYING

        sm.transition(SessionEvent.TURNS_COMPLETE)
        assert sm.current_state == SessionStatus.VOTING

        sm.transition(SessionEvent.NEW_ROUND)
        assert sm.current_state == SessionStatus.PLAYING

        sm.transition(SessionEvent.TURNS_COMPLETE)
        sm.transition(SessionEvent.GAME_OVER)
        assert sm.current_state == SessionStatus.FINISHED

    def test_playing_cannot_finish_directly(self):
        sm = SessionStateMachine("S1", SessionStatus.PLAYING)
        assert sm.can_transition(SessionEvent.GAME_OVER) is False

    def test_waiting_cannot_vote(self):
        sm = SessionStateMachine("S1", SessionStatus.WAITING)
        with pytest.raises(StaleTransitionError):
            sm.transition(SessionEvent.TURNS_COMPLETE)


class TestRequireAndTransitionTo:
    """Tests for require() and transition_to()."""

    def test_require_passes_on_match(self):
        sm = SessionStateMachine("S1", SessionStatus.VOTING)
        sm.require(SessionStatus.PLAYING, SessionStatus.VOTING)

    def test_require_raises_on_mismatch(self):
        sm = SessionStateMachine("S1", SessionStatus.FINISHED)
        with pytest.raises(StaleTransitionError) as exc:
            sm.require(SessionStatus.VOTING)
        assert exc.value.context["expected"] == ["voting"]

    def test_transition_to_finished_from_playing_walks_through_voting(self):
        """Test that finishing from PLAYING uses the legal edges only."""
        sm = SessionStateMachine("S1", SessionStatus.PLAYING)
        assert sm.transition_to(SessionStatus.FINISHED) == SessionStatus.FINISHED

    def test_transition_to_finished_from_voting(self):
        sm = SessionStateMachine("S1", SessionStatus.VOTING)
        assert sm.transition_to(SessionStatus.FINISHED) == SessionStatus.FINISHED

    def test_transition_to_from_waiting_raises(self):
        sm = SessionStateMachine("S1", SessionStatus.WAITING)
        with pytest.raises(StaleTransitionError):
            sm.transition_to(SessionStatus.FINISHED)

    def test_transition_logs_room_label(self, caplog):
        """Test that transitions are logged with the label."""
        sm = SessionStateMachine("S1", SessionStatus.WAITING, label="ABC123")
        with caplog.at_level("INFO", logger="impostor_session.state_machine"):
            sm.transition(SessionEvent.ROUND_START)
        assert "[ABC123] Status: waiting → playing" in caplog.text
