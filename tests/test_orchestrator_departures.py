# Area: Core Tests
"""Tests for kicks and departures while a game is running."""

import os
import tempfile

import pytest
from impostor_session._core.enums import SessionStatus, VotingOutcome
from impostor_session._core.orchestrator import SessionOrchestrator
from impostor_session._store import SQLiteSessionStore
from impostor_session.errors import (
    NotAuthorizedError,
    PlayerNotFoundError,
    StaleTransitionError,
)
from impostor_session.word_packs import SQLiteWordPackProvider


class TestDepartures:
    """Speaking order is host, p2, p3, ...; p2 is the impostor unless changed."""

    @pytest.fixture
    def db_path(self):
        """Create temporary database for testing."""
        fd, path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        yield path
        os.unlink(path)

    @pytest.fixture
    def orch(self, db_path, scripted_rng):
        store = SQLiteSessionStore(db_path)
        packs = SQLiteWordPackProvider(store)
        packs.seed_defaults()
        return SessionOrchestrator(store, packs, rng=scripted_rng)

    def _started(self, orch, n):
        session = orch.create_session("host", "default-places")
        for i in range(2, n + 1):
            orch.join(session.room_code, f"p{i}")
        return orch.start_round(session.id, "host")

    def _active_orders(self, orch, session_id):
        return {
            p.participant_id: p.turn_order
            for p in orch.players(session_id) if p.is_active
        }

    def test_kick_in_lobby(self, orch):
        session = orch.create_session("host", "default-places")
        orch.join(session.room_code, "p2")
        kicked = orch.kick(session.id, "host", "p2")

        assert kicked.is_kicked is True
        assert orch.get_session(session.id).status == SessionStatus.WAITING

    def test_kicked_player_rejoin_returns_kicked_record(self, orch):
        session = orch.create_session("host", "default-places")
        orch.join(session.room_code, "p2")
        orch.kick(session.id, "host", "p2")

        again = orch.join(session.room_code, "p2")
        assert again.is_kicked is True

    def test_non_host_cannot_kick(self, orch):
        session = self._started(orch, 4)
        with pytest.raises(NotAuthorizedError):
            orch.kick(session.id, "p3", "p4")

    def test_kick_unknown_player(self, orch):
        session = self._started(orch, 4)
        with pytest.raises(PlayerNotFoundError):
            orch.kick(session.id, "host", "ghost")

    def test_kick_after_finish_is_stale(self, orch):
        session = self._started(orch, 4)
        orch.leave(session.id, "p2")
        with pytest.raises(StaleTransitionError):
            orch.kick(session.id, "host", "p3")

    def test_non_speaker_kick_keeps_turn_and_dense_order(self, orch):
        session = self._started(orch, 5)
        updated = orch.kick(session.id, "host", "p3")

        current = orch.get_session(session.id)
        assert updated.participant_id == "p3"
        assert current.status == SessionStatus.PLAYING
        assert current.current_turn_player_id == "host"
        assert self._active_orders(orch, session.id) == {"host": 0, "p2": 1, "p4": 2, "p5": 3}

    def test_speaker_kicked_mid_turn_passes_turn(self, orch):
        """Test the turn moves to the next player when the speaker is kicked."""
        session = self._started(orch, 5)
        orch.advance_turn(session.id, "host")
        orch.advance_turn(session.id, "p2")
        assert orch.get_session(session.id).current_turn_player_id == "p3"

        orch.kick(session.id, "host", "p3")

        current = orch.get_session(session.id)
        assert current.status == SessionStatus.PLAYING
        assert current.current_turn_player_id == "p4"
        assert self._active_orders(orch, session.id) == {"host": 0, "p2": 1, "p4": 2, "p5": 3}

    def test_last_speaker_leaving_starts_voting(self, orch):
        session = self._started(orch, 5)
        for speaker in ("host", "p2", "p3", "p4"):
            orch.advance_turn(session.id, speaker)

        orch.leave(session.id, "p5")

        current = orch.get_session(session.id)
        assert current.status == SessionStatus.VOTING
        assert current.current_turn_player_id is None

    def test_impostor_leaving_ends_game(self, orch):
        session = self._started(orch, 4)
        orch.leave(session.id, "p2")

        current = orch.get_session(session.id)
        assert current.status == SessionStatus.FINISHED
        assert current.outcome == VotingOutcome.IMPOSTOR_LEFT
        assert orch.history(session.id)[-1].outcome == VotingOutcome.IMPOSTOR_LEFT

    def test_impostor_kicked_during_voting_ends_game(self, orch):
        session = self._started(orch, 4)
        for speaker in ("host", "p2", "p3", "p4"):
            orch.advance_turn(session.id, speaker)

        orch.kick(session.id, "host", "p2")
        current = orch.get_session(session.id)
        assert current.status == SessionStatus.FINISHED
        assert current.outcome == VotingOutcome.IMPOSTOR_LEFT

    def test_game_ended_by_departure_releases_lock(self, orch):
        session = self._started(orch, 4)
        orch.kick(session.id, "host", "p2")
        assert session.id not in orch.locks._locks

    def test_last_member_leaving_lobby_releases_lock(self, orch):
        session = orch.create_session("host", "default-places")
        orch.join(session.room_code, "p2")
        orch.leave(session.id, "p2")
        assert session.id in orch.locks._locks

        orch.leave(session.id, "host")
        assert session.id not in orch.locks._locks

    def test_departure_leaving_two_players_hands_impostor_the_win(self, orch):
        session = self._started(orch, 3)
        orch.leave(session.id, "p3")

        current = orch.get_session(session.id)
        assert current.status == SessionStatus.FINISHED
        assert current.outcome == VotingOutcome.IMPOSTOR_WINS

    def test_departure_during_voting_recomputes_quorum(self, orch):
        """Test votes of departed voters are ignored and quorum shrinks."""
        session = self._started(orch, 5)
        for speaker in ("host", "p2", "p3", "p4", "p5"):
            orch.advance_turn(session.id, speaker)

        orch.submit_vote(session.id, "p5", target_id="host")
        orch.submit_vote(session.id, "host", target_id="p2")
        orch.submit_vote(session.id, "p3", target_id="p2")
        orch.leave(session.id, "p5")
        assert orch.resolve(session.id).outcome == VotingOutcome.WAITING

        orch.submit_vote(session.id, "p4", target_id="p2")
        orch.submit_vote(session.id, "p2", target_id="host")
        result = orch.resolve(session.id)

        assert result.tally.active_count == 4
        assert result.tally.count_for("host") == 1
        assert result.outcome == VotingOutcome.IMPOSTOR_CAUGHT

    def test_kicked_player_cannot_vote(self, orch):
        session = self._started(orch, 5)
        for speaker in ("host", "p2", "p3", "p4", "p5"):
            orch.advance_turn(session.id, speaker)
        orch.kick(session.id, "host", "p4")

        with pytest.raises(NotAuthorizedError):
            orch.submit_vote(session.id, "p4", skip=True)

    def test_host_leaving_in_lobby_keeps_session(self, orch):
        session = orch.create_session("host", "default-places")
        orch.join(session.room_code, "p2")
        orch.leave(session.id, "host")

        assert orch.get_session(session.id).status == SessionStatus.WAITING
        assert [p.participant_id for p in orch.players(session.id)] == ["p2"]
