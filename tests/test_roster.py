# Area: Core Tests
"""Tests for the Roster Manager."""

import os
import tempfile

import pytest
from impostor_session._core.enums import SessionStatus
from impostor_session._core.models import Session
from impostor_session._core.roster import RosterManager, active_players
from impostor_session._store import SQLiteSessionStore
from impostor_session.errors import (
    NotAuthorizedError,
    PlayerNotFoundError,
    SessionAlreadyStartedError,
    SessionFullError,
)


class TestRosterManager:
    """Tests for RosterManager class."""

    @pytest.fixture
    def db_path(self):
        """Create temporary database for testing."""
        fd, path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        yield path
        os.unlink(path)

    @pytest.fixture
    def store(self, db_path):
        return SQLiteSessionStore(db_path)

    @pytest.fixture
    def roster(self):
        return RosterManager(max_players=4)

    @pytest.fixture
    def session(self, store, roster):
        with store.transaction() as tx:
            session = tx.sessions.create(
                Session(id="S1", room_code="ABC123", host_id="host", word_pack_id="pack")
            )
            roster.add_member(tx, session, "host")
        return session

    def test_join_adds_member(self, store, roster, session):
        with store.transaction() as tx:
            player, created = roster.join(tx, session, "p2")
        assert created is True
        assert player.participant_id == "p2"
        assert player.turn_order is None

    def test_rejoin_is_idempotent(self, store, roster, session):
        with store.transaction() as tx:
            first, _ = roster.join(tx, session, "p2")
            again, created = roster.join(tx, session, "p2")
        assert created is False
        assert again.id == first.id

    def test_join_when_full_raises(self, store, roster, session):
        with store.transaction() as tx:
            for pid in ("p2", "p3", "p4"):
                roster.join(tx, session, pid)
        with pytest.raises(SessionFullError) as exc:
            with store.transaction() as tx:
                roster.join(tx, session, "p5")
        assert exc.value.context["capacity"] == 4

    def test_kicked_players_free_capacity(self, store, roster, session):
        with store.transaction() as tx:
            for pid in ("p2", "p3", "p4"):
                roster.join(tx, session, pid)
            roster.kick(tx, session, "host", "p4")
            _, created = roster.join(tx, session, "p5")
        assert created is True

    def test_join_after_start_raises_for_newcomer(self, store, roster, session):
        session.status = SessionStatus.PLAYING
        with pytest.raises(SessionAlreadyStartedError):
            with store.transaction() as tx:
                roster.join(tx, session, "late")

    def test_member_may_rejoin_after_start(self, store, roster, session):
        with store.transaction() as tx:
            roster.join(tx, session, "p2")
        session.status = SessionStatus.PLAYING
        with store.transaction() as tx:
            player, created = roster.join(tx, session, "p2")
        assert created is False
        assert player.participant_id == "p2"

    def test_kick_requires_host(self, store, roster, session):
        with store.transaction() as tx:
            roster.join(tx, session, "p2")
            roster.join(tx, session, "p3")
        with pytest.raises(NotAuthorizedError):
            with store.transaction() as tx:
                roster.kick(tx, session, "p2", "p3")

    def test_host_cannot_kick_themselves(self, store, roster, session):
        with pytest.raises(NotAuthorizedError):
            with store.transaction() as tx:
                roster.kick(tx, session, "host", "host")

    def test_kick_unknown_player_raises(self, store, roster, session):
        with pytest.raises(PlayerNotFoundError):
            with store.transaction() as tx:
                roster.kick(tx, session, "host", "ghost")

    def test_kick_renumbers_remaining_players(self, store, roster, session):
        """Test that turn order stays dense and keeps relative order."""
        with store.transaction() as tx:
            for pid in ("p2", "p3", "p4"):
                roster.join(tx, session, pid)
            roster.assign_turn_order(tx, active_players(tx.players.list_for_session("S1")))
            roster.kick(tx, session, "host", "p3")
            players = tx.players.list_for_session("S1")

        orders = {p.participant_id: p.turn_order for p in players}
        assert orders == {"host": 0, "p2": 1, "p4": 2, "p3": None}

    def test_leave_removes_membership(self, store, roster, session):
        with store.transaction() as tx:
            roster.join(tx, session, "p2")
            roster.leave(tx, session, "p2")
            assert tx.players.get("S1", "p2") is None

    def test_leave_unknown_raises(self, store, roster, session):
        with pytest.raises(PlayerNotFoundError):
            with store.transaction() as tx:
                roster.leave(tx, session, "ghost")
