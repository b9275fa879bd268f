# Area: Store Tests
"""Tests for Votes and Round Results Repositories."""

import os
import tempfile

import pytest
from impostor_session._store import SQLiteSessionStore
from impostor_session._core.enums import VotingOutcome
from impostor_session._core.models import RoundResult, Session, Vote
from impostor_session.errors import AlreadyVotedError


def _vote(vote_id, voter, target=None, skip=False, round_number=1):
    return Vote(
        id=vote_id, session_id="S1", round_number=round_number,
        voter_id=voter, target_id=target, is_skip=skip,
    )


class TestVoteRepository:
    """Tests for VoteRepository class."""

    @pytest.fixture
    def db_path(self):
        """Create temporary database for testing."""
        fd, path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        yield path
        os.unlink(path)

    @pytest.fixture
    def store(self, db_path):
        store = SQLiteSessionStore(db_path)
        with store.transaction() as tx:
            tx.sessions.create(
                Session(id="S1", room_code="ABC123", host_id="host", word_pack_id="pack")
            )
        return store

    def test_add_and_read_back(self, store):
        with store.transaction() as tx:
            vote = tx.votes.add(_vote("v1", "host", target="p2"))
        assert vote.target_id == "p2"
        assert vote.is_skip is False
        assert vote.created_at is not None

    def test_second_vote_same_round_raises(self, store):
        """Test one vote per voter per round."""
        with store.transaction() as tx:
            tx.votes.add(_vote("v1", "host", target="p2"))

        with pytest.raises(AlreadyVotedError) as exc:
            with store.transaction() as tx:
                tx.votes.add(_vote("v2", "host", skip=True))
        assert exc.value.context["voter_id"] == "host"

        with store.read() as tx:
            votes = tx.votes.for_round("S1", 1)
        assert len(votes) == 1
        assert votes[0].target_id == "p2"

    def test_same_voter_may_vote_next_round(self, store):
        with store.transaction() as tx:
            tx.votes.add(_vote("v1", "host", target="p2"))
            tx.votes.add(_vote("v2", "host", target="p3", round_number=2))
            assert tx.votes.has_voted("S1", 2, "host") is True

    def test_for_round_filters_rounds(self, store):
        with store.transaction() as tx:
            tx.votes.add(_vote("v1", "host", target="p2"))
            tx.votes.add(_vote("v2", "p2", skip=True))
            tx.votes.add(_vote("v3", "host", target="p3", round_number=2))

        with store.read() as tx:
            assert len(tx.votes.for_round("S1", 1)) == 2

    def test_target_and_skip_together_rejected(self, store):
        """Test the schema rejects a vote that is both a target and a skip."""
        import sqlite3

        with pytest.raises(sqlite3.IntegrityError):
            with store.transaction() as tx:
                tx.votes.add(_vote("v1", "host", target="p2", skip=True))


class TestRoundResultRepository:
    """Tests for RoundResultRepository class."""

    @pytest.fixture
    def db_path(self):
        fd, path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        yield path
        os.unlink(path)

    @pytest.fixture
    def store(self, db_path):
        store = SQLiteSessionStore(db_path)
        with store.transaction() as tx:
            tx.sessions.create(
                Session(id="S1", room_code="ABC123", host_id="host", word_pack_id="pack")
            )
        return store

    def test_save_once_per_round(self, store):
        """Test that a round result is recorded at most once."""
        with store.transaction() as tx:
            assert tx.results.save(RoundResult("S1", 1, VotingOutcome.TIE)) is True
            assert tx.results.save(RoundResult("S1", 1, VotingOutcome.SKIP)) is False

        with store.read() as tx:
            assert tx.results.get("S1", 1).outcome == VotingOutcome.TIE

    def test_latest_and_history(self, store):
        with store.transaction() as tx:
            tx.results.save(RoundResult("S1", 1, VotingOutcome.SKIP))
            tx.results.save(RoundResult("S1", 2, VotingOutcome.WRONG_VOTE, voted_out_id="p3"))

        with store.read() as tx:
            latest = tx.results.latest("S1")
            history = tx.results.history("S1")
        assert latest.round_number == 2
        assert latest.voted_out_id == "p3"
        assert [r.outcome for r in history] == [VotingOutcome.SKIP, VotingOutcome.WRONG_VOTE]

    def test_get_missing_returns_none(self, store):
        with store.read() as tx:
            assert tx.results.get("S1", 5) is None
            assert tx.results.latest("S1") is None
