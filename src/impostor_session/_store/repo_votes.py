# Area: Store
"""
impostor_session._store.repo_votes — Votes Repository
=====================================================

Repository for the votes table. The UNIQUE (session_id, round_number,
voter_id) constraint is what enforces one vote per voter per round;
``add`` turns its violation into AlreadyVotedError.
"""

import sqlite3
from typing import List

from .database import BaseRepository
from .._core.models import Vote
from ..errors import AlreadyVotedError


class VoteRepository(BaseRepository):
    """Repository for votes table."""

    def add(self, vote: Vote) -> Vote:
        """
        Insert a vote.

        Raises:
            AlreadyVotedError: If the voter already voted this round
        """
        query = """
            INSERT INTO votes
            (id, session_id, round_number, voter_id, target_id, is_skip)
            VALUES (?, ?, ?, ?, ?, ?)
        """
        try:
            self._execute(query, (
                vote.id,
                vote.session_id,
                vote.round_number,
                vote.voter_id,
                vote.target_id,
                int(vote.is_skip),
            ))
        except sqlite3.IntegrityError as e:
            if "UNIQUE" not in str(e):
                raise
            raise AlreadyVotedError(vote.session_id, vote.round_number, vote.voter_id) from e
        row = self._fetch_one("SELECT * FROM votes WHERE id = ?", (vote.id,))
        return Vote.from_row(row)

    def has_voted(self, session_id: str, round_number: int, voter_id: str) -> bool:
        query = """
            SELECT 1 AS hit FROM votes
            WHERE session_id = ? AND round_number = ? AND voter_id = ?
        """
        return self._fetch_one(query, (session_id, round_number, voter_id)) is not None

    def for_round(self, session_id: str, round_number: int) -> List[Vote]:
        """Votes of one round; earlier rounds are filtered out, never deleted."""
        query = """
            SELECT * FROM votes WHERE session_id = ? AND round_number = ?
            ORDER BY created_at, rowid
        """
        return [Vote.from_row(r) for r in self._fetch(query, (session_id, round_number))]
