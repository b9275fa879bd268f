# Area: Store
"""
impostor_session._store.repo_round_results — Round Results Repository
=====================================================================

One row per resolved (session, round). Written in the same transaction
as the resolution, so a caller that loses the race reads the winner's
result instead of computing its own.
"""

from typing import List, Optional

from .database import BaseRepository
from .._core.models import RoundResult


class RoundResultRepository(BaseRepository):
    """Repository for round_results table."""

    def save(self, result: RoundResult) -> bool:
        """
        Record a resolution.

        Returns:
            True if recorded, False if the round was already resolved
        """
        query = """
            INSERT OR IGNORE INTO round_results
            (session_id, round_number, outcome, voted_out_id)
            VALUES (?, ?, ?, ?)
        """
        changed = self._execute(query, (
            result.session_id,
            result.round_number,
            result.outcome.value,
            result.voted_out_id,
        ))
        return changed == 1

    def get(self, session_id: str, round_number: int) -> Optional[RoundResult]:
        query = "SELECT * FROM round_results WHERE session_id = ? AND round_number = ?"
        row = self._fetch_one(query, (session_id, round_number))
        return RoundResult.from_row(row) if row else None

    def latest(self, session_id: str) -> Optional[RoundResult]:
        query = """
            SELECT * FROM round_results WHERE session_id = ?
            ORDER BY round_number DESC LIMIT 1
        """
        row = self._fetch_one(query, (session_id,))
        return RoundResult.from_row(row) if row else None

    def history(self, session_id: str) -> List[RoundResult]:
        query = "SELECT * FROM round_results WHERE session_id = ? ORDER BY round_number"
        return [RoundResult.from_row(r) for r in self._fetch(query, (session_id,))]
