# Area: Store
"""
impostor_session._store.repo_players — Players Repository
=========================================================

Repository for the players table (session membership records).
"""

from typing import List, Optional

from .database import BaseRepository
from .._core.models import Player


class PlayerRepository(BaseRepository):
    """Repository for players table."""

    def add(self, player: Player) -> Player:
        """Insert a membership record."""
        query = """
            INSERT INTO players
            (id, session_id, participant_id, is_impostor, is_kicked)
            VALUES (?, ?, ?, 0, 0)
        """
        self._execute(query, (player.id, player.session_id, player.participant_id))
        return self.get(player.session_id, player.participant_id)

    def get(self, session_id: str, participant_id: str) -> Optional[Player]:
        query = "SELECT * FROM players WHERE session_id = ? AND participant_id = ?"
        row = self._fetch_one(query, (session_id, participant_id))
        return Player.from_row(row) if row else None

    def list_for_session(self, session_id: str) -> List[Player]:
        """
        Get every member of a session, kicked ones included.

        Ordered by turn order (unassigned last), then join order.
        """
        query = """
            SELECT * FROM players WHERE session_id = ?
            ORDER BY turn_order IS NULL, turn_order, joined_at, rowid
        """
        return [Player.from_row(r) for r in self._fetch(query, (session_id,))]

    def count_active(self, session_id: str) -> int:
        query = "SELECT COUNT(*) AS n FROM players WHERE session_id = ? AND is_kicked = 0"
        row = self._fetch_one(query, (session_id,))
        return row["n"] if row else 0

    def assign_secret(self, player_id: str, word: str, is_impostor: bool) -> None:
        """Set word and impostor flag; only called once, at round start."""
        query = """
            UPDATE players SET assigned_word = ?, is_impostor = ?
            WHERE id = ? AND assigned_word IS NULL
        """
        self._execute(query, (word, int(is_impostor), player_id))

    def set_turn_order(self, player_id: str, turn_order: Optional[int]) -> None:
        self._execute("UPDATE players SET turn_order = ? WHERE id = ?", (turn_order, player_id))

    def mark_kicked(self, player_id: str) -> bool:
        """Mark a player kicked. Returns False if they already were."""
        changed = self._execute(
            "UPDATE players SET is_kicked = 1, turn_order = NULL WHERE id = ? AND is_kicked = 0",
            (player_id,),
        )
        return changed == 1

    def remove(self, player_id: str) -> None:
        self._execute("DELETE FROM players WHERE id = ?", (player_id,))
