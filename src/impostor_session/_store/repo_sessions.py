# Area: Store
"""
impostor_session._store.repo_sessions — Sessions Repository
===========================================================

Repository for the sessions table. Status, round and turn are only ever
written through ``update_if``, a compare-and-set guarded by the status,
round and version the caller read.
"""

import sqlite3
from typing import Optional

from .database import BaseRepository
from .._core.enums import SessionStatus
from .._core.models import Session
from ..errors import RoomCodeTakenError


class SessionRepository(BaseRepository):
    """Repository for sessions table."""

    def create(self, session: Session) -> Session:
        """
        Insert a new session.

        Args:
            session: Session record (id and room code already assigned)

        Returns:
            The stored record, with database defaults filled in

        Raises:
            RoomCodeTakenError: If another session holds the room code
        """
        query = """
            INSERT INTO sessions
            (id, room_code, host_id, word_pack_id, status, current_round)
            VALUES (?, ?, ?, ?, ?, ?)
        """
        try:
            self._execute(query, (
                session.id,
                session.room_code,
                session.host_id,
                session.word_pack_id,
                session.status.value,
                session.current_round,
            ))
        except sqlite3.IntegrityError as e:
            if "room_code" not in str(e):
                raise
            raise RoomCodeTakenError(session.room_code) from e
        return self.get(session.id)

    def get(self, session_id: str) -> Optional[Session]:
        """Get a session by id."""
        row = self._fetch_one("SELECT * FROM sessions WHERE id = ?", (session_id,))
        return Session.from_row(row) if row else None

    def get_by_room_code(self, room_code: str) -> Optional[Session]:
        """Get a session by its (normalised) room code."""
        row = self._fetch_one("SELECT * FROM sessions WHERE room_code = ?", (room_code,))
        return Session.from_row(row) if row else None

    def room_code_exists(self, room_code: str) -> bool:
        row = self._fetch_one("SELECT 1 AS hit FROM sessions WHERE room_code = ?", (room_code,))
        return row is not None

    def update_if(
        self,
        session: Session,
        expected_status: SessionStatus,
        expected_round: int,
        expected_version: int,
    ) -> bool:
        """
        Write status/round/turn/outcome only if the row is unchanged.

        Args:
            session: Record holding the new values
            expected_status: Status the caller read
            expected_round: Round the caller read
            expected_version: Version the caller read

        Returns:
            True if the row was updated, False if someone else got there first
        """
        query = """
            UPDATE sessions
            SET status = ?, current_round = ?, current_word_index = ?,
                current_turn_player_id = ?, outcome = ?, version = version + 1
            WHERE id = ? AND status = ? AND current_round = ? AND version = ?
        """
        changed = self._execute(query, (
            session.status.value,
            session.current_round,
            session.current_word_index,
            session.current_turn_player_id,
            session.outcome.value if session.outcome else None,
            session.id,
            expected_status.value,
            expected_round,
            expected_version,
        ))
        if changed:
            session.version = expected_version + 1
        return changed == 1

    def touch(self, session: Session) -> None:
        """Bump the version after a roster or vote change."""
        self._execute(
            "UPDATE sessions SET version = version + 1 WHERE id = ?", (session.id,)
        )
        session.version += 1
