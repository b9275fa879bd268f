# Area: Core
"""
impostor_session._core.models — Session record dataclasses
==========================================================

Plain records for sessions, players, votes and round results. Records
are read from the store, changed by the core, and written back inside a
single transaction; nothing holds on to them between calls.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .enums import SessionStatus, VotingOutcome


@dataclass
class Session:
    """
    One game session.

    Attributes:
        id: Unique session identifier
        room_code: Short human-enterable code used to join
        host_id: Participant identity of the host
        word_pack_id: Selected word pack
        status: Current lifecycle status
        current_round: Round number, starting at 1
        current_word_index: Index of the secret pair, set once at round start
        current_turn_player_id: Participant whose turn it is
        outcome: Final outcome once finished
        version: Bumped on every committed change, used by pollers
        created_at: Creation timestamp
    """

    id: str
    room_code: str
    host_id: str
    word_pack_id: str
    status: SessionStatus = SessionStatus.WAITING
    current_round: int = 1
    current_word_index: Optional[int] = None
    current_turn_player_id: Optional[str] = None
    outcome: Optional[VotingOutcome] = None
    version: int = 0
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Session":
        return cls(
            id=row["id"],
            room_code=row["room_code"],
            host_id=row["host_id"],
            word_pack_id=row["word_pack_id"],
            status=SessionStatus(row["status"]),
            current_round=row["current_round"],
            current_word_index=row["current_word_index"],
            current_turn_player_id=row["current_turn_player_id"],
            outcome=VotingOutcome(row["outcome"]) if row["outcome"] else None,
            version=row["version"],
            created_at=row["created_at"],
        )

    def is_host(self, participant_id: str) -> bool:
        return self.host_id == participant_id


@dataclass
class Player:
    """
    Membership of one participant in a session.

    Attributes:
        id: Unique membership identifier
        session_id: Owning session
        participant_id: Participant identity
        assigned_word: Secret word, set at round start
        is_impostor: Set once at round start, never changed afterwards
        is_kicked: Kicked players stay on the roster but are inactive
        turn_order: Dense 0..N-1 index among active players after round start
        joined_at: Join timestamp
    """

    id: str
    session_id: str
    participant_id: str
    assigned_word: Optional[str] = None
    is_impostor: bool = False
    is_kicked: bool = False
    turn_order: Optional[int] = None
    joined_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Player":
        return cls(
            id=row["id"],
            session_id=row["session_id"],
            participant_id=row["participant_id"],
            assigned_word=row["assigned_word"],
            is_impostor=bool(row["is_impostor"]),
            is_kicked=bool(row["is_kicked"]),
            turn_order=row["turn_order"],
            joined_at=row["joined_at"],
        )

    @property
    def is_active(self) -> bool:
        return not self.is_kicked


@dataclass(frozen=True)
class Vote:
    """A single vote: either a target or a skip, never both."""

    id: str
    session_id: str
    round_number: int
    voter_id: str
    target_id: Optional[str] = None
    is_skip: bool = False
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Vote":
        return cls(
            id=row["id"],
            session_id=row["session_id"],
            round_number=row["round_number"],
            voter_id=row["voter_id"],
            target_id=row["target_id"],
            is_skip=bool(row["is_skip"]),
            created_at=row["created_at"],
        )


@dataclass(frozen=True)
class RoundResult:
    """The recorded resolution of one round; at most one per (session, round)."""

    session_id: str
    round_number: int
    outcome: VotingOutcome
    voted_out_id: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "RoundResult":
        return cls(
            session_id=row["session_id"],
            round_number=row["round_number"],
            outcome=VotingOutcome(row["outcome"]),
            voted_out_id=row["voted_out_id"],
            created_at=row["created_at"],
        )
