"""
impostor_session.errors — Custom exception classes
==================================================

Defines the exception hierarchy for rejected session operations.
Each exception carries a stable ``code`` and the context of the
rejected call so the calling layer can decide whether to retry or
surface the message.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

from .error_formatter import format_error_block


class ImpostorSessionError(Exception):
    """Base exception for all impostor_session errors."""

    code = "SESSION_ERROR"

    def __init__(self, message: str, **context: Any):
        self.context: Dict[str, Any] = context
        super().__init__(message)

    def details(self) -> Optional[List[str]]:
        return None

    def format_error_log(self) -> str:
        return format_error_block(
            error_type=self.code,
            message=str(self),
            context=self.context,
            details=self.details(),
        )


class SessionNotFoundError(ImpostorSessionError):
    """Raised when no session matches a room code."""

    code = "SESSION_NOT_FOUND"

    def __init__(self, room_code: str):
        self.room_code = room_code
        super().__init__(f"No session with room code '{room_code}'", room_code=room_code)


class RoomCodeTakenError(ImpostorSessionError):
    """Raised when a new session's room code is already in use."""

    code = "ROOM_CODE_TAKEN"

    def __init__(self, room_code: str):
        self.room_code = room_code
        super().__init__(f"Room code '{room_code}' is already in use", room_code=room_code)


class NoActiveSessionError(ImpostorSessionError):
    """Raised when an operation addresses a session id that does not exist."""

    code = "NO_ACTIVE_SESSION"

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session '{session_id}' does not exist", session_id=session_id)


class SessionAlreadyStartedError(ImpostorSessionError):
    """Raised when a new participant tries to join a session past the lobby."""

    code = "SESSION_ALREADY_STARTED"

    def __init__(self, session_id: str, participant_id: str, status: str):
        self.session_id = session_id
        self.participant_id = participant_id
        self.status = status
        super().__init__(
            f"Session '{session_id}' already started (status={status})",
            session_id=session_id,
            participant_id=participant_id,
            status=status,
        )


class SessionFullError(ImpostorSessionError):
    """Raised when joining would exceed the session capacity."""

    code = "SESSION_FULL"

    def __init__(self, session_id: str, capacity: int):
        self.session_id = session_id
        self.capacity = capacity
        super().__init__(
            f"Session '{session_id}' is full ({capacity} players)",
            session_id=session_id,
            capacity=capacity,
        )


class NotEnoughPlayersError(ImpostorSessionError):
    """Raised when starting a round with fewer active players than the minimum."""

    code = "NOT_ENOUGH_PLAYERS"

    def __init__(self, session_id: str, active_count: int, minimum: int):
        self.session_id = session_id
        self.active_count = active_count
        self.minimum = minimum
        super().__init__(
            f"Session '{session_id}' has {active_count} active players, needs {minimum}",
            session_id=session_id,
            active_count=active_count,
            minimum=minimum,
        )


class NoWordPackError(ImpostorSessionError):
    """Raised when the selected word pack is missing or has no pairs."""

    code = "NO_WORD_PACK"

    def __init__(self, word_pack_id: str):
        self.word_pack_id = word_pack_id
        super().__init__(
            f"Word pack '{word_pack_id}' is missing or empty",
            word_pack_id=word_pack_id,
        )


class NotAuthorizedError(ImpostorSessionError):
    """Raised when an actor attempts an action they are not allowed to take."""

    code = "NOT_AUTHORIZED"

    def __init__(self, session_id: str, actor_id: str, action: str, reason: str = ""):
        self.session_id = session_id
        self.actor_id = actor_id
        self.action = action
        self.reason = reason
        message = f"'{actor_id}' may not {action} in session '{session_id}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            session_id=session_id,
            actor_id=actor_id,
            action=action,
        )


class PlayerNotFoundError(ImpostorSessionError):
    """Raised when a participant is not an (active) member of the session."""

    code = "PLAYER_NOT_FOUND"

    def __init__(self, session_id: str, participant_id: str):
        self.session_id = session_id
        self.participant_id = participant_id
        super().__init__(
            f"'{participant_id}' is not an active member of session '{session_id}'",
            session_id=session_id,
            participant_id=participant_id,
        )


class AlreadyVotedError(ImpostorSessionError):
    """Raised on a second vote for the same (session, round, voter)."""

    code = "ALREADY_VOTED"

    def __init__(self, session_id: str, round_number: int, voter_id: str):
        self.session_id = session_id
        self.round_number = round_number
        self.voter_id = voter_id
        super().__init__(
            f"'{voter_id}' already voted in round {round_number} of session '{session_id}'",
            session_id=session_id,
            round_number=round_number,
            voter_id=voter_id,
        )


class InvalidVoteError(ImpostorSessionError):
    """Raised when a vote names neither or both of target and skip, or a bad target."""

    code = "INVALID_VOTE"

    def __init__(self, session_id: str, voter_id: str, reason: str):
        self.session_id = session_id
        self.voter_id = voter_id
        self.reason = reason
        super().__init__(
            f"Invalid vote from '{voter_id}': {reason}",
            session_id=session_id,
            voter_id=voter_id,
        )


class StaleTransitionError(ImpostorSessionError):
    """Raised when the caller's view of status/round/turn no longer matches."""

    code = "STALE_TRANSITION"

    def __init__(
        self,
        session_id: str,
        reason: str,
        expected: Any = None,
        actual: Any = None,
    ):
        self.session_id = session_id
        self.reason = reason
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Stale transition on session '{session_id}': {reason}",
            session_id=session_id,
            expected=expected,
            actual=actual,
        )


class SessionBusyError(ImpostorSessionError):
    """Raised when the per-session lock cannot be acquired in time."""

    code = "SESSION_BUSY"

    def __init__(self, session_id: str, timeout_seconds: float):
        self.session_id = session_id
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Session '{session_id}' busy for more than {timeout_seconds}s",
            session_id=session_id,
            timeout_seconds=timeout_seconds,
        )


class InvalidWordPackError(ImpostorSessionError):
    """Raised when a user-created word pack fails validation."""

    code = "INVALID_WORD_PACK"

    def __init__(self, name: str, validation_errors: List[str]):
        self.name = name
        self.validation_errors = validation_errors
        super().__init__(
            f"Word pack '{name}' failed validation: {validation_errors}",
            name=name,
        )

    def details(self) -> Optional[List[str]]:
        return self.validation_errors
