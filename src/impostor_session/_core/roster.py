# Area: Core
"""
impostor_session._core.roster — Roster Manager
==============================================

Owns session membership: join, kick, leave, capacity, and the turn-order
numbers of active players. It never touches status, round or turn; when a
departure has consequences for the game, the orchestrator decides them.
"""

from __future__ import annotations

import logging
import uuid
from typing import List, Sequence, Tuple

from .enums import SessionStatus
from .models import Player, Session
from ..errors import (
    NotAuthorizedError,
    PlayerNotFoundError,
    SessionAlreadyStartedError,
    SessionFullError,
)

logger = logging.getLogger("impostor_session.roster")

MIN_PLAYERS = 3
MAX_PLAYERS = 10


def active_players(players: Sequence[Player]) -> List[Player]:
    """Non-kicked members ordered by turn order (unassigned last, stable)."""
    active = [p for p in players if p.is_active]
    return sorted(
        active,
        key=lambda p: (p.turn_order is None, p.turn_order if p.turn_order is not None else 0),
    )


def find_active(players: Sequence[Player], participant_id: str) -> Player | None:
    for player in players:
        if player.participant_id == participant_id and player.is_active:
            return player
    return None


class RosterManager:
    """
    Membership operations on one session.

    All methods take the open store transaction; nothing is committed
    here.
    """

    def __init__(self, max_players: int = MAX_PLAYERS):
        self.max_players = max_players

    def add_member(self, tx, session: Session, participant_id: str) -> Player:
        """Insert a membership record without capacity or status checks (host seat)."""
        player = Player(
            id=uuid.uuid4().hex,
            session_id=session.id,
            participant_id=participant_id,
        )
        return tx.players.add(player)

    def join(self, tx, session: Session, participant_id: str) -> Tuple[Player, bool]:
        """
        Add a participant to the session.

        Args:
            tx: Open store transaction
            session: Session looked up by room code
            participant_id: Joining participant

        Returns:
            (player, created) — ``created`` is False on an idempotent re-join

        Raises:
            SessionAlreadyStartedError: Session left the lobby and caller is not a member
            SessionFullError: Active member count reached capacity
        """
        existing = tx.players.get(session.id, participant_id)
        if existing is not None:
            logger.info("[%s] Re-join by %s", session.room_code, participant_id)
            return existing, False

        if session.status != SessionStatus.WAITING:
            raise SessionAlreadyStartedError(session.id, participant_id, session.status.value)

        if tx.players.count_active(session.id) >= self.max_players:
            raise SessionFullError(session.id, self.max_players)

        player = self.add_member(tx, session, participant_id)
        logger.info("[%s] %s joined", session.room_code, participant_id)
        return player, True

    def kick(self, tx, session: Session, actor_id: str, target_id: str) -> Player:
        """
        Mark a member kicked (host only) and renumber the remaining players.

        Raises:
            NotAuthorizedError: Actor is not the host, or the host targets themselves
            PlayerNotFoundError: Target is not an active member
        """
        if not session.is_host(actor_id):
            raise NotAuthorizedError(session.id, actor_id, "kick", "host only")
        if target_id == session.host_id:
            raise NotAuthorizedError(session.id, actor_id, "kick", "host cannot kick themselves")
        return self.remove_from_play(tx, session, target_id)

    def remove_from_play(self, tx, session: Session, target_id: str) -> Player:
        """
        Mark a member kicked without an authority check (voted out).

        Raises:
            PlayerNotFoundError: Target is not an active member
        """
        target = tx.players.get(session.id, target_id)
        if target is None or target.is_kicked:
            raise PlayerNotFoundError(session.id, target_id)

        tx.players.mark_kicked(target.id)
        target.is_kicked = True
        target.turn_order = None
        self.compact_turn_order(tx, session)
        logger.info("[%s] %s kicked", session.room_code, target_id)
        return target

    def leave(self, tx, session: Session, participant_id: str) -> Player:
        """
        Remove a membership entirely.

        Raises:
            PlayerNotFoundError: Participant is not a member
        """
        member = tx.players.get(session.id, participant_id)
        if member is None:
            raise PlayerNotFoundError(session.id, participant_id)

        tx.players.remove(member.id)
        if member.is_active:
            self.compact_turn_order(tx, session)
        logger.info("[%s] %s left", session.room_code, participant_id)
        return member

    def assign_turn_order(self, tx, ordered: Sequence[Player]) -> None:
        """Number ``ordered`` 0..N-1 in the given sequence."""
        for index, player in enumerate(ordered):
            tx.players.set_turn_order(player.id, index)
            player.turn_order = index

    def compact_turn_order(self, tx, session: Session) -> None:
        """
        Close gaps left by a departed player, keeping relative order.

        Does nothing before round start, when no one has a turn order yet.
        """
        remaining = active_players(tx.players.list_for_session(session.id))
        if not remaining or remaining[0].turn_order is None:
            return
        for index, player in enumerate(remaining):
            if player.turn_order != index:
                tx.players.set_turn_order(player.id, index)
