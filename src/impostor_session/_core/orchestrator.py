# Area: Core
"""
impostor_session._core.orchestrator — Session orchestrator
==========================================================

Runs every operation on a session as one unit: take the session's lock,
open a store transaction, check the state machine, let the roster, round
engine or vote tally do their part, write status/round/turn with a
compare-and-set, commit, then notify. A rejected operation rolls back
and leaves nothing behind.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .enums import ChangeEvent, SessionEvent, SessionStatus, VotingOutcome
from .locks import SessionLocks
from .models import Player, RoundResult, Session, Vote
from .random_source import RandomSource, SeededRandom
from .room_code import ROOM_CODE_LENGTH, generate_room_code, normalize_room_code
from .roster import MAX_PLAYERS, MIN_PLAYERS, RosterManager, active_players, find_active
from .round_engine import RoundEngine
from .snapshot import build_snapshot
from .state_machine import SessionStateMachine
from .vote_tally import ENDGAME_THRESHOLD, TallyResult, decide, tally
from ..errors import (
    AlreadyVotedError,
    ImpostorSessionError,
    InvalidVoteError,
    NoActiveSessionError,
    NotAuthorizedError,
    NoWordPackError,
    RoomCodeTakenError,
    SessionNotFoundError,
    StaleTransitionError,
)

logger = logging.getLogger("impostor_session.orchestrator")

MAX_ROOM_CODE_ATTEMPTS = 20


@dataclass(frozen=True)
class ResolutionResult:
    """
    Outcome of a resolve call.

    Attributes:
        outcome: Voting outcome of the round (WAITING if quorum not reached)
        round_number: Round that was resolved
        voted_out_id: Participant kicked by the vote, if any
        applied: True only for the call that changed the session
        status: Session status after the call
        tally: Counts the decision was based on (None when already resolved)
    """

    outcome: VotingOutcome
    round_number: int
    voted_out_id: Optional[str]
    applied: bool
    status: SessionStatus
    tally: Optional[TallyResult] = None


class SessionOrchestrator:
    """
    Public entry point for session operations.

    Args:
        store: SessionStore implementation
        word_packs: Provider with ``fetch(pack_id)``
        config: Config dict (see ``impostor_session._config``)
        rng: RandomSource; defaults to SeededRandom(config["random_seed"])
        notifier: Receives change events after commit
        locks: Per-session lock registry
    """

    def __init__(
        self,
        store,
        word_packs,
        config: Optional[Dict[str, Any]] = None,
        rng: Optional[RandomSource] = None,
        notifier=None,
        locks: Optional[SessionLocks] = None,
    ):
        self.config = dict(config or {})
        self.store = store
        self.word_packs = word_packs
        self.rng = rng or SeededRandom(self.config.get("random_seed"))
        self.notifier = notifier
        self.locks = locks or SessionLocks(self.config.get("busy_timeout_seconds", 5.0))
        self.roster = RosterManager(self.config.get("max_players", MAX_PLAYERS))
        self.engine = RoundEngine(self.rng, self.config.get("min_players", MIN_PLAYERS))
        self.room_code_length = self.config.get("room_code_length", ROOM_CODE_LENGTH)

    # ── Lobby ──────────────────────────────────────────────────

    def create_session(self, host_id: str, word_pack_id: str) -> Session:
        """
        Create a waiting session with the host as its first member.

        Raises:
            NoWordPackError: Pack does not exist or has no pairs
        """
        pack = self.word_packs.fetch(word_pack_id)
        if pack is None or pack.is_empty:
            raise NoWordPackError(word_pack_id)

        with self.store.transaction() as tx:
            session = self._insert_session(tx, Session(
                id=uuid.uuid4().hex,
                room_code="",
                host_id=host_id,
                word_pack_id=word_pack_id,
            ))
            self.roster.add_member(tx, session, host_id)

        logger.info("[%s] Session created by %s (pack %s)", session.room_code, host_id, word_pack_id)
        self._emit(session.id, [ChangeEvent.SESSION_UPDATED, ChangeEvent.ROSTER_CHANGED])
        return session

    def _insert_session(self, tx, session: Session) -> Session:
        """Insert ``session`` under a fresh room code, redrawing on collision."""
        for _ in range(MAX_ROOM_CODE_ATTEMPTS):
            session.room_code = generate_room_code(self.rng, self.room_code_length)
            if tx.sessions.room_code_exists(session.room_code):
                continue
            try:
                return tx.sessions.create(session)
            except RoomCodeTakenError:
                logger.debug("Room code %s taken on insert, redrawing", session.room_code)
        raise ImpostorSessionError(
            "Could not allocate a unique room code", attempts=MAX_ROOM_CODE_ATTEMPTS
        )

    def join(self, room_code: str, participant_id: str) -> Player:
        """
        Join by room code; re-joining returns the existing membership.

        Raises:
            SessionNotFoundError: No session with that code
            SessionAlreadyStartedError: Not a member and the game has started
            SessionFullError: Capacity reached
        """
        session = self.find_session(room_code)
        with self._mutation(session.id, "join") as (tx, session):
            player, created = self.roster.join(tx, session, participant_id)
            if created:
                tx.sessions.touch(session)
        if created:
            self._emit(session.id, [ChangeEvent.ROSTER_CHANGED])
        return player

    def kick(self, session_id: str, actor_id: str, target_id: str) -> Player:
        """
        Host removes a player from play.

        Raises:
            NotAuthorizedError: Actor is not the host, or kicks themselves
            PlayerNotFoundError: Target is not an active member
            StaleTransitionError: Session already finished
        """
        with self._mutation(session_id, "kick") as (tx, session):
            SessionStateMachine(session.id, session.status).require(
                SessionStatus.WAITING, SessionStatus.PLAYING, SessionStatus.VOTING,
            )
            departing = tx.players.get(session.id, target_id)
            kicked = self.roster.kick(tx, session, actor_id, target_id)
            self._after_departure(tx, session, departing)
        self._emit(session_id, [ChangeEvent.ROSTER_CHANGED, ChangeEvent.SESSION_UPDATED])
        self._release_if_done(session)
        return kicked

    def leave(self, session_id: str, participant_id: str) -> None:
        """
        Remove a membership entirely.

        Raises:
            PlayerNotFoundError: Participant is not a member
        """
        with self._mutation(session_id, "leave") as (tx, session):
            departing = self.roster.leave(tx, session, participant_id)
            self._after_departure(tx, session, departing)
            empty = not tx.players.list_for_session(session.id)
        self._emit(session_id, [ChangeEvent.ROSTER_CHANGED, ChangeEvent.SESSION_UPDATED])
        self._release_if_done(session, empty)

    # ── Rounds ─────────────────────────────────────────────────

    def start_round(self, session_id: str, actor_id: str) -> Session:
        """
        Deal words, pick the impostor and the speaking order; waiting → playing.

        Raises:
            NotAuthorizedError: Actor is not the host
            StaleTransitionError: Session is not waiting
            NotEnoughPlayersError: Fewer active players than the minimum
            NoWordPackError: Pack missing or empty
        """
        with self._mutation(session_id, "start_round") as (tx, session):
            if not session.is_host(actor_id):
                raise NotAuthorizedError(session.id, actor_id, "start_round", "host only")
            machine = self._machine(session)
            machine.require(SessionStatus.WAITING)
            expected = _expected(session)

            players = tx.players.list_for_session(session.id)
            plan = self.engine.plan_round(session, players, self.word_packs.fetch(session.word_pack_id))

            by_id = {p.participant_id: p for p in players}
            for participant_id, word in plan.words.items():
                tx.players.assign_secret(
                    by_id[participant_id].id, word, participant_id == plan.impostor_id
                )
            self.roster.assign_turn_order(tx, [by_id[pid] for pid in plan.speaking_order])

            session.status = machine.transition(SessionEvent.ROUND_START)
            session.current_word_index = plan.word_index
            session.current_turn_player_id = plan.first_speaker
            self._commit_session(tx, session, expected)
        self._emit(session_id, [ChangeEvent.SESSION_UPDATED])
        return session

    def advance_turn(
        self, session_id: str, actor_id: str, expected_current: Optional[str] = None
    ) -> Session:
        """
        Pass the turn on; after the last speaker, playing → voting.

        Args:
            session_id: Session to advance
            actor_id: Current speaker or host
            expected_current: Speaker the caller believes is current; required
                when the host advances on behalf of someone else

        Raises:
            StaleTransitionError: Not playing, or the speaker already changed
            NotAuthorizedError: Actor is neither the speaker nor the host
        """
        with self._mutation(session_id, "advance_turn") as (tx, session):
            machine = self._machine(session)
            machine.require(SessionStatus.PLAYING)
            current = session.current_turn_player_id
            if actor_id != current and not session.is_host(actor_id):
                raise NotAuthorizedError(
                    session.id, actor_id, "advance_turn", "only the speaker or the host"
                )
            if expected_current is None and actor_id != current:
                # Host advancing for someone else must name that speaker
                raise StaleTransitionError(
                    session.id, "host advance needs the expected current speaker",
                    expected=None, actual=current,
                )
            if expected_current is not None and expected_current != current:
                raise StaleTransitionError(
                    session.id, "turn already advanced",
                    expected=expected_current, actual=current,
                )
            expected = _expected(session)

            next_id = self.engine.next_speaker(tx.players.list_for_session(session.id), current)
            if next_id is None:
                session.status = machine.transition(SessionEvent.TURNS_COMPLETE)
            session.current_turn_player_id = next_id
            self._commit_session(tx, session, expected)
        self._emit(session_id, [ChangeEvent.SESSION_UPDATED])
        return session

    # ── Voting ─────────────────────────────────────────────────

    def submit_vote(
        self,
        session_id: str,
        voter_id: str,
        target_id: Optional[str] = None,
        skip: bool = False,
        expected_round: Optional[int] = None,
    ) -> Vote:
        """
        Record one vote for a target, or a skip.

        Raises:
            StaleTransitionError: Not voting, or a different round
            NotAuthorizedError: Voter is not an active member
            InvalidVoteError: Both/neither of target and skip, self-vote, inactive target
            AlreadyVotedError: Voter already voted this round
        """
        if skip == (target_id is not None):
            raise InvalidVoteError(session_id, voter_id, "give exactly one of target or skip")

        with self._mutation(session_id, "submit_vote") as (tx, session):
            self._machine(session).require(SessionStatus.VOTING)
            _require_round(session, expected_round)

            players = tx.players.list_for_session(session.id)
            if find_active(players, voter_id) is None:
                raise NotAuthorizedError(session.id, voter_id, "vote", "not an active member")
            if target_id is not None:
                if target_id == voter_id:
                    raise InvalidVoteError(session.id, voter_id, "cannot vote for yourself")
                if find_active(players, target_id) is None:
                    raise InvalidVoteError(
                        session.id, voter_id, f"'{target_id}' is not an active player"
                    )
            if tx.votes.has_voted(session.id, session.current_round, voter_id):
                raise AlreadyVotedError(session.id, session.current_round, voter_id)

            vote = tx.votes.add(Vote(
                id=uuid.uuid4().hex,
                session_id=session.id,
                round_number=session.current_round,
                voter_id=voter_id,
                target_id=target_id,
                is_skip=skip,
            ))
            tx.sessions.touch(session)
        logger.info("[%s] Vote recorded from %s (round %d)", session.room_code, voter_id, vote.round_number)
        self._emit(session_id, [ChangeEvent.VOTE_RECORDED])
        return vote

    def resolve(self, session_id: str, expected_round: Optional[int] = None) -> ResolutionResult:
        """
        Resolve the round's votes once quorum is reached.

        Safe to call repeatedly and concurrently: the first caller past
        quorum applies the outcome, every other caller gets the same
        outcome back with ``applied=False``. Before quorum the result is
        WAITING and nothing changes.

        Raises:
            StaleTransitionError: Round not voting and never resolved
        """
        events: List[ChangeEvent] = []
        with self._mutation(session_id, "resolve") as (tx, session):
            round_number = expected_round if expected_round is not None else session.current_round

            recorded = tx.results.get(session.id, round_number)
            if recorded is None and expected_round is None and session.status != SessionStatus.VOTING:
                # Another caller already resolved the round this one meant
                recorded = tx.results.latest(session.id)
            if recorded is not None:
                return ResolutionResult(
                    outcome=recorded.outcome,
                    round_number=recorded.round_number,
                    voted_out_id=recorded.voted_out_id,
                    applied=False,
                    status=session.status,
                )

            machine = self._machine(session)
            machine.require(SessionStatus.VOTING)
            _require_round(session, round_number)
            expected = _expected(session)

            players = tx.players.list_for_session(session.id)
            counts = tally(tx.votes.for_round(session.id, round_number), players)
            decision = decide(counts, players)
            if decision.outcome == VotingOutcome.WAITING:
                return ResolutionResult(
                    outcome=decision.outcome,
                    round_number=round_number,
                    voted_out_id=None,
                    applied=False,
                    status=session.status,
                    tally=counts,
                )

            if decision.voted_out_id:
                self.roster.remove_from_play(tx, session, decision.voted_out_id)
                events.append(ChangeEvent.ROSTER_CHANGED)

            if decision.finishes:
                session.status = machine.transition(SessionEvent.GAME_OVER)
                session.outcome = decision.outcome
                session.current_turn_player_id = None
            else:
                session.status = machine.transition(SessionEvent.NEW_ROUND)
                session.current_round = round_number + 1
                session.current_turn_player_id = self.engine.first_speaker(
                    tx.players.list_for_session(session.id)
                )

            self._record_result(tx, session.id, round_number, decision.outcome, decision.voted_out_id)
            self._commit_session(tx, session, expected)
            events.append(ChangeEvent.SESSION_UPDATED)

        logger.info(
            "[%s] Round %d resolved: %s", session.room_code, round_number, decision.outcome.value
        )
        self._emit(session_id, events)
        self._release_if_done(session)
        return ResolutionResult(
            outcome=decision.outcome,
            round_number=round_number,
            voted_out_id=decision.voted_out_id,
            applied=True,
            status=session.status,
            tally=counts,
        )

    # ── Reads ──────────────────────────────────────────────────

    def get_session(self, session_id: str) -> Session:
        with self.store.read() as tx:
            return self._load(tx, session_id)

    def find_session(self, room_code: str) -> Session:
        """Look up a session by room code, ignoring case and surrounding blanks."""
        code = normalize_room_code(room_code)
        with self.store.read() as tx:
            session = tx.sessions.get_by_room_code(code)
        if session is None:
            raise SessionNotFoundError(code)
        return session

    def players(self, session_id: str) -> List[Player]:
        with self.store.read() as tx:
            self._load(tx, session_id)
            return tx.players.list_for_session(session_id)

    def current_tally(self, session_id: str) -> TallyResult:
        with self.store.read() as tx:
            session = self._load(tx, session_id)
            players = tx.players.list_for_session(session.id)
            return tally(tx.votes.for_round(session.id, session.current_round), players)

    def history(self, session_id: str) -> List[RoundResult]:
        with self.store.read() as tx:
            self._load(tx, session_id)
            return tx.results.history(session_id)

    def snapshot(self, session_id: str, viewer_id: Optional[str] = None) -> dict:
        """
        Serializable view of the session; repeatable, never mutates.

        Secrets are included only for ``viewer_id`` until the game finishes.
        """
        with self.store.read() as tx:
            session = self._load(tx, session_id)
            players = tx.players.list_for_session(session.id)
            counts = None
            if session.status == SessionStatus.VOTING:
                counts = tally(tx.votes.for_round(session.id, session.current_round), players)
            last = tx.results.latest(session.id)
        return build_snapshot(session, players, counts, last, viewer_id)

    # ── Internals ──────────────────────────────────────────────

    @contextmanager
    def _mutation(self, session_id: str, operation: str) -> Iterator[Tuple[Any, Session]]:
        """Lock, open a write transaction and load the session."""
        try:
            with self.locks.hold(session_id):
                with self.store.transaction() as tx:
                    yield tx, self._load(tx, session_id)
        except ImpostorSessionError as e:
            logger.warning("[%s] %s rejected: %s", session_id, operation, e)
            raise

    @staticmethod
    def _load(tx, session_id: str) -> Session:
        session = tx.sessions.get(session_id)
        if session is None:
            raise NoActiveSessionError(session_id)
        return session

    @staticmethod
    def _machine(session: Session) -> SessionStateMachine:
        return SessionStateMachine(session.id, session.status, label=session.room_code)

    @staticmethod
    def _commit_session(tx, session: Session, expected: Tuple[SessionStatus, int, int]) -> None:
        status, round_number, version = expected
        if not tx.sessions.update_if(session, status, round_number, version):
            raise StaleTransitionError(
                session.id, "session changed concurrently",
                expected=status.value, actual=session.status.value,
            )

    @staticmethod
    def _record_result(tx, session_id: str, round_number: int,
                       outcome: VotingOutcome, voted_out_id: Optional[str]) -> None:
        saved = tx.results.save(RoundResult(
            session_id=session_id,
            round_number=round_number,
            outcome=outcome,
            voted_out_id=voted_out_id,
        ))
        if not saved:
            raise StaleTransitionError(session_id, f"round {round_number} already resolved")

    def _after_departure(self, tx, session: Session, departing: Optional[Player]) -> None:
        """
        Apply the game consequences of a player leaving or being kicked.

        ``departing`` is the record as it was before the departure.
        """
        in_play = session.status in (SessionStatus.PLAYING, SessionStatus.VOTING)
        if departing is None or departing.is_kicked or not in_play:
            tx.sessions.touch(session)
            return

        machine = self._machine(session)
        expected = _expected(session)
        remaining = active_players(tx.players.list_for_session(session.id))

        if departing.is_impostor:
            self._finish(tx, machine, session, VotingOutcome.IMPOSTOR_LEFT)
        elif len(remaining) <= ENDGAME_THRESHOLD:
            self._finish(tx, machine, session, VotingOutcome.IMPOSTOR_WINS)
        elif (session.status == SessionStatus.PLAYING
              and session.current_turn_player_id == departing.participant_id):
            # Remaining players were renumbered, so the departed slot now holds the next speaker
            slot = departing.turn_order
            if slot is not None and slot < len(remaining):
                session.current_turn_player_id = remaining[slot].participant_id
            else:
                session.status = machine.transition(SessionEvent.TURNS_COMPLETE)
                session.current_turn_player_id = None
        self._commit_session(tx, session, expected)

    def _finish(self, tx, machine: SessionStateMachine, session: Session,
                outcome: VotingOutcome) -> None:
        session.status = machine.transition_to(SessionStatus.FINISHED)
        session.outcome = outcome
        session.current_turn_player_id = None
        self._record_result(tx, session.id, session.current_round, outcome, None)
        logger.info("[%s] Game over: %s", session.room_code, outcome.value)

    def _release_if_done(self, session: Session, empty: bool = False) -> None:
        """Drop the lock of a finished or abandoned session."""
        if empty or session.status == SessionStatus.FINISHED:
            self.locks.forget(session.id)

    def _emit(self, session_id: str, events: List[ChangeEvent]) -> None:
        """Notify after commit; a failing notifier never undoes the operation."""
        if self.notifier is None:
            return
        for event in events:
            try:
                self.notifier.notify(event, session_id)
            except Exception:
                logger.exception("Notifier failed for %s on %s", event.value, session_id)


def _expected(session: Session) -> Tuple[SessionStatus, int, int]:
    return session.status, session.current_round, session.version


def _require_round(session: Session, expected_round: Optional[int]) -> None:
    if expected_round is not None and expected_round != session.current_round:
        raise StaleTransitionError(
            session.id, "round mismatch",
            expected=expected_round, actual=session.current_round,
        )
