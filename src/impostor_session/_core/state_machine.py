# Area: Core
"""
impostor_session._core.state_machine — Session State Machine
============================================================

Transition graph of a session's status. The orchestrator runs every
status change through a SessionStateMachine so that an action based on
an outdated view of the session is rejected instead of applied.
"""

import logging

from .enums import SessionEvent, SessionStatus
from ..errors import StaleTransitionError

logger = logging.getLogger("impostor_session.state_machine")


# Valid transitions: {current_status: {event: next_status}}
TRANSITIONS = {
    SessionStatus.WAITING: {
        SessionEvent.ROUND_START: SessionStatus.PLAYING,
    },
    SessionStatus.PLAYING: {
        SessionEvent.TURNS_COMPLETE: SessionStatus.VOTING,
    },
    SessionStatus.VOTING: {
        SessionEvent.NEW_ROUND: SessionStatus.PLAYING,
        SessionEvent.GAME_OVER: SessionStatus.FINISHED,
    },
    SessionStatus.FINISHED: {},
}


def can_transition(status: SessionStatus, event: SessionEvent) -> bool:
    """Check whether ``event`` is allowed from ``status``."""
    return event in TRANSITIONS.get(status, {})


class SessionStateMachine:
    """
    Validates and executes status transitions for one session.

    Attributes:
        session_id: Session the machine belongs to (for errors)
        label: Name used in log lines, usually the room code
        current_state: The current status
    """

    def __init__(self, session_id: str, status: SessionStatus, label: str = ""):
        self.session_id = session_id
        self.current_state = status
        self.label = label or session_id

    def can_transition(self, event: SessionEvent) -> bool:
        return can_transition(self.current_state, event)

    def require(self, *expected: SessionStatus) -> None:
        """
        Reject the call unless the current status is one of ``expected``.

        Raises:
            StaleTransitionError: If the status does not match
        """
        if self.current_state not in expected:
            raise StaleTransitionError(
                self.session_id,
                f"expected status {_names(expected)}, found {self.current_state.value}",
                expected=[s.value for s in expected],
                actual=self.current_state.value,
            )

    def transition(self, event: SessionEvent) -> SessionStatus:
        """
        Execute a transition.

        Args:
            event: The event triggering the transition

        Returns:
            The new status

        Raises:
            StaleTransitionError: If the event is not valid from the current status
        """
        if not self.can_transition(event):
            logger.warning(
                "[%s] Rejected %s from %s",
                self.label, event.value, self.current_state.value,
            )
            raise StaleTransitionError(
                self.session_id,
                f"{event.value} is not valid from {self.current_state.value}",
                expected=event.value,
                actual=self.current_state.value,
            )

        next_state = TRANSITIONS[self.current_state][event]
        logger.info(
            "[%s] Status: %s → %s",
            self.label, self.current_state.value, next_state.value,
        )
        self.current_state = next_state
        return next_state

    def transition_to(self, target: SessionStatus) -> SessionStatus:
        """
        Walk the graph to ``target`` one legal edge at a time.

        Used when a departure ends the game while players are still
        speaking: PLAYING has no direct edge to FINISHED, so the walk goes
        through VOTING.
        """
        path = {
            (SessionStatus.PLAYING, SessionStatus.FINISHED): [
                SessionEvent.TURNS_COMPLETE, SessionEvent.GAME_OVER,
            ],
            (SessionStatus.VOTING, SessionStatus.FINISHED): [SessionEvent.GAME_OVER],
        }.get((self.current_state, target))
        if path is None:
            raise StaleTransitionError(
                self.session_id,
                f"no path from {self.current_state.value} to {target.value}",
                expected=target.value,
                actual=self.current_state.value,
            )
        for event in path:
            self.transition(event)
        return self.current_state


def _names(statuses) -> str:
    return "/".join(s.value for s in statuses)
