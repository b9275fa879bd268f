# Area: Core
"""
impostor_session._core.enums — Session State Machine Enums
==========================================================

Defines the statuses, transition events, voting outcomes and change
notifications of a game session.
"""

from enum import Enum


class SessionStatus(Enum):
    """
    Status of a session.

    State transitions:
    WAITING -> PLAYING (on ROUND_START)
    PLAYING -> VOTING (on TURNS_COMPLETE)
    VOTING -> PLAYING (on NEW_ROUND)
    VOTING -> FINISHED (on GAME_OVER)
    FINISHED is terminal.
    """
    WAITING = "waiting"
    PLAYING = "playing"
    VOTING = "voting"
    FINISHED = "finished"


class SessionEvent(Enum):
    """
    Events that trigger status transitions.

    Events are triggered by:
    - ROUND_START: host starts the game from the lobby
    - TURNS_COMPLETE: every active player has spoken, or the speaker vanished
    - NEW_ROUND: a resolution ended in a tie, a skip, or a wrong vote
    - GAME_OVER: a resolution or a departure decided the winner
    """
    ROUND_START = "ROUND_START"
    TURNS_COMPLETE = "TURNS_COMPLETE"
    NEW_ROUND = "NEW_ROUND"
    GAME_OVER = "GAME_OVER"


class VotingOutcome(Enum):
    """Result of resolving a round's votes (or of a game-ending departure)."""
    WAITING = "waiting"                  # Quorum not reached yet
    TIE = "tie"                          # Two or more entries share the top count
    SKIP = "skip"                        # Skip won outright
    WRONG_VOTE = "wrong_vote"            # Innocent voted out, game continues
    IMPOSTOR_CAUGHT = "impostor_caught"  # Defenders win
    IMPOSTOR_WINS = "impostor_wins"      # Too few accusers remain
    IMPOSTOR_LEFT = "impostor_left"      # Impostor departed mid-game

    @property
    def ends_game(self) -> bool:
        return self in (
            VotingOutcome.IMPOSTOR_CAUGHT,
            VotingOutcome.IMPOSTOR_WINS,
            VotingOutcome.IMPOSTOR_LEFT,
        )


class ChangeEvent(Enum):
    """Logical change notifications relayed to connected clients."""
    SESSION_UPDATED = "session_updated"
    ROSTER_CHANGED = "roster_changed"
    VOTE_RECORDED = "vote_recorded"
