# Area: Core
"""
Core session logic - one impostor game from lobby to final vote.

This package handles:
- Session status transitions
- Roster membership and turn order
- Word, impostor and speaking-order assignment
- Vote counting and round resolution
- Orchestration of the above over a SessionStore
"""

from .enums import SessionStatus, SessionEvent, VotingOutcome, ChangeEvent
from .models import Session, Player, Vote, RoundResult
from .packs import WordPair, WordPack, NewWordPack
from .random_source import RandomSource, SeededRandom
from .state_machine import SessionStateMachine
from .roster import RosterManager
from .round_engine import RoundEngine, RoundAssignment
from .vote_tally import TallyEntry, TallyResult, Resolution, tally, decide
from .orchestrator import SessionOrchestrator, ResolutionResult

__all__ = [
    "SessionStatus",
    "SessionEvent",
    "VotingOutcome",
    "ChangeEvent",
    "Session",
    "Player",
    "Vote",
    "RoundResult",
    "WordPair",
    "WordPack",
    "NewWordPack",
    "RandomSource",
    "SeededRandom",
    "SessionStateMachine",
    "RosterManager",
    "RoundEngine",
    "RoundAssignment",
    "TallyEntry",
    "TallyResult",
    "Resolution",
    "tally",
    "decide",
    "SessionOrchestrator",
    "ResolutionResult",
]
