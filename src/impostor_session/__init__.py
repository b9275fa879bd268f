"""
impostor_session — Impostor game session engine
===============================================

Session state for a social-deduction party game: players join a lobby by
room code, each receives a secret word (one of them, the impostor, a
neighbouring one), take turns describing it, and vote someone out.

Quick Start:
    from impostor_session import (
        SQLiteSessionStore, SQLiteWordPackProvider, SessionOrchestrator,
    )
    store = SQLiteSessionStore("impostor.db")
    packs = SQLiteWordPackProvider(store)
    packs.seed_defaults()
    game = SessionOrchestrator(store, packs)

    session = game.create_session("host", "default-animals")
    game.join(session.room_code, "p2")
    game.join(session.room_code, "p3")
    game.start_round(session.id, "host")

Every operation is atomic: it either commits completely or raises an
ImpostorSessionError subclass and leaves the session unchanged.
"""

from ._config import DEFAULT_CONFIG, load_config, validate_config
from ._core import (
    ChangeEvent,
    NewWordPack,
    Player,
    RandomSource,
    ResolutionResult,
    RoundResult,
    SeededRandom,
    Session,
    SessionEvent,
    SessionOrchestrator,
    SessionStatus,
    TallyResult,
    Vote,
    VotingOutcome,
    WordPack,
    WordPair,
)
from ._shared import setup_logging
from ._store import SessionStore, SQLiteSessionStore
from .errors import (
    ImpostorSessionError,
    SessionNotFoundError,
    RoomCodeTakenError,
    NoActiveSessionError,
    SessionAlreadyStartedError,
    SessionFullError,
    NotEnoughPlayersError,
    NoWordPackError,
    NotAuthorizedError,
    PlayerNotFoundError,
    AlreadyVotedError,
    InvalidVoteError,
    StaleTransitionError,
    SessionBusyError,
    InvalidWordPackError,
)
from .notifications import ChangeFeed, ChangeNotifier, NullNotifier, SessionWatcher
from .types import PlayerSnapshot, RoundResultSnapshot, SessionSnapshot, TallySnapshot
from .word_packs import SQLiteWordPackProvider, WordPackProvider

__all__ = [
    # Main classes
    "SessionOrchestrator",
    "SQLiteSessionStore",
    "SessionStore",
    "SQLiteWordPackProvider",
    "WordPackProvider",
    "ChangeFeed",
    "ChangeNotifier",
    "NullNotifier",
    "SessionWatcher",
    "RandomSource",
    "SeededRandom",
    # Records and enums
    "Session",
    "Player",
    "Vote",
    "RoundResult",
    "ResolutionResult",
    "TallyResult",
    "WordPair",
    "WordPack",
    "NewWordPack",
    "SessionStatus",
    "SessionEvent",
    "VotingOutcome",
    "ChangeEvent",
    # Config and logging
    "DEFAULT_CONFIG",
    "load_config",
    "validate_config",
    "setup_logging",
    # Errors
    "ImpostorSessionError",
    "SessionNotFoundError",
    "RoomCodeTakenError",
    "NoActiveSessionError",
    "SessionAlreadyStartedError",
    "SessionFullError",
    "NotEnoughPlayersError",
    "NoWordPackError",
    "NotAuthorizedError",
    "PlayerNotFoundError",
    "AlreadyVotedError",
    "InvalidVoteError",
    "StaleTransitionError",
    "SessionBusyError",
    "InvalidWordPackError",
    # Snapshot types
    "SessionSnapshot",
    "PlayerSnapshot",
    "TallySnapshot",
    "RoundResultSnapshot",
]
__version__ = "1.0.0"
