# Area: Store
"""
impostor_session._store.store — Session store
=============================================

The orchestrator talks to persistence through ``SessionStore``: a
factory of transactions whose repositories share one connection. The
SQLite implementation opens every write transaction with
``BEGIN IMMEDIATE`` so concurrent writers, in this process or another,
queue on the database lock instead of interleaving.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import ContextManager, Iterator, Protocol

from .database import get_connection, init_database
from .repo_players import PlayerRepository
from .repo_round_results import RoundResultRepository
from .repo_sessions import SessionRepository
from .repo_votes import VoteRepository
from .repo_word_packs import WordPackRepository

logger = logging.getLogger("impostor_session.store")


class StoreTransaction:
    """Repositories bound to the connection of one transaction."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.sessions = SessionRepository(conn)
        self.players = PlayerRepository(conn)
        self.votes = VoteRepository(conn)
        self.results = RoundResultRepository(conn)
        self.word_packs = WordPackRepository(conn)


class SessionStore(Protocol):
    """Protocol for the persistence collaborator of the orchestrator."""

    def transaction(self) -> ContextManager[StoreTransaction]:
        """All-or-nothing write scope."""
        ...

    def read(self) -> ContextManager[StoreTransaction]:
        """Read-only scope; safe to repeat."""
        ...


class SQLiteSessionStore:
    """
    SessionStore backed by a SQLite file.

    Usage:
        store = SQLiteSessionStore("impostor.db")
        with store.transaction() as tx:
            session = tx.sessions.get(session_id)
    """

    def __init__(self, db_path: str = "impostor.db", busy_timeout: float = 5.0,
                 initialize: bool = True):
        self.db_path = db_path
        self.busy_timeout = busy_timeout
        if initialize:
            init_database(db_path)

    def _connect(self) -> sqlite3.Connection:
        return get_connection(self.db_path, timeout=self.busy_timeout)

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """
        Open a write transaction.

        Commits when the block exits normally, rolls back on any exception
        and re-raises it, so a rejected operation leaves no partial state.
        """
        conn = self._connect()
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield StoreTransaction(conn)
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()

    @contextmanager
    def read(self) -> Iterator[StoreTransaction]:
        """Open a read scope on a consistent snapshot."""
        conn = self._connect()
        try:
            conn.execute("BEGIN")
            try:
                yield StoreTransaction(conn)
            finally:
                conn.execute("ROLLBACK")
        finally:
            conn.close()
