# Area: Store
"""
impostor_session._store.database — Database Initialization
==========================================================

Handles SQLite database initialization, connection management and the
base class shared by all repositories.
"""

import sqlite3
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger("impostor_session.store.database")

# Path to schema file
SCHEMA_PATH = Path(__file__).parent / "schema.sql"


def get_connection(db_path: str = "impostor.db", timeout: float = 5.0) -> sqlite3.Connection:
    """
    Get a database connection.

    The connection runs in autocommit mode (``isolation_level=None``) so
    transactions are opened explicitly with ``BEGIN IMMEDIATE``.

    Args:
        db_path: Path to the SQLite database file
        timeout: Seconds to wait on a locked database

    Returns:
        SQLite connection with row factory set
    """
    conn = sqlite3.connect(db_path, timeout=timeout, isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_database(db_path: str = "impostor.db") -> None:
    """
    Initialize the database with schema.

    Args:
        db_path: Path to the SQLite database file
    """
    conn = get_connection(db_path)
    try:
        with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
            schema = f.read()
        conn.executescript(schema)
        logger.info(f"Database initialized at {db_path}")
    finally:
        conn.close()


class BaseRepository:
    """
    Base class for database repositories.

    Repositories are bound to the connection of one open transaction;
    they never commit on their own.
    """

    def __init__(self, conn: sqlite3.Connection):
        """
        Initialize repository.

        Args:
            conn: Connection of the enclosing transaction
        """
        self.conn = conn

    def _execute(self, query: str, params: tuple = ()) -> int:
        """
        Execute a write query.

        Returns:
            Number of rows changed
        """
        cursor = self.conn.execute(query, params)
        return cursor.rowcount

    def _fetch(self, query: str, params: tuple = ()) -> List[Dict[str, Any]]:
        """Execute a query and return all rows as dicts."""
        cursor = self.conn.execute(query, params)
        return [dict(row) for row in cursor.fetchall()]

    def _fetch_one(self, query: str, params: tuple = ()) -> Optional[Dict[str, Any]]:
        """Execute query and return single result."""
        results = self._fetch(query, params)
        return results[0] if results else None
