# Area: Store
"""
Persistence layer for sessions, players, votes, round results and word packs.

This package contains:
- SQLite schema and connection helpers
- One repository per table
- The SessionStore protocol and its SQLite implementation
"""

from .database import init_database, get_connection
from .store import SessionStore, SQLiteSessionStore, StoreTransaction

__all__ = [
    "init_database",
    "get_connection",
    "SessionStore",
    "SQLiteSessionStore",
    "StoreTransaction",
]
