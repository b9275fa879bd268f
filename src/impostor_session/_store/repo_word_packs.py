# Area: Store
"""
impostor_session._store.repo_word_packs — Word Packs Repository
===============================================================

Repository for the word_packs table. Pairs are stored as a JSON array
and parsed back through the pydantic models. Packs are insert-only: a
pack referenced by a session is never rewritten.
"""

import json
from typing import Any, Dict, List, Optional

from .database import BaseRepository
from .._core.packs import WordPack


class WordPackRepository(BaseRepository):
    """Repository for word_packs table."""

    def save(self, pack: WordPack) -> bool:
        """
        Insert a pack unless one with the same id exists.

        Returns:
            True if inserted
        """
        query = """
            INSERT OR IGNORE INTO word_packs
            (id, name, creator_id, is_public, is_default, words)
            VALUES (?, ?, ?, ?, ?, ?)
        """
        words = json.dumps(
            [pair.model_dump() for pair in pack.words], ensure_ascii=False
        )
        changed = self._execute(query, (
            pack.id,
            pack.name,
            pack.creator_id,
            int(pack.is_public),
            int(pack.is_default),
            words,
        ))
        return changed == 1

    def get(self, pack_id: str) -> Optional[WordPack]:
        row = self._fetch_one("SELECT * FROM word_packs WHERE id = ?", (pack_id,))
        return _to_pack(row) if row else None

    def list_visible(self, creator_id: Optional[str] = None) -> List[WordPack]:
        """
        Packs a creator may pick: defaults, public ones, and their own.

        Defaults come first, then newest.
        """
        query = """
            SELECT * FROM word_packs
            WHERE is_default = 1 OR is_public = 1 OR creator_id = ?
            ORDER BY is_default DESC, created_at DESC, rowid
        """
        return [_to_pack(r) for r in self._fetch(query, (creator_id,))]

    def list_by_creator(self, creator_id: str) -> List[WordPack]:
        query = "SELECT * FROM word_packs WHERE creator_id = ? ORDER BY created_at DESC, rowid"
        return [_to_pack(r) for r in self._fetch(query, (creator_id,))]


def _to_pack(row: Dict[str, Any]) -> WordPack:
    return WordPack(
        id=row["id"],
        name=row["name"],
        creator_id=row["creator_id"],
        is_public=bool(row["is_public"]),
        is_default=bool(row["is_default"]),
        words=json.loads(row["words"]),
        created_at=row["created_at"],
    )
