"""
impostor_session.word_packs — Word pack provider
================================================

Supplies the word packs sessions draw from: the bundled defaults, public
packs and each creator's own. Input is validated through the pydantic
models in ``_core.packs`` before it reaches the store.
"""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import List, Optional, Protocol

from pydantic import ValidationError

from ._core.packs import NewWordPack, WordPack
from .errors import InvalidWordPackError

logger = logging.getLogger("impostor_session.word_packs")

DEFAULT_PACKS_PATH = Path(__file__).parent / "data" / "default_packs.json"


class WordPackProvider(Protocol):
    """Protocol for the word pack collaborator of the orchestrator."""

    def fetch(self, pack_id: str) -> Optional[WordPack]:
        """Return the pack, or None if it does not exist."""
        ...

    def list_visible(self, creator_id: Optional[str] = None) -> List[WordPack]:
        """Defaults, public packs and the creator's own; defaults first."""
        ...


class SQLiteWordPackProvider:
    """WordPackProvider over the session store's word_packs table."""

    def __init__(self, store):
        self.store = store

    def fetch(self, pack_id: str) -> Optional[WordPack]:
        with self.store.read() as tx:
            return tx.word_packs.get(pack_id)

    def list_visible(self, creator_id: Optional[str] = None) -> List[WordPack]:
        with self.store.read() as tx:
            return tx.word_packs.list_visible(creator_id)

    def list_by_creator(self, creator_id: str) -> List[WordPack]:
        with self.store.read() as tx:
            return tx.word_packs.list_by_creator(creator_id)

    def create_pack(
        self,
        name: str,
        creator_id: str,
        words: list,
        is_public: bool = False,
    ) -> WordPack:
        """
        Validate and store a user-created pack.

        Args:
            name: Display name
            creator_id: Owner
            words: Pairs as dicts with "main" and "impostor" keys
            is_public: Visible to every creator

        Returns:
            The stored pack

        Raises:
            InvalidWordPackError: If validation fails (too few pairs, blank terms)
        """
        try:
            draft = NewWordPack(
                name=name, creator_id=creator_id, is_public=is_public, words=words
            )
        except ValidationError as e:
            raise InvalidWordPackError(
                name, [_describe(err) for err in e.errors()]
            ) from e

        pack = WordPack(id=uuid.uuid4().hex, **draft.model_dump())
        with self.store.transaction() as tx:
            tx.word_packs.save(pack)
            stored = tx.word_packs.get(pack.id)
        logger.info("Word pack '%s' created by %s (%d pairs)", name, creator_id, len(pack.words))
        return stored

    def seed_defaults(self, path: Path = DEFAULT_PACKS_PATH) -> int:
        """
        Load the bundled default packs; packs already present are left alone.

        Returns:
            Number of packs inserted
        """
        with open(path, "r", encoding="utf-8") as f:
            entries = json.load(f)

        packs = [
            WordPack(id=e["id"], name=e["name"], is_default=True, words=e["words"])
            for e in entries
        ]
        inserted = 0
        with self.store.transaction() as tx:
            for pack in packs:
                if tx.word_packs.save(pack):
                    inserted += 1
        logger.info("Seeded %d of %d default word packs", inserted, len(packs))
        return inserted


def _describe(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error.get('msg', 'invalid')}" if location else error.get("msg", "invalid")
