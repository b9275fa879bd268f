# Area: Core
"""
impostor_session._core.packs — Word pack models
===============================================

Word packs arrive from outside the core (bundled JSON, user input, the
database), so they are pydantic models and validated on the way in.
"""

from __future__ import annotations
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# A user-created pack must offer enough variety to be worth hosting
MIN_CUSTOM_PAIRS = 10


class WordPair(BaseModel):
    """A primary term and the impostor's neighbouring term."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    main: str = Field(min_length=1)
    impostor: str = Field(min_length=1)


class WordPack(BaseModel):
    """
    An ordered collection of word pairs.

    Attributes:
        id: Pack identifier
        name: Display name
        creator_id: Owner, None for bundled defaults
        is_public: Visible to every creator
        is_default: Bundled with the package
        words: Ordered pairs; a session snapshots one by index
        created_at: Creation timestamp
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str
    name: str = Field(min_length=1)
    creator_id: Optional[str] = None
    is_public: bool = False
    is_default: bool = False
    words: List[WordPair] = Field(default_factory=list)
    created_at: Optional[str] = None

    def pair_at(self, index: int) -> WordPair:
        return self.words[index]

    @property
    def is_empty(self) -> bool:
        return not self.words


class NewWordPack(BaseModel):
    """Input for a user-created pack."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    creator_id: str = Field(min_length=1)
    is_public: bool = False
    words: List[WordPair]

    @field_validator("words")
    @classmethod
    def _enough_pairs(cls, words: List[WordPair]) -> List[WordPair]:
        if len(words) < MIN_CUSTOM_PAIRS:
            raise ValueError(
                f"at least {MIN_CUSTOM_PAIRS} word pairs required, got {len(words)}"
            )
        return words
