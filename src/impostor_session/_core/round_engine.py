# Area: Core
"""
impostor_session._core.round_engine — Round Engine
==================================================

Draws the secret word pair, the impostor and the speaking order when a
game starts, and computes who speaks next. The engine only plans; the
orchestrator writes the plan through the roster and the session store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .models import Player, Session
from .packs import WordPack
from .random_source import RandomSource
from .roster import MIN_PLAYERS, active_players
from ..errors import NotEnoughPlayersError, NoWordPackError

logger = logging.getLogger("impostor_session.round_engine")


@dataclass(frozen=True)
class RoundAssignment:
    """
    Result of drawing a round.

    Attributes:
        word_index: Index of the drawn pair in the pack
        impostor_id: Participant holding the impostor term
        speaking_order: Participants in turn order 0..N-1
        words: Secret word per participant
    """

    word_index: int
    impostor_id: str
    speaking_order: List[str]
    words: Dict[str, str]

    @property
    def first_speaker(self) -> str:
        return self.speaking_order[0]


class RoundEngine:
    """Assignment and turn rotation."""

    def __init__(self, rng: RandomSource, min_players: int = MIN_PLAYERS):
        self.rng = rng
        self.min_players = min_players

    def plan_round(
        self,
        session: Session,
        players: Sequence[Player],
        pack: Optional[WordPack],
    ) -> RoundAssignment:
        """
        Draw word pair, impostor and speaking order for the active roster.

        The impostor and the order are drawn independently: the impostor
        is uniform over the roster and the whole order is shuffled.

        Raises:
            NotEnoughPlayersError: Fewer active players than the minimum
            NoWordPackError: Pack missing or empty
        """
        roster = active_players(players)
        if len(roster) < self.min_players:
            raise NotEnoughPlayersError(session.id, len(roster), self.min_players)
        if pack is None or pack.is_empty:
            raise NoWordPackError(session.word_pack_id)

        word_index = self.rng.randrange(len(pack.words))
        pair = pack.pair_at(word_index)
        impostor = self.rng.choice(roster)
        order = self.rng.permutation(roster)

        words = {
            p.participant_id: pair.impostor if p is impostor else pair.main
            for p in roster
        }
        logger.info(
            "[%s] Round drawn: pair #%d, %d players",
            session.room_code, word_index, len(roster),
        )
        return RoundAssignment(
            word_index=word_index,
            impostor_id=impostor.participant_id,
            speaking_order=[p.participant_id for p in order],
            words=words,
        )

    def next_speaker(self, players: Sequence[Player], current_id: Optional[str]) -> Optional[str]:
        """
        Participant who speaks after ``current_id``, or None when voting is due.

        None is returned when advancing would wrap around to the first
        active player, and when the current speaker is no longer active.
        """
        order = active_players(players)
        ids = [p.participant_id for p in order]
        if current_id not in ids:
            return None
        next_index = (ids.index(current_id) + 1) % len(ids)
        if next_index == 0:
            return None
        return ids[next_index]

    def first_speaker(self, players: Sequence[Player]) -> Optional[str]:
        """First active player by turn order; used when a new round begins."""
        order = active_players(players)
        return order[0].participant_id if order else None
