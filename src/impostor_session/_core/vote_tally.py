# Area: Core
"""
impostor_session._core.vote_tally — Vote Tally
==============================================

Counts a round's votes against the active roster and decides what the
round's resolution does to the session. Pure functions over records; the
orchestrator supplies the votes and players read inside its transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .enums import VotingOutcome
from .models import Player, Vote
from .roster import active_players

# Synthetic entry id for skip votes in the ranked result
SKIP = "__skip__"

# A wrong vote that leaves this many active players or fewer hands the impostor the win
ENDGAME_THRESHOLD = 2


@dataclass(frozen=True)
class TallyEntry:
    """Votes counted for one target (or for skip)."""

    target_id: str
    count: int

    @property
    def is_skip(self) -> bool:
        return self.target_id == SKIP


@dataclass(frozen=True)
class TallyResult:
    """
    Ranked counts of one round.

    Attributes:
        entries: Skip first, then targets, sorted by count descending (stable)
        voters: Distinct active voters counted
        active_count: Active players, the quorum size
    """

    entries: List[TallyEntry] = field(default_factory=list)
    voters: int = 0
    active_count: int = 0

    @property
    def is_complete(self) -> bool:
        return self.active_count > 0 and self.voters >= self.active_count

    @property
    def winner(self) -> Optional[TallyEntry]:
        """Top entry, only if strictly ahead of every other entry."""
        if not self.entries:
            return None
        top = self.entries[0]
        if top.count == 0:
            return None
        if len(self.entries) > 1 and self.entries[1].count == top.count:
            return None
        return top

    def count_for(self, target_id: str) -> int:
        for entry in self.entries:
            if entry.target_id == target_id:
                return entry.count
        return 0

    def to_dict(self) -> dict:
        return {
            "votes": {e.target_id: e.count for e in self.entries},
            "voters": self.voters,
            "active_count": self.active_count,
            "complete": self.is_complete,
        }


@dataclass(frozen=True)
class Resolution:
    """
    What resolving a complete tally does to the session.

    Attributes:
        outcome: Voting outcome
        voted_out_id: Participant to mark kicked, if any
    """

    outcome: VotingOutcome
    voted_out_id: Optional[str] = None

    @property
    def finishes(self) -> bool:
        """True if the game ends."""
        return self.outcome.ends_game


def tally(votes: Sequence[Vote], players: Sequence[Player]) -> TallyResult:
    """
    Count votes of active voters for active targets.

    Votes cast by players who are no longer active are ignored. A vote for
    a player who is no longer active adds to no entry but its voter still
    counts towards quorum. A voter counts at most once.
    """
    roster = active_players(players)
    active_ids = {p.participant_id for p in roster}

    counts = {p.participant_id: 0 for p in roster}
    skips = 0
    seen = set()
    for vote in votes:
        if vote.voter_id not in active_ids or vote.voter_id in seen:
            continue
        # The voter still counts towards quorum when their target has left
        seen.add(vote.voter_id)
        if vote.is_skip:
            skips += 1
        elif vote.target_id in active_ids:
            counts[vote.target_id] += 1

    entries = [TallyEntry(SKIP, skips)]
    entries.extend(TallyEntry(p.participant_id, counts[p.participant_id]) for p in roster)
    # sorted() is stable: equal counts keep skip first, then turn order
    entries = sorted(entries, key=lambda e: -e.count)

    return TallyResult(entries=entries, voters=len(seen), active_count=len(roster))


def decide(result: TallyResult, players: Sequence[Player]) -> Resolution:
    """
    Map a tally to its consequence.

    - incomplete: WAITING, nothing changes
    - no strict winner: TIE, new round
    - skip wins: SKIP, new round
    - impostor wins the vote: IMPOSTOR_CAUGHT, game over
    - innocent wins the vote: voted out; IMPOSTOR_WINS if at most two
      active players remain, otherwise WRONG_VOTE and a new round
    """
    if not result.is_complete:
        return Resolution(VotingOutcome.WAITING)

    winner = result.winner
    if winner is None:
        return Resolution(VotingOutcome.TIE)
    if winner.is_skip:
        return Resolution(VotingOutcome.SKIP)

    roster = active_players(players)
    target = next(p for p in roster if p.participant_id == winner.target_id)
    if target.is_impostor:
        return Resolution(VotingOutcome.IMPOSTOR_CAUGHT)

    remaining = len(roster) - 1
    if remaining <= ENDGAME_THRESHOLD:
        return Resolution(VotingOutcome.IMPOSTOR_WINS, voted_out_id=target.participant_id)
    return Resolution(VotingOutcome.WRONG_VOTE, voted_out_id=target.participant_id)
