"""
impostor_session.types — TypedDict schemas for session snapshots
================================================================

Documents the structure of the dictionaries returned by
``SessionOrchestrator.snapshot()`` and printed by ``impostor-session show``.

    from impostor_session import SessionSnapshot

Use __annotations__ to inspect fields:

    >>> PlayerSnapshot.__annotations__
    {'participant_id': str, 'turn_order': Optional[int], ...}
"""

from typing import Dict, List, Literal, Optional, TypedDict


StatusName = Literal["waiting", "playing", "voting", "finished"]

OutcomeName = Literal[
    "waiting", "tie", "skip", "wrong_vote",
    "impostor_caught", "impostor_wins", "impostor_left",
]


class PlayerSnapshot(TypedDict):
    """One member as seen by the viewer.

    Fields
    ------
    participant_id : str
        Participant identity.
    turn_order : int or None
        Dense speaking position among active players; None before the
        game starts and for kicked players.
    kicked : bool
        Kicked players stay listed but no longer play.
    word : str or None
        Secret word; only for the viewer themselves, or everyone once finished.
    is_impostor : bool or None
        Same visibility as ``word``.
    """
    participant_id: str
    turn_order: Optional[int]
    kicked: bool
    word: Optional[str]
    is_impostor: Optional[bool]


class TallySnapshot(TypedDict):
    """Vote counts of the current round (only while voting)."""
    votes: Dict[str, int]    # target participant id (or "__skip__") -> count
    voters: int              # distinct active voters so far
    active_count: int        # quorum size
    complete: bool


class RoundResultSnapshot(TypedDict):
    """The most recent resolved round."""
    round: int
    outcome: OutcomeName
    voted_out: Optional[str]


class SessionSnapshot(TypedDict):
    """Full view of one session.

    ``version`` increases on every committed change; pollers compare it
    to decide whether to refresh.
    """
    session_id: str
    room_code: str
    host_id: str
    word_pack_id: str
    status: StatusName
    round: int
    current_turn: Optional[str]
    outcome: Optional[OutcomeName]
    version: int
    players: List[PlayerSnapshot]
    votes: Optional[TallySnapshot]
    last_result: Optional[RoundResultSnapshot]
