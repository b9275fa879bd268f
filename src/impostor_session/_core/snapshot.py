# Area: Core
"""
impostor_session._core.snapshot — Session snapshot builder
==========================================================

Builds serializable views of a session for clients and the CLI. Secret
words and the impostor flag are only shown to their owner while the game
runs; once finished, everything is revealed.
"""

from typing import Optional, Sequence

from .enums import SessionStatus
from .models import Player, RoundResult, Session
from .vote_tally import TallyResult


def build_snapshot(
    session: Session,
    players: Sequence[Player],
    tally: Optional[TallyResult] = None,
    last_result: Optional[RoundResult] = None,
    viewer_id: Optional[str] = None,
) -> dict:
    """Build a serializable snapshot of one session."""
    revealed = session.status == SessionStatus.FINISHED
    return {
        "session_id": session.id,
        "room_code": session.room_code,
        "host_id": session.host_id,
        "word_pack_id": session.word_pack_id,
        "status": session.status.value,
        "round": session.current_round,
        "current_turn": session.current_turn_player_id,
        "outcome": session.outcome.value if session.outcome else None,
        "version": session.version,
        "players": [
            _player_snapshot(p, revealed or p.participant_id == viewer_id)
            for p in players
        ],
        "votes": tally.to_dict() if tally is not None else None,
        "last_result": _result_snapshot(last_result) if last_result else None,
    }


def _player_snapshot(player: Player, show_secret: bool) -> dict:
    """Build snapshot for one player."""
    return {
        "participant_id": player.participant_id,
        "turn_order": player.turn_order,
        "kicked": player.is_kicked,
        "word": player.assigned_word if show_secret else None,
        "is_impostor": player.is_impostor if show_secret else None,
    }


def _result_snapshot(result: RoundResult) -> dict:
    return {
        "round": result.round_number,
        "outcome": result.outcome.value,
        "voted_out": result.voted_out_id,
    }
