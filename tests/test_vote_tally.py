# Area: Core Tests
"""Tests for the Vote Tally."""

from impostor_session._core.enums import VotingOutcome
from impostor_session._core.models import Player, Vote
from impostor_session._core.vote_tally import SKIP, Resolution, decide, tally


def _players(*ids, impostor=None, kicked=()):
    return [
        Player(
            id=f"row-{pid}", session_id="S1", participant_id=pid,
            is_impostor=(pid == impostor), is_kicked=(pid in kicked),
            turn_order=None if pid in kicked else index,
        )
        for index, pid in enumerate(ids)
    ]


def _votes(*pairs):
    """Build votes from (voter, target) pairs; target None means skip."""
    return [
        Vote(id=f"v{i}", session_id="S1", round_number=1, voter_id=voter,
             target_id=target, is_skip=target is None)
        for i, (voter, target) in enumerate(pairs)
    ]


class TestTally:
    """Tests for counting."""

    def test_counts_targets_and_skips(self):
        players = _players("a", "b", "c", "d")
        result = tally(_votes(("a", "b"), ("b", "c"), ("c", "b"), ("d", None)), players)

        assert result.count_for("b") == 2
        assert result.count_for("c") == 1
        assert result.count_for(SKIP) == 1
        assert result.voters == 4
        assert result.is_complete is True

    def test_incomplete_until_every_active_player_voted(self):
        players = _players("a", "b", "c")
        result = tally(_votes(("a", "b"), ("b", "a")), players)
        assert result.is_complete is False
        assert decide(result, players).outcome == VotingOutcome.WAITING

    def test_ranked_descending_with_skip_first_on_equal_counts(self):
        """Test ordering: count descending, skip ahead of players on ties."""
        players = _players("a", "b", "c", "d")
        result = tally(_votes(("a", None), ("b", "c"), ("c", "d"), ("d", "c")), players)

        assert [e.target_id for e in result.entries[:3]] == ["c", SKIP, "d"]

    def test_votes_from_inactive_voters_ignored(self):
        players = _players("a", "b", "c", "d", kicked=("d",))
        result = tally(_votes(("a", "b"), ("d", "c")), players)
        assert result.voters == 1
        assert result.count_for("c") == 0
        assert result.active_count == 3

    def test_vote_for_departed_target_counts_towards_quorum_only(self):
        players = _players("a", "b", "c", "d", kicked=("d",))
        result = tally(_votes(("a", "d"), ("b", "c"), ("c", "b")), players)
        assert result.voters == 3
        assert result.is_complete is True
        assert result.count_for("d") == 0

    def test_duplicate_voter_counted_once(self):
        players = _players("a", "b", "c")
        result = tally(_votes(("a", "b"), ("a", "c")), players)
        assert result.voters == 1
        assert result.count_for("b") == 1
        assert result.count_for("c") == 0


class TestDecide:
    """Tests for turning a complete tally into a resolution."""

    def test_tie_two_two(self):
        """Test 4 players, {A:2, B:2, skip:0} is a tie."""
        players = _players("a", "b", "c", "d", impostor="c")
        result = tally(_votes(("a", "b"), ("b", "a"), ("c", "a"), ("d", "b")), players)

        resolution = decide(result, players)
        assert result.winner is None
        assert resolution.outcome == VotingOutcome.TIE
        assert resolution.finishes is False

    def test_skip_wins(self):
        players = _players("a", "b", "c", impostor="a")
        result = tally(_votes(("a", None), ("b", None), ("c", "a")), players)
        assert decide(result, players).outcome == VotingOutcome.SKIP

    def test_skip_tied_with_player_is_tie(self):
        players = _players("a", "b", "c", "d", impostor="a")
        result = tally(_votes(("a", None), ("b", None), ("c", "a"), ("d", "a")), players)
        assert decide(result, players).outcome == VotingOutcome.TIE

    def test_impostor_caught(self):
        players = _players("a", "b", "c", "d", impostor="b")
        result = tally(_votes(("a", "b"), ("b", "a"), ("c", "b"), ("d", "b")), players)

        resolution = decide(result, players)
        assert resolution.outcome == VotingOutcome.IMPOSTOR_CAUGHT
        assert resolution.finishes is True
        assert resolution.voted_out_id is None

    def test_wrong_vote_continues_with_enough_players(self):
        players = _players("a", "b", "c", "d", impostor="d")
        result = tally(_votes(("a", "b"), ("b", "a"), ("c", "b"), ("d", "b")), players)

        resolution = decide(result, players)
        assert resolution.outcome == VotingOutcome.WRONG_VOTE
        assert resolution.voted_out_id == "b"
        assert resolution.finishes is False

    def test_wrong_vote_endgame_with_three_players(self):
        """Test innocent voted out leaving 2 active players: impostor wins."""
        players = _players("a", "b", "c", impostor="c")
        result = tally(_votes(("a", "b"), ("b", "a"), ("c", "b")), players)

        resolution = decide(result, players)
        assert resolution.outcome == VotingOutcome.IMPOSTOR_WINS
        assert resolution.voted_out_id == "b"
        assert resolution.finishes is True

    def test_finishes_follows_outcome(self):
        assert Resolution(VotingOutcome.IMPOSTOR_LEFT).finishes is True
        assert Resolution(VotingOutcome.WAITING).finishes is False
        assert Resolution(VotingOutcome.WRONG_VOTE, voted_out_id="b").finishes is False
