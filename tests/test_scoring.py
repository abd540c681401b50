"""
Unit tests for match resolution and session scoring.
"""

import random

import pytest

from arena.tournament.models import Competitor, Match, MatchResult
from arena.tournament.scheduler import generate_schedule
from arena.tournament.scoring import (
    BattleSession,
    resolve_match,
    split_from_position,
    calculate_final_scores
)
from arena.tournament.exceptions import (
    InvalidScoreError,
    SessionCompleteError,
    SessionIncompleteError,
    NothingToUndoError
)

A = Competitor(id='A', title='Alpha', image_url='http://img/a.png')
B = Competitor(id='B', title='Bravo')
C = Competitor(id='C', title='Charlie')


def result(a, b, score_a, score_b):
    return MatchResult(competitor_a=a, competitor_b=b, score_a=score_a, score_b=score_b)


@pytest.fixture
def abc_results():
    """A vs B 70/30, A vs C 40/60, B vs C 55/45."""
    return [
        result(A, B, 70, 30),
        result(A, C, 40, 60),
        result(B, C, 55, 45),
    ]


@pytest.fixture
def abc_session():
    """Session over A, B, C in a fixed order."""
    matches = [
        Match(id='match-0', competitor_a=A, competitor_b=B),
        Match(id='match-1', competitor_a=A, competitor_b=C),
        Match(id='match-2', competitor_a=B, competitor_b=C),
    ]
    return BattleSession('alice', [A, B, C], matches)


class TestResolveMatch:
    """Tests for resolve_match."""

    def test_a_wins(self):
        r = resolve_match(Match('m', A, B), 70, 30)
        assert r.winner == A
        assert r.loser == B
        assert r.match_id == 'm'

    def test_b_wins(self):
        r = resolve_match(Match('m', A, B), 20, 80)
        assert r.winner == B
        assert r.loser == A

    def test_tie_goes_to_a(self):
        r = resolve_match(Match('m', A, B), 50, 50)
        assert r.is_tie
        assert r.winner == A
        assert r.loser == B

    def test_extremes(self):
        assert resolve_match(Match('m', A, B), 100, 0).winner == A
        assert resolve_match(Match('m', A, B), 0, 100).winner == B

    @pytest.mark.parametrize("score_a,score_b", [
        (60, 30),     # doesn't sum to 100
        (101, -1),    # out of range
        (-10, 110),
        (50.0, 50),   # not an integer
        (True, 99),
    ])
    def test_invalid_split(self, score_a, score_b):
        with pytest.raises(InvalidScoreError):
            resolve_match(Match('m', A, B), score_a, score_b)

    def test_invalid_split_is_value_error(self):
        with pytest.raises(ValueError):
            resolve_match(Match('m', A, B), 10, 10)


class TestSplitFromPosition:
    """Tests for slider position conversion."""

    def test_neutral(self):
        assert split_from_position(50) == (50, 50)

    def test_full_left_and_right(self):
        assert split_from_position(0) == (100, 0)
        assert split_from_position(100) == (0, 100)

    def test_rounding(self):
        assert split_from_position(30.4) == (70, 30)
        assert split_from_position(30.6) == (69, 31)

    def test_half_positions_still_sum_to_100(self):
        for position in (0.5, 12.5, 50.5, 99.5):
            score_a, score_b = split_from_position(position)
            assert score_a + score_b == 100

    def test_clamped(self):
        assert split_from_position(-20) == (100, 0)
        assert split_from_position(140) == (0, 100)


class TestCalculateFinalScores:
    """Tests for calculate_final_scores."""

    def test_concrete_scenario(self, abc_results):
        assert calculate_final_scores(abc_results) == {'A': 110, 'B': 85, 'C': 105}

    def test_empty(self):
        assert calculate_final_scores([]) == {}

    def test_unplayed_competitor_absent(self):
        scores = calculate_final_scores([result(A, B, 60, 40)])
        assert 'C' not in scores
        assert scores.get('C', 0) == 0

    def test_total_points(self, abc_results):
        """Every match hands out exactly 100 points."""
        scores = calculate_final_scores(abc_results)
        assert sum(scores.values()) == 100 * len(abc_results)


class TestBattleSession:
    """Tests for BattleSession."""

    def test_initial_state(self, abc_session):
        assert abc_session.current_match.id == 'match-0'
        assert abc_session.match_number == 1
        assert abc_session.completed_count == 0
        assert abc_session.total_matches == 3
        assert not abc_session.is_complete
        assert not abc_session.can_undo
        assert abc_session.final_scores == {}
        assert abc_session.progress == 0
        assert abc_session.round_label == "Opening Matches"

    def test_record_advances(self, abc_session):
        r = abc_session.record(70, 30)

        assert r.winner == A
        assert abc_session.matches[0].completed
        assert abc_session.results == [r]
        assert abc_session.current_match.id == 'match-1'
        assert abc_session.match_number == 2
        assert abc_session.progress == 33

    def test_complete_session(self, abc_session):
        abc_session.record(70, 30)
        abc_session.record(40, 60)
        abc_session.record(55, 45)

        assert abc_session.is_complete
        assert abc_session.current_match is None
        assert abc_session.match_number == 3
        assert abc_session.progress == 100
        assert abc_session.final_scores == {'A': 110, 'B': 85, 'C': 105}

    def test_record_after_complete(self, abc_session):
        for split in [(70, 30), (40, 60), (55, 45)]:
            abc_session.record(*split)
        with pytest.raises(SessionCompleteError):
            abc_session.record(50, 50)

    def test_invalid_split_leaves_session_untouched(self, abc_session):
        with pytest.raises(InvalidScoreError):
            abc_session.record(70, 70)
        assert abc_session.completed_count == 0
        assert not abc_session.matches[0].completed

    def test_undo(self, abc_session):
        abc_session.record(70, 30)
        abc_session.record(40, 60)

        removed = abc_session.undo()

        assert removed.match_id == 'match-1'
        assert abc_session.current_match.id == 'match-1'
        assert not abc_session.matches[1].completed
        assert [r.match_id for r in abc_session.results] == ['match-0']
        assert abc_session.final_scores == {'A': 70, 'B': 30}

    def test_record_and_undo_only_flip_completed(self, abc_session):
        def snapshot():
            return [(m.id, m.competitor_a, m.competitor_b, m.round) for m in abc_session.matches]

        before = snapshot()
        abc_session.record(70, 30)
        abc_session.record(40, 60)
        abc_session.undo()

        assert snapshot() == before
        assert [m.completed for m in abc_session.matches] == [True, False, False]

    def test_undo_nothing(self, abc_session):
        with pytest.raises(NothingToUndoError):
            abc_session.undo()

    def test_undo_from_complete_reopens_last_match(self, abc_session):
        for split in [(70, 30), (40, 60), (55, 45)]:
            abc_session.record(*split)

        abc_session.undo()

        assert not abc_session.is_complete
        assert abc_session.current_match.id == 'match-2'

    def test_undo_then_replay_differently(self, abc_session):
        abc_session.record(70, 30)
        abc_session.undo()
        abc_session.record(10, 90)
        assert abc_session.final_scores == {'A': 10, 'B': 90}

    def test_undo_equals_direct_accumulation(self):
        """Undoing k results equals accumulating the first n-k directly."""
        competitors = [Competitor(id=str(i), title=str(i)) for i in range(6)]
        rng = random.Random(5)
        splits = [(s, 100 - s) for s in (rng.randint(0, 100) for _ in range(15))]

        for keep in range(len(splits) + 1):
            session = BattleSession('p', competitors, generate_schedule(competitors, rng=random.Random(1)))
            for split in splits:
                session.record(*split)
            for _ in range(len(splits) - keep):
                session.undo()

            direct = BattleSession('p', competitors, generate_schedule(competitors, rng=random.Random(1)))
            for split in splits[:keep]:
                direct.record(*split)

            assert session.final_scores == direct.final_scores
            assert session.final_scores == calculate_final_scores(direct.results)

    def test_standings(self, abc_session):
        for split in [(70, 30), (40, 60), (55, 45)]:
            abc_session.record(*split)

        standings = abc_session.standings()

        assert [s.competitor.id for s in standings] == ['A', 'C', 'B']
        assert [s.score for s in standings] == [110, 105, 85]
        assert [s.rank for s in standings] == [1, 2, 3]

    def test_standings_missing_scores_are_zero(self, abc_session):
        abc_session.record(70, 30)
        standings = abc_session.standings()
        assert standings[-1].competitor.id == 'C'
        assert standings[-1].score == 0

    def test_artifact(self, abc_session):
        for split in [(70, 30), (40, 60), (55, 45)]:
            abc_session.record(*split)

        artifact = abc_session.to_artifact('arena-1')

        assert artifact.player_name == 'alice'
        assert artifact.arena_id == 'arena-1'
        assert artifact.final_scores == {'A': 110, 'B': 85, 'C': 105}
        assert len(artifact.results) == 3
        assert artifact.completed_at is not None

    def test_artifact_incomplete(self, abc_session):
        abc_session.record(70, 30)
        with pytest.raises(SessionIncompleteError):
            abc_session.to_artifact('arena-1')


class TestMatchResultSerialization:
    """Stored match history drops images."""

    def test_strips_images_by_default(self):
        data = result(A, B, 70, 30).to_dict()
        assert 'image_url' not in data['competitor_a']
        assert 'image_url' not in data['winner']
        assert data['winner']['id'] == 'A'
        assert data['loser']['id'] == 'B'

    def test_keeps_images_on_request(self):
        data = result(A, B, 70, 30).to_dict(include_media=True)
        assert data['competitor_a']['image_url'] == 'http://img/a.png'

    def test_from_dict(self):
        restored = MatchResult.from_dict(result(A, C, 40, 60).to_dict())
        assert restored.competitor_a.id == 'A'
        assert restored.score_b == 60
        assert restored.winner.id == 'C'
