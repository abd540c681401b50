"""
Unit tests for battle scheduling.
"""

import random
from itertools import combinations

import pytest

from arena.tournament.models import Competitor
from arena.tournament.scheduler import (
    generate_schedule,
    match_counts,
    total_matches,
    matches_per_round,
    get_round_label,
    get_progress
)
from arena.utils.constants import MAX_MATCHES_PER_COMPETITOR


def make_competitors(n):
    return [Competitor(id=str(i), title=f"C{i}") for i in range(1, n + 1)]


def pair_keys(matches):
    return [m.pair_key for m in matches]


class TestSmallArenas:
    """Arenas of up to 6 items play a full round robin."""

    @pytest.mark.parametrize("n", [2, 3, 4, 5, 6])
    def test_full_round_robin_count(self, n):
        matches = generate_schedule(make_competitors(n))
        assert len(matches) == n * (n - 1) // 2

    @pytest.mark.parametrize("n", [2, 3, 4, 5, 6])
    def test_every_pair_exactly_once(self, n):
        competitors = make_competitors(n)
        matches = generate_schedule(competitors)

        keys = pair_keys(matches)
        expected = {frozenset((a.id, b.id)) for a, b in combinations(competitors, 2)}
        assert len(keys) == len(set(keys))
        assert set(keys) == expected

    def test_unshuffled_order(self):
        """Without shuffling, pairs come out in enumeration order."""
        competitors = make_competitors(3)
        matches = generate_schedule(competitors, shuffle=False)

        assert [(m.competitor_a.id, m.competitor_b.id) for m in matches] == [
            ('1', '2'), ('1', '3'), ('2', '3')
        ]
        assert [m.id for m in matches] == ['match-0', 'match-1', 'match-2']

    def test_six_competitors_play_five_each(self):
        counts = match_counts(generate_schedule(make_competitors(6)))
        assert set(counts.values()) == {5}


class TestLargeArenas:
    """Arenas above 6 items are capped per competitor."""

    @pytest.mark.parametrize("seed", range(20))
    def test_eight_competitors_capped(self, seed):
        competitors = make_competitors(8)
        matches = generate_schedule(competitors, rng=random.Random(seed))

        counts = match_counts(matches)
        assert all(c <= MAX_MATCHES_PER_COMPETITOR for c in counts.values())
        assert len(competitors) <= len(matches) <= 28

    @pytest.mark.parametrize("n", [7, 10, 15, 25])
    def test_cap_holds_for_larger_sizes(self, n):
        matches = generate_schedule(make_competitors(n), rng=random.Random(n))
        counts = match_counts(matches)
        assert max(counts.values()) <= MAX_MATCHES_PER_COMPETITOR

    def test_no_duplicate_pairs(self):
        matches = generate_schedule(make_competitors(12), rng=random.Random(3))
        keys = pair_keys(matches)
        assert len(keys) == len(set(keys))

    def test_unshuffled_greedy_pass(self):
        """
        In enumeration order competitor 1 fills up on 2..6 first, then the
        rest of the pairs are taken while both sides have room.
        """
        matches = generate_schedule(make_competitors(7), shuffle=False)
        counts = match_counts(matches)

        assert counts['1'] == 5
        assert all(c <= MAX_MATCHES_PER_COMPETITOR for c in counts.values())
        assert frozenset(('1', '7')) not in set(pair_keys(matches))


class TestScheduleProperties:
    """Properties shared by every schedule."""

    @pytest.mark.parametrize("n", [2, 5, 9])
    def test_no_self_pairing(self, n):
        for m in generate_schedule(make_competitors(n)):
            assert m.competitor_a.id != m.competitor_b.id

    def test_matches_start_incomplete(self):
        for m in generate_schedule(make_competitors(4)):
            assert m.completed is False

    def test_round_numbers(self):
        """Rounds are chunks of floor(N/2) matches in play order."""
        matches = generate_schedule(make_competitors(5), rng=random.Random(1))
        assert [m.round for m in matches] == [1, 1, 2, 2, 3, 3, 4, 4, 5, 5]

    def test_round_size_never_zero(self):
        matches = generate_schedule(make_competitors(2))
        assert len(matches) == 1
        assert matches[0].round == 1

    def test_seeded_schedules_repeat(self):
        competitors = make_competitors(9)
        first = generate_schedule(competitors, rng=random.Random(42))
        second = generate_schedule(competitors, rng=random.Random(42))

        assert [(m.competitor_a.id, m.competitor_b.id) for m in first] == \
            [(m.competitor_a.id, m.competitor_b.id) for m in second]

    def test_input_list_untouched(self):
        competitors = make_competitors(5)
        before = list(competitors)
        generate_schedule(competitors, rng=random.Random(0))
        assert competitors == before


class TestDegenerateInput:
    """Fewer than 2 competitors cannot be scheduled."""

    def test_empty(self):
        assert generate_schedule([]) == []

    def test_single(self):
        assert generate_schedule(make_competitors(1)) == []


class TestHelpers:
    """Tests for schedule helper functions."""

    def test_total_matches(self):
        assert total_matches(2) == 1
        assert total_matches(3) == 3
        assert total_matches(4) == 6
        assert total_matches(8) == 28

    def test_matches_per_round(self):
        assert matches_per_round(1) == 1
        assert matches_per_round(2) == 1
        assert matches_per_round(7) == 3
        assert matches_per_round(8) == 4

    def test_round_labels(self):
        assert get_round_label(1, 10) == "Opening Matches"
        assert get_round_label(4, 10) == "Mid Stage"
        assert get_round_label(7, 10) == "Late Stage"
        assert get_round_label(9, 10) == "Final Matches"
        assert get_round_label(10, 10) == "Final Matches"

    def test_round_label_empty_schedule(self):
        assert get_round_label(0, 0) == "Opening Matches"

    def test_progress(self):
        assert get_progress(0, 10) == 0
        assert get_progress(1, 3) == 33
        assert get_progress(2, 3) == 67
        assert get_progress(1, 8) == 13
        assert get_progress(10, 10) == 100

    def test_progress_zero_total(self):
        assert get_progress(0, 0) == 0
