"""
Round-robin battle scheduling.

Small arenas play a full round robin. Larger arenas are trimmed to a
balanced partial round robin where nobody plays more than
MAX_MATCHES_PER_COMPETITOR matches, keeping a session short.
"""

from itertools import combinations
from typing import Dict, List, Optional
import random

from arena.tournament.models import Competitor, Match
from arena.utils.constants import (
    MAX_MATCHES_PER_COMPETITOR,
    FULL_ROUND_ROBIN_MAX,
    MIN_COMPETITORS,
    ROUND_LABELS,
    OPENING_LABEL
)


def generate_schedule(
    competitors: List[Competitor],
    shuffle: bool = True,
    rng: Optional[random.Random] = None
) -> List[Match]:
    """
    Generate the match list for one session.

    Competitor order and pair order are both shuffled so neither the roster
    order nor a single competitor's matches cluster at the start. For more
    than FULL_ROUND_ROBIN_MAX competitors a greedy pass drops pairs once
    either side has reached the per-competitor cap. The greedy pass is not
    globally optimal; counts may differ slightly between competitors.

    Args:
        competitors: Arena roster
        shuffle: Whether to shuffle competitors and pairs (default: True)
        rng: Optional random source for reproducible schedules

    Returns:
        List of Match objects in play order. Empty if fewer than 2
        competitors were given.
    """
    if len(competitors) < MIN_COMPETITORS:
        return []

    shuffle_fn = rng.shuffle if rng is not None else random.shuffle

    ordered = list(competitors)
    if shuffle:
        shuffle_fn(ordered)

    matches = []
    for match_id, (a, b) in enumerate(combinations(ordered, 2)):
        matches.append(Match(
            id=f"match-{match_id}",
            competitor_a=a,
            competitor_b=b
        ))

    if shuffle:
        shuffle_fn(matches)

    if len(competitors) > FULL_ROUND_ROBIN_MAX:
        matches = _cap_matches(matches, competitors, MAX_MATCHES_PER_COMPETITOR)

    per_round = matches_per_round(len(competitors))
    for index, match in enumerate(matches):
        match.round = index // per_round + 1

    return matches


def _cap_matches(
    matches: List[Match],
    competitors: List[Competitor],
    cap: int
) -> List[Match]:
    """Greedily keep matches whose two competitors are both under the cap."""
    counts: Dict[str, int] = {c.id: 0 for c in competitors}
    selected = []

    for match in matches:
        a_id, b_id = match.competitor_a.id, match.competitor_b.id
        if counts[a_id] < cap and counts[b_id] < cap:
            selected.append(match)
            counts[a_id] += 1
            counts[b_id] += 1

    return selected


def match_counts(matches: List[Match]) -> Dict[str, int]:
    """Count scheduled matches per competitor id."""
    counts: Dict[str, int] = {}
    for match in matches:
        for competitor in (match.competitor_a, match.competitor_b):
            counts[competitor.id] = counts.get(competitor.id, 0) + 1
    return counts


def total_matches(num_competitors: int) -> int:
    """Number of pairs in a full round robin."""
    return num_competitors * (num_competitors - 1) // 2


def matches_per_round(num_competitors: int) -> int:
    """Size of each display round."""
    return max(1, num_competitors // 2)


def get_round_label(match_number: int, total: int) -> str:
    """Stage label for the match being played (1-based match_number)."""
    if total <= 0:
        return OPENING_LABEL
    progress = match_number / total
    for threshold, label in ROUND_LABELS:
        if progress >= threshold:
            return label
    return OPENING_LABEL


def get_progress(completed: int, total: int) -> int:
    """Completion percentage rounded to the nearest integer."""
    if total == 0:
        return 0
    return int(completed * 100 / total + 0.5)
