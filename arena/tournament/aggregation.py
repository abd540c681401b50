"""
Leaderboard aggregation across finished sessions.

Each session contributes its final per-competitor scores to a running
total, and one "session win" to the competitor with the highest score in
that session. Ties for a session win go to the lowest competitor id.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from arena.tournament.models import Competitor
from arena.tournament.scoring import SessionArtifact
from arena.utils.constants import UNKNOWN_ITEM_TITLE


@dataclass
class AggregatedScore:
    """Cross-session stats for one competitor."""
    competitor_id: str
    total_score: int = 0
    win_count: int = 0
    session_count: int = 0
    rank: int = 0

    @property
    def average_score(self) -> float:
        if self.session_count == 0:
            return 0.0
        return self.total_score / self.session_count


@dataclass
class LeaderboardItem:
    """A competitor's display fields merged with its aggregated stats."""
    competitor: Competitor
    stats: AggregatedScore

    @property
    def id(self) -> str:
        return self.competitor.id

    @property
    def title(self) -> str:
        return self.competitor.title

    def to_dict(self) -> Dict[str, Any]:
        data = self.competitor.to_dict()
        data['stats'] = {
            'competitor_id': self.stats.competitor_id,
            'total_score': self.stats.total_score,
            'win_count': self.stats.win_count,
            'session_count': self.stats.session_count,
            'rank': self.stats.rank,
        }
        return data


def session_winner(final_scores: Dict[str, int], eligible) -> Optional[str]:
    """
    Id of the top scorer in one session among eligible ids.

    Highest score wins; equal scores go to the lowest id.
    """
    best_id = None
    best_score = None
    for competitor_id in sorted(final_scores):
        if competitor_id not in eligible:
            continue
        score = final_scores[competitor_id]
        if best_score is None or score > best_score:
            best_id, best_score = competitor_id, score
    return best_id


def aggregate_results(
    sessions: List[SessionArtifact],
    competitors: List[Competitor],
    include_unknown: bool = False
) -> List[LeaderboardItem]:
    """
    Combine finished sessions into a ranked leaderboard.

    Args:
        sessions: Finished session artifacts
        competitors: Current arena roster
        include_unknown: Also rank ids that appear in sessions but not in
            the roster, as "Unknown Item" placeholders. Off by default, in
            which case such ids are ignored.

    Returns:
        LeaderboardItems sorted by total score (descending), ranks 1..N.
        Equal totals keep roster order.
    """
    stats_map: Dict[str, AggregatedScore] = {}
    for c in competitors:
        stats_map.setdefault(c.id, AggregatedScore(competitor_id=c.id))

    for session in sessions:
        if not session.final_scores:
            continue

        if include_unknown:
            for competitor_id in session.final_scores:
                stats_map.setdefault(
                    competitor_id, AggregatedScore(competitor_id=competitor_id)
                )

        for competitor_id, score in session.final_scores.items():
            stats = stats_map.get(competitor_id)
            if stats is None:
                continue
            stats.total_score += score
            stats.session_count += 1

        winner_id = session_winner(session.final_scores, stats_map)
        if winner_id is not None:
            stats_map[winner_id].win_count += 1

    # Stable sort keeps roster order for equal totals
    ranked = sorted(stats_map.values(), key=lambda s: s.total_score, reverse=True)
    for i, stats in enumerate(ranked, 1):
        stats.rank = i

    by_id = {c.id: c for c in competitors}
    items = []
    for stats in ranked:
        competitor = by_id.get(stats.competitor_id)
        if competitor is None:
            competitor = Competitor(
                id=stats.competitor_id,
                title=UNKNOWN_ITEM_TITLE
            )
        items.append(LeaderboardItem(competitor=competitor, stats=stats))

    return items
