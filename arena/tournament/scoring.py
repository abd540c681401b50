"""
Match resolution and per-session score accumulation.

Session totals are always recomputed from the full result list instead of
being kept as a running sum, so undo is just "drop the last result".
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from arena.tournament.models import Competitor, Match, MatchResult
from arena.tournament.scheduler import get_progress, get_round_label
from arena.tournament.exceptions import (
    InvalidScoreError,
    SessionCompleteError,
    SessionIncompleteError,
    NothingToUndoError
)
from arena.utils.constants import SCORE_TOTAL, SLIDER_MIN, SLIDER_MAX


def resolve_match(match: Match, score_a: int, score_b: int) -> MatchResult:
    """
    Resolve a match from a score split.

    Args:
        match: The scheduled match
        score_a: Points for competitor A (0-100)
        score_b: Points for competitor B (0-100)

    Returns:
        MatchResult; competitor A wins a 50/50 tie

    Raises:
        InvalidScoreError: If the scores are out of range or don't sum to 100
    """
    for score in (score_a, score_b):
        if isinstance(score, bool) or not isinstance(score, int):
            raise InvalidScoreError(f"Scores must be integers, got {score!r}")
        if score < 0 or score > SCORE_TOTAL:
            raise InvalidScoreError(f"Score {score} outside 0-{SCORE_TOTAL}")
    if score_a + score_b != SCORE_TOTAL:
        raise InvalidScoreError(
            f"Scores must sum to {SCORE_TOTAL}, got {score_a} + {score_b}"
        )

    return MatchResult(
        competitor_a=match.competitor_a,
        competitor_b=match.competitor_b,
        score_a=score_a,
        score_b=score_b,
        match_id=match.id
    )


def split_from_position(position: float) -> Tuple[int, int]:
    """
    Convert a slider position into a score split.

    Position 0 gives everything to competitor A, 100 everything to B.
    B's share is rounded half-up and A gets the remainder so the split
    always totals 100.

    Returns:
        (score_a, score_b)
    """
    position = max(SLIDER_MIN, min(SLIDER_MAX, position))
    score_b = int(math.floor(position + 0.5))
    return SCORE_TOTAL - score_b, score_b


def calculate_final_scores(results: List[MatchResult]) -> Dict[str, int]:
    """
    Sum each competitor's scores across a list of results.

    Competitors with no results are absent from the mapping; treat a
    missing key as zero.
    """
    scores: Dict[str, int] = {}
    for result in results:
        a_id, b_id = result.competitor_a.id, result.competitor_b.id
        scores[a_id] = scores.get(a_id, 0) + result.score_a
        scores[b_id] = scores.get(b_id, 0) + result.score_b
    return scores


@dataclass
class SessionArtifact:
    """The persisted outcome of one finished session."""
    player_name: str
    final_scores: Dict[str, int]
    results: Optional[List[MatchResult]] = None
    arena_id: Optional[str] = None
    result_id: Optional[str] = None
    completed_at: Optional[str] = None


@dataclass
class Standing:
    """A competitor's place within a single session."""
    competitor: Competitor
    score: int
    rank: int


class BattleSession:
    """
    One participant's pass through a schedule.

    Usage:
        session = BattleSession("alice", competitors, generate_schedule(competitors))
        while not session.is_complete:
            session.record(70, 30)
        artifact = session.to_artifact(arena_id)
    """

    def __init__(
        self,
        player_name: str,
        competitors: List[Competitor],
        matches: List[Match]
    ):
        self.player_name = player_name
        self.competitors = list(competitors)
        self.matches = matches
        self.results: List[MatchResult] = []

    @property
    def total_matches(self) -> int:
        return len(self.matches)

    @property
    def completed_count(self) -> int:
        return len(self.results)

    @property
    def is_complete(self) -> bool:
        return len(self.results) >= len(self.matches)

    @property
    def can_undo(self) -> bool:
        return len(self.results) > 0

    @property
    def current_match(self) -> Optional[Match]:
        """Next match to play, or None once complete."""
        if self.is_complete:
            return None
        return self.matches[len(self.results)]

    @property
    def match_number(self) -> int:
        """1-based number of the current match (capped at the total)."""
        return min(len(self.results) + 1, len(self.matches))

    @property
    def progress(self) -> int:
        return get_progress(self.completed_count, self.total_matches)

    @property
    def round_label(self) -> str:
        return get_round_label(self.match_number, self.total_matches)

    @property
    def final_scores(self) -> Dict[str, int]:
        return calculate_final_scores(self.results)

    def record(self, score_a: int, score_b: int) -> MatchResult:
        """
        Resolve the current match and append its result.

        Raises:
            SessionCompleteError: If every match has been played
            InvalidScoreError: If the split is invalid
        """
        match = self.current_match
        if match is None:
            raise SessionCompleteError("All matches in this session are complete")

        result = resolve_match(match, score_a, score_b)
        match.completed = True
        self.results.append(result)
        return result

    def undo(self) -> MatchResult:
        """
        Take back the most recent result, reopening its match.

        Raises:
            NothingToUndoError: If no results have been recorded
        """
        if not self.results:
            raise NothingToUndoError("No results to undo")

        removed = self.results[-1]
        self.results = self.results[:-1]
        self.matches[len(self.results)].completed = False
        return removed

    def standings(self) -> List[Standing]:
        """Roster ranked by this session's score, highest first."""
        scores = self.final_scores
        ranked = sorted(
            self.competitors,
            key=lambda c: scores.get(c.id, 0),
            reverse=True
        )
        return [
            Standing(competitor=c, score=scores.get(c.id, 0), rank=i)
            for i, c in enumerate(ranked, 1)
        ]

    def to_artifact(self, arena_id: Optional[str] = None) -> SessionArtifact:
        """
        Build the artifact handed to persistence.

        Raises:
            SessionIncompleteError: If matches remain unplayed
        """
        if not self.is_complete:
            raise SessionIncompleteError(
                f"{self.total_matches - self.completed_count} matches remain"
            )
        return SessionArtifact(
            player_name=self.player_name,
            final_scores=self.final_scores,
            results=list(self.results),
            arena_id=arena_id,
            completed_at=datetime.now(timezone.utc).isoformat()
        )
