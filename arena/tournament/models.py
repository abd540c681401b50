"""
Core data types for battle tournaments.

Competitors are owned by the arena definition and never change during a
tournament. Matches are created by the scheduler and only ever flip their
``completed`` flag; results are immutable once resolved.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from arena.utils.constants import MIN_COMPETITORS


@dataclass(frozen=True)
class Competitor:
    """An item competing in an arena."""
    id: str
    title: str
    description: str = ""
    image_url: str = ""
    video_url: Optional[str] = None

    def to_dict(self, include_media: bool = True) -> Dict[str, Any]:
        """
        Convert to a JSON-serializable dict.

        Args:
            include_media: Include image_url (dropped from stored match history)
        """
        data = {
            'id': self.id,
            'title': self.title,
            'description': self.description,
        }
        if include_media:
            data['image_url'] = self.image_url
        if self.video_url:
            data['video_url'] = self.video_url
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Competitor':
        return cls(
            id=str(data['id']),
            title=data.get('title', ''),
            description=data.get('description', ''),
            image_url=data.get('image_url') or '',
            video_url=data.get('video_url') or None
        )


@dataclass(frozen=True)
class MatchResult:
    """A resolved match. Scores split 100 points between the two sides."""
    competitor_a: Competitor
    competitor_b: Competitor
    score_a: int
    score_b: int
    match_id: Optional[str] = None

    @property
    def winner(self) -> Competitor:
        # Ties go to competitor A
        return self.competitor_a if self.score_a >= self.score_b else self.competitor_b

    @property
    def loser(self) -> Competitor:
        return self.competitor_b if self.score_a >= self.score_b else self.competitor_a

    @property
    def is_tie(self) -> bool:
        return self.score_a == self.score_b

    def to_dict(self, include_media: bool = False) -> Dict[str, Any]:
        """Serialize for storage; images are stripped by default."""
        return {
            'match_id': self.match_id,
            'competitor_a': self.competitor_a.to_dict(include_media),
            'competitor_b': self.competitor_b.to_dict(include_media),
            'score_a': self.score_a,
            'score_b': self.score_b,
            'winner': self.winner.to_dict(include_media),
            'loser': self.loser.to_dict(include_media),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MatchResult':
        return cls(
            competitor_a=Competitor.from_dict(data['competitor_a']),
            competitor_b=Competitor.from_dict(data['competitor_b']),
            score_a=data['score_a'],
            score_b=data['score_b'],
            match_id=data.get('match_id')
        )


@dataclass
class Match:
    """A scheduled pairing between two distinct competitors."""
    id: str
    competitor_a: Competitor
    competitor_b: Competitor
    round: int = 1
    completed: bool = False

    @property
    def pair_key(self) -> frozenset:
        """Unordered pair of competitor ids."""
        return frozenset((self.competitor_a.id, self.competitor_b.id))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'round': self.round,
            'competitor_a': self.competitor_a.to_dict(),
            'competitor_b': self.competitor_b.to_dict(),
            'completed': self.completed,
        }


@dataclass
class Arena:
    """An arena definition: the roster plus metadata gating new sessions."""
    arena_id: str
    title: str
    description: str
    items: List[Competitor] = field(default_factory=list)
    is_open: bool = True
    created_at: Optional[str] = None


def validate_roster(items: List[Competitor]) -> None:
    """
    Check that a roster can be scheduled.

    Raises:
        ValueError: If fewer than 2 items or duplicate item ids
    """
    if len(items) < MIN_COMPETITORS:
        raise ValueError(f"Need at least {MIN_COMPETITORS} items for an arena")
    ids = [item.id for item in items]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise ValueError(f"Duplicate item ids: {duplicates}")
