"""
Pydantic models for the battle arena web API.

Defines request/response schemas for REST endpoints.
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Dict, Optional


class CompetitorModel(BaseModel):
    """A competing item."""
    id: str = Field(min_length=1)
    title: str
    description: str = ""
    image_url: str = ""
    video_url: Optional[str] = None


class CreateArenaRequest(BaseModel):
    """Request to create an arena."""
    title: str = Field(min_length=1)
    description: str = ""
    items: List[CompetitorModel] = Field(min_length=2)
    is_open: bool = True

    @field_validator("items")
    @classmethod
    def unique_ids(cls, items: List[CompetitorModel]) -> List[CompetitorModel]:
        ids = [item.id for item in items]
        if len(set(ids)) != len(ids):
            raise ValueError("Item ids must be unique")
        return items


class UpdateArenaRequest(BaseModel):
    """Request to open or close an arena."""
    is_open: bool


class ArenaResponse(BaseModel):
    """Arena definition."""
    arena_id: str
    title: str
    description: str
    items: List[CompetitorModel]
    is_open: bool
    created_at: Optional[str] = None


class StartSessionRequest(BaseModel):
    """Request to start a battle session."""
    player_name: str = Field(min_length=1, max_length=100)
    seed: Optional[int] = Field(default=None, description="Seed for a reproducible schedule")


class RecordResultRequest(BaseModel):
    """
    A match decision.

    Either an explicit split (score_a + score_b == 100) or a slider
    position in [0, 100], where 0 favours competitor A completely.
    """
    score_a: Optional[int] = Field(default=None, ge=0, le=100)
    score_b: Optional[int] = Field(default=None, ge=0, le=100)
    position: Optional[float] = Field(default=None, ge=0, le=100)

    @model_validator(mode="after")
    def check_split(self) -> "RecordResultRequest":
        has_split = self.score_a is not None or self.score_b is not None
        if has_split and self.position is not None:
            raise ValueError("Give either score_a/score_b or position, not both")
        if has_split:
            if self.score_a is None or self.score_b is None:
                raise ValueError("score_a and score_b must be given together")
            if self.score_a + self.score_b != 100:
                raise ValueError("score_a and score_b must sum to 100")
        elif self.position is None:
            raise ValueError("A score split or slider position is required")
        return self


class MatchModel(BaseModel):
    """A scheduled match."""
    id: str
    round: int
    competitor_a: CompetitorModel
    competitor_b: CompetitorModel
    completed: bool


class MatchResultModel(BaseModel):
    """A resolved match."""
    match_id: Optional[str] = None
    competitor_a: CompetitorModel
    competitor_b: CompetitorModel
    score_a: int
    score_b: int
    winner: CompetitorModel
    loser: CompetitorModel


class SessionState(BaseModel):
    """Complete session state for API responses."""
    session_id: str
    arena_id: str
    player_name: str
    current_match: Optional[MatchModel] = None
    match_number: int
    total_matches: int
    completed_count: int
    progress: int
    round_label: str
    can_undo: bool
    is_complete: bool
    saved: bool
    scores: Dict[str, int]


class RecordResultResponse(BaseModel):
    """Response after recording a match."""
    result: MatchResultModel
    state: SessionState


class StandingModel(BaseModel):
    """One competitor's place in a session."""
    rank: int
    score: int
    competitor: CompetitorModel


class FinishSessionResponse(BaseModel):
    """Response after a session is saved."""
    result_id: str
    completed_at: str
    standings: List[StandingModel]


class SessionResultSummary(BaseModel):
    """A stored session."""
    result_id: str
    player_name: str
    completed_at: str
    final_scores: Dict[str, int]


class AggregatedScoreModel(BaseModel):
    """Cross-session stats."""
    competitor_id: str
    total_score: int
    win_count: int
    session_count: int
    rank: int


class LeaderboardEntry(CompetitorModel):
    """Competitor plus aggregated stats."""
    stats: AggregatedScoreModel


class LeaderboardResponse(BaseModel):
    """Ranked leaderboard for an arena."""
    arena_id: str
    total_sessions: int
    items: List[LeaderboardEntry]