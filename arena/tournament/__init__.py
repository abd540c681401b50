"""
Tournament module for head-to-head battle arenas.

Provides:
- generate_schedule: Balanced partial round-robin scheduling
- BattleSession: One participant's scored pass through a schedule
- aggregate_results: Cross-session leaderboard
- ArenaStorage: Persists arenas and finished sessions
"""

from arena.tournament.models import Arena, Competitor, Match, MatchResult
from arena.tournament.scheduler import generate_schedule, get_round_label, get_progress
from arena.tournament.scoring import (
    BattleSession, SessionArtifact, resolve_match, split_from_position,
    calculate_final_scores
)
from arena.tournament.aggregation import AggregatedScore, LeaderboardItem, aggregate_results
from arena.tournament.storage import ArenaStorage
from arena.tournament.display import format_leaderboard, format_standings

__all__ = [
    'Arena',
    'Competitor',
    'Match',
    'MatchResult',
    'generate_schedule',
    'get_round_label',
    'get_progress',
    'BattleSession',
    'SessionArtifact',
    'resolve_match',
    'split_from_position',
    'calculate_final_scores',
    'AggregatedScore',
    'LeaderboardItem',
    'aggregate_results',
    'ArenaStorage',
    'format_leaderboard',
    'format_standings',
]
