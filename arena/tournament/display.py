"""
Display formatting for battle results.

Provides ASCII-formatted leaderboards and session standings for terminal output.
"""

from typing import List

from arena.tournament.aggregation import LeaderboardItem
from arena.tournament.models import Match, MatchResult
from arena.tournament.scoring import Standing


def _short(name: str, max_len: int = 26) -> str:
    if len(name) <= max_len:
        return name
    return name[:max_len-2] + ".."


def format_leaderboard(items: List[LeaderboardItem], title: str = "LEADERBOARD") -> str:
    """
    Format the aggregated leaderboard as an ASCII table.

    Args:
        items: Ranked leaderboard items
        title: Heading line

    Returns:
        Formatted string for terminal display
    """
    lines = []
    lines.append(f"=== {title} ===")
    lines.append("")

    lines.append(f"{'Rank':<6}{'Item':<28}{'Total':<10}{'Wins':<8}{'Avg':<8}")
    lines.append("-" * 60)

    for item in items:
        stats = item.stats
        avg = f"{stats.average_score:.1f}"
        lines.append(
            f"{stats.rank:<6}{_short(item.title):<28}{stats.total_score:<10}"
            f"{stats.win_count:<8}{avg:<8}"
        )

    return "\n".join(lines)


def format_standings(standings: List[Standing], bar_width: int = 30) -> str:
    """
    Format one session's final ranking with proportional bars.

    Bars are scaled against the top score.
    """
    lines = []
    lines.append("=== YOUR RANKING ===")
    lines.append("")

    top = standings[0].score if standings and standings[0].score > 0 else 1
    for s in standings:
        bar = "#" * int(round(bar_width * s.score / top))
        lines.append(f"{s.rank:>3}. {_short(s.competitor.title):<28}{s.score:>5}  {bar}")

    return "\n".join(lines)


def format_match(match: Match, match_number: int, total: int, label: str) -> str:
    """Format the prompt line for an upcoming match."""
    return (f"[{match_number}/{total}] {label} (round {match.round}): "
            f"{match.competitor_a.title} vs {match.competitor_b.title}")


def format_match_result(result: MatchResult) -> str:
    """Format a single match result line."""
    outcome = "tie" if result.is_tie else f"{result.winner.title} wins"
    return (f"{result.competitor_a.title} {result.score_a} - "
            f"{result.score_b} {result.competitor_b.title} ({outcome})")


def format_session_header(
    arena_title: str,
    player_name: str,
    num_competitors: int,
    num_matches: int
) -> str:
    """Format session header information."""
    lines = []
    lines.append(f"Arena: {arena_title}")
    lines.append(f"Player: {player_name}")
    lines.append(f"Items: {num_competitors}")
    lines.append(f"Matches: {num_matches}")
    lines.append("")
    return "\n".join(lines)
