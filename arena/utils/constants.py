"""
Constants for the battle arena tournament engine.
"""

# Scheduling
MAX_MATCHES_PER_COMPETITOR = 5
FULL_ROUND_ROBIN_MAX = 6  # Arenas up to this size play every pair
MIN_COMPETITORS = 2

# Scoring
SCORE_TOTAL = 100  # Points split between the two sides of a match
SLIDER_MIN = 0
SLIDER_MAX = 100

# Round labels, checked in order against match_number / total_matches
ROUND_LABELS = [
    (0.9, "Final Matches"),
    (0.7, "Late Stage"),
    (0.4, "Mid Stage"),
]
OPENING_LABEL = "Opening Matches"

# Leaderboard
UNKNOWN_ITEM_TITLE = "Unknown Item"
