"""
Utilities module for the battle arena.
"""
from arena.utils.constants import (
    MAX_MATCHES_PER_COMPETITOR, FULL_ROUND_ROBIN_MAX, MIN_COMPETITORS,
    SCORE_TOTAL, SLIDER_MIN, SLIDER_MAX,
    ROUND_LABELS, OPENING_LABEL, UNKNOWN_ITEM_TITLE
)

__all__ = [
    'MAX_MATCHES_PER_COMPETITOR', 'FULL_ROUND_ROBIN_MAX', 'MIN_COMPETITORS',
    'SCORE_TOTAL', 'SLIDER_MIN', 'SLIDER_MAX',
    'ROUND_LABELS', 'OPENING_LABEL', 'UNKNOWN_ITEM_TITLE'
]
