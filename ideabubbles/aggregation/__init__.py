"""
Aggregation module.

Merges the ranked views of the idea set into the bubble working set.
"""

from ideabubbles.aggregation.aggregator import (
    PRIORITY_ORDER,
    RankedLists,
    aggregate,
    max_score_in,
    select_for_display,
)

__all__ = [
    "PRIORITY_ORDER",
    "RankedLists",
    "aggregate",
    "max_score_in",
    "select_for_display",
]
