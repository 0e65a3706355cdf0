"""
Merging of ranked idea lists into the bubble working set.

Provides pure, side-effect-free functions to:
1. Merge the five ranked views into one deduplicated, priority-ordered list
2. Select the ideas that actually get a bubble on screen

All functions are deterministic for deterministic inputs and do not mutate
the lists they are given.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from ideabubbles.config import DISPLAY_LIMIT
from ideabubbles.models.idea import Idea


# =============================================================================
# Aggregation Configuration
# =============================================================================

# Order in which the ranked lists claim positions in the merged set.
# An idea found in several lists is placed by the first list listed here.
PRIORITY_ORDER: Tuple[str, ...] = (
    "most_voted",
    "newest",
    "oldest",
    "random_voted",
    "random",
)


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class RankedLists:
    """
    The five ranked views of the idea set, each in its query's order.
    
    A list that failed to load is represented as empty.
    """
    newest: List[Idea] = field(default_factory=list)
    most_voted: List[Idea] = field(default_factory=list)
    oldest: List[Idea] = field(default_factory=list)
    random: List[Idea] = field(default_factory=list)
    random_voted: List[Idea] = field(default_factory=list)
    
    @classmethod
    def from_mapping(cls, lists: Dict[str, Optional[Iterable[Idea]]]) -> "RankedLists":
        """Build from a name -> list mapping; missing or None entries become empty."""
        return cls(**{
            name: list(lists.get(name) or [])
            for name in PRIORITY_ORDER
        })
    
    def in_priority_order(self) -> List[Tuple[str, List[Idea]]]:
        """(name, ideas) pairs in aggregation priority order."""
        return [(name, getattr(self, name) or []) for name in PRIORITY_ORDER]
    
    @property
    def total(self) -> int:
        """Sum of the individual list lengths (duplicates included)."""
        return sum(len(ideas) for _, ideas in self.in_priority_order())
    
    def to_dict(self) -> dict:
        """JSON payload using the front-end's camelCase group names."""
        return {
            "newest": [idea.to_dict() for idea in self.newest],
            "mostVoted": [idea.to_dict() for idea in self.most_voted],
            "oldest": [idea.to_dict() for idea in self.oldest],
            "random": [idea.to_dict() for idea in self.random],
            "randomVoted": [idea.to_dict() for idea in self.random_voted],
        }


# =============================================================================
# Aggregation
# =============================================================================

def aggregate(lists: RankedLists) -> List[Idea]:
    """
    Merge ranked lists into one list of unique ideas.
    
    Lists are walked in PRIORITY_ORDER and each list in its own order; an
    idea is appended the first time its id is seen and skipped afterwards.
    
    Properties:
    - Deterministic for fixed inputs
    - No id appears twice
    - An idea present in several lists sits where the highest-priority
      list containing it puts it
    - Output length <= lists.total, equal iff all ids are distinct
    
    Args:
        lists: The five ranked lists (empty lists are fine).
        
    Returns:
        The aggregated set, in priority order.
    """
    seen: set[str] = set()
    combined: List[Idea] = []
    
    for _, ideas in lists.in_priority_order():
        for idea in ideas:
            if idea.id in seen:
                continue
            seen.add(idea.id)
            combined.append(idea)
    
    return combined


def select_for_display(ideas: List[Idea], limit: int = DISPLAY_LIMIT) -> List[Idea]:
    """
    Pick the ideas that get a bubble.
    
    Hidden ideas are dropped, the rest are ordered newest first (stable, so
    equal timestamps keep aggregation order) and truncated to ``limit``.
    """
    visible = [idea for idea in ideas if not idea.exclude_from_display]
    ordered = sorted(visible, key=lambda idea: _timestamp(idea.created_at), reverse=True)
    return ordered[:max(0, limit)]


def _timestamp(value: datetime) -> float:
    # Naive values are UTC, never host-local time.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def max_score_in(ideas: List[Idea]) -> int:
    """Highest score among ideas, 0 for an empty list."""
    return max((idea.score for idea in ideas), default=0)
