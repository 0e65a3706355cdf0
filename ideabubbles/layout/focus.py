"""
Focus transitions for the bubble view.

At most one bubble is expanded at a time. Expanding a bubble freezes it and
releases every other bubble; collapsing releases all of them. Both are pure
functions over state lists.
"""

from dataclasses import replace
from typing import List, Optional

from ideabubbles.models.bubble import BubbleState


def expand(states: List[BubbleState], idea_id: str) -> List[BubbleState]:
    """
    Focus one bubble.
    
    The matching bubble becomes paused and expanded; all others become
    free. An unknown id simply releases everything.
    """
    return [
        replace(state, paused=(state.idea_id == idea_id), expanded=(state.idea_id == idea_id))
        for state in states
    ]


def collapse(states: List[BubbleState]) -> List[BubbleState]:
    """Clear focus and resume motion for every bubble."""
    return [replace(state, paused=False, expanded=False) for state in states]


def focused_id(states: List[BubbleState]) -> Optional[str]:
    """Id of the expanded bubble, if any."""
    for state in states:
        if state.expanded:
            return state.idea_id
    return None
