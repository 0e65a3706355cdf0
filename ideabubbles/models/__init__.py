"""
Data models module.

Defines the Idea record and the transient bubble render state.
"""

from ideabubbles.models.idea import Idea
from ideabubbles.models.bubble import Bounds, BubbleState, ProximityEdge, Rect

__all__ = [
    "Idea",
    "Bounds",
    "BubbleState",
    "ProximityEdge",
    "Rect",
]
