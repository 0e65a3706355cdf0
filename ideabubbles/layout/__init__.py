"""
Layout module.

Bubble placement and motion, focus transitions, and the proximity graph.
"""

from ideabubbles.layout.engine import DAMPING, SPEED_RANGE, LayoutEngine
from ideabubbles.layout.focus import collapse, expand, focused_id
from ideabubbles.layout.proximity import edges_for, proximity_threshold

__all__ = [
    "DAMPING",
    "SPEED_RANGE",
    "LayoutEngine",
    "collapse",
    "expand",
    "focused_id",
    "edges_for",
    "proximity_threshold",
]
