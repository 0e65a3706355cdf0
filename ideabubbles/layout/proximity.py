"""
Proximity graph between bubbles.

Two bubbles are connected by a line when they are within a third of the
diagonal of the bounds. Every pair is checked, which is quadratic in the
number of bubbles; the display limit keeps that to a few dozen checks.
"""

import math
from typing import Iterable, List, Optional

from ideabubbles.models.bubble import Bounds, BubbleState, ProximityEdge


def proximity_threshold(bounds: Bounds) -> float:
    """Maximum distance at which two bubbles are connected."""
    return bounds.diagonal / 3


def edges_for(
    states: List[BubbleState],
    bounds: Optional[Bounds] = None,
    exclude: Optional[Iterable[str]] = None,
) -> List[ProximityEdge]:
    """
    Compute the connector lines for the current positions.
    
    Each unordered pair is considered once, in list order, so an edge
    (a, b) is never accompanied by (b, a).
    
    Args:
        states: Current bubble states.
        bounds: Coordinate space. Defaults to Bounds().
        exclude: Ids whose edges the caller does not want drawn.
        
    Returns:
        Edges whose length is <= the proximity threshold.
    """
    threshold = proximity_threshold(bounds or Bounds())
    skip = set(exclude or ())
    
    edges = []
    for i, first in enumerate(states):
        if first.idea_id in skip:
            continue
        for second in states[i + 1:]:
            if second.idea_id in skip:
                continue
            distance = math.hypot(first.x - second.x, first.y - second.y)
            if distance <= threshold:
                edges.append(ProximityEdge(first.idea_id, second.idea_id, distance))
    return edges
