"""
Render-side data structures for the bubble view.

A BubbleState is transient: it is created when an aggregated set of ideas is
turned into bubbles, replaced every tick by the layout engine, and thrown
away wholesale when a fresh set arrives.
"""

import math
from dataclasses import dataclass
from typing import Optional

from ideabubbles.palette.palette import Color


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in bounds coordinates."""
    left: float
    top: float
    right: float
    bottom: float
    
    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom


@dataclass(frozen=True)
class Bounds:
    """
    The 2-D coordinate space provided by the rendering surface.
    
    The default 100x100 space is viewport percent (vw/vh). Bubbles move
    inside ``inset`` (5-95% across, 5-85% down, leaving room for the page
    chrome at the bottom) and are spawned inside the smaller ``spawn``
    rectangle (10-90% across, 10-70% down).
    """
    width: float = 100.0
    height: float = 100.0
    
    @property
    def inset(self) -> Rect:
        return Rect(
            left=0.05 * self.width,
            top=0.05 * self.height,
            right=0.95 * self.width,
            bottom=0.85 * self.height,
        )
    
    @property
    def spawn(self) -> Rect:
        return Rect(
            left=0.10 * self.width,
            top=0.10 * self.height,
            right=0.90 * self.width,
            bottom=0.70 * self.height,
        )
    
    @property
    def diagonal(self) -> float:
        return math.hypot(self.width, self.height)


@dataclass
class BubbleState:
    """
    Per-idea render state.
    
    Attributes:
        idea_id: Identifier of the idea this bubble shows.
        label: Text shown inside the collapsed bubble (the idea title).
        x, y: Current position in bounds coordinates.
        dx, dy: Velocity per tick.
        paused: Motion frozen.
        expanded: Bubble is the focused one (implies paused).
        color: Fill colour derived from the score at render time.
        score: Displayed vote count.
    """
    idea_id: str
    label: str
    x: float
    y: float
    dx: float
    dy: float
    color: Color
    score: int = 0
    paused: bool = False
    expanded: bool = False
    
    @property
    def is_moving(self) -> bool:
        return not (self.paused or self.expanded)
    
    def to_dict(self) -> dict:
        """Payload for the rendering surface."""
        return {
            "id": self.idea_id,
            "label": self.label,
            "x": self.x,
            "y": self.y,
            "dx": self.dx,
            "dy": self.dy,
            "color": self.color.to_css(),
            "score": self.score,
            "paused": self.paused,
            "expanded": self.expanded,
        }


@dataclass(frozen=True)
class ProximityEdge:
    """An unordered pair of bubbles close enough to be joined by a line."""
    first: str
    second: str
    distance: float
    
    def connects(self, idea_id: str) -> bool:
        return idea_id in (self.first, self.second)
    
    def other(self, idea_id: str) -> Optional[str]:
        if idea_id == self.first:
            return self.second
        if idea_id == self.second:
            return self.first
        return None
    
    def to_dict(self) -> dict:
        return {"from": self.first, "to": self.second, "distance": self.distance}
