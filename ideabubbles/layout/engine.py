"""
Bubble layout and motion.

Places each idea at a random spot with a small random velocity and moves
all bubbles one step per rendering tick, bouncing off the edges of the
inset rectangle. Bubbles do not interact with each other.

The engine keeps no state between calls: everything needed to continue an
animation lives in the BubbleState list it returns, so any snapshot can be
resumed, replayed in a test, or driven from a timer, game loop, or web
request alike.
"""

import random
from dataclasses import replace
from typing import List, Optional

from ideabubbles.aggregation.aggregator import max_score_in
from ideabubbles.models.bubble import Bounds, BubbleState
from ideabubbles.models.idea import Idea
from ideabubbles.palette.palette import color_for


# =============================================================================
# Motion Configuration
# =============================================================================

# Each velocity component starts uniform in [-SPEED_RANGE/2, SPEED_RANGE/2]
# bounds-percent per tick.
SPEED_RANGE: float = 0.16

# Applied once at creation to slow every bubble down.
DAMPING: float = 0.7


class LayoutEngine:
    """
    Creates and advances bubble states inside a Bounds.
    
    Usage:
        engine = LayoutEngine(Bounds())
        states = engine.initialize(ideas, rng=random.Random(7))
        for _ in range(60):
            states = engine.advance(states)
    """
    
    def __init__(
        self,
        bounds: Optional[Bounds] = None,
        speed_range: float = SPEED_RANGE,
        damping: float = DAMPING,
    ):
        self.bounds = bounds or Bounds()
        self.speed_range = speed_range
        self.damping = damping
    
    def initialize(self, ideas: List[Idea], rng: Optional[random.Random] = None) -> List[BubbleState]:
        """
        Create one bubble per idea.
        
        Positions are uniform within the spawn rectangle; velocities are
        uniform within the speed range (scaled to the bounds) and damped.
        Colours come from the palette relative to the highest score in
        ``ideas``.
        
        Args:
            ideas: Ideas to show, already selected for display.
            rng: Random source. Defaults to a fresh unseeded Random.
            
        Returns:
            New bubble states, one per idea, in the same order.
        """
        rng = rng or random.Random()
        spawn = self.bounds.spawn
        scale_x = self.bounds.width / 100.0
        scale_y = self.bounds.height / 100.0
        top_score = max_score_in(ideas)
        
        states = []
        for idea in ideas:
            dx = (rng.random() - 0.5) * self.speed_range * scale_x * self.damping
            dy = (rng.random() - 0.5) * self.speed_range * scale_y * self.damping
            x = spawn.left + rng.random() * (spawn.right - spawn.left)
            y = spawn.top + rng.random() * (spawn.bottom - spawn.top)
            states.append(BubbleState(
                idea_id=idea.id,
                label=idea.title,
                x=x,
                y=y,
                dx=dx,
                dy=dy,
                color=color_for(idea.score, top_score),
                score=idea.score,
            ))
        return states
    
    def advance(self, states: List[BubbleState], dt: float = 1.0) -> List[BubbleState]:
        """
        Move every free bubble one step.
        
        Paused and expanded bubbles are returned unchanged. A bubble that
        leaves the inset rectangle has the matching velocity component
        negated and its position clamped back onto the edge.
        
        Args:
            states: Current bubble states (not modified).
            dt: Step size in ticks; 1.0 is one rendering frame.
            
        Returns:
            New list of bubble states.
        """
        return [self.step(state, dt) for state in states]
    
    def step(self, state: BubbleState, dt: float = 1.0) -> BubbleState:
        """Advance a single bubble."""
        if not state.is_moving:
            return state
        
        inset = self.bounds.inset
        x = state.x + state.dx * dt
        y = state.y + state.dy * dt
        dx, dy = state.dx, state.dy
        
        if x < inset.left or x > inset.right:
            dx = -dx
        if y < inset.top or y > inset.bottom:
            dy = -dy
        
        x = max(inset.left, min(inset.right, x))
        y = max(inset.top, min(inset.bottom, y))
        
        return replace(state, x=x, y=y, dx=dx, dy=dy)
