"""
Bubble scene coordinator.

Owns the live bubble collection and everything that changes it:

- loading a fresh aggregated set (full rebuild, stale fetches discarded)
- advancing motion once per tick and recomputing connector lines
- the single focused bubble and the one pending focus request
- reflecting a successful vote on screen without a refetch

The scene is the only writer of its bubble list. Hosts call ``tick()`` from
whatever loop drives rendering and feed pointer events in through
``request_expand()`` / ``request_collapse()``.
"""

import random
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from ideabubbles.aggregation.aggregator import select_for_display
from ideabubbles.config import DISPLAY_LIMIT
from ideabubbles.layout.engine import LayoutEngine
from ideabubbles.layout.focus import collapse, expand
from ideabubbles.layout.proximity import edges_for
from ideabubbles.models.bubble import Bounds, BubbleState, ProximityEdge
from ideabubbles.models.idea import Idea
from ideabubbles.pipeline import BubbleGroupResult
from ideabubbles.storage.base import IdeaStore


VOTE_FAILED_MESSAGE = "Failed to vote. Please try again."


@dataclass
class Frame:
    """What the rendering surface draws for one tick."""
    states: List[BubbleState] = field(default_factory=list)
    edges: List[ProximityEdge] = field(default_factory=list)
    focused_id: Optional[str] = None


@dataclass
class VoteResult:
    """
    Outcome of a vote.

    Attributes:
        success: Whether the store recorded the vote.
        idea_id: The idea voted for.
        score: Displayed score after the vote (None if the bubble is gone).
        message: Text to show the user.
        error: Underlying error, for logs only.
    """
    success: bool
    idea_id: str
    score: Optional[int] = None
    message: str = ""
    error: Optional[str] = None


class BubbleScene:
    """
    Live bubble state plus the focus and fetch bookkeeping around it.

    Usage:
        scene = BubbleScene(rng=random.Random(3))
        token = scene.begin_fetch()
        scene.load_result(pipeline.run(), token)
        while running:
            frame = scene.tick()
            draw(frame)
    """

    def __init__(
        self,
        engine: Optional[LayoutEngine] = None,
        display_limit: int = DISPLAY_LIMIT,
        rng: Optional[random.Random] = None,
    ):
        self.engine = engine or LayoutEngine()
        self.display_limit = display_limit
        self.rng = rng or random.Random()

        self.states: List[BubbleState] = []
        self.edges: List[ProximityEdge] = []
        self.focused_id: Optional[str] = None

        self._ideas: Dict[str, Idea] = {}
        self._pending: Optional[Tuple[str, Optional[str]]] = None
        self._issued_token = 0
        self._applied_token = 0
        self._loaded = False

    @property
    def bounds(self) -> Bounds:
        return self.engine.bounds

    @property
    def display_state(self) -> str:
        """"loading" before the first load, "empty" with no bubbles, else "ready"."""
        if not self._loaded:
            return "loading"
        if not self.states:
            return "empty"
        return "ready"

    # =========================================================================
    # Loading
    # =========================================================================

    def begin_fetch(self) -> int:
        """Hand out a token for a fetch that is about to start."""
        self._issued_token += 1
        return self._issued_token

    def load(self, ideas: List[Idea], token: Optional[int] = None) -> bool:
        """
        Replace all bubbles with a fresh set.

        Args:
            ideas: The aggregated set.
            token: Token from begin_fetch(). A result whose token is not
                newer than the last applied one is stale and is dropped.
                None means "newest".

        Returns:
            True if the set was applied, False if it was discarded.
        """
        if token is None:
            token = self.begin_fetch()
        if token <= self._applied_token:
            print(f"[scene] Discarding stale fetch #{token} (showing #{self._applied_token})")
            return False

        selected = select_for_display(ideas, self.display_limit)
        self._ideas = {idea.id: idea for idea in selected}
        self.states = self.engine.initialize(selected, self.rng)
        self.edges = edges_for(self.states, self.bounds)
        self.focused_id = None
        self._pending = None
        self._applied_token = token
        self._loaded = True
        return True

    def load_result(self, result: BubbleGroupResult, token: Optional[int] = None) -> bool:
        """Load the merged set from a pipeline run."""
        return self.load(result.combined, token)

    # =========================================================================
    # Focus
    # =========================================================================

    def request_expand(self, idea_id: str) -> None:
        """Queue a focus change for the next tick; replaces any pending one."""
        self._pending = ("expand", idea_id)

    def request_collapse(self) -> None:
        """Queue clearing focus for the next tick; replaces any pending one."""
        self._pending = ("collapse", None)

    def expand(self, idea_id: str) -> None:
        """Focus a bubble now. Unknown ids clear focus."""
        self.states = expand(self.states, idea_id)
        self.focused_id = idea_id if idea_id in self._ideas else None

    def collapse(self) -> None:
        """Clear focus now."""
        self.states = collapse(self.states)
        self.focused_id = None

    def _apply_pending(self) -> None:
        if self._pending is None:
            return
        action, idea_id = self._pending
        self._pending = None
        if action == "expand":
            self.expand(idea_id)
        else:
            self.collapse()

    # =========================================================================
    # Ticking
    # =========================================================================

    def tick(self, dt: float = 1.0) -> Frame:
        """
        Advance one frame.

        Applies the pending focus request, moves all free bubbles and
        recomputes the connector lines.
        """
        self._apply_pending()
        self.states = self.engine.advance(self.states, dt)
        self.edges = edges_for(self.states, self.bounds)
        return self.frame()

    def frame(self) -> Frame:
        return Frame(states=list(self.states), edges=list(self.edges), focused_id=self.focused_id)

    # =========================================================================
    # Voting
    # =========================================================================

    def vote(self, idea_id: str, store: IdeaStore) -> VoteResult:
        """
        Record a vote and show it immediately.

        On success the bubble's displayed score goes up by one (its colour
        is left as rendered). On failure nothing local changes and the
        result carries a message for the user; there is no retry.
        """
        try:
            store.increment_score(idea_id)
        except Exception as e:
            print(f"[scene] Vote for {idea_id} failed: {e}")
            return VoteResult(
                success=False,
                idea_id=idea_id,
                message=VOTE_FAILED_MESSAGE,
                error=str(e),
            )

        new_score = None
        updated = []
        for state in self.states:
            if state.idea_id == idea_id:
                state = replace(state, score=state.score + 1)
                new_score = state.score
            updated.append(state)
        self.states = updated

        return VoteResult(success=True, idea_id=idea_id, score=new_score, message="Vote recorded")

    # =========================================================================
    # Rendering payload
    # =========================================================================

    def render_payload(self) -> dict:
        """
        Everything the rendering surface needs for the current frame.

        The expanded bubble also carries the idea's body and submitter.
        """
        bubbles = []
        for state in self.states:
            bubble = state.to_dict()
            idea = self._ideas.get(state.idea_id)
            if state.expanded and idea is not None:
                bubble["description"] = idea.description
                bubble["submitter_name"] = idea.submitter_name or ""
                bubble["lightning_address"] = idea.lightning_address or ""
            bubbles.append(bubble)

        return {
            "state": self.display_state,
            "focused": self.focused_id,
            "bounds": {"width": self.bounds.width, "height": self.bounds.height},
            "bubbles": bubbles,
            "edges": [edge.to_dict() for edge in self.edges],
        }
