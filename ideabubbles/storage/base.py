"""
Base storage abstraction for Idea Bubbles.

Extends the ranked source interface with the write operations the web
surface needs: submitting ideas, paging through them, and recording votes.
"""

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from ideabubbles.models.idea import Idea
from ideabubbles.sources.base import RankedSourceProvider


@dataclass
class IdeaPage:
    """
    One page of ideas ordered by score, then newest.
    
    Attributes:
        ideas: Ideas on this page.
        current_page: 1-based page number.
        total_pages: Number of pages at the requested page size.
        total_ideas: Number of ideas in the store.
    """
    ideas: List[Idea] = field(default_factory=list)
    current_page: int = 1
    total_pages: int = 0
    total_ideas: int = 0
    
    def to_dict(self) -> dict:
        return {
            "ideas": [idea.to_dict() for idea in self.ideas],
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalIdeas": self.total_ideas,
        }


class IdeaStore(RankedSourceProvider):
    """
    Abstract base class for idea persistence backends.
    
    Implementations must provide the five ranked queries plus:
    - inserting a new idea
    - paging through all ideas
    - incrementing an idea's score by exactly one
    """
    
    @abstractmethod
    def insert_idea(
        self,
        title: str,
        description: str,
        submitter_name: Optional[str] = None,
        lightning_address: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> Idea:
        """
        Persist a new idea with a score of zero.
        
        Returns:
            The stored Idea, including its assigned id and timestamp.
            
        Raises:
            IdeaSubmissionError: If the idea could not be saved.
        """
        pass
    
    @abstractmethod
    def list_ideas(self, page: int = 1, limit: int = 10) -> IdeaPage:
        """
        Return one page of ideas ordered by score desc, then newest.
        
        Raises:
            SourceFetchError: If the page could not be loaded.
        """
        pass
    
    @abstractmethod
    def increment_score(self, idea_id: str) -> None:
        """
        Durably add one vote to an idea.
        
        Raises:
            ScoreIncrementError: If the vote was not recorded.
        """
        pass
