"""
Ranked source abstraction for Idea Bubbles.

Defines the interface every backend must offer: five bounded, ordered views
of the idea set that the aggregator merges into the bubble working set.
"""

from abc import ABC, abstractmethod
from typing import List

from ideabubbles.models.idea import Idea


# Query names, in the order they are issued. Aggregation uses its own
# priority order (see ideabubbles.aggregation.PRIORITY_ORDER).
RANKED_QUERIES = (
    "newest",
    "most_voted",
    "oldest",
    "random",
    "random_voted",
)


class RankedSourceProvider(ABC):
    """
    Abstract base class for anything that can produce ranked idea lists.
    
    Each query is independent and may fail on its own; implementations
    should raise (typically SourceFetchError) rather than return partial
    garbage, and callers isolate the failure.
    """
    
    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in console output (e.g. "supabase")."""
        pass
    
    @abstractmethod
    def fetch_newest(self, limit: int) -> List[Idea]:
        """Most recently submitted ideas first."""
        pass
    
    @abstractmethod
    def fetch_most_voted(self, limit: int) -> List[Idea]:
        """Highest score first; ties broken by newest first."""
        pass
    
    @abstractmethod
    def fetch_oldest(self, limit: int) -> List[Idea]:
        """Earliest submitted ideas first."""
        pass
    
    @abstractmethod
    def fetch_random(self, limit: int) -> List[Idea]:
        """Uniform random sample without replacement."""
        pass
    
    @abstractmethod
    def fetch_random_voted(self, limit: int) -> List[Idea]:
        """Random sample weighted by score."""
        pass
    
    def fetch(self, query: str, limit: int) -> List[Idea]:
        """
        Dispatch a query by name.
        
        Args:
            query: One of RANKED_QUERIES.
            limit: Maximum number of ideas.
            
        Raises:
            ValueError: If the query name is unknown.
        """
        if query not in RANKED_QUERIES:
            raise ValueError(f"unknown ranked query: {query!r}")
        return getattr(self, f"fetch_{query}")(limit)
    
    def __str__(self) -> str:
        return f"RankedSourceProvider({self.name})"
    
    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
