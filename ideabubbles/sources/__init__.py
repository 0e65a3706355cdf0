"""
Ranked sources module.

The five ordered views of the idea set consumed by the aggregator.
"""

from ideabubbles.sources.base import RANKED_QUERIES, RankedSourceProvider

__all__ = [
    "RANKED_QUERIES",
    "RankedSourceProvider",
]
