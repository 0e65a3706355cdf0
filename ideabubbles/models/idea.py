"""
Core data model for Idea Bubbles.

Defines the Idea dataclass representing a single crowd-submitted idea
as stored in the ideas table, together with its vote count.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class Idea:
    """
    Represents a single submitted idea.
    
    This is the core data structure that flows through the whole system:
    store -> ranked lists -> aggregation -> bubbles.
    
    Attributes:
        id: Unique, stable identifier assigned by the store.
        title: Headline shown inside the bubble.
        description: Free-text body shown when the bubble is expanded.
        submitter_name: Optional name of the person who submitted the idea.
        lightning_address: Optional payment address for tips/votes.
        created_at: When the idea was submitted.
        score: Popularity counter (number of votes received, >= 0).
        tags: Optional list of free-form tags.
        exclude_from_display: If True the idea is hidden from the bubble view.
    """
    
    # Required fields
    id: str
    title: str
    
    # Optional fields with defaults
    description: str = ""
    submitter_name: Optional[str] = None
    lightning_address: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    score: int = 0
    tags: List[str] = field(default_factory=list)
    exclude_from_display: bool = False
    
    def __post_init__(self) -> None:
        """Validate fields after initialization."""
        self.validate()
    
    def validate(self) -> None:
        """
        Validate that required fields are present and valid.
        
        Raises:
            ValueError: If validation fails.
        """
        errors = []
        
        if not self.id or not str(self.id).strip():
            errors.append("id is required and cannot be empty")
        
        if not self.title or not self.title.strip():
            errors.append("title is required and cannot be empty")
        
        if isinstance(self.score, bool) or not isinstance(self.score, int):
            errors.append(f"score must be an integer, got {self.score!r}")
        elif self.score < 0:
            errors.append(f"score cannot be negative, got {self.score}")
        
        if errors:
            raise ValueError(f"Idea validation failed: {'; '.join(errors)}")
    
    def to_dict(self) -> dict:
        """
        Convert the Idea to a row dictionary in the store's column naming.
        
        The score is exposed as ``total_sats_received`` and the timestamp
        as an ISO format string.
        """
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "submitter_name": self.submitter_name,
            "lightning_address": self.lightning_address,
            "created_at": self.created_at.isoformat(),
            "total_sats_received": self.score,
            "tags": list(self.tags),
            "exclude_from_display": self.exclude_from_display,
        }
    
    @classmethod
    def from_dict(cls, data: dict) -> "Idea":
        """
        Create an Idea from a store row.
        
        Unknown columns are ignored. Accepts either ``total_sats_received``
        or ``score`` for the vote count, and ISO strings (with or without a
        trailing ``Z``) for ``created_at``.
        
        Args:
            data: Row dictionary.
            
        Returns:
            New Idea instance.
        """
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
        
        score = data.get("total_sats_received")
        if score is None:
            score = data.get("score")
        
        kwargs = {
            "id": str(data.get("id") or ""),
            "title": data.get("title") or "",
            "description": data.get("description") or "",
            "submitter_name": data.get("submitter_name") or None,
            "lightning_address": data.get("lightning_address") or None,
            "score": int(score or 0),
            "tags": list(data.get("tags") or []),
            "exclude_from_display": bool(data.get("exclude_from_display") or False),
        }
        if created_at is not None:
            kwargs["created_at"] = created_at
        
        return cls(**kwargs)
    
    def __str__(self) -> str:
        """Human-readable string representation."""
        return f"{self.title} (score: {self.score})"
    
    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return f"Idea(id={self.id!r}, title={self.title!r}, score={self.score})"
