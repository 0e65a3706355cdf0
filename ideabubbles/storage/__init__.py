"""
Storage module.

Persistence and retrieval of ideas via Supabase or an in-memory backend.
"""

from ideabubbles.storage.base import IdeaPage, IdeaStore
from ideabubbles.storage.supabase import (
    MockIdeaStore,
    SupabaseIdeaStore,
    create_store,
    demo_ideas,
)

__all__ = [
    "IdeaPage",
    "IdeaStore",
    "MockIdeaStore",
    "SupabaseIdeaStore",
    "create_store",
    "demo_ideas",
]
