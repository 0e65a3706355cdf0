"""
Supabase storage backend for Idea Bubbles.

Implements the IdeaStore interface against Supabase's PostgREST API using
plain HTTP requests.

PostgREST Documentation: https://postgrest.org/en/stable/references/api.html

=============================================================================
SUPABASE SCHEMA
=============================================================================

Table "ideas":

| Column               | Type        | Description                          |
|----------------------|-------------|--------------------------------------|
| id                   | uuid        | Primary key                          |
| title                | text        | Headline shown in the bubble         |
| description          | text        | Idea body                            |
| submitter_name       | text null   | Optional submitter                   |
| lightning_address    | text null   | Optional payment address             |
| tags                 | text[] null | Optional tags                        |
| total_sats_received  | int         | Vote count (score)                   |
| exclude_from_display | bool        | Hide from the bubble view            |
| created_at           | timestamptz | Submission time                      |

Database functions (called through /rpc):

- get_random_ideas(count int)        uniform random sample
- get_random_voted_ideas(count int)  random sample weighted by votes
- increment_idea_score(idea_id uuid) adds exactly one vote

=============================================================================
"""

import math
import random
import uuid
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
import requests

from ideabubbles.config import (
    IDEAS_TABLE,
    REQUEST_TIMEOUT,
    SUPABASE_ANON_KEY,
    SUPABASE_URL,
)
from ideabubbles.errors import (
    IdeaSubmissionError,
    ScoreIncrementError,
    SourceFetchError,
)
from ideabubbles.models.idea import Idea
from ideabubbles.storage.base import IdeaPage, IdeaStore


class SupabaseIdeaStore(IdeaStore):
    """
    Supabase-backed idea store.

    Ranked queries map onto PostgREST ordering; the two random samples are
    delegated to database functions because PostgREST has no random order.

    Configuration is pulled from environment variables via ideabubbles.config:
    - SUPABASE_URL: Project URL
    - SUPABASE_ANON_KEY: Public API key
    - IDEAS_TABLE: Name of the ideas table
    """

    RANDOM_RPC = "get_random_ideas"
    RANDOM_VOTED_RPC = "get_random_voted_ideas"
    INCREMENT_RPC = "increment_idea_score"

    def __init__(
        self,
        url: str = None,
        api_key: str = None,
        table_name: str = None,
        timeout: int = None,
    ):
        """
        Initialize SupabaseIdeaStore.

        Args:
            url: Project URL. Defaults to config.SUPABASE_URL.
            api_key: API key. Defaults to config.SUPABASE_ANON_KEY.
            table_name: Table name. Defaults to config.IDEAS_TABLE.
            timeout: Request timeout in seconds. Defaults to config.REQUEST_TIMEOUT.
        """
        # Use provided values, or fall back to config if None (not empty string)
        self.url = (url if url is not None else SUPABASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else SUPABASE_ANON_KEY
        self.table_name = table_name if table_name is not None else IDEAS_TABLE
        self.timeout = timeout if timeout is not None else REQUEST_TIMEOUT

    @property
    def name(self) -> str:
        return "supabase"

    @property
    def _table_url(self) -> str:
        return f"{self.url}/rest/v1/{self.table_name}"

    def _rpc_url(self, function: str) -> str:
        return f"{self.url}/rest/v1/rpc/{function}"

    @property
    def _headers(self) -> Dict[str, str]:
        """Construct headers for API requests."""
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _validate_config(self) -> None:
        """Validate that required configuration is present."""
        if not self.url:
            raise ValueError("SUPABASE_URL is not configured")
        if not self.api_key:
            raise ValueError("SUPABASE_ANON_KEY is not configured")
        if not self.table_name:
            raise ValueError("IDEAS_TABLE is not configured")

    # =========================================================================
    # Row conversion
    # =========================================================================

    @staticmethod
    def rows_to_ideas(rows: Any) -> List[Idea]:
        """
        Convert a PostgREST response body to Ideas, preserving order.

        A row that does not make a valid Idea is skipped; the rest of the
        list is kept.

        Raises:
            ValueError: If the body is not a list.
        """
        if not isinstance(rows, list):
            raise ValueError(f"expected a list of rows, got {type(rows).__name__}")

        ideas = []
        for row in rows:
            try:
                ideas.append(Idea.from_dict(row))
            except (ValueError, TypeError, AttributeError) as e:
                row_id = row.get("id") if isinstance(row, dict) else None
                print(f"[supabase] Skipping invalid row {row_id!r}: {e}")
        return ideas

    # =========================================================================
    # API Operations
    # =========================================================================

    def _select(self, order: str, limit: int) -> List[Idea]:
        """Run an ordered select against the ideas table."""
        self._validate_config()

        params = {
            "select": "*",
            "order": order,
            "limit": limit,
        }

        try:
            response = requests.get(
                self._table_url,
                headers=self._headers,
                params=params,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return self.rows_to_ideas(response.json())

        except requests.RequestException as e:
            raise SourceFetchError(f"select order={order} failed: {e}") from e
        except (ValueError, TypeError) as e:
            raise SourceFetchError(f"select order={order} returned bad data: {e}") from e

    def _call_rpc(self, function: str, payload: Dict[str, Any]) -> Any:
        """Call a database function and return the decoded JSON body."""
        self._validate_config()

        response = requests.post(
            self._rpc_url(function),
            headers=self._headers,
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json() if response.content else None

    def _sample(self, function: str, limit: int) -> List[Idea]:
        try:
            return self.rows_to_ideas(self._call_rpc(function, {"count": limit}))
        except requests.RequestException as e:
            raise SourceFetchError(f"rpc {function} failed: {e}") from e
        except (ValueError, TypeError) as e:
            raise SourceFetchError(f"rpc {function} returned bad data: {e}") from e

    # =========================================================================
    # RankedSourceProvider Implementation
    # =========================================================================

    def fetch_newest(self, limit: int) -> List[Idea]:
        return self._select("created_at.desc", limit)

    def fetch_most_voted(self, limit: int) -> List[Idea]:
        return self._select("total_sats_received.desc,created_at.desc", limit)

    def fetch_oldest(self, limit: int) -> List[Idea]:
        return self._select("created_at.asc", limit)

    def fetch_random(self, limit: int) -> List[Idea]:
        return self._sample(self.RANDOM_RPC, limit)

    def fetch_random_voted(self, limit: int) -> List[Idea]:
        return self._sample(self.RANDOM_VOTED_RPC, limit)

    # =========================================================================
    # IdeaStore Implementation
    # =========================================================================

    def insert_idea(
        self,
        title: str,
        description: str,
        submitter_name: Optional[str] = None,
        lightning_address: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> Idea:
        """
        Insert a new idea and return the stored row.

        Optional fields are only sent when present so the table defaults apply.
        """
        self._validate_config()

        row: Dict[str, Any] = {"title": title, "description": description}
        if submitter_name:
            row["submitter_name"] = submitter_name
        if lightning_address:
            row["lightning_address"] = lightning_address
        if tags:
            row["tags"] = tags

        headers = dict(self._headers)
        headers["Prefer"] = "return=representation"

        try:
            response = requests.post(
                self._table_url,
                headers=headers,
                json=row,
                timeout=self.timeout,
            )
            response.raise_for_status()
            inserted = self.rows_to_ideas(response.json())
        except requests.RequestException as e:
            raise IdeaSubmissionError(f"insert failed: {e}") from e
        except (ValueError, TypeError) as e:
            raise IdeaSubmissionError(f"insert returned bad data: {e}") from e

        if not inserted:
            raise IdeaSubmissionError("insert returned no row")
        return inserted[0]

    def list_ideas(self, page: int = 1, limit: int = 10) -> IdeaPage:
        """
        Page through ideas by score, then newest.

        The total count comes from the Content-Range header
        (``0-9/42``) that PostgREST returns for ``Prefer: count=exact``.
        """
        self._validate_config()

        offset = (page - 1) * limit
        params = {
            "select": "*",
            "order": "total_sats_received.desc,created_at.desc",
            "offset": offset,
            "limit": limit,
        }
        headers = dict(self._headers)
        headers["Prefer"] = "count=exact"

        try:
            response = requests.get(
                self._table_url,
                headers=headers,
                params=params,
                timeout=self.timeout,
            )
            response.raise_for_status()
            ideas = self.rows_to_ideas(response.json())
        except requests.RequestException as e:
            raise SourceFetchError(f"list page={page} failed: {e}") from e
        except (ValueError, TypeError) as e:
            raise SourceFetchError(f"list page={page} returned bad data: {e}") from e

        total = self._parse_total(response.headers.get("Content-Range", ""), len(ideas))
        return IdeaPage(
            ideas=ideas,
            current_page=page,
            total_pages=math.ceil(total / limit) if limit else 0,
            total_ideas=total,
        )

    @staticmethod
    def _parse_total(content_range: str, fallback: int) -> int:
        _, _, total = content_range.partition("/")
        try:
            return int(total)
        except ValueError:
            return fallback

    def increment_score(self, idea_id: str) -> None:
        try:
            self._call_rpc(self.INCREMENT_RPC, {"idea_id": idea_id})
        except (requests.RequestException, ValueError) as e:
            raise ScoreIncrementError(f"vote for {idea_id} failed: {e}") from e


class MockIdeaStore(IdeaStore):
    """
    In-memory idea store for testing and development.

    Use this when Supabase is not configured or for testing.
    Data is stored in memory and lost when the process ends. Random samples
    come from a private RNG so a fixed seed gives repeatable results.
    """

    def __init__(self, ideas: Optional[List[Idea]] = None, seed: Optional[int] = None):
        self._records: Dict[str, Idea] = {}
        # One generator per sampling query; they run on separate threads
        self._random_rng = random.Random(seed)
        self._voted_rng = random.Random(None if seed is None else seed + 1)
        for idea in ideas or []:
            self._records[idea.id] = idea

    @property
    def name(self) -> str:
        return "mock"

    def _newest_first(self) -> List[Idea]:
        return sorted(self._records.values(), key=lambda i: i.created_at, reverse=True)

    def fetch_newest(self, limit: int) -> List[Idea]:
        return self._newest_first()[:limit]

    def fetch_most_voted(self, limit: int) -> List[Idea]:
        # Stable sort on score keeps the newest-first tie break
        return sorted(self._newest_first(), key=lambda i: i.score, reverse=True)[:limit]

    def fetch_oldest(self, limit: int) -> List[Idea]:
        return sorted(self._records.values(), key=lambda i: i.created_at)[:limit]

    def fetch_random(self, limit: int) -> List[Idea]:
        ideas = list(self._records.values())
        return self._random_rng.sample(ideas, min(limit, len(ideas)))

    def fetch_random_voted(self, limit: int) -> List[Idea]:
        """
        Weighted sample without replacement (Efraimidis-Spirakis).

        Each voted idea gets the key u ** (1 / score); the largest keys win.
        Ideas without votes have zero weight and are never drawn.
        """
        voted = [idea for idea in self._records.values() if idea.score > 0]
        keyed = [(self._voted_rng.random() ** (1.0 / idea.score), idea) for idea in voted]
        keyed.sort(key=lambda pair: pair[0], reverse=True)
        return [idea for _, idea in keyed[:limit]]

    def insert_idea(
        self,
        title: str,
        description: str,
        submitter_name: Optional[str] = None,
        lightning_address: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> Idea:
        try:
            idea = Idea(
                id=str(uuid.uuid4()),
                title=title,
                description=description,
                submitter_name=submitter_name,
                lightning_address=lightning_address,
                tags=list(tags or []),
            )
        except ValueError as e:
            raise IdeaSubmissionError(str(e)) from e
        self._records[idea.id] = idea
        return idea

    def list_ideas(self, page: int = 1, limit: int = 10) -> IdeaPage:
        ordered = self.fetch_most_voted(len(self._records))
        offset = (page - 1) * limit
        total = len(ordered)
        return IdeaPage(
            ideas=ordered[offset:offset + limit],
            current_page=page,
            total_pages=math.ceil(total / limit) if limit else 0,
            total_ideas=total,
        )

    def increment_score(self, idea_id: str) -> None:
        """Replace the stored record so ideas already handed out stay unchanged."""
        idea = self._records.get(idea_id)
        if idea is None:
            raise ScoreIncrementError(f"unknown idea: {idea_id}")
        self._records[idea_id] = replace(idea, score=idea.score + 1)

    def get(self, idea_id: str) -> Optional[Idea]:
        """Get a single idea by id (for testing)."""
        return self._records.get(idea_id)

    def clear(self) -> None:
        """Clear all records (for testing)."""
        self._records.clear()

    def count(self) -> int:
        """Return number of stored records (for testing)."""
        return len(self._records)


# =============================================================================
# Store selection
# =============================================================================

def demo_ideas(now: Optional[datetime] = None) -> List[Idea]:
    """A small fixed idea set used when no backend is configured."""
    now = now or datetime.now()
    samples = [
        ("Lightning tip jar for podcasts", "Let listeners stream sats per minute.", 9),
        ("Bitcoin meetup finder", "Map of local meetups with RSVP.", 4),
        ("Merchant onboarding kit", "Printable guide and QR stand for shops.", 2),
        ("Sats-back browser extension", "Earn sats when shopping online.", 1),
        ("Node uptime leaderboard", "Public ranking of routing node reliability.", 0),
        ("Open-source POS for cafes", "Tablet point of sale that settles over Lightning.", 6),
        ("Bitcoin for kids comic", "Explain scarcity and saving with a comic series.", 0),
        ("Multisig inheritance planner", "Walkthrough for family key setups.", 3),
    ]
    return [
        Idea(
            id=f"demo_{index}",
            title=title,
            description=description,
            score=score,
            created_at=now - timedelta(hours=6 * index),
        )
        for index, (title, description, score) in enumerate(samples, start=1)
    ]


def create_store(seed: Optional[int] = None) -> IdeaStore:
    """Supabase when configured, otherwise an in-memory store of demo ideas."""
    if SUPABASE_URL and SUPABASE_ANON_KEY:
        return SupabaseIdeaStore()
    return MockIdeaStore(demo_ideas(), seed=seed)
