"""
Bubble Groups Pipeline - fetch and aggregation.

This module orchestrates one refresh of the bubble working set:

    Ranked queries (x5, concurrent) → Aggregation → Result

Steps:
1. Issue the five ranked queries concurrently
2. Wait for all of them; a failing query is recorded and counts as empty
3. Merge the lists in priority order, dropping repeats
4. Return the lists, the merged set and per-query status

Design principles:
- Error isolation: one query failing doesn't stop the others
- No retries: a failed query is reported, the next refresh tries again
- Completion order doesn't matter: lists are slotted by name
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional
import traceback

from ideabubbles.aggregation.aggregator import RankedLists, aggregate
from ideabubbles.config import (
    FETCH_WORKERS,
    MOST_VOTED_LIMIT,
    NEWEST_LIMIT,
    OLDEST_LIMIT,
    RANDOM_LIMIT,
    RANDOM_VOTED_LIMIT,
)
from ideabubbles.models.idea import Idea
from ideabubbles.sources.base import RANKED_QUERIES, RankedSourceProvider


# Fetch outcomes. "empty" and "failed" both aggregate as an empty list but
# are reported separately.
STATUS_OK = "ok"
STATUS_EMPTY = "empty"
STATUS_FAILED = "failed"


# =============================================================================
# Pipeline Result Data Structures
# =============================================================================

@dataclass
class SourceResult:
    """Result of running a single ranked query."""
    query: str
    status: str
    items_fetched: int = 0
    error: Optional[str] = None
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.status != STATUS_FAILED


@dataclass
class BubbleGroupResult:
    """Complete result of one fetch-and-aggregate run."""
    started_at: datetime
    finished_at: Optional[datetime] = None

    # Per-query results, in RANKED_QUERIES order
    source_results: List[SourceResult] = field(default_factory=list)

    lists: RankedLists = field(default_factory=RankedLists)
    combined: List[Idea] = field(default_factory=list)

    errors: List[str] = field(default_factory=list)

    @property
    def sources_succeeded(self) -> int:
        """Number of queries that returned (possibly empty) data."""
        return sum(1 for r in self.source_results if r.success)

    @property
    def sources_failed(self) -> int:
        """Number of queries that failed."""
        return sum(1 for r in self.source_results if not r.success)

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to show."""
        return not self.combined

    @property
    def duration_seconds(self) -> float:
        """Total run duration in seconds."""
        if self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return 0.0

    def to_dict(self) -> dict:
        """
        JSON payload served to the front-end.

        Contains every ranked group plus ``combinedUniqueIdeas``.
        """
        payload = self.lists.to_dict()
        payload["combinedUniqueIdeas"] = [idea.to_dict() for idea in self.combined]
        return payload

    def to_summary(self) -> str:
        """Generate a human-readable summary."""
        lines = [
            "=" * 60,
            "BUBBLE GROUPS SUMMARY",
            "=" * 60,
            f"Started:  {self.started_at.strftime('%Y-%m-%d %H:%M:%S')}",
            f"Duration: {self.duration_seconds:.2f}s",
            "",
            "Queries:",
        ]

        for sr in self.source_results:
            marker = {STATUS_OK: "✓", STATUS_EMPTY: "○"}.get(sr.status, "✗")
            lines.append(f"  {marker} {sr.query}: {sr.items_fetched} ideas ({sr.duration_ms:.0f}ms)")
            if sr.error:
                lines.append(f"      Error: {sr.error}")

        lines.extend([
            "",
            f"Total fetched: {self.lists.total}",
            f"Unique ideas:  {len(self.combined)}",
        ])

        if self.is_empty:
            lines.append("\nNo data: every list came back empty")

        if self.errors:
            lines.extend([
                "",
                "Errors:",
            ])
            for error in self.errors[:5]:  # Show first 5
                lines.append(f"  - {error}")

        lines.append("=" * 60)
        return "\n".join(lines)


# =============================================================================
# Pipeline Configuration
# =============================================================================

@dataclass
class PipelineConfig:
    """
    Configuration for a fetch run.

    CLI arguments override config file defaults.
    """
    newest_limit: int = NEWEST_LIMIT
    most_voted_limit: int = MOST_VOTED_LIMIT
    oldest_limit: int = OLDEST_LIMIT
    random_limit: int = RANDOM_LIMIT
    random_voted_limit: int = RANDOM_VOTED_LIMIT
    workers: int = FETCH_WORKERS
    verbose: bool = False

    def limit_for(self, query: str) -> int:
        return getattr(self, f"{query}_limit")


# =============================================================================
# Pipeline Class
# =============================================================================

class BubbleGroupPipeline:
    """
    Fetches the five ranked lists and aggregates them.

    Usage:
        pipeline = BubbleGroupPipeline(store, PipelineConfig(verbose=True))
        result = pipeline.run()
        print(result.to_summary())
    """

    def __init__(self, provider: RankedSourceProvider, config: PipelineConfig = None):
        """
        Initialize the pipeline.

        Args:
            provider: Backend answering the ranked queries.
            config: Pipeline configuration. Defaults to PipelineConfig().
        """
        self.provider = provider
        self.config = config or PipelineConfig()

    def _run_query(self, query: str) -> tuple[List[Idea], SourceResult]:
        """
        Run one ranked query with error isolation.

        Returns:
            Tuple of (ideas, result). Ideas is empty when the query failed.
        """
        limit = self.config.limit_for(query)
        start_time = datetime.now()

        try:
            ideas = list(self.provider.fetch(query, limit))
            duration_ms = (datetime.now() - start_time).total_seconds() * 1000

            if self.config.verbose:
                print(f"[{query}] Fetched {len(ideas)} ideas (requested {limit})")

            return ideas, SourceResult(
                query=query,
                status=STATUS_OK if ideas else STATUS_EMPTY,
                items_fetched=len(ideas),
                duration_ms=duration_ms,
            )

        except Exception as e:
            duration_ms = (datetime.now() - start_time).total_seconds() * 1000
            error_msg = f"{type(e).__name__}: {str(e)}"
            print(f"[{query}] Error fetching from {self.provider.name}: {error_msg}")

            if self.config.verbose:
                error_msg += f"\n{traceback.format_exc()}"

            return [], SourceResult(
                query=query,
                status=STATUS_FAILED,
                error=error_msg,
                duration_ms=duration_ms,
            )

    def fetch_lists(self) -> tuple[RankedLists, List[SourceResult]]:
        """
        Issue all ranked queries concurrently and wait for every one.

        Returns:
            Tuple of (lists, source_results in RANKED_QUERIES order).
        """
        workers = max(1, min(self.config.workers, len(RANKED_QUERIES)))

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                query: executor.submit(self._run_query, query)
                for query in RANKED_QUERIES
            }
            outcomes: Dict[str, tuple[List[Idea], SourceResult]] = {
                query: future.result() for query, future in futures.items()
            }

        lists = RankedLists.from_mapping({query: ideas for query, (ideas, _) in outcomes.items()})
        source_results = [outcomes[query][1] for query in RANKED_QUERIES]
        return lists, source_results

    def run(self) -> BubbleGroupResult:
        """
        Fetch and aggregate.

        Returns:
            BubbleGroupResult with lists, merged set and per-query status.
        """
        result = BubbleGroupResult(started_at=datetime.now())

        try:
            if self.config.verbose:
                print(f"Fetching bubble groups from {self.provider.name}...")

            lists, source_results = self.fetch_lists()
            result.lists = lists
            result.source_results = source_results
            result.errors.extend(
                f"{sr.query}: {sr.error}" for sr in source_results if sr.error
            )

            result.combined = aggregate(lists)

            if self.config.verbose:
                print(f"Aggregated {lists.total} ideas into {len(result.combined)} unique")

        except Exception as e:
            result.errors.append(f"Pipeline error: {str(e)}")
            if self.config.verbose:
                result.errors.append(traceback.format_exc())

        result.finished_at = datetime.now()
        return result


# =============================================================================
# Convenience Functions
# =============================================================================

def fetch_bubble_groups(provider: RankedSourceProvider, verbose: bool = False) -> BubbleGroupResult:
    """
    Run the pipeline with default limits.

    Convenience function for programmatic use.
    """
    return BubbleGroupPipeline(provider, PipelineConfig(verbose=verbose)).run()
