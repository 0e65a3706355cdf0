"""
Pytest Configuration and Fixtures

This module provides:
- Timestamped result file generation
- Shared fixtures for all tests
- Test category markers
"""

import pytest
import random
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tests.test_config import CONFIG, TEST_DATA, TEST_CATEGORIES, get_all_idea_rows


# =============================================================================
# TEST RESULT FILE CONFIGURATION
# =============================================================================

RESULTS_DIR = PROJECT_ROOT / CONFIG["test_output_dir"]


def get_result_filename() -> str:
    """Generate timestamped result filename."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"test_results_{timestamp}.txt"


class TestResultCollector:
    """Collects test results for formatted output."""

    __test__ = False

    def __init__(self):
        self.results: List[Dict[str, Any]] = []
        self.start_time: datetime = None
        self.end_time: datetime = None

    def add_result(self, nodeid: str, outcome: str, duration: float, message: str = ""):
        """Add a test result."""
        filename = nodeid.split("::")[0].split("/")[-1]
        self.results.append({
            "nodeid": nodeid,
            "category": filename.replace("test_", "").replace(".py", ""),
            "outcome": outcome,
            "duration": duration,
            "message": message,
        })

    def get_summary(self) -> Dict[str, int]:
        """Get test result summary."""
        return {
            "total": len(self.results),
            "passed": sum(1 for r in self.results if r["outcome"] == "passed"),
            "failed": sum(1 for r in self.results if r["outcome"] == "failed"),
            "skipped": sum(1 for r in self.results if r["outcome"] == "skipped"),
        }


# Global collector instance
_collector = TestResultCollector()


def generate_formatted_report(collector: TestResultCollector) -> str:
    """Generate a formatted test report."""
    summary = collector.get_summary()
    lines = [
        "=" * 80,
        "IDEA BUBBLES - TEST RESULTS REPORT",
        "=" * 80,
        f"Run Date:     {collector.start_time.strftime('%Y-%m-%d %H:%M:%S')}",
        f"Total Tests:  {summary['total']}",
        f"Passed:       {summary['passed']} ✓",
        f"Failed:       {summary['failed']} ✗",
        f"Skipped:      {summary['skipped']} ○",
        "",
    ]

    categories: Dict[str, List[Dict[str, Any]]] = {}
    for result in collector.results:
        categories.setdefault(result["category"], []).append(result)

    for category, results in sorted(categories.items()):
        info = TEST_CATEGORIES.get(category, {"name": category.replace("_", " ").title()})
        lines.append(f"[{info['name']}]")
        for result in results:
            status = "✓" if result["outcome"] == "passed" else "✗" if result["outcome"] == "failed" else "○"
            lines.append(f"  {status} {result['nodeid'].split('::')[-1]}")
        lines.append("")

    lines.append("=" * 80)
    return "\n".join(lines)


# =============================================================================
# PYTEST HOOKS
# =============================================================================

def pytest_configure(config):
    """Register custom markers and start the collector."""
    config.addinivalue_line(
        "markers", "config_validation: Configuration validation tests"
    )
    config.addinivalue_line(
        "markers", "source_resilience: Ranked query error isolation tests"
    )
    config.addinivalue_line(
        "markers", "bubble_scenarios: End-to-end bubble behavior tests"
    )
    config.addinivalue_line(
        "markers", "cli_behavior: CLI interface tests"
    )

    _collector.start_time = datetime.now()


def pytest_runtest_logreport(report):
    """Called after each test phase."""
    if report.when == "call":  # Only record the actual test call
        _collector.add_result(
            nodeid=report.nodeid,
            outcome=report.outcome,
            duration=report.duration,
            message=str(report.longrepr) if report.longrepr else "",
        )


def pytest_sessionfinish(session, exitstatus):
    """Save a report after all tests complete."""
    _collector.end_time = datetime.now()
    if not _collector.results:
        return

    RESULTS_DIR.mkdir(exist_ok=True)
    filepath = RESULTS_DIR / get_result_filename()
    with open(filepath, "w") as f:
        f.write(generate_formatted_report(_collector))


# =============================================================================
# SHARED FIXTURES
# =============================================================================

@pytest.fixture
def make_idea():
    """Factory for Ideas with sensible defaults."""
    from ideabubbles.models.idea import Idea

    base_time = TEST_DATA["base_time"]

    def _make(idea_id, score=0, hours_ago=0, **kwargs):
        return Idea(
            id=str(idea_id),
            title=kwargs.pop("title", f"Idea {idea_id}"),
            score=score,
            created_at=kwargs.pop("created_at", base_time - timedelta(hours=hours_ago)),
            **kwargs,
        )

    return _make


@pytest.fixture
def sample_ideas():
    """Ideas built from the shared sample rows."""
    from ideabubbles.models.idea import Idea
    return [Idea.from_dict(row) for row in get_all_idea_rows()]


@pytest.fixture
def mock_store(sample_ideas):
    """An in-memory store seeded with the sample ideas."""
    from ideabubbles.storage.supabase import MockIdeaStore
    return MockIdeaStore(sample_ideas, seed=CONFIG["seed"])


@pytest.fixture
def rng():
    """A seeded random source."""
    return random.Random(CONFIG["seed"])


@pytest.fixture
def bounds():
    """The default 100x100 coordinate space."""
    from ideabubbles.models.bubble import Bounds
    return Bounds()
