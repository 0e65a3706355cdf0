"""
Tests for the Web API.

Tests the Flask routes against an in-memory store, input validation and
error handling.
"""

import pytest
from unittest.mock import Mock, patch

# Import the Flask app
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from web.app import app
from ideabubbles.errors import IdeaSubmissionError, ScoreIncrementError, SourceFetchError
from ideabubbles.storage.supabase import MockIdeaStore

from tests.test_config import CONFIG


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def client():
    """Flask test client."""
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def store(mock_store):
    """Route all requests to the shared in-memory store."""
    with patch("web.app.get_store", return_value=mock_store):
        yield mock_store


@pytest.fixture
def broken_store():
    """A store whose every call fails."""
    failing = Mock()
    failing.name = "broken"
    failing.fetch.side_effect = SourceFetchError("unreachable")
    failing.insert_idea.side_effect = IdeaSubmissionError("unreachable")
    failing.list_ideas.side_effect = SourceFetchError("unreachable")
    failing.increment_score.side_effect = ScoreIncrementError("unreachable")
    with patch("web.app.get_store", return_value=failing):
        yield failing


# =============================================================================
# Bubble groups
# =============================================================================

class TestBubbleGroupsEndpoint:
    
    def test_returns_all_groups(self, client, store):
        response = client.get("/api/ideas/bubble-groups")
        
        assert response.status_code == 200
        data = response.get_json()
        assert set(data) == {
            "newest", "mostVoted", "oldest", "random", "randomVoted", "combinedUniqueIdeas",
        }
        assert data["mostVoted"][0]["id"] == "idea_1"
        assert len(data["combinedUniqueIdeas"]) == 3
    
    def test_failed_queries_give_empty_groups(self, client, broken_store):
        response = client.get("/api/ideas/bubble-groups")
        
        assert response.status_code == 200
        assert response.get_json()["combinedUniqueIdeas"] == []


class TestBubblesEndpoint:
    
    def test_default_frame(self, client, store):
        response = client.get("/api/bubbles?seed=3")
        
        assert response.status_code == 200
        data = response.get_json()
        assert data["state"] == "ready"
        assert len(data["bubbles"]) == 3
        assert data["sources_failed"] == 0
    
    def test_seeded_frames_repeatable(self, client, store):
        first = client.get(f"/api/bubbles?seed={CONFIG['seed']}&frames=20").get_json()
        second = client.get(f"/api/bubbles?seed={CONFIG['seed']}&frames=20").get_json()
        
        assert [(b["x"], b["y"]) for b in first["bubbles"]] == \
            [(b["x"], b["y"]) for b in second["bubbles"]]
    
    def test_limit(self, client, store):
        data = client.get("/api/bubbles?limit=1").get_json()
        
        assert [b["id"] for b in data["bubbles"]] == ["idea_2"]
    
    def test_empty_state(self, client, broken_store):
        data = client.get("/api/bubbles").get_json()
        
        assert data["state"] == "empty"
        assert data["sources_failed"] == 5
    
    @pytest.mark.parametrize("query", [
        "frames=-1",
        "frames=601",
        "frames=abc",
        "limit=0",
        "limit=101",
        "seed=xyz",
    ])
    def test_invalid_parameters(self, client, store, query):
        response = client.get(f"/api/bubbles?{query}")
        
        assert response.status_code == 400
        assert "error" in response.get_json()


# =============================================================================
# Ideas
# =============================================================================

class TestSubmitIdea:
    
    def test_creates_idea(self, client, store):
        response = client.post("/api/ideas", json={
            "title": "  Sats for streaks ",
            "description": "Reward daily habits",
            "submitter_name": "",
            "tags": ["habits", " ", 3],
        })
        
        assert response.status_code == 201
        data = response.get_json()
        assert data["title"] == "Sats for streaks"
        assert data["submitter_name"] is None
        assert data["tags"] == ["habits"]
        assert store.count() == 4
    
    def test_no_body(self, client, store):
        response = client.post("/api/ideas", data="not json", content_type="text/plain")
        
        assert response.status_code == 400
        assert response.get_json()["error"] == "No data provided"
    
    def test_missing_title(self, client, store):
        response = client.post("/api/ideas", json={"title": " ", "description": "x"})
        
        assert response.status_code == 400
        assert "Catchy Headline" in response.get_json()["error"]
    
    def test_missing_description(self, client, store):
        response = client.post("/api/ideas", json={"title": "x"})
        
        assert response.status_code == 400
        assert "description" in response.get_json()["error"]
    
    def test_store_failure(self, client, broken_store):
        response = client.post("/api/ideas", json={"title": "x", "description": "y"})
        
        assert response.status_code == 500
        assert response.get_json()["error"].startswith("Failed to submit idea")


class TestListIdeas:
    
    def test_first_page(self, client, store):
        response = client.get("/api/ideas?limit=2")
        
        assert response.status_code == 200
        data = response.get_json()
        assert [i["id"] for i in data["ideas"]] == ["idea_1", "idea_3"]
        assert data["currentPage"] == 1
        assert data["totalPages"] == 2
        assert data["totalIdeas"] == 3
    
    @pytest.mark.parametrize("query", ["page=0", "page=x", "limit=0", "limit=500"])
    def test_invalid_parameters(self, client, store, query):
        assert client.get(f"/api/ideas?{query}").status_code == 400
    
    def test_store_failure(self, client, broken_store):
        response = client.get("/api/ideas")
        
        assert response.status_code == 500
        assert response.get_json()["error"] == "Failed to fetch ideas"


class TestVote:
    
    def test_vote_recorded(self, client, store):
        response = client.post("/api/ideas/vote", json={"idea_id": "idea_2"})
        
        assert response.status_code == 200
        assert response.get_json() == {"success": True, "idea_id": "idea_2"}
        assert store.get("idea_2").score == 1
    
    def test_missing_id(self, client, store):
        response = client.post("/api/ideas/vote", json={})
        
        assert response.status_code == 400
        assert response.get_json()["success"] is False
    
    def test_unknown_id(self, client, store):
        response = client.post("/api/ideas/vote", json={"idea_id": "ghost"})
        
        assert response.status_code == 500
        assert response.get_json()["message"] == "Failed to vote. Please try again."
    
    def test_store_failure(self, client, broken_store):
        response = client.post("/api/ideas/vote", json={"idea_id": "idea_1"})
        
        assert response.status_code == 500
        assert response.get_json()["success"] is False
