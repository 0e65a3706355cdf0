"""
Idea Bubbles - Web API

A small Flask app serving the bubble view's data: the ranked idea groups,
ready-to-draw bubble frames, idea submission and voting.

Run with: python -m web.app
Or: cd web && python app.py
"""

import random
import sys
from pathlib import Path
from typing import Optional

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from flask import Flask, request, jsonify
from ideabubbles.errors import IdeaStoreError
from ideabubbles.pipeline import BubbleGroupPipeline, PipelineConfig
from ideabubbles.scene import BubbleScene
from ideabubbles.storage import IdeaStore, create_store
from ideabubbles.config import DEBUG, DISPLAY_LIMIT

app = Flask(__name__)

# Upper bound for frames simulated server-side in one request
MAX_FRAMES = 600

# Store shared by all requests (the in-memory fallback must survive between them)
_store: Optional[IdeaStore] = None


def get_store() -> IdeaStore:
    """Get the configured idea store (Supabase, or demo data when unset)."""
    global _store
    if _store is None:
        _store = create_store()
    return _store


def _parse_int(value: Optional[str], default: int) -> Optional[int]:
    """Parse an integer query parameter; None when malformed."""
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return None


def _clean_text(value) -> Optional[str]:
    """Trimmed string, or None for non-strings and blanks."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


# =============================================================================
# Bubble Data
# =============================================================================

@app.route("/api/ideas/bubble-groups")
def api_bubble_groups():
    """The five ranked groups plus their deduplicated merge."""
    try:
        result = BubbleGroupPipeline(get_store(), PipelineConfig(verbose=DEBUG)).run()
    except Exception as e:
        print(f"[web] Bubble groups error: {e}")
        return jsonify({"error": str(e)}), 500

    return jsonify(result.to_dict())


@app.route("/api/bubbles")
def api_bubbles():
    """Bubble states and connector lines, optionally advanced N frames."""
    seed_raw = request.args.get("seed")
    seed = _parse_int(seed_raw, None)
    frames = _parse_int(request.args.get("frames"), 0)
    limit = _parse_int(request.args.get("limit"), DISPLAY_LIMIT)

    if frames is None or frames < 0 or frames > MAX_FRAMES:
        return jsonify({"error": f"Invalid frames value (must be 0-{MAX_FRAMES})"}), 400
    if limit is None or limit < 1 or limit > 100:
        return jsonify({"error": "Invalid limit value (must be 1-100)"}), 400
    if seed_raw and seed is None:
        return jsonify({"error": "Invalid seed"}), 400

    try:
        result = BubbleGroupPipeline(get_store(), PipelineConfig(verbose=DEBUG)).run()
    except Exception as e:
        print(f"[web] Bubble frame error: {e}")
        return jsonify({"error": str(e)}), 500

    scene = BubbleScene(display_limit=limit, rng=random.Random(seed))
    scene.load_result(result)
    for _ in range(frames):
        scene.tick()

    payload = scene.render_payload()
    payload["sources_failed"] = result.sources_failed
    return jsonify(payload)


# =============================================================================
# Ideas
# =============================================================================

@app.route("/api/ideas", methods=["POST"])
def api_submit_idea():
    """Submit a new idea."""
    data = request.get_json(silent=True)

    if not isinstance(data, dict):
        return jsonify({"error": "No data provided"}), 400

    title = _clean_text(data.get("title"))
    description = _clean_text(data.get("description"))

    if not title:
        return jsonify({"error": "Catchy Headline is required and cannot be empty."}), 400
    if not description:
        return jsonify({"error": "Idea description is required and cannot be empty."}), 400

    tags = data.get("tags")
    clean_tags = None
    if isinstance(tags, list):
        clean_tags = [t.strip() for t in tags if isinstance(t, str) and t.strip()] or None

    try:
        idea = get_store().insert_idea(
            title=title,
            description=description,
            submitter_name=_clean_text(data.get("submitter_name")),
            lightning_address=_clean_text(data.get("lightning_address")),
            tags=clean_tags,
        )
    except IdeaStoreError as e:
        return jsonify({
            "error": "Failed to submit idea. Please try again later.",
            "details": str(e),
        }), 500

    return jsonify(idea.to_dict()), 201


@app.route("/api/ideas", methods=["GET"])
def api_list_ideas():
    """Paginated ideas, most voted first."""
    page = _parse_int(request.args.get("page"), 1)
    limit = _parse_int(request.args.get("limit"), 10)

    if page is None or page < 1:
        return jsonify({"error": "Invalid page number"}), 400
    if limit is None or limit < 1 or limit > 100:
        return jsonify({"error": "Invalid limit value (must be 1-100)"}), 400

    try:
        idea_page = get_store().list_ideas(page=page, limit=limit)
    except IdeaStoreError as e:
        print(f"[web] Fetch error: {e}")
        return jsonify({"error": "Failed to fetch ideas", "details": str(e)}), 500

    return jsonify(idea_page.to_dict())


@app.route("/api/ideas/vote", methods=["POST"])
def api_vote():
    """Add one vote to an idea."""
    data = request.get_json(silent=True) or {}
    idea_id = _clean_text(data.get("idea_id")) if isinstance(data, dict) else None

    if not idea_id:
        return jsonify({"success": False, "message": "idea_id is required"}), 400

    try:
        get_store().increment_score(idea_id)
    except IdeaStoreError as e:
        print(f"[web] Vote error: {e}")
        return jsonify({
            "success": False,
            "message": "Failed to vote. Please try again.",
        }), 500

    return jsonify({"success": True, "idea_id": idea_id})


if __name__ == "__main__":
    print("=" * 50)
    print("Idea Bubbles API")
    print("=" * 50)
    print("Open http://localhost:5001/api/bubbles in your browser")
    print("Press Ctrl+C to stop")
    print("=" * 50)
    app.run(debug=True, port=5001)
