#!/usr/bin/env python3
"""
Idea Bubbles - headless bubble view runner.

Command-line entry point for one refresh of the bubble view:
  - Fetch the five ranked idea lists (Supabase, or demo data)
  - Merge them into the deduplicated working set
  - Lay out bubbles and simulate N animation frames
  - Print a summary (or the final frame as JSON)

Usage:
    python main.py                  # Fetch, aggregate, simulate 60 frames
    python main.py --mock           # Use built-in demo ideas
    python main.py --frames 300     # Simulate longer
    python main.py --json           # Dump the final frame as JSON

Examples:
    # Reproducible local run
    python main.py --mock --seed 7 --verbose

    # Production check against Supabase
    python main.py --frames 1 --quiet
"""

import argparse
import json
import random
import sys

from ideabubbles import __version__
from ideabubbles.config import (
    DISPLAY_LIMIT,
    print_config_summary,
    validate_config,
)
from ideabubbles.pipeline import (
    BubbleGroupPipeline,
    BubbleGroupResult,
    PipelineConfig,
)
from ideabubbles.scene import BubbleScene
from ideabubbles.storage import MockIdeaStore, create_store, demo_ideas


DEFAULT_FRAMES = 60


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="idea-bubbles",
        description="Fetch ranked ideas, merge them and simulate the bubble view.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                           Fetch and simulate with defaults
  %(prog)s --mock                    Use built-in demo ideas
  %(prog)s --frames 300              Simulate 300 frames
  %(prog)s --limit 5                 Show at most 5 bubbles
  %(prog)s --json                    Print the final frame as JSON
  %(prog)s -v --mock --seed 7        Verbose, reproducible demo run
        """,
    )

    # Core options
    parser.add_argument(
        "--mock", "-m",
        action="store_true",
        help="Use in-memory demo ideas instead of Supabase",
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        metavar="N",
        help="Seed for random placement and random samples",
    )

    parser.add_argument(
        "--frames", "-f",
        type=int,
        default=DEFAULT_FRAMES,
        metavar="N",
        help=f"Animation frames to simulate (default: {DEFAULT_FRAMES})",
    )

    parser.add_argument(
        "--limit", "-l",
        type=int,
        default=None,
        metavar="N",
        help=f"Maximum bubbles on screen (default: {DISPLAY_LIMIT})",
    )

    # Output options
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the final frame as JSON instead of a summary",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed progress and debug info",
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only show errors and final summary",
    )

    # Info options
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration and exit",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def show_config() -> None:
    """Display current configuration."""
    print("=" * 60)
    print("Idea Bubbles Configuration")
    print("=" * 60)
    print_config_summary()

    errors = validate_config()
    if errors:
        print("\nConfiguration warnings:")
        for error in errors:
            print(f"  ⚠️  {error}")
    else:
        print("\n✓ Configuration valid")
    print("=" * 60)


def print_scene_summary(scene: BubbleScene, frames: int) -> None:
    """Print where each bubble ended up."""
    print(f"\nBubbles after {frames} frames ({scene.display_state}):")
    for state in scene.states:
        print(
            f"  {state.color.to_hex()}  ({state.x:6.2f}, {state.y:6.2f})  "
            f"votes={state.score:<3} {state.label}"
        )
    print(f"Connector lines: {len(scene.edges)}")


def main(argv: list = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command-line arguments (default: sys.argv[1:]).

    Returns:
        Exit code (0 = success, 1 = nothing to show or all queries failed).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Handle --show-config
    if args.show_config:
        show_config()
        return 0

    if args.frames < 0:
        parser.error("--frames cannot be negative")
    if args.limit is not None and args.limit < 1:
        parser.error("--limit must be at least 1")

    quiet = args.quiet or args.json

    if not quiet:
        print("=" * 60)
        print("Idea Bubbles")
        print("=" * 60)

        if args.mock:
            print("Mode: MOCK (demo ideas, no network)")

        if args.verbose:
            print("\nConfiguration:")
            print_config_summary()
            print()

    try:
        store = MockIdeaStore(demo_ideas(), seed=args.seed) if args.mock else create_store(seed=args.seed)
        pipeline = BubbleGroupPipeline(store, PipelineConfig(verbose=args.verbose))
        scene = BubbleScene(
            display_limit=args.limit or DISPLAY_LIMIT,
            rng=random.Random(args.seed),
        )

        token = scene.begin_fetch()
        result: BubbleGroupResult = pipeline.run()
        scene.load_result(result, token)

        for _ in range(args.frames):
            scene.tick()

        if args.json:
            print(json.dumps(scene.render_payload(), indent=2))
        else:
            print(result.to_summary())
            print_scene_summary(scene, args.frames)

        if result.sources_succeeded == 0:
            # All queries failed
            return 1

        if result.is_empty:
            if not quiet:
                print("\nNo data")
            return 1

        return 0

    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130
    except Exception as e:
        print(f"\n❌ Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
