#!/usr/bin/env python3
"""CLI interface for histmatch."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import Config
from .exceptions import HistMatchError
from .loader import list_image_files
from .profiler import BatchProfiler
from .similarity import find_top_matches_for_path

logger = logging.getLogger(__name__)


def collect_targets(targets: list[str]) -> list[Path]:
    """Expand target arguments into image paths.

    Args:
        targets: Image files and/or directories of images.

    Returns:
        Image paths in argument order; directory contents are sorted.
    """
    paths: list[Path] = []
    for target in targets:
        path = Path(target)
        if path.is_dir():
            paths.extend(list_image_files(path))
        else:
            paths.append(path)
    return paths


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for histmatch.

    Parses command-line arguments, profiles the targets and prints the
    closest matches to the query image.

    Returns:
        Process exit status.
    """
    parser = argparse.ArgumentParser(
        description="Rank images by color-histogram similarity to a query image",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument("query", type=str, help="Path to the query image")
    parser.add_argument("targets", type=str, nargs="+",
                       help="Target image files or folders containing images")

    parser.add_argument("--top-k", type=int, default=5,
                       help="Number of top matches to report")
    parser.add_argument("--workers", type=int, default=1,
                       help="Number of parallel workers for profiling targets")
    parser.add_argument("--progress", action="store_true",
                       help="Show a progress bar while profiling targets")
    parser.add_argument("--json", action="store_true",
                       help="Print matches as JSON")
    parser.add_argument("--verbose", action="store_true",
                       help="Enable debug logging")

    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    )

    config = Config(top_k=args.top_k, num_workers=args.workers, show_progress=args.progress)
    try:
        config.validate()
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    # Validate inputs
    if not Path(args.query).is_file():
        print(f"Error: Query image not found: {args.query}")
        return 1

    target_paths = collect_targets(args.targets)
    if not target_paths:
        print("Error: No target images found")
        return 1

    try:
        targets = BatchProfiler(config).profile_paths(target_paths)
        matches = find_top_matches_for_path(args.query, targets, config.top_k, config)
    except HistMatchError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    if args.json:
        print(json.dumps([m.model_dump() for m in matches], indent=2))
    else:
        for rank, match in enumerate(matches, start=1):
            print(f"{rank:>3}  {match.score:8.4f}  {match.matched_id}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
