"""Command-line interface for running a Project Pulse analysis."""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from .sample_data import sample_project_data
from .service import run_project_analysis
from .utils.config import get_config
from .utils.logging import configure_logging, get_logger


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command-line arguments.

    Args:
        argv: Argument list, defaults to ``sys.argv[1:]``

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="project-pulse",
        description="Multi-agent project health analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Analyse the built-in sample project
  project-pulse analyze --sample

  # Analyse an exported project with a 30 second deadline
  project-pulse analyze --input project.json --timeout 30
        """
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyse a project snapshot")
    source_group = analyze.add_mutually_exclusive_group(required=True)
    source_group.add_argument(
        "--input",
        type=Path,
        help="JSON file containing the project snapshot"
    )
    source_group.add_argument(
        "--sample",
        action="store_true",
        help="Analyse the built-in sample project"
    )
    analyze.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait before returning the static fallback analysis"
    )
    analyze.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON"
    )
    analyze.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (defaults to the configured level)"
    )

    return parser.parse_args(argv)


async def run_analyze(args) -> int:
    logger = get_logger(__name__)

    if args.sample:
        project_data = sample_project_data()
    else:
        try:
            with open(args.input, "r", encoding="utf-8") as f:
                project_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read project file {args.input}: {e}")
            return 1

    result = await run_project_analysis(project_data, timeout_seconds=args.timeout)
    print(result.model_dump_json(indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    args = parse_arguments(argv)
    config = get_config()
    configure_logging(
        level=args.log_level or config.log_level,
        json_format=args.json_logs or config.json_logging,
    )

    if args.command == "analyze":
        return asyncio.run(run_analyze(args))
    return 2


if __name__ == "__main__":
    sys.exit(main())
