# ABOUTME: Main entry point for the response cache HTTP service
# ABOUTME: CLI interface to configure cache size, TTL and simulated generation, then serve requests

import argparse
import logging
import sys
from typing import List, Optional

from aiohttp import web
from pydantic import ValidationError

from service import CacheSettings, create_app

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Serve cached answers in front of a simulated generative call",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py
  python main.py --port 8080 --capacity 500 --ttl 600
  python main.py --delay 0.5 --no-coalesce --log-level DEBUG

Settings not given on the command line are read from the environment
(CACHE_CAPACITY, CACHE_TTL_SECONDS, GENERATION_DELAY, PORT, ...) or a .env file.
        """,
    )

    parser.add_argument("--host", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, help="Bind port (default: 3000)")
    parser.add_argument("--capacity", type=int, help="Maximum cached answers")
    parser.add_argument("--ttl", type=float, help="Answer time-to-live in seconds")
    parser.add_argument(
        "--delay", type=float, help="Simulated generation delay in seconds"
    )
    parser.add_argument(
        "--no-coalesce",
        action="store_true",
        help="Compute concurrent misses for the same query independently",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: INFO)",
    )
    parser.add_argument("--env-file", help="Path to a .env file")

    return parser


def load_settings(args: argparse.Namespace) -> CacheSettings:
    """Merge command line arguments over environment settings."""
    return CacheSettings.from_env(
        env_file=args.env_file,
        host=args.host,
        port=args.port,
        capacity=args.capacity,
        ttl_seconds=args.ttl,
        generation_delay=args.delay,
        coalesce_misses=False if args.no_coalesce else None,
        log_level=args.log_level,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args)
    except ValidationError as e:
        print(f"ERROR: Invalid configuration: {e}")
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(settings)
    logger.info(f"Listening on http://{settings.host}:{settings.port}")
    web.run_app(app, host=settings.host, port=settings.port, print=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
