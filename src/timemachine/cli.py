"""Command line utilities for synthesizing and resetting repository history."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
import sys
from pathlib import Path
from typing import Iterable

from .config import TimeMachineConfig
from .errors import RepositoryError, RequestValidationFailure
from .git.driver import GitDriver
from .history import generate_history, reset_history
from .synth import CommitSynthesizer
from .validation import validate_history_request

logger = logging.getLogger(__name__)


def _resolve_config(args: argparse.Namespace) -> TimeMachineConfig:
    config = TimeMachineConfig()
    if args.repo is not None:
        config.repo_path = args.repo
    if getattr(args, "host", None):
        config.host = args.host
    if getattr(args, "port", None):
        config.port = args.port
    return config


def _serve(args: argparse.Namespace) -> None:
    """Start the HTTP server."""
    import uvicorn

    from .api import create_app

    config = _resolve_config(args)
    app = create_app(config)
    logger.info("TimeMachine active at http://%s:%d", config.host, config.port)
    logger.info("Repository: %s", config.resolved_repo_path())
    uvicorn.run(app, host=config.host, port=config.port, workers=1)


def _serve_mcp(args: argparse.Namespace) -> None:
    """Start the MCP server on stdio."""
    from .mcp import create_server

    config = _resolve_config(args)
    server = create_server(config)
    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        logger.info("Shutting down MCP server")


def _generate(args: argparse.Namespace) -> int:
    config = _resolve_config(args)
    payload = {"startDate": args.start, "endDate": args.end}
    if args.intensity is not None:
        payload["intensity"] = args.intensity

    try:
        request = validate_history_request(payload, config.default_intensity)
    except RequestValidationFailure as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    driver = GitDriver(config)
    rng = random.Random(args.seed) if args.seed is not None else None
    synthesizer = CommitSynthesizer(driver, config, rng)
    try:
        result = generate_history(request, driver, synthesizer)
    except RepositoryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    print(f"Synthesized {result.total_commits} commits across {result.days_visited} days")
    print(f"  Repository : {config.resolved_repo_path()}")
    print(f"  Intensity  : {request.intensity}")
    if result.failed_events:
        print(f"  Failed     : {result.failed_events}")
    for timestamp in result.commits:
        print(f"  ✓ {timestamp}")
    return 0


def _reset(args: argparse.Namespace) -> int:
    config = _resolve_config(args)
    try:
        result = reset_history(GitDriver(config))
    except RepositoryError as e:
        print(f"Reset failed: {e}", file=sys.stderr)
        return 1

    print(result.message)
    if result.reset_to:
        print(f"  Reset to: {result.reset_to[:8]}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--repo",
        type=Path,
        help="Repository work tree to operate on (defaults to the current directory)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP server")
    serve_parser.add_argument("--host", help="Interface to bind (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, help="Port to listen on (default: 3000)")
    serve_parser.set_defaults(func=_serve)

    mcp_parser = subparsers.add_parser("mcp", help="Start the MCP server on stdio")
    mcp_parser.set_defaults(func=_serve_mcp)

    generate_parser = subparsers.add_parser("generate", help="Synthesize history for a date range")
    generate_parser.add_argument("start", help="First day, ISO format (e.g. 2024-01-01)")
    generate_parser.add_argument("end", help="Last day, inclusive")
    generate_parser.add_argument(
        "--intensity",
        help="Weekday commit probability between 0 and 1 (default: 0.5)",
    )
    generate_parser.add_argument("--seed", type=int, help="Seed for reproducible runs")
    generate_parser.add_argument("--json", action="store_true", help="Print the JSON summary")
    generate_parser.set_defaults(func=_generate)

    reset_parser = subparsers.add_parser("reset", help="Reset history to the root commit")
    reset_parser.set_defaults(func=_reset)

    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args) or 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
