"""Command line entry point: run the HTTP service or a single search."""

from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

from loguru import logger

from websearch.config.loader import load_config
from websearch.search import InvalidEngineError, SearchOrchestrator
from websearch.search.orchestrator import DEFAULT_MAX_LINKS
from websearch.search.strategies import STRATEGIES


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="websearch", description=__doc__)
    parser.add_argument("--config", type=Path, default=None, help="Path to config.json")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    search = commands.add_parser("search", help="Run one search and print JSON")
    search.add_argument("engine", help=f"one of: {', '.join(STRATEGIES)}")
    search.add_argument("query")
    search.add_argument("--images", action="store_true", help="Also collect images")
    search.add_argument("--max-links", type=int, default=DEFAULT_MAX_LINKS)
    return parser


def run_search(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    orchestrator = SearchOrchestrator(config.session)
    try:
        result = asyncio.run(
            orchestrator.search(
                args.engine,
                args.query,
                include_images=args.images,
                max_links=args.max_links,
            )
        )
    except InvalidEngineError as e:
        logger.error("{}", e)
        return 2
    except Exception as e:
        logger.error("Search failed: {}", e)
        return 1

    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    return 0


def run_server(args: argparse.Namespace) -> int:
    import uvicorn

    from websearch.api import create_app

    config = load_config(args.config)
    host = args.host or config.server.host
    port = args.port or config.server.port
    uvicorn.run(create_app(config), host=host, port=port)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "serve":
        return run_server(args)
    return run_search(args)


if __name__ == "__main__":
    raise SystemExit(main())
