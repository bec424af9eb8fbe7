"""CLI entry point for SerpRelay.

Two subcommands:

- ``serprelay serve`` — run the HTTP API under uvicorn.
- ``serprelay search QUERY`` — resolve one query and print the JSON response
  (suited to cron jobs and scheduled functions). Exits 0 even when the
  response is degraded, 2 on invalid input.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from serprelay.config.settings import Settings
    from serprelay.models.query import SearchQuery
    from serprelay.models.response import SearchResponse


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point for SerpRelay."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "search":
        sys.exit(_search(args))
    _serve(args)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="serprelay",
        description="SerpRelay — Multi-provider SERP resolution with caching and graceful fallback",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"SerpRelay {_get_version()}",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    common.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )

    serve = subparsers.add_parser("serve", parents=[common], help="Run the HTTP API server")
    serve.add_argument("--host", type=str, default=None, help="Server bind address (overrides config)")
    serve.add_argument("--port", "-p", type=int, default=None, help="Server port (overrides config)")
    serve.add_argument("--workers", "-w", type=int, default=None, help="Number of worker processes")
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload for development")

    search = subparsers.add_parser("search", parents=[common], help="Resolve one query and print JSON")
    search.add_argument("query", type=str, help="Search query")
    search.add_argument("--num", "-n", type=int, default=10, help="Number of results (1-100)")
    search.add_argument("--gl", type=str, default="us", help="Geography (country code)")
    search.add_argument("--hl", type=str, default="en", help="Language code")
    search.add_argument("--type", "-t", type=str, choices=["web", "news"], default="web", help="Result type")
    search.add_argument("--no-cache", action="store_true", help="Skip the cache lookup")
    search.add_argument("--pretty", action="store_true", help="Indent the JSON output")

    return parser


def _load_settings(config: str | None) -> Settings:
    from serprelay.config.settings import Settings

    if config:
        config_path = Path(config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        return Settings.from_yaml(config_path)
    return Settings()


# ── search ──


def _search(args: argparse.Namespace) -> int:
    """Resolve one query and print the wire JSON. Returns the exit status."""
    from serprelay.models.query import SerpRequest
    from serprelay.observability.logging import setup_logging

    settings = _load_settings(args.config)
    if args.log_level:
        settings.observability.log_level = args.log_level
    # stdout carries the JSON result
    setup_logging(settings.observability, stream=sys.stderr)

    request = SerpRequest(q=args.query, num=args.num, gl=args.gl, hl=args.hl, type=args.type)
    try:
        query = request.to_search_query()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    response = asyncio.run(_resolve_once(settings, query, use_cache=not args.no_cache))
    print(json.dumps(response.to_wire(), indent=2 if args.pretty else None, ensure_ascii=False))
    return 0


async def _resolve_once(settings: Settings, query: SearchQuery, *, use_cache: bool) -> SearchResponse:
    from serprelay.service import SerpService

    async with SerpService(settings) as serp:
        return await serp.engine.resolve(query, use_cache=use_cache)


# ── serve ──


def _serve(args: argparse.Namespace) -> None:
    from serprelay.api.app import CONFIG_ENV_VAR

    settings = _load_settings(args.config)

    # Apply CLI overrides
    if args.host:
        settings.server.host = args.host
    if args.port:
        settings.server.port = args.port
    if args.workers:
        settings.server.workers = args.workers
    if args.log_level:
        settings.observability.log_level = args.log_level

    # Worker processes build the app from the factory, so hand the choices down via env
    if args.config:
        os.environ[CONFIG_ENV_VAR] = str(Path(args.config).resolve())
    os.environ["SERPRELAY_OBSERVABILITY__LOG_LEVEL"] = settings.observability.log_level

    # Check port availability before starting
    _check_port(settings.server.host, settings.server.port)

    import uvicorn

    uvicorn.run(
        "serprelay.api.app:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        workers=settings.server.workers if not args.reload else 1,
        reload=args.reload,
        log_level=settings.observability.log_level.lower(),
    )


def _check_port(host: str, port: int) -> None:
    """Check if the port is available. If not, print the blocking process and exit."""
    import socket
    import subprocess

    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.bind((host if host != "0.0.0.0" else "127.0.0.1", port))
    except OSError:
        print(f"\n  ERROR: Port {port} is already in use!", file=sys.stderr)

        try:
            result = subprocess.run(
                ["lsof", "-i", f":{port}", "-P", "-n"],
                capture_output=True,
                text=True,
                timeout=5,
            )
            lines = result.stdout.strip().splitlines()
            if lines:
                print(f"\n  Processes using port {port}:\n", file=sys.stderr)
                for line in lines:
                    print(f"    {line}", file=sys.stderr)
            else:
                print(f"\n  Could not identify the process using port {port}.", file=sys.stderr)
        except (subprocess.TimeoutExpired, FileNotFoundError):
            print(f"\n  Run 'lsof -i :{port}' to find the process.", file=sys.stderr)

        sys.exit(1)
    finally:
        sock.close()


def _get_version() -> str:
    from serprelay import __version__

    return __version__


if __name__ == "__main__":
    main()
