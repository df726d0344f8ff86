"""CLI entry point for the Perplexity MCP server.

Usage:
    perplexity-mcp                          # same as `serve`
    perplexity-mcp serve --log-level DEBUG
    perplexity-mcp print-config --project-dir . --domain-filter "arxiv.org,-reddit.com"
"""

import argparse
import logging
import os
import sys
from pathlib import Path

import anyio
from dotenv import load_dotenv

from perplexity_mcp import settings
from perplexity_mcp.errors import ConfigError

logger = logging.getLogger(__name__)


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _configure_logging(level: str) -> None:
    # stdout carries the MCP stream, so logs must go to stderr.
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the MCP server on stdio."""
    from perplexity_mcp.server import run_stdio

    load_dotenv()
    level = (args.log_level or os.environ.get(settings.ENV_LOG_LEVEL) or settings.DEFAULT_LOG_LEVEL).upper()
    if level not in _LOG_LEVELS:
        print(f"Error: invalid log level {level!r}; expected one of {', '.join(_LOG_LEVELS)}", file=sys.stderr)
        sys.exit(1)
    _configure_logging(level)

    try:
        config = settings.load_settings()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    try:
        anyio.run(run_stdio, config)
    except Exception:  # noqa: BLE001
        logger.exception("Fatal error running server")
        sys.exit(1)


def cmd_print_config(args: argparse.Namespace) -> None:
    """Print the mcpServers block for an MCP client config file."""
    from perplexity_mcp.mcp_config import render_mcp_config

    load_dotenv()
    api_key = None
    if args.include_key:
        api_key = os.environ.get(settings.ENV_API_KEY)
        if not api_key:
            print(f"Error: {settings.ENV_API_KEY} is not set; cannot use --include-key", file=sys.stderr)
            sys.exit(1)

    domain_filter = list(settings.parse_domain_filter(args.domain_filter)) or None
    sys.stdout.write(render_mcp_config(
        project_dir=args.project_dir.resolve() if args.project_dir else None,
        domain_filter=domain_filter,
        api_key=api_key,
    ))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="perplexity-mcp",
        description="MCP server exposing Perplexity ask, research and reason tools",
    )
    subparsers = parser.add_subparsers(dest="command")

    # serve
    p_serve = subparsers.add_parser("serve", help="Run the MCP server on stdio (default)")
    p_serve.add_argument("--log-level", type=str, default=None, help="Logging level (default: $LOG_LEVEL or INFO)")
    p_serve.set_defaults(func=cmd_serve)

    # print-config
    p_config = subparsers.add_parser("print-config", help="Print an MCP client config snippet")
    p_config.add_argument("--project-dir", type=Path, default=None, help="Launch via `uv --directory <dir>` instead of this interpreter")
    p_config.add_argument("--domain-filter", type=str, default=None, help="Comma-separated default search domain filter")
    p_config.add_argument("--include-key", action="store_true", help=f"Embed ${settings.ENV_API_KEY} instead of a placeholder")
    p_config.set_defaults(func=cmd_print_config)

    args = parser.parse_args(argv)
    if args.command is None:
        args = parser.parse_args(["serve"])
    args.func(args)


if __name__ == "__main__":
    main()
