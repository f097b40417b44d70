"""CLI entry point: serve a Shov project's tools over MCP stdio.

Usage:
    shov-mcp myapp_acme.shov.dev --api-key pk_abc123
    shov-mcp api.yourdomain.com --api-key pk_abc123
    SHOV_API_KEY=pk_abc123 shov-mcp myapp_acme.shov.dev

    # With Claude Code
    claude mcp add shov -- shov-mcp myapp_acme.shov.dev --api-key pk_abc123

Logging goes to stderr; stdout carries the MCP protocol.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from shov_mcp.config import API_KEY_ENV, ServerConfig
from shov_mcp.errors import ConfigurationError, ShovMCPError
from shov_mcp.executor import RequestExecutor
from shov_mcp.manifest import fetch_manifest
from shov_mcp.mcp_server import create_server
from shov_mcp.registry import ToolRegistry

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shov-mcp",
        description="Connect Shov APIs to AI assistants via Model Context Protocol",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  shov-mcp myapp_acme.shov.dev --api-key pk_abc123
  shov-mcp api.yourdomain.com --api-key pk_abc123
  {API_KEY_ENV}=pk_abc123 shov-mcp myapp_acme.shov.dev
        """,
    )
    parser.add_argument(
        "domain",
        nargs="?",
        help="Your Shov project domain (e.g., myapp_acme.shov.dev)",
    )
    parser.add_argument(
        "--api-key",
        dest="api_key",
        help=f"API key for authentication (or set {API_KEY_ENV} env var)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr",
    )
    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )


async def load_registry(config: ServerConfig) -> ToolRegistry:
    """Fetch the manifest once and wrap it for serving."""
    manifest = await fetch_manifest(config.base_url)
    logger.info("✓ Connected to %s", manifest.name)
    logger.info("✓ Found %d tools", len(manifest.tools))
    return ToolRegistry(manifest, RequestExecutor(config.api_key))


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = ServerConfig.from_args(args.domain, args.api_key)
    except ConfigurationError as e:
        print(f"Error: {e}\n", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    try:
        registry = asyncio.run(load_registry(config))
    except ShovMCPError as e:
        print(f"\nError: {e}\n", file=sys.stderr)
        return 1

    mcp = create_server(registry)
    logger.info("✓ MCP server started")
    mcp.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
