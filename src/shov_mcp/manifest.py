"""Manifest fetcher: loads the remote tool manifest once at startup."""

from __future__ import annotations

import logging

import aiohttp

from shov_mcp.config import UNBOUNDED_TIMEOUT
from shov_mcp.errors import ManifestEmptyError, ManifestUnavailableError
from shov_mcp.types import Manifest, parse_json

logger = logging.getLogger(__name__)

MANIFEST_PATH = "/mcp.json"


async def fetch_manifest(base_url: str) -> Manifest:
    """Fetch and parse ``{base_url}/mcp.json``.

    Args:
        base_url: Base URL of the remote service (no trailing slash).

    Returns:
        Parsed Manifest with at least one tool.

    Raises:
        ManifestUnavailableError: If the endpoint is unreachable, answers with
            a non-success status, or the body is not a valid manifest.
        ManifestEmptyError: If the manifest declares no tools.
    """
    url = base_url.rstrip("/") + MANIFEST_PATH

    async with aiohttp.ClientSession(timeout=UNBOUNDED_TIMEOUT) as session:
        try:
            async with session.get(url) as response:
                if not 200 <= response.status < 300:
                    raise ManifestUnavailableError(
                        url, f"Failed to fetch manifest: {response.status} {response.reason}"
                    )
                body = await response.read()
        except aiohttp.ClientError as e:
            logger.error("Error fetching MCP manifest: %s", e)
            raise ManifestUnavailableError(url, str(e)) from e

    try:
        data = parse_json(body)
    except ValueError as e:
        raise ManifestUnavailableError(url, f"invalid JSON: {e}") from e

    try:
        manifest = Manifest.from_dict(data)
    except ValueError as e:
        raise ManifestUnavailableError(url, f"invalid manifest: {e}") from e

    if not manifest.tools:
        raise ManifestEmptyError(url)

    logger.debug(
        "Loaded manifest %s %s with %d tools", manifest.name, manifest.version, len(manifest.tools)
    )
    return manifest
