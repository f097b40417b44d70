"""Request executor: issues tool HTTP calls and classifies the responses."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import aiohttp

from shov_mcp.config import UNBOUNDED_TIMEOUT, USER_AGENT
from shov_mcp.errors import RemoteAPIError
from shov_mcp.routing import stringify
from shov_mcp.stream import StreamNormalizer
from shov_mcp.types import NormalizedResult, ValueResult, parse_json

logger = logging.getLogger(__name__)

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})
EVENT_STREAM = "text/event-stream"
JSON_CONTENT = "application/json"


def build_url(url: str, query: dict[str, Any]) -> str:
    """Append query parameters to a resolved URL.

    Args:
        url: URL with path placeholders already substituted.
        query: Query parameters; values are stringified like path values.

    Returns:
        URL with an encoded query string, or the URL unchanged when
        there are no parameters.
    """
    if not query:
        return url
    encoded = urlencode({k: stringify(v) for k, v in query.items()})
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{encoded}"


class RequestExecutor:
    """Executes tool calls against the remote API.

    Usage:
        executor = RequestExecutor(credential="pk_abc123")
        result = await executor.execute("GET", "https://x/users/42", {}, {})
    """

    def __init__(self, credential: str, user_agent: str = USER_AGENT) -> None:
        self.credential = credential
        self.user_agent = user_agent

    def build_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.credential}",
            "Content-Type": JSON_CONTENT,
            "User-Agent": self.user_agent,
            "Accept": f"{JSON_CONTENT}, {EVENT_STREAM}",
        }

    async def execute(
        self,
        method: str,
        url: str,
        query: dict[str, Any],
        body: dict[str, Any],
    ) -> NormalizedResult:
        """Issue one HTTP request and normalize its response.

        Args:
            method: HTTP method.
            url: Resolved URL (path parameters substituted).
            query: Query-string parameters.
            body: Body fields; sent as JSON only for POST, PUT and PATCH.

        Returns:
            StreamResult for event streams, ValueResult otherwise.

        Raises:
            RemoteAPIError: On a non-2xx status (status and raw body kept),
                or with status 0 when no response could be obtained.
            StreamError: If an event stream breaks mid-read.
        """
        method = method.upper()
        request_url = build_url(url, query)
        payload = body if method in BODY_METHODS and body else None

        async with aiohttp.ClientSession(
            headers=self.build_headers(), timeout=UNBOUNDED_TIMEOUT
        ) as session:
            try:
                response = await session.request(method, request_url, json=payload)
            except aiohttp.ClientError as e:
                raise RemoteAPIError(0, str(e)) from e

            async with response:
                if not 200 <= response.status < 300:
                    error_text = await self._read_text(response, response.status)
                    raise RemoteAPIError(response.status, error_text)

                content_type = response.headers.get("Content-Type", "")
                if EVENT_STREAM in content_type:
                    logger.info("✓ Streaming response detected")
                    return await StreamNormalizer().consume(response.content.iter_any())

                text = await self._read_text(response, 0)
                if JSON_CONTENT in content_type:
                    try:
                        return ValueResult(payload=parse_json(text))
                    except ValueError:
                        logger.warning("Response declared JSON but did not parse; returning text")
                return ValueResult(payload=text)

    @staticmethod
    async def _read_text(response: aiohttp.ClientResponse, error_status: int) -> str:
        """Read the body as text; a failed read raises RemoteAPIError(error_status).

        Successful responses use status 0 so a 2xx is never reported as an API error.
        """
        try:
            return await response.text(errors="replace")
        except aiohttp.ClientError as e:
            raise RemoteAPIError(error_status, f"failed to read response body: {e}") from e
