"""Tool registry: serves manifest tools and routes invocations to HTTP calls."""

from __future__ import annotations

import logging
from typing import Any

from shov_mcp.errors import ToolNotFoundError
from shov_mcp.executor import RequestExecutor
from shov_mcp.routing import classify_arguments
from shov_mcp.types import InvocationRequest, Manifest, NormalizedResult, ToolDescriptor

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Read-only view over a fetched manifest plus the executor that calls it.

    The manifest is handed in fully built and never changed afterwards, so
    the registry needs no locking.

    Usage:
        manifest = await fetch_manifest(config.base_url)
        registry = ToolRegistry(manifest, RequestExecutor(config.api_key))
        result = await registry.invoke("get_user", {"id": "42"})
    """

    def __init__(self, manifest: Manifest, executor: RequestExecutor) -> None:
        self._manifest = manifest
        self._executor = executor
        self._tools: dict[str, ToolDescriptor] = {t.name: t for t in manifest.tools}

    @property
    def manifest(self) -> Manifest:
        return self._manifest

    def list_tools(self) -> list[dict[str, Any]]:
        """Protocol-visible tool descriptors, in manifest order."""
        return [tool.to_dict() for tool in self._manifest.tools]

    def get_tool(self, name: str) -> ToolDescriptor:
        """Look up a tool by exact name.

        Raises:
            ToolNotFoundError: If no tool has that name.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name, self._manifest.tool_names())
        return tool

    async def invoke(self, name: str, arguments: dict[str, Any] | None = None) -> NormalizedResult:
        """Call a tool's HTTP endpoint with the given arguments.

        Raises:
            ToolNotFoundError: If the tool is not in the manifest.
            RemoteAPIError: If the endpoint answers with a non-success status.
            StreamError: If a streamed response breaks mid-read.
        """
        request = InvocationRequest(tool_name=name, arguments=dict(arguments or {}))
        tool = self.get_tool(request.tool_name)
        handler = tool.handler

        logger.info("→ Calling %s %s", handler.method, handler.url)

        routed = classify_arguments(handler.url, handler.method, request.arguments)
        return await self._executor.execute(
            handler.method, routed.url, routed.query, routed.body
        )
