"""MCP server exposing manifest tools to MCP clients.

Every tool in the manifest becomes one MCP tool whose input schema is the
manifest's ``inputSchema``. A call is routed through the ToolRegistry and the
normalized result is returned as pretty-printed JSON text.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult

from shov_mcp.errors import ShovMCPError
from shov_mcp.registry import ToolRegistry
from shov_mcp.types import NormalizedResult

logger = logging.getLogger(__name__)


def render_result(result: NormalizedResult) -> str:
    """Format a normalized result as the text content returned to the client."""
    return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)


class ManifestTool(Tool):
    """An MCP tool backed by one manifest entry.

    ``call`` receives the raw argument dict; no local schema validation is
    done, the remote API is the authority.
    """

    call: Callable[[dict[str, Any]], Awaitable[NormalizedResult]]

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        try:
            result = await self.call(arguments or {})
        except ShovMCPError as e:
            logger.error("✗ Error calling tool: %s", e)
            raise ToolError(str(e)) from e
        return ToolResult(content=render_result(result))


def create_server(registry: ToolRegistry) -> FastMCP:
    """Build a FastMCP server publishing every tool in the registry's manifest.

    Tools are registered in manifest order, which is the order clients see.
    """
    manifest = registry.manifest
    mcp = FastMCP(manifest.name, version=manifest.version)

    for descriptor in manifest.tools:

        async def call(arguments: dict[str, Any], _name: str = descriptor.name) -> NormalizedResult:
            return await registry.invoke(_name, arguments)

        mcp.add_tool(
            ManifestTool(
                name=descriptor.name,
                description=descriptor.description,
                parameters=descriptor.input_schema,
                call=call,
            )
        )

    return mcp
