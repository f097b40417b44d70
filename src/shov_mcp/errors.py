"""Error types for shov-mcp.

All errors inherit from ShovMCPError for easy catching at the server boundary.
"""

from __future__ import annotations


class ShovMCPError(Exception):
    """Base class for all shov-mcp errors."""

    pass


class ManifestUnavailableError(ShovMCPError):
    """Raised when the manifest cannot be fetched or parsed."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Could not load manifest from {url} - {reason}")


class ManifestEmptyError(ShovMCPError):
    """Raised when the manifest declares no tools."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"No tools found in MCP manifest at {url}")


class ToolNotFoundError(ShovMCPError):
    """Raised when a tool name is not present in the manifest."""

    def __init__(
        self, tool_name: str, available_tools: list[str] | None = None
    ) -> None:
        self.tool_name = tool_name
        self.available_tools = available_tools or []
        msg = f"Tool '{tool_name}' not found"
        if self.available_tools:
            msg += f". Available: {', '.join(self.available_tools[:5])}"
            if len(self.available_tools) > 5:
                msg += f" (and {len(self.available_tools) - 5} more)"
        super().__init__(msg)


class RemoteAPIError(ShovMCPError):
    """Raised when a tool endpoint answers with a non-success status.

    Status 0 means no response was received at all; ``body`` then holds
    the transport error text.
    """

    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(f"API error ({status}): {body}")


class StreamError(ShovMCPError):
    """Raised when an event stream fails mid-read. Partial output is dropped."""

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"SSE stream error: {cause}")


class ConfigurationError(ShovMCPError):
    """Error in process configuration (missing domain or credential)."""

    pass
