"""shov-mcp: serve a remote HTTP API's manifest tools over MCP."""

# All errors (foundational)
from shov_mcp.errors import (
    ConfigurationError,
    ManifestEmptyError,
    ManifestUnavailableError,
    RemoteAPIError,
    ShovMCPError,
    StreamError,
    ToolNotFoundError,
)
from shov_mcp.executor import RequestExecutor
from shov_mcp.manifest import fetch_manifest
from shov_mcp.registry import ToolRegistry
from shov_mcp.routing import classify_arguments
from shov_mcp.stream import StreamNormalizer

# Core types (foundational, used everywhere)
from shov_mcp.types import (
    ClassifiedArguments,
    HandlerSpec,
    Manifest,
    StreamEvent,
    StreamResult,
    ToolDescriptor,
    ValueResult,
)

__version__ = "1.0.0"

__all__ = [
    # Core
    "fetch_manifest",
    "classify_arguments",
    "RequestExecutor",
    "StreamNormalizer",
    "ToolRegistry",
    # Types
    "ClassifiedArguments",
    "HandlerSpec",
    "Manifest",
    "StreamEvent",
    "StreamResult",
    "ToolDescriptor",
    "ValueResult",
    # Errors
    "ShovMCPError",
    "ManifestUnavailableError",
    "ManifestEmptyError",
    "ToolNotFoundError",
    "RemoteAPIError",
    "StreamError",
    "ConfigurationError",
]
