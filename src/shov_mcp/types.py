"""Core type definitions for shov-mcp."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Literal, Union

# Arguments and payloads are whatever the remote API speaks.
JsonValue = Any

DEFAULT_MANIFEST_NAME = "shov-mcp"
DEFAULT_MANIFEST_VERSION = "1.0.0"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant: {name}")


def parse_json(data: str | bytes) -> JsonValue:
    """Parse strict JSON: NaN, Infinity and -Infinity are rejected.

    Raises:
        ValueError: If the input is not valid JSON (including bad UTF-8).
    """
    return json.loads(data, parse_constant=_reject_constant)


@dataclass(frozen=True)
class HandlerSpec:
    """HTTP binding of a tool: method plus URL template with {param} placeholders."""

    method: str
    url: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HandlerSpec:
        """Create HandlerSpec from manifest dict representation.

        Raises:
            ValueError: If the handler has no URL.
        """
        url = data.get("url")
        if not url or not isinstance(url, str):
            raise ValueError("handler is missing 'url'")
        method = data.get("method") or "GET"
        return cls(method=str(method).upper(), url=url)


@dataclass(frozen=True)
class ToolDescriptor:
    """A tool published by the remote service."""

    name: str
    description: str
    input_schema: dict[str, Any]
    handler: HandlerSpec

    def to_dict(self) -> dict[str, Any]:
        """Protocol-visible projection (no handler details)."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToolDescriptor:
        """Create ToolDescriptor from manifest dict representation.

        Raises:
            ValueError: If the entry has no name or no usable handler.
        """
        if not isinstance(data, dict):
            raise ValueError(f"tool entry must be an object, got {type(data).__name__}")
        name = data.get("name")
        if not name or not isinstance(name, str):
            raise ValueError("tool entry is missing 'name'")
        handler = data.get("handler")
        if not isinstance(handler, dict):
            raise ValueError(f"tool '{name}' is missing 'handler'")
        try:
            handler_spec = HandlerSpec.from_dict(handler)
        except ValueError as e:
            raise ValueError(f"tool '{name}': {e}") from e

        input_schema = data.get("inputSchema")
        if not isinstance(input_schema, dict):
            input_schema = {"type": "object", "properties": {}}

        return cls(
            name=name,
            description=data.get("description") or "",
            input_schema=input_schema,
            handler=handler_spec,
        )


@dataclass(frozen=True)
class Manifest:
    """Server-published description of the available tools.

    Fetched once at startup and never mutated afterwards.
    """

    name: str
    version: str
    tools: tuple[ToolDescriptor, ...] = ()

    def tool_names(self) -> list[str]:
        return [t.name for t in self.tools]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Manifest:
        """Create Manifest from its JSON document.

        Raises:
            ValueError: If the document is not a manifest or tool names repeat.
        """
        if not isinstance(data, dict):
            raise ValueError(f"manifest must be an object, got {type(data).__name__}")

        raw_tools = data.get("tools") or []
        if not isinstance(raw_tools, list):
            raise ValueError("'tools' must be a list")

        tools = []
        seen: set[str] = set()
        for raw in raw_tools:
            tool = ToolDescriptor.from_dict(raw)
            if tool.name in seen:
                raise ValueError(f"duplicate tool name '{tool.name}'")
            seen.add(tool.name)
            tools.append(tool)

        return cls(
            name=data.get("name") or DEFAULT_MANIFEST_NAME,
            version=data.get("version") or DEFAULT_MANIFEST_VERSION,
            tools=tuple(tools),
        )


@dataclass(frozen=True)
class InvocationRequest:
    """A single tools/call: tool name plus caller arguments."""

    tool_name: str
    arguments: dict[str, JsonValue] = field(default_factory=dict)


@dataclass
class ClassifiedArguments:
    """Invocation arguments partitioned by where they travel.

    Every argument key lands in exactly one of path, query, or body.
    """

    url: str
    path: dict[str, JsonValue] = field(default_factory=dict)
    query: dict[str, JsonValue] = field(default_factory=dict)
    body: dict[str, JsonValue] = field(default_factory=dict)


@dataclass(frozen=True)
class StreamEvent:
    """One decoded ``data:`` line of an event stream."""

    type: str | None
    data: JsonValue

    def to_dict(self) -> JsonValue:
        """Return the payload as the remote sent it."""
        return self.data


@dataclass(frozen=True)
class ValueResult:
    """A single JSON or text payload."""

    payload: JsonValue
    kind: Literal["value"] = "value"

    def to_dict(self) -> JsonValue:
        return self.payload


@dataclass(frozen=True)
class StreamResult:
    """The folded outcome of an event stream."""

    accumulated_text: str = ""
    events: tuple[StreamEvent, ...] = ()
    message: str | None = None
    kind: Literal["stream"] = "stream"

    @property
    def event_count(self) -> int:
        return len(self.events)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire shape returned to tool-calling clients.

        Text is only included when something was accumulated; an empty
        stream carries an explanatory message instead.
        """
        result: dict[str, Any] = {"type": "stream"}
        if self.accumulated_text:
            result["content"] = self.accumulated_text
        if self.message:
            result["message"] = self.message
        result["events"] = [e.to_dict() for e in self.events]
        result["eventCount"] = self.event_count
        return result


NormalizedResult = Union[ValueResult, StreamResult]
