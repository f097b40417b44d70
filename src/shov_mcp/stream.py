"""Server-Sent Events normalization.

Folds an incrementally delivered ``text/event-stream`` body into a single
StreamResult. The normalizer is a small state machine advanced one read at
a time, so it can be driven by any source of byte chunks:

    normalizer = StreamNormalizer()
    for chunk in chunks:
        normalizer.feed(chunk)
    result = normalizer.finish()

or, for an aiohttp response body:

    result = await StreamNormalizer().consume(response.content.iter_any())
"""

from __future__ import annotations

import asyncio
import codecs
import json
import logging
from collections.abc import AsyncIterable
from enum import Enum
from typing import Any

from shov_mcp.errors import StreamError
from shov_mcp.types import StreamEvent, StreamResult, parse_json

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"
TEXT_EVENT_TYPES = frozenset({"chunk", "delta"})
EMPTY_STREAM_MESSAGE = "Stream completed with no data"


class StreamState(Enum):
    READING = "reading"
    DONE = "done"
    FAILED = "failed"


def event_text(event: dict[str, Any]) -> str:
    """Text carried by a chunk/delta event.

    ``content`` wins when it is non-empty, otherwise ``text`` is used.
    """
    value = event.get("content") or event.get("text") or ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


class StreamNormalizer:
    """Step-wise consumer of an event stream.

    The carry-over line buffer and the incremental decoder live on the
    instance, so a line split across reads is reassembled on the next feed().
    """

    def __init__(self) -> None:
        self.state = StreamState.READING
        self.buffer = ""
        self.events: list[StreamEvent] = []
        self.text_parts: list[str] = []
        self._decoder = codecs.getincrementaldecoder("utf-8")()

    @property
    def accumulated_text(self) -> str:
        return "".join(self.text_parts)

    def feed(self, chunk: bytes) -> None:
        """Process one read worth of bytes.

        Raises:
            StreamError: If the bytes are not valid UTF-8.
            RuntimeError: If the stream already finished or failed.
        """
        self._check_reading()
        try:
            self.buffer += self._decoder.decode(chunk)
        except UnicodeDecodeError as e:
            raise self.fail(e) from e

        *lines, self.buffer = self.buffer.split("\n")
        for line in lines:
            self._handle_line(line.rstrip("\r"))

    def finish(self) -> StreamResult:
        """Mark the stream exhausted and build the result.

        An unterminated trailing fragment is not a complete line and is
        dropped.

        Raises:
            StreamError: If the stream ends inside a multi-byte character.
        """
        self._check_reading()
        try:
            self.buffer += self._decoder.decode(b"", final=True)
        except UnicodeDecodeError as e:
            raise self.fail(e) from e

        if self.buffer:
            logger.debug("Discarding unterminated stream fragment: %r", self.buffer)
        self.buffer = ""
        self.state = StreamState.DONE
        logger.info("✓ Stream complete (%d events)", len(self.events))

        text = self.accumulated_text
        if text:
            return StreamResult(accumulated_text=text, events=tuple(self.events))
        if self.events:
            return StreamResult(events=tuple(self.events))
        return StreamResult(message=EMPTY_STREAM_MESSAGE)

    def fail(self, cause: BaseException) -> StreamError:
        """Move to FAILED, discard partial state, and return the error to raise."""
        self.state = StreamState.FAILED
        self.buffer = ""
        self.events = []
        self.text_parts = []
        self._decoder.reset()
        logger.error("✗ Stream error: %s", cause)
        return StreamError(cause)

    async def consume(self, chunks: AsyncIterable[bytes]) -> StreamResult:
        """Drive the normalizer from an async byte source until it is exhausted.

        Raises:
            StreamError: If reading or decoding fails.
            asyncio.CancelledError: Propagated after partial state is dropped.
        """
        try:
            async for chunk in chunks:
                self.feed(chunk)
        except StreamError:
            raise
        except asyncio.CancelledError:
            self.fail(asyncio.CancelledError("stream read cancelled"))
            raise
        except Exception as e:
            raise self.fail(e) from e
        return self.finish()

    def _check_reading(self) -> None:
        if self.state is not StreamState.READING:
            raise RuntimeError(f"Stream is {self.state.value}, cannot continue reading")

    def _handle_line(self, line: str) -> None:
        if not line.startswith(DATA_PREFIX):
            return
        payload = line[len(DATA_PREFIX):]
        if payload == DONE_SENTINEL:
            return

        try:
            parsed = parse_json(payload)
        except ValueError:
            self.events.append(StreamEvent(type="text", data={"type": "text", "content": payload}))
            self.text_parts.append(payload)
            return

        if not isinstance(parsed, dict):
            self.events.append(StreamEvent(type=None, data=parsed))
            return

        event_type = parsed.get("type")
        if not isinstance(event_type, str):
            event_type = None
        self.events.append(StreamEvent(type=event_type, data=parsed))

        if event_type in TEXT_EVENT_TYPES:
            self.text_parts.append(event_text(parsed))
        elif event_type == "progress":
            logger.info("  Progress: %s", parsed.get("message") or parsed.get("status"))
        elif event_type == "error":
            logger.warning("  Error event: %s", parsed.get("error") or parsed.get("message"))
