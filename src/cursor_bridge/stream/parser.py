"""Line parser for the Cursor Agent CLI ``stream-json`` output.

The CLI writes one JSON object per line on stdout. Recognised shapes:

* ``{"type": "assistant", "message": {"content": [{"type": "text", "text": ...}]}}``
* ``{"type": "tool_call", "subtype": "started" | "completed",
  "tool_call": {"<key>ToolCall": {"args": {...}, "result": {...}}}}``
* ``{"type": "result", "subtype": ..., "duration_ms": ...}``

Anything else that is a JSON object becomes a ``CliUnknownEvent``. Blank
or undecodable lines yield ``None``; one corrupt line never ends a stream.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class _CliModel(BaseModel):
    # The CLI adds fields freely (session_id, model_call_id, ...).
    model_config = ConfigDict(extra="ignore", frozen=True)


class CliContentBlock(_CliModel):
    type: str
    text: str = ""


class CliAssistantMessage(_CliModel):
    role: str = "assistant"
    content: list[CliContentBlock] = Field(default_factory=list)


class CliAssistantEvent(_CliModel):
    """A chunk of assistant text."""

    type: Literal["assistant"] = "assistant"
    message: CliAssistantMessage
    session_id: str | None = None

    @property
    def text_fragments(self) -> list[str]:
        return [block.text for block in self.message.content if block.type == "text"]


class CliToolResult(_CliModel):
    """Outcome of a completed tool call; at most one field is normally set."""

    success: dict[str, Any] | None = None
    rejected: dict[str, Any] | None = None
    error: dict[str, Any] | None = None


class CliToolCallPayload(_CliModel):
    args: dict[str, Any] = Field(default_factory=dict)
    result: CliToolResult | None = None


class CliToolCallEvent(_CliModel):
    """A tool call the CLI started or finished on its own."""

    type: Literal["tool_call"] = "tool_call"
    subtype: Literal["started", "completed"]
    tool_call: dict[str, CliToolCallPayload]

    @property
    def tool_key(self) -> str | None:
        """The single key naming the tool, e.g. ``shellToolCall``."""
        return next(iter(self.tool_call), None)

    @property
    def payload(self) -> CliToolCallPayload | None:
        key = self.tool_key
        return self.tool_call[key] if key is not None else None


class CliResultEvent(_CliModel):
    """Final summary line written when the CLI run ends."""

    type: Literal["result"] = "result"
    subtype: str = ""
    duration_ms: int | None = None


class CliUnknownEvent(_CliModel):
    """Any other JSON object; kept only for logging."""

    type: str = ""
    raw: dict[str, Any] = Field(default_factory=dict)


CliEvent = CliAssistantEvent | CliToolCallEvent | CliResultEvent | CliUnknownEvent

_EVENT_MODELS: dict[str, type[CliAssistantEvent | CliToolCallEvent | CliResultEvent]] = {
    "assistant": CliAssistantEvent,
    "tool_call": CliToolCallEvent,
    "result": CliResultEvent,
}


def parse_line(line: str) -> CliEvent | None:
    """Parse one stdout line into a typed event, or ``None``.

    Never raises.
    """
    stripped = line.strip()
    if not stripped:
        return None

    try:
        data = json.loads(stripped)
    except (ValueError, RecursionError):
        logger.debug("skipping malformed stream-json line: %s", stripped[:200])
        return None

    if not isinstance(data, dict):
        logger.debug("skipping non-object stream-json line: %s", stripped[:200])
        return None

    event_type = data.get("type")
    if not isinstance(event_type, str):
        return CliUnknownEvent(raw=data)

    model_cls = _EVENT_MODELS.get(event_type)
    if model_cls is None:
        return CliUnknownEvent(type=event_type, raw=data)

    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        logger.debug(
            "stream-json %r line did not match the expected shape: %s",
            event_type,
            exc.errors()[:1],
        )
        return CliUnknownEvent(type=event_type, raw=data)
