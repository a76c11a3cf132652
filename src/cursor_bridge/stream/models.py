"""Pydantic v2 models for conversations, assistant output, and stream events."""

from __future__ import annotations

import time
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag

from cursor_bridge.constants import PROVIDER_API, PROVIDER_NAME

# --------------------------------------------------------------------------- #
# Content blocks
# --------------------------------------------------------------------------- #


class TextContent(BaseModel):
    """A text block. Mutable: the translator appends to ``text`` in place."""

    model_config = ConfigDict(extra="forbid")

    type: Literal["text"] = "text"
    text: str = ""


class ImageContent(BaseModel):
    """An inline base64 image attached to a user or tool-result message."""

    model_config = ConfigDict(extra="forbid")

    type: Literal["image"] = "image"
    data: str = Field(description="Base64-encoded image bytes")
    mime_type: str = Field(description="MIME type, e.g. image/png")


ContentBlock = Annotated[TextContent | ImageContent, Field(discriminator="type")]


# --------------------------------------------------------------------------- #
# Messages
# --------------------------------------------------------------------------- #


class Cost(BaseModel):
    input: float = 0.0
    output: float = 0.0
    cache_read: float = 0.0
    cache_write: float = 0.0
    total: float = 0.0


class Usage(BaseModel):
    """Token counters. The CLI does not report usage, so these stay zero."""

    input: int = 0
    output: int = 0
    cache_read: int = 0
    cache_write: int = 0
    total_tokens: int = 0
    cost: Cost = Field(default_factory=Cost)


StopReason = Literal["running", "stop", "aborted", "error"]


def _now_ms() -> int:
    return int(time.time() * 1000)


class AssistantMessage(BaseModel):
    """An assistant turn, both in history and as the streamed output.

    While streaming, a single translator owns the instance and mutates it;
    ``stop_reason`` leaves ``"running"`` exactly once, at finalisation.
    """

    model_config = ConfigDict(extra="forbid")

    role: Literal["assistant"] = "assistant"
    content: list[TextContent] = Field(default_factory=list)
    api: str = PROVIDER_API
    provider: str = PROVIDER_NAME
    model: str = Field(default="", description="Originating model identifier")
    usage: Usage = Field(default_factory=Usage)
    stop_reason: StopReason = "running"
    error_message: str | None = None
    timestamp: int = Field(default_factory=_now_ms)

    @property
    def text(self) -> str:
        """All text blocks joined together."""
        return "".join(block.text for block in self.content)


class UserMessage(BaseModel):
    model_config = ConfigDict(extra="forbid")

    role: Literal["user"] = "user"
    content: str | list[ContentBlock]
    timestamp: int = Field(default_factory=_now_ms)


class ToolResultMessage(BaseModel):
    model_config = ConfigDict(extra="forbid")

    role: Literal["toolResult"] = "toolResult"
    tool_call_id: str = ""
    tool_name: str
    content: list[ContentBlock] = Field(default_factory=list)
    is_error: bool = False
    timestamp: int = Field(default_factory=_now_ms)


Message = Annotated[
    UserMessage | AssistantMessage | ToolResultMessage,
    Field(discriminator="role"),
]


class Context(BaseModel):
    """Conversation snapshot handed to a streaming call."""

    system_prompt: str | None = None
    messages: list[Message] = Field(default_factory=list)


class ModelInfo(BaseModel):
    """The host's view of the model a request is routed to."""

    model_config = ConfigDict(frozen=True)

    id: str
    api: str = PROVIDER_API
    provider: str = PROVIDER_NAME


# --------------------------------------------------------------------------- #
# Outbound stream events
# --------------------------------------------------------------------------- #


class _EventBase(BaseModel):
    """Common config for every outbound stream event.

    ``partial`` / ``message`` / ``error`` reference the live output message,
    not a copy; take ``model_copy(deep=True)`` to keep a point-in-time view.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)


class StartEvent(_EventBase):
    type: Literal["start"] = "start"
    partial: AssistantMessage


class TextStartEvent(_EventBase):
    type: Literal["text_start"] = "text_start"
    content_index: int = Field(ge=0)
    partial: AssistantMessage


class TextDeltaEvent(_EventBase):
    type: Literal["text_delta"] = "text_delta"
    content_index: int = Field(ge=0)
    delta: str = Field(description="Only the newly appended fragment")
    partial: AssistantMessage


class TextEndEvent(_EventBase):
    type: Literal["text_end"] = "text_end"
    content_index: int = Field(ge=0)
    content: str = Field(description="Full accumulated text of the block")
    partial: AssistantMessage


class DoneEvent(_EventBase):
    type: Literal["done"] = "done"
    reason: Literal["stop"] = "stop"
    message: AssistantMessage


class ErrorEvent(_EventBase):
    type: Literal["error"] = "error"
    reason: Literal["aborted", "error"]
    error: AssistantMessage


def _event_discriminator(v: Any) -> str:
    """Extract the discriminator value from raw data or a model instance."""
    if isinstance(v, dict):
        return str(v.get("type", ""))
    return str(getattr(v, "type", ""))


AssistantMessageEvent = Annotated[
    Annotated[StartEvent, Tag("start")]
    | Annotated[TextStartEvent, Tag("text_start")]
    | Annotated[TextDeltaEvent, Tag("text_delta")]
    | Annotated[TextEndEvent, Tag("text_end")]
    | Annotated[DoneEvent, Tag("done")]
    | Annotated[ErrorEvent, Tag("error")],
    Discriminator(_event_discriminator),
]
"""Discriminated union of all outbound stream events."""

TERMINAL_EVENT_TYPES = frozenset({"done", "error"})
