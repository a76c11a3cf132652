"""Streaming translation from Cursor CLI stream-json to assistant events."""

from cursor_bridge.stream.cancel import CancelToken
from cursor_bridge.stream.event_stream import AssistantMessageEventStream
from cursor_bridge.stream.models import (
    AssistantMessage,
    AssistantMessageEvent,
    Context,
    DoneEvent,
    ErrorEvent,
    ImageContent,
    ModelInfo,
    StartEvent,
    TextContent,
    TextDeltaEvent,
    TextEndEvent,
    TextStartEvent,
    ToolResultMessage,
    UserMessage,
)
from cursor_bridge.stream.parser import parse_line
from cursor_bridge.stream.prompt import serialize_context
from cursor_bridge.stream.tools import display_tool_name
from cursor_bridge.stream.translator import (
    StreamOptions,
    StreamTranslator,
    stream_cursor_cli,
)

__all__ = [
    "AssistantMessage",
    "AssistantMessageEvent",
    "AssistantMessageEventStream",
    "CancelToken",
    "Context",
    "DoneEvent",
    "ErrorEvent",
    "ImageContent",
    "ModelInfo",
    "StartEvent",
    "StreamOptions",
    "StreamTranslator",
    "TextContent",
    "TextDeltaEvent",
    "TextEndEvent",
    "TextStartEvent",
    "ToolResultMessage",
    "UserMessage",
    "display_tool_name",
    "parse_line",
    "serialize_context",
    "stream_cursor_cli",
]
