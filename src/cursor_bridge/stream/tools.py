"""Tool-call key mapping and inline tool markers."""

from __future__ import annotations

import json
from typing import Any

from cursor_bridge.stream.parser import CliToolResult

#: Suffix every CLI tool-call key carries (``shellToolCall``).
TOOL_KEY_SUFFIX = "ToolCall"

#: Maximum characters of rendered tool arguments shown in a marker.
MAX_ARGS_CHARS = 120

TOOL_NAME_MAP: dict[str, str] = {
    "shellToolCall": "Shell",
    "readToolCall": "Read",
    "editToolCall": "Edit",
    "writeToolCall": "Write",
    "deleteToolCall": "Delete",
    "grepToolCall": "Grep",
    "globToolCall": "Glob",
    "lsToolCall": "Ls",
    "todoToolCall": "Todo",
    "updateTodosToolCall": "UpdateTodos",
    "findToolCall": "Find",
    "webFetchToolCall": "WebFetch",
    "webSearchToolCall": "WebSearch",
}


def display_tool_name(key: str) -> str:
    """Convert a CLI tool key (e.g. ``shellToolCall``) to a display name."""
    mapped = TOOL_NAME_MAP.get(key)
    if mapped is not None:
        return mapped
    if key.endswith(TOOL_KEY_SUFFIX):
        return key[: -len(TOOL_KEY_SUFFIX)]
    return key


def _brief_json(args: dict[str, Any] | None) -> str:
    rendered = json.dumps(
        args or {}, ensure_ascii=False, separators=(",", ":"), default=str
    )
    if len(rendered) > MAX_ARGS_CHARS:
        return rendered[:MAX_ARGS_CHARS] + "…"
    return rendered


def format_tool_marker(name: str, args: dict[str, Any] | None) -> str:
    """Inline text announcing a tool call the CLI has started."""
    return f"\n⏳ [{name}] {_brief_json(args)}\n"


def format_tool_result(name: str, result: CliToolResult | None) -> str | None:
    """Inline status line for a completed tool call, or ``None``."""
    if result is None:
        return None
    if result.rejected is not None:
        reason = str(result.rejected.get("reason") or "no reason given")
        return f"\n✗ [{name}] rejected: {reason}\n"
    if result.error is not None:
        message = str(result.error.get("message") or "unknown error")
        return f"\n✗ [{name}] error: {message}\n"
    if result.success is not None:
        return f"\n✓ [{name}]\n"
    return None
