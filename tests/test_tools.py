"""Tests for tool-call display names and inline markers."""

from __future__ import annotations

from cursor_bridge.stream.parser import CliToolResult
from cursor_bridge.stream.tools import (
    MAX_ARGS_CHARS,
    TOOL_NAME_MAP,
    display_tool_name,
    format_tool_marker,
    format_tool_result,
)


class TestDisplayToolName:
    def test_mapped_names(self) -> None:
        assert display_tool_name("shellToolCall") == "Shell"
        assert display_tool_name("updateTodosToolCall") == "UpdateTodos"
        assert display_tool_name("webSearchToolCall") == "WebSearch"

    def test_every_mapped_key_has_suffix(self) -> None:
        assert all(key.endswith("ToolCall") for key in TOOL_NAME_MAP)

    def test_unknown_key_strips_suffix(self) -> None:
        assert display_tool_name("semSearchToolCall") == "semSearch"

    def test_unknown_key_without_suffix_unchanged(self) -> None:
        assert display_tool_name("mystery") == "mystery"


class TestFormatToolMarker:
    def test_compact_json(self) -> None:
        marker = format_tool_marker("Read", {"path": "src/app.py", "limit": 10})
        assert marker == '\n⏳ [Read] {"path":"src/app.py","limit":10}\n'

    def test_empty_args(self) -> None:
        assert format_tool_marker("Ls", None) == "\n⏳ [Ls] {}\n"
        assert format_tool_marker("Ls", {}) == "\n⏳ [Ls] {}\n"

    def test_long_args_truncated(self) -> None:
        marker = format_tool_marker("Write", {"contents": "x" * 500})
        body = marker.removeprefix("\n⏳ [Write] ").removesuffix("\n")
        assert body.endswith("…")
        assert len(body) == MAX_ARGS_CHARS + 1

    def test_args_at_limit_not_truncated(self) -> None:
        # {"k":"..."} is 8 characters of overhead
        args = {"k": "y" * (MAX_ARGS_CHARS - 8)}
        marker = format_tool_marker("Edit", args)
        assert "…" not in marker

    def test_non_ascii_kept(self) -> None:
        marker = format_tool_marker("Grep", {"pattern": "café"})
        assert "café" in marker

    def test_non_json_values_stringified(self) -> None:
        marker = format_tool_marker("Shell", {"obj": object()})
        assert "[Shell]" in marker


class TestFormatToolResult:
    def test_success(self) -> None:
        result = CliToolResult(success={"stdout": "ok"})
        assert format_tool_result("Shell", result) == "\n✓ [Shell]\n"

    def test_rejected(self) -> None:
        result = CliToolResult(rejected={"reason": "not allowed"})
        assert format_tool_result("Delete", result) == "\n✗ [Delete] rejected: not allowed\n"

    def test_rejected_without_reason(self) -> None:
        result = CliToolResult(rejected={})
        assert format_tool_result("Delete", result) == (
            "\n✗ [Delete] rejected: no reason given\n"
        )

    def test_error(self) -> None:
        result = CliToolResult(error={"message": "file missing"})
        assert format_tool_result("Read", result) == "\n✗ [Read] error: file missing\n"

    def test_no_result(self) -> None:
        assert format_tool_result("Read", None) is None
        assert format_tool_result("Read", CliToolResult()) is None
