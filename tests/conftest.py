"""Shared fakes for subprocess-driven tests."""

from __future__ import annotations

import asyncio
import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from cursor_bridge.constants import AGENT_PATH_ENV, AGENT_PATH_FALLBACK_ENV, API_KEY_ENV


class MockAsyncStdout:
    """Async-aware mock stdout that yields lines on demand.

    Lines can be added at any time via ``feed()``.  ``readline()``
    blocks until a line is available or ``close()`` is called.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[bytes] = asyncio.Queue()
        self._eof = False

    def feed(self, data: bytes) -> None:
        self._queue.put_nowait(data)

    def feed_json(self, obj: dict[str, Any]) -> None:
        self.feed(json.dumps(obj).encode() + b"\n")

    def close(self) -> None:
        """Signal EOF."""
        self._queue.put_nowait(b"")

    async def readline(self) -> bytes:
        if self._eof:
            return b""
        line = await self._queue.get()
        if not line:
            self._eof = True
        return line

    def at_eof(self) -> bool:
        return self._eof

    async def read(self) -> bytes:
        return b""


def make_mock_process(
    stdout: MockAsyncStdout | None = None,
    returncode: int = 0,
    stderr: bytes = b"",
) -> MagicMock:
    """Create a mock CLI subprocess with async-aware stdout."""
    proc = MagicMock()
    proc.pid = 4242
    proc.returncode = None
    proc.stdout = stdout if stdout is not None else MockAsyncStdout()
    proc.stderr = MagicMock()
    proc.stderr.read = AsyncMock(return_value=stderr)
    proc.wait = AsyncMock(return_value=returncode)
    proc.terminate = MagicMock()
    proc.kill = MagicMock()
    return proc


def assistant_line(text: str) -> dict[str, Any]:
    return {
        "type": "assistant",
        "message": {"role": "assistant", "content": [{"type": "text", "text": text}]},
        "session_id": "sess-1",
    }


def tool_call_line(
    subtype: str,
    key: str,
    args: dict[str, Any],
    result: dict[str, Any] | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"args": args}
    if result is not None:
        payload["result"] = result
    return {"type": "tool_call", "subtype": subtype, "tool_call": {key: payload}}


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove bridge env vars and restore them (even if .env set them) afterwards."""
    for name in (AGENT_PATH_ENV, AGENT_PATH_FALLBACK_ENV, API_KEY_ENV):
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
