"""Queue-backed async stream of assistant message events."""

from __future__ import annotations

import asyncio
import logging

from cursor_bridge.stream.models import (
    AssistantMessage,
    AssistantMessageEvent,
    DoneEvent,
    ErrorEvent,
)

logger = logging.getLogger(__name__)


class AssistantMessageEventStream:
    """Single-producer, single-consumer event stream.

    The producer calls :meth:`push` for each event and :meth:`end` once.
    The consumer either iterates (``async for event in stream``) or awaits
    :meth:`result` for the final message, or both.

    Events pushed after :meth:`end` are dropped with a warning.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[AssistantMessageEvent | None] = asyncio.Queue()
        self._ended = False
        self._exhausted = False
        self._final: AssistantMessage | None = None
        self._finished = asyncio.Event()

    @property
    def ended(self) -> bool:
        return self._ended

    def push(self, event: AssistantMessageEvent) -> None:
        if self._ended:
            logger.warning("dropping %s event pushed after stream end", event.type)
            return
        if isinstance(event, DoneEvent):
            self._final = event.message
        elif isinstance(event, ErrorEvent):
            self._final = event.error
        self._queue.put_nowait(event)

    def end(self) -> None:
        """Close the stream. Idempotent."""
        if self._ended:
            return
        self._ended = True
        self._queue.put_nowait(None)
        self._finished.set()

    async def result(self) -> AssistantMessage:
        """Wait for the stream to end and return the final message.

        Raises:
            RuntimeError: If the stream ended without a terminal event.
        """
        await self._finished.wait()
        if self._final is None:
            msg = "stream ended without a done or error event"
            raise RuntimeError(msg)
        return self._final

    def __aiter__(self) -> AssistantMessageEventStream:
        return self

    async def __anext__(self) -> AssistantMessageEvent:
        if self._exhausted:
            raise StopAsyncIteration
        event = await self._queue.get()
        if event is None:
            self._exhausted = True
            raise StopAsyncIteration
        return event
