"""Stream translator — turns one CLI run into assistant message events."""

from __future__ import annotations

import asyncio
import enum
import logging
import os
from dataclasses import dataclass

from cursor_bridge.config.models import BridgeSettings
from cursor_bridge.config.parser import ConfigError, load_settings
from cursor_bridge.constants import API_KEY_ENV
from cursor_bridge.stream.cancel import CancelToken
from cursor_bridge.stream.event_stream import AssistantMessageEventStream
from cursor_bridge.stream.models import (
    AssistantMessage,
    Context,
    DoneEvent,
    ErrorEvent,
    ModelInfo,
    StartEvent,
    TextContent,
    TextDeltaEvent,
    TextEndEvent,
    TextStartEvent,
)
from cursor_bridge.stream.parser import (
    CliAssistantEvent,
    CliEvent,
    CliResultEvent,
    CliToolCallEvent,
    parse_line,
)
from cursor_bridge.stream.prompt import serialize_context
from cursor_bridge.stream.supervisor import ProcessExit, ProcessSupervisor
from cursor_bridge.stream.tools import (
    display_tool_name,
    format_tool_marker,
    format_tool_result,
)

logger = logging.getLogger(__name__)

# Strong references to running translator tasks (the loop only keeps weak ones).
_background_tasks: set[asyncio.Task[None]] = set()


class TranslatorState(enum.Enum):
    STARTED = "started"
    STREAMING = "streaming"
    FINALIZING = "finalizing"
    STOPPED = "stopped"
    ABORTED = "aborted"
    ERRORED = "errored"


@dataclass
class StreamOptions:
    """Per-call options for :func:`stream_cursor_cli`.

    ``settings`` defaults to :func:`load_settings` (config file + env).
    ``show_tool_results`` overrides the setting of the same name.
    """

    cancel_token: CancelToken | None = None
    settings: BridgeSettings | None = None
    show_tool_results: bool | None = None


def build_agent_args(
    settings: BridgeSettings, model_id: str, workspace: str, prompt: str
) -> list[str]:
    """Argument list for a streaming ``agent --print`` run (prompt last)."""
    return [
        *settings.credential_args(),
        "--print",
        "--output-format",
        "stream-json",
        "--model",
        model_id,
        "--trust",
        "--workspace",
        workspace,
        prompt,
    ]


def build_agent_env(settings: BridgeSettings) -> dict[str, str]:
    """Inherited environment, plus the API key when one is configured."""
    env = dict(os.environ)
    if settings.api_key:
        env[API_KEY_ENV] = settings.api_key
    return env


class StreamTranslator:
    """Owns one CLI invocation end-to-end.

    The output message is created here, mutated only by this translator's
    task, and handed to the consumer with the terminal event. Finalisation
    runs exactly once whichever way the run ends.
    """

    def __init__(
        self,
        model: ModelInfo,
        context: Context,
        options: StreamOptions | None = None,
    ) -> None:
        self._model = model
        self._context = context
        self._options = options or StreamOptions()
        self._cancel_token = self._options.cancel_token
        self._settings: BridgeSettings | None = self._options.settings

        self.stream = AssistantMessageEventStream()
        self.output = AssistantMessage(
            api=model.api, provider=model.provider, model=model.id
        )
        self.state = TranslatorState.STARTED

        self._supervisor: ProcessSupervisor | None = None
        self._text_open = False
        self._text_index = -1
        self._accumulated = ""
        self._finalized = False

    @property
    def cancelled(self) -> bool:
        return self._cancel_token is not None and self._cancel_token.is_cancelled

    def start(self) -> AssistantMessageEventStream:
        """Emit ``start`` and launch the run in a background task.

        Must be called from a running event loop.
        """
        self.stream.push(StartEvent(partial=self.output))
        task = asyncio.create_task(self.run())
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)
        return self.stream

    async def run(self) -> None:
        """Spawn the CLI, translate its output, and finalise the stream."""
        try:
            settings = self._settings or load_settings()
            show_results = self._options.show_tool_results
            if show_results is None:
                show_results = settings.show_tool_results

            workspace = settings.workspace or os.getcwd()
            prompt = serialize_context(self._context)
            self._supervisor = ProcessSupervisor(
                settings.agent_path,
                build_agent_args(settings, self._model.id, workspace, prompt),
                env=build_agent_env(settings),
                cancel_token=self._cancel_token,
            )

            if not await self._supervisor.start():
                exit_info = self._supervisor.exit
                self._finalize(exit_info or ProcessExit(returncode=None))
                return

            self.state = TranslatorState.STREAMING
            async for line in self._supervisor.lines():
                event = parse_line(line)
                if event is None:
                    continue
                self._handle_event(event, show_results=show_results)

            self._finalize(await self._supervisor.wait())

        except asyncio.CancelledError:
            if self._supervisor is not None:
                await self._supervisor.kill()
            self._fail("Cursor CLI stream was cancelled", aborted=True)
            raise
        except ConfigError as exc:
            self._fail(str(exc))
        except Exception as exc:
            logger.exception("unexpected error while streaming from Cursor CLI")
            self._fail(str(exc) or type(exc).__name__)

    # ------------------------------------------------------------------ #
    # Event handling
    # ------------------------------------------------------------------ #

    def _handle_event(self, event: CliEvent, *, show_results: bool) -> None:
        if isinstance(event, CliAssistantEvent):
            for fragment in event.text_fragments:
                if not fragment.strip():
                    continue
                self._append_text(fragment)

        elif isinstance(event, CliToolCallEvent):
            # Tool calls become inert text, never host tool-call events: the
            # CLI already executed them and the host must not re-run them.
            key = event.tool_key
            payload = event.payload
            if key is None or payload is None:
                return
            name = display_tool_name(key)
            if event.subtype == "started":
                self._append_text(format_tool_marker(name, payload.args))
            elif show_results:
                line = format_tool_result(name, payload.result)
                if line:
                    self._append_text(line)

        elif isinstance(event, CliResultEvent):
            logger.debug(
                "Cursor CLI result %r after %s ms", event.subtype, event.duration_ms
            )

        # Unknown events carry nothing to emit.

    def _append_text(self, fragment: str) -> None:
        if self._finalized:
            return
        if not self._text_open:
            self.output.content.append(TextContent(text=""))
            self._text_index = len(self.output.content) - 1
            self._text_open = True
            self.stream.push(
                TextStartEvent(content_index=self._text_index, partial=self.output)
            )

        block = self.output.content[self._text_index]
        block.text += fragment
        self._accumulated += fragment
        self.stream.push(
            TextDeltaEvent(
                content_index=self._text_index, delta=fragment, partial=self.output
            )
        )

    def _close_text_block(self) -> None:
        if not self._text_open:
            return
        block = self.output.content[self._text_index]
        self.stream.push(
            TextEndEvent(
                content_index=self._text_index, content=block.text, partial=self.output
            )
        )
        self._text_open = False

    # ------------------------------------------------------------------ #
    # Finalisation
    # ------------------------------------------------------------------ #

    def _finalize(self, exit_info: ProcessExit) -> None:
        """Classify the exit and emit the terminal event (once)."""
        if self._finalized:
            return
        self.state = TranslatorState.FINALIZING
        self._close_text_block()

        if exit_info.spawn_error is not None:
            self._fail(exit_info.spawn_error)
            return

        if self.cancelled:
            self._fail("Cursor CLI stream was cancelled", aborted=True)
            return

        if exit_info.returncode != 0 and not self._accumulated:
            self._fail(
                exit_info.stderr
                or f"Cursor CLI exited with code {exit_info.returncode}"
            )
            return

        if exit_info.returncode != 0:
            logger.warning(
                "Cursor CLI exited with code %s after producing output; "
                "keeping partial response",
                exit_info.returncode,
            )

        self._finalized = True
        self.output.stop_reason = "stop"
        self.state = TranslatorState.STOPPED
        self.stream.push(DoneEvent(message=self.output))
        self.stream.end()

    def _fail(self, message: str, *, aborted: bool = False) -> None:
        """Terminal ``aborted`` / ``error`` path (once)."""
        if self._finalized:
            return
        self._finalized = True
        self._close_text_block()

        if aborted:
            self.output.stop_reason = "aborted"
            self.state = TranslatorState.ABORTED
        else:
            self.output.stop_reason = "error"
            self.output.error_message = message
            self.state = TranslatorState.ERRORED
        self.stream.push(ErrorEvent(reason=self.output.stop_reason, error=self.output))
        self.stream.end()


def stream_cursor_cli(
    model: ModelInfo,
    context: Context,
    options: StreamOptions | None = None,
) -> AssistantMessageEventStream:
    """Stream a response for *context* from the Cursor Agent CLI.

    Returns immediately with the event stream; ``start`` has already been
    pushed. The stream always ends with exactly one ``done`` or ``error``
    event. Failures are reported as data on the stream, never raised.
    """
    return StreamTranslator(model, context, options).start()
