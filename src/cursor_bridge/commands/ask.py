"""cursor-bridge ask — stream a one-shot prompt through the Cursor CLI."""

from __future__ import annotations

import asyncio
import contextlib
import signal

import click

from cursor_bridge.config.models import BridgeSettings
from cursor_bridge.helpers import load_settings_or_exit
from cursor_bridge.stream.cancel import CancelToken
from cursor_bridge.stream.models import (
    AssistantMessage,
    Context,
    ModelInfo,
    TextDeltaEvent,
    TextEndEvent,
    UserMessage,
)
from cursor_bridge.stream.translator import StreamOptions, stream_cursor_cli

#: Conventional exit status for a run interrupted by Ctrl-C.
_EXIT_ABORTED = 130


@click.command()
@click.argument("prompt")
@click.option(
    "-m",
    "--model",
    "model_id",
    default="auto",
    show_default=True,
    help="Cursor model id (see `cursor-bridge models`).",
)
@click.option("-s", "--system", "system_prompt", default=None, help="System prompt.")
@click.option(
    "--tool-results/--no-tool-results",
    "show_tool_results",
    default=None,
    help="Show a status line when a CLI tool call completes.",
)
@click.pass_context
def ask(
    ctx: click.Context,
    prompt: str,
    model_id: str,
    system_prompt: str | None,
    show_tool_results: bool | None,
) -> None:
    """Send PROMPT to the Cursor Agent CLI and stream the answer."""
    settings = load_settings_or_exit((ctx.obj or {}).get("config_file"))

    message = asyncio.run(
        _run_ask(settings, prompt, model_id, system_prompt, show_tool_results)
    )

    if message.stop_reason == "aborted":
        click.echo("Aborted.", err=True)
        raise SystemExit(_EXIT_ABORTED)
    if message.stop_reason == "error":
        click.echo(f"Error: {message.error_message}", err=True)
        raise SystemExit(1)


async def _run_ask(
    settings: BridgeSettings,
    prompt: str,
    model_id: str,
    system_prompt: str | None,
    show_tool_results: bool | None,
) -> AssistantMessage:
    """Stream one response to stdout; Ctrl-C cancels the CLI run."""
    token = CancelToken()
    loop = asyncio.get_running_loop()
    handler_installed = False
    with contextlib.suppress(NotImplementedError, RuntimeError):
        loop.add_signal_handler(signal.SIGINT, token.cancel)
        handler_installed = True

    context = Context(
        system_prompt=system_prompt,
        messages=[UserMessage(content=prompt)],
    )
    stream = stream_cursor_cli(
        ModelInfo(id=model_id),
        context,
        StreamOptions(
            cancel_token=token,
            settings=settings,
            show_tool_results=show_tool_results,
        ),
    )

    try:
        async for event in stream:
            if isinstance(event, TextDeltaEvent):
                click.echo(event.delta, nl=False)
            elif isinstance(event, TextEndEvent):
                click.echo()
        return await stream.result()
    finally:
        if handler_installed:
            loop.remove_signal_handler(signal.SIGINT)
