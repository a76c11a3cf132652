"""Host registration — provider descriptor and auth commands."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Literal, Protocol

from cursor_bridge.auth import AgentCommandError, run_login, run_logout, run_status
from cursor_bridge.catalog.discovery import load_models
from cursor_bridge.catalog.static import ModelDefinition
from cursor_bridge.config.models import BridgeSettings
from cursor_bridge.config.parser import load_settings
from cursor_bridge.constants import (
    API_KEY_ENV,
    PROVIDER_API,
    PROVIDER_BASE_URL,
    PROVIDER_NAME,
)
from cursor_bridge.stream.event_stream import AssistantMessageEventStream
from cursor_bridge.stream.models import Context, ModelInfo
from cursor_bridge.stream.translator import StreamOptions, stream_cursor_cli

logger = logging.getLogger(__name__)

NotifyLevel = Literal["info", "warning", "error"]


# --------------------------------------------------------------------------- #
# Host interfaces
# --------------------------------------------------------------------------- #


class Notifier(Protocol):
    def notify(self, message: str, level: NotifyLevel) -> None: ...


class CommandContext(Protocol):
    @property
    def ui(self) -> Notifier: ...


CommandHandler = Callable[[str, CommandContext], Awaitable[None]]

StreamFunction = Callable[
    [ModelInfo, Context, StreamOptions | None], AssistantMessageEventStream
]


@dataclass(frozen=True)
class ModelCost:
    input: float = 0.0
    output: float = 0.0
    cache_read: float = 0.0
    cache_write: float = 0.0


@dataclass(frozen=True)
class ProviderModelConfig:
    """A model entry as the host's model picker sees it."""

    id: str
    name: str
    reasoning: bool
    context_window: int
    max_tokens: int
    input: tuple[str, ...] = ("text",)
    cost: ModelCost = field(default_factory=ModelCost)


@dataclass(frozen=True)
class ProviderConfig:
    base_url: str
    api_key: str
    api: str
    models: list[ProviderModelConfig]
    stream_simple: StreamFunction


@dataclass(frozen=True)
class CommandSpec:
    description: str
    handler: CommandHandler


class ExtensionHost(Protocol):
    """The subset of the host extension API this bridge uses."""

    def register_provider(self, name: str, config: ProviderConfig) -> None: ...

    def register_command(self, name: str, command: CommandSpec) -> None: ...


# --------------------------------------------------------------------------- #
# Registration
# --------------------------------------------------------------------------- #


def to_provider_models(defs: Sequence[ModelDefinition]) -> list[ProviderModelConfig]:
    """Build host model entries; names get a ``(Cursor)`` suffix."""
    return [
        ProviderModelConfig(
            id=m.id,
            name=f"{m.name} (Cursor)",
            reasoning=m.reasoning,
            context_window=m.context_window,
            max_tokens=m.max_tokens,
        )
        for m in defs
    ]


def make_stream_function(settings: BridgeSettings) -> StreamFunction:
    """Bind *settings* into a stream entry point for the host."""

    def stream_simple(
        model: ModelInfo,
        context: Context,
        options: StreamOptions | None = None,
    ) -> AssistantMessageEventStream:
        opts = options or StreamOptions()
        if opts.settings is None:
            opts = dataclasses.replace(opts, settings=settings)
        return stream_cursor_cli(model, context, opts)

    return stream_simple


def build_commands(settings: BridgeSettings) -> dict[str, CommandSpec]:
    """Slash commands for Cursor auth management."""

    async def login(_args: str, ctx: CommandContext) -> None:
        ctx.ui.notify(
            "Starting Cursor login (NO_OPEN_BROWSER=1, copy the URL from the output)...",
            "info",
        )
        try:
            await run_login(settings)
        except AgentCommandError as exc:
            ctx.ui.notify(f"Cursor login failed: {exc}", "error")
            return
        ctx.ui.notify("Cursor login successful.", "info")

    async def status(_args: str, ctx: CommandContext) -> None:
        try:
            output = await run_status(settings)
        except AgentCommandError as exc:
            ctx.ui.notify(f"Could not get Cursor status: {exc}", "error")
            return
        ctx.ui.notify(output or "No output from `agent status`.", "info")

    async def logout(_args: str, ctx: CommandContext) -> None:
        try:
            await run_logout(settings)
        except AgentCommandError as exc:
            ctx.ui.notify(f"Cursor logout failed: {exc}", "error")
            return
        ctx.ui.notify("Logged out of Cursor.", "info")

    return {
        "cursor-login": CommandSpec(
            description="Log in to Cursor (runs `agent login`)", handler=login
        ),
        "cursor-status": CommandSpec(
            description="Show Cursor authentication status (runs `agent status`)",
            handler=status,
        ),
        "cursor-logout": CommandSpec(
            description="Log out of Cursor (runs `agent logout`)", handler=logout
        ),
    }


async def activate(
    host: ExtensionHost, settings: BridgeSettings | None = None
) -> list[ModelDefinition]:
    """Register the Cursor provider and its commands with *host*.

    Model discovery failures fall back to the static table silently.
    Returns the model definitions that were registered.

    Raises:
        ConfigError: When *settings* is omitted and the config is invalid.
    """
    if settings is None:
        settings = load_settings()

    defs = await load_models(settings)
    host.register_provider(
        PROVIDER_NAME,
        ProviderConfig(
            base_url=PROVIDER_BASE_URL,
            api_key=API_KEY_ENV,
            api=PROVIDER_API,
            models=to_provider_models(defs),
            stream_simple=make_stream_function(settings),
        ),
    )
    for name, command in build_commands(settings).items():
        host.register_command(name, command)

    logger.info("registered Cursor provider with %d models", len(defs))
    return defs
