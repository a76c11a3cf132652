"""Tests for provider and command registration with a host."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from unittest.mock import patch

from conftest import MockAsyncStdout, assistant_line, make_mock_process

from cursor_bridge.auth import AgentCommandError
from cursor_bridge.catalog.static import STATIC_MODELS, ModelDefinition
from cursor_bridge.config.models import BridgeSettings
from cursor_bridge.provider import (
    CommandSpec,
    ProviderConfig,
    activate,
    build_commands,
    make_stream_function,
    to_provider_models,
)
from cursor_bridge.stream.models import Context, ModelInfo, UserMessage

_SETTINGS = BridgeSettings(agent_path="agent", workspace="/ws")


class FakeUI:
    def __init__(self) -> None:
        self.notifications: list[tuple[str, str]] = []

    def notify(self, message: str, level: str) -> None:
        self.notifications.append((message, level))


@dataclass
class FakeCommandContext:
    ui: FakeUI = field(default_factory=FakeUI)


class FakeHost:
    def __init__(self) -> None:
        self.providers: dict[str, ProviderConfig] = {}
        self.commands: dict[str, CommandSpec] = {}

    def register_provider(self, name: str, config: ProviderConfig) -> None:
        self.providers[name] = config

    def register_command(self, name: str, command: CommandSpec) -> None:
        self.commands[name] = command


class TestActivate:
    async def test_registers_provider_and_commands(self) -> None:
        defs = [ModelDefinition("auto", "Auto", False, 200_000, 32_768)]
        host = FakeHost()
        with patch("cursor_bridge.provider.load_models", return_value=defs):
            result = await activate(host, _SETTINGS)

        assert result == defs
        config = host.providers["cursor"]
        assert config.api == "cursor-cli"
        assert config.base_url == "cli://cursor-agent"
        assert config.api_key == "CURSOR_API_KEY"
        assert [m.name for m in config.models] == ["Auto (Cursor)"]
        assert set(host.commands) == {"cursor-login", "cursor-status", "cursor-logout"}

    async def test_discovery_failure_registers_static_models(self) -> None:
        host = FakeHost()
        with patch("asyncio.create_subprocess_exec", side_effect=OSError("missing")):
            await activate(host, _SETTINGS)

        assert len(host.providers["cursor"].models) == len(STATIC_MODELS)


class TestProviderModels:
    def test_suffix_and_defaults(self) -> None:
        (model,) = to_provider_models(
            [ModelDefinition("gpt-5.2-high", "GPT-5.2 High", True, 200_000, 32_768)]
        )
        assert model.name == "GPT-5.2 High (Cursor)"
        assert model.reasoning is True
        assert model.input == ("text",)
        assert model.cost.input == 0.0


class TestStreamFunction:
    async def test_bound_settings_are_used(self) -> None:
        stdout = MockAsyncStdout()
        stdout.feed_json(assistant_line("hi"))
        stdout.close()
        proc = make_mock_process(stdout)

        stream_simple = make_stream_function(_SETTINGS)
        with patch("asyncio.create_subprocess_exec", return_value=proc) as mock_exec:
            stream = stream_simple(
                ModelInfo(id="auto"), Context(messages=[UserMessage(content="q")])
            )
            message = await asyncio.wait_for(stream.result(), timeout=2.0)

        assert message.text == "hi"
        args = mock_exec.call_args[0]
        assert args[0] == "agent"
        assert "/ws" in args


class TestCommands:
    async def test_login_success(self) -> None:
        ctx = FakeCommandContext()
        with patch("cursor_bridge.provider.run_login", return_value=None):
            await build_commands(_SETTINGS)["cursor-login"].handler("", ctx)

        assert ctx.ui.notifications[-1] == ("Cursor login successful.", "info")

    async def test_login_failure(self) -> None:
        ctx = FakeCommandContext()
        with patch(
            "cursor_bridge.provider.run_login",
            side_effect=AgentCommandError("agent login exited with code 1", 1),
        ):
            await build_commands(_SETTINGS)["cursor-login"].handler("", ctx)

        message, level = ctx.ui.notifications[-1]
        assert message.startswith("Cursor login failed:")
        assert level == "error"

    async def test_status_output(self) -> None:
        ctx = FakeCommandContext()
        with patch("cursor_bridge.provider.run_status", return_value="Logged in"):
            await build_commands(_SETTINGS)["cursor-status"].handler("", ctx)

        assert ctx.ui.notifications == [("Logged in", "info")]

    async def test_status_empty_output(self) -> None:
        ctx = FakeCommandContext()
        with patch("cursor_bridge.provider.run_status", return_value=""):
            await build_commands(_SETTINGS)["cursor-status"].handler("", ctx)

        assert ctx.ui.notifications == [("No output from `agent status`.", "info")]

    async def test_logout(self) -> None:
        ctx = FakeCommandContext()
        with patch("cursor_bridge.provider.run_logout", return_value=None):
            await build_commands(_SETTINGS)["cursor-logout"].handler("", ctx)

        assert ctx.ui.notifications == [("Logged out of Cursor.", "info")]
