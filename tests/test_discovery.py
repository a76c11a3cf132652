"""Tests for the static model table and ``agent models`` discovery."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cursor_bridge.catalog.discovery import (
    DiscoveryError,
    discover_models,
    infer_reasoning,
    load_models,
    parse_models_output,
)
from cursor_bridge.catalog.static import (
    DEFAULT_CONTEXT_WINDOW,
    DEFAULT_MAX_TOKENS,
    STATIC_MODELS,
    STATIC_MODELS_BY_ID,
)
from cursor_bridge.config.models import BridgeSettings

_SETTINGS = BridgeSettings(agent_path="agent", discovery_timeout=5)


def _mock_models_process(
    stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0
) -> MagicMock:
    proc = MagicMock()
    proc.returncode = returncode
    proc.communicate = AsyncMock(return_value=(stdout, stderr))
    proc.wait = AsyncMock(return_value=returncode)
    proc.kill = MagicMock()
    return proc


class TestStaticModels:
    def test_ids_are_unique(self) -> None:
        ids = [m.id for m in STATIC_MODELS]
        assert len(ids) == len(set(ids))
        assert set(STATIC_MODELS_BY_ID) == set(ids)

    def test_auto_is_first(self) -> None:
        assert STATIC_MODELS[0].id == "auto"

    def test_thinking_models_reason(self) -> None:
        assert STATIC_MODELS_BY_ID["opus-4.6-thinking"].reasoning is True
        assert STATIC_MODELS_BY_ID["opus-4.6"].reasoning is False

    def test_gemini_has_large_context(self) -> None:
        assert STATIC_MODELS_BY_ID["gemini-3-pro"].context_window == 1_000_000


class TestParseModelsOutput:
    def test_basic_listing(self) -> None:
        models = parse_models_output(
            "auto - Auto\nsonnet-4.6 - Claude 4.6 Sonnet  (current)\n"
        )
        assert [m.id for m in models] == ["auto", "sonnet-4.6"]
        assert models[1].name == "Claude 4.6 Sonnet"

    def test_default_markers_stripped(self) -> None:
        models = parse_models_output(
            "gpt-5.2 - GPT-5.2 (default)\ngrok - Grok (current, default)\n"
        )
        assert [m.name for m in models] == ["GPT-5.2", "Grok"]

    def test_header_tip_and_noise_skipped(self) -> None:
        output = (
            "Available models\n"
            "\n"
            "auto - Auto\n"
            "  this line is not a model\n"
            "Tip: use --model <id> to pick one\n"
        )
        assert [m.id for m in parse_models_output(output)] == ["auto"]

    def test_known_model_keeps_static_attributes(self) -> None:
        (model,) = parse_models_output("opus-4.6-thinking - Opus Thinking (renamed)\n")
        static = STATIC_MODELS_BY_ID["opus-4.6-thinking"]
        assert model.name == "Opus Thinking (renamed)"
        assert model.reasoning is static.reasoning
        assert model.max_tokens == static.max_tokens

    def test_unknown_model_uses_defaults(self) -> None:
        (model,) = parse_models_output("newmodel-9-thinking - New Model Thinking\n")
        assert model.reasoning is True
        assert model.context_window == DEFAULT_CONTEXT_WINDOW
        assert model.max_tokens == DEFAULT_MAX_TOKENS

    def test_empty_output(self) -> None:
        assert parse_models_output("") == []


class TestInferReasoning:
    @pytest.mark.parametrize(
        ("model_id", "expected"),
        [
            ("foo-thinking", True),
            ("foo-high", True),
            ("foo-xhigh", True),
            ("foo-max-high", True),
            ("foo-high-fast", False),
            ("foo", False),
        ],
    )
    def test_suffixes(self, model_id: str, expected: bool) -> None:
        assert infer_reasoning(model_id) is expected


class TestDiscoverModels:
    async def test_success(self) -> None:
        proc = _mock_models_process(b"auto - Auto\ngrok - Grok\n")
        with patch("asyncio.create_subprocess_exec", return_value=proc) as mock_exec:
            models = await discover_models(_SETTINGS)

        assert [m.id for m in models] == ["auto", "grok"]
        assert mock_exec.call_args[0] == ("agent", "models")

    async def test_api_key_forwarded(self) -> None:
        settings = _SETTINGS.model_copy(update={"api_key": "k"})
        proc = _mock_models_process(b"auto - Auto\n")
        with patch("asyncio.create_subprocess_exec", return_value=proc) as mock_exec:
            await discover_models(settings)

        assert mock_exec.call_args[0] == ("agent", "--api-key", "k", "models")

    async def test_nonzero_exit(self) -> None:
        proc = _mock_models_process(stderr=b"not logged in\n", returncode=1)
        with patch("asyncio.create_subprocess_exec", return_value=proc):
            with pytest.raises(DiscoveryError, match="code 1: not logged in"):
                await discover_models(_SETTINGS)

    async def test_no_models_listed(self) -> None:
        proc = _mock_models_process(b"Available models\n")
        with patch("asyncio.create_subprocess_exec", return_value=proc):
            with pytest.raises(DiscoveryError, match="no models"):
                await discover_models(_SETTINGS)

    async def test_spawn_failure(self) -> None:
        with patch(
            "asyncio.create_subprocess_exec", side_effect=FileNotFoundError("agent")
        ):
            with pytest.raises(DiscoveryError, match="failed to run"):
                await discover_models(_SETTINGS)

    async def test_timeout_kills_child(self) -> None:
        async def hang() -> tuple[bytes, bytes]:
            await asyncio.sleep(10)
            return b"", b""

        proc = _mock_models_process()
        proc.communicate = hang
        settings = _SETTINGS.model_copy(update={"discovery_timeout": 0.05})

        with patch("asyncio.create_subprocess_exec", return_value=proc):
            with pytest.raises(DiscoveryError, match="timed out"):
                await discover_models(settings)

        proc.kill.assert_called_once()
        proc.wait.assert_awaited_once()


class TestLoadModels:
    async def test_returns_discovered_models(self) -> None:
        proc = _mock_models_process(b"auto - Auto\n")
        with patch("asyncio.create_subprocess_exec", return_value=proc):
            models = await load_models(_SETTINGS)
        assert [m.id for m in models] == ["auto"]

    async def test_falls_back_to_static_on_timeout(self) -> None:
        async def hang() -> tuple[bytes, bytes]:
            await asyncio.sleep(10)
            return b"", b""

        proc = _mock_models_process()
        proc.communicate = hang
        settings = _SETTINGS.model_copy(update={"discovery_timeout": 0.05})

        with patch("asyncio.create_subprocess_exec", return_value=proc):
            models = await load_models(settings)

        assert models == list(STATIC_MODELS)

    async def test_falls_back_to_static_on_missing_cli(self) -> None:
        with patch("asyncio.create_subprocess_exec", side_effect=OSError("boom")):
            models = await load_models(_SETTINGS)
        assert models == list(STATIC_MODELS)
