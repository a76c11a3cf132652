"""Static table of Cursor models.

Used as the fallback when ``agent models`` fails, and as the attribute
lookup for models discovered dynamically.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelDefinition:
    """A model the Cursor Agent CLI can route to."""

    id: str
    name: str
    reasoning: bool
    context_window: int
    max_tokens: int


#: Defaults for discovered models missing from the static table.
DEFAULT_CONTEXT_WINDOW = 200_000
DEFAULT_MAX_TOKENS = 32_768


def _m(
    id: str, name: str, reasoning: bool, context_window: int, max_tokens: int
) -> ModelDefinition:
    return ModelDefinition(id, name, reasoning, context_window, max_tokens)


STATIC_MODELS: tuple[ModelDefinition, ...] = (
    # Auto
    _m("auto", "Auto", False, 200_000, 32_768),
    # Composer
    _m("composer-1.5", "Composer 1.5", False, 200_000, 32_768),
    _m("composer-1", "Composer 1", False, 200_000, 32_768),
    # Claude Opus
    _m("opus-4.6-thinking", "Claude 4.6 Opus (Thinking)", True, 200_000, 32_000),
    _m("opus-4.6", "Claude 4.6 Opus", False, 200_000, 32_000),
    _m("opus-4.5-thinking", "Claude 4.5 Opus (Thinking)", True, 200_000, 32_000),
    _m("opus-4.5", "Claude 4.5 Opus", False, 200_000, 32_000),
    # Claude Sonnet
    _m("sonnet-4.6-thinking", "Claude 4.6 Sonnet (Thinking)", True, 200_000, 32_000),
    _m("sonnet-4.6", "Claude 4.6 Sonnet", False, 200_000, 32_000),
    _m("sonnet-4.5-thinking", "Claude 4.5 Sonnet (Thinking)", True, 200_000, 32_000),
    _m("sonnet-4.5", "Claude 4.5 Sonnet", False, 200_000, 32_000),
    # GPT-5 series
    _m("gpt-5.3-codex", "GPT-5.3 Codex", False, 200_000, 32_768),
    _m("gpt-5.3-codex-low", "GPT-5.3 Codex Low", False, 200_000, 32_768),
    _m("gpt-5.3-codex-high", "GPT-5.3 Codex High", True, 200_000, 32_768),
    _m("gpt-5.3-codex-xhigh", "GPT-5.3 Codex Extra High", True, 200_000, 32_768),
    _m("gpt-5.3-codex-fast", "GPT-5.3 Codex Fast", False, 200_000, 32_768),
    _m("gpt-5.3-codex-low-fast", "GPT-5.3 Codex Low Fast", False, 200_000, 32_768),
    _m("gpt-5.3-codex-high-fast", "GPT-5.3 Codex High Fast", True, 200_000, 32_768),
    _m("gpt-5.3-codex-xhigh-fast", "GPT-5.3 Codex Extra High Fast", True, 200_000, 32_768),
    _m("gpt-5.2", "GPT-5.2", False, 200_000, 32_768),
    _m("gpt-5.2-high", "GPT-5.2 High", True, 200_000, 32_768),
    _m("gpt-5.2-codex", "GPT-5.2 Codex", False, 200_000, 32_768),
    _m("gpt-5.2-codex-high", "GPT-5.2 Codex High", True, 200_000, 32_768),
    _m("gpt-5.2-codex-low", "GPT-5.2 Codex Low", False, 200_000, 32_768),
    _m("gpt-5.2-codex-xhigh", "GPT-5.2 Codex Extra High", True, 200_000, 32_768),
    _m("gpt-5.2-codex-fast", "GPT-5.2 Codex Fast", False, 200_000, 32_768),
    _m("gpt-5.2-codex-high-fast", "GPT-5.2 Codex High Fast", True, 200_000, 32_768),
    _m("gpt-5.2-codex-low-fast", "GPT-5.2 Codex Low Fast", False, 200_000, 32_768),
    _m("gpt-5.2-codex-xhigh-fast", "GPT-5.2 Codex Extra High Fast", True, 200_000, 32_768),
    _m("gpt-5.1-high", "GPT-5.1 High", True, 200_000, 32_768),
    _m("gpt-5.1-codex-max", "GPT-5.1 Codex Max", True, 200_000, 32_768),
    _m("gpt-5.1-codex-max-high", "GPT-5.1 Codex Max High", True, 200_000, 32_768),
    _m("gpt-5.1-codex-mini", "GPT-5.1 Codex Mini", False, 200_000, 32_768),
    # Gemini
    _m("gemini-3-pro", "Gemini 3 Pro", False, 1_000_000, 65_536),
    _m("gemini-3-flash", "Gemini 3 Flash", False, 1_000_000, 65_536),
    # Grok
    _m("grok", "Grok", False, 131_072, 32_768),
)

STATIC_MODELS_BY_ID: dict[str, ModelDefinition] = {m.id: m for m in STATIC_MODELS}
