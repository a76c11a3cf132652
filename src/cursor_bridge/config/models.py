"""Pydantic v2 models for cursor-bridge.yaml configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from cursor_bridge.constants import DEFAULT_AGENT_PATH, DEFAULT_DISCOVERY_TIMEOUT


class BridgeSettings(BaseModel):
    """Resolved settings for talking to the Cursor Agent CLI."""

    model_config = ConfigDict(extra="forbid")

    agent_path: str = Field(
        default=DEFAULT_AGENT_PATH,
        min_length=1,
        description="Path to the Cursor Agent CLI binary (PATH lookup if bare)",
    )
    api_key: str | None = Field(
        default=None,
        description="Cursor API key, forwarded to every CLI call as --api-key",
    )
    workspace: str | None = Field(
        default=None,
        description="Workspace directory passed to --workspace (defaults to cwd)",
    )
    discovery_timeout: float = Field(
        default=DEFAULT_DISCOVERY_TIMEOUT,
        gt=0,
        description="Seconds allowed for the `agent models` discovery call",
    )
    show_tool_results: bool = Field(
        default=False,
        description="Render a status line when a CLI tool call completes",
    )

    def credential_args(self) -> list[str]:
        """Leading ``--api-key`` flag pair, or nothing when no key is set."""
        if self.api_key:
            return ["--api-key", self.api_key]
        return []
