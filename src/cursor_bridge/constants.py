"""Shared constants for the Cursor bridge."""

from __future__ import annotations

#: Env var holding an explicit path to the Cursor Agent CLI binary.
AGENT_PATH_ENV = "CURSOR_AGENT_PATH"

#: Secondary env var consulted when ``CURSOR_AGENT_PATH`` is unset.
AGENT_PATH_FALLBACK_ENV = "AGENT_PATH"

#: Env var holding the Cursor API key forwarded as ``--api-key``.
API_KEY_ENV = "CURSOR_API_KEY"

#: Bare command name resolved through ``PATH`` when nothing is configured.
DEFAULT_AGENT_PATH = "agent"

#: Provider identity registered with the host.
PROVIDER_NAME = "cursor"
PROVIDER_API = "cursor-cli"
PROVIDER_BASE_URL = "cli://cursor-agent"

#: Seconds allowed for the ``agent models`` discovery call.
DEFAULT_DISCOVERY_TIMEOUT = 15.0
