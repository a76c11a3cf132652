"""Authentication helpers wrapping ``agent login|status|logout``."""

from __future__ import annotations

import asyncio
import logging
import os

from cursor_bridge.config.models import BridgeSettings

logger = logging.getLogger(__name__)


class AgentCommandError(Exception):
    """A one-shot ``agent`` command failed to start or exited non-zero."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


async def _run_interactive(
    settings: BridgeSettings, command: str, env: dict[str, str] | None = None
) -> None:
    """Run ``agent <command>`` attached to the terminal."""
    try:
        proc = await asyncio.create_subprocess_exec(
            settings.agent_path, command, env=env
        )
    except OSError as exc:
        msg = f"failed to run '{settings.agent_path} {command}': {exc}"
        raise AgentCommandError(msg) from exc

    returncode = await proc.wait()
    if returncode != 0:
        msg = f"agent {command} exited with code {returncode}"
        raise AgentCommandError(msg, returncode=returncode)


async def run_login(settings: BridgeSettings) -> None:
    """Interactive ``agent login``.

    Browser opening is suppressed, so the user copies the URL printed by
    the CLI.
    """
    env = {**os.environ, "NO_OPEN_BROWSER": "1"}
    logger.info("starting Cursor login via %s", settings.agent_path)
    await _run_interactive(settings, "login", env=env)


async def run_logout(settings: BridgeSettings) -> None:
    await _run_interactive(settings, "logout")


async def run_status(settings: BridgeSettings) -> str:
    """Return the trimmed output of ``agent status`` (stdout and stderr).

    The exit code is not checked; the CLI reports "not logged in" as text.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            settings.agent_path,
            "status",
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except OSError as exc:
        msg = f"failed to run '{settings.agent_path} status': {exc}"
        raise AgentCommandError(msg) from exc

    stdout_bytes, _ = await proc.communicate()
    return stdout_bytes.decode(errors="replace").strip()
