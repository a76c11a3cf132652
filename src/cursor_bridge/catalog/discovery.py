"""Dynamic model discovery via ``agent models``."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import re

from cursor_bridge.catalog.static import (
    DEFAULT_CONTEXT_WINDOW,
    DEFAULT_MAX_TOKENS,
    STATIC_MODELS,
    STATIC_MODELS_BY_ID,
    ModelDefinition,
)
from cursor_bridge.config.models import BridgeSettings
from cursor_bridge.helpers import format_stderr_preview

logger = logging.getLogger(__name__)

#: ``<id> - <name>`` with an optional ``(current)`` / ``(default)`` marker.
_MODEL_LINE_RE = re.compile(
    r"^([a-zA-Z0-9][a-zA-Z0-9._-]*)\s+-\s+(.+?)"
    r"(?:\s+\((?:current|default|current,\s*default)\))?$"
)

_REASONING_SUFFIX_RE = re.compile(r"(-thinking|-high|-xhigh|-max-high)$")


class DiscoveryError(Exception):
    """``agent models`` failed, timed out, or listed nothing."""


def infer_reasoning(model_id: str) -> bool:
    """Guess the reasoning flag for a model missing from the static table."""
    return _REASONING_SUFFIX_RE.search(model_id) is not None


def parse_models_output(output: str) -> list[ModelDefinition]:
    """Parse the text printed by ``agent models`` into model definitions.

    Header (``Available models``) and tip (``Tip: ...``) lines are skipped,
    as is anything not matching ``<id> - <name>``.
    """
    results: list[ModelDefinition] = []
    for line in output.splitlines():
        stripped = line.strip()
        if (
            not stripped
            or stripped.startswith("Available")
            or stripped.startswith("Tip:")
        ):
            continue
        match = _MODEL_LINE_RE.match(stripped)
        if match is None:
            continue

        model_id = match.group(1).strip()
        name = match.group(2).strip()
        known = STATIC_MODELS_BY_ID.get(model_id)
        if known is not None:
            results.append(
                ModelDefinition(
                    id=model_id,
                    name=name,
                    reasoning=known.reasoning,
                    context_window=known.context_window,
                    max_tokens=known.max_tokens,
                )
            )
        else:
            results.append(
                ModelDefinition(
                    id=model_id,
                    name=name,
                    reasoning=infer_reasoning(model_id),
                    context_window=DEFAULT_CONTEXT_WINDOW,
                    max_tokens=DEFAULT_MAX_TOKENS,
                )
            )
    return results


async def discover_models(settings: BridgeSettings) -> list[ModelDefinition]:
    """Run ``agent models`` and return the parsed model list.

    Raises:
        DiscoveryError: On spawn failure, timeout (the child is killed),
            non-zero exit, or output with no model lines.
    """
    args = [*settings.credential_args(), "models"]
    try:
        proc = await asyncio.create_subprocess_exec(
            settings.agent_path,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        msg = f"failed to run '{settings.agent_path} models': {exc}"
        raise DiscoveryError(msg) from exc

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            proc.communicate(),
            timeout=settings.discovery_timeout,
        )
    except TimeoutError:
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
        await proc.wait()
        msg = f"agent models timed out after {settings.discovery_timeout}s"
        raise DiscoveryError(msg) from None

    if proc.returncode != 0:
        stderr_text = stderr_bytes.decode(errors="replace").strip()
        msg = f"agent models exited with code {proc.returncode}"
        preview = format_stderr_preview(stderr_text)
        if preview:
            msg += f": {preview}"
        raise DiscoveryError(msg)

    models = parse_models_output(stdout_bytes.decode(errors="replace"))
    if not models:
        msg = "agent models returned no models"
        raise DiscoveryError(msg)
    return models


async def load_models(settings: BridgeSettings) -> list[ModelDefinition]:
    """Discover models, falling back to the static table on any failure."""
    try:
        models = await discover_models(settings)
    except DiscoveryError as exc:
        logger.warning("model discovery failed, using static model list: %s", exc)
        return list(STATIC_MODELS)
    logger.debug("discovered %d Cursor models", len(models))
    return models
