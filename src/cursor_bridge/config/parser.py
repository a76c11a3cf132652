"""Load, validate, and resolve cursor-bridge settings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from cursor_bridge.config.models import BridgeSettings
from cursor_bridge.constants import (
    AGENT_PATH_ENV,
    AGENT_PATH_FALLBACK_ENV,
    API_KEY_ENV,
)

DEFAULT_CONFIG_NAME = "cursor-bridge.yaml"


class ConfigError(Exception):
    """User-facing configuration error."""


def load_settings(path: Path | None = None) -> BridgeSettings:
    """Load settings from an optional YAML file plus the environment.

    Args:
        path: Explicit config file path. If None, ``cursor-bridge.yaml``
              in the current directory is used when it exists.

    Returns:
        A validated BridgeSettings instance. Environment variables
        (``CURSOR_AGENT_PATH``, ``AGENT_PATH``, ``CURSOR_API_KEY``) take
        precedence over values from the file.

    Raises:
        ConfigError: On missing explicit file, bad YAML, or validation failure.
    """
    config_path = _resolve_path(path)
    raw: dict[str, Any] = {}
    if config_path is not None:
        raw = _read_yaml(config_path)
        _load_env(config_path.parent)
    else:
        _load_env(Path.cwd())
    _apply_env_overrides(raw)
    return _validate(raw)


def _resolve_path(path: Path | None) -> Path | None:
    if path is not None:
        resolved = Path(path)
        if not resolved.is_file():
            msg = f"Config file not found: {resolved}"
            raise ConfigError(msg)
        return resolved

    default = Path.cwd() / DEFAULT_CONFIG_NAME
    if default.is_file():
        return default
    return None


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read config file: {exc}"
        raise ConfigError(msg) from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        detail = ""
        if hasattr(exc, "problem_mark") and exc.problem_mark is not None:
            mark = exc.problem_mark
            detail = f" (line {mark.line + 1}, column {mark.column + 1})"
        msg = f"Invalid YAML in {path.name}{detail}"
        raise ConfigError(msg) from exc

    # An empty file is a valid "use the defaults" config.
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Expected a YAML mapping in {path.name}, got {type(data).__name__}"
        raise ConfigError(msg)

    return data


def _load_env(config_dir: Path) -> None:
    env_path = config_dir / ".env"
    if env_path.is_file():
        load_dotenv(env_path)


def _apply_env_overrides(raw: dict[str, Any]) -> None:
    agent_path = os.environ.get(AGENT_PATH_ENV) or os.environ.get(
        AGENT_PATH_FALLBACK_ENV
    )
    if agent_path:
        raw["agent_path"] = agent_path

    api_key = os.environ.get(API_KEY_ENV)
    if api_key:
        raw["api_key"] = api_key


def _validate(raw: dict[str, Any]) -> BridgeSettings:
    try:
        return BridgeSettings.model_validate(raw)
    except ValidationError as exc:
        parts: list[str] = []
        for err in exc.errors():
            loc = " → ".join(str(s) for s in err["loc"])
            msg = err["msg"]
            if "extra inputs are not permitted" in msg.lower():
                msg = "Unknown setting"
            elif "input should be" in msg.lower():
                msg = f"Invalid value: {msg}"
            parts.append(f"  {loc}: {msg}")
        joined = "\n".join(parts)
        msg = f"Config validation failed:\n{joined}"
        raise ConfigError(msg) from exc
