"""Shared helper functions."""

from __future__ import annotations

from pathlib import Path

import click

from cursor_bridge.config.models import BridgeSettings
from cursor_bridge.config.parser import ConfigError, load_settings


def format_stderr_preview(stderr_text: str, max_lines: int = 5) -> str:
    """Extract and format the last N non-empty lines from stderr output."""
    lines = [line for line in stderr_text.split("\n") if line.strip()]
    last = lines[-max_lines:] if len(lines) > max_lines else lines
    return "\n  ".join(last)


def load_settings_or_exit(config_file: str | None) -> BridgeSettings:
    """Load settings for a CLI command, exiting with status 1 on error."""
    try:
        return load_settings(Path(config_file) if config_file else None)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc
