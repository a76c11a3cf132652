"""cursor-bridge login / status / logout — Cursor account management."""

from __future__ import annotations

import asyncio

import click

from cursor_bridge.auth import AgentCommandError, run_login, run_logout, run_status
from cursor_bridge.helpers import load_settings_or_exit


@click.command()
@click.pass_context
def login(ctx: click.Context) -> None:
    """Log in to Cursor (runs `agent login`)."""
    settings = load_settings_or_exit((ctx.obj or {}).get("config_file"))
    click.echo("Starting Cursor login (browser disabled, copy the URL from the output)")
    try:
        asyncio.run(run_login(settings))
    except AgentCommandError as exc:
        raise click.ClickException(f"Cursor login failed: {exc}") from exc
    click.echo("Cursor login successful.")


@click.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show Cursor authentication status (runs `agent status`)."""
    settings = load_settings_or_exit((ctx.obj or {}).get("config_file"))
    try:
        output = asyncio.run(run_status(settings))
    except AgentCommandError as exc:
        raise click.ClickException(f"Could not get Cursor status: {exc}") from exc
    click.echo(output or "No output from `agent status`.")


@click.command()
@click.pass_context
def logout(ctx: click.Context) -> None:
    """Log out of Cursor (runs `agent logout`)."""
    settings = load_settings_or_exit((ctx.obj or {}).get("config_file"))
    try:
        asyncio.run(run_logout(settings))
    except AgentCommandError as exc:
        raise click.ClickException(f"Cursor logout failed: {exc}") from exc
    click.echo("Logged out of Cursor.")
