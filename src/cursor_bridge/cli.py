"""Root CLI group and version flag."""

from __future__ import annotations

import logging

import click

from cursor_bridge import __version__
from cursor_bridge.commands.ask import ask
from cursor_bridge.commands.auth import login, logout, status
from cursor_bridge.commands.init import init
from cursor_bridge.commands.models import models


@click.group()
@click.version_option(version=__version__, prog_name="cursor-bridge")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to cursor-bridge.yaml (default: ./cursor-bridge.yaml if present).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, config_file: str | None, verbose: bool) -> None:
    """cursor-bridge — drive the Cursor Agent CLI as a streaming model provider."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"config_file": config_file}


cli.add_command(ask)
cli.add_command(models)
cli.add_command(login)
cli.add_command(status)
cli.add_command(logout)
cli.add_command(init)
