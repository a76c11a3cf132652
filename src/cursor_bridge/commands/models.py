"""cursor-bridge models — list the models the Cursor CLI can use."""

from __future__ import annotations

import asyncio

import click

from cursor_bridge.catalog.discovery import load_models
from cursor_bridge.catalog.static import STATIC_MODELS, ModelDefinition
from cursor_bridge.helpers import load_settings_or_exit


@click.command()
@click.option(
    "--static",
    "static_only",
    is_flag=True,
    help="Show the built-in model table without running `agent models`.",
)
@click.pass_context
def models(ctx: click.Context, static_only: bool) -> None:
    """List available Cursor models (falls back to the built-in table)."""
    if static_only:
        defs: list[ModelDefinition] = list(STATIC_MODELS)
    else:
        settings = load_settings_or_exit((ctx.obj or {}).get("config_file"))
        defs = asyncio.run(load_models(settings))

    width = max(len(m.id) for m in defs)
    for m in defs:
        flag = " [reasoning]" if m.reasoning else ""
        click.echo(
            f"{m.id:<{width}}  {m.name}  "
            f"(ctx {m.context_window:,}, out {m.max_tokens:,}){flag}"
        )
