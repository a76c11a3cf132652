"""cursor-bridge init — write a starter cursor-bridge.yaml."""

from __future__ import annotations

from pathlib import Path

import click

from cursor_bridge.config.parser import DEFAULT_CONFIG_NAME

ENV_EXAMPLE_FILENAME = ".env.example"

TEMPLATE_YAML = """\
# cursor-bridge configuration
# Environment variables win over these values:
#   CURSOR_AGENT_PATH / AGENT_PATH  -> agent_path
#   CURSOR_API_KEY                  -> api_key

# Path to the Cursor Agent CLI (bare names are looked up on PATH)
agent_path: agent

# Workspace passed to `agent --workspace` (default: current directory)
# workspace: /path/to/project

# Seconds allowed for `agent models` before falling back to the built-in list
discovery_timeout: 15

# Append a status line when the CLI finishes a tool call
show_tool_results: false
"""

TEMPLATE_ENV_EXAMPLE = """\
# Copy this file to .env and fill in your key, or run `cursor-bridge login`.
CURSOR_API_KEY=
"""


@click.command()
@click.option(
    "--force",
    is_flag=True,
    help=f"Overwrite existing {DEFAULT_CONFIG_NAME} if it exists.",
)
def init(force: bool) -> None:
    """Write a starter cursor-bridge.yaml in the current directory."""
    cwd = Path.cwd()
    config_path = cwd / DEFAULT_CONFIG_NAME
    env_example_path = cwd / ENV_EXAMPLE_FILENAME

    if config_path.exists() and not force:
        raise click.ClickException(
            f"{DEFAULT_CONFIG_NAME} already exists. Use --force to overwrite."
        )

    try:
        config_path.write_text(TEMPLATE_YAML, encoding="utf-8")
    except OSError as exc:
        raise click.ClickException(
            f"Cannot write {DEFAULT_CONFIG_NAME}: {exc}"
        ) from exc
    click.echo(f"  Created {DEFAULT_CONFIG_NAME}")

    if not env_example_path.exists() or force:
        try:
            env_example_path.write_text(TEMPLATE_ENV_EXAMPLE, encoding="utf-8")
        except OSError as exc:
            raise click.ClickException(
                f"Cannot write {ENV_EXAMPLE_FILENAME}: {exc}"
            ) from exc
        click.echo(f"  Created {ENV_EXAMPLE_FILENAME}")
    else:
        click.echo(f"  Skipped {ENV_EXAMPLE_FILENAME} (already exists)")

    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Install the Cursor Agent CLI and run `cursor-bridge login`")
    click.echo("  2. Run `cursor-bridge models` to see what you can use")
    click.echo('  3. Try `cursor-bridge ask "hello"`')
