"""
CLI: ``changelog-spine config``: configuration inspection.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from changelog_spine.cli.utils import console, get_settings

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_config(
    config: Path | None = typer.Option(None, "--config", "-c", help="TOML settings file."),
    format: str = typer.Option("table", "--format", "-f", help="Output format: table, json, env"),
) -> None:
    """Show the effective configuration."""
    settings = get_settings(config)

    if format == "json":
        typer.echo(settings.model_dump_json(indent=2))
        return

    if format == "env":
        for key, value in sorted(settings.model_dump(mode="json").items()):
            typer.echo(f"CHANGELOG_SPINE_{key.upper()}={'' if value is None else value}")
        return

    table = Table(title="Changelog settings")
    table.add_column("Setting")
    table.add_column("Value")
    for key, value in sorted(settings.model_dump(mode="json").items()):
        table.add_row(key, "" if value is None else str(value))
    console.print(table)
