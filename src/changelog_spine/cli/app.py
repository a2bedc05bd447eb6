"""
Root Typer application for the changelog-spine CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from changelog_spine.core.logging import configure_logging

app = Typer(
    name="changelog-spine",
    help="changelog-spine: changelogs from build tags and git history.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from changelog_spine import __version__

        typer.echo(f"changelog-spine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON."),
) -> None:
    """changelog-spine CLI: generate changelogs and inspect build tags."""
    configure_logging(level="DEBUG" if verbose else "WARNING", json_format=json_logs)


# ── Sub-command registration ─────────────────────────────────────────────

from changelog_spine.cli.changelog import app as changelog_app  # noqa: E402
from changelog_spine.cli.config import app as config_app  # noqa: E402
from changelog_spine.cli.tags import app as tags_app  # noqa: E402

app.add_typer(changelog_app, name="changelog", help="Changelog generation.")
app.add_typer(tags_app, name="tags", help="Build tag inspection.")
app.add_typer(config_app, name="config", help="Configuration inspection.")
