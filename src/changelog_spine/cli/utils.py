"""
CLI utility helpers: consoles, settings loading and error reporting.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from changelog_spine.core.errors import ChangelogSpineError
from changelog_spine.core.settings import ChangelogSettings, load_settings

console = Console()
err_console = Console(stderr=True)


def get_settings(config: Path | None = None, **overrides: Any) -> ChangelogSettings:
    """Load settings, turning configuration problems into a clean exit."""
    try:
        return load_settings(config, **overrides)
    except ChangelogSpineError as e:
        fail(e)
    except ValidationError as e:
        err_console.print(f"[bold red]Configuration Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e


def fail(error: ChangelogSpineError) -> NoReturn:
    """Print ``error`` to stderr and exit with code 1."""
    err_console.print(
        f"[bold red]Error[/bold red] ({error.__class__.__name__}): {escape(error.message)}",
        highlight=False,
        soft_wrap=True,
    )
    raise typer.Exit(code=1) from error
