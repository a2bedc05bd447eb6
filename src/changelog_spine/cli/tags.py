"""
CLI: ``changelog-spine tags``: resolve, increment and inspect build tags.
"""

from __future__ import annotations

from pathlib import Path

import typer

from changelog_spine.changelog.git_command import FixtureGitExecutor, TagNameParser
from changelog_spine.changelog.service import write_last_tag_record
from changelog_spine.changelog.tag_store import load_tag_record
from changelog_spine.changelog.versioning import increase_build_tag, version_code, version_name
from changelog_spine.cli.utils import console, fail, get_settings
from changelog_spine.core.errors import ChangelogSpineError

app = typer.Typer(no_args_is_help=True)


@app.command("last")
def last_tag(
    variant: str = typer.Option(..., "--variant", help="Variant to look up."),
    repo: Path = typer.Option(Path("."), "--repo", "-r", help="Git repository to read."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Tag record file to write."),
    config: Path | None = typer.Option(None, "--config", "-c", help="TOML settings file."),
    fixture: Path | None = typer.Option(None, "--fixture", help="Read tags from a JSON fixture."),
) -> None:
    """Find the latest build tag of a variant and save it as a tag record."""
    settings = get_settings(config)
    try:
        git = None
        if fixture is not None:
            git = FixtureGitExecutor.from_file(fixture, tag_parser=TagNameParser(settings.tag_regex))
        tag, path = write_last_tag_record(settings, variant, repo_dir=repo, output=output, git=git)
    except ChangelogSpineError as e:
        fail(e)

    if tag is None:
        console.print(f"[yellow]No build tags found for variant {variant}.[/yellow]", highlight=False)
        return
    console.print(
        f"[green]✓[/green] {tag.name} (build {tag.build_number}) → {path}",
        highlight=False,
        soft_wrap=True,
    )


@app.command("next")
def next_tag(
    tag_file: Path = typer.Option(..., "--tag-file", "-t", help="Tag record of the last build."),
    config: Path | None = typer.Option(None, "--config", "-c", help="TOML settings file."),
) -> None:
    """Print the tag the next build will carry."""
    settings = get_settings(config)
    try:
        tag = load_tag_record(tag_file)
        typer.echo(increase_build_tag(tag, settings.tag_regex).name)
    except ChangelogSpineError as e:
        fail(e)


@app.command("version")
def show_version(
    variant: str = typer.Option(..., "--variant", help="Variant being built."),
    tag_file: Path | None = typer.Option(None, "--tag-file", "-t", help="Tag record, if one exists."),
    config: Path | None = typer.Option(None, "--config", "-c", help="TOML settings file."),
) -> None:
    """Print the version code and version name for a build."""
    settings = get_settings(config)
    tag = None
    if tag_file is not None and tag_file.exists():
        try:
            tag = load_tag_record(tag_file)
        except ChangelogSpineError as e:
            fail(e)
    typer.echo(f"versionCode={version_code(tag)}")
    typer.echo(f"versionName={version_name(tag, variant, settings.default_build_version)}")
