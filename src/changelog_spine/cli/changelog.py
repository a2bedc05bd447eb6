"""
CLI: ``changelog-spine changelog``: generate and preview changelogs.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from changelog_spine.changelog.builder import ChangelogBuilder
from changelog_spine.changelog.git_command import FixtureGitExecutor, GitBackend, TagNameParser
from changelog_spine.changelog.repository import GitRepository
from changelog_spine.changelog.service import build_changelog, generate_changelog_file, make_git_backend
from changelog_spine.changelog.tag_store import load_tag_record
from changelog_spine.cli.utils import console, fail, get_settings
from changelog_spine.core.errors import ChangelogSpineError
from changelog_spine.core.settings import ChangelogSettings

app = typer.Typer(no_args_is_help=True)

_TAG_FILE = typer.Option(..., "--tag-file", "-t", help="Tag record of the current build (JSON).")
_REPO = typer.Option(Path("."), "--repo", "-r", help="Git repository to read.")
_VARIANT = typer.Option(
    None, "--variant", help="Variant(s) to compare against (default: the tag's variant)."
)
_CONFIG = typer.Option(None, "--config", "-c", help="TOML settings file.")
_FIXTURE = typer.Option(None, "--fixture", help="Read history from a JSON fixture instead of git.")
_KEY = typer.Option(None, "--commit-message-key", help="Regex extracting issue keys.")
_URL = typer.Option(None, "--issue-url-prefix", help="URL prefix for issue links.")


def _backend(settings: ChangelogSettings, repo: Path, fixture: Path | None) -> GitBackend:
    if fixture is not None:
        return FixtureGitExecutor.from_file(fixture, tag_parser=TagNameParser(settings.tag_regex))
    return make_git_backend(settings, repo)


@app.command("generate")
def generate(
    tag_file: Path = _TAG_FILE,
    repo: Path = _REPO,
    variant: list[str] | None = _VARIANT,
    output: Path | None = typer.Option(None, "--output", "-o", help="Changelog file to write."),
    max_length: int | None = typer.Option(None, "--max-length", help="Character cap (0 disables)."),
    stdout: bool = typer.Option(False, "--stdout", help="Print instead of writing a file."),
    config: Path | None = _CONFIG,
    fixture: Path | None = _FIXTURE,
    commit_message_key: str | None = _KEY,
    issue_url_prefix: str | None = _URL,
) -> None:
    """Generate the changelog for the build described by a tag record."""
    settings = get_settings(
        config,
        commit_message_key=commit_message_key,
        issue_url_prefix=issue_url_prefix,
    )
    try:
        git = _backend(settings, repo, fixture)
        if stdout:
            current = load_tag_record(tag_file)
            text = build_changelog(settings, current, git, variants=variant, max_length=max_length)
            typer.echo(text or "")
            return

        path = generate_changelog_file(
            settings,
            tag_file=tag_file,
            repo_dir=repo,
            output=output,
            variants=variant,
            git=git,
            max_length=max_length,
        )
    except ChangelogSpineError as e:
        fail(e)

    if path is None:
        console.print("[yellow]Changelog is empty; nothing written.[/yellow]")
    else:
        console.print(f"[green]✓[/green] Changelog written to {path}", highlight=False, soft_wrap=True)


@app.command("preview")
def preview(
    tag_file: Path = _TAG_FILE,
    repo: Path = _REPO,
    variant: list[str] | None = _VARIANT,
    config: Path | None = _CONFIG,
    fixture: Path | None = _FIXTURE,
    commit_message_key: str | None = _KEY,
    issue_url_prefix: str | None = _URL,
) -> None:
    """Show the tag range and the uncapped changelog without writing anything."""
    settings = get_settings(
        config,
        commit_message_key=commit_message_key,
        issue_url_prefix=issue_url_prefix,
    )
    try:
        current = load_tag_record(tag_file)
        repository = GitRepository(_backend(settings, repo, fixture))
        variants = set(variant) if variant else {current.variant}
        tag_range = repository.find_tag_range(current, variants)
        commits = repository.commits_in_range(tag_range)
    except ChangelogSpineError as e:
        fail(e)

    table = Table(title="Tag range")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Current", current.name)
    table.add_row("Previous", tag_range.previous_build_tag.name if tag_range.previous_build_tag else "—")
    table.add_row("Variants", ", ".join(sorted(variants)))
    table.add_row("Commits", str(len(commits)))
    console.print(table)

    builder = ChangelogBuilder(repository, settings, variants)
    text = builder.render(builder.collect_entries(commits))
    typer.echo(text or "(no entries)")
