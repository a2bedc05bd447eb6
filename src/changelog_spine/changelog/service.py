"""Plain-function entry points used by the CLI and by build tooling.

Stability: stable
Tier: none
Since: 0.1.0
Dependencies: stdlib-only
Doc-Types: API_REFERENCE
Tags: changelog, service, build

Each function is one self-contained job for one variant: read the inputs,
run the engine, write the output. Scheduling and isolation belong to
whatever calls these.

Usage::

    from changelog_spine.changelog.service import generate_changelog_file

    path = generate_changelog_file(
        settings,
        tag_file=Path("build/tag-build-release.json"),
        repo_dir=Path("."),
    )
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from changelog_spine.core.logging import LogContext, get_logger
from changelog_spine.core.settings import ChangelogSettings

from .builder import ChangelogBuilder, DefaultValueSupplier, no_changes_message
from .formatting import ellipsize_at
from .git_command import GitBackend, GitCommandExecutor, TagNameParser
from .model import BuildTag
from .repository import GitRepository
from .tag_store import load_tag_record, save_tag_record, tag_build_filename

logger = get_logger(__name__)


def make_git_backend(settings: ChangelogSettings, repo_dir: Path) -> GitCommandExecutor:
    return GitCommandExecutor(
        repo_dir,
        tag_parser=TagNameParser(settings.tag_regex),
        timeout=settings.git_timeout_seconds,
    )


def build_changelog(
    settings: ChangelogSettings,
    current_build_tag: BuildTag,
    git: GitBackend,
    *,
    variants: Iterable[str] | None = None,
    default_value_supplier: DefaultValueSupplier = no_changes_message,
    max_length: int | None = None,
) -> str | None:
    """Changelog text for ``current_build_tag``, capped at ``max_length``.

    ``variants`` defaults to the tag's own variant. ``max_length`` defaults
    to ``settings.max_length``; pass 0 to skip capping.
    """
    variant_filter = set(variants) if variants else {current_build_tag.variant}
    builder = ChangelogBuilder(GitRepository(git), settings, variant_filter)
    text = builder.build_for_build_tag(current_build_tag, default_value_supplier)
    limit = settings.max_length if max_length is None else max_length
    if text is not None and limit:
        text = ellipsize_at(text, limit, settings.ellipsis)
    return text


def generate_changelog_file(
    settings: ChangelogSettings,
    *,
    tag_file: Path,
    repo_dir: Path = Path("."),
    output: Path | None = None,
    variants: Iterable[str] | None = None,
    git: GitBackend | None = None,
    max_length: int | None = None,
    default_value_supplier: DefaultValueSupplier = no_changes_message,
) -> Path | None:
    """Generate the changelog for the build recorded in ``tag_file``.

    Returns the written path, or None when the changelog came out blank
    (nothing is written in that case).

    Raises:
        TagRecordError: If ``tag_file`` is missing or malformed.
        TagNotFoundError: If a tag in the range is missing from the repository.
        RepositoryAccessError: If the repository cannot be read.
    """
    current = load_tag_record(tag_file)
    backend = git or make_git_backend(settings, repo_dir)
    output = output or settings.changelog_path

    with LogContext(variant=current.variant):
        changelog = build_changelog(
            settings,
            current,
            backend,
            variants=variants,
            default_value_supplier=default_value_supplier,
            max_length=max_length,
        )
        if changelog is None or not changelog.strip():
            logger.debug("changelog_not_generated", tag=current.name)
            return None

        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(changelog, encoding="utf-8")
        logger.debug("changelog_written", path=str(output), length=len(changelog))
    return output


def write_last_tag_record(
    settings: ChangelogSettings,
    variant: str,
    *,
    repo_dir: Path = Path("."),
    output: Path | None = None,
    git: GitBackend | None = None,
) -> tuple[BuildTag | None, Path | None]:
    """Find the latest build tag for ``variant`` and persist it as a tag record.

    Returns the tag and the written path; both are None when the variant
    has never been tagged.
    """
    backend = git or make_git_backend(settings, repo_dir)
    tag = GitRepository(backend).find_last_tag({variant})
    if tag is None:
        logger.info("last_tag_not_found", variant=variant)
        return None, None

    path = output or settings.build_dir / tag_build_filename(variant)
    save_tag_record(path, tag)
    logger.info("last_tag_saved", variant=variant, tag=tag.name, path=str(path))
    return tag, path
