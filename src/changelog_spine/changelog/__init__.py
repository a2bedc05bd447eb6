"""Changelog generation engine.

Stability: stable
Tier: none
Since: 0.1.0
Dependencies: pydantic (tag records)
Doc-Types: API_REFERENCE, TECHNICAL_DESIGN
Tags: changelog, git, tags, generator

Given a build tag record, finds the previous build of the same variant,
reads the commits between the two tags and renders a deduplicated,
length-capped changelog.

Usage::

    from changelog_spine.changelog import generate_changelog_file
    from changelog_spine.core.settings import ChangelogSettings

    generate_changelog_file(
        ChangelogSettings(issue_url_prefix="https://jira.example.com/browse/"),
        tag_file=Path("build/tag-build-release.json"),
    )
"""

from __future__ import annotations

from .builder import ChangelogBuilder, no_changes_message
from .formatting import ellipsize_at, extract_issue_key, link_issues
from .git_command import FixtureGitExecutor, GitBackend, GitCommandExecutor, TagNameParser
from .model import BuildTag, BuildVariant, ChangelogEntry, CommitEntry, TagRange
from .repository import GitRepository
from .service import build_changelog, generate_changelog_file, write_last_tag_record
from .tag_store import load_tag_record, save_tag_record, tag_build_filename
from .versioning import increase_build_tag, version_code, version_name

__all__ = [
    "BuildTag",
    "BuildVariant",
    "ChangelogBuilder",
    "ChangelogEntry",
    "CommitEntry",
    "FixtureGitExecutor",
    "GitBackend",
    "GitCommandExecutor",
    "GitRepository",
    "TagNameParser",
    "TagRange",
    "build_changelog",
    "ellipsize_at",
    "extract_issue_key",
    "generate_changelog_file",
    "increase_build_tag",
    "link_issues",
    "load_tag_record",
    "no_changes_message",
    "save_tag_record",
    "tag_build_filename",
    "version_code",
    "version_name",
    "write_last_tag_record",
]
