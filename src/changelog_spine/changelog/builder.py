"""Build the changelog text for one build tag.

Stability: stable
Tier: none
Since: 0.1.0
Dependencies: stdlib-only
Doc-Types: API_REFERENCE, TECHNICAL_DESIGN
Tags: changelog, builder, issues, dedupe

The main orchestrator: resolve the tag range, read the commits in it,
pull an issue key out of each subject, merge duplicates and render one
line per entry.

Architecture::

    ┌────────────┐    ┌───────────────┐    ┌──────────────┐
    │  BuildTag  │ →  │ GitRepository │ →  │ CommitEntry[] │
    └────────────┘    └───────────────┘    └──────┬───────┘
                                                  ▼
                       collect_entries() → ChangelogEntry[] → render() → str

Repository failures (missing tag, unreadable repository) propagate to the
caller. An empty range, or a range whose commits are all filtered out, is
answered by the caller's ``default_value_supplier``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from changelog_spine.core.logging import get_logger
from changelog_spine.core.settings import ChangelogSettings

from .formatting import extract_issue_key, link_issues
from .model import BuildTag, ChangelogEntry, CommitEntry, TagRange
from .repository import GitRepository

logger = get_logger(__name__)

DefaultValueSupplier = Callable[[TagRange], str]


def no_changes_message(tag_range: TagRange) -> str:
    """Fallback text for a build with nothing to report."""
    previous = tag_range.previous_build_tag
    if previous is None:
        return "No changes in comparison with a previous build"
    return f"No changes in comparison with a previous build (**{previous.name}**)"


class ChangelogBuilder:
    """Produces the changelog string for a build of one variant set.

    Args:
        repository: Tag resolution and commit access.
        settings: Extraction and rendering configuration.
        variants: Variant names considered equivalent for comparison
            (normally just the variant being built).

    Examples:
        >>> builder = ChangelogBuilder(GitRepository(git), settings, {"release"})
        >>> text = builder.build_for_build_tag(current, no_changes_message)
    """

    def __init__(
        self,
        repository: GitRepository,
        settings: ChangelogSettings,
        variants: Iterable[str],
    ):
        self.repository = repository
        self.settings = settings
        self.variants = frozenset(variants)
        self._issue_pattern = settings.issue_pattern
        self._link_pattern = settings.link_pattern

    def build_for_build_tag(
        self,
        current_build_tag: BuildTag,
        default_value_supplier: DefaultValueSupplier,
    ) -> str | None:
        """Changelog text for ``current_build_tag``.

        Raises:
            TagNotFoundError: A tag in the range is missing from the repository.
            RepositoryAccessError: The repository cannot be read.
        """
        tag_range = self.repository.find_tag_range(current_build_tag, self.variants)
        commits = self.repository.commits_in_range(tag_range)
        logger.info(
            "commit_range_loaded",
            current=current_build_tag.name,
            previous=tag_range.previous_build_tag.name if tag_range.previous_build_tag else None,
            commits=len(commits),
        )
        if not commits:
            return default_value_supplier(tag_range)

        text = self.render(self.collect_entries(commits))
        if not text.strip():
            logger.info("changelog_empty_after_filtering", current=current_build_tag.name)
            return default_value_supplier(tag_range)

        logger.info("changelog_rendered", current=current_build_tag.name, length=len(text))
        return text

    def collect_entries(self, commits: Iterable[CommitEntry]) -> list[ChangelogEntry]:
        """Deduplicated entries in commit order.

        Commits sharing an issue key collapse into the first one seen;
        commits without a key collapse only when their text is identical.
        """
        entries: list[ChangelogEntry] = []
        seen: set[tuple[str, str]] = set()

        for commit in commits:
            if self.settings.exclude_merges and commit.is_merge:
                continue
            subject = commit.subject
            if not subject:
                continue

            entry = ChangelogEntry(
                raw_message=subject,
                issue_key=extract_issue_key(subject, self._issue_pattern),
            )
            if entry.issue_key is None and not self.settings.include_unkeyed:
                continue
            if entry.dedupe_key in seen:
                continue
            seen.add(entry.dedupe_key)
            entries.append(entry)

        return entries

    def render(self, entries: Iterable[ChangelogEntry]) -> str:
        """One bullet per entry; issue numbers become links when a URL prefix is set."""
        lines: list[str] = []
        for entry in entries:
            text = entry.raw_message
            if entry.issue_key is not None:
                text = link_issues(
                    text,
                    self._link_pattern,
                    self.settings.issue_url_prefix,
                    self.settings.link_style,
                )
            lines.append(f"{self.settings.bullet}{text}")
        return "\n".join(lines)
