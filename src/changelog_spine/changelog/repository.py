"""Tag resolution across concurrently built variants.

Stability: stable
Tier: none
Since: 0.1.0
Dependencies: stdlib-only
Doc-Types: API_REFERENCE, TECHNICAL_DESIGN
Tags: changelog, git, tags, resolver

Several variants (``debug``, ``release``, ``googleRelease`` ...) are tagged
independently in one repository. A changelog for a variant compares its
current build tag against the closest earlier build tag of the same
variant set, never against a neighbouring variant's tag.

Previous-tag selection orders by build number, not by commit ancestry: a
tag re-created out of order is still picked by its number.
"""

from __future__ import annotations

from collections.abc import Iterable

from changelog_spine.core.logging import get_logger

from .git_command import GitBackend, sort_build_tags
from .model import BuildTag, CommitEntry, TagRange

logger = get_logger(__name__)


class GitRepository:
    """Resolves build tags and tag ranges on top of a :class:`GitBackend`.

    Holds no state besides the backend; the variant filter is passed on
    every call.

    Examples:
        >>> repo = GitRepository(FixtureGitExecutor.from_file(path))
        >>> repo.find_previous_tag(current, {"release"})
        BuildTag(name='v1.0.3-release', build_number=3, variant='release', ...)
    """

    def __init__(self, git: GitBackend):
        self.git = git

    def find_previous_tag(
        self,
        current_build_tag: BuildTag,
        variant_filter: Iterable[str],
    ) -> BuildTag | None:
        """The tag immediately preceding ``current_build_tag`` within the filter.

        Returns None when there is no earlier build (first build, or the
        tag history was reset). Equal build numbers resolve to the lexically
        greatest tag name.
        """
        variants = set(variant_filter)
        candidates = [
            tag
            for tag in self.git.list_tags(variants)
            if tag.name != current_build_tag.name
            and tag.variant in variants
            and tag.build_number < current_build_tag.build_number
        ]
        previous = sort_build_tags(candidates)[0] if candidates else None
        logger.debug(
            "previous_tag_resolved",
            current=current_build_tag.name,
            previous=previous.name if previous else None,
            variants=sorted(variants),
        )
        return previous

    def find_last_tag(self, variant_filter: Iterable[str]) -> BuildTag | None:
        """The most recent build tag for the filter, or None if there is none."""
        tags = self.git.list_tags(set(variant_filter))
        return tags[0] if tags else None

    def find_tag_range(
        self,
        current_build_tag: BuildTag,
        variant_filter: Iterable[str],
    ) -> TagRange:
        return TagRange(
            previous_build_tag=self.find_previous_tag(current_build_tag, variant_filter),
            current_build_tag=current_build_tag,
        )

    def commits_in_range(self, tag_range: TagRange) -> list[CommitEntry]:
        """Commits after the previous tag up to and including the current tag.

        Raises:
            TagNotFoundError: If either tag is missing from the repository.
            RepositoryAccessError: If the repository cannot be read.
        """
        to_commit = self.git.resolve_commit(tag_range.current_build_tag.name)
        from_commit = None
        if tag_range.previous_build_tag is not None:
            from_commit = self.git.resolve_commit(tag_range.previous_build_tag.name)
        return self.git.log_between(from_commit, to_commit)
