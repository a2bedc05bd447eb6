"""Data models for changelog generation.

Stability: stable
Tier: none
Since: 0.1.0
Dependencies: stdlib-only
Doc-Types: API_REFERENCE
Tags: changelog, model, dataclass

Frozen dataclasses for build tags, tag ranges, commits and the entries a
changelog is rendered from. The persisted tag record has its own pydantic
model in ``tag_store``; these types are what the engine passes around.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class BuildVariant:
    """A named build configuration (flavor x build type).

    Only ``name`` takes part in variant filtering.

    Attributes:
        name: Variant name, e.g. ``googleRelease``.
        flavor: Product flavor, empty when the project has none.
        build_type: Build type, e.g. ``release``.
    """

    name: str
    flavor: str = ""
    build_type: str = ""

    @property
    def capitalized_name(self) -> str:
        return self.name[:1].upper() + self.name[1:]


@dataclass(frozen=True)
class BuildTag:
    """A marker for one completed build.

    Attributes:
        name: Tag name as it exists in git, e.g. ``v1.2.5-release``.
        build_number: Monotonic build number (>= 1).
        variant: Variant the build belongs to.
        commit_sha: Commit the tag points at, when known.
    """

    name: str
    build_number: int
    variant: str
    commit_sha: str | None = None

    def __post_init__(self) -> None:
        if self.build_number < 1:
            raise ValueError(f"build_number must be >= 1, got {self.build_number}")


@dataclass(frozen=True)
class TagRange:
    """The pair of tags bounding the commits summarised in one changelog.

    Attributes:
        previous_build_tag: Tag to diff against; None on a first build.
        current_build_tag: Tag of the build being described.
    """

    previous_build_tag: BuildTag | None
    current_build_tag: BuildTag

    @property
    def is_first_build(self) -> bool:
        return self.previous_build_tag is None


@dataclass(frozen=True)
class CommitEntry:
    """A single commit read from the log.

    Attributes:
        sha: Full commit SHA.
        message: Full commit message.
        author_date: Author date (ISO 8601 string as printed by git).
        parents: Parent SHAs.
    """

    sha: str
    message: str
    author_date: str = ""
    parents: tuple[str, ...] = field(default_factory=tuple)

    @property
    def subject(self) -> str:
        """First line of the message, stripped."""
        lines = self.message.strip().splitlines()
        return lines[0].strip() if lines else ""

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1


@dataclass(frozen=True)
class ChangelogEntry:
    """One line of the changelog before rendering.

    Attributes:
        raw_message: Display text (the commit subject).
        issue_key: Extracted issue identifier, if any.
    """

    raw_message: str
    issue_key: str | None = None

    @property
    def dedupe_key(self) -> tuple[str, str]:
        if self.issue_key is not None:
            return ("issue", self.issue_key)
        return ("message", self.raw_message)
