"""Version code / version name derivation from build tags.

Stability: stable
Tier: none
Since: 0.1.0
Dependencies: stdlib-only
Doc-Types: API_REFERENCE
Tags: changelog, versioning, tags

The build number of the last tag doubles as the artifact's version code
and the tag name as its version name. Without a tag the build falls back
to version code 1 and ``<default_build_version>-<variant>``.
"""

from __future__ import annotations

import re

from changelog_spine.core.errors import InvalidConfigError
from changelog_spine.core.settings import DEFAULT_TAG_PATTERN

from .model import BuildTag

DEFAULT_BUILD_VERSION = "v0.0.1"


def version_code(tag: BuildTag | None) -> int:
    return tag.build_number if tag is not None else 1


def version_name(
    tag: BuildTag | None,
    variant: str,
    default_build_version: str = DEFAULT_BUILD_VERSION,
) -> str:
    return tag.name if tag is not None else f"{default_build_version}-{variant}"


def increase_build_tag(
    tag: BuildTag,
    tag_pattern: str | re.Pattern[str] = DEFAULT_TAG_PATTERN,
) -> BuildTag:
    """The tag the next build of the same variant will carry.

    The ``build`` group of the tag name is replaced with the next build
    number; the rest of the name is kept.

    Examples:
        >>> increase_build_tag(BuildTag("v1.2.5-release", 5, "release")).name
        'v1.2.6-release'

    Raises:
        InvalidConfigError: If the tag name does not match ``tag_pattern``.
    """
    pattern = re.compile(tag_pattern) if isinstance(tag_pattern, str) else tag_pattern
    match = pattern.match(tag.name)
    if match is None:
        raise InvalidConfigError(
            "tag_pattern",
            pattern.pattern,
            f"Tag {tag.name!r} does not match tag pattern {pattern.pattern!r}",
        )
    next_number = tag.build_number + 1
    start, end = match.span("build")
    name = f"{tag.name[:start]}{next_number}{tag.name[end:]}"
    return BuildTag(name=name, build_number=next_number, variant=tag.variant)
