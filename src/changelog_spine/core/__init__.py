"""Core primitives shared by changelog-spine: errors, logging and settings."""

from changelog_spine.core.errors import (
    ChangelogSpineError,
    ConfigError,
    RepositoryAccessError,
    TagNotFoundError,
    TagRecordError,
)
from changelog_spine.core.settings import ChangelogSettings, LinkStyle, load_settings

__all__ = [
    "ChangelogSpineError",
    "ConfigError",
    "RepositoryAccessError",
    "TagNotFoundError",
    "TagRecordError",
    "ChangelogSettings",
    "LinkStyle",
    "load_settings",
]
