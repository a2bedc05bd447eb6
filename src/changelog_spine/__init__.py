"""
changelog-spine: build changelogs from git tags and commit history.

Resolves the previous build tag of a variant, collects the commits since
then, extracts issue keys from commit subjects and renders a deduplicated,
length-capped changelog for release notes and chat notifications.
"""

__version__ = "0.1.0"
