"""Tests for changelog_spine.changelog.model."""

from dataclasses import FrozenInstanceError

import pytest

from changelog_spine.changelog.model import (
    BuildTag,
    BuildVariant,
    ChangelogEntry,
    CommitEntry,
    TagRange,
)


class TestBuildTag:
    def test_fields(self):
        tag = BuildTag("v1.2.5-release", 5, "release")
        assert tag.name == "v1.2.5-release"
        assert tag.build_number == 5
        assert tag.variant == "release"
        assert tag.commit_sha is None

    def test_build_number_must_be_positive(self):
        with pytest.raises(ValueError):
            BuildTag("v1.2.0-release", 0, "release")

    def test_frozen(self):
        tag = BuildTag("v1.2.5-release", 5, "release")
        with pytest.raises(FrozenInstanceError):
            tag.build_number = 6  # type: ignore[misc]

    def test_value_equality(self):
        assert BuildTag("a.1-x", 1, "x") == BuildTag("a.1-x", 1, "x")


class TestTagRange:
    def test_first_build(self):
        assert TagRange(None, BuildTag("v1.0.1-release", 1, "release")).is_first_build

    def test_with_previous(self):
        rng = TagRange(BuildTag("v1.0.1-release", 1, "release"), BuildTag("v1.0.2-release", 2, "release"))
        assert not rng.is_first_build


class TestCommitEntry:
    def test_subject_is_first_line(self):
        commit = CommitEntry(sha="a", message="\n  PROJ-1: title  \n\nbody text\n")
        assert commit.subject == "PROJ-1: title"

    def test_subject_of_empty_message(self):
        assert CommitEntry(sha="a", message="").subject == ""

    def test_is_merge(self):
        assert CommitEntry(sha="m", message="Merge", parents=("a", "b")).is_merge
        assert not CommitEntry(sha="a", message="x", parents=("p",)).is_merge
        assert not CommitEntry(sha="root", message="x").is_merge


class TestChangelogEntry:
    def test_keyed_entries_dedupe_on_key(self):
        first = ChangelogEntry("PROJ-7: one", "PROJ-7")
        second = ChangelogEntry("PROJ-7: two", "PROJ-7")
        assert first.dedupe_key == second.dedupe_key

    def test_unkeyed_entries_dedupe_on_text(self):
        assert ChangelogEntry("chore").dedupe_key == ("message", "chore")
        assert ChangelogEntry("chore").dedupe_key != ChangelogEntry("chores").dedupe_key

    def test_key_never_collides_with_text(self):
        assert ChangelogEntry("PROJ-7", "PROJ-7").dedupe_key != ChangelogEntry("PROJ-7").dedupe_key


class TestBuildVariant:
    def test_capitalized_name(self):
        assert BuildVariant("googleRelease", flavor="google", build_type="release").capitalized_name == "GoogleRelease"

    def test_empty_name(self):
        assert BuildVariant("").capitalized_name == ""
