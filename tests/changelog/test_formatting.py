"""Tests for changelog_spine.changelog.formatting.

Covers issue-key extraction, link substitution styles and ellipsis
truncation (length bound, idempotence, line and grapheme boundaries).
"""

from __future__ import annotations

import re

import pytest

from changelog_spine.changelog.formatting import (
    ELLIPSIS,
    ellipsize_at,
    extract_issue_key,
    format_issue_link,
    link_issues,
)
from changelog_spine.core.settings import DEFAULT_COMMIT_MESSAGE_KEY, LinkStyle

KEY = re.compile(DEFAULT_COMMIT_MESSAGE_KEY)


class TestExtractIssueKey:
    def test_whole_match(self):
        assert extract_issue_key("PROJ-12: fix crash", KEY) == "PROJ-12"

    def test_no_match(self):
        assert extract_issue_key("chore: bump", KEY) is None

    def test_first_key_wins(self):
        assert extract_issue_key("PROJ-1 and PROJ-2", KEY) == "PROJ-1"

    def test_named_group(self):
        """The 'issue' named group takes precedence over the whole match."""
        pattern = re.compile(r"\[(?P<issue>[A-Z]+-\d+)\]")
        assert extract_issue_key("[APP-7] add share", pattern) == "APP-7"

    def test_first_group(self):
        pattern = re.compile(r"CHANGELOG\((\w+-\d+)\)")
        assert extract_issue_key("CHANGELOG(APP-3): crash fix", pattern) == "APP-3"

    def test_empty_message(self):
        assert extract_issue_key("", KEY) is None


class TestLinkIssues:
    def test_markdown(self):
        text = link_issues("PROJ-12: fix crash", KEY, "https://jira.example.com/browse/")
        assert text == "[PROJ-12](https://jira.example.com/browse/PROJ-12): fix crash"

    def test_slack(self):
        text = link_issues("PROJ-12: fix", KEY, "https://j/", LinkStyle.SLACK)
        assert text == "<https://j/PROJ-12|PROJ-12>: fix"

    def test_html(self):
        text = link_issues("PROJ-12: fix", KEY, "https://j/?a=1&b=", LinkStyle.HTML)
        assert text == '<a href="https://j/?a=1&amp;b=PROJ-12">PROJ-12</a>: fix'

    def test_plain_style_leaves_text(self):
        assert link_issues("PROJ-12: fix", KEY, "https://j/", LinkStyle.PLAIN) == "PROJ-12: fix"

    def test_no_prefix_leaves_text(self):
        assert link_issues("PROJ-12: fix", KEY, None) == "PROJ-12: fix"

    def test_every_occurrence_linked(self):
        text = link_issues("PROJ-1, PROJ-2: merge", KEY, "u/")
        assert text == "[PROJ-1](u/PROJ-1), [PROJ-2](u/PROJ-2): merge"

    def test_grouped_key_links_only_the_number(self):
        pattern = re.compile(r"#(\d+)")
        text = link_issues("fix #42 crash", pattern, "https://t/issues/")
        assert text == "fix #[42](https://t/issues/42) crash"

    def test_grouped_key_keeps_surrounding_match(self):
        pattern = re.compile(r"^(PROJ-\d+):")
        assert link_issues("PROJ-12: fix crash", pattern, "u/") == "[PROJ-12](u/PROJ-12): fix crash"

    def test_named_group_link(self):
        pattern = re.compile(r"\[(?P<issue>[A-Z]+-\d+)\]")
        text = link_issues("[APP-7] add share", pattern, "u/", LinkStyle.SLACK)
        assert text == "[<u/APP-7|APP-7>] add share"

    def test_format_issue_link_plain(self):
        assert format_issue_link("PROJ-1", "u/", LinkStyle.PLAIN) == "PROJ-1"


class TestEllipsizeAt:
    def test_short_text_unchanged(self):
        assert ellipsize_at("hello", 10) == "hello"

    def test_exact_length_unchanged(self):
        assert ellipsize_at("hello", 5) == "hello"

    def test_truncates_with_marker(self):
        result = ellipsize_at("abcdefghij", 5)
        assert result == "abcd" + ELLIPSIS
        assert len(result) == 5

    def test_prefers_line_boundary(self):
        text = "- one\n- two\n- three"
        assert ellipsize_at(text, 14) == "- one\n- two\n" + ELLIPSIS

    def test_custom_marker(self):
        assert ellipsize_at("abcdefghij", 6, marker="...") == "abc..."

    def test_marker_longer_than_limit(self):
        assert ellipsize_at("abcdefghij", 2, marker="...") == ".."

    def test_zero_length(self):
        assert ellipsize_at("abc", 0) == ""

    def test_negative_length_rejected(self):
        with pytest.raises(ValueError):
            ellipsize_at("abc", -1)

    def test_does_not_split_combining_mark(self):
        """'e' + COMBINING ACUTE stays together or goes together."""
        text = "cafe\u0301 au lait"
        result = ellipsize_at(text, 5)
        assert result == "caf" + ELLIPSIS
        assert "\u0301" not in result

    def test_does_not_split_zwj_sequence(self):
        family = "\U0001F468\u200d\U0001F469\u200d\U0001F467"
        text = "ab" + family + "cdef"
        result = ellipsize_at(text, 6)
        assert result == "ab" + ELLIPSIS

    def test_does_not_split_skin_tone_modifier(self):
        text = "ab\U0001F44D\U0001F3FDcd"
        assert ellipsize_at(text, 4) == "ab" + ELLIPSIS

    def test_does_not_split_flag(self):
        text = "ab\U0001F1FA\U0001F1F8cd"
        assert ellipsize_at(text, 4) == "ab" + ELLIPSIS

    def test_keeps_whole_flags_before_cut(self):
        flags = "\U0001F1FA\U0001F1F8\U0001F1E9\U0001F1EA"
        assert ellipsize_at(flags + "xyz", 4) == "\U0001F1FA\U0001F1F8" + ELLIPSIS

    def test_does_not_split_hangul_jamo(self):
        syllable = "\u1100\u1161\u11a8"
        assert ellipsize_at("a" + syllable + "bc", 4) == "a" + ELLIPSIS

    def test_distant_line_break_ignored(self):
        """A line break far before the cut does not throw the rest away."""
        result = ellipsize_at("x\n" + "y" * 3000, 2000)
        assert len(result) == 2000
        assert result == "x\n" + "y" * 1997 + ELLIPSIS

    def test_astral_characters_counted_as_one(self):
        text = "\U0001F600" * 10
        result = ellipsize_at(text, 4)
        assert result == "\U0001F600" * 3 + ELLIPSIS

    @pytest.mark.parametrize(
        "text,limit",
        [
            ("x" * 50, 10),
            ("- a\n- bb\n- ccc\n- dddd", 9),
            ("café" * 5, 7),
            ("", 3),
            ("abc", 1),
        ],
    )
    def test_idempotent_and_bounded(self, text, limit):
        once = ellipsize_at(text, limit)
        assert len(once) <= limit
        assert ellipsize_at(once, limit) == once
