"""Text utilities for changelog output.

Stability: stable
Tier: none
Since: 0.1.0
Dependencies: stdlib-only
Doc-Types: API_REFERENCE
Tags: changelog, formatting, truncation, links

Issue-key extraction, issue-link substitution in the styles chat
integrations understand, and length capping that never cuts through a
user-perceived character.
"""

from __future__ import annotations

import html
import re
import unicodedata

from changelog_spine.core.settings import LinkStyle

ELLIPSIS = "…"

_ZERO_WIDTH_JOINER = "\u200d"

# How far back from the cut a line break may be to be preferred over it.
_LINE_BACKOFF = 120


def _key_group(pattern: re.Pattern[str]) -> int | str:
    if "issue" in pattern.groupindex:
        return "issue"
    return 1 if pattern.groups else 0


def extract_issue_key(text: str, pattern: re.Pattern[str]) -> str | None:
    """First issue key in ``text``, or None.

    The key is the ``issue`` named group when the pattern defines one, else
    group 1 when there are groups, else the whole match. Never raises.
    """
    match = pattern.search(text)
    if match is None:
        return None
    return match.group(_key_group(pattern)) or None


def format_issue_link(key: str, url_prefix: str, style: LinkStyle = LinkStyle.MARKDOWN) -> str:
    url = f"{url_prefix}{key}"
    if style is LinkStyle.MARKDOWN:
        return f"[{key}]({url})"
    if style is LinkStyle.SLACK:
        return f"<{url}|{key}>"
    if style is LinkStyle.HTML:
        return f'<a href="{html.escape(url, quote=True)}">{html.escape(key)}</a>'
    return key


def link_issues(
    text: str,
    pattern: re.Pattern[str],
    url_prefix: str | None,
    style: LinkStyle = LinkStyle.MARKDOWN,
) -> str:
    """Replace every issue number matched by ``pattern`` with a link.

    The issue number follows the same group rule as :func:`extract_issue_key`;
    only that part of each match is replaced, the rest of the match is kept.
    Without a URL prefix (or with the plain style) the text is returned
    unchanged.
    """
    if not url_prefix or style is LinkStyle.PLAIN:
        return text
    group = _key_group(pattern)

    def _link(match: re.Match[str]) -> str:
        key = match.group(group)
        if not key:
            return match.group(0)
        start, end = match.span(group)
        whole = match.group(0)
        offset = match.start()
        return (
            whole[: start - offset]
            + format_issue_link(key, url_prefix, style)
            + whole[end - offset :]
        )

    return pattern.sub(_link, text)


def _is_joining(char: str) -> bool:
    """Whether ``char`` attaches to the character before it."""
    if unicodedata.combining(char):
        return True
    if char == _ZERO_WIDTH_JOINER:
        return True
    code = ord(char)
    return (
        0xFE00 <= code <= 0xFE0F  # variation selectors
        or 0xE0100 <= code <= 0xE01EF
        or 0x1F3FB <= code <= 0x1F3FF  # emoji skin-tone modifiers
        or 0xE0020 <= code <= 0xE007F  # emoji tag sequences
        or 0x1160 <= code <= 0x11FF  # hangul medial vowels and final consonants
        or 0xD7B0 <= code <= 0xD7FF
    )


def _is_regional_indicator(char: str) -> bool:
    return 0x1F1E6 <= ord(char) <= 0x1F1FF


def _splits_flag(text: str, cut: int) -> bool:
    """Whether ``cut`` falls between the two halves of a regional-indicator pair."""
    if not (_is_regional_indicator(text[cut]) and _is_regional_indicator(text[cut - 1])):
        return False
    run = 0
    index = cut - 1
    while index >= 0 and _is_regional_indicator(text[index]):
        run += 1
        index -= 1
    return run % 2 == 1


def _safe_cut(text: str, limit: int) -> int:
    """Largest index <= limit that does not split a character sequence."""
    cut = limit
    while 0 < cut < len(text) and (
        _is_joining(text[cut])
        or text[cut - 1] == _ZERO_WIDTH_JOINER
        or _splits_flag(text, cut)
    ):
        cut -= 1
    return cut


def ellipsize_at(text: str, max_length: int, marker: str = ELLIPSIS) -> str:
    """Cap ``text`` at ``max_length`` characters, ending with ``marker``.

    Text that fits is returned unchanged. Otherwise the text is cut at the
    last line boundary when one lies within a short distance of the allowed
    length, else at the nearest position that keeps a user-perceived
    character whole (combining marks, emoji modifiers, ZWJ sequences and
    flags). The result is never longer than ``max_length``, so applying the
    function twice gives the same result as applying it once.

    Examples:
        >>> ellipsize_at("short", 10)
        'short'
        >>> ellipsize_at("- one\\n- two\\n- three", 14)
        '- one\\n- two\\n…'
        >>> ellipsize_at("abcdef", 4)
        'abc…'
    """
    if max_length < 0:
        raise ValueError(f"max_length must be >= 0, got {max_length}")
    if len(text) <= max_length:
        return text
    if len(marker) >= max_length:
        return marker[:max_length]

    budget = max_length - len(marker)
    cut = _safe_cut(text, budget)
    head = text[:cut]

    newline = head.rfind("\n")
    if newline > 0 and cut - (newline + 1) <= _LINE_BACKOFF:
        return head[: newline + 1] + marker
    return head + marker
