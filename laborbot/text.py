"""Small text helpers shared by the matchers and lookups."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")

# ０-９ (U+FF10..U+FF19) → 0-9
_FULLWIDTH_DIGITS = str.maketrans("０１２３４５６７８９", "0123456789")


def normalize(text: str | None) -> str:
    """Lower-case *text* and drop every whitespace character."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub("", text.lower())


def strip_whitespace(text: str | None) -> str:
    """Drop every whitespace character without changing case."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub("", text)


def to_halfwidth_digits(text: str) -> str:
    return text.translate(_FULLWIDTH_DIGITS)
