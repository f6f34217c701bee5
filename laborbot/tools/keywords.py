"""Keyword scoring shared by the article and FAQ indices.

A record's score is the number of its keywords (each normalized) that
occur as a substring of the normalized query.  The strictly highest score
wins; on a tie the record seen first keeps its place, so results follow
the insertion order of the snapshot and never depend on re-sorting.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, TypeVar

from laborbot.text import normalize


class HasKeywords(Protocol):
    keywords: tuple[str, ...]


R = TypeVar("R", bound=HasKeywords)


def keyword_score(keywords: Iterable[str], normalized_text: str) -> int:
    """Count keywords found in *normalized_text* (empty keywords ignored)."""
    score = 0
    for raw in keywords:
        kw = normalize(raw)
        if kw and kw in normalized_text:
            score += 1
    return score


def best_keyword_match(records: Iterable[R], text: str | None) -> R | None:
    """Return the highest-scoring record for *text*, or ``None``."""
    normalized = normalize(text)
    if not normalized:
        return None

    best: R | None = None
    best_score = 0
    for record in records:
        score = keyword_score(record.keywords, normalized)
        if score > best_score:
            best, best_score = record, score
    return best
