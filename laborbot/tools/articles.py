"""Article index: the read-only snapshot of summarised Labor Standards Act
articles, with exact-number and keyword lookups plus the reply layout used
when a stored article is found.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from laborbot.tools.keywords import best_keyword_match

logger = logging.getLogger(__name__)

_DIVIDER = "────────────────────"
_DEFAULT_SUMMARY = "目前僅知本條與勞動條件相關，建議查閱官方條文以取得完整內容。"
_REMINDER = "⚠️ 提醒：以上為條文重點摘要，僅供一般性參考，實際仍以最新官方條文與主管機關解釋為準。"


@dataclass(frozen=True)
class ArticleRecord:
    """One summarised article, keyed by its article number."""

    number: int
    title: str
    summary: str
    keywords: tuple[str, ...] = ()


class ArticleIndex:
    """In-memory lookups over a fixed, ordered set of articles.

    The snapshot is copied into a tuple at construction and never changes,
    so concurrent readers need no locking.
    """

    def __init__(self, records: Iterable[ArticleRecord] = ()) -> None:
        self._by_number: dict[int, ArticleRecord] = {}
        for record in records:
            if record.number in self._by_number:
                logger.warning("Duplicate article number %d ignored", record.number)
                continue
            self._by_number[record.number] = record
        # Both lookups read this one de-duplicated, insertion-ordered snapshot.
        self._records: tuple[ArticleRecord, ...] = tuple(self._by_number.values())

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ArticleRecord]:
        return iter(self._records)

    def lookup_by_number(self, number: int | str | None) -> ArticleRecord | None:
        """Exact match on the article number.

        Strings of digits are accepted; anything that does not parse as an
        integer simply yields ``None``.
        """
        if number is None or isinstance(number, bool):
            return None
        try:
            n = int(number)
        except (TypeError, ValueError):
            return None
        return self._by_number.get(n)

    def lookup_by_keyword(self, text: str | None) -> ArticleRecord | None:
        """Best keyword-scored article for *text*, or ``None``."""
        return best_keyword_match(self._records, text)


def format_article_reply(number: int, record: ArticleRecord) -> str:
    """Lay out a stored article for a chat reply."""
    title = record.title or f"勞動基準法第 {number} 條"
    summary = record.summary or _DEFAULT_SUMMARY
    keywords = "、".join(record.keywords) if record.keywords else "（尚未整理）"

    lines = [
        f"🧾 你查的是：勞動基準法第 {number} 條",
        _DIVIDER,
        f"📘 條文標題：{title}",
        "",
        "💡 白話重點說明：",
        summary,
        "",
        f"🔍 相關關鍵字：{keywords}",
        "",
        _REMINDER,
    ]
    return "\n".join(lines)
