"""FAQ index: canned question/answer pairs matched by keyword score."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from laborbot.tools.keywords import best_keyword_match

_DIVIDER = "────────────────────"


@dataclass(frozen=True)
class FaqRecord:
    question: str
    answer: str
    keywords: tuple[str, ...] = ()
    category: str = ""


class FaqIndex:
    """Read-only FAQ snapshot with the same scoring rules as the article index."""

    def __init__(self, records: Iterable[FaqRecord] = ()) -> None:
        self._records: tuple[FaqRecord, ...] = tuple(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[FaqRecord]:
        return iter(self._records)

    def find_best(self, text: str | None) -> FaqRecord | None:
        return best_keyword_match(self._records, text)


def format_faq_reply(record: FaqRecord) -> str:
    """Lay out a matched FAQ entry for a chat reply."""
    lines = [f"❓ {record.question}", _DIVIDER, record.answer.strip()]
    if record.category:
        lines += ["", f"🏷️ 分類：{record.category}"]
    lines += ["", "⚠️ 以上為一般性說明，個案仍以主管機關解釋與最新法令為準。"]
    return "\n".join(lines)
