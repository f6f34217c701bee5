"""Article-number extraction from free text.

Two modes:

* :func:`extract_single_reference` reads what a user typed.  Queries name
  one article, so an ordered list of anchored patterns is tried and the
  first hit wins ("勞基法第24條", "勞動基準法30條", "第 38 條").
* :func:`extract_all_references` scans generated prose, which may cite
  several articles; every bare "第N條" is collected so each can be linked.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from laborbot.text import strip_whitespace, to_halfwidth_digits

_NUM = r"([0-9０-９]{1,3})"

_SINGLE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(rf"勞動基準法第?{_NUM}條?"),
    re.compile(rf"勞基法第?{_NUM}條?"),
    re.compile(rf"勞動基準法{_NUM}條?"),
    re.compile(rf"勞基法{_NUM}條?"),
    re.compile(rf"第{_NUM}條"),
)

_BARE_RE = re.compile(rf"第\s*{_NUM}\s*條")

LAW_DATABASE_URL = "https://law.moj.gov.tw/LawClass/LawSingle.aspx?pcode=N0030001&flno={number}"


def _to_int(digits: str) -> int | None:
    try:
        return int(to_halfwidth_digits(digits))
    except ValueError:
        return None


def extract_single_reference(text: str | None) -> int | None:
    """Return the one article number a user query refers to, if any."""
    if not text:
        return None
    compact = strip_whitespace(text)
    for pattern in _SINGLE_PATTERNS:
        match = pattern.search(compact)
        if match:
            number = _to_int(match.group(1))
            if number is not None:
                return number
    return None


def extract_all_references(text: str | None) -> set[int]:
    """Collect every distinct "第N條" number cited in *text*."""
    if not text:
        return set()
    found: set[int] = set()
    for match in _BARE_RE.finditer(text):
        number = _to_int(match.group(1))
        if number is not None:
            found.add(number)
    return found


def format_citations(numbers: Iterable[int]) -> str:
    """Render a link list for the cited articles; empty input gives ``""``."""
    ordered = sorted(set(numbers))
    if not ordered:
        return ""
    lines = ["📎 相關條文："]
    for number in ordered:
        lines.append(f"• 第 {number} 條：{LAW_DATABASE_URL.format(number=number)}")
    return "\n".join(lines)
