"""Load the article and FAQ snapshots from JSON.

A missing or broken file never stops the bot: the failure is logged and
an empty tuple comes back, so every lookup misses and questions fall
through to the AI / guidance branches.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from laborbot.tools.articles import ArticleRecord
from laborbot.tools.faqs import FaqRecord

logger = logging.getLogger(__name__)


def _read_collection(path: Path, key: str) -> list[Any]:
    """Return ``data[key]`` from the JSON file, or ``[]`` on any failure."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.error("Reference data file not found: %s", path)
        return []
    except (OSError, ValueError) as exc:
        logger.error("Could not read reference data %s: %s", path, exc)
        return []

    items = data.get(key) if isinstance(data, dict) else None
    if not isinstance(items, list):
        logger.error("Reference data %s has no %r list", path, key)
        return []
    return items


def _keywords(raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(str(k) for k in raw if k)


def load_articles(path: Path) -> tuple[ArticleRecord, ...]:
    records: list[ArticleRecord] = []
    for i, item in enumerate(_read_collection(path, "articles")):
        try:
            number = int(item.get("no", item.get("number")))
            if number <= 0:
                raise ValueError("article number must be positive")
            records.append(
                ArticleRecord(
                    number=number,
                    title=str(item.get("title") or ""),
                    summary=str(item.get("summary") or ""),
                    keywords=_keywords(item.get("keywords")),
                )
            )
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed article #%d in %s: %s", i, path, exc)
    logger.info("Loaded %d articles from %s", len(records), path)
    return tuple(records)


def load_faqs(path: Path) -> tuple[FaqRecord, ...]:
    records: list[FaqRecord] = []
    for i, item in enumerate(_read_collection(path, "faqs")):
        try:
            question = str(item["question"])
            answer = str(item["answer"])
        except (KeyError, TypeError) as exc:
            logger.warning("Skipping malformed FAQ #%d in %s: %s", i, path, exc)
            continue
        records.append(
            FaqRecord(
                question=question,
                answer=answer,
                keywords=_keywords(item.get("keywords")),
                category=str(item.get("category") or ""),
            )
        )
    logger.info("Loaded %d FAQs from %s", len(records), path)
    return tuple(records)
