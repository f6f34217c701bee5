"""Tests for the FAQ index and the reference-data loader."""

from __future__ import annotations

import json

from laborbot.config import ARTICLES_PATH, FAQS_PATH
from laborbot.tools.faqs import FaqIndex, FaqRecord, format_faq_reply
from laborbot.tools.loader import load_articles, load_faqs


class TestFindBest:
    def test_matches_by_keyword(self, faq_index):
        record = faq_index.find_best("請問加班費怎麼算呢")
        assert record.question == "加班費怎麼算？"

    def test_no_match_returns_none(self, faq_index):
        assert faq_index.find_best("完全無關的句子") is None

    def test_tie_keeps_first(self):
        a = FaqRecord("A", "a", ("離職",))
        b = FaqRecord("B", "b", ("離職",))
        assert FaqIndex([a, b]).find_best("我想離職") is a

    def test_more_keyword_hits_win(self):
        a = FaqRecord("A", "a", ("特休",))
        b = FaqRecord("B", "b", ("特休", "折現"))
        assert FaqIndex([a, b]).find_best("特休可以折現嗎").question == "B"

    def test_empty_text_returns_none(self, faq_index):
        assert faq_index.find_best("") is None
        assert faq_index.find_best(None) is None


class TestFormatFaqReply:
    def test_includes_question_answer_and_category(self, sample_faqs):
        text = format_faq_reply(sample_faqs[0])
        assert text.startswith("❓ 加班費怎麼算？")
        assert "前 2 小時 1.34 倍。" in text
        assert "分類：加班" in text


class TestLoader:
    def test_shipped_snapshots_load(self):
        articles = load_articles(ARTICLES_PATH)
        faqs = load_faqs(FAQS_PATH)
        assert len(articles) > 10
        assert len(faqs) > 5
        assert any(a.number == 38 for a in articles)

    def test_missing_file_gives_empty_tuple(self, tmp_path):
        assert load_articles(tmp_path / "nope.json") == ()
        assert load_faqs(tmp_path / "nope.json") == ()

    def test_invalid_json_gives_empty_tuple(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_articles(path) == ()

    def test_wrong_shape_gives_empty_tuple(self, tmp_path):
        path = tmp_path / "shape.json"
        path.write_text(json.dumps({"articles": "oops"}), encoding="utf-8")
        assert load_articles(path) == ()

    def test_malformed_records_are_skipped(self, tmp_path):
        path = tmp_path / "articles.json"
        path.write_text(
            json.dumps(
                {
                    "articles": [
                        {"no": 24, "title": "t", "summary": "s", "keywords": ["加班費"]},
                        {"no": "x"},
                        {"title": "no number"},
                        {"number": 30, "title": "t2"},
                        {"no": -1},
                    ]
                }
            ),
            encoding="utf-8",
        )
        articles = load_articles(path)
        assert [a.number for a in articles] == [24, 30]
        assert articles[0].keywords == ("加班費",)

    def test_faq_without_answer_is_skipped(self, tmp_path):
        path = tmp_path / "faqs.json"
        path.write_text(
            json.dumps({"faqs": [{"question": "q"}, {"question": "q2", "answer": "a2"}]}),
            encoding="utf-8",
        )
        faqs = load_faqs(path)
        assert len(faqs) == 1
        assert faqs[0].answer == "a2"
