"""
Tests for the greedy longest-first matcher.
"""

from __future__ import annotations

import random

import pytest

from geotagger.gazetteer import Gazetteer
from geotagger.interval import Interval
from geotagger.resolver import RecognitionContext, Resolver
from geotagger.tokenizer import GeoTagger, split_sentences


def _summary(matches):
    return [(m.text, m.code, m.span.start, m.span.end) for m in matches]


class TestTagSentence:
    def test_province_then_district(self, tagger):
        matches = tagger.tag_sentence("北京市朝阳区", None, RecognitionContext())
        assert _summary(matches) == [
            ("北京市", "11", 0, 2),
            ("朝阳区", "110105", 3, 5),
        ]

    def test_longest_match_preferred(self):
        gazetteer = Gazetteer.from_dicts([
            {"name": "北京市", "code": "11", "childs": []},
            {"name": "北京", "code": "12", "childs": []},
        ])
        tagger = GeoTagger(Resolver(gazetteer))
        matches = tagger.tag_sentence("我在北京市", None, RecognitionContext())
        assert _summary(matches) == [("北京市", "11", 2, 4)]

    def test_prefix_term_matched_via_suffix(self, tagger):
        matches = tagger.tag_sentence("北京欢迎你", None, RecognitionContext())
        assert _summary(matches) == [("北京", "11", 0, 1)]

    def test_origin_disambiguates(self, tagger):
        matches = tagger.tag_sentence("朝阳区", "22", RecognitionContext())
        assert _summary(matches) == [("朝阳区", "220104", 0, 2)]

    def test_shorter_match_when_longer_is_ambiguous(self, tagger):
        # 朝阳区 is ambiguous without context, the shorter 朝阳 falls back to 朝阳市
        matches = tagger.tag_sentence("朝阳区很大。", None, RecognitionContext())
        assert _summary(matches) == [("朝阳", "2113", 0, 1)]

    def test_match_at_sentence_end(self, tagger):
        matches = tagger.tag_sentence("位于海淀区", None, RecognitionContext())
        assert _summary(matches) == [("海淀区", "110108", 2, 4)]

    def test_no_matches(self, tagger):
        assert tagger.tag_sentence("今天天气很好。", None, RecognitionContext()) == []

    @pytest.mark.parametrize("sentence", ["", "京"])
    def test_short_sentences(self, tagger, sentence):
        assert tagger.tag_sentence(sentence, "11", RecognitionContext()) == []

    def test_longest_window_pass(self):
        name = "新疆生产建设兵团第十三师新星市"
        assert len(name) == 15
        gazetteer = Gazetteer.from_dicts([{"name": name, "code": "66", "childs": []}])
        tagger = GeoTagger(Resolver(gazetteer))
        matches = tagger.tag_sentence("前往" + name + "。", None, RecognitionContext())
        assert _summary(matches) == [(name, "66", 2, 16)]

    def test_emission_order_is_by_window_length(self, tagger):
        matches = tagger.tag_sentence("长春北京市", None, RecognitionContext())
        assert _summary(matches) == [
            ("北京市", "11", 2, 4),
            ("长春", "2201", 0, 1),
        ]

    def test_sentence_index_recorded(self, tagger):
        (match,) = tagger.tag_sentence("北京市", None, RecognitionContext(), sentence_index=4)
        assert match.sentence == 4

    def test_invalid_windows(self, resolver):
        with pytest.raises(ValueError):
            GeoTagger(resolver, min_window=1)
        with pytest.raises(ValueError):
            GeoTagger(resolver, max_window=2, min_window=3)


class TestTagDocument:
    def test_context_carries_across_sentences(self, tagger):
        matches = tagger.tag_document(["长春市。", "朝阳区很大。"])
        assert [(m.text, m.code, m.sentence) for m in matches] == [
            ("长春市", "2201", 0),
            ("朝阳区", "220104", 1),
        ]

    def test_context_reset_per_document(self, tagger):
        tagger.tag_document(["长春市。"])
        matches = tagger.tag_document(["朝阳区很大。"])
        assert [(m.text, m.code) for m in matches] == [("朝阳", "2113")]

    def test_explicit_context(self, tagger):
        ctx = RecognitionContext(provinces={"11"})
        matches = tagger.tag_document(["朝阳区"], context=ctx)
        assert [m.code for m in matches] == ["110105"]


class TestNonOverlap:
    @pytest.mark.parametrize("seed", range(20))
    def test_random_sentences(self, tagger, seed):
        rng = random.Random(seed)
        pieces = ["北京", "北京市", "朝阳", "朝阳区", "长春", "市", "区", "天河区",
                  "广州", "从化", "的", "在", "南关区", "海淀"]
        sentence = "".join(rng.choice(pieces) for _ in range(rng.randint(1, 12)))
        matches = tagger.tag_document([sentence], origin_code=rng.choice([None, "11", "22", "44"]))

        spans = sorted(m.span for m in matches)
        for a, b in zip(spans, spans[1:]):
            assert not a.overlaps(b), (sentence, spans)
        for m in matches:
            assert sentence[m.span.start:m.span.end + 1] == m.text
            assert 2 <= len(m.span) <= 15


class TestSplitSentences:
    def test_split_keeps_delimiters(self):
        assert split_sentences("北京市很大。长春市，朝阳区；好") == ["北京市很大。", "长春市，", "朝阳区；", "好"]

    def test_no_empty_pieces(self):
        assert split_sentences("。。") == ["。", "。"]
        assert split_sentences("") == []

    def test_exclamation_and_question_marks_end_sentences(self):
        assert split_sentences("北京市！长春市？朝阳区") == ["北京市！", "长春市？", "朝阳区"]

    def test_legacy_delimiters_give_fewer_sentences(self):
        assert split_sentences("北京市！长春市。", "。,;") == ["北京市！长春市。"]

    def test_custom_delimiters(self):
        assert split_sentences("甲|乙", "|") == ["甲|", "乙"]

    def test_no_delimiters(self):
        assert split_sentences("北京市。", "") == ["北京市。"]


def test_match_span_type(tagger):
    (match,) = tagger.tag_sentence("北京市", None, RecognitionContext())
    assert match.span == Interval(0, 2)
