"""Tests for n-gram frequency extraction."""

import pytest

from unweaver.analytics.ngrams import STOP_WORDS, extract_ngrams, tokenize
from unweaver.core.models import Chunk, Granularity

pytestmark = pytest.mark.unit


def _chunks(*texts):
    return [Chunk(id=str(i), text=t, granularity=Granularity.PARAGRAPH) for i, t in enumerate(texts)]


class TestTokenize:
    def test_lowercases_and_drops_punctuation(self):
        assert tokenize("The Cat, sat!  On-mat") == ["the", "cat", "sat", "onmat"]

    def test_empty(self):
        assert tokenize("  ...  ") == []


class TestExtractNgrams:
    def test_stop_words_excluded_from_any_position(self):
        result = extract_ngrams(_chunks("The cat sat. The cat ran."))

        assert [(g.text, g.count) for g in result.bigrams] == [("cat sat", 1), ("cat ran", 1)]
        # "sat the" and "the cat" contain a stop word
        assert result.trigrams == []

    def test_counts_across_chunks_descending_ties_first_seen(self):
        result = extract_ngrams(_chunks("green pear red apple", "red apple"))

        assert [(g.text, g.count) for g in result.bigrams] == [
            ("red apple", 2),
            ("green pear", 1),
            ("pear red", 1),
        ]
        assert [g.text for g in result.trigrams] == ["green pear red", "pear red apple"]
        assert all(g.order == 3 for g in result.trigrams)

    def test_ngrams_do_not_span_chunks(self):
        result = extract_ngrams(_chunks("alpha", "beta"))

        assert result.bigrams == []

    def test_top_n(self):
        result = extract_ngrams(_chunks("a1 b1 c1 d1 e1"), top_n=2)

        assert len(result.bigrams) == 2
        assert len(result.trigrams) == 2

    def test_custom_stop_words_are_case_insensitive(self):
        result = extract_ngrams(_chunks("quick brown fox"), stop_words=["Brown"])

        assert result.bigrams == []

    def test_default_stop_list(self):
        assert {"the", "and", "they"} <= STOP_WORDS
        assert extract_ngrams([]).bigrams == []
