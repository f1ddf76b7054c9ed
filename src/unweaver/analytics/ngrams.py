"""N-gram frequency extraction over chunk text."""

import re
from typing import Dict, FrozenSet, Iterable, List, NamedTuple, Sequence

from ..core.models import Chunk

STOP_WORDS: FrozenSet[str] = frozenset(
    [
        "the", "and", "or", "but", "in", "on", "at", "to", "a", "an", "is", "are",
        "was", "were", "of", "for", "it", "this", "that", "with", "as", "by", "from",
        "be", "have", "has", "had", "not", "will", "can", "would", "should", "could",
        "i", "you", "he", "she", "we", "they",
    ]
)

DEFAULT_TOP_N = 50

_NON_WORD = re.compile(r"[^\w\s]")


class NgramCount(NamedTuple):
    text: str
    count: int
    order: int  # 2 = bigram, 3 = trigram


class NgramResult(NamedTuple):
    bigrams: List[NgramCount]
    trigrams: List[NgramCount]


def tokenize(text: str) -> List[str]:
    """Lower-case, drop punctuation, split on whitespace."""
    return _NON_WORD.sub("", text.lower()).split()


def _count_ngrams(
    tokens: Sequence[str], order: int, stop_words: FrozenSet[str], counts: Dict[str, int]
) -> None:
    for i in range(len(tokens) - order + 1):
        gram = tokens[i : i + order]
        if any(token in stop_words for token in gram):
            continue
        key = " ".join(gram)
        counts[key] = counts.get(key, 0) + 1


def _top(counts: Dict[str, int], order: int, top_n: int) -> List[NgramCount]:
    # sorted() is stable and dicts keep insertion order, so ties stay first-seen
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [NgramCount(text, count, order) for text, count in ranked[:top_n]]


def extract_ngrams(
    chunks: Iterable[Chunk],
    stop_words: Iterable[str] = STOP_WORDS,
    top_n: int = DEFAULT_TOP_N,
) -> NgramResult:
    """Most frequent bigrams and trigrams with no stop word in any position."""
    stops = frozenset(w.lower() for w in stop_words)
    bigrams: Dict[str, int] = {}
    trigrams: Dict[str, int] = {}

    for chunk in chunks:
        tokens = tokenize(chunk.text)
        _count_ngrams(tokens, 2, stops, bigrams)
        _count_ngrams(tokens, 3, stops, trigrams)

    return NgramResult(_top(bigrams, 2, top_n), _top(trigrams, 3, top_n))
