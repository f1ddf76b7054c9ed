"""Lexical exploration over segmented chunks."""

from .kwic import KwicLine, kwic
from .ngrams import STOP_WORDS, NgramCount, NgramResult, extract_ngrams, tokenize

__all__ = [
    "KwicLine",
    "NgramCount",
    "NgramResult",
    "STOP_WORDS",
    "extract_ngrams",
    "kwic",
    "tokenize",
]
