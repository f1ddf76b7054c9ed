"""Identifier generation for documents and chunks.

Segmentation takes an ``IdGenerator`` instead of drawing from global state,
so tests can inject a deterministic sequence.
"""

import itertools
import secrets
import string
from typing import Protocol

_ALPHABET = string.ascii_lowercase + string.digits


class IdGenerator(Protocol):
    def __call__(self) -> str: ...


class RandomIdGenerator:
    """Short random base36 identifiers (9 characters by default)."""

    def __init__(self, length: int = 9):
        self.length = length

    def __call__(self) -> str:
        return "".join(secrets.choice(_ALPHABET) for _ in range(self.length))


class SequentialIdGenerator:
    """Monotonic identifiers: ``prefix`` + zero-padded counter."""

    def __init__(self, prefix: str = "", start: int = 0, width: int = 4):
        self.prefix = prefix
        self.width = width
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._counter):0{self.width}d}"


def make_id_generator(strategy: str = "random", prefix: str = "") -> IdGenerator:
    if strategy == "sequential":
        return SequentialIdGenerator(prefix=prefix)
    if strategy == "random":
        return RandomIdGenerator()
    raise ValueError(f"Unknown id strategy: {strategy}")


default_id_generator: IdGenerator = RandomIdGenerator()
