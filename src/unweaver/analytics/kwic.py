"""Keyword-in-context concordance over chunk text."""

from typing import Iterable, List, NamedTuple

from ..core.models import Chunk

DEFAULT_WINDOW = 40
ELLIPSIS = "..."


class KwicLine(NamedTuple):
    left: str
    keyword: str
    right: str
    chunk_id: str
    source_label: str | None = None


def kwic(chunks: Iterable[Chunk], keyword: str, window: int = DEFAULT_WINDOW) -> List[KwicLine]:
    """Find every case-insensitive occurrence of ``keyword`` with context.

    The search advances one character past each match start, so a keyword
    that overlaps itself ("aa" in "aaa") is reported at every offset.
    Context is cut at ``window`` characters and marked with an ellipsis
    where the chunk continues beyond it.
    """
    if not keyword:
        return []

    needle = keyword.lower()
    size = len(keyword)
    lines: List[KwicLine] = []

    for chunk in chunks:
        text = chunk.text
        haystack = text.lower()
        start = haystack.find(needle)

        while start > -1:
            end = start + size
            left_start = max(0, start - window)
            right_end = min(len(text), end + window)

            left = text[left_start:start]
            right = text[end:right_end]
            lines.append(
                KwicLine(
                    left=(ELLIPSIS if left_start > 0 else "") + left,
                    keyword=text[start:end],
                    right=right + (ELLIPSIS if right_end < len(text) else ""),
                    chunk_id=chunk.id,
                    source_label=chunk.source_label,
                )
            )
            start = haystack.find(needle, start + 1)

    return lines
