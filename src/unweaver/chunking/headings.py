"""
Markdown heading analysis.

Builds the level -> titles index used to offer split levels, and derives a
default split level and segmentation suggestion from it.
"""

import re
from typing import Iterable, NamedTuple, Optional, Tuple

from ..core.models import (
    HEADING_LEVELS,
    DocumentKind,
    Granularity,
    HeadingIndex,
    SourceDocument,
    empty_heading_index,
)
from .boundaries import HEADING_LINE

_LINE_BREAK = re.compile(r"\r?\n")


def parse_heading(line: str) -> Optional[Tuple[int, str]]:
    """Return (level, title) when ``line`` is a 1-6 level ATX heading."""
    match = HEADING_LINE.match(line)
    if not match:
        return None
    # Title text is kept as written, including any leading "#"
    title = match.group(2).strip()
    if not title:
        return None
    return len(match.group(1)), title


def analyze_heading_levels(documents: Iterable[SourceDocument]) -> HeadingIndex:
    """Collect heading titles per level across Markdown and plain documents."""
    index = empty_heading_index()
    for doc in documents:
        if doc.kind not in (DocumentKind.MARKDOWN, DocumentKind.PLAIN):
            continue
        for line in _LINE_BREAK.split(doc.content):
            heading = parse_heading(line)
            if heading:
                level, title = heading
                index[level].append(title)
    return index


def total_headings(index: HeadingIndex) -> int:
    return sum(len(titles) for titles in index.values())


def suggest_split_level(index: HeadingIndex) -> int:
    """Pick the heading level to split on by default.

    The shallowest level with more than one heading wins, except that a lone
    level-1 title defers to level 2 when level 2 has several headings.
    Without any repeated level, the shallowest populated level is used.
    """
    level_1 = index.get(1, [])
    level_2 = index.get(2, [])
    if len(level_1) == 1 and len(level_2) > 1:
        return 2

    for level in HEADING_LEVELS:
        if len(index.get(level, [])) > 1:
            return level
    for level in HEADING_LEVELS:
        if index.get(level):
            return level
    return 1


class SegmentationSuggestion(NamedTuple):
    granularity: Granularity
    hierarchical: bool
    header_level: int
    reasoning: str


def suggest_segmentation(documents: list[SourceDocument]) -> SegmentationSuggestion:
    """Rule-based segmentation suggestion for a document set."""
    if any(doc.kind == DocumentKind.TABULAR for doc in documents):
        return SegmentationSuggestion(
            Granularity.ROW_COMBINED,
            True,
            1,
            "Structured data detected. Analyze by row, or treat columns as separate text sources.",
        )

    index = analyze_heading_levels(documents)
    headings = total_headings(index)

    if len(documents) > 1 and headings == 0:
        return SegmentationSuggestion(
            Granularity.FILE,
            False,
            1,
            "Multiple documents with no Markdown structure; analyze file by file.",
        )

    if headings > 0:
        level = suggest_split_level(index)
        return SegmentationSuggestion(
            Granularity.PARAGRAPH,
            True,
            level,
            f"Document structure detected ({headings} headings). "
            f"Treat level {level} headings as distinct sections.",
        )

    return SegmentationSuggestion(
        Granularity.PARAGRAPH,
        False,
        1,
        "No structure detected; splitting prose by paragraph.",
    )
