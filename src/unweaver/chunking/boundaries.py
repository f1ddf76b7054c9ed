"""
Boundary detection and splitting strategies for chunking.

Every splitter takes raw text and returns trimmed, non-empty pieces in
source order.
"""

import re
from typing import Callable, Dict, List

from ..core.models import ROW_DELIMITER, Granularity

HEADING_LINE = re.compile(r"^\s*(#{1,6})\s+(.+?)\s*$")
# Any run of #, used by raw section splitting
_ANY_HEADING = re.compile(r"^\s*#+\s")
_SPEAKER_LINE = re.compile(r"^[A-Z0-9][\w \t]*:", re.MULTILINE)
_SPEAKER_BOUNDARY = re.compile(r"\n(?=[A-Z0-9][\w \t]*:)")
_SENTENCE = re.compile(r"""[^.!?]+[.!?]+["']?|[^.!?]+\Z""")

# RESPONSE: paragraph splitting only when blank-line breaks make up more
# than this share of all line breaks (tunable)
RESPONSE_PARAGRAPH_RATIO = 0.1


def normalize_text(text: str) -> str:
    """Normalize line endings CRLF/CR -> LF, leaving content otherwise intact."""
    return re.sub(r"\r\n?", "\n", text)


def _clean(pieces: List[str]) -> List[str]:
    return [p.strip() for p in pieces if p.strip()]


def split_by_paragraphs(text: str) -> List[str]:
    """Split on blank-line boundaries."""
    text = text.replace(ROW_DELIMITER, "\n\n")
    return _clean(re.split(r"\n\s*\n", text))


def split_by_sentences(text: str) -> List[str]:
    """Split after runs of .!? (plus an optional closing quote)."""
    text = text.replace(ROW_DELIMITER, " ")
    sentences = _SENTENCE.findall(text) or [text]
    return _clean(sentences)


def split_by_lines(text: str) -> List[str]:
    return _clean(text.split("\n"))


def split_by_headings(text: str) -> List[str]:
    """Split text before every heading line, heading kept with its body."""
    lines = text.split("\n")
    chunks = []
    current_chunk: List[str] = []

    for line in lines:
        if _ANY_HEADING.match(line) and current_chunk:
            # Found a heading, finish current chunk
            chunks.append("\n".join(current_chunk))
            current_chunk = [line]
        else:
            current_chunk.append(line)

    # Add final chunk
    if current_chunk:
        chunks.append("\n".join(current_chunk))

    return _clean(chunks)


def has_speaker_turns(text: str) -> bool:
    return _SPEAKER_LINE.search(text) is not None


def split_by_turns(text: str) -> List[str]:
    """Split before lines shaped like ``SPEAKER: ...``.

    Text with no speaker lines falls back to paragraphs.
    """
    if not has_speaker_turns(text):
        return split_by_paragraphs(text)
    return _clean(_SPEAKER_BOUNDARY.split(text))


def split_by_phrases(text: str) -> List[str]:
    text = text.replace(ROW_DELIMITER, " ")
    return _clean(re.split(r"[,;]\s+", text))


def split_by_responses(text: str) -> List[str]:
    """Split survey response blocks.

    Row-delimited text (see ``format_table_text``) splits on the marker;
    otherwise blank lines are used when frequent enough, else single lines.
    """
    if ROW_DELIMITER in text:
        return _clean(text.split(ROW_DELIMITER))

    double_newlines = text.count("\n\n")
    single_newlines = text.count("\n")
    if double_newlines > 1 and double_newlines > single_newlines * RESPONSE_PARAGRAPH_RATIO:
        return _clean(re.split(r"\n\n+", text))
    return _clean(re.split(r"\n+", text))


def split_whole(text: str) -> List[str]:
    return _clean([text.replace(ROW_DELIMITER, "\n\n")])


def keep_whole(text: str) -> List[str]:
    return _clean([text])


FLAT_SPLITTERS: Dict[Granularity, Callable[[str], List[str]]] = {
    Granularity.PARAGRAPH: split_by_paragraphs,
    Granularity.SENTENCE: split_by_sentences,
    Granularity.LINE: split_by_lines,
    Granularity.SECTION: split_by_headings,
    Granularity.HEADING: split_by_headings,
    Granularity.SUBSECTION: split_by_headings,
    Granularity.TURN: split_by_turns,
    Granularity.PHRASE: split_by_phrases,
    Granularity.RESPONSE: split_by_responses,
    Granularity.WHOLE: split_whole,
    Granularity.FILE: keep_whole,
}


def split_flat(text: str, granularity: Granularity) -> List[str]:
    """Split text by one granularity; unknown granularities keep the text whole."""
    splitter = FLAT_SPLITTERS.get(granularity)
    if splitter is None:
        return keep_whole(text)
    return splitter(text)
