"""
Source classification and document ingestion.

Explicit hints (file extension, declared media type) are trusted first;
ambiguous input falls through to content heuristics.
"""

import re
from typing import Optional

from ..core.ids import IdGenerator, default_id_generator
from ..core.logging import log
from ..core.models import DocumentKind, SourceDocument
from .table import parse_table

MANUAL_INPUT_NAME = "Manual Input"

CSV_EXTENSIONS = {"csv"}
CSV_MEDIA_TYPES = {"text/csv", "application/csv"}
MARKDOWN_EXTENSIONS = {"md", "markdown"}
MARKDOWN_MEDIA_TYPES = {"text/markdown", "text/x-markdown"}

# Rows checked for a consistent column count before trusting a CSV guess
CSV_SAMPLE_ROWS = 5

_HEADING_LINE = re.compile(r"^#{1,6}[ \t]+\S", re.MULTILINE)


def _extension(name: str) -> str:
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()


def looks_tabular(content: str) -> bool:
    """Strict CSV check: 2+ columns, data rows, and consistent sampled widths.

    Prose such as "Psmith, Journalist" has a comma in its first line but
    ragged rows after it, so it fails the width check.
    """
    table = parse_table(content)
    width = len(table.headers)
    if width < 2 or not table.rows:
        return False
    return all(len(row) == width for row in table.rows[:CSV_SAMPLE_ROWS])


def has_markdown_headings(content: str) -> bool:
    return _HEADING_LINE.search(content) is not None


def classify(name: str, content: str, media_type: Optional[str] = None) -> DocumentKind:
    """Assign exactly one document kind to decoded text."""
    extension = _extension(name)
    media = (media_type or "").split(";", 1)[0].strip().lower()

    if extension in CSV_EXTENSIONS or media in CSV_MEDIA_TYPES:
        return DocumentKind.TABULAR
    if extension in MARKDOWN_EXTENSIONS or media in MARKDOWN_MEDIA_TYPES:
        return DocumentKind.MARKDOWN
    if looks_tabular(content):
        return DocumentKind.TABULAR
    if has_markdown_headings(content):
        return DocumentKind.MARKDOWN
    return DocumentKind.PLAIN


def ingest_text(
    name: str,
    content: str,
    media_type: Optional[str] = None,
    id_generator: Optional[IdGenerator] = None,
) -> SourceDocument:
    """Build a SourceDocument from decoded text, classifying it once."""
    new_id = id_generator or default_id_generator
    kind = classify(name, content, media_type)

    headers = None
    if kind == DocumentKind.TABULAR:
        headers = parse_table(content).headers

    doc = SourceDocument(
        id=new_id(),
        name=name,
        content=content,
        kind=kind,
        table_headers=headers,
    )
    log.debug(
        "ingest.classified",
        doc_id=doc.id,
        name=name,
        kind=kind.value,
        columns=len(headers) if headers is not None else None,
    )
    return doc


def ingest_manual_text(content: str, id_generator: Optional[IdGenerator] = None) -> SourceDocument:
    """Ingest pasted text; no name hint, so content heuristics decide."""
    return ingest_text(MANUAL_INPUT_NAME, content, id_generator=id_generator)
