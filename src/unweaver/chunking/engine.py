"""
Segmentation engine: turns source documents into an ordered chunk sequence.

Each document is first resolved to one split plan, then the plan's handler
produces chunk drafts:

- WholePlan: one chunk with the full content (FILE/WHOLE granularity)
- TabularCombinedPlan: one chunk per row, target columns merged
- TabularDistinctPlan: one chunk per non-empty target cell
- HierarchicalPlan: partition at one heading level, then split each section
- FlatPlan: split the whole content with a single boundary rule

Chunk order follows document order, then row/section order, then the order
of pieces inside a section.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Union

from ..core.ids import IdGenerator, default_id_generator
from ..core.logging import log
from ..core.models import (
    Chunk,
    ColumnRoleConfig,
    DocumentKind,
    Granularity,
    RowStrategy,
    SourceDocument,
    Table,
)
from ..ingest.table import parse_table
from .boundaries import normalize_text, split_flat
from .headings import parse_heading

INTRO_SECTION = "Intro / Untitled"
MAX_HEADING_LEVEL = 6

_SURROUNDING_QUOTE = re.compile(r'^"|"$')


class SegmentationError(ValueError):
    """Raised for arguments the caller must validate before segmenting."""


class WholePlan(NamedTuple):
    granularity: Granularity


class TabularCombinedPlan(NamedTuple):
    config: ColumnRoleConfig


class TabularDistinctPlan(NamedTuple):
    config: ColumnRoleConfig


class HierarchicalPlan(NamedTuple):
    granularity: Granularity
    level: int


class FlatPlan(NamedTuple):
    granularity: Granularity


SplitPlan = Union[WholePlan, TabularCombinedPlan, TabularDistinctPlan, HierarchicalPlan, FlatPlan]


class ChunkDraft(NamedTuple):
    """Chunk content before an identifier is assigned."""

    text: str
    granularity: Granularity
    label: str


def effective_heading_level(granularity: Granularity, header_level: int) -> int:
    """SUBSECTION splits one level below the requested heading level (max 6)."""
    if granularity == Granularity.SUBSECTION:
        return min(MAX_HEADING_LEVEL, header_level + 1)
    return header_level


def plan_document(
    doc: SourceDocument,
    granularity: Granularity,
    column_config: Optional[ColumnRoleConfig],
    hierarchical: bool,
    header_level: int,
) -> SplitPlan:
    """Resolve the split plan for one document."""
    if granularity in (Granularity.FILE, Granularity.WHOLE):
        return WholePlan(granularity)

    if doc.kind == DocumentKind.TABULAR:
        if column_config is None:
            strategy = RowStrategy.DISTINCT if hierarchical else RowStrategy.COMBINE
            column_config = ColumnRoleConfig(
                target_columns=list(doc.table_headers or []),
                strategy=strategy,
            )
        if column_config.strategy == RowStrategy.COMBINE:
            return TabularCombinedPlan(column_config)
        return TabularDistinctPlan(column_config)

    if hierarchical:
        return HierarchicalPlan(granularity, effective_heading_level(granularity, header_level))

    if granularity == Granularity.SUBSECTION:
        return FlatPlan(Granularity.SECTION)
    return FlatPlan(granularity)


def _split_whole(doc: SourceDocument, plan: WholePlan) -> List[ChunkDraft]:
    pieces = split_flat(doc.content, plan.granularity)
    return [ChunkDraft(text, plan.granularity, doc.name) for text in pieces]


def _cell_value(table: Table, row: List[str], column: str) -> str:
    index = table.headers.index(column) if column in table.headers else -1
    return _SURROUNDING_QUOTE.sub("", table.cell(row, index)).strip()


def _context_line(table: Table, row: List[str], config: ColumnRoleConfig) -> str:
    parts = []
    for column in config.context_columns:
        value = _cell_value(table, row, column)
        if not value:
            continue
        if column in config.sentiment_context_columns:
            parts.append(f"[Sentiment Context] {column}: {value}")
        else:
            parts.append(f"{column}: {value}")
    if not parts:
        return ""
    return f"[Meta: {' | '.join(parts)}]\n"


def _split_rows_combined(doc: SourceDocument, plan: TabularCombinedPlan) -> List[ChunkDraft]:
    table = parse_table(doc.content)
    targets = plan.config.target_columns
    drafts = []

    for row in table.rows:
        parts = []
        for column in targets:
            value = _cell_value(table, row, column)
            if value:
                parts.append(f"{column}: {value}" if len(targets) > 1 else value)
        main = "\n".join(parts)
        if not main.strip():
            continue

        text = _context_line(table, row, plan.config) + main
        drafts.append(ChunkDraft(text, Granularity.ROW_COMBINED, doc.name))

    return drafts


def _split_rows_distinct(doc: SourceDocument, plan: TabularDistinctPlan) -> List[ChunkDraft]:
    table = parse_table(doc.content)
    drafts = []

    for row in table.rows:
        context = _context_line(table, row, plan.config)
        for column in plan.config.target_columns:
            if column not in table.headers:
                continue
            value = _cell_value(table, row, column)
            if not value:
                continue
            drafts.append(
                ChunkDraft(
                    f"{context}[Column: {column}]\n{value}",
                    Granularity.ROW_DISTINCT_COLUMNS,
                    f"{doc.name} > {column}",
                )
            )

    return drafts


def split_sections(text: str, level: int) -> List[tuple[str, str]]:
    """Partition text at headings of exactly ``level``.

    Returns (title, body) pairs; text before the first heading belongs to
    the intro section. Shallower headings are parents of the split level and
    are left out of bodies; deeper headings stay in as content.
    """
    sections: List[tuple[str, str]] = []
    title = INTRO_SECTION
    body: List[str] = []

    for line in text.split("\n"):
        heading = parse_heading(line)
        if heading and heading[0] == level:
            sections.append((title, "\n".join(body)))
            title, body = heading[1], []
        elif heading and heading[0] < level:
            continue
        else:
            body.append(line)

    sections.append((title, "\n".join(body)))
    return sections


def _split_hierarchical(doc: SourceDocument, plan: HierarchicalPlan) -> List[ChunkDraft]:
    drafts = []
    for title, body in split_sections(normalize_text(doc.content), plan.level):
        if not body.strip():
            continue

        label = f"{doc.name} > {title}"
        if plan.granularity == Granularity.SUBSECTION:
            drafts.append(ChunkDraft(body.strip(), plan.granularity, label))
            continue

        for piece in split_flat(body, plan.granularity):
            drafts.append(ChunkDraft(piece, plan.granularity, label))

    return drafts


def _split_flat(doc: SourceDocument, plan: FlatPlan) -> List[ChunkDraft]:
    pieces = split_flat(normalize_text(doc.content), plan.granularity)
    return [ChunkDraft(text, plan.granularity, doc.name) for text in pieces]


_HANDLERS: Dict[type, Callable[[SourceDocument, SplitPlan], List[ChunkDraft]]] = {
    WholePlan: _split_whole,  # type: ignore[dict-item]
    TabularCombinedPlan: _split_rows_combined,  # type: ignore[dict-item]
    TabularDistinctPlan: _split_rows_distinct,  # type: ignore[dict-item]
    HierarchicalPlan: _split_hierarchical,  # type: ignore[dict-item]
    FlatPlan: _split_flat,  # type: ignore[dict-item]
}


def execute_plan(doc: SourceDocument, plan: SplitPlan) -> List[ChunkDraft]:
    return _HANDLERS[type(plan)](doc, plan)


def _resolve_granularity(value: Union[Granularity, str]) -> Optional[Granularity]:
    try:
        return Granularity.parse(value)
    except ValueError:
        log.warning("segment.unknown_granularity", granularity=str(value))
        return None


def segment(
    documents: Sequence[SourceDocument],
    granularity: Union[Granularity, str],
    column_config: Optional[ColumnRoleConfig] = None,
    hierarchical: bool = False,
    header_level: int = 1,
    id_generator: Optional[IdGenerator] = None,
) -> List[Chunk]:
    """
    Split documents into an ordered list of chunks.

    Args:
        documents: Source documents, processed in the given order
        granularity: Splitting strategy (or its name); unrecognized names
            keep each document whole, tagged FILE
        column_config: Column roles for tabular documents; all columns are
            targets when omitted
        hierarchical: Split text by headings first (tables: one chunk per column)
        header_level: Heading level (1-6) for hierarchical text splitting
        id_generator: Identifier source for new chunks

    Returns:
        Fresh chunks with provenance and empty tags

    Raises:
        SegmentationError: If header_level is outside 1-6
    """
    if not 1 <= header_level <= MAX_HEADING_LEVEL:
        raise SegmentationError(f"header_level must be between 1 and 6, got {header_level}")

    resolved = _resolve_granularity(granularity)
    new_id = id_generator or default_id_generator

    log.info(
        "segment.start",
        documents=len(documents),
        granularity=resolved.value if resolved is not None else str(granularity),
        hierarchical=hierarchical,
        header_level=header_level,
    )

    chunks: List[Chunk] = []
    for doc in documents:
        if resolved is None:
            plan: SplitPlan = WholePlan(Granularity.FILE)
        else:
            plan = plan_document(doc, resolved, column_config, hierarchical, header_level)
        drafts = execute_plan(doc, plan)
        log.debug(
            "segment.document",
            doc_id=doc.id,
            plan=type(plan).__name__,
            chunks=len(drafts),
        )
        for draft in drafts:
            chunks.append(
                Chunk(
                    id=new_id(),
                    text=draft.text,
                    granularity=draft.granularity,
                    source_id=doc.id,
                    source_label=draft.label,
                    tags=[],
                )
            )

    log.info("segment.complete", chunks=len(chunks))
    return chunks
