from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, Field, model_validator

# Marker placed between rows when a table is flattened to text
ROW_DELIMITER = "<<<ROW_BREAK>>>"

HEADING_LEVELS = range(1, 7)

# level (1-6) -> heading titles in document order
HeadingIndex = Dict[int, List[str]]


def empty_heading_index() -> HeadingIndex:
    return {level: [] for level in HEADING_LEVELS}


class DocumentKind(str, Enum):
    PLAIN = "plain"
    MARKDOWN = "markdown"
    TABULAR = "tabular"


class Granularity(str, Enum):
    """Splitting strategies a chunk can be produced by."""

    WHOLE = "WHOLE"
    FILE = "FILE"
    PARAGRAPH = "PARAGRAPH"
    SENTENCE = "SENTENCE"
    LINE = "LINE"
    TURN = "TURN"
    SECTION = "SECTION"
    HEADING = "HEADING"
    SUBSECTION = "SUBSECTION"
    RESPONSE = "RESPONSE"
    PHRASE = "PHRASE"
    ROW_COMBINED = "ROW_COMBINED"
    ROW_DISTINCT_COLUMNS = "ROW_DISTINCT_COLUMNS"

    @classmethod
    def parse(cls, value: "str | Granularity") -> "Granularity":
        """Coerce a case-insensitive name into a Granularity."""
        if isinstance(value, Granularity):
            return value
        try:
            return cls(value.strip().upper().replace("-", "_"))
        except ValueError as e:
            valid = ", ".join(g.value for g in cls)
            raise ValueError(f"Unknown granularity '{value}' (expected one of: {valid})") from e


class RowStrategy(str, Enum):
    COMBINE = "COMBINE"
    DISTINCT = "DISTINCT"


class SourceDocument(BaseModel):
    id: str
    name: str
    content: str
    kind: DocumentKind = DocumentKind.PLAIN
    table_headers: list[str] | None = None  # tabular only

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _headers_only_for_tables(self) -> "SourceDocument":
        if self.kind != DocumentKind.TABULAR and self.table_headers is not None:
            raise ValueError("table_headers is only valid for tabular documents")
        return self


class Table(BaseModel):
    headers: list[str] = []
    rows: list[list[str]] = []

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    def cell(self, row: list[str], index: int) -> str:
        """Field at ``index`` of ``row``; malformed rows read as empty."""
        if 0 <= index < len(row):
            return row[index]
        return ""


class ColumnRoleConfig(BaseModel):
    target_columns: list[str] = []
    context_columns: list[str] = []
    sentiment_context_columns: list[str] = []
    strategy: RowStrategy = RowStrategy.DISTINCT

    @model_validator(mode="after")
    def _sentiment_subset_of_context(self) -> "ColumnRoleConfig":
        stray = [c for c in self.sentiment_context_columns if c not in self.context_columns]
        if stray:
            raise ValueError(f"sentiment context columns must be context columns: {stray}")
        return self


class Chunk(BaseModel):
    """An ordered unit of text with provenance and optional enrichment."""

    id: str
    text: str
    granularity: Granularity
    source_id: str | None = None
    source_label: str | None = None
    tags: list[str] = Field(default_factory=list)

    # Populated only by the external enrichment step
    sentiment: float | None = None
    analysis: str | None = None
    is_analyzed: bool = False
