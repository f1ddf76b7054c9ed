"""Ingestion: source classification, CSV parsing and column role suggestion."""

from .classifier import classify, ingest_manual_text, ingest_text, looks_tabular
from .columns import suggest_column_roles, toggle_column
from .table import format_table_text, parse_table, split_table_line

__all__ = [
    "classify",
    "format_table_text",
    "ingest_manual_text",
    "ingest_text",
    "looks_tabular",
    "parse_table",
    "split_table_line",
    "suggest_column_roles",
    "toggle_column",
]
