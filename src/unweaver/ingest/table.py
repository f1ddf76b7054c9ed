"""
Relaxed CSV parsing for tabular source documents.

The dialect is deliberately loose: a double quote toggles the quoted state
unless it is preceded by a backslash, commas split fields only outside
quotes, and a separate cleanup pass strips one layer of surrounding quotes
and collapses doubled quotes. Row lengths are kept as found.
"""

import re
from typing import List, Sequence

from ..core.models import ROW_DELIMITER, Table

_LINE_BREAK = re.compile(r"\r?\n")
_SURROUNDING_QUOTE = re.compile(r'^"|"$')


def _clean_field(raw: str) -> str:
    field = _SURROUNDING_QUOTE.sub("", raw.strip())
    return field.replace('""', '"')


def split_table_line(line: str) -> List[str]:
    """Split one line into fields, honouring quoted regions."""
    fields: List[str] = []
    in_quote = False
    current: List[str] = []

    for i, char in enumerate(line):
        if char == '"' and (i == 0 or line[i - 1] != "\\"):
            in_quote = not in_quote

        if char == "," and not in_quote:
            fields.append(_clean_field("".join(current)))
            current = []
        else:
            current.append(char)

    fields.append(_clean_field("".join(current)))
    return fields


def parse_table(content: str) -> Table:
    """Parse CSV-like text into a header row plus data rows.

    Fewer than two non-blank lines (a header with no data) gives an empty table.
    """
    lines = [line for line in _LINE_BREAK.split(content) if line.strip()]
    if len(lines) < 2:
        return Table()

    headers = split_table_line(lines[0])
    rows = [split_table_line(line) for line in lines[1:]]
    return Table(headers=headers, rows=rows)


def _column_indices(headers: Sequence[str], columns: Sequence[str]) -> List[int]:
    return [headers.index(c) for c in columns if c in headers]


def format_table_text(
    table: Table,
    analyze_columns: Sequence[str],
    context_columns: Sequence[str] = (),
) -> str:
    """Flatten a table to text, one block per row, separated by ROW_DELIMITER.

    Each block is an optional ``[Header]: value | ...`` context line followed
    by the analysed values (prefixed with their header when more than one
    column is analysed). Rows without analysed text are dropped.
    """
    headers = table.headers
    analyze_idx = _column_indices(headers, analyze_columns)
    context_idx = _column_indices(headers, context_columns)

    blocks: List[str] = []
    for row in table.rows:
        context_parts = []
        for idx in context_idx:
            value = table.cell(row, idx)
            if value.strip():
                context_parts.append(f"[{headers[idx]}]: {value}")
        context_str = " | ".join(context_parts) + "\n" if context_parts else ""

        analyze_parts = []
        for idx in analyze_idx:
            value = table.cell(row, idx)
            if not value.strip():
                continue
            if len(analyze_idx) > 1:
                analyze_parts.append(f"{headers[idx]}: {value}")
            else:
                analyze_parts.append(value)
        analyze_str = "\n".join(analyze_parts)

        if not analyze_str.strip():
            continue
        blocks.append(f"{context_str}{analyze_str}")

    return f"\n\n{ROW_DELIMITER}\n\n".join(blocks)
