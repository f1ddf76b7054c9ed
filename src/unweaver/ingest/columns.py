"""
Column role suggestion for tabular documents.

The keyword lists and ratio thresholds below are tunable heuristics, not
derived values. They decide which columns hold free text worth analysing
and which are metadata to carry along as context.
"""

from typing import List, Literal

from ..core.logging import log
from ..core.models import ColumnRoleConfig, RowStrategy, Table

SAMPLE_ROWS = 30

# Header fragments that mark a free-text column
TEXT_KEYWORDS = (
    "text",
    "comment",
    "desc",
    "content",
    "feedback",
    "improve",
    "work",
    "response",
    "valuable",
)
# Header fragments that mark an identifier/code column
ID_KEYWORDS = ("id", "code")
ID_EXACT_NAMES = ("no",)

LONG_TEXT_MIN_NON_NUMERIC = 0.6
LONG_TEXT_MIN_AVG_LEN = 30
CATEGORY_MAX_AVG_LEN = 20
CATEGORY_MIN_NON_NUMERIC = 0.1
METRIC_MAX_NON_NUMERIC = 0.1

ColumnRole = Literal["target", "context", "sentiment"]

_FLOAT_WORDS = ("inf", "infinity", "nan")


def _is_numeric(value: str) -> bool:
    text = value.strip()
    if not text:
        return True
    # Digit separators and the inf/nan spellings float() accepts are not numbers here
    if "_" in text:
        return False
    unsigned = text[1:] if text[0] in "+-" else text
    if unsigned.lower() in _FLOAT_WORDS:
        return unsigned == "Infinity"
    try:
        float(text)
    except ValueError:
        try:
            int(text, 0)
        except ValueError:
            return False
    return True


def _column_stats(table: Table, index: int) -> tuple[int, float, float]:
    """Return (sampled non-empty values, non-numeric ratio, average length)."""
    valid = 0
    non_numeric = 0
    total_len = 0
    for row in table.rows[:SAMPLE_ROWS]:
        value = table.cell(row, index)
        if not value:
            continue
        valid += 1
        total_len += len(value)
        if not _is_numeric(value):
            non_numeric += 1

    if not valid:
        return 0, 0.0, 0.0
    return valid, non_numeric / valid, total_len / valid


def suggest_column_roles(table: Table) -> ColumnRoleConfig:
    """Guess target (analyse) and context columns from headers and samples."""
    target: List[str] = []
    context: List[str] = []

    for index, header in enumerate(table.headers):
        valid, non_numeric_ratio, avg_len = _column_stats(table, index)
        if not valid:
            continue

        name = header.lower()
        is_explicit_text = any(k in name for k in TEXT_KEYWORDS)
        is_long_text = non_numeric_ratio > LONG_TEXT_MIN_NON_NUMERIC and avg_len > LONG_TEXT_MIN_AVG_LEN

        is_id = any(k in name for k in ID_KEYWORDS) or name in ID_EXACT_NAMES
        is_category = (
            avg_len < CATEGORY_MAX_AVG_LEN
            and non_numeric_ratio > CATEGORY_MIN_NON_NUMERIC
            and not is_explicit_text
        )
        is_metric = non_numeric_ratio < METRIC_MAX_NON_NUMERIC

        if is_explicit_text or is_long_text:
            target.append(header)
        elif is_id or is_category or is_metric:
            context.append(header)

    # Fallback: a table with columns always has something to analyse
    if not target and table.headers:
        fallback = table.headers[-1]
        target.append(fallback)
        context = [c for c in context if c != fallback]

    log.debug("columns.suggested", target=target, context=context)
    return ColumnRoleConfig(
        target_columns=target,
        context_columns=context,
        sentiment_context_columns=[],
        strategy=RowStrategy.DISTINCT,
    )


def toggle_column(config: ColumnRoleConfig, column: str, role: ColumnRole) -> ColumnRoleConfig:
    """Flip a column's membership in one role, keeping the roles consistent.

    Adding a target removes the column from context and sentiment; adding a
    context column removes it from targets; dropping a context column also
    drops its sentiment flag. Sentiment can only be set on context columns.
    """
    target = list(config.target_columns)
    context = list(config.context_columns)
    sentiment = list(config.sentiment_context_columns)

    if role == "target":
        if column in target:
            target.remove(column)
        else:
            target.append(column)
            context = [c for c in context if c != column]
            sentiment = [c for c in sentiment if c != column]
    elif role == "context":
        if column in context:
            context.remove(column)
            sentiment = [c for c in sentiment if c != column]
        else:
            context.append(column)
            target = [c for c in target if c != column]
    elif role == "sentiment":
        if column in sentiment:
            sentiment.remove(column)
        elif column in context:
            sentiment.append(column)
        else:
            raise ValueError(f"Column '{column}' must be a context column to carry sentiment context")
    else:
        raise ValueError(f"Unknown column role: {role}")

    return ColumnRoleConfig(
        target_columns=target,
        context_columns=context,
        sentiment_context_columns=sentiment,
        strategy=config.strategy,
    )
