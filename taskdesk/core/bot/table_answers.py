"""
Direct answers for questions about data tables.

Detects table questions and answers "highest score" style questions straight
from the table cells, so common table lookups never depend on the model.

Dependencies: re (stdlib), taskdesk.core.text_normalizer
System role: Deterministic table question answering
"""

import math
import re
from collections.abc import Sequence

from taskdesk.core.text_normalizer import normalize_whitespace, restrict_to_target_script

TABLE_KEYWORD = "טבלה"
DEFAULT_TABLE_NAME = "טבלה"
UNNAMED_TABLE = "ללא שם"
EMPTY_CELL = "—"

_MAX_QUESTION_RE = re.compile(r"הכי גבוה|גבוה ביותר|max|maximum|highest", re.IGNORECASE)
_SCORE_COLUMN_RE = re.compile(r"ציון|score|ניקוד", re.IGNORECASE)
_NAME_COLUMN_RE = re.compile(r"שם|name", re.IGNORECASE)


def is_table_question(question: str) -> bool:
    """Check whether the question refers to a table."""
    return TABLE_KEYWORD in (question or "").lower()


def is_max_question(question: str) -> bool:
    """Check whether the question asks for a maximum value."""
    return bool(_MAX_QUESTION_RE.search(question or ""))


def safe_columns(columns: Sequence[str]) -> list[str]:
    """Restrict column names to the target script, naming blanks by position."""
    return [
        restrict_to_target_script(str(column)) or f"עמודה {idx}"
        for idx, column in enumerate(columns, start=1)
    ]


def format_cell(value) -> str:
    """Render a cell value, dropping a trailing .0 from integral floats."""
    if value is None or value == "":
        return EMPTY_CELL
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _as_number(value) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _find_column(columns: Sequence[str], pattern: re.Pattern) -> int:
    return next(
        (idx for idx, column in enumerate(columns) if pattern.search(str(column or ""))),
        -1,
    )


def detect_max_score(columns: Sequence[str], rows: Sequence[Sequence]) -> str | None:
    """
    Find the row with the highest score.

    Args:
        columns: Column names
        rows: Row values aligned with columns

    Returns:
        str | None: Sentence naming the value (and the row's name when a name
        column exists), None if there is no score column or no numeric value
    """
    score_idx = _find_column(columns, _SCORE_COLUMN_RE)
    if score_idx == -1:
        return None

    best_value: float | None = None
    best_row: Sequence | None = None
    for row in rows:
        if score_idx >= len(row):
            continue
        number = _as_number(row[score_idx])
        if number is None:
            continue
        if best_value is None or number > best_value:
            best_value = number
            best_row = row

    if best_row is None:
        return None

    name_idx = _find_column(columns, _NAME_COLUMN_RE)
    name = best_row[name_idx] if 0 <= name_idx < len(best_row) else ""
    name_part = f" של {name}" if name not in (None, "") else ""
    return (
        f"הציון הגבוה ביותר הוא {format_cell(best_value)}{name_part}. "
        f"(עמודה: {columns[score_idx]})"
    )


def _render_rows(cols: Sequence[str], rows: Sequence[Sequence], max_rows: int) -> str:
    lines = []
    for idx, row in enumerate(rows[:max_rows], start=1):
        cells = []
        for c_idx, column in enumerate(cols):
            raw = row[c_idx] if c_idx < len(row) else None
            cells.append(f"{column}: {restrict_to_target_script(format_cell(raw)) or EMPTY_CELL}")
        lines.append(f"{idx}. " + " | ".join(cells))
    return "\n".join(lines)


def describe_table(
    name: str | None,
    columns: Sequence[str],
    rows: Sequence[Sequence],
    max_rows: int = 5,
) -> str:
    """Describe a table's shape and first rows in Hebrew."""
    cols = safe_columns(columns)
    table_name = restrict_to_target_script(name or UNNAMED_TABLE) or UNNAMED_TABLE
    header = (
        f'בטבלה "{table_name}" יש {len(rows)} שורות ו-{len(cols)} עמודות: '
        f"{', '.join(cols) or EMPTY_CELL}."
    )
    body = _render_rows(cols, rows, max_rows)
    return f"{header}\n{body}" if body else header


def summarize_table(
    name: str | None,
    columns: Sequence[str],
    rows: Sequence[Sequence],
    max_rows: int = 10,
) -> str:
    """Bounded single-line summary of a table used as retrieval context."""
    cols = safe_columns(columns)
    table_name = restrict_to_target_script(name or DEFAULT_TABLE_NAME) or DEFAULT_TABLE_NAME
    formatted_rows = _render_rows(cols, rows, max_rows)
    return normalize_whitespace(
        f"שם: {table_name}\n"
        f"עמודות ({len(cols)}): {', '.join(cols) or EMPTY_CELL}\n"
        f"דגימת שורות ({len(rows)} סה״כ):\n"
        f"{formatted_rows or EMPTY_CELL}"
    )
