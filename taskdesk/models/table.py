"""
Data table contract.

Explicit table shape used whenever a table is written: a column list and
rows of scalar cells, with every row padded or truncated to the column count.

Dependencies: pydantic
System role: Write-time invariant for tabular collaborator data
"""

from collections.abc import Sequence

from pydantic import BaseModel, Field, model_validator

CellValue = str | int | float | None

PAD_VALUE = ""


def normalize_grid(
    columns: Sequence[str],
    rows: Sequence[Sequence[CellValue]],
) -> tuple[list[str], list[list[CellValue]]]:
    """
    Align every row to the column count.

    Short rows are padded with empty strings, long rows truncated.

    Args:
        columns: Column names
        rows: Raw rows

    Returns:
        tuple: (columns, rows) with len(row) == len(columns) for every row
    """
    safe_columns = [str(column) for column in columns]
    width = len(safe_columns)
    normalized: list[list[CellValue]] = []
    for row in rows:
        cells = list(row)
        if len(cells) < width:
            cells.extend([PAD_VALUE] * (width - len(cells)))
        normalized.append(cells[:width])
    return safe_columns, normalized


class TableData(BaseModel):
    """A named grid with a row/column-length invariant."""

    name: str = Field(min_length=1, description="Table display name")
    columns: list[str] = Field(default_factory=list, description="Ordered column names")
    rows: list[list[CellValue]] = Field(default_factory=list, description="Ordered rows")

    @model_validator(mode="after")
    def _align_rows(self) -> "TableData":
        self.columns, self.rows = normalize_grid(self.columns, self.rows)
        return self

