from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Table domain model for the BOM reconciliation tool.

A Table is the materialized content of one spreadsheet sheet (or CSV file):
the header row read once at parse time, plus every data row as a mapping from
header string to raw cell value. Rule application and comparison never change
the header sequence; they only produce new row lists.
"""

__all__ = [
    "Row",
    "Table",
]

Row = dict[str, Any]


@dataclass(frozen=True)
class Table:
    """Parsed tabular content (header row + data rows).

    Rows carry no schema of their own; any column may be missing or empty.
    Synthesized rows must fill every header key (empty string when unmapped).
    """
    name: str  # Source file name (or a label for in-memory tables)
    headers: list[str]  # Column names in sheet order
    rows: list[Row] = field(default_factory=list)

    def with_rows(self, rows: list[Row]) -> Table:
        """Return a new Table sharing name and headers with a replaced row list."""
        return Table(name=self.name, headers=list(self.headers), rows=rows)

    def blank_row(self) -> Row:
        """Return a row with every header set to the empty string."""
        return {header: "" for header in self.headers}

    def __len__(self) -> int:
        return len(self.rows)
