from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from ..models.table import Row, Table
from ..services.normalize import cell_text

"""Spreadsheet / CSV reader producing Tables.

Layout: after `skip_rows` leading rows, the first row is the header row and
every following row is a data row. Header cells are stringified (blank -> "").
Missing data cells become "". Rows that are entirely blank are dropped.

No string is turned into NaN (codes such as "NA" or "NULL" are real part
codes), so pandas' default NA conversion is disabled.
"""

__all__ = [
    "EXCEL_SUFFIXES",
    "EmptyTableError",
    "TableReadError",
    "UnsupportedFileError",
    "read_raw_frame",
    "read_rules_table",
    "read_table",
    "frame_to_table",
]

EXCEL_SUFFIXES = {".xlsx", ".xlsm"}
TEXT_SUFFIXES = {".csv", ".tsv"}
CSV_SEPARATORS = (",", ";", "\t")


class TableReadError(Exception):
    """Base class for table intake errors."""


class UnsupportedFileError(TableReadError):
    """Raised when the file extension is not a supported spreadsheet/CSV type."""


class EmptyTableError(TableReadError):
    """Raised when no header row is left after skipping leading rows."""


def read_raw_frame(path: Path, sheet: str | None = None) -> pd.DataFrame:
    """Read a file into a header-less DataFrame of raw cell values.

    Parameters
    ----------
    path: spreadsheet or CSV path
    sheet: sheet name for workbooks (None -> first sheet)
    """
    suffix = path.suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        xls = pd.ExcelFile(path)
        name = sheet if sheet is not None else xls.sheet_names[0]
        return xls.parse(name, header=None, dtype=object, keep_default_na=False, na_values=[])
    if suffix in TEXT_SUFFIXES:
        sep = "\t" if suffix == ".tsv" else _csv_separator(path)
        try:
            return pd.read_csv(path, header=None, dtype=str, sep=sep, keep_default_na=False, encoding="utf-8-sig")
        except pd.errors.EmptyDataError as e:
            raise EmptyTableError(f"'{path.name}' is empty") from e
        except pd.errors.ParserError as e:
            raise TableReadError(f"'{path.name}': {e}") from e
    raise UnsupportedFileError(f"unsupported file type '{suffix}': {path.name}")


def _csv_separator(path: Path) -> str:
    """Most frequent of ',' ';' TAB in the first line (',' when none occurs)."""
    with path.open(encoding="utf-8-sig") as f:
        first = f.readline()
    counts = {sep: first.count(sep) for sep in CSV_SEPARATORS}
    best = max(counts, key=lambda sep: counts[sep])
    return best if counts[best] else ","


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if pd.isna(value):
        return ""
    if hasattr(value, "item") and not isinstance(value, str):
        # numpy scalar -> python scalar
        return value.item()
    return value


def frame_to_table(df: pd.DataFrame, name: str, skip_rows: int = 0) -> Table:
    """Convert a raw frame into a Table (header = first row after `skip_rows`)."""
    if skip_rows < 0:
        raise ValueError("skip_rows must be >= 0")
    body = df.iloc[skip_rows:]
    if body.shape[0] < 1:
        raise EmptyTableError(f"'{name}' has no header row after skipping {skip_rows} row(s)")

    headers = [cell_text(h) for h in body.iloc[0].tolist()]
    rows: list[Row] = []
    for _, raw in body.iloc[1:].iterrows():
        values = [_cell(v) for v in raw.tolist()]
        if all(v == "" or (isinstance(v, str) and v.strip() == "") for v in values):
            continue
        row: Row = {}
        for header, value in zip(headers, values, strict=False):
            row[header] = value
        for header in headers[len(values):]:
            row.setdefault(header, "")
        rows.append(row)
    return Table(name=name, headers=headers, rows=rows)


def read_table(path: Path | str, skip_rows: int = 0, sheet: str | None = None) -> Table:
    """Read a BOM file into a Table."""
    path = Path(path)
    df = read_raw_frame(path, sheet=sheet)
    return frame_to_table(df, path.name, skip_rows=skip_rows)


def read_rules_table(path: Path | str) -> Table:
    """Read a rules workbook (header on the first row of the first sheet)."""
    return read_table(path, skip_rows=0)
