from __future__ import annotations

from dataclasses import dataclass, field

from .mapping import Mapping

"""Config dataclasses for the BOM reconciliation tool.

These are the typed form of `config/compare.yml` after loading and schema
validation (see bomrecon/config/loader.py).
"""


@dataclass(frozen=True)
class SideConfig:
    """Input settings for one BOM (original or partial)."""
    path: str  # Spreadsheet / CSV path
    skip_rows: int = 0  # Leading rows skipped before the header row
    sheet: str | None = None  # Sheet name (first sheet when None)
    mapping: Mapping = field(default_factory=Mapping)  # Explicit roles; unset roles are auto-mapped


@dataclass(frozen=True)
class CompareConfig:
    """Root configuration object for one reconciliation job."""
    original: SideConfig
    partial: SideConfig
    rules: str | None = None  # Rules workbook path
    aggregate: bool = False
    ignore_revision: bool = True
    ignore_quantity: bool = False
    ignore_rules: bool = False
    output: str | None = None  # .xlsx / .csv / .tsv report path
