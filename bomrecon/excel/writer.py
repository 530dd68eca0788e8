from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.comparison_result import ComparisonResult, ResultStatus
from ..services.reconciler import count_by_status

"""Result export (Excel workbook / CSV / TSV).

Column labels follow the report layout used by the purchasing office:
"Cliente" is the original BOM, "Gestionale" the partial (ERP) BOM.
"""

__all__ = [
    "EXPORT_COLUMNS",
    "export_csv",
    "export_excel",
    "export_results",
    "results_frame",
    "summary_frame",
]

logger = logging.getLogger(__name__)

EXPORT_COLUMNS: dict[str, str] = {
    "original_code": "Codice_Cliente",
    "original_quantity": "Q_Cliente",
    "original_description": "Descrizione_Cliente",
    "original_revision": "Revisione_Cliente",
    "original_category": "Categoria_Cliente",
    "partial_code": "Codice_Gestionale_Corrispondente",
    "partial_quantity": "Q_Gestionale",
    "partial_description": "Descrizione_Gestionale",
    "partial_revision": "Revisione_Gestionale",
    "partial_category": "Categoria_Gestionale",
    "status": "Esito",
}

SUMMARY_SHEET = "Riepilogo"
ALL_RESULTS_SHEET = "Totale Risultati"
# Per-status sheets, only written when non-empty
STATUS_SHEETS: tuple[tuple[ResultStatus, str], ...] = (
    (ResultStatus.ABSENT_IN_ORIGINAL, "Assenti_Cliente"),
    (ResultStatus.ABSENT, "Assenti_Gestionale"),
    (ResultStatus.QUANTITY_DIFFERENT, "Qta_Diverse"),
    (ResultStatus.REVISION_DIFFERENT, "Rev_Diverse"),
)


def _export_row(result: ComparisonResult) -> dict[str, Any]:
    row = {label: getattr(result, attr) for attr, label in EXPORT_COLUMNS.items() if attr != "status"}
    row[EXPORT_COLUMNS["status"]] = result.status.label
    return row


def results_frame(results: Sequence[ComparisonResult]) -> pd.DataFrame:
    return pd.DataFrame([_export_row(r) for r in results], columns=list(EXPORT_COLUMNS.values()))


def summary_frame(results: Sequence[ComparisonResult]) -> pd.DataFrame:
    counts = count_by_status(results)
    rows = [{"Statistica": "Totale Codici", "Valore": len(results)}]
    rows.extend({"Statistica": status.label, "Valore": count} for status, count in counts.items())
    return pd.DataFrame(rows, columns=["Statistica", "Valore"])


def export_excel(results: Sequence[ComparisonResult], path: Path) -> Path:
    """Write the report workbook (summary, all results, one sheet per discrepancy kind)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        summary_frame(results).to_excel(writer, sheet_name=SUMMARY_SHEET, index=False)
        results_frame(results).to_excel(writer, sheet_name=ALL_RESULTS_SHEET, index=False)
        for status, sheet_name in STATUS_SHEETS:
            subset = [r for r in results if r.status is status]
            if subset:
                results_frame(subset).to_excel(writer, sheet_name=sheet_name, index=False)
    logger.info(f"export: wrote {len(results)} result(s) to {path}")
    return path


def export_csv(results: Sequence[ComparisonResult], path: Path, separator: str = ",") -> Path | None:
    """Write results as CSV/TSV. Nothing is written for an empty result list."""
    if not results:
        logger.info("export: no results, csv not written")
        return None
    path.parent.mkdir(parents=True, exist_ok=True)
    results_frame(results).to_csv(path, sep=separator, index=False, encoding="utf-8")
    logger.info(f"export: wrote {len(results)} result(s) to {path}")
    return path


def export_results(results: Sequence[ComparisonResult], path: Path | str) -> Path | None:
    """Export by output suffix: .xlsx workbook, .csv or .tsv text."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".xlsx":
        return export_excel(results, path)
    if suffix == ".csv":
        return export_csv(results, path, ",")
    if suffix == ".tsv":
        return export_csv(results, path, "\t")
    raise ValueError(f"unsupported output format '{suffix}' (expected .xlsx, .csv or .tsv)")
