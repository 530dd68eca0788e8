#!/usr/bin/env python3
"""Sample BOM generation script for demos and performance runs.

Writes a customer BOM, an ERP BOM and a rules workbook with seeded
discrepancies. The customer BOM follows the usual layout:
- Row 1: Title row (skip it with `skip_rows: 1`)
- Row 2: Header row
- Row 3+: Data rows

Quantities are written as Italian-formatted text ("1.250,5") like the
spreadsheets exported by the purchasing office.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

ORIGINAL_HEADERS = ["Codice", "Descrizione", "Quantità", "Rev", "Categoria"]
PARTIAL_HEADERS = ["Articolo", "Descrizione articolo", "Qta", "Revisione", "Categoria Merceologica"]
RULE_HEADERS = ["Tipo", "Codici da unire", "Codice risultante", "Descrizione risultante"]

DESCRIPTIONS = ["Vite TCEI M6", "Dado M6", "Rondella piana", "Staffa", "Supporto motore", "Imballo"]
CATEGORIES = ["MINUTERIA", "MECCANICA", "ELETTRICA", "IMBALLI"]


def italian_quantity(value: float) -> str:
    """Format a number the Italian way: '.' thousands, ',' decimals."""
    text = f"{value:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return text[:-3] if text.endswith(",00") else text


def generate_bom_rows(
    rows: int, seed: int = 42, discrepancy_rate: float = 0.05
) -> tuple[list[list[Any]], list[list[Any]]]:
    """Generate sheet rows (title + header + data) for a customer/ERP BOM pair.

    The ERP BOM differs from the customer BOM by:
    - changed quantities on ~discrepancy_rate of the codes
    - missing codes on ~discrepancy_rate of the codes
    - a few extra '9'-prefixed codes (packaging) absent from the customer BOM
    """
    np.random.seed(seed)

    codes = [str(100000 + i) for i in range(rows)]
    quantities = np.round(np.random.uniform(1, 2000, rows), 1).tolist()
    descriptions = np.random.choice(DESCRIPTIONS, rows).tolist()
    revisions = np.random.choice(["A", "B", "C"], rows).tolist()
    categories = np.random.choice(CATEGORIES, rows).tolist()

    original: list[list[Any]] = [["Distinta base cliente"], list(ORIGINAL_HEADERS)]
    partial: list[list[Any]] = [list(PARTIAL_HEADERS)]

    changed = np.random.random(rows) < discrepancy_rate
    missing = np.random.random(rows) < discrepancy_rate
    for i, code in enumerate(codes):
        original.append([code, descriptions[i], italian_quantity(quantities[i]), revisions[i], categories[i]])
        if missing[i]:
            continue
        quantity = quantities[i] + 1 if changed[i] else quantities[i]
        partial.append([code, descriptions[i], italian_quantity(quantity), revisions[i], categories[i]])

    for j in range(max(1, rows // 100)):
        partial.append([f"9{j:05d}", "Imballo", "1", "A", "IMBALLI"])
    return original, partial


def create_bom_files(output_dir: Path, rows: int, seed: int = 42) -> tuple[Path, Path, Path]:
    """Write cliente.xlsx, gestionale.xlsx and regole.xlsx into `output_dir`."""
    output_dir.mkdir(parents=True, exist_ok=True)
    original, partial = generate_bom_rows(rows, seed)
    rules = [
        list(RULE_HEADERS),
        ["ESCLUDI", 'TUTTI I CODICI CHE INIZIANO PER "9"', "", ""],
        ["UNIONE", "100000+100001", "100000", "Gruppo vite e dado"],
    ]

    paths = (output_dir / "cliente.xlsx", output_dir / "gestionale.xlsx", output_dir / "regole.xlsx")
    for path, sheet_rows, sheet_name in zip(paths, (original, partial, rules), ("Distinta", "Export", "Regole")):
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            pd.DataFrame(sheet_rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
        print(f"Created Excel file: {path}")
    return paths


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a sample customer/ERP BOM pair with discrepancies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 500 codes into ./data
  %(prog)s data

  # larger dataset, different seed
  %(prog)s data --rows 20000 --seed 7
        """,
    )
    parser.add_argument("output_dir", type=Path, help="Directory for the generated workbooks")
    parser.add_argument("--rows", type=int, default=500, help="Codes in the customer BOM (default: 500)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducible data (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1

    create_bom_files(args.output_dir, args.rows, args.seed)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
