# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from bomrecon.logging.init import reset_logging
from bomrecon.models.mapping import Mapping, Mappings
from bomrecon.models.table import Table

HEADERS = ["Codice", "Qta", "Descrizione", "Rev", "Categoria"]
FULL_MAPPING = Mapping(code="Codice", quantity="Qta", description="Descrizione", revision="Rev", category="Categoria")


def _make_table(rows: list[dict], headers: list[str] | None = None, name: str = "bom.xlsx") -> Table:
    """Build an in-memory Table; missing cells are filled with ''."""
    headers = list(headers or HEADERS)
    return Table(name=name, headers=headers, rows=[{h: r.get(h, "") for h in headers} for r in rows])


def _write_excel(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    """Write raw rows (no pandas header) to a workbook, one entry per sheet."""
    with pd.ExcelWriter(path) as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


@pytest.fixture(autouse=True)
def _fresh_logger():
    # handlers bind sys.stdout at setup time; capsys needs a new one per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def full_mappings() -> Mappings:
    return Mappings(original=FULL_MAPPING, partial=FULL_MAPPING)


@pytest.fixture()
def bom_files(temp_workdir: Path) -> tuple[Path, Path]:
    """Original (customer) and partial (ERP) workbooks with different header names."""
    original = _write_excel(
        temp_workdir / "data" / "cliente.xlsx",
        {
            "Distinta": [
                ["Distinta cliente"],
                ["Codice", "Descrizione", "Quantità", "Rev"],
                ["100", "Vite M6", "10", "A"],
                ["200", "Dado M6", "5", "A"],
                ["300", "Rondella", "2,5", "A"],
                ["900", "Imballo", "1", "A"],
            ]
        },
    )
    partial = _write_excel(
        temp_workdir / "data" / "gestionale.xlsx",
        {
            "Export": [
                ["Articolo", "Descrizione articolo", "Qta", "Revisione"],
                ["100", "Vite M6", "10", "A"],
                ["200", "Dado M6", "4", "A"],
                ["400", "Staffa", "1", "B"],
            ]
        },
    )
    return original, partial


@pytest.fixture()
def rules_file(temp_workdir: Path) -> Path:
    return _write_excel(
        temp_workdir / "data" / "regole.xlsx",
        {
            "Regole": [
                ["Tipo", "Codici da unire", "Codice risultante", "Descrizione risultante"],
                ["ESCLUDI", 'TUTTI I CODICI CHE INIZIANO PER "9"', "", ""],
                ["UNIONE", "300+400", "300", "Rondella"],
            ]
        },
    )


@pytest.fixture()
def sample_config_yaml() -> str:
    return """original:
  path: data/cliente.xlsx
  skip_rows: 1
partial:
  path: data/gestionale.xlsx
aggregate: false
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "compare.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_table():
    return _make_table


@pytest.fixture()
def write_excel():
    return _write_excel
