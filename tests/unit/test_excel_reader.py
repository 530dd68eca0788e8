from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from bomrecon.excel.reader import (
    EmptyTableError,
    UnsupportedFileError,
    frame_to_table,
    read_rules_table,
    read_table,
)
from bomrecon.services.normalize import cell_text, normalize_quantity


def test_read_table_skips_leading_rows(tmp_path: Path, write_excel):
    path = write_excel(
        tmp_path / "bom.xlsx",
        {
            "Foglio1": [
                ["Distinta base cliente"],
                ["Codice", "Qta"],
                ["A", 1],
                [None, None],
                ["B", "2,5"],
            ]
        },
    )

    table = read_table(path, skip_rows=1)

    assert table.name == "bom.xlsx"
    assert table.headers == ["Codice", "Qta"]
    assert [cell_text(r["Codice"]) for r in table.rows] == ["A", "B"]
    assert normalize_quantity(table.rows[0]["Qta"]) == 1.0
    assert table.rows[1]["Qta"] == "2,5"


def test_read_table_selects_sheet(tmp_path: Path, write_excel):
    path = write_excel(
        tmp_path / "bom.xlsx",
        {"Primo": [["X"], ["1"]], "Secondo": [["Codice"], ["Z9"]]},
    )
    assert read_table(path).headers == ["X"]
    table = read_table(path, sheet="Secondo")
    assert table.rows == [{"Codice": "Z9"}]


def test_na_like_strings_are_kept(tmp_path: Path, write_excel):
    path = write_excel(tmp_path / "bom.xlsx", {"S": [["Codice", "Qta"], ["NA", "1"], ["NULL", "2"]]})
    assert [r["Codice"] for r in read_table(path).rows] == ["NA", "NULL"]


def test_short_rows_are_filled(tmp_path: Path, write_excel):
    path = write_excel(tmp_path / "bom.xlsx", {"S": [["Codice", "Qta", "Note"], ["A", "1"]]})
    assert read_table(path).rows == [{"Codice": "A", "Qta": "1", "Note": ""}]


def test_no_header_after_skip_raises(tmp_path: Path, write_excel):
    path = write_excel(tmp_path / "bom.xlsx", {"S": [["Codice"], ["A"]]})
    with pytest.raises(EmptyTableError):
        read_table(path, skip_rows=5)


def test_negative_skip_rows_rejected():
    with pytest.raises(ValueError):
        frame_to_table(pd.DataFrame([["Codice"]]), "x.xlsx", skip_rows=-1)


def test_read_csv_semicolon(tmp_path: Path):
    path = tmp_path / "bom.csv"
    path.write_text("Codice;Qta\nA;1,5\nB;2\n", encoding="utf-8")
    table = read_table(path)
    assert table.headers == ["Codice", "Qta"]
    assert table.rows == [{"Codice": "A", "Qta": "1,5"}, {"Codice": "B", "Qta": "2"}]


def test_read_tsv(tmp_path: Path):
    path = tmp_path / "bom.tsv"
    path.write_text("Codice\tQta\nA\t3\n", encoding="utf-8")
    assert read_table(path).rows == [{"Codice": "A", "Qta": "3"}]


def test_empty_csv_raises(tmp_path: Path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    with pytest.raises(EmptyTableError):
        read_table(path)


def test_unsupported_extension(tmp_path: Path):
    path = tmp_path / "bom.txt"
    path.write_text("Codice\nA\n", encoding="utf-8")
    with pytest.raises(UnsupportedFileError):
        read_table(path)


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        read_table(tmp_path / "missing.xlsx")


def test_read_rules_table(rules_file: Path):
    table = read_rules_table(rules_file)
    assert table.headers == ["Tipo", "Codici da unire", "Codice risultante", "Descrizione risultante"]
    assert [r["Tipo"] for r in table.rows] == ["ESCLUDI", "UNIONE"]
