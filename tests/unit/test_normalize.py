from __future__ import annotations

import math

import pytest

from bomrecon.services.keys import KEY_SEPARATOR, code_of_key, key_of
from bomrecon.services.normalize import cell_text, normalize_quantity


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("1.000,5", 1000.5),
        ("2,25", 2.25),
        ("1.234.567", 1234567.0),
        ("  3  ", 3.0),
        ("10 pz", 10.0),
        ("-4,5", -4.5),
        (",5", 0.5),
        ("0", 0.0),
    ],
)
def test_normalize_quantity_italian_text(raw, expected):
    assert normalize_quantity(raw) == expected


def test_normalize_quantity_dot_is_thousands_separator():
    # "1.5" written in a text cell is read the Italian way
    assert normalize_quantity("1.5") == 15.0


@pytest.mark.parametrize("raw", [None, "", "   ", "abc", "n.d.", "-", float("nan"), True])
def test_normalize_quantity_not_a_number(raw):
    assert normalize_quantity(raw) is None


def test_normalize_quantity_numeric_cells_pass_through():
    assert normalize_quantity(1.5) == 1.5
    assert normalize_quantity(7) == 7.0
    assert isinstance(normalize_quantity(7), float)
    assert normalize_quantity(1002.75) == 1002.75


def test_normalize_quantity_is_stable_on_its_output():
    for raw in ("1.000,5", "2,25", "12"):
        once = normalize_quantity(raw)
        assert normalize_quantity(once) == once


def test_cell_text():
    assert cell_text(None) == ""
    assert cell_text(math.nan) == ""
    assert cell_text(12345.0) == "12345"
    assert cell_text(1.5) == "1.5"
    assert cell_text("NA") == "NA"
    assert cell_text(42) == "42"


def test_key_of_ignores_revision():
    assert key_of("A100", "B", ignore_revision=True) == "A100"


def test_key_of_with_revision():
    assert key_of("A100", "B", ignore_revision=False) == f"A100{KEY_SEPARATOR}B"
    # missing revision renders as empty text
    assert key_of("A100", None, ignore_revision=False) == "A100::"
    assert key_of("A100", "", ignore_revision=False) == key_of("A100", None, ignore_revision=False)


def test_key_of_numeric_code():
    assert key_of(12345.0, None, ignore_revision=True) == "12345"


def test_code_of_key():
    assert code_of_key("A100::B") == "A100"
    assert code_of_key("A100") == "A100"
