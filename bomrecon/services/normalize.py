from __future__ import annotations

import numbers
import re
from typing import Any

import pandas as pd

"""Cell-level normalization helpers shared by rules and comparison.

Quantities in the BOM files use Italian formatting: '.' is the thousands
separator and ',' the decimal separator ("1.000,5" == 1000.5). Every place
that reads a quantity cell for arithmetic must go through
`normalize_quantity` so that both sides are interpreted identically.
"""

__all__ = [
    "cell_text",
    "normalize_quantity",
]

# Longest leading float literal, like a lenient numeric parse ("10 pz" -> 10)
_LEADING_FLOAT_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def cell_text(value: Any) -> str:
    """Stringify a cell for use as code/description/revision/category.

    Missing cells become "", integral floats lose their ".0" suffix (Excel
    stores numeric codes as floats when the column has blanks).
    """
    if _is_missing(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_quantity(value: Any) -> float | None:
    """Parse a quantity cell; None signals "not a number".

    Numeric cells are taken as-is. Text cells are trimmed, stripped of every
    '.', have ',' turned into '.', and the leading numeric literal is parsed.
    """
    if _is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        return float(value)

    text = str(value).strip()
    if text == "":
        return None
    text = text.replace(".", "").replace(",", ".")
    match = _LEADING_FLOAT_RE.match(text)
    if match is None:
        return None
    try:
        return float(match.group(0))
    except ValueError:  # pragma: no cover - regex guarantees a literal
        return None
