from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

"""Comparison result model and status enumeration.

One ComparisonResult is one output line of a reconciliation run. Fields are
kept per side: `original_*` for the source BOM ("Distinta Cliente") and
`partial_*` for the target BOM ("Distinta Gestionale"). The status values are
the labels shown in exported reports.
"""

__all__ = [
    "ComparisonResult",
    "ResultStatus",
]


class ResultStatus(Enum):
    """Closed classification of a comparison line (value = report label)."""
    QUANTITY_EQUAL = "Quantità uguale"
    QUANTITY_DIFFERENT = "Quantità diversa"
    REVISION_DIFFERENT = "Revisione diversa"
    ABSENT = "Cod. Assenti in Distinta Gestionale"  # present only in the original
    ABSENT_IN_ORIGINAL = "Cod. Assenti in Distinta Cliente"  # present only in the partial
    INVALID_QUANTITY = "Quantità non interpretabile"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class ComparisonResult:
    """Side-by-side outcome for one logical line item.

    Quantity fields hold a float, the raw unparsed text for INVALID_QUANTITY
    lines, or None when that side is absent.
    """
    status: ResultStatus
    original_code: str | None = None
    original_quantity: float | str | None = None
    original_description: str | None = None
    original_revision: str | None = None
    original_category: str | None = None
    partial_code: str | None = None
    partial_quantity: float | str | None = None
    partial_description: str | None = None
    partial_revision: str | None = None
    partial_category: str | None = None

    @property
    def has_original(self) -> bool:
        return self.original_code is not None

    @property
    def has_partial(self) -> bool:
        return self.partial_code is not None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.name
        return data
