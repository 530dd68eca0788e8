from __future__ import annotations

from collections.abc import Sequence

from ..models.comparison_result import ComparisonResult, ResultStatus
from .reconciler import count_by_status

"""Summary line rendering for the SUMMARY log output."""

# Order and field names of the SUMMARY line
SUMMARY_FIELDS: tuple[tuple[str, ResultStatus], ...] = (
    ("equal", ResultStatus.QUANTITY_EQUAL),
    ("different", ResultStatus.QUANTITY_DIFFERENT),
    ("revision", ResultStatus.REVISION_DIFFERENT),
    ("absent", ResultStatus.ABSENT),
    ("absent_in_original", ResultStatus.ABSENT_IN_ORIGINAL),
    ("invalid", ResultStatus.INVALID_QUANTITY),
)


def render_summary_line(results: Sequence[ComparisonResult]) -> str:
    """Render a SUMMARY line from a result list.

    Format:
    SUMMARY rows={total} equal={n} different={n} revision={n} absent={n}
    absent_in_original={n} invalid={n}

    Examples:
        >>> from bomrecon.models.comparison_result import ComparisonResult, ResultStatus
        >>> render_summary_line([ComparisonResult(status=ResultStatus.ABSENT, original_code="A")])
        'SUMMARY rows=1 equal=0 different=0 revision=0 absent=1 absent_in_original=0 invalid=0'
    """
    counts = count_by_status(results)
    parts = [f"rows={len(results)}"]
    parts.extend(f"{name}={counts[status]}" for name, status in SUMMARY_FIELDS)
    return "SUMMARY " + " ".join(parts)
