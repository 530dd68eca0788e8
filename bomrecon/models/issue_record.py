from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .comparison_result import ComparisonResult, ResultStatus

"""Data-quality issues raised by a comparison.

A comparison line becomes an issue when its status is in `ISSUE_STATUSES`
(today only INVALID_QUANTITY: a quantity cell that is not a number). The
record names the BOM file and side the bad cell came from; `row` is -1
because comparison lines do not carry a source row number.
"""

__all__ = [
    "ISSUE_STATUSES",
    "IssueRecord",
    "utc_timestamp",
]

ISSUE_STATUSES = frozenset({ResultStatus.INVALID_QUANTITY})


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO8601 UTC time with a `Z` suffix."""
    moment = now if now is not None else datetime.now(UTC)
    return moment.astimezone(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class IssueRecord:
    """One JSON Lines entry of the issue log.

    Attributes:
        timestamp: when the issue was recorded (see `utc_timestamp`)
        file: name of the BOM file holding the bad cell
        side: "original" or "partial"
        row: 1-based data row, -1 when unknown
        issue_type: the ResultStatus name, e.g. INVALID_QUANTITY
        message: what was wrong, with the code and the raw cell value
    """
    timestamp: str
    file: str
    side: str
    row: int
    issue_type: str
    message: str

    @classmethod
    def from_result(
        cls, result: ComparisonResult, file: str, row: int = -1, now: datetime | None = None
    ) -> IssueRecord:
        """Build the issue for a comparison line.

        Raises:
            ValueError: the line's status is not an issue status
        """
        if result.status not in ISSUE_STATUSES:
            raise ValueError(f"{result.status.name} is not a data-quality issue")
        if result.has_original:
            side, code, value = "original", result.original_code, result.original_quantity
        else:
            side, code, value = "partial", result.partial_code, result.partial_quantity
        return cls(
            timestamp=utc_timestamp(now),
            file=file,
            side=side,
            row=row,
            issue_type=result.status.name,
            message=f"code {code}: quantity {value!r} is not a number",
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
