from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..models.comparison_result import ComparisonResult
from ..models.issue_record import ISSUE_STATUSES, IssueRecord

"""Data-quality issue log.

Issues are buffered in memory and flushed as JSON Lines to
`logs/issues-YYYYMMDD-HHMMSS.log` (UTC, one file per run, created on first
flush). Each line has exactly the IssueRecord keys.
"""

__all__ = [
    "IssueLogBuffer",
    "IssueRecord",
    "issues_from_results",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class IssueLogBuffer:
    """In-memory buffer of issue records; `flush()` appends them as JSON Lines."""

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[IssueRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir if logs_dir is not None else LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"issues-{stamp}.log"
        return self._file_path

    def append(self, record: IssueRecord) -> None:
        self._records.append(record)

    def extend(self, records: Iterable[IssueRecord]) -> None:
        self._records.extend(records)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the log path, or None when nothing was buffered."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp


def issues_from_results(
    results: Iterable[ComparisonResult], original_file: str, row: int = -1
) -> list[IssueRecord]:
    """One issue per comparison line whose status is an issue status."""
    return [IssueRecord.from_result(r, original_file, row=row) for r in results if r.status in ISSUE_STATUSES]
