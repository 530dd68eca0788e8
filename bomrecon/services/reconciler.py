from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..models.comparison_result import ComparisonResult, ResultStatus
from ..models.mapping import Mapping, Mappings
from ..models.table import Row, Table
from .keys import code_of_key, key_of
from .normalize import cell_text, normalize_quantity

"""BOM comparison engine.

Compares the original (source) table against the partial (target) table:

A. index the partial side by key (quantities summed per key) and, when
   revisions matter, by bare code with per-revision aggregates
B. walk the original side, per row or per key group, classifying each unit as
   exact match / revision fallback / absent
C. mark every partial key reached by an original key (independently of the
   walk in B) and report the rest as ABSENT_IN_ORIGINAL

The ABSENT_IN_ORIGINAL set therefore does not depend on the aggregate flag.
"""

__all__ = [
    "QUANTITY_TOLERANCE",
    "ComparisonError",
    "MissingMappingError",
    "compare",
    "count_by_status",
    "has_discrepancies",
]

logger = logging.getLogger(__name__)

QUANTITY_TOLERANCE = 1e-6


class ComparisonError(Exception):
    """Base class for fatal comparison errors."""


class MissingMappingError(ComparisonError):
    """Raised when a side lacks a mapped code or quantity column."""


@dataclass
class _TargetEntry:
    code: str
    quantity: float
    description: str | None
    revision: str | None
    category: str | None


@dataclass
class _SourceGroup:
    quantity: float
    description: str | None
    revision: str | None
    category: str | None
    rows: list[Row] = field(default_factory=list)


class _Side:
    """Reads the mapped roles out of the rows of one table."""

    def __init__(self, mapping: Mapping) -> None:
        self.mapping = mapping

    def code(self, row: Row) -> str:
        return cell_text(row.get(self.mapping.code))

    def raw_quantity(self, row: Row) -> Any:
        return row.get(self.mapping.quantity)

    def quantity(self, row: Row) -> float | None:
        return normalize_quantity(row.get(self.mapping.quantity))

    def _optional(self, row: Row, column: str | None) -> str | None:
        return cell_text(row.get(column)) if column else None

    def description(self, row: Row) -> str | None:
        return self._optional(row, self.mapping.description)

    def revision(self, row: Row) -> str | None:
        return self._optional(row, self.mapping.revision)

    def category(self, row: Row) -> str | None:
        return self._optional(row, self.mapping.category)


def _equal(a: float, b: float) -> bool:
    return abs(a - b) < QUANTITY_TOLERANCE


class _Comparison:
    """State of one compare() call. Not reused across calls."""

    def __init__(self, original: Table, partial: Table, mappings: Mappings,
                 ignore_revision: bool, ignore_quantity: bool) -> None:
        self.original = original
        self.partial = partial
        self.src = _Side(mappings.original)
        self.dst = _Side(mappings.partial)
        self.ignore_revision = ignore_revision
        self.ignore_quantity = ignore_quantity
        self.by_key: dict[str, _TargetEntry] = {}
        self.by_code: dict[str, list[_TargetEntry]] = {}
        self.results: list[ComparisonResult] = []

    # -- step A -------------------------------------------------------------

    def index_partial(self) -> None:
        for row in self.partial.rows:
            code = self.dst.code(row)
            quantity = self.dst.quantity(row)
            if not code or quantity is None:
                continue
            description = self.dst.description(row)
            revision = self.dst.revision(row)
            category = self.dst.category(row)

            key = key_of(code, revision, self.ignore_revision)
            existing = self.by_key.get(key)
            if existing is not None:
                existing.quantity += quantity
            else:
                self.by_key[key] = _TargetEntry(code, quantity, description, revision, category)

            if not self.ignore_revision:
                revisions = self.by_code.setdefault(code, [])
                for entry in revisions:
                    if entry.revision == revision:
                        entry.quantity += quantity
                        break
                else:
                    revisions.append(_TargetEntry(code, quantity, description, revision, category))

    def fallback_for(self, code: str) -> list[_TargetEntry]:
        if self.ignore_revision:
            return []
        return self.by_code.get(code, [])

    def revision_keys(self, code: str) -> Iterable[str]:
        return (key_of(code, entry.revision, self.ignore_revision) for entry in self.fallback_for(code))

    # -- result builders ----------------------------------------------------

    def _status(self, source_quantity: float, target_quantity: float) -> ResultStatus:
        if self.ignore_quantity or _equal(source_quantity, target_quantity):
            return ResultStatus.QUANTITY_EQUAL
        return ResultStatus.QUANTITY_DIFFERENT

    def _emit(self, status: ResultStatus, *, code: str, quantity: float | str,
              description: str | None, revision: str | None, category: str | None,
              target: _TargetEntry | None = None) -> None:
        self.results.append(
            ComparisonResult(
                status=status,
                original_code=code,
                original_quantity=quantity,
                original_description=description,
                original_revision=revision,
                original_category=category,
                partial_code=code if target is not None else None,
                partial_quantity=target.quantity if target is not None else None,
                partial_description=target.description if target is not None else None,
                partial_revision=target.revision if target is not None else None,
                partial_category=target.category if target is not None else None,
            )
        )

    def _emit_row(self, status: ResultStatus, row: Row, quantity: float | str,
                  target: _TargetEntry | None = None, code: str | None = None) -> None:
        self._emit(
            status,
            code=code if code is not None else self.src.code(row),
            quantity=quantity,
            description=self.src.description(row),
            revision=self.src.revision(row),
            category=self.src.category(row),
            target=target,
        )

    def _emit_invalid(self, row: Row, target: _TargetEntry | None = None, code: str | None = None) -> None:
        self._emit_row(ResultStatus.INVALID_QUANTITY, row, cell_text(self.src.raw_quantity(row)), target, code)

    # -- step B -------------------------------------------------------------

    def walk_rows(self) -> None:
        absent: dict[str, tuple[float, Row]] = {}
        for row in self.original.rows:
            code = self.src.code(row)
            if not code:
                continue
            quantity = self.src.quantity(row)
            if quantity is None:
                self._emit_invalid(row)
                continue

            key = key_of(code, self.src.revision(row), self.ignore_revision)
            target = self.by_key.get(key)
            if target is not None:
                self._emit_row(self._status(quantity, target.quantity), row, quantity, target)
                continue

            revisions = self.fallback_for(code)
            if revisions:
                self._emit_row(ResultStatus.REVISION_DIFFERENT, row, quantity, revisions[0])
                continue

            if key in absent:
                total, first = absent[key]
                absent[key] = (total + quantity, first)
            else:
                absent[key] = (quantity, row)

        for total, first in absent.values():
            self._emit_row(ResultStatus.ABSENT, first, total)

    def _group_original(self) -> dict[str, _SourceGroup]:
        groups: dict[str, _SourceGroup] = {}
        for row in self.original.rows:
            code = self.src.code(row)
            if not code:
                continue
            quantity = self.src.quantity(row)
            revision = self.src.revision(row)
            key = key_of(code, revision, self.ignore_revision)
            group = groups.get(key)
            if group is None:
                group = _SourceGroup(0.0, self.src.description(row), revision, self.src.category(row))
                groups[key] = group
            if quantity is not None:
                group.quantity += quantity
            group.rows.append(row)
        return groups

    def walk_groups(self) -> None:
        for key, group in self._group_original().items():
            code = self.src.code(group.rows[0])
            fields = dict(code=code, description=group.description, revision=group.revision, category=group.category)

            target = self.by_key.get(key)
            if target is not None:
                if self.ignore_quantity or _equal(group.quantity, target.quantity):
                    self._emit(ResultStatus.QUANTITY_EQUAL, quantity=group.quantity, target=target, **fields)
                    continue
                # Aggregate mismatch: show every row against the same target total
                for row in group.rows:
                    quantity = self.src.quantity(row)
                    if quantity is None:
                        self._emit_invalid(row, target, code=code)
                    else:
                        self._emit_row(self._status(quantity, target.quantity), row, quantity, target, code=code)
                continue

            revisions = self.fallback_for(code)
            if revisions:
                self._emit(ResultStatus.REVISION_DIFFERENT, quantity=group.quantity, target=revisions[0], **fields)
                continue

            valid = [row for row in group.rows if self.src.quantity(row) is not None]
            invalid = [row for row in group.rows if self.src.quantity(row) is None]
            if valid:
                total = sum(self.src.quantity(row) or 0.0 for row in valid)
                self._emit(ResultStatus.ABSENT, quantity=total, **fields)
            for row in invalid:
                self._emit_invalid(row)

    # -- step C -------------------------------------------------------------

    def processed_partial_keys(self) -> set[str]:
        seen: dict[str, str] = {}
        for row in self.original.rows:
            code = self.src.code(row)
            if not code:
                continue
            seen.setdefault(key_of(code, self.src.revision(row), self.ignore_revision), code)

        processed: set[str] = set()
        for key, code in seen.items():
            if key in self.by_key:
                processed.add(key)
            else:
                processed.update(self.revision_keys(code))
        return processed

    def report_partial_only(self) -> None:
        processed = self.processed_partial_keys()
        for key, entry in self.by_key.items():
            if key in processed:
                continue
            self.results.append(
                ComparisonResult(
                    status=ResultStatus.ABSENT_IN_ORIGINAL,
                    partial_code=code_of_key(key),
                    partial_quantity=entry.quantity,
                    partial_description=entry.description,
                    partial_revision=entry.revision,
                    partial_category=entry.category,
                )
            )


def _check_mappings(mappings: Mappings) -> None:
    missing = [
        f"{side}.{role}"
        for side, mapping in (("original", mappings.original), ("partial", mappings.partial))
        for role in mapping.missing_roles
    ]
    if missing:
        raise MissingMappingError(f"required column mapping missing: {', '.join(missing)}")


def compare(
    original: Table,
    partial: Table,
    mappings: Mappings,
    aggregate: bool = False,
    *,
    ignore_revision: bool = False,
    ignore_quantity: bool = False,
) -> list[ComparisonResult]:
    """Compare two BOM tables and classify every line item.

    Args:
        original: Source (full) BOM
        partial: Target (subset) BOM
        mappings: Column roles for both tables
        aggregate: Group original rows by key before comparing
        ignore_revision: Key on code only
        ignore_quantity: Treat every exact key match as QUANTITY_EQUAL

    Returns:
        Results of the original-side walk followed by ABSENT_IN_ORIGINAL lines.

    Raises:
        MissingMappingError: code or quantity column unmapped on either side
    """
    _check_mappings(mappings)

    run = _Comparison(original, partial, mappings, ignore_revision, ignore_quantity)
    run.index_partial()
    if aggregate:
        run.walk_groups()
    else:
        run.walk_rows()
    run.report_partial_only()

    logger.debug(
        "compare: original_rows=%d partial_keys=%d results=%d aggregate=%s ignore_revision=%s",
        len(original.rows), len(run.by_key), len(run.results), aggregate, ignore_revision,
    )
    return run.results


def count_by_status(results: Iterable[ComparisonResult]) -> dict[ResultStatus, int]:
    """Count results per status; every status is present (zero-filled)."""
    counts = {status: 0 for status in ResultStatus}
    for result in results:
        counts[result.status] += 1
    return counts


def has_discrepancies(results: Iterable[ComparisonResult]) -> bool:
    return any(result.status is not ResultStatus.QUANTITY_EQUAL for result in results)
