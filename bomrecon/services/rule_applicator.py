from __future__ import annotations

import logging
from collections.abc import Sequence

from ..models.rules import ExcludeKind, ExcludeRule, MergeRule, TransformationRule
from ..models.table import Row, Table
from .normalize import cell_text, normalize_quantity

"""Rule application: exclusion pass followed by merge pass.

The input table is never mutated; a new Table with the same headers is
returned. Only enabled rules participate.
"""

__all__ = [
    "apply_rules",
    "row_is_excluded",
]

logger = logging.getLogger(__name__)


def _matches(
    rule: ExcludeRule,
    row: Row,
    code_column: str,
    description_column: str | None,
    category_column: str | None,
) -> bool:
    code = cell_text(row.get(code_column))
    if rule.kind is ExcludeKind.CODE_EXACT:
        return code in rule.codes
    if rule.kind is ExcludeKind.CODE_PREFIX:
        return code.startswith(rule.value)
    if rule.kind is ExcludeKind.DESCRIPTION_CONTAINS:
        if not description_column:
            return False
        return rule.value.upper() in cell_text(row.get(description_column)).upper()
    if rule.kind is ExcludeKind.DESCRIPTION_PREFIX:
        if not description_column:
            return False
        return cell_text(row.get(description_column)).upper().startswith(rule.value.upper())
    if rule.kind is ExcludeKind.CATEGORY_EXACT:
        if not category_column:
            return False
        return cell_text(row.get(category_column)).strip() == rule.value
    return False


def row_is_excluded(
    row: Row,
    rules: Sequence[ExcludeRule],
    code_column: str,
    description_column: str | None = None,
    category_column: str | None = None,
) -> bool:
    """True when any of `rules` matches the row."""
    return any(_matches(rule, row, code_column, description_column, category_column) for rule in rules)


def _merge(table: Table, rows: list[Row], rule: MergeRule, code_column: str,
           quantity_column: str, description_column: str | None) -> list[Row]:
    sources = set(rule.source_codes)
    to_merge: list[Row] = []
    remaining: list[Row] = []
    for row in rows:
        (to_merge if cell_text(row.get(code_column)) in sources else remaining).append(row)
    if not to_merge:
        return rows

    # A source code listed twice in the BOM is still one logical item: count its first row only
    total = 0.0
    counted: set[str] = set()
    for row in to_merge:
        code = cell_text(row.get(code_column))
        if code in counted:
            continue
        counted.add(code)
        total += normalize_quantity(row.get(quantity_column)) or 0.0

    merged = table.blank_row()
    merged[code_column] = rule.result_code
    merged[quantity_column] = total
    if description_column:
        merged[description_column] = rule.result_description or ""
    logger.debug("rules: merged %d row(s) into %s (qty=%s)", len(to_merge), rule.result_code, total)
    return [*remaining, merged]


def apply_rules(
    table: Table,
    rules: Sequence[TransformationRule],
    code_column: str,
    quantity_column: str,
    description_column: str | None = None,
    category_column: str | None = None,
) -> Table:
    """Apply exclusion then merge rules to a table.

    Steps:
    1. Drop rows matched by any enabled ExcludeRule
    2. For each enabled MergeRule in order, replace its source rows with one
       synthesized row appended at the end
    """
    active = [rule for rule in rules if rule.enabled]
    exclude_rules = [rule for rule in active if isinstance(rule, ExcludeRule)]
    merge_rules = [rule for rule in active if isinstance(rule, MergeRule)]

    rows = list(table.rows)
    if exclude_rules:
        rows = [
            row for row in rows
            if not row_is_excluded(row, exclude_rules, code_column, description_column, category_column)
        ]
    excluded = len(table.rows) - len(rows)

    for rule in merge_rules:
        rows = _merge(table, rows, rule, code_column, quantity_column, description_column)

    logger.info(
        f"rules: {table.name} rows={len(table.rows)} excluded={excluded} result_rows={len(rows)}"
    )
    return table.with_rows(rows)
