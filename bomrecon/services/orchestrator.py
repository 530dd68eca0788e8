from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..excel.reader import TableReadError, read_rules_table, read_table
from ..models.comparison_result import ComparisonResult, ResultStatus
from ..models.config_models import CompareConfig, SideConfig
from ..models.mapping import Mappings
from ..models.rules import TransformationRule
from ..models.table import Table
from .automap import smart_auto_map
from .reconciler import MissingMappingError, compare, count_by_status
from .rule_applicator import apply_rules
from .rule_parser import parse_rules

"""Job orchestration: read both BOMs, resolve mappings, apply rules, compare."""

logger = logging.getLogger(__name__)


class JobError(Exception):
    """Raised when an input file of the job cannot be read."""


@dataclass(frozen=True)
class JobResult:
    """Outcome of one comparison job."""
    results: list[ComparisonResult]
    mappings: Mappings
    original_rows: int  # rows read from the original BOM (before rules)
    partial_rows: int  # rows read from the partial BOM (before rules)
    rules_applied: int = 0
    counts: dict[ResultStatus, int] = field(default_factory=dict)


def _read_side(side: SideConfig, label: str) -> Table:
    try:
        table = read_table(Path(side.path), skip_rows=side.skip_rows, sheet=side.sheet)
    except FileNotFoundError as e:
        raise JobError(f"{label} file not found: {side.path}") from e
    except (TableReadError, ValueError) as e:
        raise JobError(f"{label} file {side.path}: {e}") from e
    logger.info(f"{label}: {table.name} headers={len(table.headers)} rows={len(table.rows)}")
    return table


def resolve_mappings(config: CompareConfig, original: Table, partial: Table) -> Mappings:
    """Explicit mappings from the job win; unset roles are auto-mapped."""
    guessed = smart_auto_map(original, partial)
    mappings = Mappings(
        original=config.original.mapping.merged_over(guessed.original),
        partial=config.partial.mapping.merged_over(guessed.partial),
    )
    logger.debug("mapping: original=%s partial=%s", mappings.original, mappings.partial)
    return mappings


def load_rules(config: CompareConfig) -> list[TransformationRule]:
    if not config.rules or config.ignore_rules:
        return []
    try:
        return parse_rules(read_rules_table(Path(config.rules)))
    except FileNotFoundError as e:
        raise JobError(f"rules file not found: {config.rules}") from e
    except TableReadError as e:
        raise JobError(f"rules file {config.rules}: {e}") from e


def run_job(config: CompareConfig) -> JobResult:
    """Run one comparison job end to end.

    Raises:
        JobError: an input file cannot be read
        MissingMappingError: code/quantity columns could not be resolved
    """
    original = _read_side(config.original, "original")
    partial = _read_side(config.partial, "partial")
    original_rows, partial_rows = len(original.rows), len(partial.rows)

    mappings = resolve_mappings(config, original, partial)
    if not mappings.is_complete:
        missing = [f"original.{r}" for r in mappings.original.missing_roles]
        missing += [f"partial.{r}" for r in mappings.partial.missing_roles]
        raise MissingMappingError(f"required column mapping missing: {', '.join(missing)}")

    rules = load_rules(config)
    if rules:
        original = apply_rules(
            original, rules,
            mappings.original.code, mappings.original.quantity,  # type: ignore[arg-type]
            mappings.original.description, mappings.original.category,
        )
        partial = apply_rules(
            partial, rules,
            mappings.partial.code, mappings.partial.quantity,  # type: ignore[arg-type]
            mappings.partial.description, mappings.partial.category,
        )

    results = compare(
        original,
        partial,
        mappings,
        config.aggregate,
        ignore_revision=config.ignore_revision,
        ignore_quantity=config.ignore_quantity,
    )
    return JobResult(
        results=results,
        mappings=mappings,
        original_rows=original_rows,
        partial_rows=partial_rows,
        rules_applied=len([r for r in rules if r.enabled]),
        counts=count_by_status(results),
    )
