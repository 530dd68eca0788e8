from __future__ import annotations

import logging
import re

from ..models.rules import ExcludeKind, ExcludeRule, MergeRule, RuleType, TransformationRule
from ..models.table import Row, Table
from .normalize import cell_text

"""Rules workbook interpreter.

Recognized columns (by literal header):
- `Tipo`: UNIONE (merge) or ESCLUDI (exclude); MERGE / EXCLUDE are accepted too
- `Codici da unire` (or `Valore`): '+'-joined codes, or the exclusion value
- `Codice risultante` / `Descrizione risultante`: merge target
- `Sotto-tipo` (optional): explicit exclusion kind

Rows that cannot form a rule are skipped, never raised. A table without
these columns yields no rules.
"""

__all__ = [
    "infer_exclude_kind",
    "parse_rules",
]

logger = logging.getLogger(__name__)

COL_TYPE = "Tipo"
COL_CODES = "Codici da unire"
COL_VALUE = "Valore"
COL_RESULT_CODE = "Codice risultante"
COL_RESULT_DESCRIPTION = "Descrizione risultante"
COL_SUBTYPE = "Sotto-tipo"

_TYPE_ALIASES = {
    RuleType.MERGE.value: RuleType.MERGE,
    "MERGE": RuleType.MERGE,
    RuleType.EXCLUDE.value: RuleType.EXCLUDE,
    "EXCLUDE": RuleType.EXCLUDE,
}

# Legacy free-text exclusion criteria. Order matters: first match wins.
_LEGACY_PATTERNS: tuple[tuple[ExcludeKind, re.Pattern[str]], ...] = (
    (
        ExcludeKind.DESCRIPTION_CONTAINS,
        re.compile(r'(?:TUTT[EI]\s+LE\s+)?DESCRIZIONI\s+CONTENENTI\s*"([^"]+)"', re.IGNORECASE),
    ),
    (
        ExcludeKind.DESCRIPTION_PREFIX,
        re.compile(r'(?:TUTT[EI]\s+LE\s+)?DESCRIZIONI\s+CHE\s+INIZIANO\s+PER\s*"([^"]+)"', re.IGNORECASE),
    ),
    (
        ExcludeKind.CODE_PREFIX,
        re.compile(r'(?:TUTTI\s+I\s+)?CODICI\s+CHE\s+INIZIANO\s+PER\s*"([^"]+)"', re.IGNORECASE),
    ),
    (
        ExcludeKind.CATEGORY_EXACT,
        re.compile(
            r'(?:TUTT[EI]\s+LE\s+)?CATEGORI[AE]\s*(?:MERCEOLOGICH?[AE]\s*)?(?:UGUALE\s+A\s*)?"([^"]+)"',
            re.IGNORECASE,
        ),
    ),
)


def infer_exclude_kind(text: str) -> tuple[ExcludeKind, str]:
    """Classify a legacy exclusion value written as free text.

    Returns the kind and the value the rule should match against. Text that
    matches no template is a plain code list (CODE_EXACT, verbatim).
    """
    for kind, pattern in _LEGACY_PATTERNS:
        match = pattern.search(text)
        if match and match.group(1):
            return kind, match.group(1)
    return ExcludeKind.CODE_EXACT, text


def _explicit_kind(raw: object) -> ExcludeKind | None:
    name = re.sub(r"[\s\-]+", "_", cell_text(raw).strip()).upper()
    if not name:
        return None
    try:
        return ExcludeKind[name]
    except KeyError:
        return None


def _parse_row(row: Row) -> TransformationRule | None:
    rule_type_text = cell_text(row.get(COL_TYPE)).strip().upper()
    codes_or_value = cell_text(row.get(COL_CODES)).strip() or cell_text(row.get(COL_VALUE)).strip()
    if not rule_type_text or not codes_or_value:
        return None

    rule_type = _TYPE_ALIASES.get(rule_type_text)
    if rule_type is RuleType.MERGE:
        source_codes = tuple(c.strip() for c in codes_or_value.split("+") if c.strip())
        result_code = cell_text(row.get(COL_RESULT_CODE)).strip()
        result_description = cell_text(row.get(COL_RESULT_DESCRIPTION)).strip()
        if not result_code or not source_codes:
            return None
        return MergeRule(source_codes=source_codes, result_code=result_code, result_description=result_description)

    if rule_type is RuleType.EXCLUDE:
        kind = _explicit_kind(row.get(COL_SUBTYPE))
        if kind is not None:
            return ExcludeRule(kind=kind, value=codes_or_value)
        kind, value = infer_exclude_kind(codes_or_value)
        return ExcludeRule(kind=kind, value=value)

    return None


def parse_rules(table: Table) -> list[TransformationRule]:
    """Interpret a rules table into a typed rule list (all rules enabled)."""
    headers = set(table.headers)
    if COL_TYPE not in headers or not ({COL_CODES, COL_VALUE} & headers):
        logger.warning(
            f"rules: '{table.name}' has no '{COL_TYPE}' and '{COL_CODES}' (or '{COL_VALUE}') columns, no rules loaded"
        )

    rules: list[TransformationRule] = []
    for index, row in enumerate(table.rows, start=1):
        rule = _parse_row(row)
        if rule is None:
            logger.debug("rules: skipped row %d of %s (incomplete or unknown type)", index, table.name)
            continue
        rules.append(rule)
    logger.info(f"rules: loaded {len(rules)} rule(s) from {table.name}")
    return rules
