"""Public API of the BOM reconciliation engine."""

from .models import (
    ComparisonResult,
    ExcludeKind,
    ExcludeRule,
    Mapping,
    Mappings,
    MergeRule,
    ResultStatus,
    RuleType,
    Table,
    TransformationRule,
)
from .services.keys import key_of
from .services.normalize import cell_text, normalize_quantity
from .services.reconciler import ComparisonError, MissingMappingError, compare, count_by_status
from .services.rule_applicator import apply_rules
from .services.rule_parser import parse_rules

__all__ = [
    "ComparisonError",
    "ComparisonResult",
    "ExcludeKind",
    "ExcludeRule",
    "Mapping",
    "Mappings",
    "MergeRule",
    "MissingMappingError",
    "ResultStatus",
    "RuleType",
    "Table",
    "TransformationRule",
    "apply_rules",
    "cell_text",
    "compare",
    "count_by_status",
    "key_of",
    "normalize_quantity",
    "parse_rules",
]
