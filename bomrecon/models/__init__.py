"""Domain models for the BOM reconciliation tool.

Tables and mappings describe the inputs, rules describe the pre-processing
step, and ComparisonResult/ResultStatus describe the output.
"""

from .comparison_result import ComparisonResult, ResultStatus
from .config_models import CompareConfig, SideConfig
from .issue_record import IssueRecord
from .mapping import Mapping, Mappings
from .rules import ExcludeKind, ExcludeRule, MergeRule, RuleType, TransformationRule
from .table import Row, Table

__all__ = [
    # Configuration models
    "CompareConfig",
    "SideConfig",
    # Input models
    "Mapping",
    "Mappings",
    "Row",
    "Table",
    # Rules
    "ExcludeKind",
    "ExcludeRule",
    "MergeRule",
    "RuleType",
    "TransformationRule",
    # Output models
    "ComparisonResult",
    "IssueRecord",
    "ResultStatus",
]
