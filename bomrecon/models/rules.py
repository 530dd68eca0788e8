from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

"""Transformation rule models.

Rules are a closed sum type: a MergeRule collapses several source codes into
one synthetic row, an ExcludeRule drops rows matching one criterion. The
`RuleType` values are the literals written in the `Tipo` column of a rules
workbook.
"""

__all__ = [
    "ExcludeKind",
    "ExcludeRule",
    "MergeRule",
    "RuleType",
    "TransformationRule",
]


class RuleType(Enum):
    """Rule discriminator as written in the rules workbook (`Tipo` column)."""
    MERGE = "UNIONE"
    EXCLUDE = "ESCLUDI"


class ExcludeKind(Enum):
    """Match criterion of an exclusion rule (`Sotto-tipo` column)."""
    CODE_EXACT = "CODE_EXACT"  # value is one code or codes joined by '+'
    CODE_PREFIX = "CODE_PREFIX"
    DESCRIPTION_CONTAINS = "DESCRIPTION_CONTAINS"
    DESCRIPTION_PREFIX = "DESCRIPTION_PREFIX"
    CATEGORY_EXACT = "CATEGORY_EXACT"


@dataclass(frozen=True)
class MergeRule:
    """Collapse every row whose code is in `source_codes` into one row coded `result_code`."""
    source_codes: tuple[str, ...]
    result_code: str
    result_description: str = ""
    enabled: bool = True

    def __post_init__(self) -> None:
        if not self.source_codes:
            raise ValueError("merge rule requires at least one source code")
        if not self.result_code:
            raise ValueError("merge rule requires a result code")

    @property
    def type(self) -> RuleType:
        return RuleType.MERGE


@dataclass(frozen=True)
class ExcludeRule:
    """Drop every row matching `kind` against `value`."""
    kind: ExcludeKind
    value: str
    enabled: bool = True

    @property
    def type(self) -> RuleType:
        return RuleType.EXCLUDE

    @property
    def codes(self) -> frozenset[str]:
        """Code set for CODE_EXACT rules (value split on '+', trimmed)."""
        return frozenset(token.strip() for token in self.value.split("+"))


TransformationRule: TypeAlias = MergeRule | ExcludeRule
