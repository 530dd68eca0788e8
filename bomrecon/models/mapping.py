from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

"""Column mapping models.

A Mapping assigns logical roles (code, quantity, description, revision,
category) to column names of one Table. `code` and `quantity` are mandatory
for comparison; unset optional roles make that data absent (None) in results.
"""

__all__ = [
    "MAPPABLE_FIELDS",
    "REQUIRED_FIELDS",
    "Mapping",
    "Mappings",
]

MAPPABLE_FIELDS = ("code", "quantity", "description", "revision", "category")
REQUIRED_FIELDS = ("code", "quantity")


@dataclass(frozen=True)
class Mapping:
    """Role -> column name assignment for one side of the comparison."""
    code: str | None = None
    quantity: str | None = None
    description: str | None = None
    revision: str | None = None
    category: str | None = None

    @property
    def is_complete(self) -> bool:
        """True when both mandatory roles are resolved to a column name."""
        return all(getattr(self, role) for role in REQUIRED_FIELDS)

    @property
    def missing_roles(self) -> list[str]:
        return [role for role in REQUIRED_FIELDS if not getattr(self, role)]

    def merged_over(self, fallback: Mapping) -> Mapping:
        """Return this mapping with unset roles filled from `fallback`."""
        values = {role: getattr(self, role) or getattr(fallback, role) for role in MAPPABLE_FIELDS}
        return replace(self, **values)

    @staticmethod
    def from_dict(data: dict[str, Any] | None) -> Mapping:
        if not data:
            return Mapping()
        return Mapping(**{role: data.get(role) for role in MAPPABLE_FIELDS})


@dataclass(frozen=True)
class Mappings:
    """Pair of mappings: `original` (source BOM) and `partial` (target BOM)."""
    original: Mapping = field(default_factory=Mapping)
    partial: Mapping = field(default_factory=Mapping)

    @property
    def is_complete(self) -> bool:
        return self.original.is_complete and self.partial.is_complete
