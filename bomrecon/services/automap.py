from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ..models.mapping import Mapping, Mappings
from ..models.table import Table
from .normalize import cell_text

"""Column auto-mapping heuristics.

Headers are matched first by exact (case-insensitive) name, then by keyword
inclusion. For the partial BOM the code column is then re-chosen by comparing
column content profiles against the original code column, since ERP exports
often label the code column differently.
"""

__all__ = [
    "ColumnProfile",
    "auto_map_columns",
    "profile_column",
    "smart_auto_map",
]

logger = logging.getLogger(__name__)

PROFILE_SAMPLE_ROWS = 50

# role -> (exact header names, keywords contained in header)
_ROLE_KEYWORDS: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "code": (
        ("Articolo", "Codice Prodotto", "Cod. Originale", "Codice"),
        ("codice", "cod.", "articolo", "item", "part"),
    ),
    "quantity": (
        ("Q.Tot.DB", "Qta Distinta Base", "Quantità"),
        ("quantità", "qnt", "qta", "q.tà", "qty", "quantity"),
    ),
    "description": (
        ("Descrizione articolo", "Descrizione"),
        ("descrizione", "desc.", "description"),
    ),
    "revision": (
        ("Rev", "Revisione"),
        ("rev", "revisione", "revision"),
    ),
    "category": (
        ("Categoria Merceologica", "Categoria"),
        ("categoria", "category"),
    ),
}

_NUMERIC_RE = re.compile(r"^\d+([,.]\d+)?$")


@dataclass(frozen=True)
class ColumnProfile:
    numeric_ratio: float
    avg_length: float
    total_count: int


def _find_header(headers: list[str], keywords: tuple[str, ...], exact: tuple[str, ...]) -> str | None:
    lowered = [h.lower().strip() for h in headers]
    for name in exact:
        target = name.lower().strip()
        if target in lowered:
            return headers[lowered.index(target)]
    for keyword in keywords:
        needle = keyword.lower().strip()
        for index, header in enumerate(lowered):
            if needle in header:
                return headers[index]
    return None


def auto_map_columns(headers: list[str]) -> Mapping:
    """Guess a Mapping from header names alone."""
    found = {
        role: _find_header(headers, keywords, exact)
        for role, (exact, keywords) in _ROLE_KEYWORDS.items()
    }
    return Mapping(**found)


def profile_column(table: Table, header: str | None) -> ColumnProfile:
    """Profile the first non-empty values of a column (numeric share, mean length)."""
    if not header:
        return ColumnProfile(0.0, 0.0, 0)
    values = [cell_text(row.get(header)) for row in table.rows[:PROFILE_SAMPLE_ROWS]]
    values = [v for v in values if v]
    if not values:
        return ColumnProfile(0.0, 0.0, 0)
    numeric = sum(1 for v in values if _NUMERIC_RE.match(v))
    return ColumnProfile(
        numeric_ratio=numeric / len(values),
        avg_length=sum(len(v) for v in values) / len(values),
        total_count=len(values),
    )


def smart_auto_map(original: Table, partial: Table) -> Mappings:
    """Auto-map both tables, choosing the partial code column by content similarity."""
    original_mapping = auto_map_columns(original.headers)
    partial_mapping = auto_map_columns(partial.headers)
    if not original_mapping.code:
        return Mappings(original=original_mapping, partial=partial_mapping)

    reference = profile_column(original, original_mapping.code)
    if reference.total_count == 0:
        return Mappings(original=original_mapping, partial=partial_mapping)

    best: str | None = None
    best_score = -1.0
    for header in partial.headers:
        candidate = profile_column(partial, header)
        if candidate.total_count == 0:
            continue
        score = (1 - abs(reference.numeric_ratio - candidate.numeric_ratio)) * 10
        if reference.avg_length > 0 and candidate.avg_length > 0:
            longest = max(reference.avg_length, candidate.avg_length)
            score += (1 - abs(reference.avg_length - candidate.avg_length) / longest) * 2
        if header == partial_mapping.code:
            score += 5
        if score > best_score:
            best_score = score
            best = header

    if best is not None and best != partial_mapping.code:
        logger.debug("automap: partial code column %r -> %r (score=%.2f)", partial_mapping.code, best, best_score)
        partial_mapping = Mapping(
            code=best,
            quantity=partial_mapping.quantity,
            description=partial_mapping.description,
            revision=partial_mapping.revision,
            category=partial_mapping.category,
        )
    return Mappings(original=original_mapping, partial=partial_mapping)
