from __future__ import annotations

from typing import Any

from .normalize import cell_text

"""Comparison key resolution.

A key identifies a line item across both BOMs: the code alone when revisions
are ignored, otherwise code and revision joined by `KEY_SEPARATOR`. A missing
revision renders as "", so two rows without revision share a key while a
present revision and an absent one do not.
"""

__all__ = [
    "KEY_SEPARATOR",
    "code_of_key",
    "key_of",
]

KEY_SEPARATOR = "::"


def key_of(code: Any, revision: Any, ignore_revision: bool) -> str:
    if ignore_revision:
        return cell_text(code)
    return f"{cell_text(code)}{KEY_SEPARATOR}{cell_text(revision)}"


def code_of_key(key: str) -> str:
    """Recover the code part of a key (text before the first separator)."""
    return key.split(KEY_SEPARATOR, 1)[0]
