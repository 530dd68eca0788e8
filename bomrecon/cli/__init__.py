"""Command-line interface (``python -m bomrecon.cli``)."""

from .__main__ import main

__all__ = ["main"]
