"""Whitespace word counting."""

from __future__ import annotations


def count(text: str) -> int:
    """Return the number of whitespace-delimited words in ``text``."""
    # str.split() with no separator trims and collapses whitespace runs.
    return len(text.split())
