"""Naming conventions for tables and key columns.

Only the last underscore-separated segment is inflected, so compound table
names behave like English compounds: ``order_items`` -> ``order_item``.
"""
from __future__ import annotations

import re
from functools import lru_cache

import inflect

_inflector = inflect.engine()

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


@lru_cache(maxsize=1024)
def singular(word: str) -> str:
    """Return the singular form of ``word`` (``"orders"`` -> ``"order"``).

    Words that are already singular are returned unchanged.
    """
    head, _, last = word.rpartition("_")
    if not last:
        return word
    result = _inflector.singular_noun(last)
    last = result if result else last
    return f"{head}_{last}" if head else last


@lru_cache(maxsize=1024)
def plural(word: str) -> str:
    """Return the plural form of ``word`` (``"category"`` -> ``"categories"``)."""
    head, _, last = word.rpartition("_")
    if not last:
        return word
    last = _inflector.plural_noun(last)
    return f"{head}_{last}" if head else last


def snake_case(name: str) -> str:
    """Convert a class name to snake case (``"OrderItem"`` -> ``"order_item"``)."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()
