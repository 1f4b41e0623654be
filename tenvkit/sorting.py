"""Comparison helpers."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")


def reverser(cmp: Callable[[T, T], int], reverse_order: bool) -> Callable[[T, T], int]:
    """Return cmp, or cmp with its arguments swapped when reverse_order is set."""
    if reverse_order:
        return lambda a, b: cmp(b, a)
    return cmp