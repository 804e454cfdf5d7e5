"""Stable ordering of list items."""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Iterable, Optional, Tuple

from .models import ListItem, SortDirection


def compare_values(first: Any, second: Any, direction: SortDirection = SortDirection.ASCENDING) -> int:
    """Three-way comparison of two field values.

    Strings are compared case-folded. Values that cannot be ordered against
    each other count as equal.
    """

    if isinstance(first, str) and isinstance(second, str):
        first, second = first.casefold(), second.casefold()
    result = 0
    try:
        if first < second:
            result = -1
        elif first > second:
            result = 1
    except TypeError:
        result = 0
    if direction is SortDirection.DESCENDING:
        return -result
    return result


def can_sort(items: Tuple[ListItem, ...], sort_on: Optional[str], direction: Optional[SortDirection]) -> bool:
    return bool(items) and direction is not None and bool(sort_on) and items[0].has_field(sort_on)


def sort_items(
    items: Iterable[ListItem],
    sort_on: Optional[str] = None,
    direction: Optional[SortDirection] = None,
) -> Tuple[ListItem, ...]:
    """Return ``items`` ordered by ``sort_on``, or in input order when sorting does not apply."""

    snapshot = tuple(items)
    direction = SortDirection.parse(direction)
    if not can_sort(snapshot, sort_on, direction):
        return snapshot

    def _compare(item1: ListItem, item2: ListItem) -> int:
        return compare_values(item1.get(sort_on), item2.get(sort_on), direction)

    return tuple(sorted(snapshot, key=cmp_to_key(_compare)))
