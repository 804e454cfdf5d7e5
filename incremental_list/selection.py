"""Selection toggling across the canonical and displayed collections."""

from __future__ import annotations

from typing import Any, Sequence, Tuple

from .models import ListItem


def toggle_selection(
    canonical: Sequence[ListItem],
    displayed: Sequence[ListItem],
    key: Any,
    *,
    single_select: bool = False,
) -> Tuple[Tuple[ListItem, ...], Tuple[ListItem, ...]]:
    """Return new ``(canonical, displayed)`` collections with ``key`` toggled.

    With ``single_select`` every other selected item is cleared. The displayed
    collection keeps its membership and picks up the updated flags.
    """

    updated = []
    for item in canonical:
        if item.key == key:
            item = item.with_selection(not item.is_selected)
        elif single_select and item.is_selected:
            item = item.with_selection(False)
        updated.append(item)

    visible_keys = {item.key for item in displayed}
    new_canonical = tuple(updated)
    new_displayed = tuple(item for item in new_canonical if item.key in visible_keys)
    return new_canonical, new_displayed


def selected_items(items: Sequence[ListItem]) -> Tuple[ListItem, ...]:
    return tuple(item for item in items if item.is_selected)
