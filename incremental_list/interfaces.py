"""Protocols of the presentation components driven by the controller."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol

from .models import ListItem

ToggleSelection = Callable[[Any], None]
SearchCallback = Callable[[Optional[str], str], object]


class RowRenderer(Protocol):
    """Render one row; calls ``toggle_selection(item.key)`` on interaction."""

    def __call__(self, item: ListItem, toggle_selection: ToggleSelection) -> None:
        ...


class SearchInput(Protocol):
    def show(self, text: str, placeholder: str, search_callback: SearchCallback) -> None:
        ...
