"""Scroll observation that advances the page cursor near the bottom."""

from __future__ import annotations

from typing import Callable, Optional, Protocol

SCROLL_THRESHOLD = 5

ScrollListener = Callable[[float, float, float], None]


class ScrollSurface(Protocol):
    """A scrollable display surface reporting ``(scroll_top, scroll_height, viewport_height)``."""

    def add_scroll_listener(self, listener: ScrollListener) -> None:
        ...

    def remove_scroll_listener(self, listener: ScrollListener) -> None:
        ...


def is_near_bottom(
    scroll_top: float, scroll_height: float, viewport_height: float, threshold: float = SCROLL_THRESHOLD
) -> bool:
    return scroll_top + viewport_height >= scroll_height - threshold


class ScrollTrigger:
    """Own the scroll listener of one surface for one mount lifecycle."""

    def __init__(self, on_scroll: ScrollListener) -> None:
        self._on_scroll = on_scroll
        self._surface: Optional[ScrollSurface] = None

    @property
    def attached(self) -> bool:
        return self._surface is not None

    def attach(self, surface: Optional[ScrollSurface]) -> None:
        if surface is None or self._surface is surface:
            return
        self.detach()
        surface.add_scroll_listener(self._on_scroll)
        self._surface = surface

    def detach(self) -> None:
        surface, self._surface = self._surface, None
        if surface is not None:
            surface.remove_scroll_listener(self._on_scroll)

    def __enter__(self) -> "ScrollTrigger":
        return self

    def __exit__(self, *_exc) -> None:
        self.detach()
