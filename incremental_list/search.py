"""Search strategies: local caption matching or server-side queries."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable, Optional, Tuple

from .config import ListConfig
from .models import ListItem, SearchMatch

if TYPE_CHECKING:  # pragma: no cover
    import asyncio

    from .controller import ListController

ACTIVATION_KEY = "Enter"


def matches_caption(caption: str, query: str, match: SearchMatch = SearchMatch.CONTAINS) -> bool:
    caption_folded = (caption or "").casefold()
    query_folded = (query or "").casefold()
    if match is SearchMatch.STARTS_WITH:
        return caption_folded.startswith(query_folded)
    if match is SearchMatch.ENDS_WITH:
        return caption_folded.endswith(query_folded)
    return query_folded in caption_folded


class SearchStrategy(ABC):
    """How a change of the search input is handled."""

    remote: bool = False

    @abstractmethod
    def on_input(
        self, controller: "ListController", activation_key: Optional[str], value: str
    ) -> Optional["asyncio.Task[None]"]:
        """React to the search input and return the load task, if one was scheduled."""


class ServerSearch(SearchStrategy):
    """Commit queries on the activation key and reload from page 1."""

    remote = True

    def should_commit(self, activation_key: Optional[str], value: str) -> bool:
        return activation_key == ACTIVATION_KEY or not value

    def on_input(self, controller, activation_key, value):
        if not self.should_commit(activation_key, value):
            return None
        return controller.commit_search(value)


class ClientSearch(SearchStrategy):
    """Filter the loaded items on every keystroke."""

    def __init__(self, match: SearchMatch = SearchMatch.CONTAINS) -> None:
        self.match = match

    def filter(self, items: Iterable[ListItem], value: str) -> Tuple[ListItem, ...]:
        return tuple(item for item in items if matches_caption(item.caption, value, self.match))

    def on_input(self, controller, activation_key, value):
        controller.show_matches(self.filter(controller.canonical, value))
        return None


def create_search_strategy(config: ListConfig, *, has_loader: bool) -> SearchStrategy:
    """Pick the search strategy once, at controller construction."""

    if config.search_at_server and has_loader:
        return ServerSearch()
    return ClientSearch(config.search_type)
