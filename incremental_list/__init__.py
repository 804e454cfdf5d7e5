"""Incremental list controller package."""

from .config import ListConfig, load_config
from .controller import ListController, ListLoadError, ListSnapshot
from .models import ListItem, LoadRequest, SearchMatch, SortDirection
from .providers import ItemProviderError, create_provider

__all__ = [
    "ItemProviderError",
    "ListConfig",
    "ListController",
    "ListItem",
    "ListLoadError",
    "ListSnapshot",
    "LoadRequest",
    "SearchMatch",
    "SortDirection",
    "create_provider",
    "load_config",
]
