"""Configuration utilities for the incremental list."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .models import SearchMatch, SortDirection

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
_TRUE_VALUES = {"1", "true", "yes"}


@dataclass(frozen=True)
class ListConfig:
    """Configuration container for a list controller and its data source."""

    page_size: int = DEFAULT_PAGE_SIZE
    search_at_server: bool = False
    search_placeholder: str = "Suchen…"
    search_type: SearchMatch = SearchMatch.CONTAINS
    single_select: bool = False
    sort_direction: Optional[SortDirection] = None
    sort_on: Optional[str] = None
    data_source: str = "fixture"
    fixture_path: Path = Path("data/items_fixture.json")
    excel_path: Optional[Path] = None
    excel_sheet: Optional[str] = None
    api_url: Optional[str] = None
    key_column: str = "key"
    caption_column: str = "caption"

    def __post_init__(self) -> None:
        # Sort and search vocabularies are validated once, here.
        raw_direction = self.sort_direction
        direction = SortDirection.parse(raw_direction)
        if raw_direction is not None and direction is None:
            logger.warning("Ignoring unknown sort direction %r", raw_direction)
        object.__setattr__(self, "sort_direction", direction)
        object.__setattr__(self, "search_type", SearchMatch.parse(self.search_type))
        if self.page_size <= 0:
            raise ValueError("page_size must be positive")

    @property
    def can_sort(self) -> bool:
        return self.sort_direction is not None and bool(self.sort_on)


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in _TRUE_VALUES


def load_config(base_dir: Path | None = None) -> ListConfig:
    """Load configuration from environment variables."""

    base_dir = base_dir or Path.cwd()
    data_source = os.getenv("LIST_DATA_SOURCE", "fixture")

    fixture_override = os.getenv("LIST_FIXTURE_PATH")
    if fixture_override:
        fixture_path = Path(fixture_override)
    else:
        fixture_path = base_dir / "data" / "items_fixture.json"

    excel_env = os.getenv("LIST_EXCEL_PATH")
    excel_path = Path(excel_env) if excel_env else None

    page_size_env = os.getenv("LIST_PAGE_SIZE")
    try:
        page_size = int(page_size_env) if page_size_env else DEFAULT_PAGE_SIZE
    except ValueError:
        page_size = DEFAULT_PAGE_SIZE
    if page_size <= 0:
        page_size = DEFAULT_PAGE_SIZE

    return ListConfig(
        page_size=page_size,
        search_at_server=_env_flag("LIST_SEARCH_AT_SERVER"),
        search_placeholder=os.getenv("LIST_SEARCH_PLACEHOLDER", "Suchen…"),
        search_type=SearchMatch.parse(os.getenv("LIST_SEARCH_TYPE")),
        single_select=_env_flag("LIST_SINGLE_SELECT"),
        sort_direction=os.getenv("LIST_SORT_DIRECTION") or None,
        sort_on=os.getenv("LIST_SORT_ON") or None,
        data_source=data_source,
        fixture_path=fixture_path,
        excel_path=excel_path,
        excel_sheet=os.getenv("LIST_EXCEL_SHEET") or None,
        api_url=os.getenv("LIST_API_URL") or None,
        key_column=os.getenv("LIST_KEY_COLUMN", "key"),
        caption_column=os.getenv("LIST_CAPTION_COLUMN", "caption"),
    )
