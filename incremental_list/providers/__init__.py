"""Fetch capabilities feeding the list controller."""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
import requests

from ..models import ListItem, LoadRequest, coerce_item
from ..search import matches_caption

logger = logging.getLogger(__name__)


def _coerce_optional(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, float) and pd.isna(value):
        return None
    if isinstance(value, str):
        return value.strip() or None
    return value


def _page(items: List[ListItem], request: LoadRequest) -> List[ListItem]:
    start = request.offset
    return items[start:start + request.page_size]


class ItemProviderError(RuntimeError):
    """Raised when a provider cannot deliver list items."""


class BaseItemProvider(ABC):
    """Abstract interface for fetch capabilities."""

    @abstractmethod
    async def fetch(self, request: LoadRequest) -> List[ListItem]:
        """Return the items of one page; fewer than ``page_size`` marks the last page."""


class FixtureItemProvider(BaseItemProvider):
    """Serve items from a local JSON fixture."""

    def __init__(self, fixture_path: Path):
        self.fixture_path = fixture_path
        self._items = self._load_fixture()

    def _load_fixture(self) -> List[ListItem]:
        if not self.fixture_path.exists():
            raise ItemProviderError(f"Fixture-Datei nicht gefunden: {self.fixture_path}")
        try:
            raw_data = json.loads(self.fixture_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ItemProviderError(f"Fixture-Datei konnte nicht gelesen werden: {exc}") from exc

        raw_items = raw_data.get("items", []) if isinstance(raw_data, dict) else raw_data
        if not isinstance(raw_items, list):
            raise ItemProviderError("Fixture besitzt ein unerwartetes Format.")

        items: List[ListItem] = []
        for entry in raw_items:
            if not isinstance(entry, dict):
                continue
            try:
                items.append(ListItem.from_mapping(entry))
            except ValueError:
                logger.debug("Skipping fixture entry without key: %r", entry)
        return items

    def _filter_items(self, query: str) -> List[ListItem]:
        if not query:
            return list(self._items)
        return [item for item in self._items if matches_caption(item.caption, query)]

    async def fetch(self, request: LoadRequest) -> List[ListItem]:
        return [coerce_item(item) for item in _page(self._filter_items(request.search_text), request)]


class DataFrameItemProvider(BaseItemProvider):
    """Page through the rows of a pandas DataFrame."""

    def __init__(self, frame: pd.DataFrame, *, key_column: str = "key", caption_column: str = "caption"):
        missing = [column for column in (key_column, caption_column) if column not in frame.columns]
        if missing:
            raise ItemProviderError("Fehlende Spalten: " + ", ".join(missing))
        self.frame = frame.reset_index(drop=True)
        self.key_column = key_column
        self.caption_column = caption_column

    @classmethod
    def from_excel(
        cls,
        excel_path: Path,
        *,
        sheet_name: Optional[str] = None,
        key_column: str = "key",
        caption_column: str = "caption",
    ) -> "DataFrameItemProvider":
        if not excel_path.exists():
            raise ItemProviderError(f"Excel-Datei nicht gefunden: {excel_path}")
        try:
            frame = pd.read_excel(excel_path, sheet_name=sheet_name or 0, engine="openpyxl")
        except (OSError, ValueError) as exc:
            raise ItemProviderError(f"Excel-Datei konnte nicht gelesen werden: {exc}") from exc
        return cls(frame, key_column=key_column, caption_column=caption_column)

    def _filter_frame(self, query: str) -> pd.DataFrame:
        if not query:
            return self.frame
        captions = self.frame[self.caption_column].astype(str).str.casefold()
        return self.frame[captions.str.contains(query.casefold(), regex=False)]

    def _row_to_item(self, row: Dict[str, Any]) -> ListItem:
        fields = {
            str(column): _coerce_optional(value)
            for column, value in row.items()
            if column not in (self.key_column, self.caption_column)
        }
        caption = _coerce_optional(row.get(self.caption_column))
        return ListItem(
            key=row[self.key_column],
            caption="" if caption is None else str(caption),
            fields=fields,
        )

    async def fetch(self, request: LoadRequest) -> List[ListItem]:
        filtered = self._filter_frame(request.search_text)
        window = filtered.iloc[request.offset:request.offset + request.page_size]
        return [self._row_to_item(row) for row in window.to_dict(orient="records")]


class HttpItemProvider(BaseItemProvider):
    """Retrieve pages from a JSON endpoint.

    The endpoint receives ``pageNumber``, ``pageSize`` and ``searchText`` as query
    parameters and answers with a list of items or ``{"items": [...]}``.
    """

    def __init__(self, api_url: str, *, session: Optional[requests.Session] = None, timeout: float = 10):
        self.api_url = api_url
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, params: Dict[str, Any]) -> Any:
        try:
            response = self.session.get(self.api_url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ItemProviderError(f"Abfrage fehlgeschlagen: {exc}") from exc
        if response.status_code != 200:
            raise ItemProviderError(f"Abfrage fehlgeschlagen: {response.status_code} {response.text}")
        try:
            return response.json()
        except ValueError as exc:
            raise ItemProviderError("Antwort ist kein gültiges JSON.") from exc

    async def fetch(self, request: LoadRequest) -> List[ListItem]:
        payload = await asyncio.to_thread(self._request, request.to_dict())
        if isinstance(payload, dict):
            payload = payload.get("items", [])
        if not isinstance(payload, list):
            raise ItemProviderError("Antwort besitzt ein unerwartetes Format.")
        try:
            return [coerce_item(entry) for entry in payload]
        except (TypeError, ValueError) as exc:
            raise ItemProviderError(f"Ungültiger Eintrag in der Antwort: {exc}") from exc


def create_provider(config) -> Optional[BaseItemProvider]:
    """Create the provider selected by ``config.data_source``."""

    source = config.data_source.lower()
    if source == "static":
        return None
    if source == "http":
        if not config.api_url:
            raise ItemProviderError("HTTP-Konfiguration unvollständig. Fehlende Variable: LIST_API_URL")
        return HttpItemProvider(config.api_url)
    if source == "excel":
        if config.excel_path is None:
            raise ItemProviderError("Excel-Konfiguration unvollständig. Fehlende Variable: LIST_EXCEL_PATH")
        return DataFrameItemProvider.from_excel(
            config.excel_path,
            sheet_name=config.excel_sheet,
            key_column=config.key_column,
            caption_column=config.caption_column,
        )
    return FixtureItemProvider(config.fixture_path)
