from __future__ import annotations

import asyncio
from pathlib import Path
from unittest import mock

import pandas as pd
import pytest
import requests

from incremental_list.config import ListConfig
from incremental_list.models import LoadRequest
from incremental_list.providers import (
    DataFrameItemProvider,
    FixtureItemProvider,
    HttpItemProvider,
    ItemProviderError,
    create_provider,
)


def _frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Code": ["A1", "B2", "C3"],
            "Name": ["Alpha Hotel", "Beta Inn", "Gamma Hotel"],
            "Stars": [4, None, 5],
        }
    )


def test_dataframe_provider_pages_and_filters():
    provider = DataFrameItemProvider(_frame(), key_column="Code", caption_column="Name")
    first = asyncio.run(provider.fetch(LoadRequest(1, 2)))
    assert [item.key for item in first] == ["A1", "B2"]
    assert first[0].caption == "Alpha Hotel"
    assert first[1].fields["Stars"] is None

    hotels = asyncio.run(provider.fetch(LoadRequest(1, 10, "HOTEL")))
    assert [item.caption for item in hotels] == ["Alpha Hotel", "Gamma Hotel"]

    empty = asyncio.run(provider.fetch(LoadRequest(3, 2)))
    assert empty == []


def test_dataframe_provider_requires_columns():
    with pytest.raises(ItemProviderError):
        DataFrameItemProvider(_frame())


def test_dataframe_provider_from_excel(tmp_path):
    pytest.importorskip("openpyxl")
    path = tmp_path / "items.xlsx"
    _frame().to_excel(path, index=False)
    provider = DataFrameItemProvider.from_excel(path, key_column="Code", caption_column="Name")
    records = asyncio.run(provider.fetch(LoadRequest(1, 10, "inn")))
    assert [item.key for item in records] == ["B2"]


def test_dataframe_provider_missing_excel(tmp_path):
    with pytest.raises(ItemProviderError):
        DataFrameItemProvider.from_excel(tmp_path / "missing.xlsx")


def _response(status_code=200, payload=None):
    response = mock.Mock()
    response.status_code = status_code
    response.text = "error"
    response.json.return_value = payload
    return response


def test_http_provider_sends_page_parameters():
    session = mock.Mock()
    session.get.return_value = _response(payload={"items": [{"key": 1, "caption": "One"}]})
    provider = HttpItemProvider("https://example.invalid/items", session=session)
    records = asyncio.run(provider.fetch(LoadRequest(2, 5, "on")))
    assert [item.caption for item in records] == ["One"]
    session.get.assert_called_once_with(
        "https://example.invalid/items",
        params={"pageNumber": 2, "pageSize": 5, "searchText": "on"},
        timeout=10,
    )


def test_http_provider_errors():
    session = mock.Mock()
    session.get.return_value = _response(status_code=500)
    provider = HttpItemProvider("https://example.invalid/items", session=session)
    with pytest.raises(ItemProviderError):
        asyncio.run(provider.fetch(LoadRequest(1, 5)))

    session.get.side_effect = requests.ConnectionError("offline")
    with pytest.raises(ItemProviderError):
        asyncio.run(provider.fetch(LoadRequest(1, 5)))

    session.get.side_effect = None
    session.get.return_value = _response(payload="unexpected")
    with pytest.raises(ItemProviderError):
        asyncio.run(provider.fetch(LoadRequest(1, 5)))


def test_create_provider_variants(fixture_path: Path, tmp_path):
    assert isinstance(create_provider(ListConfig(fixture_path=fixture_path)), FixtureItemProvider)
    assert create_provider(ListConfig(data_source="static")) is None
    assert isinstance(
        create_provider(ListConfig(data_source="http", api_url="https://example.invalid")),
        HttpItemProvider,
    )
    with pytest.raises(ItemProviderError):
        create_provider(ListConfig(data_source="http"))
    with pytest.raises(ItemProviderError):
        create_provider(ListConfig(data_source="excel"))
