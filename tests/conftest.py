from __future__ import annotations

import json
from pathlib import Path

import pytest

from incremental_list.models import ListItem
from incremental_list.providers import FixtureItemProvider


def _make_items(*captions: str, **fields) -> list[ListItem]:
    return [
        ListItem(key=f"k{index}", caption=caption, fields={name: values[index] for name, values in fields.items()})
        for index, caption in enumerate(captions)
    ]


@pytest.fixture()
def fixture_path(tmp_path: Path) -> Path:
    path = tmp_path / "items_fixture.json"
    payload = {
        "items": [
            {"key": "ZRH001", "caption": "Zürich Flughafen", "city": "Zürich"},
            {"key": "LON123", "caption": "London Bridge", "city": "London"},
            {"key": "DXB777", "caption": "Dubai Marina", "city": "Dubai"},
        ]
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture()
def fixture_provider(fixture_path: Path) -> FixtureItemProvider:
    return FixtureItemProvider(fixture_path)


@pytest.fixture()
def make_items():
    return _make_items
