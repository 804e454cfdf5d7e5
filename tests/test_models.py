from __future__ import annotations

import pytest

from incremental_list.models import ListItem, LoadRequest, SearchMatch, SortDirection, coerce_item


def test_item_from_mapping_splits_fields():
    item = ListItem.from_mapping({"key": 7, "caption": "Seven", "isSelected": True, "rank": 3})
    assert item.key == 7
    assert item.caption == "Seven"
    assert item.is_selected is True
    assert item.fields == {"rank": 3}
    assert item.to_dict() == {"key": 7, "caption": "Seven", "isSelected": True, "rank": 3}


def test_item_from_mapping_requires_key():
    with pytest.raises(ValueError):
        ListItem.from_mapping({"caption": "No key"})


def test_item_field_access():
    item = ListItem(key="a", caption="Alpha", fields={"rank": 1})
    assert item.has_field("rank")
    assert item.has_field("caption")
    assert not item.has_field("missing")
    assert item.get("rank") == 1
    assert item.get("key") == "a"
    assert item.get("missing", "x") == "x"


def test_coerce_item_copies_fields():
    original = ListItem(key="a", caption="Alpha", fields={"rank": 1})
    copy = coerce_item(original)
    assert copy == original
    assert copy.fields is not original.fields

    with pytest.raises(TypeError):
        coerce_item(42)  # type: ignore[arg-type]


def test_sort_direction_parse():
    assert SortDirection.parse("ASC") is SortDirection.ASCENDING
    assert SortDirection.parse(" desc ") is SortDirection.DESCENDING
    assert SortDirection.parse("sideways") is None
    assert SortDirection.parse(None) is None


def test_search_match_parse_defaults_to_contains():
    assert SearchMatch.parse("startsWith") is SearchMatch.STARTS_WITH
    assert SearchMatch.parse("endsWith") is SearchMatch.ENDS_WITH
    assert SearchMatch.parse("anything") is SearchMatch.CONTAINS
    assert SearchMatch.parse(None) is SearchMatch.CONTAINS


def test_load_request_offset_and_payload():
    request = LoadRequest(page_number=3, page_size=10, search_text="lon")
    assert request.offset == 20
    assert request.to_dict() == {"pageNumber": 3, "pageSize": 10, "searchText": "lon"}


def test_item_hash_follows_key():
    first = ListItem(key="a", caption="Alpha", fields={"tags": ["x"]})
    second = ListItem(key="a", caption="Alpha", fields={"tags": ["x"]})
    assert hash(first) == hash("a")
    assert len({first, second}) == 1
