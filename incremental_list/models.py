"""Data models for the incremental list."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional

_RESERVED_KEYS = {"key", "caption", "isSelected", "is_selected"}


class SortDirection(Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"

    @classmethod
    def parse(cls, value: object) -> Optional["SortDirection"]:
        """Return the direction for ``value`` or ``None`` when it is unknown."""

        if isinstance(value, cls):
            return value
        if value is None:
            return None
        text = str(value).strip().lower()
        for direction in cls:
            if direction.value == text:
                return direction
        return None


class SearchMatch(Enum):
    CONTAINS = "contains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"

    @classmethod
    def parse(cls, value: object) -> "SearchMatch":
        if isinstance(value, cls):
            return value
        for match in (cls.STARTS_WITH, cls.ENDS_WITH):
            if value == match.value:
                return match
        return cls.CONTAINS


@dataclass(frozen=True, slots=True)
class ListItem:
    key: Any
    caption: str
    is_selected: bool = False
    fields: Dict[str, Any] = field(default_factory=dict)

    def __hash__(self) -> int:
        # Equal items share their key; ``fields`` holds unhashable values.
        return hash(self.key)

    @staticmethod
    def from_mapping(payload: Mapping[str, Any]) -> "ListItem":
        if "key" not in payload or payload["key"] is None:
            raise ValueError("List item requires a key")
        caption = payload.get("caption")
        selected = payload.get("isSelected", payload.get("is_selected", False))
        extra = {name: value for name, value in payload.items() if name not in _RESERVED_KEYS}
        return ListItem(
            key=payload["key"],
            caption="" if caption is None else str(caption),
            is_selected=bool(selected),
            fields=extra,
        )

    def has_field(self, name: str) -> bool:
        """Return whether ``name`` is one of the item's own fields."""

        return name in ("key", "caption", "is_selected", "isSelected") or name in self.fields

    def get(self, name: str, default: Any = None) -> Any:
        if name == "key":
            return self.key
        if name == "caption":
            return self.caption
        if name in ("is_selected", "isSelected"):
            return self.is_selected
        return self.fields.get(name, default)

    def with_selection(self, selected: bool) -> "ListItem":
        return replace(self, is_selected=selected)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = dict(self.fields)
        payload.update({"key": self.key, "caption": self.caption, "isSelected": self.is_selected})
        return payload


def coerce_item(value: ListItem | Mapping[str, Any]) -> ListItem:
    """Return an owned ``ListItem`` for ``value``."""

    if isinstance(value, ListItem):
        return replace(value, fields=dict(value.fields))
    if isinstance(value, Mapping):
        return ListItem.from_mapping(value)
    raise TypeError(f"Unsupported list item: {value!r}")


@dataclass(frozen=True, slots=True)
class LoadRequest:
    """Parameters handed to a fetch capability."""

    page_number: int
    page_size: int
    search_text: str = ""

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pageNumber": self.page_number,
            "pageSize": self.page_size,
            "searchText": self.search_text,
        }
