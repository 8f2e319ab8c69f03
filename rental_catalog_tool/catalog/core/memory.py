"""
In-memory table with the same interface as DynamoDBClient.

Used for local experiments and as the canonical backend in tests. Items are
kept in insertion order; secondary indexes are emulated by matching on the
index's key attribute.
"""

import copy
from collections.abc import Iterator
from typing import Any

from ..constants import ATTR_PK, ATTR_SK, DEFAULT_TABLE_NAME, SECONDARY_INDEXES
from ..exceptions import CatalogError
from ..models import Condition

_INDEX_ATTRIBUTES = {index: attribute for attribute, index in SECONDARY_INDEXES.items()}


class MemoryBackend:
    """Dict-backed single table."""

    def __init__(self, table_name: str = DEFAULT_TABLE_NAME):
        self.table_name = table_name
        self._items: dict[tuple[str, str], dict[str, Any]] = {}

    def put_item(self, item: dict[str, Any]) -> None:
        self._items[(item[ATTR_PK], item[ATTR_SK])] = copy.deepcopy(item)

    def get_item(self, key: dict[str, str]) -> dict[str, Any] | None:
        item = self._items.get((key[ATTR_PK], key[ATTR_SK]))
        return copy.deepcopy(item) if item is not None else None

    def delete_item(self, key: dict[str, str]) -> None:
        self._items.pop((key[ATTR_PK], key[ATTR_SK]), None)

    def query_partition(self, pk: str) -> Iterator[dict[str, Any]]:
        for (item_pk, _), item in list(self._items.items()):
            if item_pk == pk:
                yield copy.deepcopy(item)

    def query_index(self, index_name: str, attribute: str, value: str) -> Iterator[dict[str, Any]]:
        if _INDEX_ATTRIBUTES.get(index_name) != attribute:
            raise CatalogError(f"Index '{index_name}' is not keyed on '{attribute}'")
        for item in list(self._items.values()):
            if item.get(attribute) == value:
                yield copy.deepcopy(item)

    def scan(self, conditions: tuple[Condition, ...] = ()) -> Iterator[dict[str, Any]]:
        for item in list(self._items.values()):
            if all(condition.matches(item) for condition in conditions):
                yield copy.deepcopy(item)

    def __len__(self) -> int:
        return len(self._items)
