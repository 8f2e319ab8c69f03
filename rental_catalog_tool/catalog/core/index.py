"""
Reverse lookups: find items of one kind by a foreign attribute.

Two strategies answer the same question with the same results:

- ``IndexLookup`` queries the GSI keyed on the attribute, O(matches).
- ``ScanLookup`` scans the table with an equality filter, O(table size).

Which one is used is a deployment choice (``--index-strategy``); only
latency differs.
"""

from collections.abc import Iterator
from typing import Any, Protocol

from ..constants import ATTR_TYPE, INDEX_STRATEGY_GSI, INDEX_STRATEGY_SCAN, SECONDARY_INDEXES
from ..exceptions import CatalogError
from ..models import Condition, EntityKind
from ..utils import validate_partition_key
from .item_store import ItemStore


class ReverseLookup(Protocol):
    """Finds items of ``kind`` whose ``attribute`` equals ``value``."""

    def find(self, kind: EntityKind, attribute: str, value: str) -> Iterator[dict[str, Any]]: ...


class IndexLookup:
    """Reverse lookup through global secondary indexes."""

    def __init__(self, store: ItemStore, indexes: dict[str, str] | None = None):
        self.store = store
        self.indexes = indexes if indexes is not None else SECONDARY_INDEXES

    def find(self, kind: EntityKind, attribute: str, value: str) -> Iterator[dict[str, Any]]:
        index_name = self.indexes.get(attribute)
        if index_name is None:
            raise CatalogError(f"No secondary index is defined for '{attribute}'")
        # Index partitions mix kinds (a car and its bookings share carId)
        for item in self.store.query_index(index_name, attribute, value):
            if item.get(ATTR_TYPE) == kind.value:
                yield item


class ScanLookup:
    """Reverse lookup through a filtered full-table scan."""

    def __init__(self, store: ItemStore):
        self.store = store

    def find(self, kind: EntityKind, attribute: str, value: str) -> Iterator[dict[str, Any]]:
        validate_partition_key(value)
        return self.store.scan(Condition(ATTR_TYPE, kind.value), Condition(attribute, value))


def build_lookup(store: ItemStore, strategy: str = INDEX_STRATEGY_GSI) -> ReverseLookup:
    """
    Build the reverse lookup for a deployment strategy.

    Args:
        store: Item store
        strategy: 'gsi' or 'scan'

    Raises:
        ValueError: If the strategy is unknown
    """
    if strategy == INDEX_STRATEGY_GSI:
        return IndexLookup(store)
    if strategy == INDEX_STRATEGY_SCAN:
        return ScanLookup(store)
    raise ValueError(f"Unknown index strategy '{strategy}' (expected 'gsi' or 'scan')")
