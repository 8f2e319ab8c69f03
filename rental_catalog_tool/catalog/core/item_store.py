"""
Generic keyed-item persistence over a DynamoDB-shaped backend.

The store validates keys before any I/O and otherwise passes calls straight
through: no retries, no caching, no ordering. Backend failures propagate as
``StoreUnavailable`` (or another ``CatalogError``) from the backend.
"""

import logging
from collections.abc import Callable, Iterator
from typing import Any, Protocol

from ..constants import ATTR_PK, ATTR_SK
from ..logging_config import get_logger
from ..models import Condition
from ..utils import validate_key, validate_partition_key

logger = get_logger(__name__)

Predicate = Callable[[dict[str, Any]], bool]


class StoreBackend(Protocol):
    """Operations a backing table must provide."""

    table_name: str

    def put_item(self, item: dict[str, Any]) -> None: ...

    def get_item(self, key: dict[str, str]) -> dict[str, Any] | None: ...

    def delete_item(self, key: dict[str, str]) -> None: ...

    def query_partition(self, pk: str) -> Iterator[dict[str, Any]]: ...

    def query_index(
        self, index_name: str, attribute: str, value: str
    ) -> Iterator[dict[str, Any]]: ...

    def scan(self, conditions: tuple[Condition, ...] = ()) -> Iterator[dict[str, Any]]: ...


class ItemStore:
    """Keyed-item store: put, get, query by partition, scan, delete."""

    def __init__(self, backend: StoreBackend, log: logging.Logger | None = None):
        self.backend = backend
        self.log = log or logger

    @property
    def table_name(self) -> str:
        return self.backend.table_name

    def put(self, item: dict[str, Any]) -> None:
        """
        Upsert an item, overwriting any item with the same key.

        Raises:
            InvalidKey: If PK or SK is missing or empty
        """
        validate_key(item.get(ATTR_PK, ""), item.get(ATTR_SK, ""))
        self.log.debug(f"put {item[ATTR_PK]} / {item[ATTR_SK]}")
        self.backend.put_item(item)

    def get(self, pk: str, sk: str) -> dict[str, Any] | None:
        """
        Get an item by key.

        Returns:
            Item if found, None otherwise

        Raises:
            InvalidKey: If PK or SK is empty
        """
        validate_key(pk, sk)
        self.log.debug(f"get {pk} / {sk}")
        return self.backend.get_item({ATTR_PK: pk, ATTR_SK: sk})

    def query_partition(self, pk: str) -> Iterator[dict[str, Any]]:
        """
        Lazily yield every item sharing a partition key.

        Ordering by sort key is not guaranteed; sort in memory if needed.

        Raises:
            InvalidKey: If PK is empty
        """
        validate_partition_key(pk)
        self.log.debug(f"query partition {pk}")
        return self.backend.query_partition(pk)

    def query_index(self, index_name: str, attribute: str, value: str) -> Iterator[dict[str, Any]]:
        """Lazily yield items whose secondary-index key ``attribute`` equals ``value``."""
        validate_partition_key(value)
        self.log.debug(f"query index {index_name} {attribute}={value}")
        return self.backend.query_index(index_name, attribute, value)

    def scan(
        self, *conditions: Condition, predicate: Predicate | None = None
    ) -> Iterator[dict[str, Any]]:
        """
        Lazily yield every item matching all conditions and the predicate.

        Reads the whole table. Each call starts a fresh scan, so the
        sequence can be restarted by calling again.
        """
        self.log.debug(f"scan {self.table_name} conditions={list(conditions)}")
        for item in self.backend.scan(tuple(conditions)):
            if predicate is None or predicate(item):
                yield item

    def delete(self, pk: str, sk: str) -> None:
        """
        Delete an item by key. Deleting a missing key is not an error.

        Raises:
            InvalidKey: If PK or SK is empty
        """
        validate_key(pk, sk)
        self.log.debug(f"delete {pk} / {sk}")
        self.backend.delete_item({ATTR_PK: pk, ATTR_SK: sk})
