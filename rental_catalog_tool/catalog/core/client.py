"""
DynamoDB client wrapper with error handling.
"""

from collections.abc import Iterator
from decimal import Decimal
from functools import reduce
from typing import Any

import boto3
from boto3.dynamodb.conditions import Attr, ConditionBase, Key
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    ReadTimeoutError,
)

from ..constants import ATTR_PK
from ..exceptions import (
    AWSPermissionError,
    AWSThrottlingError,
    CatalogError,
    StoreUnavailable,
    TableNotFoundError,
)
from ..models import Condition

_THROTTLING_CODES = {
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "RequestLimitExceeded",
}


def to_dynamo(value: Any) -> Any:
    """Convert floats (recursively) to Decimal, which is all boto3 accepts."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_dynamo(v) for v in value]
    return value


def from_dynamo(value: Any) -> Any:
    """Convert Decimal values read from DynamoDB back to int or float."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_dynamo(v) for v in value]
    if isinstance(value, set):
        return [from_dynamo(v) for v in value]
    return value


def _to_filter(condition: Condition) -> ConditionBase:
    attr = Attr(condition.attribute)
    if condition.operator == "begins_with":
        return attr.begins_with(condition.value)
    return attr.eq(to_dynamo(condition.value))


class DynamoDBClient:
    """DynamoDB client wrapper with error handling."""

    def __init__(
        self,
        table_name: str,
        region: str | None = None,
        profile: str | None = None,
        endpoint_url: str | None = None,
    ):
        """
        Initialize DynamoDB client.

        Args:
            table_name: DynamoDB table name
            region: AWS region (optional, uses SDK default)
            profile: AWS profile (optional, uses SDK default)
            endpoint_url: Endpoint override, e.g. DynamoDB Local (optional)
        """
        session = boto3.Session(profile_name=profile, region_name=region)
        self.dynamodb = session.resource("dynamodb", endpoint_url=endpoint_url)
        self.table = self.dynamodb.Table(table_name)
        self.table_name = table_name

    def put_item(self, item: dict[str, Any]) -> None:
        """
        Put (upsert) an item.

        Raises:
            StoreUnavailable: If DynamoDB cannot be reached
            CatalogError: For other DynamoDB errors
        """
        try:
            self.table.put_item(Item=to_dynamo(item))
        except (ClientError, BotoCoreError) as e:
            self._handle_error(e)
            raise  # For type checker

    def get_item(self, key: dict[str, str]) -> dict[str, Any] | None:
        """
        Get item by key.

        Returns:
            Item if found, None otherwise
        """
        try:
            response = self.table.get_item(Key=key)
        except (ClientError, BotoCoreError) as e:
            self._handle_error(e)
            raise  # For type checker
        item = response.get("Item")
        return from_dynamo(item) if item is not None else None

    def delete_item(self, key: dict[str, str]) -> None:
        """Delete item by key. Deleting a missing key succeeds."""
        try:
            self.table.delete_item(Key=key)
        except (ClientError, BotoCoreError) as e:
            self._handle_error(e)
            raise  # For type checker

    def query_partition(self, pk: str) -> Iterator[dict[str, Any]]:
        """
        Yield every item of a partition, following pagination.

        No ScanIndexForward is sent; order is whatever DynamoDB returns.
        """
        yield from self._paginate(self.table.query, KeyConditionExpression=Key(ATTR_PK).eq(pk))

    def query_index(self, index_name: str, attribute: str, value: str) -> Iterator[dict[str, Any]]:
        """Yield every item of a GSI partition, following pagination."""
        yield from self._paginate(
            self.table.query,
            IndexName=index_name,
            KeyConditionExpression=Key(attribute).eq(value),
        )

    def scan(self, conditions: tuple[Condition, ...] = ()) -> Iterator[dict[str, Any]]:
        """
        Yield every item matching all conditions, following pagination.

        Each call starts a fresh scan.
        """
        kwargs: dict[str, Any] = {}
        if conditions:
            kwargs["FilterExpression"] = reduce(
                lambda left, right: left & right, (_to_filter(c) for c in conditions)
            )
        yield from self._paginate(self.table.scan, **kwargs)

    def _paginate(self, operation: Any, **kwargs: Any) -> Iterator[dict[str, Any]]:
        while True:
            try:
                response = operation(**kwargs)
            except (ClientError, BotoCoreError) as e:
                self._handle_error(e)
                raise  # For type checker

            for item in response.get("Items", []):
                yield from_dynamo(item)

            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return
            kwargs["ExclusiveStartKey"] = last_key

    def _handle_error(self, error: Exception) -> None:
        """
        Convert boto3 errors to catalogue exceptions.

        Raises:
            TableNotFoundError: If table not found
            AWSThrottlingError: If throttled
            AWSPermissionError: If permission denied or credentials missing
            StoreUnavailable: If the endpoint cannot be reached
            CatalogError: For other errors
        """
        if isinstance(error, (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError)):
            raise StoreUnavailable(f"DynamoDB unreachable: {error}") from error
        if isinstance(error, NoCredentialsError):
            raise AWSPermissionError("AWS credentials not found") from error
        if not isinstance(error, ClientError):
            raise StoreUnavailable(f"DynamoDB request failed: {error}") from error

        code = error.response["Error"]["Code"]

        if code == "ResourceNotFoundException":
            raise TableNotFoundError(f"Table '{self.table_name}' not found") from error
        elif code in _THROTTLING_CODES:
            raise AWSThrottlingError("DynamoDB throttling - retry with backoff") from error
        elif code in ("AccessDeniedException", "UnrecognizedClientException"):
            raise AWSPermissionError("AWS permission denied") from error
        elif code in ("InternalServerError", "ServiceUnavailable"):
            raise StoreUnavailable(f"DynamoDB unavailable: {error}") from error
        else:
            raise CatalogError(f"DynamoDB error: {error}") from error
