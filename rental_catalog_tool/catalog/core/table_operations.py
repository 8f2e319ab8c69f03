"""
Table management operations for the catalogue.
"""

from typing import Any, Literal

import boto3
from botocore.exceptions import ClientError

from ..constants import ATTR_PK, ATTR_SK, SECONDARY_INDEXES
from ..exceptions import TableAlreadyExistsError, TableNotFoundError


def _dynamodb_client(region: str | None, profile: str | None, endpoint_url: str | None) -> Any:
    session = boto3.Session(profile_name=profile, region_name=region)
    return session.client("dynamodb", endpoint_url=endpoint_url)


def create_table(
    table_name: str,
    region: str | None = None,
    profile: str | None = None,
    billing_mode: Literal["PAY_PER_REQUEST", "PROVISIONED"] = "PAY_PER_REQUEST",
    endpoint_url: str | None = None,
) -> dict[str, Any]:
    """
    Create the single catalogue table.

    PK/SK composite primary key plus one GSI per reverse lookup
    (carId, userId, delegationId). Provisioned tables get 5 RCU/WCU on the
    table and on each index.

    Returns:
        Table description

    Raises:
        TableAlreadyExistsError: If table already exists
    """
    dynamodb = _dynamodb_client(region, profile, endpoint_url)
    throughput = {"ReadCapacityUnits": 5, "WriteCapacityUnits": 5}

    indexes = []
    for attribute, index_name in SECONDARY_INDEXES.items():
        index: dict[str, Any] = {
            "IndexName": index_name,
            "KeySchema": [{"AttributeName": attribute, "KeyType": "HASH"}],
            "Projection": {"ProjectionType": "ALL"},
        }
        if billing_mode == "PROVISIONED":
            index["ProvisionedThroughput"] = throughput
        indexes.append(index)

    kwargs: dict[str, Any] = {
        "TableName": table_name,
        "KeySchema": [
            {"AttributeName": ATTR_PK, "KeyType": "HASH"},  # Partition key
            {"AttributeName": ATTR_SK, "KeyType": "RANGE"},  # Sort key
        ],
        "AttributeDefinitions": [
            {"AttributeName": name, "AttributeType": "S"}
            for name in (ATTR_PK, ATTR_SK, *SECONDARY_INDEXES)
        ],
        "BillingMode": billing_mode,
        "GlobalSecondaryIndexes": indexes,
        "Tags": [
            {"Key": "ManagedBy", "Value": "rental-catalog-tool"},
            {"Key": "Purpose", "Value": "rental-catalog"},
        ],
    }
    if billing_mode == "PROVISIONED":
        kwargs["ProvisionedThroughput"] = throughput

    try:
        response = dynamodb.create_table(**kwargs)
        return response["TableDescription"]  # type: ignore[no-any-return]
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            raise TableAlreadyExistsError(f"Table '{table_name}' already exists")
        raise


def drop_table(
    table_name: str,
    region: str | None = None,
    profile: str | None = None,
    endpoint_url: str | None = None,
) -> dict[str, Any]:
    """
    Drop the catalogue table.

    Returns:
        Table description

    Raises:
        TableNotFoundError: If table does not exist
    """
    dynamodb = _dynamodb_client(region, profile, endpoint_url)

    try:
        response = dynamodb.delete_table(TableName=table_name)
        return response["TableDescription"]  # type: ignore[no-any-return]
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceNotFoundException":
            raise TableNotFoundError(f"Table '{table_name}' not found")
        raise


def check_table_exists(
    table_name: str,
    region: str | None = None,
    profile: str | None = None,
    endpoint_url: str | None = None,
) -> bool:
    """Check if table exists."""
    dynamodb = _dynamodb_client(region, profile, endpoint_url)

    try:
        dynamodb.describe_table(TableName=table_name)
        return True
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceNotFoundException":
            return False
        raise
