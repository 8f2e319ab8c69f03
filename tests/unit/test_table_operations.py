"""Unit tests for table management operations."""

from unittest.mock import patch

import pytest
from botocore.exceptions import ClientError

from rental_catalog_tool.catalog.core.table_operations import (
    check_table_exists,
    create_table,
    drop_table,
)
from rental_catalog_tool.catalog.exceptions import TableAlreadyExistsError, TableNotFoundError


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "Operation")


@pytest.fixture
def dynamodb():
    """Mock low-level DynamoDB client."""
    with patch("rental_catalog_tool.catalog.core.table_operations.boto3.Session") as session:
        yield session.return_value.client.return_value


class TestCreateTable:
    """Tests for create_table."""

    def test_on_demand(self, dynamodb):
        dynamodb.create_table.return_value = {
            "TableDescription": {"TableStatus": "CREATING", "TableArn": "arn:x"}
        }

        result = create_table("test-catalog")

        assert result["TableStatus"] == "CREATING"
        kwargs = dynamodb.create_table.call_args.kwargs
        assert kwargs["BillingMode"] == "PAY_PER_REQUEST"
        assert "ProvisionedThroughput" not in kwargs
        assert [k["AttributeName"] for k in kwargs["KeySchema"]] == ["PK", "SK"]
        assert {i["IndexName"] for i in kwargs["GlobalSecondaryIndexes"]} == {
            "GSI-CAR",
            "GSI-USER",
            "GSI-DELEGATION",
        }
        assert {d["AttributeName"] for d in kwargs["AttributeDefinitions"]} == {
            "PK",
            "SK",
            "carId",
            "userId",
            "delegationId",
        }

    def test_provisioned(self, dynamodb):
        dynamodb.create_table.return_value = {"TableDescription": {}}

        create_table("test-catalog", billing_mode="PROVISIONED")

        kwargs = dynamodb.create_table.call_args.kwargs
        assert kwargs["ProvisionedThroughput"]["ReadCapacityUnits"] == 5
        assert all("ProvisionedThroughput" in i for i in kwargs["GlobalSecondaryIndexes"])

    def test_already_exists(self, dynamodb):
        dynamodb.create_table.side_effect = _client_error("ResourceInUseException")

        with pytest.raises(TableAlreadyExistsError):
            create_table("test-catalog")

    def test_endpoint_url_passed(self):
        with patch("rental_catalog_tool.catalog.core.table_operations.boto3.Session") as session:
            session.return_value.client.return_value.create_table.return_value = {
                "TableDescription": {}
            }
            create_table("test-catalog", endpoint_url="http://localhost:8000")

        session.return_value.client.assert_called_once_with(
            "dynamodb", endpoint_url="http://localhost:8000"
        )


class TestDropTable:
    """Tests for drop_table."""

    def test_drop(self, dynamodb):
        dynamodb.delete_table.return_value = {"TableDescription": {"TableStatus": "DELETING"}}

        assert drop_table("test-catalog")["TableStatus"] == "DELETING"

    def test_missing(self, dynamodb):
        dynamodb.delete_table.side_effect = _client_error("ResourceNotFoundException")

        with pytest.raises(TableNotFoundError):
            drop_table("test-catalog")


class TestCheckTableExists:
    """Tests for check_table_exists."""

    def test_exists(self, dynamodb):
        assert check_table_exists("test-catalog") is True

    def test_missing(self, dynamodb):
        dynamodb.describe_table.side_effect = _client_error("ResourceNotFoundException")

        assert check_table_exists("test-catalog") is False

    def test_other_errors_propagate(self, dynamodb):
        dynamodb.describe_table.side_effect = _client_error("AccessDeniedException")

        with pytest.raises(ClientError):
            check_table_exists("test-catalog")
