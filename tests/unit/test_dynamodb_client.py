"""Unit tests for the DynamoDB client wrapper."""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError, NoCredentialsError

from rental_catalog_tool.catalog.core.client import DynamoDBClient, from_dynamo, to_dynamo
from rental_catalog_tool.catalog.exceptions import (
    AWSPermissionError,
    AWSThrottlingError,
    CatalogError,
    StoreUnavailable,
    TableNotFoundError,
)
from rental_catalog_tool.catalog.models import Condition


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "Operation")


@pytest.fixture
def table():
    """Mock boto3 Table resource."""
    return MagicMock()


@pytest.fixture
def client(table):
    """DynamoDBClient wired to the mock table."""
    with patch("rental_catalog_tool.catalog.core.client.boto3.Session") as session:
        session.return_value.resource.return_value.Table.return_value = table
        yield DynamoDBClient("test-catalog", region="eu-west-1", endpoint_url="http://localhost:8000")


class TestConversion:
    """Decimal conversion at the DynamoDB boundary."""

    def test_to_dynamo(self):
        assert to_dynamo({"price": 42.5, "year": 2005, "tags": [1.5]}) == {
            "price": Decimal("42.5"),
            "year": 2005,
            "tags": [Decimal("1.5")],
        }

    def test_from_dynamo(self):
        result = from_dynamo({"year": Decimal("2005"), "price": Decimal("42.5"), "name": "x"})

        assert result == {"year": 2005, "price": 42.5, "name": "x"}
        assert isinstance(result["year"], int)


class TestSession:
    """Tests for client construction."""

    def test_session_and_endpoint(self):
        with patch("rental_catalog_tool.catalog.core.client.boto3.Session") as session:
            DynamoDBClient("test-catalog", region="eu-west-1", profile="dev", endpoint_url="http://x")

        session.assert_called_once_with(profile_name="dev", region_name="eu-west-1")
        session.return_value.resource.assert_called_once_with("dynamodb", endpoint_url="http://x")
        session.return_value.resource.return_value.Table.assert_called_once_with("test-catalog")


class TestItems:
    """Tests for put/get/delete."""

    def test_put_converts_floats(self, client, table):
        client.put_item({"PK": "CAR#1", "SK": "METADATA#1", "price": 42.5})

        table.put_item.assert_called_once_with(
            Item={"PK": "CAR#1", "SK": "METADATA#1", "price": Decimal("42.5")}
        )

    def test_get_found(self, client, table):
        table.get_item.return_value = {"Item": {"PK": "CAR#1", "year": Decimal("1995")}}

        assert client.get_item({"PK": "CAR#1", "SK": "METADATA#1"}) == {"PK": "CAR#1", "year": 1995}

    def test_get_missing(self, client, table):
        table.get_item.return_value = {}

        assert client.get_item({"PK": "CAR#1", "SK": "METADATA#1"}) is None

    def test_delete(self, client, table):
        client.delete_item({"PK": "CAR#1", "SK": "METADATA#1"})

        table.delete_item.assert_called_once_with(Key={"PK": "CAR#1", "SK": "METADATA#1"})


class TestPagination:
    """Queries and scans follow LastEvaluatedKey."""

    def test_scan_follows_pages(self, client, table):
        table.scan.side_effect = [
            {"Items": [{"PK": "CAR#1"}], "LastEvaluatedKey": {"PK": "CAR#1", "SK": "METADATA#1"}},
            {"Items": [{"PK": "CAR#2"}]},
        ]

        items = list(client.scan())

        assert [item["PK"] for item in items] == ["CAR#1", "CAR#2"]
        assert table.scan.call_count == 2
        second_call = table.scan.call_args_list[1].kwargs
        assert second_call["ExclusiveStartKey"] == {"PK": "CAR#1", "SK": "METADATA#1"}

    def test_scan_with_conditions_sends_filter(self, client, table):
        table.scan.return_value = {"Items": []}

        list(client.scan((Condition("itemType", "car"), Condition("delegationId", "D1"))))

        assert "FilterExpression" in table.scan.call_args.kwargs

    def test_scan_without_conditions_has_no_filter(self, client, table):
        table.scan.return_value = {"Items": []}

        list(client.scan())

        assert "FilterExpression" not in table.scan.call_args.kwargs

    def test_query_index(self, client, table):
        table.query.side_effect = [
            {"Items": [{"bookingId": "B1"}], "LastEvaluatedKey": {"x": "1"}},
            {"Items": [{"bookingId": "B2"}]},
        ]

        items = list(client.query_index("GSI-CAR", "carId", "C1"))

        assert [item["bookingId"] for item in items] == ["B1", "B2"]
        assert table.query.call_args_list[0].kwargs["IndexName"] == "GSI-CAR"

    def test_query_partition(self, client, table):
        table.query.return_value = {"Items": [{"PK": "CAR#1", "SK": "METADATA#1"}]}

        assert len(list(client.query_partition("CAR#1"))) == 1
        assert "IndexName" not in table.query.call_args.kwargs


class TestErrorMapping:
    """boto errors become catalogue errors."""

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("ResourceNotFoundException", TableNotFoundError),
            ("ProvisionedThroughputExceededException", AWSThrottlingError),
            ("ThrottlingException", AWSThrottlingError),
            ("AccessDeniedException", AWSPermissionError),
            ("InternalServerError", StoreUnavailable),
            ("ValidationException", CatalogError),
        ],
    )
    def test_client_errors(self, client, table, code, expected):
        table.get_item.side_effect = _client_error(code)

        with pytest.raises(expected):
            client.get_item({"PK": "CAR#1", "SK": "METADATA#1"})

    def test_throttling_is_store_unavailable(self, client, table):
        table.put_item.side_effect = _client_error("ThrottlingException")

        with pytest.raises(StoreUnavailable):
            client.put_item({"PK": "CAR#1", "SK": "METADATA#1"})

    def test_endpoint_unreachable(self, client, table):
        table.scan.side_effect = EndpointConnectionError(endpoint_url="http://localhost:8000")

        with pytest.raises(StoreUnavailable):
            list(client.scan())

    def test_no_credentials(self, client, table):
        table.delete_item.side_effect = NoCredentialsError()

        with pytest.raises(AWSPermissionError):
            client.delete_item({"PK": "CAR#1", "SK": "METADATA#1"})
