"""Unit tests for catalogue utilities and settings."""

from datetime import date

import pytest

from rental_catalog_tool.catalog.config import StoreSettings
from rental_catalog_tool.catalog.exceptions import InvalidDateRange, InvalidKey
from rental_catalog_tool.catalog.utils import (
    format_key,
    parse_iso_date,
    parse_key,
    validate_key,
    validate_table_name,
)


def test_format_and_parse_key():
    assert parse_key(format_key("CAR", "a#b")) == ("CAR", "a#b")


def test_parse_key_without_separator():
    assert parse_key("plain") == ("", "plain")


@pytest.mark.parametrize("pk,sk", [("", "METADATA#1"), ("CAR#1", ""), (None, "METADATA#1")])
def test_validate_key(pk, sk):
    with pytest.raises(InvalidKey):
        validate_key(pk, sk)


def test_parse_iso_date():
    assert parse_iso_date("2024-02-29") == date(2024, 2, 29)
    assert parse_iso_date(date(2024, 2, 29)) == date(2024, 2, 29)

    with pytest.raises(InvalidDateRange):
        parse_iso_date("2023-02-29")


@pytest.mark.parametrize("name", ["rental-catalog", "abc", "my_table.v2"])
def test_valid_table_names(name):
    validate_table_name(name)


@pytest.mark.parametrize("name", ["", "ab", "x" * 256, "bad name", "bad/name"])
def test_invalid_table_names(name):
    with pytest.raises(ValueError):
        validate_table_name(name)


class TestStoreSettings:
    """Tests for StoreSettings."""

    def test_defaults(self):
        settings = StoreSettings()

        assert settings.table_name == "rental-catalog"
        assert settings.index_strategy == "gsi"

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            StoreSettings(index_strategy="magic")
