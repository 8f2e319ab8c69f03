"""Unit tests for reverse lookups."""

import pytest

from rental_catalog_tool.catalog.core import keys
from rental_catalog_tool.catalog.core.index import IndexLookup, ScanLookup, build_lookup
from rental_catalog_tool.catalog.exceptions import CatalogError, InvalidKey
from rental_catalog_tool.catalog.models import Booking, Car, Delegation, EntityKind


@pytest.fixture
def populated(store):
    for entity in [
        Delegation(delegation_id="D1"),
        Delegation(delegation_id="D2"),
        Car(car_id="C1", delegation_id="D1"),
        Car(car_id="C2", delegation_id="D1"),
        Car(car_id="C3", delegation_id="D2"),
        Booking(booking_id="B1", car_id="C1", user_id="U1", delegation_id="D1"),
        Booking(booking_id="B2", car_id="C1", user_id="U2", delegation_id="D1"),
        Booking(booking_id="B3", car_id="C3", user_id="U1", delegation_id="D2"),
    ]:
        store.put(keys.encode(entity))
    return store


def _ids(items, attribute):
    return sorted(item[attribute] for item in items)


class TestStrategiesAgree:
    """Both strategies return the same items, differing only in cost."""

    @pytest.mark.parametrize(
        "kind,attribute,value,id_attribute,expected",
        [
            (EntityKind.CAR, "delegationId", "D1", "carId", ["C1", "C2"]),
            (EntityKind.CAR, "delegationId", "D2", "carId", ["C3"]),
            (EntityKind.BOOKING, "carId", "C1", "bookingId", ["B1", "B2"]),
            (EntityKind.BOOKING, "userId", "U1", "bookingId", ["B1", "B3"]),
            (EntityKind.BOOKING, "carId", "C2", "bookingId", []),
        ],
    )
    def test_same_results(self, populated, kind, attribute, value, id_attribute, expected):
        by_index = _ids(IndexLookup(populated).find(kind, attribute, value), id_attribute)
        by_scan = _ids(ScanLookup(populated).find(kind, attribute, value), id_attribute)

        assert by_index == by_scan == expected

    def test_kind_filter_excludes_owner(self, populated):
        # The car item itself carries carId, but is not a booking
        items = list(IndexLookup(populated).find(EntityKind.BOOKING, "carId", "C1"))

        assert {item["itemType"] for item in items} == {"booking"}


class TestIndexLookup:
    """Tests for IndexLookup."""

    def test_unknown_attribute(self, populated):
        with pytest.raises(CatalogError):
            list(IndexLookup(populated).find(EntityKind.CAR, "make", "Seat"))

    def test_empty_value_rejected(self, populated):
        with pytest.raises(InvalidKey):
            list(IndexLookup(populated).find(EntityKind.CAR, "delegationId", ""))


class TestScanLookup:
    """Tests for ScanLookup."""

    def test_empty_value_rejected(self, populated):
        with pytest.raises(InvalidKey):
            ScanLookup(populated).find(EntityKind.CAR, "delegationId", "")


class TestBuildLookup:
    """Tests for build_lookup."""

    def test_gsi(self, store):
        assert isinstance(build_lookup(store, "gsi"), IndexLookup)

    def test_scan(self, store):
        assert isinstance(build_lookup(store, "scan"), ScanLookup)

    def test_unknown(self, store):
        with pytest.raises(ValueError):
            build_lookup(store, "magic")
