"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest

from rental_catalog_tool.catalog.core.catalog import Catalog
from rental_catalog_tool.catalog.core.item_store import ItemStore
from rental_catalog_tool.catalog.core.memory import MemoryBackend
from rental_catalog_tool.catalog.models import Booking, Car, Delegation, User


@pytest.fixture
def backend() -> MemoryBackend:
    """Empty in-memory table."""
    return MemoryBackend("test-catalog")


@pytest.fixture
def store(backend) -> ItemStore:
    """Item store over the in-memory table."""
    return ItemStore(backend)


@pytest.fixture(params=["gsi", "scan"])
def catalog(request, backend) -> Catalog:
    """Catalogue over the in-memory table, once per reverse-lookup strategy."""
    return Catalog(backend, index_strategy=request.param)


@pytest.fixture
def delegation(catalog) -> Delegation:
    """Saved delegation D1."""
    return catalog.delegations.save(
        Delegation(delegation_id="D1", name="Madrid Centro", city="Madrid")
    )


@pytest.fixture
def user(catalog) -> User:
    """Saved user U1."""
    return catalog.users.save(User(user_id="U1", username="jdoe", email="jdoe@example.com"))


@pytest.fixture
def modern_car(catalog, delegation) -> Car:
    """Saved car C1 (2005) in D1."""
    return catalog.cars.save(
        Car(car_id="C1", delegation_id="D1", make="Seat", model="Leon", year=2005)
    )


@pytest.fixture
def vintage_car(catalog, delegation) -> Car:
    """Saved car C2 (1995) in D1."""
    return catalog.cars.save(
        Car(car_id="C2", delegation_id="D1", make="Citroen", model="2CV", year=1995)
    )


@pytest.fixture
def booking(catalog, modern_car, user) -> Booking:
    """Saved booking B1 of C1 from 2024-03-01 to 2024-03-05."""
    return catalog.bookings.save(
        Booking(
            booking_id="B1",
            user_id="U1",
            car_id="C1",
            start_date=date(2024, 3, 1),
            end_date=date(2024, 3, 5),
        )
    )
