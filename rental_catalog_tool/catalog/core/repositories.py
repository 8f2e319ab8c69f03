"""
Typed repositories for delegations, cars, bookings and users.

``Repository`` implements CRUD once for any entity kind on top of the item
store; subclasses add owner checks, owner listings and cascading deletes.
Every delete is idempotent, so an interrupted cascade is safe to rerun.
"""

import dataclasses
import logging
import time
from datetime import date
from typing import Generic, TypeVar

from ..constants import ATTR_CAR_ID, ATTR_DELEGATION_ID, ATTR_TYPE, ATTR_USER_ID
from ..exceptions import (
    BookingConflict,
    ConstraintViolation,
    InvalidDateRange,
    InvalidKey,
    NotFound,
)
from ..logging_config import get_logger
from ..models import SCHEMAS, Booking, Car, Condition, Delegation, EntityKind, User
from . import keys
from .index import ReverseLookup
from .item_store import ItemStore

logger = get_logger(__name__)

E = TypeVar("E", Delegation, Car, Booking, User)


class Repository(Generic[E]):
    """CRUD for one entity kind in the shared table."""

    kind: EntityKind

    def __init__(
        self,
        store: ItemStore,
        lookup: ReverseLookup,
        log: logging.Logger | None = None,
    ):
        self.store = store
        self.lookup = lookup
        self.log = log or logger

    def save(self, entity: E) -> E:
        """
        Create or fully replace an entity.

        Assigns an identifier when absent. Returns the stored entity.
        """
        entity = keys.assign_identifier(entity)
        entity = self._prepare(entity)
        self.store.put(keys.encode(entity))
        self.log.info(f"Saved {self.kind.value} '{self._identifier(entity)}'")
        return entity

    def get(self, identifier: str) -> E | None:
        """Return the entity, or None if it does not exist."""
        key = keys.derive_key(self.kind, identifier)
        item = self.store.get(key.pk, key.sk)
        return self._decode(item) if item is not None else None

    def require(self, identifier: str) -> E:
        """
        Return the entity.

        Raises:
            NotFound: If it does not exist
        """
        entity = self.get(identifier)
        if entity is None:
            raise NotFound(f"{self.kind.value.capitalize()} '{identifier}' not found")
        return entity

    def exists(self, identifier: str) -> bool:
        return self.get(identifier) is not None

    def list_all(self) -> list[E]:
        """List every entity of this kind. Scans the whole table."""
        items = self.store.scan(Condition(ATTR_TYPE, self.kind.value))
        return [self._decode(item) for item in items]

    def delete(self, identifier: str) -> None:
        """Delete the entity and its dependents. Missing entities are a no-op."""
        key = keys.derive_key(self.kind, identifier)
        self._delete_dependents(identifier)
        self.store.delete(key.pk, key.sk)
        self.log.info(f"Deleted {self.kind.value} '{identifier}'")

    def _find_by(self, attribute: str, value: str) -> list[E]:
        return [self._decode(item) for item in self.lookup.find(self.kind, attribute, value)]

    def _prepare(self, entity: E) -> E:
        return entity

    def _delete_dependents(self, identifier: str) -> None:
        pass

    def _owner_item(self, kind: EntityKind, identifier: str | None) -> dict | None:
        if not identifier:
            return None
        key = keys.derive_key(kind, identifier)
        return self.store.get(key.pk, key.sk)

    def _identifier(self, entity: E) -> str:
        return str(SCHEMAS[self.kind].identifier(entity))

    def _decode(self, item: dict) -> E:
        entity = keys.decode(item)
        if entity.kind is not self.kind:
            raise InvalidKey(f"Expected a {self.kind.value} item, found {entity.kind.value}")
        return entity  # type: ignore[return-value]


class BookingRepository(Repository[Booking]):
    """Bookings, looked up by car and by user."""

    kind = EntityKind.BOOKING

    def list_by_car(self, car_id: str) -> list[Booking]:
        return self._find_by(ATTR_CAR_ID, car_id)

    def list_by_user(self, user_id: str) -> list[Booking]:
        return self._find_by(ATTR_USER_ID, user_id)

    def find_conflicts(
        self,
        car_id: str,
        start_date: date,
        end_date: date,
        exclude: str | None = None,
    ) -> list[Booking]:
        """Return the car's bookings overlapping ``[start_date, end_date]``."""
        return [
            booking
            for booking in self.list_by_car(car_id)
            if booking.booking_id != exclude and booking.overlaps(start_date, end_date)
        ]

    def delete_for_car(self, car_id: str) -> int:
        """Delete every booking of a car. Returns how many were deleted."""
        return self._delete_all(self.list_by_car(car_id), f"car '{car_id}'")

    def delete_for_user(self, user_id: str) -> int:
        """Delete every booking of a user. Returns how many were deleted."""
        return self._delete_all(self.list_by_user(user_id), f"user '{user_id}'")

    def _delete_all(self, bookings: list[Booking], owner: str) -> int:
        if not bookings:
            self.log.debug(f"No bookings found for {owner}")
            return 0
        self.log.info(f"Deleting {len(bookings)} booking(s) for {owner}")
        for booking in bookings:
            self.delete(str(booking.booking_id))
        return len(bookings)

    def _prepare(self, booking: Booking) -> Booking:
        car_item = self._owner_item(EntityKind.CAR, booking.car_id)
        if car_item is None:
            raise ConstraintViolation(f"Booking references unknown car '{booking.car_id}'")
        if self._owner_item(EntityKind.USER, booking.user_id) is None:
            raise ConstraintViolation(f"Booking references unknown user '{booking.user_id}'")
        car_id = str(booking.car_id)
        car_delegation = car_item.get(ATTR_DELEGATION_ID)
        if booking.delegation_id and booking.delegation_id != car_delegation:
            raise ConstraintViolation(
                f"Booking delegation '{booking.delegation_id}' does not match car "
                f"'{car_id}' delegation '{car_delegation}'"
            )

        if booking.start_date is not None and booking.end_date is not None:
            if booking.start_date > booking.end_date:
                raise InvalidDateRange(
                    f"Start date {booking.start_date} is after end date {booking.end_date}"
                )
            # Narrows, but does not close, the check-then-write window
            conflicts = self.find_conflicts(
                car_id, booking.start_date, booking.end_date, exclude=booking.booking_id
            )
            if conflicts:
                raise BookingConflict(car_id, [str(b.booking_id) for b in conflicts])

        return dataclasses.replace(
            booking,
            booking_date=booking.booking_date or date.today(),
            delegation_id=car_delegation,
        )


class CarRepository(Repository[Car]):
    """Cars, owned by a delegation; deleting a car deletes its bookings."""

    kind = EntityKind.CAR

    def __init__(
        self,
        store: ItemStore,
        lookup: ReverseLookup,
        bookings: BookingRepository,
        log: logging.Logger | None = None,
    ):
        super().__init__(store, lookup, log)
        self.bookings = bookings

    def list_by_delegation(self, delegation_id: str) -> list[Car]:
        return self._find_by(ATTR_DELEGATION_ID, delegation_id)

    def get_for_delegation(self, delegation_id: str, car_id: str) -> Car | None:
        """Return the car only if it belongs to the delegation."""
        car = self.get(car_id)
        if car is None or car.delegation_id != delegation_id:
            return None
        return car

    def _prepare(self, car: Car) -> Car:
        if not car.delegation_id:
            raise ConstraintViolation("A car must belong to a delegation")
        if self._owner_item(EntityKind.DELEGATION, car.delegation_id) is None:
            raise ConstraintViolation(f"Car references unknown delegation '{car.delegation_id}'")
        return car

    def _delete_dependents(self, car_id: str) -> None:
        self.bookings.delete_for_car(car_id)


class DelegationRepository(Repository[Delegation]):
    """Delegations; deleting one deletes its cars and their bookings."""

    kind = EntityKind.DELEGATION

    def __init__(
        self,
        store: ItemStore,
        lookup: ReverseLookup,
        cars: CarRepository,
        log: logging.Logger | None = None,
    ):
        super().__init__(store, lookup, log)
        self.cars = cars

    def _delete_dependents(self, delegation_id: str) -> None:
        cars = self.cars.list_by_delegation(delegation_id)
        if not cars:
            self.log.debug(f"No cars found for delegation '{delegation_id}'")
            return
        self.log.info(f"Deleting {len(cars)} car(s) of delegation '{delegation_id}'")
        for car in cars:
            self.cars.delete(str(car.car_id))


class UserRepository(Repository[User]):
    """Users; deleting one deletes their bookings."""

    kind = EntityKind.USER

    def __init__(
        self,
        store: ItemStore,
        lookup: ReverseLookup,
        bookings: BookingRepository,
        log: logging.Logger | None = None,
    ):
        super().__init__(store, lookup, log)
        self.bookings = bookings

    def _prepare(self, user: User) -> User:
        if user.created_at is None:
            return dataclasses.replace(user, created_at=int(time.time()))
        return user

    def _delete_dependents(self, user_id: str) -> None:
        self.bookings.delete_for_user(user_id)
