"""
Type models for the rental catalogue.

Every entity kind is a plain dataclass. The kinds form a tagged union
(``Entity``) discriminated by ``EntityKind``, and each kind has a statically
declared ``EntitySchema`` describing how it is laid out in the table.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, ClassVar, Literal, NamedTuple, Union

from .constants import (
    ATTR_CAR_ID,
    ATTR_DELEGATION_ID,
    ATTR_USER_ID,
    PREFIX_BOOKING,
    PREFIX_CAR,
    PREFIX_DELEGATION,
    PREFIX_USER,
)


class EntityKind(Enum):
    """Kinds of items stored in the catalogue table."""

    DELEGATION = "delegation"
    CAR = "car"
    BOOKING = "booking"
    USER = "user"


class EntityKey(NamedTuple):
    """Composite key and type tag of a stored item."""

    pk: str
    sk: str
    type_tag: str


@dataclass
class Delegation:
    """Rental branch."""

    kind: ClassVar[EntityKind] = EntityKind.DELEGATION

    delegation_id: str | None = None
    name: str | None = None
    address: str | None = None
    city: str | None = None
    lat: float | None = None
    long: float | None = None
    manager: str | None = None
    phone: str | None = None


@dataclass
class Car:
    """Car owned by exactly one delegation."""

    kind: ClassVar[EntityKind] = EntityKind.CAR

    car_id: str | None = None
    delegation_id: str | None = None
    make: str | None = None
    model: str | None = None
    year: int | None = None
    color: str | None = None
    price: float | None = None
    rented: bool = False
    engine: str | None = None
    horsepower: str | None = None
    transmission: str | None = None
    fuel_economy: str | None = None
    acceleration: str | None = None
    safety_rating: str | None = None
    dimensions: str | None = None
    cargo_volume: str | None = None


@dataclass
class Booking:
    """Reservation of one car by one user over an inclusive date range."""

    kind: ClassVar[EntityKind] = EntityKind.BOOKING

    booking_id: str | None = None
    user_id: str | None = None
    car_id: str | None = None
    delegation_id: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    booking_date: date | None = None
    status: str | None = None
    status_payment: str | None = None
    status_booking: str | None = None
    total_to_payment: float | None = None
    pick_up_delegation_id: str | None = None
    deliver_delegation_id: str | None = None

    def overlaps(self, query_start: date, query_end: date) -> bool:
        """
        Check whether this booking intersects ``[query_start, query_end]``.

        Both ranges are inclusive, so sharing a single boundary day counts as
        an overlap. A booking missing either date never overlaps.
        """
        if self.start_date is None or self.end_date is None:
            return False
        return self.start_date <= query_end and self.end_date >= query_start


@dataclass
class User:
    """Catalogue user."""

    kind: ClassVar[EntityKind] = EntityKind.USER

    user_id: str | None = None
    username: str | None = None
    email: str | None = None
    full_name: str | None = None
    phone: str | None = None
    roles: list[str] = field(default_factory=list)
    created_at: int | None = None


Entity = Union[Delegation, Car, Booking, User]


@dataclass(frozen=True)
class Attribute:
    """Mapping between a dataclass field and a stored attribute."""

    name: str
    field: str
    type: type = str


@dataclass(frozen=True)
class EntitySchema:
    """Static table layout of one entity kind."""

    kind: EntityKind
    entity_class: type
    key_prefix: str
    id_field: str
    id_attribute: str
    attributes: tuple[Attribute, ...]

    def identifier(self, entity: Any) -> str | None:
        value: str | None = getattr(entity, self.id_field)
        return value


SCHEMAS: dict[EntityKind, EntitySchema] = {
    EntityKind.DELEGATION: EntitySchema(
        kind=EntityKind.DELEGATION,
        entity_class=Delegation,
        key_prefix=PREFIX_DELEGATION,
        id_field="delegation_id",
        id_attribute=ATTR_DELEGATION_ID,
        attributes=(
            Attribute("name", "name"),
            Attribute("address", "address"),
            Attribute("city", "city"),
            Attribute("lat", "lat", float),
            Attribute("long", "long", float),
            Attribute("manager", "manager"),
            Attribute("phone", "phone"),
        ),
    ),
    EntityKind.CAR: EntitySchema(
        kind=EntityKind.CAR,
        entity_class=Car,
        key_prefix=PREFIX_CAR,
        id_field="car_id",
        id_attribute=ATTR_CAR_ID,
        attributes=(
            Attribute(ATTR_DELEGATION_ID, "delegation_id"),
            Attribute("make", "make"),
            Attribute("model", "model"),
            Attribute("year", "year", int),
            Attribute("color", "color"),
            Attribute("price", "price", float),
            Attribute("rented", "rented", bool),
            Attribute("engine", "engine"),
            Attribute("horsepower", "horsepower"),
            Attribute("transmission", "transmission"),
            Attribute("fuelEconomy", "fuel_economy"),
            Attribute("acceleration", "acceleration"),
            Attribute("safetyRating", "safety_rating"),
            Attribute("dimensions", "dimensions"),
            Attribute("cargoVolume", "cargo_volume"),
        ),
    ),
    EntityKind.BOOKING: EntitySchema(
        kind=EntityKind.BOOKING,
        entity_class=Booking,
        key_prefix=PREFIX_BOOKING,
        id_field="booking_id",
        id_attribute="bookingId",
        attributes=(
            Attribute(ATTR_USER_ID, "user_id"),
            Attribute(ATTR_CAR_ID, "car_id"),
            Attribute(ATTR_DELEGATION_ID, "delegation_id"),
            Attribute("startDate", "start_date", date),
            Attribute("endDate", "end_date", date),
            Attribute("bookingDate", "booking_date", date),
            Attribute("status", "status"),
            Attribute("statusPayment", "status_payment"),
            Attribute("statusBooking", "status_booking"),
            Attribute("totalToPayment", "total_to_payment", float),
            Attribute("pickUpDelegationId", "pick_up_delegation_id"),
            Attribute("deliverDelegationId", "deliver_delegation_id"),
        ),
    ),
    EntityKind.USER: EntitySchema(
        kind=EntityKind.USER,
        entity_class=User,
        key_prefix=PREFIX_USER,
        id_field="user_id",
        id_attribute=ATTR_USER_ID,
        attributes=(
            Attribute("username", "username"),
            Attribute("email", "email"),
            Attribute("fullName", "full_name"),
            Attribute("phone", "phone"),
            Attribute("roles", "roles", list),
            Attribute("createdAt", "created_at", int),
        ),
    ),
}


@dataclass(frozen=True)
class Condition:
    """Attribute filter evaluated by the backend during scans."""

    attribute: str
    value: Any
    operator: Literal["eq", "begins_with"] = "eq"

    def matches(self, item: dict[str, Any]) -> bool:
        actual = item.get(self.attribute)
        if actual is None:
            return False
        if self.operator == "begins_with":
            return isinstance(actual, str) and actual.startswith(self.value)
        return bool(actual == self.value)
