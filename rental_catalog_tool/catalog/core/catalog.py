"""
Catalogue facade wiring the store, reverse lookups and repositories.
"""

import logging
from datetime import date

from ..constants import INDEX_STRATEGY_GSI
from ..models import Car, EntityKind
from .availability import find_available_cars
from .index import build_lookup
from .item_store import ItemStore, StoreBackend
from .repositories import (
    BookingRepository,
    CarRepository,
    DelegationRepository,
    Repository,
    UserRepository,
)


class Catalog:
    """Entry point for callers: typed repositories plus availability search."""

    def __init__(
        self,
        backend: StoreBackend,
        index_strategy: str = INDEX_STRATEGY_GSI,
        log: logging.Logger | None = None,
    ):
        self.store = ItemStore(backend, log)
        self.lookup = build_lookup(self.store, index_strategy)
        self.index_strategy = index_strategy
        self.log = log

        self.bookings = BookingRepository(self.store, self.lookup, log)
        self.cars = CarRepository(self.store, self.lookup, self.bookings, log)
        self.delegations = DelegationRepository(self.store, self.lookup, self.cars, log)
        self.users = UserRepository(self.store, self.lookup, self.bookings, log)

    def repository(self, kind: EntityKind) -> Repository:
        """Return the repository for an entity kind."""
        return {
            EntityKind.DELEGATION: self.delegations,
            EntityKind.CAR: self.cars,
            EntityKind.BOOKING: self.bookings,
            EntityKind.USER: self.users,
        }[kind]

    def find_available_cars(
        self,
        delegation_id: str,
        start_date: str | date,
        end_date: str | date,
        vintage_mode: bool = False,
    ) -> list[Car]:
        """Cars of a delegation free for the whole inclusive range."""
        return find_available_cars(
            self.cars,
            self.bookings,
            delegation_id,
            start_date,
            end_date,
            vintage_mode,
            log=self.log,
        )
