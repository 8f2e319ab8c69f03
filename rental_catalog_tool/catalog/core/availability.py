"""
Availability resolution: which cars of a delegation are free for a date range.

For each car of the delegation that passes the vintage filter, the car's
own bookings are fetched through the reverse lookup and checked for an
inclusive overlap with the requested range. The cost is
O(cars in delegation x bookings per car); there is deliberately no global
bookings scan on this path.
"""

import logging
from datetime import date

from ..constants import VINTAGE_YEAR_CUTOFF
from ..exceptions import InvalidDateRange
from ..logging_config import get_logger
from ..models import Car
from ..utils import parse_iso_date
from .repositories import BookingRepository, CarRepository

logger = get_logger(__name__)


def parse_date_range(start_date: str | date, end_date: str | date) -> tuple[date, date]:
    """
    Parse and validate an inclusive date range.

    Args:
        start_date: First day, YYYY-MM-DD
        end_date: Last day, YYYY-MM-DD

    Returns:
        Tuple of (start, end) dates

    Raises:
        InvalidDateRange: If either date does not parse or start is after end
    """
    start = parse_iso_date(start_date, "start date")
    end = parse_iso_date(end_date, "end date")
    if start > end:
        raise InvalidDateRange(f"Start date {start} is after end date {end}")
    return start, end


def matches_vintage(car: Car, vintage_mode: bool) -> bool:
    """
    Apply the vintage policy.

    Vintage mode keeps cars built before 2000, modern mode keeps the rest.
    A car without a year matches neither mode.
    """
    if car.year is None:
        return False
    if vintage_mode:
        return car.year < VINTAGE_YEAR_CUTOFF
    return car.year >= VINTAGE_YEAR_CUTOFF


def find_available_cars(
    cars: CarRepository,
    bookings: BookingRepository,
    delegation_id: str,
    start_date: str | date,
    end_date: str | date,
    vintage_mode: bool,
    log: logging.Logger | None = None,
) -> list[Car]:
    """
    Find the cars of a delegation with no booking overlapping the range.

    Args:
        cars: Car repository
        bookings: Booking repository
        delegation_id: Delegation to search
        start_date: First day of the rental, YYYY-MM-DD
        end_date: Last day of the rental, YYYY-MM-DD
        vintage_mode: True for cars built before 2000, False for the rest
        log: Logger (optional, defaults to the module logger)

    Returns:
        Available cars in the order the store returned them

    Raises:
        InvalidDateRange: If the range does not parse or is inverted
    """
    log = log or logger
    query_start, query_end = parse_date_range(start_date, end_date)
    log.info(
        f"Finding available cars in delegation '{delegation_id}' "
        f"from {query_start} to {query_end} (vintage={vintage_mode})"
    )

    fleet = cars.list_by_delegation(delegation_id)
    candidates = [car for car in fleet if matches_vintage(car, vintage_mode)]
    log.debug(f"{len(fleet)} car(s) in delegation, {len(candidates)} after vintage filter")

    available: list[Car] = []
    for car in candidates:
        car_id = str(car.car_id)
        booked_by = next(
            (b for b in bookings.list_by_car(car_id) if b.overlaps(query_start, query_end)),
            None,
        )
        if booked_by is not None:
            log.debug(f"Car '{car_id}' is booked by '{booked_by.booking_id}'")
            continue
        available.append(car)

    log.info(f"{len(available)} car(s) available")
    return available
