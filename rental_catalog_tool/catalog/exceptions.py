"""
Custom exceptions for catalogue operations.
"""


class CatalogError(Exception):
    """Base exception for catalogue operations."""

    pass


class InvalidKey(CatalogError):
    """Partition or sort key is empty or does not match the entity it holds."""

    pass


class InvalidIdentifier(InvalidKey):
    """Entity identifier is missing or empty."""

    pass


class InvalidDateRange(CatalogError):
    """Date does not parse as YYYY-MM-DD, or the range is inverted."""

    pass


class NotFound(CatalogError):
    """Entity does not exist."""

    pass


class ConstraintViolation(CatalogError):
    """Referenced owner entity does not exist."""

    pass


class BookingConflict(ConstraintViolation):
    """Booking overlaps an existing booking for the same car."""

    def __init__(self, car_id: str, conflicting: list[str]):
        self.car_id = car_id
        self.conflicting = conflicting
        super().__init__(
            f"Car '{car_id}' is already booked in that range "
            f"(bookings: {', '.join(conflicting)})"
        )


class StoreUnavailable(CatalogError):
    """Backing store cannot be reached or refused the request."""

    pass


class TableNotFoundError(StoreUnavailable):
    """DynamoDB table does not exist."""

    pass


class AWSThrottlingError(StoreUnavailable):
    """DynamoDB throttling occurred."""

    pass


class AWSPermissionError(CatalogError):
    """AWS permission denied."""

    pass


class TableAlreadyExistsError(CatalogError):
    """DynamoDB table already exists."""

    pass
