"""
Utility functions for catalogue operations.
"""

import json
from datetime import date, datetime
from typing import Any

from .constants import DATE_FORMAT, DATE_PATTERN, KEY_SEPARATOR
from .exceptions import InvalidDateRange, InvalidKey


def format_key(prefix: str, identifier: str) -> str:
    """
    Format a key with its entity prefix.

    Args:
        prefix: Key prefix (e.g., 'CAR', 'METADATA')
        identifier: Entity identifier

    Returns:
        Formatted key (e.g., 'CAR#1f0c...')
    """
    return f"{prefix}{KEY_SEPARATOR}{identifier}"


def parse_key(full_key: str) -> tuple[str, str]:
    """
    Parse a formatted key into prefix and identifier.

    Args:
        full_key: Full key with prefix (e.g., 'CAR#1f0c...')

    Returns:
        Tuple of (prefix, identifier)
    """
    parts = full_key.split(KEY_SEPARATOR, 1)
    if len(parts) == 2:
        return parts[0], parts[1]
    return "", full_key


def validate_partition_key(pk: str) -> None:
    """
    Validate a partition (or index) key value.

    Raises:
        InvalidKey: If the value is empty
    """
    if not pk or not isinstance(pk, str):
        raise InvalidKey("Partition key cannot be empty")


def validate_key(pk: str, sk: str) -> None:
    """
    Validate a composite key before it is sent to the store.

    Raises:
        InvalidKey: If either part is empty
    """
    validate_partition_key(pk)
    if not sk or not isinstance(sk, str):
        raise InvalidKey("Sort key cannot be empty")


def parse_iso_date(value: str | date, label: str = "date") -> date:
    """
    Parse a calendar date exchanged as YYYY-MM-DD.

    Raises:
        InvalidDateRange: If the value does not parse
    """
    if isinstance(value, date):
        return value
    try:
        # strptime alone would accept unpadded months and days
        if len(value) != len(DATE_FORMAT):
            raise ValueError(value)
        return datetime.strptime(value, DATE_PATTERN).date()
    except (TypeError, ValueError):
        raise InvalidDateRange(f"Invalid {label} '{value}', expected {DATE_FORMAT}")


def output_json(data: Any) -> None:
    """Write one JSON document to stdout (dates as YYYY-MM-DD)."""
    print(json.dumps(data, default=_json_default))


def output_text(message: str) -> None:
    print(message)


def _json_default(value: Any) -> str:
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def error_json(error: str, solution: str, exit_code: int) -> str:
    """Format error as a JSON line."""
    return json.dumps({"error": error, "solution": solution, "exit_code": exit_code})


def error_text(error: str, solution: str) -> str:
    """Format error as human-readable text."""
    return f"Error: {error}\n\nSolution: {solution}"


_TABLE_NAME_CHARS = frozenset("-_.")


def validate_table_name(table_name: str) -> None:
    """
    Check a name against DynamoDB's table naming rules (3-255 of [A-Za-z0-9_.-]).

    Raises:
        ValueError: If table name is invalid
    """
    if not 3 <= len(table_name or "") <= 255:
        raise ValueError(f"Table name '{table_name}' must be 3 to 255 characters long")
    invalid = sorted({c for c in table_name if not (c.isalnum() or c in _TABLE_NAME_CHARS)})
    if invalid:
        raise ValueError(f"Table name '{table_name}' contains invalid characters: {''.join(invalid)}")
