"""
Options and error reporting shared by every catalogue command.
"""

import functools
from collections.abc import Callable
from typing import Any, NoReturn

import click

from ..config import ENV_ENDPOINT_URL, ENV_INDEX_STRATEGY, ENV_PROFILE, ENV_REGION, ENV_TABLE
from ..config import StoreSettings
from ..constants import DEFAULT_TABLE_NAME, INDEX_STRATEGY_GSI, INDEX_STRATEGY_SCAN
from ..exceptions import (
    AWSPermissionError,
    ConstraintViolation,
    InvalidDateRange,
    InvalidKey,
    NotFound,
    StoreUnavailable,
    TableNotFoundError,
)
from ..logging_config import setup_logging
from ..utils import error_json, error_text

_STORE_OPTIONS = [
    click.option(
        "--table",
        envvar=ENV_TABLE,
        default=DEFAULT_TABLE_NAME,
        show_default=True,
        help="DynamoDB table name",
    ),
    click.option("--region", envvar=ENV_REGION, help="AWS region"),
    click.option("--profile", envvar=ENV_PROFILE, help="AWS profile"),
    click.option(
        "--endpoint-url",
        envvar=ENV_ENDPOINT_URL,
        help="DynamoDB endpoint override (e.g. DynamoDB Local)",
    ),
    click.option(
        "--index-strategy",
        envvar=ENV_INDEX_STRATEGY,
        type=click.Choice([INDEX_STRATEGY_GSI, INDEX_STRATEGY_SCAN]),
        default=INDEX_STRATEGY_GSI,
        show_default=True,
        help="Reverse lookups through secondary indexes or table scans",
    ),
    click.option("--text", is_flag=True, help="Output as human-readable text"),
    click.option(
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v INFO, -vv DEBUG, -vvv DEBUG incl. AWS SDK)",
    ),
]


def store_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Add the store options to a command.

    The wrapped command receives ``settings: StoreSettings`` and ``text``
    instead of the individual options; logging is configured from -v.
    """

    @functools.wraps(func)
    def wrapper(
        *args: Any,
        table: str,
        region: str | None,
        profile: str | None,
        endpoint_url: str | None,
        index_strategy: str,
        verbose: int,
        **kwargs: Any,
    ) -> Any:
        setup_logging(verbose)
        try:
            settings = StoreSettings(
                table_name=table,
                region=region,
                profile=profile,
                endpoint_url=endpoint_url,
                index_strategy=index_strategy,
            )
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--table")
        return func(*args, settings=settings, **kwargs)

    for option in reversed(_STORE_OPTIONS):
        wrapper = option(wrapper)
    return wrapper


def _classify(error: Exception) -> tuple[int, str]:
    if isinstance(error, NotFound):
        return 1, "Check the identifier, or list existing items with the 'list' command"
    if isinstance(error, ConstraintViolation):
        return 1, "Create the referenced delegation, car or user first, or pick other dates"
    if isinstance(error, InvalidDateRange):
        return 2, "Use YYYY-MM-DD dates with start on or before end"
    if isinstance(error, (InvalidKey, ValueError, TypeError)):
        return 2, "Check the identifier and JSON attributes"
    if isinstance(error, TableNotFoundError):
        return 3, "Create the table with 'rental-catalog-tool create-table'"
    if isinstance(error, AWSPermissionError):
        return 3, "Check AWS credentials and permissions"
    if isinstance(error, StoreUnavailable):
        return 3, "DynamoDB is unavailable; retry later or check --endpoint-url"
    return 3, "Check table exists and AWS credentials"


def fail(ctx: click.Context, error: Exception, text: bool) -> NoReturn:
    """Report an error on stderr and exit with its code (1 not found, 2 input, 3 AWS)."""
    exit_code, solution = _classify(error)
    if text:
        click.echo(error_text(str(error), solution), err=True)
    else:
        click.echo(error_json(str(error), solution, exit_code), err=True)
    ctx.exit(exit_code)
